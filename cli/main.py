"""CLI entry point — Typer app for pegase commands.

Usage:
    pegase dashboard
    pegase adjustments add --item "Owner car" --amount -12000 --description "Private use"
    pegase adjustments accept 3
    pegase files record FEC_2024.txt
    pegase settings export ./pegase-settings.json
    pegase status
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pegase import __version__
from pegase.config import Settings, load_settings
from pegase.store.domain_store import DomainStore

app = typer.Typer(
    name="pegase",
    help="Pegase due diligence — KPIs, QoE adjustments, import history.",
    no_args_is_help=True,
)
adjustments_app = typer.Typer(help="Quality of Earnings adjustments.", no_args_is_help=True)
files_app = typer.Typer(help="Imported accounting files.", no_args_is_help=True)
settings_app = typer.Typer(help="User, system and sector settings.", no_args_is_help=True)
app.add_typer(adjustments_app, name="adjustments")
app.add_typer(files_app, name="files")
app.add_typer(settings_app, name="settings")

console = Console()
err_console = Console(stderr=True)

_ID_ARG = typer.Argument(..., help="Adjustment id")
_FILE_PATH = typer.Argument(..., help="Path (or bare name) of the imported file")
_SETTINGS_PATH = typer.Argument(..., help="Settings JSON file")


# ---------------------------------------------------------------------------
# Shared plumbing
# ---------------------------------------------------------------------------


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    settings = load_settings()
    logging.basicConfig(
        level="DEBUG" if verbose else settings.logging.level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else load_settings()


@contextmanager
def _workspace(ctx: typer.Context, save: bool = False) -> Iterator[DomainStore]:
    """Open the workspace, optionally persist on success, always dispose."""
    from pegase.workspace import open_store

    store = open_store(_settings(ctx))
    try:
        yield store
        if save and not store.persist():
            err_console.print("[yellow]Warning:[/] changes could not be saved to storage")
    finally:
        store.dispose()


def _fmt_amount(value: float) -> str:
    return f"{value:,.0f}"


def _fmt_pct(value: float | None) -> str:
    return "" if value is None else f"{value:+.1f}%"


def _fmt_value(value: float | None) -> str:
    if value is None:
        return ""
    return _fmt_amount(value) if abs(value) >= 100 else f"{value:g}"


# ---------------------------------------------------------------------------
# Workspace commands
# ---------------------------------------------------------------------------


@app.command()
def dashboard(ctx: typer.Context) -> None:
    """Show headline KPIs."""
    from pegase.analysis.kpis import dashboard_summary

    with _workspace(ctx) as store:
        lines = dashboard_summary(store)

    table = Table(title="Dashboard")
    table.add_column("KPI", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Previous", justify="right")
    table.add_column("Change", justify="right")

    for line in lines:
        table.add_row(
            line.label,
            _fmt_value(line.value),
            _fmt_value(line.previous),
            _fmt_pct(line.change_pct),
        )

    console.print(table)


@app.command()
def save(ctx: typer.Context) -> None:
    """Persist the workspace now."""
    with _workspace(ctx) as store:
        ok = store.persist()

    if ok:
        console.print(f"[bold green]Saved[/] at {store.last_saved_at}")
    else:
        err_console.print("[yellow]Warning:[/] workspace could not be fully saved")


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Clear persisted data and restore the built-in defaults."""
    if not yes:
        typer.confirm("Reset all workspace data?", abort=True)

    with _workspace(ctx) as store:
        store.reset()

    console.print("[bold green]Workspace reset to defaults[/]")


@app.command()
def status(ctx: typer.Context) -> None:
    """Show storage backend, location and last save."""
    from pegase.storage.factory import available_storages
    from pegase.workspace import build_codec, open_store

    settings = _settings(ctx)
    codec = build_codec(settings)

    with open_store(settings, restore=False) as store:
        report = store.restore()
        n_adjustments = len(store.adjustments)
        n_files = len(store.imported_files)
        last_saved = store.last_saved_at

    console.print(f"\n[bold green]pegase[/] v{__version__}\n")

    table = Table(title="Workspace")
    table.add_column("Item", style="cyan")
    table.add_column("Value")

    table.add_row("Storage backends", ", ".join(available_storages()))
    table.add_row("Storage", codec.storage.describe())
    table.add_row("Auto-save interval", f"{settings.autosave.interval_seconds:g}s")
    table.add_row("Last saved", last_saved or "never")
    table.add_row("Financial snapshot", report.financial_snapshot.value)
    table.add_row("Adjustments", f"{n_adjustments} ({report.adjustments.value})")
    table.add_row("Imported files", f"{n_files} ({report.imported_files.value})")
    if report.dropped_records:
        table.add_row("Dropped records", str(report.dropped_records))

    console.print(table)


# ---------------------------------------------------------------------------
# Adjustments
# ---------------------------------------------------------------------------


@adjustments_app.command("list")
def list_adjustments(ctx: typer.Context) -> None:
    """List QoE adjustments."""
    with _workspace(ctx) as store:
        adjustments = store.adjustments

    table = Table(title="QoE Adjustments")
    table.add_column("ID", style="cyan")
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Confidence", justify="right")
    table.add_column("Status")

    for a in adjustments:
        table.add_row(
            a.id, a.item, _fmt_amount(a.amount), a.type.value, a.category.value,
            f"{a.confidence:g}%", a.status.value,
        )

    console.print(table)


@adjustments_app.command("add")
def add_adjustment(
    ctx: typer.Context,
    item: str = typer.Option(..., "--item", "-i", help="Adjustment label"),
    amount: float = typer.Option(..., "--amount", "-a", help="Amount (negative to remove)"),
    description: str = typer.Option(..., "--description", "-d", help="Description"),
    category: str = typer.Option(
        "Normalization", "--category", "-c",
        help="Non-recurring, Owner-benefit or Normalization",
    ),
    confidence: float = typer.Option(85.0, "--confidence", help="Confidence 0-100"),
    adj_type: str | None = typer.Option(
        None, "--type", "-t", help="add or remove (default: from the amount sign)",
    ),
) -> None:
    """Record a new adjustment (status: pending)."""
    from pegase.domain.schemas import AdjustmentCategory, AdjustmentType

    try:
        cat = AdjustmentCategory(category)
        kind = AdjustmentType(adj_type) if adj_type else (
            AdjustmentType.ADD if amount > 0 else AdjustmentType.REMOVE
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    with _workspace(ctx, save=True) as store:
        adjustment = store.add_adjustment(
            item=item,
            amount=amount,
            type=kind,
            category=cat,
            confidence=confidence,
            description=description,
        )

    console.print(f"[bold green]Added:[/] {adjustment.item} ({adjustment.id})")


def _set_status(ctx: typer.Context, adjustment_id: str, accept: bool) -> None:
    with _workspace(ctx, save=True) as store:
        if accept:
            updated = store.accept_adjustment(adjustment_id)
        else:
            updated = store.reject_adjustment(adjustment_id)

    if updated is None:
        err_console.print(f"[yellow]No adjustment with id {adjustment_id}[/]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]{updated.item}:[/] {updated.status.value}")


@adjustments_app.command("accept")
def accept_adjustment(ctx: typer.Context, adjustment_id: Annotated[str, _ID_ARG]) -> None:
    """Accept an adjustment."""
    _set_status(ctx, adjustment_id, accept=True)


@adjustments_app.command("reject")
def reject_adjustment(ctx: typer.Context, adjustment_id: Annotated[str, _ID_ARG]) -> None:
    """Reject an adjustment."""
    _set_status(ctx, adjustment_id, accept=False)


@adjustments_app.command("edit")
def edit_adjustment(
    ctx: typer.Context,
    adjustment_id: Annotated[str, _ID_ARG],
    item: str | None = typer.Option(None, "--item", "-i"),
    amount: float | None = typer.Option(None, "--amount", "-a"),
    description: str | None = typer.Option(None, "--description", "-d"),
    category: str | None = typer.Option(None, "--category", "-c"),
    confidence: float | None = typer.Option(None, "--confidence"),
    adj_type: str | None = typer.Option(None, "--type", "-t"),
    adj_status: str | None = typer.Option(None, "--status", "-s"),
) -> None:
    """Edit fields of an existing adjustment."""
    updates = {
        "item": item,
        "amount": amount,
        "description": description,
        "category": category,
        "confidence": confidence,
        "type": adj_type,
        "status": adj_status,
    }
    updates = {k: v for k, v in updates.items() if v is not None}
    if not updates:
        raise typer.BadParameter("Nothing to update")

    with _workspace(ctx, save=True) as store:
        try:
            updated = store.update_adjustment(adjustment_id, **updates)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    if updated is None:
        err_console.print(f"[yellow]No adjustment with id {adjustment_id}[/]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]Updated:[/] {updated.item} ({updated.id})")


@adjustments_app.command("remove")
def remove_adjustment(ctx: typer.Context, adjustment_id: Annotated[str, _ID_ARG]) -> None:
    """Delete an adjustment."""
    with _workspace(ctx, save=True) as store:
        removed = store.remove_adjustment(adjustment_id)

    if not removed:
        err_console.print(f"[yellow]No adjustment with id {adjustment_id}[/]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]Removed:[/] {adjustment_id}")


# ---------------------------------------------------------------------------
# Imported files
# ---------------------------------------------------------------------------


@files_app.command("list")
def list_files(ctx: typer.Context) -> None:
    """List the import history."""
    with _workspace(ctx) as store:
        files = store.imported_files

    table = Table(title="Imported Files")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Status")
    table.add_column("Imported")
    table.add_column("Lines (valid/total)", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Errors", justify="right")

    for f in files:
        c = f.controls
        table.add_row(
            f.id, f.name, f.type.value, f.size, f.status.value, f.date_imported,
            f"{c.valid_lines:g}/{c.total_lines:g}" if c else "",
            f"{c.warnings:g}" if c else "",
            f"{c.errors:g}" if c else "",
        )

    console.print(table)


@files_app.command("record")
def record_file(
    ctx: typer.Context,
    path: Annotated[Path, _FILE_PATH],
    size: int | None = typer.Option(None, "--size", help="Size in bytes (default: from disk)"),
) -> None:
    """Record a completed import of an accounting file."""
    from pegase.imports.recorder import record_completed_import

    with _workspace(ctx, save=True) as store:
        imported = record_completed_import(store, path, size_bytes=size)

    console.print(f"\n[bold green]Imported:[/] {imported.name}")
    console.print(f"  Type: {imported.type.value}")
    console.print(f"  Size: {imported.size}")
    if imported.controls:
        c = imported.controls
        console.print(f"  Lines: {c.valid_lines:g}/{c.total_lines:g} valid")
        console.print(f"  Warnings: {c.warnings:g}  Errors: {c.errors:g}")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@settings_app.command("show")
def show_settings(ctx: typer.Context) -> None:
    """Show the current settings."""
    from pegase.workspace import open_settings_store

    bundle = open_settings_store(_settings(ctx)).load()

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in bundle.user.to_dict().items():
        table.add_row(f"user.{key}", str(value))
    for key, value in bundle.system.to_dict().items():
        table.add_row(f"system.{key}", str(value))
    for sector in bundle.sectors:
        state = "enabled" if sector.enabled else "disabled"
        table.add_row(f"sector.{sector.id}", f"{sector.name} ({state})")

    console.print(table)


@settings_app.command("export")
def export_settings(ctx: typer.Context, path: Annotated[Path, _SETTINGS_PATH]) -> None:
    """Export settings to a JSON file."""
    from pegase.workspace import open_settings_store

    store = open_settings_store(_settings(ctx))
    written = store.export_to_file(store.load(), path)
    console.print(f"[bold green]Exported:[/] {written}")


@settings_app.command("import")
def import_settings(ctx: typer.Context, path: Annotated[Path, _SETTINGS_PATH]) -> None:
    """Import settings from a previously exported JSON file."""
    from pegase.errors import SettingsImportError
    from pegase.workspace import open_settings_store

    store = open_settings_store(_settings(ctx))
    try:
        bundle = store.import_from_file(path, base=store.load())
    except SettingsImportError as exc:
        err_console.print(f"[red]Error importing settings:[/] {exc}")
        raise typer.Exit(code=1) from exc

    if not store.save(bundle):
        err_console.print("[yellow]Warning:[/] settings could not be fully saved")
    console.print("[bold green]Settings imported[/]")


@settings_app.command("reset")
def reset_settings(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Restore the default settings."""
    from pegase.workspace import open_settings_store

    if not yes:
        typer.confirm("Reset all settings?", abort=True)

    open_settings_store(_settings(ctx)).reset()
    console.print("[bold green]Settings reset to defaults[/]")


if __name__ == "__main__":
    app()
