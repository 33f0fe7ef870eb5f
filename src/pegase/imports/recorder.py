"""Record finished file imports in the workspace history.

Files are never opened: the type comes from the filename, the size is
formatted for display and the line controls are generated, exactly as the
import screen has always mocked them.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

from pegase.domain.schemas import FileControls, FileStatus, FileType, ImportedFile
from pegase.store.domain_store import DomainStore

logger = logging.getLogger(__name__)

_SIZE_UNITS = ["B", "KB", "MB", "GB"]

# (substring, type) checked in order against the lower-cased filename.
_TYPE_RULES: list[tuple[str, FileType]] = [
    ("fec", FileType.FEC),
    ("balance", FileType.BALANCE),
    ("gl", FileType.GENERAL_LEDGER),
    ("livre", FileType.GENERAL_LEDGER),
]


def detect_file_type(filename: str) -> FileType:
    """Guess the accounting file family from its name."""
    lowered = filename.lower()
    for needle, file_type in _TYPE_RULES:
        if needle in lowered:
            return file_type
    return FileType.AUXILIARY


def format_file_size(num_bytes: int) -> str:
    """Human-readable size, 1024-based, at most two decimals (``2.5 MB``)."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


def generate_controls(rng: random.Random | None = None) -> FileControls:
    """Mocked line controls for a processed file."""
    rng = rng or random.Random()
    return FileControls(
        total_lines=rng.randrange(5000, 15000),
        valid_lines=rng.randrange(4500, 14000),
        warnings=rng.randrange(0, 50),
        errors=rng.randrange(0, 10),
    )


def record_completed_import(
    store: DomainStore,
    path: str | Path,
    size_bytes: int | None = None,
    rng: random.Random | None = None,
) -> ImportedFile:
    """Add a completed import for ``path`` to the store.

    Args:
        store: Workspace to record into.
        path: File path or bare filename.
        size_bytes: Size to display; read from the filesystem when omitted
            and the path exists, else 0.
        rng: Random source for the generated controls.

    Returns:
        The new ``ImportedFile``.
    """
    p = Path(path)
    if size_bytes is None:
        size_bytes = p.stat().st_size if p.is_file() else 0

    imported = store.add_imported_file(
        name=p.name,
        size=format_file_size(size_bytes),
        type=detect_file_type(p.name),
        status=FileStatus.COMPLETED,
        progress=100,
        controls=generate_controls(rng),
    )
    logger.info("Recorded import of %s as %s", imported.name, imported.type)
    return imported
