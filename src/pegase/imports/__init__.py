"""Import history recording — file type detection, size formatting."""

from pegase.imports.recorder import (
    detect_file_type,
    format_file_size,
    generate_controls,
    record_completed_import,
)

__all__ = [
    "detect_file_type",
    "format_file_size",
    "generate_controls",
    "record_completed_import",
]
