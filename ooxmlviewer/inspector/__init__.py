from ooxmlviewer.inspector.archive_inspector import (
    TEXTUAL_EXTENSIONS,
    inspect_archive,
    is_textual_entry,
)
from ooxmlviewer.inspector.data_types import ArchiveEntry, ArchiveSummary

__all__ = [
    "TEXTUAL_EXTENSIONS",
    "ArchiveEntry",
    "ArchiveSummary",
    "inspect_archive",
    "is_textual_entry",
]
