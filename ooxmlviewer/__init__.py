"""
ooxml-viewer: Inspect the parts of Office Open XML containers.

A Python library for listing the parts of .docx, .pptx and .xlsx files (or
any other ZIP container) together with their sizes and, for XML-like parts,
their decoded text.
"""

import faulthandler
import io
import logging
import sys
from functools import lru_cache
from pathlib import Path

from ooxmlviewer.exceptions import (
    ArchiveOpenError,
    DecompressionError,
    EntryReadError,
    InspectionError,
    ZipBombError,
)
from ooxmlviewer.inspector.archive_inspector import (
    TEXTUAL_EXTENSIONS,
    BytesLike,
    inspect_archive,
    is_textual_entry,
)
from ooxmlviewer.inspector.data_types import ArchiveEntry, ArchiveSummary
from ooxmlviewer.inspector.serialization import summary_to_host_value
from ooxmlviewer.inspector.util.zip_bomb import DEFAULT_ZIP_BOMB_LIMITS, ZipBombLimits
from ooxmlviewer.tree import TreeNode, build_tree, format_size
from ooxmlviewer.xml_format import format_xml, preview_part

__version__ = "0.1.0.dev3"

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@lru_cache(maxsize=1)
def initialize() -> None:
    """
    Hook diagnostic output for the current process.

    Dumps Python tracebacks on fatal errors and routes the ``ooxmlviewer``
    logger to stderr. Calling it again is a no-op, and inspection results do
    not depend on whether it was called.
    """
    if not faulthandler.is_enabled() and sys.__stderr__ is not None:
        faulthandler.enable(file=sys.__stderr__)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.debug("Diagnostic output initialised")


def inspect_ooxml(data: BytesLike) -> dict:
    """
    Inspect an OOXML container and return its summary as a plain record.

    Args:
        data: The raw archive bytes.

    Returns:
        ``{"entries": [...]}`` with one ``path``/``is_dir``/``size``/``content``
        record per central directory entry, in archive order.

    Raises:
        InspectionError: The archive cannot be read. The message is the
            ZIP reader's own diagnostic.

    Example:
        >>> import ooxmlviewer
        >>> with open("slides.pptx", "rb") as f:
        ...     summary = ooxmlviewer.inspect_ooxml(f.read())
        >>> [entry["path"] for entry in summary["entries"]][:2]
        ['[Content_Types].xml', '_rels/.rels']
    """
    return summary_to_host_value(inspect_archive(data))


def inspect_file(
    path: str | Path, *, limits: ZipBombLimits | None = None
) -> ArchiveSummary:
    """
    Read a file from disk and inspect it.

    Raises:
        FileNotFoundError: If the file does not exist.
        InspectionError: If the file is not a readable ZIP container.
    """
    path = Path(path)
    logger.debug(f"Reading [{path}] for inspection")
    with open(path, "rb") as f:
        return inspect_archive(io.BytesIO(f.read()), limits=limits)


__all__ = [
    # Version
    "__version__",
    # Main functions
    "initialize",
    "inspect_ooxml",
    "inspect_archive",
    "inspect_file",
    "is_textual_entry",
    "TEXTUAL_EXTENSIONS",
    # Data types
    "ArchiveEntry",
    "ArchiveSummary",
    "ZipBombLimits",
    "DEFAULT_ZIP_BOMB_LIMITS",
    # Presentation helpers
    "TreeNode",
    "build_tree",
    "format_size",
    "format_xml",
    "preview_part",
    # Errors
    "InspectionError",
    "ArchiveOpenError",
    "EntryReadError",
    "DecompressionError",
    "ZipBombError",
]
