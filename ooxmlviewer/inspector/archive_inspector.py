"""
Archive Inspector
=================

Walks the central directory of an OOXML container (.docx, .pptx, .xlsx or
any other ZIP archive) and summarises every entry: its path, whether it is a
directory, its uncompressed size and, for XML-like parts, the decoded text.

Behaviour
---------
- Entries are reported in central directory order. Nothing is sorted,
  deduplicated or synthesised; duplicate paths show up once per record.
- Directory entries lose exactly one trailing separator and report size 0.
- File entries are decompressed fully into memory. Parts whose extension
  (after the last dot, case-insensitive) is ``xml``, ``rels`` or ``txt`` get
  their bytes decoded as UTF-8, with U+FFFD substituted for invalid
  sequences. Decoding never fails an inspection.
- The first unreadable record or payload aborts the whole call. There is no
  partial summary.

Example
-------
    >>> from ooxmlviewer.inspector.archive_inspector import inspect_archive
    >>> with open("report.docx", "rb") as f:
    ...     summary = inspect_archive(f.read())
    >>> summary.find("word/document.xml").size
    4213
"""

import io
import logging
import time
import typing
import zipfile

from ooxmlviewer.exceptions import DecompressionError, EntryReadError
from ooxmlviewer.inspector.data_types import ArchiveEntry, ArchiveSummary
from ooxmlviewer.inspector.util.zip_bomb import (
    ZipBombLimits,
    describe_error,
    is_directory,
    open_zipfile,
)

logger = logging.getLogger(__name__)

TEXTUAL_EXTENSIONS: frozenset[str] = frozenset({"xml", "rels", "txt"})

DIRECTORY_SEPARATORS = ("/", "\\")

TEXT_ENCODING = "utf-8"

BytesLike = typing.Union[bytes, bytearray, memoryview, typing.BinaryIO]


def is_textual_entry(path: str) -> bool:
    """Checks if the extension of ``path`` marks a part with text content"""
    if "." not in path:
        return False
    extension = path.rsplit(".", 1)[-1]
    return extension.lower() in TEXTUAL_EXTENSIONS


def _strip_separator(name: str) -> str:
    if name.endswith(DIRECTORY_SEPARATORS):
        return name[:-1]
    return name


def _to_file_like(data: BytesLike) -> io.BytesIO:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(data))
    if hasattr(data, "read"):
        return io.BytesIO(data.read())
    raise TypeError(
        f"Expected a bytes-like object or binary stream, got {type(data).__name__}"
    )


def _read_entry(
    zf: zipfile.ZipFile, index: int, info: zipfile.ZipInfo
) -> ArchiveEntry:
    name = info.filename

    try:
        stream = zf.open(info)
    except Exception as exc:
        raise EntryReadError(
            describe_error(exc), index=index, entry_name=name, cause=exc
        ) from exc

    with stream:
        if is_directory(info):
            return ArchiveEntry(path=_strip_separator(name), is_dir=True, size=0)

        try:
            payload = stream.read()
        except Exception as exc:
            raise DecompressionError(
                describe_error(exc), entry_name=name, cause=exc
            ) from exc

    content = None
    if is_textual_entry(name):
        content = payload.decode(TEXT_ENCODING, errors="replace")

    return ArchiveEntry(path=name, is_dir=False, size=len(payload), content=content)


def inspect_archive(
    data: BytesLike, *, limits: ZipBombLimits | None = None
) -> ArchiveSummary:
    """
    Inspect an OOXML container held in memory.

    Args:
        data: The complete archive as bytes, or a binary stream that is read
            to its end before inspection starts.
        limits: Optional ZIP-bomb limits. When omitted, every file entry is
            decompressed regardless of its size.

    Returns:
        ArchiveSummary with one ArchiveEntry per central directory record,
        in central directory order.

    Raises:
        ArchiveOpenError: The buffer is not an openable ZIP container.
        ZipBombError: The container exceeds the given ``limits``.
        EntryReadError: A record's local header cannot be read.
        DecompressionError: A payload cannot be decompressed.
    """
    start_time = time.perf_counter()
    file_like = _to_file_like(data)

    with open_zipfile(file_like, limits=limits, source="inspect_archive") as zf:
        infos = zf.infolist()
        logger.debug(f"Inspecting ZIP container with {len(infos)} entries")

        entries = [_read_entry(zf, index, info) for index, info in enumerate(infos)]

    logger.debug(
        f"Inspected {len(entries)} entries in {time.perf_counter() - start_time:.3f}s"
    )
    return ArchiveSummary(entries=entries)
