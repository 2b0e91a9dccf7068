from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass

from ooxmlviewer.exceptions import ArchiveOpenError, ZipBombError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZipBombLimits:
    """
    Heuristics for rejecting probable ZIP bombs.

    Inspection reads every file entry fully into memory, so these limits are
    opt-in. The defaults stay generous enough for large decks with embedded
    media while still catching extreme bombs.
    """

    max_entries: int = 50_000
    max_total_uncompressed_bytes: int = 4 * 1024 * 1024 * 1024  # 4 GiB
    max_single_uncompressed_bytes: int = 1 * 1024 * 1024 * 1024  # 1 GiB
    max_total_compression_ratio: float = 200.0
    max_entry_compression_ratio: float = 500.0


DEFAULT_ZIP_BOMB_LIMITS = ZipBombLimits()


def is_directory(info: zipfile.ZipInfo) -> bool:
    # zipfile only recognises "/", archives written on Windows may use "\\"
    return info.is_dir() or info.filename.endswith("\\")


def describe_error(exc: Exception) -> str:
    # some reader errors (EOFError from a truncated stream) carry no text
    return str(exc) or type(exc).__name__


def _check_part(info: zipfile.ZipInfo, limits: ZipBombLimits) -> str | None:
    """Returns why a single part looks like a bomb, or None."""
    name = info.filename
    if info.file_size > limits.max_single_uncompressed_bytes:
        return (
            f"Part {name} expands to {info.file_size} bytes "
            f"(limit {limits.max_single_uncompressed_bytes})"
        )
    if info.file_size == 0:
        return None
    if info.compress_size <= 0:
        return f"Part {name} claims {info.file_size} bytes from an empty stream"
    ratio = info.file_size / info.compress_size
    if ratio > limits.max_entry_compression_ratio:
        return (
            f"Part {name} compression ratio too high "
            f"({ratio:.1f} > {limits.max_entry_compression_ratio})"
        )
    return None


def validate_zipfile(
    zf: zipfile.ZipFile,
    *,
    limits: ZipBombLimits = DEFAULT_ZIP_BOMB_LIMITS,
    source: str | None = None,
) -> None:
    """
    Reject a container whose central directory promises more than ``limits``.

    Only the declared sizes are consulted, no part is decompressed. Directory
    records carry no payload and are skipped.
    """
    suffix = f" [{source}]" if source else ""
    infos = zf.infolist()

    if len(infos) > limits.max_entries:
        raise ZipBombError(
            f"Archive lists too many parts ({len(infos)} > {limits.max_entries})"
            + suffix
        )

    parts = [info for info in infos if not is_directory(info)]
    for info in parts:
        problem = _check_part(info, limits)
        if problem:
            raise ZipBombError(problem + suffix)

    total_uncompressed = sum(info.file_size for info in parts)
    total_compressed = sum(info.compress_size for info in parts)

    if total_uncompressed > limits.max_total_uncompressed_bytes:
        raise ZipBombError(
            f"Parts expand to {total_uncompressed} bytes in total "
            f"(limit {limits.max_total_uncompressed_bytes})" + suffix
        )
    if total_uncompressed and total_compressed:
        ratio = total_uncompressed / total_compressed
        if ratio > limits.max_total_compression_ratio:
            raise ZipBombError(
                f"Archive compression ratio too high "
                f"({ratio:.1f} > {limits.max_total_compression_ratio})" + suffix
            )


def open_zipfile(
    file_like: io.BytesIO,
    *,
    limits: ZipBombLimits | None = None,
    source: str | None = None,
) -> zipfile.ZipFile:
    """
    Open a ZIP container, optionally validating it for ZIP-bomb indicators.

    Any failure of the reader, including unsupported format versions, becomes
    an ArchiveOpenError carrying the reader's own diagnostic.
    Caller owns the returned ZipFile and must close it.
    """
    file_like.seek(0)
    try:
        zf = zipfile.ZipFile(file_like, "r")
    except Exception as exc:
        raise ArchiveOpenError(describe_error(exc), cause=exc) from exc

    if limits is None:
        return zf

    try:
        validate_zipfile(zf, limits=limits, source=source)
    except Exception:
        zf.close()
        raise
    logger.debug(f"Archive within ZIP-bomb limits ({len(zf.infolist())} entries)")
    return zf
