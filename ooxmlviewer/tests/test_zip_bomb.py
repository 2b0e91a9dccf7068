import io
import zipfile

import pytest

from ooxmlviewer.exceptions import ArchiveOpenError, ZipBombError
from ooxmlviewer.inspector.util.zip_bomb import ZipBombLimits, open_zipfile


def _make_zip_bytesio(files: dict[str, bytes]) -> io.BytesIO:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    buffer.seek(0)
    return buffer


def _open_with(buffer: io.BytesIO, limits: ZipBombLimits) -> None:
    with open_zipfile(buffer, limits=limits, source="test"):
        pass


def test_zip_bomb_detection_can_use_low_thresholds__compression_ratio() -> None:
    buffer = _make_zip_bytesio({"word/document.xml": b"A" * 10_000})

    with pytest.raises(
        ZipBombError, match=r"Part word/document.xml compression ratio too high"
    ):
        _open_with(
            buffer,
            ZipBombLimits(
                max_entry_compression_ratio=10.0,
                max_total_compression_ratio=10.0,
            ),
        )

    _open_with(
        buffer,
        ZipBombLimits(
            max_entry_compression_ratio=10_000.0,
            max_total_compression_ratio=10_000.0,
        ),
    )


def test_zip_bomb_detection_total_compression_ratio() -> None:
    buffer = _make_zip_bytesio({"a.xml": b"A" * 10_000, "b.xml": b"B" * 10_000})

    with pytest.raises(ZipBombError, match=r"Archive compression ratio too high"):
        _open_with(
            buffer,
            ZipBombLimits(
                max_entry_compression_ratio=10_000.0,
                max_total_compression_ratio=10.0,
            ),
        )


def test_zip_bomb_detection_can_use_low_thresholds__entry_count() -> None:
    buffer = _make_zip_bytesio(
        {
            "a.txt": b"a",
            "b.txt": b"b",
            "c.txt": b"c",
        }
    )

    with pytest.raises(ZipBombError, match=r"too many parts \(3 > 2\) \[test\]"):
        _open_with(buffer, ZipBombLimits(max_entries=2))


def test_zip_bomb_detection_single_part_size() -> None:
    buffer = _make_zip_bytesio({"ppt/media/video.mp4": b"\x00" * 2048})

    with pytest.raises(
        ZipBombError, match=r"Part ppt/media/video.mp4 expands to 2048 bytes"
    ):
        _open_with(
            buffer,
            ZipBombLimits(
                max_single_uncompressed_bytes=1024,
                max_entry_compression_ratio=10_000.0,
                max_total_compression_ratio=10_000.0,
            ),
        )


def test_zip_bomb_detection_total_size() -> None:
    buffer = _make_zip_bytesio({"a.bin": bytes(range(256)) * 4, "b.bin": bytes(1024)})

    with pytest.raises(ZipBombError, match=r"Parts expand to 2048 bytes in total"):
        _open_with(
            buffer,
            ZipBombLimits(
                max_total_uncompressed_bytes=1500,
                max_entry_compression_ratio=10_000.0,
                max_total_compression_ratio=10_000.0,
            ),
        )


def test_directories_are_not_counted_for_size() -> None:
    buffer = _make_zip_bytesio({"word/": b"", "ppt/": b""})

    _open_with(buffer, ZipBombLimits(max_single_uncompressed_bytes=0))


def test_open_zipfile_reports_reader_message() -> None:
    with pytest.raises(ArchiveOpenError, match="File is not a zip file"):
        open_zipfile(io.BytesIO(b"definitely not a zip"))


def test_open_zipfile_without_limits_skips_validation() -> None:
    buffer = _make_zip_bytesio({"a.txt": b"A" * 10_000})

    with open_zipfile(buffer) as zf:
        assert zf.namelist() == ["a.txt"]
