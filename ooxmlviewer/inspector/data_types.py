import typing
from dataclasses import dataclass, field


@dataclass
class ArchiveEntry:
    """One record of the ZIP central directory."""

    path: str
    is_dir: bool = False
    # uncompressed length, 0 for directories
    size: int = 0
    # decoded text, only for files with a textual extension
    content: str | None = None

    @property
    def name(self) -> str:
        """Last segment of the path."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def is_textual(self) -> bool:
        return self.content is not None

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "path": self.path,
            "is_dir": self.is_dir,
            "size": self.size,
            "content": self.content,
        }


@dataclass
class ArchiveSummary:
    """All entries of an archive in central directory order."""

    entries: list[ArchiveEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> typing.Iterator[ArchiveEntry]:
        return iter(self.entries)

    def find(self, path: str) -> ArchiveEntry | None:
        """Returns the first entry stored under ``path`` or None."""
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None

    def files(self) -> list[ArchiveEntry]:
        return [entry for entry in self.entries if not entry.is_dir]

    def directories(self) -> list[ArchiveEntry]:
        return [entry for entry in self.entries if entry.is_dir]

    def to_dict(self) -> dict[str, typing.Any]:
        return {"entries": [entry.to_dict() for entry in self.entries]}

    def to_tagged_dict(self) -> dict:
        """JSON-safe dict with "_type" markers, readable by deserialize_summary."""
        from ooxmlviewer.inspector.serialization import serialize_summary

        return serialize_summary(self)
