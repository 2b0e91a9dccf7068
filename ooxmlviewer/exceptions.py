class InspectionError(Exception):
    """Raised when an archive cannot be inspected."""

    def __init__(self, message: str, *, cause: Exception = None):
        self.message = message
        super().__init__(message)
        self.__cause__ = cause  # Optional chaining for debugging


class ArchiveOpenError(InspectionError):
    """Raised when the buffer is not an openable ZIP container."""


class ZipBombError(ArchiveOpenError):
    """Raised when a ZIP container exceeds the configured safety limits."""


class EntryReadError(InspectionError):
    """Raised when the directory record of a single entry cannot be read."""

    def __init__(
        self,
        message: str,
        *,
        index: int,
        entry_name: str | None = None,
        cause: Exception = None,
    ):
        self.index = index
        self.entry_name = entry_name
        super().__init__(message, cause=cause)


class DecompressionError(InspectionError):
    """Raised when the payload of a single entry cannot be decompressed."""

    def __init__(self, message: str, *, entry_name: str, cause: Exception = None):
        self.entry_name = entry_name
        super().__init__(message, cause=cause)
