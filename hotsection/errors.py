"""Exceptions raised when refreshing a watched section file."""
from pathlib import Path
from typing import Optional


class HotloadError(Exception):
    """Base class for all refresh failures."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class SectionFileNotFound(HotloadError, FileNotFoundError):
    """Raised when the watched file does not exist at check time."""

    def __init__(self, path: Path):
        super().__init__(f"File {str(path)!r} does not exist", path)


class MetadataError(HotloadError, OSError):
    """Raised when the modification time of the watched file cannot be read."""

    def __init__(self, path: Path, orig_exc: Optional[BaseException] = None):
        self.orig_exc = orig_exc
        message = f"Couldn't get metadata for {str(path)!r}"
        if orig_exc is not None:
            message += f": {orig_exc}"
        super().__init__(message, path)


class SectionReadError(HotloadError, OSError):
    """Raised when the watched file cannot be opened, read or decoded."""

    def __init__(self, path: Path, orig_exc: Optional[BaseException] = None):
        self.orig_exc = orig_exc
        message = f"Couldn't read {str(path)!r}"
        if orig_exc is not None:
            message += f": {orig_exc}"
        super().__init__(message, path)


class StructureError(HotloadError, ValueError):
    """Raised when a data line appears before any section header."""

    def __init__(self, path: Path, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"{str(path)!r} line {line_number}: cannot have values outside a section",
            path,
        )
