"""Hot-reloadable file of named sections."""
import os
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Generic, Iterator, List, Mapping, Optional, Tuple, TypeVar, Union

from .errors import MetadataError, SectionFileNotFound, SectionReadError, StructureError


RowType = TypeVar("RowType")

# (section name, raw line, current record) -> replacement record or None
LineParser = Callable[[str, str, RowType], Optional[RowType]]


class HotloadableSection(Generic[RowType]):
    """Watch a sectioned text file and re-parse it when its mtime advances.

    Lines starting with ``delimiter`` open a new section named by the rest of
    the line. Every other non-empty line is handed to ``parse_line`` together
    with the section name and the record accumulated so far for that section.
    The callback can edit the record in place, or return a replacement value
    for immutable records.
    """

    def __init__(
        self,
        path: Union[str, os.PathLike],
        delimiter: str,
        parse_line: LineParser,
        default: Callable[[], RowType] = dict,
    ):
        if not delimiter:
            raise ValueError("Section delimiter must be a non-empty string")
        self._path = Path(path)
        self._delimiter = delimiter
        self._parse_line = parse_line
        self._default = default
        self._last_loaded_ns = 0
        self._contents: Dict[str, RowType] = {}
        self._view: Mapping[str, RowType] = MappingProxyType(self._contents)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @property
    def last_loaded_ns(self) -> int:
        """Modification time (ns) of the last successfully loaded version."""
        return self._last_loaded_ns

    @property
    def contents(self) -> Mapping[str, RowType]:
        """Read-only view of the last successful load."""
        return self._view

    def refresh(self) -> bool:
        """Reload the file if it changed since the last successful load.

        Returns:
            True when the file was re-parsed, False when it was up to date.

        Raises:
            SectionFileNotFound: the file does not exist.
            MetadataError: the modification time cannot be read.
            SectionReadError: the file cannot be opened or decoded.
            StructureError: a data line appears outside any section.
        """
        try:
            mtime_ns = os.stat(self._path).st_mtime_ns
        except (FileNotFoundError, NotADirectoryError):
            raise SectionFileNotFound(self._path) from None
        except OSError as e:
            raise MetadataError(self._path, e) from e

        if mtime_ns <= self._last_loaded_ns:
            return False

        contents = self._load()
        self._contents = contents
        self._view = MappingProxyType(contents)
        self._last_loaded_ns = mtime_ns
        return True

    def _read_lines(self) -> List[str]:
        """Split the file on ``\\n`` only, dropping one trailing ``\\r`` per line."""
        try:
            with open(self._path, "r", encoding="utf-8", newline="") as handle:
                text = handle.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SectionReadError(self._path, e) from e

        return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]

    def _load(self) -> Dict[str, RowType]:
        """Parse the whole file into a fresh mapping."""
        contents: Dict[str, RowType] = {}
        current_header = ""
        record = self._default()

        for line_number, line in enumerate(self._read_lines(), start=1):
            if not line:
                continue

            if line.startswith(self._delimiter):
                if current_header:
                    contents[current_header] = record
                    record = self._default()
                current_header = line[len(self._delimiter):]
                continue

            if not current_header:
                raise StructureError(self._path, line_number, line)

            replacement = self._parse_line(current_header, line, record)
            if replacement is not None:
                record = replacement

        if current_header:
            contents[current_header] = record
        return contents

    def __getitem__(self, name: str) -> RowType:
        return self._contents[name]

    def __contains__(self, name: object) -> bool:
        return name in self._contents

    def __iter__(self) -> Iterator[str]:
        return iter(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def get(self, name: str, default: Optional[RowType] = None) -> Optional[RowType]:
        return self._contents.get(name, default)

    def items(self) -> Iterator[Tuple[str, RowType]]:
        return iter(self._contents.items())

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(path={str(self._path)!r}, "
            f"delimiter={self._delimiter!r}, sections={len(self._contents)})"
        )
