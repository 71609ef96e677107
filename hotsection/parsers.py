"""Ready-made line parsers and the parser registry."""
import os
from typing import Any, Callable, Dict, List, Tuple, Union

from .section import HotloadableSection, LineParser


U32_MAX = 2**32 - 1


def parse_uint(section: str, line: str, current: int) -> int:
    """Keep the last line of the section that is an unsigned 32-bit integer.

    Accepts an optional leading ``+``; whitespace, signs elsewhere and values
    above ``U32_MAX`` leave the record unchanged.
    """
    digits = line[1:] if line.startswith("+") else line
    if digits.isascii() and digits.isdigit():
        value = int(digits)
        if value <= U32_MAX:
            return value
    return current


def parse_key_value(section: str, line: str, record: Dict[str, str]) -> None:
    """Store ``key = value`` or ``key: value`` pairs into a dict record."""
    separators = [i for i in (line.find("="), line.find(":")) if i > 0]
    if not separators:
        return
    split_at = min(separators)
    key = line[:split_at].strip()
    if key:
        record[key] = line[split_at + 1:].strip()


def collect_lines(section: str, line: str, record: List[str]) -> None:
    """Append every data line verbatim."""
    record.append(line)


PARSERS: Dict[str, Tuple[LineParser, Callable[[], Any]]] = {
    "uint": (parse_uint, int),
    "keyvalue": (parse_key_value, dict),
    "lines": (collect_lines, list),
}


def create_section(
    path: Union[str, os.PathLike],
    delimiter: str = ":",
    parser: str = "uint",
) -> HotloadableSection:
    """Build a watcher from a registered parser name.

    Raises:
        ValueError: If the parser name is unknown or the delimiter is empty
    """
    try:
        parse_line, default = PARSERS[parser]
    except KeyError:
        raise ValueError(
            f"Unknown parser: {parser!r}. Valid options: {', '.join(sorted(PARSERS))}"
        ) from None
    return HotloadableSection(path, delimiter, parse_line, default=default)
