"""Parsing of compiler location ranges (``line:column`` spans)"""

from typing import NamedTuple

from lsprotocol import types

from .constants import LOCATION_RANGE


class Location(NamedTuple):
    line: int
    column: int


class LocationRange(NamedTuple):
    """A 1-based, begin <= end span inside ``file``.

    ``file`` is a logical name and is never checked against the filesystem.
    """

    file: str
    begin: Location
    end: Location

    @property
    def begin_line(self) -> int:
        return self.begin.line

    @property
    def begin_column(self) -> int:
        return self.begin.column

    @property
    def end_line(self) -> int:
        return self.end.line

    @property
    def end_column(self) -> int:
        return self.end.column


class RangeMatch(NamedTuple):
    location_range: LocationRange
    remainder: str


def match_range(range_text: str, file: str = "") -> RangeMatch | None:
    """Parse the range at the start of ``range_text``.

    Accepts ``L:C``, ``L:C-L:C``, ``(L:C)-(L:C)`` and jsonnet's single line
    ``L:C-C`` form, optionally preceded by a colon. Returns the range and
    the text following it, or None if the text does not start with a valid
    range.
    """
    if not isinstance(range_text, str):
        return None

    match = LOCATION_RANGE.match(range_text)
    if not match:
        return None

    groups = match.groupdict()
    if groups["paren_begin_line"] is not None:
        begin = Location(
            int(groups["paren_begin_line"]), int(groups["paren_begin_column"])
        )
        end = Location(int(groups["paren_end_line"]), int(groups["paren_end_column"]))
    else:
        begin = Location(int(groups["begin_line"]), int(groups["begin_column"]))
        if groups["end_line"] is not None:
            end = Location(int(groups["end_line"]), int(groups["end_column"]))
        elif groups["short_end_column"] is not None:
            end = Location(begin.line, int(groups["short_end_column"]))
        else:
            end = begin

    if min(begin.line, begin.column, end.line, end.column) < 1:
        return None

    # Tuple comparison is document order.
    if end < begin:
        return None

    return RangeMatch(
        location_range=LocationRange(file=file, begin=begin, end=end),
        remainder=range_text[match.end() :],
    )


def parse_range(range_text: str, file: str = "") -> LocationRange | None:
    result = match_range(range_text, file=file)
    if not result:
        return None

    return result.location_range


def to_lsp_range(location_range: LocationRange) -> types.Range:
    """Convert a 1-based range into a 0-based LSP range.

    The end column is exclusive in LSP, so it is not decremented.
    """
    return types.Range(
        start=types.Position(
            line=location_range.begin_line - 1,
            character=location_range.begin_column - 1,
        ),
        end=types.Position(
            line=location_range.end_line - 1, character=location_range.end_column
        ),
    )
