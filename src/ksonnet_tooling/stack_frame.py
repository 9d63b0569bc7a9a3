"""Extract the file name from compiler stack-trace lines"""

from typing import NamedTuple

from .constants import STACK_FRAME


class StackFrameMatch(NamedTuple):
    full_match: str
    leading_whitespace_and_file: str
    file: str


def match_stack_frame(line: str) -> StackFrameMatch | None:
    """Extract the filename from a ``<whitespace><file>:<rest>`` line.

    The filename ends at the first colon, so paths containing colons
    (Windows drive letters) are split there.
    """
    match = STACK_FRAME.match(line)
    if not match:
        return None

    return StackFrameMatch(
        full_match=match.group(0),
        leading_whitespace_and_file=match.group("indent") + match.group("file"),
        file=match.group("file"),
    )
