"""Creation-date stamping for unchecked Markdown checkboxes.

A task line such as ``- [ ] buy milk`` becomes ``- [ ] buy milk ➕ 2024-01-01``.
Lines that already carry a stamp are left alone, so stamping is idempotent.

Everything here is pure text work: no clock, no files. The caller decides
which date to use (see ``checkdate.dates``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

CREATED_MARKER = "➕"

# Leading whitespace, bullet, whitespace, "[ ]", then whitespace + rest or EOL.
TASK_LINE_RE = re.compile(r"^(?P<prefix>[ \t]*[-*+][ \t]+\[ \])(?:[ \t]+(?P<rest>[^\r\n]*)|[ \t]*)$")

# Any of CRLF, CR or LF ends a line. The capture group keeps separators in split().
LINE_BREAK_RE = re.compile(r"(\r\n|\r|\n)")

# Detection is lenient about the gap between marker and date.
STAMP_PRESENT_RE = re.compile(CREATED_MARKER + r"[ \t]*\d{4}-\d{2}-\d{2}")

# Counting uses the exact token that stamp_text writes.
STAMP_TOKEN_RE = re.compile(CREATED_MARKER + r" \d{4}-\d{2}-\d{2}")


class LineKind(str, Enum):
    """Classification of a single line of note text."""

    UNCHECKED_TASK = "unchecked_task"
    OTHER = "other"


@dataclass(frozen=True)
class StampResult:
    text: str
    added_count: int


def classify_line(line: str) -> LineKind:
    """Classify one line (without its line ending)."""
    if TASK_LINE_RE.match(line):
        return LineKind.UNCHECKED_TASK
    return LineKind.OTHER


def is_unchecked_task(line: str) -> bool:
    return classify_line(line) is LineKind.UNCHECKED_TASK


def has_stamp(line: str) -> bool:
    return STAMP_PRESENT_RE.search(line) is not None


def count_stamps(text: str) -> int:
    return len(STAMP_TOKEN_RE.findall(text))


def format_stamp(date_str: str) -> str:
    return f"{CREATED_MARKER} {date_str}"


def _stamp_line(line: str, date_str: str) -> str | None:
    """Return the stamped form of ``line``, or None when it is not eligible."""
    m = TASK_LINE_RE.match(line)
    if not m or has_stamp(line):
        return None
    rest = m.group("rest") or ""
    return f"{m.group('prefix')} {rest} {format_stamp(date_str)}"


def stamp_text(text: str, date_str: str) -> StampResult:
    """Append a creation stamp to every unchecked task line that lacks one.

    Args:
        text: Arbitrary multi-line note text
        date_str: Date to stamp with (YYYY-MM-DD)

    Returns:
        StampResult with the rewritten text and the number of stamps added.
        The count is the difference in stamp tokens before and after, so stray
        stamp-shaped text elsewhere in the note counts toward both sides.
    """
    if not text:
        return StampResult(text=text, added_count=0)

    # Even indices are lines, odd indices the separators between them.
    parts = LINE_BREAK_RE.split(text)
    for i in range(0, len(parts), 2):
        line = parts[i]
        stamped = _stamp_line(line, date_str)
        if stamped is None:
            continue
        logger.debug(f"Found matching line: {line!r}")
        logger.debug(f"Replacement: {stamped!r}")
        parts[i] = stamped

    new_text = "".join(parts)
    before = count_stamps(text)
    after = count_stamps(new_text)
    logger.debug(f"Stamp count before={before} after={after} difference={after - before}")
    return StampResult(text=new_text, added_count=after - before)
