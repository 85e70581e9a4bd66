"""How buffer lines wrap in the editor pane and where the view scrolls."""

from __future__ import annotations

from collections.abc import Sequence

from wcwidth import wcwidth

_LEFT_PADDING = 2
_SEPARATOR = 2
_RIGHT_PADDING = 2
_MIN_LINE_NUMBER_WIDTH = 3


def _display_width(text: str) -> int:
    """Terminal columns taken by ``text``; control characters take none."""
    return sum(max(wcwidth(char), 0) for char in text)


def line_display_height(line: str, line_count: int, content_width: int) -> int:
    """Number of screen rows ``line`` takes once wrapped, at least one.

    ``line_count`` is the number of lines in the buffer, which decides how
    wide the line number gutter is.
    """
    if content_width == 0:
        return 1
    line_number_width = max(len(str(line_count)), _MIN_LINE_NUMBER_WIDTH)
    fixed_width = _LEFT_PADDING + line_number_width + 1 + _SEPARATOR + _RIGHT_PADDING
    text_width = max(content_width - fixed_width, 0)
    if text_width == 0:
        return 1
    width = _display_width(line)
    return max(-(-width // text_width), 1)


def scroll_offset(
    lines: Sequence[str], cursor_line: int, viewport_height: int, content_width: int
) -> int:
    """First buffer line to show so that the cursor stays near the middle."""
    positions: list[int] = []
    current = 0
    for line in lines:
        positions.append(current)
        current += line_display_height(line, len(lines), content_width)
    total = current

    cursor_display = positions[cursor_line] if 0 <= cursor_line < len(positions) else 0
    half = viewport_height // 2
    if cursor_display < half:
        target = 0
    elif cursor_display + half >= total:
        target = max(total - viewport_height, 0)
    else:
        target = cursor_display - half

    return next(
        (index for index, position in enumerate(positions) if position >= target), 0
    )