from __future__ import annotations

from ..surface import StyledSurface, font_spec_for
from ..types import Align, Line


def _widths(line: Line, *, font: str, base_size: float, surface: StyledSurface) -> list[float]:
    return [
        surface.measure(segment.text, font_spec_for(segment.style, font=font, base_size=base_size))
        for segment in line
    ]


def line_start_x(x: float, available_width: float, total_width: float, align: Align) -> float:
    if align == Align.center:
        return x + (available_width - total_width) / 2
    if align == Align.right:
        return x + available_width - total_width
    return x


def gap_extra(line: Line, widths: list[float], available_width: float) -> float:
    """Extra advance added after each gap marker when justifying.

    Gaps keep their natural width, so the line ends flush with
    ``available_width``.
    """
    gaps = sum(1 for segment in line if segment.is_gap)
    if not gaps:
        return 0.0
    # Gap widths are part of the natural width; only the leftover is spread.
    remaining = max(0.0, available_width - sum(widths))
    return remaining / gaps


def place_line(
    surface: StyledSurface,
    line: Line,
    x: float,
    y: float,
    available_width: float,
    align: Align,
    *,
    is_last_line: bool,
    font: str,
    base_size: float,
) -> list[float]:
    """Draw one line and return the x coordinate of every segment."""
    widths = _widths(line, font=font, base_size=base_size, surface=surface)

    extra = 0.0
    if align == Align.justify:
        if not is_last_line and len(line) > 1:
            extra = gap_extra(line, widths, available_width)
        cursor = x
    else:
        cursor = line_start_x(x, available_width, sum(widths), align)

    positions: list[float] = []
    for index, (segment, width) in enumerate(zip(line, widths)):
        spec = font_spec_for(segment.style, font=font, base_size=base_size)
        surface.draw(segment.text, cursor, y, spec)
        positions.append(cursor)
        cursor += width
        if segment.is_gap and index < len(line) - 1:
            cursor += extra
    return positions
