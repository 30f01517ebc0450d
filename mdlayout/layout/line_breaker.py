"""Greedy width-constrained line breaking over style-tagged words."""

from __future__ import annotations

import logging
import re
from typing import Callable

from ..surface import StyledSurface, font_spec_for
from ..types import LayoutContext, Line, StyleRun, TextSegment


logger = logging.getLogger(__name__)

# Fragments are closed at 95% of the budget to absorb measurement rounding.
FORCED_SPLIT_SAFETY_RATIO = 0.95

_WHITESPACE_RE = re.compile(r'\s+')

# A word is one or more style pieces with no whitespace between them,
# e.g. ``**Note**:`` is the bold piece "Note" glued to the plain ":".
Word = list[TextSegment]


def split_words(segments: list[TextSegment]) -> list[Word]:
    words: list[Word] = []
    glued = False
    for segment in segments:
        for index, piece in enumerate(_WHITESPACE_RE.split(segment.text)):
            if not piece:
                continue
            fragment = TextSegment(text=piece, style=segment.style)
            if index == 0 and glued and words:
                words[-1].append(fragment)
            else:
                words.append([fragment])
        glued = bool(segment.text) and not segment.text[-1].isspace()
    return words


def _close_fragment(current: str, measure: Callable[[str], float], max_width: float) -> tuple[str, str]:
    """Return the fragment to emit for ``current`` and the characters carried over.

    The hyphenated fragment must fit ``max_width``; trailing characters move
    to the next fragment until it does.
    """
    if len(current) < 2:
        return current, ''
    head, carry = current, ''
    while len(head) >= 2 and measure(f'{head}-') > max_width:
        head, carry = head[:-1], f'{head[-1]}{carry}'
    if len(head) >= 2:
        return f'{head}-', carry
    return head, carry


def split_word(
    word: str,
    style: StyleRun,
    measure: Callable[[str], float],
    max_width: float,
) -> list[TextSegment]:
    """Cut an over-wide word into fragments that each fit ``max_width``.

    Fragments of two or more characters get a trailing hyphen. A character
    that is wider than the whole budget is still emitted on its own, so the
    result is never empty for a non-empty word.
    """
    if not word:
        return []
    if measure(word) <= max_width:
        return [TextSegment(text=word, style=style)]

    limit = max_width * FORCED_SPLIT_SAFETY_RATIO
    parts: list[TextSegment] = []
    current = ''
    for char in word:
        candidate = f'{current}{char}'
        if measure(candidate) <= limit:
            current = candidate
            continue
        if not current:
            parts.append(TextSegment(text=char, style=style))
            continue
        fragment, carry = _close_fragment(current, measure, max_width)
        parts.append(TextSegment(text=fragment, style=style))
        current = f'{carry}{char}'
    if current:
        parts.append(TextSegment(text=current, style=style))
    return parts


class LineBuilder:
    def __init__(self, available_width: float) -> None:
        self.available_width = available_width
        self.lines: list[Line] = []
        self.current: Line = []
        self.current_width = 0.0

    def fits(self, width: float, gap_width: float = 0.0) -> bool:
        gap = gap_width if self.current else 0.0
        return self.current_width + gap + width <= self.available_width

    def push(self, segment: TextSegment, width: float, gap_width: float = 0.0) -> None:
        if self.current:
            self.current.append(TextSegment(text=' ', style=segment.style))
            self.current_width += gap_width
        self.glue(segment, width)

    def glue(self, segment: TextSegment, width: float) -> None:
        """Append ``segment`` to the current line without a gap marker."""
        self.current.append(segment)
        self.current_width += width

    def push_word(self, word: Word, widths: list[float], gap_width: float = 0.0) -> None:
        self.push(word[0], widths[0], gap_width)
        for piece, width in zip(word[1:], widths[1:]):
            self.glue(piece, width)

    def commit(self) -> None:
        if not self.current:
            return
        self.lines.append(self.current)
        self.current = []
        self.current_width = 0.0

    def finish(self) -> list[Line]:
        self.commit()
        return self.lines


def _measure_line(line: Line, context: LayoutContext, surface: StyledSurface) -> float:
    total = 0.0
    for segment in line:
        spec = font_spec_for(segment.style, font=context.font, base_size=context.font_size)
        total += surface.measure(segment.text, spec)
    return total


def _refit_line(line: Line, context: LayoutContext, surface: StyledSurface) -> Line:
    available = context.available_width
    if _measure_line(line, context, surface) <= available:
        return line

    rebuilt: Line = []
    current_width = 0.0
    for segment in line:
        spec = font_spec_for(segment.style, font=context.font, base_size=context.font_size)

        def measure(text: str) -> float:
            return surface.measure(text, spec)

        if segment.is_gap:
            gap_width = measure(' ')
            if current_width + gap_width <= available:
                rebuilt.append(segment)
                current_width += gap_width
            continue

        for part in split_word(segment.text, segment.style, measure, available - current_width):
            part_width = measure(part.text)
            if current_width + part_width <= available or not rebuilt:
                rebuilt.append(part)
                current_width += part_width

    dropped = ''.join(s.text for s in line)
    kept = ''.join(s.text for s in rebuilt)
    if kept != dropped:
        logger.warning('Line over width %.2f rebuilt; %r shortened to %r', available, dropped, kept)
    return rebuilt


def break_lines(
    segments: list[TextSegment],
    context: LayoutContext,
    surface: StyledSurface,
) -> list[Line]:
    available = context.available_width
    builder = LineBuilder(available)

    def measure_in(style: StyleRun) -> Callable[[str], float]:
        spec = font_spec_for(style, font=context.font, base_size=context.font_size)
        return lambda text: surface.measure(text, spec)

    for word in split_words(segments):
        widths = [measure_in(piece.style)(piece.text) for piece in word]
        word_width = sum(widths)
        gap_width = measure_in(word[0].style)(' ') if builder.current else 0.0

        if builder.fits(word_width, gap_width):
            builder.push_word(word, widths, gap_width)
            continue

        if word_width <= available:
            builder.commit()
            builder.push_word(word, widths)
            continue

        builder.commit()
        for piece in word:
            measure = measure_in(piece.style)
            parts = split_word(piece.text, piece.style, measure, available)
            logger.debug('Forced split of %r into %d fragments (width %.2f)', piece.text, len(parts), available)
            for index, part in enumerate(parts):
                part_width = measure(part.text)
                if index > 0 or not builder.fits(part_width):
                    builder.commit()
                builder.glue(part, part_width)

    lines = builder.finish()
    return [line for line in (_refit_line(line, context, surface) for line in lines) if line]
