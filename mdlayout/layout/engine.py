from __future__ import annotations

import logging
from dataclasses import replace

from ..surface import DrawingSurface, StyledSurface, font_spec_for
from ..types import (
    PLAIN,
    Block,
    BlockKind,
    LayoutContext,
    LayoutOptions,
    LayoutResult,
    PageCursor,
    TextSegment,
    WrappedBlock,
)
from .blocks import classify_line, source_lines
from .justifier import place_line
from .line_breaker import break_lines
from .tokenizer import tokenize


logger = logging.getLogger(__name__)

# Distance between a list marker and the item text.
LIST_MARKER_GAP = 5.0


def _styled(surface: DrawingSurface | StyledSurface) -> StyledSurface:
    if isinstance(surface, StyledSurface):
        return surface
    return StyledSurface(surface)


def block_context(block: Block, options: LayoutOptions) -> LayoutContext:
    max_width = options.max_width
    if block.is_list_item:
        max_width -= LIST_MARKER_GAP
    return LayoutContext(
        max_width=max_width,
        base_indentation=block.base_indentation,
        font=options.font,
        font_size=options.font_size,
    )


def block_segments(block: Block) -> list[TextSegment]:
    segments = tokenize(block.content)
    if block.kind == BlockKind.paragraph:
        return segments
    return [
        TextSegment(
            text=segment.text,
            style=replace(
                segment.style,
                heading=block.level,
                list_kind=block.list_kind,
                list_level=block.leading_whitespace // 2,
                indentation=block.base_indentation,
            ),
        )
        for segment in segments
    ]


def wrap_block(
    block: Block,
    options: LayoutOptions,
    surface: DrawingSurface | StyledSurface,
) -> WrappedBlock:
    if block.kind == BlockKind.blank:
        return WrappedBlock(block=block)
    context = block_context(block, options)
    lines = break_lines(block_segments(block), context, _styled(surface))
    return WrappedBlock(block=block, lines=lines)


def wrap_document(
    text: str,
    options: LayoutOptions,
    surface: DrawingSurface | StyledSurface,
) -> list[WrappedBlock]:
    return [wrap_block(classify_line(line), options, surface) for line in source_lines(text)]


def _content_x(block: Block, x: float, context: LayoutContext) -> float:
    content_x = x + context.indentation_width
    if block.is_list_item:
        content_x += LIST_MARKER_GAP
    return content_x


def _draw_marker(
    surface: StyledSurface,
    block: Block,
    x: float,
    y: float,
    options: LayoutOptions,
    context: LayoutContext,
) -> None:
    if not block.marker:
        return
    spec = font_spec_for(PLAIN, font=options.font, base_size=options.font_size)
    surface.draw(block.marker, x + context.indentation_width, y, spec)


def layout(
    surface: DrawingSurface | StyledSurface,
    text: str,
    x: float,
    y: float,
    options: LayoutOptions,
    *,
    start_line: int = 0,
    start_sub_line: int = 0,
) -> LayoutResult:
    """Lay out markdown text from ``y`` down to the bottom of the page.

    Stops at the first line that would cross ``max_y`` and reports where to
    resume: ``next_line`` indexes the normalized source lines and
    ``next_sub_line`` counts the wrapped lines of that source line already
    placed.
    """
    if not text:
        return LayoutResult(final_y=y)

    styled = _styled(surface)
    lines = source_lines(text)
    max_y = options.max_y
    if max_y is None:
        max_y = styled.page_height() - options.bottom_margin
    cursor = PageCursor(y=y, max_y=max_y, line_height=options.line_height)
    placed_blocks = 0
    drawn_lines = 0

    def _truncated(line_index: int, sub_line: int) -> LayoutResult:
        logger.debug(
            'Page full at y=%.2f (max %.2f); resume at line %d, sub-line %d',
            cursor.y,
            max_y,
            line_index,
            sub_line,
        )
        return LayoutResult(
            placed_blocks=placed_blocks,
            final_y=cursor.y,
            truncated=True,
            next_line=line_index,
            next_sub_line=sub_line,
            drawn_lines=drawn_lines,
        )

    for line_index in range(max(0, start_line), len(lines)):
        block = classify_line(lines[line_index])
        first_sub_line = start_sub_line if line_index == start_line else 0

        if block.kind == BlockKind.blank:
            if not cursor.fits_next():
                return _truncated(line_index, 0)
            cursor.advance()
            continue

        context = block_context(block, options)
        wrapped = break_lines(block_segments(block), context, styled) or [[]]
        content_x = _content_x(block, x, context)
        started = False

        for sub_line in range(first_sub_line, len(wrapped)):
            if not cursor.fits_next():
                if started:
                    placed_blocks += 1
                return _truncated(line_index, sub_line)
            cursor.advance()
            if sub_line == 0:
                _draw_marker(styled, block, x, cursor.y, options, context)
            place_line(
                styled,
                wrapped[sub_line],
                content_x,
                cursor.y,
                context.available_width,
                options.align,
                is_last_line=sub_line == len(wrapped) - 1,
                font=options.font,
                base_size=options.font_size,
            )
            started = True
            drawn_lines += 1

        if started:
            placed_blocks += 1

    return LayoutResult(
        placed_blocks=placed_blocks,
        final_y=cursor.y,
        next_line=len(lines),
        drawn_lines=drawn_lines,
    )


def layout_y(
    surface: DrawingSurface | StyledSurface,
    text: str,
    x: float,
    y: float,
    options: LayoutOptions,
) -> float:
    return layout(surface, text, x, y, options).final_y
