from __future__ import annotations

import re

from ..types import Block, BlockKind


HEADING_SCALE_BASE = 2.5
HEADING_SCALE_STEP = 0.3

INDENT_STEP = 0.25
LIST_INDENT_OFFSET = 0.5
CONTINUATION_INDENT_OFFSET = 0.75
PARAGRAPH_INDENT_OFFSET = 0.25

_HEADING_RE = re.compile(r'^(#{1,6})\s+(.+)$')
_ORDERED_ITEM_RE = re.compile(r'^(\d+)\.\s+(.+)$')
_UNORDERED_ITEM_RE = re.compile(r'^[-*]\s+(.+)$')
_LIST_PREFIX_RE = re.compile(r'^\s*(?:[-*]|\d+\.)\s+')
_LEADING_WS_RE = re.compile(r'^\s*')


def normalize_source(text: str) -> str:
    """Normalize newlines, turn ``---`` into breaks and collapse blank runs."""
    value = str(text or '').replace('\r\n', '\n').replace('\r', '\n')
    value = value.replace('---', '\n')
    value = re.sub(r'\n{2,}', '\n', value)
    return value.strip('\n')


def source_lines(text: str) -> list[str]:
    normalized = normalize_source(text)
    if not normalized:
        return []
    return normalized.split('\n')


def leading_whitespace(line: str) -> int:
    return len(_LEADING_WS_RE.match(line).group(0))


def compute_indentation(line: str) -> float:
    """Indentation of a raw line in em units of the base font size."""
    base = (leading_whitespace(line) // 2) * INDENT_STEP
    if _LIST_PREFIX_RE.match(line):
        return base + LIST_INDENT_OFFSET
    if base > 0:
        return base + CONTINUATION_INDENT_OFFSET
    if line.strip():
        return base + PARAGRAPH_INDENT_OFFSET
    return base


def heading_font_size(base_size: float, level: int) -> float:
    return base_size * (HEADING_SCALE_BASE - level * HEADING_SCALE_STEP)


def classify_line(line: str) -> Block:
    indentation = compute_indentation(line)
    depth = leading_whitespace(line)
    stripped = line.strip()
    if not stripped:
        return Block(kind=BlockKind.blank, content='', base_indentation=indentation)

    match = _HEADING_RE.match(stripped)
    if match:
        return Block(
            kind=BlockKind.heading,
            content=match.group(2),
            base_indentation=indentation,
            level=len(match.group(1)),
            leading_whitespace=depth,
        )

    match = _ORDERED_ITEM_RE.match(stripped)
    if match:
        return Block(
            kind=BlockKind.ordered_item,
            content=match.group(2),
            base_indentation=indentation,
            marker=f'{match.group(1)}.',
            leading_whitespace=depth,
        )

    match = _UNORDERED_ITEM_RE.match(stripped)
    if match:
        return Block(
            kind=BlockKind.unordered_item,
            content=match.group(1),
            base_indentation=indentation,
            marker='•',
            leading_whitespace=depth,
        )

    return Block(
        kind=BlockKind.paragraph,
        content=stripped,
        base_indentation=indentation,
        leading_whitespace=depth,
    )


def classify_document(text: str) -> list[Block]:
    return [classify_line(line) for line in source_lines(text)]
