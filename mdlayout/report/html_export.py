"""Plain HTML rendering of the same block grammar, without pagination."""

from __future__ import annotations

import html
from typing import Any

from markdown_it import MarkdownIt

from ..layout.blocks import INDENT_STEP, classify_line, source_lines
from ..types import BlockKind


_MARKDOWN_PARSER: MarkdownIt | None = None

_LIST_TAGS = {
    BlockKind.ordered_item: 'ol',
    BlockKind.unordered_item: 'ul',
}


def _markdown_parser() -> MarkdownIt:
    global _MARKDOWN_PARSER
    if _MARKDOWN_PARSER is None:
        _MARKDOWN_PARSER = MarkdownIt('commonmark', {'html': False, 'typographer': False})
        _MARKDOWN_PARSER.enable('strikethrough')
    return _MARKDOWN_PARSER


def _escape_attr(value: Any) -> str:
    return html.escape(str(value or ''), quote=True)


def _render_inline_children(children: list[Any] | None) -> str:
    if not children:
        return ''

    parts: list[str] = []
    link_depth = 0
    for token in children:
        token_type = str(getattr(token, 'type', '') or '')
        content = str(getattr(token, 'content', '') or '')

        if token_type == 'text':
            parts.append(html.escape(content, quote=False))
        elif token_type in {'softbreak', 'hardbreak'}:
            parts.append('<br>')
        elif token_type == 'code_inline':
            parts.append(f'<code>{html.escape(content, quote=False)}</code>')
        elif token_type == 'strong_open':
            parts.append('<strong>')
        elif token_type == 'strong_close':
            parts.append('</strong>')
        elif token_type == 'em_open':
            parts.append('<em>')
        elif token_type == 'em_close':
            parts.append('</em>')
        elif token_type == 's_open':
            parts.append('<del>')
        elif token_type == 's_close':
            parts.append('</del>')
        elif token_type == 'link_open':
            href = str(token.attrGet('href') or '').strip()
            parts.append(f'<a href="{_escape_attr(href)}">')
            link_depth += 1
        elif token_type == 'link_close':
            if link_depth > 0:
                parts.append('</a>')
                link_depth -= 1
        elif token_type == 'image':
            alt_text = content or str(token.attrGet('alt') or 'image')
            parts.append(html.escape(alt_text, quote=False))
        elif content:
            parts.append(html.escape(content, quote=False))

    if link_depth > 0:
        parts.extend(['</a>'] * link_depth)
    return ''.join(parts)


def render_inline(text: str) -> str:
    tokens = _markdown_parser().parseInline(text)
    if not tokens:
        return ''
    return _render_inline_children(tokens[0].children)


def _indent_attr(level: int, extra: str = '') -> str:
    rules = []
    if level > 0:
        rules.append(f'margin-left: {level * INDENT_STEP}em;')
    if extra:
        rules.append(extra)
    if not rules:
        return ''
    return f' style="{" ".join(rules)}"'


def markdown_to_html(markdown: str) -> str:
    lines = source_lines(markdown)
    if not lines:
        return ''

    parts: list[str] = []
    list_items: list[str] = []
    list_kind: BlockKind | None = None
    list_level = 0

    def _close_list() -> None:
        nonlocal list_kind, list_level
        if list_items and list_kind is not None:
            tag = _LIST_TAGS[list_kind]
            parts.append(f'<{tag}{_indent_attr(list_level)}>{"".join(list_items)}</{tag}>')
        list_items.clear()
        list_kind = None
        list_level = 0

    for line in lines:
        block = classify_line(line)
        level = block.leading_whitespace // 2

        if block.kind == BlockKind.blank:
            _close_list()
            continue

        if block.kind == BlockKind.heading:
            _close_list()
            parts.append(f'<h{block.level}{_indent_attr(level)}>{render_inline(block.content)}</h{block.level}>')
            continue

        if block.is_list_item:
            if list_kind != block.kind:
                _close_list()
                list_kind = block.kind
                list_level = level
            list_items.append(f'<li{_indent_attr(1)}>{render_inline(block.content)}</li>')
            continue

        _close_list()
        indent = _indent_attr(level, 'text-indent: 0.25em;')
        parts.append(f'<p{indent}>{render_inline(block.content)}</p>')

    _close_list()
    return ''.join(parts)
