from __future__ import annotations

from ..types import PLAIN, StyleRun, TextSegment


_EMPHASIS_MARKERS = ('*', '_')


def tokenize(text: str, *, base_style: StyleRun = PLAIN) -> list[TextSegment]:
    """Split one logical line into style-tagged runs.

    A single ``*``/``_`` toggles italic and a doubled one toggles bold. Each
    toggle flushes the pending text with the style in effect before the
    marker, so opening and closing markers behave the same way.
    """
    source = str(text or '')
    if not source:
        return []

    segments: list[TextSegment] = []
    buffer: list[str] = []
    style = base_style
    cursor = 0

    def _flush_buffer() -> None:
        if not buffer:
            return
        segments.append(TextSegment(text=''.join(buffer), style=style))
        buffer.clear()

    while cursor < len(source):
        char = source[cursor]
        if char in _EMPHASIS_MARKERS:
            _flush_buffer()
            if source.startswith(char * 2, cursor):
                style = style.toggled(bold=True)
                cursor += 2
            else:
                style = style.toggled(italic=True)
                cursor += 1
            continue

        buffer.append(char)
        cursor += 1

    _flush_buffer()
    return segments
