from __future__ import annotations

import pytest

from mdlayout.config import get_settings
from mdlayout.surface import StyledSurface


CHAR_WIDTH = 10.0
SPACE_WIDTH = 5.0


class FakeSurface:
    """Deterministic surface: every glyph is CHAR_WIDTH wide at size 10.

    Bold glyphs are 20% wider so stale-style bugs show up in widths.
    """

    def __init__(self, page_height: float = 1000.0) -> None:
        self.page_height = page_height
        self.font = 'Helvetica'
        self.weight = 'normal'
        self.size = 10.0
        self.draws: list[tuple[str, float, float, str, str, float]] = []
        self.style_calls = 0

    def set_style(self, font: str, weight: str) -> None:
        self.font = font
        self.weight = weight
        self.style_calls += 1

    def set_size(self, size: float) -> None:
        self.size = size

    def _glyph_width(self, char: str) -> float:
        base = SPACE_WIDTH if char == ' ' else CHAR_WIDTH
        if 'bold' in self.weight:
            base *= 1.2
        return base * self.size / 10.0

    def measure_width(self, text: str) -> float:
        return sum(self._glyph_width(char) for char in text)

    def draw_text(self, text: str, x: float, y: float) -> None:
        self.draws.append((text, x, y, self.font, self.weight, self.size))

    def get_page_height(self) -> float:
        return self.page_height

    def drawn_words(self) -> list[str]:
        return [draw[0] for draw in self.draws if draw[0] != ' ']


@pytest.fixture
def fake_surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def styled(fake_surface: FakeSurface) -> StyledSurface:
    return StyledSurface(fake_surface)


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
