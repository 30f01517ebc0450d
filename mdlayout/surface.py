from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .layout.blocks import heading_font_size
from .types import FontSpec, StyleRun


logger = logging.getLogger(__name__)

WEIGHTS = ('normal', 'bold', 'italic', 'bolditalic')

_FONT_AVAILABLE_CACHE: dict[str, bool] = {}
_WEIGHTED_FONT_CACHE: dict[tuple[str, str], str] = {}

_HELVETICA_FALLBACKS = {
    'normal': 'Helvetica',
    'bold': 'Helvetica-Bold',
    'italic': 'Helvetica-Oblique',
    'bolditalic': 'Helvetica-BoldOblique',
}


class DrawingSurface(Protocol):
    """Measurement and drawing backend.

    Font, weight and size are global state of the surface, so callers must
    set them before every measurement or draw.
    """

    def set_style(self, font: str, weight: str) -> None: ...

    def set_size(self, size: float) -> None: ...

    def measure_width(self, text: str) -> float: ...

    def draw_text(self, text: str, x: float, y: float) -> None: ...

    def get_page_height(self) -> float: ...


def font_spec_for(style: StyleRun, *, font: str, base_size: float) -> FontSpec:
    size = base_size
    if style.heading is not None:
        size = heading_font_size(base_size, style.heading)
    return FontSpec(font=font, weight=style.weight, size=size)


class StyledSurface:
    """Wraps a DrawingSurface so every call takes its style explicitly."""

    def __init__(self, backend: DrawingSurface) -> None:
        self.backend = backend

    def _apply(self, spec: FontSpec) -> None:
        self.backend.set_style(spec.font, spec.weight)
        self.backend.set_size(spec.size)

    def measure(self, text: str, spec: FontSpec) -> float:
        if not text:
            return 0.0
        self._apply(spec)
        return float(self.backend.measure_width(text))

    def draw(self, text: str, x: float, y: float, spec: FontSpec) -> None:
        self._apply(spec)
        self.backend.draw_text(text, x, y)

    def page_height(self) -> float:
        return float(self.backend.get_page_height())


def _font_available(font_name: str | None) -> bool:
    token = str(font_name or '').strip()
    if not token:
        return False
    cached = _FONT_AVAILABLE_CACHE.get(token)
    if cached is not None:
        return cached
    try:
        pdfmetrics.getFont(token)
        _FONT_AVAILABLE_CACHE[token] = True
        return True
    except Exception:
        _FONT_AVAILABLE_CACHE[token] = False
        return False


def resolve_weighted_font(base_font: str | None, weight: str) -> str:
    token = str(base_font or '').strip()
    weight = weight if weight in WEIGHTS else 'normal'
    cache_key = (token, weight)
    cached = _WEIGHTED_FONT_CACHE.get(cache_key)
    if cached is not None:
        return cached

    fallback = _HELVETICA_FALLBACKS[weight]
    if not token:
        _WEIGHTED_FONT_CACHE[cache_key] = fallback
        return fallback

    family = token.removesuffix('-Roman')
    if weight == 'bolditalic':
        candidates = [f'{family}-BoldItalic', f'{family}-BoldOblique']
    elif weight == 'bold':
        candidates = [f'{family}-Bold']
    elif weight == 'italic':
        candidates = [f'{family}-Italic', f'{family}-Oblique']
    else:
        candidates = [token, family]

    for candidate in candidates:
        if _font_available(candidate):
            _WEIGHTED_FONT_CACHE[cache_key] = candidate
            return candidate

    resolved = token if _font_available(token) else fallback
    _WEIGHTED_FONT_CACHE[cache_key] = resolved
    return resolved


def register_ttf_family(
    font_name: str,
    regular_path: Path,
    *,
    bold_path: Path | None = None,
    italic_path: Path | None = None,
    bold_italic_path: Path | None = None,
) -> bool:
    """Register a TrueType family under ``font_name`` and its weighted names.

    Returns False (after logging) when the regular face cannot be loaded;
    layout then falls back to the standard fonts.
    """
    faces = {
        font_name: regular_path,
        f'{font_name}-Bold': bold_path,
        f'{font_name}-Italic': italic_path,
        f'{font_name}-BoldItalic': bold_italic_path,
    }
    registered: dict[str, str] = {}
    for name, path in faces.items():
        if path is None:
            continue
        if name in pdfmetrics.getRegisteredFontNames():
            registered[name] = name
            continue
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
            registered[name] = name
        except Exception as exc:
            logger.warning('Failed to register PDF font %s from %s: %s', name, path, exc)

    _FONT_AVAILABLE_CACHE.clear()
    _WEIGHTED_FONT_CACHE.clear()
    if font_name not in registered:
        return False

    pdfmetrics.registerFontFamily(
        font_name,
        normal=font_name,
        bold=registered.get(f'{font_name}-Bold', font_name),
        italic=registered.get(f'{font_name}-Italic', font_name),
        boldItalic=registered.get(f'{font_name}-BoldItalic', font_name),
    )
    return True


class ReportLabSurface:
    """DrawingSurface backed by a reportlab canvas.

    Coordinates follow the layout convention (origin at the top of the page,
    y growing downward) and are flipped when drawing.
    """

    def __init__(self, canvas, *, page_size: tuple[float, float] = A4) -> None:
        self.canvas = canvas
        self.page_width, self.page_height = page_size
        self.font_name = resolve_weighted_font('Helvetica', 'normal')
        self.font_size = 12.0

    def set_style(self, font: str, weight: str) -> None:
        self.font_name = resolve_weighted_font(font, weight)

    def set_size(self, size: float) -> None:
        self.font_size = float(size)

    def measure_width(self, text: str) -> float:
        if not text:
            return 0.0
        return float(pdfmetrics.stringWidth(text, self.font_name, self.font_size))

    def draw_text(self, text: str, x: float, y: float) -> None:
        self.canvas.setFont(self.font_name, self.font_size)
        self.canvas.drawString(x, self.page_height - y, text)

    def get_page_height(self) -> float:
        return float(self.page_height)
