from __future__ import annotations

import io
import logging
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas as pdf_canvas

from ..config import get_settings
from ..layout.engine import layout
from ..storage import read_text, write_bytes_atomic
from ..surface import ReportLabSurface, register_ttf_family
from ..types import Align, LayoutOptions


logger = logging.getLogger(__name__)


class LayoutError(RuntimeError):
    pass


def _register_configured_fonts(font_name: str, font_path: Path | None) -> str:
    if font_path is None:
        return font_name
    settings = get_settings()
    if register_ttf_family(
        font_name,
        font_path,
        bold_path=settings.pdf_bold_font_path,
        italic_path=settings.pdf_italic_font_path,
        bold_italic_path=settings.pdf_bold_italic_font_path,
    ):
        return font_name
    logger.warning('Falling back to Helvetica; could not load %s from %s', font_name, font_path)
    return 'Helvetica'


def markdown_to_pdf_bytes(
    *,
    markdown_text: str,
    font_name: str = 'Helvetica',
    font_path: Path | None = None,
    font_size: float = 11,
    line_spacing: float = 1.4,
    margin: float = 48,
    bottom_margin: float | None = None,
    align: Align | str = Align.left,
    title: str = 'Markdown Document',
    page_size: tuple[float, float] = A4,
) -> bytes:
    font = _register_configured_fonts(font_name, font_path)
    page_width, page_height = page_size

    buffer = io.BytesIO()
    pdf = pdf_canvas.Canvas(buffer, pagesize=page_size)
    pdf.setTitle(title)
    pdf.setProducer('mdlayout')
    surface = ReportLabSurface(pdf, page_size=page_size)

    options = LayoutOptions(
        max_width=page_width - 2 * margin,
        align=Align(align),
        font_size=font_size,
        line_height=font_size * line_spacing,
        font=font,
        bottom_margin=margin if bottom_margin is None else bottom_margin,
    )

    start_line = 0
    start_sub_line = 0
    pages = 1
    while True:
        result = layout(
            surface,
            markdown_text,
            margin,
            margin,
            options,
            start_line=start_line,
            start_sub_line=start_sub_line,
        )
        if not result.truncated:
            break
        if (result.next_line, result.next_sub_line) == (start_line, start_sub_line):
            raise LayoutError(
                f'line {result.next_line} does not fit on an empty page '
                f'(line height {options.line_height:.2f}, page height {page_height:.2f})'
            )
        pdf.showPage()
        pages += 1
        start_line = result.next_line
        start_sub_line = result.next_sub_line

    pdf.showPage()
    pdf.save()
    logger.info('Rendered %d page(s) for %r', pages, title)
    return buffer.getvalue()


def markdown_to_pdf(
    *,
    markdown_text: str,
    output_path: Path,
    font_name: str = 'Helvetica',
    font_path: Path | None = None,
    font_size: float = 11,
    line_spacing: float = 1.4,
    margin: float = 48,
    bottom_margin: float | None = None,
    align: Align | str = Align.left,
    title: str = 'Markdown Document',
) -> None:
    content = markdown_to_pdf_bytes(
        markdown_text=markdown_text,
        font_name=font_name,
        font_path=font_path,
        font_size=font_size,
        line_spacing=line_spacing,
        margin=margin,
        bottom_margin=bottom_margin,
        align=align,
        title=title,
    )
    write_bytes_atomic(output_path, content)


def markdown_file_to_pdf(
    *,
    markdown_path: Path,
    output_path: Path,
    font_name: str = 'Helvetica',
    font_path: Path | None = None,
    font_size: float = 11,
    line_spacing: float = 1.4,
    margin: float = 48,
    bottom_margin: float | None = None,
    align: Align | str = Align.left,
    title: str | None = None,
) -> None:
    markdown_to_pdf(
        markdown_text=read_text(markdown_path),
        output_path=output_path,
        font_name=font_name,
        font_path=font_path,
        font_size=font_size,
        line_spacing=line_spacing,
        margin=margin,
        bottom_margin=bottom_margin,
        align=align,
        title=title or markdown_path.stem,
    )
