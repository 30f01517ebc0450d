from __future__ import annotations

import argparse
import io
import json
import logging
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas as pdf_canvas

from mdlayout.config import get_settings
from mdlayout.layout.engine import wrap_document
from mdlayout.report.html_export import markdown_to_html
from mdlayout.report.pdf_export import LayoutError, markdown_to_pdf
from mdlayout.storage import read_text, write_text_atomic
from mdlayout.surface import ReportLabSurface
from mdlayout.types import Align, LayoutOptions


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _configure_logging() -> None:
    level = getattr(logging, str(get_settings().log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _read_input(path_value: str) -> tuple[Path, str] | None:
    path = Path(path_value).expanduser().resolve()
    if not path.exists() or not path.is_file():
        _print_json({'status': 'error', 'message': f'Markdown file not found: {path}'})
        return None
    return path, read_text(path)


def cmd_pdf(args: argparse.Namespace) -> int:
    settings = get_settings()
    loaded = _read_input(args.input)
    if loaded is None:
        return 2
    source_path, markdown_text = loaded
    output_path = Path(args.output).expanduser().resolve()

    try:
        markdown_to_pdf(
            markdown_text=markdown_text,
            output_path=output_path,
            font_name=args.font or settings.pdf_font_name,
            font_path=settings.pdf_font_path,
            font_size=args.font_size or settings.pdf_font_size,
            line_spacing=args.line_spacing or settings.pdf_line_spacing,
            margin=settings.pdf_page_margin if args.margin is None else args.margin,
            bottom_margin=settings.pdf_bottom_margin,
            align=args.align or settings.pdf_align,
            title=args.title or source_path.stem or settings.pdf_title,
        )
    except LayoutError as exc:
        _print_json({'status': 'error', 'message': str(exc)})
        return 2

    _print_json({'status': 'ok', 'input': str(source_path), 'output': str(output_path)})
    return 0


def cmd_html(args: argparse.Namespace) -> int:
    loaded = _read_input(args.input)
    if loaded is None:
        return 2
    _, markdown_text = loaded
    rendered = markdown_to_html(markdown_text)

    if not args.output:
        print(rendered)
        return 0

    output_path = Path(args.output).expanduser().resolve()
    write_text_atomic(output_path, rendered)
    _print_json({'status': 'ok', 'output': str(output_path)})
    return 0


def cmd_lines(args: argparse.Namespace) -> int:
    settings = get_settings()
    loaded = _read_input(args.input)
    if loaded is None:
        return 2
    _, markdown_text = loaded

    font_size = args.font_size or settings.pdf_font_size
    options = LayoutOptions(
        max_width=args.width,
        font_size=font_size,
        line_height=settings.pdf_line_height(font_size),
        font=args.font or settings.pdf_font_name,
    )
    surface = ReportLabSurface(pdf_canvas.Canvas(io.BytesIO(), pagesize=A4), page_size=A4)
    blocks = []
    for wrapped in wrap_document(markdown_text, options, surface):
        blocks.append(
            {
                'kind': wrapped.block.kind.value,
                'indentation': wrapped.block.base_indentation,
                'lines': [''.join(segment.text for segment in line) for line in wrapped.lines],
            }
        )
    _print_json({'width': options.max_width, 'blocks': blocks})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Markdown subset layout CLI')
    sub = parser.add_subparsers(dest='command', required=True)
    align_choices = [align.value for align in Align]

    pdf = sub.add_parser('pdf', help='Render markdown to a paginated PDF')
    pdf.add_argument('--input', required=True, help='Path to markdown file')
    pdf.add_argument('--output', required=True, help='Path of the PDF to write')
    pdf.add_argument('--align', choices=align_choices, required=False)
    pdf.add_argument('--font', required=False, help='Base font name')
    pdf.add_argument('--font-size', type=float, required=False)
    pdf.add_argument('--line-spacing', type=float, required=False)
    pdf.add_argument('--margin', type=float, required=False)
    pdf.add_argument('--title', required=False, help='PDF title metadata')
    pdf.set_defaults(func=cmd_pdf)

    html = sub.add_parser('html', help='Render markdown to plain HTML')
    html.add_argument('--input', required=True, help='Path to markdown file')
    html.add_argument('--output', required=False, help='Output path (stdout when omitted)')
    html.set_defaults(func=cmd_html)

    lines = sub.add_parser('lines', help='Print wrapped lines per block as JSON')
    lines.add_argument('--input', required=True, help='Path to markdown file')
    lines.add_argument('--width', type=float, default=400.0)
    lines.add_argument('--font', required=False)
    lines.add_argument('--font-size', type=float, required=False)
    lines.set_defaults(func=cmd_lines)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging()
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
