import pytest
from reportlab.pdfbase import pdfmetrics

from mdlayout.surface import (
    ReportLabSurface,
    StyledSurface,
    font_spec_for,
    register_ttf_family,
    resolve_weighted_font,
)
from mdlayout.types import FontSpec, StyleRun


class RecordingCanvas:
    def __init__(self):
        self.calls = []

    def setFont(self, name, size):
        self.calls.append(('setFont', name, size))

    def drawString(self, x, y, text):
        self.calls.append(('drawString', x, y, text))


@pytest.mark.parametrize(
    ('font', 'weight', 'expected'),
    [
        ('Helvetica', 'normal', 'Helvetica'),
        ('Helvetica', 'bold', 'Helvetica-Bold'),
        ('Helvetica', 'italic', 'Helvetica-Oblique'),
        ('Helvetica', 'bolditalic', 'Helvetica-BoldOblique'),
        ('Times-Roman', 'italic', 'Times-Italic'),
        ('Times-Roman', 'bolditalic', 'Times-BoldItalic'),
        ('Courier', 'bolditalic', 'Courier-BoldOblique'),
        ('NoSuchFont', 'normal', 'Helvetica'),
        ('NoSuchFont', 'bold', 'Helvetica-Bold'),
        ('', 'italic', 'Helvetica-Oblique'),
    ],
)
def test_resolve_weighted_font(font, weight, expected):
    assert resolve_weighted_font(font, weight) == expected


def test_font_spec_for_heading_and_plain():
    assert font_spec_for(StyleRun(), font='Helvetica', base_size=10) == FontSpec('Helvetica', 'normal', 10)
    heading = font_spec_for(StyleRun(heading=3), font='Helvetica', base_size=10)
    assert heading.weight == 'bold'
    assert heading.size == pytest.approx(16.0)


def test_reportlab_surface_measures_with_current_style():
    surface = ReportLabSurface(RecordingCanvas(), page_size=(300.0, 400.0))
    surface.set_style('Helvetica', 'bold')
    surface.set_size(14)
    assert surface.measure_width('Wide') == pytest.approx(pdfmetrics.stringWidth('Wide', 'Helvetica-Bold', 14))
    assert surface.measure_width('') == 0.0
    assert surface.get_page_height() == 400.0


def test_reportlab_surface_flips_y_when_drawing():
    canvas = RecordingCanvas()
    surface = ReportLabSurface(canvas, page_size=(300.0, 400.0))
    surface.set_style('Times-Roman', 'italic')
    surface.set_size(9)
    surface.draw_text('hello', 20.0, 30.0)
    assert canvas.calls == [
        ('setFont', 'Times-Italic', 9.0),
        ('drawString', 20.0, 370.0, 'hello'),
    ]


def test_styled_surface_reapplies_style_every_call():
    canvas = RecordingCanvas()
    styled = StyledSurface(ReportLabSurface(canvas, page_size=(300.0, 400.0)))
    plain = FontSpec('Helvetica', 'normal', 10)
    bold = FontSpec('Helvetica', 'bold', 12)
    styled.draw('a', 0, 10, bold)
    styled.draw('b', 0, 10, plain)
    assert [call[1:3] for call in canvas.calls if call[0] == 'setFont'] == [
        ('Helvetica-Bold', 12.0),
        ('Helvetica', 10.0),
    ]
    assert styled.measure('', bold) == 0.0


def test_register_ttf_family_with_missing_file_returns_false(tmp_path):
    assert register_ttf_family('MissingFace', tmp_path / 'missing.ttf') is False
    assert resolve_weighted_font('MissingFace', 'bold') == 'Helvetica-Bold'


def test_reportlab_surface_keeps_requested_size():
    canvas = RecordingCanvas()
    surface = ReportLabSurface(canvas, page_size=(300.0, 400.0))
    surface.set_style('Helvetica', 'normal')
    surface.set_size(0.5)
    assert surface.measure_width('abc') == pytest.approx(pdfmetrics.stringWidth('abc', 'Helvetica', 0.5))
    surface.draw_text('abc', 0.0, 0.0)
    assert canvas.calls[0] == ('setFont', 'Helvetica', 0.5)
