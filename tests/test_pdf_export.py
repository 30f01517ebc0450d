import io

import pytest
from pypdf import PdfReader

from mdlayout.report.pdf_export import (
    LayoutError,
    markdown_file_to_pdf,
    markdown_to_pdf_bytes,
)


def _pages_text(content: bytes) -> list[str]:
    reader = PdfReader(io.BytesIO(content))
    return [(page.extract_text() or '') for page in reader.pages]


def test_single_page_document():
    content = markdown_to_pdf_bytes(
        markdown_text='# Report\n\nSome **bold** and *italic* text.\n- first\n- second',
        title='Report',
    )
    assert content.startswith(b'%PDF')
    pages = _pages_text(content)
    assert len(pages) == 1
    squashed = pages[0].replace(' ', '').replace('\n', '')
    for word in ('Report', 'Somebold', 'italic', 'first', 'second'):
        assert word in squashed


def test_long_document_flows_onto_more_pages():
    markdown_text = '\n'.join(f'Paragraph {index} of the flow test' for index in range(200))
    pages = _pages_text(markdown_to_pdf_bytes(markdown_text=markdown_text))
    assert len(pages) > 1
    squashed = ''.join(page.replace(' ', '').replace('\n', '') for page in pages)
    assert squashed.count('Paragraph') == 200
    assert 'Paragraph0of' in squashed
    assert 'Paragraph199of' in squashed


@pytest.mark.parametrize('align', ['left', 'center', 'right', 'justify'])
def test_every_alignment_renders(align):
    text = ' '.join(['wrapping words'] * 60)
    pages = _pages_text(markdown_to_pdf_bytes(markdown_text=text, align=align))
    assert 'wrapping' in pages[0]


def test_line_taller_than_page_raises():
    with pytest.raises(LayoutError):
        markdown_to_pdf_bytes(markdown_text='x', font_size=50, margin=48, page_size=(200.0, 100.0))


def test_empty_document_is_a_blank_page():
    pages = _pages_text(markdown_to_pdf_bytes(markdown_text=''))
    assert len(pages) == 1
    assert pages[0].strip() == ''


def test_markdown_file_to_pdf(tmp_path):
    source = tmp_path / 'notes.md'
    source.write_text('## Notes\n1. one\n2. two\n', encoding='utf-8')
    output = tmp_path / 'out' / 'notes.pdf'
    markdown_file_to_pdf(markdown_path=source, output_path=output)
    reader = PdfReader(str(output))
    assert reader.metadata.title == 'notes'
    assert 'Notes' in reader.pages[0].extract_text()
