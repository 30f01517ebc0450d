import pytest

from mdlayout.layout.blocks import (
    classify_document,
    classify_line,
    compute_indentation,
    heading_font_size,
    normalize_source,
    source_lines,
)
from mdlayout.types import BlockKind, ListKind


class TestNormalizeSource:
    def test_separators_and_blank_runs_collapse(self):
        assert normalize_source('a\n\n\nb---c\r\nd') == 'a\nb\nc\nd'

    def test_surrounding_newlines_are_dropped(self):
        assert normalize_source('\n\nbody\n\n') == 'body'

    def test_empty(self):
        assert normalize_source('') == ''
        assert source_lines('') == []
        assert source_lines('---') == []


class TestClassifyLine:
    @pytest.mark.parametrize('level', range(1, 7))
    def test_heading_levels(self, level):
        block = classify_line('#' * level + ' Title **x**')
        assert block.kind == BlockKind.heading
        assert block.level == level
        assert block.content == 'Title **x**'

    def test_seven_hashes_is_a_paragraph(self):
        assert classify_line('####### too deep').kind == BlockKind.paragraph

    def test_heading_needs_space(self):
        assert classify_line('#tag').kind == BlockKind.paragraph

    def test_ordered_item_keeps_source_number(self):
        block = classify_line('7. seventh item')
        assert block.kind == BlockKind.ordered_item
        assert block.marker == '7.'
        assert block.content == 'seventh item'
        assert block.list_kind == ListKind.ordered

    @pytest.mark.parametrize('line', ['- dash item', '* star item', '   - nested item'])
    def test_unordered_items(self, line):
        block = classify_line(line)
        assert block.kind == BlockKind.unordered_item
        assert block.marker == '•'
        assert block.content.endswith('item')

    def test_bold_start_is_not_a_list(self):
        block = classify_line('**bold** opening')
        assert block.kind == BlockKind.paragraph
        assert block.content == '**bold** opening'

    def test_paragraph_is_trimmed(self):
        block = classify_line('   some text  ')
        assert block.kind == BlockKind.paragraph
        assert block.content == 'some text'
        assert block.leading_whitespace == 3

    def test_blank(self):
        assert classify_line('   ').kind == BlockKind.blank

    def test_document(self):
        kinds = [block.kind for block in classify_document('# H\n\n1. a\n- b\ntext')]
        assert kinds == [
            BlockKind.heading,
            BlockKind.ordered_item,
            BlockKind.unordered_item,
            BlockKind.paragraph,
        ]


class TestIndentation:
    def test_list_item_is_indented_more_than_paragraph(self):
        assert compute_indentation('- item') > compute_indentation('item')

    def test_flat_values(self):
        assert compute_indentation('item') == 0.25
        assert compute_indentation('- item') == 0.5
        assert compute_indentation('1. item') == 0.5
        assert compute_indentation('') == 0.0

    def test_leading_whitespace_adds_steps(self):
        assert compute_indentation('    - item') == pytest.approx(1.0)
        # indented non-list text gets the larger continuation offset
        assert compute_indentation('  continued') == pytest.approx(1.0)
        assert compute_indentation(' x') == 0.25


def test_heading_font_size_formula():
    assert heading_font_size(10, 1) == pytest.approx(22.0)
    assert heading_font_size(10, 6) == pytest.approx(7.0)
