from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from pydantic import BaseModel, Field


class ListKind(str, Enum):
    none = 'none'
    ordered = 'ordered'
    unordered = 'unordered'


class BlockKind(str, Enum):
    heading = 'heading'
    ordered_item = 'ordered_item'
    unordered_item = 'unordered_item'
    paragraph = 'paragraph'
    blank = 'blank'


class Align(str, Enum):
    left = 'left'
    center = 'center'
    right = 'right'
    justify = 'justify'


@dataclass(frozen=True)
class StyleRun:
    bold: bool = False
    italic: bool = False
    heading: int | None = None
    list_kind: ListKind = ListKind.none
    list_level: int = 0
    indentation: float = 0.0

    def toggled(self, *, bold: bool = False, italic: bool = False) -> 'StyleRun':
        return replace(
            self,
            bold=self.bold != bold,
            italic=self.italic != italic,
        )

    @property
    def weight(self) -> str:
        bold = self.bold or self.heading is not None
        if bold and self.italic:
            return 'bolditalic'
        if bold:
            return 'bold'
        if self.italic:
            return 'italic'
        return 'normal'


PLAIN = StyleRun()


@dataclass(frozen=True)
class TextSegment:
    text: str
    style: StyleRun = PLAIN

    @property
    def is_gap(self) -> bool:
        return self.text == ' '


Line = list[TextSegment]


@dataclass(frozen=True)
class FontSpec:
    font: str
    weight: str
    size: float


@dataclass(frozen=True)
class LayoutContext:
    """Read-only configuration shared by the line breaker and the justifier.

    ``font_size`` is the document base size: indentation is measured in
    multiples of it even inside headings.
    """

    max_width: float
    base_indentation: float
    font: str
    font_size: float

    @property
    def indentation_width(self) -> float:
        return self.base_indentation * self.font_size

    @property
    def available_width(self) -> float:
        return self.max_width - self.indentation_width


@dataclass
class PageCursor:
    y: float
    max_y: float
    line_height: float

    def fits_next(self) -> bool:
        return self.y + self.line_height <= self.max_y

    def advance(self) -> float:
        self.y += self.line_height
        return self.y


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    content: str
    base_indentation: float
    level: int | None = None
    marker: str | None = None
    leading_whitespace: int = 0

    @property
    def list_kind(self) -> ListKind:
        if self.kind == BlockKind.ordered_item:
            return ListKind.ordered
        if self.kind == BlockKind.unordered_item:
            return ListKind.unordered
        return ListKind.none

    @property
    def is_list_item(self) -> bool:
        return self.list_kind != ListKind.none


class LayoutOptions(BaseModel):
    max_width: float = Field(gt=0)
    align: Align = Align.left
    font_size: float = Field(gt=0)
    line_height: float = Field(gt=0)
    font: str = 'Helvetica'
    max_y: float | None = None
    bottom_margin: float = Field(default=20.0, ge=0)


class LayoutResult(BaseModel):
    placed_blocks: int = 0
    final_y: float
    truncated: bool = False
    next_line: int = 0
    next_sub_line: int = 0
    drawn_lines: int = 0


@dataclass
class WrappedBlock:
    block: Block
    lines: list[Line] = field(default_factory=list)
