"""
Paragraph model

A group of styled strings that should be laid out together as a single
paragraph. Text layout in PDF files is handled entirely by text objects, each
holding a single, consistently styled span that is at most one line long.
Visible paragraphs are stitched together from many such objects when the page
is generated, and nothing in the file records that structure.

A Paragraph can be reconstructed from existing page objects, or built from
scratch; once created its text can be edited and re-formatted, then laid out
into lines and turned into a group of new page objects.
"""

from typing import TYPE_CHECKING, Any, Callable, Iterator, List, Optional

from pydantic import BaseModel, Field

from constants.layout import FRAGMENT_SEPARATOR
from models.paragraph_types import (
    Fragment,
    Line,
    LineAlignment,
    LineBreakFragment,
    OpaqueFragment,
    OverflowBehaviour,
    ParagraphAlignment,
    Points,
    Style,
    StyledFragment,
    describe_fragment,
)

if TYPE_CHECKING:
    from engine.config import EngineConfig

MeasureFunction = Callable[[Style, str], Points]


class Paragraph(BaseModel):
    """Ordered fragments plus the sizing, overflow, indent and alignment used for layout"""
    fragments: List[Fragment] = Field(default_factory=list)
    top: Optional[Points] = None
    left: Optional[Points] = None
    max_width: Optional[Points] = None
    max_height: Optional[Points] = None
    overflow: OverflowBehaviour = OverflowBehaviour.FIX_WIDTH_EXPAND_HEIGHT
    alignment: ParagraphAlignment = ParagraphAlignment.LEFT_ALIGN
    first_line_indent: Points = 0.0

    @classmethod
    def empty(
        cls,
        maximum_width: Points,
        overflow: OverflowBehaviour,
        alignment: ParagraphAlignment,
    ) -> 'Paragraph':
        """Create an empty paragraph with the given maximum line width, overflow and alignment."""
        return cls(max_width=maximum_width, overflow=overflow, alignment=alignment)

    @classmethod
    def from_objects(cls, objects: List[Any], config: Optional['EngineConfig'] = None) -> List['Paragraph']:
        """Reconstruct paragraphs from a list of page objects, in reading order."""
        from processors.paragraph_builder import build_paragraphs
        return build_paragraphs(objects, config)

    def is_empty(self) -> bool:
        return not self.fragments

    def push(self, string: StyledFragment, separator: str = FRAGMENT_SEPARATOR) -> None:
        """Add a styled string, merging it into the last fragment when the styling matches."""
        last = self.fragments[-1] if self.fragments else None
        if isinstance(last, StyledFragment) and last.matches_style(string):
            last.append(string.text, separator)
        else:
            self.fragments.append(string.model_copy())

    def push_line_break(self, alignment: LineAlignment = LineAlignment.NONE) -> None:
        self.fragments.append(LineBreakFragment(alignment=alignment))

    def push_object(self, handle: Any) -> None:
        """Place a non-text page object inline after the current content."""
        self.fragments.append(OpaqueFragment(handle=handle))

    def styled_fragments(self) -> Iterator[StyledFragment]:
        return (f for f in self.fragments if isinstance(f, StyledFragment))

    def text(self) -> str:
        """Text of all styled fragments, with a newline for every line break."""
        parts = []
        for fragment in self.fragments:
            if isinstance(fragment, StyledFragment):
                parts.append(fragment.text)
            elif isinstance(fragment, LineBreakFragment):
                parts.append("\n")
        return "".join(parts)

    def text_separated(self, separator: str) -> str:
        """Text of all styled fragments joined with the given separator."""
        return separator.join(f.text for f in self.styled_fragments())

    def maximum_width(self) -> Points:
        return self.max_width if self.max_width is not None else 0.0

    def set_maximum_width(self, width: Points) -> None:
        self.max_width = width

    def set_maximum_height(self, height: Points) -> None:
        self.max_height = height

    def set_first_line_indent(self, indent: Points) -> None:
        self.first_line_indent = indent

    def set_alignment(self, alignment: ParagraphAlignment) -> None:
        self.alignment = alignment

    def set_overflow(self, overflow: OverflowBehaviour) -> None:
        self.overflow = overflow

    def describe(self) -> List[str]:
        return [f"{index}: {describe_fragment(f)}" for index, f in enumerate(self.fragments)]

    def to_lines(
        self,
        measure: Optional[MeasureFunction] = None,
        config: Optional['EngineConfig'] = None,
    ) -> List[Line]:
        """
        Assemble the fragments into lines, honouring the current sizing,
        overflow, indent and alignment settings.
        """
        from processors.line_layout import layout_paragraph
        return layout_paragraph(self, measure, config)

    def as_group(
        self,
        document: Any,
        measure: Optional[MeasureFunction] = None,
        config: Optional['EngineConfig'] = None,
    ) -> Any:
        """
        Lay the paragraph out and generate new page objects for each line,
        collected into a single group created by the given document.

        Raises:
            FontUnresolvedError: If a font cannot be materialized in the document
        """
        from processors.line_layout import build_group
        return build_group(self, document, measure, config)
