"""Tests for the Paragraph editing API."""

from models.paragraph import Paragraph
from models.paragraph_types import (
    LineAlignment,
    LineBreakFragment,
    OpaqueFragment,
    OverflowBehaviour,
    ParagraphAlignment,
    StyledFragment,
)
from tests.conftest import FakeOpaqueObject


class TestPush:
    """Tests for pushing styled strings."""

    def test_push_merges_matching_styles(self, font):
        paragraph = Paragraph()
        paragraph.push(StyledFragment.new("Hello", font, 12))
        paragraph.push(StyledFragment.new("world", font, 12))

        assert len(paragraph.fragments) == 1
        assert paragraph.fragments[0].text == "Hello world"

        paragraph.push(StyledFragment.new("big", font, 18))
        assert len(paragraph.fragments) == 2
        assert [f.font_size for f in paragraph.fragments] == [12, 18]

    def test_push_after_line_break_starts_new_fragment(self, font):
        paragraph = Paragraph()
        paragraph.push(StyledFragment.new("a", font, 12))
        paragraph.push_line_break()
        paragraph.push(StyledFragment.new("b", font, 12))
        assert len(paragraph.fragments) == 3

    def test_push_with_custom_separator(self, font):
        paragraph = Paragraph()
        paragraph.push(StyledFragment.new("a", font, 12))
        paragraph.push(StyledFragment.new("b", font, 12), separator="")
        assert paragraph.text() == "ab"

    def test_push_keeps_caller_fragment_unchanged(self, font):
        first = StyledFragment.new("Hello", font, 12)
        paragraph = Paragraph()
        paragraph.push(first)
        paragraph.push(StyledFragment.new("world", font, 12))

        assert paragraph.text() == "Hello world"
        assert first.text == "Hello"

    def test_paragraphs_do_not_share_pushed_fragments(self, font):
        shared = StyledFragment.new("A", font, 12)
        first, second = Paragraph(), Paragraph()
        first.push(shared)
        second.push(shared)
        first.push(StyledFragment.new("B", font, 12))

        assert first.text() == "A B"
        assert second.text() == "A"

    def test_push_object(self):
        image = FakeOpaqueObject((0, 0, 10, 10))
        paragraph = Paragraph()
        paragraph.push_object(image)
        assert isinstance(paragraph.fragments[0], OpaqueFragment)
        assert paragraph.fragments[0].handle is image


class TestText:
    """Tests for text extraction."""

    def test_text_with_line_break(self, font):
        paragraph = Paragraph(fragments=[
            StyledFragment.new("first", font, 12),
            LineBreakFragment(),
            StyledFragment.new("second", font, 12),
        ])
        assert paragraph.text() == "first\nsecond"
        assert paragraph.text_separated("|") == "first|second"

    def test_text_skips_opaque_objects(self, font):
        paragraph = Paragraph()
        paragraph.push(StyledFragment.new("before", font, 12))
        paragraph.push_object(FakeOpaqueObject(None))
        paragraph.push(StyledFragment.new("after", font, 12))
        assert paragraph.text() == "beforeafter"
        assert paragraph.text_separated(" ") == "before after"

    def test_empty(self):
        paragraph = Paragraph()
        assert paragraph.is_empty()
        assert paragraph.text() == ""
        assert paragraph.text_separated("|") == ""


class TestSettings:
    """Tests for sizing and formatting setters."""

    def test_empty_constructor(self):
        paragraph = Paragraph.empty(200, OverflowBehaviour.CLIP, ParagraphAlignment.CENTER)
        assert paragraph.is_empty()
        assert paragraph.maximum_width() == 200
        assert paragraph.overflow == OverflowBehaviour.CLIP
        assert paragraph.alignment == ParagraphAlignment.CENTER

    def test_setters(self):
        paragraph = Paragraph()
        assert paragraph.maximum_width() == 0.0

        paragraph.set_maximum_width(150)
        paragraph.set_maximum_height(40)
        paragraph.set_first_line_indent(12)
        paragraph.set_alignment(ParagraphAlignment.FORCE_JUSTIFY)
        paragraph.set_overflow(OverflowBehaviour.FIX_HEIGHT_EXPAND_WIDTH)

        assert paragraph.maximum_width() == 150
        assert paragraph.max_height == 40
        assert paragraph.first_line_indent == 12
        assert paragraph.alignment == ParagraphAlignment.FORCE_JUSTIFY
        assert paragraph.overflow == OverflowBehaviour.FIX_HEIGHT_EXPAND_WIDTH

    def test_describe(self, font):
        paragraph = Paragraph()
        paragraph.push(StyledFragment.new("Hello", font, 12))
        paragraph.push_line_break(LineAlignment.RIGHT_ALIGN)
        paragraph.push_object(object())

        description = paragraph.describe()
        assert len(description) == 3
        assert description[0].startswith("0: text 'Hello'")
        assert description[1] == "1: line break (right)"
        assert description[2] == "2: non-text object"
