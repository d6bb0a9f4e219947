"""Tests for generating page objects from a laid out paragraph."""

import pikepdf
import pytest

from extractors.group_writer import (
    GeneratedTextObject,
    PageObjectGroup,
    PikepdfDocument,
    resolve_standard_font,
    write_group,
)
from extractors.page_objects import StandardFont
from models.paragraph import Paragraph
from models.paragraph_types import OverflowBehaviour, ParagraphAlignment, StyledFragment
from tests.conftest import FakeDocument, FakeFont, FakeOpaqueObject
from utils.validation import FontUnresolvedError


def _paragraph(font, text="alpha beta gamma delta", alignment=ParagraphAlignment.LEFT_ALIGN):
    paragraph = Paragraph.empty(100, OverflowBehaviour.FIX_WIDTH_EXPAND_HEIGHT, alignment)
    paragraph.top = 100
    paragraph.left = 10
    paragraph.push(StyledFragment.new(text, font, 12))
    return paragraph


class TestBuildGroup:
    """Tests for as_group with a fake document."""

    def test_one_object_per_line(self, font, fake_document):
        group = _paragraph(font).as_group(fake_document)

        assert [o.text() for o in group] == ["alpha beta gamma", "delta"]
        assert [(o.x, o.y) for o in group] == [
            pytest.approx((10, 85.6)),
            pytest.approx((10, 71.2)),
        ]
        assert all(o.unscaled_font_size() == 12 for o in group)

    def test_justified_line_splits_words(self, font, fake_document):
        group = _paragraph(font, alignment=ParagraphAlignment.JUSTIFY).as_group(fake_document)

        assert [o.text() for o in group] == ["alpha", "beta", "gamma", "delta"]
        assert [o.x for o in group[:3]] == pytest.approx([10, 48, 80])
        assert group[3].x == pytest.approx(10)

    def test_style_change_splits_run(self, font, other_font, fake_document):
        paragraph = _paragraph(font, text="alpha")
        paragraph.push(StyledFragment.new("beta", other_font, 12))

        group = paragraph.as_group(fake_document)

        assert [o.text() for o in group] == ["alpha", "beta"]
        assert [o.font().name() for o in group] == ["FakeSans", "FakeSerif"]
        assert group[1].x == pytest.approx(46)

    def test_opaque_objects_pass_through(self, font, fake_document):
        image = FakeOpaqueObject((0, 0, 20, 10))
        paragraph = _paragraph(font, text="alpha")
        paragraph.push_object(image)
        paragraph.push(StyledFragment.new("beta", font, 12))

        group = paragraph.as_group(fake_document)

        assert len(group) == 3
        assert group[1] is image
        assert [o.text() for o in fake_document.created] == ["alpha", "beta"]

    def test_unresolved_font_propagates(self, font):
        document = FakeDocument(unresolvable=["FakeSans"])
        with pytest.raises(FontUnresolvedError) as excinfo:
            _paragraph(font).as_group(document)
        assert excinfo.value.font_name == "FakeSans"

    def test_empty_paragraph_gives_empty_group(self, fake_document):
        assert Paragraph(max_width=100).as_group(fake_document) == []


class TestStandardFonts:
    """Tests for mapping fonts onto the standard 14."""

    def test_standard_font_measures_with_afm_widths(self):
        helvetica = StandardFont("Helvetica")
        # Helvetica space is 278 units, "A" is 667
        assert helvetica.measure(" ", 10) == pytest.approx(2.78)
        assert helvetica.measure("A", 10) == pytest.approx(6.67)

    def test_unknown_standard_font_rejected(self):
        with pytest.raises(ValueError):
            StandardFont("Comic Sans")

    def test_resolve_by_name(self):
        assert resolve_standard_font(FakeFont("Times-Roman")) == StandardFont("Times-Roman")

    def test_resolve_non_standard_raises(self):
        with pytest.raises(FontUnresolvedError):
            resolve_standard_font(FakeFont("FakeSans"))


class TestPikepdfDocument:
    """Tests for writing generated groups into a PDF."""

    @pytest.fixture
    def pdf(self):
        pdf = pikepdf.new()
        pdf.add_blank_page(page_size=(612, 792))
        yield pdf
        pdf.close()

    def test_as_group_creates_generated_objects(self, pdf):
        document = PikepdfDocument(pdf)
        group = _paragraph(StandardFont("Helvetica")).as_group(document)

        assert isinstance(group, PageObjectGroup)
        assert len(group.text_objects()) == len(group)
        assert all(isinstance(o, GeneratedTextObject) for o in group)
        assert group.text().startswith("alpha")
        assert group.bounds() is not None

    def test_write_group_adds_content_stream(self, pdf):
        document = PikepdfDocument(pdf)
        group = _paragraph(StandardFont("Helvetica")).as_group(document)

        written = document.write_group(group, page_index=0)

        assert written == len(group)
        page = pdf.pages[0]
        operators = [str(op) for _, op in pikepdf.parse_content_stream(page)]
        assert operators.count("Tj") == written
        assert "Tf" in operators

        fonts = page.obj.Resources.Font
        base_fonts = [str(fonts[key].BaseFont) for key in fonts.keys()]
        assert base_fonts == ["/Helvetica"]

    def test_font_resource_reused_between_writes(self, pdf):
        document = PikepdfDocument(pdf)
        for _ in range(2):
            group = _paragraph(StandardFont("Helvetica")).as_group(document)
            document.write_group(group, page_index=0)
        assert len(list(pdf.pages[0].obj.Resources.Font.keys())) == 1

    def test_non_standard_font_raises(self, pdf):
        with pytest.raises(FontUnresolvedError):
            _paragraph(FakeFont("FakeSans")).as_group(PikepdfDocument(pdf))

    def test_bad_page_index(self, pdf):
        with pytest.raises(IndexError):
            write_group(pdf, 3, PageObjectGroup([]))
