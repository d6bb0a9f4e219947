"""
Page Object Adapters

Wraps what pdfminer reports for a page into the page object, text object and
font interfaces the paragraph engine consumes.

Usage:
    >>> objects = load_page_objects('document.pdf', 0)
    >>> paragraphs = Paragraph.from_objects(objects)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pdfplumber
from pdfminer.fontmetrics import FONT_METRICS
from pdfminer.pdfinterp import PDFPageInterpreter, PDFResourceManager
from pdfminer.pdftypes import resolve1

from constants.layout import FONT_FLAG_ALL_CAP, FONT_FLAG_SMALL_CAP
from models.paragraph_types import Points, Rect

logger = logging.getLogger(__name__)

DEFAULT_GLYPH_WIDTH = 500
GLYPH_SPACE_UNITS = 1000.0


def strip_subset_prefix(font_name: str) -> str:
    """Drop the six-letter subset tag from names like 'ABCDEF+Helvetica'."""
    prefix, plus, rest = font_name.partition("+")
    if plus and len(prefix) == 6 and prefix.isupper():
        return rest
    return font_name


def _descriptor_flags(descriptor: Optional[Dict[str, Any]]) -> int:
    if not descriptor:
        return 0
    try:
        return int(resolve1(descriptor.get("Flags", 0)) or 0)
    except (TypeError, ValueError):
        return 0


class PdfMinerFont:
    """A font loaded by pdfminer from a document's resources"""

    def __init__(self, font: Any):
        self._font = font

    @property
    def pdfminer_font(self) -> Any:
        return self._font

    def handle(self) -> int:
        # pdfminer's resource manager caches fonts, so a font resource maps to one object
        return id(self._font)

    def name(self) -> str:
        fontname = getattr(self._font, "fontname", None)
        if fontname is None:
            return ""
        if isinstance(fontname, bytes):
            fontname = fontname.decode("latin-1", errors="replace")
        return strip_subset_prefix(str(fontname))

    def is_all_caps(self) -> bool:
        return bool(_descriptor_flags(getattr(self._font, "descriptor", None)) & FONT_FLAG_ALL_CAP)

    def is_small_caps(self) -> bool:
        return bool(_descriptor_flags(getattr(self._font, "descriptor", None)) & FONT_FLAG_SMALL_CAP)

    def measure(self, text: str, font_size: Points) -> Points:
        return self._font.string_width(text.encode("latin-1", errors="replace")) * font_size

    def __repr__(self) -> str:
        return f"PdfMinerFont({self.name()!r})"


class StandardFont:
    """One of the standard 14 fonts, measured with the AFM metrics bundled with pdfminer"""

    def __init__(self, name: str):
        if name not in FONT_METRICS:
            raise ValueError(f"'{name}' is not one of the standard 14 fonts")
        self._name = name
        self._descriptor, self._widths = FONT_METRICS[name]

    def handle(self) -> tuple:
        return ("standard", self._name)

    def name(self) -> str:
        return self._name

    def is_all_caps(self) -> bool:
        return bool(_descriptor_flags(self._descriptor) & FONT_FLAG_ALL_CAP)

    def is_small_caps(self) -> bool:
        return bool(_descriptor_flags(self._descriptor) & FONT_FLAG_SMALL_CAP)

    def measure(self, text: str, font_size: Points) -> Points:
        units = sum(self._widths.get(char, DEFAULT_GLYPH_WIDTH) for char in text)
        return units * font_size / GLYPH_SPACE_UNITS

    def __eq__(self, other: object) -> bool:
        return isinstance(other, StandardFont) and other._name == self._name

    def __hash__(self) -> int:
        return hash(self.handle())

    def __repr__(self) -> str:
        return f"StandardFont({self._name!r})"


@dataclass(eq=False)
class PdfMinerTextObject:
    """A single text-showing operation: one line of consistently styled text"""
    content: str
    font_ref: Any
    font_size: Points
    rect: Rect

    def bounds(self) -> Optional[Rect]:
        return self.rect

    def as_text_object(self) -> 'PdfMinerTextObject':
        return self

    def object_handle(self) -> Any:
        return self

    def text(self) -> str:
        return self.content

    def font(self) -> Any:
        return self.font_ref

    def unscaled_font_size(self) -> Points:
        return self.font_size


@dataclass(eq=False)
class OpaquePageObject:
    """An image, path or form XObject carried through paragraphs untouched"""
    kind: str
    name: str = ""
    rect: Optional[Rect] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def bounds(self) -> Optional[Rect]:
        return self.rect

    def as_text_object(self) -> None:
        return None

    def object_handle(self) -> Any:
        return self


def load_page_objects(file_path: str, page_index: int) -> List[Any]:
    """
    Interpret one page and return its text and non-text objects in content stream order.

    Args:
        file_path: Path to the PDF file
        page_index: 0-based page index

    Returns:
        List of PdfMinerTextObject and OpaquePageObject

    Raises:
        IndexError: If the page does not exist
    """
    with pdfplumber.open(file_path) as pdf:
        return interpret_page(pdf, page_index)


def interpret_page(pdf: Any, page_index: int) -> List[Any]:
    """Run pdfminer's interpreter over a page of an open pdfplumber document."""
    from processors.page_object_device import PageObjectDevice

    if page_index < 0 or page_index >= len(pdf.pages):
        raise IndexError(f"Page index {page_index} out of bounds (0-{len(pdf.pages) - 1})")

    plumber_page = pdf.pages[page_index]
    rsrcmgr = PDFResourceManager(caching=True)
    device = PageObjectDevice(rsrcmgr, page_num=page_index + 1)
    interpreter = PDFPageInterpreter(rsrcmgr, device)
    interpreter.process_page(plumber_page.page_obj)

    logger.debug(
        f"Page {page_index + 1}: {device.text_count} text object(s), "
        f"{len(device.objects) - device.text_count} other object(s)"
    )
    return device.objects
