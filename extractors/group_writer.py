"""
Paragraph Group Writer

The pikepdf side of outbound layout: creates the text objects a laid out
paragraph is made of, collects them into a group, and writes a group onto a
page as a new content stream.

Only the standard 14 fonts can be written, since they need no embedding;
any other font raises FontUnresolvedError.

Usage:
    >>> pdf = pikepdf.open('document.pdf')
    >>> document = PikepdfDocument(pdf)
    >>> group = paragraph.as_group(document)
    >>> document.write_group(group, page_index=0)
    >>> pdf.save('output.pdf')
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pdfminer.fontmetrics import FONT_METRICS
from pikepdf import Dictionary, Name, Operator, Pdf, String, unparse_content_stream

from constants.pdf_keys import (
    GENERATED_FONT_PREFIX,
    KEY_BASE_FONT,
    KEY_ENCODING,
    KEY_FONT,
    KEY_RESOURCES,
    KEY_SUBTYPE,
    KEY_TYPE,
    VAL_FONT,
    VAL_TYPE1,
    VAL_WIN_ANSI_ENCODING,
    WIN_ANSI_CODEC,
)
from constants.pdf_operators import (
    OP_BEGIN_TEXT,
    OP_CTM,
    OP_END_TEXT,
    OP_RESTORE_STATE,
    OP_SAVE_STATE,
    OP_SET_FONT,
    OP_SET_TEXT_MATRIX,
    OP_SET_WORD_SPACING,
    OP_SHOW_TEXT,
)
from extractors.page_objects import StandardFont
from models.paragraph_types import Points, Rect
from utils.validation import FontUnresolvedError

logger = logging.getLogger(__name__)


def resolve_standard_font(font: Any) -> StandardFont:
    """
    Map a font onto the standard 14 font of the same name.

    Raises:
        FontUnresolvedError: If the font is not a standard font
    """
    if isinstance(font, StandardFont):
        return font
    name = font.name() if font is not None else ""
    if name in FONT_METRICS:
        return StandardFont(name)
    raise FontUnresolvedError(name, "only the standard 14 fonts can be written without embedding")


class GeneratedTextObject:
    """A text object created for a paragraph, positioned by translation"""

    def __init__(self, content: str, font: Any, font_size: Points, standard_font: StandardFont):
        self.content = content
        self.font_ref = font
        self.font_size = font_size
        self.standard_font = standard_font
        self.x: Points = 0.0
        self.y: Points = 0.0

    def text(self) -> str:
        return self.content

    def font(self) -> Any:
        return self.font_ref

    def unscaled_font_size(self) -> Points:
        return self.font_size

    def translate(self, dx: Points, dy: Points) -> None:
        self.x += dx
        self.y += dy

    def bounds(self) -> Optional[Rect]:
        width = self.standard_font.measure(self.content, self.font_size)
        return Rect(left=self.x, bottom=self.y, right=self.x + width, top=self.y + self.font_size)

    def as_text_object(self) -> 'GeneratedTextObject':
        return self

    def object_handle(self) -> Any:
        return self

    @property
    def base_font(self) -> str:
        return self.standard_font.name()

    def __repr__(self) -> str:
        return f"GeneratedTextObject({self.content!r} at {self.x:.2f},{self.y:.2f})"


class PageObjectGroup:
    """The page objects generated for one paragraph"""

    def __init__(self, objects: Iterable[Any]):
        self.objects: List[Any] = list(objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self.objects)

    def text_objects(self) -> List[GeneratedTextObject]:
        return [o for o in self.objects if isinstance(o, GeneratedTextObject)]

    def bounds(self) -> Optional[Rect]:
        result = None
        for obj in self.objects:
            bounds = obj.bounds() if hasattr(obj, "bounds") else None
            if bounds is None:
                continue
            result = bounds if result is None else result.union(bounds)
        return result

    def text(self) -> str:
        return " ".join(o.text() for o in self.text_objects())


class PikepdfDocument:
    """Document collaborator backed by an open pikepdf.Pdf"""

    def __init__(self, pdf: Pdf):
        self.pdf = pdf

    def create_text_object(self, text: str, font: Any, font_size: Points) -> GeneratedTextObject:
        standard_font = resolve_standard_font(font)
        return GeneratedTextObject(text, font, font_size, standard_font)

    def create_group(self, objects: Iterable[Any]) -> PageObjectGroup:
        return PageObjectGroup(objects)

    def write_group(self, group: PageObjectGroup, page_index: int) -> int:
        return write_group(self.pdf, page_index, group)


def _register_fonts(pdf: Pdf, page_dict: Dictionary, base_fonts: Iterable[str]) -> Dict[str, Name]:
    """Add Type1 font resources for the given base fonts, reusing ones added earlier"""
    if KEY_RESOURCES not in page_dict:
        page_dict[KEY_RESOURCES] = Dictionary()
    resources = page_dict[KEY_RESOURCES]
    if KEY_FONT not in resources:
        resources[KEY_FONT] = Dictionary()
    font_dict = resources[KEY_FONT]

    existing: Dict[str, Name] = {}
    for key in font_dict.keys():
        if not key.startswith(GENERATED_FONT_PREFIX):
            continue
        font_obj = font_dict[key]
        if KEY_BASE_FONT in font_obj:
            existing[str(font_obj[KEY_BASE_FONT]).lstrip('/')] = Name(key)

    resource_names: Dict[str, Name] = {}
    counter = len(font_dict.keys())
    for base_font in sorted(set(base_fonts)):
        if base_font in existing:
            resource_names[base_font] = existing[base_font]
            continue

        key = f"{GENERATED_FONT_PREFIX}{counter}"
        while key in font_dict:
            counter += 1
            key = f"{GENERATED_FONT_PREFIX}{counter}"
        counter += 1

        font_dict[key] = pdf.make_indirect(Dictionary({
            KEY_TYPE: Name(VAL_FONT),
            KEY_SUBTYPE: Name(VAL_TYPE1),
            KEY_BASE_FONT: Name(f"/{base_font}"),
            KEY_ENCODING: Name(VAL_WIN_ANSI_ENCODING),
        }))
        resource_names[base_font] = Name(key)
        logger.debug(f"Registered font resource {key} for {base_font}")

    return resource_names


def write_group(pdf: Pdf, page_index: int, group: PageObjectGroup) -> int:
    """
    Append a content stream drawing the group's text objects to a page.

    Opaque objects in the group already live on their page and are left as they are.

    Returns:
        Number of text objects written
    """
    if page_index < 0 or page_index >= len(pdf.pages):
        raise IndexError(f"Page index {page_index} out of bounds (0-{len(pdf.pages) - 1})")

    page = pdf.pages[page_index]
    text_objects = group.text_objects()
    skipped = len(group) - len(text_objects)
    if skipped:
        logger.debug(f"Leaving {skipped} non-text object(s) in place")
    if not text_objects:
        return 0

    fonts = _register_fonts(pdf, page.obj, (o.base_font for o in text_objects))

    instructions = [([], Operator(OP_SAVE_STATE))]

    # Inherited from the page tree when the page has none of its own
    media_box = page.mediabox
    origin_x, origin_y = float(media_box[0]), float(media_box[1])
    if origin_x or origin_y:
        # Positions are relative to the MediaBox origin
        instructions.append(([1, 0, 0, 1, origin_x, origin_y], Operator(OP_CTM)))

    for obj in text_objects:
        encoded = obj.content.encode(WIN_ANSI_CODEC, errors='replace')
        instructions.extend([
            ([], Operator(OP_BEGIN_TEXT)),
            ([fonts[obj.base_font], obj.font_size], Operator(OP_SET_FONT)),
            ([0], Operator(OP_SET_WORD_SPACING)),
            ([1, 0, 0, 1, round(obj.x, 3), round(obj.y, 3)], Operator(OP_SET_TEXT_MATRIX)),
            ([String(encoded)], Operator(OP_SHOW_TEXT)),
            ([], Operator(OP_END_TEXT)),
        ])

    instructions.append(([], Operator(OP_RESTORE_STATE)))

    page.contents_add(pdf.make_stream(unparse_content_stream(instructions)), prepend=False)
    logger.info(f"Page {page_index + 1}: wrote {len(text_objects)} text object(s)")
    return len(text_objects)
