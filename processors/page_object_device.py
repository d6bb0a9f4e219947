"""Page Object Device

PDFMiner device that turns a page's content stream into positioned page
objects: one text object per text-showing operation (a single, consistently
styled line fragment) plus opaque objects for images, painted paths and form
XObjects. Bounds are reported in PDF user space relative to the MediaBox,
with y growing upwards.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pdfminer.pdfdevice import PDFDevice
from pdfminer.pdffont import PDFUnicodeNotDefined
from pdfminer.pdfinterp import PDFResourceManager
from pdfminer.utils import apply_matrix_pt, mult_matrix

from extractors.page_objects import OpaquePageObject, PdfMinerFont, PdfMinerTextObject
from models.paragraph_types import Rect

logger = logging.getLogger(__name__)

DEFAULT_FONT_ASCENT = 0.75
DEFAULT_FONT_DESCENT = -0.25
INVALID_METRIC_THRESHOLD = 0.001
SCALING_PERCENTAGE_DIVISOR = 0.01
DISPLACEMENT_MULTIPLIER = 0.001
MIN_PATH_EXTENT = 0.1
UNIT_SQUARE = (0, 0, 1, 1)


def _bounding_rect(points: List[Tuple[float, float]]) -> Rect:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return Rect(left=min(xs), bottom=min(ys), right=max(xs), top=max(ys))


def _transform_box(matrix, box) -> Rect:
    x0, y0, x1, y1 = box
    corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
    return _bounding_rect([apply_matrix_pt(matrix, c) for c in corners])


class PageObjectDevice(PDFDevice):
    """
    Collects page objects in paint order.

    Content painted inside a form XObject is folded into a single opaque
    object for the form; image XObjects, which pdfminer also wraps in a
    figure, become a single opaque image object.
    """

    def __init__(self, rsrcmgr: PDFResourceManager, page_num: int = 1):
        super().__init__(rsrcmgr)
        self.page_num = page_num
        self.objects: List[Any] = []
        self.text_count = 0
        self._fonts: Dict[int, PdfMinerFont] = {}

        # (name, bounds, contains_image, saved ctm) per open figure
        self._figure_stack: List[Dict[str, Any]] = []

    def begin_page(self, page, ctm):
        logger.debug(f"Page {self.page_num}: begin_page called")
        self.objects = []
        self.text_count = 0
        self._figure_stack = []
        self.set_ctm(ctm)

    def end_page(self, page):
        logger.debug(f"Page {self.page_num}: collected {len(self.objects)} object(s)")

    def begin_figure(self, name, bbox, matrix):
        self._figure_stack.append({
            'name': name,
            'bounds': _transform_box(mult_matrix(matrix, self.ctm), bbox),
            'is_image_wrapper': tuple(bbox) == UNIT_SQUARE,
            'contains_image': False,
            'ctm': self.ctm,
        })

    def end_figure(self, name):
        if not self._figure_stack:
            return
        figure = self._figure_stack.pop()
        self.ctm = figure['ctm']

        if self._figure_stack:
            # Nested figures are part of the outermost one
            return

        kind = "image" if figure['is_image_wrapper'] and figure['contains_image'] else "form"
        self._add_opaque(kind, figure['name'], figure['bounds'])

    def render_image(self, name, stream):
        if self._figure_stack:
            self._figure_stack[-1]['contains_image'] = True
            return
        # Images are always wrapped in a figure by the interpreter; keep a fallback anyway
        self._add_opaque("image", name, _transform_box(self.ctm, UNIT_SQUARE))

    def paint_path(self, gstate, stroke, fill, evenodd, path):
        if not stroke and not fill:
            return
        if self._figure_stack:
            return

        points = []
        for segment in path:
            coords = segment[1:]
            if segment[0] == 're':
                x, y, w, h = coords
                coords = (x, y, x + w, y + h)
            points.extend(
                apply_matrix_pt(self.ctm, (coords[i], coords[i + 1]))
                for i in range(0, len(coords) - 1, 2)
            )
        if not points:
            return

        rect = _bounding_rect(points)
        if rect.width < MIN_PATH_EXTENT and rect.height < MIN_PATH_EXTENT:
            return

        self._add_opaque("path", "", rect, stroke=bool(stroke), fill=bool(fill))

    def render_string(self, textstate, seq, ncs, graphicstate):
        """Handle text rendering (Tj/TJ operators)"""
        font = textstate.font
        if font is None:
            return

        fontsize = textstate.fontsize
        scaling = textstate.scaling * SCALING_PERCENTAGE_DIVISOR
        charspace = textstate.charspace * scaling
        wordspace = textstate.wordspace * scaling
        if font.is_multibyte():
            wordspace = 0
        rise = textstate.rise

        matrix = mult_matrix(textstate.matrix, self.ctm)
        start_x, y = textstate.linematrix
        x = start_x
        chars: List[str] = []
        need_charspace = False

        for item in seq:
            if isinstance(item, (int, float)):
                x -= item * fontsize * scaling * DISPLACEMENT_MULTIPLIER
                need_charspace = True
                continue

            for cid in font.decode(item):
                if need_charspace:
                    x += charspace
                try:
                    chars.append(font.to_unichr(cid))
                except PDFUnicodeNotDefined:
                    logger.debug(f"No unicode mapping for cid {cid} in {font.fontname}")
                x += font.char_width(cid) * fontsize * scaling
                if cid == 32 and wordspace:
                    x += wordspace
                need_charspace = True

        # Keep the line matrix moving so later strings start where this one ended
        textstate.linematrix = (x, y)

        if self._figure_stack:
            return

        text = "".join(chars).strip()
        if not text:
            return

        ascent, descent = self._font_extents(font)
        bounds = _transform_box(
            matrix,
            (start_x, y + rise + descent * fontsize, x, y + rise + ascent * fontsize),
        )

        self.text_count += 1
        self.objects.append(PdfMinerTextObject(
            content=text,
            font_ref=self._wrap_font(font),
            font_size=fontsize,
            rect=bounds,
        ))

    # Stub methods for PDFDevice protocol
    def begin_tag(self, tag, props=None): pass
    def end_tag(self): pass
    def do_tag(self, tag, props=None): pass

    def _wrap_font(self, font) -> PdfMinerFont:
        key = id(font)
        if key not in self._fonts:
            self._fonts[key] = PdfMinerFont(font)
        return self._fonts[key]

    @staticmethod
    def _font_extents(font) -> Tuple[float, float]:
        """Ascent and descent as fractions of the font size, with fallbacks for broken metrics"""
        ascent = font.get_ascent()
        descent = font.get_descent()
        if abs(ascent) < INVALID_METRIC_THRESHOLD:
            ascent = DEFAULT_FONT_ASCENT
        if abs(descent) < INVALID_METRIC_THRESHOLD:
            descent = DEFAULT_FONT_DESCENT
        return ascent, descent

    def _add_opaque(self, kind: str, name: Optional[Any], bounds: Rect, **metadata) -> None:
        if isinstance(name, bytes):
            name = name.decode('latin-1', errors='ignore')
        self.objects.append(OpaquePageObject(
            kind=kind,
            name=str(name or "").lstrip('/'),
            rect=bounds,
            metadata=metadata,
        ))
