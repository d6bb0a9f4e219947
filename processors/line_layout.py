"""Paragraph Line Layout

Turns a paragraph back into positioned lines: words are wrapped greedily
inside the paragraph's maximum width, the overflow policy decides what happens
when content does not fit, and each line is then aligned and stacked downwards
from the paragraph's top edge. The same placement drives generation of new
page objects for a target document.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from constants.layout import (
    DEFAULT_FONT_SIZE,
    WIDTH_SEARCH_ITERATIONS,
    WIDTH_SEARCH_TOLERANCE,
)
from engine.config import EngineConfig
from models.paragraph import MeasureFunction, Paragraph
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
)
from utils.validation import FontUnresolvedError

logger = logging.getLogger(__name__)

WIDTH_EPSILON = 1e-6


def default_measure(style: Style, text: str) -> Points:
    """Measure text with the font carried by the style."""
    if style.font is None:
        raise FontUnresolvedError(style.font_name, "no font available to measure text")
    return style.font.measure(text, style.font_size)


@dataclass
class WordToken:
    text: str
    style: Style
    width: Points


@dataclass
class ObjectToken:
    handle: Any
    width: Points
    height: Points


Token = Union[WordToken, ObjectToken]


@dataclass
class LineDraft:
    """Tokens wrapped onto one line before it is positioned"""
    tokens: List[Token] = field(default_factory=list)
    leading_break: Optional[LineBreakFragment] = None
    ends_with_break: bool = False
    is_first: bool = False
    width: Points = 0.0


@dataclass
class PlacedToken:
    token: Token
    x: Points


@dataclass
class PlacedLine:
    line: Line
    tokens: List[PlacedToken] = field(default_factory=list)


def _object_size(handle: Any) -> tuple:
    bounds_method = getattr(handle, "bounds", None)
    if not callable(bounds_method):
        return 0.0, 0.0
    bounds = bounds_method()
    if bounds is None:
        return 0.0, 0.0
    return bounds.width, bounds.height


class LineLayout:
    """Lays a paragraph out into lines according to its sizing, overflow and alignment"""

    def __init__(
        self,
        paragraph: Paragraph,
        measure: Optional[MeasureFunction] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.paragraph = paragraph
        self.measure: MeasureFunction = measure or default_measure
        self.config = config or EngineConfig.default()
        self.tokens: List[Union[Token, LineBreakFragment]] = []
        self.width: Optional[Points] = paragraph.max_width
        self.placed: List[PlacedLine] = []

    def layout(self) -> List[Line]:
        self.tokens = self._tokenize(self.paragraph.fragments)
        if not self.tokens:
            self.placed = []
            return []

        policy = self.paragraph.overflow
        if policy == OverflowBehaviour.FIX_HEIGHT_EXPAND_WIDTH:
            self.width = self._expanded_width()
        else:
            self.width = self.paragraph.max_width

        drafts = self._wrap(self.width, clip=policy == OverflowBehaviour.CLIP)
        self.placed = self._position(drafts)

        logger.debug(
            f"Laid out {len(self.placed)} line(s) at width {self.width} "
            f"({policy.value}, {self.paragraph.alignment.value})"
        )
        return [placed.line for placed in self.placed]

    # --------------------------------------------------------------
    # Tokenizing and wrapping
    # --------------------------------------------------------------

    def _tokenize(self, fragments: List[Fragment]) -> List[Union[Token, LineBreakFragment]]:
        tokens: List[Union[Token, LineBreakFragment]] = []
        for fragment in fragments:
            if isinstance(fragment, StyledFragment):
                for word in self._split_words(fragment.text):
                    tokens.append(WordToken(word, fragment.style, self.measure(fragment.style, word)))
            elif isinstance(fragment, LineBreakFragment):
                tokens.append(fragment)
            elif isinstance(fragment, OpaqueFragment):
                width, height = _object_size(fragment.handle)
                tokens.append(ObjectToken(fragment.handle, width, height))
        return tokens

    def _split_words(self, text: str) -> List[str]:
        """Words of a run, broken at spaces and at the configured fragment separator"""
        words = text.split(" ")
        separator = self.config.fragment_separator
        if separator and separator != " ":
            words = [part for word in words for part in word.split(separator)]
        return [word for word in words if word]

    def _gap(self, previous: Token, current: Token) -> Points:
        """Space between two adjacent tokens on a line"""
        if isinstance(previous, WordToken):
            return self.measure(previous.style, " ")
        if isinstance(current, WordToken):
            return self.measure(current.style, " ")
        return 0.0

    def _wrap(self, width: Optional[Points], clip: bool = False) -> List[LineDraft]:
        indent = self.paragraph.first_line_indent
        drafts = [LineDraft(is_first=True)]

        for token in self.tokens:
            current = drafts[-1]

            if isinstance(token, LineBreakFragment):
                current.ends_with_break = True
                drafts.append(LineDraft(leading_break=token))
                continue

            if width is None:
                self._place(current, token)
                continue

            available = width - (indent if current.is_first else 0.0)

            if current.tokens:
                candidate = current.width + self._gap(current.tokens[-1], token) + token.width
                if candidate <= available + WIDTH_EPSILON:
                    self._place(current, token)
                    continue
                current = LineDraft()
                drafts.append(current)
                available = width

            if token.width > available + WIDTH_EPSILON:
                if clip:
                    token = self._clip_token(token, available)
                    if token is None:
                        continue
                else:
                    logger.warning(
                        f"Token of width {token.width:.2f} does not fit in {available:.2f}pt; "
                        f"the line will overflow"
                    )

            self._place(current, token)

        return drafts

    def _place(self, draft: LineDraft, token: Token) -> None:
        if draft.tokens:
            draft.width += self._gap(draft.tokens[-1], token)
        draft.tokens.append(token)
        draft.width += token.width

    def _clip_token(self, token: Token, available: Points) -> Optional[Token]:
        """Truncate a word character by character until it fits; objects are dropped"""
        if isinstance(token, ObjectToken):
            logger.debug(f"Clipping object of width {token.width:.2f}")
            return None

        text = token.text
        while text and self.measure(token.style, text) > available + WIDTH_EPSILON:
            text = text[:-1]
        if not text:
            return None
        return WordToken(text, token.style, self.measure(token.style, text))

    def _natural_width(self) -> Points:
        """Width of the widest hard-broken line when nothing wraps"""
        drafts = self._wrap(None)
        indent = self.paragraph.first_line_indent
        return max(d.width + (indent if d.is_first else 0.0) for d in drafts)

    def _expanded_width(self) -> Optional[Points]:
        """Widen the paragraph until its wrapped line count fits the original height"""
        width = self.paragraph.max_width
        max_height = self.paragraph.max_height
        if width is None or max_height is None:
            return width

        line_height = self._largest_font_size() * self.config.line_height_ratio
        max_lines = max(1, math.floor(max_height / line_height))

        if len(self._wrap(width)) <= max_lines:
            return width

        low, high = width, max(width, self._natural_width())
        if len(self._wrap(high)) > max_lines:
            # Hard breaks alone exceed the line limit
            return high

        for _ in range(WIDTH_SEARCH_ITERATIONS):
            if high - low <= WIDTH_SEARCH_TOLERANCE:
                break
            middle = (low + high) / 2
            if len(self._wrap(middle)) <= max_lines:
                high = middle
            else:
                low = middle

        logger.debug(f"Expanded width from {width:.2f} to {high:.2f} to fit {max_lines} line(s)")
        return high

    def _largest_font_size(self) -> Points:
        sizes = [t.style.font_size for t in self.tokens if isinstance(t, WordToken)]
        return max(sizes) if sizes else DEFAULT_FONT_SIZE

    # --------------------------------------------------------------
    # Positioning
    # --------------------------------------------------------------

    def _line_height(self, draft: LineDraft, fallback: Points) -> Points:
        sizes = [t.style.font_size for t in draft.tokens if isinstance(t, WordToken)]
        if sizes:
            return max(sizes) * self.config.line_height_ratio
        heights = [t.height for t in draft.tokens if isinstance(t, ObjectToken)]
        if heights and max(heights) > 0:
            return max(heights)
        return fallback * self.config.line_height_ratio

    def _position(self, drafts: List[LineDraft]) -> List[PlacedLine]:
        paragraph = self.paragraph
        top = paragraph.top if paragraph.top is not None else 0.0
        left = paragraph.left if paragraph.left is not None else 0.0
        indent = paragraph.first_line_indent
        clip = paragraph.overflow == OverflowBehaviour.CLIP
        floor = top - paragraph.max_height if paragraph.max_height is not None else None

        box_width = self.width
        if box_width is None:
            box_width = max(d.width + (indent if d.is_first else 0.0) for d in drafts)

        placed: List[PlacedLine] = []
        cursor = top
        fallback_size = self._largest_font_size()

        for index, draft in enumerate(drafts):
            height = self._line_height(draft, fallback_size)
            bottom = cursor - height

            if clip and floor is not None and placed and bottom < floor - WIDTH_EPSILON:
                logger.debug(f"Clipping {len(drafts) - index} line(s) below {floor:.2f}")
                break

            is_last = index == len(drafts) - 1
            line_indent = indent if draft.is_first else 0.0
            placed.append(self._align(draft, left + line_indent, box_width - line_indent, bottom, height, is_last))
            cursor = bottom

        return placed

    def _align(
        self,
        draft: LineDraft,
        origin: Points,
        available: Points,
        bottom: Points,
        height: Points,
        is_last: bool,
    ) -> PlacedLine:
        alignment = self.paragraph.alignment
        width = draft.width
        word_spacing = 0.0

        justify = alignment == ParagraphAlignment.FORCE_JUSTIFY or (
            alignment == ParagraphAlignment.JUSTIFY and not is_last and not draft.ends_with_break
        )

        if alignment == ParagraphAlignment.RIGHT_ALIGN:
            line_alignment = LineAlignment.RIGHT_ALIGN
            line_left = origin + available - width
        elif alignment == ParagraphAlignment.CENTER:
            line_alignment = LineAlignment.CENTER
            line_left = origin + (available - width) / 2
        elif justify and len(draft.tokens) > 1 and available > width:
            line_alignment = LineAlignment.JUSTIFY
            line_left = origin
            word_spacing = (available - width) / (len(draft.tokens) - 1)
            width = available
        else:
            line_alignment = LineAlignment.LEFT_ALIGN
            line_left = origin

        tokens: List[PlacedToken] = []
        x = line_left
        for position, token in enumerate(draft.tokens):
            if position > 0:
                x += self._gap(draft.tokens[position - 1], token) + word_spacing
            tokens.append(PlacedToken(token, x))
            x += token.width

        line = Line(
            alignment=line_alignment,
            bottom=bottom,
            left=line_left,
            width=width,
            height=height,
            word_spacing=word_spacing,
            fragments=self._line_fragments(draft),
        )
        return PlacedLine(line=line, tokens=tokens)

    def _line_fragments(self, draft: LineDraft) -> List[Fragment]:
        fragments: List[Fragment] = []
        if draft.leading_break is not None:
            fragments.append(draft.leading_break)

        for token in draft.tokens:
            if isinstance(token, ObjectToken):
                fragments.append(OpaqueFragment(handle=token.handle))
                continue
            tail = fragments[-1] if fragments else None
            if isinstance(tail, StyledFragment) and tail.style.matches(token.style):
                tail.append(token.text)
            else:
                fragments.append(StyledFragment(text=token.text, style=token.style))

        return fragments


def layout_paragraph(
    paragraph: Paragraph,
    measure: Optional[MeasureFunction] = None,
    config: Optional[EngineConfig] = None,
) -> List[Line]:
    """Assemble a paragraph's fragments into positioned lines"""
    return LineLayout(paragraph, measure, config).layout()


def build_group(
    paragraph: Paragraph,
    document: Any,
    measure: Optional[MeasureFunction] = None,
    config: Optional[EngineConfig] = None,
) -> Any:
    """
    Lay out a paragraph and generate page objects for it in the given document.

    Each run of equally styled words becomes one text object; on justified lines
    every word becomes its own object so the stretched spacing is preserved.
    Non-text objects are passed through untouched.

    Raises:
        FontUnresolvedError: If the document cannot materialize a font
    """
    layout = LineLayout(paragraph, measure, config)
    layout.layout()

    objects: List[Any] = []
    for placed in layout.placed:
        split_words = placed.line.word_spacing > 0
        run: List[PlacedToken] = []

        for item in placed.tokens:
            token = item.token
            if isinstance(token, ObjectToken):
                _flush_run(run, placed.line, document, objects)
                run = []
                objects.append(token.handle)
                continue

            if run and (split_words or not run[-1].token.style.matches(token.style)):
                _flush_run(run, placed.line, document, objects)
                run = []
            run.append(item)

        _flush_run(run, placed.line, document, objects)

    logger.debug(f"Generated {len(objects)} object(s) for {len(layout.placed)} line(s)")
    return document.create_group(objects)


def _flush_run(run: List[PlacedToken], line: Line, document: Any, objects: List[Any]) -> None:
    if not run:
        return
    first = run[0].token
    text = " ".join(item.token.text for item in run)
    text_object = StyledFragment(text=text, style=first.style).as_text_object(document)
    text_object.translate(run[0].x, line.bottom)
    objects.append(text_object)
