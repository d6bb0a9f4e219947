"""
Pydantic models for paragraph reconstruction
Geometry, styling and fragment types shared by the builder and the line layout
"""

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from constants.layout import FRAGMENT_SEPARATOR
from utils.validation import FontUnresolvedError, MalformedFragmentError

# Length in PDF user space units (1/72 inch)
Points = float


class LineAlignment(str, Enum):
    """Paragraph-relative alignment of a single line"""
    NONE = "none"
    LEFT_ALIGN = "left"
    RIGHT_ALIGN = "right"
    CENTER = "center"
    JUSTIFY = "justify"


class ParagraphAlignment(str, Enum):
    """Line alignment behaviour of a whole paragraph"""
    LEFT_ALIGN = "left"
    RIGHT_ALIGN = "right"
    CENTER = "center"
    JUSTIFY = "justify"              # All lines except the last are justified
    FORCE_JUSTIFY = "force-justify"  # All lines, including the last, are justified

    @classmethod
    def from_line_alignment(cls, alignment: LineAlignment) -> 'ParagraphAlignment':
        """Map an inferred line alignment onto a paragraph alignment"""
        return {
            LineAlignment.NONE: cls.LEFT_ALIGN,
            LineAlignment.LEFT_ALIGN: cls.LEFT_ALIGN,
            LineAlignment.RIGHT_ALIGN: cls.RIGHT_ALIGN,
            LineAlignment.CENTER: cls.CENTER,
            LineAlignment.JUSTIFY: cls.JUSTIFY,
        }[alignment]


class OverflowBehaviour(str, Enum):
    """How a paragraph reacts when its content no longer fits its original bounds"""
    FIX_HEIGHT_EXPAND_WIDTH = "fix-height-expand-width"
    FIX_WIDTH_EXPAND_HEIGHT = "fix-width-expand-height"
    CLIP = "clip"


class Rect(BaseModel):
    """Axis-aligned rectangle in PDF user space (y grows upwards)"""
    left: Points
    bottom: Points
    right: Points
    top: Points

    @property
    def width(self) -> Points:
        return self.right - self.left

    @property
    def height(self) -> Points:
        return self.top - self.bottom

    @classmethod
    def zero(cls) -> 'Rect':
        return cls(left=0.0, bottom=0.0, right=0.0, top=0.0)

    def union(self, other: 'Rect') -> 'Rect':
        return Rect(
            left=min(self.left, other.left),
            bottom=min(self.bottom, other.bottom),
            right=max(self.right, other.right),
            top=max(self.top, other.top),
        )


class Style(BaseModel):
    """
    Font identity and size of a run of text.

    `font` keeps a reference to the collaborator font object used for measuring
    and for creating new text objects. It takes no part in serialization; style
    equivalence is decided by `matches()`, not by the font reference.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    font_handle: Any = None
    font_name: str = ""
    is_all_caps: bool = False
    is_small_caps: bool = False
    font_size: Points
    font: Optional[Any] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_font(cls, font: Any, font_size: Points) -> 'Style':
        return cls(
            font_handle=font.handle(),
            font_name=font.name() or "",
            is_all_caps=font.is_all_caps(),
            is_small_caps=font.is_small_caps(),
            font_size=font_size,
            font=font,
        )

    @classmethod
    def from_text_object(cls, text_object: Any) -> 'Style':
        return cls.from_font(text_object.font(), text_object.unscaled_font_size())

    def matches(self, other: 'Style') -> bool:
        """Return True if both styles use the same font at the same size."""
        if self.font_size != other.font_size:
            return False

        # Handles are cheap to compare, names only break ties between equal handles
        if self.font_handle != other.font_handle:
            return False

        if not self.font_name and not other.font_name:
            # Nothing left to tell the fonts apart
            return True

        return self.font_name == other.font_name


class StyledFragment(BaseModel):
    """A run of text sharing one style"""
    kind: Literal["styled"] = "styled"
    text: str
    style: Style

    @classmethod
    def new(cls, text: str, font: Any, font_size: Points) -> 'StyledFragment':
        """Create a fragment styled with a font that belongs to the caller."""
        return cls(text=text, style=Style.from_font(font, font_size))

    @classmethod
    def from_text_object(cls, text_object: Any) -> 'StyledFragment':
        return cls(text=text_object.text(), style=Style.from_text_object(text_object))

    @property
    def font(self) -> Any:
        return self.style.font

    @property
    def font_size(self) -> Points:
        return self.style.font_size

    def append(self, text: str, separator: str = FRAGMENT_SEPARATOR) -> None:
        """Append text, separated from the existing text unless it already ends with the separator."""
        if not self.text.endswith(separator):
            self.text += separator
        self.text += text

    def matches_style(self, other: 'StyledFragment') -> bool:
        return self.style.matches(other.style)

    def matches_object_style(self, text_object: Any) -> bool:
        return self.style.matches(Style.from_text_object(text_object))

    def as_text_object(self, document: Any) -> Any:
        """
        Create a new page text object from this fragment using the given document.

        Raises:
            FontUnresolvedError: If the font cannot be used in the target document
        """
        if self.style.font is None:
            raise FontUnresolvedError(self.style.font_name, "fragment carries no font")
        return document.create_text_object(self.text, self.style.font, self.style.font_size)


class LineBreakFragment(BaseModel):
    """Marks the end of a line; carries the alignment of the line it closes"""
    kind: Literal["line_break"] = "line_break"
    alignment: LineAlignment = LineAlignment.NONE


class OpaqueFragment(BaseModel):
    """A non-text page object placed inline, carried verbatim"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["opaque"] = "opaque"
    handle: Any


Fragment = Annotated[
    Union[StyledFragment, LineBreakFragment, OpaqueFragment],
    Field(discriminator="kind"),
]


def describe_fragment(fragment: Any) -> str:
    """One-line human readable summary of a fragment."""
    if isinstance(fragment, StyledFragment):
        return f"text {fragment.text!r} ({fragment.style.font_name or '?'} {fragment.style.font_size:g}pt)"
    if isinstance(fragment, LineBreakFragment):
        return f"line break ({fragment.alignment.value})"
    if isinstance(fragment, OpaqueFragment):
        return "non-text object"
    raise MalformedFragmentError(f"Unknown paragraph fragment: {fragment!r}")


class Line(BaseModel):
    """
    A span of fragments that make up one line.

    A line break fragment may only appear as the first fragment, where it marks
    the transition from the previous line.
    """
    model_config = ConfigDict(frozen=True)

    alignment: LineAlignment = LineAlignment.NONE
    bottom: Points = 0.0
    left: Points = 0.0
    width: Points = 0.0
    height: Points = 0.0
    word_spacing: Points = 0.0  # Extra space added to each interior gap when justified
    fragments: List[Fragment] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_line_break_position(self) -> 'Line':
        for index, fragment in enumerate(self.fragments):
            if isinstance(fragment, LineBreakFragment) and index != 0:
                raise ValueError("A line break fragment can only be the first fragment of a line")
        return self

    @property
    def right(self) -> Points:
        return self.left + self.width

    @property
    def top(self) -> Points:
        return self.bottom + self.height

    @property
    def starts_with_break(self) -> bool:
        return bool(self.fragments) and isinstance(self.fragments[0], LineBreakFragment)
