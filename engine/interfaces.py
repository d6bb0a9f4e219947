"""
Collaborator protocols.

The paragraph engine never talks to a PDF library directly. Page objects,
fonts and the target document are consumed through these structural types,
so any object implementing the methods can be used, with or without
inheriting from anything.
"""

from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from models.paragraph_types import Points, Rect


@runtime_checkable
class Font(Protocol):
    """A font resource of a document."""

    def handle(self) -> Any:
        """Opaque identity, equality-comparable."""
        ...

    def name(self) -> str:
        ...

    def is_all_caps(self) -> bool:
        ...

    def is_small_caps(self) -> bool:
        ...

    def measure(self, text: str, font_size: Points) -> Points:
        """Advance width of the text set at the given size."""
        ...


@runtime_checkable
class TextObject(Protocol):
    """A single-line, consistently styled run of text."""

    def text(self) -> str:
        ...

    def font(self) -> Font:
        ...

    def unscaled_font_size(self) -> Points:
        ...


@runtime_checkable
class PageObject(Protocol):
    """Any object placed on a page."""

    def bounds(self) -> Optional[Rect]:
        ...

    def as_text_object(self) -> Optional[TextObject]:
        ...

    def object_handle(self) -> Any:
        """Stable identity used to carry non-text objects through a paragraph."""
        ...


@runtime_checkable
class NewTextObject(TextObject, Protocol):
    """A text object created by a document that can still be moved."""

    def translate(self, dx: Points, dy: Points) -> None:
        ...


@runtime_checkable
class Document(Protocol):
    """The document that receives newly generated page objects."""

    def create_text_object(self, text: str, font: Font, font_size: Points) -> NewTextObject:
        """
        Raises:
            FontUnresolvedError: If the font cannot be used in this document
        """
        ...

    def create_group(self, objects: Iterable[Any]) -> Any:
        ...
