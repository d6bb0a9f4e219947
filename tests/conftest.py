"""Pytest configuration and shared fixtures for paragraph engine tests.

This module provides:
- Fake collaborators (font, text object, opaque object, document)
- Factories for positioned text objects
- Helpers for generating small PDF files with pikepdf
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest

# Ensure project root is importable when running tests via python -m pytest
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from models.paragraph_types import Rect  # noqa: E402
from utils.validation import FontUnresolvedError  # noqa: E402

# Every glyph of a fake font is half an em wide
FAKE_GLYPH_WIDTH = 0.5


# ==================== Fake Collaborators ====================


class FakeFont:
    """Monospaced font whose glyphs are all half an em wide."""

    def __init__(self, name: str = "FakeSans", handle: Any = None, all_caps: bool = False, small_caps: bool = False):
        self._name = name
        self._handle = handle if handle is not None else name
        self._all_caps = all_caps
        self._small_caps = small_caps

    def handle(self) -> Any:
        return self._handle

    def name(self) -> str:
        return self._name

    def is_all_caps(self) -> bool:
        return self._all_caps

    def is_small_caps(self) -> bool:
        return self._small_caps

    def measure(self, text: str, font_size: float) -> float:
        return len(text) * font_size * FAKE_GLYPH_WIDTH


class FakeTextObject:
    """Positioned text object; rect=None simulates an object without bounds."""

    def __init__(self, text: str, rect: Optional[tuple], font: FakeFont, size: float = 12.0):
        self._text = text
        self._rect = Rect(left=rect[0], bottom=rect[1], right=rect[2], top=rect[3]) if rect else None
        self._font = font
        self._size = size

    def bounds(self) -> Optional[Rect]:
        return self._rect

    def as_text_object(self) -> "FakeTextObject":
        return self

    def object_handle(self) -> Any:
        return self

    def text(self) -> str:
        return self._text

    def font(self) -> FakeFont:
        return self._font

    def unscaled_font_size(self) -> float:
        return self._size

    def __repr__(self) -> str:
        return f"FakeTextObject({self._text!r})"


class FakeOpaqueObject:
    """Non-text page object such as an image."""

    def __init__(self, rect: Optional[tuple], name: str = "image"):
        self.name = name
        self._rect = Rect(left=rect[0], bottom=rect[1], right=rect[2], top=rect[3]) if rect else None

    def bounds(self) -> Optional[Rect]:
        return self._rect

    def as_text_object(self) -> None:
        return None

    def object_handle(self) -> Any:
        return self


class FakeNewTextObject:
    """Text object created by FakeDocument; records its translation."""

    def __init__(self, text: str, font: Any, font_size: float):
        self._text = text
        self._font = font
        self._size = font_size
        self.x = 0.0
        self.y = 0.0

    def text(self) -> str:
        return self._text

    def font(self) -> Any:
        return self._font

    def unscaled_font_size(self) -> float:
        return self._size

    def translate(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy


class FakeDocument:
    """Document collaborator that refuses fonts named in `unresolvable`."""

    def __init__(self, unresolvable: Optional[List[str]] = None):
        self.unresolvable = set(unresolvable or [])
        self.created: List[FakeNewTextObject] = []

    def create_text_object(self, text: str, font: Any, font_size: float) -> FakeNewTextObject:
        if font.name() in self.unresolvable:
            raise FontUnresolvedError(font.name())
        obj = FakeNewTextObject(text, font, font_size)
        self.created.append(obj)
        return obj

    def create_group(self, objects) -> List[Any]:
        return list(objects)


# ==================== Fixtures ====================


@pytest.fixture
def font() -> FakeFont:
    """Default fake font."""
    return FakeFont()


@pytest.fixture
def other_font() -> FakeFont:
    """A second, distinct fake font."""
    return FakeFont(name="FakeSerif")


@pytest.fixture
def make_text(font):
    """Factory for positioned text objects in the default font.

    Usage: make_text("Hello", (left, bottom, right, top), size=12.0)
    """
    def _make(text: str, rect: Optional[tuple], size: float = 12.0, text_font: Optional[FakeFont] = None):
        return FakeTextObject(text, rect, text_font or font, size)
    return _make


@pytest.fixture
def fake_document() -> FakeDocument:
    return FakeDocument()


@pytest.fixture
def sample_pdf(tmp_path) -> Path:
    """One-page PDF with a two-word line and a separate line below it, in Helvetica."""
    import pikepdf
    from pikepdf import Dictionary, Name

    pdf = pikepdf.new()
    page = pdf.add_blank_page(page_size=(612, 792))
    page.obj.Resources = Dictionary(
        Font=Dictionary(
            F1=Dictionary(Type=Name.Font, Subtype=Name.Type1, BaseFont=Name.Helvetica)
        )
    )
    page.obj.Contents = pdf.make_stream(
        b"BT /F1 12 Tf 72 700 Td (Hello) Tj ET\n"
        b"BT /F1 12 Tf 110 700 Td (world) Tj ET\n"
        b"BT /F1 12 Tf 72 600 Td (Second) Tj ET\n"
        b"0 0 1 rg 300 300 50 40 re f\n"
    )

    path = tmp_path / "sample.pdf"
    pdf.save(path)
    pdf.close()
    return path
