"""
Paragraph Engine

Core engine module for reconstructing paragraphs from PDF page objects.
Contains the configuration, the collaborator protocols and the ParagraphEngine
document coordinator.
"""

__version__ = "0.1.0"

from engine.config import EngineConfig, PageRange
from engine.interfaces import Document, Font, NewTextObject, PageObject, TextObject
from engine.paragraph_engine import ParagraphEngine

__all__ = [
    'EngineConfig',
    'PageRange',
    'Document',
    'Font',
    'NewTextObject',
    'PageObject',
    'TextObject',
    'ParagraphEngine',
]
