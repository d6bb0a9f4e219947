"""
Paragraph Processing Components

Algorithms behind paragraph reconstruction and layout:

- sort_reading_order: Visual reading-order sort with bag extents
- classify_line_alignment: Edge-proximity line alignment inference
- ParagraphBuilder: Line assembly, fragment coalescing and segmentation
- LineLayout: Wrapping, overflow, alignment and group generation
- PageObjectDevice: PDFMiner device producing positioned page objects

These differ from utils/ which contains validation and logging helpers.
"""

from processors.reading_order import PositionedObject, SortedObjects, compare_reading_order, sort_reading_order
from processors.alignment import classify_line_alignment
from processors.paragraph_builder import ParagraphBuilder, build_paragraphs
from processors.line_layout import LineLayout, build_group, layout_paragraph
from processors.page_object_device import PageObjectDevice

__version__ = "0.1.0"
__all__ = [
    'PositionedObject',
    'SortedObjects',
    'compare_reading_order',
    'sort_reading_order',
    'classify_line_alignment',
    'ParagraphBuilder',
    'build_paragraphs',
    'LineLayout',
    'build_group',
    'layout_paragraph',
    'PageObjectDevice',
]
