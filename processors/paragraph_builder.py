"""Paragraph Reconstruction

Recovers logical paragraphs from a flat bag of positioned page objects. Objects
are sorted into reading order, split into visual lines, stitched into line
records (coalescing runs of equally styled text) and finally segmented into
paragraphs wherever a line's alignment changes or a vertical gap larger than
one line height separates it from the line above.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from engine.config import EngineConfig
from models.paragraph import Paragraph
from models.paragraph_types import (
    Fragment,
    Line,
    LineAlignment,
    LineBreakFragment,
    OpaqueFragment,
    ParagraphAlignment,
    Points,
    StyledFragment,
)
from processors.alignment import classify_line_alignment
from processors.reading_order import PositionedObject, SortedObjects, sort_reading_order

logger = logging.getLogger(__name__)


@dataclass
class VisualLine:
    """Objects sharing one visual line, with the extents of the whole line"""
    objects: List[PositionedObject] = field(default_factory=list)

    @property
    def left(self) -> Points:
        return min(o.left for o in self.objects)

    @property
    def right(self) -> Points:
        return max(o.right for o in self.objects)

    @property
    def top(self) -> Points:
        return max(o.top for o in self.objects)

    @property
    def bottom(self) -> Points:
        return min(o.bottom for o in self.objects)


@dataclass
class LineRecord:
    """Mutable line under construction; frozen into a Line once closed"""
    alignment: LineAlignment
    left: Points
    bottom: Points
    top: Points
    right: Points
    fragments: List[Fragment] = field(default_factory=list)

    def extend_bounds(self, obj: PositionedObject) -> None:
        self.left = min(self.left, obj.left)
        self.bottom = min(self.bottom, obj.bottom)
        self.top = max(self.top, obj.top)
        self.right = max(self.right, obj.right)

    def close(self) -> Line:
        return Line(
            alignment=self.alignment,
            bottom=self.bottom,
            left=self.left,
            width=self.right - self.left,
            height=self.top - self.bottom,
            fragments=self.fragments,
        )


class ParagraphBuilder:
    """Builds paragraphs from page objects based on their geometry and styling"""

    def __init__(self, objects: List[Any], config: Optional[EngineConfig] = None):
        self.objects = objects
        self.config = config or EngineConfig.default()
        self.sorted: SortedObjects = SortedObjects()
        self.visual_lines: List[VisualLine] = []
        self.lines: List[Line] = []

    def build(self) -> List[Paragraph]:
        """Run sorting, line assembly and segmentation"""
        self.sorted = sort_reading_order(self.objects)
        if not self.sorted.objects:
            return []

        self.visual_lines = self._split_visual_lines(self.sorted.objects)
        self.lines = self._assemble_lines(self.visual_lines)
        paragraphs = self._segment(self.lines)

        logger.debug(
            f"Built {len(paragraphs)} paragraph(s) from {len(self.objects)} object(s) "
            f"in {len(self.visual_lines)} visual line(s)"
        )
        return paragraphs

    def _split_visual_lines(self, ordered: List[PositionedObject]) -> List[VisualLine]:
        """Start a new visual line on a leftward jump or when an object sits wholly below the last one"""
        visual_lines: List[VisualLine] = []
        last: Optional[PositionedObject] = None

        for obj in ordered:
            if last is None or obj.left < last.left or obj.top < last.bottom:
                visual_lines.append(VisualLine())
            visual_lines[-1].objects.append(obj)
            last = obj

        return visual_lines

    def _assemble_lines(self, visual_lines: List[VisualLine]) -> List[Line]:
        threshold = self.config.alignment_threshold
        lines: List[Line] = []
        record: Optional[LineRecord] = None
        previous: Optional[VisualLine] = None

        for visual_line in visual_lines:
            alignment = classify_line_alignment(
                previous.left if previous else None,
                previous.right if previous else None,
                visual_line.left,
                visual_line.right,
                self.sorted.left,
                self.sorted.right,
                threshold,
            )

            if record is None:
                logger.debug(f"Starting first line with alignment {alignment.value}")
                record = self._new_record(alignment, visual_line)
            else:
                last_object = previous.objects[-1]
                gap_exceeded = last_object.bottom - last_object.height > visual_line.top

                if alignment != record.alignment or gap_exceeded:
                    logger.debug(
                        f"Starting a new line with alignment {alignment.value} "
                        f"(previous {record.alignment.value}, gap exceeded: {gap_exceeded})"
                    )
                    lines.append(record.close())
                    closed_alignment = record.alignment
                    record = self._new_record(alignment, visual_line)
                    record.fragments.append(LineBreakFragment(alignment=closed_alignment))
                else:
                    logger.debug("Carriage return")

            for obj in visual_line.objects:
                record.extend_bounds(obj)
                self._emit_fragment(record, obj.obj)

            previous = visual_line

        if record is not None:
            lines.append(record.close())

        return lines

    @staticmethod
    def _new_record(alignment: LineAlignment, visual_line: VisualLine) -> LineRecord:
        first = visual_line.objects[0]
        return LineRecord(
            alignment=alignment,
            left=first.left,
            bottom=first.bottom,
            top=first.top,
            right=first.right,
        )

    def _emit_fragment(self, record: LineRecord, obj: Any) -> None:
        """Append an object to the line, merging text into the tail fragment when styles match"""
        text_object = obj.as_text_object()
        if text_object is None:
            record.fragments.append(OpaqueFragment(handle=obj.object_handle()))
            return

        tail = record.fragments[-1] if record.fragments else None
        if isinstance(tail, StyledFragment):
            if tail.matches_object_style(text_object):
                logger.debug(
                    f"Styling matches, appending {text_object.text()!r} onto {tail.text!r}"
                )
                tail.append(text_object.text(), self.config.fragment_separator)
                return
            logger.debug(f"Styling differs, starting new fragment with {text_object.text()!r}")
        else:
            logger.debug(f"Starting new text fragment with {text_object.text()!r}")

        record.fragments.append(StyledFragment.from_text_object(text_object))

    def _segment(self, lines: List[Line]) -> List[Paragraph]:
        """Split line records into paragraphs at every line break fragment"""
        paragraphs: List[Paragraph] = []
        fragments: List[Fragment] = []
        members: List[Line] = []

        for line in lines:
            for fragment in line.fragments:
                if isinstance(fragment, LineBreakFragment):
                    self._flush(paragraphs, fragments, members)
                    fragments, members = [], []
                else:
                    fragments.append(fragment.model_copy())
            members.append(line)

        self._flush(paragraphs, fragments, members)
        return paragraphs

    def _flush(self, paragraphs: List[Paragraph], fragments: List[Fragment], members: List[Line]) -> None:
        if not fragments or not members:
            return

        top = max(line.bottom + line.height for line in members)
        bottom = min(line.bottom for line in members)
        paragraph = Paragraph(
            fragments=fragments,
            top=top,
            left=min(line.left for line in members),
            max_width=max(line.width for line in members),
            max_height=top - bottom,
            overflow=self.config.default_overflow,
            alignment=ParagraphAlignment.from_line_alignment(members[0].alignment),
        )
        logger.debug(
            f"Closed paragraph {len(paragraphs)}: {len(fragments)} fragment(s), "
            f"alignment {paragraph.alignment.value}"
        )
        paragraphs.append(paragraph)


def build_paragraphs(objects: List[Any], config: Optional[EngineConfig] = None) -> List[Paragraph]:
    """Reconstruct paragraphs from page objects

    Args:
        objects: Page objects exposing bounds(), as_text_object() and object_handle()
        config: Engine configuration; defaults are used when omitted

    Returns:
        Paragraphs in reading order; empty when there are no objects
    """
    if not objects:
        return []

    return ParagraphBuilder(objects, config).build()
