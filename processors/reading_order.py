"""Reading-Order Sorting

Arranges positioned page objects in visual reading order (top to bottom, then
left to right within a line) irrespective of their order in the content
stream, and measures the extents of the whole bag of objects on the way.

The pairwise comparator is not a strict weak order when lines do not overlap
cleanly. Python's sort is stable, so pairs the comparator cannot separate keep
their input order; documents written left to right usually emit objects in
reading order, which makes input order the best available tie-breaker.
"""

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, List, Optional

from models.paragraph_types import Points, Rect

logger = logging.getLogger(__name__)


@dataclass
class PositionedObject:
    """A page object together with the bounds it was sorted by."""
    top: Points
    bottom: Points
    left: Points
    right: Points
    obj: Any

    @property
    def height(self) -> Points:
        return self.top - self.bottom

    @property
    def width(self) -> Points:
        return self.right - self.left


@dataclass
class SortedObjects:
    """Objects in reading order plus the bounding extents of the whole bag."""
    objects: List[PositionedObject] = field(default_factory=list)
    left: Points = 0.0
    right: Points = 0.0
    top: Points = 0.0
    bottom: Points = 0.0


def object_bounds(obj: Any) -> Rect:
    """Bounds of a page object, or the zero rect when it has none."""
    bounds: Optional[Rect] = obj.bounds()
    if bounds is None:
        logger.debug(f"Object {obj!r} has no bounds, treating it as placed at the origin")
        return Rect.zero()
    return bounds


def position_object(obj: Any) -> PositionedObject:
    bounds = object_bounds(obj)
    return PositionedObject(
        top=bounds.top,
        bottom=bounds.bottom,
        left=bounds.left,
        right=bounds.right,
        obj=obj,
    )


def compare_reading_order(a: PositionedObject, b: PositionedObject) -> int:
    """Negative if a is read before b, positive if after, zero if undecidable."""
    if b.top < a.bottom:
        # a sits on a line higher up the page than b
        return -1
    if a.top < b.bottom:
        # a sits on a line lower down the page than b
        return 1

    # Same visual line
    if a.right < b.left:
        return -1
    if b.right < a.left:
        return 1

    # Horizontally overlapping on the same line: keep input order
    return 0


def sort_reading_order(objects: List[Any]) -> SortedObjects:
    """
    Sort page objects into reading order.

    Args:
        objects: Page objects exposing bounds()

    Returns:
        SortedObjects with the ordered objects and the extents of the bag
    """
    positioned = [position_object(obj) for obj in objects]
    if not positioned:
        return SortedObjects()

    ordered = sorted(positioned, key=cmp_to_key(compare_reading_order))

    return SortedObjects(
        objects=ordered,
        left=min(p.left for p in positioned),
        right=max(p.right for p in positioned),
        top=max(p.top for p in positioned),
        bottom=min(p.bottom for p in positioned),
    )
