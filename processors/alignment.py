"""Line alignment inference from edge proximity."""

from typing import Optional

from constants.layout import ALIGNMENT_THRESHOLD
from models.paragraph_types import LineAlignment, Points


def is_near(x: Points, y: Points, threshold: float = ALIGNMENT_THRESHOLD) -> bool:
    return abs(x - y) < threshold


def classify_line_alignment(
    previous_left: Optional[Points],
    previous_right: Optional[Points],
    line_left: Points,
    line_right: Points,
    paragraph_left: Points,
    paragraph_right: Points,
    threshold: float = ALIGNMENT_THRESHOLD,
) -> LineAlignment:
    """
    Guess the alignment of a line from the edges it shares with the line above
    it, or with the paragraph bounds when there is no line above.

    Two lines sharing both edges can only be justified; a shared left edge with
    a ragged right is left aligned, and the mirror case right aligned. Anything
    else is presumed centered.
    """
    if previous_left is not None and previous_right is not None:
        reference_left, reference_right = previous_left, previous_right
    else:
        reference_left, reference_right = paragraph_left, paragraph_right

    aligned_left = is_near(reference_left, line_left, threshold)
    aligned_right = is_near(reference_right, line_right, threshold)

    if aligned_left and aligned_right:
        return LineAlignment.JUSTIFY
    if aligned_left:
        return LineAlignment.LEFT_ALIGN
    if aligned_right:
        return LineAlignment.RIGHT_ALIGN
    return LineAlignment.CENTER
