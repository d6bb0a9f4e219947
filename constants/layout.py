"""
Paragraph Layout Constants

Tolerances and defaults shared by the paragraph builder and the line layout.
All lengths are in PDF points.
"""

# Two edges closer than this are considered aligned
ALIGNMENT_THRESHOLD = 2.0

# Inserted between coalesced runs of the same style
FRAGMENT_SEPARATOR = " "

# Line box height as a multiple of the largest font size on the line
DEFAULT_LINE_HEIGHT_RATIO = 1.2

DEFAULT_FONT_SIZE = 12.0

# Bisection limits for FixHeightExpandWidth
WIDTH_SEARCH_ITERATIONS = 40
WIDTH_SEARCH_TOLERANCE = 0.01

# Font descriptor /Flags bits (PDF 32000-1:2008, table 123)
FONT_FLAG_ALL_CAP = 1 << 16
FONT_FLAG_SMALL_CAP = 1 << 17
