"""
Paragraph engine settings.

Tolerances for reconstruction, defaults for layout, limits for input files and
the logging level, kept in dataclasses that round-trip through plain dicts so
callers can store them as JSON.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from constants.layout import (
    ALIGNMENT_THRESHOLD,
    DEFAULT_LINE_HEIGHT_RATIO,
    FRAGMENT_SEPARATOR,
)
from models.paragraph_types import OverflowBehaviour
from utils.validation import DEFAULT_MAX_FILE_SIZE_MB

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EngineConfig:
    """
    Settings shared by the builder, the line layout and the engine.

    Example:
        >>> config = EngineConfig(alignment_threshold=3.0)
        >>> paragraphs = Paragraph.from_objects(objects, config=config)
    """

    # Reconstruction
    alignment_threshold: float = ALIGNMENT_THRESHOLD
    fragment_separator: str = FRAGMENT_SEPARATOR

    # Layout
    default_overflow: OverflowBehaviour = OverflowBehaviour.FIX_WIDTH_EXPAND_HEIGHT
    line_height_ratio: float = DEFAULT_LINE_HEIGHT_RATIO

    # Input files
    validate_on_open: bool = True
    max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB

    # Logging
    log_level: str = "INFO"
    enable_debug_logging: bool = False

    def validation_errors(self) -> List[str]:
        errors = []
        if self.alignment_threshold <= 0:
            errors.append("alignment_threshold must be positive")
        if not self.fragment_separator:
            errors.append("fragment_separator must not be empty")
        if self.line_height_ratio <= 0:
            errors.append("line_height_ratio must be positive")
        if self.max_file_size_mb < 1:
            errors.append("max_file_size_mb must be at least 1 MB")
        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'")
        return errors

    def validate(self) -> bool:
        """Log every invalid setting; True when there are none."""
        errors = self.validation_errors()
        for error in errors:
            logger.error(error)
        return not errors

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['default_overflow'] = self.default_overflow.value
        return data

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'EngineConfig':
        """Build a config from a dict, ignoring (and warning about) unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config key(s): {', '.join(unknown)}")

        values = {key: value for key, value in config.items() if key in known}
        if 'default_overflow' in values:
            values['default_overflow'] = OverflowBehaviour(values['default_overflow'])
        return cls(**values)

    @classmethod
    def default(cls) -> 'EngineConfig':
        return cls()

    @property
    def effective_log_level(self) -> int:
        if self.enable_debug_logging:
            return logging.DEBUG
        return getattr(logging, self.log_level.upper())

    def __repr__(self) -> str:
        return (
            f"EngineConfig(threshold={self.alignment_threshold}, "
            f"overflow={self.default_overflow.value}, "
            f"line_height={self.line_height_ratio}, log={self.log_level})"
        )


@dataclass
class PageRange:
    """
    Inclusive range of 1-based page numbers; `end=None` runs to the last page.

    Example:
        >>> PageRange(start=2, end=5).to_page_numbers(10)
        [2, 3, 4, 5]
    """

    start: int
    end: Optional[int] = None

    def __post_init__(self):
        if self.start < 1:
            raise ValueError(f"Page numbers start at 1, got start={self.start}")
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Empty page range: end={self.end} is before start={self.start}")

    def to_page_numbers(self, total_pages: int) -> List[int]:
        """Page numbers of the range that exist in a document of `total_pages` pages."""
        last = total_pages if self.end is None else min(self.end, total_pages)
        return list(range(self.start, last + 1))

    @classmethod
    def all_pages(cls) -> 'PageRange':
        return cls(start=1)

    @classmethod
    def single_page(cls, page_num: int) -> 'PageRange':
        return cls(start=page_num, end=page_num)

    def __repr__(self) -> str:
        if self.end is None:
            return f"PageRange({self.start}-end)"
        if self.start == self.end:
            return f"PageRange(page {self.start})"
        return f"PageRange({self.start}-{self.end})"
