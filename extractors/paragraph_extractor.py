"""
PDF Paragraph Extractor

Reconstructs the paragraphs of a page range and renders them as plain
dictionaries for callers that persist or ship them as JSON.

Uses ParagraphEngine for all extraction operations.
"""

import logging
from typing import Any, Dict, List, Optional

from engine.config import EngineConfig, PageRange
from engine.paragraph_engine import ParagraphEngine
from models.paragraph import Paragraph
from models.paragraph_types import LineBreakFragment, OpaqueFragment, StyledFragment
from utils.validation import ParagraphEngineError, PdfValidationError

DEFAULT_START_PAGE = 1

logger = logging.getLogger(__name__)


def extract_paragraphs(
    file_path: str,
    start_page: int = DEFAULT_START_PAGE,
    end_page: Optional[int] = None,
    config: Optional[EngineConfig] = None
) -> List[List[Paragraph]]:
    """Extract paragraphs page by page; one list of paragraphs per page."""
    try:
        with ParagraphEngine(file_path, config=config) as engine:
            total_pages = engine.get_page_count()
            start_page = max(DEFAULT_START_PAGE, start_page)
            end_page = min(end_page, total_pages) if end_page is not None else total_pages

            if start_page > end_page:
                end_page = start_page

            logger.info(f"Processing PDF: {total_pages} total pages, extracting pages {start_page}-{end_page}")

            pages_data = engine.extract_range(PageRange(start=start_page, end=end_page))

            logger.info(f"Extraction complete: {len(pages_data)} pages processed successfully")
            return pages_data

    except ParagraphEngineError:
        raise
    except Exception as e:
        logger.error(f"Paragraph extraction failed: {e}", exc_info=True)
        raise PdfValidationError(f"Paragraph extraction failed: {str(e)}")


def fragment_to_dict(fragment: Any) -> Dict[str, Any]:
    if isinstance(fragment, StyledFragment):
        style = fragment.style
        return {
            'kind': fragment.kind,
            'text': fragment.text,
            'fontName': style.font_name,
            'fontSize': style.font_size,
            'allCaps': style.is_all_caps,
            'smallCaps': style.is_small_caps,
        }
    if isinstance(fragment, LineBreakFragment):
        return {'kind': fragment.kind, 'alignment': fragment.alignment.value}
    if isinstance(fragment, OpaqueFragment):
        handle = fragment.handle
        return {
            'kind': fragment.kind,
            'objectKind': getattr(handle, 'kind', None),
            'name': getattr(handle, 'name', None),
        }
    return {'kind': 'unknown'}


def paragraph_to_dict(paragraph: Paragraph) -> Dict[str, Any]:
    return {
        'text': paragraph.text(),
        'top': paragraph.top,
        'left': paragraph.left,
        'maxWidth': paragraph.max_width,
        'maxHeight': paragraph.max_height,
        'alignment': paragraph.alignment.value,
        'overflow': paragraph.overflow.value,
        'firstLineIndent': paragraph.first_line_indent,
        'fragments': [fragment_to_dict(f) for f in paragraph.fragments],
    }


def paragraphs_to_dicts(pages: List[List[Paragraph]]) -> List[List[Dict[str, Any]]]:
    """JSON-friendly rendering of extract_paragraphs() output."""
    return [[paragraph_to_dict(p) for p in page] for page in pages]
