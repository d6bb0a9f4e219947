"""
Paragraph Engine - Document Coordinator

The ParagraphEngine manages the documents behind paragraph reconstruction:
pdfplumber (over pdfminer) to read page objects and pikepdf to write
generated paragraphs back out.

Usage:
    >>> from engine.paragraph_engine import ParagraphEngine
    >>> from engine.config import EngineConfig
    >>>
    >>> with ParagraphEngine('document.pdf', config=EngineConfig()) as engine:
    ...     paragraphs = engine.extract_paragraphs(0)
    ...     engine.write_paragraph(paragraphs[0], 0)
    ...     engine.save('edited.pdf')
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pdfplumber
import pikepdf

from engine.config import EngineConfig, PageRange
from extractors.group_writer import PageObjectGroup, PikepdfDocument
from extractors.page_objects import interpret_page
from models.paragraph import MeasureFunction, Paragraph
from utils.validation import PdfValidationError, comprehensive_pdf_validation

logger = logging.getLogger(__name__)


class ParagraphEngine:
    """
    Reads paragraphs from a PDF and writes laid out paragraphs back into it.

    Example:
        >>> with ParagraphEngine('document.pdf') as engine:
        ...     total_pages = engine.get_page_count()
    """

    def __init__(self, file_path: str, config: Optional[EngineConfig] = None):
        """
        Initialize the engine with a file path and optional configuration.

        Note: Documents are not opened until entering the context manager (__enter__).

        Args:
            file_path: Path to PDF file to process
            config: Engine configuration (uses defaults if None)

        Raises:
            FileNotFoundError: If file does not exist
            PdfValidationError: If configuration is invalid
        """
        self.file_path = file_path
        self.config = config or EngineConfig.default()

        if not os.path.exists(file_path):
            raise FileNotFoundError(f"PDF file not found: {file_path}")

        if not self.config.validate():
            raise PdfValidationError("Invalid engine configuration")

        # Resource handles (initialized in __enter__)
        self._pdfplumber_doc = None
        self._pikepdf_doc = None
        self._document: Optional[PikepdfDocument] = None
        self._is_open = False

        # Page objects by page index, read once per page
        self._page_objects: Dict[int, List[Any]] = {}

        self._page_count: Optional[int] = None
        self._file_size_mb: Optional[float] = None

        logger.debug(f"ParagraphEngine initialized for: {Path(file_path).name}")

    def __enter__(self) -> 'ParagraphEngine':
        """
        Open the PDF for reading and writing.

        Raises:
            PdfValidationError: If the PDF cannot be opened or is invalid
        """
        try:
            logger.info(f"Opening PDF: {self.file_path}")

            if self.config.validate_on_open:
                self._validate_pdf_file()

            self._pdfplumber_doc = pdfplumber.open(self.file_path)
            self._pikepdf_doc = pikepdf.open(self.file_path)
            self._document = PikepdfDocument(self._pikepdf_doc)

            self._page_count = len(self._pdfplumber_doc.pages)
            self._file_size_mb = os.path.getsize(self.file_path) / (1024 * 1024)
            self._is_open = True

            logger.info(
                f"PDF opened successfully: {self._page_count} pages, "
                f"{self._file_size_mb:.2f} MB"
            )
            return self

        except PdfValidationError:
            self._cleanup_resources()
            raise
        except Exception as e:
            logger.error(f"Failed to open PDF: {e}")
            self._cleanup_resources()
            raise PdfValidationError(f"Failed to open PDF: {str(e)}")

    def __exit__(self, exc_type, exc_val, exc_tb):
        logger.info("Closing paragraph engine")
        self._cleanup_resources()

        if exc_type is not None:
            logger.error(f"Exception during engine operation: {exc_val}")

        return False

    def _validate_pdf_file(self) -> None:
        result = comprehensive_pdf_validation(self.file_path, self.config.max_file_size_mb)
        if not result['is_valid']:
            raise PdfValidationError(f"PDF validation failed: {'; '.join(result['errors'])}")

    def _cleanup_resources(self) -> None:
        """Close both documents; safe to call more than once."""
        if self._pdfplumber_doc is not None:
            try:
                self._pdfplumber_doc.close()
            except Exception as e:
                logger.warning(f"Error closing pdfplumber document: {e}")
            finally:
                self._pdfplumber_doc = None

        if self._pikepdf_doc is not None:
            try:
                self._pikepdf_doc.close()
            except Exception as e:
                logger.warning(f"Error closing pikepdf document: {e}")
            finally:
                self._pikepdf_doc = None

        self._document = None
        self._page_objects.clear()
        self._is_open = False

    def _require_open(self) -> None:
        if not self._is_open:
            raise RuntimeError("Engine not opened - use within context manager")

    def _check_page_index(self, page_index: int) -> None:
        if page_index < 0 or page_index >= self._page_count:
            raise IndexError(f"Page index {page_index} out of bounds (0-{self._page_count - 1})")

    # Public API - Document Information

    def get_page_count(self) -> int:
        self._require_open()
        return self._page_count

    def get_file_size_mb(self) -> float:
        self._require_open()
        return self._file_size_mb

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def document(self) -> PikepdfDocument:
        """Target document for Paragraph.as_group()."""
        self._require_open()
        return self._document

    # Public API - Paragraphs

    def get_page_objects(self, page_index: int) -> List[Any]:
        """
        Page objects of a page in content stream order.

        Args:
            page_index: 0-based page index

        Raises:
            RuntimeError: If engine not opened
            IndexError: If page index out of bounds
        """
        self._require_open()
        self._check_page_index(page_index)

        if page_index not in self._page_objects:
            self._page_objects[page_index] = interpret_page(self._pdfplumber_doc, page_index)
        return self._page_objects[page_index]

    def extract_paragraphs(self, page_index: int) -> List[Paragraph]:
        """Reconstruct the paragraphs of one page."""
        objects = self.get_page_objects(page_index)
        paragraphs = Paragraph.from_objects(objects, self.config)
        logger.info(f"Page {page_index + 1}: {len(paragraphs)} paragraph(s) from {len(objects)} object(s)")
        return paragraphs

    def extract_range(self, page_range: PageRange) -> List[List[Paragraph]]:
        """Reconstruct paragraphs for every page in a 1-based page range."""
        self._require_open()
        return [
            self.extract_paragraphs(page_num - 1)
            for page_num in page_range.to_page_numbers(self._page_count)
        ]

    def write_paragraph(
        self,
        paragraph: Paragraph,
        page_index: int,
        measure: Optional[MeasureFunction] = None,
    ) -> PageObjectGroup:
        """
        Lay out a paragraph and draw it onto a page.

        Raises:
            FontUnresolvedError: If a font of the paragraph cannot be written
        """
        self._require_open()
        self._check_page_index(page_index)

        group = paragraph.as_group(self._document, measure, self.config)
        self._document.write_group(group, page_index)
        return group

    def save(self, output_path: str) -> None:
        self._require_open()
        self._pikepdf_doc.save(output_path)
        logger.info(f"Saved PDF: {output_path}")

    def get_status(self) -> Dict[str, Any]:
        return {
            'is_open': self._is_open,
            'file_path': self.file_path,
            'page_count': self._page_count,
            'file_size_mb': self._file_size_mb,
            'loaded_pages': sorted(self._page_objects),
            'config': self.config.to_dict(),
        }

    def __repr__(self) -> str:
        status = "open" if self._is_open else "closed"
        pages = f"{self._page_count} pages" if self._page_count else "unknown pages"
        return f"ParagraphEngine('{Path(self.file_path).name}', {status}, {pages})"
