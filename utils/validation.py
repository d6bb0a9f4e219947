"""
Engine Errors and Input File Checks

Exception hierarchy shared by the paragraph engine, plus the checks a PDF has
to pass before the engine opens it.
"""

import logging
import os
import re
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

PDF_HEADER_PATTERN = re.compile(rb'^%PDF-(\d\.\d)')
HEADER_PROBE_BYTES = 16
MIN_HEADER_BYTES = 5
DEFAULT_MAX_FILE_SIZE_MB = 50
KNOWN_PDF_VERSIONS = frozenset(['1.0', '1.1', '1.2', '1.3', '1.4', '1.5', '1.6', '1.7', '2.0'])
BYTES_PER_MB = 1024 * 1024


class ParagraphEngineError(Exception):
    """Base exception for paragraph engine errors"""
    pass


class PdfValidationError(ParagraphEngineError):
    """The input file is not a PDF the engine can open"""
    pass


class FontUnresolvedError(ParagraphEngineError):
    """Raised when a font cannot be materialized in the target document"""

    def __init__(self, font_name: str, detail: Optional[str] = None):
        self.font_name = font_name
        message = f"Cannot resolve font '{font_name}' in target document"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MalformedFragmentError(ParagraphEngineError):
    """Internal error: a paragraph fragment is not one of the known fragment kinds"""
    pass


def read_pdf_version(file_path: str) -> Optional[str]:
    """
    Version from the `%PDF-x.y` header line, or None when the file has no PDF header.

    Raises:
        OSError: If the file cannot be read
    """
    with open(file_path, 'rb') as f:
        header = f.read(HEADER_PROBE_BYTES)
    match = PDF_HEADER_PATTERN.match(header)
    return match.group(1).decode('ascii') if match else None


def validate_pdf_signature(file_path: str) -> Tuple[bool, Optional[str]]:
    """
    Check that the file starts with a PDF header.

    Unknown versions only log a warning; most of them still parse.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        if os.path.getsize(file_path) < MIN_HEADER_BYTES:
            return False, "File too small to be a valid PDF"
        version = read_pdf_version(file_path)
    except FileNotFoundError:
        return False, f"File not found: {file_path}"
    except PermissionError:
        return False, f"Permission denied reading {file_path}"
    except OSError as e:
        return False, f"Cannot read PDF header: {e}"

    if version is None:
        return False, "Missing PDF signature: file does not start with %PDF-"

    if version not in KNOWN_PDF_VERSIONS:
        logger.warning(f"Unknown PDF version {version} in {os.path.basename(file_path)}")
    return True, None


def validate_file_size(file_path: str, max_size_mb: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """Check the file against the size limit (DEFAULT_MAX_FILE_SIZE_MB when not given)."""
    limit = max_size_mb if max_size_mb is not None else DEFAULT_MAX_FILE_SIZE_MB

    try:
        size_mb = os.path.getsize(file_path) / BYTES_PER_MB
    except FileNotFoundError:
        return False, f"File not found: {file_path}"
    except OSError as e:
        return False, f"Cannot stat file: {e}"

    if size_mb > limit:
        return False, f"File too large: {size_mb:.1f}MB (limit {limit}MB)"

    logger.debug(f"{os.path.basename(file_path)} is {size_mb:.2f}MB")
    return True, None


def comprehensive_pdf_validation(file_path: str, max_size_mb: Optional[int] = None) -> Dict[str, Any]:
    """
    Run every input check and collect the outcome.

    Returns:
        {'is_valid': bool, 'errors': [str], 'file_info': {'size_mb', 'pdf_version'}}
    """
    if not os.path.exists(file_path):
        return {'is_valid': False, 'errors': [f"File not found: {file_path}"], 'file_info': {}}

    checks = [validate_file_size(file_path, max_size_mb), validate_pdf_signature(file_path)]
    errors = [error for ok, error in checks if not ok]
    file_info: Dict[str, Any] = {}

    if not errors:
        file_info['size_mb'] = round(os.path.getsize(file_path) / BYTES_PER_MB, 2)
        file_info['pdf_version'] = read_pdf_version(file_path)

    return {'is_valid': not errors, 'errors': errors, 'file_info': file_info}


__all__ = [
    'read_pdf_version',
    'validate_pdf_signature',
    'validate_file_size',
    'comprehensive_pdf_validation',
    'ParagraphEngineError',
    'PdfValidationError',
    'FontUnresolvedError',
    'MalformedFragmentError',
    'DEFAULT_MAX_FILE_SIZE_MB',
]
