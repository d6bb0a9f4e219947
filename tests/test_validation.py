"""Tests for error types and input file validation."""

from utils.validation import (
    FontUnresolvedError,
    MalformedFragmentError,
    ParagraphEngineError,
    PdfValidationError,
    comprehensive_pdf_validation,
    read_pdf_version,
    validate_file_size,
    validate_pdf_signature,
)


class TestErrorHierarchy:
    """Tests for the exception types."""

    def test_all_errors_share_a_base(self):
        for error_type in (PdfValidationError, FontUnresolvedError, MalformedFragmentError):
            assert issubclass(error_type, ParagraphEngineError)

    def test_font_unresolved_message(self):
        error = FontUnresolvedError("Garamond", "not embedded")
        assert error.font_name == "Garamond"
        assert "Garamond" in str(error)
        assert "not embedded" in str(error)


class TestSignature:
    """Tests for PDF signature checks."""

    def test_valid_pdf(self, sample_pdf):
        assert validate_pdf_signature(str(sample_pdf)) == (True, None)

    def test_not_a_pdf(self, tmp_path):
        path = tmp_path / "notes.pdf"
        path.write_bytes(b"just some text")
        is_valid, error = validate_pdf_signature(str(path))
        assert not is_valid
        assert "signature" in error

    def test_too_small(self, tmp_path):
        path = tmp_path / "tiny.pdf"
        path.write_bytes(b"%P")
        assert validate_pdf_signature(str(path))[0] is False

    def test_missing_file(self, tmp_path):
        is_valid, error = validate_pdf_signature(str(tmp_path / "missing.pdf"))
        assert not is_valid
        assert "not found" in error


class TestFileSize:
    """Tests for size limits."""

    def test_within_limit(self, sample_pdf):
        assert validate_file_size(str(sample_pdf), max_size_mb=1) == (True, None)

    def test_over_limit(self, tmp_path):
        path = tmp_path / "big.pdf"
        path.write_bytes(b"%PDF-1.7\n" + b"0" * (2 * 1024 * 1024))
        is_valid, error = validate_file_size(str(path), max_size_mb=1)
        assert not is_valid
        assert "too large" in error


class TestComprehensiveValidation:
    """Tests for the combined validation report."""

    def test_valid(self, sample_pdf):
        result = comprehensive_pdf_validation(str(sample_pdf))
        assert result['is_valid']
        assert result['errors'] == []
        assert 'size_mb' in result['file_info']
        assert result['file_info']['pdf_version'] == read_pdf_version(str(sample_pdf))

    def test_collects_every_error(self, tmp_path):
        path = tmp_path / "big.txt"
        path.write_bytes(b"x" * (2 * 1024 * 1024))
        result = comprehensive_pdf_validation(str(path), max_size_mb=1)
        assert not result['is_valid']
        assert len(result['errors']) == 2
        assert result['file_info'] == {}

    def test_missing(self, tmp_path):
        result = comprehensive_pdf_validation(str(tmp_path / "missing.pdf"))
        assert not result['is_valid']
        assert len(result['errors']) == 1
