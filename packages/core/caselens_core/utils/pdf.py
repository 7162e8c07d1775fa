"""PDF detection for uploaded case files."""

from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)

# PDF magic bytes
PDF_MAGIC = b"%PDF"


class PDFValidationError(Exception):
    """Error when PDF validation fails."""

    pass


def is_pdf(data: bytes) -> bool:
    """Return True when the bytes start with the PDF magic marker."""
    return bool(data) and data[:4].startswith(PDF_MAGIC)


def validate_pdf(data: bytes) -> bool:
    """Validate that data is a PDF file.

    Args:
        data: Raw file bytes

    Returns:
        True if valid PDF

    Raises:
        PDFValidationError: If validation fails
    """
    if not data:
        raise PDFValidationError("Empty file data")

    if len(data) < 4:
        raise PDFValidationError("File too small to be a valid PDF")

    if not is_pdf(data):
        raise PDFValidationError(
            f"Invalid PDF: file does not start with PDF magic bytes. Got: {data[:4]!r}"
        )

    # PDFs should end with %%EOF
    if b"%%EOF" not in data[-1024:]:
        logger.warning("PDF does not contain %%EOF marker near end of file")

    logger.debug(f"PDF validation passed ({len(data)} bytes)")
    return True


def get_pdf_version(data: bytes) -> str | None:
    """Read the PDF version from the file header (``%PDF-1.7`` -> ``1.7``)."""
    try:
        header = data[:20].decode("latin-1")
    except (UnicodeDecodeError, IndexError):
        return None
    if not header.startswith("%PDF-"):
        return None
    version_end = header.find("\n")
    if version_end == -1:
        version_end = header.find("\r")
    if version_end == -1:
        version_end = 8
    return header[5:version_end].strip() or None
