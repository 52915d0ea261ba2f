"""Pre-upload PDF check using pypdf.

Rejects files the backend would refuse before spending an upload on them.
"""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from vectormind.config import MAX_UPLOAD_SIZE
from vectormind.errors import PDFValidationError

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"


def _check_bytes(file_content: bytes, max_size: int) -> None:
    """Validate raw file content before parsing.

    Raises:
        PDFValidationError: If validation fails.
    """
    if not file_content:
        raise PDFValidationError("Empty file provided")

    if len(file_content) > max_size:
        size_mb = len(file_content) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        raise PDFValidationError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)"
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFValidationError("Invalid PDF: file does not start with PDF header")


def validate_pdf(file_content: bytes, max_size: int = MAX_UPLOAD_SIZE) -> int:
    """Check that a file is a readable PDF of acceptable size.

    Args:
        file_content: Raw bytes of the PDF file.
        max_size: Largest accepted size in bytes.

    Returns:
        Number of pages in the document.

    Raises:
        PDFValidationError: If the file is empty, too large, not a PDF,
            corrupt, or has no pages.
    """
    _check_bytes(file_content, max_size)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFValidationError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFValidationError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFValidationError("PDF contains no pages")

    logger.debug(f"PDF check passed ({pages} pages, {len(file_content)} bytes)")
    return pages
