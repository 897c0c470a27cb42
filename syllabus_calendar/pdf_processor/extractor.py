"""
PDF text extraction using PyMuPDF.

This module turns uploaded PDF bytes into normalized plain text, refusing
inputs that are not PDFs, look like image-only scans, or carry too little
text to be worth a model call.
"""

from typing import Optional

import fitz  # PyMuPDF

from syllabus_calendar.config import get_settings
from syllabus_calendar.models import DocumentText
from syllabus_calendar.pdf_processor.preprocessor import TextNormalizer
from syllabus_calendar.utils.errors import (
    InsufficientContent,
    InvalidFormat,
    UnsupportedScannedDocument,
)
from syllabus_calendar.utils.logging import get_logger, log_performance

logger = get_logger(__name__)

PDF_SIGNATURE = b"%PDF"


class PDFExtractor:
    """Extract and clean text from PDF documents."""

    def __init__(
        self,
        min_chars_per_page: Optional[int] = None,
        min_text_length: Optional[int] = None,
        normalizer: Optional[TextNormalizer] = None,
    ) -> None:
        """
        Initialize the PDF extractor.

        Args:
            min_chars_per_page: Average text per page below which a PDF counts as scanned
            min_text_length: Minimum length of the normalized text
            normalizer: Text normalizer applied before the length check
        """
        if min_chars_per_page is None or min_text_length is None:
            settings = get_settings()
            if min_chars_per_page is None:
                min_chars_per_page = settings.min_chars_per_page
            if min_text_length is None:
                min_text_length = settings.min_text_length

        self.min_chars_per_page = min_chars_per_page
        self.min_text_length = min_text_length
        self.normalizer = normalizer or TextNormalizer()

    @staticmethod
    def validate_signature(data: bytes) -> bool:
        """Check the PDF magic number."""
        return data[:4] == PDF_SIGNATURE

    @log_performance
    async def extract_text(self, data: bytes) -> DocumentText:
        """
        Decode PDF bytes into plain text.

        Args:
            data: Raw PDF bytes

        Returns:
            Extracted text and page count

        Raises:
            InvalidFormat: If the bytes are not a readable PDF
        """
        if not self.validate_signature(data):
            raise InvalidFormat("Invalid PDF file format")

        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                page_texts = [page.get_text() for page in doc]
                page_count = doc.page_count
        except (fitz.FileDataError, RuntimeError, ValueError) as e:
            logger.error(f"Corrupted PDF: {e}")
            raise InvalidFormat(f"Failed to parse PDF: {e}") from e

        logger.debug(
            f"Extracted {page_count} pages",
            extra={"page_count": page_count, "size_bytes": len(data)},
        )
        return DocumentText(text="\n".join(page_texts), page_count=page_count)

    def is_scanned(self, document: DocumentText) -> bool:
        """Heuristic: too little text per page means an image-only PDF."""
        return document.page_count == 0 or document.chars_per_page < self.min_chars_per_page

    async def process_for_model(self, data: bytes) -> str:
        """
        Extract text with validation and normalization.

        Args:
            data: Raw PDF bytes

        Returns:
            Normalized text ready for the prompt

        Raises:
            InvalidFormat: If the bytes are not a readable PDF
            UnsupportedScannedDocument: If the PDF looks image-only
            InsufficientContent: If the cleaned text is too short
        """
        if not self.validate_signature(data):
            raise InvalidFormat("Invalid PDF file format")

        document = await self.extract_text(data)

        if self.is_scanned(document):
            logger.warning(
                f"PDF looks scanned ({document.chars_per_page:.0f} chars/page)",
                extra={"page_count": document.page_count},
            )
            raise UnsupportedScannedDocument(document.chars_per_page, self.min_chars_per_page)

        cleaned = self.normalizer.normalize(document.text)
        if len(cleaned) < self.min_text_length:
            raise InsufficientContent(len(cleaned), self.min_text_length)

        logger.info(
            f"Extracted {len(cleaned)} characters from {document.page_count} pages",
            extra={"page_count": document.page_count, "text_length": len(cleaned)},
        )
        return cleaned

