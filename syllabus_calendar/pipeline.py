"""
End-to-end syllabus pipeline: PDF bytes in, validated events out.

The API credential is passed in explicitly rather than read from the
environment here, so callers can source it from anywhere and tests never
need to touch ``os.environ``.
"""

from pathlib import Path
from typing import Optional, Union

from syllabus_calendar.config import ModelConfig, Settings, get_settings
from syllabus_calendar.extraction.extractor import SyllabusEventExtractor
from syllabus_calendar.extraction.llm_client import ModelBackend, OpenAIChatBackend
from syllabus_calendar.extraction.prompts import build_extraction_prompt
from syllabus_calendar.models import SyllabusExtractionResult
from syllabus_calendar.pdf_processor.extractor import PDFExtractor
from syllabus_calendar.utils.errors import DocumentTooLarge, InvalidFormat, MisconfiguredCredential
from syllabus_calendar.utils.logging import get_logger, log_performance

logger = get_logger(__name__)


class SyllabusPipeline:
    """Run one syllabus through extraction, prompting and validation."""

    def __init__(
        self,
        api_key: Optional[str],
        primary_config: ModelConfig,
        fallback_config: ModelConfig,
        pdf_extractor: Optional[PDFExtractor] = None,
        base_url: Optional[str] = None,
        request_timeout: float = 60.0,
        max_pdf_size_bytes: int = 10 * 1024 * 1024,
        primary_backend: Optional[ModelBackend] = None,
        fallback_backend: Optional[ModelBackend] = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            api_key: Model provider API key; checked before any work is done
            primary_config: Settings for the primary model
            fallback_config: Settings for the fallback model
            pdf_extractor: PDF text extractor
            base_url: Optional API base URL
            request_timeout: Per-request timeout in seconds
            max_pdf_size_bytes: Size limit applied by ``process_file``
            primary_backend: Override for the primary backend
            fallback_backend: Override for the fallback backend
        """
        self.api_key = api_key.strip() if api_key else None
        self.primary_config = primary_config
        self.fallback_config = fallback_config
        self.pdf_extractor = pdf_extractor or PDFExtractor()
        self.base_url = base_url
        self.request_timeout = request_timeout
        self.max_pdf_size_bytes = max_pdf_size_bytes
        self._primary_backend = primary_backend
        self._fallback_backend = fallback_backend

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise MisconfiguredCredential("OPENAI_API_KEY")
        return self.api_key

    def _backend(self, config: ModelConfig) -> ModelBackend:
        return OpenAIChatBackend(
            config=config,
            api_key=self._require_api_key(),
            base_url=self.base_url,
            timeout=self.request_timeout,
        )

    def create_event_extractor(self) -> SyllabusEventExtractor:
        """Build the primary/fallback extractor for one run."""
        return SyllabusEventExtractor(
            primary=self._primary_backend or self._backend(self.primary_config),
            fallback=self._fallback_backend or self._backend(self.fallback_config),
        )

    @log_performance
    async def process(self, pdf_bytes: bytes) -> SyllabusExtractionResult:
        """
        Extract calendar events from PDF bytes.

        Args:
            pdf_bytes: Raw PDF document

        Returns:
            Validated extraction result

        Raises:
            MisconfiguredCredential: If no API key is configured
            InvalidFormat, UnsupportedScannedDocument, InsufficientContent: On bad documents
            ExtractionFailed: If both models fail
        """
        self._require_api_key()

        text = await self.pdf_extractor.process_for_model(pdf_bytes)
        extractor = self.create_event_extractor()
        result = await extractor.extract(text)

        logger.info(f"Successfully extracted {len(result.events)} events from syllabus")
        return result

    async def process_file(self, file_path: Union[str, Path]) -> SyllabusExtractionResult:
        """
        Extract calendar events from a PDF on disk, enforcing the size limit.

        Raises:
            DocumentTooLarge: If the file exceeds the size limit
            InvalidFormat: If the path is not a readable file
        """
        self._require_api_key()
        return await self.process(self.read_pdf(file_path))

    def read_pdf(self, file_path: Union[str, Path]) -> bytes:
        """Read a PDF from disk, refusing files over the size limit."""
        file_path = Path(file_path)
        if not file_path.is_file():
            raise InvalidFormat(f"Not a file: {file_path}")

        try:
            file_size = file_path.stat().st_size
            if file_size > self.max_pdf_size_bytes:
                raise DocumentTooLarge(
                    file_size=file_size,
                    max_size=self.max_pdf_size_bytes,
                    filename=file_path.name,
                )
            return file_path.read_bytes()
        except OSError as e:
            raise InvalidFormat(f"Could not read {file_path.name}: {e.strerror or e}") from e

    async def build_prompt(self, pdf_bytes: bytes) -> str:
        """Return the prompt that ``process`` would send, without calling a model."""
        text = await self.pdf_extractor.process_for_model(pdf_bytes)
        return build_extraction_prompt(text)


def create_syllabus_pipeline(settings: Optional[Settings] = None) -> SyllabusPipeline:
    """Create a pipeline from settings (environment by default)."""
    settings = settings or get_settings()
    return SyllabusPipeline(
        api_key=settings.openai_api_key,
        primary_config=settings.primary_model_config(),
        fallback_config=settings.fallback_model_config(),
        pdf_extractor=PDFExtractor(
            min_chars_per_page=settings.min_chars_per_page,
            min_text_length=settings.min_text_length,
        ),
        base_url=settings.openai_base_url,
        request_timeout=settings.request_timeout,
        max_pdf_size_bytes=settings.max_pdf_size_bytes,
    )
