"""
Syllabus event extraction with a single model fallback.

The primary backend is tried once. If it fails, or its reply cannot be
parsed, the fallback backend gets the identical prompt exactly once. There
is no backoff loop and no racing of models.
"""

from typing import List, Optional

from syllabus_calendar.extraction.llm_client import ModelBackend
from syllabus_calendar.extraction.prompts import build_extraction_prompt
from syllabus_calendar.extraction.validator import ResponseValidator
from syllabus_calendar.models import SyllabusExtractionResult
from syllabus_calendar.utils.errors import ExtractionFailed, MalformedResponse, ModelError
from syllabus_calendar.utils.logging import LogContext, get_logger, log_performance

logger = get_logger(__name__)


class SyllabusEventExtractor:
    """Extract events from normalized syllabus text."""

    def __init__(
        self,
        primary: ModelBackend,
        fallback: ModelBackend,
        validator: Optional[ResponseValidator] = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            primary: Higher-accuracy backend, tried first
            fallback: Cheaper backend, tried once after a primary failure
            validator: Reply validator
        """
        self.primary = primary
        self.fallback = fallback
        self.validator = validator or ResponseValidator()

    @property
    def backends(self) -> List[ModelBackend]:
        return [self.primary, self.fallback]

    async def _attempt(self, backend: ModelBackend, prompt: str) -> SyllabusExtractionResult:
        raw = await backend.complete(prompt)
        return self.validator.validate(raw)

    @log_performance
    async def extract(self, syllabus_text: str) -> SyllabusExtractionResult:
        """
        Extract events, falling back once on failure.

        Args:
            syllabus_text: Normalized syllabus text

        Returns:
            Validated extraction result

        Raises:
            ExtractionFailed: If both backends fail; ``cause`` is the fallback's error
        """
        prompt = build_extraction_prompt(syllabus_text)

        try:
            with LogContext(model=self.primary.name):
                result = await self._attempt(self.primary, prompt)
        except (ModelError, MalformedResponse) as e:
            logger.warning(f"{self.primary.name} failed, trying {self.fallback.name}: {e.message}")
        else:
            self._log_result(result, self.primary.name)
            return result

        try:
            with LogContext(model=self.fallback.name):
                result = await self._attempt(self.fallback, prompt)
        except (ModelError, MalformedResponse) as e:
            logger.error(f"Both {self.primary.name} and {self.fallback.name} failed: {e.message}")
            raise ExtractionFailed(e) from e

        self._log_result(result, self.fallback.name)
        return result

    def _log_result(self, result: SyllabusExtractionResult, model: str) -> None:
        logger.info(
            f"Extracted {len(result.events)} events with {model}",
            extra={"event_count": len(result.events), "course": result.courseName},
        )
