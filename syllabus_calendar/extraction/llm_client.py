"""
Model backends for syllabus extraction.

A backend takes a finished prompt and returns the model's raw reply text.
Which backend runs first, and what happens when it fails, is decided by
``SyllabusEventExtractor``; backends only report failure as ``ModelError``.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from syllabus_calendar.config import ModelConfig
from syllabus_calendar.extraction.prompts import SYSTEM_PROMPT
from syllabus_calendar.utils.errors import ModelError
from syllabus_calendar.utils.logging import get_logger, log_performance

logger = get_logger(__name__)


class ModelBackend(ABC):
    """A model that turns a prompt into raw reply text."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Model name, used in logs and errors."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the reply text.

        Raises:
            ModelError: On transport failure, timeout or empty reply
        """


class OpenAIChatBackend(ModelBackend):
    """Chat-completions backend on the OpenAI API."""

    def __init__(
        self,
        config: ModelConfig,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize the backend.

        Args:
            config: Model name, output size and temperature
            api_key: OpenAI API key
            base_url: Optional API base URL (proxies, compatible servers)
            timeout: Request timeout in seconds
            client: Preconfigured ``AsyncOpenAI`` client, mostly for tests
        """
        self.config = config
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

        # Client will be initialized lazily
        self._llm_client = client

    @property
    def name(self) -> str:
        return self.config.model

    def _ensure_llm_client(self) -> None:
        """Ensure LLM client is initialized."""
        if self._llm_client is None:
            import openai

            self._llm_client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )

    @log_performance
    async def complete(self, prompt: str) -> str:
        self._ensure_llm_client()

        try:
            response = await self._llm_client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            logger.error(f"{self.name} request failed: {e}")
            raise ModelError(f"Model request failed: {e}", model=self.name) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise ModelError("No response from model", model=self.name)

        logger.debug(
            f"{self.name} replied with {len(content)} characters",
            extra={"model": self.name, "reply_length": len(content)},
        )
        return content
