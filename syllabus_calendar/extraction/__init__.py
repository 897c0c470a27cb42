"""
Syllabus event extraction: prompt building, model backends with a single
fallback, and reply validation.
"""

from .extractor import SyllabusEventExtractor
from .llm_client import ModelBackend, OpenAIChatBackend
from .prompts import SYSTEM_PROMPT, build_extraction_prompt
from .validator import ResponseValidator

__all__ = [
    "SyllabusEventExtractor",
    "ModelBackend",
    "OpenAIChatBackend",
    "SYSTEM_PROMPT",
    "build_extraction_prompt",
    "ResponseValidator",
]
