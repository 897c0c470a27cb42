"""
Shared fixtures: in-memory PDFs and scripted model backends.
"""

import json
from typing import Callable, List, Optional, Union

import fitz  # PyMuPDF
import pytest

from syllabus_calendar.config import ModelConfig, reset_settings
from syllabus_calendar.extraction.llm_client import ModelBackend

SYLLABUS_PAGE_ONE = """CS 101: Introduction to Computer Science
Instructor: Dr. Ada Lovelace    Fall 2024
Lectures meet Monday and Wednesday, 10:00 to 11:15, Room 204.
- Homework 1 due September 15, 2024 at 11:59 PM
- Reading: Chapter 1 and 2 before September 18
- Quiz 1 in class on September 25
"""

SYLLABUS_PAGE_TWO = """Major deadlines
- Midterm exam on October 16, 2024 at 10:00 in Hall A
- Project proposal due October 30, 2024
- Final project presentations December 4, 2024
Late work loses ten percent per day unless arranged in advance.
"""


class ScriptedBackend(ModelBackend):
    """Backend that replays canned replies (or raises canned errors) in order."""

    def __init__(self, name: str, replies: List[Union[str, Exception]]) -> None:
        self._name = name
        self.replies = list(replies)
        self.prompts: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read its own settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Build a PDF in memory with one text block per page."""

    def _make_pdf(*pages: Optional[str]) -> bytes:
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text, fontsize=11)
        data = doc.tobytes()
        doc.close()
        return data

    return _make_pdf


@pytest.fixture
def syllabus_pdf(make_pdf) -> bytes:
    return make_pdf(SYLLABUS_PAGE_ONE, SYLLABUS_PAGE_TWO)


@pytest.fixture
def scripted_backend() -> Callable[..., ScriptedBackend]:
    def _scripted_backend(name: str, *replies: Union[str, Exception]) -> ScriptedBackend:
        return ScriptedBackend(name, list(replies))

    return _scripted_backend


@pytest.fixture
def primary_config() -> ModelConfig:
    return ModelConfig(model="gpt-4", max_tokens=3000, temperature=0.1)


@pytest.fixture
def fallback_config() -> ModelConfig:
    return ModelConfig(model="gpt-3.5-turbo", max_tokens=2000, temperature=0.1)


@pytest.fixture
def model_reply() -> str:
    """A well-formed model reply for the sample syllabus."""
    return json.dumps(
        {
            "courseName": "CS 101: Introduction to Computer Science",
            "instructor": "Dr. Ada Lovelace",
            "semester": "Fall 2024",
            "year": 2024,
            "events": [
                {
                    "title": "Homework 1",
                    "description": "First problem set",
                    "date": "2024-09-15",
                    "time": "23:59",
                    "type": "assignment",
                    "priority": "medium",
                    "location": None,
                },
                {
                    "title": "Midterm Exam",
                    "description": "Covers weeks 1-6",
                    "date": "2024-10-16",
                    "time": "10:00",
                    "type": "exam",
                    "priority": "high",
                    "location": "Hall A",
                },
                {
                    "title": "Chapter 1 and 2",
                    "description": "",
                    "date": "2024-09-18",
                    "time": None,
                    "type": "reading",
                    "priority": "low",
                    "location": None,
                },
            ],
        }
    )
