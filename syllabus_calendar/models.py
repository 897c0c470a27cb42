"""
Core data models for the syllabus calendar pipeline.

This module defines the Pydantic models shared by the extractor, the
validator and the CLI. Field names of ``SyllabusExtractionResult`` match the
JSON the frontend consumes, so ``courseName`` stays camelCase.
"""

import re
from datetime import date as date_type
from enum import Enum
from typing import Iterable, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


# =============================================================================
# Enums
# =============================================================================


class EventType(str, Enum):
    """Kinds of syllabus events."""

    ASSIGNMENT = "assignment"
    EXAM = "exam"
    READING = "reading"
    LECTURE = "lecture"
    PROJECT = "project"
    QUIZ = "quiz"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: object) -> "EventType":
        """Map any value onto a known type, defaulting to ``other``."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class EventPriority(str, Enum):
    """Priority of an event."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def coerce(cls, value: object) -> "EventPriority":
        """Map any value onto a known priority, defaulting to ``medium``."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


# =============================================================================
# Helpers
# =============================================================================


def is_valid_date(value: object) -> bool:
    """True for ``YYYY-MM-DD`` strings naming a real calendar date."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date_type.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_time(value: object) -> bool:
    """True for 24-hour ``HH:MM`` strings."""
    return isinstance(value, str) and bool(TIME_PATTERN.match(value))


def generate_event_id() -> str:
    return f"event-{uuid4().hex}"


# =============================================================================
# Event Models
# =============================================================================


class CalendarEvent(BaseModel):
    """A single dated item taken from a syllabus."""

    id: str = Field(default_factory=generate_event_id, description="Opaque unique event ID")
    title: str = Field(..., min_length=1, description="Event title")
    description: str = Field("", description="Free-text details")
    date: str = Field(..., description="Event date (YYYY-MM-DD)")
    time: Optional[str] = Field(None, description="Start time (HH:MM, 24-hour); None for all-day")
    type: EventType = Field(EventType.OTHER, description="Kind of event")
    priority: EventPriority = Field(EventPriority.MEDIUM, description="Event priority")
    location: Optional[str] = Field(None, description="Location if known")
    course: Optional[str] = Field(None, description="Course label, set by later edits")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Ensure title is not just whitespace."""
        if not v.strip():
            raise ValueError("Event title cannot be empty or just whitespace")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        if not is_valid_date(v):
            raise ValueError(f"Invalid date format: {v}")
        return v

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_time(v):
            raise ValueError(f"Invalid time format: {v}")
        return v

    @property
    def is_all_day(self) -> bool:
        return self.time is None


class SyllabusExtractionResult(BaseModel):
    """Events extracted from one syllabus, plus optional course metadata."""

    events: List[CalendarEvent] = Field(default_factory=list)
    courseName: Optional[str] = Field(None, description="Course name if mentioned")
    instructor: Optional[str] = Field(None, description="Instructor if mentioned")
    semester: Optional[str] = Field(None, description="Semester, e.g. 'Fall 2024'")
    year: Optional[int] = Field(None, description="Academic year")

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize with the exact output field names, omitting unset values."""
        return self.model_dump_json(indent=indent, exclude_none=True)


# =============================================================================
# Document Models
# =============================================================================


class DocumentText(BaseModel):
    """Plain text decoded from a PDF."""

    text: str = Field(..., description="Extracted text, pages joined by newlines")
    page_count: int = Field(..., ge=0, description="Number of pages in the document")

    @property
    def chars_per_page(self) -> float:
        if self.page_count == 0:
            return 0.0
        return len(self.text.strip()) / self.page_count


def sort_events(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    """Order events by date, then by priority (high first) within a day."""
    return sorted(events, key=lambda e: (e.date, -e.priority.rank))
