"""
Syllabus Calendar

Turns academic syllabus PDFs into validated calendar events using a language
model, with a single cheaper-model fallback.
"""

__version__ = "0.1.0"

from .models import (
    CalendarEvent,
    DocumentText,
    EventPriority,
    EventType,
    SyllabusExtractionResult,
    sort_events,
)
from .pipeline import SyllabusPipeline, create_syllabus_pipeline

__all__ = [
    "CalendarEvent",
    "DocumentText",
    "EventPriority",
    "EventType",
    "SyllabusExtractionResult",
    "sort_events",
    "SyllabusPipeline",
    "create_syllabus_pipeline",
]
