"""
Validation and sanitization of model replies.

The model is asked for JSON, but nothing guarantees it complies. This module
parses the reply, keeps every candidate event that has a title and a real
``YYYY-MM-DD`` date, and drops the rest. One bad entry never sinks the
whole batch.
"""

import json
import re
from typing import Any, List, Optional, Tuple

from syllabus_calendar.models import (
    CalendarEvent,
    EventPriority,
    EventType,
    SyllabusExtractionResult,
    generate_event_id,
    is_valid_date,
    is_valid_time,
)
from syllabus_calendar.utils.errors import MalformedResponse
from syllabus_calendar.utils.logging import get_logger

logger = get_logger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _clean_text(value: Any) -> Optional[str]:
    """Stringify and trim; None for missing or blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ResponseValidator:
    """Turn raw model replies into ``SyllabusExtractionResult`` objects."""

    def validate(self, raw: str) -> SyllabusExtractionResult:
        """
        Parse and sanitize a model reply.

        Args:
            raw: Raw reply text from the model

        Returns:
            Result holding only the valid events

        Raises:
            MalformedResponse: If the reply is not a JSON object
        """
        data = self._parse_json(raw)

        candidates = data.get("events")
        if not isinstance(candidates, list):
            candidates = []

        events: List[CalendarEvent] = []
        dropped = 0
        for index, candidate in enumerate(candidates):
            ok, reason = self.check_candidate(candidate)
            if not ok:
                dropped += 1
                logger.debug(f"Dropped candidate {index}: {reason}", extra={"candidate": candidate})
                continue
            events.append(self.build_event(candidate))

        if dropped:
            logger.warning(
                f"Dropped {dropped} of {len(candidates)} candidate events",
                extra={"dropped": dropped, "candidates": len(candidates)},
            )

        return SyllabusExtractionResult(
            events=events,
            courseName=self._metadata_text(data.get("courseName")),
            instructor=self._metadata_text(data.get("instructor")),
            semester=self._metadata_text(data.get("semester")),
            year=self._coerce_year(data.get("year")),
        )

    def _parse_json(self, raw: str) -> dict:
        text = (raw or "").strip()
        fenced = _CODE_FENCE_RE.match(text)
        if fenced:
            text = fenced.group(1)

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"Failed to parse model response: {text[:200]}")
            raise MalformedResponse("Invalid JSON response from AI model", {"error": str(e)}) from e

        if not isinstance(data, dict):
            raise MalformedResponse(
                "Invalid result format",
                {"received": type(data).__name__},
            )
        return data

    @staticmethod
    def check_candidate(candidate: Any) -> Tuple[bool, str]:
        """Classify one candidate event as valid or not, with a reason."""
        if not isinstance(candidate, dict):
            return False, "not an object"

        title = candidate.get("title")
        if not isinstance(title, str) or not title.strip():
            return False, "missing title"

        event_date = candidate.get("date")
        if not isinstance(event_date, str) or not is_valid_date(event_date):
            return False, f"invalid date {event_date!r}"

        return True, ""

    @staticmethod
    def build_event(candidate: dict) -> CalendarEvent:
        """Build a sanitized event from a candidate that passed ``check_candidate``."""
        event_time = _clean_text(candidate.get("time"))
        if event_time is not None and not is_valid_time(event_time):
            logger.debug(f"Ignoring unparseable time {event_time!r}")
            event_time = None

        return CalendarEvent(
            id=generate_event_id(),
            title=candidate["title"].strip(),
            description=_clean_text(candidate.get("description")) or "",
            date=candidate["date"],
            time=event_time,
            type=EventType.coerce(candidate.get("type")),
            priority=EventPriority.coerce(candidate.get("priority")),
            location=_clean_text(candidate.get("location")),
        )

    @staticmethod
    def _metadata_text(value: Any) -> Optional[str]:
        # Falsy values (0, "", null) count as absent
        return _clean_text(value) if value else None

    @staticmethod
    def _coerce_year(value: Any) -> Optional[int]:
        if not value or isinstance(value, bool):
            return None
        try:
            return int(float(str(value).strip()))
        except (ValueError, OverflowError):
            logger.debug(f"Ignoring non-numeric year {value!r}")
            return None
