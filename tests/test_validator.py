"""
Tests for model reply validation and sanitization.
"""

import json
import logging

import pytest

from syllabus_calendar.extraction.validator import ResponseValidator
from syllabus_calendar.models import EventPriority, EventType
from syllabus_calendar.utils.errors import MalformedResponse


@pytest.fixture
def validator():
    return ResponseValidator()


def reply(**fields) -> str:
    return json.dumps(fields)


class TestParsing:

    def test_not_json(self, validator):
        with pytest.raises(MalformedResponse, match="Invalid JSON response"):
            validator.validate("Here are your events: ...")

    def test_empty_reply(self, validator):
        with pytest.raises(MalformedResponse):
            validator.validate("")

    @pytest.mark.parametrize("payload", ["[]", "42", '"events"', "null", "true"])
    def test_not_an_object(self, validator, payload):
        with pytest.raises(MalformedResponse, match="Invalid result format"):
            validator.validate(payload)

    def test_code_fence_unwrapped(self, validator):
        raw = '```json\n{"events": [{"title": "Quiz 1", "date": "2024-09-25"}]}\n```'
        result = validator.validate(raw)
        assert [e.title for e in result.events] == ["Quiz 1"]

    def test_missing_events_list(self, validator):
        result = validator.validate(reply(courseName="CS 101"))
        assert result.events == []
        assert result.courseName == "CS 101"

    def test_events_not_a_list(self, validator):
        result = validator.validate(reply(events={"title": "A", "date": "2024-09-15"}))
        assert result.events == []


class TestCandidateFiltering:

    def test_invalid_candidates_dropped(self, validator):
        raw = reply(
            events=[
                {"title": "A", "date": "2024-09-15"},
                {"title": "", "date": "2024-09-16"},
                {"title": "B", "date": "not-a-date"},
            ]
        )

        result = validator.validate(raw)

        assert len(result.events) == 1
        assert result.events[0].title == "A"

    @pytest.mark.parametrize(
        "candidate",
        [
            {"title": "   ", "date": "2024-09-15"},
            {"title": None, "date": "2024-09-15"},
            {"title": 7, "date": "2024-09-15"},
            {"date": "2024-09-15"},
            {"title": "A"},
            {"title": "A", "date": None},
            {"title": "A", "date": "2024-9-15"},
            {"title": "A", "date": "2024/09/15"},
            {"title": "A", "date": "2024-02-30"},
            {"title": "A", "date": "2023-13-01"},
            {"title": "A", "date": " 2024-09-15"},
            {"title": "A", "date": "Week 3 Monday"},
            {"title": "A", "date": 20240915},
            "Homework 1 on 2024-09-15",
            None,
            ["A", "2024-09-15"],
        ],
    )
    def test_rejected_candidates(self, validator, candidate):
        ok, reason = validator.check_candidate(candidate)
        assert not ok
        assert reason

    def test_leap_day_accepted(self, validator):
        ok, _ = validator.check_candidate({"title": "Leap", "date": "2024-02-29"})
        assert ok

    def test_dropped_candidates_are_logged(self, validator, caplog):
        raw = reply(events=[{"title": "A", "date": "2024-09-15"}, {"title": "B", "date": "TBD"}])

        with caplog.at_level(logging.DEBUG, logger="syllabus_calendar.extraction.validator"):
            validator.validate(raw)

        assert "Dropped 1 of 2 candidate events" in caplog.text
        assert "invalid date 'TBD'" in caplog.text

    def test_all_invalid_yields_empty_result(self, validator):
        result = validator.validate(reply(events=[{"title": ""}, {"date": "x"}]))
        assert result.events == []


class TestEventSanitization:

    def test_fields_trimmed(self, validator):
        raw = reply(
            events=[
                {
                    "title": "  Homework 1 ",
                    "description": "  Problems 1-5  ",
                    "date": "2024-09-15",
                    "time": " 23:59 ",
                    "location": "  Room 204 ",
                }
            ]
        )

        event = validator.validate(raw).events[0]

        assert event.title == "Homework 1"
        assert event.description == "Problems 1-5"
        assert event.time == "23:59"
        assert event.location == "Room 204"

    def test_optional_fields_absent_when_blank(self, validator):
        raw = reply(events=[{"title": "Reading", "date": "2024-09-18", "time": "  ", "location": ""}])

        event = validator.validate(raw).events[0]

        assert event.time is None
        assert event.is_all_day
        assert event.location is None
        assert event.description == ""
        assert event.course is None

    def test_unparseable_time_means_all_day(self, validator):
        raw = reply(events=[{"title": "Exam", "date": "2024-10-16", "time": "11:59 PM"}])
        assert validator.validate(raw).events[0].time is None

    def test_unknown_type_and_priority_coerced(self, validator):
        raw = reply(events=[{"title": "Seminar", "date": "2024-09-20", "type": "seminar", "priority": "urgent"}])

        event = validator.validate(raw).events[0]

        assert event.type == EventType.OTHER
        assert event.priority == EventPriority.MEDIUM

    def test_missing_type_and_priority_defaulted(self, validator):
        event = validator.validate(reply(events=[{"title": "X", "date": "2024-09-20"}])).events[0]

        assert event.type == EventType.OTHER
        assert event.priority == EventPriority.MEDIUM

    def test_type_and_priority_case_insensitive(self, validator):
        raw = reply(events=[{"title": "Final", "date": "2024-12-10", "type": "EXAM", "priority": "High"}])

        event = validator.validate(raw).events[0]

        assert event.type == EventType.EXAM
        assert event.priority == EventPriority.HIGH

    def test_ids_generated_not_copied(self, validator):
        raw = reply(
            events=[
                {"id": "model-id", "title": "A", "date": "2024-09-15"},
                {"id": "model-id", "title": "B", "date": "2024-09-16"},
            ]
        )

        events = validator.validate(raw).events

        assert all(e.id != "model-id" for e in events)
        assert events[0].id != events[1].id
        assert all(e.id.startswith("event-") for e in events)

    def test_valid_events_keep_reply_order(self, validator, model_reply):
        titles = [e.title for e in validator.validate(model_reply).events]
        assert titles == ["Homework 1", "Midterm Exam", "Chapter 1 and 2"]


class TestMetadata:

    def test_metadata_copied_and_trimmed(self, validator, model_reply):
        result = validator.validate(model_reply)

        assert result.courseName == "CS 101: Introduction to Computer Science"
        assert result.instructor == "Dr. Ada Lovelace"
        assert result.semester == "Fall 2024"
        assert result.year == 2024

    def test_metadata_stringified(self, validator):
        result = validator.validate(reply(courseName=101, semester="  Fall  ", instructor=None))

        assert result.courseName == "101"
        assert result.semester == "Fall"
        assert result.instructor is None

    @pytest.mark.parametrize(
        "year, expected",
        [("2025", 2025), (2024, 2024), (2024.0, 2024), (" 2026 ", 2026), ("next year", None), (None, None), ("", None)],
    )
    def test_year_coerced(self, validator, year, expected):
        assert validator.validate(reply(year=year)).year == expected
