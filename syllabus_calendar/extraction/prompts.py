"""
Prompt templates for syllabus event extraction.

Pure string assembly; nothing here talks to a model.
"""

from syllabus_calendar.models import EventPriority, EventType

SYSTEM_PROMPT = (
    "You are an expert academic assistant specializing in syllabus analysis. "
    "Return only valid JSON responses."
)

_TYPES = "|".join(t.value for t in EventType)
_PRIORITIES = "|".join(p.value for p in EventPriority)

OUTPUT_SCHEMA = f"""{{
  "courseName": "Course name if mentioned",
  "instructor": "Instructor name if mentioned",
  "semester": "Semester if mentioned (e.g. 'Fall 2024')",
  "year": 2024,
  "events": [
    {{
      "title": "Assignment or event title",
      "description": "Detailed description of the assignment/event",
      "date": "YYYY-MM-DD format",
      "time": "HH:MM format (24-hour) if specific time mentioned, otherwise null",
      "type": "{_TYPES}",
      "priority": "{_PRIORITIES}",
      "location": "location if mentioned, otherwise null"
    }}
  ]
}}"""

FOCUS_ITEMS = [
    "Assignment due dates",
    "Exam dates and times",
    "Project deadlines",
    "Reading assignments with due dates",
    "Quiz dates",
    "Important class sessions or lectures",
    "Office hours (if recurring)",
    "Review sessions",
]

# Order matters: the model weighs earlier rules first
GUIDELINES = [
    "If no year is specified, assume the current or next academic year",
    'For relative dates like "Week 3 Monday" or "Sept 15", determine the actual calendar date when possible',
    'Mark exams and major projects as "high" priority',
    'Mark regular assignments as "medium" priority',
    'Mark readings and optional items as "low" priority',
    'If a time is mentioned (e.g. "due at 11:59 PM"), include it',
    "Only extract dates you are reasonably confident about; if a date is ambiguous, "
    "include it but note the ambiguity in the description",
]


def build_extraction_prompt(syllabus_text: str) -> str:
    """
    Build the extraction prompt for one syllabus.

    Args:
        syllabus_text: Normalized syllabus text, appended verbatim

    Returns:
        Complete user prompt
    """
    focus = "\n".join(f"- {item}" for item in FOCUS_ITEMS)
    guidelines = "\n".join(f"{i}. {rule}" for i, rule in enumerate(GUIDELINES, start=1))

    return f"""You are an expert at analyzing academic syllabi and extracting important dates and events.

Analyze the following syllabus text and extract ALL important dates, assignments, exams, and deadlines. Return the results as a JSON object with the following structure:

{OUTPUT_SCHEMA}

Focus on extracting:
{focus}

Guidelines:
{guidelines}

Return only valid JSON, no additional text or explanations.

Syllabus text:
{syllabus_text}"""
