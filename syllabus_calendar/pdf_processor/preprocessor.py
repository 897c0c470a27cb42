"""
Text normalization for PDF content.

Syllabus text straight out of a PDF is full of hard line breaks, bullet
glyphs and typographic quotes. ``normalize_text`` flattens it into a single
clean line that is cheaper to send to the model and easier for it to read.
"""

import re
import unicodedata

from syllabus_calendar.utils.logging import get_logger

logger = get_logger(__name__)

BULLET_CHARS = "•·‣⁃▪◦●∙"
DOUBLE_QUOTES = "“”„‟″"
SINGLE_QUOTES = "‘’‚‛′"

LIGATURES = {
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬀ": "ff",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
}

_BULLETS_RE = re.compile(f"[{re.escape(BULLET_CHARS)}]")
_DOUBLE_QUOTES_RE = re.compile(f"[{re.escape(DOUBLE_QUOTES)}]")
_SINGLE_QUOTES_RE = re.compile(f"[{re.escape(SINGLE_QUOTES)}]")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,;:!?])")
# Only letters get a space inserted, so "11:59" and "3.5" stay intact
_PUNCT_BEFORE_LETTER_RE = re.compile(r"([.,;:!?])(?=[A-Za-z])")


class TextNormalizer:
    """Clean and normalize text extracted from PDFs."""

    def normalize(self, text: str) -> str:
        """
        Normalize text for model input.

        Args:
            text: Raw extracted text

        Returns:
            Single-line normalized text
        """
        if not text:
            return ""

        # Step 1: Drop control and format characters (whitespace is handled below)
        text = self._remove_control_characters(text)

        # Step 2: Plain ASCII for bullets, quotes and ligatures
        text = _BULLETS_RE.sub("-", text)
        text = _DOUBLE_QUOTES_RE.sub('"', text)
        text = _SINGLE_QUOTES_RE.sub("'", text)
        for old, new in LIGATURES.items():
            text = text.replace(old, new)

        # Step 3: Collapse whitespace, page breaks included
        text = _WHITESPACE_RE.sub(" ", text)

        # Step 4: Tighten spacing around punctuation
        text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
        text = _PUNCT_BEFORE_LETTER_RE.sub(r"\1 ", text)

        return text.strip()

    def _remove_control_characters(self, text: str) -> str:
        return "".join(
            char for char in text
            if char.isspace() or not unicodedata.category(char).startswith("C")
        )


_default_normalizer = TextNormalizer()


def normalize_text(text: str) -> str:
    """Normalize text with the default normalizer."""
    return _default_normalizer.normalize(text)
