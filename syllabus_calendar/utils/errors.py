"""
Custom exceptions for the syllabus calendar pipeline.

Every stage raises one of these so callers can tell a bad upload apart from a
model outage. Each class carries a ``category`` the HTTP or CLI layer can map
to its own status codes.
"""

from typing import Any, Optional


class SyllabusCalendarException(Exception):
    """Base exception for all syllabus calendar errors."""

    category = "internal"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Document Exceptions
# =============================================================================


class DocumentError(SyllabusCalendarException):
    """Base exception for document decoding errors."""

    category = "format"


class InvalidFormat(DocumentError):
    """Input bytes are not a recognizable PDF document."""

    pass


class UnsupportedScannedDocument(DocumentError):
    """Document carries too little extractable text, likely image-only."""

    category = "content"

    def __init__(self, chars_per_page: float, threshold: int) -> None:
        """Initialize with text density information."""
        message = "Scanned PDFs are not currently supported. Please provide a text-based PDF."
        super().__init__(
            message,
            {"chars_per_page": round(chars_per_page, 1), "threshold": threshold},
        )


class InsufficientContent(DocumentError):
    """Too little text after cleaning to be worth sending to a model."""

    category = "content"

    def __init__(self, text_length: int, minimum: int) -> None:
        """Initialize with length information."""
        message = "PDF appears to contain very little text content"
        super().__init__(message, {"text_length": text_length, "minimum": minimum})


class DocumentTooLarge(DocumentError):
    """Document exceeds the maximum accepted size."""

    def __init__(self, file_size: int, max_size: int, filename: str) -> None:
        """Initialize with size information."""
        message = f"PDF '{filename}' size ({file_size} bytes) exceeds maximum ({max_size} bytes)"
        super().__init__(message, {"file_size": file_size, "max_size": max_size, "filename": filename})


# =============================================================================
# Model Exceptions
# =============================================================================


class ModelError(SyllabusCalendarException):
    """Transport failure, timeout or empty reply from a model backend."""

    category = "model"

    def __init__(self, message: str, model: Optional[str] = None) -> None:
        """Initialize with the model that failed."""
        super().__init__(message, {"model": model} if model else None)
        self.model = model


class MalformedResponse(SyllabusCalendarException):
    """Model replied, but the reply is not a usable JSON object."""

    category = "malformed"


class ExtractionFailed(SyllabusCalendarException):
    """Both the primary and the fallback model attempts failed."""

    category = "model"

    def __init__(self, cause: Exception) -> None:
        """Initialize with the error of the last attempt."""
        message = "AI processing failed. Please try again or check your syllabus format."
        super().__init__(message, {"cause": str(cause)})
        self.cause = cause


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(SyllabusCalendarException):
    """Configuration error."""

    category = "config"


class MisconfiguredCredential(ConfigurationError):
    """Required API credential is missing."""

    def __init__(self, config_name: str) -> None:
        """Initialize with the name of the missing credential."""
        message = f"{config_name} not configured. Please set the {config_name} environment variable."
        super().__init__(message, {"config_name": config_name})
        self.config_name = config_name
