"""Error types raised by the extraction pipeline and its adapters."""

from typing import Optional


class AppError(Exception):
    """Root of every error this package raises on purpose.

    ``original_error`` keeps the library exception that triggered it, if any.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class APIClientError(AppError):
    """The LLM provider rejected a call or could not be reached."""


class APITimeoutError(APIClientError):
    """Every attempt to reach the LLM provider timed out."""


class DatabaseError(AppError):
    """Storage returned something an upsert did not expect."""


class ConfigurationError(AppError):
    """Settings are missing, unknown or unusable with the chosen backend."""


class PipelineError(AppError):
    """A pipeline step failed on its input."""


class DocumentReadError(PipelineError):
    """The report file is missing or is not a readable PDF."""


class ExtractionError(PipelineError):
    """The model reply was not JSON or did not match the requested schema."""
