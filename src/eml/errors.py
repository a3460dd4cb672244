"""Exceptions raised by the EML pipeline.

Two failure categories reach the caller unchanged:

  BuildError    -- a query or required parameter could not be constructed
  NotFoundError -- a required record failed its cardinality expectation

Database driver errors (``psycopg.Error``) are not wrapped; they
propagate as-is.
"""


class EmlPipelineError(Exception):
    """Base class for EML pipeline failures.

    Attributes:
        message: Human-readable description naming the failed stage.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BuildError(EmlPipelineError):
    """Raised when a statement or required parameter cannot be built."""


class NotFoundError(EmlPipelineError):
    """Raised when a required record is missing or not distinct."""
