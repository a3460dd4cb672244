"""Shared utility functions for the EML publisher.

Contains the canonical implementations of value formatting used across
the document builders. All callsites should import from here rather
than maintaining local copies.
"""

from datetime import date, datetime, timezone

from dateutil import parser as dateparser

NOT_SUPPLIED: str = "Not Supplied"
"""Placeholder rendered where EML requires a value the database lacks."""


def check_provided(value):
    """Return ``value``, or the ``"Not Supplied"`` placeholder when it is None.

    EML requires every field to carry a value, so absent database values
    degrade to a standard message instead of an empty element.
    """
    if value is None:
        return NOT_SUPPLIED
    return value


def to_calendar_date(value: str | date | datetime | None) -> str:
    """Render a timestamp as a calendar date (``YYYY-MM-DD``).

    ISO-8601 strings are truncated at the ``T`` separator. Timezone-aware
    datetimes are normalized to UTC before truncation. Strings without a
    ``T`` separator (e.g. PostgreSQL text output) are parsed first.

    Args:
        value: Timestamp, date, or ISO-8601 string.

    Returns:
        The date portion as ``YYYY-MM-DD``.

    Raises:
        ValueError: If ``value`` is None or cannot be parsed.
    """
    if value is None:
        raise ValueError("Cannot derive a calendar date from an empty value")
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.isoformat().split("T")[0]
    if isinstance(value, date):
        return value.isoformat()
    if "T" in value:
        return value.split("T")[0]
    return to_calendar_date(dateparser.parse(value))
