"""Date parsing utilities for healthcare claims processing."""

from __future__ import annotations

from datetime import date, datetime

# Reasonable date bounds for healthcare claims
MIN_VALID_YEAR = 1900
MAX_VALID_YEAR = 2100

DATE_FORMATS = (
    "%Y-%m-%d",  # ISO 8601
    "%m/%d/%Y",  # US format
    "%Y%m%d",  # Compact
)


def parse_flexible_date(date_str: str | None) -> date | None:
    """Parse a service date from the formats extraction commonly produces.

    Supports the following formats:
    - ISO 8601: YYYY-MM-DD (e.g., 2024-01-15)
    - US format: MM/DD/YYYY (e.g., 01/15/2024)
    - Compact: YYYYMMDD (e.g., 20240115)

    Surrounding whitespace is ignored. Dates that do not exist on the
    calendar (Feb 30) or fall outside 1900-2100 are rejected.

    Args:
        date_str: Date string to parse, or None

    Returns:
        Parsed date, or None if parsing fails or input is None

    Examples:
        >>> parse_flexible_date("2024-01-15")
        datetime.date(2024, 1, 15)
        >>> parse_flexible_date("01/15/2024")
        datetime.date(2024, 1, 15)
        >>> parse_flexible_date("2024-02-30") is None
        True
    """
    if not date_str:
        return None

    text = str(date_str).strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            continue
        if MIN_VALID_YEAR <= parsed.year <= MAX_VALID_YEAR:
            return parsed

    return None


def is_valid_service_date(date_str: str | None, today: date | None = None) -> bool:
    """True when the date parses and is not in the future."""
    parsed = parse_flexible_date(date_str)
    if parsed is None:
        return False
    return parsed <= (today or date.today())


def days_since(date_str: str | None, today: date | None = None) -> int | None:
    """Whole days elapsed since `date_str`, or None if it does not parse."""
    parsed = parse_flexible_date(date_str)
    if parsed is None:
        return None
    return ((today or date.today()) - parsed).days
