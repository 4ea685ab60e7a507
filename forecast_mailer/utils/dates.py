"""Date helpers."""

from datetime import UTC, date, datetime, timedelta


def tomorrow_date_string(today: date | None = None) -> str:
    """Return tomorrow's date (UTC) as ``YYYY-MM-DD``."""
    today = today or datetime.now(UTC).date()
    return (today + timedelta(days=1)).isoformat()
