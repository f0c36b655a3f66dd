# ABOUTME: Calendar helpers for pairing a day with the same day one year earlier.
# ABOUTME: Also builds the trailing window of days that the weekly comparison covers.

from datetime import date, timedelta


def resolve_last_year(day: date) -> date:
    """Return the same calendar day one year earlier.

    Calendar arithmetic, not a 365-day offset: Feb 29 has no counterpart in
    the previous year and clamps to Feb 28.
    """
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)


def trailing_days(today: date, count: int = 7) -> list[date]:
    """The `count` days strictly before `today`, most recent first."""
    return [today - timedelta(days=offset) for offset in range(1, count + 1)]


def date_key(day: date) -> str:
    """Format a day the way the archive API expects it (YYYY-MM-DD)."""
    return day.isoformat()
