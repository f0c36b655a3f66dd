# ABOUTME: Text rendering of comparison results for display.
# ABOUTME: Builds the daily summary sentence and per-day weekly rows.

from todaylastyear.models import ComparisonRecord, TodaySnapshot

LOADING_MESSAGE = "Loading weather information..."


def comparison_label(current: float, last_year: float) -> str:
    """Describe last year relative to today.

    A warmer today means last year was "colder than" today.
    """
    difference = current - last_year
    if difference > 0:
        return "colder than"
    if difference < 0:
        return "hotter than"
    return "the same as"


def daily_summary(snapshot: TodaySnapshot) -> str:
    if snapshot.current_temp is None or snapshot.last_year_temp is None:
        return LOADING_MESSAGE

    difference = snapshot.current_temp - snapshot.last_year_temp
    label = comparison_label(snapshot.current_temp, snapshot.last_year_temp)
    # int() truncates toward zero, matching whole-degree display elsewhere.
    return (
        f"Last year it was +{int(snapshot.last_year_temp)}°, "
        f"which is {label} today by {abs(int(difference))}°."
    )


def weekly_row(record: ComparisonRecord) -> str:
    """One line of the weekly table, e.g. 'Jun 09  Now: 18.3°C  Last Year: 15.0°C'."""
    return (
        f"{record.date.strftime('%b %d')}  "
        f"Now: {record.current_temp:.1f}°C  "
        f"Last Year: {record.last_year_temp:.1f}°C"
    )
