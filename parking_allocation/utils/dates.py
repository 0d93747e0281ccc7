"""Date helpers."""

from datetime import datetime, timedelta


def add_business_days(start: datetime, days: int) -> datetime:
    """Add business days to a datetime, skipping Saturdays and Sundays."""
    result = start
    added = 0
    while added < days:
        result += timedelta(days=1)
        if result.weekday() < 5:
            added += 1
    return result


def format_log_timestamp(moment: datetime) -> str:
    """Minute precision timestamp used in process logs."""
    return moment.strftime("%Y-%m-%d %H:%M")
