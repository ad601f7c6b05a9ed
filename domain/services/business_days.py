from datetime import date, timedelta

SATURDAY = 5
SUNDAY = 6


def is_business_day(day: date) -> bool:
    """Monday to Friday. Holidays are not considered."""
    return day.weekday() < SATURDAY


def current_or_last_business_day(reference: date) -> date:
    """Return ``reference`` if it is a business day, otherwise the Friday before it."""
    weekday = reference.weekday()
    if weekday == SATURDAY:
        return reference - timedelta(days=1)
    if weekday == SUNDAY:
        return reference - timedelta(days=2)
    return reference
