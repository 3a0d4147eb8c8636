"""Birth date validation. Year is optional (people share day and month only)."""

from datetime import date

from utils.timezone import now_utc


def is_valid_birth_date(day: int, month: int, year: int | None = None) -> bool:
    """
    Check a day/month/optional-year birth date.

    Month must be 1-12 and day 1-31. With a year, the year may not be in the
    future and the calendar date must exist (no 29 Feb in non-leap years).
    """
    if not 1 <= month <= 12:
        return False
    if not 1 <= day <= 31:
        return False

    if year:
        if year > now_utc().year:
            return False
        try:
            date(year, month, day)
        except ValueError:
            return False

    return True


def birth_date_to_iso(day: int, month: int, year: int | None = None) -> str | None:
    """YYYY-MM-DD, or None when the year is unknown or the date is invalid."""
    if not year or not is_valid_birth_date(day, month, year):
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"
