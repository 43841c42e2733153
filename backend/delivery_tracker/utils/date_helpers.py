from datetime import date


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return ``(first day, first day of next month)`` for a calendar month.

    The upper bound is exclusive: ``start <= d < end`` selects the month.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    start = date(year, month, 1)
    end = date(year + (1 if month == 12 else 0), (month % 12) + 1, 1)
    return start, end
