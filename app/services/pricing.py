"""Reservation price quote: whole days × daily rate, minimum one day."""

from datetime import date
from decimal import Decimal
from typing import Optional
from app.exceptions import ValidationError


def calculate_price(daily_rate, start_date: date, end_date: date, today: Optional[date] = None) -> Decimal:
    """
    Quote a reservation. Rejects an end before the start and a start in the past.
    Same-day returns are billed as one day.
    """
    today = today or date.today()
    if start_date is None or end_date is None:
        raise ValidationError("Start and end dates are required")
    if end_date < start_date:
        raise ValidationError(f"End date {end_date} is before start date {start_date}")
    if start_date < today:
        raise ValidationError(f"Start date {start_date} is in the past")

    days = max(1, (end_date - start_date).days)
    return Decimal(days) * Decimal(str(daily_rate))
