from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..models import AvailabilityStatus
from .entities import Property, Reservation

DEFAULT_WEEKS = 4


@dataclass(frozen=True)
class CalendarDay:
    date: date
    is_available: bool
    is_reserved: bool
    is_today: bool
    is_past: bool
    reservation: Optional[Reservation] = None


def _as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def find_reservation_on(day: date, reservations: Sequence[Reservation]) -> Optional[Reservation]:
    """First reservation, in the given order, whose [check-in, checkout) days include `day`."""
    for res in reservations:
        if _as_day(res.starts_at) <= day < _as_day(res.ends_at):
            return res
    return None


def generate_calendar(
    property: Property,
    reservations: Sequence[Reservation],
    start_date: date | datetime,
    weeks: int = DEFAULT_WEEKS,
    *,
    today: date | datetime,
) -> list[CalendarDay]:
    """Classify each of the `weeks * 7` days from `start_date` as past, today, reserved or available."""
    first = _as_day(start_date)
    today = _as_day(today)
    bookable = property.availability == AvailabilityStatus.AVAILABLE

    days: list[CalendarDay] = []
    for offset in range(weeks * 7):
        day = first + timedelta(days=offset)
        reservation = find_reservation_on(day, reservations)
        is_past = day < today
        days.append(
            CalendarDay(
                date=day,
                is_available=not is_past and reservation is None and bookable,
                is_reserved=reservation is not None,
                is_today=day == today,
                is_past=is_past,
                reservation=reservation,
            )
        )
    return days
