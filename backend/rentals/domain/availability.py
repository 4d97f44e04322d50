"""
Point-in-time availability of a property, derived from its reservations.

Everything here is a pure function over already-loaded data: callers fetch the
property and reservations, pass an explicit `now`, and get new values back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..models import AvailabilityStatus, ReservationStatus
from .entities import Property, Reservation

ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class CurrentBookingInfo:
    reservation_id: str
    client_id: str
    check_in_date: datetime
    check_out_date: datetime
    duration_days: int
    status: ReservationStatus


@dataclass(frozen=True)
class PropertyAvailabilityInfo:
    is_available: bool
    current_booking: Optional[CurrentBookingInfo] = None
    next_available_date: Optional[datetime] = None
    booked_until: Optional[datetime] = None


@dataclass(frozen=True)
class CurrentBookingSummary:
    duration_days: int
    booked_until: datetime
    check_in_date: datetime
    check_out_date: datetime


@dataclass(frozen=True)
class PropertyAvailabilityDisplay:
    property_id: str
    property_name: str
    is_available: bool
    message: str
    current_booking: Optional[CurrentBookingSummary] = None
    next_available_date: Optional[datetime] = None


def booking_duration_days(starts_at: datetime, ends_at: datetime) -> int:
    """Whole days covered by a booking, rounded up; never negative."""
    seconds = (ends_at - starts_at).total_seconds()
    return max(math.ceil(seconds / _SECONDS_PER_DAY), 0)


def active_reservations(
    property_id: str,
    reservations: Iterable[Reservation],
    now: datetime,
) -> list[Reservation]:
    """Pending/confirmed reservations of the property that have not ended, by start then id."""
    active = [
        res
        for res in reservations
        if res.property_id == property_id and res.status in ACTIVE_STATUSES and res.ends_at >= now
    ]
    active.sort(key=lambda res: (res.starts_at, res.id))
    return active


def calculate_availability(
    property: Property,
    reservations: Sequence[Reservation],
    now: datetime,
) -> PropertyAvailabilityInfo:
    in_maintenance = property.availability == AvailabilityStatus.MAINTENANCE
    active = active_reservations(property.id, reservations, now)

    current = next((res for res in active if res.starts_at <= now <= res.ends_at), None)
    upcoming = next((res for res in active if res.starts_at > now), None)

    if current is not None:
        booking = CurrentBookingInfo(
            reservation_id=current.id,
            client_id=current.client_id,
            check_in_date=current.starts_at,
            check_out_date=current.ends_at,
            duration_days=booking_duration_days(current.starts_at, current.ends_at),
            status=current.status,
        )
        return PropertyAvailabilityInfo(
            is_available=False,
            current_booking=booking,
            booked_until=current.ends_at,
            # A following booking, back-to-back or not, does not move this date.
            next_available_date=current.ends_at + timedelta(days=1),
        )

    if upcoming is not None:
        return PropertyAvailabilityInfo(
            is_available=not in_maintenance,
            next_available_date=upcoming.starts_at,
        )

    return PropertyAvailabilityInfo(is_available=not in_maintenance, next_available_date=now)


def create_availability_display(
    property: Property,
    info: PropertyAvailabilityInfo,
) -> PropertyAvailabilityDisplay:
    if property.availability == AvailabilityStatus.MAINTENANCE:
        message = "Property is currently under maintenance"
    elif info.is_available:
        message = "Property is available now"
    elif info.current_booking is not None:
        booked_until = info.booked_until.date().isoformat() if info.booked_until else "N/A"
        message = (
            f"Property is booked for {info.current_booking.duration_days} day(s). "
            f"Available from {booked_until}"
        )
    elif info.next_available_date is not None:
        message = f"Property will be available on {info.next_available_date.date().isoformat()}"
    else:
        message = "Availability information not available"

    summary = None
    if info.current_booking is not None:
        summary = CurrentBookingSummary(
            duration_days=info.current_booking.duration_days,
            booked_until=info.current_booking.check_out_date,
            check_in_date=info.current_booking.check_in_date,
            check_out_date=info.current_booking.check_out_date,
        )

    return PropertyAvailabilityDisplay(
        property_id=property.id,
        property_name=property.name,
        is_available=info.is_available,
        message=message,
        current_booking=summary,
        next_available_date=info.next_available_date,
    )


def get_properties_availability(
    properties: Sequence[Property],
    reservations: Sequence[Reservation],
    now: datetime,
) -> list[PropertyAvailabilityDisplay]:
    displays: list[PropertyAvailabilityDisplay] = []
    for prop in properties:
        own = [res for res in reservations if res.property_id == prop.id]
        info = calculate_availability(prop, own, now)
        displays.append(create_availability_display(prop, info))
    return displays
