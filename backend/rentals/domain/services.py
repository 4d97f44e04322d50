from datetime import datetime

from .entities import Reservation, ReservationPatch
from .errors import InvalidGuestCountError, InvalidRangeError, PastDateError


def validate_creation(
    starts_at: datetime,
    ends_at: datetime,
    number_of_guests: int,
    now: datetime,
) -> None:
    """
    Pure validation for a new reservation, evaluated against a single `now` snapshot.
    Raises on the first failing rule; returns nothing when the request is acceptable.
    """
    if starts_at < now:
        raise PastDateError("cannot create reservation for a past date")
    if ends_at < now:
        raise PastDateError("cannot create reservation with end date in the past")
    if ends_at <= starts_at:
        raise InvalidRangeError("end date must be after start date")
    _check_guests(number_of_guests)


def validate_update(existing: Reservation, patch: ReservationPatch, now: datetime) -> None:
    """
    Pure validation for a partial update. Only supplied fields are checked; a missing
    side of the date range is taken from `existing`. Status-only patches are accepted
    as-is so stale reservations can still be confirmed or cancelled.
    """
    if not patch.touches_schedule():
        return

    if patch.starts_at is not None and patch.starts_at < now:
        raise PastDateError("cannot update reservation to a past date")
    if patch.ends_at is not None and patch.ends_at < now:
        raise PastDateError("cannot update reservation with end date in the past")

    if patch.starts_at is not None or patch.ends_at is not None:
        starts_at = patch.starts_at if patch.starts_at is not None else existing.starts_at
        ends_at = patch.ends_at if patch.ends_at is not None else existing.ends_at
        if ends_at <= starts_at:
            raise InvalidRangeError("end date must be after start date")

    if patch.number_of_guests is not None:
        _check_guests(patch.number_of_guests)


def _check_guests(number_of_guests: int) -> None:
    if number_of_guests <= 0:
        raise InvalidGuestCountError("number of guests must be greater than 0")
