from datetime import datetime, timedelta

import pytest
from rentals.domain.entities import Reservation, ReservationPatch
from rentals.domain.errors import InvalidGuestCountError, InvalidRangeError, PastDateError
from rentals.domain.services import validate_creation, validate_update
from rentals.models import ReservationStatus

NOW = datetime(2026, 3, 10, 12, 0)


def _existing(starts_in_days: int = 2, ends_in_days: int = 5) -> Reservation:
    return Reservation(
        id="r-1",
        client_id="c-1",
        property_id="p-1",
        starts_at=NOW + timedelta(days=starts_in_days),
        ends_at=NOW + timedelta(days=ends_in_days),
        time="14:00",
        number_of_guests=2,
        status=ReservationStatus.PENDING,
        created_at=NOW - timedelta(days=10),
        updated_at=NOW - timedelta(days=10),
    )


def test_accepts_future_range_with_guests() -> None:
    assert validate_creation(NOW + timedelta(days=1), NOW + timedelta(days=3), 2, NOW) is None


def test_rejects_start_in_the_past() -> None:
    with pytest.raises(PastDateError):
        validate_creation(NOW - timedelta(minutes=1), NOW + timedelta(days=3), 2, NOW)


def test_rejects_end_in_the_past() -> None:
    # Start is valid; the end check fires before the ordering check.
    with pytest.raises(PastDateError):
        validate_creation(NOW + timedelta(days=1), NOW - timedelta(days=1), 2, NOW)


@pytest.mark.parametrize("ends_offset", [timedelta(0), -timedelta(hours=1)])
def test_rejects_end_not_after_start(ends_offset: timedelta) -> None:
    start = NOW + timedelta(days=2)
    with pytest.raises(InvalidRangeError):
        validate_creation(start, start + ends_offset, 2, NOW)


@pytest.mark.parametrize("guests", [0, -1])
def test_rejects_non_positive_guest_count(guests: int) -> None:
    with pytest.raises(InvalidGuestCountError):
        validate_creation(NOW + timedelta(days=1), NOW + timedelta(days=2), guests, NOW)


def test_start_equal_to_now_is_not_past() -> None:
    validate_creation(NOW, NOW + timedelta(days=1), 1, NOW)


def test_update_status_only_skips_date_checks_for_stale_reservation() -> None:
    stale = _existing(starts_in_days=-10, ends_in_days=-5)
    validate_update(stale, ReservationPatch(status=ReservationStatus.CONFIRMED), NOW)


def test_update_notes_only_skips_date_checks() -> None:
    stale = _existing(starts_in_days=-10, ends_in_days=-5)
    validate_update(stale, ReservationPatch(notes="late checkout", time="18:00"), NOW)


def test_update_rejects_past_start() -> None:
    with pytest.raises(PastDateError):
        validate_update(_existing(), ReservationPatch(starts_at=NOW - timedelta(days=1)), NOW)


def test_update_rejects_past_end() -> None:
    with pytest.raises(PastDateError):
        validate_update(_existing(), ReservationPatch(ends_at=NOW - timedelta(days=1)), NOW)


def test_update_end_only_compared_with_existing_start() -> None:
    existing = _existing(starts_in_days=2, ends_in_days=5)
    with pytest.raises(InvalidRangeError):
        validate_update(existing, ReservationPatch(ends_at=existing.starts_at), NOW)


def test_update_start_only_compared_with_existing_end() -> None:
    existing = _existing(starts_in_days=2, ends_in_days=5)
    with pytest.raises(InvalidRangeError):
        validate_update(existing, ReservationPatch(starts_at=NOW + timedelta(days=6)), NOW)


def test_update_both_dates_checked_against_each_other() -> None:
    existing = _existing(starts_in_days=2, ends_in_days=5)
    patch = ReservationPatch(starts_at=NOW + timedelta(days=8), ends_at=NOW + timedelta(days=7))
    with pytest.raises(InvalidRangeError):
        validate_update(existing, patch, NOW)

    moved = ReservationPatch(starts_at=NOW + timedelta(days=8), ends_at=NOW + timedelta(days=9))
    validate_update(existing, moved, NOW)


def test_update_rejects_zero_guests() -> None:
    with pytest.raises(InvalidGuestCountError):
        validate_update(_existing(), ReservationPatch(number_of_guests=0), NOW)
