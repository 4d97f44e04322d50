from datetime import date, datetime, timedelta
from decimal import Decimal

from rentals.domain.calendar import find_reservation_on, generate_calendar
from rentals.domain.entities import Property, PropertySpecifications, Reservation
from rentals.models import AvailabilityStatus, ReservationStatus

TODAY = date(2026, 3, 10)


def _property(availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE) -> Property:
    return Property(
        id="p-1",
        name="Loft",
        specifications=PropertySpecifications(),
        price=Decimal("80"),
        availability=availability,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


def _reservation(reservation_id: str, check_in: datetime, check_out: datetime) -> Reservation:
    return Reservation(
        id=reservation_id,
        client_id="c-1",
        property_id="p-1",
        starts_at=check_in,
        ends_at=check_out,
        time="15:00",
        number_of_guests=1,
        status=ReservationStatus.CONFIRMED,
        created_at=datetime(2026, 1, 1),
        updated_at=datetime(2026, 1, 1),
    )


def test_one_week_with_two_reserved_days() -> None:
    start = date(2026, 3, 12)
    stay = _reservation("r-1", datetime(2026, 3, 14, 15, 0), datetime(2026, 3, 16, 11, 0))

    days = generate_calendar(_property(), [stay], start, 1, today=TODAY)

    assert len(days) == 7
    reserved = [d.date for d in days if d.is_reserved]
    assert reserved == [date(2026, 3, 14), date(2026, 3, 15)]
    assert all(d.is_available for d in days if not d.is_reserved)
    assert all(d.reservation is stay for d in days if d.is_reserved)
    assert not any(d.is_past or d.is_today for d in days)


def test_past_and_today_flags() -> None:
    days = generate_calendar(_property(), [], TODAY - timedelta(days=2), 1, today=TODAY)

    assert [d.is_past for d in days[:3]] == [True, True, False]
    assert days[2].is_today is True
    assert days[0].is_available is False
    assert days[2].is_available is True


def test_non_available_property_has_no_available_days() -> None:
    days = generate_calendar(_property(AvailabilityStatus.UNAVAILABLE), [], TODAY, 2, today=TODAY)
    assert len(days) == 14
    assert not any(d.is_available for d in days)
    assert not any(d.is_reserved for d in days)


def test_checkout_day_is_free() -> None:
    stay = _reservation("r-1", datetime(2026, 3, 11), datetime(2026, 3, 12))
    assert find_reservation_on(date(2026, 3, 11), [stay]) is stay
    assert find_reservation_on(date(2026, 3, 12), [stay]) is None


def test_first_matching_reservation_in_input_order_wins() -> None:
    a = _reservation("r-a", datetime(2026, 3, 11), datetime(2026, 3, 14))
    b = _reservation("r-b", datetime(2026, 3, 10), datetime(2026, 3, 15))

    days = generate_calendar(_property(), [a, b], datetime(2026, 3, 12, 18, 45), 1, today=TODAY)

    assert days[0].date == date(2026, 3, 12)
    assert days[0].reservation is a


def test_inputs_are_not_mutated() -> None:
    reservations = [_reservation("r-1", datetime(2026, 3, 11), datetime(2026, 3, 12))]
    snapshot = list(reservations)
    generate_calendar(_property(), reservations, TODAY, 1, today=TODAY)
    assert reservations == snapshot
