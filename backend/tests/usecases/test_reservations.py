from datetime import datetime, timedelta
from decimal import Decimal
from itertools import count
from typing import Callable

import pytest
from rentals.domain.entities import (
    Client,
    NewReservation,
    Property,
    PropertySpecifications,
    Reservation,
    ReservationPatch,
)
from rentals.domain.errors import (
    ClientNotFoundError,
    InvalidGuestCountError,
    InvalidRangeError,
    PastDateError,
    PropertyNotFoundError,
    ReservationNotFoundError,
)
from rentals.infrastructure.memory import (
    InMemoryClientRepository,
    InMemoryPropertyRepository,
    InMemoryReservationRepository,
)
from rentals.models import AvailabilityStatus, ReservationStatus
from rentals.usecases.reservations import ReservationService

NOW = datetime(2026, 3, 10, 12, 0)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RecordingReservationRepo(InMemoryReservationRepository):
    """In-memory repository that records every write call."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[str] = []

    async def save(self, reservation: Reservation) -> None:
        self.writes.append("save")
        await super().save(reservation)

    async def update(self, reservation_id: str, reservation: Reservation) -> None:
        self.writes.append("update")
        await super().update(reservation_id, reservation)

    async def delete(self, reservation_id: str) -> bool:
        self.writes.append("delete")
        return await super().delete(reservation_id)


def _ids() -> Callable[[], str]:
    counter = count(1)
    return lambda: f"res-{next(counter)}"


async def _service(clock: FakeClock | None = None) -> tuple[ReservationService, RecordingReservationRepo]:
    clients = InMemoryClientRepository()
    await clients.save(
        Client(id="c-1", name="John Doe", email="john@example.com", phone="555-0100", created_at=NOW, updated_at=NOW)
    )
    properties = InMemoryPropertyRepository()
    for property_id in ("p-1", "p-2"):
        await properties.save(
            Property(
                id=property_id,
                name=f"Property {property_id}",
                specifications=PropertySpecifications(),
                price=Decimal("100"),
                availability=AvailabilityStatus.AVAILABLE,
                created_at=NOW,
                updated_at=NOW,
            )
        )
    repo = RecordingReservationRepo()
    service = ReservationService(repo, clients, properties, id_factory=_ids(), clock=clock or FakeClock(NOW))
    return service, repo


def _request(**overrides: object) -> NewReservation:
    values: dict[str, object] = {
        "client_id": "c-1",
        "property_id": "p-1",
        "starts_at": NOW + timedelta(days=1),
        "ends_at": NOW + timedelta(days=3),
        "time": "14:00",
        "number_of_guests": 2,
        "notes": "window seat",
    }
    values.update(overrides)
    return NewReservation(**values)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_create_returns_pending_reservation() -> None:
    service, repo = await _service()
    reservation = await service.create_reservation(_request())

    assert reservation.id == "res-1"
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.created_at == reservation.updated_at == NOW
    assert repo.writes == ["save"]


@pytest.mark.asyncio
async def test_create_then_read_round_trips() -> None:
    service, _ = await _service()
    created = await service.create_reservation(_request(notes=None))
    assert await service.get_reservation(created.id) == created


@pytest.mark.asyncio
async def test_create_requires_existing_client() -> None:
    service, repo = await _service()
    with pytest.raises(ClientNotFoundError):
        await service.create_reservation(_request(client_id="missing"))
    assert repo.writes == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "error"),
    [
        ({"starts_at": NOW - timedelta(days=1)}, PastDateError),
        ({"ends_at": NOW - timedelta(hours=1)}, PastDateError),
        ({"ends_at": NOW + timedelta(days=1)}, InvalidRangeError),
        ({"ends_at": NOW + timedelta(hours=12)}, InvalidRangeError),
        ({"number_of_guests": 0}, InvalidGuestCountError),
        ({"number_of_guests": -3}, InvalidGuestCountError),
    ],
)
async def test_create_rejects_invalid_requests_without_writing(
    overrides: dict[str, object],
    error: type[Exception],
) -> None:
    service, repo = await _service()
    with pytest.raises(error):
        await service.create_reservation(_request(**overrides))
    assert repo.writes == []
    assert await service.get_all_reservations() == []


@pytest.mark.asyncio
async def test_update_merges_fields_and_advances_updated_at() -> None:
    clock = FakeClock(NOW)
    service, _ = await _service(clock)
    created = await service.create_reservation(_request())

    clock.now = NOW + timedelta(minutes=5)
    updated = await service.update_reservation(created.id, ReservationPatch(number_of_guests=4, notes="crib"))

    assert updated.number_of_guests == 4
    assert updated.notes == "crib"
    assert updated.starts_at == created.starts_at
    assert updated.updated_at == NOW + timedelta(minutes=5)
    assert updated.created_at == created.created_at
    assert await service.get_reservation(created.id) == updated


@pytest.mark.asyncio
async def test_update_with_frozen_clock_still_moves_updated_at_forward() -> None:
    service, _ = await _service()
    created = await service.create_reservation(_request())
    updated = await service.update_reservation(created.id, ReservationPatch(time="16:00"))
    assert updated.updated_at > created.updated_at


@pytest.mark.asyncio
async def test_update_missing_reservation() -> None:
    service, repo = await _service()
    with pytest.raises(ReservationNotFoundError):
        await service.update_reservation("nope", ReservationPatch(notes="x"))
    assert repo.writes == []


@pytest.mark.asyncio
async def test_update_rejects_end_before_start_without_writing() -> None:
    service, repo = await _service()
    created = await service.create_reservation(_request())
    patch = ReservationPatch(starts_at=NOW + timedelta(days=5), ends_at=NOW + timedelta(days=4))
    with pytest.raises(InvalidRangeError):
        await service.update_reservation(created.id, patch)
    assert repo.writes == ["save"]


@pytest.mark.asyncio
async def test_update_rejects_zero_guests() -> None:
    service, _ = await _service()
    created = await service.create_reservation(_request())
    with pytest.raises(InvalidGuestCountError):
        await service.update_reservation(created.id, ReservationPatch(number_of_guests=0))


@pytest.mark.asyncio
async def test_confirm_and_cancel_after_dates_have_passed() -> None:
    clock = FakeClock(NOW)
    service, _ = await _service(clock)
    created = await service.create_reservation(_request())

    clock.now = NOW + timedelta(days=30)
    confirmed = await service.confirm_reservation(created.id)
    assert confirmed.status == ReservationStatus.CONFIRMED

    cancelled = await service.cancel_reservation(created.id)
    assert cancelled.status == ReservationStatus.CANCELLED
    assert cancelled.updated_at > confirmed.updated_at


@pytest.mark.asyncio
async def test_delete_existing_and_missing() -> None:
    service, repo = await _service()
    created = await service.create_reservation(_request())

    assert await service.delete_reservation(created.id) is True
    assert await service.get_reservation(created.id) is None

    with pytest.raises(ReservationNotFoundError):
        await service.delete_reservation(created.id)
    assert repo.writes == ["save", "delete"]


@pytest.mark.asyncio
async def test_reads_filter_by_client_and_property() -> None:
    service, _ = await _service()
    first = await service.create_reservation(_request(property_id="p-1"))
    second = await service.create_reservation(_request(property_id="p-2"))

    assert await service.get_all_reservations() == [first, second]
    assert await service.get_reservations_by_client("c-1") == [first, second]
    assert await service.get_reservations_by_client("c-2") == []
    assert await service.get_reservations_by_property("p-2") == [second]


@pytest.mark.asyncio
async def test_reservation_with_client() -> None:
    service, _ = await _service()
    created = await service.create_reservation(_request())

    reservation, client = await service.get_reservation_with_client(created.id)
    assert reservation == created
    assert client is not None and client.email == "john@example.com"

    rows = await service.get_property_reservations_with_clients("p-1")
    assert [(r.id, c.id if c else None) for r, c in rows] == [(created.id, "c-1")]

    with pytest.raises(ReservationNotFoundError):
        await service.get_reservation_with_client("missing")


@pytest.mark.asyncio
async def test_create_with_unknown_property_writes_nothing() -> None:
    service, repo = await _service()
    with pytest.raises(PropertyNotFoundError):
        await service.create_reservation(_request(property_id="nope"))
    assert repo.writes == []


@pytest.mark.asyncio
async def test_create_without_property() -> None:
    service, _ = await _service()
    reservation = await service.create_reservation(_request(property_id=None))
    assert reservation.property_id is None


@pytest.mark.asyncio
async def test_update_to_unknown_property_writes_nothing() -> None:
    service, repo = await _service()
    created = await service.create_reservation(_request())

    with pytest.raises(PropertyNotFoundError):
        await service.update_reservation(created.id, ReservationPatch(property_id="nope"))

    assert repo.writes == ["save"]
    assert (await service.get_reservation(created.id)).property_id == "p-1"


@pytest.mark.asyncio
async def test_update_moves_reservation_to_another_property() -> None:
    service, _ = await _service()
    created = await service.create_reservation(_request())
    moved = await service.update_reservation(created.id, ReservationPatch(property_id="p-2"))
    assert moved.property_id == "p-2"


@pytest.mark.asyncio
async def test_update_clears_nullable_fields() -> None:
    service, _ = await _service()
    created = await service.create_reservation(_request())

    cleared = await service.update_reservation(
        created.id,
        ReservationPatch(clear=frozenset({"notes", "property_id"})),
    )

    assert cleared.notes is None
    assert cleared.property_id is None
    assert cleared.starts_at == created.starts_at


def test_patch_refuses_to_clear_required_fields() -> None:
    with pytest.raises(ValueError):
        ReservationPatch(clear=frozenset({"starts_at"}))
