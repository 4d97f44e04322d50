"""Dict-backed repositories for development and tests. Data is lost on restart."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..domain.entities import Client, Property, Reservation
from ..domain.errors import (
    ClientNotFoundError,
    DuplicateIdError,
    PropertyNotFoundError,
    ReservationNotFoundError,
)


def _ensure_new(items: dict, item_id: str) -> None:
    if item_id in items:
        raise DuplicateIdError(f"id {item_id} is already stored")


class InMemoryClientRepository:
    def __init__(self) -> None:
        self._items: dict[str, Client] = {}

    async def save(self, client: Client) -> None:
        _ensure_new(self._items, client.id)
        self._items[client.id] = client

    async def get(self, client_id: str) -> Client | None:
        return self._items.get(client_id)

    async def list_all(self) -> list[Client]:
        return list(self._items.values())

    async def update(self, client_id: str, client: Client) -> None:
        if client_id not in self._items:
            raise ClientNotFoundError(f"client with id {client_id} not found")
        self._items[client_id] = client

    async def delete(self, client_id: str) -> bool:
        return self._items.pop(client_id, None) is not None


class InMemoryReservationRepository:
    def __init__(self) -> None:
        self._items: dict[str, Reservation] = {}

    async def save(self, reservation: Reservation) -> None:
        _ensure_new(self._items, reservation.id)
        self._items[reservation.id] = reservation

    async def get(self, reservation_id: str) -> Reservation | None:
        return self._items.get(reservation_id)

    async def list_all(self) -> list[Reservation]:
        return list(self._items.values())

    async def list_by_client(self, client_id: str) -> list[Reservation]:
        return [res for res in self._items.values() if res.client_id == client_id]

    async def list_by_property(self, property_id: str) -> list[Reservation]:
        return [res for res in self._items.values() if res.property_id == property_id]

    async def update(self, reservation_id: str, reservation: Reservation) -> None:
        if reservation_id not in self._items:
            raise ReservationNotFoundError(f"reservation with id {reservation_id} not found")
        self._items[reservation_id] = reservation

    async def delete(self, reservation_id: str) -> bool:
        return self._items.pop(reservation_id, None) is not None


class InMemoryPropertyRepository:
    def __init__(self) -> None:
        self._items: dict[str, Property] = {}

    async def save(self, property: Property) -> None:
        _ensure_new(self._items, property.id)
        self._items[property.id] = property

    async def get(self, property_id: str) -> Property | None:
        return self._items.get(property_id)

    async def list_all(self) -> list[Property]:
        return list(self._items.values())

    async def update(self, property_id: str, property: Property) -> None:
        if property_id not in self._items:
            raise PropertyNotFoundError(f"property with id {property_id} not found")
        self._items[property_id] = property

    async def delete(self, property_id: str) -> bool:
        return self._items.pop(property_id, None) is not None


@dataclass
class InMemoryStorage:
    clients: InMemoryClientRepository = field(default_factory=InMemoryClientRepository)
    reservations: InMemoryReservationRepository = field(default_factory=InMemoryReservationRepository)
    properties: InMemoryPropertyRepository = field(default_factory=InMemoryPropertyRepository)
