from __future__ import annotations

from typing import Protocol

from .entities import Client, Property, Reservation


class ClientRepository(Protocol):
    async def save(self, client: Client) -> None: ...

    async def get(self, client_id: str) -> Client | None: ...

    async def list_all(self) -> list[Client]: ...

    async def update(self, client_id: str, client: Client) -> None: ...

    async def delete(self, client_id: str) -> bool: ...


class ReservationRepository(Protocol):
    async def save(self, reservation: Reservation) -> None: ...

    async def get(self, reservation_id: str) -> Reservation | None: ...

    async def list_all(self) -> list[Reservation]: ...

    async def list_by_client(self, client_id: str) -> list[Reservation]: ...

    async def list_by_property(self, property_id: str) -> list[Reservation]: ...

    async def update(self, reservation_id: str, reservation: Reservation) -> None: ...

    async def delete(self, reservation_id: str) -> bool: ...


class PropertyRepository(Protocol):
    async def save(self, property: Property) -> None: ...

    async def get(self, property_id: str) -> Property | None: ...

    async def list_all(self) -> list[Property]: ...

    async def update(self, property_id: str, property: Property) -> None: ...

    async def delete(self, property_id: str) -> bool: ...
