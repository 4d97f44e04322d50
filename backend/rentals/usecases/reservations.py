from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..domain.entities import Client, NewReservation, Reservation, ReservationPatch, apply_patch
from ..domain.errors import ClientNotFoundError, PropertyNotFoundError, ReservationNotFoundError
from ..domain.repositories import ClientRepository, PropertyRepository, ReservationRepository
from ..domain.services import validate_creation, validate_update
from ..models import ReservationStatus
from ..utils.ids import IdFactory, SequentialIdGenerator
from ..utils.time import utc_now

logger = logging.getLogger(__name__)

ReservationWithClient = tuple[Reservation, Optional[Client]]


class ReservationService:
    """
    Creates, updates and removes reservations.

    Validation and the client and property lookups run before any repository write,
    so a rejected request leaves storage untouched. Ids and the clock are injected
    so callers control both.
    """

    def __init__(
        self,
        reservations: ReservationRepository,
        clients: ClientRepository,
        properties: PropertyRepository,
        *,
        id_factory: IdFactory | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.reservations = reservations
        self.clients = clients
        self.properties = properties
        self.id_factory = id_factory or SequentialIdGenerator()
        self.clock = clock

    async def create_reservation(self, request: NewReservation) -> Reservation:
        client = await self.clients.get(request.client_id)
        if client is None:
            raise ClientNotFoundError(f"client with id {request.client_id} not found")
        if request.property_id is not None:
            await self._require_property(request.property_id)

        now = self.clock()
        validate_creation(request.starts_at, request.ends_at, request.number_of_guests, now)

        reservation = Reservation(
            id=self.id_factory(),
            client_id=request.client_id,
            property_id=request.property_id,
            starts_at=request.starts_at,
            ends_at=request.ends_at,
            time=request.time,
            number_of_guests=request.number_of_guests,
            status=ReservationStatus.PENDING,
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        await self.reservations.save(reservation)
        logger.info("Reservation %s created for client %s", reservation.id, reservation.client_id)
        return reservation

    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        return await self.reservations.get(reservation_id)

    async def get_all_reservations(self) -> list[Reservation]:
        return await self.reservations.list_all()

    async def get_reservations_by_client(self, client_id: str) -> list[Reservation]:
        return await self.reservations.list_by_client(client_id)

    async def get_reservations_by_property(self, property_id: str) -> list[Reservation]:
        return await self.reservations.list_by_property(property_id)

    async def get_reservation_with_client(self, reservation_id: str) -> ReservationWithClient:
        reservation = await self._require(reservation_id)
        return reservation, await self.clients.get(reservation.client_id)

    async def get_property_reservations_with_clients(self, property_id: str) -> list[ReservationWithClient]:
        rows: list[ReservationWithClient] = []
        for reservation in await self.reservations.list_by_property(property_id):
            rows.append((reservation, await self.clients.get(reservation.client_id)))
        return rows

    async def update_reservation(self, reservation_id: str, patch: ReservationPatch) -> Reservation:
        existing = await self._require(reservation_id)

        now = self.clock()
        validate_update(existing, patch, now)
        if patch.property_id is not None and "property_id" not in patch.clear:
            await self._require_property(patch.property_id)

        # updated_at must move forward even when the clock has not.
        if now <= existing.updated_at:
            now = existing.updated_at + timedelta(microseconds=1)
        updated = apply_patch(existing, patch, updated_at=now)

        await self.reservations.update(reservation_id, updated)
        logger.info("Reservation %s updated (status=%s)", reservation_id, updated.status)
        return updated

    async def delete_reservation(self, reservation_id: str) -> bool:
        await self._require(reservation_id)
        deleted = await self.reservations.delete(reservation_id)
        logger.info("Reservation %s deleted", reservation_id)
        return deleted

    async def confirm_reservation(self, reservation_id: str) -> Reservation:
        return await self.update_reservation(reservation_id, ReservationPatch(status=ReservationStatus.CONFIRMED))

    async def cancel_reservation(self, reservation_id: str) -> Reservation:
        return await self.update_reservation(reservation_id, ReservationPatch(status=ReservationStatus.CANCELLED))

    async def _require(self, reservation_id: str) -> Reservation:
        reservation = await self.reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f"reservation with id {reservation_id} not found")
        return reservation

    async def _require_property(self, property_id: str) -> None:
        if await self.properties.get(property_id) is None:
            raise PropertyNotFoundError(f"property with id {property_id} not found")
