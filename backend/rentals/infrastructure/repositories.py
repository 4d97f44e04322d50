from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.entities import Client, Property, PropertySpecifications, Reservation
from ..domain.errors import ClientNotFoundError, PropertyNotFoundError, ReservationNotFoundError
from ..models import ClientRecord, PropertyRecord, ReservationRecord


def _client_from_row(row: ClientRecord) -> Client:
    return Client(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _property_from_row(row: PropertyRecord) -> Property:
    return Property(
        id=row.id,
        name=row.name,
        description=row.description,
        specifications=PropertySpecifications.from_dict(row.specifications),
        price=row.price,
        availability=row.availability,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _reservation_from_row(row: ReservationRecord) -> Reservation:
    return Reservation(
        id=row.id,
        client_id=row.client_id,
        property_id=row.property_id,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        time=row.time,
        number_of_guests=row.number_of_guests,
        status=row.status,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyClientRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, client: Client) -> None:
        self.session.add(
            ClientRecord(
                id=client.id,
                name=client.name,
                email=client.email,
                phone=client.phone,
                created_at=client.created_at,
                updated_at=client.updated_at,
            )
        )
        await self.session.flush()

    async def get(self, client_id: str) -> Client | None:
        row = await self.session.get(ClientRecord, client_id)
        return _client_from_row(row) if row is not None else None

    async def list_all(self) -> list[Client]:
        rows = await self.session.scalars(select(ClientRecord).order_by(ClientRecord.created_at.desc()))
        return [_client_from_row(row) for row in rows]

    async def update(self, client_id: str, client: Client) -> None:
        row = await self.session.get(ClientRecord, client_id)
        if row is None:
            raise ClientNotFoundError(f"client with id {client_id} not found")
        row.name = client.name
        row.email = client.email
        row.phone = client.phone
        row.updated_at = client.updated_at
        await self.session.flush()

    async def delete(self, client_id: str) -> bool:
        result = await self.session.execute(delete(ClientRecord).where(ClientRecord.id == client_id))
        return bool(result.rowcount)


class SqlAlchemyReservationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, reservation: Reservation) -> None:
        self.session.add(
            ReservationRecord(
                id=reservation.id,
                client_id=reservation.client_id,
                property_id=reservation.property_id,
                starts_at=reservation.starts_at,
                ends_at=reservation.ends_at,
                time=reservation.time,
                number_of_guests=reservation.number_of_guests,
                status=reservation.status,
                notes=reservation.notes,
                created_at=reservation.created_at,
                updated_at=reservation.updated_at,
            )
        )
        await self.session.flush()

    async def get(self, reservation_id: str) -> Reservation | None:
        row = await self.session.get(ReservationRecord, reservation_id)
        return _reservation_from_row(row) if row is not None else None

    async def list_all(self) -> list[Reservation]:
        rows = await self.session.scalars(select(ReservationRecord).order_by(ReservationRecord.starts_at))
        return [_reservation_from_row(row) for row in rows]

    async def list_by_client(self, client_id: str) -> list[Reservation]:
        stmt = (
            select(ReservationRecord)
            .where(ReservationRecord.client_id == client_id)
            .order_by(ReservationRecord.starts_at)
        )
        return [_reservation_from_row(row) for row in await self.session.scalars(stmt)]

    async def list_by_property(self, property_id: str) -> list[Reservation]:
        stmt = (
            select(ReservationRecord)
            .where(ReservationRecord.property_id == property_id)
            .order_by(ReservationRecord.starts_at)
        )
        return [_reservation_from_row(row) for row in await self.session.scalars(stmt)]

    async def update(self, reservation_id: str, reservation: Reservation) -> None:
        row = await self.session.get(ReservationRecord, reservation_id)
        if row is None:
            raise ReservationNotFoundError(f"reservation with id {reservation_id} not found")
        row.property_id = reservation.property_id
        row.starts_at = reservation.starts_at
        row.ends_at = reservation.ends_at
        row.time = reservation.time
        row.number_of_guests = reservation.number_of_guests
        row.status = reservation.status
        row.notes = reservation.notes
        row.updated_at = reservation.updated_at
        await self.session.flush()

    async def delete(self, reservation_id: str) -> bool:
        result = await self.session.execute(
            delete(ReservationRecord).where(ReservationRecord.id == reservation_id)
        )
        return bool(result.rowcount)


class SqlAlchemyPropertyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, property: Property) -> None:
        self.session.add(
            PropertyRecord(
                id=property.id,
                name=property.name,
                description=property.description,
                specifications=property.specifications.to_dict(),
                price=property.price,
                availability=property.availability,
                created_at=property.created_at,
                updated_at=property.updated_at,
            )
        )
        await self.session.flush()

    async def get(self, property_id: str) -> Property | None:
        row = await self.session.get(PropertyRecord, property_id)
        return _property_from_row(row) if row is not None else None

    async def list_all(self) -> list[Property]:
        rows = await self.session.scalars(select(PropertyRecord).order_by(PropertyRecord.created_at))
        return [_property_from_row(row) for row in rows]

    async def update(self, property_id: str, property: Property) -> None:
        row = await self.session.get(PropertyRecord, property_id)
        if row is None:
            raise PropertyNotFoundError(f"property with id {property_id} not found")
        row.name = property.name
        row.description = property.description
        row.specifications = property.specifications.to_dict()
        row.price = property.price
        row.availability = property.availability
        row.updated_at = property.updated_at
        await self.session.flush()

    async def delete(self, property_id: str) -> bool:
        result = await self.session.execute(delete(PropertyRecord).where(PropertyRecord.id == property_id))
        return bool(result.rowcount)
