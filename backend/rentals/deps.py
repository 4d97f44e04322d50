from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import async_session
from .infrastructure.repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyPropertyRepository,
    SqlAlchemyReservationRepository,
)
from .usecases.clients import ClientService
from .usecases.properties import PropertyService
from .usecases.reservations import ReservationService
from .utils.ids import uuid_id


async def get_session() -> AsyncIterator[AsyncSession]:
    """One session and one transaction per request; an exception rolls it back."""
    async with async_session() as session:
        async with session.begin():
            yield session


async def get_client_repo(session: AsyncSession = Depends(get_session)) -> SqlAlchemyClientRepository:
    return SqlAlchemyClientRepository(session)


async def get_reservation_repo(
    session: AsyncSession = Depends(get_session),
) -> SqlAlchemyReservationRepository:
    return SqlAlchemyReservationRepository(session)


async def get_property_repo(session: AsyncSession = Depends(get_session)) -> SqlAlchemyPropertyRepository:
    return SqlAlchemyPropertyRepository(session)


async def get_client_service(
    clients: SqlAlchemyClientRepository = Depends(get_client_repo),
) -> ClientService:
    return ClientService(clients, id_factory=uuid_id)


async def get_reservation_service(
    reservations: SqlAlchemyReservationRepository = Depends(get_reservation_repo),
    clients: SqlAlchemyClientRepository = Depends(get_client_repo),
    properties: SqlAlchemyPropertyRepository = Depends(get_property_repo),
) -> ReservationService:
    return ReservationService(reservations, clients, properties, id_factory=uuid_id)


async def get_property_service(
    properties: SqlAlchemyPropertyRepository = Depends(get_property_repo),
    reservations: SqlAlchemyReservationRepository = Depends(get_reservation_repo),
) -> PropertyService:
    return PropertyService(
        properties,
        reservations,
        id_factory=uuid_id,
        calendar_weeks=get_settings().calendar_weeks,
    )
