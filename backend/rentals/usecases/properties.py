from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable

from ..domain.availability import (
    PropertyAvailabilityDisplay,
    calculate_availability,
    create_availability_display,
    get_properties_availability,
)
from ..domain.calendar import DEFAULT_WEEKS, CalendarDay, generate_calendar
from ..domain.entities import NewProperty, Property, PropertyPatch, PropertySpecifications, apply_patch
from ..domain.errors import InvalidPriceError, PropertyNotFoundError
from ..domain.repositories import PropertyRepository, ReservationRepository
from ..models import ReservationStatus
from ..utils.ids import IdFactory, SequentialIdGenerator
from ..utils.time import utc_now

logger = logging.getLogger(__name__)


class PropertyService:
    """Property CRUD plus the read-side availability and calendar views."""

    def __init__(
        self,
        properties: PropertyRepository,
        reservations: ReservationRepository,
        *,
        id_factory: IdFactory | None = None,
        clock: Callable[[], datetime] = utc_now,
        calendar_weeks: int = DEFAULT_WEEKS,
    ) -> None:
        self.properties = properties
        self.reservations = reservations
        self.id_factory = id_factory or SequentialIdGenerator()
        self.clock = clock
        self.calendar_weeks = calendar_weeks

    async def create_property(self, request: NewProperty) -> Property:
        _check_price(request.price)
        now = self.clock()
        prop = Property(
            id=self.id_factory(),
            name=request.name,
            description=request.description,
            specifications=request.specifications,
            price=request.price,
            availability=request.availability,
            created_at=now,
            updated_at=now,
        )
        await self.properties.save(prop)
        logger.info("Property %s created", prop.id)
        return prop

    async def get_property(self, property_id: str) -> Property | None:
        return await self.properties.get(property_id)

    async def get_all_properties(self) -> list[Property]:
        return await self.properties.list_all()

    async def update_property(self, property_id: str, patch: PropertyPatch) -> Property:
        prop = await self._require(property_id)
        if patch.price is not None:
            _check_price(patch.price)

        now = self.clock()
        if now <= prop.updated_at:
            now = prop.updated_at + timedelta(microseconds=1)
        specifications = prop.specifications
        if patch.specifications is not None:
            merged = {**specifications.to_dict(), **patch.specifications}
            specifications = PropertySpecifications.from_dict(merged)
        updated = apply_patch(
            prop,
            replace(patch, specifications=None),
            specifications=specifications,
            updated_at=now,
        )

        await self.properties.update(property_id, updated)
        logger.info("Property %s updated", property_id)
        return updated

    async def delete_property(self, property_id: str) -> bool:
        await self._require(property_id)
        deleted = await self.properties.delete(property_id)
        logger.info("Property %s deleted", property_id)
        return deleted

    async def get_availability(self, property_id: str) -> PropertyAvailabilityDisplay:
        prop = await self._require(property_id)
        reservations = await self.reservations.list_by_property(property_id)
        info = calculate_availability(prop, reservations, self.clock())
        return create_availability_display(prop, info)

    async def list_availability(self) -> list[PropertyAvailabilityDisplay]:
        properties = await self.properties.list_all()
        reservations = await self.reservations.list_all()
        return get_properties_availability(properties, reservations, self.clock())

    async def get_calendar(
        self,
        property_id: str,
        start_date: date | None = None,
        weeks: int | None = None,
    ) -> list[CalendarDay]:
        prop = await self._require(property_id)
        reservations = [
            res
            for res in await self.reservations.list_by_property(property_id)
            if res.status != ReservationStatus.CANCELLED
        ]
        today = self.clock().date()
        return generate_calendar(
            prop,
            reservations,
            start_date or today,
            weeks if weeks is not None else self.calendar_weeks,
            today=today,
        )

    async def _require(self, property_id: str) -> Property:
        prop = await self.properties.get(property_id)
        if prop is None:
            raise PropertyNotFoundError(f"property with id {property_id} not found")
        return prop


def _check_price(price: Decimal) -> None:
    if price < 0:
        raise InvalidPriceError("price must be non-negative")
