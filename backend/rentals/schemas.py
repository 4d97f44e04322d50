from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer

from .domain.availability import CurrentBookingSummary, PropertyAvailabilityDisplay
from .domain.calendar import CalendarDay
from .domain.entities import (
    Client,
    ClientPatch,
    NewClient,
    NewProperty,
    NewReservation,
    Property,
    PropertyPatch,
    PropertySpecifications,
    Reservation,
    ReservationPatch,
)
from .models import AvailabilityStatus, PropertyType, ReservationStatus
from .utils.time import to_utc_naive


def _as_utc(dt: datetime) -> str:
    return dt.replace(tzinfo=timezone.utc).isoformat()


def _optional_utc(dt: Optional[datetime]) -> Optional[datetime]:
    return to_utc_naive(dt) if dt is not None else None


def _cleared(payload: BaseModel, *nullable: str) -> frozenset[str]:
    """Nullable fields sent explicitly as null."""
    return frozenset(name for name in nullable if name in payload.model_fields_set and getattr(payload, name) is None)


class ClientCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    phone: str

    def to_domain(self) -> NewClient:
        return NewClient(name=self.name, email=self.email, phone=self.phone)


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_patch(self) -> ClientPatch:
        return ClientPatch(name=self.name, email=self.email, phone=self.phone)


class ClientRead(BaseModel):
    client_id: str
    name: str
    email: str
    phone: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _ser_datetime(self, dt: datetime) -> str:
        return _as_utc(dt)

    @classmethod
    def from_entity(cls, client: Client) -> "ClientRead":
        return cls(
            client_id=client.id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )


class Specifications(BaseModel):
    type: Optional[PropertyType] = None
    area: Optional[float] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=1)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    amenities: list[str] = Field(default_factory=list)
    location: Optional[str] = None

    def to_domain(self) -> PropertySpecifications:
        return PropertySpecifications.from_dict(self.model_dump())


class PropertyCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    specifications: Specifications = Field(default_factory=Specifications)
    price: Decimal = Field(ge=0)
    availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE

    def to_domain(self) -> NewProperty:
        return NewProperty(
            name=self.name,
            description=self.description,
            specifications=self.specifications.to_domain(),
            price=self.price,
            availability=self.availability,
        )


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    specifications: Optional[Specifications] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    availability: Optional[AvailabilityStatus] = None

    def to_patch(self) -> PropertyPatch:
        return PropertyPatch(
            name=self.name,
            description=self.description,
            specifications=(
                self.specifications.model_dump(exclude_unset=True)
                if self.specifications is not None
                else None
            ),
            price=self.price,
            availability=self.availability,
            clear=_cleared(self, "description"),
        )


class PropertyRead(BaseModel):
    property_id: str
    name: str
    description: Optional[str]
    specifications: dict[str, Any]
    price: Decimal
    availability: AvailabilityStatus
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _ser_datetime(self, dt: datetime) -> str:
        return _as_utc(dt)

    @classmethod
    def from_entity(cls, prop: Property) -> "PropertyRead":
        return cls(
            property_id=prop.id,
            name=prop.name,
            description=prop.description,
            specifications=prop.specifications.to_dict(),
            price=prop.price,
            availability=prop.availability,
            created_at=prop.created_at,
            updated_at=prop.updated_at,
        )


class ReservationCreate(BaseModel):
    client_id: str
    property_id: Optional[str] = None
    starts_at: datetime
    ends_at: datetime
    time: str = Field(max_length=10)
    number_of_guests: int = Field(ge=1)
    notes: Optional[str] = None

    def to_domain(self) -> NewReservation:
        return NewReservation(
            client_id=self.client_id,
            property_id=self.property_id,
            starts_at=to_utc_naive(self.starts_at),
            ends_at=to_utc_naive(self.ends_at),
            time=self.time,
            number_of_guests=self.number_of_guests,
            notes=self.notes,
        )


class ReservationUpdate(BaseModel):
    property_id: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    time: Optional[str] = Field(default=None, max_length=10)
    number_of_guests: Optional[int] = Field(default=None, ge=1)
    status: Optional[ReservationStatus] = None
    notes: Optional[str] = None

    def to_patch(self) -> ReservationPatch:
        return ReservationPatch(
            property_id=self.property_id,
            starts_at=_optional_utc(self.starts_at),
            ends_at=_optional_utc(self.ends_at),
            time=self.time,
            number_of_guests=self.number_of_guests,
            status=self.status,
            notes=self.notes,
            clear=_cleared(self, "property_id", "notes"),
        )


class ReservationRead(BaseModel):
    reservation_id: str
    client_id: str
    property_id: Optional[str]
    starts_at: datetime
    ends_at: datetime
    time: str
    number_of_guests: int
    status: ReservationStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    client: Optional[ClientRead] = None

    @field_serializer("starts_at", "ends_at", "created_at", "updated_at")
    def _ser_datetime(self, dt: datetime) -> str:
        return _as_utc(dt)

    @classmethod
    def from_entity(cls, reservation: Reservation, client: Optional[Client] = None) -> "ReservationRead":
        return cls(
            reservation_id=reservation.id,
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
            client=ClientRead.from_entity(client) if client is not None else None,
        )


class CurrentBookingRead(BaseModel):
    duration_days: int
    booked_until: datetime
    check_in_date: datetime
    check_out_date: datetime

    @field_serializer("booked_until", "check_in_date", "check_out_date")
    def _ser_datetime(self, dt: datetime) -> str:
        return _as_utc(dt)

    @classmethod
    def from_domain(cls, summary: CurrentBookingSummary) -> "CurrentBookingRead":
        return cls(
            duration_days=summary.duration_days,
            booked_until=summary.booked_until,
            check_in_date=summary.check_in_date,
            check_out_date=summary.check_out_date,
        )


class AvailabilityRead(BaseModel):
    property_id: str
    property_name: str
    is_available: bool
    message: str
    current_booking: Optional[CurrentBookingRead] = None
    next_available_date: Optional[datetime] = None

    @field_serializer("next_available_date")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return _as_utc(dt) if dt is not None else None

    @classmethod
    def from_domain(cls, display: PropertyAvailabilityDisplay) -> "AvailabilityRead":
        return cls(
            property_id=display.property_id,
            property_name=display.property_name,
            is_available=display.is_available,
            message=display.message,
            current_booking=(
                CurrentBookingRead.from_domain(display.current_booking)
                if display.current_booking is not None
                else None
            ),
            next_available_date=display.next_available_date,
        )


class CalendarDayRead(BaseModel):
    day: date
    is_available: bool
    is_reserved: bool
    is_today: bool
    is_past: bool
    reservation_id: Optional[str] = None

    @classmethod
    def from_domain(cls, calendar_day: CalendarDay) -> "CalendarDayRead":
        return cls(
            day=calendar_day.date,
            is_available=calendar_day.is_available,
            is_reserved=calendar_day.is_reserved,
            is_today=calendar_day.is_today,
            is_past=calendar_day.is_past,
            reservation_id=calendar_day.reservation.id if calendar_day.reservation is not None else None,
        )
