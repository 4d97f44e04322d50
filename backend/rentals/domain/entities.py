from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, TypeVar

from ..models import AvailabilityStatus, PropertyType, ReservationStatus

_T = TypeVar("_T")


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    email: str
    phone: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PropertySpecifications:
    type: Optional[PropertyType] = None
    area: Optional[float] = None
    capacity: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    amenities: tuple[str, ...] = ()
    location: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "amenities":
                value = list(value)
            elif f.name == "type":
                value = str(value)
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PropertySpecifications":
        data = dict(data or {})
        if data.get("type") is not None:
            data["type"] = PropertyType(data["type"])
        data["amenities"] = tuple(data.get("amenities") or ())
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class Property:
    id: str
    name: str
    specifications: PropertySpecifications
    price: Decimal
    availability: AvailabilityStatus
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class Reservation:
    id: str
    client_id: str
    starts_at: datetime
    ends_at: datetime
    time: str
    number_of_guests: int
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime
    property_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class NewClient:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class NewProperty:
    name: str
    price: Decimal
    specifications: PropertySpecifications = field(default_factory=PropertySpecifications)
    description: Optional[str] = None
    availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE


@dataclass(frozen=True)
class NewReservation:
    client_id: str
    starts_at: datetime
    ends_at: datetime
    time: str
    number_of_guests: int
    property_id: Optional[str] = None
    notes: Optional[str] = None


# Patches: every field is optional and None means "leave unchanged".
# Nullable fields listed in `clear` are reset to None.


@dataclass(frozen=True)
class ClientPatch:
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class PropertyPatch:
    name: Optional[str] = None
    description: Optional[str] = None
    specifications: Optional[dict[str, Any]] = None
    price: Optional[Decimal] = None
    availability: Optional[AvailabilityStatus] = None
    clear: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        _check_clearable(self.clear, {"description"})


@dataclass(frozen=True)
class ReservationPatch:
    property_id: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    time: Optional[str] = None
    number_of_guests: Optional[int] = None
    status: Optional[ReservationStatus] = None
    notes: Optional[str] = None
    clear: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        _check_clearable(self.clear, {"property_id", "notes"})

    def touches_schedule(self) -> bool:
        """True when the patch carries a date or guest field that needs validation."""
        return self.starts_at is not None or self.ends_at is not None or self.number_of_guests is not None


def _check_clearable(clear: frozenset[str], nullable: set[str]) -> None:
    unknown = clear - nullable
    if unknown:
        raise ValueError(f"cannot clear non-nullable fields: {sorted(unknown)}")


def supplied_fields(patch: Any) -> dict[str, Any]:
    values = {f.name: getattr(patch, f.name) for f in fields(patch) if f.name != "clear"}
    changes = {name: value for name, value in values.items() if value is not None}
    changes.update(dict.fromkeys(getattr(patch, "clear", ())))
    return changes


def apply_patch(entity: _T, patch: Any, **overrides: Any) -> _T:
    """Return a copy of `entity` with the supplied patch fields and overrides applied."""
    changes = supplied_fields(patch)
    changes.update(overrides)
    return replace(entity, **changes)  # type: ignore[type-var]
