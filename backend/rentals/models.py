from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

from sqlalchemy import JSON, CheckConstraint, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.sqltypes import DateTime, Integer, Numeric, String, Text


class Base(DeclarativeBase):
    pass


class AvailabilityStatus(StrEnum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class PropertyType(StrEnum):
    APARTMENT = "apartment"
    HOUSE = "house"
    ROOM = "room"
    VENUE = "venue"
    OFFICE = "office"
    OTHER = "other"


class ReservationStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


def _enum_column(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        values_callable=lambda cls: [e.value for e in cls],
        native_enum=False,
    )


class ClientRecord(Base):
    __tablename__ = "clients"
    __table_args__ = (
        UniqueConstraint("email", name="uq_clients_email"),
        Index("idx_clients_email", "email"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class PropertyRecord(Base):
    __tablename__ = "properties"
    __table_args__ = (CheckConstraint("price >= 0", name="chk_properties_price"),)

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    specifications: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    availability: Mapped[AvailabilityStatus] = mapped_column(
        _enum_column(AvailabilityStatus),
        nullable=False,
        default=AvailabilityStatus.AVAILABLE,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class ReservationRecord(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("starts_at < ends_at", name="chk_res_time"),
        CheckConstraint("number_of_guests >= 1", name="chk_res_guests"),
        Index("idx_res_client", "client_id"),
        Index("idx_res_property", "property_id"),
        Index("idx_res_starts_at", "starts_at"),
        Index("idx_res_ends_at", "ends_at"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    client_id: Mapped[str] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    property_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
    )
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    time: Mapped[str] = mapped_column(String(10), nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ReservationStatus] = mapped_column(
        _enum_column(ReservationStatus),
        nullable=False,
        default=ReservationStatus.PENDING,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
