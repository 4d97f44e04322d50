from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ..deps import get_reservation_service
from ..domain.entities import Reservation
from ..domain.errors import ClientNotFoundError, PropertyNotFoundError, ReservationNotFoundError, ValidationError
from ..models import ReservationStatus
from ..schemas import ReservationCreate, ReservationRead, ReservationUpdate
from ..usecases.reservations import ReservationService
from ..utils.audit_log import AuditAction, emit_audit_log

router = APIRouter(prefix="", tags=["reservations"])


def _audit(
    action: AuditAction,
    reservation: Reservation,
    status_from: Optional[ReservationStatus],
) -> None:
    try:
        emit_audit_log(
            action=action,
            initiator="staff",
            reservation_id=reservation.id,
            client_id=reservation.client_id,
            property_id=reservation.property_id,
            number_of_guests=reservation.number_of_guests,
            status_from=status_from,
            status_to=reservation.status,
            starts_at=reservation.starts_at,
            ends_at=reservation.ends_at,
        )
    except RuntimeError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")


@router.post("/reservations", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    try:
        reservation = await service.create_reservation(payload.to_domain())
    except ClientNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="client not found")
    except PropertyNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    _audit("reservation.created", reservation, status_from=None)
    return ReservationRead.from_entity(reservation)


@router.get("/reservations", response_model=List[ReservationRead])
async def list_reservations(
    service: ReservationService = Depends(get_reservation_service),
) -> list[ReservationRead]:
    return [ReservationRead.from_entity(res) for res in await service.get_all_reservations()]


@router.get("/reservations/{reservation_id}", response_model=ReservationRead)
async def get_reservation(
    reservation_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    try:
        reservation, client = await service.get_reservation_with_client(reservation_id)
    except ReservationNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    return ReservationRead.from_entity(reservation, client)


@router.get("/clients/{client_id}/reservations", response_model=List[ReservationRead])
async def list_client_reservations(
    client_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> list[ReservationRead]:
    return [ReservationRead.from_entity(res) for res in await service.get_reservations_by_client(client_id)]


@router.get("/properties/{property_id}/reservations", response_model=List[ReservationRead])
async def list_property_reservations(
    property_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> list[ReservationRead]:
    rows = await service.get_property_reservations_with_clients(property_id)
    return [ReservationRead.from_entity(res, client) for res, client in rows]


@router.patch("/reservations/{reservation_id}", response_model=ReservationRead)
async def update_reservation(
    payload: ReservationUpdate,
    reservation_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    before = await service.get_reservation(reservation_id)
    if before is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    try:
        updated = await service.update_reservation(reservation_id, payload.to_patch())
    except ReservationNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    except PropertyNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    _audit("reservation.updated", updated, status_from=before.status)
    return ReservationRead.from_entity(updated)


@router.post("/reservations/{reservation_id}/confirm", response_model=ReservationRead)
async def confirm_reservation(
    reservation_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    before = await service.get_reservation(reservation_id)
    if before is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    updated = await service.confirm_reservation(reservation_id)
    _audit("reservation.confirmed", updated, status_from=before.status)
    return ReservationRead.from_entity(updated)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationRead)
async def cancel_reservation(
    reservation_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> ReservationRead:
    before = await service.get_reservation(reservation_id)
    if before is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    updated = await service.cancel_reservation(reservation_id)
    _audit("reservation.cancelled", updated, status_from=before.status)
    return ReservationRead.from_entity(updated)


@router.delete("/reservations/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reservation(
    reservation_id: str = Path(..., min_length=1),
    service: ReservationService = Depends(get_reservation_service),
) -> None:
    before = await service.get_reservation(reservation_id)
    if before is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    await service.delete_reservation(reservation_id)
    _audit("reservation.deleted", before, status_from=before.status)
