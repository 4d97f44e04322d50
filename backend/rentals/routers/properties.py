from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ..deps import get_property_service
from ..domain.errors import InvalidPriceError, PropertyNotFoundError
from ..schemas import AvailabilityRead, CalendarDayRead, PropertyCreate, PropertyRead, PropertyUpdate
from ..usecases.properties import PropertyService

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
async def create_property(
    payload: PropertyCreate,
    service: PropertyService = Depends(get_property_service),
) -> PropertyRead:
    try:
        prop = await service.create_property(payload.to_domain())
    except InvalidPriceError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return PropertyRead.from_entity(prop)


@router.get("", response_model=List[PropertyRead])
async def list_properties(service: PropertyService = Depends(get_property_service)) -> list[PropertyRead]:
    return [PropertyRead.from_entity(prop) for prop in await service.get_all_properties()]


@router.get("/availability", response_model=List[AvailabilityRead])
async def list_availability(service: PropertyService = Depends(get_property_service)) -> list[AvailabilityRead]:
    return [AvailabilityRead.from_domain(display) for display in await service.list_availability()]


@router.get("/{property_id}", response_model=PropertyRead)
async def get_property(
    property_id: str = Path(..., min_length=1),
    service: PropertyService = Depends(get_property_service),
) -> PropertyRead:
    prop = await service.get_property(property_id)
    if prop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")
    return PropertyRead.from_entity(prop)


@router.patch("/{property_id}", response_model=PropertyRead)
async def update_property(
    payload: PropertyUpdate,
    property_id: str = Path(..., min_length=1),
    service: PropertyService = Depends(get_property_service),
) -> PropertyRead:
    try:
        prop = await service.update_property(property_id, payload.to_patch())
    except PropertyNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")
    except InvalidPriceError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return PropertyRead.from_entity(prop)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: str = Path(..., min_length=1),
    service: PropertyService = Depends(get_property_service),
) -> None:
    try:
        await service.delete_property(property_id)
    except PropertyNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")


@router.get("/{property_id}/availability", response_model=AvailabilityRead)
async def get_availability(
    property_id: str = Path(..., min_length=1),
    service: PropertyService = Depends(get_property_service),
) -> AvailabilityRead:
    try:
        display = await service.get_availability(property_id)
    except PropertyNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")
    return AvailabilityRead.from_domain(display)


@router.get("/{property_id}/calendar", response_model=List[CalendarDayRead])
async def get_calendar(
    property_id: str = Path(..., min_length=1),
    start: Optional[date] = Query(default=None, description="First day of the window (defaults to today)"),
    weeks: Optional[int] = Query(default=None, ge=1, le=52),
    service: PropertyService = Depends(get_property_service),
) -> list[CalendarDayRead]:
    try:
        days = await service.get_calendar(property_id, start_date=start, weeks=weeks)
    except PropertyNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="property not found")
    return [CalendarDayRead.from_domain(day) for day in days]
