from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ..deps import get_client_service
from ..domain.errors import ClientNotFoundError, DuplicateEmailError, InvalidEmailError
from ..schemas import ClientCreate, ClientRead, ClientUpdate
from ..usecases.clients import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    try:
        client = await service.create_client(payload.to_domain())
    except InvalidEmailError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="invalid email format")
    except DuplicateEmailError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already registered")
    return ClientRead.from_entity(client)


@router.get("", response_model=List[ClientRead])
async def list_clients(service: ClientService = Depends(get_client_service)) -> list[ClientRead]:
    return [ClientRead.from_entity(client) for client in await service.get_all_clients()]


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(
    client_id: str = Path(..., min_length=1),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    client = await service.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="client not found")
    return ClientRead.from_entity(client)


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    payload: ClientUpdate,
    client_id: str = Path(..., min_length=1),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    try:
        client = await service.update_client(client_id, payload.to_patch())
    except ClientNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="client not found")
    except InvalidEmailError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="invalid email format")
    except DuplicateEmailError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already registered")
    return ClientRead.from_entity(client)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str = Path(..., min_length=1),
    service: ClientService = Depends(get_client_service),
) -> None:
    try:
        await service.delete_client(client_id)
    except ClientNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="client not found")
