from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Callable

from ..domain.entities import Client, ClientPatch, NewClient, apply_patch
from ..domain.errors import ClientNotFoundError, DuplicateEmailError, InvalidEmailError
from ..domain.repositories import ClientRepository
from ..utils.ids import IdFactory, SequentialIdGenerator
from ..utils.time import utc_now

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    return EMAIL_RE.match(email) is not None


class ClientService:
    def __init__(
        self,
        clients: ClientRepository,
        *,
        id_factory: IdFactory | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.clients = clients
        self.id_factory = id_factory or SequentialIdGenerator()
        self.clock = clock

    async def create_client(self, request: NewClient) -> Client:
        if not is_valid_email(request.email):
            raise InvalidEmailError("invalid email format")
        await self._ensure_email_free(request.email)

        now = self.clock()
        client = Client(
            id=self.id_factory(),
            name=request.name,
            email=request.email,
            phone=request.phone,
            created_at=now,
            updated_at=now,
        )
        await self.clients.save(client)
        logger.info("Client %s created", client.id)
        return client

    async def get_client(self, client_id: str) -> Client | None:
        return await self.clients.get(client_id)

    async def get_all_clients(self) -> list[Client]:
        return await self.clients.list_all()

    async def update_client(self, client_id: str, patch: ClientPatch) -> Client:
        client = await self.clients.get(client_id)
        if client is None:
            raise ClientNotFoundError(f"client with id {client_id} not found")

        if patch.email is not None and patch.email != client.email:
            if not is_valid_email(patch.email):
                raise InvalidEmailError("invalid email format")
            await self._ensure_email_free(patch.email, exclude_id=client_id)

        now = self.clock()
        if now <= client.updated_at:
            now = client.updated_at + timedelta(microseconds=1)
        updated = apply_patch(client, patch, updated_at=now)
        await self.clients.update(client_id, updated)
        logger.info("Client %s updated", client_id)
        return updated

    async def delete_client(self, client_id: str) -> bool:
        if await self.clients.get(client_id) is None:
            raise ClientNotFoundError(f"client with id {client_id} not found")
        deleted = await self.clients.delete(client_id)
        logger.info("Client %s deleted", client_id)
        return deleted

    async def _ensure_email_free(self, email: str, *, exclude_id: str | None = None) -> None:
        for existing in await self.clients.list_all():
            if existing.email == email and existing.id != exclude_id:
                raise DuplicateEmailError("client with this email already exists")
