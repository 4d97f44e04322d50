import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response

from .config import get_settings
from .routers import clients, properties, reservations
from .utils.request_id import REQUEST_ID_HEADER, generate_request_id, reset_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
    token = set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        reset_request_id(token)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logging.getLogger("rentals").setLevel(settings.log_level)
    if settings.create_tables:
        from .database import create_all

        logger.info("Creating missing tables")
        await create_all()
    yield


app = FastAPI(title="Property Reservation API", lifespan=lifespan)
app.middleware("http")(request_id_middleware)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(clients.router)
app.include_router(properties.router)
app.include_router(reservations.router)
