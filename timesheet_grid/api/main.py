import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from timesheet_grid import __version__
from timesheet_grid.api.errors import register_exception_handlers
from timesheet_grid.api.routers import timesheet
from timesheet_grid.backend.client import BackendError, TimesheetBackendClient
from timesheet_grid.config import load_config
from timesheet_grid.session import TimesheetSession


logger = logging.getLogger(__name__)


class HealthStatus(BaseModel):
    status: str
    version: str


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log in and load the grid on startup, log out on shutdown"""
    config = load_config()
    client = TimesheetBackendClient(
        base_url=config["TIMESHEET_API_BASE_URL"],
        timeout=config["TIMESHEET_API_TIMEOUT"],
    )
    session = TimesheetSession(client)
    app.state.session = session

    try:
        await session.login(config["TIMESHEET_EMAIL"], config["TIMESHEET_PASSWORD"])
        await session.load()
    except BackendError:
        # The grid reports the error until the user reloads
        logger.exception("Could not load the timesheet on startup")

    yield

    await session.close()


app = FastAPI(title="Timesheet Grid API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

api_v1 = APIRouter(prefix="/api/v1")


@api_v1.get("/health")
async def health_check() -> HealthStatus:
    """Return health status of the API."""
    return {"status": "healthy", "version": __version__}


api_v1.include_router(timesheet.router)

app.include_router(api_v1)
