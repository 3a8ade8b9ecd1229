import logging
from datetime import date
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .models import (
    CreatedTimesheetEntry,
    CreateTimesheetEntryRequest,
    CurrentUser,
    Project,
    TimesheetEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api"

ModelT = TypeVar("ModelT", bound=BaseModel)


class BackendError(Exception):
    """Custom exception for timesheet backend errors"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(BackendError):
    """The backend rejected the session (401/403)"""


class BackendValidationError(BackendError):
    """The backend rejected a payload (invalid date, invalid project, ...)"""


class NetworkError(BackendError):
    """The backend could not be reached or timed out"""


class TimesheetBackendClient:
    """Async client for the timesheet REST backend"""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        client_kwargs: dict[str, Any] = {"base_url": base_url, "transport": transport}
        if timeout is not None:
            client_kwargs["timeout"] = httpx.Timeout(timeout)
        self._client = httpx.AsyncClient(**client_kwargs)

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError(f"Could not reach timesheet backend: {e}") from e

        if response.is_success:
            return response

        message = self._error_message(response)
        logger.error(f"{method} {path} returned {response.status_code}: {message}")
        if response.status_code in (401, 403):
            raise AuthError(message, response.status_code)
        if response.status_code in (400, 422):
            raise BackendValidationError(message, response.status_code)
        raise BackendError(message, response.status_code)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return body.get("error") or body.get("message") or body.get("detail") or fallback
        return fallback

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"HTTP {response.status_code}: {response.reason_phrase}", response.status_code
            ) from e

    @classmethod
    def _json_object(cls, response: httpx.Response) -> dict:
        body = cls._json(response)
        if not isinstance(body, dict):
            logger.error(f"{response.request.url.path} returned a {type(body).__name__} body")
            raise BackendError("Unexpected response from timesheet backend", response.status_code)
        return body

    @staticmethod
    def _parse(model: type[ModelT], data: Any, response: httpx.Response) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"{response.request.url.path} returned a malformed {model.__name__}: {e}")
            raise BackendError(f"Malformed {model.__name__} in backend response", response.status_code) from e

    @staticmethod
    def _list(body: dict, key: str, response: httpx.Response) -> list:
        items = body.get(key) or []
        if not isinstance(items, list):
            logger.error(f"{response.request.url.path} returned a non-list {key!r}")
            raise BackendError(f"Unexpected {key} in backend response", response.status_code)
        return items

    async def login(self, email: str, password: str) -> None:
        """Log in and keep the session cookie on the client"""
        await self._request("POST", "auth/login/", json={"email": email, "password": password})
        logger.info(f"Logged in to timesheet backend as {email}")

    async def logout(self) -> None:
        await self._request("POST", "auth/logout/")
        logger.info("Logged out of timesheet backend")

    async def get_current_user(self) -> CurrentUser:
        response = await self._request("GET", "timesheets/current-user/")
        return self._parse(CurrentUser, self._json(response), response)

    async def fetch_active_projects(self) -> list[Project]:
        response = await self._request("GET", "projects/active/")
        body = self._json_object(response)
        return [self._parse(Project, project, response) for project in self._list(body, "projects", response)]

    async def fetch_project_activities(self, project_id: int) -> list[str]:
        response = await self._request("GET", f"timesheets/project/{project_id}/activities/")
        body = self._json_object(response)
        return [str(label) for label in self._list(body, "activity_types", response)]

    async def fetch_timesheets(self, date_from: date | str, date_to: date | str) -> list[TimesheetEntry]:
        """Return the current employee's entries between date_from and date_to inclusive"""
        params = {"date_from": str(date_from), "date_to": str(date_to)}
        response = await self._request("GET", "timesheets/my-timesheets/", params=params)
        body = self._json_object(response)
        return [self._parse(TimesheetEntry, entry, response) for entry in self._list(body, "timesheets", response)]

    async def create_timesheet_entry(self, request: CreateTimesheetEntryRequest) -> CreatedTimesheetEntry:
        response = await self._request("POST", "timesheets/", json=request.model_dump(mode="json"))
        body = self._json_object(response)

        # The backend either wraps the new entry or returns it directly
        created = body.get("timesheet") if isinstance(body.get("timesheet"), dict) else body
        if created.get("id") is None:
            raise BackendError("Create response did not include an entry id", response.status_code)
        return self._parse(CreatedTimesheetEntry, created, response)

    async def update_timesheet_entry(self, entry_id: int, request: CreateTimesheetEntryRequest) -> dict:
        response = await self._request("PUT", f"timesheets/{entry_id}/", json=request.model_dump(mode="json"))
        return self._json(response)

    async def delete_timesheet_entry(self, entry_id: int) -> None:
        await self._request("DELETE", f"timesheets/{entry_id}/")
        logger.info(f"Deleted timesheet entry {entry_id}")
