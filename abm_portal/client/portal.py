"""Async HTTP client for the portal endpoints, local service or workflow host.

Every response is validated against one documented schema at this boundary;
anything else raises `PortalResponseError` instead of being guessed at.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from abm_portal.client.errors import PortalResponseError, PortalTransportError
from abm_portal.core.config import settings
from abm_portal.core.logging import get_logger
from abm_portal.schemas.auth import CheckUserResponse
from abm_portal.schemas.budgets import BudgetRead
from abm_portal.schemas.reportees import ReporteeRead
from abm_portal.schemas.requests import DiscountRequestRead, UpdateResult

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from abm_portal.schemas.requests import DiscountRequestUpdate

logger = get_logger(__name__)
T = TypeVar("T")

_REQUESTS_ADAPTER = TypeAdapter(list[DiscountRequestRead])
_REPORTEES_ADAPTER = TypeAdapter(list[ReporteeRead])
_BUDGET_ADAPTER = TypeAdapter(list[BudgetRead])


def _error_message(response: httpx.Response) -> str:
    """Pull the server-reported message out of an error body, if there is one."""
    fallback = f"HTTP {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or fallback
    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


class PortalClient:
    """Thin typed wrapper over the five portal endpoints."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _call(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning(
                "portal.request.transport_failed",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise PortalTransportError(f"Unable to reach portal: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "portal.request.http_error",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise PortalTransportError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise PortalResponseError(
                f"Portal returned a non-JSON body for {path}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _parse(adapter: TypeAdapter[T], body: Any, *, path: str) -> T:
        try:
            return adapter.validate_python(body)
        except ValidationError as exc:
            raise PortalResponseError(
                f"Unexpected response shape from {path}: {exc.error_count()} error(s)",
            ) from exc

    async def check_user(self, username: str) -> CheckUserResponse:
        body = await self._call("GET", "/check-abm-user", params={"username": username})
        return self._parse(TypeAdapter(CheckUserResponse), body, path="/check-abm-user")

    async def fetch_requests(self, username: str) -> list[DiscountRequestRead]:
        body = await self._call("POST", "/fetch-requests", json={"username": username})
        return self._parse(_REQUESTS_ADAPTER, body, path="/fetch-requests")

    async def fetch_reportees(self, abm_username: str) -> list[ReporteeRead]:
        """Reportees must come back as a bare JSON array of reportee objects."""
        body = await self._call(
            "POST",
            "/get-reportees",
            json={"ABM_UserName": abm_username},
        )
        return self._parse(_REPORTEES_ADAPTER, body, path="/get-reportees")

    async def update_requests(self, payload: DiscountRequestUpdate) -> UpdateResult:
        # Unset fields must go out as explicit nulls, so no exclude_none here.
        body = await self._call(
            "POST",
            "/update-discount-request",
            json=payload.model_dump(mode="json"),
        )
        return self._parse(TypeAdapter(UpdateResult), body, path="/update-discount-request")

    async def fetch_budget(self, abm_username: str, year_week: str) -> list[BudgetRead]:
        body = await self._call(
            "POST",
            "/get-abm-budget",
            json={"abmUsername": abm_username, "yearWeek": year_week},
        )
        return self._parse(_BUDGET_ADAPTER, body, path="/get-abm-budget")
