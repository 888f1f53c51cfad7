"""Reusable FastAPI dependencies and guards shared by the route modules.

These helpers keep the per-endpoint controllers thin:
- `SESSION_DEP` yields one pooled session per request
- `require_text` rejects missing/blank body or query fields with HTTP 400
- `store_errors` maps store failures to HTTP 500 with a route-specific message

If you're adding a new endpoint, compose from these instead of repeating the
try/except and blank-field checks in the router.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from abm_portal.core.logging import get_logger
from abm_portal.db.session import get_session

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)
SESSION_DEP = Depends(get_session)


def require_text(value: str | None, *, message: str) -> str:
    """Return the stripped value or raise HTTP 400 with `message`."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return cleaned


@asynccontextmanager
async def store_errors(detail: str, *, event: str) -> AsyncIterator[None]:
    """Log store failures under `event` and surface them as HTTP 500 `detail`."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception(event)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        ) from exc
