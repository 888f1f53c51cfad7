"""Reviewer identity check used by the dashboard login screen."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, status

from abm_portal.api.deps import SESSION_DEP, require_text, store_errors
from abm_portal.schemas.auth import CheckUserResponse
from abm_portal.schemas.errors import ErrorResponse
from abm_portal.services.reviewers import abm_user_exists

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(tags=["auth"])


@router.get(
    "/check-abm-user",
    response_model=CheckUserResponse,
    summary="Check Reviewer Username",
    description=(
        "Presence check of a reviewer username against the ABM directory. "
        "There is no password, token, or session; the client stores the "
        "validated username itself."
    ),
    responses={
        status.HTTP_200_OK: {
            "description": "Lookup completed; `status` tells whether the user exists.",
            "content": {
                "application/json": {
                    "example": {"status": "success", "message": "User found"},
                },
            },
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "The `username` query parameter is missing or blank.",
        },
    },
)
async def check_abm_user(
    username: str | None = None,
    session: AsyncSession = SESSION_DEP,
) -> CheckUserResponse:
    """Report whether a non-deleted reviewer with this username exists."""
    cleaned = require_text(username, message="Username is required")
    async with store_errors("Failed to validate user", event="auth.check_user.failed"):
        exists = await abm_user_exists(session, username=cleaned)
    if exists:
        return CheckUserResponse(status="success", message="User found")
    return CheckUserResponse(status="error", message="User not found")
