"""Discount request listing and review-decision endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, status

from abm_portal.api.deps import SESSION_DEP, require_text, store_errors
from abm_portal.schemas.requests import (
    DiscountRequestRead,
    DiscountRequestUpdate,
    FetchRequestsPayload,
    UpdateResult,
)
from abm_portal.services.discount_requests import (
    apply_review_update,
    list_requests_for_reviewer,
)

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(tags=["requests"])


@router.post("/fetch-requests", response_model=list[DiscountRequestRead])
async def fetch_requests(
    payload: FetchRequestsPayload,
    session: AsyncSession = SESSION_DEP,
) -> list[DiscountRequestRead]:
    """List the reviewer's discount requests, newest first."""
    username = require_text(payload.username, message="Username is required")
    async with store_errors("Failed to fetch requests", event="requests.fetch.failed"):
        rows = await list_requests_for_reviewer(session, username=username)
    return [DiscountRequestRead.model_validate(row, from_attributes=True) for row in rows]


@router.post(
    "/update-discount-request",
    response_model=UpdateResult,
    description=(
        "Apply one review decision to a batch of request ids. The batch succeeds "
        "or fails as a whole; there is no per-id result."
    ),
)
async def update_discount_request(
    payload: DiscountRequestUpdate,
    session: AsyncSession = SESSION_DEP,
) -> UpdateResult:
    """Record the reviewer's decision on one or more requests."""
    if not payload.ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request IDs are required",
        )
    async with store_errors("Failed to update request", event="requests.update.failed"):
        await apply_review_update(session, payload=payload)
    return UpdateResult(success=True, message="Request updated successfully")
