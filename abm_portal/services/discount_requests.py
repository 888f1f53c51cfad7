"""Discount request listing and review updates against the store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import update
from sqlmodel import col, select

from abm_portal.core.logging import get_logger
from abm_portal.core.time import utcnow
from abm_portal.models.discount_requests import DiscountRequest

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from abm_portal.schemas.requests import DiscountRequestUpdate

logger = get_logger(__name__)


async def list_requests_for_reviewer(
    session: AsyncSession,
    *,
    username: str,
) -> list[DiscountRequest]:
    """List every request owned by the reviewer, newest first."""
    statement = (
        select(DiscountRequest)
        .where(col(DiscountRequest.ABM_UserName) == username)
        .order_by(col(DiscountRequest.createdAt).desc(), col(DiscountRequest.requestId).desc())
    )
    return list(await session.exec(statement))


async def apply_review_update(
    session: AsyncSession,
    *,
    payload: DiscountRequestUpdate,
) -> int:
    """Apply one review decision to every unreviewed id in the batch with a single UPDATE.

    Review columns are fixed once `abmStatus` is set, so already-reviewed ids
    are left untouched. Returns the number of rows actually updated.
    """
    statement = (
        update(DiscountRequest)
        .where(col(DiscountRequest.requestId).in_(payload.ids))
        .where(col(DiscountRequest.abmStatus).is_(None))
        .values(
            abmStatus=payload.abmStatus.value,
            abmOrderQty=payload.abmOrderQty,
            abmDiscountType=payload.abmDiscountType,
            abmDiscountValue=payload.abmDiscountValue,
            abmRemarks=payload.abmRemarks,
            abmReviewedBy=payload.abmReviewedBy,
            abmReviewedAt=payload.abmReviewedAt,
            UpdatedAt=utcnow(),
        )
    )
    connection = await session.connection()
    result = await connection.execute(statement)
    await session.commit()
    matched = int(result.rowcount or 0)
    if matched < len(set(payload.ids)):
        logger.warning(
            "requests.update.skipped",
            extra={
                "abm_status": payload.abmStatus.value,
                "requested": len(set(payload.ids)),
                "matched": matched,
                "reviewed_by": payload.abmReviewedBy,
            },
        )
    logger.info(
        "requests.update.applied",
        extra={
            "abm_status": payload.abmStatus.value,
            "batch_size": len(payload.ids),
            "matched": matched,
            "reviewed_by": payload.abmReviewedBy,
        },
    )
    return matched
