# ruff: noqa: N815
"""Discount request table contract for upstream-created ABM review items."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from abm_portal.core.time import utcnow
from abm_portal.models.base import StoreModel

RUNTIME_ANNOTATION_TYPES = (datetime,)


class DiscountRequest(StoreModel, table=True):
    """One discount request awaiting (or carrying) an ABM review decision."""

    __tablename__ = "DiscountRequest"  # pyright: ignore[reportAssignmentType]

    requestId: int | None = Field(default=None, primary_key=True)
    eligible: int = Field(default=0)  # 0 | 1
    eligibilityReason: str | None = None
    customerId: int
    customerName: str
    customerContact: str | None = None
    campaignType: str
    skuId: int | None = None
    skuName: str | None = None
    orderQty: float
    discountValue: float | None = None
    discountType: str
    reason: str | None = None
    requestedBy: int
    requestedByUserName: str = Field(index=True)
    requestedByContact: str | None = None
    ABM_Id: int
    ABM_UserName: str = Field(index=True)
    createdAt: datetime = Field(default_factory=utcnow)

    # Review columns: null until the first ABM action, fixed afterwards.
    abmStatus: str | None = None  # ACCEPTED | REJECTED | MODIFIED | ESCALATED
    abmOrderQty: float | None = None
    abmDiscountValue: float | None = None
    abmDiscountType: str | None = None
    abmRemarks: str | None = None
    abmReviewedBy: str | None = None
    abmReviewedAt: datetime | None = None

    # Admin overlay, written by a later approval stage.
    status: str | None = None
    adminStatus: str | None = None
    adminRemarks: str | None = None
    adminDiscountValue: float | None = None
    adminDiscountType: str | None = None

    UpdatedAt: datetime | None = None
