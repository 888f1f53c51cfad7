# ruff: noqa: N815
"""Schemas for discount request listing and review updates."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, field_serializer
from sqlmodel import SQLModel

from abm_portal.core.time import format_store_timestamp

RUNTIME_ANNOTATION_TYPES = (datetime,)


def _contact_as_text(value: Any) -> Any:
    # Upstream stores phone numbers in numeric columns.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


ContactNumber = Annotated[str | None, BeforeValidator(_contact_as_text)]


class ReviewStatus(str, Enum):
    """Wire values stored in `abmStatus` once a reviewer acts."""

    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    MODIFIED = "MODIFIED"
    ESCALATED = "ESCALATED"


class FetchRequestsPayload(SQLModel):
    """Body for `POST /fetch-requests`."""

    username: str = Field(default="", examples=["abm.north"])


class DiscountRequestRead(SQLModel):
    """Discount request as listed to its reviewer."""

    requestId: int
    eligible: int
    eligibilityReason: str | None = None
    customerId: int
    customerName: str
    customerContact: ContactNumber = None
    campaignType: str
    skuId: int | None = None
    skuName: str | None = None
    orderQty: float
    discountValue: float | None = None
    discountType: str
    reason: str | None = None
    requestedBy: int
    requestedByUserName: str
    requestedByContact: ContactNumber = None
    ABM_Id: int
    ABM_UserName: str
    createdAt: datetime
    abmStatus: ReviewStatus | None = None
    abmOrderQty: float | None = None
    abmDiscountValue: float | None = None
    abmDiscountType: str | None = None
    abmRemarks: str | None = None
    abmReviewedBy: str | None = None
    abmReviewedAt: datetime | None = None
    status: str | None = None
    adminStatus: str | None = None
    adminRemarks: str | None = None
    adminDiscountValue: float | None = None
    adminDiscountType: str | None = None


class DiscountRequestUpdate(SQLModel):
    """Body for `POST /update-discount-request`: one decision applied to a batch."""

    ids: list[int] = Field(default_factory=list, examples=[[101, 102]])
    abmStatus: ReviewStatus = Field(examples=["ACCEPTED"])
    abmOrderQty: float | None = None
    abmDiscountType: str | None = None
    abmDiscountValue: float | None = None
    abmRemarks: str | None = Field(default=None, max_length=200)
    abmReviewedBy: str | None = Field(default=None, examples=["abm.north"])
    abmReviewedAt: datetime | None = Field(default=None, examples=["2026-10-18 09:30:00"])

    @field_serializer("abmReviewedAt")
    def _serialize_reviewed_at(self, value: datetime | None) -> str | None:
        return None if value is None else format_store_timestamp(value)


class UpdateResult(SQLModel):
    """Outcome of a review update; the batch succeeds or fails as a whole."""

    success: bool
    message: str | None = None
