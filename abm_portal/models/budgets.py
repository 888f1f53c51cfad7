# ruff: noqa: N815
"""Weekly reviewer budget table contract."""

from __future__ import annotations

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from abm_portal.models.base import StoreModel


class AbmBudget(StoreModel, table=True):
    """Allocated and consumed discount budget for one reviewer-week."""

    __tablename__ = "DiscountRequestAbmBudget"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        UniqueConstraint("ABM_UserName", "yearWeek", name="uq_abm_budget_user_week"),
    )

    id: int | None = Field(default=None, primary_key=True)
    ABM_UserName: str = Field(index=True)
    yearWeek: str = Field(index=True)  # YYYY-WW
    allocatedBudget: float | None = None
    consumedBudget: float | None = None
