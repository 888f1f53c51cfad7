# ruff: noqa: N815
"""Reviewer (ABM) directory table contract."""

from __future__ import annotations

from sqlmodel import Field

from abm_portal.models.base import StoreModel


class AbmUser(StoreModel, table=True):
    """Known ABM reviewer; soft-deleted rows keep `Deleted = 1`."""

    __tablename__ = "ABMUsers"  # pyright: ignore[reportAssignmentType]

    id: int | None = Field(default=None, primary_key=True)
    ABM_UserName: str = Field(index=True)
    Deleted: int = Field(default=0)
