# ruff: noqa: N815
"""Reporting-line table contract linking sales executives to reviewers."""

from __future__ import annotations

from sqlmodel import Field

from abm_portal.models.base import StoreModel


class Reportee(StoreModel, table=True):
    """Sales executive (SE) reporting to an ABM reviewer."""

    __tablename__ = "Reportees"  # pyright: ignore[reportAssignmentType]

    SE_Id: int = Field(primary_key=True)
    SE_UserName: str
    ABM_Id: int = Field(primary_key=True)
    ABM_UserName: str = Field(index=True)
