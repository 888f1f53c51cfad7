# ruff: noqa: N815
"""Schemas for reviewer reportee listing."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class ReporteesQuery(SQLModel):
    """Body for `POST /get-reportees`."""

    ABM_UserName: str = Field(default="", examples=["abm.north"])


class ReporteeRead(SQLModel):
    """Sales executive reporting to the reviewer."""

    SE_Id: int
    SE_UserName: str
    ABM_Id: int
    ABM_UserName: str
