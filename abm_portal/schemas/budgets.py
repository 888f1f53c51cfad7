# ruff: noqa: N815
"""Schemas for weekly reviewer budget lookups."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class BudgetQuery(SQLModel):
    """Body for `POST /get-abm-budget`."""

    abmUsername: str = Field(default="", examples=["abm.north"])
    yearWeek: str = Field(default="", examples=["2026-42"])


class BudgetRead(SQLModel):
    """Allocated and consumed budget for one reviewer-week."""

    allocatedBudget: float = 0.0
    consumedBudget: float = 0.0
