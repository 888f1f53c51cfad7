"""Weekly reviewer budget endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from abm_portal.api.deps import SESSION_DEP, require_text, store_errors
from abm_portal.schemas.budgets import BudgetQuery, BudgetRead
from abm_portal.services.budgets import get_week_budget

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(tags=["budget"])


@router.post(
    "/get-abm-budget",
    response_model=list[BudgetRead],
    description=(
        "Return the reviewer's allocated/consumed budget for a `YYYY-WW` week as a "
        "one-element list, or an empty list when no budget row exists."
    ),
)
async def get_abm_budget(
    payload: BudgetQuery,
    session: AsyncSession = SESSION_DEP,
) -> list[BudgetRead]:
    """Fetch one reviewer-week budget row."""
    abm_username = require_text(payload.abmUsername, message="abmUsername is required")
    year_week = require_text(payload.yearWeek, message="yearWeek is required")
    async with store_errors("Failed to fetch budget", event="budget.fetch.failed"):
        budget = await get_week_budget(
            session,
            abm_username=abm_username,
            year_week=year_week,
        )
    return [] if budget is None else [budget]
