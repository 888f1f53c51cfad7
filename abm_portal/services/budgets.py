"""Weekly reviewer budget lookup."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from sqlmodel import col, select

from abm_portal.core.logging import get_logger
from abm_portal.models.budgets import AbmBudget
from abm_portal.schemas.budgets import BudgetRead

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

logger = get_logger(__name__)


def _as_amount(value: object) -> float:
    """Coerce a stored amount to float, treating missing or garbage values as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


async def get_week_budget(
    session: AsyncSession,
    *,
    abm_username: str,
    year_week: str,
) -> BudgetRead | None:
    """Return the reviewer's budget for `YYYY-WW`, or None when no row exists."""
    statement = (
        select(AbmBudget)
        .where(col(AbmBudget.ABM_UserName) == abm_username)
        .where(col(AbmBudget.yearWeek) == year_week)
    )
    row = (await session.exec(statement)).first()
    if row is None:
        logger.info(
            "budget.lookup.missing",
            extra={"abm_username": abm_username, "year_week": year_week},
        )
        return None
    return BudgetRead(
        allocatedBudget=_as_amount(row.allocatedBudget),
        consumedBudget=_as_amount(row.consumedBudget),
    )
