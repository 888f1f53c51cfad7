"""Current-week budget summary for the signed-in reviewer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from abm_portal.core.logging import get_logger
from abm_portal.core.time import localnow

if TYPE_CHECKING:
    from abm_portal.client.portal import PortalClient
    from abm_portal.client.session import ReviewerSession

logger = get_logger(__name__)


def _sunday_first_weekday(day: date) -> int:
    """Day index with Sunday = 0 through Saturday = 6."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class WeekWindow:
    """Monday 00:00:00.000 to Sunday 23:59:59.999 in local time."""

    start: datetime
    end: datetime

    @property
    def monday(self) -> date:
        return self.start.date()


def week_window(now: datetime) -> WeekWindow:
    day = _sunday_first_weekday(now.date())
    # Sunday closes the week that started six days earlier.
    days_to_monday = 6 if day == 0 else day - 1
    monday = now.date() - timedelta(days=days_to_monday)
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time(23, 59, 59, 999000))
    return WeekWindow(start=start, end=end)


def week_number(day: date) -> int:
    """1-based week of the year, counting the partial first week as week 1."""
    jan1 = date(day.year, 1, 1)
    days_since_jan1 = (day - jan1).days
    return math.ceil((days_since_jan1 + _sunday_first_weekday(jan1) + 1) / 7)


def year_week(now: datetime) -> str:
    """Budget key `YYYY-WW` for the week containing `now`."""
    monday = week_window(now).monday
    return f"{monday.year}-{week_number(monday):02d}"


@dataclass(frozen=True)
class BudgetSummary:
    allocated: float
    consumed: float
    week: WeekWindow
    year_week: str

    @property
    def balance(self) -> float:
        return self.allocated - self.consumed

    @property
    def over_budget(self) -> bool:
        """Display state only; a negative balance is not an error."""
        return self.balance < 0


async def fetch_budget_summary(
    client: PortalClient,
    session: ReviewerSession,
    *,
    now: datetime | None = None,
) -> BudgetSummary:
    current = now or localnow()
    key = year_week(current)
    rows = await client.fetch_budget(session.username, key)
    if not rows:
        logger.info("budget.summary.missing", extra={"year_week": key})
        allocated = consumed = 0.0
    else:
        allocated, consumed = rows[0].allocatedBudget, rows[0].consumedBudget
    return BudgetSummary(
        allocated=allocated,
        consumed=consumed,
        week=week_window(current),
        year_week=key,
    )
