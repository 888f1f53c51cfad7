"""Reviewer directory lookups: existence check and reporting line."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func
from sqlmodel import col, select

from abm_portal.models.abm_users import AbmUser
from abm_portal.models.reportees import Reportee

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession


async def abm_user_exists(session: AsyncSession, *, username: str) -> bool:
    """Return whether a non-deleted reviewer with this username exists."""
    statement = (
        select(func.count())
        .select_from(AbmUser)
        .where(col(AbmUser.ABM_UserName) == username)
        .where(col(AbmUser.Deleted) == 0)
    )
    count = (await session.exec(statement)).one()
    return int(count or 0) > 0


async def list_reportees(session: AsyncSession, *, abm_username: str) -> list[Reportee]:
    """List the sales executives reporting to a reviewer, by SE username."""
    statement = (
        select(Reportee)
        .where(col(Reportee.ABM_UserName) == abm_username)
        .order_by(col(Reportee.SE_UserName))
        .distinct()
    )
    return list(await session.exec(statement))
