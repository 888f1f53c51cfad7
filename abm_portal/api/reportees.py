"""Reportee listing used as the dashboard's submitter filter facet."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter

from abm_portal.api.deps import SESSION_DEP, require_text, store_errors
from abm_portal.schemas.reportees import ReporteeRead, ReporteesQuery
from abm_portal.services.reviewers import list_reportees

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

router = APIRouter(tags=["reportees"])


@router.post("/get-reportees", response_model=list[ReporteeRead])
async def get_reportees(
    payload: ReporteesQuery,
    session: AsyncSession = SESSION_DEP,
) -> list[ReporteeRead]:
    """List sales executives reporting to the reviewer."""
    abm_username = require_text(payload.ABM_UserName, message="ABM_UserName is required")
    async with store_errors("Failed to fetch reportees", event="reportees.fetch.failed"):
        rows = await list_reportees(session, abm_username=abm_username)
    return [ReporteeRead.model_validate(row, from_attributes=True) for row in rows]
