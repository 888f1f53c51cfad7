# ruff: noqa: INP001
"""Pytest configuration shared across portal tests."""

from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest_asyncio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; pin deterministic values regardless of shell env.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["API_TARGET"] = "local"
os.environ["API_PREFIX"] = "/webhook"
os.environ["PAGE_SIZE"] = "10"
os.environ["LOG_LEVEL"] = "WARNING"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from abm_portal import models as _models  # noqa: E402,F401
from abm_portal.db.session import get_session  # noqa: E402
from abm_portal.main import create_app  # noqa: E402
from abm_portal.models import AbmBudget, AbmUser, DiscountRequest, Reportee  # noqa: E402

REVIEWER = "abm.north"


def make_request_row(request_id: int, **overrides: Any) -> DiscountRequest:
    values: dict[str, Any] = {
        "requestId": request_id,
        "eligible": 1,
        "eligibilityReason": None,
        "customerId": 5000 + request_id,
        "customerName": f"Customer {request_id}",
        "campaignType": "Festive",
        "skuId": 11,
        "skuName": "Basmati 25kg",
        "orderQty": 500.0,
        "discountValue": 2.5,
        "discountType": "Per Kg",
        "reason": "Competitor pricing",
        "requestedBy": 71,
        "requestedByUserName": "se.ravi",
        "ABM_Id": 9,
        "ABM_UserName": REVIEWER,
        "createdAt": datetime(2026, 10, 12, 9, 0, 0),
    }
    values.update(overrides)
    return DiscountRequest(**values)


@pytest_asyncio.fixture
async def session_maker() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.connect() as conn, conn.begin():
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def seeded(
    session_maker: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Two reviewers' worth of directory, reportee, request, and budget rows."""
    async with session_maker() as session:
        session.add(AbmUser(id=1, ABM_UserName=REVIEWER, Deleted=0))
        session.add(AbmUser(id=2, ABM_UserName="abm.retired", Deleted=1))
        session.add(Reportee(SE_Id=71, SE_UserName="se.ravi", ABM_Id=9, ABM_UserName=REVIEWER))
        session.add(Reportee(SE_Id=72, SE_UserName="se.asha", ABM_Id=9, ABM_UserName=REVIEWER))
        session.add(Reportee(SE_Id=80, SE_UserName="se.other", ABM_Id=3, ABM_UserName="abm.south"))
        session.add(make_request_row(101, createdAt=datetime(2026, 10, 12, 9, 0, 0)))
        session.add(
            make_request_row(
                102,
                eligible=0,
                eligibilityReason="Admin Approval Required",
                requestedByUserName="se.asha",
                createdAt=datetime(2026, 10, 14, 16, 30, 0),
            ),
        )
        session.add(make_request_row(103, createdAt=datetime(2026, 10, 13, 11, 0, 0)))
        session.add(make_request_row(201, ABM_UserName="abm.south", ABM_Id=3))
        session.add(
            AbmBudget(
                ABM_UserName=REVIEWER,
                yearWeek="2026-42",
                allocatedBudget=1000.0,
                consumedBudget=1200.0,
            ),
        )
        await session.commit()
    return session_maker


@pytest_asyncio.fixture
async def api_client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    app = create_app()

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client
