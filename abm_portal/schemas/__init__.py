"""Public schema exports shared across API route modules."""

from abm_portal.schemas.auth import CheckUserResponse
from abm_portal.schemas.budgets import BudgetQuery, BudgetRead
from abm_portal.schemas.errors import ErrorResponse
from abm_portal.schemas.health import HealthStatusResponse
from abm_portal.schemas.reportees import ReporteeRead, ReporteesQuery
from abm_portal.schemas.requests import (
    DiscountRequestRead,
    DiscountRequestUpdate,
    FetchRequestsPayload,
    ReviewStatus,
    UpdateResult,
)

__all__ = [
    "BudgetQuery",
    "BudgetRead",
    "CheckUserResponse",
    "DiscountRequestRead",
    "DiscountRequestUpdate",
    "ErrorResponse",
    "FetchRequestsPayload",
    "HealthStatusResponse",
    "ReporteeRead",
    "ReporteesQuery",
    "ReviewStatus",
    "UpdateResult",
]
