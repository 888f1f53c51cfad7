"""Model exports for SQLAlchemy/SQLModel metadata discovery."""

from abm_portal.models.abm_users import AbmUser
from abm_portal.models.budgets import AbmBudget
from abm_portal.models.discount_requests import DiscountRequest
from abm_portal.models.reportees import Reportee

__all__ = [
    "AbmBudget",
    "AbmUser",
    "DiscountRequest",
    "Reportee",
]
