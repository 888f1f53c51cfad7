"""Reviewer-side dashboard logic: session gate, listing, actions, and budget.

Everything here talks to the portal over HTTP through `PortalClient`, so the
same code works against the local service or the external workflow host.
"""

from abm_portal.client.actions import ActionExecutor, ActionResult, ModifyDetails, ReviewAction
from abm_portal.client.portal import PortalClient
from abm_portal.client.session import ReviewerSession, SessionGate

__all__ = [
    "ActionExecutor",
    "ActionResult",
    "ModifyDetails",
    "PortalClient",
    "ReviewAction",
    "ReviewerSession",
    "SessionGate",
]
