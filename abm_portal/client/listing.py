"""Request list view model: loading, filtering, pagination, and selection.

Row controls are a pure function of `eligible`, `eligibilityReason`, and
`abmStatus`; nothing here mutates requests.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from abm_portal.client.actions import ReviewAction, allowed_actions, is_terminal
from abm_portal.client.errors import DashboardLoadError, PortalClientError
from abm_portal.core.config import settings
from abm_portal.core.logging import get_logger
from abm_portal.core.time import as_local_naive

if TYPE_CHECKING:
    from abm_portal.client.actions import ActionExecutor
    from abm_portal.client.portal import PortalClient
    from abm_portal.client.session import ReviewerSession
    from abm_portal.schemas.reportees import ReporteeRead
    from abm_portal.schemas.requests import DiscountRequestRead

logger = get_logger(__name__)

ALL_SE_USERS = "all"


def action_buttons(
    request: DiscountRequestRead,
    *,
    disabled: bool = False,
) -> dict[ReviewAction, bool]:
    """Buttons shown on a row, in display order, mapped to whether each is enabled.

    Eligible rows lead with Accept, the rest with Escalate; Reject and Modify
    are always shown.
    """
    primary = ReviewAction.ACCEPT if request.eligible == 1 else ReviewAction.ESCALATE
    allowed = allowed_actions(request)
    return {
        action: (not disabled and action in allowed)
        for action in (primary, ReviewAction.REJECT, ReviewAction.MODIFY)
    }


@dataclass(frozen=True)
class RequestFilter:
    """Search box, submitter facet, and optional creation-date filter."""

    search: str = ""
    se_user: str = ALL_SE_USERS
    created_on: date | None = None

    def matches(self, request: DiscountRequestRead) -> bool:
        query = self.search.strip().lower()
        if query:
            haystacks = (
                str(request.customerId),
                request.customerName,
                request.requestedByUserName,
            )
            if not any(query in value.lower() for value in haystacks):
                return False
        if self.se_user != ALL_SE_USERS and request.requestedByUserName != self.se_user:
            return False
        # Reviewers filter by their own calendar day, not the store's UTC day.
        created_on = as_local_naive(request.createdAt).date()
        if self.created_on is not None and created_on != self.created_on:
            return False
        return True


def filter_requests(
    requests: Iterable[DiscountRequestRead],
    request_filter: RequestFilter,
) -> list[DiscountRequestRead]:
    return [request for request in requests if request_filter.matches(request)]


@dataclass(frozen=True)
class Page:
    items: list[DiscountRequestRead]
    number: int
    total_pages: int
    total_items: int


@dataclass
class Pagination:
    """Current page for a filtered list.

    The page resets to 1 whenever the filter changes and clamps to the last
    valid page when the filtered set shrinks under it.
    """

    page_size: int = field(default_factory=lambda: settings.page_size)
    page: int = 1
    _last_filter: RequestFilter | None = field(default=None, repr=False)

    def total_pages(self, total_items: int) -> int:
        return max(1, math.ceil(total_items / self.page_size))

    def go_to(self, page: int) -> None:
        self.page = max(1, page)

    def paginate(
        self,
        requests: Sequence[DiscountRequestRead],
        request_filter: RequestFilter,
    ) -> Page:
        if request_filter != self._last_filter:
            self.page = 1
            self._last_filter = request_filter
        filtered = filter_requests(requests, request_filter)
        total_pages = self.total_pages(len(filtered))
        self.page = min(max(1, self.page), total_pages)
        start = (self.page - 1) * self.page_size
        return Page(
            items=filtered[start : start + self.page_size],
            number=self.page,
            total_pages=total_pages,
            total_items=len(filtered),
        )


def is_selectable(request: DiscountRequestRead, executor: ActionExecutor) -> bool:
    return not is_terminal(request) and not executor.is_action_disabled(request.requestId)


@dataclass
class Selection:
    """Bulk-mode checkbox state."""

    executor: ActionExecutor
    selected: set[int] = field(default_factory=set)

    @property
    def active(self) -> bool:
        """Any selection puts the list in bulk mode, disabling per-row buttons."""
        return bool(self.selected)

    def toggle(self, request: DiscountRequestRead, checked: bool) -> None:
        if checked and is_selectable(request, self.executor):
            self.selected.add(request.requestId)
        else:
            self.selected.discard(request.requestId)

    def select_all(self, page: Page) -> None:
        """Select exactly the selectable rows of the current page."""
        self.selected = {
            request.requestId for request in page.items if is_selectable(request, self.executor)
        }

    def clear(self) -> None:
        self.selected.clear()

    def _selected_requests(
        self,
        requests: Iterable[DiscountRequestRead],
    ) -> list[DiscountRequestRead]:
        return [
            request
            for request in requests
            if request.requestId in self.selected and is_selectable(request, self.executor)
        ]

    def bulk_accept_requests(
        self,
        requests: Iterable[DiscountRequestRead],
    ) -> list[DiscountRequestRead]:
        """Selected rows a bulk Accept may carry; non-eligible rows are left out."""
        return [r for r in self._selected_requests(requests) if r.eligible == 1]

    def bulk_reject_requests(
        self,
        requests: Iterable[DiscountRequestRead],
    ) -> list[DiscountRequestRead]:
        return self._selected_requests(requests)


@dataclass
class DashboardData:
    """Whatever loaded; a failed source is empty and its error kept."""

    requests: list[DiscountRequestRead] = field(default_factory=list)
    reportees: list[ReporteeRead] = field(default_factory=list)
    requests_error: PortalClientError | None = None
    reportees_error: PortalClientError | None = None

    @property
    def se_users(self) -> list[str]:
        """Submitter facet values: reportees when loaded, else names seen in requests."""
        if self.reportees:
            names = [reportee.SE_UserName for reportee in self.reportees]
        else:
            names = [request.requestedByUserName for request in self.requests]
        return sorted(set(names))


async def load_dashboard(
    client: PortalClient,
    session: ReviewerSession,
    *,
    executor: ActionExecutor | None = None,
) -> DashboardData:
    """Fetch requests and reportees independently; fail only if both fail.

    When an executor is given it learns which fetched requests already carry a
    stored decision, so those stay disabled.
    """
    requests_result, reportees_result = await asyncio.gather(
        client.fetch_requests(session.username),
        client.fetch_reportees(session.username),
        return_exceptions=True,
    )
    data = DashboardData()
    if isinstance(requests_result, PortalClientError):
        data.requests_error = requests_result
    elif isinstance(requests_result, BaseException):
        raise requests_result
    else:
        data.requests = requests_result
        if executor is not None:
            executor.sync(data.requests)

    if isinstance(reportees_result, PortalClientError):
        data.reportees_error = reportees_result
    elif isinstance(reportees_result, BaseException):
        raise reportees_result
    else:
        data.reportees = reportees_result

    if data.requests_error is not None and data.reportees_error is not None:
        raise DashboardLoadError(
            requests_error=data.requests_error,
            reportees_error=data.reportees_error,
        )
    if data.requests_error is not None or data.reportees_error is not None:
        logger.warning(
            "dashboard.load.partial",
            extra={
                "requests_failed": data.requests_error is not None,
                "reportees_failed": data.reportees_error is not None,
            },
        )
    return data
