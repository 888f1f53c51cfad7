"""Review action execution: payload building, submission, and local outcome tracking."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, assert_never

from abm_portal.client.errors import (
    ActionFailedError,
    ActionValidationError,
    PortalTransportError,
)
from abm_portal.client.turnaround import turnaround_label
from abm_portal.core.logging import get_logger
from abm_portal.core.time import localnow
from abm_portal.schemas.requests import DiscountRequestUpdate, ReviewStatus

if TYPE_CHECKING:
    from abm_portal.client.portal import PortalClient
    from abm_portal.client.session import ReviewerSession
    from abm_portal.schemas.requests import DiscountRequestRead

logger = get_logger(__name__)

CUSTOM_DISCOUNT_TYPE = "Custom"
MAX_REMARKS_LENGTH = 200


class ReviewAction(str, Enum):
    """Decisions a reviewer can take on a request."""

    ACCEPT = "Accept"
    REJECT = "Reject"
    MODIFY = "Modify"
    ESCALATE = "Escalate"


BULK_ACTIONS = frozenset({ReviewAction.ACCEPT, ReviewAction.REJECT})

# Non-eligible requests are only actionable when flagged for admin approval.
ADMIN_APPROVAL_REASON = "Admin Approval Required"

_ELIGIBLE_ACTIONS = frozenset({ReviewAction.ACCEPT, ReviewAction.REJECT, ReviewAction.MODIFY})
_ADMIN_APPROVAL_ACTIONS = frozenset(
    {ReviewAction.ESCALATE, ReviewAction.REJECT, ReviewAction.MODIFY},
)


def is_terminal(request: DiscountRequestRead) -> bool:
    """A reviewed request can never be acted on again from this dashboard."""
    return request.abmStatus is not None


def allowed_actions(request: DiscountRequestRead) -> frozenset[ReviewAction]:
    if is_terminal(request):
        return frozenset()
    if request.eligible == 1:
        return _ELIGIBLE_ACTIONS
    if request.eligibilityReason == ADMIN_APPROVAL_REASON:
        return _ADMIN_APPROVAL_ACTIONS
    return frozenset()


def wire_status(action: ReviewAction) -> ReviewStatus:
    """Map a decision to the `abmStatus` value stored upstream."""
    match action:
        case ReviewAction.ACCEPT:
            return ReviewStatus.ACCEPTED
        case ReviewAction.REJECT:
            return ReviewStatus.REJECTED
        case ReviewAction.MODIFY:
            return ReviewStatus.MODIFIED
        case ReviewAction.ESCALATE:
            return ReviewStatus.ESCALATED
        case _:
            assert_never(action)


def past_tense(action: ReviewAction) -> str:
    """Badge label for an action that has already been taken."""
    match action:
        case ReviewAction.ACCEPT:
            return "Accepted"
        case ReviewAction.REJECT:
            return "Rejected"
        case ReviewAction.MODIFY:
            return "Modified"
        case ReviewAction.ESCALATE:
            return "Escalated"
        case _:
            assert_never(action)


@dataclass(frozen=True)
class ModifyDetails:
    """Reviewer's counter-proposal; omitted fields are sent as null."""

    order_qty: float | None = None
    discount_type: str | None = None
    discount_value: float | None = None

    def __post_init__(self) -> None:
        if self.order_qty is None and self.discount_type is None and self.discount_value is None:
            raise ActionValidationError("Change at least one field to modify a request")
        if self.discount_type == CUSTOM_DISCOUNT_TYPE and self.discount_value is None:
            raise ActionValidationError("A custom discount type needs a discount value")

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> ModifyDetails:
        """Build from the modify form's field names (`orderKg`, `discountType`, `discountValue`)."""

        def _number(key: str) -> float | None:
            raw = data.get(key)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                return None
            try:
                return float(raw)
            except (TypeError, ValueError) as exc:
                raise ActionValidationError(f"{key} must be a number") from exc

        discount_type = data.get("discountType")
        if isinstance(discount_type, str):
            discount_type = discount_type.strip() or None
        return cls(
            order_qty=_number("orderKg"),
            discount_type=discount_type,
            discount_value=_number("discountValue"),
        )


@dataclass(frozen=True)
class ReviewRemarks:
    """Free-text reason attached to an escalation or rejection."""

    text: str

    def __post_init__(self) -> None:
        if len(self.text) > MAX_REMARKS_LENGTH:
            raise ActionValidationError(
                f"Remarks are limited to {MAX_REMARKS_LENGTH} characters",
            )


ActionExtra = ModifyDetails | ReviewRemarks


@dataclass(frozen=True)
class ActionResult:
    """Locally recorded outcome of a successful review round trip."""

    request_id: int
    action: ReviewAction
    timestamp: datetime
    tat_time: str | None = None

    @property
    def label(self) -> str:
        return past_tense(self.action)


def build_update_payload(
    request_ids: Iterable[int],
    action: ReviewAction,
    extra: ActionExtra | None,
    *,
    reviewed_by: str | None,
    reviewed_at: datetime,
) -> DiscountRequestUpdate:
    """Normalize a decision into the update body; unused fields stay null."""
    modify = extra if action is ReviewAction.MODIFY and isinstance(extra, ModifyDetails) else None
    remarks_allowed = action in (ReviewAction.ESCALATE, ReviewAction.REJECT)
    remarks = extra.text if remarks_allowed and isinstance(extra, ReviewRemarks) else None
    return DiscountRequestUpdate(
        ids=list(request_ids),
        abmStatus=wire_status(action),
        abmOrderQty=modify.order_qty if modify else None,
        abmDiscountType=modify.discount_type if modify else None,
        abmDiscountValue=modify.discount_value if modify else None,
        abmRemarks=remarks or None,
        abmReviewedBy=reviewed_by,
        abmReviewedAt=reviewed_at,
    )


class ActionExecutor:
    """Submits review decisions and remembers which requests were handled.

    Results live only as long as this object; the store's `abmStatus` is the
    durable record and shows up on the next list fetch, where `sync` picks it up.
    """

    def __init__(
        self,
        client: PortalClient,
        session: ReviewerSession | None,
        *,
        clock: Callable[[], datetime] = localnow,
    ) -> None:
        self.client = client
        self.session = session
        self.clock = clock
        self.results: dict[int, ActionResult] = {}
        self._in_flight: set[int] = set()
        self._reviewed: set[int] = set()

    def sync(self, requests: Iterable[DiscountRequestRead]) -> None:
        """Note which fetched requests already carry a stored review decision."""
        self._reviewed = {r.requestId for r in requests if is_terminal(r)}

    def is_action_disabled(self, request_id: int) -> bool:
        return (
            request_id in self.results
            or request_id in self._in_flight
            or request_id in self._reviewed
        )

    def is_in_flight(self, request_id: int) -> bool:
        return request_id in self._in_flight

    def get_action_taken(self, request_id: int) -> ActionResult | None:
        return self.results.get(request_id)

    def _check_allowed(self, requests: list[DiscountRequestRead], action: ReviewAction) -> None:
        taken = [
            r.requestId for r in requests if is_terminal(r) or self.is_action_disabled(r.requestId)
        ]
        if taken:
            raise ActionValidationError(
                f"Action already taken or in progress for request(s) {', '.join(map(str, taken))}",
            )
        refused = [r.requestId for r in requests if action not in allowed_actions(r)]
        if refused:
            raise ActionValidationError(
                f"{action.value} is not allowed for request(s) {', '.join(map(str, refused))}",
            )

    async def _submit(self, payload: DiscountRequestUpdate) -> None:
        ids = tuple(payload.ids)
        self._in_flight.update(ids)
        try:
            result = await self.client.update_requests(payload)
        except PortalTransportError as exc:
            logger.warning(
                "actions.submit.failed",
                extra={"request_ids": ids, "abm_status": payload.abmStatus.value},
            )
            raise ActionFailedError(exc.message, request_ids=ids) from exc
        finally:
            self._in_flight.difference_update(ids)
        if not result.success:
            logger.warning(
                "actions.submit.rejected",
                extra={"request_ids": ids, "result_message": result.message},
            )
            raise ActionFailedError(result.message or "Update failed", request_ids=ids)

    def _stamp(
        self,
        request: DiscountRequestRead,
        action: ReviewAction,
        at: datetime,
    ) -> ActionResult:
        result = ActionResult(
            request_id=request.requestId,
            action=action,
            timestamp=at,
            tat_time=turnaround_label(request.createdAt, at),
        )
        self.results[request.requestId] = result
        return result

    async def execute_action(
        self,
        request: DiscountRequestRead,
        action: ReviewAction,
        extra: ActionExtra | None = None,
    ) -> ActionResult:
        """Submit one decision for one request."""
        if action is ReviewAction.MODIFY and not isinstance(extra, ModifyDetails):
            raise ActionValidationError("Modify needs the modified order or discount fields")
        self._check_allowed([request], action)

        timestamp = self.clock()
        payload = build_update_payload(
            [request.requestId],
            action,
            extra,
            reviewed_by=self.session.username if self.session else None,
            reviewed_at=timestamp,
        )
        await self._submit(payload)

        result = self._stamp(request, action, timestamp)
        logger.info(
            "actions.execute.completed",
            extra={"request_id": request.requestId, "action": action.value, "tat": result.tat_time},
        )
        return result

    async def execute_bulk_action(
        self,
        requests: Iterable[DiscountRequestRead],
        action: ReviewAction,
    ) -> list[ActionResult]:
        """Submit one Accept/Reject decision for a whole batch, all or nothing."""
        if action not in BULK_ACTIONS:
            raise ActionValidationError(f"{action.value} cannot be applied in bulk")
        batch = list({r.requestId: r for r in requests}.values())
        if not batch:
            raise ActionValidationError("Select at least one request")
        self._check_allowed(batch, action)

        timestamp = self.clock()
        payload = build_update_payload(
            [r.requestId for r in batch],
            action,
            None,
            reviewed_by=self.session.username if self.session else None,
            reviewed_at=timestamp,
        )
        await self._submit(payload)

        stamped = [self._stamp(request, action, timestamp) for request in batch]
        logger.info(
            "actions.bulk.completed",
            extra={"action": action.value, "batch_size": len(batch)},
        )
        return stamped
