# ruff: noqa: INP001
"""Review action executor: payloads, local outcome tracking, and failures."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import httpx
import pytest

from abm_portal.client.actions import (
    ADMIN_APPROVAL_REASON,
    ActionExecutor,
    ModifyDetails,
    ReviewAction,
    ReviewRemarks,
    allowed_actions,
    build_update_payload,
    wire_status,
)
from abm_portal.client.errors import ActionFailedError, ActionValidationError
from abm_portal.client.portal import PortalClient
from abm_portal.client.session import ReviewerSession
from abm_portal.schemas.requests import DiscountRequestRead, ReviewStatus

NOW = datetime(2026, 10, 18, 10, 30, 0)
SESSION = ReviewerSession(username="abm.north")


def _request(request_id: int, **overrides: Any) -> DiscountRequestRead:
    values: dict[str, Any] = {
        "requestId": request_id,
        "eligible": 1,
        "customerId": 5000 + request_id,
        "customerName": f"Customer {request_id}",
        "campaignType": "Festive",
        "orderQty": 500.0,
        "discountType": "Per Kg",
        "requestedBy": 71,
        "requestedByUserName": "se.ravi",
        "ABM_Id": 9,
        "ABM_UserName": "abm.north",
        "createdAt": datetime(2026, 10, 18, 9, 0, 0),
    }
    values.update(overrides)
    return DiscountRequestRead(**values)


class _Recorder:
    def __init__(self, response: httpx.Response | None = None) -> None:
        self.bodies: list[dict[str, Any]] = []
        self.response = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        if self.response is not None:
            return self.response
        return httpx.Response(
            200,
            json={"success": True, "message": "Request updated successfully"},
        )


def _executor(recorder: _Recorder) -> ActionExecutor:
    client = PortalClient(
        base_url="http://portal.test/webhook",
        transport=httpx.MockTransport(recorder),
    )
    return ActionExecutor(client, SESSION, clock=lambda: NOW)


@pytest.mark.parametrize(
    ("action", "status"),
    [
        (ReviewAction.ACCEPT, ReviewStatus.ACCEPTED),
        (ReviewAction.REJECT, ReviewStatus.REJECTED),
        (ReviewAction.MODIFY, ReviewStatus.MODIFIED),
        (ReviewAction.ESCALATE, ReviewStatus.ESCALATED),
    ],
)
def test_wire_status_mapping(action: ReviewAction, status: ReviewStatus) -> None:
    assert wire_status(action) is status


def test_allowed_actions_follow_eligibility() -> None:
    assert allowed_actions(_request(1)) == {
        ReviewAction.ACCEPT,
        ReviewAction.REJECT,
        ReviewAction.MODIFY,
    }
    assert allowed_actions(_request(2, eligible=0, eligibilityReason=ADMIN_APPROVAL_REASON)) == {
        ReviewAction.ESCALATE,
        ReviewAction.REJECT,
        ReviewAction.MODIFY,
    }
    assert allowed_actions(_request(3, eligible=0, eligibilityReason="Credit hold")) == frozenset()


@pytest.mark.asyncio
async def test_accept_records_result_with_turnaround() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)

    result = await executor.execute_action(_request(101), ReviewAction.ACCEPT)

    assert result.label == "Accepted"
    assert result.tat_time == "1 hour(s), 30 min(s)"
    assert executor.is_action_disabled(101)
    assert executor.get_action_taken(101) is result
    assert recorder.bodies == [
        {
            "ids": [101],
            "abmStatus": "ACCEPTED",
            "abmOrderQty": None,
            "abmDiscountType": None,
            "abmDiscountValue": None,
            "abmRemarks": None,
            "abmReviewedBy": "abm.north",
            "abmReviewedAt": "2026-10-18 10:30:00",
        },
    ]


@pytest.mark.asyncio
async def test_modify_with_only_quantity_sends_other_fields_as_null() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)

    await executor.execute_action(
        _request(102),
        ReviewAction.MODIFY,
        ModifyDetails.from_form({"orderKg": "300", "discountType": "", "discountValue": ""}),
    )

    body = recorder.bodies[0]
    assert body["abmStatus"] == "MODIFIED"
    assert body["abmOrderQty"] == 300
    assert body["abmDiscountType"] is None
    assert body["abmDiscountValue"] is None
    assert body["abmRemarks"] is None


@pytest.mark.asyncio
async def test_escalate_carries_remarks() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)
    request = _request(
        102,
        eligible=0,
        eligibilityReason=ADMIN_APPROVAL_REASON,
        createdAt=datetime(2026, 10, 15, 8, 0, 0),
    )

    result = await executor.execute_action(
        request,
        ReviewAction.ESCALATE,
        ReviewRemarks("Needs regional head sign-off"),
    )

    assert recorder.bodies[0]["abmStatus"] == "ESCALATED"
    assert recorder.bodies[0]["abmRemarks"] == "Needs regional head sign-off"
    assert result.tat_time == "3 day(s), 2 hour(s)"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("request_row", "action"),
    [
        # Eligible rows cannot be escalated.
        (_request(1), ReviewAction.ESCALATE),
        # Admin-approval rows cannot be accepted.
        (_request(2, eligible=0, eligibilityReason=ADMIN_APPROVAL_REASON), ReviewAction.ACCEPT),
        # Any other non-eligible reason is read-only.
        (_request(3, eligible=0, eligibilityReason="Credit hold"), ReviewAction.REJECT),
    ],
)
async def test_action_outside_allowed_set_is_refused(
    request_row: DiscountRequestRead,
    action: ReviewAction,
) -> None:
    recorder = _Recorder()
    executor = _executor(recorder)

    with pytest.raises(ActionValidationError, match="not allowed"):
        await executor.execute_action(request_row, action)

    assert recorder.bodies == []
    assert not executor.is_action_disabled(request_row.requestId)


@pytest.mark.asyncio
async def test_modify_without_details_is_rejected_locally() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)

    with pytest.raises(ActionValidationError):
        await executor.execute_action(_request(101), ReviewAction.MODIFY)

    assert recorder.bodies == []
    assert not executor.is_action_disabled(101)


@pytest.mark.asyncio
async def test_second_action_on_same_request_is_refused() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)
    request = _request(101)
    await executor.execute_action(request, ReviewAction.ACCEPT)

    with pytest.raises(ActionValidationError, match="already taken"):
        await executor.execute_action(request, ReviewAction.REJECT)

    assert len(recorder.bodies) == 1
    taken = executor.get_action_taken(101)
    assert taken is not None
    assert taken.action is ReviewAction.ACCEPT


@pytest.mark.asyncio
async def test_reviewed_request_is_refused_without_sync() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)

    with pytest.raises(ActionValidationError, match="already taken"):
        await executor.execute_action(
            _request(7, abmStatus=ReviewStatus.ACCEPTED),
            ReviewAction.REJECT,
        )

    assert recorder.bodies == []


@pytest.mark.asyncio
async def test_failed_submission_leaves_request_actionable() -> None:
    recorder = _Recorder(httpx.Response(500, json={"detail": "Failed to update request"}))
    executor = _executor(recorder)

    with pytest.raises(ActionFailedError, match="Failed to update request") as exc_info:
        await executor.execute_action(_request(101), ReviewAction.ACCEPT)

    assert exc_info.value.request_ids == (101,)
    assert not executor.is_action_disabled(101)
    assert not executor.is_in_flight(101)
    assert executor.get_action_taken(101) is None


@pytest.mark.asyncio
async def test_unsuccessful_result_is_a_failure() -> None:
    recorder = _Recorder(httpx.Response(200, json={"success": False, "message": "Locked"}))
    executor = _executor(recorder)

    with pytest.raises(ActionFailedError, match="Locked"):
        await executor.execute_action(_request(101), ReviewAction.REJECT)

    assert executor.get_action_taken(101) is None


@pytest.mark.asyncio
async def test_bulk_accept_sends_one_update_and_stamps_every_id() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)
    first = _request(101, createdAt=datetime(2026, 10, 18, 10, 0, 0))
    second = _request(103, createdAt=datetime(2026, 10, 16, 10, 30, 0))

    results = await executor.execute_bulk_action([first, second, first], ReviewAction.ACCEPT)

    assert len(recorder.bodies) == 1
    assert recorder.bodies[0]["ids"] == [101, 103]
    assert [r.request_id for r in results] == [101, 103]
    assert results[0].tat_time == "30 min(s)"
    assert results[1].tat_time == "2 day(s), 0 hour(s)"
    assert all(executor.is_action_disabled(rid) for rid in (101, 103))


@pytest.mark.asyncio
async def test_bulk_accept_refuses_non_eligible_rows() -> None:
    recorder = _Recorder()
    executor = _executor(recorder)
    batch = [_request(101), _request(102, eligible=0, eligibilityReason=ADMIN_APPROVAL_REASON)]

    with pytest.raises(ActionValidationError, match="102"):
        await executor.execute_bulk_action(batch, ReviewAction.ACCEPT)

    assert recorder.bodies == []


@pytest.mark.asyncio
@pytest.mark.parametrize("action", [ReviewAction.MODIFY, ReviewAction.ESCALATE])
async def test_bulk_only_supports_accept_and_reject(action: ReviewAction) -> None:
    executor = _executor(_Recorder())

    with pytest.raises(ActionValidationError, match="cannot be applied in bulk"):
        await executor.execute_bulk_action([_request(101)], action)


@pytest.mark.asyncio
async def test_bulk_requires_selection() -> None:
    executor = _executor(_Recorder())

    with pytest.raises(ActionValidationError, match="Select at least one request"):
        await executor.execute_bulk_action([], ReviewAction.REJECT)


@pytest.mark.asyncio
async def test_bulk_failure_marks_nothing() -> None:
    executor = _executor(_Recorder(httpx.Response(500, json={"detail": "boom"})))

    with pytest.raises(ActionFailedError):
        await executor.execute_bulk_action([_request(101), _request(103)], ReviewAction.REJECT)

    assert executor.results == {}


def test_modify_details_validation() -> None:
    with pytest.raises(ActionValidationError, match="at least one field"):
        ModifyDetails()
    with pytest.raises(ActionValidationError, match="custom discount type"):
        ModifyDetails(discount_type="Custom")
    with pytest.raises(ActionValidationError, match="orderKg must be a number"):
        ModifyDetails.from_form({"orderKg": "lots"})

    details = ModifyDetails(discount_type="Custom", discount_value=3.0)
    assert details.discount_value == 3.0


def test_remarks_length_limit() -> None:
    ReviewRemarks("x" * 200)
    with pytest.raises(ActionValidationError, match="200 characters"):
        ReviewRemarks("x" * 201)


def test_payload_drops_extras_that_do_not_apply_to_the_action() -> None:
    accept = build_update_payload(
        [1],
        ReviewAction.ACCEPT,
        ReviewRemarks("ignored"),
        reviewed_by="abm.north",
        reviewed_at=NOW,
    )
    reject = build_update_payload(
        [1],
        ReviewAction.REJECT,
        ReviewRemarks(""),
        reviewed_by="abm.north",
        reviewed_at=NOW,
    )

    assert accept.abmRemarks is None
    assert reject.abmRemarks is None
    assert reject.abmStatus is ReviewStatus.REJECTED


def test_stored_review_decision_disables_request_after_sync() -> None:
    executor = _executor(_Recorder())

    executor.sync([_request(7, abmStatus=ReviewStatus.REJECTED), _request(8)])

    assert executor.is_action_disabled(7)
    assert not executor.is_action_disabled(8)
