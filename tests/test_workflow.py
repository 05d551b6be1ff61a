"""Tests for the listing/detail review state machine."""
from datetime import date

import pytest

from conftest import FakeClient, make_probate_records
from courtrecords.core.errors import ActionNotAllowedError, NoSelectionError, RemarksRequiredError
from courtrecords.review.modal import AutoConfirmModal
from courtrecords.review.stages import DEFAULT_STAGES
from courtrecords.review.workflow import ReviewWorkflow, WorkflowState


def _workflow(client, stage="probate-cr", modal=None):
    workflow = ReviewWorkflow(client, DEFAULT_STAGES[stage], modal=modal or AutoConfirmModal())
    workflow.refresh()
    return workflow


def test_refresh_loads_queue(fake_client):
    workflow = _workflow(fake_client)
    assert len(workflow.records) == 25
    assert workflow.error is None
    assert fake_client.gets == [("GET", "/staff/probate/cr-pending", None)]


def test_list_failure_degrades_to_empty_list_with_banner(fake_client):
    workflow = _workflow(fake_client)
    fake_client.fail_list = True
    assert workflow.refresh() is False
    assert workflow.records == []
    assert "Failed to load applications." in workflow.error
    assert not workflow.loading


def test_select_loads_detail(fake_client):
    workflow = _workflow(fake_client)
    assert workflow.select(3)
    assert workflow.state == WorkflowState.DETAIL
    assert workflow.selected["id"] == 3
    assert workflow.selected["beneficiaries"]
    assert workflow.available_actions == ("approve", "reject")


def test_detail_failure_stays_on_listing(fake_client):
    workflow = _workflow(fake_client)
    fake_client.fail_detail = True
    assert workflow.select(3) is False
    assert workflow.state == WorkflowState.LISTING
    assert workflow.selected is None
    assert workflow.detail_error


def test_detail_error_clears_on_back_and_refresh(fake_client):
    workflow = _workflow(fake_client)
    fake_client.fail_detail = True
    workflow.select(3)
    workflow.back()
    assert workflow.detail_error is None

    workflow.select(3)
    assert workflow.detail_error
    workflow.refresh()
    assert workflow.detail_error is None


def test_superseded_detail_response_is_discarded(fake_client):
    workflow = _workflow(fake_client)
    # While record 1 is loading the user picks record 2.
    fake_client.before_detail = lambda _rid: workflow.select(2)
    assert workflow.select(1) is False
    assert workflow.selected["id"] == 2
    assert workflow.selected_id == 2


def test_superseded_list_response_is_discarded():
    client = FakeClient(make_probate_records(3))
    workflow = ReviewWorkflow(client, DEFAULT_STAGES["probate-cr"])
    original = client.list_records

    def slow_list(path):
        result = original(path)
        client.list_records = original
        client.records = make_probate_records(5)
        workflow.refresh()
        return result

    client.list_records = slow_list
    assert workflow.refresh() is False
    assert len(workflow.records) == 5


def test_back_discards_pending_detail(fake_client):
    workflow = _workflow(fake_client)
    fake_client.before_detail = lambda _rid: workflow.back()
    assert workflow.select(4) is False
    assert workflow.state == WorkflowState.LISTING
    assert workflow.selected is None


@pytest.mark.parametrize("remarks", [None, "", "   \n\t"])
def test_reject_without_remarks_never_calls_api(fake_client, remarks):
    workflow = _workflow(fake_client)
    workflow.select(3)
    with pytest.raises(RemarksRequiredError):
        workflow.reject(remarks)
    assert fake_client.puts == []
    assert workflow.state == WorkflowState.DETAIL


def test_approve_returns_to_listing_and_refetches(fake_client):
    workflow = _workflow(fake_client)
    workflow.select(3)
    gets_before = len(fake_client.gets)

    assert workflow.approve("  Looks complete  ")

    assert fake_client.puts == [("PUT", "/staff/probate/3/approve", {"remarks": "Looks complete"})]
    assert workflow.state == WorkflowState.LISTING
    assert workflow.selected is None
    assert len(fake_client.gets) == gets_before + 1
    assert workflow.find(3)["status"] == "under_processing"
    assert workflow.modal.notifications[-1][0] == "success"


def test_approve_without_remarks_is_allowed(fake_client):
    workflow = _workflow(fake_client)
    workflow.select(5)
    assert workflow.approve()
    assert fake_client.puts[0][2] == {"remarks": None}


def test_reject_sends_remarks(fake_client):
    workflow = _workflow(fake_client)
    workflow.select(7)
    assert workflow.reject("Death certificate missing")
    assert fake_client.puts == [
        ("PUT", "/staff/probate/7/reject", {"remarks": "Death certificate missing"})
    ]
    assert workflow.find(7)["status"] == "rejected"


def test_completed_record_offers_no_actions():
    client = FakeClient(make_probate_records(2, status="completed"))
    workflow = _workflow(client)
    workflow.select(1)
    assert workflow.state == WorkflowState.DETAIL
    assert workflow.available_actions == ()
    assert not workflow.can_act
    with pytest.raises(ActionNotAllowedError):
        workflow.approve("late")
    assert client.puts == []


def test_action_failure_keeps_detail_and_status(fake_client):
    workflow = _workflow(fake_client)
    workflow.select(3)
    fake_client.fail_action = True

    assert workflow.approve("ok") is False

    assert workflow.state == WorkflowState.DETAIL
    assert workflow.selected["status"] == "cr_pending"
    assert "Failed to update application status." in workflow.action_error
    assert workflow.modal.notifications[-1][0] == "error"
    assert len(fake_client.puts) == 1


def test_declined_confirmation_sends_nothing(fake_client):
    workflow = _workflow(fake_client, modal=AutoConfirmModal(answer=False))
    workflow.select(3)
    assert workflow.reject("Incomplete") is False
    assert fake_client.puts == []
    assert workflow.state == WorkflowState.DETAIL


def test_action_without_selection_is_refused(fake_client):
    workflow = _workflow(fake_client)
    with pytest.raises(NoSelectionError):
        workflow.approve("ok")


def test_affidavit_stage_uses_list_row_and_next_status():
    records = [{"id": 11, "status": "submitted", "first_name": "Ama"}]
    client = FakeClient(records)
    workflow = _workflow(client, stage="affidavit-registry")

    assert workflow.select(11)
    assert workflow.selected == records[0]
    assert client.gets == [("GET", "/staff/affidavits/pending-review", None)]

    workflow.approve()
    assert client.puts == [
        ("PUT", "/affidavits/11/approve", {"remarks": None, "nextStatus": "pending_cfo"})
    ]


def test_affidavit_reject_uses_rejected_next_status():
    client = FakeClient([{"id": 12, "status": "submitted"}])
    workflow = _workflow(client, stage="affidavit-registry")
    workflow.select(12)
    workflow.reject("Unsigned")
    assert client.puts[0][2] == {"remarks": "Unsigned", "nextStatus": "rejected"}


def test_registrar_stage_requires_remarks_and_offers_no_reject():
    client = FakeClient(make_probate_records(2, status="pending_registrar"))
    workflow = _workflow(client, stage="probate-registrar")
    workflow.select(1)

    assert workflow.available_actions == ("approve",)
    with pytest.raises(RemarksRequiredError):
        workflow.approve("  ")
    with pytest.raises(ActionNotAllowedError):
        workflow.reject("not here")
    assert client.puts == []

    assert workflow.approve("Reviewed all sections")
    assert client.puts == [
        ("PUT", "/staff/probate/1/review", {"remarks": "Reviewed all sections"})
    ]
    assert workflow.find(1)["status"] == "cr_pending"


def test_registrar_can_resubmit_rejected_and_unrouted_applications():
    records = [
        {"id": 1, "status": "rejected"},
        {"id": 2, "status": "submitted"},
        {"id": 3, "status": None},
        {"id": 4, "status": "under_processing"},
    ]
    workflow = _workflow(FakeClient(records), stage="probate-registrar")
    for rid in (1, 2, 3):
        workflow.select(rid)
        assert workflow.available_actions == ("approve",)
    workflow.select(4)
    assert workflow.available_actions == ()


def test_maturity_uses_injected_clock():
    records = [{"id": 1, "status": "under_processing", "approval_date": "2024-01-01"}]
    workflow = ReviewWorkflow(
        FakeClient(records), DEFAULT_STAGES["probate-cr"], clock=lambda: date(2024, 1, 22)
    )
    workflow.refresh()
    assert workflow.maturity() is None

    workflow.select(1)
    maturity = workflow.maturity()
    assert workflow.today() == date(2024, 1, 22)
    assert maturity.matured and maturity.days == 21
    assert not workflow.maturity(threshold_days=30).matured
