"""Tests for workflow enums."""

from app.domain.enums import HistoryAction, WorkflowNature, WorkflowStatus


def test_status_values() -> None:
    assert WorkflowStatus.values() == [
        "pending",
        "submitted_completed",
        "submitted_blocked",
        "approved",
        "returned",
    ]


def test_status_groups() -> None:
    assert {s for s in WorkflowStatus if s.is_submitted} == {
        WorkflowStatus.SUBMITTED_COMPLETED,
        WorkflowStatus.SUBMITTED_BLOCKED,
    }
    assert {s for s in WorkflowStatus if s.awaits_response} == {
        WorkflowStatus.PENDING,
        WorkflowStatus.RETURNED,
    }
    assert not WorkflowStatus.APPROVED.is_submitted
    assert not WorkflowStatus.APPROVED.awaits_response


def test_history_actions_include_resubmitted() -> None:
    assert "resubmitted" in HistoryAction.values()
    assert len(HistoryAction.values()) == 6


def test_enums_compare_equal_to_strings() -> None:
    assert WorkflowStatus("returned") == "returned"
    assert WorkflowNature.values() == ["corrective", "preventive"]
