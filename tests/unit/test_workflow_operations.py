"""WorkflowService unit tests with in-memory record store and history log."""

import io
import logging
from datetime import timedelta

import pytest

from app.application.dtos.evidence import EvidenceFile
from app.application.dtos.workflow import WorkflowCreate, WorkflowFilter
from app.application.services.workflow_state_machine import WorkflowStateMachine
from app.application.use_cases.workflows import WorkflowService
from app.domain.enums import (
    HistoryAction,
    PermittedAction,
    ResponseOutcome,
    WorkflowNature,
    WorkflowStatus,
)
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    StateConflictException,
    StoreException,
    ValidationException,
)
from tests.fakes import (
    FixedClock,
    InMemoryEvidenceStorage,
    InMemoryHistoryRepository,
    InMemoryWorkflowRepository,
)

U1 = "user-responsible"
U2 = "user-validator"
CREATOR = "user-hse-manager"


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def repos(clock):
    return InMemoryWorkflowRepository(clock), InMemoryHistoryRepository(clock)


@pytest.fixture
def service(clock, repos) -> WorkflowService:
    workflow_repo, history_repo = repos
    return WorkflowService(
        workflow_repo,
        history_repo,
        clock,
        state_machine=WorkflowStateMachine(max_evidence_photos=5),
        evidence_storage=InMemoryEvidenceStorage(),
    )


async def _create(service: WorkflowService, clock: FixedClock, **overrides):
    fields = {
        "deviation_id": "dev-1",
        "title": "Repair conveyor guard",
        "description": None,
        "responsible_id": U1,
        "nature": WorkflowNature.CORRECTIVE,
        "deadline": clock.now() + timedelta(hours=48),
    }
    fields.update(overrides)
    return await service.create_workflow(WorkflowCreate(**fields), CREATOR)


async def _actions(service: WorkflowService, workflow_id: str) -> list[HistoryAction]:
    return [e.action for e in await service.get_history(workflow_id)]


async def test_full_lifecycle_block_return_resubmit_approve(service, clock) -> None:
    """Create, block, return, resubmit completed, approve; history and permissions at each step."""
    wf = await _create(service, clock)
    view = await service.get_workflow_view(wf.id, U1)
    assert wf.status == WorkflowStatus.PENDING
    assert view.permitted_actions == {PermittedAction.RESPOND}
    assert (await service.get_workflow_view(wf.id, U2)).permitted_actions == frozenset()

    wf = await service.respond(
        wf.id, U1, ResponseOutcome.BLOCKED, notes="machine still broken", evidence_photos=["p1"]
    )
    assert wf.status == WorkflowStatus.SUBMITTED_BLOCKED
    assert wf.response_notes == "machine still broken"
    assert wf.evidence_photos == ["p1"]
    assert await _actions(service, wf.id) == [
        HistoryAction.CREATED,
        HistoryAction.SUBMITTED_BLOCKED,
    ]

    wf = await service.return_for_rework(wf.id, U2, "insufficient evidence")
    assert wf.status == WorkflowStatus.RETURNED
    assert wf.validator_notes == "insufficient evidence"
    assert len(await service.get_history(wf.id)) == 3
    assert (await service.get_workflow_view(wf.id, U1)).permitted_actions == {
        PermittedAction.RESPOND
    }
    assert (await service.get_workflow_view(wf.id, U2)).permitted_actions == frozenset()

    wf = await service.respond(wf.id, U1, ResponseOutcome.COMPLETED, notes="fixed")
    assert wf.status == WorkflowStatus.SUBMITTED_COMPLETED
    history = await service.get_history(wf.id)
    assert history[3].action == HistoryAction.RESUBMITTED
    assert wf.validator_notes is None

    wf = await service.approve(wf.id, U2)
    assert wf.status == WorkflowStatus.APPROVED
    assert wf.validator_id == U2
    history = await service.get_history(wf.id)
    assert len(history) == 5
    assert history[4].action == HistoryAction.APPROVED
    assert history[4].performed_by == U2
    for actor in (U1, U2):
        assert (await service.get_workflow_view(wf.id, actor)).permitted_actions == frozenset()


async def test_create_records_created_entry_by_creator(service, clock, repos) -> None:
    wf = await _create(service, clock)
    _, history_repo = repos
    assert wf.sequence_id == 1
    assert history_repo.entries[0].action == HistoryAction.CREATED
    assert history_repo.entries[0].performed_by == CREATOR


async def test_create_rejects_deadline_not_in_future(service, clock, repos) -> None:
    workflow_repo, history_repo = repos
    with pytest.raises(ValidationException):
        await _create(service, clock, deadline=clock.now())
    assert workflow_repo.rows == {}
    assert history_repo.entries == []


async def test_sequence_ids_increase(service, clock) -> None:
    first = await _create(service, clock)
    second = await _create(service, clock)
    assert second.sequence_id > first.sequence_id


async def test_blocked_without_notes_leaves_state_and_history_unchanged(
    service, clock, repos
) -> None:
    wf = await _create(service, clock)
    workflow_repo, _ = repos

    with pytest.raises(ValidationException):
        await service.respond(wf.id, U1, ResponseOutcome.BLOCKED, notes="   ")

    assert (await service.get_workflow_view(wf.id, U1)).workflow.status == WorkflowStatus.PENDING
    assert await _actions(service, wf.id) == [HistoryAction.CREATED]
    assert workflow_repo.update_calls == []


async def test_return_without_notes_rejected(service, clock) -> None:
    wf = await _create(service, clock)
    await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)

    with pytest.raises(ValidationException):
        await service.return_for_rework(wf.id, U2, "")

    assert len(await service.get_history(wf.id)) == 2


async def test_approve_from_pending_is_state_conflict(service, clock) -> None:
    wf = await _create(service, clock)
    with pytest.raises(StateConflictException):
        await service.approve(wf.id, U2)


async def test_responsible_cannot_validate_own_response(service, clock) -> None:
    wf = await _create(service, clock)
    await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)
    with pytest.raises(AuthorizationException):
        await service.approve(wf.id, U1)


async def test_unknown_workflow_raises_not_found(service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.respond("missing", U1, ResponseOutcome.COMPLETED)


async def test_completed_at_set_on_each_submission(service, clock) -> None:
    wf = await _create(service, clock)
    first = clock.now()
    wf = await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)
    assert wf.completed_at == first

    await service.return_for_rework(wf.id, U2, "redo")
    clock.advance(timedelta(hours=2))
    wf = await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)
    assert wf.completed_at == first + timedelta(hours=2)


async def test_version_increments_per_transition(service, clock) -> None:
    wf = await _create(service, clock)
    assert wf.version == 1
    wf = await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)
    assert wf.version == 2


async def test_stale_version_rejected(service, clock, repos) -> None:
    """A concurrent writer bumps the version between load and update."""
    workflow_repo, history_repo = repos
    wf = await _create(service, clock)
    original_get = workflow_repo.get_workflow

    async def get_then_race(workflow_id: str):
        loaded = await original_get(workflow_id)
        await workflow_repo.update_workflow(workflow_id, {"response_notes": "other tab"})
        return loaded

    workflow_repo.get_workflow = get_then_race

    with pytest.raises(StateConflictException) as exc_info:
        await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)

    assert exc_info.value.details["expected_version"] == 1
    assert [e.action for e in history_repo.entries] == [HistoryAction.CREATED]


async def test_history_append_retried_then_succeeds(clock, repos, caplog) -> None:
    workflow_repo, history_repo = repos
    service = WorkflowService(
        workflow_repo, history_repo, clock, history_append_max_attempts=3
    )
    wf = await _create(service, clock)
    history_repo.fail_appends = 2
    attempts_before = history_repo.append_attempts

    with caplog.at_level(logging.WARNING):
        await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)

    assert history_repo.append_attempts - attempts_before == 3
    assert await _actions(service, wf.id) == [
        HistoryAction.CREATED,
        HistoryAction.SUBMITTED_COMPLETED,
    ]
    assert "Reconciliation required" not in caplog.text


async def test_history_append_exhausted_logs_reconciliation(clock, repos, caplog) -> None:
    workflow_repo, history_repo = repos
    service = WorkflowService(
        workflow_repo, history_repo, clock, history_append_max_attempts=2
    )
    wf = await _create(service, clock)
    history_repo.fail_appends = 5

    with caplog.at_level(logging.WARNING):
        with pytest.raises(StoreException) as exc_info:
            await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)

    assert exc_info.value.details["operation"] == "append_history"
    assert "Reconciliation required" in caplog.text
    assert wf.id in caplog.text
    # Record update went through; only the history entry is missing.
    stored = workflow_repo.rows[wf.id]
    assert stored.status == WorkflowStatus.SUBMITTED_COMPLETED
    assert await _actions(service, wf.id) == [HistoryAction.CREATED]


async def test_created_entry_exhausted_logs_without_claiming_update(clock, repos, caplog) -> None:
    workflow_repo, history_repo = repos
    service = WorkflowService(
        workflow_repo, history_repo, clock, history_append_max_attempts=1
    )
    history_repo.fail_appends = 1

    with caplog.at_level(logging.WARNING):
        with pytest.raises(StoreException):
            await _create(service, clock)

    assert "Reconciliation required" in caplog.text
    assert "'created'" in caplog.text
    assert "updated" not in caplog.text


def test_service_requires_at_least_one_attempt(clock, repos) -> None:
    workflow_repo, history_repo = repos
    with pytest.raises(ValueError):
        WorkflowService(
            workflow_repo, history_repo, clock, history_append_max_attempts=0
        )


async def test_overdue_flag_pending_then_returned(service, clock) -> None:
    """Pending past deadline is overdue; returned past deadline is not."""
    wf = await _create(service, clock, deadline=clock.now() + timedelta(hours=1))
    clock.advance(timedelta(hours=2))
    assert (await service.get_workflow_view(wf.id, U2)).is_overdue is True

    await service.respond(wf.id, U1, ResponseOutcome.COMPLETED)
    await service.return_for_rework(wf.id, U2, "redo")
    view = await service.get_workflow_view(wf.id, U1)
    assert view.workflow.status == WorkflowStatus.RETURNED
    assert view.is_overdue is False


async def test_upload_evidence_returns_refs(service, clock) -> None:
    wf = await _create(service, clock)
    files = [
        EvidenceFile("before.jpg", "image/jpeg", io.BytesIO(b"jpeg-bytes")),
        EvidenceFile("after.png", "image/png", io.BytesIO(b"png-bytes")),
    ]
    refs = await service.upload_evidence(wf.id, U1, files)
    assert len(refs) == 2
    wf = await service.respond(wf.id, U1, ResponseOutcome.COMPLETED, evidence_photos=refs)
    assert wf.evidence_photos == refs


async def test_upload_evidence_rejected_for_validator(service, clock) -> None:
    wf = await _create(service, clock)
    with pytest.raises(AuthorizationException):
        await service.upload_evidence(
            wf.id, U2, [EvidenceFile("a.jpg", "image/jpeg", io.BytesIO(b"x"))]
        )


async def test_upload_evidence_without_storage_is_store_error(clock, repos) -> None:
    workflow_repo, history_repo = repos
    service = WorkflowService(workflow_repo, history_repo, clock)
    wf = await _create(service, clock)
    with pytest.raises(StoreException):
        await service.upload_evidence(
            wf.id, U1, [EvidenceFile("a.jpg", "image/jpeg", io.BytesIO(b"x"))]
        )


async def test_list_for_deviation_in_creation_order(service, clock) -> None:
    first = await _create(service, clock)
    await _create(service, clock, deviation_id="dev-2")
    third = await _create(service, clock, responsible_id=U2)

    views = await service.list_for_deviation("dev-1", U2)

    assert [v.workflow.id for v in views] == [first.id, third.id]
    assert views[0].permitted_actions == frozenset()
    assert views[1].permitted_actions == {PermittedAction.RESPOND}


async def test_list_workflows_applies_filters(service, clock) -> None:
    mine = await _create(service, clock)
    await _create(service, clock, responsible_id=U2)
    await service.respond(mine.id, U1, ResponseOutcome.COMPLETED)

    views = await service.list_workflows(
        U2, WorkflowFilter(status=WorkflowStatus.SUBMITTED_COMPLETED)
    )

    assert [v.workflow.id for v in views] == [mine.id]
    assert views[0].permitted_actions == {PermittedAction.VALIDATE}


async def test_list_actionable_puts_responses_before_validations(service, clock) -> None:
    awaiting_u1 = await _create(service, clock)
    to_validate = await _create(service, clock, responsible_id=U2)
    await service.respond(to_validate.id, U2, ResponseOutcome.COMPLETED)
    await _create(service, clock, responsible_id="someone-else")
    own_submission = await _create(service, clock)
    await service.respond(own_submission.id, U1, ResponseOutcome.COMPLETED)

    views = await service.list_actionable(U1)

    assert [v.workflow.id for v in views] == [awaiting_u1.id, to_validate.id]
    assert views[0].permitted_actions == {PermittedAction.RESPOND}
    assert views[1].permitted_actions == {PermittedAction.VALIDATE}


async def test_list_actionable_own_submissions_do_not_hide_validations(repos, clock) -> None:
    """Newer submissions owned by the actor must not crowd out older ones they can validate."""
    workflow_repo, history_repo = repos
    service = WorkflowService(workflow_repo, history_repo, clock)
    older = workflow_repo.seed(responsible_id=U2, status=WorkflowStatus.SUBMITTED_BLOCKED)
    workflow_repo.seed(responsible_id=U1, status=WorkflowStatus.SUBMITTED_BLOCKED)

    views = await service.list_actionable(U1, limit=1)

    assert [v.workflow.id for v in views] == [older.id]
    assert views[0].permitted_actions == {PermittedAction.VALIDATE}
