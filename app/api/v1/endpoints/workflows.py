"""Workflow API: thin routes delegating to WorkflowService.

Every route resolves the actor from the bearer token and passes it
explicitly. Responses carry the actor's permitted actions and the overdue
flag so clients never re-derive the validator rule.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from app.api.v1.dependencies import (
    get_current_actor_id,
    get_workflow_service,
    get_workflow_service_for_write,
)
from app.application.dtos.evidence import EvidenceFile
from app.application.dtos.workflow import WorkflowFilter
from app.application.use_cases.workflows import WorkflowService
from app.core.limiter import limit_upload, limit_writes
from app.domain.enums import WorkflowStatus
from app.schemas.workflow import (
    ApproveRequest,
    EvidenceUploadResponse,
    HistoryEntryResponse,
    RespondRequest,
    ReturnRequest,
    WorkflowViewResponse,
    to_view_response,
)

router = APIRouter()


@router.get("", response_model=list[WorkflowViewResponse])
async def list_workflows(
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
    status: WorkflowStatus | None = Query(None),
    responsible_id: str | None = Query(None),
    deviation_id: str | None = Query(None),
    mine: bool = Query(False, description="Only actions assigned to the current actor"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """List workflows across deviations, newest first."""
    filters = WorkflowFilter(
        status=status,
        responsible_id=actor_id if mine else responsible_id,
        deviation_id=deviation_id,
    )
    views = await service.list_workflows(actor_id, filters, skip=skip, limit=limit)
    return [to_view_response(v) for v in views]


@router.get("/actionable", response_model=list[WorkflowViewResponse])
async def list_actionable_workflows(
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
    limit: int = Query(100, ge=1, le=500),
):
    """Workflows the current actor can respond to or validate right now."""
    views = await service.list_actionable(actor_id, limit=limit)
    return [to_view_response(v) for v in views]


@router.get("/{workflow_id}", response_model=WorkflowViewResponse)
async def get_workflow(
    workflow_id: str,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
):
    """Workflow record with permitted actions and overdue flag for the current actor."""
    return to_view_response(await service.get_workflow_view(workflow_id, actor_id))


@router.get("/{workflow_id}/history", response_model=list[HistoryEntryResponse])
async def get_workflow_history(
    workflow_id: str,
    _: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
):
    """Audit trail, oldest first."""
    entries = await service.get_history(workflow_id)
    return [HistoryEntryResponse.model_validate(e) for e in entries]


@router.post("/{workflow_id}/respond", response_model=WorkflowViewResponse)
@limit_writes
async def respond_to_workflow(
    request: Request,
    workflow_id: str,
    body: RespondRequest,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service_for_write)],
):
    """Responsible party submits the action as completed or blocked."""
    workflow = await service.respond(
        workflow_id,
        actor_id,
        body.outcome,
        notes=body.notes,
        evidence_photos=body.evidence_photos,
    )
    return to_view_response(service.view(workflow, actor_id))


@router.post("/{workflow_id}/evidence", response_model=EvidenceUploadResponse, status_code=201)
@limit_upload
async def upload_workflow_evidence(
    request: Request,
    workflow_id: str,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service_for_write)],
    files: list[UploadFile] = File(..., description="Evidence images"),
):
    """Store evidence images; pass the returned references to /respond."""
    refs = await service.upload_evidence(
        workflow_id,
        actor_id,
        [
            EvidenceFile(
                filename=f.filename or "",
                content_type=f.content_type or "",
                data=f.file,
            )
            for f in files
        ],
    )
    return EvidenceUploadResponse(references=refs)


@router.post("/{workflow_id}/approve", response_model=WorkflowViewResponse)
@limit_writes
async def approve_workflow(
    request: Request,
    workflow_id: str,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service_for_write)],
    body: ApproveRequest | None = None,
):
    """Validator approves a submitted response (terminal)."""
    workflow = await service.approve(
        workflow_id, actor_id, notes=body.notes if body else None
    )
    return to_view_response(service.view(workflow, actor_id))


@router.post("/{workflow_id}/return", response_model=WorkflowViewResponse)
@limit_writes
async def return_workflow(
    request: Request,
    workflow_id: str,
    body: ReturnRequest,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service_for_write)],
):
    """Validator returns a submitted response for rework (notes required)."""
    workflow = await service.return_for_rework(
        workflow_id, actor_id, body.validator_notes
    )
    return to_view_response(service.view(workflow, actor_id))
