"""Deviation-scoped workflow routes: raise and list actions for one deviation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_current_actor_id,
    get_workflow_service,
    get_workflow_service_for_write,
)
from app.application.dtos.workflow import WorkflowCreate
from app.application.use_cases.workflows import WorkflowService
from app.core.limiter import limit_writes
from app.schemas.workflow import (
    WorkflowCreateRequest,
    WorkflowViewResponse,
    to_view_response,
)

router = APIRouter()


@router.post(
    "/{deviation_id}/workflows",
    response_model=WorkflowViewResponse,
    status_code=201,
)
@limit_writes
async def create_workflow(
    request: Request,
    deviation_id: str,
    body: WorkflowCreateRequest,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service_for_write)],
):
    """Raise a corrective/preventive action against a deviation (status pending)."""
    workflow = await service.create_workflow(
        WorkflowCreate(
            deviation_id=deviation_id,
            title=body.title,
            description=body.description,
            responsible_id=body.responsible_id,
            nature=body.nature,
            deadline=body.deadline,
        ),
        actor_id,
    )
    return to_view_response(service.view(workflow, actor_id))


@router.get(
    "/{deviation_id}/workflows",
    response_model=list[WorkflowViewResponse],
)
async def list_deviation_workflows(
    deviation_id: str,
    actor_id: Annotated[str, Depends(get_current_actor_id)],
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
):
    """All actions raised against a deviation, in creation order."""
    views = await service.list_for_deviation(deviation_id, actor_id)
    return [to_view_response(v) for v in views]
