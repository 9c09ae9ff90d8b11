"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessErrorResponse
from app.schemas.workflow import (
    ApproveRequest,
    EvidenceUploadResponse,
    HistoryEntryResponse,
    RespondRequest,
    ReturnRequest,
    WorkflowCreateRequest,
    WorkflowResponse,
    WorkflowViewResponse,
)

__all__ = [
    "ApproveRequest",
    "EvidenceUploadResponse",
    "HealthResponse",
    "HistoryEntryResponse",
    "ReadinessErrorResponse",
    "RespondRequest",
    "ReturnRequest",
    "WorkflowCreateRequest",
    "WorkflowResponse",
    "WorkflowViewResponse",
]
