"""Workflow use cases: lifecycle transitions, evidence upload, views and history."""

from app.application.use_cases.workflows.workflow_operations import WorkflowService

__all__ = ["WorkflowService"]
