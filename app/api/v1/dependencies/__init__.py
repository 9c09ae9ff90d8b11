"""Presentation-layer dependency injection (composition root).

Routes depend only on these providers, never on infrastructure directly.
"""

from app.api.v1.dependencies.auth import (
    get_current_actor_id,
    get_current_actor_id_optional,
)
from app.api.v1.dependencies.db import get_db, get_db_transactional
from app.api.v1.dependencies.workflow import (
    get_evidence_storage,
    get_workflow_service,
    get_workflow_service_for_write,
)

__all__ = [
    "get_current_actor_id",
    "get_current_actor_id_optional",
    "get_db",
    "get_db_transactional",
    "get_evidence_storage",
    "get_workflow_service",
    "get_workflow_service_for_write",
]
