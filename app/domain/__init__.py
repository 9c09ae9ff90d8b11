"""Domain layer: workflow enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    HistoryAction,
    PermittedAction,
    ResponseOutcome,
    WorkflowNature,
    WorkflowStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    HseException,
    ResourceNotFoundException,
    StateConflictException,
    StoreException,
    ValidationException,
)

__all__ = [
    # Enums
    "HistoryAction",
    "PermittedAction",
    "ResponseOutcome",
    "WorkflowNature",
    "WorkflowStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "HseException",
    "ResourceNotFoundException",
    "StateConflictException",
    "StoreException",
    "ValidationException",
]
