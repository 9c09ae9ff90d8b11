"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.clock import SystemClock

__all__ = ["SystemClock"]
