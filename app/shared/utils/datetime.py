"""UTC datetime helpers.

Deadlines, submission and validation times are stored and compared as
timezone-aware UTC. Naive values coming from the database driver or from
clients are normalized here.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime to aware UTC.

    A naive value is taken to already be UTC. None passes through so the
    helper can be applied to optional columns (completed_at, validated_at).

    Args:
        dt: Naive or aware datetime, or None.

    Returns:
        UTC-aware datetime, or None.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def evidence_partition(dt: datetime) -> str:
    """Return the ``<yyyy>/<mm>`` storage partition for a UTC timestamp."""
    dt = ensure_utc(dt) or dt
    return f"{dt.year:04d}/{dt.month:02d}"
