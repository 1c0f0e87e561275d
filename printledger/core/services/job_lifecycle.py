"""
Production job state machine.

    QUEUED -> IN_PROGRESS <-> PAUSED
    IN_PROGRESS | PAUSED -> FAILED | CANCELLED
    IN_PROGRESS -> COMPLETED
    QUEUED -> CANCELLED

COMPLETED, FAILED and CANCELLED are terminal.
"""

from datetime import datetime
from decimal import Decimal

from printledger.core.entities.production import JobStatus, ProductionJob
from printledger.core.exceptions import InvalidStateTransitionError
from printledger.core.services.money import quantize_money

ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.QUEUED: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
    JobStatus.IN_PROGRESS: frozenset(
        {JobStatus.PAUSED, JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}
    ),
    JobStatus.PAUSED: frozenset(
        {JobStatus.IN_PROGRESS, JobStatus.FAILED, JobStatus.CANCELLED}
    ),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES = frozenset(s for s, targets in ALLOWED_TRANSITIONS.items() if not targets)


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def elapsed_hours(started_at: datetime, now: datetime) -> Decimal:
    seconds = Decimal(str((now - started_at).total_seconds()))
    return quantize_money(max(seconds, Decimal("0")) / 3600)


def apply_transition(
    job: ProductionJob,
    target: JobStatus,
    now: datetime,
    actual_hours: Decimal | None = None,
) -> bool:
    """
    Move ``job`` to ``target`` in place.

    Returns True if the status changed. Re-setting the current status is a
    no-op. Starting stamps ``started_at`` once; completing stamps
    ``completed_at`` and, unless ``actual_hours`` is supplied, derives it
    from the time since start.

    Raises:
        InvalidStateTransitionError: target not reachable from current state
    """
    if target == job.status:
        return False
    if not can_transition(job.status, target):
        raise InvalidStateTransitionError(job.status.value, target.value)

    if target == JobStatus.IN_PROGRESS and job.started_at is None:
        job.started_at = now

    if target == JobStatus.COMPLETED:
        job.completed_at = now
        if actual_hours is None and job.started_at is not None:
            job.actual_hours = elapsed_hours(job.started_at, now)

    job.status = target
    return True


def ensure_deletable(job: ProductionJob) -> None:
    if job.status == JobStatus.IN_PROGRESS:
        raise InvalidStateTransitionError(
            job.status.value,
            "DELETED",
            reason="Cannot delete a job that is in progress",
        )
