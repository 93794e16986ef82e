"""Celery tasks for the targets module."""
from __future__ import annotations

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=30, name="targets.tasks.recompute_employee_targets")
def recompute_employee_targets(self, *, employee_id: int):
    """Recompute every target of a single employee."""
    try:
        from targets.engine import recalculate_targets

        targets = recalculate_targets(employee_id)
        logger.info("Recomputed %d targets for employee=%s", len(targets), employee_id)
        return len(targets)
    except Exception as exc:
        logger.exception("recompute_employee_targets failed: %s", exc)
        raise self.retry(exc=exc)


@shared_task(name="targets.tasks.recompute_academy_targets")
def recompute_academy_targets(*, academy_id: int | None = None):
    """
    Scheduled nightly (Celery Beat). Rebuilds the targets of every active
    employee, optionally restricted to one academy, so that any drift left
    by out-of-band data fixes is reconciled.
    """
    from hr.models import Employee
    from targets.engine import recalculate_targets

    employees = Employee.objects.filter(
        status=Employee.Status.ACTIVE,
        academy__is_active=True,
        targets__isnull=False,
    )
    if academy_id is not None:
        employees = employees.filter(academy_id=academy_id)
    employee_ids = list(employees.values_list("pk", flat=True).distinct())

    failures = 0
    for employee_id in employee_ids:
        try:
            recalculate_targets(employee_id)
        except Exception as exc:
            failures += 1
            logger.error("Target recompute failed for employee=%s: %s", employee_id, exc, exc_info=True)

    logger.info(
        "recompute_academy_targets completed: %d employees (%d failures)",
        len(employee_ids), failures,
    )
    return f"{len(employee_ids) - failures} employees recomputed"
