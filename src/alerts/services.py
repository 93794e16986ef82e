"""Service functions for the alerts app."""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from alerts.models import TargetAlert

logger = logging.getLogger("formapro")

# (alert type, minimum progress percentage), lowest first.
THRESHOLDS = (
    (TargetAlert.Type.REACHED_80, Decimal("80")),
    (TargetAlert.Type.REACHED_100, Decimal("100")),
)


def target_percentage(target) -> Decimal:
    """Progress of *target* in percent, capped at 100 (0 for a null target)."""
    if target.target_value <= 0:
        return Decimal("0")
    pct = Decimal(target.current_value) / Decimal(target.target_value) * 100
    return min(Decimal("100"), pct).quantize(Decimal("0.01"))


def _fmt(value) -> str:
    return f"{Decimal(value).normalize():f}"


def _build_message(employee, target, alert_type, percentage) -> str:
    headline = (
        "a atteint son objectif"
        if alert_type == TargetAlert.Type.REACHED_100
        else "approche de son objectif"
    )
    return (
        f"{employee.full_name} {headline} \"{target.label}\" "
        f"({percentage.quantize(Decimal('1'))} %) : "
        f"{_fmt(target.current_value)} / {_fmt(target.target_value)}."
    )


def check_and_create_alerts(employee, targets):
    """Create the missing threshold alerts for *targets*.

    Parameters
    ----------
    employee : hr.models.Employee
        Owner of the targets, used for the alert message.
    targets : iterable of targets.models.EmployeeTarget
        Targets whose ``current_value`` was just recomputed.

    Returns
    -------
    list[TargetAlert]
        Alerts created by this call (empty when every crossed threshold
        was already alerted).
    """
    targets = [t for t in targets if t.target_value > 0]
    if not targets:
        return []

    existing = set(
        TargetAlert.objects
        .filter(target__in=targets)
        .values_list("target_id", "alert_type")
    )

    created = []
    for target in targets:
        percentage = target_percentage(target)
        for alert_type, threshold in THRESHOLDS:
            if percentage < threshold or (target.pk, alert_type) in existing:
                continue
            alert, was_created = TargetAlert.objects.get_or_create(
                target=target,
                alert_type=alert_type,
                defaults={
                    "employee": employee,
                    "percentage": percentage,
                    "target_type": target.target_type,
                    "target_value": target.target_value,
                    "achieved_value": target.current_value,
                    "message": _build_message(employee, target, alert_type, percentage),
                    "month": target.month,
                    "year": target.year,
                },
            )
            existing.add((target.pk, alert_type))
            if was_created:
                created.append(alert)
                logger.info(
                    "Target alert %s created for employee %s (target=%s, %s %%)",
                    alert_type, employee.pk, target.pk, percentage,
                )

    if created:
        _queue_owner_notification([alert.pk for alert in created])
    return created


def _queue_owner_notification(alert_ids):
    def _dispatch():
        try:
            from alerts.tasks import notify_pending_target_alerts

            notify_pending_target_alerts.delay(alert_ids=alert_ids)
        except Exception as exc:
            logger.warning("target alert notification dispatch failed: %s", exc, exc_info=True)

    transaction.on_commit(_dispatch)


def mark_all_as_read(queryset, user) -> int:
    """Flag every unread alert of *queryset* as read by *user*."""
    return queryset.filter(is_read=False).update(
        is_read=True,
        read_by=user,
        read_at=timezone.now(),
        updated_at=timezone.now(),
    )
