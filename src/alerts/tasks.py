"""Celery tasks for the alerts app."""
import logging
from collections import defaultdict

from celery import shared_task
from django.conf import settings

logger = logging.getLogger("formapro")


def _recipients_for(academy):
    from academies.models import AcademyMember

    emails = set(getattr(settings, "TARGET_ALERT_NOTIFY_EMAILS", []) or [])
    emails.update(
        AcademyMember.objects.filter(
            academy=academy,
            user__is_active=True,
            user__role__in=["ADMIN", "MANAGER"],
        ).values_list("user__email", flat=True)
    )
    if academy.email:
        emails.add(academy.email)
    return sorted(e for e in emails if e)


@shared_task(name="alerts.tasks.notify_pending_target_alerts")
def notify_pending_target_alerts(alert_ids=None):
    """E-mail academy owners about target alerts not yet notified.

    Alerts are grouped per academy, one message per academy.  An alert is
    flagged ``notified_owner`` once its e-mail went out, so the periodic
    run never notifies twice.
    """
    from alerts.models import TargetAlert
    from core.email import send_branded_email

    alerts = (
        TargetAlert.objects
        .filter(notified_owner=False)
        .select_related("employee__academy", "target")
        .order_by("created_at")
    )
    if alert_ids:
        alerts = alerts.filter(pk__in=alert_ids)

    by_academy = defaultdict(list)
    for alert in alerts:
        by_academy[alert.employee.academy].append(alert)

    notified = 0
    for academy, academy_alerts in by_academy.items():
        recipients = _recipients_for(academy)
        if not recipients:
            logger.warning("No recipient for target alerts of academy %s", academy.pk)
            continue
        try:
            send_branded_email(
                subject=f"[{academy.name}] {len(academy_alerts)} nouvelle(s) alerte(s) objectifs",
                template_name="emails/target_alert",
                context={"academy": academy, "alerts": academy_alerts},
                recipient_list=recipients,
            )
        except Exception as exc:
            logger.error("Target alert e-mail failed for academy %s: %s", academy.pk, exc, exc_info=True)
            continue
        TargetAlert.objects.filter(pk__in=[a.pk for a in academy_alerts]).update(notified_owner=True)
        notified += len(academy_alerts)

    logger.info("notify_pending_target_alerts completed: %d alerts notified.", notified)
    return f"{notified} alerts notified"
