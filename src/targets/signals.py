"""Signals: keep target progress consistent when a target itself is edited."""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)

_RECALC_FIELDS = ("base_value", "target_value", "target_type", "period", "month", "year")
_DECIMAL_FIELDS = ("base_value", "target_value")


def _touches_inputs(update_fields) -> bool:
    return update_fields is None or bool(set(update_fields) & set(_RECALC_FIELDS))


def _inputs(values: dict) -> dict:
    normalized = dict(values)
    for field in _DECIMAL_FIELDS:
        if normalized.get(field) is not None:
            normalized[field] = Decimal(str(normalized[field]))
    return normalized


@receiver(pre_save, sender="targets.EmployeeTarget")
def on_target_pre_save(sender, instance, update_fields=None, **kwargs):
    """Capture the computation inputs to detect changes in post_save."""
    instance._previous_inputs = None
    if not getattr(instance, "pk", None) or not _touches_inputs(update_fields):
        return
    previous = sender.objects.filter(pk=instance.pk).values(*_RECALC_FIELDS).first()
    if previous is not None:
        instance._previous_inputs = _inputs(previous)


@receiver(post_save, sender="targets.EmployeeTarget")
def on_target_saved(sender, instance, created, update_fields=None, raw=False, **kwargs):
    """Recompute on creation or when base/target value, type or period changed.

    The engine's own saves are restricted to ``current_value``/``status``
    and never re-enter here.
    """
    if raw or not _touches_inputs(update_fields):
        return
    if not created:
        previous = getattr(instance, "_previous_inputs", None)
        current = _inputs({field: getattr(instance, field) for field in _RECALC_FIELDS})
        if previous == current:
            return

    from targets.engine import recalculate_targets

    logger.debug("Target %s inputs changed, recalculating employee=%s", instance.pk, instance.employee_id)
    recalculate_targets(instance.employee_id)
    instance.refresh_from_db(fields=["current_value", "status"])
