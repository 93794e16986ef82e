"""Target calculation engine.

Core design principles:
- Full-window recomputation: every target is rebuilt from the approved
  daily stats of its window, never patched with deltas, so running it
  twice yields the same values
- Closed mapping from target type to the daily-stat column it sums;
  types without a column only carry their ``base_value``
- Target rows of the employee are locked for the duration of a run so
  concurrent approvals serialize their recomputation
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from core.periods import month_bounds, quarter_bounds, year_bounds
from targets.models import EmployeeTarget

logger = logging.getLogger(__name__)

TargetType = EmployeeTarget.TargetType
Period = EmployeeTarget.Period

# Every TargetType member must appear here.  Revenue targets sum the
# revenue computed from course fees, not the raw services amount, and
# ``daily_calls`` is a legacy alias of the targeted-customers counter.
STAT_FIELD_BY_TARGET_TYPE: dict[str, str | None] = {
    TargetType.DAILY_CALLS: "targeted_customers",
    TargetType.CONFIRMED_CUSTOMERS: "confirmed_customers",
    TargetType.REGISTERED_CUSTOMERS: "registered_customers",
    TargetType.TARGETED_CUSTOMERS: "targeted_customers",
    TargetType.SERVICES_SOLD: "services_sold",
    TargetType.SALES_AMOUNT: "calculated_revenue",
    TargetType.RETARGETING: None,
    TargetType.CAMPAIGNS: None,
    TargetType.LEADS_GENERATED: None,
    TargetType.CONVERSION_RATE: None,
    TargetType.FEATURES_COMPLETED: None,
    TargetType.BUGS_FIXED: None,
    TargetType.CUSTOMER_SATISFACTION: None,
    TargetType.ATTENDANCE_HOURS: None,
    TargetType.OTHER: None,
}

AGGREGATED_FIELDS = sorted({f for f in STAT_FIELD_BY_TARGET_TYPE.values() if f})


def target_window(target: EmployeeTarget) -> tuple[date, date]:
    """Inclusive date window a target aggregates over."""
    if target.period == Period.YEARLY or not target.month:
        return year_bounds(target.year)
    if target.period == Period.QUARTERLY:
        return quarter_bounds(target.year, target.month)
    return month_bounds(target.year, target.month)


def derive_status(current_value: Decimal, target_value: Decimal, current_status: str | None = None) -> str:
    """Achieved once the target value is reached.

    A target closed as ``not_achieved`` stays closed until it is reached.
    """
    if target_value > 0 and current_value >= target_value:
        return EmployeeTarget.Status.ACHIEVED
    if current_status == EmployeeTarget.Status.NOT_ACHIEVED:
        return EmployeeTarget.Status.NOT_ACHIEVED
    return EmployeeTarget.Status.IN_PROGRESS



class TargetCalculationEngine:
    """Recompute every target of one employee from approved daily stats."""

    def __init__(self, employee_id: int) -> None:
        self.employee_id = employee_id

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def recalculate(self) -> list[EmployeeTarget]:
        """
        Rebuild ``current_value`` and ``status`` of all the employee's targets,
        then raise threshold alerts and grant rewards for achieved targets.

        Returns the refreshed targets (possibly empty).
        """
        # Late imports to avoid circular deps
        from alerts.services import check_and_create_alerts
        from hr.models import Employee
        from targets.services import grant_rewards

        with transaction.atomic():
            targets = list(
                EmployeeTarget.objects
                .select_for_update()
                .filter(employee_id=self.employee_id)
                .order_by("pk")
            )
            if not targets:
                return []

            totals_by_window: dict[tuple[date, date], dict[str, Decimal]] = {}
            changed = 0
            for target in targets:
                window = target_window(target)
                if window not in totals_by_window:
                    totals_by_window[window] = self._approved_totals(*window)
                field = STAT_FIELD_BY_TARGET_TYPE.get(target.target_type)
                contribution = totals_by_window[window][field] if field else Decimal("0")

                current_value = (target.base_value + contribution).quantize(Decimal("0.01"))
                status = derive_status(current_value, target.target_value, target.status)
                if target.current_value != current_value or target.status != status:
                    target.current_value = current_value
                    target.status = status
                    target.save(update_fields=["current_value", "status", "updated_at"])
                    changed += 1

            employee = Employee.objects.get(pk=self.employee_id)
            check_and_create_alerts(employee, targets)
            grant_rewards(targets)

        logger.debug(
            "Recalculated %d targets for employee=%s (%d changed)",
            len(targets), self.employee_id, changed,
        )
        return targets

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _approved_totals(self, start: date, end: date) -> dict[str, Decimal]:
        from dailystats.models import DailyStat

        sums = DailyStat.objects.filter(
            employee_id=self.employee_id,
            status=DailyStat.Status.APPROVED,
            date__gte=start,
            date__lte=end,
        ).aggregate(**{field: Sum(field) for field in AGGREGATED_FIELDS})
        return {field: Decimal(sums[field] or 0) for field in AGGREGATED_FIELDS}


def recalculate_targets(employee_id: int) -> list[EmployeeTarget]:
    """Shortcut used by services, signals and tasks."""
    return TargetCalculationEngine(employee_id).recalculate()
