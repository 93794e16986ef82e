"""Tests for the target calculation engine, its signals and tasks."""
from datetime import date
from decimal import Decimal

import pytest

from alerts.models import TargetAlert
from dailystats.models import DailyStat
from hr.models import Employee
from targets.engine import (
    STAT_FIELD_BY_TARGET_TYPE,
    TargetCalculationEngine,
    recalculate_targets,
    target_window,
)
from targets.models import EmployeeTarget
from targets.tasks import recompute_academy_targets, recompute_employee_targets

TargetType = EmployeeTarget.TargetType
Period = EmployeeTarget.Period
Status = DailyStat.Status


def _target(employee, target_type=TargetType.CONFIRMED_CUSTOMERS, **kwargs):
    kwargs.setdefault("target_value", Decimal("100"))
    kwargs.setdefault("month", 3)
    kwargs.setdefault("year", 2026)
    return EmployeeTarget.objects.create(employee=employee, target_type=target_type, **kwargs)


class TestMapping:
    def test_every_target_type_is_mapped(self):
        assert set(STAT_FIELD_BY_TARGET_TYPE) == set(TargetType.values)

    def test_mapped_columns_exist_on_daily_stat(self):
        columns = {f.name for f in DailyStat._meta.get_fields()}
        for field in STAT_FIELD_BY_TARGET_TYPE.values():
            assert field is None or field in columns

    def test_revenue_targets_use_calculated_revenue(self):
        assert STAT_FIELD_BY_TARGET_TYPE[TargetType.SALES_AMOUNT] == "calculated_revenue"
        assert STAT_FIELD_BY_TARGET_TYPE[TargetType.DAILY_CALLS] == "targeted_customers"


class TestTargetWindow:
    def _unsaved(self, **kwargs):
        return EmployeeTarget(target_type=TargetType.OTHER, target_value=Decimal("1"), **kwargs)

    def test_monthly(self):
        target = self._unsaved(period=Period.MONTHLY, month=2, year=2028)
        assert target_window(target) == (date(2028, 2, 1), date(2028, 2, 29))

    def test_quarterly_uses_quarter_of_month(self):
        target = self._unsaved(period=Period.QUARTERLY, month=5, year=2026)
        assert target_window(target) == (date(2026, 4, 1), date(2026, 6, 30))

    def test_yearly_ignores_month(self):
        target = self._unsaved(period=Period.YEARLY, month=5, year=2026)
        assert target_window(target) == (date(2026, 1, 1), date(2026, 12, 31))

    def test_missing_month_spans_the_year(self):
        target = self._unsaved(period=Period.MONTHLY, month=None, year=2026)
        assert target_window(target) == (date(2026, 1, 1), date(2026, 12, 31))


@pytest.mark.django_db
class TestRecalculation:
    def test_only_approved_stats_count(self, employee, make_stat):
        target = _target(employee, base_value=Decimal("2"))
        make_stat(Status.APPROVED, confirmed_customers=5)
        make_stat(Status.PENDING, day=date(2026, 3, 11), confirmed_customers=40)
        make_stat(Status.REJECTED, day=date(2026, 3, 12), confirmed_customers=40)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.current_value == Decimal("7")
        assert target.status == EmployeeTarget.Status.IN_PROGRESS

    def test_stats_outside_window_are_ignored(self, employee, make_stat):
        target = _target(employee)
        make_stat(Status.APPROVED, day=date(2026, 2, 28), confirmed_customers=9)
        make_stat(Status.APPROVED, day=date(2026, 3, 31), confirmed_customers=1)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.current_value == Decimal("1")

    def test_other_employees_stats_are_ignored(self, employee, other_employee, make_stat):
        target = _target(employee)
        make_stat(Status.APPROVED, confirmed_customers=9, for_employee=other_employee)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.current_value == Decimal("0")

    def test_sales_target_sums_course_revenue(self, employee, make_stat, course):
        target = _target(employee, TargetType.SALES_AMOUNT, target_value=Decimal("10000"))
        make_stat(
            Status.APPROVED, course=course, course_fee=Decimal("1250.50"),
            confirmed_customers=2, sales_amount=Decimal("999"),
        )

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.current_value == Decimal("2501.00")

    def test_unmapped_type_keeps_base_value(self, employee, make_stat):
        target = _target(employee, TargetType.CAMPAIGNS, base_value=Decimal("4"))
        make_stat(Status.APPROVED, confirmed_customers=9, targeted_customers=9, services_sold=9)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.current_value == Decimal("4")

    def test_yearly_and_quarterly_windows(self, employee, make_stat):
        yearly = _target(employee, TargetType.SERVICES_SOLD, period=Period.YEARLY)
        quarterly = _target(employee, TargetType.SERVICES_SOLD, period=Period.QUARTERLY, month=2)
        make_stat(Status.APPROVED, day=date(2026, 1, 15), services_sold=1)
        make_stat(Status.APPROVED, day=date(2026, 3, 15), services_sold=2)
        make_stat(Status.APPROVED, day=date(2026, 11, 15), services_sold=4)

        recalculate_targets(employee.pk)

        yearly.refresh_from_db()
        quarterly.refresh_from_db()
        assert yearly.current_value == Decimal("7")
        assert quarterly.current_value == Decimal("3")

    def test_recalculation_is_idempotent(self, employee, make_stat):
        target = _target(employee, target_value=Decimal("5"))
        make_stat(Status.APPROVED, confirmed_customers=6)

        first = TargetCalculationEngine(employee.pk).recalculate()
        second = TargetCalculationEngine(employee.pk).recalculate()

        assert [t.current_value for t in first] == [t.current_value for t in second]
        target.refresh_from_db()
        assert target.current_value == Decimal("6")
        assert target.status == EmployeeTarget.Status.ACHIEVED
        assert TargetAlert.objects.filter(target=target).count() == 2

    def test_status_follows_progress_both_ways(self, employee, make_stat):
        target = _target(employee, target_value=Decimal("5"))
        stat = make_stat(Status.APPROVED, confirmed_customers=5)
        recalculate_targets(employee.pk)
        target.refresh_from_db()
        assert target.status == EmployeeTarget.Status.ACHIEVED

        DailyStat.objects.filter(pk=stat.pk).update(status=Status.PENDING)
        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.status == EmployeeTarget.Status.IN_PROGRESS
        assert target.current_value == Decimal("0")

    def test_zero_target_never_achieved(self, employee, make_stat):
        target = _target(employee, target_value=Decimal("0"))
        make_stat(Status.APPROVED, confirmed_customers=3)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.status == EmployeeTarget.Status.IN_PROGRESS
        assert target.progress_percentage == Decimal("0")

    def test_employee_without_targets(self, employee):
        assert recalculate_targets(employee.pk) == []

    def test_closed_target_stays_not_achieved(self, employee, make_stat):
        target = _target(employee)
        EmployeeTarget.objects.filter(pk=target.pk).update(status=EmployeeTarget.Status.NOT_ACHIEVED)
        make_stat(Status.APPROVED, confirmed_customers=40)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.current_value == Decimal("40")
        assert target.status == EmployeeTarget.Status.NOT_ACHIEVED

    def test_closed_target_becomes_achieved_when_reached(self, employee, make_stat):
        target = _target(employee)
        EmployeeTarget.objects.filter(pk=target.pk).update(status=EmployeeTarget.Status.NOT_ACHIEVED)
        make_stat(Status.APPROVED, confirmed_customers=100)

        recalculate_targets(employee.pk)

        target.refresh_from_db()
        assert target.status == EmployeeTarget.Status.ACHIEVED


@pytest.mark.django_db
class TestTargetSignals:
    def test_creation_computes_current_value(self, employee, make_stat):
        make_stat(Status.APPROVED, confirmed_customers=3)

        target = _target(employee, base_value=Decimal("1"))

        assert target.current_value == Decimal("4")

    def test_base_value_change_triggers_recompute(self, employee, make_stat):
        target = _target(employee)
        make_stat(Status.APPROVED, confirmed_customers=3)

        target.base_value = Decimal("10")
        target.save()

        target.refresh_from_db()
        assert target.current_value == Decimal("13")

    def test_irrelevant_edits_do_not_recompute(self, employee, make_stat):
        target = _target(employee)
        make_stat(Status.APPROVED, confirmed_customers=3)

        target.description = "Objectif du mois"
        target.save(update_fields=["description", "updated_at"])
        target.refresh_from_db()
        assert target.current_value == Decimal("0")

        target.custom_name = "Clients"
        target.save()
        target.refresh_from_db()
        assert target.current_value == Decimal("0")

    def test_target_value_change_updates_status(self, employee, make_stat):
        make_stat(Status.APPROVED, confirmed_customers=3)
        target = _target(employee, target_value=Decimal("10"))
        assert target.status == EmployeeTarget.Status.IN_PROGRESS

        target.target_value = Decimal("3")
        target.save()

        assert target.status == EmployeeTarget.Status.ACHIEVED


@pytest.mark.django_db
class TestTargetTasks:
    def test_recompute_employee_targets(self, employee, make_stat):
        target = _target(employee)
        make_stat(Status.APPROVED, confirmed_customers=2)

        assert recompute_employee_targets(employee_id=employee.pk) == 1

        target.refresh_from_db()
        assert target.current_value == Decimal("2")

    def test_recompute_academy_targets_skips_inactive_employees(self, employee, other_employee, make_stat):
        active = _target(employee)
        inactive = _target(other_employee)
        other_employee.status = Employee.Status.INACTIVE
        other_employee.save(update_fields=["status"])
        make_stat(Status.APPROVED, confirmed_customers=2)
        make_stat(Status.APPROVED, confirmed_customers=2, for_employee=other_employee)

        result = recompute_academy_targets(academy_id=employee.academy_id)

        assert result == "1 employees recomputed"
        active.refresh_from_db()
        inactive.refresh_from_db()
        assert active.current_value == Decimal("2")
        assert inactive.current_value == Decimal("0")
