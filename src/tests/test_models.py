"""Tests for core model behavior."""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError

from academies.models import AcademyMember
from academies.services import create_audit_log, get_user_academies
from alerts.models import TargetAlert
from dailystats.models import DailyStat
from hr.models import Employee
from targets.models import EmployeeTarget

User = get_user_model()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class TestUserRoles:
    @pytest.mark.parametrize(
        "role, reviewer, admin",
        [
            ("ADMIN", True, True),
            ("MANAGER", True, False),
            ("SUPERVISOR", True, False),
            ("EMPLOYEE", False, False),
        ],
    )
    def test_role_flags(self, role, reviewer, admin):
        user = User(email="x@test.com", role=role)
        assert user.is_reviewer is reviewer
        assert user.is_admin is admin

    def test_superuser_is_reviewer(self, db):
        user = User.objects.create_superuser(
            email="root@test.com", password="TestPass123!", first_name="Root", last_name="User",
        )
        assert user.role == User.Role.ADMIN
        assert user.is_reviewer
        assert user.is_staff

    def test_email_is_required(self, db):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="x")


# ---------------------------------------------------------------------------
# Academies
# ---------------------------------------------------------------------------


class TestAcademy:
    def test_user_academies(self, academy, other_academy, manager_user):
        assert list(get_user_academies(manager_user)) == [academy]

    def test_membership_is_unique(self, academy, manager_user):
        with pytest.raises(IntegrityError):
            AcademyMember.objects.create(academy=academy, user=manager_user)

    def test_audit_log(self, academy, manager_user):
        log = create_audit_log(
            actor=manager_user,
            academy=academy,
            action="TEST",
            entity_type="DailyStat",
            entity_id="1",
            after={"status": "approved"},
        )
        assert log.after_json == {"status": "approved"}
        assert "DailyStat #1" in str(log)


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


class TestEmployee:
    def test_full_name(self, employee):
        assert employee.full_name == "Sara Employee"
        assert "EMP-001" in str(employee)

    def test_code_unique_per_academy(self, employee, academy, other_academy):
        Employee.objects.create(academy=other_academy, employee_code="EMP-001", first_name="Twin")
        with pytest.raises(IntegrityError):
            Employee.objects.create(academy=academy, employee_code="EMP-001", first_name="Dup")


# ---------------------------------------------------------------------------
# Daily stats
# ---------------------------------------------------------------------------


class TestDailyStatRevenue:
    def _stat(self, **kwargs):
        return DailyStat(date=date(2026, 3, 1), **kwargs)

    def test_no_course_no_revenue(self):
        stat = self._stat(confirmed_customers=5, course_fee=Decimal("100"))
        assert stat.compute_revenue() == Decimal("0.00")

    def test_single_fee(self, course):
        stat = self._stat(course=course, confirmed_customers=3, course_fee=Decimal("99.99"))
        assert stat.compute_revenue() == Decimal("299.97")

    def test_breakdown_ignores_single_fee(self, course):
        stat = self._stat(
            course=course,
            confirmed_customers=100,
            course_fee=Decimal("1"),
            fee_breakdown=[{"fee_amount": 200, "customer_count": 2}, {"fee_amount": "50.5", "customer_count": 0}],
        )
        assert stat.compute_revenue() == Decimal("400.00")

    def test_breakdown_without_course_has_no_revenue(self):
        stat = self._stat(fee_breakdown=[{"fee_amount": "500", "customer_count": 4}])
        assert stat.compute_revenue() == Decimal("0.00")

    def test_status_helpers(self):
        stat = self._stat()
        assert stat.is_pending
        stat.status = DailyStat.Status.REJECTED
        assert stat.is_rejected and not stat.is_approved


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


class TestEmployeeTarget:
    def test_label_prefers_custom_name(self):
        target = EmployeeTarget(target_type=EmployeeTarget.TargetType.OTHER, custom_name="Webinaires")
        assert target.label == "Webinaires"
        target.custom_name = ""
        assert target.label == "Autre"

    def test_period_label(self):
        assert EmployeeTarget(month=3, year=2026).period_label == "03/2026"
        assert EmployeeTarget(month=None, year=2026).period_label == "2026"

    def test_progress_percentage_capped(self):
        target = EmployeeTarget(target_value=Decimal("40"), current_value=Decimal("10"))
        assert target.progress_percentage == Decimal("25.00")
        target.current_value = Decimal("90")
        assert target.progress_percentage == Decimal("100")


class TestTargetAlertConstraint:
    def test_one_alert_per_type_and_target(self, employee):
        target = EmployeeTarget.objects.create(
            employee=employee,
            target_type=EmployeeTarget.TargetType.CAMPAIGNS,
            target_value=Decimal("10"),
            year=2026,
        )
        fields = dict(
            employee=employee,
            target=target,
            alert_type=TargetAlert.Type.REACHED_80,
            percentage=Decimal("80"),
            target_type=target.target_type,
            target_value=target.target_value,
            achieved_value=Decimal("8"),
            message="x",
            year=2026,
        )
        TargetAlert.objects.create(**fields)
        with pytest.raises(IntegrityError):
            TargetAlert.objects.create(**fields)
