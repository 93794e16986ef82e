"""Shared fixtures for all tests."""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from academies.models import Academy, AcademyMember
from courses.models import Course, CourseFee
from dailystats.models import DailyStat
from hr.models import Employee

User = get_user_model()


def _member(academy, **kwargs):
    user = User.objects.create_user(password="TestPass123!", **kwargs)
    AcademyMember.objects.create(academy=academy, user=user, is_default=True)
    return user


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def academy(db):
    return Academy.objects.create(
        name="Test Academy",
        code="TEST-ACA",
        currency="SAR",
        email="owner@academy.test",
    )


@pytest.fixture
def other_academy(db):
    return Academy.objects.create(name="Other Academy", code="OTHER-ACA")


@pytest.fixture
def admin_user(academy):
    return _member(
        academy,
        email="admin@test.com",
        first_name="Admin",
        last_name="User",
        role="ADMIN",
    )


@pytest.fixture
def manager_user(academy):
    return _member(
        academy,
        email="manager@test.com",
        first_name="Manager",
        last_name="User",
        role="MANAGER",
    )


@pytest.fixture
def supervisor_user(academy):
    return _member(
        academy,
        email="supervisor@test.com",
        first_name="Supervisor",
        last_name="User",
        role="SUPERVISOR",
    )


@pytest.fixture
def employee_user(academy):
    return _member(
        academy,
        email="employee@test.com",
        first_name="Sara",
        last_name="Employee",
        role="EMPLOYEE",
    )


@pytest.fixture
def employee(academy, employee_user):
    return Employee.objects.create(
        academy=academy,
        user=employee_user,
        employee_code="EMP-001",
        first_name="Sara",
        last_name="Employee",
    )


@pytest.fixture
def other_employee(academy):
    return Employee.objects.create(
        academy=academy,
        employee_code="EMP-002",
        first_name="Omar",
        last_name="Colleague",
    )


@pytest.fixture
def course(academy):
    return Course.objects.create(academy=academy, code="PMP", name="Project Management")


@pytest.fixture
def course_fee(course):
    return CourseFee.objects.create(course=course, name="Standard", amount=Decimal("1500.00"))


@pytest.fixture
def make_stat(employee):
    """Insert a daily stat directly, bypassing the workflow services."""

    def _make(status=DailyStat.Status.PENDING, day=date(2026, 3, 10), for_employee=None, **fields):
        stat = DailyStat(
            employee=for_employee or employee,
            date=day,
            status=status,
            **fields,
        )
        stat.calculated_revenue = stat.compute_revenue()
        stat.save()
        return stat

    return _make


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def manager_client(api_client, manager_user):
    api_client.force_authenticate(user=manager_user)
    return api_client


@pytest.fixture
def supervisor_client(api_client, supervisor_user):
    api_client.force_authenticate(user=supervisor_user)
    return api_client


@pytest.fixture
def employee_client(api_client, employee_user, employee):
    api_client.force_authenticate(user=employee_user)
    return api_client
