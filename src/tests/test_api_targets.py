"""Tests for the targets, rewards and target alerts API."""
from decimal import Decimal

import pytest

from alerts.models import TargetAlert
from dailystats.models import DailyStat
from dailystats.services import approve_daily_stat
from targets.models import EmployeeReward, EmployeeTarget

TARGETS = "/api/v1/employee-targets/"
REWARDS = "/api/v1/employee-rewards/"
ALERTS = "/api/v1/target-alerts/"


def _payload(employee, **overrides):
    data = {
        "employee": employee.pk,
        "target_type": "confirmed_customers",
        "target_value": "10",
        "period": "monthly",
        "month": 3,
        "year": 2026,
    }
    data.update(overrides)
    return data


class TestEmployeeTargetAPI:
    def test_manager_creates_target_with_computed_progress(self, manager_client, employee, make_stat):
        make_stat(DailyStat.Status.APPROVED, confirmed_customers=3)

        resp = manager_client.post(TARGETS, _payload(employee, base_value="1"), format="json")

        assert resp.status_code == 201, resp.data
        assert resp.data["current_value"] == "4.00"
        assert resp.data["status"] == EmployeeTarget.Status.IN_PROGRESS
        assert resp.data["progress_percentage"] == "40.00"

    def test_current_value_is_read_only(self, manager_client, employee):
        resp = manager_client.post(TARGETS, _payload(employee, current_value="99"), format="json")

        assert resp.status_code == 201
        assert resp.data["current_value"] == "0.00"

    def test_other_type_requires_custom_name(self, manager_client, employee):
        resp = manager_client.post(TARGETS, _payload(employee, target_type="other"), format="json")
        assert resp.status_code == 400
        assert "custom_name" in resp.data

    def test_invalid_month(self, manager_client, employee):
        resp = manager_client.post(TARGETS, _payload(employee, month=13), format="json")
        assert resp.status_code == 400

    def test_employee_of_other_academy_rejected(self, manager_client, other_academy):
        from hr.models import Employee

        outsider = Employee.objects.create(academy=other_academy, employee_code="X-9", first_name="Out")
        resp = manager_client.post(TARGETS, _payload(outsider), format="json")
        assert resp.status_code == 400
        assert "employee" in resp.data

    def test_supervisor_cannot_create(self, supervisor_client, employee):
        resp = supervisor_client.post(TARGETS, _payload(employee), format="json")
        assert resp.status_code == 403

    def test_patch_base_value_recomputes(self, manager_client, employee, make_stat):
        target = EmployeeTarget.objects.create(
            employee=employee, target_type="confirmed_customers",
            target_value=Decimal("10"), month=3, year=2026,
        )
        make_stat(DailyStat.Status.APPROVED, confirmed_customers=2)

        resp = manager_client.patch(f"{TARGETS}{target.pk}/", {"base_value": "8"}, format="json")

        assert resp.status_code == 200, resp.data
        assert resp.data["current_value"] == "10.00"
        assert resp.data["status"] == EmployeeTarget.Status.ACHIEVED

    def test_recalculate_action(self, supervisor_client, employee, make_stat):
        target = EmployeeTarget.objects.create(
            employee=employee, target_type="services_sold",
            target_value=Decimal("10"), month=3, year=2026,
        )
        make_stat(DailyStat.Status.APPROVED, services_sold=6)

        resp = supervisor_client.post(f"{TARGETS}{target.pk}/recalculate/")

        assert resp.status_code == 200
        assert resp.data["current_value"] == "6.00"

    def test_manager_closes_target_as_not_achieved(self, manager_client, employee, make_stat):
        target = EmployeeTarget.objects.create(
            employee=employee, target_type="confirmed_customers",
            target_value=Decimal("10"), month=3, year=2026,
        )
        make_stat(DailyStat.Status.APPROVED, confirmed_customers=4)

        resp = manager_client.patch(f"{TARGETS}{target.pk}/", {"status": "not_achieved"}, format="json")
        assert resp.status_code == 200, resp.data

        resp = manager_client.post(f"{TARGETS}{target.pk}/recalculate/")
        assert resp.data["status"] == EmployeeTarget.Status.NOT_ACHIEVED
        assert resp.data["current_value"] == "4.00"

    def test_achieved_status_cannot_be_set_or_changed(self, manager_client, employee, make_stat):
        resp = manager_client.post(TARGETS, _payload(employee, status="achieved"), format="json")
        assert resp.status_code == 400
        assert "status" in resp.data

        make_stat(DailyStat.Status.APPROVED, confirmed_customers=12)
        target = EmployeeTarget.objects.create(
            employee=employee, target_type="confirmed_customers",
            target_value=Decimal("10"), month=3, year=2026,
        )
        assert target.status == EmployeeTarget.Status.ACHIEVED

        resp = manager_client.patch(f"{TARGETS}{target.pk}/", {"status": "not_achieved"}, format="json")
        assert resp.status_code == 400
        assert "status" in resp.data

    def test_employee_sees_only_own_targets(self, employee_client, employee, other_employee):
        own = EmployeeTarget.objects.create(
            employee=employee, target_type="campaigns", target_value=Decimal("1"), year=2026,
        )
        EmployeeTarget.objects.create(
            employee=other_employee, target_type="campaigns", target_value=Decimal("1"), year=2026,
        )

        resp = employee_client.get(TARGETS)

        assert [row["id"] for row in resp.data["results"]] == [own.pk]


class TestEmployeeRewardAPI:
    @pytest.fixture
    def reward(self, employee, make_stat):
        make_stat(DailyStat.Status.APPROVED, services_sold=2)
        EmployeeTarget.objects.create(
            employee=employee, target_type="services_sold",
            target_value=Decimal("2"), reward_amount=Decimal("300"), month=3, year=2026,
        )
        return EmployeeReward.objects.get()

    def test_reward_lifecycle(self, manager_client, reward):
        resp = manager_client.post(f"{REWARDS}{reward.pk}/approve/", {"notes": "OK"}, format="json")
        assert resp.status_code == 200, resp.data
        assert resp.data["status"] == EmployeeReward.Status.APPROVED

        resp = manager_client.post(f"{REWARDS}{reward.pk}/mark-paid/")
        assert resp.status_code == 200
        assert resp.data["status"] == EmployeeReward.Status.PAID

    def test_pay_pending_is_400(self, manager_client, reward):
        resp = manager_client.post(f"{REWARDS}{reward.pk}/mark-paid/")
        assert resp.status_code == 400

    def test_reject_without_notes_is_400(self, admin_client, reward):
        resp = admin_client.post(f"{REWARDS}{reward.pk}/reject/", {}, format="json")
        assert resp.status_code == 400

    def test_employee_cannot_approve(self, employee_client, reward):
        resp = employee_client.post(f"{REWARDS}{reward.pk}/approve/")
        assert resp.status_code == 403

    def test_supervisor_settles_reward(self, supervisor_client, reward):
        resp = supervisor_client.post(f"{REWARDS}{reward.pk}/approve/", {"notes": "OK"}, format="json")
        assert resp.status_code == 200, resp.data
        resp = supervisor_client.post(f"{REWARDS}{reward.pk}/mark-paid/")
        assert resp.status_code == 200
        assert resp.data["status"] == EmployeeReward.Status.PAID

    def test_reward_status_on_target(self, manager_client, reward):
        resp = manager_client.get(f"{TARGETS}{reward.target_id}/")
        assert resp.data["reward_status"] == EmployeeReward.Status.PENDING


class TestTargetAlertAPI:
    @pytest.fixture
    def alerts(self, employee, make_stat, manager_user):
        EmployeeTarget.objects.create(
            employee=employee, target_type="confirmed_customers",
            target_value=Decimal("10"), month=3, year=2026,
        )
        stat = make_stat(DailyStat.Status.PENDING, confirmed_customers=10)
        approve_daily_stat(stat.pk, reviewer=manager_user)
        return list(TargetAlert.objects.order_by("alert_type"))

    def test_employee_lists_own_alerts(self, employee_client, alerts):
        resp = employee_client.get(ALERTS)
        assert resp.status_code == 200
        assert resp.data["count"] == 2

    def test_unread_count_and_mark_read(self, manager_client, alerts):
        resp = manager_client.get(f"{ALERTS}unread-count/")
        assert resp.data == {"count": 2}

        resp = manager_client.post(f"{ALERTS}{alerts[0].pk}/mark-read/")
        assert resp.status_code == 200
        assert resp.data["is_read"] is True

        resp = manager_client.post(f"{ALERTS}mark-all-read/", {}, format="json")
        assert resp.data["updated"] == 1

    def test_alerts_cannot_be_created(self, manager_client, alerts):
        resp = manager_client.post(ALERTS, {}, format="json")
        assert resp.status_code == 405

    def test_only_admin_deletes(self, manager_client, alerts):
        resp = manager_client.delete(f"{ALERTS}{alerts[0].pk}/")
        assert resp.status_code == 403
