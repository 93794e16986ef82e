"""Tests for target threshold alerts and owner notifications."""
from datetime import date
from decimal import Decimal

import pytest
from django.core import mail

from alerts.models import TargetAlert
from alerts.services import check_and_create_alerts, mark_all_as_read, target_percentage
from alerts.tasks import notify_pending_target_alerts
from dailystats.models import DailyStat
from dailystats.services import approve_daily_stat, unapprove_daily_stat
from targets.engine import recalculate_targets
from targets.models import EmployeeTarget

Status = DailyStat.Status


@pytest.fixture
def target(employee):
    return EmployeeTarget.objects.create(
        employee=employee,
        target_type=EmployeeTarget.TargetType.CONFIRMED_CUSTOMERS,
        target_value=Decimal("30"),
        month=3,
        year=2026,
    )


@pytest.mark.django_db
class TestThresholdAlerts:
    def test_progress_below_threshold_raises_nothing(self, target, make_stat, manager_user):
        stat = make_stat(Status.PENDING, confirmed_customers=18)

        approve_daily_stat(stat.pk, reviewer=manager_user)

        target.refresh_from_db()
        assert target.current_value == Decimal("18")
        assert target.progress_percentage == Decimal("60.00")
        assert not TargetAlert.objects.exists()

    def test_jump_past_both_thresholds_raises_both(self, target, make_stat, manager_user):
        first = make_stat(Status.PENDING, confirmed_customers=18)
        second = make_stat(Status.PENDING, day=date(2026, 3, 11), confirmed_customers=15)
        approve_daily_stat(first.pk, reviewer=manager_user)

        approve_daily_stat(second.pk, reviewer=manager_user)

        target.refresh_from_db()
        assert target.status == EmployeeTarget.Status.ACHIEVED
        assert set(TargetAlert.objects.values_list("alert_type", flat=True)) == {
            TargetAlert.Type.REACHED_80,
            TargetAlert.Type.REACHED_100,
        }
        alert = TargetAlert.objects.get(alert_type=TargetAlert.Type.REACHED_100)
        assert alert.percentage == Decimal("100.00")
        assert alert.achieved_value == Decimal("33")
        assert alert.target_type == EmployeeTarget.TargetType.CONFIRMED_CUSTOMERS
        assert (alert.month, alert.year) == (3, 2026)
        assert "Sara Employee" in alert.message

    def test_eighty_percent_only(self, target, make_stat, manager_user):
        stat = make_stat(Status.PENDING, confirmed_customers=24)

        approve_daily_stat(stat.pk, reviewer=manager_user)

        alert = TargetAlert.objects.get()
        assert alert.alert_type == TargetAlert.Type.REACHED_80
        assert alert.percentage == Decimal("80.00")

    def test_alerts_survive_regression_and_are_not_duplicated(self, target, make_stat, manager_user):
        stat = make_stat(Status.PENDING, confirmed_customers=30)
        approve_daily_stat(stat.pk, reviewer=manager_user)
        assert TargetAlert.objects.count() == 2

        unapprove_daily_stat(stat.pk, reviewer=manager_user)
        target.refresh_from_db()
        assert target.status == EmployeeTarget.Status.IN_PROGRESS
        assert TargetAlert.objects.count() == 2

        approve_daily_stat(stat.pk, reviewer=manager_user)
        assert TargetAlert.objects.count() == 2

    def test_check_is_idempotent(self, target, employee, make_stat):
        make_stat(Status.APPROVED, confirmed_customers=27)
        target.base_value = Decimal("0.5")
        target.save()

        assert check_and_create_alerts(employee, [target]) == []
        assert TargetAlert.objects.filter(target=target).count() == 1

    def test_percentage_is_capped(self, target):
        target.current_value = Decimal("90")
        assert target_percentage(target) == Decimal("100.00")
        target.target_value = Decimal("0")
        assert target_percentage(target) == Decimal("0")


@pytest.mark.django_db
class TestReadTracking:
    def test_mark_as_read(self, target, make_stat, manager_user, employee):
        make_stat(Status.APPROVED, confirmed_customers=24)
        recalculate_targets(employee.pk)
        alert = TargetAlert.objects.get()

        alert.mark_as_read(manager_user)

        alert.refresh_from_db()
        assert alert.is_read is True
        assert alert.read_by == manager_user
        assert alert.read_at is not None

    def test_mark_all_as_read(self, target, make_stat, manager_user):
        stat = make_stat(Status.PENDING, confirmed_customers=30)
        approve_daily_stat(stat.pk, reviewer=manager_user)

        assert mark_all_as_read(TargetAlert.objects.all(), manager_user) == 2
        assert mark_all_as_read(TargetAlert.objects.all(), manager_user) == 0


@pytest.mark.django_db
class TestOwnerNotification:
    def test_notification_groups_alerts_per_academy(
        self, target, make_stat, manager_user, admin_user, supervisor_user, settings,
    ):
        settings.TARGET_ALERT_NOTIFY_EMAILS = ["hr@academy.test"]
        stat = make_stat(Status.PENDING, confirmed_customers=30)
        approve_daily_stat(stat.pk, reviewer=manager_user)

        result = notify_pending_target_alerts()

        assert result == "2 alerts notified"
        assert len(mail.outbox) == 1
        msg = mail.outbox[0]
        assert sorted(msg.to) == [
            "admin@test.com",
            "hr@academy.test",
            "manager@test.com",
            "owner@academy.test",
        ]
        assert "Test Academy" in msg.subject
        assert "Sara Employee" in msg.body
        assert len(msg.alternatives) == 1
        assert not TargetAlert.objects.filter(notified_owner=False).exists()

    def test_notification_is_sent_once(self, target, make_stat, manager_user):
        stat = make_stat(Status.PENDING, confirmed_customers=30)
        approve_daily_stat(stat.pk, reviewer=manager_user)

        notify_pending_target_alerts()
        notify_pending_target_alerts()

        assert len(mail.outbox) == 1

    def test_approval_queues_notification_on_commit(
        self, target, make_stat, manager_user, django_capture_on_commit_callbacks,
    ):
        stat = make_stat(Status.PENDING, confirmed_customers=24)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            approve_daily_stat(stat.pk, reviewer=manager_user)

        assert len(callbacks) == 1
        assert len(mail.outbox) == 1
        assert TargetAlert.objects.get().notified_owner is True

    def test_dispatch_passes_created_alert_ids(
        self, target, make_stat, manager_user, monkeypatch, django_capture_on_commit_callbacks,
    ):
        calls = []
        monkeypatch.setattr(notify_pending_target_alerts, "delay", lambda **kwargs: calls.append(kwargs))
        stat = make_stat(Status.PENDING, confirmed_customers=30)

        with django_capture_on_commit_callbacks(execute=True):
            approve_daily_stat(stat.pk, reviewer=manager_user)

        assert calls == [{"alert_ids": sorted(TargetAlert.objects.values_list("pk", flat=True))}]
        assert mail.outbox == []

    def test_broker_failure_does_not_undo_approval(
        self, target, make_stat, manager_user, monkeypatch, django_capture_on_commit_callbacks,
    ):
        def _broker_down(**kwargs):
            raise ConnectionError("broker unreachable")

        monkeypatch.setattr(notify_pending_target_alerts, "delay", _broker_down)
        stat = make_stat(Status.PENDING, confirmed_customers=24)

        with django_capture_on_commit_callbacks(execute=True):
            approve_daily_stat(stat.pk, reviewer=manager_user)

        stat.refresh_from_db()
        assert stat.status == Status.APPROVED
        assert TargetAlert.objects.get().notified_owner is False
