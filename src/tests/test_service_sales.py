"""Tests for service sales booked from approved daily stats."""
from datetime import date
from decimal import Decimal

import pytest

from dailystats.exceptions import InvalidInputError
from dailystats.models import DailyStat
from dailystats.services import (
    approve_daily_stat,
    bulk_approve_daily_stats,
    create_daily_stat,
    delete_daily_stat,
    monthly_totals,
    reject_daily_stat,
    unapprove_daily_stat,
    update_daily_stat,
)
from servicesales.models import ServiceSale

Status = DailyStat.Status

SOLD = [
    {"template_id": 3, "name": "Coaching CV", "price": "150", "quantity": 2},
    {"name": "Audit LinkedIn", "price": "80.50", "quantity": 1},
    {"name": "Simulation entretien", "price": "200", "quantity": 0},
]


@pytest.fixture
def submitted(employee, employee_user):
    return create_daily_stat(
        employee=employee,
        actor=employee_user,
        date=date(2026, 3, 9),
        services_sold=3,
        targeted_by_services=5,
        sold_services=SOLD,
    )


@pytest.mark.django_db
class TestSoldServicesInput:
    def test_lines_are_normalized(self, submitted):
        assert submitted.sold_services[0] == {
            "name": "Coaching CV", "price": "150", "quantity": 2, "template_id": 3,
        }
        assert submitted.sold_services[1]["price"] == "80.50"

    def test_pending_stat_books_nothing(self, submitted):
        assert not ServiceSale.objects.exists()

    @pytest.mark.parametrize("lines", [
        [{"name": "", "price": "10", "quantity": 1}],
        [{"name": "X", "price": "-1", "quantity": 1}],
        [{"name": "X", "price": "abc", "quantity": 1}],
        "Coaching",
    ])
    def test_invalid_lines_are_rejected(self, employee, employee_user, lines):
        with pytest.raises(InvalidInputError):
            create_daily_stat(employee=employee, actor=employee_user, date=date(2026, 3, 9), sold_services=lines)
        assert not DailyStat.objects.exists()


@pytest.mark.django_db
class TestBookingOnApproval:
    def test_approval_books_each_line_with_quantity(self, submitted, manager_user, academy, employee):
        approve_daily_stat(submitted.pk, reviewer=manager_user)

        sales = {sale.name: sale for sale in ServiceSale.objects.all()}
        assert set(sales) == {"Coaching CV", "Audit LinkedIn"}
        coaching = sales["Coaching CV"]
        assert coaching.total_amount == Decimal("300.00")
        assert coaching.sale_date == date(2026, 3, 9)
        assert coaching.academy == academy
        assert coaching.employee == employee
        assert coaching.daily_stat_id == submitted.pk
        assert sales["Audit LinkedIn"].total_amount == Decimal("80.50")

    def test_bulk_approval_books_too(self, submitted, manager_user):
        bulk_approve_daily_stats([submitted.pk], reviewer=manager_user)
        assert ServiceSale.objects.filter(daily_stat=submitted).count() == 2

    def test_rejection_books_nothing(self, submitted, manager_user):
        reject_daily_stat(submitted.pk, reviewer=manager_user, notes="Justificatif manquant")
        assert not ServiceSale.objects.exists()

    def test_unapprove_removes_only_its_lines(self, submitted, manager_user, academy):
        approve_daily_stat(submitted.pk, reviewer=manager_user)
        direct = ServiceSale.objects.create(
            academy=academy, name="Vente directe", price=Decimal("10"),
            quantity=1, total_amount=Decimal("10"), sale_date=date(2026, 3, 1),
        )

        unapprove_daily_stat(submitted.pk, reviewer=manager_user)

        assert list(ServiceSale.objects.all()) == [direct]

    def test_reviewer_edit_rebooks_lines(self, submitted, manager_user):
        approve_daily_stat(submitted.pk, reviewer=manager_user)

        update_daily_stat(
            submitted.pk, actor=manager_user,
            sold_services=[{"name": "Coaching CV", "price": "150", "quantity": 4}],
        )

        sale = ServiceSale.objects.get()
        assert sale.quantity == 4
        assert sale.total_amount == Decimal("600.00")

    def test_delete_removes_lines(self, submitted, manager_user):
        approve_daily_stat(submitted.pk, reviewer=manager_user)
        delete_daily_stat(submitted.pk, actor=manager_user)
        assert not ServiceSale.objects.exists()


@pytest.mark.django_db
class TestTargetedByServicesTotals:
    def test_monthly_totals_count_approved_only(self, submitted, manager_user, make_stat, employee):
        make_stat(Status.PENDING, day=date(2026, 3, 10), targeted_by_services=7)
        approve_daily_stat(submitted.pk, reviewer=manager_user)

        totals = monthly_totals(employee_id=employee.pk, month=3, year=2026)

        assert totals["targeted_by_services"] == 5


@pytest.mark.django_db
class TestServiceSaleAPI:
    def test_reviewer_lists_booked_sales(self, manager_client, submitted, manager_user):
        approve_daily_stat(submitted.pk, reviewer=manager_user)

        resp = manager_client.get("/api/v1/service-sales/", {"daily_stat": submitted.pk})

        assert resp.status_code == 200
        assert resp.data["count"] == 2
        assert {row["name"] for row in resp.data["results"]} == {"Coaching CV", "Audit LinkedIn"}

    def test_employee_is_forbidden(self, employee_client):
        assert employee_client.get("/api/v1/service-sales/").status_code == 403

    def test_submission_accepts_sold_services(self, employee_client):
        resp = employee_client.post(
            "/api/v1/daily-stats/",
            {
                "date": "2026-03-10",
                "targeted_by_services": 2,
                "sold_services": [{"name": "Coaching CV", "price": "150.00", "quantity": 1}],
            },
            format="json",
        )

        assert resp.status_code == 201, resp.data
        assert resp.data["targeted_by_services"] == 2
        assert resp.data["sold_services"] == [{"name": "Coaching CV", "price": "150.00", "quantity": 1}]
