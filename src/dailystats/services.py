"""Business logic for the daily statistics review workflow.

A daily stat is submitted ``pending``; reviewers approve or reject it, and
may unapprove an approved one back to ``pending``.  Every mutation ends
with a full recomputation of the owning employee's targets, since only
approved rows count towards them.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from academies.services import create_audit_log
from core.periods import month_bounds, year_bounds
from courses.services import remove_daily_stat_enrollment, sync_daily_stat_enrollment
from dailystats.exceptions import InvalidInputError, InvalidStateError, NotFoundError
from dailystats.models import DailyStat
from servicesales.services import remove_daily_stat_service_sales, sync_daily_stat_service_sales
from targets.engine import recalculate_targets

logger = logging.getLogger("formapro")

COUNTER_FIELDS = (
    "targeted_customers",
    "confirmed_customers",
    "registered_customers",
    "services_sold",
    "targeted_by_services",
)
EDITABLE_FIELDS = COUNTER_FIELDS + (
    "date",
    "sales_amount",
    "course",
    "course_fee",
    "fee_breakdown",
    "sold_services",
    "notes",
)
REVIEW_FIELDS = ["status", "reviewed_by", "reviewed_at", "review_notes", "updated_at"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _validate_id(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInputError(f"Identifiant invalide : {value!r}.")
    return value


def _get_for_update(stat_id) -> DailyStat:
    stat_id = _validate_id(stat_id)
    try:
        return (
            DailyStat.objects
            .select_for_update()
            .select_related("employee__academy")
            .get(pk=stat_id)
        )
    except DailyStat.DoesNotExist:
        raise NotFoundError(f"Statistique journaliere {stat_id} introuvable.")


def _normalize_fee_breakdown(lines) -> list[dict]:
    if lines in (None, ""):
        return []
    if not isinstance(lines, list):
        raise InvalidInputError("La repartition par tarif doit etre une liste.")
    normalized = []
    for line in lines:
        if not isinstance(line, dict):
            raise InvalidInputError("Chaque ligne de repartition doit etre un objet.")
        try:
            fee_amount = Decimal(str(line.get("fee_amount", 0)))
            customer_count = int(line.get("customer_count", 0))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInputError("Ligne de repartition invalide.")
        if fee_amount < 0 or customer_count < 0:
            raise InvalidInputError("Les montants et effectifs doivent etre positifs.")
        entry = {"fee_amount": str(fee_amount), "customer_count": customer_count}
        if line.get("fee_id") is not None:
            entry["fee_id"] = line["fee_id"]
        normalized.append(entry)
    return normalized


def _normalize_sold_services(lines) -> list[dict]:
    if lines in (None, ""):
        return []
    if not isinstance(lines, list):
        raise InvalidInputError("Le detail des services vendus doit etre une liste.")
    normalized = []
    for line in lines:
        if not isinstance(line, dict) or not str(line.get("name") or "").strip():
            raise InvalidInputError("Chaque service vendu doit avoir un nom.")
        try:
            price = Decimal(str(line.get("price", 0)))
            quantity = int(line.get("quantity", 0))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidInputError("Ligne de service vendu invalide.")
        if price < 0 or quantity < 0:
            raise InvalidInputError("Les prix et quantites doivent etre positifs.")
        entry = {"name": str(line["name"]).strip(), "price": str(price), "quantity": quantity}
        if line.get("template_id") is not None:
            entry["template_id"] = line["template_id"]
        normalized.append(entry)
    return normalized


def _apply_fields(stat: DailyStat, fields: dict) -> None:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidInputError(f"Champs non modifiables : {', '.join(sorted(unknown))}.")
    for name in COUNTER_FIELDS:
        if name in fields and (fields[name] is None or int(fields[name]) < 0):
            raise InvalidInputError(f"Le champ {name} doit etre un entier positif.")
    if "fee_breakdown" in fields:
        fields = {**fields, "fee_breakdown": _normalize_fee_breakdown(fields["fee_breakdown"])}
    if "sold_services" in fields:
        fields = {**fields, "sold_services": _normalize_sold_services(fields["sold_services"])}

    for name, value in fields.items():
        setattr(stat, name, value)

    course = stat.course
    if course is not None and course.academy_id != stat.employee.academy_id:
        raise InvalidInputError("Cette formation n'appartient pas a l'academie de l'employe.")
    stat.calculated_revenue = stat.compute_revenue()


def _audit(stat: DailyStat, actor, action: str, before: dict, after: dict) -> None:
    create_audit_log(
        actor=actor,
        academy=stat.employee.academy,
        action=action,
        entity_type="DailyStat",
        entity_id=str(stat.pk),
        before=before,
        after=after,
    )


def _period_bounds(month: int | None, year: int | None) -> tuple[date, date] | None:
    if month is None and year is None:
        return None
    if month is not None and not 1 <= int(month) <= 12:
        raise InvalidInputError("Le mois doit etre compris entre 1 et 12.")
    year = int(year) if year is not None else timezone.localdate().year
    if month is not None:
        return month_bounds(year, int(month))
    return year_bounds(year)


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

@transaction.atomic
def create_daily_stat(*, employee, actor, **fields) -> DailyStat:
    """Submit a new daily stat in ``pending`` status.

    Parameters
    ----------
    employee : hr.models.Employee
    actor : User
        The submitting user (the employee or a reviewer on their behalf).
    **fields
        Any of ``EDITABLE_FIELDS``; ``date`` is required.

    Returns
    -------
    DailyStat

    Raises
    ------
    InvalidInputError
        If a field is missing, negative or references a foreign course.
    """
    if not fields.get("date"):
        raise InvalidInputError("La date est obligatoire.")

    stat = DailyStat(employee=employee, submitted_by=actor)
    _apply_fields(stat, fields)
    stat.save()

    _audit(stat, actor, "DAILY_STAT_SUBMITTED", before={}, after={"status": stat.status})
    logger.info(
        "Daily stat %s submitted for employee %s (%s, revenue=%s)",
        stat.pk, employee.pk, stat.date, stat.calculated_revenue,
    )
    recalculate_targets(stat.employee_id)
    return stat


@transaction.atomic
def update_daily_stat(stat_id: int, *, actor, **fields) -> DailyStat:
    """Edit the figures of a daily stat.

    Submitters may edit pending and rejected rows; editing a rejected row
    sends it back to ``pending`` with its review cleared.  Approved rows
    can only be corrected by a reviewer, in which case the linked course
    enrollment and service sales follow the new figures.

    Raises
    ------
    NotFoundError
    InvalidStateError
        If a non-reviewer edits an approved row.
    InvalidInputError
    """
    stat = _get_for_update(stat_id)
    if stat.is_approved and not getattr(actor, "is_reviewer", False):
        raise InvalidStateError("Une statistique approuvee ne peut plus etre modifiee.")

    previous_status = stat.status
    previous_revenue = stat.calculated_revenue
    _apply_fields(stat, fields)

    if stat.is_rejected:
        stat.status = DailyStat.Status.PENDING
        stat.reviewed_by = None
        stat.reviewed_at = None
        stat.review_notes = ""
    stat.save()

    if stat.is_approved:
        sync_daily_stat_enrollment(stat)
        sync_daily_stat_service_sales(stat)

    _audit(
        stat, actor, "DAILY_STAT_UPDATED",
        before={"status": previous_status, "calculated_revenue": str(previous_revenue)},
        after={"status": stat.status, "calculated_revenue": str(stat.calculated_revenue)},
    )
    logger.info("Daily stat %s updated by %s (status %s -> %s)", stat.pk, actor, previous_status, stat.status)
    recalculate_targets(stat.employee_id)
    return stat


@transaction.atomic
def delete_daily_stat(stat_id: int, *, actor) -> None:
    """Delete a daily stat (and its linked enrollment), then recompute targets."""
    stat = _get_for_update(stat_id)
    employee_id = stat.employee_id
    _audit(stat, actor, "DAILY_STAT_DELETED", before={"status": stat.status}, after={})
    remove_daily_stat_enrollment(stat)
    remove_daily_stat_service_sales(stat)
    stat.delete()
    logger.info("Daily stat %s deleted by %s", stat_id, actor)
    recalculate_targets(employee_id)


# ---------------------------------------------------------------------------
# Review transitions
# ---------------------------------------------------------------------------

def _apply_approval(stat: DailyStat, reviewer, notes: str | None) -> None:
    stat.status = DailyStat.Status.APPROVED
    stat.reviewed_by = reviewer
    stat.reviewed_at = timezone.now()
    stat.review_notes = notes or ""
    stat.save(update_fields=REVIEW_FIELDS)

    sync_daily_stat_enrollment(stat)
    sync_daily_stat_service_sales(stat)

    _audit(
        stat, reviewer, "DAILY_STAT_APPROVED",
        before={"status": DailyStat.Status.PENDING},
        after={"status": stat.status, "calculated_revenue": str(stat.calculated_revenue)},
    )
    logger.info("Daily stat %s approved by %s", stat.pk, reviewer)


@transaction.atomic
def approve_daily_stat(stat_id: int, *, reviewer, notes: str | None = None) -> DailyStat:
    """Approve a pending daily stat.

    Records the review, books the course revenue as an enrollment linked
    to the stat when it carries a course and a positive revenue, books
    each sold service line as a service sale, then recomputes the
    employee's targets.

    Parameters
    ----------
    stat_id : int
    reviewer : User
    notes : str, optional

    Returns
    -------
    DailyStat

    Raises
    ------
    NotFoundError
        If no stat has this id.
    InvalidStateError
        If the stat is not pending.
    """
    stat = _get_for_update(stat_id)
    if not stat.is_pending:
        raise InvalidStateError("Seule une statistique en attente peut etre approuvee.")

    _apply_approval(stat, reviewer, notes)
    recalculate_targets(stat.employee_id)
    return stat


@transaction.atomic
def reject_daily_stat(stat_id: int, *, reviewer, notes: str) -> DailyStat:
    """Reject a pending daily stat; a reason is mandatory.

    Raises
    ------
    InvalidInputError
        If *notes* is empty or whitespace only.
    NotFoundError
    InvalidStateError
        If the stat is not pending.
    """
    if not (notes or "").strip():
        raise InvalidInputError("Un motif de rejet est requis.")

    stat = _get_for_update(stat_id)
    if not stat.is_pending:
        raise InvalidStateError("Seule une statistique en attente peut etre rejetee.")

    stat.status = DailyStat.Status.REJECTED
    stat.reviewed_by = reviewer
    stat.reviewed_at = timezone.now()
    stat.review_notes = notes.strip()
    stat.save(update_fields=REVIEW_FIELDS)

    _audit(
        stat, reviewer, "DAILY_STAT_REJECTED",
        before={"status": DailyStat.Status.PENDING},
        after={"status": stat.status, "review_notes": stat.review_notes},
    )
    logger.info("Daily stat %s rejected by %s.  Reason: %s", stat.pk, reviewer, stat.review_notes)
    recalculate_targets(stat.employee_id)
    return stat


@transaction.atomic
def unapprove_daily_stat(stat_id: int, *, reviewer, notes: str | None = None) -> DailyStat:
    """Send an approved daily stat back to ``pending``.

    Deletes only the enrollment and service sales booked by its approval
    and clears the review fields; the unapproval reason is kept in the
    audit log.

    Raises
    ------
    NotFoundError
    InvalidStateError
        If the stat is not approved.
    """
    stat = _get_for_update(stat_id)
    if not stat.is_approved:
        raise InvalidStateError("Seule une statistique approuvee peut etre desapprouvee.")

    previous_reviewer = stat.reviewed_by_id
    remove_daily_stat_enrollment(stat)
    remove_daily_stat_service_sales(stat)

    stat.status = DailyStat.Status.PENDING
    stat.reviewed_by = None
    stat.reviewed_at = None
    stat.review_notes = ""
    stat.save(update_fields=REVIEW_FIELDS)

    _audit(
        stat, reviewer, "DAILY_STAT_UNAPPROVED",
        before={"status": DailyStat.Status.APPROVED, "reviewed_by": str(previous_reviewer)},
        after={"status": stat.status, "notes": notes or ""},
    )
    logger.info("Daily stat %s unapproved by %s", stat.pk, reviewer)
    recalculate_targets(stat.employee_id)
    return stat


def bulk_approve_daily_stats(ids, *, reviewer, notes: str | None = None) -> list[int]:
    """Approve every pending stat among *ids*.

    Ids that are unknown or not pending are skipped; each approval is its
    own transaction, and each affected employee is recomputed once at the
    end.

    Returns
    -------
    list[int]
        Ids actually approved, in request order.

    Raises
    ------
    InvalidInputError
        If *ids* is not a list of positive integers.
    """
    if not isinstance(ids, (list, tuple)):
        raise InvalidInputError("La liste des identifiants est invalide.")
    unique_ids = list(dict.fromkeys(_validate_id(value) for value in ids))

    approved: list[int] = []
    employee_ids: set[int] = set()
    for stat_id in unique_ids:
        with transaction.atomic():
            stat = (
                DailyStat.objects
                .select_for_update()
                .select_related("employee__academy")
                .filter(pk=stat_id)
                .first()
            )
            if stat is None or not stat.is_pending:
                logger.debug("Bulk approve: daily stat %s skipped", stat_id)
                continue
            _apply_approval(stat, reviewer, notes)
        approved.append(stat_id)
        employee_ids.add(stat.employee_id)

    for employee_id in sorted(employee_ids):
        recalculate_targets(employee_id)

    logger.info(
        "Bulk approve by %s: %d/%d daily stats approved",
        reviewer, len(approved), len(unique_ids),
    )
    return approved


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------

def list_for_review(
    *,
    academy=None,
    status: str | None = None,
    month: int | None = None,
    year: int | None = None,
    employee_id: int | None = None,
):
    """Queryset of daily stats for the review screen, newest first."""
    qs = DailyStat.objects.select_related("employee", "course", "reviewed_by")
    if academy is not None:
        qs = qs.filter(employee__academy=academy)
    if status:
        if status not in DailyStat.Status.values:
            raise InvalidInputError(f"Statut inconnu : {status}.")
        qs = qs.filter(status=status)
    if employee_id is not None:
        qs = qs.filter(employee_id=employee_id)
    bounds = _period_bounds(month, year)
    if bounds is not None:
        qs = qs.filter(date__gte=bounds[0], date__lte=bounds[1])
    return qs.order_by("-date", "-created_at")


def review_stats(*, academy=None, month: int | None = None, year: int | None = None) -> dict:
    """Counts per status over the optional month/year window."""
    qs = list_for_review(academy=academy, month=month, year=year)
    counts = qs.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=DailyStat.Status.PENDING)),
        approved=Count("id", filter=Q(status=DailyStat.Status.APPROVED)),
        rejected=Count("id", filter=Q(status=DailyStat.Status.REJECTED)),
    )
    return {key: counts[key] or 0 for key in ("total", "pending", "approved", "rejected")}


def monthly_totals(*, employee_id: int, month: int, year: int) -> dict:
    """Approved-only totals of an employee for one month."""
    start, end = _period_bounds(month, year)
    qs = DailyStat.objects.filter(
        employee_id=employee_id,
        status=DailyStat.Status.APPROVED,
        date__gte=start,
        date__lte=end,
    )
    sums = qs.aggregate(
        targeted_customers=Sum("targeted_customers"),
        confirmed_customers=Sum("confirmed_customers"),
        registered_customers=Sum("registered_customers"),
        services_sold=Sum("services_sold"),
        targeted_by_services=Sum("targeted_by_services"),
        services_revenue=Sum("sales_amount"),
        courses_revenue=Sum("calculated_revenue"),
        total_days=Count("date", distinct=True),
    )
    totals = {key: value or 0 for key, value in sums.items()}
    totals["services_revenue"] = Decimal(totals["services_revenue"])
    totals["courses_revenue"] = Decimal(totals["courses_revenue"])
    totals["total_revenue"] = totals["courses_revenue"] + totals["services_revenue"]
    totals.update({"employee_id": employee_id, "month": month, "year": year})
    return totals


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------

@transaction.atomic
def reset_employee_stats(
    *,
    academy,
    actor,
    employee_id: int | None = None,
    month: int | None = None,
    year: int | None = None,
    reset_daily_stats: bool = True,
    reset_current_values: bool = True,
) -> dict:
    """Wipe daily stats and/or target adjustments of an academy.

    Scope is narrowed by employee and by month/year.  Targets in scope get
    their ``base_value`` zeroed, then every affected employee is recomputed,
    so ``current_value`` is rebuilt from whatever approved stats remain.

    Raises
    ------
    InvalidInputError
        If *month* is given without *year*; both halves of the reset must
        select the same period.
    """
    if month is not None and year is None:
        raise InvalidInputError("L'annee est obligatoire lorsqu'un mois est indique.")

    from courses.models import CourseEnrollment
    from hr.models import Employee
    from targets.models import EmployeeTarget

    employees = Employee.objects.filter(academy=academy)
    if employee_id is not None:
        employees = employees.filter(pk=employee_id)
    employee_ids = list(employees.values_list("pk", flat=True))

    deleted_stats = 0
    if reset_daily_stats:
        stats = DailyStat.objects.filter(employee_id__in=employee_ids)
        bounds = _period_bounds(month, year)
        if bounds is not None:
            stats = stats.filter(date__gte=bounds[0], date__lte=bounds[1])
        CourseEnrollment.objects.filter(daily_stat__in=stats).delete()
        _, per_model = stats.delete()
        deleted_stats = per_model.get(DailyStat._meta.label, 0)

    reset_targets = 0
    if reset_current_values:
        targets = EmployeeTarget.objects.filter(employee_id__in=employee_ids)
        if year is not None:
            targets = targets.filter(year=year)
        if month is not None:
            targets = targets.filter(month=month)
        reset_targets = targets.update(
            base_value=Decimal("0"),
            current_value=Decimal("0"),
            status=EmployeeTarget.Status.IN_PROGRESS,
            updated_at=timezone.now(),
        )

    for pk in employee_ids:
        recalculate_targets(pk)

    result = {
        "employees": len(employee_ids),
        "deleted_daily_stats": deleted_stats,
        "reset_targets": reset_targets,
    }
    create_audit_log(
        actor=actor,
        academy=academy,
        action="EMPLOYEE_STATS_RESET",
        entity_type="Employee",
        entity_id=str(employee_id or "*"),
        before={"month": month, "year": year},
        after=result,
    )
    logger.warning("Employee stats reset by %s: %s", actor, result)
    return result
