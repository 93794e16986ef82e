"""Service functions for the courses app."""
import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import Count, Sum

from courses.models import CourseEnrollment, CourseFee

logger = logging.getLogger("formapro")

CENT = Decimal("0.01")


def _trainee_count(stat) -> int:
    if stat.fee_breakdown:
        return sum(int(line.get("customer_count") or 0) for line in stat.fee_breakdown)
    return stat.confirmed_customers


def _match_fee(stat):
    if stat.course_fee is None:
        return None
    return (
        CourseFee.objects
        .filter(course_id=stat.course_id, amount=stat.course_fee)
        .order_by("created_at")
        .first()
    )


@transaction.atomic
def sync_daily_stat_enrollment(stat):
    """Create, refresh or drop the enrollment linked to an approved stat.

    Only an approved stat bound to a course with positive revenue owns an
    enrollment.  Any other combination removes the linked row, if any.

    Parameters
    ----------
    stat : dailystats.models.DailyStat

    Returns
    -------
    CourseEnrollment or None
    """
    eligible = (
        stat.is_approved
        and stat.course_id is not None
        and stat.calculated_revenue > 0
    )
    if not eligible:
        remove_daily_stat_enrollment(stat)
        return None

    trainees = _trainee_count(stat)
    revenue = stat.calculated_revenue
    per_trainee = (
        (revenue / trainees).quantize(CENT, rounding=ROUND_HALF_UP)
        if trainees > 0 else revenue
    )
    enrollment, created = CourseEnrollment.objects.update_or_create(
        daily_stat=stat,
        defaults={
            "course_id": stat.course_id,
            "fee": _match_fee(stat),
            "employee_id": stat.employee_id,
            "trainee_count": trainees,
            "paid_amount": per_trainee,
            "total_amount": revenue,
            "enrollment_date": stat.date,
        },
    )
    logger.info(
        "Enrollment %s %s for daily stat %s (course=%s, revenue=%s)",
        enrollment.pk, "created" if created else "updated",
        stat.pk, stat.course_id, revenue,
    )
    return enrollment


def remove_daily_stat_enrollment(stat) -> int:
    """Delete the enrollment linked to *stat*; other enrollments are untouched."""
    deleted, _ = CourseEnrollment.objects.filter(daily_stat=stat).delete()
    if deleted:
        logger.info("Enrollment of daily stat %s removed", stat.pk)
    return deleted


def course_statistics(course) -> dict:
    """Aggregate trainees and revenue of *course*.

    Revenue attributable to daily statistics only counts approved stats,
    since only those own an enrollment.
    """
    enrollments = CourseEnrollment.objects.filter(course=course)
    totals = enrollments.aggregate(
        enrollment_count=Count("id"),
        trainees=Sum("trainee_count"),
        revenue=Sum("total_amount"),
    )
    from_stats = (
        enrollments.filter(daily_stat__isnull=False)
        .aggregate(revenue=Sum("total_amount"))["revenue"]
        or Decimal("0")
    )
    revenue = totals["revenue"] or Decimal("0")
    return {
        "course_id": course.pk,
        "enrollment_count": totals["enrollment_count"] or 0,
        "trainee_count": totals["trainees"] or 0,
        "total_revenue": revenue,
        "daily_stat_revenue": from_stats,
        "direct_revenue": revenue - from_stats,
        "fee_count": course.fees.count(),
    }
