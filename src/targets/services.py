"""Service functions for targets and rewards."""
import logging

from django.db import transaction
from django.utils import timezone

from academies.services import create_audit_log
from targets.models import EmployeeReward, EmployeeTarget

logger = logging.getLogger("formapro")


def grant_rewards(targets) -> list[EmployeeReward]:
    """Create the pending reward of each achieved target carrying a reward amount.

    A target yields at most one reward; existing rewards are left as they
    are even if the target later drops back to in-progress.
    """
    eligible = [
        t for t in targets
        if t.status == EmployeeTarget.Status.ACHIEVED
        and t.reward_amount is not None
        and t.reward_amount > 0
    ]
    if not eligible:
        return []

    rewarded = set(
        EmployeeReward.objects
        .filter(target__in=eligible)
        .values_list("target_id", flat=True)
    )
    created = []
    for target in eligible:
        if target.pk in rewarded:
            continue
        reward, was_created = EmployeeReward.objects.get_or_create(
            target=target,
            defaults={
                "employee_id": target.employee_id,
                "amount": target.reward_amount,
                "reason": f"Objectif atteint : {target.label} ({target.period_label})",
            },
        )
        if was_created:
            created.append(reward)
            logger.info(
                "Reward %s granted to employee %s for target %s",
                reward.amount, target.employee_id, target.pk,
            )
    return created


def _reward_academy(reward):
    return reward.employee.academy


@transaction.atomic
def approve_reward(reward: EmployeeReward, actor, notes: str = "") -> EmployeeReward:
    """Approve a pending reward.

    Raises
    ------
    ValueError
        If the reward is not pending.
    """
    reward = EmployeeReward.objects.select_for_update().get(pk=reward.pk)
    if reward.status != EmployeeReward.Status.PENDING:
        raise ValueError("Seule une prime en attente peut etre approuvee.")

    reward.status = EmployeeReward.Status.APPROVED
    reward.approved_by = actor
    reward.approved_at = timezone.now()
    if notes:
        reward.notes = notes
    reward.save(update_fields=["status", "approved_by", "approved_at", "notes", "updated_at"])

    create_audit_log(
        actor=actor,
        academy=_reward_academy(reward),
        action="REWARD_APPROVED",
        entity_type="EmployeeReward",
        entity_id=str(reward.pk),
        before={"status": EmployeeReward.Status.PENDING},
        after={"status": reward.status},
    )
    logger.info("Reward %s approved by %s", reward.pk, actor)
    return reward


@transaction.atomic
def mark_reward_paid(reward: EmployeeReward, actor) -> EmployeeReward:
    """Record the payment of an approved reward."""
    reward = EmployeeReward.objects.select_for_update().get(pk=reward.pk)
    if reward.status != EmployeeReward.Status.APPROVED:
        raise ValueError("Seule une prime approuvee peut etre versee.")

    reward.status = EmployeeReward.Status.PAID
    reward.paid_at = timezone.now()
    reward.save(update_fields=["status", "paid_at", "updated_at"])

    create_audit_log(
        actor=actor,
        academy=_reward_academy(reward),
        action="REWARD_PAID",
        entity_type="EmployeeReward",
        entity_id=str(reward.pk),
        before={"status": EmployeeReward.Status.APPROVED},
        after={"status": reward.status},
    )
    logger.info("Reward %s marked as paid by %s", reward.pk, actor)
    return reward


@transaction.atomic
def reject_reward(reward: EmployeeReward, actor, notes: str) -> EmployeeReward:
    """Reject a pending reward; a reason is mandatory."""
    reward = EmployeeReward.objects.select_for_update().get(pk=reward.pk)
    if reward.status != EmployeeReward.Status.PENDING:
        raise ValueError("Seule une prime en attente peut etre rejetee.")
    if not (notes or "").strip():
        raise ValueError("Un motif de rejet est requis.")

    reward.status = EmployeeReward.Status.REJECTED
    reward.notes = notes
    reward.save(update_fields=["status", "notes", "updated_at"])

    create_audit_log(
        actor=actor,
        academy=_reward_academy(reward),
        action="REWARD_REJECTED",
        entity_type="EmployeeReward",
        entity_id=str(reward.pk),
        before={"status": EmployeeReward.Status.PENDING},
        after={"status": reward.status, "notes": notes},
    )
    logger.info("Reward %s rejected by %s", reward.pk, actor)
    return reward
