"""
Links between follow-up accounts and the pledges they chase.

Each link is stored on both sides: ``Pledge.assigned_followup`` and
``StaffAccount.assigned_pledges``. Writes to the pair happen inside one
transaction; ``repair_assignments`` fixes rows that drifted apart anyway.
"""
import logging
from django.db import transaction
from rest_framework.exceptions import NotFound

from .exceptions import AlreadyAssigned, InvalidRole
from .models import Pledge, StaffAccount, ROLE_FOLLOW_UP

logger = logging.getLogger(__name__)

SKIP_NOT_FOUND = 'notFound'
SKIP_ALREADY_ASSIGNED = 'alreadyAssigned'
SKIP_OTHER_FOLLOW_UP = 'assignedToAnotherFollowUp'


def get_followup(followup_id):
    try:
        account = StaffAccount.objects.get(pk=followup_id)
    except (StaffAccount.DoesNotExist, ValueError, TypeError):
        raise NotFound('Follow-up account not found.')

    if account.role != ROLE_FOLLOW_UP:
        raise InvalidRole('Pledges can only be assigned to follow-up accounts.')
    return account


def get_pledge(pledge_id):
    try:
        return Pledge.objects.get(pk=pledge_id)
    except (Pledge.DoesNotExist, ValueError, TypeError):
        raise NotFound('Pledge not found.')


def _detach_from_previous(pledge, account):
    previous_id = pledge.assigned_followup_id
    if previous_id is not None and previous_id != account.pk:
        StaffAccount.assigned_pledges.through.objects.filter(
            staffaccount_id=previous_id, pledge_id=pledge.pk
        ).delete()
        logger.info("Pledge %s moved from follow-up %s to %s", pledge.pk, previous_id, account.pk)


def assign_one(followup_id, pledge_id):
    account = get_followup(followup_id)
    pledge = get_pledge(pledge_id)

    if account.assigned_pledges.filter(pk=pledge.pk).exists():
        raise AlreadyAssigned()

    with transaction.atomic():
        _detach_from_previous(pledge, account)
        account.assigned_pledges.add(pledge)
        pledge.assigned_followup = account
        pledge.save(update_fields=['assigned_followup', 'updated_at'])

    logger.info("Pledge %s assigned to follow-up %s", pledge.pk, account.pk)
    return account, pledge


def assign_many(followup_id, pledge_ids):
    """
    Assign every resolvable pledge in ``pledge_ids`` to one follow-up.

    Pledges that do not exist, that this follow-up already holds, or that
    another follow-up holds are skipped. Returns ``(assigned, skipped,
    reasons)`` where ``reasons`` maps each skipped id to its skip code.
    """
    account = get_followup(followup_id)
    held = set(account.assigned_pledges.values_list('pk', flat=True))

    assigned = []
    skipped = []
    reasons = {}

    with transaction.atomic():
        for pledge_id in pledge_ids:
            if str(pledge_id).isdigit():
                pledge_id = int(pledge_id)
                pledge = Pledge.objects.filter(pk=pledge_id).first()
            else:
                pledge = None

            if pledge is None:
                reason = SKIP_NOT_FOUND
            elif pledge.pk in held:
                reason = SKIP_ALREADY_ASSIGNED
            elif pledge.assigned_followup_id is not None and pledge.assigned_followup_id != account.pk:
                reason = SKIP_OTHER_FOLLOW_UP
            else:
                reason = None

            if reason:
                skipped.append(pledge_id)
                reasons[str(pledge_id)] = reason
                continue

            pledge.assigned_followup = account
            pledge.save(update_fields=['assigned_followup', 'updated_at'])
            held.add(pledge.pk)
            assigned.append(pledge.pk)

        if assigned:
            account.assigned_pledges.add(*assigned)

    logger.info(
        "Bulk assignment to follow-up %s: %d assigned, %d skipped",
        account.pk, len(assigned), len(skipped),
    )
    return assigned, skipped, reasons


def unassign(pledge_id):
    pledge = get_pledge(pledge_id)
    previous_id = pledge.assigned_followup_id

    with transaction.atomic():
        StaffAccount.assigned_pledges.through.objects.filter(pledge_id=pledge.pk).delete()
        pledge.assigned_followup = None
        pledge.save(update_fields=['assigned_followup', 'updated_at'])

    logger.info("Pledge %s unassigned from follow-up %s", pledge.pk, previous_id)
    return pledge


def repair_assignments():
    """
    Make both sides of every assignment agree.

    ``Pledge.assigned_followup`` is treated as authoritative: set entries
    that point at a pledge held by somebody else are dropped, and pledges
    missing from their holder's set are added back. Returns
    ``(removed, added)`` link counts.
    """
    through = StaffAccount.assigned_pledges.through
    removed = 0
    added = 0

    with transaction.atomic():
        for link in through.objects.select_related('pledge'):
            if link.pledge.assigned_followup_id != link.staffaccount_id:
                link.delete()
                removed += 1

        linked = set(through.objects.values_list('staffaccount_id', 'pledge_id'))
        missing = [
            through(staffaccount_id=followup_id, pledge_id=pledge_id)
            for pledge_id, followup_id in Pledge.objects.filter(
                assigned_followup__isnull=False
            ).values_list('pk', 'assigned_followup_id')
            if (followup_id, pledge_id) not in linked
        ]
        through.objects.bulk_create(missing)
        added = len(missing)

    if removed or added:
        logger.warning("Assignment repair removed %d and added %d links", removed, added)
    return removed, added
