"""
Linear certification progression: Pending -> In Progress -> Received -> Certified

Each step has a side effect: sending stamps date_sent, receiving stamps
date_received, certifying marks the stone certified with the lab and file.
"""
import logging
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)

STATUS_FLOW = ['Pending', 'In Progress', 'Received', 'Certified']


class CertificationTransitionError(ValueError):
    """Raised for a status change outside the linear order"""


def next_status(current):
    try:
        index = STATUS_FLOW.index(current)
    except ValueError:
        raise CertificationTransitionError(f"Unknown status '{current}'")
    if index == len(STATUS_FLOW) - 1:
        raise CertificationTransitionError('Certification is already certified')
    return STATUS_FLOW[index + 1]


def _enter(certification, status):
    today = timezone.localdate()
    certification.status = status

    if status == 'In Progress' and not certification.date_sent:
        certification.date_sent = today
    elif status == 'Received' and not certification.date_received:
        certification.date_received = today
    elif status == 'Certified':
        stone = certification.stone
        stone.certified = True
        stone.certificate_lab = certification.lab
        if certification.certificate_file:
            stone.certificate_file = certification.certificate_file.name
        stone.save(update_fields=['certified', 'certificate_lab', 'certificate_file', 'updated_at'])
        logger.info(f"Stone {stone.stone_id} certified by {certification.lab}")


def advance(certification):
    """Move one step forward and save. Returns the new status."""
    status = next_status(certification.status)
    with transaction.atomic():
        _enter(certification, status)
        certification.save()
    return status


def transition_to(certification, target):
    """
    Move forward to target running every intermediate step.
    Returns the list of statuses entered (empty when already there).
    """
    if target not in STATUS_FLOW:
        raise CertificationTransitionError(f"Unknown status '{target}'")
    current_index = STATUS_FLOW.index(certification.status)
    target_index = STATUS_FLOW.index(target)
    if target_index < current_index:
        raise CertificationTransitionError(
            f"Cannot move certification back from '{certification.status}' to '{target}'"
        )

    entered = STATUS_FLOW[current_index + 1:target_index + 1]
    with transaction.atomic():
        for status in entered:
            _enter(certification, status)
        certification.save()
    return entered
