"""Appointment status state machine.

pending -> accepted | rejected (representative), pending -> cancelled (requester),
accepted -> completed (representative), accepted -> cancelled (requester).
rejected, completed and cancelled are terminal.
"""

import logging

from sqlalchemy.orm import Session

from scheduler.core import config
from scheduler.models.appointment import (
    ACCEPTED,
    APPOINTMENT_STATUSES,
    CANCELLED,
    COMPLETED,
    PENDING,
    REJECTED,
    TERMINAL_STATUSES,
)
from scheduler.models.user import REPRESENTATIVE_ROLE, USER_ROLE
from scheduler.schemas import ErrorKind, NotesUpdate, OperationResult, RejectionReasonUpdate, StatusUpdate
from scheduler.services import appointment_store

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    (PENDING, ACCEPTED): REPRESENTATIVE_ROLE,
    (PENDING, REJECTED): REPRESENTATIVE_ROLE,
    (PENDING, CANCELLED): USER_ROLE,
    (ACCEPTED, COMPLETED): REPRESENTATIVE_ROLE,
    (ACCEPTED, CANCELLED): USER_ROLE,
}


def _owns(appointment, actor_id: int, actor_role: str) -> bool:
    if actor_role == REPRESENTATIVE_ROLE:
        return appointment.representative_id == actor_id
    return appointment.user_id == actor_id


def transition_status(
    db: Session,
    appointment_id: int,
    actor_id: int,
    actor_role: str,
    new_status: str,
    rejection_reason: str | None = None,
    notes: str | None = None,
) -> OperationResult:
    """Move an appointment to ``new_status`` on behalf of ``actor_id``.

    ``actor_id`` is the representative id for representatives and the user
    id for requesters. A reason or note that the target status does not use
    is ignored.
    """
    if new_status not in APPOINTMENT_STATUSES:
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, f'Unknown appointment status: {new_status}')

    if actor_role not in (REPRESENTATIVE_ROLE, USER_ROLE):
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, f'Unknown actor role: {actor_role}')

    appointment = appointment_store.get(db, appointment_id)
    if appointment is None:
        return OperationResult.fail(ErrorKind.NOT_FOUND, 'Appointment not found')

    if not _owns(appointment, actor_id, actor_role):
        return OperationResult.fail(ErrorKind.INVALID_TRANSITION, 'You can only change your own appointments')

    current_status = appointment.status
    if current_status in TERMINAL_STATUSES:
        return OperationResult.fail(
            ErrorKind.INVALID_TRANSITION,
            f'Appointment is already {current_status} and can no longer change',
        )

    required_role = ALLOWED_TRANSITIONS.get((current_status, new_status))
    if required_role is None:
        return OperationResult.fail(
            ErrorKind.INVALID_TRANSITION,
            f'Cannot change an appointment from {current_status} to {new_status}',
        )
    if required_role != actor_role:
        return OperationResult.fail(
            ErrorKind.INVALID_TRANSITION,
            f'Only the {required_role} can change an appointment from {current_status} to {new_status}',
        )

    updates = [StatusUpdate(value=new_status)]

    if new_status == REJECTED:
        reason = (rejection_reason or '').strip()
        if not reason:
            return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, 'A rejection reason is required')
        if len(reason) > config.MAX_TEXT_LENGTH:
            return OperationResult.fail(
                ErrorKind.VALIDATION_FAILURE,
                f'Rejection reason must be {config.MAX_TEXT_LENGTH} characters or fewer.',
            )
        updates.append(RejectionReasonUpdate(value=reason))

    if new_status == COMPLETED and (notes or '').strip():
        cleaned_notes = notes.strip()
        if len(cleaned_notes) > config.MAX_TEXT_LENGTH:
            return OperationResult.fail(
                ErrorKind.VALIDATION_FAILURE,
                f'Notes must be {config.MAX_TEXT_LENGTH} characters or fewer.',
            )
        updates.append(NotesUpdate(value=cleaned_notes))

    if not appointment_store.patch(db, appointment_id, current_status, updates):
        db.rollback()
        return OperationResult.fail(
            ErrorKind.INVALID_TRANSITION,
            'Appointment status changed in the meantime, refresh and try again',
        )

    db.commit()
    logger.info(
        'Appointment %s moved %s -> %s by %s %s',
        appointment_id, current_status, new_status, actor_role, actor_id,
    )

    return OperationResult.ok(f'Appointment {new_status} successfully', appointment_id=appointment_id)


def cancel_appointment(db: Session, appointment_id: int, user_id: int) -> OperationResult:
    return transition_status(db, appointment_id, user_id, USER_ROLE, CANCELLED)
