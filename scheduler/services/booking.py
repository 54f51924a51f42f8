"""Booking arbitration.

Every rule is re-checked inside the committing transaction instead of being
trusted from an earlier slot listing. The partial unique indexes on
``appointments`` back the two conflict rules at the storage level, so when
two requests race past the reads only one insert commits and the loser is
reported as a conflict.
"""

import logging

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from scheduler.core import config
from scheduler.models.representative import Representative
from scheduler.schemas import ErrorKind, OperationResult
from scheduler.services import appointment_store, availability_store
from scheduler.services.clock import day_of_week, parse_clock, parse_date
from scheduler.services.slots import generate_slots

logger = logging.getLogger(__name__)

PENDING_SAME_DAY_MESSAGE = 'You already have a pending appointment on this date'
SLOT_TAKEN_MESSAGE = 'This time slot is already taken'
DAY_FULL_MESSAGE = 'This representative has no more appointments available on this date'
NOT_OFFERED_MESSAGE = 'The requested time is not an available slot for this representative on that date'


def _validate_request(requested_date: str, requested_time: str, purpose: str, description: str) -> str | None:
    try:
        parse_date(requested_date)
        parse_clock(requested_time)
    except ValueError as exc:
        return str(exc)

    if not (purpose or '').strip():
        return 'Purpose is required.'

    for label, value in (('Purpose', purpose), ('Description', description or '')):
        if len(value) > config.MAX_TEXT_LENGTH:
            return f'{label} must be {config.MAX_TEXT_LENGTH} characters or fewer.'

    return None


def _check_rules(
    db: Session,
    user_id: int,
    representative: Representative,
    requested_date: str,
    requested_time: str,
) -> OperationResult | None:
    schedule = availability_store.get_day(db, representative.id, day_of_week(requested_date))
    if requested_time not in generate_slots(schedule):
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, NOT_OFFERED_MESSAGE)

    # Only pending requests count here; an accepted appointment on the same
    # day does not stop the requester from asking for another.
    if appointment_store.pending_for_requester_on_date(db, user_id, requested_date):
        return OperationResult.fail(ErrorKind.CONFLICT, PENDING_SAME_DAY_MESSAGE)

    if requested_time in appointment_store.active_times_for_day(db, representative.id, requested_date):
        return OperationResult.fail(ErrorKind.CONFLICT, SLOT_TAKEN_MESSAGE)

    if (
        config.ENFORCE_MAX_APPOINTMENTS_PER_DAY
        and appointment_store.count_active_for_day(db, representative.id, requested_date)
        >= representative.max_appointments_per_day
    ):
        return OperationResult.fail(ErrorKind.CONFLICT, DAY_FULL_MESSAGE)

    return None


def _attempt_booking(
    db: Session,
    user_id: int,
    representative: Representative,
    requested_date: str,
    requested_time: str,
    purpose: str,
    description: str,
) -> OperationResult:
    representative_id = representative.id
    rejection = _check_rules(db, user_id, representative, requested_date, requested_time)
    if rejection:
        db.rollback()
        logger.info(
            'Booking rejected user=%s representative=%s date=%s time=%s: %s',
            user_id, representative_id, requested_date, requested_time, rejection.message,
        )
        return rejection

    try:
        appointment = appointment_store.insert(
            db,
            user_id=user_id,
            representative_id=representative_id,
            requested_date=requested_date,
            requested_time=requested_time,
            purpose=purpose,
            description=description,
        )
        appointment_id = appointment.id
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(
            'Booking lost a race user=%s representative=%s date=%s time=%s',
            user_id, representative_id, requested_date, requested_time,
        )
        if appointment_store.pending_for_requester_on_date(db, user_id, requested_date):
            return OperationResult.fail(ErrorKind.CONFLICT, PENDING_SAME_DAY_MESSAGE)
        return OperationResult.fail(ErrorKind.CONFLICT, SLOT_TAKEN_MESSAGE)

    logger.info(
        'Booked appointment=%s user=%s representative=%s date=%s time=%s',
        appointment_id, user_id, representative_id, requested_date, requested_time,
    )
    return OperationResult.ok('Appointment request created successfully', appointment_id=appointment_id)


def create_appointment(
    db: Session,
    user_id: int,
    representative_id: int,
    requested_date: str,
    requested_time: str,
    purpose: str,
    description: str = '',
) -> OperationResult:
    problem = _validate_request(requested_date, requested_time, purpose, description)
    if problem:
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, problem)

    purpose = purpose.strip()
    description = (description or '').strip()

    for attempt in range(1, config.BOOKING_MAX_ATTEMPTS + 1):
        try:
            representative = db.get(Representative, representative_id)
            if representative is None:
                return OperationResult.fail(ErrorKind.NOT_FOUND, 'Representative not found')

            return _attempt_booking(
                db,
                user_id,
                representative,
                requested_date,
                requested_time,
                purpose,
                description,
            )
        except OperationalError:
            db.rollback()
            if attempt == config.BOOKING_MAX_ATTEMPTS:
                logger.exception('Booking failed after %s attempts', attempt)
                raise
            logger.warning(
                'Storage contention while booking representative=%s date=%s time=%s, retrying (%s/%s)',
                representative_id, requested_date, requested_time, attempt, config.BOOKING_MAX_ATTEMPTS,
            )
