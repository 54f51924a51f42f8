import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from scheduler.core import config
from scheduler.models.availability import WeeklyAvailability
from scheduler.models.representative import Representative
from scheduler.schemas import BreakTime, ErrorKind, OperationResult
from scheduler.services.clock import parse_clock

logger = logging.getLogger(__name__)


def _normalize_breaks(break_times) -> list[dict]:
    normalized = []
    for break_time in break_times or []:
        if isinstance(break_time, BreakTime):
            break_time = break_time.model_dump()
        normalized.append({'start': break_time['start'], 'end': break_time['end']})
    return normalized


def _validate_schedule(day_of_week: int, start_time: str, end_time: str, slot_duration: int, breaks: list[dict]) -> str | None:
    if not 0 <= day_of_week <= 6:
        return 'Day of week must be between 0 (Sunday) and 6 (Saturday).'

    if slot_duration not in config.ALLOWED_SLOT_DURATIONS:
        allowed = ', '.join(str(minutes) for minutes in sorted(config.ALLOWED_SLOT_DURATIONS))
        return f'Slot duration must be one of: {allowed} minutes.'

    # Only the format is checked; ordering and break overlap are left to the generator.
    try:
        parse_clock(start_time)
        parse_clock(end_time)
        for break_time in breaks:
            parse_clock(break_time['start'])
            parse_clock(break_time['end'])
    except ValueError as exc:
        return str(exc)

    return None


def get_day(db: Session, representative_id: int, day_of_week: int) -> WeeklyAvailability | None:
    return db.query(WeeklyAvailability).filter(
        WeeklyAvailability.representative_id == representative_id,
        WeeklyAvailability.day_of_week == day_of_week,
    ).first()


def get_availability(db: Session, representative_id: int) -> list[WeeklyAvailability]:
    return db.query(WeeklyAvailability).filter(
        WeeklyAvailability.representative_id == representative_id,
    ).order_by(WeeklyAvailability.day_of_week.asc()).all()


def set_availability(
    db: Session,
    representative_id: int,
    day_of_week: int,
    start_time: str,
    end_time: str,
    slot_duration: int,
    break_times=None,
) -> OperationResult:
    """Create or fully replace the row for one weekday.

    The break list is overwritten, not merged.
    """
    try:
        breaks = _normalize_breaks(break_times)
    except (KeyError, TypeError):
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, 'Break times need a start and an end.')

    problem = _validate_schedule(day_of_week, start_time, end_time, slot_duration, breaks)
    if problem:
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, problem)

    if db.get(Representative, representative_id) is None:
        return OperationResult.fail(ErrorKind.NOT_FOUND, 'Representative not found')

    # A concurrent insert for the same weekday trips the unique index; the
    # second pass then finds that row and replaces it.
    for _ in range(2):
        existing = get_day(db, representative_id, day_of_week)

        if existing:
            existing.start_time = start_time
            existing.end_time = end_time
            existing.slot_duration = slot_duration
            existing.break_times = breaks
            db.commit()
            logger.info('Updated availability representative=%s day=%s', representative_id, day_of_week)
            return OperationResult.ok(
                'Availability updated successfully',
                availability_id=existing.id,
                created=False,
            )

        availability = WeeklyAvailability(
            representative_id=representative_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            slot_duration=slot_duration,
            break_times=breaks,
        )
        db.add(availability)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            continue

        db.refresh(availability)
        logger.info('Created availability representative=%s day=%s', representative_id, day_of_week)
        return OperationResult.ok(
            'Availability created successfully',
            availability_id=availability.id,
            created=True,
        )

    return OperationResult.fail(ErrorKind.CONFLICT, 'Availability changed concurrently, please retry')


def delete_availability(db: Session, representative_id: int, day_of_week: int) -> OperationResult:
    availability = get_day(db, representative_id, day_of_week)
    if availability is None:
        return OperationResult.fail(ErrorKind.NOT_FOUND, 'Availability not found')

    availability_id = availability.id
    db.delete(availability)
    db.commit()
    logger.info('Deleted availability representative=%s day=%s', representative_id, day_of_week)

    return OperationResult.ok('Availability deleted successfully', availability_id=availability_id)
