import logging

from sqlalchemy.orm import Session

from scheduler.models.availability import WeeklyAvailability
from scheduler.models.representative import Representative
from scheduler.schemas import (
    DepartmentUpdate,
    ErrorKind,
    MaxAppointmentsPerDayUpdate,
    OperationResult,
    RepresentativeDirectoryEntry,
    SpecializationsUpdate,
    TitleUpdate,
    UserSummary,
    WeeklyHours,
)

logger = logging.getLogger(__name__)


def get_representative_by_user_id(db: Session, user_id: int) -> Representative | None:
    return db.query(Representative).filter(Representative.user_id == user_id).first()


def update_representative_profile(db: Session, representative_id: int, updates) -> OperationResult:
    if not updates:
        return OperationResult.fail(ErrorKind.VALIDATION_FAILURE, 'No updates provided')

    representative = db.get(Representative, representative_id)
    if representative is None:
        return OperationResult.fail(ErrorKind.NOT_FOUND, 'Representative not found')

    for update in updates:
        if isinstance(update, DepartmentUpdate):
            representative.department = update.value.strip()
        elif isinstance(update, TitleUpdate):
            representative.title = update.value.strip()
        elif isinstance(update, SpecializationsUpdate):
            representative.specializations = [item.strip() for item in update.value if item.strip()]
        elif isinstance(update, MaxAppointmentsPerDayUpdate):
            representative.max_appointments_per_day = update.value
        else:
            raise TypeError(f'Unsupported profile update: {update!r}')

    db.commit()
    logger.info(
        'Updated representative=%s fields=%s',
        representative_id, ','.join(update.field for update in updates),
    )

    return OperationResult.ok('Representative profile updated successfully', representative_id=representative_id)


def list_representatives_with_availability(db: Session) -> list[RepresentativeDirectoryEntry]:
    representatives = db.query(Representative).order_by(Representative.id.asc()).all()

    rows = db.query(WeeklyAvailability).order_by(
        WeeklyAvailability.representative_id.asc(),
        WeeklyAvailability.day_of_week.asc(),
    ).all()
    hours_by_representative: dict[int, list[WeeklyHours]] = {}
    for row in rows:
        hours_by_representative.setdefault(row.representative_id, []).append(
            WeeklyHours(
                day_of_week=row.day_of_week,
                start_time=row.start_time,
                end_time=row.end_time,
                slot_duration=row.slot_duration,
            )
        )

    return [
        RepresentativeDirectoryEntry(
            id=representative.id,
            department=representative.department,
            title=representative.title,
            specializations=list(representative.specializations or []),
            max_appointments_per_day=representative.max_appointments_per_day,
            user=UserSummary(full_name=representative.user.full_name, email=representative.user.email),
            availability=hours_by_representative.get(representative.id, []),
        )
        for representative in representatives
    ]
