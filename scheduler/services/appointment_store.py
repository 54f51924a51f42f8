"""Appointment persistence and indexed lookups.

Rows are never deleted; cancellation is a status. ``patch`` is a
compare-and-set on the current status so that two concurrent transitions of
the same appointment cannot both win.
"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from scheduler.models.appointment import ACTIVE_STATUSES, PENDING, Appointment
from scheduler.models.representative import Representative
from scheduler.models.user import User
from scheduler.schemas import (
    NotesUpdate,
    ProviderAppointmentView,
    RejectionReasonUpdate,
    RepresentativeSummary,
    RequesterAppointmentView,
    StatusUpdate,
    UserContact,
    UserSummary,
)


def get(db: Session, appointment_id: int) -> Appointment | None:
    return db.get(Appointment, appointment_id)


def insert(
    db: Session,
    user_id: int,
    representative_id: int,
    requested_date: str,
    requested_time: str,
    purpose: str,
    description: str,
) -> Appointment:
    """Stage a new pending appointment; the caller owns the commit."""
    now = datetime.now()
    appointment = Appointment(
        user_id=user_id,
        representative_id=representative_id,
        requested_date=requested_date,
        requested_time=requested_time,
        purpose=purpose,
        description=description,
        status=PENDING,
        created_at=now,
        updated_at=now,
    )
    db.add(appointment)
    db.flush()
    return appointment


def patch(db: Session, appointment_id: int, expected_status: str, updates) -> bool:
    """Apply field updates only if the row still has ``expected_status``.

    Returns False when another writer changed the status first. The caller
    owns the commit.
    """
    values = {Appointment.updated_at: datetime.now()}

    for update in updates:
        if isinstance(update, StatusUpdate):
            values[Appointment.status] = update.value
        elif isinstance(update, RejectionReasonUpdate):
            values[Appointment.rejection_reason] = update.value
        elif isinstance(update, NotesUpdate):
            values[Appointment.notes] = update.value
        else:
            raise TypeError(f'Unsupported appointment update: {update!r}')

    updated_rows = db.query(Appointment).filter(
        Appointment.id == appointment_id,
        Appointment.status == expected_status,
    ).update(values, synchronize_session=False)

    return updated_rows == 1


def active_times_for_day(db: Session, representative_id: int, requested_date: str) -> set[str]:
    rows = db.query(Appointment.requested_time).filter(
        Appointment.representative_id == representative_id,
        Appointment.requested_date == requested_date,
        Appointment.status.in_(ACTIVE_STATUSES),
    ).all()
    return {requested_time for (requested_time,) in rows}


def count_active_for_day(db: Session, representative_id: int, requested_date: str) -> int:
    return db.query(func.count(Appointment.id)).filter(
        Appointment.representative_id == representative_id,
        Appointment.requested_date == requested_date,
        Appointment.status.in_(ACTIVE_STATUSES),
    ).scalar()


def pending_for_requester_on_date(db: Session, user_id: int, requested_date: str) -> Appointment | None:
    return db.query(Appointment).filter(
        Appointment.user_id == user_id,
        Appointment.status == PENDING,
        Appointment.requested_date == requested_date,
    ).first()


def list_for_requester(db: Session, user_id: int, status: str | None = None) -> list[RequesterAppointmentView]:
    query = db.query(Appointment, Representative, User).join(
        Representative, Representative.id == Appointment.representative_id,
    ).join(
        User, User.id == Representative.user_id,
    ).filter(Appointment.user_id == user_id)

    if status:
        query = query.filter(Appointment.status == status)

    rows = query.order_by(Appointment.created_at.desc(), Appointment.id.desc()).all()

    return [
        RequesterAppointmentView(
            **_appointment_fields(appointment),
            representative=RepresentativeSummary(
                id=representative.id,
                department=representative.department,
                title=representative.title,
                user=UserSummary(full_name=representative_user.full_name, email=representative_user.email),
            ),
        )
        for appointment, representative, representative_user in rows
    ]


def list_for_provider(
    db: Session,
    representative_id: int,
    requested_date: str | None = None,
    status: str | None = None,
) -> list[ProviderAppointmentView]:
    query = db.query(Appointment, User).join(
        User, User.id == Appointment.user_id,
    ).filter(Appointment.representative_id == representative_id)

    if requested_date:
        query = query.filter(Appointment.requested_date == requested_date)
    if status:
        query = query.filter(Appointment.status == status)

    rows = query.order_by(
        Appointment.requested_date.asc(),
        Appointment.requested_time.asc(),
        Appointment.id.asc(),
    ).all()

    return [
        ProviderAppointmentView(
            **_appointment_fields(appointment),
            user=UserContact(
                id=requester.id,
                full_name=requester.full_name,
                email=requester.email,
                phone=requester.phone,
                nationality=requester.nationality,
            ),
        )
        for appointment, requester in rows
    ]


def _appointment_fields(appointment: Appointment) -> dict:
    return {
        'id': appointment.id,
        'user_id': appointment.user_id,
        'representative_id': appointment.representative_id,
        'requested_date': appointment.requested_date,
        'requested_time': appointment.requested_time,
        'purpose': appointment.purpose,
        'description': appointment.description,
        'status': appointment.status,
        'rejection_reason': appointment.rejection_reason,
        'notes': appointment.notes,
        'created_at': appointment.created_at,
        'updated_at': appointment.updated_at,
    }
