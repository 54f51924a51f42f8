from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scheduler.auth.dependencies import CallerContext, get_current_caller, require_representative, require_requester
from scheduler.core import config
from scheduler.models.appointment import APPOINTMENT_STATUSES
from scheduler.models.user import REPRESENTATIVE_ROLE
from scheduler.routes.common import DATABASE_UNAVAILABLE_DETAIL, apply_result_status, ensure_database_ready, get_db
from scheduler.schemas import OperationResult, ProviderAppointmentView, RequesterAppointmentView
from scheduler.services import appointment_store, booking, transitions
from scheduler.services.clock import parse_date

router = APIRouter(tags=['appointments'])


class CreateAppointmentRequest(BaseModel):
    representative_id: int
    requested_date: str
    requested_time: str
    purpose: str
    description: str = ''

    @field_validator('requested_date', 'requested_time', 'purpose', 'description')
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class StatusChangeRequest(BaseModel):
    status: str
    rejection_reason: str | None = None
    notes: str | None = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in APPOINTMENT_STATUSES:
            raise ValueError('Invalid appointment status.')
        return normalized

    @field_validator('rejection_reason', 'notes')
    @classmethod
    def validate_free_text(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > config.MAX_TEXT_LENGTH:
            raise ValueError(f'Text must be {config.MAX_TEXT_LENGTH} characters or fewer.')

        return normalized


def normalize_status_filter(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None

    normalized = value.strip().lower()
    if normalized not in APPOINTMENT_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"status must be one of: {', '.join(APPOINTMENT_STATUSES)}",
        )
    return normalized


@router.post('', response_model=OperationResult)
def create_appointment(
    data: CreateAppointmentRequest,
    response: Response,
    caller: CallerContext = Depends(require_requester),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        result = booking.create_appointment(
            db,
            user_id=caller.user_id,
            representative_id=data.representative_id,
            requested_date=data.requested_date,
            requested_time=data.requested_time,
            purpose=data.purpose,
            description=data.description,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return apply_result_status(result, response, status.HTTP_201_CREATED)


@router.get('/mine', response_model=list[RequesterAppointmentView])
def list_my_appointments(
    status_filter: str | None = Query(default=None, alias='status'),
    caller: CallerContext = Depends(require_requester),
    db: Session = Depends(get_db),
):
    normalized_status = normalize_status_filter(status_filter)
    ensure_database_ready()

    try:
        return appointment_store.list_for_requester(db, caller.user_id, normalized_status)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/representative', response_model=list[ProviderAppointmentView])
def list_representative_appointments(
    date: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias='status'),
    caller: CallerContext = Depends(require_representative),
    db: Session = Depends(get_db),
):
    normalized_status = normalize_status_filter(status_filter)
    if date:
        try:
            parse_date(date)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    ensure_database_ready()

    try:
        return appointment_store.list_for_provider(db, caller.representative_id, date or None, normalized_status)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.post('/{appointment_id}/status', response_model=OperationResult)
def change_appointment_status(
    appointment_id: int,
    data: StatusChangeRequest,
    response: Response,
    caller: CallerContext = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    actor_id = caller.representative_id if caller.role == REPRESENTATIVE_ROLE else caller.user_id
    ensure_database_ready()

    try:
        result = transitions.transition_status(
            db,
            appointment_id=appointment_id,
            actor_id=actor_id,
            actor_role=caller.role,
            new_status=data.status,
            rejection_reason=data.rejection_reason,
            notes=data.notes,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return apply_result_status(result, response)


@router.post('/{appointment_id}/cancel', response_model=OperationResult)
def cancel_my_appointment(
    appointment_id: int,
    response: Response,
    caller: CallerContext = Depends(require_requester),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        result = transitions.cancel_appointment(db, appointment_id, caller.user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return apply_result_status(result, response)
