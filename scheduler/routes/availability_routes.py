from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scheduler.auth.dependencies import CallerContext, require_representative
from scheduler.routes.common import DATABASE_UNAVAILABLE_DETAIL, apply_result_status, ensure_database_ready, get_db
from scheduler.schemas import AvailabilityResponse, BreakTime, DaySlotsResponse, OperationResult
from scheduler.services import availability_store, slots
from scheduler.services.clock import parse_date

router = APIRouter(tags=['availability'])


class SetAvailabilityRequest(BaseModel):
    start_time: str
    end_time: str
    slot_duration: int
    break_times: list[BreakTime] = []

    @field_validator('start_time', 'end_time')
    @classmethod
    def strip_times(cls, value: str) -> str:
        return value.strip()


def validate_date_query(value: str) -> str:
    try:
        parse_date(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return value


@router.get('/{representative_id}', response_model=list[AvailabilityResponse])
def get_availability(representative_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return availability_store.get_availability(db, representative_id)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.put('/me/days/{day_of_week}', response_model=OperationResult)
def set_availability(
    day_of_week: int,
    data: SetAvailabilityRequest,
    response: Response,
    caller: CallerContext = Depends(require_representative),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        result = availability_store.set_availability(
            db,
            representative_id=caller.representative_id,
            day_of_week=day_of_week,
            start_time=data.start_time,
            end_time=data.end_time,
            slot_duration=data.slot_duration,
            break_times=data.break_times,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    success_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return apply_result_status(result, response, success_code)


@router.delete('/me/days/{day_of_week}', response_model=OperationResult)
def delete_availability(
    day_of_week: int,
    response: Response,
    caller: CallerContext = Depends(require_representative),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        result = availability_store.delete_availability(db, caller.representative_id, day_of_week)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return apply_result_status(result, response)


@router.get('/{representative_id}/slots', response_model=list[str])
def list_slots(
    representative_id: int,
    date: str = Query(...),
    db: Session = Depends(get_db),
):
    requested_date = validate_date_query(date)
    ensure_database_ready()

    try:
        return slots.list_slots(db, representative_id, requested_date)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/{representative_id}/day', response_model=DaySlotsResponse)
def describe_day(
    representative_id: int,
    date: str = Query(...),
    db: Session = Depends(get_db),
):
    requested_date = validate_date_query(date)
    ensure_database_ready()

    try:
        return slots.describe_day(db, representative_id, requested_date)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
