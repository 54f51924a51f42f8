from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scheduler.auth.dependencies import CallerContext, require_representative
from scheduler.routes.common import DATABASE_UNAVAILABLE_DETAIL, apply_result_status, ensure_database_ready, get_db
from scheduler.schemas import OperationResult, ProfileFieldUpdate, RepresentativeDirectoryEntry, RepresentativeProfile
from scheduler.services import representatives

router = APIRouter(tags=['representatives'])


class UpdateProfileRequest(BaseModel):
    updates: list[ProfileFieldUpdate]


@router.get('', response_model=list[RepresentativeDirectoryEntry])
def list_representatives(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return representatives.list_representatives_with_availability(db)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.get('/me', response_model=RepresentativeProfile)
def get_my_profile(
    caller: CallerContext = Depends(require_representative),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        representative = representatives.get_representative_by_user_id(db, caller.user_id)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if representative is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Representative not found.')

    return representative


@router.patch('/me', response_model=OperationResult)
def update_my_profile(
    data: UpdateProfileRequest,
    response: Response,
    caller: CallerContext = Depends(require_representative),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        result = representatives.update_representative_profile(db, caller.representative_id, data.updates)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    return apply_result_status(result, response)
