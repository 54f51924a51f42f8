from fastapi import HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError

from scheduler.database import SessionLocal, ensure_appointment_schema, ensure_availability_schema
from scheduler.schemas import ErrorKind, OperationResult

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'

ERROR_STATUS_CODES = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION_FAILURE: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_database_ready() -> None:
    try:
        ensure_availability_schema()
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


def apply_result_status(result: OperationResult, response: Response, success_code: int = status.HTTP_200_OK) -> OperationResult:
    response.status_code = success_code if result.success else ERROR_STATUS_CODES[result.error]
    return result
