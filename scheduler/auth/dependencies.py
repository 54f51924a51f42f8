from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from scheduler.auth import jwt_handler
from scheduler.models.representative import Representative
from scheduler.models.user import REPRESENTATIVE_ROLE, USER_ROLE, User
from scheduler.routes.common import get_db

security = HTTPBearer()


class CallerContext(BaseModel):
    """Verified identity handed to the core as an explicit parameter."""

    user_id: int
    email: str
    role: str
    representative_id: int | None = None


def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> CallerContext:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    email = payload.get("sub")
    if not email:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    representative_id = None
    if user.role == REPRESENTATIVE_ROLE:
        representative = db.query(Representative).filter(Representative.user_id == user.id).first()
        if representative is None:
            raise HTTPException(status_code=403, detail="Representative profile not found")
        representative_id = representative.id

    return CallerContext(user_id=user.id, email=user.email, role=user.role, representative_id=representative_id)


def require_representative(caller: CallerContext = Depends(get_current_caller)) -> CallerContext:
    if caller.role != REPRESENTATIVE_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only representatives can do this.")
    return caller


def require_requester(caller: CallerContext = Depends(get_current_caller)) -> CallerContext:
    if caller.role != USER_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only users can do this.")
    return caller
