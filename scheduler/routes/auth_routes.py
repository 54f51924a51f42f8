from fastapi import APIRouter, Depends

from scheduler.auth.dependencies import CallerContext, get_current_caller

router = APIRouter()


@router.get("/me", response_model=CallerContext)
def me(caller: CallerContext = Depends(get_current_caller)):
    return caller
