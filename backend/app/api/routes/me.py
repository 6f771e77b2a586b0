from fastapi import APIRouter, Depends

from app.core.security import get_current_coach
from app.models.coach import Coach

router = APIRouter(prefix="/api/v1", tags=["me"])


@router.get("/me")
def me(coach: Coach = Depends(get_current_coach)):
    return {
        "coach_id": coach.id,
        "email": coach.email,
        "name": coach.name,
        "role": coach.role,
    }
