import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.roles import ROLE_COACH
from app.core.security import create_access_token, hash_password, verify_password
from app.db.session import get_db
from app.models.coach import Coach
from app.schemas.auth import LoginRequest, RegisterRequest, TokenOut

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    email = data.email.lower().strip()
    if db.query(Coach).filter_by(email=email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    coach = Coach(
        email=email,
        password_hash=hash_password(data.password),
        name=data.name.strip(),
        role=ROLE_COACH,
    )
    db.add(coach)
    db.commit()
    db.refresh(coach)

    logger.info("Registered coach %s", coach.id)
    return {"ok": True, "coach_id": coach.id}


@router.post("/login", response_model=TokenOut)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    coach = db.query(Coach).filter(Coach.email == data.email.lower().strip()).first()

    if not coach or not verify_password(data.password, coach.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": str(coach.id), "role": coach.role})
    return TokenOut(access_token=token)
