import logging

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from taskberry.database import get_db
from taskberry.models.user import User, UserStatus
from taskberry.schemas.user import UserRegister, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    """Create an account that waits for super admin approval"""
    email = user.email.lower()
    existing_user = db.query(User).filter(func.lower(User.email) == email).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = User(
        name=user.name,
        email=email,
        avatar_url=user.avatar_url,
        status=UserStatus.pending_approval.value,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id} ({email}), pending approval")
    return new_user
