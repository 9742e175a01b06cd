# taskberry/utils/auth.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from taskberry.config.settings import settings
from taskberry.database import get_db
from taskberry.models.user import Role, User, UserStatus
from taskberry.schemas.user import UserSnapshot
from taskberry.utils.directory import Directory

SECRET_KEY = settings.AUTH['secret_key']
ALGORITHM = settings.AUTH['algorithm']

# Tokens are issued by the identity service; this URL is only advertised in the OpenAPI docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.AUTH['access_token_expire_minutes'])
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify JWT token and return payload without raising exceptions"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = verify_token(token)
    if payload is None:
        raise credentials_exception
    email: str = payload.get("sub")
    if email is None:
        raise credentials_exception

    user = db.query(User).filter(User.email == email.lower()).first()
    if user is None:
        raise credentials_exception

    if user.status == UserStatus.pending_approval.value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is pending approval by an administrator.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.status != UserStatus.active.value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account has been suspended. Please contact administrator.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_directory(db: Session = Depends(get_db)) -> Directory:
    return Directory.from_session(db)


def get_actor(
    current_user: User = Depends(get_current_user),
    directory: Directory = Depends(get_directory),
) -> UserSnapshot:
    """The authenticated user as seen by the authorization engine"""
    actor = directory.resolve_actor(current_user)
    if actor is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")
    return actor


def get_super_admin(actor: UserSnapshot = Depends(get_actor)) -> UserSnapshot:
    if actor.role != Role.super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super admins can perform this action"
        )
    return actor
