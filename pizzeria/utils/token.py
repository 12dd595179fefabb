from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlmodel import Session

from pizzeria.config import settings
from pizzeria.database import get_session
from pizzeria.models.user import User

# tokens are issued by /auth/login
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    claims = dict(data)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims["exp"] = datetime.utcnow() + lifetime
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def token_for(user: User) -> str:
    return create_access_token({"user_id": user.id, "role": user.role})


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session)
) -> User:
    payload = decode_access_token(token)
    if payload is None:
        raise _unauthorized("Could not validate credentials")

    user_id = payload.get("user_id") or payload.get("sub")
    try:
        user = session.get(User, int(user_id)) if user_id is not None else None
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")

    if user is None:
        raise _unauthorized("User not found")

    if not user.can_login:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled"
        )

    return user
