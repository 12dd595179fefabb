# pizzeria/services/auth_service.py
import logging
import re
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from pizzeria.config import Settings, settings as default_settings
from pizzeria.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from pizzeria.models.user import User
from pizzeria.schemas.user_schemas import UserRegister
from pizzeria.services.otp_service import OtpSender, check_otp, issue_otp
from pizzeria.utils.hash import hash_password, verify_password

logger = logging.getLogger(__name__)

# at least one lowercase, one uppercase and one digit, 8+ characters
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")


def _normalize_email(email: Optional[str]) -> Optional[str]:
    return str(email).strip().lower() if email else None


def find_user(session: Session, email: Optional[str] = None, phone: Optional[str] = None) -> Optional[User]:
    email = _normalize_email(email)
    if not email and not phone:
        raise ValidationError("Email or phone is required")

    conditions = []
    if email:
        conditions.append(User.email == email)
    if phone:
        conditions.append(User.phone == phone)
    return session.exec(select(User).where(or_(*conditions))).first()


def _get_user(session: Session, email: Optional[str], phone: Optional[str]) -> User:
    user = find_user(session, email, phone)
    if not user:
        raise NotFoundError("User not found")
    return user


def register_user(
    session: Session,
    data: UserRegister,
    sender: OtpSender,
    config: Settings = default_settings,
) -> User:
    """Create an unverified account and send it a one-time code."""
    email = _normalize_email(data.email)
    if not email and not data.phone:
        raise ValidationError("Name, password, and email or phone required.")

    if not PASSWORD_PATTERN.match(data.password):
        raise ValidationError(
            "Password must include uppercase, lowercase, number and be at least 8 characters."
        )

    if find_user(session, email, data.phone):
        raise ValidationError("User already exists.")

    user = User(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=email,
        phone=data.phone,
        password=hash_password(data.password),
    )
    otp = issue_otp(user, config)
    session.add(user)
    session.commit()
    session.refresh(user)

    channel = "email" if email else "phone"
    sender.send(user, otp, channel)
    logger.info(f"Registered user {user.id}, OTP sent via {channel}")
    return user


def verify_user(
    session: Session,
    email: Optional[str],
    phone: Optional[str],
    otp: str,
    now: Optional[datetime] = None,
) -> User:
    user = _get_user(session, email, phone)
    check_otp(user, otp, now)

    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"User {user.id} verified")
    return user


def authenticate(session: Session, email: Optional[str], phone: Optional[str], password: str) -> User:
    user = _get_user(session, email, phone)

    if not user.password or not verify_password(password, user.password):
        logger.info(f"Failed login for user {user.id}")
        raise AuthenticationError("Invalid credentials")

    if not user.is_verified:
        raise PermissionDeniedError("Please verify OTP before logging in")

    if not user.can_login:
        raise PermissionDeniedError("User account is disabled")

    return user
