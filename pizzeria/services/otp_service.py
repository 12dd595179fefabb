# pizzeria/services/otp_service.py
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Protocol

from pizzeria.config import Settings, settings as default_settings
from pizzeria.exceptions import ValidationError
from pizzeria.models.user import User

logger = logging.getLogger(__name__)

OTP_DIGITS = 6


class OtpSender(Protocol):
    def send(self, user: User, otp: str, channel: str) -> None:
        ...


class LoggingOtpSender:
    """Writes the code to the log instead of delivering it by email or SMS."""

    def send(self, user: User, otp: str, channel: str) -> None:
        destination = user.email if channel == "email" else user.phone
        logger.info(f"OTP for user {user.id} via {channel} ({destination}): {otp}")


def get_otp_sender() -> OtpSender:
    return LoggingOtpSender()


def generate_otp() -> str:
    return f"{secrets.randbelow(10 ** OTP_DIGITS):0{OTP_DIGITS}d}"


def issue_otp(user: User, config: Settings = default_settings, now: Optional[datetime] = None) -> str:
    """Put a fresh code on the user, replacing any earlier one. The caller commits."""
    now = now or datetime.utcnow()
    user.otp = generate_otp()
    user.otp_expires = now + timedelta(minutes=config.otp_expire_minutes)
    return user.otp


def check_otp(user: User, otp: str, now: Optional[datetime] = None) -> User:
    """
    Mark the user verified if `otp` matches the stored, unexpired code.

    A used code is cleared so it cannot be replayed.
    """
    if user.is_verified:
        raise ValidationError("User already verified", details={'user_id': user.id})

    now = now or datetime.utcnow()
    if (
        not user.otp
        or user.otp_expires is None
        or user.otp_expires < now
        or not secrets.compare_digest(user.otp, otp.strip())
    ):
        logger.info(f"Rejected OTP for user {user.id}")
        raise ValidationError("Invalid or expired OTP", details={'user_id': user.id})

    user.is_verified = True
    user.otp = None
    user.otp_expires = None
    return user
