from fastapi import APIRouter, Depends
from sqlmodel import Session

from pizzeria.config import settings
from pizzeria.database import get_session
from pizzeria.models.user import User
from pizzeria.schemas.user_schemas import UserLogin, UserRegister, VerifyOtpRequest
from pizzeria.services import auth_service
from pizzeria.services.otp_service import OtpSender, get_otp_sender
from pizzeria.utils.responses import success
from pizzeria.utils.token import token_for

router = APIRouter()


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "is_verified": user.is_verified,
    }


@router.post("/register", status_code=201)
def register(
    data: UserRegister,
    session: Session = Depends(get_session),
    sender: OtpSender = Depends(get_otp_sender)
):
    user = auth_service.register_user(session, data, sender, settings)
    channel = "email" if user.email else "phone"
    return success(serialize_user(user), f"User registered. OTP sent to {channel}.")


@router.post("/verify-otp")
def verify_otp(
    data: VerifyOtpRequest,
    session: Session = Depends(get_session)
):
    user = auth_service.verify_user(session, data.email, data.phone, data.otp)
    return success(serialize_user(user), "OTP verified successfully. You can now log in.")


@router.post("/login")
def login(
    data: UserLogin,
    session: Session = Depends(get_session)
):
    user = auth_service.authenticate(session, data.email, data.phone, data.password)
    return success(
        {
            "access_token": token_for(user),
            "token_type": "bearer",
            "user": serialize_user(user),
        },
        "Login successful",
    )
