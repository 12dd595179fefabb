from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from pizzeria.exceptions import ValidationError
from pizzeria.main import app
from pizzeria.models.user import User
from pizzeria.services.otp_service import check_otp, generate_otp, get_otp_sender, issue_otp

PASSWORD = "Secret123"


class CapturingSender:
    def __init__(self):
        self.sent = []

    def send(self, user, otp, channel):
        self.sent.append({"user_id": user.id, "otp": otp, "channel": channel})

    @property
    def last_otp(self):
        return self.sent[-1]["otp"]


@pytest.fixture
def outbox(client):
    sender = CapturingSender()
    app.dependency_overrides[get_otp_sender] = lambda: sender
    return sender


def _register(client, **overrides):
    body = {
        "firstName": "Kamal",
        "lastName": "Silva",
        "email": "kamal@example.com",
        "password": PASSWORD,
    }
    body.update(overrides)
    return client.post("/auth/register", json=body)


def _verify(client, otp, email="kamal@example.com"):
    return client.post("/auth/verify-otp", json={"email": email, "otp": otp})


def _login(client, password=PASSWORD, email="kamal@example.com"):
    return client.post("/auth/login", json={"email": email, "password": password})


class TestRegister:

    def test_register_sends_otp(self, client, session, outbox):
        resp = _register(client, email="Kamal@Example.com")

        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "User registered. OTP sent to email."
        assert body["data"]["email"] == "kamal@example.com"
        assert body["data"]["is_verified"] is False
        assert "password" not in body["data"]

        assert len(outbox.sent) == 1
        assert outbox.sent[0]["channel"] == "email"
        assert len(outbox.last_otp) == 6 and outbox.last_otp.isdigit()

        user = session.exec(select(User).where(User.email == "kamal@example.com")).one()
        assert user.password != PASSWORD
        assert user.otp == outbox.last_otp
        expected = datetime.utcnow() + timedelta(minutes=10)
        assert abs((user.otp_expires - expected).total_seconds()) < 60

    def test_register_with_phone_only(self, client, outbox):
        resp = _register(client, email=None, phone="0712345678")

        assert resp.status_code == 201
        assert resp.json()["message"] == "User registered. OTP sent to phone."
        assert outbox.sent[0]["channel"] == "phone"

    def test_email_or_phone_required(self, client, outbox):
        resp = _register(client, email=None)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Name, password, and email or phone required."
        assert outbox.sent == []

    @pytest.mark.parametrize("password", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
    def test_weak_password(self, client, outbox, password):
        resp = _register(client, password=password)

        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Password must include uppercase, lowercase, number and be at least 8 characters."
        )

    def test_duplicate_user(self, client, outbox):
        _register(client)

        resp = _register(client, email="KAMAL@example.com")

        assert resp.status_code == 400
        assert resp.json()["message"] == "User already exists."
        assert len(outbox.sent) == 1


class TestVerifyOtp:

    def test_verify_then_login(self, client, outbox):
        _register(client)

        resp = _verify(client, outbox.last_otp)

        assert resp.status_code == 200
        assert resp.json()["message"] == "OTP verified successfully. You can now log in."
        assert resp.json()["data"]["is_verified"] is True

        resp = _login(client)
        assert resp.status_code == 200
        token = resp.json()["data"]["access_token"]

        me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["data"]["email"] == "kamal@example.com"

    def test_wrong_otp(self, client, outbox):
        _register(client)
        wrong = "000000" if outbox.last_otp != "000000" else "111111"

        resp = _verify(client, wrong)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid or expired OTP"

    def test_expired_otp(self, client, session, outbox):
        _register(client)
        user = session.exec(select(User).where(User.email == "kamal@example.com")).one()
        user.otp_expires = datetime.utcnow() - timedelta(minutes=1)
        session.add(user)
        session.commit()

        resp = _verify(client, outbox.last_otp)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid or expired OTP"

    def test_already_verified(self, client, outbox):
        _register(client)
        otp = outbox.last_otp
        _verify(client, otp)

        resp = _verify(client, otp)

        assert resp.status_code == 400
        assert resp.json()["message"] == "User already verified"

    def test_unknown_user(self, client):
        resp = _verify(client, "123456", email="nobody@example.com")

        assert resp.status_code == 404
        assert resp.json()["message"] == "User not found"


class TestLogin:

    def test_login_before_verification(self, client, outbox):
        _register(client)

        resp = _login(client)

        assert resp.status_code == 403
        assert resp.json() == {"success": False, "message": "Please verify OTP before logging in"}

    def test_wrong_password(self, client, outbox):
        _register(client)
        _verify(client, outbox.last_otp)

        resp = _login(client, password="Wrong1234")

        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    def test_unknown_user(self, client):
        resp = _login(client, email="nobody@example.com")

        assert resp.status_code == 404
        assert resp.json()["message"] == "User not found"

    def test_login_by_phone(self, client, outbox):
        _register(client, email=None, phone="0712345678")
        client.post("/auth/verify-otp", json={"phone": "0712345678", "otp": outbox.last_otp})

        resp = client.post("/auth/login", json={"phone": "0712345678", "password": PASSWORD})

        assert resp.status_code == 200
        assert resp.json()["data"]["token_type"] == "bearer"


class TestOtpRules:

    def test_generated_code_is_six_digits(self):
        for _ in range(20):
            otp = generate_otp()
            assert len(otp) == 6 and otp.isdigit()

    def test_code_valid_until_expiry(self):
        issued_at = datetime(2025, 1, 1, 12, 0)
        user = User(first_name="A", last_name="B", email="a@example.com")
        otp = issue_otp(user, now=issued_at)

        check_otp(user, otp, now=issued_at + timedelta(minutes=10))

        assert user.is_verified is True
        assert user.otp is None

    def test_code_rejected_after_expiry(self):
        issued_at = datetime(2025, 1, 1, 12, 0)
        user = User(first_name="A", last_name="B", email="a@example.com")
        otp = issue_otp(user, now=issued_at)

        with pytest.raises(ValidationError) as exc:
            check_otp(user, otp, now=issued_at + timedelta(minutes=10, seconds=1))

        assert exc.value.message == "Invalid or expired OTP"
        assert user.is_verified is False
