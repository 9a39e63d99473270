"""
Unit tests for API request/response models.

Tests Pydantic model validation for signup, verification and signin.
"""

import pytest
from pydantic import ValidationError

from otpgate.api.models import SigninRequest, SignupRequest, VerifyMailRequest


class TestSignupRequest:
    """Tests for SignupRequest model."""

    def test_valid_signup_request(self) -> None:
        request = SignupRequest(username="alice_01", email="a@example.com", password="Passw0rd")
        assert request.username == "alice_01"
        assert request.email == "a@example.com"

    @pytest.mark.parametrize("username", ["ab", "a" * 31, "alice!", "al ice", "ali-ce", ""])
    def test_invalid_usernames_rejected(self, username: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SignupRequest(username=username, email="a@example.com", password="Passw0rd")
        assert "username" in str(exc_info.value)

    @pytest.mark.parametrize("username", ["abc", "a" * 30, "A_1"])
    def test_boundary_usernames_accepted(self, username: str) -> None:
        assert SignupRequest(username=username, email="a@example.com", password="Passw0rd")

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SignupRequest(username="alice", email="not-an-email", password="Passw0rd")
        assert "email" in str(exc_info.value)

    @pytest.mark.parametrize(
        "password",
        [
            "Pa1",  # too short
            "passw0rd",  # no uppercase
            "PASSW0RD",  # no lowercase
            "Password",  # no digit
            "Aa1" + "x" * 98,  # too long
        ],
    )
    def test_weak_passwords_rejected(self, password: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SignupRequest(username="alice", email="a@example.com", password=password)
        assert "password" in str(exc_info.value)

    def test_missing_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SignupRequest(username="alice")  # type: ignore[call-arg]


class TestVerifyMailRequest:
    """Tests for VerifyMailRequest model."""

    def test_otp_field(self) -> None:
        request = VerifyMailRequest(email="a@example.com", otp="123456")
        assert request.otp == "123456"

    def test_otp_entered_alias(self) -> None:
        request = VerifyMailRequest.model_validate({"email": "a@example.com", "otpEntered": "123456"})
        assert request.otp == "123456"

    def test_empty_otp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VerifyMailRequest(email="a@example.com", otp="")


class TestSigninRequest:
    """Tests for SigninRequest model."""

    def test_valid(self) -> None:
        request = SigninRequest(username="alice", password="x")
        assert request.password == "x"

    def test_bad_username_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SigninRequest(username="a!", password="Passw0rd")
