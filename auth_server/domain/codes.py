from __future__ import annotations

from enum import Enum


class CodeNamespace(str, Enum):
    OTP = "otp"
    PASSWORD_RESET = "pwd_reset"


class ConsumeResult(str, Enum):
    OK = "ok"
    EXPIRED = "expired"  # never issued, already consumed, burned or TTL-expired
    MISMATCH = "mismatch"

    @property
    def ok(self) -> bool:
        return self is ConsumeResult.OK


def phone_destination(country_code: str, phone_number: str) -> str:
    """Delivery address for an OTP text: country code followed by the number."""
    return f"{country_code.strip()}{phone_number.strip()}"


def email_subject(email: str) -> str:
    return email.strip().lower()
