from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str | None = None
    password_hash: str | None = None


class UserDirectoryPort(Protocol):
    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Return the user owning `email` (normalized, lower-case) or None."""

    async def find_by_phone(
        self, country_code: str, phone_number: str
    ) -> Optional[UserRecord]:
        """Return the user registered with this phone number or None."""

    async def set_password_hash(self, user_id: str, password_hash: str) -> None:
        """Replace the stored password hash of `user_id`."""
