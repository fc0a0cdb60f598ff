from typing import Protocol


class PasswordHasherPort(Protocol):
    def hash(self, plain: str) -> str:
        """Hash a plaintext password."""

    def verify(self, password_hash: str, plain: str) -> bool:
        """True if `plain` matches `password_hash`."""
