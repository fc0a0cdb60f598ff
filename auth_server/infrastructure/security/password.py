from __future__ import annotations

import logging

from passlib.context import CryptContext

from auth_server.domain.ports.password_hasher import PasswordHasherPort
from auth_server.settings import get_settings

logger = logging.getLogger("auth_server.infrastructure.security.password")

# One global context; bcrypt is the only scheme we use.
_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str, *, rounds: int | None = None) -> str:
    """
    Hash a password using bcrypt. If rounds is None, use settings.bcrypt_rounds.
    """
    if rounds is None:
        rounds = int(get_settings().bcrypt_rounds)
    return _pwd.hash(plain, rounds=rounds)


def verify_password(plain: str, password_hash: str) -> bool:
    """
    Verify a password against its bcrypt hash (safe timing).
    A stored value that is not a recognizable hash never matches.
    """
    try:
        return _pwd.verify(plain, password_hash)
    except ValueError:
        logger.warning("stored password hash is not a recognized bcrypt hash")
        return False


class BcryptPasswordHasher(PasswordHasherPort):
    def __init__(self, *, rounds: int | None = None) -> None:
        self._rounds = rounds

    def hash(self, plain: str) -> str:
        return hash_password(plain, rounds=self._rounds)

    def verify(self, password_hash: str, plain: str) -> bool:
        return verify_password(plain, password_hash)
