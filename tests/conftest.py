import pytest

from auth_server.application.verification_codes import VerificationCodeStore
from auth_server.infrastructure.security.signer import Signer
from auth_server.infrastructure.security.tokens import TokenIssuer, TokenVerifier
from tests.fakes import (
    FakeClock,
    FakeCodeCache,
    FakeDelivery,
    FakeErroredCodeCache,
    FakeHasher,
    FakeUserDirectory,
    SECRET,
)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def signer():
    return Signer(SECRET)


@pytest.fixture()
def issuer(signer, clock):
    return TokenIssuer(signer, clock=clock)


@pytest.fixture()
def verifier(signer, clock):
    return TokenVerifier(signer, clock=clock)


@pytest.fixture()
def cache(clock):
    return FakeCodeCache(clock)


@pytest.fixture()
def errored_cache():
    return FakeErroredCodeCache()


@pytest.fixture()
def codes(cache):
    return VerificationCodeStore(cache)


@pytest.fixture()
def directory():
    return FakeUserDirectory(
        [
            {
                "id": "u1",
                "email": "jeremy@example.com",
                "password_hash": "hashed-s3cret",
                "country_code": "+1",
                "phone_number": "5551234567",
            }
        ]
    )


@pytest.fixture()
def hasher():
    return FakeHasher()


@pytest.fixture()
def delivery():
    return FakeDelivery()


@pytest.fixture()
def fixed_codes(monkeypatch):
    """
    Make generated codes deterministic: "111111", "222222", ...
    Returns the list of codes handed out so far.
    """
    from auth_server.domain import services as domain_services

    handed_out: list[str] = []

    def _next(length: int = 6) -> str:
        code = str(len(handed_out) + 1) * length
        handed_out.append(code)
        return code

    monkeypatch.setattr(domain_services, "generate_numeric_code", _next)
    return handed_out
