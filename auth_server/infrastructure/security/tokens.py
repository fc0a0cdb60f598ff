"""Issuing and verifying HS256 bearer tokens (compact JWS / JWT)."""

from __future__ import annotations

import binascii
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from jwt.utils import base64url_decode, base64url_encode
from pydantic import ValidationError

from auth_server.domain.errors import AuthorizationDenied, ExpiredToken, InvalidToken
from auth_server.domain.tokens import TokenClaims, TokenKind, TokenPair, classify
from auth_server.infrastructure.security.signer import Signer
from auth_server.settings import Settings

logger = logging.getLogger("auth_server.infrastructure.security.tokens")

DEFAULT_ACCESS_TTL = timedelta(hours=24)
DEFAULT_REFRESH_TTL = timedelta(days=7)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _b64_json(obj: dict) -> bytes:
    return base64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


class TokenIssuer:
    def __init__(
        self,
        signer: Signer,
        *,
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        clock: Clock = utc_now,
    ) -> None:
        self._signer = signer
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock
        self._header_b64 = _b64_json({"alg": signer.algorithm, "typ": "JWT"})

    @classmethod
    def from_settings(
        cls, signer: Signer, settings: Settings, *, clock: Clock = utc_now
    ) -> "TokenIssuer":
        return cls(
            signer,
            access_ttl=timedelta(seconds=settings.access_token_ttl_seconds),
            refresh_ttl=timedelta(seconds=settings.refresh_token_ttl_seconds),
            clock=clock,
        )

    def issue_access(self, subject: str) -> str:
        return self._issue(subject, refresh=False)

    def issue_refresh(self, subject: str) -> str:
        return self._issue(subject, refresh=True)

    def issue_pair(self, subject: str) -> TokenPair:
        """Both tokens or an exception; never a half-built pair."""
        access_token = self.issue_access(subject)
        refresh_token = self.issue_refresh(subject)
        logger.info("issued token pair", extra={"subject": subject})
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def _issue(self, subject: str, *, refresh: bool) -> str:
        if not subject:
            raise ValueError("subject is required")
        issued_at = int(self._clock().timestamp())
        ttl = self._refresh_ttl if refresh else self._access_ttl
        claims = TokenClaims(
            sub=subject,
            iat=issued_at,
            exp=issued_at + int(ttl.total_seconds()),
            refresh=refresh,
        )
        signing_input = self._header_b64 + b"." + _b64_json(claims.to_wire())
        signature = self._signer.sign(signing_input)
        return (signing_input + b"." + base64url_encode(signature)).decode("ascii")


class TokenVerifier:
    def __init__(self, signer: Signer, *, clock: Clock = utc_now) -> None:
        self._signer = signer
        self._clock = clock

    def verify(self, token: str) -> TokenClaims:
        """
        Parse and validate `token`.

        Raises InvalidToken for anything structurally wrong or not signed with
        the active secret, and ExpiredToken for a correctly signed token whose
        expiry is not in the future.
        """
        if not isinstance(token, str) or not token.isascii():
            raise InvalidToken("malformed token")
        if token.count(".") != 2:
            raise InvalidToken("malformed token")
        header_b64, payload_b64, signature_b64 = token.split(".")

        try:
            header = json.loads(base64url_decode(header_b64))
            signature = base64url_decode(signature_b64)
        except (ValueError, binascii.Error) as exc:
            raise InvalidToken("malformed token") from exc

        if not isinstance(header, dict):
            raise InvalidToken("unexpected token header")
        if header.get("alg") != self._signer.algorithm:
            raise InvalidToken("unexpected token header")
        if header.get("typ", "JWT") != "JWT":
            raise InvalidToken("unexpected token header")

        signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
        if not self._signer.verify(signing_input, signature):
            raise InvalidToken("signature mismatch")

        try:
            claims = TokenClaims.model_validate_json(base64url_decode(payload_b64))
        except (ValidationError, ValueError, binascii.Error) as exc:
            raise InvalidToken("token claims are invalid") from exc

        if claims.expires_at_dt <= self._clock():
            raise ExpiredToken("token has expired")
        return claims

    @staticmethod
    def classify(claims: TokenClaims) -> TokenKind:
        return classify(claims)

    def verify_kind(self, token: str, expected: TokenKind) -> TokenClaims:
        """verify() and then require the token to be of the `expected` kind."""
        claims = self.verify(token)
        if classify(claims) is not expected:
            raise AuthorizationDenied(f"{expected.value} token required")
        return claims
