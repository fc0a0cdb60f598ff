"""
Per-request bearer token gate.

A GateDecision starts UNAUTHENTICATED and moves exactly once to ADMITTED or
REJECTED. Callers only ever see "not authenticated"; the precise reason is
kept on the decision and in the logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, HTTPException, Request, status

from auth_server.domain.errors import (
    AuthorizationDenied,
    DomainError,
    ExpiredToken,
    InvalidToken,
)
from auth_server.domain.tokens import TokenKind
from auth_server.infrastructure.security.tokens import TokenVerifier

logger = logging.getLogger("auth_server.presentation.auth_gate")

UNAUTHENTICATED_DETAIL = "not authenticated"


class GateState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    ADMITTED = "admitted"
    REJECTED = "rejected"


@dataclass
class GateDecision:
    state: GateState = GateState.UNAUTHENTICATED
    subject: str | None = None
    reason: str | None = None
    error: DomainError | None = None

    def admit(self, subject: str) -> "GateDecision":
        self._ensure_pending()
        self.state = GateState.ADMITTED
        self.subject = subject
        return self

    def reject(self, reason: str, error: DomainError) -> "GateDecision":
        self._ensure_pending()
        self.state = GateState.REJECTED
        self.reason = reason
        self.error = error
        return self

    def _ensure_pending(self) -> None:
        if self.state is not GateState.UNAUTHENTICATED:
            raise RuntimeError(f"gate decision is already {self.state.value}")


class AuthorizationGate:
    def __init__(self, verifier: TokenVerifier) -> None:
        self._verifier = verifier

    def evaluate(self, authorization: str | None) -> GateDecision:
        decision = GateDecision()
        if not authorization:
            return decision.reject(
                "missing_credentials", InvalidToken("missing credentials")
            )

        scheme, _, token = authorization.partition(" ")
        if scheme != "Bearer" or not token or " " in token:
            return decision.reject(
                "malformed_header", InvalidToken("malformed authorization header")
            )

        try:
            claims = self._verifier.verify_kind(token, TokenKind.ACCESS)
        except ExpiredToken as exc:
            return decision.reject("expired_token", exc)
        except InvalidToken as exc:
            return decision.reject("invalid_token", exc)
        except AuthorizationDenied as exc:
            return decision.reject("authorization_denied", exc)
        return decision.admit(claims.subject)


def get_authorization_gate(request: Request) -> AuthorizationGate:
    return AuthorizationGate(request.app.state.token_verifier)


async def require_access_token(
    request: Request,
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> str:
    """Dependency for protected routes; returns the verified subject."""
    decision = gate.evaluate(request.headers.get("Authorization"))
    if decision.state is not GateState.ADMITTED:
        logger.info(
            "request rejected by authorization gate",
            extra={"reason": decision.reason, "path": request.url.path},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHENTICATED_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.subject = decision.subject
    return decision.subject
