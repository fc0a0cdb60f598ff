from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """
    Claim set carried by every bearer token.

    Field aliases are the JWT member names used on the wire. Unknown members
    are rejected, as are members with the wrong JSON type.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    subject: StrictStr = Field(..., alias="sub", min_length=1)
    issued_at: StrictInt = Field(..., alias="iat")
    expires_at: StrictInt = Field(..., alias="exp")
    is_refresh: StrictBool = Field(..., alias="refresh")

    @property
    def expires_at_dt(self) -> datetime:
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


def classify(claims: TokenClaims) -> TokenKind:
    return TokenKind.REFRESH if claims.is_refresh else TokenKind.ACCESS


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
