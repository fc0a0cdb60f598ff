from auth_server.domain.tokens import TokenKind
from auth_server.infrastructure.security.tokens import TokenIssuer, TokenVerifier


def refresh_access_token(
    verifier: TokenVerifier, issuer: TokenIssuer, refresh_token: str
) -> str:
    """
    Mint a new access token from a refresh token.
    Access tokens are refused with AuthorizationDenied.
    """
    claims = verifier.verify_kind(refresh_token, TokenKind.REFRESH)
    return issuer.issue_access(claims.subject)
