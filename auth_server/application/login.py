from auth_server.domain.codes import email_subject
from auth_server.domain.errors import InvalidCredentials
from auth_server.domain.ports.password_hasher import PasswordHasherPort
from auth_server.domain.ports.user_directory import UserDirectoryPort
from auth_server.domain.tokens import TokenPair
from auth_server.infrastructure.security.tokens import TokenIssuer


async def login(
    directory: UserDirectoryPort,
    hasher: PasswordHasherPort,
    issuer: TokenIssuer,
    email: str,
    password: str,
) -> TokenPair:
    user = await directory.find_by_email(email_subject(email))
    if user is None or not user.password_hash:
        # spend one hash so unknown accounts take as long as wrong passwords
        hasher.hash(password)
        raise InvalidCredentials()
    if not hasher.verify(user.password_hash, password):
        raise InvalidCredentials()
    return issuer.issue_pair(user.id)
