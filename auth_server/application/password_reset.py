import logging

from auth_server.application.verification_codes import VerificationCodeStore
from auth_server.domain.codes import CodeNamespace, email_subject
from auth_server.domain.errors import DeliveryFailed, InvalidCode
from auth_server.domain.ports.delivery_port import DeliveryPort
from auth_server.domain.ports.password_hasher import PasswordHasherPort
from auth_server.domain.ports.user_directory import UserDirectoryPort

logger = logging.getLogger("auth_server.application.password_reset")


async def request_password_reset(
    directory: UserDirectoryPort,
    codes: VerificationCodeStore,
    delivery: DeliveryPort,
    email: str,
) -> None:
    """
    Issue and deliver a reset code. Unknown addresses are answered the same
    way as known ones, only without a code being issued. A failed delivery
    is logged and leaves the code valid; the caller may ask again.
    """
    subject = email_subject(email)
    user = await directory.find_by_email(subject)
    if user is None:
        logger.info("password reset requested for unknown account")
        return
    code = await codes.issue(CodeNamespace.PASSWORD_RESET, subject)
    try:
        await delivery.deliver(
            destination=subject, code=code, purpose="password_reset"
        )
    except DeliveryFailed as e:
        logger.error(
            "reset code delivery failed", extra={"user_id": user.id, "error": str(e)}
        )


async def reset_password(
    directory: UserDirectoryPort,
    codes: VerificationCodeStore,
    hasher: PasswordHasherPort,
    email: str,
    code: str,
    new_password: str,
) -> None:
    subject = email_subject(email)
    result = await codes.consume(CodeNamespace.PASSWORD_RESET, subject, code)
    if not result.ok:
        raise InvalidCode()
    user = await directory.find_by_email(subject)
    if user is None:
        raise InvalidCode()
    await directory.set_password_hash(user.id, hasher.hash(new_password))
    logger.info("password reset completed", extra={"user_id": user.id})
