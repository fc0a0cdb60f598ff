import logging

from auth_server.application.verification_codes import VerificationCodeStore
from auth_server.domain.codes import CodeNamespace, phone_destination
from auth_server.domain.errors import DeliveryFailed, InvalidCode
from auth_server.domain.ports.delivery_port import DeliveryPort
from auth_server.domain.ports.user_directory import UserDirectoryPort
from auth_server.domain.tokens import TokenPair
from auth_server.infrastructure.security.tokens import TokenIssuer

logger = logging.getLogger("auth_server.application.phone_login")


async def request_phone_otp(
    directory: UserDirectoryPort,
    codes: VerificationCodeStore,
    delivery: DeliveryPort,
    country_code: str,
    phone_number: str,
) -> None:
    """
    Issue an OTP bound to the account that owns the number and text it out.
    Unknown numbers and delivery failures are answered like a success.
    """
    user = await directory.find_by_phone(country_code, phone_number)
    if user is None:
        logger.info("phone login requested for unknown number")
        return
    code = await codes.issue(CodeNamespace.OTP, user.id)
    try:
        await delivery.deliver(
            destination=phone_destination(country_code, phone_number),
            code=code,
            purpose="phone_login",
        )
    except DeliveryFailed as e:
        logger.error(
            "otp delivery failed", extra={"user_id": user.id, "error": str(e)}
        )


async def verify_phone_otp(
    directory: UserDirectoryPort,
    codes: VerificationCodeStore,
    issuer: TokenIssuer,
    country_code: str,
    phone_number: str,
    otp: str,
) -> TokenPair:
    # keyed by user id: a code only ever mints tokens for the account it was sent to
    user = await directory.find_by_phone(country_code, phone_number)
    if user is None:
        raise InvalidCode()
    result = await codes.consume(CodeNamespace.OTP, user.id, otp)
    if not result.ok:
        raise InvalidCode()
    return issuer.issue_pair(user.id)
