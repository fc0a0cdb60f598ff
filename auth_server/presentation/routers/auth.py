from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from auth_server.application.login import login
from auth_server.application.password_reset import (
    request_password_reset,
    reset_password,
)
from auth_server.application.phone_login import request_phone_otp, verify_phone_otp
from auth_server.application.refresh_token import refresh_access_token
from auth_server.application.verification_codes import VerificationCodeStore
from auth_server.domain.errors import (
    AuthorizationDenied,
    InvalidCode,
    InvalidCredentials,
    TokenError,
)
from auth_server.domain.ports.delivery_port import DeliveryPort
from auth_server.domain.ports.password_hasher import PasswordHasherPort
from auth_server.domain.ports.user_directory import UserDirectoryPort
from auth_server.infrastructure.security.tokens import TokenIssuer, TokenVerifier
from auth_server.presentation.dependencies import (
    get_code_store,
    get_delivery,
    get_password_hasher,
    get_token_issuer,
    get_token_verifier,
    get_user_directory,
)
from auth_server.schemas.requests import (
    LoginIn,
    PhoneLoginIn,
    RefreshIn,
    RequestResetIn,
    ResetPasswordIn,
    VerifyPhoneOtpIn,
)
from auth_server.schemas.responses import (
    AcceptedOut,
    AccessTokenOut,
    OkOut,
    TokenPairOut,
)

router = APIRouter(prefix="/auth", tags=["Auth"])

Directory = Annotated[UserDirectoryPort, Depends(get_user_directory)]
Codes = Annotated[VerificationCodeStore, Depends(get_code_store)]
Delivery = Annotated[DeliveryPort, Depends(get_delivery)]
Hasher = Annotated[PasswordHasherPort, Depends(get_password_hasher)]
Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]
Verifier = Annotated[TokenVerifier, Depends(get_token_verifier)]


def _invalid_code() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="invalid code"
    )


@router.post("/login", response_model=TokenPairOut)
async def post_login(
    body: LoginIn, directory: Directory, hasher: Hasher, issuer: Issuer
):
    try:
        pair = await login(
            directory=directory,
            hasher=hasher,
            issuer=issuer,
            email=body.email,
            password=body.password,
        )
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials"
        )
    return TokenPairOut(
        access_token=pair.access_token, refresh_token=pair.refresh_token
    )


@router.post("/refresh", response_model=AccessTokenOut)
async def post_refresh(body: RefreshIn, verifier: Verifier, issuer: Issuer):
    try:
        access_token = refresh_access_token(verifier, issuer, body.refresh_token)
    except (TokenError, AuthorizationDenied):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AccessTokenOut(access_token=access_token)


@router.post("/request-reset", status_code=202, response_model=AcceptedOut)
async def post_request_reset(
    body: RequestResetIn, directory: Directory, codes: Codes, delivery: Delivery
):
    await request_password_reset(
        directory=directory, codes=codes, delivery=delivery, email=body.email
    )
    return AcceptedOut()


@router.post("/reset-password", response_model=OkOut)
async def post_reset_password(
    body: ResetPasswordIn, directory: Directory, codes: Codes, hasher: Hasher
):
    try:
        await reset_password(
            directory=directory,
            codes=codes,
            hasher=hasher,
            email=body.email,
            code=body.code,
            new_password=body.password,
        )
    except InvalidCode:
        raise _invalid_code()
    return OkOut()


@router.post("/phone-login", status_code=202, response_model=AcceptedOut)
async def post_phone_login(
    body: PhoneLoginIn, directory: Directory, codes: Codes, delivery: Delivery
):
    await request_phone_otp(
        directory=directory,
        codes=codes,
        delivery=delivery,
        country_code=body.country_code,
        phone_number=body.phone_number,
    )
    return AcceptedOut()


@router.post("/verify-phone-otp", response_model=TokenPairOut)
async def post_verify_phone_otp(
    body: VerifyPhoneOtpIn, directory: Directory, codes: Codes, issuer: Issuer
):
    try:
        pair = await verify_phone_otp(
            directory=directory,
            codes=codes,
            issuer=issuer,
            country_code=body.country_code,
            phone_number=body.phone_number,
            otp=body.otp,
        )
    except InvalidCode:
        raise _invalid_code()
    return TokenPairOut(
        access_token=pair.access_token, refresh_token=pair.refresh_token
    )
