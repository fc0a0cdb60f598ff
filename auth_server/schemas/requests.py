from pydantic import BaseModel, EmailStr, Field


class LoginIn(BaseModel):
    email: EmailStr = Field(..., description="The email of the user", max_length=255)
    password: str = Field(..., description="The password of the user", min_length=1)


class RefreshIn(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class RequestResetIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)


class ResetPasswordIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    code: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., description="The new password", min_length=6)


class PhoneLoginIn(BaseModel):
    country_code: str = Field(..., min_length=1, max_length=8)
    phone_number: str = Field(..., min_length=1, max_length=32)


class VerifyPhoneOtpIn(PhoneLoginIn):
    otp: str = Field(..., min_length=1, max_length=32)
