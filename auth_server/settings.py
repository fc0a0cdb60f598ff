from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"

    # Infra
    redis_url: str = "redis://redis:6379/0"
    delivery_base_url: str = "http://delivery-gateway:8025"
    store_timeout_seconds: float = 2.0

    # Tokens
    jwt_secret: SecretStr | None = None
    access_token_ttl_seconds: int = 24 * 60 * 60
    refresh_token_ttl_seconds: int = 7 * 24 * 60 * 60

    # Verification codes
    otp_ttl_seconds: int = 5 * 60
    reset_code_ttl_seconds: int = 15 * 60
    code_length: int = 6
    code_max_attempts: int = 5

    # Security / policies
    bcrypt_rounds: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
