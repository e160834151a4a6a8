# vedic_api/core/config.py
import os
from datetime import timedelta
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr

# .env is read once, before any setting is resolved; real env vars win
load_dotenv()

# Fixed lifetimes, not configurable per call
ACCESS_TOKEN_LIFETIME = timedelta(hours=24)
REFRESH_TOKEN_LIFETIME = timedelta(days=7)


def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'vedic.db')}")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class TokenSettings(BaseModel):
    """Immutable signing context handed to the token components at construction."""

    model_config = ConfigDict(frozen=True)

    secret_key: SecretStr
    issuer: str
    audience: str
    algorithm: str = "HS256"
    access_token_lifetime: timedelta = ACCESS_TOKEN_LIFETIME
    refresh_token_lifetime: timedelta = REFRESH_TOKEN_LIFETIME


class Settings(BaseModel):
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: SecretStr = Field(
        default_factory=lambda: SecretStr(os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET_AT_LEAST_32_BYTES"))
    )
    JWT_ISSUER: str = Field(default_factory=lambda: os.getenv("JWT_ISSUER", "VedicAPI"))
    JWT_AUDIENCE: str = Field(default_factory=lambda: os.getenv("JWT_AUDIENCE", "VedicAI"))
    ALGORITHM: str = "HS256"
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_flag("RUN_MIGRATIONS_ON_STARTUP", "true"))
    CORS_ALLOW_ORIGINS: list[str] = Field(
        default_factory=lambda: [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
    )

    def token_settings(self) -> TokenSettings:
        return TokenSettings(
            secret_key=self.SECRET_KEY,
            issuer=self.JWT_ISSUER,
            audience=self.JWT_AUDIENCE,
            algorithm=self.ALGORITHM,
        )


settings = Settings()
