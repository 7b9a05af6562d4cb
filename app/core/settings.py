from typing import Literal, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr, field_validator
from sqlalchemy.engine.url import URL

H1B_STATUSES = ("Pending", "Active", "Expired", "Revoked", "Inactive")

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_NAME: str = "H1B Customer API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["local", "dev", "staging", "prod"] = "local"
    DEBUG: bool = False
    API_PREFIX: str = ""
    CORS_ORIGINS: str = "*"      # CSV or '*'
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # DB
    DB_HOST: str = ""
    DB_PORT: int = 5432
    DB_USER: str = ""
    DB_PASSWORD: SecretStr = SecretStr("")
    DB_NAME: str = ""
    DB_POOL_SIZE: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_SSL: bool = False
    DB_CREATE_SCHEMA: bool = False

    # Customers
    DEFAULT_H1B_STATUS: str = "Pending"
    PAGE_SIZE: int = 10

    # -------- validators (presence, format) --------
    @field_validator("DB_PASSWORD")
    @classmethod
    def _required_secret(cls, v, info):
        if v is None or (hasattr(v, "get_secret_value") and v.get_secret_value() == ""):
            raise ValueError(f"{info.field_name} is required (set it in .env)")
        return v

    @field_validator("DB_HOST", "DB_USER", "DB_NAME")
    @classmethod
    def _required_plain(cls, v, info):
        if not v:
            raise ValueError(f"{info.field_name} is required (set it in .env)")
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def _normalize_prefix(cls, v: str) -> str:
        v = (v or "").strip().strip("/")
        return f"/{v}" if v else ""

    @field_validator("DB_POOL_SIZE", "DB_POOL_TIMEOUT", "PAGE_SIZE", "PORT")
    @classmethod
    def _positive(cls, v: int, info):
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("DEFAULT_H1B_STATUS")
    @classmethod
    def _known_status(cls, v: str) -> str:
        v = (v or "").strip().capitalize()
        if v not in H1B_STATUSES:
            raise ValueError(f"DEFAULT_H1B_STATUS must be one of {', '.join(H1B_STATUSES)}")
        return v

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        return ["*"] if self.CORS_ORIGINS.strip() == "*" else [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def DATABASE_URL(self) -> URL:
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD.get_secret_value(),
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

settings = Settings()
