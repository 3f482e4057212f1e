"""Application configuration using pydantic-settings."""

from typing import Any

from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from services.credential_manager import CREDENTIAL_KEYS, get_credential


class KeychainSettingsSource(PydanticBaseSettingsSource):
    """Load credential fields from the system keychain via ``keyring``.

    Only fields whose uppercase name appears in
    :data:`~services.credential_manager.CREDENTIAL_KEYS` are looked up.
    All other fields return ``None`` so the next source in the chain
    handles them.
    """

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        env_name = field_name.upper()
        if env_name not in CREDENTIAL_KEYS:
            return None, field_name, False
        value = get_credential(env_name)
        return value, field_name, False

    def __call__(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        for field_name, field_info in self.settings_cls.model_fields.items():
            value, key, is_complex = self.get_field_value(field_info, field_name)
            if value is not None:
                d[key] = value
        return d


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            KeychainSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    # Database
    DATABASE_URL: str = "sqlite:///./kite_sync.db"

    # Kite Connect credentials
    KITE_API_KEY: str = ""
    KITE_API_SECRET: str = ""

    # Kite Connect endpoints
    KITE_LOGIN_URL: str = "https://kite.zerodha.com/connect/login"
    KITE_API_URL: str = "https://api.kite.trade"
    KITE_REQUEST_TIMEOUT: float = 30.0

    # Daily batch sync (local time of the scheduler process)
    SYNC_SCHEDULE_HOUR: int = 3
    SYNC_SCHEDULE_MINUTE: int = 0

    @field_validator("KITE_API_URL", "KITE_LOGIN_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing ``/`` so endpoint paths can be appended directly."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("SYNC_SCHEDULE_HOUR")
    @classmethod
    def validate_schedule_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError(f"SYNC_SCHEDULE_HOUR must be between 0 and 23, got {v}")
        return v

    @field_validator("SYNC_SCHEDULE_MINUTE")
    @classmethod
    def validate_schedule_minute(cls, v: int) -> int:
        if not 0 <= v <= 59:
            raise ValueError(f"SYNC_SCHEDULE_MINUTE must be between 0 and 59, got {v}")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"


settings = Settings()
