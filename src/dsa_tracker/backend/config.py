"""Configuration management module"""
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

INSTANCE_PATH_ENV = "DSA_TRACKER_INSTANCE_PATH"


def get_instance_path() -> Path:
    """Get the current instance path from environment or default"""
    instance_path = os.environ.get(INSTANCE_PATH_ENV)
    if instance_path:
        return Path(instance_path).expanduser()
    return Path.home() / ".dsa_tracker"


def get_config_file() -> Path | None:
    """Get config file path if it exists"""
    config_file = get_instance_path() / "config.toml"
    if config_file.exists():
        return config_file
    return None


class Settings(BaseSettings):
    """System configuration settings

    Sources, highest priority first: constructor arguments, environment
    variables, ``.env``, ``config.toml`` in the instance directory.
    """

    # Application basic configuration
    app_name: str = "DSA Tracker"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database configuration
    database_url: str = "sqlite:///./data/dsa_tracker.db"

    # Authentication configuration
    secret_key: str = (
        "change-me-in-production-please-use-a-secure-random-key"
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Email service configuration
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_use_ssl: bool = False
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    smtp_from_name: str = "DSA Tracker"

    # Verification code configuration
    verification_code_expire_minutes: int = 10
    verification_code_length: int = Field(6, ge=4, le=10)

    # CORS configuration
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Server configuration
    server_host: str = "0.0.0.0"
    server_port: int = 3000

    # Logging configuration (console only when unset)
    log_dir: str | None = None

    # Third-party platform configuration
    leetcode_api_url: str = "https://leetcode-stats-api.herokuapp.com"
    codeforces_api_url: str = "https://codeforces.com/api"
    github_api_url: str = "https://api.github.com"
    github_token: str = ""
    platform_timeout_seconds: float = 10.0
    platform_max_retries: int = 2
    platform_retry_backoff_seconds: float = 0.5

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
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
        """Customize settings sources to include TOML file"""
        config_file = get_config_file()
        if config_file:
            toml_settings = TomlConfigSettingsSource(
                settings_cls, toml_file=config_file
            )
            return (
                init_settings,
                env_settings,
                dotenv_settings,
                toml_settings,
                file_secret_settings,
            )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @property
    def smtp_configured(self) -> bool:
        """Whether enough SMTP settings are present to send mail"""
        return bool(self.smtp_user and self.smtp_password)
