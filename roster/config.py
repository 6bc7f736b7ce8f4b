import os
import re
import threading
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()

ASYNC_DATABASE_SCHEMES = frozenset({"sqlite+aiosqlite", "postgresql+asyncpg"})
COMMUNITY_NUMBER_PATTERN = re.compile(r"^[1-9]\d{3}$")


class Settings(BaseModel):
    app_name: str = Field(default="Community Roster")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    database_url: str = Field(default="sqlite+aiosqlite:///:memory:")
    community_number_max_attempts: int = Field(default=2000)
    community_id_prefix: str = Field(default="SRP")
    bootstrap_director_email: str = Field(default="director@roster.local")
    bootstrap_director_password: str | None = Field(default=None)
    bootstrap_community_number: str = Field(default="4521")

    @classmethod
    def from_env(cls) -> "Settings":
        database_url = os.getenv(
            "DATABASE_URL", cls.model_fields["database_url"].default
        ).strip()
        if not database_url:
            raise ValueError("DATABASE_URL must not be empty")

        parsed_db = urlparse(database_url)
        if parsed_db.scheme not in ASYNC_DATABASE_SCHEMES:
            raise ValueError(
                "DATABASE_URL must use an async driver: "
                + ", ".join(sorted(ASYNC_DATABASE_SCHEMES))
            )
        if parsed_db.scheme == "postgresql+asyncpg" and not parsed_db.hostname:
            raise ValueError("DATABASE_URL must include hostname")

        raw_attempts = os.getenv(
            "COMMUNITY_NUMBER_MAX_ATTEMPTS",
            str(cls.model_fields["community_number_max_attempts"].default),
        ).strip()
        try:
            community_number_max_attempts = int(raw_attempts)
        except ValueError as exc:
            raise ValueError("COMMUNITY_NUMBER_MAX_ATTEMPTS must be an integer") from exc
        if community_number_max_attempts <= 0:
            raise ValueError("COMMUNITY_NUMBER_MAX_ATTEMPTS must be greater than 0")

        community_id_prefix = os.getenv(
            "COMMUNITY_ID_PREFIX", cls.model_fields["community_id_prefix"].default
        ).strip()
        if not community_id_prefix:
            raise ValueError("COMMUNITY_ID_PREFIX must not be empty")

        bootstrap_community_number = os.getenv(
            "BOOTSTRAP_COMMUNITY_NUMBER",
            cls.model_fields["bootstrap_community_number"].default,
        ).strip()
        if not COMMUNITY_NUMBER_PATTERN.match(bootstrap_community_number):
            raise ValueError("BOOTSTRAP_COMMUNITY_NUMBER must be a 4-digit number")

        bootstrap_director_password = os.getenv("BOOTSTRAP_DIRECTOR_PASSWORD", "").strip() or None

        return cls(
            app_name=os.getenv("APP_NAME", cls.model_fields["app_name"].default),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", cls.model_fields["log_level"].default).upper(),
            database_url=database_url,
            community_number_max_attempts=community_number_max_attempts,
            community_id_prefix=community_id_prefix,
            bootstrap_director_email=os.getenv(
                "BOOTSTRAP_DIRECTOR_EMAIL",
                cls.model_fields["bootstrap_director_email"].default,
            ).strip().lower(),
            bootstrap_director_password=bootstrap_director_password,
            bootstrap_community_number=bootstrap_community_number,
        )


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get settings instance, creating it on first access.

    The module can be imported without environment validation; values are
    read and checked the first time they are needed.

    Returns:
        Settings instance

    Raises:
        ValueError: If an environment variable is invalid
    """
    global _settings_instance

    if _settings_instance is not None:
        return _settings_instance

    with _settings_lock:
        if _settings_instance is None:
            _settings_instance = Settings.from_env()

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
