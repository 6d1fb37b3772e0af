"""Configuration for the reminder engine using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import PROJECT_ROOT

_ENV_FILE = PROJECT_ROOT / ".env"


class ReminderSettings(BaseSettings):
    """Configuration for reminder scheduling and push delivery.

    All settings are loaded from environment variables with the REMINDER_ prefix.

    :param vapid_private_key: VAPID private key used to sign push requests.
    :param vapid_public_key: VAPID public key handed to browsers on subscribe.
    :param vapid_subject: Contact URI sent as the VAPID "sub" claim.
    :param icon: Icon reference included in every notification.
    :param push_ttl_seconds: How long the push service may hold a message.
    :param push_timeout_seconds: HTTP timeout for a single endpoint send.
    :param endpoint_concurrency: Maximum parallel sends for one candidate.
    :param candidate_concurrency: Maximum candidates dispatched in parallel.
    :param pass_lease_seconds: Lifetime of the in-flight pass guard.
    :param interval_seconds: Delay between passes for the local driver.
    """

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    vapid_private_key: str | None = Field(
        default=None,
        description="VAPID private key (base64url or PEM)",
    )
    vapid_public_key: str | None = Field(
        default=None,
        description="VAPID public key for the subscription flow",
    )
    vapid_subject: str = Field(
        default="mailto:admin@externalbrain.app",
        description="VAPID subject claim",
    )
    icon: str = Field(
        default="/icon.svg",
        description="Icon reference for notifications",
    )
    push_ttl_seconds: int = Field(
        default=86400,
        ge=0,
        le=2419200,
        description="Web Push TTL in seconds",
    )
    push_timeout_seconds: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Per-endpoint HTTP timeout in seconds",
    )
    endpoint_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum parallel sends per candidate",
    )
    candidate_concurrency: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum candidates dispatched in parallel",
    )
    pass_lease_seconds: int = Field(
        default=300,
        ge=10,
        le=3600,
        description="TTL of the in-flight pass guard in seconds",
    )
    interval_seconds: int = Field(
        default=60,
        ge=5,
        le=3600,
        description="Seconds between passes for the local driver",
    )


@lru_cache
def get_reminder_settings() -> ReminderSettings:
    """Get cached reminder settings.

    Settings are loaded once and cached for the lifetime of the process.

    :returns: Configured ReminderSettings instance.
    """
    return ReminderSettings()
