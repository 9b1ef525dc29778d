"""Configuration management for farewell_desk.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "AgendaSettings",
    "ChatSettings",
    "NotificationSettings",
    "FarewellDeskConfig",
]


class ChatSettings(BaseSettings):
    """Chat session timing and canned texts."""

    model_config = SettingsConfigDict(
        env_prefix="FAREWELL_DESK_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    inactivity_timeout_seconds: float = Field(default=20 * 60, gt=0)
    closing_delay_seconds: float = Field(default=3.0, ge=0)
    auto_reply_delay_seconds: float = Field(default=1.5, ge=0)

    system_sender_name: str = "System"
    bot_sender_name: str = "Staff"
    closing_text: str = "Chat closed due to inactivity."
    # {first_name} is replaced with the client's first name
    auto_reply_template: str = (
        "Hello, {first_name}! We received your message and one of our "
        "staff members will be with you shortly."
    )


class AgendaSettings(BaseSettings):
    """Farewell calendar settings."""

    model_config = SettingsConfigDict(
        env_prefix="FAREWELL_DESK_AGENDA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sweep_interval_seconds: float = Field(default=60.0, gt=0)
    release_grace_minutes: int = Field(default=30, ge=0)
    # Window in which a scheduled removal request falls back to "requested"
    request_promotion_window_minutes: int = Field(default=10, ge=0)


class NotificationSettings(BaseSettings):
    """Notification router settings."""

    model_config = SettingsConfigDict(
        env_prefix="FAREWELL_DESK_NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    retention_limit: int | None = Field(default=None, gt=0)


class FarewellDeskConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = FarewellDeskConfig()
        timeout = config.chat.inactivity_timeout_seconds
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    chat: ChatSettings = ChatSettings()
    agenda: AgendaSettings = AgendaSettings()
    notifications: NotificationSettings = NotificationSettings()
