"""Delivery configuration using pydantic-settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class DeliverySettings(BaseSettings):
    """Settings for ProjectionDelivery.

    All settings can be configured via environment variables with the
    TANDEM_DELIVERY_ prefix. For example:
    - TANDEM_DELIVERY_MAX_REDELIVERIES=3
    - TANDEM_DELIVERY_LOG_LEVEL=debug

    Attributes:
        max_redeliveries: How many times a failed event is delivered again
            to the root projection before the failure is re-raised. Leaf
            effects must be idempotent when this is above zero.
        log_level: Level used for the per-event delivery log record.
        log_skipped: Also log events the root projection is not defined for.

    Example:
        >>> settings = DeliverySettings(max_redeliveries=2)
        >>> delivery = ProjectionDelivery(root, settings)
    """

    max_redeliveries: int = Field(default=0, ge=0)
    log_level: LogLevel = "INFO"
    log_skipped: bool = False

    model_config = {"env_prefix": "TANDEM_DELIVERY_"}

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value
