"""Configuration for end-to-end runs."""

import json
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventual_e2e.namespace import validate_token
from eventual_e2e.polling import (
    DEFAULT_INTERVAL,
    INVENTORY_LOAD_TIMEOUT,
    PROJECTION_TIMEOUT,
    SAGA_TIMEOUT,
    PollOptions,
)

CONFIG_ENV = "E2E_CONFIG"

# Individual variables override keys of the JSON document in E2E_CONFIG
ENV_OVERRIDES: Mapping[str, str] = {
    "E2E_BASE_URL": "base_url",
    "E2E_RUN_TOKEN": "run_token",
    "E2E_BROWSER": "browser",
    "E2E_HEADLESS": "headless",
}


class ConfigError(Exception):
    """Raised when the configuration cannot be read."""


class E2EConfig(BaseModel):
    """Configuration for end-to-end runs."""

    model_config = ConfigDict(extra="forbid")

    base_url: str | None = None
    # Pin the token to look at data created by an earlier run
    run_token: str | None = None
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    projection_timeout: float = Field(default=PROJECTION_TIMEOUT, gt=0)
    saga_timeout: float = Field(default=SAGA_TIMEOUT, gt=0)
    inventory_load_timeout: float = Field(default=INVENTORY_LOAD_TIMEOUT, gt=0)
    poll_interval: float = Field(default=DEFAULT_INTERVAL, gt=0)

    @field_validator("run_token")
    @classmethod
    def _check_run_token(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_token(value)

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip().rstrip("/")

    def poll_options(self, timeout: float | None = None) -> PollOptions:
        """Poll options using the configured interval.

        Defaults to the projection timeout; pass ``saga_timeout`` for checks
        that wait on a multi-step workflow.
        """
        return PollOptions(
            timeout=timeout if timeout is not None else self.projection_timeout,
            interval=self.poll_interval,
        )


def load_config(environ: Mapping[str, str]) -> E2EConfig:
    """Load configuration from environment variables.

    Raises:
        ConfigError: If E2E_CONFIG is not a JSON object
        pydantic.ValidationError: If a value is invalid

    """
    raw = environ.get(CONFIG_ENV, "").strip()
    data: dict[str, Any] = {}
    if raw:
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{CONFIG_ENV} is not valid JSON: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"{CONFIG_ENV} must be a JSON object")
        data.update(loaded)

    for variable, key in ENV_OVERRIDES.items():
        if value := environ.get(variable):
            data[key] = value

    return E2EConfig.model_validate(data)
