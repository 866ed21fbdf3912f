"""Environment-driven server settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
)

from shop_mcp.errors import ConfigurationError

DEFAULT_DOCS_DIR = Path(__file__).parent / "data"

_ENVIRONMENT = {
    "api_base_url": "API_BASE_URL",
    "request_timeout": "SHOP_MCP_REQUEST_TIMEOUT",
    "docs_dir": "SHOP_MCP_DOCS_DIR",
    "log_level": "SHOP_MCP_LOG_LEVEL",
}


class ServerSettings(BaseModel):
    """Validated start-up configuration.

    Attributes:
        api_base_url: Base address of the upstream product catalog API.
        request_timeout: Seconds before an upstream call is abandoned, or
            ``None`` to wait indefinitely.
        docs_dir: Directory holding the static documents served as resources.
        log_level: Name of the root logging level.
    """

    model_config = ConfigDict(frozen=True)

    api_base_url: AnyHttpUrl
    request_timeout: float | None = 30.0
    docs_dir: Path = DEFAULT_DOCS_DIR
    log_level: str = "INFO"

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @property
    def base_url(self) -> str:
        """Base address without a trailing slash."""
        return str(self.api_base_url).rstrip("/")


def load_settings(environ: Mapping[str, str] | None = None) -> ServerSettings:
    """Build settings from environment variables.

    Raises:
        ConfigurationError: If ``API_BASE_URL`` is missing or any value is
            malformed.
    """
    env = os.environ if environ is None else environ
    values: dict[str, str | None] = {}
    for field, variable in _ENVIRONMENT.items():
        raw = env.get(variable)
        if raw is None or not raw.strip():
            continue
        values[field] = raw.strip()
    if "api_base_url" not in values:
        raise ConfigurationError(
            "API_BASE_URL is not set", {"variable": "API_BASE_URL"}
        )
    timeout = values.get("request_timeout")
    if timeout is not None and timeout.lower() == "none":
        values["request_timeout"] = None

    try:
        return ServerSettings.model_validate(values)
    except ValidationError as error:
        names = [_ENVIRONMENT[str(item["loc"][0])] for item in error.errors()]
        problems = [
            {"variable": name, "problem": item["msg"]}
            for name, item in zip(names, error.errors())
        ]
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(names)}", problems
        ) from error
