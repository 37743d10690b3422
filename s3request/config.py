"""Endpoint configuration loading.

Supports two configuration sources:
1. Environment variables - takes priority
2. A JSON file (for local development)

Environment Variables:
    S3_HOST=s3.amazonaws.com
    S3_SECURE=true
    S3_REGION=eu-west-1
    S3_SERVICE=s3
    S3_SIGNATURE_VERSION=v4
    S3_ADDRESSING_STYLE=virtual

Credentials are deliberately not part of this configuration; they are
passed explicitly to every build call.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from s3request.errors import InvalidRegion, S3RequestError
from s3request.models import SignatureVersion
from s3request.validators import Region, normalize_region

DEFAULT_HOST = "s3.amazonaws.com"

ADDRESSING_STYLES = ("virtual", "path")

ENV_PREFIX = "S3_"


class ConfigError(S3RequestError):
    """Raised when configuration loading fails."""

    pass


@dataclass(frozen=True)
class EndpointConfig:
    """Where requests are addressed and how they are signed by default."""

    host: str = DEFAULT_HOST
    secure: bool = True
    region: Optional[Region] = None
    service: str = "s3"
    signature_version: SignatureVersion = SignatureVersion.V4
    addressing_style: str = "virtual"

    @property
    def scheme(self) -> str:
        return "https" if self.secure else "http"


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"Invalid boolean for '{name}': {value!r}")


def _build_config(values: dict[str, Any]) -> EndpointConfig:
    """Validate raw values and build an EndpointConfig.

    Args:
        values: Mapping of EndpointConfig field names to raw values; absent
            keys take the defaults.

    Raises:
        ConfigError: If any value is malformed.
    """
    kwargs: dict[str, Any] = {}

    if values.get("host"):
        kwargs["host"] = str(values["host"]).strip().rstrip("/")

    if "secure" in values:
        kwargs["secure"] = _parse_bool(values["secure"], "secure")

    if values.get("region"):
        try:
            kwargs["region"] = normalize_region(values["region"])
        except InvalidRegion as e:
            raise ConfigError(str(e)) from e

    if values.get("service"):
        kwargs["service"] = str(values["service"])

    if values.get("signature_version"):
        try:
            kwargs["signature_version"] = SignatureVersion(
                str(values["signature_version"]).lower()
            )
        except ValueError as e:
            raise ConfigError(
                f"Invalid signature_version: {values['signature_version']!r}"
            ) from e

    if values.get("addressing_style"):
        style = str(values["addressing_style"]).lower()
        if style not in ADDRESSING_STYLES:
            raise ConfigError(
                f"Invalid addressing_style: {style!r}. "
                f"Expected one of: {', '.join(ADDRESSING_STYLES)}"
            )
        kwargs["addressing_style"] = style

    return EndpointConfig(**kwargs)


def load_from_json(config_path: str) -> EndpointConfig:
    """Load endpoint configuration from a JSON file.

    Args:
        config_path: Path to the JSON file.

    Returns:
        The parsed EndpointConfig.

    Raises:
        ConfigError: If the file doesn't exist, contains invalid JSON,
                    or holds invalid values.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    return _build_config(data)


def load_from_env() -> EndpointConfig:
    """Load endpoint configuration from S3_* environment variables.

    Raises:
        ConfigError: If a variable holds an invalid value.
    """
    values: dict[str, Any] = {}
    for field_name in (
        "host",
        "secure",
        "region",
        "service",
        "signature_version",
        "addressing_style",
    ):
        env_value = os.environ.get(ENV_PREFIX + field_name.upper())
        if env_value is not None:
            values[field_name] = env_value

    return _build_config(values)


def has_env_config() -> bool:
    """Check if any S3_* environment variables exist."""
    return any(key.startswith(ENV_PREFIX) for key in os.environ)


def load_endpoint_config(config_path: str = "s3request.json") -> EndpointConfig:
    """Load endpoint configuration with environment priority.

    Priority order:
    1. Environment variables (if any S3_* vars exist)
    2. The JSON file at config_path (if it exists)
    3. Defaults

    Args:
        config_path: Path to the JSON file (used as fallback).
    """
    if has_env_config():
        return load_from_env()
    if Path(config_path).exists():
        return load_from_json(config_path)
    return EndpointConfig()
