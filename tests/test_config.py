"""Tests for configuration loading module."""

import json
import os
from pathlib import Path

import pytest

from s3request.config import (
    ConfigError,
    EndpointConfig,
    has_env_config,
    load_endpoint_config,
    load_from_env,
    load_from_json,
)
from s3request.models import SignatureVersion
from s3request.validators import Region


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove S3_* variables that would leak in from the host."""
    for key in list(os.environ):
        if key.startswith("S3_"):
            monkeypatch.delenv(key)


class TestEndpointConfig:
    """Tests for EndpointConfig defaults."""

    def test_defaults(self):
        config = EndpointConfig()

        assert config.host == "s3.amazonaws.com"
        assert config.scheme == "https"
        assert config.region is None
        assert config.signature_version is SignatureVersion.V4
        assert config.addressing_style == "virtual"

    def test_insecure_scheme(self):
        assert EndpointConfig(secure=False).scheme == "http"


class TestLoadFromJson:
    """Tests for load_from_json function."""

    def test_valid_config_with_all_fields(self, tmp_path: Path):
        """Load a valid config file with all fields specified."""
        config_data = {
            "host": "s3.eu-west-1.amazonaws.com/",
            "secure": False,
            "region": "EU",
            "service": "s3",
            "signature_version": "V2",
            "addressing_style": "path",
        }
        config_file = tmp_path / "s3request.json"
        config_file.write_text(json.dumps(config_data))

        config = load_from_json(str(config_file))

        assert config == EndpointConfig(
            host="s3.eu-west-1.amazonaws.com",
            secure=False,
            region=Region.EU_WEST_1,
            service="s3",
            signature_version=SignatureVersion.V2,
            addressing_style="path",
        )

    def test_missing_file_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file doesn't exist."""
        config_file = tmp_path / "nonexistent.json"

        with pytest.raises(ConfigError, match="Config file not found"):
            load_from_json(str(config_file))

    def test_malformed_json_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file contains invalid JSON."""
        config_file = tmp_path / "s3request.json"
        config_file.write_text("{ invalid json }")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_from_json(str(config_file))

    def test_non_object_raises_error(self, tmp_path: Path):
        config_file = tmp_path / "s3request.json"
        config_file.write_text("[]")

        with pytest.raises(ConfigError, match="JSON object"):
            load_from_json(str(config_file))

    def test_empty_config_returns_defaults(self, tmp_path: Path):
        config_file = tmp_path / "s3request.json"
        config_file.write_text("{}")

        assert load_from_json(str(config_file)) == EndpointConfig()

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("region", "mars-north-1", "Unknown region"),
            ("signature_version", "v3", "Invalid signature_version"),
            ("addressing_style", "dns", "Invalid addressing_style"),
            ("secure", "maybe", "Invalid boolean"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, field, value, message):
        """Each malformed value is reported with its field."""
        config_file = tmp_path / "s3request.json"
        config_file.write_text(json.dumps({field: value}))

        with pytest.raises(ConfigError, match=message):
            load_from_json(str(config_file))


class TestLoadFromEnv:
    """Tests for load_from_env function."""

    def test_all_variables(self, monkeypatch):
        monkeypatch.setenv("S3_HOST", "minio.local:9000")
        monkeypatch.setenv("S3_SECURE", "false")
        monkeypatch.setenv("S3_REGION", "us-west-2")
        monkeypatch.setenv("S3_SIGNATURE_VERSION", "v4")
        monkeypatch.setenv("S3_ADDRESSING_STYLE", "path")

        config = load_from_env()

        assert config.host == "minio.local:9000"
        assert config.secure is False
        assert config.region is Region.US_WEST_2
        assert config.addressing_style == "path"

    def test_no_variables_gives_defaults(self):
        assert load_from_env() == EndpointConfig()

    @pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("off", False)])
    def test_boolean_spellings(self, monkeypatch, raw, expected):
        monkeypatch.setenv("S3_SECURE", raw)
        assert load_from_env().secure is expected


class TestLoadEndpointConfig:
    """Tests for load_endpoint_config priority."""

    def test_env_takes_priority(self, monkeypatch, tmp_path: Path):
        config_file = tmp_path / "s3request.json"
        config_file.write_text(json.dumps({"region": "eu-west-1"}))
        monkeypatch.setenv("S3_REGION", "us-east-1")

        assert has_env_config() is True
        assert load_endpoint_config(str(config_file)).region is Region.US_EAST_1

    def test_falls_back_to_file(self, tmp_path: Path):
        config_file = tmp_path / "s3request.json"
        config_file.write_text(json.dumps({"region": "eu-west-1"}))

        assert has_env_config() is False
        assert load_endpoint_config(str(config_file)).region is Region.EU_WEST_1

    def test_defaults_without_sources(self, tmp_path: Path):
        assert load_endpoint_config(str(tmp_path / "missing.json")) == EndpointConfig()
