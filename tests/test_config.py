"""Tests for connection parameters and run configuration."""

import pytest

from glue_reverse.config import (
    ConnectionParams,
    RunConfig,
    RuntimeSettings,
    Selection,
    SslType,
    expand_env_vars,
    parse_connection_params,
    parse_selection,
)
from glue_reverse.exceptions import ConfigurationError


class TestConnectionParams:
    """Tests for ConnectionParams."""

    def test_camel_case_keys(self, connection_params):
        params = ConnectionParams.model_validate(
            {**connection_params, "sessionToken": "tok", "sslType": "Server validation"}
        )

        assert params.access_key_id == "AKIAEXAMPLE"
        assert params.session_token == "tok"
        assert params.ssl_type is SslType.SERVER

    def test_snake_case_keys(self):
        params = ConnectionParams(region="us-east-1", access_key_id="AKIA")

        assert params.access_key_id == "AKIA"
        assert params.ssl_type is SslType.NONE

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, SslType.NONE),
            ("", SslType.NONE),
            ("none", SslType.NONE),
            ("server", SslType.SERVER),
            ("Server and client validation", SslType.SERVER_AND_CLIENT),
            ("MUTUAL", SslType.SERVER_AND_CLIENT),
        ],
    )
    def test_ssl_type_aliases(self, value, expected):
        assert ConnectionParams(region="us-east-1", sslType=value).ssl_type is expected

    def test_unknown_ssl_type_rejected(self):
        with pytest.raises(ValueError):
            ConnectionParams(region="us-east-1", sslType="sometimes")

    def test_region_is_stripped_and_required(self):
        assert ConnectionParams(region=" eu-west-1 ").region == "eu-west-1"
        with pytest.raises(ValueError):
            ConnectionParams(region="  ")

    def test_unknown_keys_ignored(self):
        params = ConnectionParams.model_validate({"region": "us-east-1", "hiddenKeys": ["x"]})

        assert params.region == "us-east-1"

    def test_for_logging_omits_unset(self, connection_params):
        info = ConnectionParams.model_validate(connection_params).for_logging()

        assert info["region"] == "eu-west-1"
        assert info["ssl_type"] == "none"
        assert "session_token" not in info

    def test_parse_passthrough_and_errors(self, connection_params):
        params = ConnectionParams.model_validate(connection_params)

        assert parse_connection_params(params) is params
        with pytest.raises(ConfigurationError) as exc_info:
            parse_connection_params({"maxAttempts": 0, "region": "us-east-1"})
        assert exc_info.value.details["errors"]


class TestSelection:
    """Tests for Selection."""

    def test_original_keys(self):
        selection = parse_selection(
            {"dataBaseNames": ["sales", "hr"], "collections": {"sales": ["orders"]}}
        )

        assert selection.container_names == ["sales", "hr"]
        assert selection.entities_for("sales") == ["orders"]
        assert selection.entities_for("hr") == []

    def test_invalid_selection(self):
        with pytest.raises(ConfigurationError):
            parse_selection({"collections": ["orders"]})

    def test_passthrough(self):
        selection = Selection()

        assert parse_selection(selection) is selection


class TestRunConfig:
    """Tests for loading YAML run configuration."""

    def test_from_yaml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GLUE_SECRET", "s3cr3t")
        path = tmp_path / "glue.yaml"
        path.write_text(
            """
connection:
  accessKeyId: AKIA
  secretAccessKey: ${GLUE_SECRET}
  region: eu-central-1
selection:
  dataBaseNames: [sales]
  collections:
    sales: [orders]
runtime:
  max_workers: 2
logging:
  level: DEBUG
"""
        )

        config = RunConfig.from_yaml(path)

        assert config.connection.secret_access_key == "s3cr3t"
        assert config.selection.entities_for("sales") == ["orders"]
        assert config.runtime.max_workers == 2
        assert config.runtime.page_size == 100
        assert config.logging.level == "DEBUG"
        assert config.logging.redaction is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            RunConfig.from_yaml(tmp_path / "absent.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        with pytest.raises(ConfigurationError, match="empty"):
            RunConfig.from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("connection: [unclosed")

        with pytest.raises(ConfigurationError, match="parse"):
            RunConfig.from_yaml(path)

    def test_missing_connection(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RunConfig.from_dict({"selection": {}})

        assert exc_info.value.error_code == "CONFIGURATION_ERROR"

    def test_page_size_is_capped(self):
        with pytest.raises(ValueError):
            RuntimeSettings(page_size=101)


def test_expand_env_vars(monkeypatch):
    monkeypatch.setenv("REGION", "us-west-2")

    assert expand_env_vars({"a": ["$REGION", 1], "b": "${REGION}-x"}) == {
        "a": ["us-west-2", 1],
        "b": "us-west-2-x",
    }
