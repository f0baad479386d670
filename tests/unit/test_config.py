"""Unit tests for configuration loading."""

from pathlib import Path

import pytest

from smlt.config.loader import expand_placeholders, get_default_config_path, load_config
from smlt.config.schema import AppConfig, LogLevel
from smlt.errors import ConfigError

CONFIG_TOML = """
[logging]
level = "DEBUG"

[transport]
timeout = 3.0

[defaults]
count = 8
mode = "vector_only"

[[connections]]
site_root_id = 1
language_id = 0
host = "solr.internal"
core = "core_en"
username = "reader"
password = "${SMLT_TEST_PASSWORD:-fallback}"

[profiles.staging]
defaults = { count = 2, mode = "mlt_only", vector_weight = 0.5, mlt_weight = 0.5 }
"""


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "smlt.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    return path


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.toml")

    assert config.logging.level == LogLevel.INFO
    assert config.transport.timeout == 10.0
    assert config.defaults.count == 5
    assert config.defaults.mode == "hybrid"
    assert config.defaults.vector_weight == 0.7
    assert config.defaults.mlt_weight == 0.3
    assert config.resolver.strict_resolution is False
    assert config.connections == []


def test_load_from_file(config_file, monkeypatch):
    monkeypatch.delenv("SMLT_TEST_PASSWORD", raising=False)

    config = load_config(config_file)

    assert config.logging.level == LogLevel.DEBUG
    assert config.transport.timeout == 3.0
    assert config.defaults.count == 8
    assert config.defaults.mode == "vector_only"
    assert len(config.connections) == 1
    assert config.connections[0].core_base_uri() == "http://solr.internal:8983/solr/core_en"
    assert config.connections[0].password == "fallback"


def test_env_substitution_in_file(config_file, monkeypatch):
    monkeypatch.setenv("SMLT_TEST_PASSWORD", "s3cret")

    config = load_config(config_file)

    assert config.connections[0].password == "s3cret"


def test_profile_overrides_base(config_file):
    config = load_config(config_file, profile="staging")

    assert config.defaults.count == 2
    assert config.defaults.mode == "mlt_only"
    assert config.transport.timeout == 3.0


def test_unknown_profile_is_ignored(config_file):
    config = load_config(config_file, profile="nope")
    assert config.defaults.count == 8


def test_environment_overrides_file(config_file, monkeypatch):
    monkeypatch.setenv("SMLT_TRANSPORT__TIMEOUT", "1.5")

    config = load_config(config_file)

    assert config.transport.timeout == 1.5


def test_invalid_toml_raises(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[transport\ntimeout = ", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(path)


def test_invalid_values_raise(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[transport]\ntimeout = -1\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(path)


def test_expand_placeholders(monkeypatch):
    monkeypatch.delenv("SMLT_UNSET_VAR", raising=False)
    monkeypatch.setenv("SMLT_SET_VAR", "value")

    assert expand_placeholders("${SMLT_SET_VAR}", "x") == "value"
    assert expand_placeholders("https://${SMLT_UNSET_VAR:-solr}:8983", "x") == "https://solr:8983"
    assert expand_placeholders("${SMLT_UNSET_VAR:-}", "x") == ""
    assert expand_placeholders("no placeholders", "x") == "no placeholders"


def test_unset_placeholder_raises(tmp_path, monkeypatch):
    monkeypatch.delenv("SMLT_UNSET_VAR", raising=False)
    path = tmp_path / "smlt.toml"
    path.write_text(
        '[[connections]]\nsite_root_id = 1\ncore = "core_en"\npassword = "${SMLT_UNSET_VAR}"\n',
        encoding="utf-8",
    )

    with pytest.raises(ConfigError, match=r"SMLT_UNSET_VAR referenced by connections\[0\].password"):
        load_config(path)


def test_placeholders_only_expanded_in_connections(tmp_path, monkeypatch):
    monkeypatch.setenv("SMLT_SET_VAR", "value")
    path = tmp_path / "smlt.toml"
    path.write_text(
        'app_name = "${SMLT_SET_VAR}"\n\n'
        "[[connections]]\n"
        "site_root_id = 1\n"
        'base_uri = "http://${SMLT_SET_VAR}/solr/core_en"\n',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.app_name == "${SMLT_SET_VAR}"
    assert config.connections[0].core_base_uri() == "http://value/solr/core_en"


def test_profile_connections_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("SMLT_SET_VAR", "value")
    path = tmp_path / "smlt.toml"
    path.write_text(
        "[[profiles.prod.connections]]\n"
        "site_root_id = 1\n"
        'core = "core_en"\n'
        'username = "${SMLT_SET_VAR}"\n',
        encoding="utf-8",
    )

    config = load_config(path, profile="prod")

    assert config.connections[0].username == "value"


def test_default_config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("SMLT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    (tmp_path / "smlt.toml").write_text("", encoding="utf-8")

    assert get_default_config_path().resolve() == (tmp_path / "smlt.toml").resolve()


def test_default_config_path_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SMLT_CONFIG", str(tmp_path / "custom.toml"))

    assert get_default_config_path() == tmp_path / "custom.toml"


def test_app_config_from_env(monkeypatch):
    monkeypatch.setenv("SMLT_RESOLVER__STRICT_RESOLUTION", "true")
    monkeypatch.setenv("SMLT_LOGGING__LEVEL", "ERROR")

    config = AppConfig()

    assert config.resolver.strict_resolution is True
    assert config.logging.level == LogLevel.ERROR
