"""Tests for configuration loading."""

import json
import os

import pytest
import yaml

from content_search.config import (
    Config,
    ConfigLoader,
    ConfigurationError,
    Environment,
    InvalidConfigurationError,
    get_config,
)
from content_search.config.loader import deep_merge


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))


def test_defaults():
    config = Config()

    assert config.service_name == "content-search"
    assert config.refresh_interval == 15 * 60
    assert config.refresh.enable_manual_trigger is False
    assert config.fetch.max_depth == 64
    assert config.source is None


def test_load_yaml(tmp_path):
    write_yaml(
        tmp_path / "config.yaml",
        {
            "service": {"name": "site-search"},
            "refresh": {"interval_minutes": 5},
            "source": {
                "urls": ["https://cms.test/content.json"],
                "ranked_fields": [{"field": "jcr:title", "weight": 3}],
            },
        },
    )

    config = ConfigLoader(tmp_path).load()

    assert config.service_name == "site-search"
    assert config.refresh_interval == 300
    assert config.source.urls == ["https://cms.test/content.json"]
    assert config.source.ranked_fields[0].synonym_weight is None
    assert config.service.environment == Environment.DEVELOPMENT


def test_load_json(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"fetch": {"timeout": 3}}))

    assert get_config(config_dir=tmp_path).fetch.timeout == 3


def test_environment_file_overrides_base(tmp_path):
    write_yaml(tmp_path / "config.yaml", {"refresh": {"interval_minutes": 5, "enable_manual_trigger": True}})
    write_yaml(tmp_path / "config.production.yaml", {"refresh": {"interval_minutes": 30}})

    config = ConfigLoader(tmp_path).load(Environment.PRODUCTION)

    assert config.refresh.interval_minutes == 30
    assert config.refresh.enable_manual_trigger is True
    assert config.service.environment == Environment.PRODUCTION


def test_environment_variables_override_files(tmp_path, monkeypatch):
    write_yaml(tmp_path / "config.yaml", {"refresh": {"interval_minutes": 5}})
    monkeypatch.setenv("REFRESH_INTERVAL", "1.5")
    monkeypatch.setenv("ENABLE_CACHE_TRIGGER", "true")
    monkeypatch.setenv("INSTANCE_DELAY", "20")
    monkeypatch.setenv("METRICS_PORT", "9100")
    monkeypatch.setenv("ENVIRONMENT", "staging")

    config = ConfigLoader(tmp_path).load()

    assert config.refresh_interval == 90
    assert config.refresh.enable_manual_trigger is True
    assert config.refresh.startup_delay == 20
    assert config.monitoring.metrics_port == 9100
    assert config.service.environment == Environment.STAGING


def test_dotenv_file_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("SERVICE_NAME=from-dotenv\n")

    try:
        config = ConfigLoader(tmp_path).load()
    finally:
        os.environ.pop("SERVICE_NAME", None)

    assert config.service_name == "from-dotenv"


def test_invalid_environment_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError):
        ConfigLoader(tmp_path).load()


def test_unknown_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "moon")

    with pytest.raises(ConfigurationError):
        ConfigLoader(tmp_path).load()


def test_non_mapping_file(tmp_path):
    (tmp_path / "config.yaml").write_text("- just\n- a list\n")

    with pytest.raises(ConfigurationError):
        ConfigLoader(tmp_path).load()


@pytest.mark.parametrize(
    "data",
    [
        {"refresh": {"interval_minutes": 0}},
        {"refresh": {"startup_delay": -1}},
        {"fetch": {"timeout": 0}},
        {"fetch": {"max_depth": 0}},
    ],
)
def test_invalid_values(data):
    with pytest.raises(InvalidConfigurationError):
        Config.from_dict(data)


def test_wrong_types():
    with pytest.raises(ConfigurationError):
        Config.from_dict({"refresh": {"interval_minutes": "often"}})


def test_to_dict_round_trips():
    config = Config.from_dict({"synonyms": {"path": "/etc/synonyms.txt"}})

    data = config.to_dict()

    assert data["synonyms"]["path"] == "/etc/synonyms.txt"
    assert Config.from_dict(data) == config


def test_deep_merge():
    assert deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}, "d": 4}) == {
        "a": {"b": 1, "c": 3},
        "d": 4,
    }
