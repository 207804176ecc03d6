"""Tests for settings loading."""

import pytest

from kuroryuu.config import ConfigError, Settings, load_settings


def test_defaults_without_config_file():
    assert load_settings() == Settings()


def test_config_file_in_global_data_dir(global_data):
    global_data.mkdir(parents=True)
    (global_data / "config.yaml").write_text("recent_limit: 3\ndata_dir_name: .kr\nunknown: 1\n")

    settings = load_settings()
    assert settings.recent_limit == 3
    assert settings.data_dir_name == ".kr"
    assert settings.log_level == "WARNING"


def test_log_level_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: info\n")

    assert load_settings(config_path=path).log_level == "INFO"

    monkeypatch.setenv("KURORYUU_LOG_LEVEL", "debug")
    assert load_settings(config_path=path).log_level == "DEBUG"


def test_empty_config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_settings(config_path=path) == Settings()


@pytest.mark.parametrize(
    "content",
    [
        "recent_limit: [1, 2\n",
        "- a\n- b\n",
        "recent_limit: ten\n",
        "recent_limit: true\n",
        "recent_limit: 0\n",
        "data_dir_name: a/b\n",
    ],
)
def test_invalid_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_settings(config_path=path)
