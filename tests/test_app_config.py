import json

import pytest

from utils import app_config


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(app_config, "CONFIG_FILE", path)
    return path


def test_log_level_defaults_when_unset(config_file):
    assert app_config.get_log_level() == "INFO"


def test_log_level_is_upper_cased(config_file):
    config_file.write_text(json.dumps({"log_level": "debug"}), encoding="utf-8")
    assert app_config.get_log_level() == "DEBUG"


@pytest.mark.parametrize("value", ["verbose", "", 10])
def test_unknown_log_level_falls_back_to_default(config_file, value):
    config_file.write_text(json.dumps({"log_level": value}), encoding="utf-8")
    assert app_config.get_log_level() == app_config.DEFAULT_LOG_LEVEL


def test_corrupt_config_reads_as_empty(config_file):
    config_file.write_text("{not json", encoding="utf-8")
    assert app_config.load_config() == {}
    assert app_config.get_log_level() == "INFO"


def test_db_folder_round_trips_through_save(config_file):
    app_config.set_db_folder("/data/ledgerify")
    assert app_config.get_db_folder() == "/data/ledgerify"
    app_config.set_db_folder(None)
    assert app_config.get_db_folder() is None
    assert not config_file.with_suffix(".tmp").exists()
