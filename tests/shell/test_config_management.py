# tests/shell/test_config_management.py
import json
import logging

import pytest

from amp_shell.core.managers.config_manager import ConfigManager
from amp_shell.core.utils.configure_logging import LogWithTqdm, configure_logger
from amp_shell.core.utils.path_utils import PathUtils

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "bento": {
        "cdn_base_url": "https://cdn.ampproject.org",
        "max_files": 10
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Een fixture die een geïsoleerde testomgeving opzet voor de ConfigManager:
    - Plaatst een nep 'settings.json' bestand in een tijdelijke map.
    - Monkeypatched PathUtils om naar dit bestand te wijzen.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    # De singleton is mogelijk al geladen; forceer herladen vanuit ons nep-bestand
    manager = ConfigManager()
    manager._source = None
    manager.reset()

    yield manager

    manager._source = None
    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton(config_env):
    assert ConfigManager() is config_env


def test_config_manager_load(config_env):
    """Test of de manager de configuratie correct laadt."""
    config = config_env.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["bento"]["max_files"] == 10


def test_config_manager_get_nested(config_env):
    """Test het ophalen van geneste waarden."""
    assert config_env.get_nested("bento.cdn_base_url") == "https://cdn.ampproject.org"
    assert config_env.get_nested("non.existent.key", "default") == "default"
    assert config_env.get_nested("debug.level.deeper", "default") == "default"


def test_config_manager_set_nested(config_env):
    """Test het aanpassen van waarden in het geheugen."""
    config_env.set_nested("debug.level", "INFO")
    assert config_env.get_nested("debug.level") == "INFO"

    # Nieuwe sleutel toevoegen
    config_env.set_nested("specs.extension_specs_path", "/tmp/specs.json")
    assert config_env.get_nested("specs.extension_specs_path") == "/tmp/specs.json"

    # Type-casting: de originele waarde is een int, dus '20' wordt een int
    config_env.set_nested("bento.max_files", "20")
    assert config_env.get_nested("bento.max_files") == 20


def test_config_manager_set_nested_through_scalar_fails(config_env):
    assert config_env.set_nested("debug.level.deeper", "x") is False


def test_config_manager_reset(config_env):
    """Test of de reset-functie de configuratie herlaadt vanaf schijf."""
    config_env.set_nested("debug.level", "DEBUG")
    config_env.reset()
    assert config_env.get_nested("debug.level") == "WARNING"


def test_config_manager_load_file(config_env, tmp_path):
    """Een alternatief settings-bestand vervangt de configuratie, ook na reset()."""
    other = tmp_path / "other.json"
    other.write_text(json.dumps({"bento": {"cdn_base_url": "https://cdn.example.com"}}))

    assert config_env.load_file(other) is True
    assert config_env.get_nested("bento.cdn_base_url") == "https://cdn.example.com"

    config_env.reset()
    assert config_env.get_nested("bento.cdn_base_url") == "https://cdn.example.com"


def test_config_manager_load_file_rejects_bad_input(config_env, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("[]")

    assert config_env.load_file(broken) is False
    assert config_env.load_file(tmp_path / "missing.json") is False
    # De oude configuratie blijft intact
    assert config_env.get_nested("debug.level") == "WARNING"


def test_missing_settings_file_gives_empty_config(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: tmp_path / "nope.json")
    manager = ConfigManager()
    manager._source = None
    manager.reset()
    try:
        assert manager.get_all() == {}
    finally:
        monkeypatch.undo()
        manager.reset()


def test_configure_logger_levels():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logger("info", module_specific_levels={"amp_sanitizer": "DEBUG"},
                         silenced_loggers={"bs4": "ERROR"})

        assert root.level == logging.INFO
        assert any(isinstance(h, LogWithTqdm) for h in root.handlers)
        assert logging.getLogger("amp_sanitizer").level == logging.DEBUG
        assert logging.getLogger("bs4").level == logging.ERROR
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("amp_sanitizer").setLevel(logging.NOTSET)
        logging.getLogger("bs4").setLevel(logging.NOTSET)
