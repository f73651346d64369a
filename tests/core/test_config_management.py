# tests/core/test_config_management.py
import json

import pytest

from formfixer.dom.builder import DOMBuilder
from formfixer.managers.config_manager import ConfigManager
from formfixer.utils.path_utils import PathUtils

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "server": {
        "port": 5000
    },
    "parser": {
        "features": "html.parser"
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Een fixture die een geïsoleerde testomgeving opzet voor de ConfigManager:
    - Plaatst een nep 'settings.json' in een tijdelijke map.
    - Monkeypatched PathUtils om naar dit bestand te wijzen.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))

    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    manager = ConfigManager()
    manager.reset()  # Forceer herladen vanuit ons nep-bestand
    yield manager

    # Herstel de echte configuratie voor de volgende tests
    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton():
    assert ConfigManager() is ConfigManager()


def test_config_manager_load(config_env):
    """Test of de manager de configuratie correct laadt."""
    config = config_env.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["server"]["port"] == 5000


def test_config_manager_get_nested(config_env):
    """Test het ophalen van geneste waarden."""
    assert config_env.get_nested("parser.features") == "html.parser"
    assert config_env.get_nested("non.existent.key", "default") == "default"
    assert config_env.get_nested("debug.level.deeper", "default") == "default"


def test_config_manager_set_nested_casts_to_existing_type(config_env):
    """Een string '8080' wordt omgezet naar int omdat de oude waarde een int is."""
    assert config_env.set_nested("server.port", "8080")
    assert config_env.get_nested("server.port") == 8080

    config_env.set_nested("accessibility.engine", "axe")
    assert config_env.get_nested("accessibility.engine") == "axe"


def test_config_manager_set_nested_refuses_non_dict_parent(config_env):
    assert config_env.set_nested("debug.level.sub", "x") is False


def test_missing_settings_file_gives_empty_config(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: tmp_path / "missing.json")
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_all() == {}
        assert manager.get_nested("server.port", 5000) == 5000
    finally:
        monkeypatch.undo()
        manager.reset()


def test_builder_reads_parser_from_config(config_env):
    assert DOMBuilder().features == "html.parser"


def test_shipped_settings_file_exists():
    assert PathUtils.get_settings_file().exists()


def test_set_nested_casts_booleans_and_lists(config_env):
    """Strings van de command line worden naar bool en list omgezet."""
    config_env.set_nested("flags.enabled", True)
    config_env.set_nested("flags.enabled", "false")
    assert config_env.get_nested("flags.enabled") is False

    config_env.set_nested("accessibility.tags", [])
    config_env.set_nested("accessibility.tags", "wcag2a, wcag2aa")
    assert config_env.get_nested("accessibility.tags") == ["wcag2a", "wcag2aa"]


def test_uncastable_value_is_stored_as_string(config_env):
    config_env.set_nested("server.port", "not-a-port")
    assert config_env.get_nested("server.port") == "not-a-port"


def test_apply_overrides(config_env):
    config_env.apply_overrides(["server.port=9000", "debug.level = DEBUG"])
    assert config_env.get_nested("server.port") == 9000
    assert config_env.get_nested("debug.level") == "DEBUG"


@pytest.mark.parametrize("pair", ["server.port", "=5", "debug.level.sub=x"])
def test_apply_overrides_rejects_malformed_pairs(config_env, pair):
    with pytest.raises(ValueError):
        config_env.apply_overrides([pair])


def test_reset_discards_overrides(config_env):
    config_env.set_nested("server.port", 1234)
    config_env.reset()
    assert config_env.get_nested("server.port") == 5000
