from __future__ import annotations

import json
from pathlib import Path

import pytest

from searchlib.config import ConfigError, SearchConfig, load_config, load_records


def test_defaults():
    cfg = SearchConfig()
    assert cfg.placeholder == "Search..."
    assert cfg.theme == "light"
    assert cfg.debounce_timeout == 0
    assert cfg.max_results == 0
    assert cfg.no_results_text == "No results found"
    assert cfg.display_key == "label"
    assert cfg.filterable_keys == ["label"]
    assert cfg.data == []
    assert cfg.value == ""
    assert not cfg.disabled and not cfg.loading


def test_out_of_range_values_are_normalized():
    cfg = SearchConfig.from_mapping(
        {
            "theme": "neon",
            "debounce_timeout": -10,
            "max_results": -1,
            "blur_grace": "soon",
            "filterable_keys": [],
            "unknown_option": True,
        }
    )
    assert cfg.theme == "light"
    assert cfg.debounce_timeout == 0
    assert cfg.max_results == 0
    assert cfg.blur_grace == 200
    assert cfg.filterable_keys == ["label"]


def test_filterable_keys_from_string():
    cfg = SearchConfig.from_mapping({"filterable_keys": "name, address.city"})
    assert cfg.filterable_keys == ["name", "address.city"]


def write_config(tmp_path: Path) -> Path:
    (tmp_path / "people.json").write_text(
        json.dumps(
            [
                {"name": "John Doe", "email": "j.doe@example.com"},
                {"name": "Jane Smith", "email": "j.smith@example.com"},
            ]
        )
    )
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        """
version: 1
search:
  placeholder: ${SEARCH_PLACEHOLDER}
  theme: dark
  debounce_timeout: 150
  max_results: 5
  display_key: name
  filterable_keys: [name, email]
  data_file: people.json
        """.strip()
    )
    return cfg


def test_load_config_from_env(tmp_path, monkeypatch):
    cfg_path = write_config(tmp_path)
    monkeypatch.setenv("SEARCHCTL_CONFIG", str(cfg_path))
    monkeypatch.setenv("SEARCH_PLACEHOLDER", "Find people")

    cfg = load_config()
    assert cfg.source_path == cfg_path
    assert cfg.data_file == tmp_path / "people.json"
    assert cfg.search.placeholder == "Find people"
    assert cfg.search.theme == "dark"
    assert cfg.search.debounce_timeout == 150
    assert cfg.search.filterable_keys == ["name", "email"]
    assert [r["name"] for r in cfg.search.data] == ["John Doe", "Jane Smith"]


def test_missing_env_path_is_an_error(tmp_path, monkeypatch):
    monkeypatch.setenv("SEARCHCTL_CONFIG", str(tmp_path / "nope.yaml"))
    with pytest.raises(ConfigError):
        load_config(missing_ok=True)


def test_missing_config_is_optional(tmp_path, monkeypatch):
    monkeypatch.delenv("SEARCHCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_DIRS", str(tmp_path / "etc"))

    cfg = load_config(missing_ok=True)
    assert cfg.source_path is None
    assert cfg.search == SearchConfig()

    with pytest.raises(ConfigError, match="No config file found"):
        load_config()


def test_xdg_lookup(tmp_path, monkeypatch):
    monkeypatch.delenv("SEARCHCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    (tmp_path / "searchctl").mkdir()
    (tmp_path / "searchctl" / "config.yaml").write_text("search: {max_results: 3}\n")

    cfg = load_config()
    assert cfg.search.max_results == 3


def test_load_records_yaml_items(tmp_path):
    path = tmp_path / "fruit.yaml"
    path.write_text("items:\n  - label: apple\n  - label: pear\n")
    assert load_records(path) == [{"label": "apple"}, {"label": "pear"}]


def test_load_records_rejects_scalars(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('"just a string"')
    with pytest.raises(ConfigError, match="list of records"):
        load_records(path)


def test_load_records_reports_parse_errors(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_records(path)


def test_load_records_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not readable"):
        load_records(tmp_path / "missing.json")
