"""Tests for shopify_spinner.config_parser."""

import os

import pytest

from shopify_spinner.config_parser import (
    merge_configs,
    parse_config,
    parse_config_file,
    validate_config_file,
)
from shopify_spinner.errors import ConfigError


BASE_YAML = """\
store:
  name: Base Store
  email: base@example.com
theme:
  settings:
    colors:
      primary: "#111111"
      secondary: "#222222"
    typography:
      heading_font: Inter
settings:
  currency: EUR
products:
  source: products.csv
"""


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)
    return str(path)


# ---------------------------------------------------------------------------
# merge_configs
# ---------------------------------------------------------------------------

def test_merge_nested_dicts():
    base = {"theme": {"settings": {"colors": {"primary": "#000", "secondary": "#111"}}}}
    override = {"theme": {"settings": {"colors": {"primary": "#fff"}}}}
    merged = merge_configs(base, override)
    assert merged["theme"]["settings"]["colors"] == {"primary": "#fff", "secondary": "#111"}


def test_merge_lists_replace():
    base = {"apps": [{"name": "a"}, {"name": "b"}]}
    override = {"apps": [{"name": "c"}]}
    assert merge_configs(base, override)["apps"] == [{"name": "c"}]


def test_merge_none_override_ignored():
    base = {"settings": {"currency": "USD"}}
    assert merge_configs(base, {"settings": None}) == {"settings": {"currency": "USD"}}


def test_merge_scalar_replaces_dict():
    assert merge_configs({"a": {"b": 1}}, {"a": 5}) == {"a": 5}


def test_merge_does_not_mutate_inputs():
    base = {"a": {"b": 1}}
    override = {"a": {"c": 2}}
    merge_configs(base, override)
    assert base == {"a": {"b": 1}}
    assert override == {"a": {"c": 2}}


# ---------------------------------------------------------------------------
# parse_config / validation
# ---------------------------------------------------------------------------

def test_parse_config_applies_defaults():
    config = parse_config({
        "store": {"name": "Shop", "email": "a@example.com"},
        "settings": {},
        "products": {"source": "p.csv"},
        "apps": [{"name": "reviews"}],
    })
    assert config.settings.currency == "USD"
    assert config.settings.timezone == "America/Los_Angeles"
    assert config.products.create_collections is True
    assert config.apps[0].required is False


def test_parse_config_collects_all_errors():
    with pytest.raises(ConfigError) as exc_info:
        parse_config({"store": {"name": "", "email": "not-an-email"}})
    error = exc_info.value
    assert error.kind == ConfigError.VALIDATION_ERROR
    assert len(error.errors) == 2
    assert any(e.startswith("store.name:") and "Store name is required" in e for e in error.errors)
    assert any(e.startswith("store.email:") for e in error.errors)


def test_parse_config_missing_store():
    with pytest.raises(ConfigError) as exc_info:
        parse_config({"settings": {"currency": "USD"}})
    assert any(e.startswith("store:") for e in exc_info.value.errors)


def test_parse_config_rejects_unknown_preset():
    with pytest.raises(ConfigError) as exc_info:
        parse_config({
            "store": {"name": "Shop", "email": "a@example.com"},
            "theme": {"settings": {"preset": "disco"}},
        })
    assert any(e.startswith("theme.settings.preset:") for e in exc_info.value.errors)


def test_parse_config_logo_width_bounds():
    with pytest.raises(ConfigError) as exc_info:
        parse_config({
            "store": {"name": "Shop", "email": "a@example.com"},
            "theme": {"settings": {"logo_width": 20}},
        })
    assert any(e.startswith("theme.settings.logo_width:") for e in exc_info.value.errors)


def test_parse_config_social_urls():
    with pytest.raises(ConfigError) as exc_info:
        parse_config({
            "store": {"name": "Shop", "email": "a@example.com"},
            "theme": {"settings": {"social": {"instagram": "not a url"}}},
        })
    assert any("social.instagram" in e for e in exc_info.value.errors)


def test_parse_config_ignores_unknown_keys():
    config = parse_config({"store": {"name": "Shop", "email": "a@example.com"}, "extra": 1})
    assert config.store.name == "Shop"


# ---------------------------------------------------------------------------
# parse_config_file / extends
# ---------------------------------------------------------------------------

def test_parse_config_file_not_found(tmp_path):
    missing = str(tmp_path / "missing.yaml")
    with pytest.raises(ConfigError) as exc_info:
        parse_config_file(missing)
    assert exc_info.value.kind == ConfigError.NOT_FOUND
    assert "Config file not found" in str(exc_info.value)


def test_parse_config_file_invalid_yaml(tmp_path):
    path = _write(tmp_path, "bad.yaml", "store: [unclosed\n")
    with pytest.raises(ConfigError) as exc_info:
        parse_config_file(path)
    assert exc_info.value.kind == ConfigError.PARSE_ERROR


def test_parse_config_file_non_mapping(tmp_path):
    path = _write(tmp_path, "list.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError) as exc_info:
        parse_config_file(path)
    assert exc_info.value.kind == ConfigError.PARSE_ERROR


def test_extends_inherits_and_overrides(tmp_path):
    _write(tmp_path, "base.yaml", BASE_YAML)
    child = _write(tmp_path, "child.yaml", """\
extends: ./base.yaml
store:
  name: Child Store
theme:
  settings:
    colors:
      primary: "#ffffff"
""")
    config = parse_config_file(child)

    assert config.extends is None
    assert config.store.name == "Child Store"
    assert config.store.email == "base@example.com"
    assert config.theme.settings.colors.primary == "#ffffff"
    assert config.theme.settings.colors.secondary == "#222222"
    assert config.theme.settings.typography.heading_font == "Inter"
    assert config.settings.currency == "EUR"


def test_extends_is_relative_to_child(tmp_path):
    (tmp_path / "shared").mkdir()
    _write(tmp_path / "shared", "base.yaml", BASE_YAML)
    (tmp_path / "stores").mkdir()
    child = _write(tmp_path / "stores", "child.yaml", "extends: ../shared/base.yaml\n")
    assert parse_config_file(child).store.name == "Base Store"


def test_extends_chain(tmp_path):
    _write(tmp_path, "base.yaml", BASE_YAML)
    _write(tmp_path, "middle.yaml", "extends: base.yaml\nsettings:\n  timezone: Europe/Berlin\n")
    leaf = _write(tmp_path, "leaf.yaml", "extends: middle.yaml\nstore:\n  name: Leaf\n")
    config = parse_config_file(leaf)
    assert config.store.name == "Leaf"
    assert config.settings.currency == "EUR"
    assert config.settings.timezone == "Europe/Berlin"


def test_extends_missing_parent(tmp_path):
    child = _write(tmp_path, "child.yaml", "extends: ./nope.yaml\n")
    with pytest.raises(ConfigError) as exc_info:
        parse_config_file(child)
    assert exc_info.value.kind == ConfigError.NOT_FOUND


def test_extends_cycle_detected(tmp_path):
    a = _write(tmp_path, "a.yaml", "extends: b.yaml\nstore:\n  name: A\n  email: a@example.com\n")
    _write(tmp_path, "b.yaml", "extends: a.yaml\n")
    with pytest.raises(ConfigError) as exc_info:
        parse_config_file(a)
    assert exc_info.value.kind == ConfigError.VALIDATION_ERROR
    assert "Circular extends" in str(exc_info.value)


def test_extends_self_cycle(tmp_path):
    a = _write(tmp_path, "a.yaml", "extends: a.yaml\n")
    with pytest.raises(ConfigError, match="Circular extends"):
        parse_config_file(a)


# ---------------------------------------------------------------------------
# validate_config_file
# ---------------------------------------------------------------------------

def test_validate_config_file_valid(tmp_path):
    path = _write(tmp_path, "store.yaml", BASE_YAML)
    result = validate_config_file(path)
    assert result.valid is True
    assert result.errors == []
    assert result.config.store.name == "Base Store"


def test_validate_config_file_invalid(tmp_path):
    path = _write(tmp_path, "store.yaml", "store:\n  name: X\n  email: nope\n")
    result = validate_config_file(path)
    assert result.valid is False
    assert result.config is None
    assert any(e.startswith("store.email:") for e in result.errors)


def test_validate_config_file_missing(tmp_path):
    result = validate_config_file(os.path.join(str(tmp_path), "missing.yaml"))
    assert result.valid is False
    assert "Config file not found" in result.errors[0]
