"""
Config Parser — Load store config YAML and resolve `extends` inheritance.

A config may name a parent with `extends: <relative path>`. The parent is
resolved first (recursively), then the child is deep-merged on top of it:

  - mappings merge key by key, so overriding theme.settings.colors.primary
    keeps theme.settings.typography from the parent
  - lists in the child replace the parent's list entirely
  - any other value in the child replaces the parent's value

Only the fully merged document is validated against StoreConfig. Every
validation problem is reported, not just the first one.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .config_schema import StoreConfig
from .errors import ConfigError


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    config: Optional[StoreConfig] = None


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge override onto base and return a new dict.

    Neither argument is modified. A None value in override counts as
    "not set" and leaves the base value in place.
    """
    result = dict(base)

    for key, override_value in override.items():
        if override_value is None:
            continue

        base_value = base.get(key)

        if isinstance(override_value, list):
            result[key] = list(override_value)
        elif isinstance(override_value, dict) and isinstance(base_value, dict):
            result[key] = merge_configs(base_value, override_value)
        else:
            result[key] = override_value

    return result


def format_validation_errors(error: ValidationError) -> List[str]:
    """Turn a pydantic ValidationError into "path: message" strings."""
    messages = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue["loc"])
        messages.append(f"{path}: {issue['msg']}")
    return messages


def _load_yaml(config_path: str) -> Dict[str, Any]:
    if not os.path.exists(config_path):
        raise ConfigError(ConfigError.NOT_FOUND, f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        content = f.read()

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(ConfigError.PARSE_ERROR, f"Invalid YAML in {config_path}: {e}")

    if not isinstance(raw, dict):
        raise ConfigError(
            ConfigError.PARSE_ERROR,
            f"Invalid YAML in {config_path}: expected a mapping at the top level",
        )
    return raw


def resolve_raw_config(config_path: str, _chain: Optional[List[str]] = None) -> Dict[str, Any]:
    """Load a config and merge in its `extends` ancestors, without validating.

    Raises:
        ConfigError: If a file is missing, unparsable, or the chain loops.
    """
    config_path = os.path.abspath(config_path)
    chain = list(_chain or [])

    if config_path in chain:
        loop = " -> ".join(chain + [config_path])
        raise ConfigError(ConfigError.VALIDATION_ERROR, f"Circular extends: {loop}")
    chain.append(config_path)

    raw = _load_yaml(config_path)

    parent = raw.get("extends")
    if not isinstance(parent, str):
        return raw

    parent_path = os.path.join(os.path.dirname(config_path), parent)
    base = resolve_raw_config(parent_path, chain)

    override = {k: v for k, v in raw.items() if k != "extends"}
    return merge_configs(base, override)


def parse_config(data: Dict[str, Any]) -> StoreConfig:
    """Validate an already-merged config dict.

    Raises:
        ConfigError: VALIDATION_ERROR listing every violated field.
    """
    try:
        return StoreConfig.model_validate(data)
    except ValidationError as e:
        errors = format_validation_errors(e)
        raise ConfigError(
            ConfigError.VALIDATION_ERROR,
            f"Invalid config: {'; '.join(errors)}",
            errors=errors,
        )


def parse_config_file(config_path: str) -> StoreConfig:
    """Load, resolve and validate a store config file.

    Raises:
        ConfigError: NOT_FOUND, PARSE_ERROR or VALIDATION_ERROR.
    """
    return parse_config(resolve_raw_config(config_path))


def validate_config_file(config_path: str) -> ValidationResult:
    """Validate a config file and report problems instead of raising."""
    try:
        config = parse_config_file(config_path)
    except ConfigError as e:
        return ValidationResult(valid=False, errors=list(e.errors))
    return ValidationResult(valid=True, config=config)
