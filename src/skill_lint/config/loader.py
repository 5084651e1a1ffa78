"""Configuration loader with merge logic and precedence handling."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from skill_lint.config.defaults import DEFAULT_CONFIG
from skill_lint.config.schema import SkillLintConfig
from skill_lint.errors import ConfigError
from skill_lint.utils.paths import expand_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = "skill-lint.yaml"
USER_CONFIG_PATH = "~/.config/skill-lint/config.yaml"


def find_config_files() -> list[Path]:
    """Find configuration files in standard locations.

    Searches for configuration files in order of precedence (lowest to highest):
    1. Project config (./skill-lint.yaml in current directory)
    2. User config (~/.config/skill-lint/config.yaml)

    Returns:
        List of Path objects for existing config files, ordered from lowest
        to highest precedence (so later configs override earlier ones)
    """
    config_files = []

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        config_files.append(project_config)

    user_config = expand_path(USER_CONFIG_PATH)
    if user_config.exists():
        config_files.append(user_config)

    return config_files


def load_yaml_file(file_path: Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file.

    Args:
        file_path: Path to the YAML file

    Returns:
        Dictionary containing the parsed YAML content

    Raises:
        yaml.YAMLError: If the file contains invalid YAML
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the top level of the file is not a mapping
    """
    with open(file_path, "r", encoding="utf-8") as f:
        content = yaml.safe_load(f)
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{file_path}: top level must be a mapping")
    return content


def merge_configs(configs: list[dict[str, Any]]) -> dict[str, Any]:
    """Deep merge multiple configuration dictionaries.

    Merges configs from lowest to highest precedence, where later configs
    override earlier ones. Nested dictionaries merge recursively; lists
    from a later config replace the earlier list.

    Args:
        configs: List of configuration dictionaries in order from lowest to
                highest precedence

    Returns:
        Merged configuration dictionary
    """
    result: dict[str, Any] = {}
    for config in configs:
        result = _deep_merge(result, config)
    return result


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two dictionaries, with override taking precedence."""
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides to configuration.

    Supports the following environment variables:
    - SKILL_LINT_REQUIRED_TAG: Override settings.required_tag (empty disables)
    - SKILL_LINT_FAIL_ON: Override settings.fail_on
    - SKILL_LINT_DISABLE: Comma-separated rule ids to disable

    Args:
        config: Configuration dictionary to apply overrides to

    Returns:
        New configuration dictionary with environment overrides applied
    """
    result = copy.deepcopy(config)
    settings = result.setdefault("settings", {})

    required_tag = os.getenv("SKILL_LINT_REQUIRED_TAG")
    if required_tag is not None:
        settings["required_tag"] = required_tag or None

    if fail_on := os.getenv("SKILL_LINT_FAIL_ON"):
        settings["fail_on"] = fail_on.strip().lower()

    if disabled := os.getenv("SKILL_LINT_DISABLE"):
        rules = result.setdefault("rules", {})
        for rule_id in (r.strip() for r in disabled.split(",")):
            if rule_id:
                rules.setdefault(rule_id, {})["enabled"] = False

    return result


def load_config(config_path: Optional[Path] = None) -> SkillLintConfig:
    """Load and merge configuration from all sources.

    Configuration precedence (lowest to highest):
    1. Built-in defaults
    2. Project config (./skill-lint.yaml)
    3. User config (~/.config/skill-lint/config.yaml)
    4. Environment variables
    5. Explicitly provided config_path (if given)
    6. CLI flags (handled by caller)

    Args:
        config_path: Optional explicit path to a config file, merged on top
                    of everything except CLI flags

    Returns:
        Validated SkillLintConfig instance

    Raises:
        pydantic.ValidationError: If the merged configuration is invalid
        ConfigError: If a config file cannot be parsed
        FileNotFoundError: If config_path is provided but doesn't exist
    """
    configs_to_merge = [DEFAULT_CONFIG]

    for config_file in find_config_files():
        configs_to_merge.append(_load_with_context(config_file))

    merged_config = apply_env_overrides(merge_configs(configs_to_merge))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        merged_config = merge_configs([merged_config, _load_with_context(config_path)])

    logger.debug("Merged configuration: %s", merged_config)
    return SkillLintConfig(**merged_config)


def _load_with_context(config_file: Path) -> dict[str, Any]:
    try:
        return load_yaml_file(config_file)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error loading {config_file}: {e}") from e
