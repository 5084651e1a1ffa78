"""Configuration loading and management."""

from skill_lint.config.loader import (
    apply_env_overrides,
    find_config_files,
    load_config,
    merge_configs,
)
from skill_lint.config.schema import (
    LintSettings,
    RuleConfig,
    Severity,
    SkillLintConfig,
)

__all__ = [
    # Loader functions
    "apply_env_overrides",
    "find_config_files",
    "load_config",
    "merge_configs",
    # Schema classes
    "LintSettings",
    "RuleConfig",
    "Severity",
    "SkillLintConfig",
]
