"""Tests for configuration loading and merging logic."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from skill_lint.config.defaults import DEFAULT_CONFIG
from skill_lint.config.loader import (
    apply_env_overrides,
    find_config_files,
    load_config,
    load_yaml_file,
    merge_configs,
)
from skill_lint.config.schema import Severity, SkillLintConfig
from skill_lint.errors import ConfigError


class TestLoadYamlFile:
    """Test YAML file loading."""

    def test_load_valid_yaml(self, tmp_path):
        """Test loading a valid YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"version": "1.0", "settings": {"fail_on": "warning"}}))

        result = load_yaml_file(config_file)
        assert result["version"] == "1.0"
        assert result["settings"]["fail_on"] == "warning"

    def test_load_empty_yaml(self, tmp_path):
        """Test loading an empty YAML file."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        assert load_yaml_file(config_file) == {}

    def test_load_nonexistent_file(self, tmp_path):
        """Test loading a nonexistent file raises error."""
        with pytest.raises(FileNotFoundError):
            load_yaml_file(tmp_path / "nonexistent.yaml")

    def test_load_invalid_yaml(self, tmp_path):
        """Test loading invalid YAML raises error."""
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(yaml.YAMLError):
            load_yaml_file(config_file)

    def test_load_non_mapping(self, tmp_path):
        """Test a top-level list is rejected."""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            load_yaml_file(config_file)


class TestMergeConfigs:
    """Test configuration merging logic."""

    def test_merge_empty_list(self):
        assert merge_configs([]) == {}

    def test_merge_nested_dicts(self):
        """Test deep merging of nested dictionaries."""
        config1 = {"settings": {"required_tag": "vue2.6.14", "fail_on": "error"}}
        config2 = {"settings": {"fail_on": "warning"}}

        result = merge_configs([config1, config2])
        assert result["settings"]["fail_on"] == "warning"  # Overridden
        assert result["settings"]["required_tag"] == "vue2.6.14"  # Preserved

    def test_merge_list_replacement(self):
        """Test that lists are replaced, not merged."""
        config1 = {"settings": {"recommended_sections": ["A", "B"]}}
        config2 = {"settings": {"recommended_sections": ["C"]}}

        result = merge_configs([config1, config2])
        assert result["settings"]["recommended_sections"] == ["C"]

    def test_merge_rule_overrides(self):
        """Test per-rule overrides merge key by key."""
        config1 = {"rules": {"orphan-reference": {"enabled": False}}}
        config2 = {"rules": {"orphan-reference": {"severity": "info"}, "readme-count": {"enabled": False}}}

        result = merge_configs([config1, config2])
        assert result["rules"]["orphan-reference"] == {"enabled": False, "severity": "info"}
        assert result["rules"]["readme-count"] == {"enabled": False}

    def test_merge_does_not_mutate_inputs(self):
        """Test that merging leaves the defaults untouched."""
        before = yaml.safe_dump(DEFAULT_CONFIG)
        merge_configs([DEFAULT_CONFIG, {"settings": {"recommended_sections": ["X"]}}])
        assert yaml.safe_dump(DEFAULT_CONFIG) == before


class TestApplyEnvOverrides:
    """Test environment variable overrides."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("SKILL_LINT_REQUIRED_TAG", "SKILL_LINT_FAIL_ON", "SKILL_LINT_DISABLE"):
            monkeypatch.delenv(name, raising=False)

    def test_no_env_vars(self):
        """Test that config is unchanged when no env vars are set."""
        config = {"settings": {"required_tag": "vue2.6.14"}}
        assert apply_env_overrides(config) == config

    def test_required_tag_override(self, monkeypatch):
        monkeypatch.setenv("SKILL_LINT_REQUIRED_TAG", "vue2.7")
        result = apply_env_overrides({"settings": {"required_tag": "vue2.6.14"}})
        assert result["settings"]["required_tag"] == "vue2.7"

    def test_empty_required_tag_disables(self, monkeypatch):
        monkeypatch.setenv("SKILL_LINT_REQUIRED_TAG", "")
        result = apply_env_overrides({"settings": {"required_tag": "vue2.6.14"}})
        assert result["settings"]["required_tag"] is None

    def test_fail_on_override(self, monkeypatch):
        monkeypatch.setenv("SKILL_LINT_FAIL_ON", " WARNING ")
        result = apply_env_overrides({})
        assert result["settings"]["fail_on"] == "warning"

    def test_disable_rules(self, monkeypatch):
        monkeypatch.setenv("SKILL_LINT_DISABLE", "orphan-reference, readme-count,")
        result = apply_env_overrides({"rules": {"orphan-reference": {"severity": "error"}}})

        assert result["rules"]["orphan-reference"] == {"severity": "error", "enabled": False}
        assert result["rules"]["readme-count"] == {"enabled": False}

    def test_input_not_mutated(self, monkeypatch):
        monkeypatch.setenv("SKILL_LINT_FAIL_ON", "info")
        config = {"settings": {"fail_on": "error"}}
        apply_env_overrides(config)
        assert config["settings"]["fail_on"] == "error"


class TestFindConfigFiles:
    """Test config file discovery."""

    def test_no_config_files(self, isolated_env):
        assert find_config_files() == []

    def test_project_and_user_config(self, isolated_env):
        """Test project config comes before user config."""
        project = isolated_env["work_dir"] / "skill-lint.yaml"
        project.write_text("version: '1.0'\n")
        user = isolated_env["config_dir"] / "config.yaml"
        user.write_text("version: '1.0'\n")

        found = find_config_files()
        assert [p.name for p in found] == ["skill-lint.yaml", "config.yaml"]
        assert found[0] == Path.cwd() / "skill-lint.yaml"


class TestLoadConfig:
    """Test the full load_config pipeline."""

    def test_defaults(self, isolated_env):
        """Test loading with no files gives the built-in defaults."""
        config = load_config()

        assert isinstance(config, SkillLintConfig)
        assert config.settings.required_tag == "vue2.6.14"
        assert config.settings.fail_on == Severity.ERROR
        assert "Task Checklist" in config.settings.recommended_sections
        assert config.rules == {}

    def test_user_overrides_project(self, isolated_env):
        (isolated_env["work_dir"] / "skill-lint.yaml").write_text(
            yaml.dump({"settings": {"fail_on": "warning", "required_tag": "project-tag"}})
        )
        (isolated_env["config_dir"] / "config.yaml").write_text(
            yaml.dump({"settings": {"required_tag": "user-tag"}})
        )

        config = load_config()
        assert config.settings.required_tag == "user-tag"
        assert config.settings.fail_on == Severity.WARNING

    def test_env_overrides_files(self, isolated_env, monkeypatch):
        (isolated_env["work_dir"] / "skill-lint.yaml").write_text(
            yaml.dump({"settings": {"fail_on": "warning"}})
        )
        monkeypatch.setenv("SKILL_LINT_FAIL_ON", "info")

        assert load_config().settings.fail_on == Severity.INFO

    def test_explicit_path_wins(self, isolated_env, monkeypatch, tmp_path):
        monkeypatch.setenv("SKILL_LINT_REQUIRED_TAG", "env-tag")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text(yaml.dump({"settings": {"required_tag": "explicit-tag"}}))

        assert load_config(explicit).settings.required_tag == "explicit-tag"

    def test_explicit_path_missing(self, isolated_env, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml_names_file(self, isolated_env):
        project = isolated_env["work_dir"] / "skill-lint.yaml"
        project.write_text("settings: [unclosed")

        with pytest.raises(ConfigError, match="skill-lint.yaml"):
            load_config()

    def test_unknown_rule_rejected(self, isolated_env, tmp_path):
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text(yaml.dump({"rules": {"no-such-rule": {"enabled": False}}}))

        with pytest.raises(ValidationError):
            load_config(explicit)

    def test_env_disable_unknown_rule_rejected(self, isolated_env, monkeypatch):
        monkeypatch.setenv("SKILL_LINT_DISABLE", "typo-rule")

        with pytest.raises(ValidationError):
            load_config()
