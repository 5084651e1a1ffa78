"""Pydantic models for skill-lint configuration."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from skill_lint.config.defaults import DEFAULT_RECOMMENDED_SECTIONS, KNOWN_RULES


class Severity(str, Enum):
    """Issue severity, ordered error > warning > info."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"info": 0, "warning": 1, "error": 2}[self.value]

    def at_least(self, threshold: "Severity") -> bool:
        """Whether this severity is as severe as the threshold or worse."""
        return self.rank >= threshold.rank


class LintSettings(BaseModel):
    """Global settings for linting skill packages."""

    required_tag: Optional[str] = Field(
        default="vue2.6.14",
        description="Tag every reference file must carry (None disables the check)",
    )
    recommended_sections: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RECOMMENDED_SECTIONS),
        description="Headings each reference file is expected to contain",
    )
    fail_on: Severity = Field(
        default=Severity.ERROR,
        description="Lowest severity that makes the lint run fail",
    )
    check_readme_count: bool = Field(
        default=True,
        description="Compare the README's stated file count with the actual count",
    )

    @field_validator("required_tag")
    @classmethod
    def validate_required_tag(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty tag as no required tag."""
        if v is None:
            return None
        return v.strip() or None


class RuleConfig(BaseModel):
    """Per-rule override."""

    enabled: bool = Field(default=True, description="Whether the rule runs")
    severity: Optional[Severity] = Field(
        default=None, description="Severity override (None keeps the default)"
    )


class SkillLintConfig(BaseModel):
    """Root configuration for skill-lint."""

    version: str = Field(description="Config schema version")
    settings: LintSettings = Field(default_factory=LintSettings)
    rules: dict[str, RuleConfig] = Field(
        default_factory=dict, description="Per-rule overrides keyed by rule id"
    )

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version format."""
        if not v.startswith("1."):
            raise ValueError(
                f"Unsupported config version: {v}. Only version 1.x is supported."
            )
        return v

    @field_validator("rules")
    @classmethod
    def validate_rule_ids(cls, v: dict[str, RuleConfig]) -> dict[str, RuleConfig]:
        """Reject overrides for rules that do not exist."""
        unknown = sorted(set(v) - set(KNOWN_RULES))
        if unknown:
            raise ValueError(f"Unknown rule id(s): {', '.join(unknown)}")
        return v

    def rule_enabled(self, rule_id: str) -> bool:
        override = self.rules.get(rule_id)
        return override.enabled if override else True

    def rule_severity(self, rule_id: str, default: Severity) -> Severity:
        override = self.rules.get(rule_id)
        if override and override.severity is not None:
            return override.severity
        return default
