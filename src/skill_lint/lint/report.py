"""Lint issue and report models."""

from dataclasses import dataclass, field
from typing import Any, Optional

from skill_lint.config.schema import Severity


@dataclass
class LintIssue:
    """A single problem found in a skill package."""

    rule: str
    severity: Severity
    message: str
    path: Optional[str] = None
    line: Optional[int] = None

    @property
    def location(self) -> str:
        if self.path is None:
            return ""
        if self.line is None:
            return self.path
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "line": self.line,
        }


@dataclass
class LintReport:
    """All issues found while linting one skill package."""

    skill_name: str
    issues: list[LintIssue] = field(default_factory=list)
    files_checked: int = 0

    @property
    def errors(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def has_failures(self, threshold: Severity = Severity.ERROR) -> bool:
        """Whether any issue is at or above the threshold severity."""
        return any(i.severity.at_least(threshold) for i in self.issues)

    def sorted_issues(self) -> list[LintIssue]:
        """Issues ordered by path, then line, then rule."""
        return sorted(
            self.issues,
            key=lambda i: (i.path or "", i.line or 0, i.rule),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "skill": self.skill_name,
            "files_checked": self.files_checked,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [i.to_dict() for i in self.sorted_issues()],
        }

    def summary(self) -> str:
        """Generate human-readable summary."""
        status = "FAILED" if self.errors else "PASSED"
        lines = [
            f"{self.skill_name}: {status}",
            f"  Files checked: {self.files_checked}",
            f"  Errors: {len(self.errors)}, Warnings: {len(self.warnings)}",
        ]
        for issue in self.sorted_issues():
            location = f"{issue.location}: " if issue.location else ""
            lines.append(
                f"  [{issue.severity.value}] {location}{issue.message} ({issue.rule})"
            )
        return "\n".join(lines)
