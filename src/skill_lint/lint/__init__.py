"""Lint rules and reports for skill packages."""

from skill_lint.lint.report import LintIssue, LintReport
from skill_lint.lint.rules import RULES, Finding, Rule, lint_package

__all__ = ["Finding", "LintIssue", "LintReport", "RULES", "Rule", "lint_package"]
