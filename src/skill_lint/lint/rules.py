"""Lint rules for skill packages.

Each rule is a generator registered under a stable id. It receives the loaded
SkillPackage and the active LintSettings and yields Findings; ``lint_package``
turns those into LintIssues, applying per-rule configuration.
"""

import logging
import os
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

from skill_lint.config.schema import LintSettings, Severity, SkillLintConfig
from skill_lint.core.frontmatter import read_markdown
from skill_lint.core.skill import (
    MANIFEST_FILENAME,
    ImpactLevel,
    ReferenceType,
    SkillPackage,
)
from skill_lint.errors import UnreadableFileError
from skill_lint.lint.report import LintIssue, LintReport

logger = logging.getLogger(__name__)

SKILL_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
SKILL_NAME_MAX_LENGTH = 64
SEMVER_RE = re.compile(r"^\d+\.\d+(\.\d+)?([-+][0-9A-Za-z.-]+)?$")
README_COUNT_RE = re.compile(
    r"(?<![\w.])(\d+)(\+)?\s+(?:[\w-]+\s+){0,3}?(?:reference\s+(?:files|documents|docs)|references)\b",
    re.IGNORECASE,
)

IMPACT_VALUES = [level.value for level in ImpactLevel]
TYPE_VALUES = [kind.value for kind in ReferenceType]
REQUIRED_REFERENCE_FIELDS = ("title", "impact", "type", "tags")


@dataclass
class Finding:
    """Raw rule output before configuration is applied."""

    message: str
    path: Optional[str] = None
    line: Optional[int] = None
    # Overrides the rule's default severity for this one finding
    severity: Optional[Severity] = None


CheckFunc = Callable[[SkillPackage, LintSettings], Iterator[Finding]]


@dataclass
class Rule:
    """A registered lint rule."""

    id: str
    severity: Severity
    description: str
    check: CheckFunc


RULES: dict[str, Rule] = {}


def rule(rule_id: str, severity: Severity, description: str):
    """Register a check function as a lint rule."""

    def decorator(func: CheckFunc) -> CheckFunc:
        RULES[rule_id] = Rule(
            id=rule_id, severity=severity, description=description, check=func
        )
        return func

    return decorator


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def _display_path(package: SkillPackage, path: Path) -> str:
    return Path(os.path.relpath(path, package.path)).as_posix()


def _resolve_link(package: SkillPackage, target: str) -> Path:
    target = unquote(target.split("#", 1)[0])
    return (package.path / target).resolve()


# Manifest rules


@rule("manifest-frontmatter", Severity.ERROR, "SKILL.md frontmatter parses as a YAML mapping")
def check_manifest_frontmatter(package, settings):
    if package.manifest_error is not None:
        yield Finding(package.manifest_error.message, MANIFEST_FILENAME, package.manifest_error.line)


@rule("manifest-required", Severity.ERROR, "SKILL.md declares a name and a description")
def check_manifest_required(package, settings):
    if package.manifest is None:
        return
    for key in ("name", "description"):
        if _is_blank(getattr(package.manifest, key)):
            yield Finding(f"missing required manifest field '{key}'", MANIFEST_FILENAME)


@rule("manifest-name", Severity.ERROR, "Skill name is lowercase-hyphenated and matches its directory")
def check_manifest_name(package, settings):
    if package.manifest is None or _is_blank(package.manifest.name):
        return
    name = package.manifest.name
    if not SKILL_NAME_RE.match(name):
        yield Finding(
            f"skill name '{name}' must be lowercase letters, digits and single hyphens",
            MANIFEST_FILENAME,
        )
    if len(name) > SKILL_NAME_MAX_LENGTH:
        yield Finding(
            f"skill name is {len(name)} characters (max {SKILL_NAME_MAX_LENGTH})",
            MANIFEST_FILENAME,
        )
    if name != package.name:
        yield Finding(
            f"skill name '{name}' does not match directory '{package.name}'",
            MANIFEST_FILENAME,
            severity=Severity.WARNING,
        )


@rule("manifest-fields", Severity.WARNING, "SKILL.md declares version, license and author")
def check_manifest_fields(package, settings):
    if package.manifest is None:
        return
    for key in ("version", "license", "author"):
        if _is_blank(getattr(package.manifest, key)):
            yield Finding(f"manifest field '{key}' is not set", MANIFEST_FILENAME)
    version = package.manifest.version
    if not package.manifest.version_is_text:
        yield Finding(
            f"version loads from YAML as '{version}', not as written; quote it",
            MANIFEST_FILENAME,
        )
    elif not _is_blank(version) and not SEMVER_RE.match(version):
        yield Finding(f"version '{version}' is not a semantic version", MANIFEST_FILENAME)


@rule("manifest-links", Severity.ERROR, "Relative links in SKILL.md point to existing files")
def check_manifest_links(package, settings):
    for link in package.manifest_links:
        if link.is_external:
            continue
        if not _resolve_link(package, link.target).exists():
            yield Finding(f"broken link to '{link.target}'", MANIFEST_FILENAME, link.line)


@rule("orphan-reference", Severity.WARNING, "Every reference file is linked from SKILL.md")
def check_orphan_references(package, settings):
    linked = {
        _resolve_link(package, link.target)
        for link in package.manifest_links
        if not link.is_external
    }
    for reference in package.references:
        if reference.path.resolve() not in linked:
            yield Finding("reference file is not linked from SKILL.md", reference.relative_path)


# Reference file rules


@rule("reference-frontmatter", Severity.ERROR, "Reference frontmatter parses as a YAML mapping")
def check_reference_frontmatter(package, settings):
    for reference in package.references:
        if reference.error is not None:
            yield Finding(reference.error.message, reference.relative_path, reference.error.line)


@rule("reference-required", Severity.ERROR, "References declare title, impact, type and tags")
def check_reference_required(package, settings):
    for reference in package.references:
        if reference.metadata is None:
            continue
        for key in REQUIRED_REFERENCE_FIELDS:
            if _is_blank(getattr(reference.metadata, key)):
                yield Finding(f"missing required field '{key}'", reference.relative_path)


@rule("reference-impact", Severity.ERROR, "impact is one of HIGH, MEDIUM, LOW")
def check_reference_impact(package, settings):
    for reference in package.references:
        if reference.metadata is None or _is_blank(reference.metadata.impact):
            continue
        impact = reference.metadata.impact
        if impact in IMPACT_VALUES:
            continue
        hint = f" (did you mean '{impact.upper()}'?)" if impact.upper() in IMPACT_VALUES else ""
        yield Finding(
            f"invalid impact '{impact}', expected one of {', '.join(IMPACT_VALUES)}{hint}",
            reference.relative_path,
        )


@rule("reference-type", Severity.ERROR, "type is a known reference type")
def check_reference_type(package, settings):
    for reference in package.references:
        if reference.metadata is None or _is_blank(reference.metadata.type):
            continue
        kind = reference.metadata.type
        if kind not in TYPE_VALUES:
            yield Finding(
                f"invalid type '{kind}', expected one of {', '.join(TYPE_VALUES)}",
                reference.relative_path,
            )


@rule("reference-tags", Severity.ERROR, "tags is a list of strings containing the required tag")
def check_reference_tags(package, settings):
    for reference in package.references:
        if reference.metadata is None or _is_blank(reference.metadata.tags):
            continue
        tags = reference.metadata.tags
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            yield Finding("tags must be a list of strings", reference.relative_path)
            continue
        if settings.required_tag and settings.required_tag not in tags:
            yield Finding(
                f"missing required tag '{settings.required_tag}'",
                reference.relative_path,
            )


@rule("reference-impact-description", Severity.INFO, "References explain their impact")
def check_reference_impact_description(package, settings):
    for reference in package.references:
        if reference.metadata is None:
            continue
        if _is_blank(reference.metadata.impact_description):
            yield Finding("no 'impactDescription' in frontmatter", reference.relative_path)


@rule("reference-sections", Severity.WARNING, "References contain the recommended sections")
def check_reference_sections(package, settings):
    for reference in package.references:
        titles = [s.title.lower() for s in reference.sections]
        for expected in settings.recommended_sections:
            if not any(t.startswith(expected.lower()) for t in titles):
                yield Finding(f"missing section '{expected}'", reference.relative_path)


@rule("reference-duplicate-title", Severity.WARNING, "Reference titles are unique")
def check_duplicate_titles(package, settings):
    seen: dict[str, str] = {}
    for reference in package.references:
        if _is_blank(reference.title):
            continue
        key = reference.title.strip().lower()
        if key in seen:
            yield Finding(
                f"title '{reference.title}' is also used by {seen[key]}",
                reference.relative_path,
            )
        else:
            seen[key] = reference.relative_path


# Package rules


@rule("empty-package", Severity.ERROR, "The package contains reference files")
def check_empty_package(package, settings):
    if package.reference_count == 0:
        yield Finding("no reference files found under reference/", MANIFEST_FILENAME)


@rule("readme-count", Severity.ERROR, "The README's stated file count matches the package")
def check_readme_count(package, settings):
    if not settings.check_readme_count:
        return
    if package.readme_path is None:
        logger.debug("No README for %s, skipping count check", package.name)
        return

    path = _display_path(package, package.readme_path)
    try:
        text = read_markdown(package.readme_path)
    except UnreadableFileError as e:
        yield Finding(f"README {e.message}", path, e.line)
        return

    match = README_COUNT_RE.search(text)
    if match is None:
        logger.debug("No reference count stated in %s", package.readme_path)
        return

    stated = int(match.group(1))
    at_least = match.group(2) == "+"
    actual = package.reference_count
    line = text.count("\n", 0, match.start()) + 1

    if at_least and actual < stated:
        yield Finding(
            f"README states {stated}+ reference files but the package has {actual}",
            path,
            line,
        )
    elif not at_least and actual != stated:
        yield Finding(
            f"README states {stated} reference files but the package has {actual}",
            path,
            line,
        )


def lint_package(package: SkillPackage, config: SkillLintConfig) -> LintReport:
    """Run every enabled rule against a skill package.

    Args:
        package: The loaded skill package
        config: Active configuration (settings and per-rule overrides)

    Returns:
        LintReport with one issue per finding
    """
    report = LintReport(
        skill_name=package.name,
        files_checked=1 + package.reference_count,
    )

    for rule_id, registered in RULES.items():
        if not config.rule_enabled(rule_id):
            logger.debug("Rule %s disabled", rule_id)
            continue
        for finding in registered.check(package, config.settings):
            default = finding.severity or registered.severity
            report.issues.append(
                LintIssue(
                    rule=rule_id,
                    severity=config.rule_severity(rule_id, default),
                    message=finding.message,
                    path=finding.path,
                    line=finding.line,
                )
            )

    logger.debug(
        "Linted %s: %d error(s), %d warning(s)",
        package.name,
        len(report.errors),
        len(report.warnings),
    )
    return report
