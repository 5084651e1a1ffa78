"""CLI application entry point."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from skill_lint.compose.index import render_reference_index, update_manifest_index
from skill_lint.config.defaults import KNOWN_RULES
from skill_lint.config.loader import PROJECT_CONFIG_NAME, load_config
from skill_lint.config.schema import RuleConfig, Severity, SkillLintConfig
from skill_lint.core.catalog import SkillCatalog, summarize
from skill_lint.core.skill import SkillPackage
from skill_lint.errors import SkillLintError
from skill_lint.lint.report import LintReport
from skill_lint.lint.rules import lint_package
from skill_lint.utils.output import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
    severity_label,
)
from skill_lint.utils.paths import expand_path

app = typer.Typer(
    name="skill-lint",
    help="Validate Agent Skill packages: SKILL.md manifests and reference docs",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


# Template for init command
TEMPLATE_CONFIG = """version: "1.0"

settings:
  # Tag every reference file must carry (set to null to skip the check)
  required_tag: "vue2.6.14"
  # Headings each reference file should contain
  recommended_sections:
    - "Task Checklist"
    - "Code Example"
    - "Common Gotchas"
    - "Reference"
  # Lowest severity that fails the run: error, warning or info
  fail_on: "error"
  check_readme_count: true

rules: {}
  # Example: silence a rule
  # orphan-reference:
  #   enabled: false

  # Example: make a rule stricter
  # reference-sections:
  #   severity: error
"""


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """Validate Agent Skill packages."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


def _load_cfg(config: Optional[Path]) -> SkillLintConfig:
    try:
        return load_config(config)
    except ValidationError as e:
        print_error("Configuration validation failed:")
        console.print(escape(str(e)))
        raise typer.Exit(1)
    except (SkillLintError, OSError) as e:
        print_error(f"Failed to load config: {escape(str(e))}")
        raise typer.Exit(1)


def _discover(path: Path, machine: bool = False) -> SkillCatalog:
    """Load the catalog under ``path`` or exit.

    With ``machine`` set nothing is written to stdout: load failures are left
    to the caller's JSON and fatal problems go to stderr.
    """
    root = expand_path(str(path))
    if not root.exists():
        if machine:
            err_console.print(f"[red]✗[/red] Path does not exist: {root}", style="red")
        else:
            print_error(f"Path does not exist: {root}")
        raise typer.Exit(1)

    catalog = SkillCatalog(root)
    catalog.discover()

    if not machine:
        for name, reason in catalog.failures.items():
            print_warning(f"Could not load skill '{name}': {escape(reason)}")

    if not catalog.list_skills():
        if machine:
            err_console.print(f"[red]✗[/red] No skills found under {root}", style="red")
        else:
            print_error(f"No skills found under {root}")
            print_info("Expected SKILL.md in the directory, in skills/<name>/, or in <name>/")
        raise typer.Exit(1)

    return catalog


def _select_skill(catalog: SkillCatalog, skill: Optional[str]) -> SkillPackage:
    if skill is None:
        skills = catalog.list_skills()
        if len(skills) == 1:
            return skills[0]
        print_error("Several skills found; choose one with --skill")
        for package in skills:
            console.print(f"  • {package.name}")
        raise typer.Exit(1)

    package = catalog.get_skill(skill)
    if package is None:
        print_error(f"Skill '{skill}' not found")
        raise typer.Exit(1)
    return package


def _print_report(report: LintReport, fail_on: Severity) -> None:
    console.print(f"[bold]Skill:[/bold] {escape(report.skill_name)}")

    for issue in report.sorted_issues():
        location = f"{escape(issue.location)}: " if issue.location else ""
        console.print(
            f"  {severity_label(issue.severity)} {location}{escape(issue.message)} "
            f"[dim]({issue.rule})[/dim]"
        )

    counts = (
        f"{report.files_checked} file(s) checked, "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if report.has_failures(fail_on):
        print_error(counts)
    else:
        print_success(counts)
    console.print()


@app.command()
def lint(
    path: Path = typer.Argument(
        Path("."),
        help="Repository root, skills directory, or a single skill directory",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (overrides default search)",
    ),
    tag: Optional[str] = typer.Option(
        None,
        "--tag",
        help="Required tag for reference files (overrides config)",
    ),
    disable: Optional[list[str]] = typer.Option(
        None,
        "--disable",
        "-d",
        help="Rule id to disable (repeatable)",
    ),
    fail_on: Optional[Severity] = typer.Option(
        None,
        "--fail-on",
        case_sensitive=False,
        help="Lowest severity that fails the run",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format",
    ),
):
    """Lint skill manifests and reference files.

    Exits with status 1 when any issue reaches the --fail-on severity.
    """
    try:
        cfg = _load_cfg(config)

        if tag is not None:
            cfg.settings.required_tag = tag or None
        if fail_on is not None:
            cfg.settings.fail_on = fail_on
        for rule_id in disable or []:
            if rule_id not in KNOWN_RULES:
                print_error(f"Unknown rule id: {rule_id}")
                raise typer.Exit(1)
            cfg.rules[rule_id] = RuleConfig(enabled=False)

        catalog = _discover(path, machine=output_format == OutputFormat.JSON)
        reports = [lint_package(p, cfg) for p in catalog.list_skills()]
        threshold = cfg.settings.fail_on
        failed = any(r.has_failures(threshold) for r in reports) or bool(catalog.failures)

        if output_format == OutputFormat.JSON:
            typer.echo(
                json.dumps(
                    {
                        "passed": not failed,
                        "fail_on": threshold.value,
                        "skills": [r.to_dict() for r in reports],
                        "load_failures": catalog.failures,
                    },
                    indent=2,
                )
            )
        else:
            for report in reports:
                _print_report(report, threshold)
            if failed:
                print_error(f"Lint failed (fail-on: {threshold.value})")
            else:
                print_success(f"All {len(reports)} skill(s) passed")

        if failed:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {escape(str(e))}")
        raise typer.Exit(1)


@app.command("list")
def list_skills(
    path: Path = typer.Argument(
        Path("."),
        help="Repository root, skills directory, or a single skill directory",
    ),
    skill: Optional[str] = typer.Option(
        None,
        "--skill",
        "-s",
        help="Show the reference files of this skill",
    ),
):
    """List discovered skills, or the references of one skill."""
    try:
        catalog = _discover(path)

        if skill is None:
            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("Name", style="green")
            table.add_column("Version")
            table.add_column("References", justify="right")
            table.add_column("Description")

            for package in catalog.list_skills():
                table.add_row(
                    package.name,
                    package.version or "",
                    str(package.reference_count),
                    escape(package.description or ""),
                )

            console.print(table)
            return

        package = _select_skill(catalog, skill)

        table = Table(show_header=True, header_style="bold cyan", title=package.name)
        table.add_column("Path", style="green")
        table.add_column("Title")
        table.add_column("Impact")
        table.add_column("Type")

        for reference in package.references:
            metadata = reference.metadata
            if reference.error is not None:
                title = "[red]invalid frontmatter[/red]"
            else:
                title = escape(reference.title or "")
            table.add_row(
                reference.relative_path,
                title,
                (metadata.impact or "") if metadata else "",
                (metadata.type or "") if metadata else "",
            )

        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {escape(str(e))}")
        raise typer.Exit(1)


def _counts_table(title: str, counts: dict[str, int]) -> Table:
    table = Table(show_header=True, header_style="bold cyan", title=title)
    table.add_column("Value", style="green")
    table.add_column("Files", justify="right")
    for key, value in counts.items():
        table.add_row(str(key), str(value))
    return table


@app.command()
def stats(
    path: Path = typer.Argument(
        Path("."),
        help="Repository root, skills directory, or a single skill directory",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format",
    ),
):
    """Show reference counts by category, impact and type."""
    try:
        catalog = _discover(path, machine=output_format == OutputFormat.JSON)
        summaries = [summarize(p) for p in catalog.list_skills()]
        progress = catalog.task_progress()

        if output_format == OutputFormat.JSON:
            data = {"skills": summaries, "tasks": None, "load_failures": catalog.failures}
            if progress is not None:
                data["tasks"] = {
                    "total": progress.total,
                    "done": progress.done,
                    "open": progress.open_items,
                }
            typer.echo(json.dumps(data, indent=2))
            return

        for summary in summaries:
            console.print(
                f"[bold]{escape(summary['name'])}[/bold]: "
                f"{summary['references']} reference file(s)"
            )
            if summary["invalid_frontmatter"]:
                print_warning(
                    f"{summary['invalid_frontmatter']} file(s) with invalid frontmatter"
                )
            console.print(_counts_table("Categories", summary["categories"]))
            console.print(_counts_table("Impact", summary["impact"]))
            console.print(_counts_table("Type", summary["type"]))
            console.print()

        if progress is not None:
            print_info(
                f"Tasks: {progress.done}/{progress.total} done ({progress.percent:.0f}%)"
            )
            for item in progress.open_items:
                console.print(f"  • {escape(item)}")

    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def index(
    path: Path = typer.Argument(
        Path("."),
        help="Repository root, skills directory, or a single skill directory",
    ),
    skill: Optional[str] = typer.Option(
        None,
        "--skill",
        "-s",
        help="Skill to index (required when several are found)",
    ),
    write: bool = typer.Option(
        False,
        "--write",
        help="Rewrite the index region of SKILL.md instead of printing it",
    ),
):
    """Generate the categorized reference index for SKILL.md."""
    try:
        catalog = _discover(path)
        package = _select_skill(catalog, skill)

        if not write:
            typer.echo(render_reference_index(package))
            return

        if update_manifest_index(package):
            print_success(f"Updated index in {package.manifest_path}")
        else:
            print_info(f"Index already up to date: {package.manifest_path}")

    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Failed to build index: {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None,
        help=f"Path where config should be created (default: ./{PROJECT_CONFIG_NAME})",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite existing config file",
    ),
):
    """Create a skill-lint.yaml template."""
    try:
        if path is None:
            path = Path.cwd() / PROJECT_CONFIG_NAME

        if path.exists() and not force:
            print_error(f"Config file already exists: {path}")
            print_info("Use --force to overwrite")
            raise typer.Exit(1)

        with open(path, "w", encoding="utf-8") as f:
            f.write(TEMPLATE_CONFIG)

        print_success(f"Created config file: {path}")
        print_info("Edit the file to adjust lint settings")

    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Failed to create config: {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
