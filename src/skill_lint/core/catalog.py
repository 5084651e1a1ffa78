"""Skill catalog for discovering skill packages in a repository."""

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from skill_lint.core.skill import MANIFEST_FILENAME, SkillPackage
from skill_lint.errors import PackageLayoutError

logger = logging.getLogger(__name__)

SKILLS_DIRNAME = "skills"
TASKS_FILENAME = "tasks.md"

_TASK_RE = re.compile(r"^\s*[-*+]\s+\[([ xX])\]\s+(.*\S)\s*$")


def discover_skill_dirs(root: Path) -> list[Path]:
    """Find skill directories under a root path.

    Resolution order:
    1. ``root`` itself, when it holds a SKILL.md
    2. ``root/skills/*/SKILL.md`` (the published repository layout)
    3. ``root/*/SKILL.md``

    Args:
        root: Repository root or skill directory

    Returns:
        Skill directories sorted by name
    """
    root = Path(root)
    if (root / MANIFEST_FILENAME).is_file():
        return [root]

    skills_dir = root / SKILLS_DIRNAME
    if skills_dir.is_dir():
        found = sorted(
            d for d in skills_dir.iterdir() if (d / MANIFEST_FILENAME).is_file()
        )
        if found:
            return found

    if not root.is_dir():
        return []
    return sorted(d for d in root.iterdir() if (d / MANIFEST_FILENAME).is_file())


@dataclass
class TaskProgress:
    """Completion state of a markdown task checklist."""

    total: int = 0
    done: int = 0
    open_items: list[str] = field(default_factory=list)

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.done / self.total


def parse_task_checklist(path: Path) -> TaskProgress:
    """Read ``- [ ]`` / ``- [x]`` items from a markdown checklist.

    Args:
        path: Path to the checklist file

    Returns:
        TaskProgress with totals and the text of unchecked items
    """
    progress = TaskProgress()
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        match = _TASK_RE.match(line)
        if not match:
            continue
        progress.total += 1
        if match.group(1).lower() == "x":
            progress.done += 1
        else:
            progress.open_items.append(match.group(2))
    return progress


def summarize(package: SkillPackage) -> dict[str, Any]:
    """Count a package's references by category, impact and type.

    Returns:
        JSON-friendly summary dictionary
    """
    by_category = Counter(r.category for r in package.references)
    by_impact = Counter(
        (r.metadata.impact if r.metadata and r.metadata.impact else "unset")
        for r in package.references
    )
    by_type = Counter(
        (r.metadata.type if r.metadata and r.metadata.type else "unset")
        for r in package.references
    )
    return {
        "name": package.name,
        "version": package.version,
        "references": package.reference_count,
        "categories": dict(sorted(by_category.items())),
        "impact": dict(sorted(by_impact.items())),
        "type": dict(sorted(by_type.items())),
        "invalid_frontmatter": sum(1 for r in package.references if r.error),
    }


class SkillCatalog:
    """Loads and indexes every skill package found under a root directory.

    A directory that looks like a skill but cannot be loaded is recorded in
    ``failures`` rather than aborting discovery of the others.
    """

    def __init__(self, root: Path):
        """Initialize the catalog for a root directory.

        Args:
            root: Repository root or a single skill directory
        """
        self.root = Path(root)
        self._skills: dict[str, SkillPackage] = {}
        self.failures: dict[str, str] = {}

    def discover(self) -> list[SkillPackage]:
        """Scan the root and load all skill packages.

        Returns:
            The loaded packages, sorted by name
        """
        self._skills.clear()
        self.failures.clear()

        for skill_dir in discover_skill_dirs(self.root):
            try:
                package = SkillPackage.load(skill_dir)
            except (PackageLayoutError, OSError) as e:
                logger.warning("Skipping %s: %s", skill_dir, e)
                self.failures[skill_dir.name] = str(e)
                continue
            self._skills[package.name] = package

        logger.info(
            "Discovered %d skill(s) under %s: %s",
            len(self._skills),
            self.root,
            list(self._skills.keys()),
        )
        return self.list_skills()

    def list_skills(self) -> list[SkillPackage]:
        """Get all loaded packages sorted by name."""
        return [self._skills[name] for name in sorted(self._skills)]

    def get_skill(self, name: str) -> Optional[SkillPackage]:
        """Get a loaded package by name, or None."""
        return self._skills.get(name)

    def has_skill(self, name: str) -> bool:
        """Check whether a package with this name was loaded."""
        return name in self._skills

    @property
    def tasks_path(self) -> Optional[Path]:
        """Location of the repository's tasks.md checklist, if present."""
        candidates = [self.root / TASKS_FILENAME]
        if self.root.parent.name == SKILLS_DIRNAME:
            candidates.append(self.root.parent.parent / TASKS_FILENAME)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def task_progress(self) -> Optional[TaskProgress]:
        """Parse the repository checklist, or None when there is none."""
        path = self.tasks_path
        if path is None:
            return None
        return parse_task_checklist(path)
