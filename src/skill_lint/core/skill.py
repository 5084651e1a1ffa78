"""Core skill package models and loading."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from skill_lint.core.frontmatter import (
    Link,
    Section,
    extract_links,
    parse_sections,
    read_markdown,
    split_frontmatter,
)
from skill_lint.errors import FrontmatterError, PackageLayoutError, UnreadableFileError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "SKILL.md"
REFERENCE_DIRNAME = "reference"
README_FILENAME = "README.md"
GENERAL_CATEGORY = "general"


class ImpactLevel(str, Enum):
    """How much a reference document matters to the reader."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ReferenceType(str, Enum):
    """Kinds of reference documents."""

    CAPABILITY = "capability"
    BEST_PRACTICE = "best-practice"
    ANTI_PATTERN = "anti-pattern"
    GOTCHA = "gotcha"
    PATTERN = "pattern"
    REFERENCE = "reference"


def _as_text(value: Any) -> Optional[str]:
    # YAML turns `version: 1.0` into a float and dates into date objects
    if value is None:
        return None
    return str(value)


@dataclass
class SkillManifest:
    """Metadata parsed from a skill's SKILL.md frontmatter."""

    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    license: Optional[str] = None
    author: Optional[str] = None
    # False when YAML typed the version (`1.10` loads as the float 1.1)
    version_is_text: bool = True
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, data: dict[str, Any]) -> "SkillManifest":
        """Create a manifest from parsed YAML."""
        data = dict(data)
        version = data.pop("version", None)
        return cls(
            name=_as_text(data.pop("name", None)),
            description=_as_text(data.pop("description", None)),
            version=_as_text(version),
            version_is_text=version is None or isinstance(version, str),
            license=_as_text(data.pop("license", None)),
            author=_as_text(data.pop("author", None)),
            extra=data,
        )


@dataclass
class ReferenceMetadata:
    """Metadata parsed from a reference file's frontmatter.

    Values are kept as written; checking them against ImpactLevel and
    ReferenceType is left to the lint rules.
    """

    title: Optional[str] = None
    impact: Optional[str] = None
    impact_description: Optional[str] = None
    type: Optional[str] = None
    tags: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, data: dict[str, Any]) -> "ReferenceMetadata":
        """Create metadata from parsed YAML."""
        data = dict(data)
        tags = data.pop("tags", None)
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        return cls(
            title=_as_text(data.pop("title", None)),
            impact=_as_text(data.pop("impact", None)),
            impact_description=_as_text(data.pop("impactDescription", None)),
            type=_as_text(data.pop("type", None)),
            tags=tags,
            extra=data,
        )


@dataclass
class ReferenceFile:
    """A single reference document inside a skill package."""

    path: Path
    relative_path: str
    category: str
    metadata: Optional[ReferenceMetadata] = None
    sections: list[Section] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    error: Optional[FrontmatterError] = None
    body_line: int = 1

    @classmethod
    def load(cls, path: Path, skill_root: Path) -> "ReferenceFile":
        """Read and parse a reference file.

        Frontmatter and read problems (undecodable bytes, permissions) are
        recorded on ``error`` instead of raised so a single broken file does
        not stop a package from loading.
        """
        relative = path.relative_to(skill_root)
        parts = relative.parts
        # reference/<category>/.../file.md
        category = parts[1] if len(parts) > 2 else GENERAL_CATEGORY

        reference = cls(
            path=path,
            relative_path=relative.as_posix(),
            category=category,
        )

        try:
            text = read_markdown(path)
        except UnreadableFileError as e:
            logger.warning("Cannot read %s: %s", path, e.message)
            reference.error = e
            return reference

        try:
            data, body, body_line = split_frontmatter(text, path)
        except FrontmatterError as e:
            logger.debug("Frontmatter error in %s: %s", path, e)
            reference.error = e
            reference.sections = parse_sections(text)
            reference.links = extract_links(text)
            return reference

        reference.metadata = ReferenceMetadata.from_yaml(data)
        reference.body_line = body_line
        reference.sections = parse_sections(body, body_line)
        reference.links = extract_links(body, body_line)
        return reference

    @property
    def tags(self) -> list[str]:
        """Tags from the frontmatter, or an empty list."""
        if self.metadata and isinstance(self.metadata.tags, list):
            return [str(t) for t in self.metadata.tags]
        return []

    @property
    def title(self) -> Optional[str]:
        """Title from the frontmatter, if any."""
        return self.metadata.title if self.metadata else None


@dataclass
class SkillPackage:
    """A skill directory: a SKILL.md manifest plus reference/**/*.md files."""

    name: str
    path: Path
    manifest: Optional[SkillManifest] = None
    manifest_error: Optional[FrontmatterError] = None
    manifest_sections: list[Section] = field(default_factory=list)
    manifest_links: list[Link] = field(default_factory=list)
    references: list[ReferenceFile] = field(default_factory=list)
    readme_path: Optional[Path] = None

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_FILENAME

    @property
    def reference_dir(self) -> Path:
        return self.path / REFERENCE_DIRNAME

    @property
    def reference_count(self) -> int:
        return len(self.references)

    @classmethod
    def load(cls, path: Path) -> "SkillPackage":
        """Load a skill package from disk.

        Args:
            path: Skill directory containing SKILL.md

        Returns:
            The loaded SkillPackage

        Raises:
            PackageLayoutError: If the path is missing, not a directory, or has
                no SKILL.md
        """
        path = Path(path)
        if not path.exists():
            raise PackageLayoutError(f"Skill path does not exist: {path}")
        if not path.is_dir():
            raise PackageLayoutError(f"Skill path is not a directory: {path}")

        manifest_path = path / MANIFEST_FILENAME
        if not manifest_path.is_file():
            raise PackageLayoutError(f"No {MANIFEST_FILENAME} found in {path}")

        package = cls(name=path.name, path=path)
        package._load_manifest(manifest_path)
        package.references = [
            ReferenceFile.load(f, path) for f in package._find_reference_files()
        ]
        package.readme_path = package._find_readme()

        logger.debug(
            "Loaded skill %s with %d reference file(s)",
            package.name,
            len(package.references),
        )
        return package

    def _load_manifest(self, manifest_path: Path) -> None:
        try:
            text = read_markdown(manifest_path)
        except UnreadableFileError as e:
            logger.warning("Cannot read %s: %s", manifest_path, e.message)
            self.manifest_error = e
            return

        try:
            data, body, body_line = split_frontmatter(text, manifest_path)
        except FrontmatterError as e:
            logger.debug("Manifest frontmatter error in %s: %s", manifest_path, e)
            self.manifest_error = e
            self.manifest_sections = parse_sections(text)
            self.manifest_links = extract_links(text)
            return

        self.manifest = SkillManifest.from_yaml(data)
        self.manifest_sections = parse_sections(body, body_line)
        self.manifest_links = extract_links(body, body_line)

    def _find_reference_files(self) -> list[Path]:
        if not self.reference_dir.is_dir():
            return []
        files = [
            f
            for f in self.reference_dir.rglob("*")
            if f.is_file() and f.suffix.lower() == ".md"
        ]
        return sorted(files, key=lambda f: f.relative_to(self.path).as_posix())

    def _find_readme(self) -> Optional[Path]:
        local = self.path / README_FILENAME
        if local.is_file():
            return local
        # skills/<name>/ inside a repository: the README sits at the repo root
        if self.path.parent.name == "skills":
            repo_readme = self.path.parent.parent / README_FILENAME
            if repo_readme.is_file():
                return repo_readme
        return None

    def categories(self) -> dict[str, list[ReferenceFile]]:
        """Group references by category, in first-seen order."""
        grouped: dict[str, list[ReferenceFile]] = {}
        for reference in self.references:
            grouped.setdefault(reference.category, []).append(reference)
        return grouped

    def get_reference(self, relative_path: str) -> Optional[ReferenceFile]:
        """Look up a reference by its path relative to the skill root."""
        for reference in self.references:
            if reference.relative_path == relative_path:
                return reference
        return None

    @property
    def description(self) -> Optional[str]:
        return self.manifest.description if self.manifest else None

    @property
    def version(self) -> Optional[str]:
        return self.manifest.version if self.manifest else None
