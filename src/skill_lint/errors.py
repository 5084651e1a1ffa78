"""Exception types raised while loading skill packages."""

from pathlib import Path
from typing import Optional


class SkillLintError(Exception):
    """Base error for skill-lint."""


class FrontmatterError(SkillLintError):
    """Raised when a markdown file's YAML frontmatter is missing or malformed."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        line: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        location = ""
        if self.path is not None:
            location = str(self.path)
            if self.line is not None:
                location += f":{self.line}"
            location += ": "
        return f"{location}{self.message}"


class UnreadableFileError(FrontmatterError):
    """Raised when a markdown file cannot be read or is not valid UTF-8."""


class PackageLayoutError(SkillLintError):
    """Raised when a directory cannot be loaded as a skill package."""


class ConfigError(SkillLintError):
    """Raised when a configuration file cannot be read."""
