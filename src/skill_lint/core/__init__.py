"""Core skill package models and discovery."""

from skill_lint.core.catalog import SkillCatalog, discover_skill_dirs
from skill_lint.core.skill import (
    ImpactLevel,
    ReferenceFile,
    ReferenceMetadata,
    ReferenceType,
    SkillManifest,
    SkillPackage,
)

__all__ = [
    "ImpactLevel",
    "ReferenceFile",
    "ReferenceMetadata",
    "ReferenceType",
    "SkillCatalog",
    "SkillManifest",
    "SkillPackage",
    "discover_skill_dirs",
]
