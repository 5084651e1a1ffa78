"""SKILL.md content generation."""

from skill_lint.compose.index import (
    INDEX_END,
    INDEX_START,
    render_reference_index,
    update_manifest_index,
)

__all__ = [
    "INDEX_END",
    "INDEX_START",
    "render_reference_index",
    "update_manifest_index",
]
