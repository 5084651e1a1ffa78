"""Categorized reference index generation for SKILL.md."""

import re

from skill_lint.core.skill import ReferenceFile, SkillPackage

INDEX_START = "<!-- reference-index:start -->"
INDEX_END = "<!-- reference-index:end -->"

_INDEX_BLOCK_RE = re.compile(
    re.escape(INDEX_START) + r".*?" + re.escape(INDEX_END), re.DOTALL
)


def category_title(category: str) -> str:
    """Turn a category directory name into a heading ('data-flow' -> 'Data Flow')."""
    words = re.split(r"[-_\s]+", category.strip())
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def _link_text(text: str) -> str:
    return re.sub(r"([\\\[\]])", r"\\\1", text)


def _index_entry(reference: ReferenceFile) -> str:
    title = _link_text(reference.title or reference.path.stem)
    entry = f"- [{title}]({reference.relative_path})"
    if reference.metadata and reference.metadata.impact:
        entry += f" ({reference.metadata.impact})"
    return entry


def render_reference_index(package: SkillPackage) -> str:
    """Render the categorized link index for a package.

    Args:
        package: The loaded skill package

    Returns:
        Markdown block delimited by the index markers, one ``###`` heading per
        category with categories and entries in path order
    """
    parts = [INDEX_START]

    for category, references in sorted(package.categories().items()):
        parts.append(f"### {category_title(category)}")
        parts.append("\n".join(_index_entry(r) for r in references))

    parts.append(INDEX_END)
    return "\n\n".join(parts)


def update_manifest_index(package: SkillPackage) -> bool:
    """Rewrite the index region of the package's SKILL.md.

    The region between the index markers is replaced; when no markers exist
    the index is appended to the end of the file.

    Returns:
        True if SKILL.md was modified
    """
    manifest_path = package.manifest_path
    content = manifest_path.read_text(encoding="utf-8")
    index = render_reference_index(package)

    if _INDEX_BLOCK_RE.search(content):
        updated = _INDEX_BLOCK_RE.sub(lambda _: index, content, count=1)
    else:
        updated = content.rstrip("\n") + "\n\n" + index + "\n"

    if updated == content:
        return False

    manifest_path.write_text(updated, encoding="utf-8")
    return True
