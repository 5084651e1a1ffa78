"""YAML frontmatter and markdown structure parsing."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from skill_lint.errors import FrontmatterError, UnreadableFileError

FENCE = "---"

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
_CODE_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_INLINE_CODE_RE = re.compile(r"`[^`]*`")
_LINK_RE = re.compile(r"(?<!!)\[((?:\\.|[^\]\\])*)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")


@dataclass
class Section:
    """A markdown heading and the text that follows it."""

    title: str
    level: int
    line: int
    content: str = ""


@dataclass
class Link:
    """An inline markdown link."""

    text: str
    target: str
    line: int

    @property
    def is_external(self) -> bool:
        """Whether the link points outside the package (URL, mailto, anchor)."""
        return bool(re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*:", self.target)) or self.target.startswith("#")


def read_markdown(path: Path) -> str:
    """Read a markdown file as UTF-8.

    Raises:
        UnreadableFileError: If the file cannot be read or decoded; for a
            decoding failure ``line`` is the line holding the bad byte
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        line = e.object[: e.start].count(b"\n") + 1
        raise UnreadableFileError(
            f"file is not valid UTF-8 ({e.reason} at byte {e.start})", path, line
        ) from e
    except OSError as e:
        raise UnreadableFileError(f"file cannot be read: {e.strerror or e}", path) from e


def split_frontmatter(
    text: str, path: Optional[Path] = None
) -> tuple[dict[str, Any], str, int]:
    """Split a markdown document into frontmatter data and body.

    The document must open with a ``---`` line; the frontmatter ends at the
    next line consisting only of ``---``.

    Args:
        text: Full document text
        path: Optional file path, used in error messages

    Returns:
        Tuple of (frontmatter mapping, body text, 1-based line number where
        the body starts)

    Raises:
        FrontmatterError: If the frontmatter is missing, unterminated, not
            valid YAML, or not a mapping
    """
    text = text.lstrip("\ufeff")
    lines = text.splitlines()

    if not lines or lines[0].strip() != FENCE:
        raise FrontmatterError("missing frontmatter: file must start with '---'", path, 1)

    closing = None
    for index in range(1, len(lines)):
        if lines[index].strip() == FENCE:
            closing = index
            break

    if closing is None:
        raise FrontmatterError("unterminated frontmatter: no closing '---'", path, 1)

    block = "\n".join(lines[1:closing])
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # Block starts on line 2 of the file
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise FrontmatterError(f"invalid YAML in frontmatter: {problem}", path, line) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"frontmatter must be a mapping, got {type(data).__name__}", path, 2
        )

    body = "\n".join(lines[closing + 1:])
    return data, body, closing + 2


def _iter_prose_lines(body: str, first_line: int):
    """Yield (line_number, line, in_code) for each line, flagging fenced code."""
    in_fence = False
    fence_marker = ""
    for offset, line in enumerate(body.splitlines()):
        match = _CODE_FENCE_RE.match(line)
        if match:
            if not in_fence:
                in_fence = True
                fence_marker = match.group(1)
            elif match.group(1) == fence_marker:
                in_fence = False
            yield first_line + offset, line, True
            continue
        yield first_line + offset, line, in_fence


def parse_sections(body: str, first_line: int = 1) -> list[Section]:
    """Parse ATX headings outside fenced code into sections.

    Each section's content runs until the next heading of any level.
    """
    sections: list[Section] = []
    content: list[str] = []

    for line_number, line, in_code in _iter_prose_lines(body, first_line):
        match = None if in_code else _HEADING_RE.match(line)
        if match:
            if sections:
                sections[-1].content = "\n".join(content).strip()
            content = []
            sections.append(
                Section(
                    title=match.group(2).strip(),
                    level=len(match.group(1)),
                    line=line_number,
                )
            )
        else:
            content.append(line)

    if sections:
        sections[-1].content = "\n".join(content).strip()

    return sections


def extract_links(body: str, first_line: int = 1) -> list[Link]:
    """Extract inline links (not images) outside code blocks and code spans."""
    links: list[Link] = []
    for line_number, line, in_code in _iter_prose_lines(body, first_line):
        if in_code:
            continue
        stripped = _INLINE_CODE_RE.sub("", line)
        for match in _LINK_RE.finditer(stripped):
            links.append(Link(text=match.group(1), target=match.group(2), line=line_number))
    return links
