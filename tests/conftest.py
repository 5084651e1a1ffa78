"""Shared pytest fixtures for skill-lint tests."""

from pathlib import Path

import pytest

SKILL_NAME = "vue-options-api"

SKILL_MD = """---
name: vue-options-api
description: Vue 2.6.14 Options API reference for coding assistants
version: 1.0.0
license: MIT
author: Example Author
---

# Vue Options API

Load the reference that matches the task.

## Components

- [Data Must Be a Function](reference/components/data-function.md)

## Reactivity

- [Array Change Caveats](reference/reactivity/array-caveats.md)

## General

- [Lifecycle Hooks](reference/lifecycle-hooks.md)
"""

REFERENCE_TEMPLATE = """---
title: {title}
impact: {impact}
impactDescription: {impact_description}
type: {type}
tags: [vue2.6.14, {extra_tag}]
---

# {title}

## Task Checklist

- [ ] Apply the guidance

## Code Example

```js
// ## not a heading
export default {{
  data() {{
    return {{ items: [] }}
  }}
}}
```

## Common Gotchas

- Watch out for `this` in arrow functions.

## Reference

- [Vue 2 Guide](https://v2.vuejs.org/v2/guide/)
"""

REFERENCES = {
    "reference/components/data-function.md": {
        "title": "Data Must Be a Function",
        "impact": "HIGH",
        "impact_description": "Instances share state otherwise",
        "type": "gotcha",
        "extra_tag": "data",
    },
    "reference/reactivity/array-caveats.md": {
        "title": "Array Change Caveats",
        "impact": "MEDIUM",
        "impact_description": "Index assignment is not reactive",
        "type": "gotcha",
        "extra_tag": "reactivity",
    },
    "reference/lifecycle-hooks.md": {
        "title": "Lifecycle Hooks",
        "impact": "LOW",
        "impact_description": "Ordering of hook calls",
        "type": "reference",
        "extra_tag": "lifecycle",
    },
}


def render_reference(**overrides) -> str:
    """Render a valid reference document, with field overrides."""
    values = dict(REFERENCES["reference/components/data-function.md"])
    values.update(overrides)
    return REFERENCE_TEMPLATE.format(**values)


def write_skill(skill_dir: Path) -> Path:
    """Write a complete, lint-clean skill package into skill_dir."""
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(SKILL_MD)
    for relative, values in REFERENCES.items():
        target = skill_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(REFERENCE_TEMPLATE.format(**values))
    return skill_dir


@pytest.fixture
def skill_repo(tmp_path):
    """Create a repository with skills/<name>/, a README and a tasks.md."""
    repo = tmp_path / "repo"
    write_skill(repo / "skills" / SKILL_NAME)
    (repo / "README.md").write_text(
        "# Vue Skills\n\nThis skill ships 3 reference files covering the Options API.\n"
    )
    (repo / "tasks.md").write_text(
        "# Tasks\n\n"
        "- [x] Write data function guide\n"
        "- [x] Write array caveats guide\n"
        "- [ ] Write mixins guide\n"
    )
    return repo


@pytest.fixture
def skill_dir(skill_repo):
    """The single skill directory inside skill_repo."""
    return skill_repo / "skills" / SKILL_NAME


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Isolate cwd, HOME and SKILL_LINT_* variables from the real environment."""
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    home_dir = tmp_path / "home"
    home_dir.mkdir()

    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("HOME", str(home_dir))
    for name in ("SKILL_LINT_REQUIRED_TAG", "SKILL_LINT_FAIL_ON", "SKILL_LINT_DISABLE"):
        monkeypatch.delenv(name, raising=False)

    config_dir = home_dir / ".config" / "skill-lint"
    config_dir.mkdir(parents=True)

    return {
        "work_dir": work_dir,
        "home_dir": home_dir,
        "config_dir": config_dir,
    }


@pytest.fixture
def minimal_config_dict():
    """Provide a minimal valid configuration dictionary."""
    return {
        "version": "1.0",
        "settings": {
            "required_tag": "vue2.6.14",
            "fail_on": "error",
        },
        "rules": {},
    }


@pytest.fixture
def write_reference(skill_dir):
    """Factory writing a reference file into skill_dir.

    Pass ``text`` for verbatim content, or field overrides for the template.
    """

    def _write(relative: str, text: str = None, **overrides) -> Path:
        target = skill_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text if text is not None else render_reference(**overrides))
        return target

    return _write


@pytest.fixture
def make_skill():
    """Factory writing a lint-clean skill package at a given directory."""
    return write_skill
