"""Built-in default configuration for skill-lint."""

# Rule ids understood by the linter; rule overrides must use one of these
KNOWN_RULES = (
    "manifest-frontmatter",
    "manifest-required",
    "manifest-name",
    "manifest-fields",
    "manifest-links",
    "reference-frontmatter",
    "reference-required",
    "reference-impact",
    "reference-type",
    "reference-tags",
    "reference-impact-description",
    "reference-sections",
    "reference-duplicate-title",
    "orphan-reference",
    "readme-count",
    "empty-package",
)

DEFAULT_RECOMMENDED_SECTIONS = [
    "Task Checklist",
    "Code Example",
    "Common Gotchas",
    "Reference",
]

# Default configuration that serves as the base for all other configs
DEFAULT_CONFIG = {
    "version": "1.0",
    "settings": {
        "required_tag": "vue2.6.14",
        "recommended_sections": DEFAULT_RECOMMENDED_SECTIONS,
        "fail_on": "error",
        "check_readme_count": True,
    },
    "rules": {},
}
