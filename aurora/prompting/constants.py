"""Shared constants for README prompting and section assembly."""

from __future__ import annotations

STYLES: tuple[str, ...] = ("professional", "friendly", "concise")

DEFAULT_STYLE = "professional"

SECTION_TYPES: tuple[str, ...] = (
    "introduction",
    "features",
    "installation",
    "usage",
    "contributing",
    "license",
    "tech_stack",
    "custom",
)

# Order used when every standard section is generated in one pass.
DEFAULT_SECTIONS: tuple[str, ...] = (
    "introduction",
    "features",
    "tech_stack",
    "installation",
    "usage",
    "contributing",
    "license",
)

SECTION_TITLES: dict[str, str] = {
    "introduction": "Introduction",
    "features": "Features",
    "tech_stack": "Tech Stack",
    "installation": "Installation",
    "usage": "Usage",
    "contributing": "Contributing",
    "license": "License",
}


__all__ = ["DEFAULT_SECTIONS", "DEFAULT_STYLE", "SECTION_TITLES", "SECTION_TYPES", "STYLES"]
