"""Pure merge rules for the README document buffer."""

from __future__ import annotations

from typing import Optional

from .models import RepositoryIdentity

SECTION_SEPARATOR = "\n\n"
LOGO_TEMPLATE = '<p align="center"><img src="{logo}" alt="logo" width="120"></p>\n\n'


def seed_document(identity: RepositoryIdentity) -> str:
    """Return the initial document for a freshly selected repository."""
    return f"# {identity.repo}"


def append_section(document: str, fragment: str) -> str:
    """Append a single generated section.

    The document is trimmed and joined to the fragment with one blank line; an
    empty (or whitespace-only) document yields the fragment unchanged.
    """
    trimmed = document.strip()
    separator = SECTION_SEPARATOR if trimmed else ""
    return trimmed + separator + fragment


def append_cumulative(document: str, fragment: str) -> str:
    """Append a section during a generate-all pass.

    Unlike `append_section` the document is not trimmed, and no separator is
    added when it already ends with a blank-line pair.
    """
    needs_separator = bool(document.strip()) and not document.endswith(SECTION_SEPARATOR)
    return document + (SECTION_SEPARATOR if needs_separator else "") + fragment


def compose_for_display(document: str, logo_data_uri: Optional[str]) -> str:
    """Return the document with a centered logo embed ahead of it, if a logo is set."""
    if not logo_data_uri:
        return document
    return LOGO_TEMPLATE.format(logo=logo_data_uri) + document


__all__ = [
    "append_cumulative",
    "append_section",
    "compose_for_display",
    "seed_document",
]
