"""Prompt templates and section constants."""

from .builder import Prompt, PromptBuilder
from .constants import DEFAULT_SECTIONS, DEFAULT_STYLE, SECTION_TITLES, SECTION_TYPES, STYLES

__all__ = [
    "DEFAULT_SECTIONS",
    "DEFAULT_STYLE",
    "Prompt",
    "PromptBuilder",
    "SECTION_TITLES",
    "SECTION_TYPES",
    "STYLES",
]
