"""Request types and contracts for the external generation calls."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, TypeVar

from ..prompting.constants import SECTION_TYPES, STYLES

T = TypeVar("T")

_FENCE_PATTERN = re.compile(r"^```(?P<lang>[A-Za-z0-9_-]*)\n(?P<body>.*)\n```$", re.DOTALL)
_MARKDOWN_FENCE_TAGS = {"markdown", "md"}


class GenerationError(RuntimeError):
    """Raised when an external generation call fails or returns unusable output."""


class GenerationCancelledError(GenerationError):
    """Raised when an in-flight generation call was aborted."""


@dataclass(frozen=True)
class SectionRequest:
    """Inputs for one README section."""

    repo_url: str
    section_type: str
    style: Optional[str] = None
    custom_section_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.section_type not in SECTION_TYPES:
            raise ValueError(f"Unknown section type: {self.section_type}")
        _check_style(self.style)
        has_name = bool(self.custom_section_name and self.custom_section_name.strip())
        if self.section_type == "custom" and not has_name:
            raise ValueError("customSectionName is required for custom sections")
        if self.section_type != "custom" and self.custom_section_name is not None:
            raise ValueError("customSectionName is only accepted for custom sections")


@dataclass(frozen=True)
class LogoRequest:
    repo_name: str


@dataclass(frozen=True)
class RevisionRequest:
    """Full README text submitted for a rewrite."""

    readme_content: str
    style: Optional[str] = None

    def __post_init__(self) -> None:
        _check_style(self.style)


class SectionSource(Protocol):
    """Produces a Markdown fragment that starts with a heading."""

    async def generate(self, request: SectionRequest) -> str:
        ...


class LogoSource(Protocol):
    """Produces a ``data:<mime>;base64,<data>`` image reference."""

    async def generate(self, request: LogoRequest) -> str:
        ...


class Reviser(Protocol):
    """Produces a full replacement document."""

    async def revise(self, request: RevisionRequest) -> str:
        ...


async def run_blocking(func: Callable[[], T]) -> T:
    """Run a blocking model call on the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def strip_code_fence(text: str, *, untagged: bool = True) -> str:
    """Remove a Markdown fence wrapping the whole response, if any.

    An untagged fence is only unwrapped when `untagged` is set and the body
    holds no other fences, so a document that merely starts and ends with code
    blocks is left alone.
    """
    stripped = text.strip()
    match = _FENCE_PATTERN.match(stripped)
    if not match:
        return stripped
    body = match.group("body")
    lang = match.group("lang").lower()
    if lang in _MARKDOWN_FENCE_TAGS:
        return body.strip()
    if untagged and not lang and not any(line.startswith("```") for line in body.splitlines()):
        return body.strip()
    return stripped


def is_fenced(text: str) -> bool:
    """True when `text` opens and closes with a fence line."""
    return _FENCE_PATTERN.match(text.strip()) is not None


def _check_style(style: Optional[str]) -> None:
    if style is not None and style not in STYLES:
        raise ValueError(f"Unknown style: {style}")


__all__ = [
    "GenerationCancelledError",
    "GenerationError",
    "LogoRequest",
    "LogoSource",
    "Reviser",
    "RevisionRequest",
    "SectionRequest",
    "SectionSource",
    "is_fenced",
    "run_blocking",
    "strip_code_fence",
]
