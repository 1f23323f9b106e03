"""Test doubles for the external generation collaborators."""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

from aurora.generators.base import (
    GenerationError,
    LogoRequest,
    RevisionRequest,
    SectionRequest,
)
from aurora.prompting.constants import SECTION_TITLES

LOGO_URI = "data:image/png;base64,iVBORw0KGgo="


def fragment_for(request: SectionRequest) -> str:
    title = request.custom_section_name or SECTION_TITLES[request.section_type]
    return f"## {title}\n\nContent for {title}."


class FakeSectionSource:
    """Returns a heading plus one line per section; fails for selected types."""

    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls: List[SectionRequest] = []

    async def generate(self, request: SectionRequest) -> str:
        self.calls.append(request)
        if request.section_type in self.fail_on:
            raise GenerationError(f"model refused {request.section_type}")
        return fragment_for(request)


class GatedSectionSource(FakeSectionSource):
    """Blocks on `block_on` (or every section) until `release` is set."""

    def __init__(self, block_on: Optional[str] = None) -> None:
        super().__init__()
        self.block_on = block_on
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, request: SectionRequest) -> str:
        self.calls.append(request)
        if self.block_on is None or request.section_type == self.block_on:
            self.started.set()
            await self.release.wait()
        return fragment_for(request)


class FakeLogoSource:
    def __init__(self, result: str = LOGO_URI, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[LogoRequest] = []

    async def generate(self, request: LogoRequest) -> str:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.result


class FakeReviser:
    def __init__(self, result: str = "# Improved\n", error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: List[RevisionRequest] = []

    async def revise(self, request: RevisionRequest) -> str:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.result


__all__ = [
    "FakeLogoSource",
    "FakeReviser",
    "FakeSectionSource",
    "GatedSectionSource",
    "LOGO_URI",
    "fragment_for",
]
