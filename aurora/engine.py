"""README assembly engine: owns the session document and merges generated fragments."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, List, Optional, TypeVar

from .document import append_cumulative, append_section, compose_for_display, seed_document
from .generators.base import (
    GenerationCancelledError,
    GenerationError,
    LogoRequest,
    LogoSource,
    Reviser,
    RevisionRequest,
    SectionRequest,
    SectionSource,
)
from .locator import locate
from .logging import get_logger
from .models import RepositoryIdentity, SessionSnapshot, SessionState
from .postproc.badges import BadgeManager, build_badge_markdown
from .prompting.constants import DEFAULT_SECTIONS, DEFAULT_STYLE, SECTION_TITLES, STYLES
from .stores.session_store import SessionStore

T = TypeVar("T")


class EngineError(RuntimeError):
    """Raised when an operation is not allowed in the current session state."""


class RepositoryNotSetError(EngineError):
    def __init__(self) -> None:
        super().__init__("Set a repository before generating README content.")


class GenerationInProgressError(EngineError):
    """Raised when a generation is requested while another one is in flight."""

    def __init__(self, status: Optional[str]) -> None:
        super().__init__(f"A generation is already in progress ({status or 'unknown'}).")
        self.status = status


@dataclass
class GenerateAllOutcome:
    """Result of a generate-all pass."""

    completed: List[str] = field(default_factory=list)
    failed_section: Optional[str] = None
    error: Optional[str] = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.failed_section is None and not self.cancelled


class ReadmeEngine:
    """Controller for one README session.

    All document mutations go through this class. Generation operations are
    mutually exclusive: a second one started while the first is awaiting the
    model is rejected with `GenerationInProgressError`, as are direct edits.
    Each external call runs as its own task so `cancel()` can abort it; a
    cancelled call never touches the document.
    """

    def __init__(
        self,
        section_source: SectionSource,
        logo_source: LogoSource,
        reviser: Reviser,
        *,
        store: SessionStore | None = None,
        state: SessionState | None = None,
        badge_manager: BadgeManager | None = None,
    ) -> None:
        self.section_source = section_source
        self.logo_source = logo_source
        self.reviser = reviser
        self.store = store
        self.badge_manager = badge_manager or BadgeManager()
        self.logger = get_logger("engine")
        self._state = state or SessionState()
        self._state.status = None
        self._lock = asyncio.Lock()
        self._inflight: Optional[asyncio.Future] = None
        self._cancel_requested = False

    @classmethod
    def restore(
        cls,
        store: SessionStore,
        section_source: SectionSource,
        logo_source: LogoSource,
        reviser: Reviser,
        *,
        default_style: str = DEFAULT_STYLE,
        badge_manager: BadgeManager | None = None,
    ) -> "ReadmeEngine":
        """Create an engine from the stored snapshot, or an empty session."""
        snapshot = store.load()
        if snapshot is None:
            state = SessionState(style=default_style)
        else:
            state = snapshot.to_state()
            if state.style not in STYLES:
                state.style = default_style
        return cls(
            section_source,
            logo_source,
            reviser,
            store=store,
            state=state,
            badge_manager=badge_manager,
        )

    # ------------------------------------------------------------------
    # Read access

    @property
    def document(self) -> str:
        return self._state.document

    @property
    def identity(self) -> Optional[RepositoryIdentity]:
        return self._state.identity

    @property
    def repo_url(self) -> Optional[str]:
        return self._state.repo_url

    @property
    def logo_data_uri(self) -> Optional[str]:
        return self._state.logo_data_uri

    @property
    def style(self) -> str:
        return self._state.style

    @property
    def status(self) -> Optional[str]:
        return self._state.status

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot.from_state(self._state)

    def compose_for_display(self) -> str:
        """Document with the logo embed prefixed; the document itself is not changed."""
        return compose_for_display(self._state.document, self._state.logo_data_uri)

    # ------------------------------------------------------------------
    # Direct edits

    def set_repository(self, locator: str) -> RepositoryIdentity:
        """Select a repository and reseed the document with its title."""
        self._ensure_idle()
        identity = locate(locator)
        self._state.repo_url = locator.strip()
        self._state.identity = identity
        self._state.document = seed_document(identity)
        self._state.logo_data_uri = None
        self.logger.info("Repository set to %s", identity.slug)
        self._persist()
        return identity

    def set_document(self, text: str) -> None:
        self._ensure_idle()
        self._state.document = text
        self._persist()

    def set_style(self, style: str) -> None:
        if style not in STYLES:
            raise ValueError(f"Unknown style: {style}")
        self._state.style = style
        self._persist()

    def insert_badge(self, badge_markdown: str) -> None:
        self._ensure_idle()
        self._state.document = self.badge_manager.insert(self._state.document, badge_markdown)
        self._persist()

    def add_badge(self, kind: str, badge_style: str | None = None) -> str:
        """Build a repository badge of `kind` and insert it under the title."""
        identity = self._require_identity()
        markdown = build_badge_markdown(identity, kind, badge_style)
        self.insert_badge(markdown)
        return markdown

    # ------------------------------------------------------------------
    # Generation

    async def generate_section(
        self,
        section_type: str,
        *,
        custom_section_name: str | None = None,
        style: str | None = None,
    ) -> str:
        """Generate one section and append it to the document."""
        identity = self._require_identity()
        request = SectionRequest(
            repo_url=self._state.repo_url or identity.slug,
            section_type=section_type,
            style=style or self._state.style,
            custom_section_name=custom_section_name,
        )
        async with self._operation(section_type):
            try:
                fragment = await self._call(lambda: self.section_source.generate(request))
            except GenerationCancelledError:
                self.logger.info("Section %s cancelled", section_type)
                raise
            except GenerationError as exc:
                self.logger.warning("Section %s failed: %s", section_type, exc)
                raise
            self._state.document = append_section(self._state.document, fragment)
            self._persist()
        self.logger.info("Section added: %s", custom_section_name or section_type)
        return fragment

    async def generate_all(self, *, style: str | None = None) -> GenerateAllOutcome:
        """Reseed the document and generate every standard section in order.

        Stops at the first failure; sections appended before it are kept.
        """
        identity = self._require_identity()
        repo_url = self._state.repo_url or identity.slug
        effective_style = style or self._state.style
        outcome = GenerateAllOutcome()

        async with self._operation("all"):
            cumulative = seed_document(identity)
            self._state.document = cumulative
            self._persist()

            for section in DEFAULT_SECTIONS:
                if self._cancel_requested:
                    outcome.cancelled = True
                    break
                request = SectionRequest(repo_url=repo_url, section_type=section, style=effective_style)
                try:
                    fragment = await self._call(lambda: self.section_source.generate(request))
                except GenerationCancelledError as exc:
                    self.logger.info("Generate-all cancelled at %s", section)
                    outcome.cancelled = True
                    outcome.failed_section = section
                    outcome.error = str(exc)
                    break
                except GenerationError as exc:
                    self.logger.warning(
                        "Failed to create %s: %s", SECTION_TITLES.get(section, section), exc
                    )
                    outcome.failed_section = section
                    outcome.error = str(exc)
                    break
                cumulative = append_cumulative(cumulative, fragment)
                self._state.document = cumulative
                self._persist()
                outcome.completed.append(section)

        self.logger.info(
            "Generate-all finished: %d/%d sections", len(outcome.completed), len(DEFAULT_SECTIONS)
        )
        return outcome

    async def generate_logo(self) -> str:
        identity = self._require_identity()
        request = LogoRequest(repo_name=identity.repo)
        async with self._operation("logo"):
            try:
                logo = await self._call(lambda: self.logo_source.generate(request))
            except GenerationCancelledError:
                self.logger.info("Logo creation cancelled")
                raise
            except GenerationError as exc:
                self.logger.warning("Logo creation failed: %s", exc)
                raise
            self._state.logo_data_uri = logo
            self._persist()
        return logo

    async def revise_all(self, *, style: str | None = None) -> str:
        """Replace the document with a full revision; unchanged on failure."""
        if not self._state.document:
            raise EngineError("The README is empty; there is nothing to improve.")
        request = RevisionRequest(
            readme_content=self._state.document, style=style or self._state.style
        )
        async with self._operation("improve"):
            try:
                improved = await self._call(lambda: self.reviser.revise(request))
            except GenerationCancelledError:
                self.logger.info("Improvement cancelled")
                raise
            except GenerationError as exc:
                self.logger.warning("Improvement failed: %s", exc)
                raise
            self._state.document = improved
            self._persist()
        return improved

    def cancel(self) -> bool:
        """Abort the in-flight generation, if any. Returns True when one was running."""
        if not self._lock.locked():
            return False
        self._cancel_requested = True
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self.logger.info("Cancellation requested for %s", self._state.status)
        return True

    async def close(self) -> None:
        """End the session: cancel pending work and wait for it to unwind."""
        if self.cancel():
            async with self._lock:
                pass
        self._persist()

    # ------------------------------------------------------------------
    # Internal helpers

    @asynccontextmanager
    async def _operation(self, status: str) -> AsyncIterator[None]:
        if self._lock.locked():
            raise GenerationInProgressError(self._state.status)
        async with self._lock:
            self._state.status = status
            self._cancel_requested = False
            try:
                yield
            finally:
                self._state.status = None
                self._cancel_requested = False

    async def _call(self, factory: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.ensure_future(factory())
        self._inflight = task
        try:
            result = await task
        except asyncio.CancelledError:
            if self._cancel_requested:
                raise GenerationCancelledError("Generation was cancelled.") from None
            raise
        except GenerationError:
            raise
        except Exception as exc:  # any collaborator failure is a generation failure
            raise GenerationError(str(exc) or exc.__class__.__name__) from exc
        finally:
            self._inflight = None
        if self._cancel_requested:
            raise GenerationCancelledError("Generation was cancelled.")
        return result

    def _ensure_idle(self) -> None:
        if self._lock.locked():
            raise GenerationInProgressError(self._state.status)

    def _require_identity(self) -> RepositoryIdentity:
        if self._state.identity is None:
            raise RepositoryNotSetError()
        return self._state.identity

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.snapshot())


__all__ = [
    "EngineError",
    "GenerateAllOutcome",
    "GenerationInProgressError",
    "ReadmeEngine",
    "RepositoryNotSetError",
]
