"""Tests for aurora.engine."""

from __future__ import annotations

import asyncio
from unittest.mock import Mock

import pytest

from aurora.engine import (
    EngineError,
    GenerationInProgressError,
    ReadmeEngine,
    RepositoryNotSetError,
)
from aurora.generators.base import GenerationCancelledError, GenerationError
from aurora.locator import RepositoryLocatorError
from aurora.models import RepositoryIdentity
from aurora.stores.session_store import SessionStore
from tests._fixtures.fakes import (
    LOGO_URI,
    FakeLogoSource,
    FakeReviser,
    FakeSectionSource,
    GatedSectionSource,
)

INTRO = "## Introduction\n\nContent for Introduction."
FEATURES = "## Features\n\nContent for Features."
TECH_STACK = "## Tech Stack\n\nContent for Tech Stack."


def _engine(sections=None, logos=None, reviser=None, store=None) -> ReadmeEngine:
    return ReadmeEngine(
        sections or FakeSectionSource(),
        logos or FakeLogoSource(),
        reviser or FakeReviser(),
        store=store,
    )


def test_set_repository_seeds_document_and_clears_logo(engine: ReadmeEngine) -> None:
    engine._state.logo_data_uri = LOGO_URI
    identity = engine.set_repository("https://github.com/acme/rocket/tree/main")

    assert identity == RepositoryIdentity(owner="acme", repo="rocket")
    assert engine.document == "# rocket"
    assert engine.logo_data_uri is None
    assert engine.repo_url == "https://github.com/acme/rocket/tree/main"


def test_set_repository_rejection_keeps_state(engine: ReadmeEngine) -> None:
    engine.set_document("# demo\n\nEdited.")
    with pytest.raises(RepositoryLocatorError):
        engine.set_repository("https://gitlab.com/acme/rocket")
    assert engine.document == "# demo\n\nEdited."
    assert engine.identity == RepositoryIdentity(owner="octo", repo="demo")


@pytest.mark.asyncio
async def test_generate_section_appends_with_blank_line(
    engine: ReadmeEngine, sections: FakeSectionSource
) -> None:
    fragment = await engine.generate_section("features")

    assert fragment == FEATURES
    assert engine.document == "# demo\n\n" + FEATURES
    request = sections.calls[0]
    assert request.repo_url == "octo/demo"
    assert request.style == "professional"
    assert engine.status is None


@pytest.mark.asyncio
async def test_generate_section_on_empty_document_has_no_separator(engine: ReadmeEngine) -> None:
    engine.set_document("")
    await engine.generate_section("custom", custom_section_name="Roadmap", style="friendly")
    assert engine.document == "## Roadmap\n\nContent for Roadmap."


@pytest.mark.asyncio
async def test_generate_section_failure_leaves_document(engine: ReadmeEngine) -> None:
    engine.section_source = FakeSectionSource(fail_on={"usage"})
    with pytest.raises(GenerationError):
        await engine.generate_section("usage")
    assert engine.document == "# demo"
    assert engine.status is None


@pytest.mark.asyncio
async def test_generate_section_rejects_invalid_requests(engine: ReadmeEngine) -> None:
    with pytest.raises(ValueError):
        await engine.generate_section("custom")
    with pytest.raises(ValueError):
        await engine.generate_section("changelog")
    with pytest.raises(ValueError):
        await engine.generate_section("usage", style="pirate")


@pytest.mark.asyncio
async def test_generation_requires_repository() -> None:
    engine = _engine()
    with pytest.raises(RepositoryNotSetError):
        await engine.generate_section("features")
    with pytest.raises(RepositoryNotSetError):
        await engine.generate_all()
    with pytest.raises(RepositoryNotSetError):
        await engine.generate_logo()
    with pytest.raises(RepositoryNotSetError):
        engine.add_badge("license")


@pytest.mark.asyncio
async def test_generate_all_appends_every_section_in_order(engine: ReadmeEngine) -> None:
    engine.set_document("# demo\n\nOld text.")
    outcome = await engine.generate_all(style="concise")

    assert outcome.ok
    assert outcome.completed == [
        "introduction",
        "features",
        "tech_stack",
        "installation",
        "usage",
        "contributing",
        "license",
    ]
    assert "Old text." not in engine.document
    assert engine.document.startswith("# demo\n\n" + INTRO + "\n\n" + FEATURES)
    assert engine.document.endswith("## License\n\nContent for License.")
    assert {call.style for call in engine.section_source.calls} == {"concise"}


@pytest.mark.asyncio
async def test_generate_all_stops_at_first_failure(engine: ReadmeEngine) -> None:
    sections = FakeSectionSource(fail_on={"installation"})
    engine.section_source = sections

    outcome = await engine.generate_all()

    assert not outcome.ok
    assert outcome.failed_section == "installation"
    assert outcome.completed == ["introduction", "features", "tech_stack"]
    assert engine.document == "\n\n".join(["# demo", INTRO, FEATURES, TECH_STACK])
    for title in ("Installation", "Usage", "Contributing", "License"):
        assert f"## {title}" not in engine.document
    assert [call.section_type for call in sections.calls] == [
        "introduction",
        "features",
        "tech_stack",
        "installation",
    ]


@pytest.mark.asyncio
async def test_unexpected_collaborator_errors_become_generation_errors(
    engine: ReadmeEngine,
) -> None:
    engine.logo_source = FakeLogoSource(error=KeyError("media"))
    with pytest.raises(GenerationError):
        await engine.generate_logo()
    assert engine.logo_data_uri is None


@pytest.mark.asyncio
async def test_generate_logo_sets_reference_without_touching_document(
    engine: ReadmeEngine,
) -> None:
    logo = await engine.generate_logo()
    assert logo == LOGO_URI
    assert engine.logo_data_uri == LOGO_URI
    assert engine.document == "# demo"
    assert engine.logo_source.calls[0].repo_name == "demo"


def test_add_badge_twice_accumulates_on_one_line(engine: ReadmeEngine) -> None:
    engine.set_document("# demo\n\n## Introduction\n\nHello.")
    first = engine.add_badge("license")
    second = engine.add_badge("stars")

    lines = engine.document.split("\n")
    assert lines[0] == "# demo"
    assert lines[1] == ""
    assert lines[2] == f"{first} {second}"


@pytest.mark.asyncio
async def test_revise_all_replaces_document(engine: ReadmeEngine) -> None:
    engine.reviser = FakeReviser(result="# demo\n\nBetter words.")
    await engine.revise_all(style="friendly")
    assert engine.document == "# demo\n\nBetter words."
    assert engine.reviser.calls[0].readme_content == "# demo"
    assert engine.reviser.calls[0].style == "friendly"


@pytest.mark.asyncio
async def test_revise_all_failure_leaves_document_identical(engine: ReadmeEngine) -> None:
    original = "# demo\n\n```bash\necho ünïcode\n```\n  trailing  \n"
    engine.set_document(original)
    engine.reviser = FakeReviser(error=GenerationError("offline"))

    with pytest.raises(GenerationError):
        await engine.revise_all()
    assert engine.document == original


@pytest.mark.asyncio
async def test_revise_all_rejects_empty_document(engine: ReadmeEngine) -> None:
    engine.set_document("")
    with pytest.raises(EngineError):
        await engine.revise_all()


@pytest.mark.asyncio
async def test_compose_for_display_never_mutates_document(engine: ReadmeEngine) -> None:
    await engine.generate_section("features")
    before = engine.document

    engine._state.logo_data_uri = "data:image/png;base64,AAAA"
    first = engine.compose_for_display()
    engine._state.logo_data_uri = "data:image/png;base64,BBBB"
    second = engine.compose_for_display()

    assert first != second
    assert first.endswith(before) and second.endswith(before)
    assert engine.document == before


@pytest.mark.asyncio
async def test_concurrent_generation_is_rejected(engine: ReadmeEngine) -> None:
    gated = GatedSectionSource()
    engine.section_source = gated
    task = asyncio.create_task(engine.generate_section("features"))
    await gated.started.wait()

    assert engine.status == "features"
    with pytest.raises(GenerationInProgressError):
        await engine.generate_logo()
    with pytest.raises(GenerationInProgressError):
        await engine.generate_all()
    with pytest.raises(GenerationInProgressError):
        engine.set_document("edited")
    with pytest.raises(GenerationInProgressError):
        engine.add_badge("license")

    gated.release.set()
    await task
    assert engine.status is None
    assert engine.document == "# demo\n\n" + FEATURES


@pytest.mark.asyncio
async def test_cancel_discards_in_flight_result(engine: ReadmeEngine) -> None:
    gated = GatedSectionSource()
    engine.section_source = gated
    task = asyncio.create_task(engine.generate_section("features"))
    await gated.started.wait()

    assert engine.cancel() is True
    with pytest.raises(GenerationCancelledError):
        await task
    assert engine.document == "# demo"
    assert engine.status is None
    assert engine.cancel() is False

    await engine.generate_section("usage")
    assert engine.document.endswith("## Usage\n\nContent for Usage.")


@pytest.mark.asyncio
async def test_cancel_is_logged_as_info_not_failure(engine: ReadmeEngine) -> None:
    gated = GatedSectionSource()
    engine.section_source = gated
    engine.logger = Mock()
    task = asyncio.create_task(engine.generate_section("features"))
    await gated.started.wait()

    engine.cancel()
    with pytest.raises(GenerationCancelledError):
        await task

    engine.logger.warning.assert_not_called()
    engine.logger.info.assert_any_call("Section %s cancelled", "features")


@pytest.mark.asyncio
async def test_cancel_during_generate_all_keeps_prior_sections(engine: ReadmeEngine) -> None:
    gated = GatedSectionSource(block_on="tech_stack")
    engine.section_source = gated
    task = asyncio.create_task(engine.generate_all())
    await gated.started.wait()

    engine.cancel()
    outcome = await task

    assert outcome.cancelled
    assert outcome.failed_section == "tech_stack"
    assert outcome.completed == ["introduction", "features"]
    assert engine.document == "\n\n".join(["# demo", INTRO, FEATURES])


@pytest.mark.asyncio
async def test_close_cancels_pending_generation(engine: ReadmeEngine) -> None:
    gated = GatedSectionSource()
    engine.section_source = gated
    task = asyncio.create_task(engine.generate_section("features"))
    await gated.started.wait()

    await engine.close()

    assert task.done()
    with pytest.raises(GenerationCancelledError):
        await task
    assert engine.document == "# demo"
    assert engine.status is None


@pytest.mark.asyncio
async def test_every_change_is_persisted(engine: ReadmeEngine, store: SessionStore) -> None:
    await engine.generate_section("features")
    assert store.load().readme_content == engine.document

    engine.add_badge("license")
    assert store.load().readme_content == engine.document

    await engine.generate_logo()
    assert store.load().logo_data_uri == LOGO_URI

    engine.set_style("concise")
    snapshot = store.load()
    assert snapshot.style == "concise"
    assert snapshot == engine.snapshot()


def test_restore_reproduces_session(engine: ReadmeEngine, store: SessionStore) -> None:
    engine.set_document("# demo\n\nRestored ✨")
    engine.set_style("friendly")

    restored = ReadmeEngine.restore(store, FakeSectionSource(), FakeLogoSource(), FakeReviser())

    assert restored.document == "# demo\n\nRestored ✨"
    assert restored.identity == RepositoryIdentity(owner="octo", repo="demo")
    assert restored.repo_url == "octo/demo"
    assert restored.style == "friendly"
    assert restored.status is None


def test_restore_from_empty_store_uses_default_style(store: SessionStore) -> None:
    restored = ReadmeEngine.restore(
        store, FakeSectionSource(), FakeLogoSource(), FakeReviser(), default_style="concise"
    )
    assert restored.document == ""
    assert restored.identity is None
    assert restored.style == "concise"


def test_set_style_rejects_unknown_style(engine: ReadmeEngine) -> None:
    with pytest.raises(ValueError):
        engine.set_style("shouty")
    assert engine.style == "professional"
