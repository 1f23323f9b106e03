from __future__ import annotations

from pathlib import Path

import pytest

from aurora.engine import ReadmeEngine
from aurora.llm.runner import LLMRunner
from aurora.stores.session_store import SessionStore
from tests._fixtures.fakes import FakeLogoSource, FakeReviser, FakeSectionSource


@pytest.fixture(autouse=True)
def _isolate_llm_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep model settings from the developer environment out of the tests."""
    keys = (
        LLMRunner.ENV_MODEL_KEYS
        + LLMRunner.ENV_IMAGE_MODEL_KEYS
        + LLMRunner.ENV_BASE_URL_KEYS
        + LLMRunner.ENV_API_KEY_KEYS
        + ("AURORA_CONFIG",)
    )
    for key in keys:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / "session.json")


@pytest.fixture
def sections() -> FakeSectionSource:
    return FakeSectionSource()


@pytest.fixture
def engine(sections: FakeSectionSource, store: SessionStore) -> ReadmeEngine:
    """Engine with a seeded `octo/demo` repository and a file-backed store."""
    engine = ReadmeEngine(sections, FakeLogoSource(), FakeReviser(), store=store)
    engine.set_repository("octo/demo")
    return engine
