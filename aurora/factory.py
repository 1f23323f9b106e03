"""Builds runners, generators and engines from configuration."""

from __future__ import annotations

from typing import Dict

from .config import AuroraConfig
from .engine import ReadmeEngine
from .generators import DocumentReviser, LogoGenerator, SectionGenerator
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import SessionState
from .prompting.builder import PromptBuilder
from .stores.session_store import SessionStore

logger = get_logger("factory")


def build_runner(config: AuroraConfig) -> LLMRunner:
    llm_cfg = config.llm
    kwargs: Dict[str, object] = {}
    if llm_cfg.model:
        kwargs["model"] = llm_cfg.model
    if llm_cfg.image_model:
        kwargs["image_model"] = llm_cfg.image_model
    if llm_cfg.base_url:
        kwargs["base_url"] = llm_cfg.base_url
    if llm_cfg.api_key is not None:
        kwargs["api_key"] = llm_cfg.api_key
    if llm_cfg.temperature is not None:
        kwargs["temperature"] = llm_cfg.temperature
    if llm_cfg.max_tokens is not None:
        kwargs["max_tokens"] = llm_cfg.max_tokens
    if llm_cfg.request_timeout is not None:
        kwargs["request_timeout"] = llm_cfg.request_timeout
    runner = LLMRunner(**kwargs)  # type: ignore[arg-type]
    logger.debug("Using model %s at %s", runner.model, runner.base_url)
    return runner


def build_engine(
    config: AuroraConfig,
    *,
    runner: LLMRunner | None = None,
    persist: bool = True,
) -> ReadmeEngine:
    """Create an engine wired to the hosted model.

    With `persist`, the session is restored from and saved to the configured
    store; otherwise it starts empty and is kept in memory only.
    """
    runner = runner or build_runner(config)
    builder = PromptBuilder(config.templates_dir, manifest_dir=config.manifest_dir or config.root)
    sections = SectionGenerator(runner, builder)
    logos = LogoGenerator(runner, builder)
    reviser = DocumentReviser(runner, builder)

    if not persist:
        return ReadmeEngine(
            sections, logos, reviser, state=SessionState(style=config.readme_style)
        )

    store = SessionStore(config.session.path, key=config.session.key)
    return ReadmeEngine.restore(
        store, sections, logos, reviser, default_style=config.readme_style
    )


__all__ = ["build_engine", "build_runner"]
