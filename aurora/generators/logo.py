"""Logo generation through the hosted image model."""

from __future__ import annotations

import re

from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..prompting.builder import PromptBuilder
from .base import GenerationError, LogoRequest, run_blocking

_DATA_URI_PATTERN = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,[A-Za-z0-9+/=\s]+$")


class LogoGenerator:
    def __init__(self, runner: LLMRunner, prompt_builder: PromptBuilder | None = None) -> None:
        self.runner = runner
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("generators.logo")

    async def generate(self, request: LogoRequest) -> str:
        prompt = self.prompt_builder.logo(request.repo_name)
        self.logger.info("Generating logo for %s", request.repo_name)
        try:
            data_uri = await run_blocking(lambda: self.runner.generate_image(prompt.user))
        except RuntimeError as exc:
            raise GenerationError(f"Logo generation failed: {exc}") from exc

        if not data_uri or not _DATA_URI_PATTERN.match(data_uri):
            raise GenerationError("Image generation failed to produce a result.")
        return data_uri


__all__ = ["LogoGenerator"]
