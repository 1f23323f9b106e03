"""Section generation through the hosted model."""

from __future__ import annotations

from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..prompting.builder import PromptBuilder
from .base import GenerationError, SectionRequest, run_blocking, strip_code_fence


class SectionGenerator:
    """Generates one README section per request."""

    def __init__(self, runner: LLMRunner, prompt_builder: PromptBuilder | None = None) -> None:
        self.runner = runner
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("generators.section")

    async def generate(self, request: SectionRequest) -> str:
        prompt = self.prompt_builder.section(
            request.repo_url,
            request.section_type,
            style=request.style,
            custom_section_name=request.custom_section_name,
        )
        self.logger.info("Generating README section via LLM: %s", request.section_type)
        try:
            response = await run_blocking(lambda: self.runner.run(prompt.user, system=prompt.system))
        except RuntimeError as exc:
            raise GenerationError(f"Section generation failed: {exc}") from exc

        body = strip_code_fence(response)
        if not body:
            raise GenerationError("Section generation returned no content")
        if not body.startswith("#"):
            title = self.prompt_builder.section_title(
                request.section_type, request.custom_section_name
            )
            self.logger.debug("Section %s lacked a heading; adding '%s'", request.section_type, title)
            body = f"## {title}\n\n{body}"
        return body


__all__ = ["SectionGenerator"]
