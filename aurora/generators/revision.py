"""Full-document revision through the hosted model."""

from __future__ import annotations

import re
from typing import List

from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..prompting.builder import PromptBuilder
from .base import GenerationError, RevisionRequest, is_fenced, run_blocking, strip_code_fence

_CODE_BLOCK_PATTERN = re.compile(r"^```[^\n]*\n(.*?)^```", re.DOTALL | re.MULTILINE)


class DocumentReviser:
    """Rewrites the whole README for wording and formatting."""

    def __init__(self, runner: LLMRunner, prompt_builder: PromptBuilder | None = None) -> None:
        self.runner = runner
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("generators.revision")

    async def revise(self, request: RevisionRequest) -> str:
        prompt = self.prompt_builder.revision(request.readme_content, style=request.style)
        self.logger.info("Revising README (%d characters)", len(request.readme_content))
        try:
            response = await run_blocking(lambda: self.runner.run(prompt.user, system=prompt.system))
        except RuntimeError as exc:
            raise GenerationError(f"README revision failed: {exc}") from exc

        # a document that is itself one fenced block keeps its fence
        improved = strip_code_fence(response, untagged=not is_fenced(request.readme_content))
        if not improved:
            raise GenerationError("README revision returned no content")

        missing = [block for block in code_blocks(request.readme_content) if block not in improved]
        if missing:
            self.logger.warning(
                "Revised README altered %d fenced code block(s)", len(missing)
            )
        return improved


def code_blocks(markdown: str) -> List[str]:
    """Return the bodies of fenced code blocks in `markdown`."""
    return [match.group(1) for match in _CODE_BLOCK_PATTERN.finditer(markdown)]


__all__ = ["DocumentReviser", "code_blocks"]
