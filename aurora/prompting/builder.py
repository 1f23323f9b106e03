"""Builds model prompts for sections, revisions and logos from jinja2 templates."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger
from .constants import DEFAULT_STYLE, SECTION_TITLES
from .manifest import declared_dependencies

_GENERIC_TECH_STACK_INSTRUCTION = (
    "Analyze the repository to identify the main technologies, frameworks, and libraries used. "
    "Present them in a list."
)


@dataclass(frozen=True)
class Prompt:
    """A rendered system/user message pair."""

    system: Optional[str]
    user: str


class PromptBuilder:
    """Renders the prompt templates used by the generators."""

    SYSTEM_PROMPT = (
        "You are a senior developer documentation writer. Write GitHub-flavored Markdown "
        "and never invent commands or tools that the repository does not use."
    )

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        manifest_dir: Path | None = None,
    ) -> None:
        self.templates_dir = templates_dir
        self.manifest_dir = manifest_dir or Path.cwd()
        self.logger = get_logger("prompting")
        self._env = self._create_env(templates_dir)

    def section(
        self,
        repo_url: str,
        section_type: str,
        *,
        style: str | None = None,
        custom_section_name: str | None = None,
    ) -> Prompt:
        """Prompt for one README section starting with a Markdown heading."""
        instruction = None
        if section_type == "tech_stack":
            instruction = self.tech_stack_instruction()
        template = self._env.get_template("section.j2")
        user = template.render(
            repo_url=repo_url,
            section_name=custom_section_name or section_type,
            style=style or DEFAULT_STYLE,
            tech_stack_instruction=instruction,
        )
        return Prompt(system=self.SYSTEM_PROMPT, user=user.strip())

    def revision(self, readme_content: str, *, style: str | None = None) -> Prompt:
        template = self._env.get_template("improve.j2")
        user = template.render(readme_content=readme_content, style=style or DEFAULT_STYLE)
        return Prompt(system=self.SYSTEM_PROMPT, user=user.strip())

    def logo(self, repo_name: str) -> Prompt:
        template = self._env.get_template("logo.j2")
        return Prompt(system=None, user=template.render(repo_name=repo_name).strip())

    def tech_stack_instruction(self) -> str:
        """Bias the tech stack section with dependencies declared in the manifest directory."""
        names = declared_dependencies(self.manifest_dir)
        if not names:
            self.logger.debug("No declared dependencies found in %s", self.manifest_dir)
            return _GENERIC_TECH_STACK_INSTRUCTION
        return (
            "The project uses the following technologies based on its dependency manifest: "
            f"{', '.join(names)}. Please create a nicely formatted list or section based on these."
        )

    @staticmethod
    def section_title(section_type: str, custom_section_name: str | None = None) -> str:
        if custom_section_name:
            return custom_section_name.strip()
        return SECTION_TITLES.get(section_type, section_type.replace("_", " ").title())

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["Prompt", "PromptBuilder"]
