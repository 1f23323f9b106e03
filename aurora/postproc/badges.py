"""Badge construction and placement under the README title."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models import RepositoryIdentity

BADGE_HOST = "img.shields.io"

# kind -> (label, default visual style)
BADGE_KINDS: Dict[str, tuple[str, Optional[str]]] = {
    "license": ("License", None),
    "stars": ("Stars", "social"),
    "forks": ("Forks", "social"),
    "issues-open": ("Issues", None),
    "issues-pr-open": ("Pull Requests", None),
    "contributors": ("Contributors", None),
    "last-commit": ("Last Commit", None),
    "repo-size": ("Repo Size", None),
}


def build_badge_url(
    identity: RepositoryIdentity, kind: str, style: Optional[str] = None
) -> str:
    """Return the shields.io URL for a repository metric badge."""
    if kind not in BADGE_KINDS:
        raise ValueError(f"Unknown badge kind: {kind}")
    url = f"https://{BADGE_HOST}/github/{kind}/{identity.owner}/{identity.repo}"
    if style:
        url += f"?style={style}"
    return url


def build_badge_markdown(
    identity: RepositoryIdentity, kind: str, style: Optional[str] = None
) -> str:
    """Return ``![<kind>](<url>)``, applying the kind's default style when none is given."""
    if style is None and kind in BADGE_KINDS:
        style = BADGE_KINDS[kind][1]
    return f"![{kind}]({build_badge_url(identity, kind, style)})"


@dataclass
class BadgeManager:
    """Places badge markdown on a single line below the README title.

    A line counts as the badge line when it mentions the badge host, so repeated
    insertions accumulate on one line. Identical badges are not deduplicated.
    """

    marker: str = BADGE_HOST

    def insert(self, markdown: str, badge: str) -> str:
        lines = markdown.split("\n")
        title_index = next(
            (index for index, line in enumerate(lines) if line.startswith("# ")), None
        )
        if title_index is None:
            return f"{badge} {markdown}"

        # first blank line after the title block
        blank_index = title_index + 1
        while blank_index < len(lines) and lines[blank_index].strip() != "":
            blank_index += 1
        if blank_index == len(lines):
            lines.insert(blank_index, "")

        badge_index = blank_index + 1
        if badge_index >= len(lines) or self.marker not in lines[badge_index]:
            lines.insert(badge_index, "")

        current = lines[badge_index]
        lines[badge_index] = f"{current} {badge}" if current else badge
        return "\n".join(lines)


__all__ = [
    "BADGE_HOST",
    "BADGE_KINDS",
    "BadgeManager",
    "build_badge_markdown",
    "build_badge_url",
]
