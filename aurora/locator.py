"""Parse user-supplied repository locators into owner/repo identities."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from .models import RepositoryIdentity

_OWNER_REPO_PATTERN = re.compile(r"^[A-Za-z0-9-]+/[A-Za-z0-9-._]+$")
_GITHUB_HOST = "github.com"


class RepositoryLocatorError(ValueError):
    """Raised when a locator is neither `owner/repo` nor a GitHub repository URL."""

    def __init__(self, locator: str) -> None:
        super().__init__("invalid URL")
        self.locator = locator


def locate(locator: str) -> RepositoryIdentity:
    """Return the repository identity for `owner/repo` or a github.com URL.

    URLs without a scheme are treated as ``https://``. Only the first two path
    segments are used, so deep links such as ``/owner/repo/tree/main`` resolve
    to the repository itself.
    """
    text = locator.strip()
    if _OWNER_REPO_PATTERN.match(text):
        owner, repo = text.split("/", 1)
        return RepositoryIdentity(owner=owner, repo=repo)

    candidate = text if text.startswith("http") else f"https://{text}"
    try:
        parsed = urlsplit(candidate)
        host = parsed.hostname
    except ValueError as exc:
        raise RepositoryLocatorError(locator) from exc

    segments = [segment for segment in parsed.path.split("/") if segment]
    if host != _GITHUB_HOST or len(segments) < 2:
        raise RepositoryLocatorError(locator)
    return RepositoryIdentity(owner=segments[0], repo=segments[1])


__all__ = ["RepositoryLocatorError", "locate"]
