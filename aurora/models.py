"""Core data models shared across aurora components."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .prompting.constants import DEFAULT_STYLE


@dataclass(frozen=True)
class RepositoryIdentity:
    """Normalized `owner/repo` pair of a GitHub repository."""

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class SessionState:
    """Live in-memory state of one README editing session."""

    repo_url: Optional[str] = None
    identity: Optional[RepositoryIdentity] = None
    document: str = ""
    logo_data_uri: Optional[str] = None
    style: str = DEFAULT_STYLE
    # None, a section id, "all", "logo" or "improve"
    status: Optional[str] = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Persisted projection of a session, restored at startup."""

    repo_url: Optional[str]
    identity: Optional[RepositoryIdentity]
    readme_content: str
    logo_data_uri: Optional[str]
    style: str

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionSnapshot":
        return cls(
            repo_url=state.repo_url,
            identity=state.identity,
            readme_content=state.document,
            logo_data_uri=state.logo_data_uri,
            style=state.style,
        )

    def to_state(self) -> SessionState:
        return SessionState(
            repo_url=self.repo_url,
            identity=self.identity,
            document=self.readme_content,
            logo_data_uri=self.logo_data_uri,
            style=self.style,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted JSON layout."""
        details = None
        if self.identity is not None:
            details = {"owner": self.identity.owner, "repo": self.identity.repo}
        return {
            "repoUrl": self.repo_url,
            "repoDetails": details,
            "readmeContent": self.readme_content,
            "logoDataUri": self.logo_data_uri,
            "style": self.style,
        }

    @classmethod
    def from_dict(cls, payload: object) -> Optional["SessionSnapshot"]:
        """Parse the persisted JSON layout; return None when it is malformed."""
        if not isinstance(payload, dict):
            return None
        repo_url = payload.get("repoUrl")
        readme_content = payload.get("readmeContent")
        logo = payload.get("logoDataUri")
        style = payload.get("style")
        if repo_url is not None and not isinstance(repo_url, str):
            return None
        if not isinstance(readme_content, str):
            return None
        if logo is not None and not isinstance(logo, str):
            return None
        if not isinstance(style, str):
            style = DEFAULT_STYLE

        identity = None
        details = payload.get("repoDetails")
        if details is not None:
            if not isinstance(details, dict):
                return None
            owner = details.get("owner")
            repo = details.get("repo")
            if not isinstance(owner, str) or not isinstance(repo, str) or not owner or not repo:
                return None
            identity = RepositoryIdentity(owner=owner, repo=repo)

        return cls(
            repo_url=repo_url,
            identity=identity,
            readme_content=readme_content,
            logo_data_uri=logo,
            style=style,
        )
