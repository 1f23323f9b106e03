"""Configuration loading for aurora (.aurora.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .prompting.constants import DEFAULT_STYLE, STYLES
from .stores.session_store import DEFAULT_SESSION_KEY

CONFIG_FILENAME = ".aurora.yml"
CONFIG_ENV_KEY = "AURORA_CONFIG"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Hosted model settings from .aurora.yml."""

    model: Optional[str] = None
    image_model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class SessionConfig:
    """Where the session snapshot is kept."""

    path: Path = field(default_factory=lambda: Path.home() / ".aurora" / "session.json")
    key: str = DEFAULT_SESSION_KEY


@dataclass
class ServiceConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AuroraConfig:
    """Represents the settings defined in .aurora.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    readme_style: str = DEFAULT_STYLE
    manifest_dir: Optional[Path] = None
    templates_dir: Optional[Path] = None
    session: SessionConfig = field(default_factory=SessionConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(config_path: Path | None = None) -> AuroraConfig:
    """Load configuration from disk.

    Without an explicit path, ``$AURORA_CONFIG`` is used, then ``.aurora.yml``
    in the working directory. A missing file yields the defaults.
    """
    if config_path is None:
        env_value = os.getenv(CONFIG_ENV_KEY)
        config_path = Path(env_value) if env_value else Path.cwd()
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AuroraConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        image_model=_as_str(llm_data.get("image_model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        temperature=_as_float(llm_data.get("temperature")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
    )

    readme_data = _as_dict(data.get("readme"))
    style = _as_str(readme_data.get("style")) or DEFAULT_STYLE
    if style not in STYLES:
        raise ConfigError(f"readme.style must be one of {', '.join(STYLES)}")
    manifest_dir_str = _as_str(readme_data.get("manifest_dir"))
    templates_dir_str = _as_str(readme_data.get("templates_dir"))

    session = SessionConfig()
    session_data = _as_dict(data.get("session"))
    session_path = _as_str(session_data.get("path"))
    if session_path:
        session.path = _resolve_path(root, session_path)
    session.key = _as_str(session_data.get("key")) or session.key

    service = ServiceConfig()
    service_data = _as_dict(data.get("service"))
    service.host = _as_str(service_data.get("host")) or service.host
    service.port = _as_int(service_data.get("port")) or service.port

    return AuroraConfig(
        root=root,
        llm=llm,
        readme_style=style,
        manifest_dir=_resolve_path(root, manifest_dir_str) if manifest_dir_str else None,
        templates_dir=_resolve_path(root, templates_dir_str) if templates_dir_str else None,
        session=session,
        service=service,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "AuroraConfig",
    "ConfigError",
    "LLMConfig",
    "ServiceConfig",
    "SessionConfig",
    "load_config",
]
