"""Read declared dependency names from project manifests."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Dict, List, Set

from ..logging import get_logger

logger = get_logger("prompting.manifest")


def load_node_dependencies(root: Path) -> Dict[str, List[str]]:
    """Return Node.js dependencies separated into runtime/dev lists.

    Raises ``ValueError`` when package.json exists but cannot be parsed.
    """
    package_json = root / "package.json"
    if not package_json.exists():
        return {"dependencies": [], "devDependencies": []}

    data = json.loads(package_json.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("package.json must contain an object")

    def _extract(key: str) -> List[str]:
        deps = data.get(key, {})
        if isinstance(deps, dict):
            return list(deps.keys())
        return []

    return {
        "dependencies": _extract("dependencies"),
        "devDependencies": _extract("devDependencies"),
    }


def load_python_dependencies(root: Path) -> List[str]:
    """Collect Python dependencies from requirements.txt and pyproject.toml."""
    deps: Set[str] = set()

    requirements = root / "requirements.txt"
    if requirements.exists():
        deps.update(_parse_requirements(requirements))

    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        deps.update(_parse_pyproject(pyproject))

    return sorted(deps)


def declared_dependencies(root: Path) -> List[str]:
    """Return every dependency name declared in `root`, Node first.

    Unreadable manifests are logged and skipped.
    """
    names: List[str] = []
    try:
        node = load_node_dependencies(root)
    except (OSError, ValueError) as exc:
        logger.warning("Unable to read package.json in %s: %s", root, exc)
    else:
        names.extend(node["dependencies"])
        names.extend(node["devDependencies"])

    try:
        python = load_python_dependencies(root)
    except (OSError, ValueError) as exc:
        logger.warning("Unable to read Python manifests in %s: %s", root, exc)
    else:
        names.extend(name for name in python if name not in names)
    return names


def _parse_requirements(path: Path) -> List[str]:
    packages: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "-")):
            continue
        name = re.split(r"[<>=!~;\[ ]", stripped, maxsplit=1)[0].strip()
        if name:
            packages.append(name)
    return packages


def _parse_pyproject(path: Path) -> List[str]:
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    project = data.get("project")
    if not isinstance(project, dict):
        return []

    dependencies = list(project.get("dependencies", []) or [])
    optional = project.get("optional-dependencies", {}) or {}
    for values in optional.values():
        dependencies.extend(values or [])

    packages: List[str] = []
    for requirement in dependencies:
        if not isinstance(requirement, str):
            continue
        name = re.split(r"[<>=!~;\[ ]", requirement.strip(), maxsplit=1)[0].strip()
        if name:
            packages.append(name)
    return packages


__all__ = ["declared_dependencies", "load_node_dependencies", "load_python_dependencies"]
