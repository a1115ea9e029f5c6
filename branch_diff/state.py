from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


STATE_VERSION = 1


def _read_state(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {"version": STATE_VERSION, "default_branches": {}}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"State file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"State file {path} must contain a mapping")

    defaults = data.get("default_branches") or {}
    if not isinstance(defaults, dict):
        raise ValueError(f"State file {path}: 'default_branches' must be a mapping")

    return {
        "version": int(data.get("version", STATE_VERSION)),
        "default_branches": {str(k): str(v) for k, v in defaults.items()},
    }


def load_default_branch(path: Path, repo_root: Path | str) -> str | None:
    """Saved default branch for ``repo_root``, or None when nothing is stored."""
    state = _read_state(path)
    return state["default_branches"].get(str(repo_root))


def save_default_branch(path: Path, repo_root: Path | str, branch: str) -> None:
    state = _read_state(path)
    state["default_branches"][str(repo_root)] = branch

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(state, sort_keys=True))
