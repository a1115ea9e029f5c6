from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


DEFAULT_STATE_FILE = Path("~/.config/branch-diff/state.yml")


@dataclass
class Settings:
    git: str
    timeout_seconds: float | None
    diff_tool: str | None
    state_file: Path


def load_env_file(path: Path) -> None:
    """Load simple KEY=VALUE pairs from a .env file without overriding existing env."""
    if not path.exists() or not path.is_file():
        return

    for raw in path.read_text(errors="ignore").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _parse_timeout(raw: str | None) -> float | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"BRANCH_DIFF_TIMEOUT_SECONDS must be a number, got '{raw}'") from exc
    return value if value > 0 else None


def load_settings() -> Settings:
    state_file = (os.getenv("BRANCH_DIFF_STATE_FILE") or "").strip()
    return Settings(
        git=(os.getenv("BRANCH_DIFF_GIT", "git") or "git").strip(),
        timeout_seconds=_parse_timeout(os.getenv("BRANCH_DIFF_TIMEOUT_SECONDS")),
        diff_tool=(os.getenv("BRANCH_DIFF_DIFF_TOOL") or "").strip() or None,
        state_file=Path(state_file or DEFAULT_STATE_FILE).expanduser(),
    )
