from __future__ import annotations

from pathlib import Path
import logging

from branch_diff.errors import CommandError, CommandTimeoutError
from branch_diff.models import FileChange
from branch_diff.runner import run_git

logger = logging.getLogger(__name__)


def left_hand_path(change: FileChange) -> str:
    """Path of ``change`` as it existed at the comparison point."""
    return change.original_path or change.path


def get_file_content(
    cwd: Path | str,
    ref: str,
    relative_path: str,
    *,
    git: str = "git",
    timeout: float | None = None,
) -> str:
    """Return the text of ``relative_path`` at ``ref``.

    A path that did not exist at ``ref`` (an added file, usually) yields an
    empty string instead of an error so the viewer shows an empty left pane.
    Spawn failures and timeouts still propagate.
    """
    path = relative_path.lstrip("/")
    try:
        return run_git(cwd, ["show", f"{ref}:{path}"], git=git, timeout=timeout)
    except CommandTimeoutError:
        raise
    except CommandError as exc:
        logger.debug("%s not found at %s, using empty content: %s", path, ref, exc.message)
        return ""
