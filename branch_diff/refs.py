from __future__ import annotations

from pathlib import Path
import logging

from branch_diff.errors import (
    CommandError,
    CommandTimeoutError,
    NoCommonAncestorError,
    NotARepositoryError,
)
from branch_diff.models import RefResolution
from branch_diff.runner import run_git

logger = logging.getLogger(__name__)


def get_repo_root(cwd: Path | str, *, git: str = "git", timeout: float | None = None) -> Path:
    try:
        out = run_git(cwd, ["rev-parse", "--show-toplevel"], git=git, timeout=timeout)
    except CommandTimeoutError:
        raise
    except CommandError as exc:
        raise NotARepositoryError(cwd, exc.message) from exc

    root = out.strip()
    if not root:
        raise NotARepositoryError(cwd, "git reported no top-level directory")
    return Path(root)


def get_merge_base(
    repo_root: Path | str,
    target: str,
    source: str = "HEAD",
    *,
    git: str = "git",
    timeout: float | None = None,
) -> str:
    """Return the merge-base commit of ``target`` and ``source``.

    Raises NoCommonAncestorError when the refs share no history or the target
    does not exist. The literal target is never used as a fallback.
    """
    target = target.strip()
    if not target:
        raise ValueError("target ref must not be empty")

    try:
        out = run_git(repo_root, ["merge-base", target, source], git=git, timeout=timeout)
    except CommandTimeoutError:
        raise
    except CommandError as exc:
        raise NoCommonAncestorError(target) from exc

    commit = out.strip()
    if not commit:
        raise NoCommonAncestorError(target)
    return commit


def resolve_ref(
    cwd: Path | str,
    target: str,
    source: str = "HEAD",
    *,
    git: str = "git",
    timeout: float | None = None,
) -> RefResolution:
    repo_root = get_repo_root(cwd, git=git, timeout=timeout)
    diff_ref = get_merge_base(repo_root, target, source, git=git, timeout=timeout)
    logger.debug("using diff ref %s for target %s in %s", diff_ref, target.strip(), repo_root)
    return RefResolution(repo_root=repo_root, target=target.strip(), diff_ref=diff_ref)
