from __future__ import annotations

from pathlib import Path
import logging

from branch_diff.models import BranchSet
from branch_diff.runner import run_git_concurrently

logger = logging.getLogger(__name__)

PRIMARY_BRANCH_NAMES = ("main", "master")
DETACHED_HEAD_MARKER = "HEAD"

LIST_BRANCHES_ARGS = ["branch", "-a", "--format=%(refname:short)"]
CURRENT_BRANCH_ARGS = ["branch", "--show-current"]


def parse_branch_list(text: str) -> list[str]:
    """Branch names in listing order, without blanks, HEAD pointers or repeats."""
    out: list[str] = []
    seen: set[str] = set()
    for line in text.splitlines():
        name = line.strip()
        if not name or DETACHED_HEAD_MARKER in name or name in seen:
            continue
        seen.add(name)
        out.append(name)
    return out


def resolve_default_branch(branches: list[str], saved_default: str | None = None) -> str | None:
    if saved_default and saved_default in branches:
        return saved_default
    for name in branches:
        if name in PRIMARY_BRANCH_NAMES:
            return name
    return branches[0] if branches else None


def order_branches(branches: list[str], default: str | None) -> list[str]:
    return BranchSet(current=None, branches=list(branches), default=default).ordered()


def get_branches(
    cwd: Path | str,
    saved_default: str | None = None,
    *,
    git: str = "git",
    timeout: float | None = None,
) -> BranchSet:
    listing, current = run_git_concurrently(
        cwd,
        LIST_BRANCHES_ARGS,
        CURRENT_BRANCH_ARGS,
        git=git,
        timeout=timeout,
    )
    branches = parse_branch_list(listing)
    default = resolve_default_branch(branches, saved_default)
    if saved_default and default != saved_default:
        logger.info("saved default branch %s no longer exists, using %s", saved_default, default)

    return BranchSet(
        current=current.strip() or None,
        branches=branches,
        default=default,
    )
