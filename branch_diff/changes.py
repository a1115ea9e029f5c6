from __future__ import annotations

from pathlib import Path

from branch_diff.errors import ParseError
from branch_diff.models import ChangeStatus, FileChange
from branch_diff.runner import run_git


def parse_name_status_line(line: str) -> FileChange:
    parts = line.split("\t")
    code = parts[0].strip()
    if not code:
        raise ParseError(line, "missing status code")
    try:
        status = ChangeStatus.from_code(code)
    except ParseError as exc:
        raise ParseError(line, f"unknown status code '{code}'") from exc

    expected = 3 if status.has_original_path else 2
    if len(parts) != expected:
        raise ParseError(line, f"expected {expected} fields, got {len(parts)}")
    if any(not p for p in parts[1:]):
        raise ParseError(line, "empty path")

    if status.has_original_path:
        return FileChange(status=status, path=parts[2], original_path=parts[1])
    return FileChange(status=status, path=parts[1])


def parse_name_status(text: str) -> list[FileChange]:
    """Parse ``git diff --name-status`` output, keeping git's order.

    A single malformed line fails the whole parse.
    """
    out: list[FileChange] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        out.append(parse_name_status_line(line))
    return out


def get_changed_files(
    repo_root: Path | str,
    diff_ref: str,
    *,
    git: str = "git",
    timeout: float | None = None,
) -> list[FileChange]:
    output = run_git(
        repo_root,
        ["-c", "core.quotePath=false", "diff", "--name-status", diff_ref, "--"],
        git=git,
        timeout=timeout,
    )
    return parse_name_status(output)


def summarize(changes: list[FileChange]) -> dict[ChangeStatus, int]:
    counts = {status: 0 for status in ChangeStatus}
    for change in changes:
        counts[change.status] += 1
    return counts
