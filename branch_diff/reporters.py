from __future__ import annotations

import json
from typing import Any

from branch_diff import __version__
from branch_diff.changes import summarize
from branch_diff.models import ChangeStatus, FileChange, RefResolution


STATUS_ORDER = {status: idx for idx, status in enumerate(ChangeStatus)}


def filter_changes(changes: list[FileChange], query: str | None) -> list[FileChange]:
    q = (query or "").strip().lower()
    if not q:
        return list(changes)
    return [c for c in changes if q in c.name.lower() or q in c.path.lower()]


def sort_changes(changes: list[FileChange], by: str = "none") -> list[FileChange]:
    if by == "path":
        return sorted(changes, key=lambda c: c.path)
    if by == "status":
        return sorted(changes, key=lambda c: (STATUS_ORDER[c.status], c.path))
    if by == "none":
        return list(changes)
    raise ValueError(f"Unknown sort key '{by}' (expected none|path|status)")


def _summary(changes: list[FileChange]) -> dict[str, int]:
    counts = {status.name.lower(): n for status, n in summarize(changes).items()}
    counts["total"] = len(changes)
    return counts


def build_text_report(resolution: RefResolution, changes: list[FileChange]) -> str:
    lines = [f"Comparing working tree against {resolution.target} (merge-base {resolution.diff_ref[:12]})", ""]

    if not changes:
        lines.append("No changes found.")
        return "\n".join(lines)

    for change in changes:
        if change.original_path:
            lines.append(f"{change.status.value}  {change.original_path} -> {change.path}")
        else:
            lines.append(f"{change.status.value}  {change.path}")

    s = _summary(changes)
    lines.extend(
        [
            "",
            f"{s['total']} files: added={s['added']} modified={s['modified']} deleted={s['deleted']} "
            f"renamed={s['renamed']} copied={s['copied']} type_changed={s['type_changed']} unmerged={s['unmerged']}",
        ]
    )
    return "\n".join(lines)


def build_json_report(resolution: RefResolution, changes: list[FileChange]) -> dict[str, Any]:
    files = []
    for change in changes:
        item = change.to_dict()
        item.update(
            {
                "name": change.name,
                "directory": change.directory,
                "absolute_path": str(change.absolute_path(resolution.repo_root)),
            }
        )
        files.append(item)

    return {
        "tool": {"name": "branch-diff", "version": __version__},
        "repo_root": str(resolution.repo_root),
        "target": resolution.target,
        "diff_ref": resolution.diff_ref,
        "summary": _summary(changes),
        "files": files,
    }


def render_json_report(resolution: RefResolution, changes: list[FileChange]) -> str:
    return json.dumps(build_json_report(resolution, changes), indent=2)
