from __future__ import annotations

from pathlib import Path
from typing import NoReturn
import logging

import typer

from branch_diff.branches import get_branches
from branch_diff.changes import get_changed_files
from branch_diff.config import Settings, load_env_file, load_settings
from branch_diff.content import get_file_content, left_hand_path
from branch_diff.errors import BranchDiffError
from branch_diff.models import FileChange, RefResolution
from branch_diff.refs import get_repo_root, resolve_ref
from branch_diff.reporters import (
    build_text_report,
    filter_changes,
    render_json_report,
    sort_changes,
)
from branch_diff.state import load_default_branch, save_default_branch
from branch_diff.viewer import open_in_viewer

app = typer.Typer(help="branch-diff: list and view changes since a branch's merge-base")

PATH_OPTION = typer.Option(".", help="Path inside the repository")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """branch-diff command group."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=2)


def _settings(cwd: Path) -> Settings:
    load_env_file(Path.cwd() / ".env")
    load_env_file(cwd / ".env")
    try:
        return load_settings()
    except ValueError as exc:
        _fail(f"Invalid configuration: {exc}")


def _saved_default(settings: Settings, repo_root: Path) -> str | None:
    try:
        return load_default_branch(settings.state_file, repo_root)
    except (ValueError, OSError) as exc:
        typer.secho(f"Ignoring unreadable state file: {exc}", fg=typer.colors.YELLOW, err=True)
        return None


def _find_change(changes: list[FileChange], file: str) -> FileChange | None:
    wanted = file.strip().lstrip("/")
    for change in changes:
        if wanted in (change.path, change.original_path):
            return change
    return None


@app.command()
def branches(path: str = PATH_OPTION) -> None:
    """List branches, default first."""
    cwd = Path(path).resolve()
    settings = _settings(cwd)
    try:
        repo_root = get_repo_root(cwd, git=settings.git, timeout=settings.timeout_seconds)
        branch_set = get_branches(
            repo_root,
            _saved_default(settings, repo_root),
            git=settings.git,
            timeout=settings.timeout_seconds,
        )
    except BranchDiffError as exc:
        _fail(str(exc))

    if not branch_set.branches:
        typer.echo("No branches found.")
        return

    for name in branch_set.ordered():
        marker = "*" if name == branch_set.current else " "
        suffix = " (default)" if name == branch_set.default else ""
        typer.echo(f"{marker} {name}{suffix}")


@app.command()
def changes(
    target: str | None = typer.Argument(None, help="Branch or ref to compare against"),
    path: str = PATH_OPTION,
    filter_: str | None = typer.Option(None, "--filter", help="Only paths containing this text"),
    sort: str = typer.Option("none", help="Sort order: none|path|status"),
    json_out: bool = typer.Option(False, "--json", help="Print a JSON report"),
) -> None:
    """List files changed since the merge-base with TARGET."""
    cwd = Path(path).resolve()
    settings = _settings(cwd)
    try:
        if target is None:
            repo_root = get_repo_root(cwd, git=settings.git, timeout=settings.timeout_seconds)
            branch_set = get_branches(
                repo_root,
                _saved_default(settings, repo_root),
                git=settings.git,
                timeout=settings.timeout_seconds,
            )
            if branch_set.default is None:
                _fail("No branches found to compare against.")
            target = branch_set.default

        resolution = resolve_ref(cwd, target, git=settings.git, timeout=settings.timeout_seconds)
        found = get_changed_files(
            resolution.repo_root,
            resolution.diff_ref,
            git=settings.git,
            timeout=settings.timeout_seconds,
        )
        shown = sort_changes(filter_changes(found, filter_), sort)
    except (BranchDiffError, ValueError) as exc:
        _fail(str(exc))

    if json_out:
        typer.echo(render_json_report(resolution, shown))
    else:
        typer.echo(build_text_report(resolution, shown))


def _left_content(
    cwd: Path, target: str, file: str, settings: Settings
) -> tuple[RefResolution, FileChange, str]:
    resolution = resolve_ref(cwd, target, git=settings.git, timeout=settings.timeout_seconds)
    found = get_changed_files(
        resolution.repo_root,
        resolution.diff_ref,
        git=settings.git,
        timeout=settings.timeout_seconds,
    )
    change = _find_change(found, file)
    if change is None:
        _fail(f"{file} has no changes since the merge-base with {resolution.target}")

    text = get_file_content(
        resolution.repo_root,
        resolution.diff_ref,
        left_hand_path(change),
        git=settings.git,
        timeout=settings.timeout_seconds,
    )
    return resolution, change, text


@app.command()
def show(
    target: str = typer.Argument(..., help="Branch or ref to compare against"),
    file: str = typer.Argument(..., help="Repository-relative path"),
    path: str = PATH_OPTION,
) -> None:
    """Print FILE as it was at the merge-base with TARGET."""
    cwd = Path(path).resolve()
    settings = _settings(cwd)
    try:
        _, _, text = _left_content(cwd, target, file, settings)
    except (BranchDiffError, ValueError) as exc:
        _fail(str(exc))

    typer.echo(text, nl=False)


@app.command("open")
def open_diff(
    target: str = typer.Argument(..., help="Branch or ref to compare against"),
    file: str = typer.Argument(..., help="Repository-relative path"),
    path: str = PATH_OPTION,
    tool: str | None = typer.Option(None, help="Diff viewer command, e.g. 'code --wait --diff'"),
) -> None:
    """Open FILE in an external diff viewer against its merge-base version."""
    cwd = Path(path).resolve()
    settings = _settings(cwd)
    viewer = tool or settings.diff_tool
    if not viewer:
        _fail("No diff viewer configured. Pass --tool or set BRANCH_DIFF_DIFF_TOOL.")

    try:
        resolution, change, text = _left_content(cwd, target, file, settings)
        code = open_in_viewer(
            viewer,
            text,
            change.absolute_path(resolution.repo_root),
            resolution.target,
        )
    except (BranchDiffError, ValueError) as exc:
        _fail(str(exc))

    if code != 0:
        typer.secho(f"Diff viewer exited with code {code}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)


@app.command("set-default")
def set_default(
    branch: str = typer.Argument(..., help="Branch to preselect next time"),
    path: str = PATH_OPTION,
) -> None:
    """Remember BRANCH as the default comparison branch for this repository."""
    cwd = Path(path).resolve()
    settings = _settings(cwd)
    try:
        repo_root = get_repo_root(cwd, git=settings.git, timeout=settings.timeout_seconds)
        branch_set = get_branches(repo_root, git=settings.git, timeout=settings.timeout_seconds)
    except BranchDiffError as exc:
        _fail(str(exc))

    name = branch.strip()
    if name not in branch_set:
        _fail(f"Unknown branch: {name}")

    try:
        save_default_branch(settings.state_file, repo_root, name)
    except (ValueError, OSError) as exc:
        _fail(f"Could not save default branch: {exc}")
    typer.secho(f"Default branch set to {name}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
