from __future__ import annotations

from pathlib import Path


class BranchDiffError(RuntimeError):
    pass


class SpawnError(BranchDiffError):
    """The git executable could not be started at all."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Could not run '{executable}': {reason}")


class CommandError(BranchDiffError):
    """git ran but exited non-zero."""

    def __init__(self, args: list[str], exit_code: int | None, message: str):
        self.command = ["git", *args]
        self.exit_code = exit_code
        self.message = message
        super().__init__(message or f"git {' '.join(args)} failed with exit code {exit_code}")


class CommandTimeoutError(CommandError):
    def __init__(self, args: list[str], timeout: float):
        self.timeout = timeout
        super().__init__(args, None, f"git {' '.join(args)} timed out after {timeout:g}s")


class NotARepositoryError(BranchDiffError):
    def __init__(self, cwd: Path | str, message: str = ""):
        self.cwd = str(cwd)
        detail = f" {message}" if message else ""
        super().__init__(f"Not a git repository: {self.cwd}.{detail}")


class NoCommonAncestorError(BranchDiffError):
    def __init__(self, target: str):
        self.target = target
        super().__init__(
            f'Could not determine common ancestor with "{target}". '
            "Ensure the branch exists and shares history."
        )


class ParseError(BranchDiffError):
    def __init__(self, raw_line: str, reason: str = "unexpected output shape"):
        self.raw_line = raw_line
        super().__init__(f"Could not parse git output ({reason}): {raw_line!r}")
