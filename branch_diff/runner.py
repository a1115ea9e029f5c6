from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import logging
import os
import subprocess

from branch_diff.errors import CommandError, CommandTimeoutError, SpawnError

logger = logging.getLogger(__name__)

GIT_ENV_OVERRIDES = {"LC_ALL": "C"}


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def run_git(
    cwd: Path | str,
    args: list[str],
    *,
    git: str = "git",
    timeout: float | None = None,
) -> str:
    """Run ``git <args>`` in ``cwd`` and return its decoded stdout.

    Output is returned as-is; callers strip it when they parse lines.
    """
    cmd = [git, *args]
    env = {**os.environ, **GIT_ENV_OVERRIDES}
    logger.debug("running %s in %s", cmd, cwd)

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        # subprocess.run kills the child; partial output is dropped
        raise CommandTimeoutError(list(args), timeout or 0) from exc
    except FileNotFoundError as exc:
        raise SpawnError(git, "not installed or not available in PATH") from exc
    except OSError as exc:
        raise SpawnError(git, exc.strerror or str(exc)) from exc

    stdout = _decode(proc.stdout)
    if proc.returncode != 0:
        stderr = _decode(proc.stderr).strip()
        message = stderr or stdout.strip()
        logger.debug("git %s exited %s: %s", " ".join(args), proc.returncode, message)
        raise CommandError(list(args), proc.returncode, message)

    return stdout


def run_git_concurrently(
    cwd: Path | str,
    *arg_lists: list[str],
    git: str = "git",
    timeout: float | None = None,
) -> list[str]:
    """Run independent read-only queries jointly, results in argument order."""
    if not arg_lists:
        return []
    with ThreadPoolExecutor(max_workers=len(arg_lists)) as executor:
        futures = [
            executor.submit(run_git, cwd, args, git=git, timeout=timeout)
            for args in arg_lists
        ]
        return [future.result() for future in futures]
