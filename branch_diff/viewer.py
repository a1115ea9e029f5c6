from __future__ import annotations

from pathlib import Path
import logging
import re
import shlex
import subprocess
import tempfile

from branch_diff.errors import SpawnError

logger = logging.getLogger(__name__)


def _safe_label(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", text).strip("_") or "ref"


def open_in_viewer(tool: str, left_text: str, right_path: Path, label: str) -> int:
    """Show ``left_text`` against ``right_path`` in an external diff viewer.

    The left side is written to a temporary file that is removed once the
    viewer exits. Returns the viewer's exit code.
    """
    argv = shlex.split(tool)
    if not argv:
        raise ValueError("Diff tool command is empty")

    with tempfile.TemporaryDirectory(prefix="branch-diff-") as tmp:
        left_path = Path(tmp) / f"{_safe_label(label)}__{right_path.name}"
        left_path.write_text(left_text, encoding="utf-8")

        cmd = [*argv, str(left_path), str(right_path)]
        logger.debug("opening viewer %s", cmd)
        try:
            proc = subprocess.run(cmd, check=False)
        except FileNotFoundError as exc:
            raise SpawnError(argv[0], "not installed or not available in PATH") from exc
        except OSError as exc:
            raise SpawnError(argv[0], exc.strerror or str(exc)) from exc

    return proc.returncode
