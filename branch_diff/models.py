from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from branch_diff.errors import ParseError


class ChangeStatus(Enum):
    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        """Map a name-status code such as ``M`` or ``R087`` to a status.

        Only the first character is significant; rename/copy similarity
        digits are dropped.
        """
        if not code:
            raise ParseError(code, "empty status code")
        try:
            return cls(code[0])
        except ValueError as exc:
            raise ParseError(code, f"unknown status '{code[0]}'") from exc

    @property
    def has_original_path(self) -> bool:
        return self in (ChangeStatus.RENAMED, ChangeStatus.COPIED)


@dataclass(frozen=True)
class FileChange:
    status: ChangeStatus
    path: str
    original_path: str | None = None

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("FileChange.path must not be empty")
        if self.status.has_original_path and not self.original_path:
            raise ValueError(f"{self.status.name} change for {self.path} requires original_path")
        if not self.status.has_original_path and self.original_path is not None:
            raise ValueError(f"{self.status.name} change for {self.path} cannot carry original_path")

    # Derived values are computed per call.
    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def directory(self) -> str:
        return str(PurePosixPath(self.path).parent)

    def absolute_path(self, root: Path | str) -> Path:
        return Path(root).joinpath(*PurePosixPath(self.path).parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "path": self.path,
            "original_path": self.original_path,
        }


@dataclass(frozen=True)
class RefResolution:
    repo_root: Path
    target: str
    diff_ref: str


@dataclass(frozen=True)
class BranchSet:
    current: str | None
    branches: list[str] = field(default_factory=list)
    default: str | None = None

    def ordered(self) -> list[str]:
        """Default branch first, the rest lexicographically."""
        rest = sorted(b for b in self.branches if b != self.default)
        if self.default in self.branches:
            return [self.default, *rest]
        return rest

    def __contains__(self, branch: object) -> bool:
        return branch in self.branches
