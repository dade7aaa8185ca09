"""
Remote resource model.

A remote resource points at something inside a hosted repository (a branch,
a commit, a file region) independently of the hosting provider. Providers
turn these into URLs.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar


class RemoteResourceType(StrEnum):
    """Kinds of remote resource."""

    BRANCH = "branch"
    BRANCHES = "branches"
    COMMIT = "commit"
    FILE = "file"
    REPO = "repo"
    REVISION = "revision"


@dataclass(frozen=True, order=True)
class Position:
    """A line (and optional character) inside a file."""

    line: int
    character: int = 0


@dataclass(frozen=True)
class Range:
    """An inclusive line range inside a file."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    @classmethod
    def from_lines(cls, start: int, end: int | None = None) -> "Range":
        return cls(Position(start), Position(start if end is None else end))

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line


@dataclass(frozen=True)
class CommitRef:
    """The slice of a commit a revision link needs."""

    sha: str
    message: str | None = None


# --- Variants ---


@dataclass(frozen=True)
class BranchResource:
    type: ClassVar[RemoteResourceType] = RemoteResourceType.BRANCH

    branch: str

    def __post_init__(self) -> None:
        if not self.branch:
            raise ValueError("Branch name must not be empty")


@dataclass(frozen=True)
class BranchesResource:
    type: ClassVar[RemoteResourceType] = RemoteResourceType.BRANCHES


@dataclass(frozen=True)
class CommitResource:
    type: ClassVar[RemoteResourceType] = RemoteResourceType.COMMIT

    sha: str

    def __post_init__(self) -> None:
        if not self.sha:
            raise ValueError("Commit sha must not be empty")


@dataclass(frozen=True)
class FileResource:
    type: ClassVar[RemoteResourceType] = RemoteResourceType.FILE

    file_name: str
    branch: str | None = None
    range: Range | None = None


@dataclass(frozen=True)
class RepoResource:
    type: ClassVar[RemoteResourceType] = RemoteResourceType.REPO


@dataclass(frozen=True)
class RevisionResource:
    """A file pinned to a revision.

    Only `sha` pins the URL; `commit` is carried for callers that show the
    message alongside the link.
    """

    type: ClassVar[RemoteResourceType] = RemoteResourceType.REVISION

    file_name: str
    branch: str | None = None
    commit: CommitRef | None = field(default=None, compare=False)
    sha: str | None = None
    range: Range | None = None


RemoteResource = (
    BranchResource
    | BranchesResource
    | CommitResource
    | FileResource
    | RepoResource
    | RevisionResource
)

_NAMES: dict[RemoteResourceType, str] = {
    RemoteResourceType.BRANCH: "Branch",
    RemoteResourceType.BRANCHES: "Branches",
    RemoteResourceType.COMMIT: "Commit",
    RemoteResourceType.FILE: "File",
    RemoteResourceType.REPO: "Repository",
    RemoteResourceType.REVISION: "Revision",
}


def name_of(resource: RemoteResource) -> str:
    """Human label for a resource, e.g. "Repository"."""
    return _NAMES[resource.type]
