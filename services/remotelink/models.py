"""Pull request value type shared across providers."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class PullRequestState(StrEnum):
    """Provider-agnostic pull request state."""

    OPEN = "Open"
    CLOSED = "Closed"
    MERGED = "Merged"


@dataclass(frozen=True)
class PullRequest:
    """A pull request associated with a commit.

    Only built by normalizing a provider API response.
    """

    provider: str
    number: int
    title: str
    url: str
    state: PullRequestState
    updated_at: datetime
    closed_at: datetime | None = None
    merged_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.state == PullRequestState.OPEN

    @property
    def formatted_state(self) -> str:
        return self.state.value.lower()

    @property
    def closed_or_updated_at(self) -> datetime:
        """When the PR last changed state, for display."""
        return self.merged_at or self.closed_at or self.updated_at
