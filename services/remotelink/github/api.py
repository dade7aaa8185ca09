"""GitHub API client for pull request lookups.

Finds the pull request most recently associated with a commit through the
GitHub GraphQL API. The personal access token comes from the configuration
store and is re-read whenever the `github_token` key changes.
"""

import json
from datetime import datetime
from typing import Any

from remotelink.github.transport import GraphQLTransport, HttpxGraphQLTransport
from remotelink.host.protocol import ConfigurationChangeEvent, ConfigurationStore
from remotelink.logging_config import correlation_context, get_logger
from remotelink.models import PullRequest, PullRequestState

logger = get_logger(__name__)

GITHUB_TOKEN_KEY = "github_token"

PULL_REQUEST_FOR_COMMIT_QUERY = """query pr($owner: String!, $repo: String!, $sha: String!) {
	repository(name: $repo, owner: $owner) {
		object(expression: $sha) {
			... on Commit {
				associatedPullRequests(first: 1, orderBy: {field: UPDATED_AT, direction: DESC}) {
					nodes {
						permalink
						number
						title
						state
						updatedAt
						closedAt
						mergedAt
						repository {
							owner {
								login
							}
						}
					}
				}
			}
		}
	}
}"""

_STATES = {
    "MERGED": PullRequestState.MERGED,
    "CLOSED": PullRequestState.CLOSED,
}

_UNSET = object()


def _parse_timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None
    # GitHub returns "2024-01-02T03:04:05Z"
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _first_node(data: dict[str, Any]) -> dict[str, Any] | None:
    commit = ((data.get("repository") or {}).get("object")) or {}
    nodes = (commit.get("associatedPullRequests") or {}).get("nodes") or []
    return nodes[0] if nodes else None


class GitHubApi:
    """Pull request lookups against the GitHub GraphQL API."""

    def __init__(
        self,
        config: ConfigurationStore,
        transport: GraphQLTransport | None = None,
        provider_name: str = "GitHub",
    ) -> None:
        self._config = config
        self._transport = transport or HttpxGraphQLTransport()
        self._provider_name = provider_name
        self._token: Any = _UNSET
        self._unsubscribe = config.on_did_change(self._on_configuration_changed)

    def close(self) -> None:
        self._unsubscribe()

    def _on_configuration_changed(self, event: ConfigurationChangeEvent) -> None:
        if event.affects(GITHUB_TOKEN_KEY):
            self._token = _UNSET

    @property
    def token(self) -> str | None:
        if self._token is _UNSET:
            self._token = self._config.get(GITHUB_TOKEN_KEY)
        return self._token or None

    async def get_pull_request_for_commit(
        self, owner: str, repo: str, ref: str
    ) -> PullRequest | None:
        """Return the most recently updated PR containing `ref`, or None.

        Never raises: a missing token, a missing PR and any transport
        failure all come back as None.
        """
        with correlation_context("GitHubApi.get_pull_request_for_commit"):
            token = self.token
            if not token:
                logger.debug("No GitHub personal access token")
                return None

            try:
                variables = {"owner": owner, "repo": repo, "sha": ref}
                logger.debug("Querying associated pull requests", variables=json.dumps(variables))

                data = await self._transport.execute(
                    PULL_REQUEST_FOR_COMMIT_QUERY,
                    variables,
                    headers={"authorization": f"token {token}"},
                )
                pr = _first_node(data)
                if pr is None:
                    return None

                # GitHub sometimes returns PRs from forks
                if pr["repository"]["owner"]["login"] != owner:
                    logger.debug(
                        "Ignoring pull request from another owner",
                        number=pr["number"],
                        owner=pr["repository"]["owner"]["login"],
                    )
                    return None

                return PullRequest(
                    provider=self._provider_name,
                    number=pr["number"],
                    title=pr["title"],
                    url=pr["permalink"],
                    state=_STATES.get(pr["state"], PullRequestState.OPEN),
                    updated_at=_parse_timestamp(pr["updatedAt"]),
                    closed_at=_parse_timestamp(pr.get("closedAt")),
                    merged_at=_parse_timestamp(pr.get("mergedAt")),
                )
            except Exception:
                logger.exception("Pull request lookup failed", owner=owner, repo=repo, sha=ref)
                return None
