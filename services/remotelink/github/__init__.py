"""GitHub API access: GraphQL transport and pull request lookups."""

from remotelink.github.api import GITHUB_TOKEN_KEY, GitHubApi
from remotelink.github.transport import GraphQLError, GraphQLTransport, HttpxGraphQLTransport

__all__ = [
    "GITHUB_TOKEN_KEY",
    "GitHubApi",
    "GraphQLError",
    "GraphQLTransport",
    "HttpxGraphQLTransport",
]
