"""Remote providers: resource model, provider contract and implementations."""

from remotelink.remotes.autolinks import (
    Autolink,
    AutolinkReference,
    DynamicAutolinkReference,
    linkify,
)
from remotelink.remotes.factory import RemoteProviderFactory, parse_remote_url
from remotelink.remotes.github import GitHubRemote
from remotelink.remotes.provider import RemoteProvider, RemoteProviderWithPullRequests
from remotelink.remotes.resource import (
    BranchesResource,
    BranchResource,
    CommitRef,
    CommitResource,
    FileResource,
    Position,
    Range,
    RemoteResource,
    RemoteResourceType,
    RepoResource,
    RevisionResource,
    name_of,
)

__all__ = [
    "Autolink",
    "AutolinkReference",
    "BranchResource",
    "BranchesResource",
    "CommitRef",
    "CommitResource",
    "DynamicAutolinkReference",
    "FileResource",
    "GitHubRemote",
    "Position",
    "Range",
    "RemoteProvider",
    "RemoteProviderFactory",
    "RemoteProviderWithPullRequests",
    "RemoteResource",
    "RemoteResourceType",
    "RepoResource",
    "RevisionResource",
    "linkify",
    "name_of",
]
