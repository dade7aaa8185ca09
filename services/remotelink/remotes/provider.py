"""Remote provider abstraction.

Defines the RemoteProvider base class that GitHub (and future hosting
services) extend, and the RemoteProviderWithPullRequests protocol for the
optional pull request capability. Callers work against these types, not
specific providers.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable
from urllib.parse import quote

from remotelink.host.protocol import MISSING_XSEL_MESSAGE, ClipboardError, HostServices
from remotelink.logging_config import correlation_context, get_logger
from remotelink.models import PullRequest
from remotelink.remotes.autolinks import Autolink
from remotelink.remotes.resource import (
    BranchesResource,
    BranchResource,
    CommitResource,
    FileResource,
    Range,
    RemoteResource,
    RepoResource,
    RevisionResource,
)

logger = get_logger(__name__)

# Characters JavaScript's encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a branch name or sha for use inside a URL path."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def is_missing_clipboard_utility(exc: BaseException) -> bool:
    """Whether a clipboard failure means the system utility is not installed."""
    return isinstance(exc, ClipboardError) and MISSING_XSEL_MESSAGE in str(exc)


@runtime_checkable
class RemoteProviderWithPullRequests(Protocol):
    """A provider that implements the pull request capability."""

    @property
    def name(self) -> str: ...

    async def enable_pull_requests(self) -> None:
        """Obtain and persist credentials interactively."""
        ...

    async def get_pull_request_for_commit(self, ref: str) -> PullRequest | None:
        """Return the pull request most recently associated with `ref`."""
        ...


class RemoteProvider(ABC):
    """Base class for hosting providers.

    Identity (domain, path, protocol, name override, custom flag) is fixed
    at construction. `path` is "owner/repo" shaped.
    """

    def __init__(
        self,
        host: HostServices,
        domain: str,
        path: str,
        protocol: str = "https",
        name: str | None = None,
        custom: bool = False,
    ) -> None:
        self._host = host
        self._domain = domain
        self._path = path
        self._protocol = protocol
        self._name = name
        self._custom = custom

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.base_url!r})"

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def path(self) -> str:
        return self._path

    @property
    def protocol(self) -> str:
        return self._protocol

    @property
    def custom(self) -> bool:
        return self._custom

    @property
    def base_url(self) -> str:
        return f"{self._protocol}://{self._domain}/{self._path}"

    @property
    def display_path(self) -> str:
        return self._path

    @property
    def icon(self) -> str:
        return "remote"

    @property
    def autolinks(self) -> list[Autolink]:
        return []

    @property
    @abstractmethod
    def name(self) -> str: ...

    def format_name(self, name: str) -> str:
        if self._name is not None:
            return self._name
        return f"{name} ({self._domain})" if self._custom else name

    def split_path(self) -> tuple[str, str]:
        owner, _, repo = self._path.partition("/")
        return owner, repo

    # --- URL builders ---

    def get_url_for_repository(self) -> str | None:
        return self.base_url

    @abstractmethod
    def get_url_for_branches(self) -> str | None: ...

    @abstractmethod
    def get_url_for_branch(self, branch: str) -> str | None: ...

    @abstractmethod
    def get_url_for_commit(self, sha: str) -> str | None: ...

    @abstractmethod
    def get_url_for_file(
        self,
        file_name: str,
        branch: str | None = None,
        sha: str | None = None,
        range: Range | None = None,
    ) -> str | None: ...

    def url(self, resource: RemoteResource) -> str | None:
        """Resolve a resource to a provider URL.

        Branch names and shas are percent-encoded before reaching the
        builders; file names are passed through as paths.
        """
        match resource:
            case BranchResource(branch=branch):
                return self.get_url_for_branch(encode_uri_component(branch))
            case BranchesResource():
                return self.get_url_for_branches()
            case CommitResource(sha=sha):
                return self.get_url_for_commit(encode_uri_component(sha))
            case FileResource():
                return self.get_url_for_file(
                    resource.file_name,
                    _encode_optional(resource.branch),
                    None,
                    resource.range,
                )
            case RepoResource():
                return self.get_url_for_repository()
            case RevisionResource():
                return self.get_url_for_file(
                    resource.file_name,
                    _encode_optional(resource.branch),
                    _encode_optional(resource.sha),
                    resource.range,
                )
        return None

    async def open(self, resource: RemoteResource) -> None:
        url = self.url(resource)
        if url is None:
            return

        await self._host.opener.open(url)

    async def copy(self, resource: RemoteResource) -> None:
        """Copy the resource URL to the clipboard. Never raises."""
        url = self.url(resource)
        if url is None:
            return

        with correlation_context("RemoteProvider.copy", url=url):
            try:
                await self._host.clipboard.write_text(url)
            except Exception as exc:
                if is_missing_clipboard_utility(exc):
                    self._host.messages.show_warning(
                        "Unable to copy remote url, xsel is not installed. "
                        "Please install it via your package manager, e.g. `sudo apt install xsel`"
                    )
                    return

                logger.exception("Failed to copy remote url")
                self._host.messages.show_generic_error("Unable to copy remote url")

    # --- Pull request capability ---

    @property
    def can_support_pull_requests(self) -> bool:
        """Whether this provider implements the pull request capability at all."""
        return isinstance(self, RemoteProviderWithPullRequests)

    def supports_pull_requests(self) -> bool:
        """Whether pull requests are usable right now (e.g. a token is set)."""
        return False

    def with_pull_requests(self) -> RemoteProviderWithPullRequests | None:
        """Narrow to the pull request capability when it is currently usable."""
        if self.supports_pull_requests() and isinstance(self, RemoteProviderWithPullRequests):
            return self
        return None


def _encode_optional(value: str | None) -> str | None:
    return encode_uri_component(value) if value is not None else None
