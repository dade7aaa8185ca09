"""
Remote provider registry.

Maps a git remote URL to the provider instance that knows how to build links
for it. Instances are memoized per (domain, path) so their pull request
caches live as long as the factory.
"""

from urllib.parse import urlsplit

from remotelink.config import CustomRemoteConfig, RemoteType, Settings
from remotelink.github.api import GitHubApi
from remotelink.github.transport import HttpxGraphQLTransport
from remotelink.host.protocol import HostServices
from remotelink.logging_config import get_logger
from remotelink.remotes.github import GitHubRemote
from remotelink.remotes.provider import RemoteProvider

logger = get_logger(__name__)

GITHUB_DOMAIN = "github.com"


def parse_remote_url(remote_url: str) -> tuple[str, str] | None:
    """Parse a git remote URL into (domain, "owner/repo").

    Supports:
      - https://github.com/owner/repo[.git]
      - ssh://git@github.com/owner/repo.git
      - git@github.com:owner/repo.git

    Returns None if the URL can't be parsed.
    """
    url = remote_url.strip().removesuffix("/").removesuffix(".git")

    if "://" in url:
        parts = urlsplit(url)
        domain = parts.hostname
        path = parts.path.strip("/")
    elif "@" in url and ":" in url:
        # scp-like: git@github.com:owner/repo
        host, _, path = url.partition(":")
        domain = host.rsplit("@", 1)[-1].lower()
        path = path.strip("/")
    else:
        return None

    if not domain or path.count("/") < 1:
        return None
    return domain, path


class RemoteProviderFactory:
    """Creates and remembers providers for remote URLs."""

    def __init__(self, settings: Settings, host: HostServices) -> None:
        self._host = host
        self._custom: dict[str, CustomRemoteConfig] = {r.domain: r for r in settings.remotes}
        self._api = GitHubApi(
            host.config,
            transport=HttpxGraphQLTransport(
                endpoint=settings.github.graphql_url,
                timeout=settings.github.timeout_seconds,
            ),
        )
        self._providers: dict[tuple[str, str], RemoteProvider] = {}

    def close(self) -> None:
        self._api.close()

    def create(self, remote_url: str) -> RemoteProvider | None:
        """Return the provider for `remote_url`, or None for unknown hosts."""
        parsed = parse_remote_url(remote_url)
        if parsed is None:
            logger.debug("Unparseable remote url", remote_url=remote_url)
            return None

        provider = self._providers.get(parsed)
        if provider is None:
            provider = self._build(*parsed)
            if provider is None:
                logger.debug("No provider for remote", domain=parsed[0])
                return None
            self._providers[parsed] = provider
        return provider

    def _build(self, domain: str, path: str) -> RemoteProvider | None:
        if domain == GITHUB_DOMAIN:
            return GitHubRemote(self._host, domain, path, api=self._api)

        custom = self._custom.get(domain)
        if custom is None:
            return None

        match custom.type:
            case RemoteType.GITHUB:
                return GitHubRemote(
                    self._host,
                    domain,
                    path,
                    protocol=custom.protocol,
                    name=custom.name,
                    custom=True,
                    api=self._api,
                )
        return None
