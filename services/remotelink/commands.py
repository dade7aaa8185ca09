"""
Commands built on the provider contract.

These are the entry points the CLI (or an editor bridge) calls: they find the
provider for a remote and run one operation against it.
"""

from remotelink.logging_config import get_logger
from remotelink.models import PullRequest
from remotelink.remotes.factory import RemoteProviderFactory
from remotelink.remotes.provider import RemoteProviderWithPullRequests

logger = get_logger(__name__)


async def enable_pull_requests(factory: RemoteProviderFactory, remote_url: str) -> bool:
    """Run the provider's interactive token flow.

    Returns False when the remote is unknown or its provider has no pull
    request support.
    """
    provider = factory.create(remote_url)
    if provider is None or not isinstance(provider, RemoteProviderWithPullRequests):
        logger.info("Remote does not support pull requests", remote_url=remote_url)
        return False

    await provider.enable_pull_requests()
    return True


async def get_pull_request_for_commit(
    factory: RemoteProviderFactory, remote_url: str, ref: str
) -> PullRequest | None:
    """Look up the PR for `ref`, or None if PRs are unavailable for this remote."""
    provider = factory.create(remote_url)
    if provider is None:
        return None

    capable = provider.with_pull_requests()
    if capable is None:
        logger.debug("Pull requests not enabled", remote_url=remote_url)
        return None
    return await capable.get_pull_request_for_commit(ref)
