"""GitHub remote provider.

Builds github.com style URLs and looks up pull requests through GitHubApi.
Self-hosted GitHub Enterprise domains use the same class with `custom=True`.
"""

import asyncio
import re
from dataclasses import replace
from functools import partial

from remotelink.github.api import GITHUB_TOKEN_KEY, GitHubApi
from remotelink.host.protocol import ConfigurationTarget, HostServices
from remotelink.logging_config import get_logger
from remotelink.models import PullRequest
from remotelink.remotes.autolinks import Autolink, AutolinkReference, DynamicAutolinkReference
from remotelink.remotes.provider import RemoteProvider
from remotelink.remotes.resource import Range

logger = get_logger(__name__)

# owner/repo#123, tolerating markdown-escaped hyphens and hash. Names may
# contain hyphens but must not end with one.
CROSS_REPO_ISSUE_RE = re.compile(
    r"\b(\w+(?:\\?-\w+)*(?!\\?-)/\w+(?:\\?-\w+)*(?!\\?-))\\?#([0-9]+)\b"
)


def _line_fragment(range: Range | None) -> str:
    if range is None:
        return ""
    if range.is_single_line:
        return f"#L{range.start.line}"
    return f"#L{range.start.line}-L{range.end.line}"


class GitHubRemote(RemoteProvider):
    def __init__(
        self,
        host: HostServices,
        domain: str,
        path: str,
        protocol: str = "https",
        name: str | None = None,
        custom: bool = False,
        api: GitHubApi | None = None,
    ) -> None:
        super().__init__(host, domain, path, protocol, name, custom)
        self._api = api
        self._autolinks: list[Autolink] | None = None
        # sha -> in-flight or resolved lookup
        self._prs_by_commit: dict[str, asyncio.Task[PullRequest | None]] = {}

    @property
    def name(self) -> str:
        return self.format_name("GitHub")

    @property
    def icon(self) -> str:
        return "github"

    @property
    def api(self) -> GitHubApi:
        if self._api is None:
            self._api = GitHubApi(self._host.config, provider_name=self.name)
        return self._api

    @property
    def autolinks(self) -> list[Autolink]:
        if self._autolinks is None:
            self._autolinks = [
                AutolinkReference(
                    prefix="#",
                    url=f"{self.base_url}/issues/<num>",
                    title="Open Issue #<num>",
                ),
                AutolinkReference(
                    prefix="gh-",
                    url=f"{self.base_url}/issues/<num>",
                    title="Open Issue #<num>",
                    ignore_case=True,
                ),
                DynamicAutolinkReference(self._linkify_cross_repo_issues),
            ]
        return self._autolinks

    def _linkify_cross_repo_issues(self, text: str) -> str:
        def replace(match: re.Match[str]) -> str:
            repo = match.group(1).replace("\\", "")
            num = match.group(2)
            url = f"{self.protocol}://{self.domain}/{repo}/issues/{num}"
            return f'[{match.group(0)}]({url} "Open Issue #{num} from {repo}")'

        return CROSS_REPO_ISSUE_RE.sub(replace, text)

    # --- Pull requests ---

    def supports_pull_requests(self) -> bool:
        return bool(self._host.config.get(GITHUB_TOKEN_KEY))

    async def enable_pull_requests(self) -> None:
        token = await self._host.prompt.prompt_for_input(
            placeholder="Generate a personal access token from github.com (required)",
            prompt="Enter a GitHub personal access token",
            validate=lambda value: None if value else "Must be a valid GitHub personal access token",
            ignore_focus_out=True,
        )
        if not token:
            return

        try:
            await self._host.config.update(GITHUB_TOKEN_KEY, token, ConfigurationTarget.GLOBAL)
        except Exception:
            logger.exception("Failed to store GitHub personal access token")
            self._host.messages.show_generic_error("Unable to store GitHub personal access token")
            return

        logger.info("GitHub pull requests enabled", remote=self.base_url)

    async def get_pull_request_for_commit(self, ref: str) -> PullRequest | None:
        """Return the PR for `ref`, joining any lookup already in flight.

        Lookups that come back empty are forgotten so a later call (for
        example after a token is configured) tries again.
        """
        task = self._prs_by_commit.get(ref)
        if task is None:
            owner, repo = self.split_path()
            task = asyncio.ensure_future(self._lookup(owner, repo, ref))
            self._prs_by_commit[ref] = task
            task.add_done_callback(partial(self._forget_if_missing, ref))

        return await asyncio.shield(task)

    async def _lookup(self, owner: str, repo: str, ref: str) -> PullRequest | None:
        pr = await self.api.get_pull_request_for_commit(owner, repo, ref)
        # The api client may be shared with other GitHub remotes
        if pr is not None and pr.provider != self.name:
            pr = replace(pr, provider=self.name)
        return pr

    def _forget_if_missing(self, ref: str, task: asyncio.Task[PullRequest | None]) -> None:
        if not task.cancelled() and task.exception() is None and task.result() is not None:
            return
        if self._prs_by_commit.get(ref) is task:
            del self._prs_by_commit[ref]

    # --- URL builders ---

    def get_url_for_branches(self) -> str:
        return f"{self.base_url}/branches"

    def get_url_for_branch(self, branch: str) -> str:
        return f"{self.base_url}/commits/{branch}"

    def get_url_for_commit(self, sha: str) -> str:
        return f"{self.base_url}/commit/{sha}"

    def get_url_for_file(
        self,
        file_name: str,
        branch: str | None = None,
        sha: str | None = None,
        range: Range | None = None,
    ) -> str:
        line = _line_fragment(range)
        if sha:
            return f"{self.base_url}/blob/{sha}/{file_name}{line}"
        if branch:
            return f"{self.base_url}/blob/{branch}/{file_name}{line}"
        return f"{self.base_url}?path={file_name}{line}"
