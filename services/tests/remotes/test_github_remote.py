"""Tests for the GitHub remote provider."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from remotelink.host.protocol import ConfigurationTarget
from remotelink.models import PullRequest, PullRequestState
from remotelink.remotes.autolinks import linkify
from remotelink.remotes.github import GitHubRemote
from remotelink.remotes.resource import (
    BranchesResource,
    BranchResource,
    CommitRef,
    CommitResource,
    FileResource,
    Range,
    RepoResource,
    RevisionResource,
)

BASE = "https://github.com/acme/widgets"


def _pr(number: int = 7) -> PullRequest:
    return PullRequest(
        provider="GitHub",
        number=number,
        title="Add widgets",
        url=f"{BASE}/pull/{number}",
        state=PullRequestState.OPEN,
        updated_at=datetime(2024, 1, 2, tzinfo=UTC),
    )


@pytest.fixture
def remote(host) -> GitHubRemote:
    return GitHubRemote(host, "github.com", "acme/widgets", api=MagicMock())


class TestUrls:
    def test_repo(self, remote) -> None:
        assert remote.url(RepoResource()) == BASE

    def test_branches(self, remote) -> None:
        assert remote.url(BranchesResource()) == f"{BASE}/branches"

    def test_branch(self, remote) -> None:
        assert remote.url(BranchResource("main")) == f"{BASE}/commits/main"

    def test_branch_is_percent_encoded(self, remote) -> None:
        url = remote.url(BranchResource("feature/x#1"))
        assert url == f"{BASE}/commits/feature%2Fx%231"

    def test_commit(self, remote) -> None:
        assert remote.url(CommitResource("abc123")) == f"{BASE}/commit/abc123"

    def test_commit_sha_is_encoded(self, remote) -> None:
        assert remote.url(CommitResource("HEAD~1 x")) == f"{BASE}/commit/HEAD~1%20x"

    def test_file_without_revision_uses_query(self, remote) -> None:
        assert remote.url(FileResource("src/app.py")) == f"{BASE}?path=src/app.py"

    def test_file_with_branch(self, remote) -> None:
        url = remote.url(FileResource("src/app.py", branch="main"))
        assert url == f"{BASE}/blob/main/src/app.py"

    def test_file_branch_is_encoded(self, remote) -> None:
        url = remote.url(FileResource("src/app.py", branch="release/1.0"))
        assert url == f"{BASE}/blob/release%2F1.0/src/app.py"

    def test_revision_sha_wins_over_branch(self, remote) -> None:
        url = remote.url(RevisionResource("src/app.py", branch="main", sha="abc123"))
        assert url == f"{BASE}/blob/abc123/src/app.py"

    def test_revision_with_only_branch(self, remote) -> None:
        url = remote.url(RevisionResource("src/app.py", branch="main"))
        assert url == f"{BASE}/blob/main/src/app.py"

    def test_revision_commit_does_not_pin_url(self, remote) -> None:
        url = remote.url(RevisionResource("src/app.py", branch="main", commit=CommitRef("def456")))
        assert url == f"{BASE}/blob/main/src/app.py"

    def test_revision_without_anything_uses_query(self, remote) -> None:
        assert remote.url(RevisionResource("src/app.py")) == f"{BASE}?path=src/app.py"


class TestLineFragments:
    def test_single_line(self, remote) -> None:
        url = remote.url(RevisionResource("a.py", sha="abc", range=Range.from_lines(5, 5)))
        assert url == f"{BASE}/blob/abc/a.py#L5"

    def test_multi_line(self, remote) -> None:
        url = remote.url(RevisionResource("a.py", sha="abc", range=Range.from_lines(2, 9)))
        assert url == f"{BASE}/blob/abc/a.py#L2-L9"

    def test_no_range(self, remote) -> None:
        url = remote.url(RevisionResource("a.py", sha="abc"))
        assert "#" not in url

    def test_query_form_keeps_fragment(self, remote) -> None:
        url = remote.url(FileResource("a.py", range=Range.from_lines(3)))
        assert url == f"{BASE}?path=a.py#L3"


class TestAutolinks:
    def test_hash_reference(self, remote) -> None:
        text = linkify("Fixes #42", remote.autolinks)
        assert text == f'Fixes [#42]({BASE}/issues/42 "Open Issue #42")'

    def test_gh_reference_ignores_case(self, remote) -> None:
        text = linkify("See GH-42", remote.autolinks)
        assert text == f'See [GH-42]({BASE}/issues/42 "Open Issue #42")'

    def test_hash_and_gh_share_target(self, remote) -> None:
        hash_rule, gh_rule = remote.autolinks[:2]
        assert hash_rule.link_for("42") == gh_rule.link_for("42") == f"{BASE}/issues/42"

    def test_cross_repo_reference(self, remote) -> None:
        text = linkify("Ported from acme-corp/widgets#7", remote.autolinks)
        assert text == (
            "Ported from [acme-corp/widgets#7]"
            '(https://github.com/acme-corp/widgets/issues/7 "Open Issue #7 from acme-corp/widgets")'
        )

    def test_cross_repo_rejects_trailing_hyphen(self, remote) -> None:
        text = "see acme-/widgets#7"
        assert linkify(text, remote.autolinks[2:]) == text

    def test_cross_repo_allows_many_hyphens(self, remote) -> None:
        text = linkify("my-big-org/some-repo-name#12", remote.autolinks[2:])
        assert "(https://github.com/my-big-org/some-repo-name/issues/12 " in text

    def test_autolinks_built_once(self, remote) -> None:
        assert remote.autolinks is remote.autolinks

    def test_custom_domain_in_cross_repo_links(self, host) -> None:
        remote = GitHubRemote(host, "git.example.com", "acme/widgets", custom=True)
        text = linkify("other/repo#3", remote.autolinks)
        assert "(https://git.example.com/other/repo/issues/3 " in text


class TestEnablePullRequests:
    async def test_supports_reflects_live_config(self, remote, host, config) -> None:
        host.prompt.answer = "ghp_secret"
        assert not remote.supports_pull_requests()

        await remote.enable_pull_requests()

        assert remote.supports_pull_requests()
        assert config.updates == [("github_token", "ghp_secret", ConfigurationTarget.GLOBAL)]

    async def test_empty_input_leaves_config_unchanged(self, remote, host, config) -> None:
        host.prompt.answer = ""
        await remote.enable_pull_requests()
        assert config.updates == []
        assert not remote.supports_pull_requests()

    async def test_cancel_leaves_config_unchanged(self, remote, host, config) -> None:
        host.prompt.answer = None
        await remote.enable_pull_requests()
        assert config.updates == []

    async def test_prompt_validates_non_empty(self, remote, host) -> None:
        await remote.enable_pull_requests()
        call = host.prompt.calls[0]
        assert call["ignore_focus_out"] is True
        assert call["validate"]("") == "Must be a valid GitHub personal access token"
        assert call["validate"]("ghp_x") is None

    async def test_storage_failure_is_reported(self, remote, host, config) -> None:
        host.prompt.answer = "ghp_secret"
        config.update = AsyncMock(side_effect=OSError("read-only file system"))

        await remote.enable_pull_requests()

        assert host.messages.errors == ["Unable to store GitHub personal access token"]
        assert not remote.supports_pull_requests()

    async def test_token_removed_disables_support(self, remote, config) -> None:
        config.values["github_token"] = "ghp_x"
        assert remote.supports_pull_requests()
        config.values["github_token"] = None
        assert not remote.supports_pull_requests()


class TestPullRequestCache:
    async def test_uses_owner_and_repo_from_path(self, host) -> None:
        api = MagicMock()
        api.get_pull_request_for_commit = AsyncMock(return_value=_pr())
        remote = GitHubRemote(host, "github.com", "acme/widgets", api=api)

        assert await remote.get_pull_request_for_commit("abc123") == _pr()
        api.get_pull_request_for_commit.assert_awaited_once_with("acme", "widgets", "abc123")

    async def test_concurrent_lookups_join(self, host) -> None:
        release = asyncio.Event()
        calls = 0

        async def lookup(owner: str, repo: str, ref: str) -> PullRequest:
            nonlocal calls
            calls += 1
            await release.wait()
            return _pr()

        api = MagicMock()
        api.get_pull_request_for_commit = lookup
        remote = GitHubRemote(host, "github.com", "acme/widgets", api=api)

        first = asyncio.create_task(remote.get_pull_request_for_commit("abc123"))
        second = asyncio.create_task(remote.get_pull_request_for_commit("abc123"))
        await asyncio.sleep(0)
        release.set()

        results = await asyncio.gather(first, second)
        assert calls == 1
        assert results[0] is results[1]

    async def test_resolved_pr_is_cached(self, host) -> None:
        api = MagicMock()
        api.get_pull_request_for_commit = AsyncMock(return_value=_pr())
        remote = GitHubRemote(host, "github.com", "acme/widgets", api=api)

        await remote.get_pull_request_for_commit("abc123")
        await remote.get_pull_request_for_commit("abc123")

        assert api.get_pull_request_for_commit.await_count == 1

    async def test_absent_result_is_retried(self, host) -> None:
        api = MagicMock()
        api.get_pull_request_for_commit = AsyncMock(side_effect=[None, _pr()])
        remote = GitHubRemote(host, "github.com", "acme/widgets", api=api)

        assert await remote.get_pull_request_for_commit("abc123") is None
        assert await remote.get_pull_request_for_commit("abc123") == _pr()
        assert api.get_pull_request_for_commit.await_count == 2

    async def test_different_shas_are_separate(self, host) -> None:
        api = MagicMock()
        api.get_pull_request_for_commit = AsyncMock(side_effect=[_pr(1), _pr(2)])
        remote = GitHubRemote(host, "github.com", "acme/widgets", api=api)

        assert (await remote.get_pull_request_for_commit("a")).number == 1
        assert (await remote.get_pull_request_for_commit("b")).number == 2

    async def test_cancelled_caller_does_not_cancel_lookup(self, host) -> None:
        release = asyncio.Event()

        async def lookup(owner: str, repo: str, ref: str) -> PullRequest:
            await release.wait()
            return _pr()

        api = MagicMock()
        api.get_pull_request_for_commit = lookup
        remote = GitHubRemote(host, "github.com", "acme/widgets", api=api)

        impatient = asyncio.create_task(remote.get_pull_request_for_commit("abc123"))
        patient = asyncio.create_task(remote.get_pull_request_for_commit("abc123"))
        await asyncio.sleep(0)
        impatient.cancel()
        release.set()

        assert await patient == _pr()

    async def test_pull_request_carries_remote_name(self, host) -> None:
        api = MagicMock()
        api.get_pull_request_for_commit = AsyncMock(return_value=_pr())
        remote = GitHubRemote(host, "git.example.com", "acme/widgets", custom=True, api=api)

        pr = await remote.get_pull_request_for_commit("abc123")

        assert pr.provider == "GitHub (git.example.com)"
        assert pr.number == 7
