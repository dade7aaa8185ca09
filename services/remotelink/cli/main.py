"""
Command line front end for remotelink.

Run via: remotelink <command> REMOTE_URL [options]

Reads configuration from ~/.config/remotelink/config.yaml and REMOTELINK_*
environment variables (see remotelink.config).
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from remotelink import commands
from remotelink.config import settings
from remotelink.host import create_host_services
from remotelink.logging_config import configure_logging
from remotelink.remotes.autolinks import linkify
from remotelink.remotes.factory import RemoteProviderFactory
from remotelink.remotes.provider import RemoteProvider
from remotelink.remotes.resource import (
    BranchesResource,
    BranchResource,
    CommitResource,
    FileResource,
    Range,
    RemoteResource,
    RepoResource,
    RevisionResource,
    name_of,
)

T = TypeVar("T")


def parse_line_range(value: str | None) -> Range | None:
    """Parse "5" or "2-9" into a Range."""
    if not value:
        return None
    start, _, end = value.partition("-")
    try:
        return Range.from_lines(int(start), int(end) if end else None)
    except ValueError as exc:
        raise click.BadParameter(f"Invalid line range {value!r}: {exc}") from exc


def build_resource(
    branch: str | None,
    sha: str | None,
    file_name: str | None,
    lines: str | None,
    branches: bool,
) -> RemoteResource:
    """Pick the resource variant the given options describe."""
    if branches:
        return BranchesResource()
    if file_name:
        range = parse_line_range(lines)
        if sha:
            return RevisionResource(file_name=file_name, branch=branch, sha=sha, range=range)
        return FileResource(file_name=file_name, branch=branch, range=range)
    if lines:
        raise click.UsageError("--lines requires --file")
    if sha:
        return CommitResource(sha=sha)
    if branch:
        return BranchResource(branch=branch)
    return RepoResource()


def resource_options(f: Callable[..., None]) -> Callable[..., None]:
    f = click.option("--branches", is_flag=True, help="Link to the branches list")(f)
    f = click.option("--lines", "-L", default=None, help="Line or range, e.g. 5 or 2-9")(f)
    f = click.option("--file", "file_name", default=None, help="Repository-relative file path")(f)
    f = click.option("--sha", default=None, help="Commit sha")(f)
    f = click.option("--branch", "-b", default=None, help="Branch name")(f)
    return f


def _run(action: Callable[[RemoteProviderFactory], Awaitable[T]]) -> T:
    async def runner() -> T:
        factory = RemoteProviderFactory(settings, create_host_services(settings))
        try:
            return await action(factory)
        finally:
            factory.close()

    return asyncio.run(runner())


def _provider(factory: RemoteProviderFactory, remote_url: str) -> RemoteProvider:
    provider = factory.create(remote_url)
    if provider is None:
        raise click.ClickException(f"No provider for remote: {remote_url}")
    return provider


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level")
def cli(log_level: str | None) -> None:
    """Links to hosted repositories and pull request lookups for git remotes.

    \b
    Examples:
        remotelink url git@github.com:acme/widgets.git --file src/app.py -L 2-9
        remotelink open https://github.com/acme/widgets --branch main
        remotelink pr https://github.com/acme/widgets 1a2b3c4
    """
    configure_logging(json_logs=settings.json_logs, log_level=log_level or settings.log_level)


@cli.command("url")
@click.argument("remote_url")
@resource_options
def url_command(remote_url: str, **options) -> None:
    """Print the web URL for a resource."""
    resource = build_resource(**options)

    async def action(factory: RemoteProviderFactory) -> str | None:
        return _provider(factory, remote_url).url(resource)

    url = _run(action)
    if url is None:
        raise click.ClickException(f"{name_of(resource)} has no URL on this remote")
    click.echo(url)


@cli.command("open")
@click.argument("remote_url")
@resource_options
def open_command(remote_url: str, **options) -> None:
    """Open a resource in the default browser."""
    resource = build_resource(**options)

    async def action(factory: RemoteProviderFactory) -> None:
        await _provider(factory, remote_url).open(resource)

    _run(action)


@cli.command("copy")
@click.argument("remote_url")
@resource_options
def copy_command(remote_url: str, **options) -> None:
    """Copy a resource URL to the clipboard."""
    resource = build_resource(**options)

    async def action(factory: RemoteProviderFactory) -> None:
        await _provider(factory, remote_url).copy(resource)

    _run(action)


@cli.command("pr")
@click.argument("remote_url")
@click.argument("sha")
def pr_command(remote_url: str, sha: str) -> None:
    """Show the pull request associated with a commit."""

    async def action(factory: RemoteProviderFactory):
        _provider(factory, remote_url)
        return await commands.get_pull_request_for_commit(factory, remote_url, sha)

    pr = _run(action)
    if pr is None:
        click.echo(f"No pull request found for {sha}")
        return
    click.echo(f"#{pr.number} {pr.title} ({pr.formatted_state})")
    click.echo(pr.url)


@cli.command("enable-prs")
@click.argument("remote_url")
def enable_prs_command(remote_url: str) -> None:
    """Store a personal access token to enable pull request lookups."""

    async def action(factory: RemoteProviderFactory) -> bool:
        return await commands.enable_pull_requests(factory, remote_url)

    if not _run(action):
        raise click.ClickException(f"Pull requests are not supported for {remote_url}")


@cli.command("linkify")
@click.argument("remote_url")
@click.argument("text")
def linkify_command(remote_url: str, text: str) -> None:
    """Rewrite issue references in TEXT into markdown links."""

    async def action(factory: RemoteProviderFactory) -> str:
        return linkify(text, _provider(factory, remote_url).autolinks)

    click.echo(_run(action))


if __name__ == "__main__":
    cli()
