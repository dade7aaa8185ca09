"""
Terminal implementations of the host collaborators.

Blocking calls (stdin prompts, clipboard utilities, browser launch) run in a
worker thread so the event loop keeps serving other coroutines.
"""

import asyncio
import shutil
import subprocess
import sys
import webbrowser

import click

from remotelink.host.protocol import MISSING_XSEL_MESSAGE, ClipboardError, Validator
from remotelink.logging_config import get_logger

logger = get_logger(__name__)


class ClickPrompt:
    """InputPrompt that reads from the terminal via click."""

    def __init__(self, hide_input: bool = True) -> None:
        self._hide_input = hide_input

    async def prompt_for_input(
        self,
        placeholder: str,
        prompt: str,
        validate: Validator | None = None,
        ignore_focus_out: bool = False,
    ) -> str | None:
        return await asyncio.to_thread(self._prompt, placeholder, prompt, validate)

    def _prompt(self, placeholder: str, prompt: str, validate: Validator | None) -> str | None:
        click.echo(placeholder, err=True)
        while True:
            try:
                value = click.prompt(
                    prompt,
                    default="",
                    show_default=False,
                    hide_input=self._hide_input,
                    err=True,
                )
            except click.Abort:
                return None

            error = validate(value) if validate is not None else None
            if error is None:
                return value
            # An empty answer after a failed validation is a cancel
            if not value:
                return None
            click.secho(error, fg="red", err=True)


class SystemClipboard:
    """Clipboard backed by the platform's command line utility."""

    def _command(self) -> list[str]:
        if sys.platform == "darwin":
            return ["pbcopy"]
        if sys.platform == "win32":
            return ["clip"]
        if shutil.which("xsel") is None:
            raise ClipboardError(MISSING_XSEL_MESSAGE)
        return ["xsel", "--clipboard", "--input"]

    async def write_text(self, text: str) -> None:
        command = self._command()
        try:
            await asyncio.to_thread(
                subprocess.run,
                command,
                input=text,
                text=True,
                check=True,
                capture_output=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ClipboardError(f"Clipboard write failed: {exc}") from exc


class BrowserOpener:
    """UrlOpener using the stdlib webbrowser module."""

    async def open(self, url: str) -> None:
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            logger.warning("No browser available", url=url)
            click.echo(url)


class ConsoleMessages:
    """MessageSink that writes to stderr."""

    def show_warning(self, message: str) -> None:
        logger.warning(message)
        click.secho(message, fg="yellow", err=True)

    def show_error(self, message: str) -> None:
        logger.error(message)
        click.secho(message, fg="red", err=True)

    def show_generic_error(self, message: str) -> None:
        self.show_error(f"{message}. See output channel for more details")
