"""
Host collaborator protocols for remotelink.

The providers never talk to a terminal, clipboard, browser or config file
directly. They go through these narrow interfaces so a host (the CLI, an
editor bridge, a test) can supply its own implementations.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

# --- Data Types ---


class ConfigurationTarget(StrEnum):
    """Where a configuration update is persisted."""

    GLOBAL = "global"
    WORKSPACE = "workspace"


@dataclass(frozen=True)
class ConfigurationChangeEvent:
    """Notification that one or more configuration keys changed."""

    keys: frozenset[str] = field(default_factory=frozenset)

    def affects(self, key: str) -> bool:
        return key in self.keys


Validator = Callable[[str], str | None]
"""Returns an error message for invalid input, or None when valid."""

ChangeListener = Callable[[ConfigurationChangeEvent], None]


# --- Exceptions ---


class HostError(Exception):
    """Base exception for host collaborator failures."""


class ClipboardError(HostError):
    """Raised when the clipboard cannot be written."""


# Error text for a missing Linux clipboard utility. Providers match on the
# full message to tell it apart from other xsel failures.
MISSING_XSEL_MESSAGE = "Couldn't find the required `xsel` binary"


# --- Protocols ---


@runtime_checkable
class ConfigurationStore(Protocol):
    """Key/value configuration with change notification."""

    def get(self, key: str) -> Any:
        """Return the current value for `key`, or None when unset."""
        ...

    async def update(self, key: str, value: Any, target: ConfigurationTarget) -> None:
        """Set `key` and persist it to `target`. Notifies subscribers.

        Leaves the current value untouched when persisting fails.
        """
        ...

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Subscribe to changes. Returns a callable that unsubscribes."""
        ...


class InputPrompt(Protocol):
    async def prompt_for_input(
        self,
        placeholder: str,
        prompt: str,
        validate: Validator | None = None,
        ignore_focus_out: bool = False,
    ) -> str | None:
        """Ask the user for a value. Returns None if the user cancels."""
        ...


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None:
        """Write text to the system clipboard.

        Raises:
            ClipboardError: If the clipboard cannot be written.
        """
        ...


class UrlOpener(Protocol):
    async def open(self, url: str) -> None:
        """Open `url` in the default browser."""
        ...


class MessageSink(Protocol):
    """User-facing notifications."""

    def show_warning(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...

    def show_generic_error(self, message: str) -> None: ...


@dataclass
class HostServices:
    """Bundle of host collaborators handed to providers."""

    config: ConfigurationStore
    prompt: InputPrompt
    clipboard: Clipboard
    opener: UrlOpener
    messages: MessageSink
