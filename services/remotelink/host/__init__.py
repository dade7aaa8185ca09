"""
Host collaborators for remotelink.

Provides create_host_services() to assemble the terminal implementations
the CLI runs with.
"""

from __future__ import annotations

from remotelink.config import Settings
from remotelink.host.protocol import (
    MISSING_XSEL_MESSAGE,
    Clipboard,
    ClipboardError,
    ConfigurationChangeEvent,
    ConfigurationStore,
    ConfigurationTarget,
    HostServices,
    InputPrompt,
    MessageSink,
    UrlOpener,
)
from remotelink.host.settings_store import SettingsConfigurationStore
from remotelink.host.terminal import BrowserOpener, ClickPrompt, ConsoleMessages, SystemClipboard

__all__ = [
    "Clipboard",
    "ClipboardError",
    "ConfigurationChangeEvent",
    "ConfigurationStore",
    "ConfigurationTarget",
    "HostServices",
    "InputPrompt",
    "MISSING_XSEL_MESSAGE",
    "MessageSink",
    "UrlOpener",
    "create_host_services",
]


def create_host_services(settings: Settings) -> HostServices:
    """Build the terminal host: YAML-backed config, click prompts, system clipboard."""
    return HostServices(
        config=SettingsConfigurationStore(settings),
        prompt=ClickPrompt(),
        clipboard=SystemClipboard(),
        opener=BrowserOpener(),
        messages=ConsoleMessages(),
    )
