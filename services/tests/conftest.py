"""
Top-level test configuration for remotelink.

Provides in-memory fakes for the host collaborators.
"""

import os
from collections.abc import Callable
from typing import Any

import pytest

# Keep the developer's real config file out of the tests
os.environ.setdefault("REMOTELINK_CONFIG_FILE", "/nonexistent/remotelink-test.yaml")
os.environ.setdefault("REMOTELINK_LOG_LEVEL", "DEBUG")

from remotelink.host.protocol import (  # noqa: E402
    MISSING_XSEL_MESSAGE,
    ChangeListener,
    ClipboardError,
    ConfigurationChangeEvent,
    ConfigurationTarget,
    HostServices,
    Validator,
)


class FakeConfigurationStore:
    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(values or {})
        self.updates: list[tuple[str, Any, ConfigurationTarget]] = []
        self.listeners: list[ChangeListener] = []

    def get(self, key: str) -> Any:
        return self.values.get(key)

    async def update(self, key: str, value: Any, target: ConfigurationTarget) -> None:
        self.values[key] = value
        self.updates.append((key, value, target))
        for listener in list(self.listeners):
            listener(ConfigurationChangeEvent(frozenset({key})))

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        self.listeners.append(listener)
        return lambda: self.listeners.remove(listener)


class FakePrompt:
    def __init__(self, answer: str | None = None) -> None:
        self.answer = answer
        self.calls: list[dict[str, Any]] = []

    async def prompt_for_input(
        self,
        placeholder: str,
        prompt: str,
        validate: Validator | None = None,
        ignore_focus_out: bool = False,
    ) -> str | None:
        self.calls.append(
            {
                "placeholder": placeholder,
                "prompt": prompt,
                "validate": validate,
                "ignore_focus_out": ignore_focus_out,
            }
        )
        return self.answer


class FakeClipboard:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.text: str | None = None

    async def write_text(self, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.text = text


class FakeOpener:
    def __init__(self) -> None:
        self.opened: list[str] = []

    async def open(self, url: str) -> None:
        self.opened.append(url)


class FakeMessages:
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def show_generic_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def config() -> FakeConfigurationStore:
    return FakeConfigurationStore()


@pytest.fixture
def host(config: FakeConfigurationStore) -> HostServices:
    return HostServices(
        config=config,
        prompt=FakePrompt(),
        clipboard=FakeClipboard(),
        opener=FakeOpener(),
        messages=FakeMessages(),
    )


@pytest.fixture
def missing_xsel_error() -> ClipboardError:
    return ClipboardError(MISSING_XSEL_MESSAGE)
