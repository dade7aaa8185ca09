"""
In-process configuration store backed by Settings and the YAML config file.

GLOBAL updates are written to the YAML file so they survive restarts;
WORKSPACE updates only live for the current process.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import aiofiles
import yaml

from remotelink.config import Settings, config_file_path
from remotelink.host.protocol import (
    ChangeListener,
    ConfigurationChangeEvent,
    ConfigurationTarget,
)
from remotelink.logging_config import get_logger

logger = get_logger(__name__)


class SettingsConfigurationStore:
    """ConfigurationStore implementation seeded from Settings."""

    def __init__(self, settings: Settings, config_path: Path | None = None) -> None:
        self._values: dict[str, Any] = settings.model_dump(mode="json")
        self._config_path = config_path or config_file_path()
        self._listeners: list[ChangeListener] = []

    def get(self, key: str) -> Any:
        return self._values.get(key)

    async def update(self, key: str, value: Any, target: ConfigurationTarget) -> None:
        # Only apply the change once it is safely on disk
        if target == ConfigurationTarget.GLOBAL:
            await self._persist(key, value)
        self._values[key] = value
        logger.debug("Configuration updated", key=key, target=target.value)
        self._fire(ConfigurationChangeEvent(frozenset({key})))

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def _fire(self, event: ConfigurationChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    async def _persist(self, key: str, value: Any) -> None:
        """Merge `key` into the YAML file, keeping any other keys intact."""
        data: dict[str, Any] = {}
        if self._config_path.exists():
            async with aiofiles.open(self._config_path) as f:
                data = yaml.safe_load(await f.read()) or {}

        data[key] = value
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self._config_path, "w") as f:
            await f.write(yaml.safe_dump(data, default_flow_style=False))
