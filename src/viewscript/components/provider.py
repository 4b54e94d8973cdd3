"""Component providers - where templates and settings come from."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from viewscript.components.cache import ComponentCache
from viewscript.components.spec import (
    SETTINGS_FILE,
    TEMPLATE_FILE,
    ComponentRecord,
    ComponentSettings,
    ProviderOptions,
    parse_settings,
)
from viewscript.exceptions import ComponentNotFoundError, InvalidSettingsError

log = logging.getLogger(__name__)


class ComponentProvider(ABC):
    """Base class for component sources.

    Subclasses implement `load`; caching is handled here so every provider
    honours `ProviderOptions.cache` the same way.
    """

    def __init__(self, cache: ComponentCache | None = None):
        self.cache = cache if cache is not None else ComponentCache()

    async def get_component(
        self, locator: str, options: ProviderOptions | None = None
    ) -> ComponentRecord:
        """Return the component stored under locator.

        Raises:
            ComponentNotFoundError: If the component does not exist
            InvalidSettingsError: If its settings cannot be decoded
        """
        if options is not None and options.cache:
            return await self.cache.get_or_load(locator, self.load)
        return await self.load(locator)

    @abstractmethod
    async def load(self, locator: str) -> ComponentRecord:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


def decode_settings(locator: str, content: str) -> ComponentSettings:
    """Decode a settings document, reporting failures against locator."""
    try:
        return parse_settings(content)
    except yaml.YAMLError as e:
        raise InvalidSettingsError(locator, f"malformed YAML: {e}") from e
    except ValidationError as e:
        raise InvalidSettingsError(locator, str(e)) from e
    except ValueError as e:
        raise InvalidSettingsError(locator, str(e)) from e


class FileSystemProvider(ComponentProvider):
    """Loads components from `<base_dir>/<locator>/{template.html,settings.yaml}`.

    Locators are always resolved against base_dir, not against the
    directory of the importing component.
    """

    def __init__(
        self, base_dir: str | Path | None = None, cache: ComponentCache | None = None
    ):
        super().__init__(cache=cache)
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def component_dir(self, locator: str) -> Path:
        return (self.base_dir / locator).resolve()

    async def load(self, locator: str) -> ComponentRecord:
        component_dir = self.component_dir(locator)
        log.debug("Loading component %s from %s", locator, component_dir)

        template, settings_source = await asyncio.gather(
            _read_text(locator, component_dir / TEMPLATE_FILE),
            _read_text(locator, component_dir / SETTINGS_FILE),
        )

        return ComponentRecord(
            settings=decode_settings(locator, settings_source),
            template=template,
        )

    @property
    def name(self) -> str:
        return f"FileSystemProvider({self.base_dir})"


async def _read_text(locator: str, path: Path) -> str:
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except FileNotFoundError as e:
        raise ComponentNotFoundError(locator, str(path)) from e
    except UnicodeDecodeError as e:
        raise ComponentNotFoundError(locator, str(path), f"{path} is not valid UTF-8") from e
    except OSError as e:
        raise ComponentNotFoundError(
            locator, str(path), f"cannot read {path}: {e.strerror or e}"
        ) from e


class MemoryProvider(ComponentProvider):
    """Serves components from memory.

    Each entry maps a locator to `(template, settings)`, where settings is
    either a mapping or a YAML string.
    """

    def __init__(
        self,
        components: Mapping[str, tuple[str, Mapping[str, Any] | str]] | None = None,
        cache: ComponentCache | None = None,
    ):
        super().__init__(cache=cache)
        self.components: dict[str, tuple[str, Mapping[str, Any] | str]] = dict(
            components or {}
        )
        self.loads = 0

    def add(self, locator: str, template: str, settings: Mapping[str, Any] | str | None = None) -> None:
        self.components[locator] = (template, settings if settings is not None else {})

    async def load(self, locator: str) -> ComponentRecord:
        entry = self.components.get(locator)
        if entry is None:
            raise ComponentNotFoundError(locator)
        self.loads += 1

        template, settings = entry
        if isinstance(settings, str):
            decoded = decode_settings(locator, settings)
        else:
            try:
                decoded = ComponentSettings(**settings)
            except ValidationError as e:
                raise InvalidSettingsError(locator, str(e)) from e

        return ComponentRecord(settings=decoded, template=template)

    @property
    def name(self) -> str:
        return f"MemoryProvider({len(self.components)} components)"
