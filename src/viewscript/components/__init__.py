"""Component loading - settings schema, providers and cache."""

from viewscript.components.cache import ComponentCache
from viewscript.components.provider import (
    ComponentProvider,
    FileSystemProvider,
    MemoryProvider,
)
from viewscript.components.spec import (
    ComponentRecord,
    ComponentSettings,
    ProviderOptions,
)

__all__ = [
    "ComponentCache",
    "ComponentProvider",
    "ComponentRecord",
    "ComponentSettings",
    "FileSystemProvider",
    "MemoryProvider",
    "ProviderOptions",
]
