"""Viewscript - server-side rendering of HTML components"""

from viewscript._version import __version__

# Re-export from components
from viewscript.components import (
    ComponentCache,
    ComponentProvider,
    ComponentRecord,
    ComponentSettings,
    FileSystemProvider,
    MemoryProvider,
    ProviderOptions,
)

# Re-export from engine
from viewscript.engine import (
    Composer,
    RenderContext,
    apply_directives,
    bind_attributes,
    render_component,
    resolve,
)

from viewscript.exceptions import (
    BindingError,
    ComponentNotFoundError,
    InvalidSettingsError,
    PropsDecodeError,
    ViewscriptError,
)

__all__ = [
    "__version__",
    # components
    "ComponentCache",
    "ComponentProvider",
    "ComponentRecord",
    "ComponentSettings",
    "FileSystemProvider",
    "MemoryProvider",
    "ProviderOptions",
    # engine
    "Composer",
    "RenderContext",
    "apply_directives",
    "bind_attributes",
    "render_component",
    "resolve",
    # exceptions
    "BindingError",
    "ComponentNotFoundError",
    "InvalidSettingsError",
    "PropsDecodeError",
    "ViewscriptError",
]
