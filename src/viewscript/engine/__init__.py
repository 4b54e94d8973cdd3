"""Viewscript engine - directives, bindings and component composition."""

from viewscript.engine.attributes import bind_attributes
from viewscript.engine.composer import Composer, RenderContext, render_component
from viewscript.engine.directives import apply_directives
from viewscript.engine.paths import resolve

__all__ = [
    "Composer",
    "RenderContext",
    "apply_directives",
    "bind_attributes",
    "render_component",
    "resolve",
]
