"""Viewscript Exceptions

Custom exceptions raised while loading and rendering components.
"""

from __future__ import annotations


class ViewscriptError(Exception):
    """Base exception for all viewscript errors."""

    pass


class ComponentNotFoundError(ViewscriptError):
    """Raised when a component's template or settings cannot be loaded."""

    def __init__(self, locator: str, path: str | None = None, reason: str | None = None):
        self.locator = locator
        self.path = path
        self.reason = reason or (f"missing {path}" if path else None)
        detail = f" ({self.reason})" if self.reason else ""
        super().__init__(f"Component not found: {locator}{detail}")


class InvalidSettingsError(ViewscriptError):
    """Raised when a settings document cannot be decoded or validated."""

    def __init__(self, locator: str, reason: str):
        self.locator = locator
        self.reason = reason
        super().__init__(f"Invalid settings for component {locator}: {reason}")


class BindingError(ViewscriptError):
    """Raised when a repetition directive cannot be bound to the data context."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot bind use-for=\"{expression}\": {reason}")


class PropsDecodeError(ViewscriptError):
    """Raised when a component reference carries an attribute that is not a structured literal."""

    def __init__(self, tag: str, attribute: str, value: str):
        self.tag = tag
        self.attribute = attribute
        self.value = value
        super().__init__(
            f"Cannot decode attribute '{attribute}' of <{tag}> as a structured literal: {value!r}"
        )
