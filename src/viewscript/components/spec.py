"""Component schema definitions.

A component lives in its own directory:
  - template.html: the markup, with directives
  - settings.yaml: default data and imported sub-components

settings.yaml example:

    data:
      title: Hello
      items: [a, b, c]
    imports:
      card: components/card
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

TEMPLATE_FILE = "template.html"
SETTINGS_FILE = "settings.yaml"


class ComponentSettings(BaseModel):
    """Decoded settings.yaml of a component."""

    model_config = {"extra": "allow"}

    data: dict[str, Any] = Field(
        default_factory=dict, description="Default render context"
    )
    imports: dict[str, str] = Field(
        default_factory=dict, description="Import name -> component locator"
    )

    @field_validator("data", "imports", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        """An empty `data:` or `imports:` key decodes to None in YAML."""
        return {} if value is None else value

    @field_validator("imports", mode="before")
    @classmethod
    def stringify_locators(cls, value: Any) -> Any:
        """Locators are opaque strings; coerce scalars like `card: 2`."""
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


class ProviderOptions(BaseModel):
    """Options a composer passes along with every component lookup."""

    cache: bool = Field(default=False, description="Read through the provider's cache")


@dataclass(frozen=True)
class ComponentRecord:
    """A loaded component: settings plus raw template markup."""

    settings: ComponentSettings
    template: str

    @property
    def imports(self) -> dict[str, str]:
        return self.settings.imports

    @property
    def data(self) -> dict[str, Any]:
        return self.settings.data


def parse_settings(content: str) -> ComponentSettings:
    """Parse a settings document from a YAML string.

    Raises:
        yaml.YAMLError: If content is not valid YAML
        pydantic.ValidationError: If the document has the wrong shape
        ValueError: If the document is not a mapping
    """
    data = yaml.safe_load(content)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"settings must be a mapping, got {type(data).__name__}")
    return ComponentSettings(**data)
