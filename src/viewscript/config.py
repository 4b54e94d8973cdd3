"""Configuration parsing for viewscript.yaml

Schema:
- base_dir: directory component locators are resolved against
  (relative paths are relative to the config file)
- cache: component cache settings
- data: extra data overlaid on every top-level render
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from viewscript.components import (
    ComponentCache,
    FileSystemProvider,
    ProviderOptions,
)
from viewscript.engine import RenderContext

CONFIG_FILE = "viewscript.yaml"


class CacheConfig(BaseModel):
    """Component cache settings."""

    enabled: bool = Field(default=False, description="Cache loaded components by locator")


class ViewscriptConfig(BaseModel):
    """Main viewscript.yaml configuration."""

    base_dir: Path = Field(default=Path("."), description="Component base directory")
    cache: CacheConfig = Field(default_factory=CacheConfig)
    data: dict[str, Any] = Field(
        default_factory=dict, description="Data overlaid on every top-level render"
    )

    def create_render_context(self, cache: ComponentCache | None = None) -> RenderContext:
        """Build a filesystem-backed render context from this config."""
        provider = FileSystemProvider(self.base_dir, cache=cache)
        return RenderContext(
            provider=provider,
            options=ProviderOptions(cache=self.cache.enabled),
        )


def find_config_file(start: Path | None = None) -> Path | None:
    """Find viewscript.yaml in the start directory or its parents."""
    cwd = start or Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / CONFIG_FILE
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path) -> ViewscriptConfig:
    """Load viewscript.yaml from path; base_dir is anchored at the file's directory."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    config = ViewscriptConfig(**data)
    if not config.base_dir.is_absolute():
        config.base_dir = (path.parent / config.base_dir).resolve()
    return config


def load_config_or_default(path: Path | None = None) -> ViewscriptConfig:
    """Load the given or discovered config, or return defaults when there is none."""
    config_path = path or find_config_file()
    if config_path is None:
        return ViewscriptConfig(base_dir=Path.cwd())
    return load_config(config_path)
