"""Tests for component providers, settings and the component cache."""

import pytest

from viewscript.components import (
    ComponentCache,
    ComponentRecord,
    ComponentSettings,
    FileSystemProvider,
    MemoryProvider,
    ProviderOptions,
)
from viewscript.components.spec import parse_settings
from viewscript.engine import RenderContext, render_component
from viewscript.exceptions import ComponentNotFoundError, InvalidSettingsError

from conftest import body_markup


def write_component(base, locator, template, settings=""):
    component_dir = base / locator
    component_dir.mkdir(parents=True)
    (component_dir / "template.html").write_text(template)
    (component_dir / "settings.yaml").write_text(settings)
    return component_dir


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    def test_parse_full_settings(self):
        settings = parse_settings(
            """
data:
  title: Hello
  items: [a, b]
imports:
  Card: components/card
"""
        )
        assert settings.data == {"title": "Hello", "items": ["a", "b"]}
        assert settings.imports == {"Card": "components/card"}

    def test_empty_document_gives_empty_settings(self):
        settings = parse_settings("")
        assert settings.data == {}
        assert settings.imports == {}

    def test_empty_sections_are_empty_mappings(self):
        settings = parse_settings("data:\nimports:\n")
        assert settings.data == {}
        assert settings.imports == {}

    def test_import_locators_are_strings(self):
        settings = parse_settings("imports:\n  card: 2\n")
        assert settings.imports == {"card": "2"}

    def test_unknown_keys_are_allowed(self):
        settings = parse_settings("styles: tailwind\n")
        assert settings.data == {}

    def test_non_mapping_document_is_rejected(self):
        with pytest.raises(ValueError):
            parse_settings("- a\n- b\n")


# =============================================================================
# FileSystemProvider
# =============================================================================


@pytest.mark.asyncio
async def test_filesystem_provider_loads_component(tmp_path):
    write_component(tmp_path, "components/hello", "<h1>hi</h1>", "data:\n  name: Ann\n")
    provider = FileSystemProvider(tmp_path)

    record = await provider.get_component("components/hello")

    assert record.template == "<h1>hi</h1>"
    assert record.data == {"name": "Ann"}
    assert record.imports == {}


@pytest.mark.asyncio
async def test_filesystem_provider_missing_template(tmp_path):
    component_dir = tmp_path / "broken"
    component_dir.mkdir()
    (component_dir / "settings.yaml").write_text("data: {}\n")

    with pytest.raises(ComponentNotFoundError) as exc_info:
        await FileSystemProvider(tmp_path).get_component("broken")

    assert exc_info.value.locator == "broken"
    assert exc_info.value.path.endswith("template.html")


@pytest.mark.asyncio
async def test_filesystem_provider_missing_directory(tmp_path):
    with pytest.raises(ComponentNotFoundError):
        await FileSystemProvider(tmp_path).get_component("nowhere")


@pytest.mark.asyncio
async def test_locator_naming_a_file_is_not_found(tmp_path):
    (tmp_path / "page.html").write_text("<p></p>")

    with pytest.raises(ComponentNotFoundError) as exc_info:
        await FileSystemProvider(tmp_path).get_component("page.html")

    assert exc_info.value.locator == "page.html"


@pytest.mark.asyncio
async def test_template_path_that_is_a_directory_is_not_found(tmp_path):
    component_dir = tmp_path / "odd"
    (component_dir / "template.html").mkdir(parents=True)
    (component_dir / "settings.yaml").write_text("")

    with pytest.raises(ComponentNotFoundError):
        await FileSystemProvider(tmp_path).get_component("odd")


@pytest.mark.asyncio
async def test_non_utf8_template_is_reported(tmp_path):
    component_dir = write_component(tmp_path, "latin", "")
    (component_dir / "template.html").write_bytes(b"<p>caf\xe9</p>")

    with pytest.raises(ComponentNotFoundError) as exc_info:
        await FileSystemProvider(tmp_path).get_component("latin")

    assert "UTF-8" in str(exc_info.value)


@pytest.mark.asyncio
async def test_filesystem_provider_malformed_settings(tmp_path):
    write_component(tmp_path, "bad", "<i></i>", "data: [unclosed\n")

    with pytest.raises(InvalidSettingsError):
        await FileSystemProvider(tmp_path).get_component("bad")


@pytest.mark.asyncio
async def test_filesystem_provider_invalid_settings_shape(tmp_path):
    write_component(tmp_path, "bad", "<i></i>", "data: 3\n")

    with pytest.raises(InvalidSettingsError):
        await FileSystemProvider(tmp_path).get_component("bad")


@pytest.mark.asyncio
async def test_imports_resolve_against_base_dir(tmp_path):
    write_component(
        tmp_path,
        "pages/home",
        '<main><Card :title="title"></Card></main>',
        "data:\n  title: Home\nimports:\n  Card: components/card\n",
    )
    write_component(tmp_path, "components/card", '<h2><slot name="title"></slot></h2>')

    context = RenderContext(provider=FileSystemProvider(tmp_path))
    out = await render_component("pages/home", {}, context)

    assert body_markup(out) == "<main><h2>Home</h2></main>"


@pytest.mark.asyncio
async def test_filesystem_provider_reads_through_cache(tmp_path):
    write_component(tmp_path, "c", "<i>one</i>")
    cache = ComponentCache()
    provider = FileSystemProvider(tmp_path, cache=cache)
    options = ProviderOptions(cache=True)

    first = await provider.get_component("c", options)
    (tmp_path / "c" / "template.html").write_text("<i>two</i>")
    second = await provider.get_component("c", options)
    uncached = await provider.get_component("c")

    assert first.template == second.template == "<i>one</i>"
    assert uncached.template == "<i>two</i>"


# =============================================================================
# MemoryProvider
# =============================================================================


@pytest.mark.asyncio
async def test_memory_provider_accepts_yaml_settings():
    provider = MemoryProvider({"c": ("<i></i>", "imports:\n  x: y\n")})

    record = await provider.get_component("c")

    assert record.imports == {"x": "y"}


@pytest.mark.asyncio
async def test_memory_provider_rejects_invalid_settings():
    provider = MemoryProvider({"c": ("<i></i>", {"imports": ["not", "a", "mapping"]})})

    with pytest.raises(InvalidSettingsError):
        await provider.get_component("c")


# =============================================================================
# ComponentCache
# =============================================================================


def _record(template="<i></i>"):
    return ComponentRecord(settings=ComponentSettings(), template=template)


class TestComponentCache:
    def test_get_miss_returns_none(self):
        assert ComponentCache().get("x") is None

    def test_set_then_get(self):
        cache = ComponentCache()
        record = _record()
        cache.set("x", record)
        assert cache.get("x") is record
        assert "x" in cache
        assert len(cache) == 1

    def test_clear(self):
        cache = ComponentCache()
        cache.set("x", _record())
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_get_or_load_loads_once(self):
        cache = ComponentCache()
        calls = []

        async def loader(locator):
            calls.append(locator)
            return _record(locator)

        first = await cache.get_or_load("a", loader)
        second = await cache.get_or_load("a", loader)

        assert first is second
        assert calls == ["a"]

    @pytest.mark.asyncio
    async def test_concurrent_population_is_tolerated(self):
        import asyncio

        cache = ComponentCache()
        calls = []

        async def loader(locator):
            calls.append(locator)
            await asyncio.sleep(0)
            return _record(locator)

        records = await asyncio.gather(
            cache.get_or_load("a", loader), cache.get_or_load("a", loader)
        )

        assert all(r.template == "a" for r in records)
        assert len(calls) == 2
        assert len(cache) == 1
