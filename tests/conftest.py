"""Shared fixtures and helpers for viewscript tests."""

from __future__ import annotations

import pytest
from lxml import html as lxml_html

from viewscript.components import MemoryProvider, ProviderOptions
from viewscript.engine import RenderContext
from viewscript.engine.markup import body_of


def body_html(root) -> str:
    """Inner markup of a document tree's <body>."""
    body = body_of(root)
    return (body.text or "") + "".join(
        lxml_html.tostring(child, encoding="unicode") for child in body
    )


def body_markup(markup: str) -> str:
    """Inner markup of the <body> of a rendered document string."""
    return body_html(lxml_html.document_fromstring(markup))


@pytest.fixture
def provider() -> MemoryProvider:
    return MemoryProvider()


@pytest.fixture
def context(provider: MemoryProvider) -> RenderContext:
    return RenderContext(provider=provider, options=ProviderOptions(cache=False))
