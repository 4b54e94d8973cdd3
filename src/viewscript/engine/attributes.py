"""Attribute binding - `:name="path"` -> `name="<resolved value>"`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lxml.html import HtmlElement

from viewscript.engine.literals import encode_literal, to_text
from viewscript.engine.markup import NodeKind, classify, elements
from viewscript.engine.paths import resolve

BIND_PREFIX = ":"


def bind_attributes(
    node: HtmlElement, imports: Mapping[str, str], context: Mapping[str, Any]
) -> None:
    """Resolve bound attributes on node and all of its descendants (pre-order).

    On a component reference the value is written as a structured literal so
    the child component receives typed props; everywhere else it is written
    as text. Absent values write nothing. The `:` attribute is always removed.
    """
    is_reference = classify(node, imports) is NodeKind.IMPORT

    for name, path in list(node.attrib.items()):
        if not name.startswith(BIND_PREFIX):
            continue

        value = resolve(context, path)
        if value is not None:
            target = name[len(BIND_PREFIX):]
            node.set(target, encode_literal(value) if is_reference else to_text(value))

        del node.attrib[name]

    for child in elements(node):
        bind_attributes(child, imports, context)
