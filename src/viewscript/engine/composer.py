"""Composer - renders a component and expands the components it imports.

Like a server-side ReactDOM.renderToString(): one component in, one static
document out.

The algorithm:
1. Load the component (settings + template) through the provider
2. Parse a private copy of the template
3. Apply directives with settings.data overlaid by the caller's data
4. Depth-first, children before parents, replace every element whose tag
   matches an import by the rendered child component, projecting the
   element's content into the child's slots
5. Serialize the document
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from lxml.html import HtmlElement

from viewscript.components.provider import ComponentProvider
from viewscript.components.spec import ProviderOptions
from viewscript.engine.directives import apply_directives
from viewscript.engine.literals import decode_literal
from viewscript.engine.markup import (
    SLOT_TAG,
    Node,
    NodeKind,
    body_of,
    classify,
    elements,
    extract_doctype,
    is_attached,
    is_element,
    match_import,
    parse_document,
    query,
    replace_with,
    serialize,
    take_child_nodes,
)
from viewscript.exceptions import PropsDecodeError

log = logging.getLogger(__name__)

SLOT_FILL_ATTR = "slot"


@dataclass
class RenderContext:
    """Everything a render needs besides the locator and its data."""

    provider: ComponentProvider
    options: ProviderOptions = field(default_factory=ProviderOptions)


async def render_component(
    locator: str,
    custom_data: Mapping[str, Any] | None,
    context: RenderContext,
) -> str:
    """Render the component at locator to a markup string.

    Args:
        locator: Where the provider finds the component
        custom_data: Data overriding the component's default data
        context: Provider and lookup options

    Returns:
        The fully resolved document

    Raises:
        ViewscriptError: On the first load, binding or decode error
    """
    return await Composer(context).render(locator, custom_data)


class Composer:
    """Renders components against one provider."""

    def __init__(self, context: RenderContext):
        self.context = context

    async def render(
        self, locator: str, custom_data: Mapping[str, Any] | None = None
    ) -> str:
        root, doctype = await self.render_tree(locator, custom_data)
        return serialize(root, doctype=doctype)

    async def render_tree(
        self, locator: str, custom_data: Mapping[str, Any] | None = None
    ) -> tuple[HtmlElement, str | None]:
        """Render a component to a document tree (plus its doctype, if any)."""
        record = await self.context.provider.get_component(locator, self.context.options)
        log.debug("Rendering component %s", locator)

        imports = record.imports
        data = {**record.data, **(custom_data or {})}

        root = parse_document(record.template)
        apply_directives(root, imports, data)
        await self.interpolate(root, imports)

        return root, extract_doctype(record.template)

    # =========================================================================
    # Interpolation
    # =========================================================================

    async def interpolate(self, parent: HtmlElement, imports: Mapping[str, str]) -> None:
        """Expand component references below parent, deepest first.

        Siblings are independent, so they are expanded concurrently; each
        reference is spliced only once its own subtree is fully expanded.
        """
        children = elements(parent)
        if not children:
            return
        await asyncio.gather(*(self._interpolate_node(child, imports) for child in children))

    async def _interpolate_node(self, node: HtmlElement, imports: Mapping[str, str]) -> None:
        await self.interpolate(node, imports)

        if classify(node, imports) is not NodeKind.IMPORT:
            return

        key = match_import(node.tag, imports)
        fill_name = node.get(SLOT_FILL_ATTR)
        props = decode_props(node)
        child_root, _ = await self.render_tree(imports[key], props)
        child_body = body_of(child_root)

        project_slots(child_body, node)
        await self.interpolate(child_body, imports)

        rendered = take_child_nodes(child_body)
        if fill_name is not None:
            carry_slot_fill(rendered, fill_name)
        replace_with(node, rendered)


def decode_props(reference: HtmlElement) -> dict[str, Any]:
    """Decode the attributes of a component reference as structured literals.

    The `slot` attribute routes the reference itself into an enclosing
    component and is not a prop.

    Raises:
        PropsDecodeError: If an attribute value is not a valid literal
    """
    props: dict[str, Any] = {}
    for name, value in reference.attrib.items():
        if name == SLOT_FILL_ATTR:
            continue
        try:
            props[name] = decode_literal(value)
        except ValueError as e:
            raise PropsDecodeError(reference.tag, name, value) from e
    return props


def carry_slot_fill(nodes: list[Node], fill_name: str) -> None:
    """Put a reference's `slot` attribute on the first element it rendered to."""
    for item in nodes:
        if is_element(item):
            item.set(SLOT_FILL_ATTR, fill_name)
            return
    log.debug("Slot fill %r rendered no element to carry it", fill_name)


def _has_content(node: HtmlElement) -> bool:
    return bool(elements(node)) or bool((node.text or "").strip())


def project_slots(target: HtmlElement, reference: HtmlElement) -> None:
    """Move the content of a component reference into the slots below target.

    Named slots take the reference's direct child element carrying a matching
    `slot` attribute. Unnamed slots then take everything left in the
    reference; only the first one gets it, since the content can only live
    in one place. A slot left without content of either kind falls back to
    its own children.
    """
    slots = query(target, f".//{SLOT_TAG}")
    named = [slot for slot in slots if slot.get("name") is not None]
    default = [slot for slot in slots if slot.get("name") is None]

    for slot in named:
        if not is_attached(slot, target):
            continue

        name = slot.get("name")
        fill = next(
            (child for child in elements(reference) if child.get(SLOT_FILL_ATTR) == name),
            None,
        )
        if fill is None:
            replace_with(slot, take_child_nodes(slot))
            continue

        del fill.attrib[SLOT_FILL_ATTR]
        replace_with(slot, [fill])

    for slot in default:
        if not is_attached(slot, target):
            continue
        if _has_content(reference):
            replace_with(slot, take_child_nodes(reference))
        else:
            replace_with(slot, take_child_nodes(slot))
