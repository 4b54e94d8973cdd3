"""Directive processing over a document tree.

Supported directives:
  - use-for="item in path.to.collection"  repeat the element per item
  - use-if="path" / use-if="!path"        keep or drop the element
  - <slot name="path">                    replace the slot by data
  - :attr="path"                          bind an attribute (see attributes.py)

Passes run in that fixed order. Each pass snapshots the nodes it will touch
before mutating anything, and skips nodes an earlier step of the same pass
has already taken out of the tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from copy import deepcopy
from typing import Any

from lxml.html import HtmlElement

from viewscript.engine.attributes import bind_attributes
from viewscript.engine.literals import to_text
from viewscript.engine.markup import (
    SLOT_TAG,
    insert_before,
    is_attached,
    query,
    remove,
    replace_with,
)
from viewscript.engine.paths import derive, resolve
from viewscript.exceptions import BindingError

log = logging.getLogger(__name__)

FOR_ATTR = "use-for"
IF_ATTR = "use-if"
FOR_SEPARATOR = " in "
NEGATION = "!"


def apply_directives(
    node: HtmlElement, imports: Mapping[str, str], context: Mapping[str, Any]
) -> None:
    """Apply all directives to the subtree rooted at node, in place.

    Args:
        node: Root of the subtree to process
        imports: Import table of the component being rendered
        context: Data the directive paths resolve against

    Raises:
        BindingError: If a use-for collection is missing or not iterable
    """
    _apply_repetitions(node, imports, context)
    _apply_conditionals(node, context)
    _apply_slots(node, context)
    bind_attributes(node, imports, context)


# =============================================================================
# Repetition
# =============================================================================


def parse_for(expression: str) -> tuple[str, str]:
    """Split 'item in path.to.collection' into ('item', 'path.to.collection')."""
    item_name, sep, collection_path = expression.partition(FOR_SEPARATOR)
    item_name = item_name.strip()
    collection_path = collection_path.strip()
    if not sep or not item_name or not collection_path:
        raise BindingError(expression, "expected 'item in path.to.collection'")
    return item_name, collection_path


def _iterable(expression: str, value: Any) -> Iterable[Any]:
    if value is None:
        raise BindingError(expression, "collection is not defined")
    if isinstance(value, Mapping) or not isinstance(value, Iterable):
        raise BindingError(
            expression, f"collection is a {type(value).__name__}, not iterable"
        )
    return value


def _apply_repetitions(
    root: HtmlElement, imports: Mapping[str, str], context: Mapping[str, Any]
) -> None:
    for template in query(root, f".//*[@{FOR_ATTR}]"):
        # Nested repeaters inside an already expanded template were handled
        # by the recursive call on each clone.
        if not is_attached(template, root):
            continue

        expression = template.get(FOR_ATTR)
        item_name, collection_path = parse_for(expression)
        collection = _iterable(expression, resolve(context, collection_path))

        del template.attrib[FOR_ATTR]

        count = 0
        for item in collection:
            item_context = derive(context, item_name, item)
            clone = deepcopy(template)

            if not _keep_conditional(clone, item_context):
                continue

            apply_directives(clone, imports, item_context)
            insert_before(template, clone)
            count += 1

        log.debug("Expanded use-for=%r into %d element(s)", expression, count)
        remove(template)


# =============================================================================
# Conditionals
# =============================================================================


def is_truthy(expression: str, context: Mapping[str, Any]) -> bool:
    """Evaluate a use-if expression ('path' or '!path') against context."""
    inverted = expression.startswith(NEGATION)
    path = expression[len(NEGATION):] if inverted else expression
    value = bool(resolve(context, path.strip()))
    return not value if inverted else value


def _keep_conditional(node: HtmlElement, context: Mapping[str, Any]) -> bool:
    """Evaluate node's own use-if; strip it when kept. Elements without one are kept."""
    expression = node.get(IF_ATTR)
    if expression is None:
        return True
    if not is_truthy(expression, context):
        return False
    del node.attrib[IF_ATTR]
    return True


def _apply_conditionals(root: HtmlElement, context: Mapping[str, Any]) -> None:
    for optional in query(root, f".//*[@{IF_ATTR}]"):
        if not is_attached(optional, root):
            continue
        if not _keep_conditional(optional, context):
            remove(optional)


# =============================================================================
# Slots
# =============================================================================


def _apply_slots(root: HtmlElement, context: Mapping[str, Any]) -> None:
    for slot in query(root, f".//{SLOT_TAG}"):
        if not is_attached(slot, root):
            continue

        name = slot.get("name")
        if not name:
            continue

        value = resolve(context, name)
        if value is not None:
            replace_with(slot, [to_text(value)])
