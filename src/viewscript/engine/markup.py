"""Markup <-> tree conversion and tree editing helpers.

The document tree is an lxml.html element tree. lxml keeps text inside the
element tree (``.text`` before the first child, ``.tail`` after each
element), so moving and replacing nodes with DOM semantics needs a little
care: a moved element must leave its trailing text behind, and a removed
element must not take the text that follows it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Union

from lxml import html as lxml_html
from lxml.html import HtmlElement

Node = Union[HtmlElement, str]

SLOT_TAG = "slot"

EMPTY_DOCUMENT = "<html><body></body></html>"

_DOCTYPE = re.compile(r"^\s*(<!doctype[^>]*>)", re.IGNORECASE)
_DOCUMENT_ROOT = re.compile(r"<(html|body)[\s>]", re.IGNORECASE)


class NodeKind(str, Enum):
    """What a node means to the composer."""

    ELEMENT = "element"
    IMPORT = "import"
    SLOT = "slot"


# =============================================================================
# Parse / serialize
# =============================================================================


def parse_document(markup: str) -> HtmlElement:
    """Parse markup into a document tree rooted at <html>.

    Fragments are wrapped in <html><body> first so that leading text stays
    body text instead of being pushed into a generated paragraph.
    """
    if not markup.strip():
        markup = EMPTY_DOCUMENT
    elif not _DOCUMENT_ROOT.search(markup):
        markup = f"<html><body>{markup}</body></html>"
    return lxml_html.document_fromstring(markup)


def serialize(root: HtmlElement, doctype: str | None = None) -> str:
    """Serialize a document tree back to markup."""
    return lxml_html.tostring(root, encoding="unicode", doctype=doctype)


def extract_doctype(markup: str) -> str | None:
    """Return the doctype declaration a template starts with, if any."""
    match = _DOCTYPE.match(markup)
    return match.group(1) if match else None


def body_of(root: HtmlElement) -> HtmlElement:
    """Return the document's <body>, creating an empty one if needed."""
    body = root.find("body")
    if body is None:
        body = lxml_html.Element("body")
        root.append(body)
    return body


# =============================================================================
# Navigation
# =============================================================================


def is_element(node: object) -> bool:
    """True for element nodes (comments and processing instructions excluded)."""
    return isinstance(node, HtmlElement) and isinstance(node.tag, str)


def elements(node: HtmlElement) -> list[HtmlElement]:
    """Snapshot of the element children of node."""
    return [child for child in node if is_element(child)]


def iter_elements(node: HtmlElement) -> Iterator[HtmlElement]:
    """Pre-order walk over node and all its element descendants."""
    yield node
    for child in elements(node):
        yield from iter_elements(child)


def query(node: HtmlElement, xpath: str) -> list[HtmlElement]:
    """Run an xpath query and return the matched elements as a list."""
    return [match for match in node.xpath(xpath) if is_element(match)]


def is_attached(node: HtmlElement, root: HtmlElement) -> bool:
    """True if node is root or still hangs somewhere below root."""
    if node is root:
        return True
    return any(ancestor is root for ancestor in node.iterancestors())


# =============================================================================
# Classification
# =============================================================================


def match_import(tag: str, imports: Mapping[str, str]) -> str | None:
    """Return the import key matching tag (case-insensitive), if any."""
    lowered = tag.lower()
    for key in imports:
        if key.lower() == lowered:
            return key
    return None


def classify(node: HtmlElement, imports: Mapping[str, str]) -> NodeKind:
    """Classify an element as a plain element, an import reference or a slot."""
    if match_import(node.tag, imports) is not None:
        return NodeKind.IMPORT
    if node.tag == SLOT_TAG:
        return NodeKind.SLOT
    return NodeKind.ELEMENT


# =============================================================================
# Editing
# =============================================================================


def _append_text(parent: HtmlElement, previous: HtmlElement | None, text: str | None) -> None:
    if not text:
        return
    if previous is None:
        parent.text = (parent.text or "") + text
    else:
        previous.tail = (previous.tail or "") + text


def detach(node: HtmlElement) -> HtmlElement:
    """Take node out of its parent, leaving its trailing text in place."""
    if node.getparent() is not None:
        node.drop_tree()
    node.tail = None
    return node


def remove(node: HtmlElement) -> None:
    """Remove node and its subtree; the text that followed it is kept."""
    detach(node)


def replace_with(node: HtmlElement, items: Iterable[Node]) -> None:
    """Replace node by a sequence of elements and text, like DOM replaceWith().

    Elements that are still attached elsewhere are moved without their
    trailing text. An empty sequence simply removes node.
    """
    parent = node.getparent()
    if parent is None:
        raise ValueError(f"Cannot replace detached <{node.tag}>")

    tail = node.tail
    node.tail = None
    index = parent.index(node)
    parent.remove(node)

    previous = parent[index - 1] if index > 0 else None
    for item in items:
        if isinstance(item, str):
            _append_text(parent, previous, item)
            continue
        detach(item)
        parent.insert(index, item)
        index += 1
        previous = item

    _append_text(parent, previous, tail)


def insert_before(node: HtmlElement, new: HtmlElement) -> None:
    """Insert new as the sibling immediately preceding node."""
    new.tail = None
    node.addprevious(new)


def take_child_nodes(node: HtmlElement) -> list[Node]:
    """Remove and return all child nodes of node, text included, in order."""
    nodes: list[Node] = []
    if node.text:
        nodes.append(node.text)
    node.text = None

    for child in list(node):
        tail = child.tail
        child.tail = None
        node.remove(child)
        nodes.append(child)
        if tail:
            nodes.append(tail)

    return nodes
