# Converting document trees back to markup, HTML or plain text
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import html
from typing import Callable, Optional, Union

from .nodes import Node, NodeChildrenList, NodeKind

NodeHandlerFnCallable = Callable[
    [Node], Union[None, str, Node, NodeChildrenList]
]

# Elements that never have an end tag
VOID_HTML_TAGS: frozenset[str] = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    ]
)

# Property names that differ from the attribute name
PROPERTY_TO_ATTR: dict[str, str] = {
    "className": "class",
    "htmlFor": "for",
    "httpEquiv": "http-equiv",
    "acceptCharset": "accept-charset",
}


def to_attrs(node: Node) -> str:
    parts: list[str] = []
    for k, v in node.properties.items():
        k = PROPERTY_TO_ATTR.get(k, k)
        if v is None or v is False:
            continue
        if v is True:
            parts.append(k)
            continue
        if isinstance(v, (list, tuple)):
            v = " ".join(map(str, v))
        parts.append('{}="{}"'.format(k, html.escape(str(v), quote=True)))
    return " ".join(parts)


def _render(
    node: Union[Node, NodeChildrenList],
    escape: bool,
    node_handler_fn: Optional[NodeHandlerFnCallable],
) -> str:
    assert node_handler_fn is None or callable(node_handler_fn)

    def recurse(node: Union[Node, NodeChildrenList, str]) -> str:
        if isinstance(node, str):
            return html.escape(node, quote=False) if escape else node
        if isinstance(node, (list, tuple)):
            return "".join(map(recurse, node))
        if not isinstance(node, Node):
            raise RuntimeError("invalid Node: {}".format(node))

        if node_handler_fn is not None:
            ret = node_handler_fn(node)
            if ret is not None and ret is not node:
                return recurse(ret)

        kind = node.kind
        parts: list[str] = []
        if kind == NodeKind.TEXT:
            parts.append(recurse(node.value))
        elif kind == NodeKind.ROOT:
            parts.append(recurse(node.children))
        elif kind == NodeKind.ELEMENT:
            parts.append("<{}".format(node.tag))
            if node.properties:
                attrs = to_attrs(node)
                if attrs:
                    parts.append(" ")
                    parts.append(attrs)
            parts.append(">")
            if node.tag not in VOID_HTML_TAGS or node.children:
                parts.append(recurse(node.children))
                parts.append("</{}>".format(node.tag))
        elif kind == NodeKind.COMMENT:
            parts.append("<!--{}-->".format(node.value))
        elif kind == NodeKind.DOCTYPE:
            parts.append("<!doctype html>")
        elif kind == NodeKind.OTHER:
            # Raw markup is output as-is
            value = node.extra.get("value")
            if isinstance(value, str):
                parts.append(value)
            parts.append(recurse(node.children))
        else:
            raise RuntimeError("unimplemented {}".format(kind))
        return "".join(parts)

    return recurse(node)


def to_markup(
    node: Union[Node, NodeChildrenList],
    node_handler_fn: Optional[NodeHandlerFnCallable] = None,
) -> str:
    """Converts a tree (or subtree) back to markup without escaping text,
    so that unprocessed link and template syntax reads as it was written.
    If ``node_handler_fn`` is supplied, it will be called for each Node
    being rendered, and if it returns non-None, the returned value will be
    rendered instead of the node.  The returned value may be a list,
    string, or a Node."""
    return _render(node, False, node_handler_fn)


def to_html(
    node: Union[Node, NodeChildrenList],
    node_handler_fn: Optional[NodeHandlerFnCallable] = None,
) -> str:
    """Converts the tree at ``node`` to HTML, escaping text."""
    return _render(node, True, node_handler_fn)


def to_text(node: Union[Node, NodeChildrenList]) -> str:
    """Returns the concatenated text content of the tree at ``node``."""
    if isinstance(node, (list, tuple)):
        return "".join(map(to_text, node))
    if node.kind == NodeKind.TEXT:
        return node.value
    return "".join(map(to_text, node.children))
