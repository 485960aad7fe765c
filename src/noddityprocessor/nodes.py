# Document tree used as input and output of link and template processing
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org
import enum
from collections.abc import Iterable, Iterator
from typing import Any, Literal, Optional, Union, overload


@enum.unique
class NodeKind(enum.Flag):
    """Node types in the document tree."""

    # Root node of the tree.  This represents the parsed document or
    # fragment.  Content is in children.
    ROOT = enum.auto()

    # An element such as <em> or <a>.  The tag name is in ``tag``, its
    # attributes in ``properties`` and its content in children.
    ELEMENT = enum.auto()

    # Literal text.  The text is in ``value``.  No children.
    TEXT = enum.auto()

    # A comment.  The comment text is in ``value``.  Never inspected.
    COMMENT = enum.auto()

    # A document type declaration.  Never inspected.
    DOCTYPE = enum.auto()

    # Any other node type (e.g. hast "raw").  The type name is in
    # ``node_type`` and its fields are kept in ``extra``.  Processed like
    # a container if it has children, otherwise passed through untouched.
    OTHER = enum.auto()


# Node kinds that may hold an ordered list of children.
CONTAINER_KIND_FLAGS = NodeKind.ROOT | NodeKind.ELEMENT | NodeKind.OTHER

# Mapping between node kinds and the "type" field of the dict form.
KIND_TO_TYPE: dict[NodeKind, str] = {
    NodeKind.ROOT: "root",
    NodeKind.ELEMENT: "element",
    NodeKind.TEXT: "text",
    NodeKind.COMMENT: "comment",
    NodeKind.DOCTYPE: "doctype",
}
TYPE_TO_KIND: dict[str, NodeKind] = {v: k for k, v in KIND_TO_TYPE.items()}

NodePropertiesDict = dict[str, Any]
NodeChildrenList = list["Node"]


class Node:
    """Node in the document tree."""

    __slots__ = (
        "kind",
        "tag",
        "value",
        "properties",
        "children",
        "data",
        "extra",
    )

    def __init__(self, kind: NodeKind) -> None:
        assert isinstance(kind, NodeKind)
        self.kind = kind
        self.tag: str = ""
        self.value: str = ""
        self.properties: NodePropertiesDict = {}
        self.children: NodeChildrenList = []
        self.data: Optional[dict[str, Any]] = None  # carried through untouched
        # Fields of the dict form not otherwise represented (e.g. position)
        self.extra: dict[str, Any] = {}

    def __str__(self) -> str:
        if self.kind in (NodeKind.TEXT | NodeKind.COMMENT):
            return "<{} {!r}>".format(self.kind.name, self.value)
        return "<{}({}){} {}>".format(
            self.kind.name,
            self.tag,
            self.properties,
            ", ".join(map(repr, self.children)),
        )

    def __repr__(self) -> str:
        return self.__str__()

    @property
    def is_text(self) -> bool:
        return self.kind == NodeKind.TEXT

    @property
    def has_children(self) -> bool:
        return self.kind in CONTAINER_KIND_FLAGS and len(self.children) > 0

    @overload
    def find_child(
        self, target_kinds: NodeKind, with_index: Literal[True]
    ) -> Iterator[tuple[int, "Node"]]: ...

    @overload
    def find_child(
        self, target_kinds: NodeKind, with_index: Literal[False] = ...
    ) -> Iterator["Node"]: ...

    def find_child(
        self,
        target_kinds: NodeKind,
        with_index: bool = False,
    ) -> Iterator[Union["Node", tuple[int, "Node"]]]:
        """
        Find direct child nodes that match the target node type, also return
        the node index if `with_index` is True.

        `target_kinds` could be a single NodeKind enum member or multiple
        NodeKind members combined with the "|"(OR) operator.
        """
        for index, child in enumerate(self.children):
            if child.kind in target_kinds:
                if with_index:
                    yield index, child
                else:
                    yield child

    def find_child_recursively(
        self, target_kinds: NodeKind
    ) -> Iterator["Node"]:
        # Similar to `find_child()` but also search nested nodes.
        for child in self.children:
            if child.kind in target_kinds:
                yield child
            yield from child.find_child_recursively(target_kinds)

    def find_element(self, tag: str) -> Iterator["Node"]:
        # Find elements with the given tag anywhere below this node.
        for node in self.find_child_recursively(NodeKind.ELEMENT):
            if node.tag == tag:
                yield node

    def to_dict(self) -> dict[str, Any]:
        """Converts the (sub-)tree to the hast-shaped dict form, e.g.
        ``{"type": "element", "tagName": "em", "properties": {},
        "children": [{"type": "text", "value": "x"}]}``."""
        ret: dict[str, Any] = dict(self.extra)
        ret["type"] = self.type_name
        if self.kind == NodeKind.ELEMENT:
            ret["tagName"] = self.tag
            ret["properties"] = dict(self.properties)
        if self.kind in (NodeKind.TEXT | NodeKind.COMMENT):
            ret["value"] = self.value
        if self.has_child_list:
            ret["children"] = [child.to_dict() for child in self.children]
        if self.data is not None:
            ret["data"] = self.data
        return ret

    @property
    def type_name(self) -> str:
        # Value of the "type" field in the dict form
        return KIND_TO_TYPE[self.kind]

    @property
    def has_child_list(self) -> bool:
        return self.kind in CONTAINER_KIND_FLAGS


class TextNode(Node):
    def __init__(self, value: str) -> None:
        super().__init__(NodeKind.TEXT)
        assert isinstance(value, str)
        self.value = value


class ElementNode(Node):
    def __init__(
        self,
        tag: str,
        properties: Optional[NodePropertiesDict] = None,
        children: Optional[Iterable[Node]] = None,
    ) -> None:
        super().__init__(NodeKind.ELEMENT)
        self.tag = tag
        if properties:
            self.properties = dict(properties)
        if children is not None:
            self.children = list(children)


class RootNode(Node):
    def __init__(self, children: Optional[Iterable[Node]] = None) -> None:
        super().__init__(NodeKind.ROOT)
        if children is not None:
            self.children = list(children)


class CommentNode(Node):
    def __init__(self, value: str) -> None:
        super().__init__(NodeKind.COMMENT)
        self.value = value


class DoctypeNode(Node):
    def __init__(self) -> None:
        super().__init__(NodeKind.DOCTYPE)


class OtherNode(Node):
    """Node of a type this package does not interpret, e.g. hast ``raw``.
    Passing ``children=None`` means the node has no child list, as opposed
    to an empty one."""

    __slots__ = ("node_type", "_has_child_list")

    def __init__(
        self,
        node_type: str,
        extra: Optional[dict[str, Any]] = None,
        children: Optional[Iterable[Node]] = None,
    ) -> None:
        super().__init__(NodeKind.OTHER)
        assert isinstance(node_type, str)
        self.node_type = node_type
        if extra:
            self.extra = dict(extra)
        self._has_child_list = children is not None
        if children is not None:
            self.children = list(children)

    @property
    def type_name(self) -> str:
        return self.node_type

    @property
    def has_child_list(self) -> bool:
        return self._has_child_list


# Keys of the dict form that map to Node attributes, per kind
_KNOWN_KEYS: dict[NodeKind, frozenset[str]] = {
    NodeKind.ROOT: frozenset(["type", "children", "data"]),
    NodeKind.ELEMENT: frozenset(
        ["type", "tagName", "properties", "children", "data"]
    ),
    NodeKind.TEXT: frozenset(["type", "value", "data"]),
    NodeKind.COMMENT: frozenset(["type", "value", "data"]),
    NodeKind.DOCTYPE: frozenset(["type", "data"]),
    NodeKind.OTHER: frozenset(["type", "children", "data"]),
}


def node_from_dict(d: dict[str, Any]) -> Node:
    """Builds a tree from its hast-shaped dict form.  Node types other
    than root, element, text, comment and doctype become OtherNode.  Keys
    without a matching attribute (e.g. ``position``) are kept in
    ``extra`` and ``data`` is kept as-is, so ``to_dict()`` gives back an
    equal dict."""
    assert isinstance(d, dict)
    node_type = d.get("type")
    if not isinstance(node_type, str):
        raise ValueError("node has no type: {!r}".format(d))
    kind = TYPE_TO_KIND.get(node_type, NodeKind.OTHER)
    node: Node
    if kind == NodeKind.TEXT:
        node = TextNode(d.get("value", ""))
    elif kind == NodeKind.COMMENT:
        node = CommentNode(d.get("value", ""))
    elif kind == NodeKind.DOCTYPE:
        node = DoctypeNode()
    elif kind == NodeKind.ELEMENT:
        node = ElementNode(d.get("tagName", ""), d.get("properties"))
    elif kind == NodeKind.ROOT:
        node = RootNode()
    else:
        node = OtherNode(node_type, children=[] if "children" in d else None)
    if kind in CONTAINER_KIND_FLAGS:
        node.children = [node_from_dict(x) for x in d.get("children", [])]
    if "data" in d:
        node.data = d["data"]
    node.extra = {k: v for k, v in d.items() if k not in _KNOWN_KEYS[kind]}
    return node


def merge_text_nodes(nodes: Iterable[Node]) -> NodeChildrenList:
    """Merges runs of consecutive text nodes into one text node.  The input
    nodes are not modified; a new TextNode is created for each merged run."""
    merged: NodeChildrenList = []
    run: list[Node] = []

    def flush() -> None:
        if len(run) == 1:
            merged.append(run[0])
        elif run:
            merged.append(TextNode("".join(x.value for x in run)))
        run.clear()

    for node in nodes:
        if node.is_text:
            run.append(node)
        else:
            flush()
            merged.append(node)
    flush()
    return merged


@overload
def print_tree(tree: Node, indent: int, ret_value: Literal[True]) -> str: ...


@overload
def print_tree(
    tree: Node,
    indent: int = ...,
    ret_value: Literal[False] = ...,
) -> None: ...


def print_tree(tree: Node, indent: int = 0, ret_value=False) -> Optional[str]:
    """Prints the tree for debugging purposes."""
    assert isinstance(tree, Node)
    assert isinstance(indent, int)
    parts = []
    if tree.kind in (NodeKind.TEXT | NodeKind.COMMENT):
        parts.append(
            "{}{} {!r}".format(" " * indent, tree.kind.name, tree.value)
        )
    else:
        name = tree.type_name if tree.kind == NodeKind.OTHER else tree.tag
        parts.append("{}{} {}".format(" " * indent, tree.kind.name, name))
        for k, v in tree.properties.items():
            parts.append("{}    {}={}".format(" " * indent, k, v))
        for child in tree.children:
            parts.append(print_tree(child, indent + 2, ret_value=True))

    if ret_value:
        return "\n".join(parts)
    else:
        print("\n".join(parts))
        return None
