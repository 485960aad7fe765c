from .common import DEFAULT_EXCLUDED_TAGS
from .core import Ntp, process_tree, process_tree_sync
from .links import LinkReference
from .nodes import (
    CommentNode,
    DoctypeNode,
    ElementNode,
    Node,
    NodeKind,
    OtherNode,
    RootNode,
    TextNode,
    node_from_dict,
)
from .templates import TemplateCall, TemplateParameter

__all__ = (
    "Ntp",
    "process_tree",
    "process_tree_sync",
    "Node",
    "NodeKind",
    "TextNode",
    "ElementNode",
    "RootNode",
    "CommentNode",
    "DoctypeNode",
    "OtherNode",
    "node_from_dict",
    "LinkReference",
    "TemplateCall",
    "TemplateParameter",
    "DEFAULT_EXCLUDED_TAGS",
)
