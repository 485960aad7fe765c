# Definition of the processing context for link and template processing,
# and the recursive walk over the document tree.
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence, Set
from typing import Any, Optional, TypedDict, Union

from .common import DEFAULT_EXCLUDED_TAGS
from .links import LinkReference, resolve_links
from .logging_utils import logger
from .nodes import (
    Node,
    NodeChildrenList,
    NodeKind,
    merge_text_nodes,
    node_from_dict,
)
from .templates import TemplateCall, expand_templates, find_templates

# Resolvers may return the nodes directly or an awaitable of them.  Nodes
# can also be given in the dict form accepted by node_from_dict().
ResolverResult = Sequence[Union[Node, dict[str, Any]]]
LinkResolver = Callable[
    [LinkReference],
    Union[ResolverResult, Awaitable[ResolverResult]],
]
TemplateResolver = Callable[
    [TemplateCall],
    Union[ResolverResult, Awaitable[ResolverResult]],
]


class ErrorMessageData(TypedDict):
    msg: str
    trace: str
    called_from: str
    path: tuple[str, ...]


class CollatedErrorReturnData(TypedDict):
    errors: list[ErrorMessageData]
    warnings: list[ErrorMessageData]
    debugs: list[ErrorMessageData]


class Ntp:
    """Context used for replacing links and templates in document trees.
    Holds the resolvers and the set of tags that are not processed.  The
    same context can be used for processing many trees, one at a time."""

    __slots__ = (
        "link_resolver",  # Called with LinkReference for each link
        "template_resolver",  # Called with TemplateCall for each template
        "excluded_tags",  # Subtrees with these tags are left untouched
        "errors",  # List of error messages (cleared for each tree)
        "warnings",  # List of warning messages (cleared for each tree)
        "debugs",  # List of debug messages (cleared for each tree)
        "node_stack",  # Containers being processed, for error messages
    )

    def __init__(
        self,
        link_resolver: Optional[LinkResolver] = None,
        template_resolver: Optional[TemplateResolver] = None,
        excluded_tags: Optional[Set[str]] = None,
        exclude: Optional[Mapping[str, bool]] = None,
        quiet: bool = False,
    ):
        self.link_resolver = link_resolver
        self.template_resolver = template_resolver
        if isinstance(excluded_tags, str):
            raise TypeError(
                "excluded_tags must be a set of tag names, not a string: "
                "{!r}".format(excluded_tags)
            )
        tags = set(
            DEFAULT_EXCLUDED_TAGS if excluded_tags is None else excluded_tags
        )
        if exclude is not None:
            for tag, excluded in exclude.items():
                if excluded:
                    tags.add(tag)
                else:
                    tags.discard(tag)
        self.excluded_tags: frozenset[str] = frozenset(tags)
        self.errors: list[ErrorMessageData] = []
        self.warnings: list[ErrorMessageData] = []
        self.debugs: list[ErrorMessageData] = []
        self.node_stack: list[Node] = []
        if not quiet:
            logger.setLevel(logging.DEBUG)

    def _node_path(self) -> tuple[str, ...]:
        return tuple(
            node.tag
            if node.kind == NodeKind.ELEMENT
            else node.type_name
            if node.kind == NodeKind.OTHER
            else node.kind.name
            for node in self.node_stack
        )

    def _fmt_errmsg(self, level: int, msg: str, trace: Optional[str]) -> None:
        loc = "/".join(self._node_path()) or "ROOT"
        if trace:
            msg += "\n" + trace
        logger.log(level, "%s: %s", loc, msg)

    def _message(
        self, msg: str, trace: Optional[str], sortid: str
    ) -> ErrorMessageData:
        assert isinstance(msg, str)
        assert isinstance(trace, (str, type(None)))
        assert isinstance(sortid, str)
        # sortid should be a static string only used to sort
        # messages into buckets based on where they have been called.
        return {
            "msg": msg,
            "trace": trace or "",
            "called_from": sortid,
            "path": self._node_path(),
        }

    def error(
        self, msg: str, trace: Optional[str] = None, sortid="XYZunsorted"
    ) -> None:
        """Logs an error message.  The error is also saved in
        self.errors."""
        self.errors.append(self._message(msg, trace, sortid))
        self._fmt_errmsg(logging.ERROR, msg, trace)

    def warning(
        self, msg: str, trace: Optional[str] = None, sortid="XYZunsorted"
    ) -> None:
        """Logs a warning message.  The warning is also saved in
        self.warnings."""
        self.warnings.append(self._message(msg, trace, sortid))
        self._fmt_errmsg(logging.WARNING, msg, trace)

    def debug(
        self, msg: str, trace: Optional[str] = None, sortid="XYZunsorted"
    ) -> None:
        """Logs a debug message.  The message is also saved in
        self.debugs."""
        self.debugs.append(self._message(msg, trace, sortid))
        self._fmt_errmsg(logging.DEBUG, msg, trace)

    def to_return(self) -> CollatedErrorReturnData:
        """Returns a dictionary with errors, warnings, and debug messages
        from the last processed tree.  The lists are reset whenever a new
        tree is processed.  The value returned by this function is
        JSON-compatible."""
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "debugs": self.debugs,
        }

    def is_excluded(self, node: Node) -> bool:
        return node.kind == NodeKind.ELEMENT and node.tag in self.excluded_tags

    async def _call_resolver(
        self, kind: str, resolver: Optional[Callable], arg: Any
    ) -> NodeChildrenList:
        if not callable(resolver):
            raise TypeError(
                "{} resolver is not callable: {!r}".format(kind, resolver)
            )
        ret = resolver(arg)
        if inspect.isawaitable(ret):
            ret = await ret
        if not isinstance(ret, (list, tuple)):
            raise TypeError(
                "{} resolver must return a list of nodes, got {!r}".format(
                    kind, ret
                )
            )
        nodes: NodeChildrenList = []
        for x in ret:
            if isinstance(x, dict):
                x = node_from_dict(x)
            elif not isinstance(x, Node):
                raise TypeError(
                    "{} resolver returned a non-node: {!r}".format(kind, x)
                )
            nodes.append(x)
        return nodes

    async def resolve_link(self, ref: LinkReference) -> NodeChildrenList:
        """Calls the link resolver for one link."""
        return await self._call_resolver("link", self.link_resolver, ref)

    async def resolve_template(self, call: TemplateCall) -> NodeChildrenList:
        """Calls the template resolver for one template occurrence."""
        return await self._call_resolver(
            "template", self.template_resolver, call
        )

    async def process(self, root: Node) -> Node:
        """Replaces links and templates in the tree at ``root``.  The tree
        is modified in place and ``root`` is returned.  If a resolver
        raises, the exception propagates and the tree may have been
        partially modified."""
        assert isinstance(root, Node)
        self.errors = []
        self.warnings = []
        self.debugs = []
        self.node_stack = []
        return await self._process_node(root)

    async def _process_node(self, node: Node) -> Node:
        if self.is_excluded(node) or not node.has_children:
            return node
        self.node_stack.append(node)
        try:
            # Templates are expanded first as their output may contain
            # links.  Template output is not processed recursively.
            children: NodeChildrenList = []
            for child in node.children:
                matches = find_templates(child.value) if child.is_text else []
                if matches:
                    children.extend(
                        await expand_templates(self, child, matches)
                    )
                else:
                    children.append(await self._process_node(child))
            # Links only pair up across the children at this level.
            node.children = await resolve_links(
                self, merge_text_nodes(children)
            )
        finally:
            self.node_stack.pop()
        return node


async def process_tree(
    root: Node,
    link_resolver: Optional[LinkResolver] = None,
    template_resolver: Optional[TemplateResolver] = None,
    excluded_tags: Optional[Set[str]] = None,
    exclude: Optional[Mapping[str, bool]] = None,
    quiet: bool = False,
) -> Node:
    """Replaces ``[[file#id|text]]`` links and ``::file|params::``
    templates in the tree at ``root`` with the nodes returned by
    ``link_resolver`` and ``template_resolver``.  Subtrees of elements whose
    tag is in ``excluded_tags`` (default: code and pre) are not processed;
    ``exclude`` maps tags to True/False to add to or remove from that set.
    Returns ``root``, modified in place."""
    ctx = Ntp(
        link_resolver=link_resolver,
        template_resolver=template_resolver,
        excluded_tags=excluded_tags,
        exclude=exclude,
        quiet=quiet,
    )
    return await ctx.process(root)


def process_tree_sync(
    root: Node,
    link_resolver: Optional[LinkResolver] = None,
    template_resolver: Optional[TemplateResolver] = None,
    excluded_tags: Optional[Set[str]] = None,
    exclude: Optional[Mapping[str, bool]] = None,
    quiet: bool = False,
) -> Node:
    """Like process_tree(), for callers outside an event loop."""
    return asyncio.run(
        process_tree(
            root,
            link_resolver=link_resolver,
            template_resolver=template_resolver,
            excluded_tags=excluded_tags,
            exclude=exclude,
            quiet=quiet,
        )
    )
