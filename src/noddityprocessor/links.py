# Recognizing [[file#id|display]] links among the children of a node
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org
import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from .common import LINK_DELIMITERS_RE, LINK_END, LINK_INTERNALS_RE, LINK_START
from .nodes import Node, NodeChildrenList, TextNode, merge_text_nodes

if TYPE_CHECKING:
    from .core import Ntp


@enum.unique
class Delimiter(enum.Enum):
    """Link delimiter found inside a text node.  These only exist while
    matching links and never end up in the tree."""

    START = LINK_START
    END = LINK_END


MixedItem = Union[Node, Delimiter]


@dataclass
class PairingGroup:
    """The nodes between two consecutive delimiters (or before the first or
    after the last one).  The nodes are not copied; the group refers to the
    slice ``items[start:stop]`` of the tokenized sequence."""

    items: list[MixedItem] = field(repr=False)
    start: int
    stop: int = -1
    has_start: bool = False
    has_end: bool = False

    @property
    def nodes(self) -> NodeChildrenList:
        ret = self.items[self.start : self.stop]
        assert not any(isinstance(x, Delimiter) for x in ret)
        return ret  # type: ignore[return-value]


@dataclass
class LinkReference:
    """A recognized link, passed to the link resolver.  ``nodes`` is the
    display content: the display text from the first text node, if any,
    followed by the remaining nodes inside the link."""

    file: str
    id: Optional[str] = None
    nodes: NodeChildrenList = field(default_factory=list)


def tokenize_links(nodes: Iterable[Node]) -> list[MixedItem]:
    """Splits the values of text nodes at ``[[`` and ``]]``.  Returns a flat
    sequence of text nodes, delimiters and the other nodes unchanged."""
    items: list[MixedItem] = []
    for node in nodes:
        if not node.is_text or not node.value:
            items.append(node)
            continue
        parts = LINK_DELIMITERS_RE.split(node.value)
        if len(parts) == 1:  # no delimiters
            items.append(node)
            continue
        for part in parts:
            if part == LINK_START:
                items.append(Delimiter.START)
            elif part == LINK_END:
                items.append(Delimiter.END)
            elif part:
                items.append(TextNode(part))
    return items


def pair_delimiters(items: list[MixedItem]) -> list[PairingGroup]:
    """Groups the tokenized sequence at delimiters.  A start delimiter
    always opens a new group; an end delimiter closes the current group,
    whatever it is, and opens an unmarked one."""
    groups: list[PairingGroup] = []
    group = PairingGroup(items, 0)
    for i, item in enumerate(items):
        if item is Delimiter.START:
            group.stop = i
            groups.append(group)
            group = PairingGroup(items, i + 1, has_start=True)
        elif item is Delimiter.END:
            group.stop = i
            group.has_end = True
            groups.append(group)
            group = PairingGroup(items, i + 1)
    group.stop = len(items)
    groups.append(group)
    return groups


def split_link_partials(nodes: NodeChildrenList) -> Optional[LinkReference]:
    """Parses ``file#id|display`` from the first node (which must be a text
    node).  Returns None if the text does not start with a file name."""
    assert nodes and nodes[0].is_text
    m = LINK_INTERNALS_RE.match(nodes[0].value)
    if m is None:
        return None
    display = m.group(3)
    children: NodeChildrenList = [TextNode(display)] if display else []
    children.extend(nodes[1:])
    return LinkReference(m.group(1), m.group(2), children)


def parse_link(group: PairingGroup) -> Optional[LinkReference]:
    """Returns the link in ``group``, or None if the group is not a valid
    link.  A link needs both delimiters and must start with text that is
    on a single line."""
    if not group.has_start or not group.has_end:
        return None
    nodes = group.nodes
    if not nodes or not nodes[0].is_text or "\n" in nodes[0].value:
        return None
    return split_link_partials(nodes)


def restore_group(group: PairingGroup) -> NodeChildrenList:
    # Puts back the delimiters around content that was not a link.
    ret: NodeChildrenList = []
    if group.has_start:
        ret.append(TextNode(LINK_START))
    ret.extend(group.nodes)
    if group.has_end:
        ret.append(TextNode(LINK_END))
    return ret


async def resolve_links(
    ctx: "Ntp", nodes: NodeChildrenList
) -> NodeChildrenList:
    """Replaces the links found among ``nodes`` (the children of one node,
    with templates already expanded) with the output of the link resolver.
    Links may contain other nodes, e.g. ``[[file.md|with <em>html</em>]]``,
    but both delimiters must be in text nodes at this level."""
    items = tokenize_links(nodes)
    output: NodeChildrenList = []
    for group in pair_delimiters(items):
        ref = parse_link(group)
        if ref is not None:
            output.extend(await ctx.resolve_link(ref))
            continue
        if group.has_start and not group.has_end:
            ctx.debug("link not properly closed", sortid="links/131")
        elif group.has_start:
            ctx.debug(
                "invalid link content",
                trace=repr(group.nodes),
                sortid="links/134",
            )
        output.extend(restore_group(group))
    return merge_text_nodes(output)
