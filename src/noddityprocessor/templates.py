# Recognizing ::template|param|key=value:: occurrences in text nodes
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from .common import (
    TEMPLATE_KEY_SEPARATOR,
    TEMPLATE_PARAM_SEPARATOR,
    TEMPLATE_RE,
)
from .nodes import Node, NodeChildrenList, TextNode

if TYPE_CHECKING:
    from .core import Ntp


@dataclass
class TemplateParameter:
    """A ``key=value`` template parameter."""

    key: str
    value: str


TemplateParameterList = list[Union[str, TemplateParameter]]


@dataclass
class TemplateCall:
    """A recognized template occurrence, passed to the template resolver."""

    file: str
    parameters: TemplateParameterList = field(default_factory=list)


def find_templates(text: str) -> list[re.Match[str]]:
    """Returns the template occurrences in ``text``, left to right."""
    if not text:
        return []
    return list(TEMPLATE_RE.finditer(text))


def parse_template_parameters(
    metadata: Optional[str],
) -> TemplateParameterList:
    """Splits the part after the template name into parameters.  There is
    no escaping: every vertical bar starts a new parameter and the first
    equals sign separates the key from the value.  An equals sign at the
    start of a parameter doesn't make it a key-value pair."""
    parameters: TemplateParameterList = []
    if not metadata:
        return parameters
    for part in metadata.split(TEMPLATE_PARAM_SEPARATOR):
        idx = part.find(TEMPLATE_KEY_SEPARATOR)
        if idx > 0:
            parameters.append(TemplateParameter(part[:idx], part[idx + 1 :]))
        else:
            parameters.append(part)
    return parameters


async def expand_templates(
    ctx: "Ntp", node: Node, matches: list[re.Match[str]]
) -> NodeChildrenList:
    """Replaces the matched templates in the text node ``node`` with the
    output of the template resolver.  Text around the matches is kept as
    text nodes.  Resolvers are called one at a time in textual order."""
    assert node.is_text
    assert matches
    text = node.value
    output: NodeChildrenList = []
    pos = 0
    for m in matches:
        if m.start() > pos:
            output.append(TextNode(text[pos : m.start()]))
        call = TemplateCall(m.group(1), parse_template_parameters(m.group(2)))
        output.extend(await ctx.resolve_template(call))
        pos = m.end()
    if pos < len(text):
        output.append(TextNode(text[pos:]))
    return output
