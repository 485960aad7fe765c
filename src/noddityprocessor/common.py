# Some definitions used for both template and link processing
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re

# Literal link delimiters.  These are restored verbatim around content that
# turns out not to be a valid link.
LINK_START: str = "[["
LINK_END: str = "]]"

# Tags whose subtrees are never scanned for links or templates.
DEFAULT_EXCLUDED_TAGS: frozenset[str] = frozenset(["code", "pre"])

# Both delimiters in order of appearance.  The capturing group makes
# re.split() return the delimiters along with the text between them.
LINK_DELIMITERS_RE: re.Pattern[str] = re.compile(r"(\[\[|\]\])")

# ::name::, ::name|param|key=value::
# The name can't be empty or contain a pipe, and neither part may span
# lines.  Both parts are lazy so that the first closing :: wins.
TEMPLATE_RE: re.Pattern[str] = re.compile(r"::([^|\n]+?)(?:\|([^\n]+?))?::")

# file[#id][|display text], matched at the start of the first text node
# inside [[...]]
LINK_INTERNALS_RE: re.Pattern[str] = re.compile(
    r"([^#|\n]+)(?:#([^|\n]+))?(?:\|([^\n]+))?"
)

TEMPLATE_PARAM_SEPARATOR: str = "|"
TEMPLATE_KEY_SEPARATOR: str = "="
