# Tests for link delimiter matching
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import unittest

from noddityprocessor.links import (
    Delimiter,
    LinkReference,
    PairingGroup,
    pair_delimiters,
    parse_link,
    restore_group,
    split_link_partials,
    tokenize_links,
)
from noddityprocessor.nodes import ElementNode, Node, TextNode


def values(items) -> list:
    # Text nodes as strings, other nodes as their tag or kind name
    ret = []
    for x in items:
        if isinstance(x, Delimiter):
            ret.append(x)
        elif x.is_text:
            ret.append(x.value)
        else:
            ret.append(x.tag or x.kind.name)
    return ret


class TokenizeTests(unittest.TestCase):
    def tokenize(self, nodes: list[Node], expected: list) -> None:
        self.assertEqual(values(tokenize_links(nodes)), expected)

    def test_no_delimiters(self):
        node = TextNode("plain [text]")
        items = tokenize_links([node])
        self.assertEqual(len(items), 1)
        self.assertIs(items[0], node)

    def test_tokenize1(self):
        self.tokenize(
            [TextNode("a [[b]] c")],
            ["a ", Delimiter.START, "b", Delimiter.END, " c"],
        )

    def test_tokenize2(self):
        self.tokenize(
            [TextNode("[[b]]")], [Delimiter.START, "b", Delimiter.END]
        )

    def test_tokenize_order(self):
        self.tokenize(
            [TextNode("x]] y [[z")],
            ["x", Delimiter.END, " y ", Delimiter.START, "z"],
        )

    def test_tokenize_triple(self):
        self.tokenize([TextNode("[[[")], [Delimiter.START, "["])
        self.tokenize([TextNode("]]]")], [Delimiter.END, "]"])

    def test_tokenize_elements(self):
        self.tokenize(
            [
                TextNode("a [[b|"),
                ElementNode("em", {}, [TextNode("]]")]),
                TextNode("]]"),
            ],
            ["a ", Delimiter.START, "b|", "em", Delimiter.END],
        )

    def test_tokenize_empty_text(self):
        node = TextNode("")
        items = tokenize_links([node])
        self.assertEqual(items, [node])


class PairTests(unittest.TestCase):
    def pair(self, text: str) -> list[PairingGroup]:
        return pair_delimiters(tokenize_links([TextNode(text)]))

    def test_pair_none(self):
        groups = self.pair("abc")
        self.assertEqual(len(groups), 1)
        self.assertFalse(groups[0].has_start)
        self.assertFalse(groups[0].has_end)
        self.assertEqual(values(groups[0].nodes), ["abc"])

    def test_pair1(self):
        groups = self.pair("a [[b]] c")
        self.assertEqual(
            [(g.has_start, g.has_end, values(g.nodes)) for g in groups],
            [
                (False, False, ["a "]),
                (True, True, ["b"]),
                (False, False, [" c"]),
            ],
        )

    def test_pair_end_after_end(self):
        groups = self.pair("[[a|]]text]]")
        self.assertEqual(
            [(g.has_start, g.has_end, values(g.nodes)) for g in groups],
            [
                (False, False, []),
                (True, True, ["a|"]),
                (False, True, ["text"]),
                (False, False, []),
            ],
        )

    def test_pair_unclosed(self):
        groups = self.pair("has [[incomplete")
        self.assertTrue(groups[-1].has_start)
        self.assertFalse(groups[-1].has_end)

    def test_pair_reconstruct(self):
        # Restoring every group gives back the original text
        for text in ("a [[b]] c", "x]]y[[", "[[[[a]]]]", "[[", "]]"):
            groups = self.pair(text)
            restored = "".join(
                x.value for g in groups for x in restore_group(g)
            )
            self.assertEqual(restored, text)


class ParseLinkTests(unittest.TestCase):
    def group(self, *nodes: Node, start=True, end=True) -> PairingGroup:
        items = list(nodes)
        return PairingGroup(items, 0, len(items), start, end)

    def test_partials1(self):
        ref = split_link_partials([TextNode("file.md")])
        self.assertEqual(ref, LinkReference("file.md", None, []))

    def test_partials2(self):
        ref = split_link_partials([TextNode("file.md#heading|internal")])
        self.assertEqual(ref.file, "file.md")
        self.assertEqual(ref.id, "heading")
        self.assertEqual(values(ref.nodes), ["internal"])

    def test_partials3(self):
        em = ElementNode("em", {}, [TextNode("x")])
        ref = split_link_partials([TextNode("file.md|with "), em])
        self.assertEqual(values(ref.nodes), ["with ", "em"])
        self.assertIs(ref.nodes[1], em)

    def test_partials_empty_text(self):
        em = ElementNode("em")
        ref = split_link_partials([TextNode("file.md|"), em])
        self.assertEqual(ref.file, "file.md")
        self.assertEqual(ref.nodes, [em])

    def test_partials_pipe(self):
        ref = split_link_partials([TextNode("file.md|has | pipe")])
        self.assertEqual(values(ref.nodes), ["has | pipe"])

    def test_partials_no_file(self):
        self.assertIsNone(split_link_partials([TextNode("|text")]))
        self.assertIsNone(split_link_partials([TextNode("#id")]))
        self.assertIsNone(split_link_partials([TextNode("")]))

    def test_parse_link(self):
        ref = parse_link(self.group(TextNode("a.md|b")))
        self.assertEqual(ref.file, "a.md")

    def test_parse_link_no_start(self):
        self.assertIsNone(parse_link(self.group(TextNode("a.md"), start=False)))

    def test_parse_link_no_end(self):
        self.assertIsNone(parse_link(self.group(TextNode("a.md"), end=False)))

    def test_parse_link_empty(self):
        self.assertIsNone(parse_link(self.group()))

    def test_parse_link_newline(self):
        self.assertIsNone(parse_link(self.group(TextNode("a.md|b\nc"))))

    def test_parse_link_newline_later(self):
        # Only the first text node needs to be on one line
        ref = parse_link(
            self.group(TextNode("a.md|b"), ElementNode("br"), TextNode("\nc"))
        )
        self.assertEqual(values(ref.nodes), ["b", "br", "\nc"])

    def test_parse_link_element_first(self):
        self.assertIsNone(parse_link(self.group(ElementNode("em"))))

    def test_restore_group(self):
        em = ElementNode("em")
        self.assertEqual(
            values(restore_group(self.group(TextNode("a"), em))),
            ["[[", "a", "em", "]]"],
        )
        self.assertEqual(
            values(restore_group(self.group(TextNode("a"), end=False))),
            ["[[", "a"],
        )
