# Tests for converting document trees back to markup
#
# Copyright (c) 2020-2021 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import unittest

from noddityprocessor import Ntp
from noddityprocessor.node_expand import to_html, to_markup, to_text
from noddityprocessor.nodes import (
    CommentNode,
    ElementNode,
    OtherNode,
    RootNode,
    TextNode,
)


class NodeExpTests(unittest.TestCase):
    def backcvt(self, root, expected):
        self.assertEqual(to_markup(root), expected)

    def tohtml(self, root, expected):
        self.assertEqual(to_html(root), expected)

    def totext(self, root, expected):
        self.assertEqual(to_text(root), expected)

    def test_basic1(self):
        self.backcvt(RootNode(), "")

    def test_basic2(self):
        self.backcvt(RootNode([TextNode("foo bar\nxyz\n")]), "foo bar\nxyz\n")

    def test_basic3(self):
        self.backcvt(RootNode([TextNode("a < b & [[c]]")]), "a < b & [[c]]")

    def test_element1(self):
        self.backcvt(
            RootNode(
                [TextNode("a "), ElementNode("em", {}, [TextNode("b")])]
            ),
            "a <em>b</em>",
        )

    def test_element_attrs(self):
        self.backcvt(
            ElementNode(
                "a",
                {
                    "href": "x.md?a=1&b=2",
                    "className": ["c1", "c2"],
                    "hidden": True,
                    "title": None,
                },
                [TextNode("t")],
            ),
            '<a href="x.md?a=1&amp;b=2" class="c1 c2" hidden>t</a>',
        )

    def test_void(self):
        self.backcvt(ElementNode("br"), "<br>")
        self.backcvt(ElementNode("span"), "<span></span>")

    def test_comment(self):
        self.backcvt(RootNode([CommentNode(" x ")]), "<!-- x -->")

    def test_other(self):
        self.tohtml(
            RootNode(
                [
                    OtherNode("raw", {"value": "<b>&</b>"}),
                    OtherNode("directive", {}, [TextNode("a&b")]),
                ]
            ),
            "<b>&</b>a&amp;b",
        )

    def test_html1(self):
        self.tohtml(
            RootNode(
                [
                    TextNode("a < b & "),
                    ElementNode("em", {}, [TextNode("<c>")]),
                ]
            ),
            "a &lt; b &amp; <em>&lt;c&gt;</em>",
        )

    def test_text1(self):
        self.totext(
            RootNode(
                [
                    TextNode("a "),
                    ElementNode("em", {}, [TextNode("b")]),
                    CommentNode("no"),
                    TextNode(" c"),
                ]
            ),
            "a b c",
        )

    def test_text_list(self):
        self.totext(
            [TextNode("a"), ElementNode("b", {}, [TextNode("c")])], "ac"
        )

    def test_node_handler(self):
        def handler(node):
            if node.kind.name == "ELEMENT" and node.tag == "em":
                return [TextNode("*"), *node.children, TextNode("*")]
            return None

        root = RootNode([ElementNode("em", {}, [TextNode("x")])])
        self.assertEqual(to_markup(root, node_handler_fn=handler), "*x*")

    def test_invalid(self):
        with self.assertRaises(RuntimeError):
            to_markup([42])


class ProcessedExpTests(unittest.IsolatedAsyncioTestCase):
    async def test_processed_html(self):
        def resolver(ref):
            return [
                ElementNode("a", {"href": "/" + ref.file}, ref.nodes or [])
            ]

        ctx = Ntp(link_resolver=resolver, quiet=True)
        root = RootNode([TextNode("see [[x.md|a & b]] [[y.md")])
        await ctx.process(root)
        self.assertEqual(
            to_html(root), 'see <a href="/x.md">a &amp; b</a> [[y.md'
        )
