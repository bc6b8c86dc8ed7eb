"""
Tests for hyperlink extraction.
"""

import unittest

from w3c_validate.extraction import extract_links

BASE = "https://x.test/dir/page.html"


class TestExtractLinks(unittest.TestCase):

    def test_duplicates_collapse_after_fragment_removal(self):
        html = '<a href="/a"></a><a href="/a#frag"></a>'
        self.assertEqual(extract_links(html, "https://x.test/"), ["https://x.test/a"])

    def test_relative_links_resolved(self):
        html = '<a href="other.html">o</a><a href="../up.html">u</a>'
        self.assertEqual(
            extract_links(html, BASE),
            ["https://x.test/dir/other.html", "https://x.test/up.html"],
        )

    def test_protocol_relative(self):
        html = '<a href="//cdn.x.test/lib">cdn</a>'
        self.assertEqual(extract_links(html, BASE), ["https://cdn.x.test/lib"])

    def test_first_seen_order(self):
        html = '<a href="/c"></a><a href="/a"></a><a href="/c"></a><a href="/b"></a>'
        self.assertEqual(
            extract_links(html, BASE),
            ["https://x.test/c", "https://x.test/a", "https://x.test/b"],
        )

    def test_area_elements_included(self):
        html = '<map name="m"><area href="/map-target" alt="t"></map>'
        self.assertEqual(extract_links(html, BASE), ["https://x.test/map-target"])

    def test_non_navigational_schemes_skipped(self):
        html = (
            '<a href="mailto:me@x.test">m</a>'
            '<a href="tel:123">t</a>'
            '<a href="javascript:void(0)">j</a>'
            '<a href="data:text/plain,hi">d</a>'
            '<a href="/ok">ok</a>'
        )
        self.assertEqual(extract_links(html, BASE), ["https://x.test/ok"])

    def test_non_link_elements_ignored(self):
        html = (
            '<link rel="stylesheet" href="/s.css">'
            '<script src="/app.js"></script>'
            '<img src="/i.png">'
            '<a name="anchor-only">no href</a>'
        )
        self.assertEqual(extract_links(html, BASE), [])

    def test_query_kept(self):
        html = '<a href="/search?q=1">s</a>'
        self.assertEqual(extract_links(html, BASE), ["https://x.test/search?q=1"])

    def test_malformed_markup_does_not_raise(self):
        html = '<div><a href="/x">unclosed <p><a href="/y"'
        links = extract_links(html, BASE)
        self.assertIn("https://x.test/x", links)

    def test_empty_input(self):
        self.assertEqual(extract_links("", BASE), [])
        self.assertEqual(extract_links(None, BASE), [])

    def test_bytes_input(self):
        self.assertEqual(extract_links(b'<a href="/b">b</a>', BASE), ["https://x.test/b"])


if __name__ == "__main__":
    unittest.main()
