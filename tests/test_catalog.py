import unittest
from unittest import mock

from novelbin_archiver.exceptions import NoChaptersFoundError, TransportError
from novelbin_archiver.modules.catalog import (
    AJAX_HEADERS,
    archive_url,
    extract_embedded_chapters,
    resolve_chapter_list,
    scrape_static_chapters,
)
from novelbin_archiver.modules.dom import load_dom
from novelbin_archiver.modules.fetcher import Throttle
from novelbin_archiver.modules.metadata import extract_novel_metadata
from novelbin_archiver.modules.site_detector import novelbin_profile
from novelbin_archiver.utils import set_quiet

NOVEL_URL = "https://novelbin.org/b/test-novel"

EMBEDDED_PAGE = """
<html><body>
<div class="chapter-wrap" id="chapter-1">
  <h2>Chapter 1: Chapter 1: Start</h2>
  <div class="chr-nav"><a href="#chapter-2">Next</a></div>
  <div class="chr-c"><p>First chapter text.</p><script>track()</script>
    <img src="/media/map.png" alt="map"></div>
</div>
<div class="chapter-wrap" id="chapter-2">
  <h3>Chapter 2</h3>
  <div class="chr-c"><p>Second chapter text.</p></div>
</div>
<div id="rating" data-novel-id="test-novel"></div>
<div class="list-chapter"><a href="/b/test-novel/chapter-1">Chapter 1</a></div>
</body></html>
"""

ARCHIVE_PAGE = """
<html><body>
<div id="rating" data-novel-id="test-novel"></div>
<a href="/b/test-novel/chapter-9">Chapter 9 from page</a>
</body></html>
"""

ARCHIVE_RESPONSE = b"""
<div class="panel-body"><ul class="list-chapter">
  <li><a href="/b/test-novel/chapter-1" title="Chapter 1"><span class="nchr-text">Chapter 1: Start</span></a></li>
  <li><a href="https://novelbin.org/b/test-novel/chapter-2">Chapter 2: Road</a></li>
  <li><span>no link here</span></li>
  <li><a href="">empty</a></li>
</ul></div>
"""

STATIC_PAGE = """
<html><body>
<div class="list-chapter">
  <a href="/b/test-novel/chapter-1">Chapter 1</a>
  <a href="chapter-2">Chapter 2</a>
  <a href="https://novelbin.org/b/test-novel/chapter-1">Chapter 1 again</a>
  <a href="/b/test-novel/chapter-3"> </a>
</div>
<a href="/b/test-novel/chapter-99">Chapter 99 elsewhere</a>
</body></html>
"""


class CatalogTestCase(unittest.TestCase):

    def setUp(self):
        set_quiet(True)
        self.sleep = mock.Mock()
        self.throttle = Throttle(1.0, self.sleep)
        self.fetcher = mock.Mock()

    def tearDown(self):
        set_quiet(False)


class TestEmbeddedStrategy(CatalogTestCase):

    def test_embedded_chapters_need_no_fetch(self):
        result = resolve_chapter_list(EMBEDDED_PAGE, NOVEL_URL, self.fetcher, self.throttle)

        self.assertEqual(result.strategy, 'embedded')
        self.fetcher.fetch.assert_not_called()
        self.sleep.assert_not_called()
        self.assertEqual(len(result.chapters), 2)

    def test_embedded_records_are_populated(self):
        result = resolve_chapter_list(EMBEDDED_PAGE, NOVEL_URL, self.fetcher, self.throttle)
        first, second = result.chapters

        self.assertTrue(first.is_fetched)
        self.assertEqual(first.title, "Chapter 1: Start")
        self.assertEqual(first.url, "https://novelbin.org/b/test-novel#chapter-1")
        self.assertEqual(second.url, "https://novelbin.org/b/test-novel#chapter-2")
        self.assertIn("First chapter text.", first.content)
        self.assertNotIn("<script", first.content)
        self.assertNotIn("Next", first.content)
        self.assertIn('src="https://novelbin.org/media/map.png"', first.content)
        self.assertIn("Second chapter text.", second.content)

    def test_script_only_content_node_is_emptied(self):
        page = (
            '<div class="chapter-wrap" id="chapter-1"><h2>Chapter 1</h2>'
            '<div class="chr-c"> <script>steal()</script> </div></div>'
        )
        chapters = extract_embedded_chapters(load_dom(page), NOVEL_URL, novelbin_profile())

        self.assertEqual(len(chapters), 1)
        self.assertNotIn("<script", chapters[0].content)
        self.assertNotIn("steal", chapters[0].content)


class TestArchiveStrategy(CatalogTestCase):

    def test_archive_endpoint_used(self):
        self.fetcher.fetch.return_value = ARCHIVE_RESPONSE
        result = resolve_chapter_list(ARCHIVE_PAGE, NOVEL_URL, self.fetcher, self.throttle)

        self.assertEqual(result.strategy, 'archive')
        self.fetcher.fetch.assert_called_once_with(
            "https://novelbin.org/ajax/chapter-archive?novelId=test-novel",
            headers=AJAX_HEADERS,
        )
        self.sleep.assert_called_once_with(1.0)
        self.assertEqual([c.name for c in result.chapters], ["Chapter 1: Start", "Chapter 2: Road"])
        self.assertEqual(
            [c.url for c in result.chapters],
            [
                "https://novelbin.org/b/test-novel/chapter-1",
                "https://novelbin.org/b/test-novel/chapter-2",
            ],
        )
        self.assertFalse(any(c.is_fetched for c in result.chapters))

    def test_archive_failure_falls_through_to_static(self):
        self.fetcher.fetch.side_effect = TransportError("HTTP 500", url="x", status_code=500)
        result = resolve_chapter_list(ARCHIVE_PAGE, NOVEL_URL, self.fetcher, self.throttle)

        self.assertEqual(result.strategy, 'static')
        self.assertEqual([c.url for c in result.chapters], ["https://novelbin.org/b/test-novel/chapter-9"])

    def test_archive_error_text_with_brackets_is_reported(self):
        self.fetcher.fetch.side_effect = TransportError("HTTP 500: [/ajax] [bold]", url="x", status_code=500)
        result = resolve_chapter_list(ARCHIVE_PAGE, NOVEL_URL, self.fetcher, self.throttle)
        self.assertEqual(result.strategy, 'static')

    def test_archive_url(self):
        self.assertEqual(
            archive_url(novelbin_profile(), "a b"),
            "https://novelbin.org/ajax/chapter-archive?novelId=a+b",
        )


class TestStaticStrategy(CatalogTestCase):

    def test_deduplicated_and_specific_selector_first(self):
        soup = load_dom(STATIC_PAGE)
        chapters = scrape_static_chapters(soup, NOVEL_URL, novelbin_profile())

        self.assertEqual(
            [c.url for c in chapters],
            [
                "https://novelbin.org/b/test-novel/chapter-1",
                "https://novelbin.org/b/chapter-2",
            ],
        )
        self.assertEqual(chapters[0].name, "Chapter 1")

    def test_broad_selector_used_when_no_list(self):
        page = '<html><body><a href="/b/x/chapter-1">One</a><a href="/about">About</a></body></html>'
        result = resolve_chapter_list(page, NOVEL_URL, self.fetcher, self.throttle)
        self.assertEqual(result.strategy, 'static')
        self.assertEqual(len(result.chapters), 1)
        self.fetcher.fetch.assert_not_called()


class TestNoChapters(CatalogTestCase):

    def test_raises_terminal_error(self):
        with self.assertRaises(NoChaptersFoundError) as ctx:
            resolve_chapter_list('<html><body><p>nothing</p></body></html>', NOVEL_URL, self.fetcher, self.throttle)
        self.assertEqual(ctx.exception.url, NOVEL_URL)

    def test_garbage_input(self):
        with self.assertRaises(NoChaptersFoundError):
            resolve_chapter_list(b'\xff\xfe not html', NOVEL_URL, self.fetcher, self.throttle)


class TestMetadata(unittest.TestCase):

    def test_book_block(self):
        page = """
        <div class="books"><div class="book">
          <img class="lazy" data-src="/media/cover.jpg" src="/media/blank.gif" alt="My Novel"></div></div>
        <ul class="info info-meta">
          <li><h3>Author:</h3><a href="/a/jane">Jane Roe</a></li>
          <li><h3>Genre:</h3><a>Fantasy</a>, <a>Action</a></li>
          <li><h3>Status:</h3><a>Ongoing</a></li>
        </ul>
        <div class="desc-text">  A long journey.  </div>
        """
        meta = extract_novel_metadata(page, NOVEL_URL)
        self.assertEqual(meta.title, "My Novel")
        self.assertEqual(meta.cover, "https://novelbin.org/media/cover.jpg")
        self.assertEqual(meta.author, "Jane Roe")
        self.assertEqual(meta.genre, "Fantasy, Action")
        self.assertEqual(meta.status, "Ongoing")
        self.assertEqual(meta.summary, "A long journey.")

    def test_missing_fields_are_empty(self):
        meta = extract_novel_metadata('<html><head><meta property="og:title" content="OG Name"></head></html>', NOVEL_URL)
        self.assertEqual(meta.title, "OG Name")
        self.assertEqual(meta.author, "")
        self.assertEqual(meta.cover, "")
        self.assertEqual(meta.url, NOVEL_URL)


if __name__ == '__main__':
    unittest.main()
