import unittest
from unittest import mock

import requests

from novelbin_archiver.exceptions import TransportError
from novelbin_archiver.modules.fetcher import DEFAULT_HEADERS, HttpFetcher, Throttle, is_blocked_response

URL = "https://novelbin.org/b/n/chapter-1"


def make_response(status=200, text="<html><body>" + "ok " * 300 + "</body></html>", headers=None):
    response = mock.Mock()
    response.status_code = status
    response.text = text
    response.content = text.encode("utf-8")
    response.headers = headers or {}
    return response


class TestHttpFetcher(unittest.TestCase):
    """Tests for HttpFetcher with a stubbed requests session."""

    def setUp(self):
        self.session = mock.Mock()
        self.session.headers = {}
        self.fetcher = HttpFetcher(session=self.session)

    def test_session_configured(self):
        self.assertEqual(self.session.headers["User-Agent"], DEFAULT_HEADERS["User-Agent"])
        self.assertEqual(self.session.max_redirects, 8)
        self.assertEqual(self.fetcher.timeout, (20, 60))

    def test_returns_bytes(self):
        self.session.get.return_value = make_response()
        body = self.fetcher.fetch(URL, headers={"X-Requested-With": "XMLHttpRequest"})
        self.assertIsInstance(body, bytes)
        self.session.get.assert_called_once_with(
            URL, headers={"X-Requested-With": "XMLHttpRequest"}, timeout=(20, 60)
        )

    def test_http_error_status(self):
        self.session.get.return_value = make_response(status=404)
        with self.assertRaises(TransportError) as ctx:
            self.fetcher.fetch(URL)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.url, URL)

    def test_network_error(self):
        self.session.get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(TransportError) as ctx:
            self.fetcher.fetch(URL)
        self.assertIsNone(ctx.exception.status_code)

    def test_challenge_page(self):
        self.session.get.return_value = make_response(text="<title>Just a moment...</title>" + "x" * 600)
        with self.assertRaises(TransportError):
            self.fetcher.fetch(URL)


class TestIsBlockedResponse(unittest.TestCase):

    def test_cloudflare_header(self):
        self.assertTrue(is_blocked_response(make_response(status=503, headers={"CF-RAY": "abc"})))

    def test_short_denied_page(self):
        self.assertTrue(is_blocked_response(make_response(text="Access Denied")))

    def test_normal_page(self):
        self.assertFalse(is_blocked_response(make_response()))


class TestThrottle(unittest.TestCase):

    def test_wait(self):
        sleep = mock.Mock()
        throttle = Throttle(1.5, sleep)
        throttle.wait()
        throttle.wait(0.2)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.5, 0.2])

    def test_zero_does_not_sleep(self):
        sleep = mock.Mock()
        Throttle(0, sleep).wait()
        sleep.assert_not_called()


if __name__ == '__main__':
    unittest.main()
