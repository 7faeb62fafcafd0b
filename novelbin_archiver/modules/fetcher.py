"""HTTP 抓取与限速"""
from __future__ import annotations

import time
from typing import Callable, Dict, Optional, Tuple, Union

import requests

from ..exceptions import TransportError

__all__ = ['HttpFetcher', 'Throttle', 'is_blocked_response', 'DEFAULT_HEADERS']

DEFAULT_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; NovelBinScraper/2.1)',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
}

Timeout = Union[float, Tuple[float, float]]


class Throttle:
    """每次请求前的强制延迟"""

    def __init__(self, seconds: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self.seconds = seconds
        self._sleep = sleep

    def wait(self, seconds: Optional[float] = None):
        delay = self.seconds if seconds is None else seconds
        if delay > 0:
            self._sleep(delay)


def is_blocked_response(response) -> bool:
    """检测是否被常见反爬虫(Cloudflare等)拦截"""
    if response.status_code in (403, 503) and 'cf-ray' in {k.lower() for k in response.headers}:
        return True

    content_lower = response.text[:5000].lower()
    cloudflare_indicators = [
        "just a moment...",
        "checking your browser",
        "cf-browser-verification",
        "challenge-platform",
    ]
    if any(ind in content_lower for ind in cloudflare_indicators):
        return True

    # 简易长度 + 关键词
    if len(response.text) < 500 and ("access denied" in content_lower or "forbidden" in content_lower):
        return True

    return False


class HttpFetcher:
    """
    带超时的 GET 请求封装，不做自动重试。

    网络错误、HTTP 状态码 >= 400 或被反爬虫页面拦截时抛出 TransportError。
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        connect_timeout: float = 20,
        read_timeout: float = 60,
        max_redirects: int = 8,
    ):
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.session.max_redirects = max_redirects
        self.timeout: Tuple[float, float] = (connect_timeout, read_timeout)

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None, timeout: Optional[Timeout] = None) -> bytes:
        try:
            response = self.session.get(url, headers=headers, timeout=timeout or self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Network error: {e}", url=url) from e

        if response.status_code >= 400:
            raise TransportError(f"HTTP {response.status_code}: {url}", url=url, status_code=response.status_code)

        if is_blocked_response(response):
            raise TransportError(f"Blocked by anti-bot protection: {url}", url=url, status_code=response.status_code)

        return response.content

    def close(self):
        self.session.close()
