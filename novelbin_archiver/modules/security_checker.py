"""
站点检查模块 - 只允许访问受支持的 NovelBin 镜像站
Host Guard Module - Only allow the supported NovelBin mirror sites
"""

from typing import Iterable, Optional, Tuple
from urllib.parse import urlparse

import tldextract
from rich.markup import escape

from ..exceptions import UnsupportedHostError
from ..utils import safe_print

__all__ = ['HostGuard', 'ALLOWED_HOSTS']

ALLOWED_HOSTS = (
    'novelbin.org', 'www.novelbin.org',
    'thenovelbin.org', 'www.thenovelbin.org',
    'novelbin.com', 'www.novelbin.com',
    'novlove.com', 'www.novlove.com',
)

# 离线解析公共后缀，不去网络下载后缀列表
_extract = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def _registered_domain(url: str) -> str:
    parts = _extract(url)
    if parts.domain and parts.suffix:
        return f"{parts.domain}.{parts.suffix}"
    return ""


class HostGuard:
    """主机白名单检查器"""

    def __init__(self, allowed_hosts: Optional[Iterable[str]] = None):
        hosts = allowed_hosts if allowed_hosts is not None else ALLOWED_HOSTS
        self.allowed_hosts = {h.lower() for h in hosts}
        self.allowed_domains = {_registered_domain(f"http://{h}") for h in self.allowed_hosts}

    def is_allowed(self, url: str) -> Tuple[bool, str]:
        """
        检查URL的主机是否在白名单中
        返回: (是否允许, 原因说明)
        """
        host = (urlparse(url).hostname or '').lower()
        if not host:
            return False, f"URL has no host: {url}"

        if host in self.allowed_hosts:
            return True, ""

        # 子域名（如 m.novelbin.com）按注册域名放行
        domain = _registered_domain(url)
        if domain and domain in self.allowed_domains:
            return True, ""

        return False, f"Unsupported host '{host}'. Only NovelBin domains allowed."

    def check_url(self, url: str) -> str:
        """不在白名单时抛出 UnsupportedHostError"""
        allowed, reason = self.is_allowed(url)
        if not allowed:
            safe_print(f"🚫 [bold red]{escape(reason)}[/bold red]")
            raise UnsupportedHostError(reason)
        return url
