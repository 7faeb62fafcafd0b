"""小说元数据提取逻辑"""

from __future__ import annotations
import re
from typing import Union

from bs4 import BeautifulSoup

from ..models import NovelMetadata
from .dom import load_dom, node_text
from .linker import resolve_url

__all__ = ['extract_novel_metadata']

_EDGE_PUNCTUATION = re.compile(r'^[,\s:–—-]+|[,\s:–—-]+$')


def _extract_title_and_cover(soup: BeautifulSoup, url: str):
    img = soup.select_one('div[class*="book"] img')
    if img is not None:
        title = (img.get('alt') or '').strip()
        src = img.get('data-src') or img.get('src') or ''
        return title, resolve_url(url, src) if src else ''

    h1 = soup.select_one('h1[class*="novel-title"]') or soup.find('h1')
    if h1 is not None:
        return node_text(h1), ''

    # 退回 og:title
    og_title = soup.find('meta', property='og:title')
    if og_title and og_title.get('content'):
        return og_title['content'].strip(), ''
    return '', ''


def _extract_info_rows(soup: BeautifulSoup) -> dict:
    """解析 <ul class="info"> 中的 Author / Status / Genre 行"""
    fields = {}
    for li in soup.select('ul[class*="info"] > li'):
        label_el = li.find('h3', recursive=False)
        label = node_text(label_el)
        text = node_text(li)
        value = text.replace(label, '', 1).strip() if label else text
        value = _EDGE_PUNCTUATION.sub('', value)
        for key in ('Author', 'Status', 'Genre'):
            if key in label:
                fields[key.lower()] = value
    return fields


def extract_novel_metadata(page: Union[str, bytes, BeautifulSoup], url: str) -> NovelMetadata:
    """从小说主页提取元数据，找不到的字段为空字符串"""
    soup = page if isinstance(page, BeautifulSoup) else load_dom(page)

    title, cover = _extract_title_and_cover(soup, url)
    summary_el = soup.select_one('div[class*="desc-text"], div[class*="novel-summary"]')
    summary = summary_el.get_text().strip() if summary_el is not None else ''
    info = _extract_info_rows(soup)

    return NovelMetadata(
        url=url,
        title=title,
        author=info.get('author', ''),
        summary=summary,
        cover=cover,
        status=info.get('status', ''),
        genre=info.get('genre', ''),
    )
