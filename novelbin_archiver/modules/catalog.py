"""目录页相关工具/逻辑：内嵌章节 -> AJAX 章节归档 -> 静态链接，三种策略依次尝试"""
from __future__ import annotations

import dataclasses
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlencode, urlparse

from bs4 import BeautifulSoup
from rich.markup import escape

from ..exceptions import NoChaptersFoundError, TransportError
from ..models import CatalogResult, ChapterRecord, ChapterRef, SiteProfile
from ..utils import safe_print
from .content import normalize_chapter_title
from .dom import inner_html, load_dom, node_text, remove_nodes
from .fetcher import HttpFetcher, Throttle
from .linker import resolve_url
from .metadata import extract_novel_metadata
from .sanitizer import sanitize_fragment
from .site_detector import novelbin_profile

__all__ = [
    'extract_embedded_chapters',
    'fetch_archive_chapters',
    'scrape_static_chapters',
    'resolve_chapter_list',
    'archive_url',
]

AJAX_HEADERS = {'X-Requested-With': 'XMLHttpRequest'}

Strategy = Callable[[], List[ChapterRecord]]


def extract_embedded_chapters(soup: BeautifulSoup, novel_url: str, profile: SiteProfile) -> List[ChapterRecord]:
    """
    部分小说把所有章节直接嵌在主页中。
    每个章节容器既是引用也是内容来源，不需要再逐章请求。
    """
    if not profile.embedded_selector:
        return []

    chapters: List[ChapterRecord] = []
    base = novel_url.split('#', 1)[0]
    for index, node in enumerate(soup.select(profile.embedded_selector), start=1):
        title = ''
        title_el = node.select_one(profile.embedded_title_selector) if profile.embedded_title_selector else None
        if title_el is not None:
            title = node_text(title_el)
            if profile.dedupe_titles:
                title = normalize_chapter_title(title)

        content_node = None
        if profile.embedded_content_selector:
            content_node = node.select_one(profile.embedded_content_selector)
        if content_node is None:
            content_node = node
        if profile.embedded_cleanup_selector:
            remove_nodes(node, profile.embedded_cleanup_selector)

        content = sanitize_fragment(inner_html(content_node), novel_url, profile.boilerplate_rules)
        # 同页章节用锚点区分，保证 URL 唯一
        anchor = node.get('id') or f"chapter-{index}"
        record = ChapterRecord(ChapterRef(name=title or 'Chapter', url=f"{base}#{anchor}"))
        record.set_content(content, title or None)
        chapters.append(record)
    return chapters


def archive_url(profile: SiteProfile, novel_id: str) -> str:
    return f"{profile.base_url.rstrip('/')}{profile.archive_path}?{urlencode({'novelId': novel_id})}"


def find_novel_id(soup: BeautifulSoup, profile: SiteProfile) -> Optional[str]:
    if not profile.novel_id_selector:
        return None
    el = soup.select_one(profile.novel_id_selector)
    if el is None:
        return None
    value = el.get(profile.novel_id_attribute)
    return value.strip() if value and value.strip() else None


def parse_archive_list(archive_html, page_url: str, profile: SiteProfile) -> List[ChapterRecord]:
    """解析章节归档接口返回的 <ul class="list-chapter"> 列表"""
    soup = load_dom(archive_html)
    chapters: List[ChapterRecord] = []
    for li in soup.select(profile.archive_item_selector):
        link = li.find('a')
        if link is None:
            continue
        href = (link.get('href') or '').strip()
        if not href:
            continue
        span = li.find('span')
        name = node_text(span) if span is not None else node_text(link)
        chapters.append(ChapterRecord(ChapterRef(name=name, url=resolve_url(page_url, href))))
    return chapters


def fetch_archive_chapters(
    soup: BeautifulSoup,
    profile: SiteProfile,
    fetcher: HttpFetcher,
    throttle: Throttle,
) -> List[ChapterRecord]:
    """通过站内 AJAX 接口获取章节列表；请求失败只记录日志，不向上抛出"""
    novel_id = find_novel_id(soup, profile)
    if not novel_id or not profile.archive_path:
        return []

    safe_print(f"🔗 Fetching chapters via AJAX (novelId: {escape(novel_id)})")
    url = archive_url(profile, novel_id)
    try:
        throttle.wait()
        archive_html = fetcher.fetch(url, headers=AJAX_HEADERS)
    except TransportError as e:
        safe_print(f"⚠️ [yellow]AJAX fallback failed: {escape(str(e))}[/yellow]")
        return []
    return parse_archive_list(archive_html, url, profile)


def scrape_static_chapters(soup: BeautifulSoup, novel_url: str, profile: SiteProfile) -> List[ChapterRecord]:
    """直接从页面抓取章节链接，选择器由具体到宽泛，第一个有结果的即停止"""
    for selector in profile.static_link_selectors:
        chapters: List[ChapterRecord] = []
        seen = set()
        for link in soup.select(selector):
            href = (link.get('href') or '').strip()
            text = node_text(link)
            if not href or not text:
                continue
            absolute_url = resolve_url(novel_url, href)
            if absolute_url in seen:
                continue
            seen.add(absolute_url)
            chapters.append(ChapterRecord(ChapterRef(name=text, url=absolute_url)))
        if chapters:
            return chapters
    return []


def resolve_chapter_list(
    novel_html,
    novel_url: str,
    fetcher: HttpFetcher,
    throttle: Throttle,
    profile: Optional[SiteProfile] = None,
) -> CatalogResult:
    """
    从小说主页解析元数据与有序章节列表。

    依次尝试内嵌、AJAX 归档、静态链接三种策略，第一个返回非空列表的策略胜出；
    全部为空时抛出 NoChaptersFoundError。
    """
    profile = profile or novelbin_profile()
    if not profile.base_url:
        profile = _with_base_url(profile, novel_url)

    soup = load_dom(novel_html)
    metadata = extract_novel_metadata(soup, novel_url)

    strategies: List[Tuple[str, Strategy]] = [
        ('embedded', lambda: extract_embedded_chapters(soup, novel_url, profile)),
        ('archive', lambda: fetch_archive_chapters(soup, profile, fetcher, throttle)),
        ('static', lambda: scrape_static_chapters(soup, novel_url, profile)),
    ]

    for name, strategy in strategies:
        if name == 'static':
            safe_print("🔍 Scraping chapter links from page...")
        chapters = strategy()
        if chapters:
            if name == 'embedded':
                safe_print(f"📦 Using embedded chapters ({len(chapters)})")
            safe_print(f"✅ [green]Found {len(chapters)} chapters ({name})[/green]")
            return CatalogResult(metadata=metadata, chapters=chapters, strategy=name)

    safe_print(f"❌ [bold red]No chapters found at {escape(novel_url)}[/bold red]")
    raise NoChaptersFoundError(novel_url)


def _with_base_url(profile: SiteProfile, novel_url: str) -> SiteProfile:
    parsed = urlparse(novel_url)
    return dataclasses.replace(profile, base_url=f"{parsed.scheme}://{parsed.netloc}")
