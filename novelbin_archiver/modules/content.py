"""章节正文定位、标题提取与清洗"""
from __future__ import annotations

import re
from typing import List, Optional

from bs4 import Tag

from ..models import CandidateNode, ChapterContent, SiteProfile
from .dom import inner_html, load_dom, node_text, remove_nodes, select_first
from .fetcher import HttpFetcher, Throttle
from .sanitizer import sanitize_fragment
from .site_detector import novelbin_profile

__all__ = [
    'locate_content',
    'normalize_chapter_title',
    'score_node',
    'fetch_and_extract_chapter',
]

PARAGRAPH_WEIGHT = 500
MIN_TEXT_LENGTH = 100

# "Chapter 12: Chapter 12: xxx" -> "Chapter 12: xxx"
_DUPLICATE_PREFIX = re.compile(
    r'^(Chapter\s+\d+\s*[:\-—|]\s*)(Chapter\s+\d+\s*[:\-—|])', re.I
)
_WHITESPACE = re.compile(r'\s+')


def normalize_chapter_title(title: str) -> str:
    """折叠空白，并把重复的 "Chapter N:" 前缀合并为一个"""
    title = _WHITESPACE.sub(' ', title or '').strip()
    return _DUPLICATE_PREFIX.sub(r'\2', title).strip()


def score_node(node: Tag) -> int:
    """得分 = 文本长度 + 500 × 段落数，偏向少量长段落"""
    text = node.get_text().strip()
    return len(text) + PARAGRAPH_WEIGHT * len(node.find_all('p'))


def _extract_title(node: Tag, profile: SiteProfile) -> Optional[str]:
    """按 h1 -> h4 的优先级取标题，并从节点中删除标题元素"""
    for selector in profile.title_selectors:
        heading = node.select_one(selector)
        if heading is None:
            continue
        title = node_text(heading)
        heading.decompose()
        return normalize_chapter_title(title) if profile.dedupe_titles else title
    return None


def _prepare_candidate(node: Tag, profile: SiteProfile) -> CandidateNode:
    for selector in profile.candidate_cleanup_selectors:
        remove_nodes(node, selector)
    title = _extract_title(node, profile)
    return CandidateNode(node=node, score=score_node(node), extracted_title=title)


def _best_candidate(soup, profile: SiteProfile) -> Optional[CandidateNode]:
    best: Optional[CandidateNode] = None
    best_score = 0
    for selector in profile.candidate_selectors:
        nodes: List[Tag] = soup.select(selector)
        for node in nodes:
            if node.decomposed:
                continue
            candidate = _prepare_candidate(node, profile)
            text_length = len(node.get_text().strip())
            if text_length > MIN_TEXT_LENGTH and candidate.score > best_score:
                # 入选时立即序列化
                candidate.html = inner_html(node)
                best, best_score = candidate, candidate.score
        # 第一个命中的选择器即为结果，后面更宽泛的选择器只作兜底
        if best_score > 0:
            break
    return best


def locate_content(page_html, page_url: str, profile: Optional[SiteProfile] = None) -> ChapterContent:
    """
    从完整的章节页面中找出正文容器并提取标题。

    依次尝试规则表中的候选选择器，为每个候选节点打分，取得分最高者；
    全部落空时退回整个 body（仅删除 script/style/nav/footer）。
    正文最终经过 sanitize_fragment 清洗。页面结构缺失时返回空字符串，不抛异常。
    """
    profile = profile or novelbin_profile()
    soup = load_dom(page_html)

    best = _best_candidate(soup, profile)
    title = ''
    if best is not None:
        content_html = best.html
        title = best.extracted_title or ''
    else:
        content_html = ''
        body = soup.body
        if body is not None:
            for selector in profile.body_fallback_cleanup:
                remove_nodes(body, selector)
            content_html = inner_html(body)

    if not title:
        fallback = select_first(soup, profile.title_fallback_selectors)
        if fallback is not None:
            title = node_text(fallback)
            if profile.dedupe_titles:
                title = normalize_chapter_title(title)

    content = sanitize_fragment(content_html, page_url, profile.boilerplate_rules)
    return ChapterContent(title=title, content=content)


def fetch_and_extract_chapter(
    chapter_url: str,
    fetcher: HttpFetcher,
    throttle: Throttle,
    profile: Optional[SiteProfile] = None,
) -> ChapterContent:
    """限速后抓取章节页面并提取正文；网络错误直接抛出 TransportError"""
    throttle.wait()
    raw = fetcher.fetch(chapter_url)
    return locate_content(raw, chapter_url, profile)
