"""HTML 片段清洗：去脚本、去样板、补全链接、精简属性"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from rich.markup import escape

from ..models import SelectorRule
from ..utils import safe_print
from .dom import inner_html, load_dom, remove_comments, remove_nodes
from .linker import resolve_url
from .site_detector import DEFAULT_BOILERPLATE_RULES

__all__ = ['sanitize_fragment', 'ALLOWED_ATTRIBUTES']

ALLOWED_ATTRIBUTES = ('href', 'src', 'alt', 'title')
NEVER_CONTENT = 'script, style, noscript'
LINK_ATTRIBUTES = ('src', 'href')

# 这些协议的链接保持原样
_KEEP_AS_IS = re.compile(r'^(https?|data|mailto|tel|javascript):', re.I)


def _apply_rules(root, rules: Iterable[SelectorRule]):
    for rule in rules:
        if rule.action != 'remove':
            safe_print(f"⚠️ [yellow]Unknown rule action '{escape(str(rule.action))}' for {escape(rule.selector)}[/yellow]")
            continue
        remove_nodes(root, rule.selector)


def sanitize_fragment(
    fragment_html: str,
    base_url: str = "",
    rules: Optional[Iterable[SelectorRule]] = None,
) -> str:
    """
    清洗章节正文片段。

    步骤有先后依赖：
    1. 删除 script/style/noscript 与注释；
    2. 按规则表删除样板容器（面包屑、导航、按钮、评论、分享……）；
    3. src/href 中的相对链接以 base_url 解析为绝对链接；
    4. 只保留 href/src/alt/title 属性；
    5. 返回 body 的内部 HTML；只有空输入才没有 body，此时原样返回。
    """
    if rules is None:
        rules = DEFAULT_BOILERPLATE_RULES

    # 仅含 script/style/meta 的片段也要落在 body 中
    soup = load_dom(f"<body>{fragment_html}") if fragment_html else load_dom(fragment_html)

    remove_nodes(soup, NEVER_CONTENT)
    remove_comments(soup)

    _apply_rules(soup, rules)

    if base_url:
        for el in soup.select('[src], [href]'):
            for attr in LINK_ATTRIBUTES:
                value = el.get(attr)
                if value and not _KEEP_AS_IS.match(value):
                    el[attr] = resolve_url(base_url, value)

    for el in soup.find_all(True):
        kept = {name: el.attrs[name] for name in ALLOWED_ATTRIBUTES if name in el.attrs}
        el.attrs = kept

    body = soup.body
    return inner_html(body) if body is not None else fragment_html
