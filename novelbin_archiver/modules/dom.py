"""HTML 解析与节点操作工具"""
from __future__ import annotations

import re
import warnings
from typing import Optional, Union

from bs4 import BeautifulSoup, Comment, Tag
from bs4 import MarkupResemblesLocatorWarning, XMLParsedAsHTMLWarning
from bs4.builder import ParserRejectedMarkup

__all__ = [
    'load_dom',
    'remove_nodes',
    'remove_comments',
    'inner_html',
    'node_text',
    'select_first',
]

_WHITESPACE = re.compile(r'\s+')


def load_dom(markup: Union[str, bytes, None]) -> BeautifulSoup:
    """
    将任意 HTML 解析为可查询的文档树。

    使用 lxml (libxml2) 解析器，对残缺/畸形的 HTML 保持宽容；
    字节输入一律按 UTF-8 解码，忽略页面声明的编码。
    任何输入都不会抛出异常，最坏情况下返回一棵空树。
    """
    if markup is None:
        markup = ""
    with warnings.catch_warnings():
        # 纯文本、URL 样式或 XML 输入都当作 HTML 处理
        warnings.simplefilter('ignore', MarkupResemblesLocatorWarning)
        warnings.simplefilter('ignore', XMLParsedAsHTMLWarning)
        if isinstance(markup, bytes):
            markup = markup.decode('utf-8', errors='replace')
        try:
            return BeautifulSoup(markup, 'lxml')
        except ParserRejectedMarkup:
            # libxml2 拒绝的输入退回内置解析器
            return BeautifulSoup(markup, 'html.parser')


def remove_nodes(context: Tag, selector: str) -> int:
    """删除 context 下所有匹配选择器的节点，返回删除数量"""
    removed = 0
    for node in context.select(selector):
        # 祖先节点已被删除时跳过
        if node.decomposed:
            continue
        node.decompose()
        removed += 1
    return removed


def remove_comments(context: Tag) -> None:
    for comment in context.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()


def inner_html(node: Optional[Tag]) -> str:
    """序列化节点的全部子节点（相当于 JS 的 innerHTML）"""
    if node is None:
        return ""
    return node.decode_contents()


def node_text(node: Optional[Tag]) -> str:
    """取节点文本，折叠空白"""
    if node is None:
        return ""
    return _WHITESPACE.sub(' ', node.get_text()).strip()


def select_first(context: Tag, selectors) -> Optional[Tag]:
    """按优先级依次尝试选择器，返回第一个命中的节点"""
    if isinstance(selectors, str):
        selectors = [selectors]
    for selector in selectors:
        if not selector:
            continue
        node = context.select_one(selector)
        if node is not None:
            return node
    return None
