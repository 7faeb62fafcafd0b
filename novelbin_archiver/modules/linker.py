"""相对链接 -> 绝对链接"""
from __future__ import annotations

import re
from urllib.parse import urlsplit

__all__ = ['resolve_url', 'has_scheme']

_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*:')
_DOT_SEGMENT = re.compile(r'/(?:\./)+')
_PARENT_SEGMENT = re.compile(r'/(?!\.\./)[^/]+/\.\./')


def has_scheme(url: str) -> bool:
    return bool(_SCHEME.match(url))


def _collapse_dots(path: str) -> str:
    """折叠 ./ 并逐个消除 segment/../"""
    if path.endswith(('/.', '/..')):
        path += '/'
    path = _DOT_SEGMENT.sub('/', path)
    while _PARENT_SEGMENT.search(path):
        path = _PARENT_SEGMENT.sub('/', path, count=1)
    return path


def resolve_url(base_url: str, relative_url: str) -> str:
    """
    以页面自身URL为基准，把抓取到的相对链接解析为绝对链接。

    规则依次为：已带协议 -> 原样返回；//host 形式 -> 补上基准协议；
    /path 形式 -> 基准的协议+主机+端口；其余按基准目录拼接并处理 ./ 与 ../。
    基准URL无法解析时原样返回相对链接，不抛异常。
    """
    rel = (relative_url or '').strip()
    if not rel:
        return base_url
    if has_scheme(rel):
        return rel

    try:
        parts = urlsplit(base_url or '')
    except ValueError:
        return rel
    if not parts.scheme or not parts.netloc:
        return rel

    scheme = parts.scheme
    if rel.startswith('//'):
        return f"{scheme}:{rel}"

    # 主机+端口（去掉用户信息）
    authority = parts.netloc.rpartition('@')[2]
    origin = f"{scheme}://{authority}"

    if rel.startswith('/'):
        return origin + rel

    path = parts.path or '/'
    if rel.startswith('#'):
        query = f"?{parts.query}" if parts.query else ''
        return f"{origin}{path}{query}{rel}"
    if rel.startswith('?'):
        return f"{origin}{path}{rel}"

    directory = path[:path.rfind('/') + 1]
    # 查询串与锚点不参与路径归一化
    cut = min((i for i in (rel.find('?'), rel.find('#')) if i != -1), default=len(rel))
    joined = _collapse_dots(directory + rel[:cut])
    return origin + joined + rel[cut:]
