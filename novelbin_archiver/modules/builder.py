"""A5 排版 HTML 生成、分卷文件写出"""
from __future__ import annotations

import html
import os
import re
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from filelock import FileLock
from rich.markup import escape

from ..models import ChapterRecord, Group, NovelMetadata
from ..utils import safe_print
from .utils import sanitize_filename

__all__ = [
    'A5_CSS',
    'build_a5_html',
    'ensure_chapter_numbering',
    'resolve_output_dir',
    'write_groups',
]

A5_CSS = """
@page { size: A5; margin: 18mm; }
html { font-size: 16px; }
body {
    font-family: "Libre Baskerville", "Georgia", "Times New Roman", serif;
    color: #000;
    background: #fff;
    margin: 0;
    padding: 0;
    line-height: 1.5;
    -webkit-print-color-adjust: exact;
}
.book { max-width: 148mm; margin: 0 auto; padding: 12mm; box-sizing: border-box; }
header { text-align: center; margin-bottom: 12mm; }
h1 { font-size: 1.875rem; margin: 0 0 0.375rem 0; font-weight: 700; letter-spacing: -0.02em; }
h2.author { font-size: 0.9375rem; margin: 0 0 0.625rem 0; font-weight: 400; color: #222; font-style: italic; }
.summary { font-size: 0.8125rem; color: #333; margin-bottom: 0.625rem; line-height: 1.4; }
hr.sep { border: none; border-top: 1px solid #ccc; margin: 0.625rem 0; }
.chapter { page-break-inside: avoid; margin-bottom: 0.75rem; }
.chapter + .chapter { margin-top: 0.5rem; }
.chapter-title { font-size: 0.9375rem; margin: 0.625rem 0 0.375rem 0; font-weight: 600; color: #111; }
.chapter-content { font-size: 0.9375rem; line-height: 1.6; text-align: justify; color: #111; hyphens: auto; }
.chapter-content p { margin: 0 0 0.625rem 0; text-indent: 1.25rem; }
.chapter-content p:first-child { text-indent: 0; }
footer { text-align: center; font-size: 0.75rem; color: #777; margin-top: 14mm; font-style: italic; }
"""

NO_CONTENT_HTML = '<p><em>(no content)</em></p>'

# 清洗阶段漏掉的导航链接
_LEFTOVER_NAV = re.compile(
    r'<a[^>]*>\s*(?:Prev|Next|Comments?|Report|Home|Novel|Table of Contents?)\s*</a>',
    re.I | re.S,
)
_CHAPTER_NUMBER = re.compile(r'Chapter\s+\d+', re.I)


def ensure_chapter_numbering(chapters: Sequence[ChapterRecord], start_number: int) -> List[str]:
    """名称里没有 "Chapter N" 的章节，用全局章节号生成标题"""
    titles = []
    for offset, chapter in enumerate(chapters):
        name = (chapter.display_name or '').strip()
        if not _CHAPTER_NUMBER.search(name):
            name = f"Chapter {start_number + offset}"
        titles.append(name)
    return titles


def _escape(text: str) -> str:
    return html.escape(text or '', quote=True)


def build_a5_html(metadata: NovelMetadata, group: Group, today: Optional[date] = None) -> str:
    """生成一个分卷的完整 HTML 文档（内嵌 A5 打印样式）"""
    title = _escape(metadata.title or 'Untitled Novel')
    author = _escape(metadata.author)
    summary = _escape(metadata.summary).replace('\n', '<br>\n')
    stamp = (today or date.today()).isoformat()

    parts = [
        "<!doctype html>\n<html lang='en'>\n<head>\n<meta charset='utf-8'>\n",
        "<meta name='viewport' content='width=device-width,initial-scale=1'>\n",
        f"<title>{title}</title>\n<style>{A5_CSS}</style>\n</head>\n<body>\n<div class='book'>\n",
        f"<header>\n  <h1>{title}</h1>\n  <h2 class='author'>{author}</h2>\n",
        f"  <div class='summary'>{summary}</div>\n  <hr class='sep'>\n</header>\n",
    ]

    headings = ensure_chapter_numbering(group.chapters, group.start)
    for offset, (chapter, heading) in enumerate(zip(group.chapters, headings)):
        number = group.start + offset
        content = chapter.content if chapter.content else NO_CONTENT_HTML
        content = _LEFTOVER_NAV.sub('', content)
        parts.append(f"<article class='chapter' id='ch-{number}'>\n")
        parts.append(f"  <h3 class='chapter-title'>{_escape(heading)}</h3>\n")
        parts.append(f"  <div class='chapter-content'>{content}</div>\n</article>\n<hr class='sep'>\n")

    parts.append(f"<footer>Archived with NovelBin Archiver • {stamp}</footer>\n</div>\n</body>\n</html>\n")
    return ''.join(parts)


def resolve_output_dir(folder_name: str, download: bool = False, base_dir: Optional[str] = None) -> Path:
    """输出目录：当前目录，或 --download 时的 Termux 下载目录（可写时）"""
    base = Path(base_dir) if base_dir else Path.cwd()
    if download:
        shared = Path.home() / 'storage' / 'shared' / 'Download'
        if shared.is_dir() and os.access(shared, os.W_OK):
            base = shared
        else:
            safe_print(f"⚠️ [yellow]{escape(str(shared))} is not writable, saving to {escape(str(base))}[/yellow]")
    return base / sanitize_filename(folder_name)


def write_groups(
    metadata: NovelMetadata,
    groups: Sequence[Group],
    output_dir: Path,
    file_base: str,
    today: Optional[date] = None,
) -> List[str]:
    """每个分组写成一个 `书名(起-止).html` 文件，返回写出的路径列表"""
    output_dir.mkdir(parents=True, exist_ok=True)
    safe_base = sanitize_filename(file_base)

    written = []
    for group in groups:
        path = output_dir / f"{safe_base}({group.start}-{group.end}).html"
        lock_path = f"{path}.lock"
        document = build_a5_html(metadata, group, today)
        with FileLock(lock_path, timeout=10):
            path.write_text(document, encoding='utf-8')
        # 锁文件用完即删
        try:
            os.remove(lock_path)
        except OSError:
            pass
        safe_print(f"✅ Saved: {escape(str(path))}")
        written.append(str(path))
    return written
