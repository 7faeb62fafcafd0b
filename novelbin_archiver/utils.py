from threading import Lock
from typing import Dict, List
import string
from urllib.parse import urlparse

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.table import Table
from rich import box

__all__ = [
    'console',
    'safe_print',
    'set_quiet',
    'print_banner',
    'print_status_table',
    'print_chapter_summary',
    'clean_and_validate_url',
]

print_lock = Lock()

# 日志统一输出到 stderr，stdout 留给结果
console = Console(stderr=True)


def set_quiet(quiet: bool = True):
    """静默模式：屏蔽所有控制台输出"""
    console.quiet = quiet


def safe_print(*args, **kwargs):
    """线程安全的打印函数"""
    with print_lock:
        message = ' '.join(str(arg) for arg in args)
        console.print(message, **kwargs)


def print_banner():
    """打印标题横幅"""
    title = Text("📚 NovelBin Archiver v2.1", style="bold cyan")
    subtitle = Text("A5 print-ready novel archives, split into parts", style="italic yellow")
    console.print(Panel(
        Text.assemble(title, "\n", subtitle),
        box=box.DOUBLE,
        border_style="bright_blue",
        padding=(1, 2)
    ))


def print_status_table(info: Dict[str, str]):
    """打印状态信息表格"""
    table = Table(box=box.ROUNDED, border_style="green")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")

    for key, value in info.items():
        table.add_row(key, escape(value))

    console.print(table)


def print_chapter_summary(chapters: List, range_info: str = ""):
    """打印章节摘要信息"""
    info_text = f"📚 Chapters: [bold green]{len(chapters)}[/bold green]"
    if range_info:
        info_text += f"\n📖 Range: [bold yellow]{range_info}[/bold yellow]"

    if chapters:
        info_text += f"\n🔖 First: [italic]{escape(chapters[0].display_name)}[/italic]"
        info_text += f"\n🔖 Last: [italic]{escape(chapters[-1].display_name)}[/italic]"

    console.print(Panel(
        info_text,
        title="📋 Chapter list",
        border_style="blue",
        box=box.ROUNDED
    ))


def clean_and_validate_url(url: str) -> str:
    """
    清理和验证URL，移除异常字符并确保格式正确

    Args:
        url: 原始URL字符串

    Returns:
        str: 清理后的有效URL

    Raises:
        ValueError: 如果URL格式无效
    """
    if not url:
        raise ValueError("URL must not be empty")

    url = url.strip()

    # 复制粘贴时常混入的括号、引号
    abnormal_chars = ['【', '】', '「', '」', '《', '》', '（', '）', '<', '>', '"', "'"]
    for char in abnormal_chars:
        url = url.replace(char, '')

    # 移除不可见字符和控制字符
    printable_chars = set(string.printable) - set('\t\n\r\x0b\x0c')
    url = ''.join(char for char in url if char in printable_chars).strip()

    if not url.startswith(('http://', 'https://')):
        if url.startswith('www.') or '.' in url:
            url = 'https://' + url
        else:
            raise ValueError(f"Invalid URL: {url}")

    parsed = urlparse(url)
    if not parsed.netloc:
        raise ValueError(f"URL has no host: {url}")

    return url
