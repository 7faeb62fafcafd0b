"""逐章顺序下载、进度显示等相关逻辑"""
from __future__ import annotations

from typing import Callable, List, Optional

from rich.progress import (BarColumn, Progress, TextColumn,
                           TimeElapsedColumn, TimeRemainingColumn)
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..exceptions import TransportError
from ..models import ChapterContent, ChapterRecord
from ..utils import console, safe_print
from .fetcher import Throttle

__all__ = [
    'download_chapter_range',
    'show_completion_stats',
    'EMPTY_CHAPTER_HTML',
]

EMPTY_CHAPTER_HTML = '<p><em>(empty chapter)</em></p>'

FetchFunc = Callable[[str], ChapterContent]


def download_chapter_range(
    chapters: List[ChapterRecord],
    start_idx: int,
    end_idx: int,
    fetch_func: FetchFunc,
    settle: Optional[Throttle] = None,
    show_progress: bool = True,
) -> int:
    """
    顺序抓取 chapters[start_idx..end_idx] 中尚无正文的章节，原地写入正文。

    不并发：每次请求前的限速由 fetch_func 负责，每章成功后再由 settle 停顿。
    某章抓取失败时抛出 TransportError（附带章节序号），由调用方决定是否中止。
    返回本次实际抓取的章节数。
    """
    pending = [i for i in range(start_idx, end_idx + 1) if not chapters[i].is_fetched]
    if not pending:
        return 0

    progress = Progress(
        TextColumn("[bold blue]Downloading", justify="right"),
        BarColumn(bar_width=None),
        "[progress.percentage]{task.percentage:>3.1f}%",
        "•",
        TextColumn("[green]{task.completed} of {task.total}"),
        "•",
        TimeElapsedColumn(),
        "•",
        TimeRemainingColumn(),
        transient=False,
        console=console,
        disable=not show_progress,
    )

    fetched = 0
    with progress:
        task = progress.add_task("chapters", total=end_idx - start_idx + 1)
        progress.advance(task, advance=(end_idx - start_idx + 1) - len(pending))

        for i in pending:
            chapter = chapters[i]
            progress.console.print(f"[dim][{i + 1}][/dim] {escape(chapter.name or f'Chapter {i + 1}')}")
            try:
                result = fetch_func(chapter.url)
            except TransportError as e:
                raise TransportError(
                    f"fetching chapter {i + 1} ({chapter.url}): {e}",
                    url=chapter.url,
                    status_code=e.status_code,
                ) from e

            chapter.set_content(result.content or EMPTY_CHAPTER_HTML, result.title or None)
            fetched += 1
            progress.advance(task, advance=1)
            if settle is not None:
                settle.wait()

    return fetched


def show_completion_stats(fetched: int, total: int, files: List[str], output_dir: str):
    """显示归档完成后的统计信息"""
    stats_table = Table(title="📊 Archive summary", show_header=False, box=None)
    stats_table.add_column(style="green")
    stats_table.add_column(style="bold magenta")

    stats_table.add_row("✅ Chapters fetched:", f"{fetched}")
    stats_table.add_row("📚 Chapters archived:", f"{total}")
    stats_table.add_row("📄 Parts written:", f"{len(files)}")
    stats_table.add_row("💾 Location:", f"[cyan]{escape(str(output_dir))}[/cyan]")

    panel = Panel(
        stats_table,
        title="🎉 [bold green]Done[/bold green] 🎉",
        expand=False,
        border_style="green"
    )
    console.print(panel)
    if not files:
        safe_print("⚠️ [yellow]No files were written.[/yellow]")
