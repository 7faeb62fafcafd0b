import time
from typing import Callable, List, Optional

from rich.markup import escape

from .exceptions import InvalidRangeError, TransportError
from .models import ArchiveOptions, CatalogResult, ChapterContent, ChapterRecord, Group, NovelMetadata
from .utils import print_chapter_summary, print_status_table, safe_print
from .modules import (
    HostGuard,
    HttpFetcher,
    SiteDetector,
    Throttle,
    download_chapter_range,
    fetch_and_extract_chapter as content_fetch_and_extract,
    paginate as paginator_paginate,
    parse_chapter_range,
    resolve_chapter_list as catalog_resolve,
    resolve_index_range as utils_resolve_range,
    resolve_output_dir as builder_output_dir,
    show_completion_stats as downloader_stats,
    write_groups as builder_write_groups,
)


class NovelArchiver:
    """NovelBin 小说归档器：解析目录 -> 逐章抓取 -> 分组 -> 写出 A5 文档"""

    def __init__(
        self,
        options: Optional[ArchiveOptions] = None,
        fetcher: Optional[HttpFetcher] = None,
        detector: Optional[SiteDetector] = None,
        guard: Optional[HostGuard] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.options = options or ArchiveOptions()
        self.detector = detector or SiteDetector()
        if self.options.profiles_path:
            self.detector.load_profiles(self.options.profiles_path)
        self.fetcher = fetcher or HttpFetcher(
            connect_timeout=self.options.connect_timeout,
            read_timeout=self.options.read_timeout,
        )
        self.guard = guard or HostGuard(self.detector.allowed_hosts)
        self.throttle = Throttle(self.options.throttle, sleep)
        self.settle = Throttle(self.options.settle_delay, sleep)

        # 章节列表只由本对象写入
        self.metadata: Optional[NovelMetadata] = None
        self.chapters: List[ChapterRecord] = []

    def resolve_chapter_list(self, novel_url: str) -> CatalogResult:
        """抓取小说主页，解析元数据与章节列表（不抓取任何章节正文）"""
        self.guard.check_url(novel_url)
        profile = self.detector.detect_site(novel_url)

        safe_print(f"📖 Fetching novel page: [blue]{escape(novel_url)}[/blue]")
        try:
            novel_html = self.fetcher.fetch(novel_url)
        except TransportError as e:
            raise TransportError(f"fetching novel page: {e}", url=novel_url, status_code=e.status_code) from e

        result = catalog_resolve(novel_html, novel_url, self.fetcher, self.throttle, profile)
        self.metadata = result.metadata
        self.chapters = result.chapters
        return result

    def fetch_and_extract_chapter(self, chapter_url: str) -> ChapterContent:
        """限速后抓取单个章节页面并提取标题与正文"""
        # 目录里的链接可能指向站外
        self.guard.check_url(chapter_url)
        profile = self.detector.detect_site(chapter_url, silent=True)
        return content_fetch_and_extract(chapter_url, self.fetcher, self.throttle, profile)

    def paginate(self, chapters: List[ChapterRecord], group_size: int, start_number: int = 1) -> List[Group]:
        return paginator_paginate(chapters, group_size, start_number)

    def download_range(self, start: Optional[int] = None, end: Optional[int] = None, show_progress: bool = True):
        """抓取 [start, end] 范围内的章节，返回 (起始索引, 结束索引, 实际抓取数)"""
        total = len(self.chapters)
        start_idx, end_idx = utils_resolve_range(total, start, end)
        if start_idx >= total:
            raise InvalidRangeError(f"Start chapter {start} is beyond the last chapter ({total}).")

        safe_print(
            f"⏬ Fetching chapters {start_idx + 1} to {end_idx + 1} "
            f"(throttle: {self.throttle.seconds}s)"
        )
        fetched = download_chapter_range(
            self.chapters,
            start_idx,
            end_idx,
            fetch_func=self.fetch_and_extract_chapter,
            settle=self.settle,
            show_progress=show_progress,
        )
        return start_idx, end_idx, fetched

    def archive(self, novel_url: str, base_dir: Optional[str] = None, show_progress: bool = True) -> List[str]:
        """完整流程，返回写出的文件路径列表"""
        options = self.options
        result = self.resolve_chapter_list(novel_url)
        metadata = result.metadata

        print_status_table({
            "Title": metadata.title or "(unknown)",
            "Author": metadata.author or "(unknown)",
            "Status": metadata.status or "(unknown)",
            "Genre": metadata.genre or "(unknown)",
            "Strategy": result.strategy,
        })

        start, end = options.start, options.end
        if options.chapter_range:
            start, end = parse_chapter_range(options.chapter_range, len(self.chapters))

        start_idx, end_idx, fetched = self.download_range(start, end, show_progress)
        selected = self.chapters[start_idx:end_idx + 1]
        print_chapter_summary(selected, f"{start_idx + 1}-{end_idx + 1}")

        groups = self.paginate(selected, options.group_size, start_idx + 1)

        name = options.out or metadata.title or 'novel'
        output_dir = builder_output_dir(name, options.download, base_dir)
        files = builder_write_groups(metadata, groups, output_dir, name)

        downloader_stats(fetched, len(selected), files, str(output_dir))
        safe_print(f"✅ All parts saved in: {escape(str(output_dir))}")
        return files
