from __future__ import annotations

# 功能子模块汇总
from .utils import (
    sanitize_filename,
    parse_chapter_range,
    resolve_index_range,
)
from .dom import load_dom, remove_nodes, inner_html, node_text
from .linker import resolve_url
from .sanitizer import sanitize_fragment
from .fetcher import HttpFetcher, Throttle, is_blocked_response
from .content import (
    locate_content,
    normalize_chapter_title,
    score_node,
    fetch_and_extract_chapter,
)
from .metadata import extract_novel_metadata
from .catalog import (
    extract_embedded_chapters,
    fetch_archive_chapters,
    scrape_static_chapters,
    resolve_chapter_list,
)
from .paginator import paginate
from .downloader import download_chapter_range, show_completion_stats
from .builder import build_a5_html, resolve_output_dir, write_groups
from .site_detector import SiteDetector, novelbin_profile
from .security_checker import HostGuard

__all__ = [
    'sanitize_filename',
    'parse_chapter_range',
    'resolve_index_range',

    'load_dom',
    'remove_nodes',
    'inner_html',
    'node_text',
    'resolve_url',
    'sanitize_fragment',

    'HttpFetcher',
    'Throttle',
    'is_blocked_response',

    'locate_content',
    'normalize_chapter_title',
    'score_node',
    'fetch_and_extract_chapter',

    'extract_novel_metadata',

    'extract_embedded_chapters',
    'fetch_archive_chapters',
    'scrape_static_chapters',
    'resolve_chapter_list',

    'paginate',

    'download_chapter_range',
    'show_completion_stats',

    'build_a5_html',
    'resolve_output_dir',
    'write_groups',

    'SiteDetector',
    'novelbin_profile',
    'HostGuard',
]
