"""archiver 专用工具函数"""
from __future__ import annotations

import re
from typing import Optional, Tuple

from ..exceptions import InvalidRangeError

__all__ = [
    'sanitize_filename',
    'parse_chapter_range',
    'resolve_index_range',
]


def sanitize_filename(text: str) -> str:
    """清理文本作为安全的文件名 (跨平台字符过滤)"""
    name = (text or '').strip()
    name = re.sub(r'[<>:"/\\|?*\x00-\x1F]', '', name)
    name = re.sub(r'\s+', ' ', name)
    # 避免超出文件系统路径长度限制
    name = name[:240].strip()
    return name or 'novel'


def parse_chapter_range(range_input: str, total_chapters: int) -> Tuple[int, int]:
    """
    解析用户输入的章节范围，如 '1-10', '5:', ':20', '100+', '8'。
    返回一个 (start, end) 的元组（基于1的索引）。
    """
    range_input = (range_input or '').strip()
    if not range_input:
        return 1, total_chapters

    if range_input.isdigit():
        val = int(range_input)
        if 1 <= val <= total_chapters:
            return val, val
        raise InvalidRangeError(f"Chapter {val} is out of range (1-{total_chapters}).")

    if range_input.endswith('+') and range_input[:-1].isdigit():
        range_input = range_input[:-1] + ':'

    if '-' in range_input or ':' in range_input:
        sep = '-' if '-' in range_input else ':'
        start_str, _, end_str = range_input.partition(sep)
        try:
            start = int(start_str) if start_str.strip() else 1
            end = int(end_str) if end_str.strip() else total_chapters
        except ValueError:
            raise InvalidRangeError(f"Unrecognised range: {range_input}") from None

        start = max(1, start)
        end = min(total_chapters, end)

        if start > end:
            raise InvalidRangeError("Start chapter must not be after end chapter.")

        return start, end

    raise InvalidRangeError("Unrecognised range. Use '1-10', '5:', ':20', '100+' or '8'.")


def resolve_index_range(total: int, start: Optional[int], end: Optional[int]) -> Tuple[int, int]:
    """
    把 --start/--end（基于1，可缺省）换算成 0 基的闭区间索引。
    结束早于开始时收缩为只含开始的一章。
    """
    start_idx = max(0, (start or 1) - 1)
    end_idx = min(total - 1, (end or total) - 1)
    if end_idx < start_idx:
        end_idx = start_idx
    return start_idx, end_idx
