"""章节分组：把有序章节切成固定大小的若干部分"""
from __future__ import annotations

from typing import List, Sequence

from ..exceptions import InvalidGroupSizeError
from ..models import ChapterRecord, Group

__all__ = ['paginate']


def paginate(
    chapters: Sequence[ChapterRecord],
    group_size: int,
    starting_chapter_number: int = 1,
) -> List[Group]:
    """
    把章节序列切成长度为 group_size 的连续分组（最后一组可以更短），
    每组带上全局章节编号 [start, end]，编号从 starting_chapter_number 连续递增。

    group_size < 1 直接报错，不会被悄悄改成 1。
    """
    if not isinstance(group_size, int) or group_size < 1:
        raise InvalidGroupSizeError(f"group_size must be a positive integer, got {group_size!r}")
    if not isinstance(starting_chapter_number, int) or starting_chapter_number < 1:
        raise InvalidGroupSizeError(
            f"starting_chapter_number must be a positive integer, got {starting_chapter_number!r}"
        )

    groups: List[Group] = []
    start = starting_chapter_number
    for offset in range(0, len(chapters), group_size):
        run = list(chapters[offset:offset + group_size])
        end = start + len(run) - 1
        groups.append(Group(chapters=run, start=start, end=end))
        start = end + 1
    return groups
