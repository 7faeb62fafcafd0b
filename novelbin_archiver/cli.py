#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
NovelBin 归档器 - 命令行接口
NovelBin Archiver - Command Line Interface
"""

import argparse
import sys
from typing import List, Optional

from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich import box

from . import __version__
from .crawler import NovelArchiver
from .exceptions import ArchiverError
from .models import ArchiveOptions
from .modules import SiteDetector
from .utils import clean_and_validate_url, console, print_banner, safe_print, set_quiet


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {value}")
    return number


def non_negative_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value}")
    return number


def create_cli_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog='novelbin-archiver',
        description=f'📚 NovelBin Archiver v{__version__} - A5 print-ready novel archives',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  novelbin-archiver                                         # interactive
  novelbin-archiver --url https://novelbin.org/b/some-novel
  novelbin-archiver --url URL --start 1 --end 200 --group-size 50
  novelbin-archiver --url URL --range 100+ --throttle 2
  novelbin-archiver --list-sites

Range syntax:
  100-200    chapters 100 to 200
  50:        from chapter 50 to the end
  :100       the first 100 chapters
  100+       from chapter 100 to the end
  150        chapter 150 only
        """
    )

    parser.add_argument('-u', '--url', help='novel page URL')
    parser.add_argument('-o', '--out', help='output folder and file base name (default: novel title)')
    parser.add_argument('--start', type=positive_int, help='first chapter to archive (1-based)')
    parser.add_argument('--end', type=positive_int, help='last chapter to archive (1-based)')
    parser.add_argument('-r', '--range', dest='chapter_range',
                        help='chapter range (e.g. 1-100, 50:, :100, 100+, 150); overrides --start/--end')
    parser.add_argument('-g', '--group-size', type=positive_int, default=100,
                        help='chapters per output file (default: 100)')
    parser.add_argument('-t', '--throttle', type=non_negative_float, default=1.0,
                        help='delay in seconds before every request (default: 1.0)')
    parser.add_argument('--download', action='store_true',
                        help='save under ~/storage/shared/Download when writable')
    parser.add_argument('--profiles', help='JSON file with extra site profiles')
    parser.add_argument('--list-sites', action='store_true', help='list supported sites')
    parser.add_argument('-q', '--quiet', action='store_true', help='suppress console output')
    parser.add_argument('--version', action='version', version=f'%(prog)s v{__version__}')

    return parser


def show_supported_sites(detector: SiteDetector):
    """显示支持的网站列表"""
    lines = []
    for profile in detector.list_sites():
        lines.append(f"📚 [bold]{escape(profile.name)}[/bold]")
        lines.append(f"   hosts: {escape(', '.join(profile.hosts))}")
        lines.append(f"   content selectors: {len(profile.candidate_selectors)}")
    console.print(Panel("\n".join(lines), title="🌐 Supported sites", border_style="cyan", box=box.ROUNDED))
    safe_print("💡 Other hosts are rejected by the host guard.")


def prompt_for_missing(args):
    """交互模式：缺少 --url 时询问 URL 与章节范围"""
    args.url = Prompt.ask("📖 [bold green]Novel URL[/bold green]", console=console).strip()
    if args.chapter_range is None and args.start is None and args.end is None:
        range_input = Prompt.ask(
            "📋 Chapter range [dim](empty = all)[/dim]",
            default="",
            show_default=False,
            console=console,
        ).strip()
        args.chapter_range = range_input or None


def options_from_args(args) -> ArchiveOptions:
    return ArchiveOptions(
        throttle=args.throttle,
        group_size=args.group_size,
        start=args.start,
        end=args.end,
        chapter_range=args.chapter_range,
        out=args.out,
        download=args.download,
        profiles_path=args.profiles,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_cli_parser()
    args = parser.parse_args(argv)

    if args.quiet:
        set_quiet(True)

    if args.list_sites:
        detector = SiteDetector()
        try:
            if args.profiles:
                detector.load_profiles(args.profiles)
        except (OSError, ValueError) as e:
            safe_print(f"❌ [bold red]Could not load profiles: {escape(str(e))}[/bold red]")
            return 1
        show_supported_sites(detector)
        return 0

    print_banner()

    try:
        if not args.url:
            prompt_for_missing(args)
        url = clean_and_validate_url(args.url)
        archiver = NovelArchiver(options_from_args(args))
        archiver.archive(url)
    except KeyboardInterrupt:
        safe_print("\n👋 Cancelled by user", style="yellow")
        return 130
    except (ArchiverError, ValueError, OSError) as e:
        safe_print(f"❌ [bold red]{escape(str(e))}[/bold red]")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
