#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
NovelBin 归档器启动脚本
仅用于个人离线阅读，请遵守目标网站的服务条款
"""

import sys


def main():
    """主入口点 - 启动CLI界面"""
    from novelbin_archiver.cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
