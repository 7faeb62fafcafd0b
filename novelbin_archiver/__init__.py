"""NovelBin Archiver - 抓取 NovelBin 小说章节并生成分卷 A5 HTML 文档"""

__version__ = "2.1.0"
