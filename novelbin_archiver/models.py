from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class ChapterRef:
    """章节引用：名称 + 绝对URL（以URL为唯一标识）"""
    name: str
    url: str


@dataclass
class ChapterRecord:
    """章节记录：引用 + 抓取后填充的标题与正文"""
    ref: ChapterRef
    title: Optional[str] = None
    content: Optional[str] = None  # 已清洗的HTML，抓取前为 None

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def url(self) -> str:
        return self.ref.url

    @property
    def is_fetched(self) -> bool:
        return self.content is not None

    @property
    def display_name(self) -> str:
        """页面提取到的标题优先于目录中的名称"""
        return self.title or self.ref.name

    def set_content(self, content: str, title: Optional[str] = None) -> None:
        """写入正文；正文一旦写入即不可覆盖"""
        if self.content is not None:
            raise ValueError(f"章节内容已存在，拒绝覆盖: {self.url}")
        self.content = content
        if title:
            self.title = title


@dataclass(frozen=True)
class NovelMetadata:
    """小说元数据，空字符串表示未知"""
    url: str
    title: str = ""
    author: str = ""
    summary: str = ""
    cover: str = ""
    status: str = ""
    genre: str = ""


@dataclass
class CandidateNode:
    """正文候选节点（仅在定位正文时临时使用）"""
    node: Any
    score: int = 0
    extracted_title: Optional[str] = None
    html: str = ""  # 入选时的正文快照


@dataclass(frozen=True)
class ChapterContent:
    title: str = ""
    content: str = ""


@dataclass(frozen=True)
class Group:
    """一组连续章节，start/end 为全局章节编号（从1开始）"""
    chapters: List[ChapterRecord]
    start: int
    end: int

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"

    def __len__(self) -> int:
        return len(self.chapters)


@dataclass
class CatalogResult:
    """目录解析结果"""
    metadata: NovelMetadata
    chapters: List[ChapterRecord]
    strategy: str  # embedded, archive, static


@dataclass(frozen=True)
class SelectorRule:
    """清洗规则：CSS选择器 + 动作"""
    selector: str
    action: str = 'remove'


@dataclass
class SiteProfile:
    name: str
    hosts: List[str]
    base_url: str = ""
    # 正文定位
    candidate_selectors: List[str] = field(default_factory=list)  # 按优先级排列
    candidate_cleanup_selectors: List[str] = field(default_factory=list)
    title_selectors: List[str] = field(default_factory=lambda: ['h1', 'h2', 'h3', 'h4'])
    title_fallback_selectors: List[str] = field(default_factory=list)
    body_fallback_cleanup: List[str] = field(default_factory=lambda: ['script', 'style', 'nav', 'footer'])
    boilerplate_rules: List[SelectorRule] = field(default_factory=list)
    dedupe_titles: bool = True
    # 目录解析：内嵌章节
    embedded_selector: str = ""
    embedded_title_selector: str = ""
    embedded_content_selector: str = ""
    embedded_cleanup_selector: str = ""
    # 目录解析：AJAX 章节归档
    novel_id_selector: str = ""
    novel_id_attribute: str = ""
    archive_path: str = ""
    archive_item_selector: str = ""
    # 目录解析：静态链接
    static_link_selectors: List[str] = field(default_factory=list)


@dataclass
class ArchiveOptions:
    """一次归档任务的运行参数"""
    throttle: float = 1.0  # 每次请求前的强制延迟（秒）
    settle_delay: float = 0.2  # 每章抓取成功后的额外停顿
    group_size: int = 100
    start: Optional[int] = None
    end: Optional[int] = None
    chapter_range: Optional[str] = None  # 如 "1-10"，优先于 start/end
    out: Optional[str] = None
    download: bool = False
    connect_timeout: float = 20
    read_timeout: float = 60
    profiles_path: Optional[str] = None
