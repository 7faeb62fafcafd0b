"""站点规则表：各镜像站的选择器、清洗规则与目录策略参数"""
from __future__ import annotations

import dataclasses
import json
from typing import Dict, List, Optional
from urllib.parse import urlparse

from rich.markup import escape

from ..models import SelectorRule, SiteProfile
from ..utils import safe_print

__all__ = [
    'SiteDetector',
    'novelbin_profile',
    'DEFAULT_BOILERPLATE_RULES',
    'DEFAULT_CANDIDATE_SELECTORS',
]

# 样板内容（导航、按钮、评论、分享等）
DEFAULT_BOILERPLATE_RULES = [
    SelectorRule('[class*="breadcrumb"]'),
    SelectorRule('[class*="navbar"]'),
    SelectorRule('[class*="btn"]'),
    SelectorRule('[class*="nav"]'),
    SelectorRule('[class*="chr-nav"]'),
    SelectorRule('[class*="novel-title"]'),
    SelectorRule('[class*="toggle-nav-open"]'),
    SelectorRule('[class*="report"]'),
    SelectorRule('[class*="comment"]'),
    SelectorRule('[class*="close-popup"]'),
    SelectorRule('[class*="share"]'),
    SelectorRule('[class*="rating"]'),
    SelectorRule('[class*="pf-"]'),
    SelectorRule('aside'),
    SelectorRule('footer'),
    SelectorRule('header'),
    SelectorRule('nav'),
]

# 正文容器候选，越靠前越具体
DEFAULT_CANDIDATE_SELECTORS = [
    '#chr-content',
    '[class*="chr-c"]',
    '#chapter-content',
    '[class*="chapter-content"]',
    '[class*="entry-content"]',
    'article',
    'main',
]


def novelbin_profile() -> SiteProfile:
    return SiteProfile(
        name='NovelBin',
        hosts=['novelbin.org', 'thenovelbin.org', 'novelbin.com', 'novlove.com'],
        base_url='https://novelbin.org',
        candidate_selectors=list(DEFAULT_CANDIDATE_SELECTORS),
        candidate_cleanup_selectors=[
            'form', 'button', 'input', 'textarea', '[class*="comment"]', '[class*="share"]',
        ],
        title_fallback_selectors=['.chr-title', '.chr-text'],
        boilerplate_rules=list(DEFAULT_BOILERPLATE_RULES),
        embedded_selector='div[class*="chapter"][id^="chapter-"]',
        embedded_title_selector='h2, h3, span[class*="chr-text"]',
        embedded_content_selector='[class*="chr-c"], #chr-content',
        embedded_cleanup_selector='[class*="nav"], a[class*="novel"]',
        novel_id_selector='#rating',
        novel_id_attribute='data-novel-id',
        archive_path='/ajax/chapter-archive',
        archive_item_selector='ul[class*="list-chapter"] > li',
        static_link_selectors=[
            'div[class*="list-chapter"] a',
            'ul[class*="chapter-list"] a',
            'a[href*="/chapter"]',
        ],
    )


def _profile_from_dict(data: dict, base: SiteProfile) -> SiteProfile:
    """以 base 为默认值，用 JSON 中出现的字段覆盖"""
    known = {f.name for f in dataclasses.fields(SiteProfile)}
    unknown = set(data) - known
    if unknown:
        safe_print(f"⚠️ [yellow]Ignoring unknown profile keys: {escape(', '.join(sorted(unknown)))}[/yellow]")

    values = {k: v for k, v in data.items() if k in known}
    if 'boilerplate_rules' in values:
        rules = []
        for item in values['boilerplate_rules']:
            if isinstance(item, str):
                rules.append(SelectorRule(item))
            else:
                rules.append(SelectorRule(item['selector'], item.get('action', 'remove')))
        values['boilerplate_rules'] = rules
    return dataclasses.replace(base, **values)


class SiteDetector:
    """网站检测和适配器"""

    def __init__(self, profiles: Optional[List[SiteProfile]] = None):
        self._detection_cache: Dict[str, SiteProfile] = {}
        self._detection_logged: set = set()
        self.site_configs: Dict[str, SiteProfile] = {}
        for profile in profiles or [novelbin_profile()]:
            self.register(profile)

    def register(self, profile: SiteProfile):
        for host in profile.hosts:
            self.site_configs[host.lower()] = profile
        self._detection_cache.clear()

    def load_profiles(self, path: str) -> List[SiteProfile]:
        """从 JSON 文件加载额外的站点规则（列表，或 {"profiles": [...]}）"""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get('profiles', [data])

        loaded = []
        for item in data:
            base = self.site_configs.get(str(item.get('extends', '')).lower()) or novelbin_profile()
            item = {k: v for k, v in item.items() if k != 'extends'}
            profile = _profile_from_dict(item, base)
            self.register(profile)
            loaded.append(profile)
        safe_print(f"📄 Loaded {len(loaded)} site profile(s) from {escape(str(path))}")
        return loaded

    @property
    def allowed_hosts(self) -> List[str]:
        return sorted(self.site_configs)

    def list_sites(self) -> List[SiteProfile]:
        seen = []
        for profile in self.site_configs.values():
            if profile not in seen:
                seen.append(profile)
        return seen

    def detect_site(self, url: str, silent: bool = False) -> SiteProfile:
        """检测网站类型，支持缓存和静默模式；未知网站使用通用规则"""
        domain = (urlparse(url).hostname or '').lower()
        if domain.startswith('www.'):
            domain = domain[4:]

        if domain in self._detection_cache:
            return self._detection_cache[domain]

        config = self.site_configs.get(domain)
        if config:
            if not silent and domain not in self._detection_logged:
                safe_print(f"🎯 Detected site: {escape(config.name)}")
                self._detection_logged.add(domain)
        else:
            config = self._create_generic_config(url)
            if not silent and domain not in self._detection_logged:
                safe_print(f"❓ Unknown site {escape(domain)}, using generic rules")
                self._detection_logged.add(domain)

        self._detection_cache[domain] = config
        return config

    def _create_generic_config(self, url: str) -> SiteProfile:
        """通用规则：沿用 NovelBin 的选择器，基准地址取自当前URL"""
        parsed = urlparse(url)
        base_url = f"{parsed.scheme}://{parsed.netloc}" if parsed.scheme and parsed.netloc else ''
        return dataclasses.replace(
            novelbin_profile(),
            name='Generic',
            hosts=[parsed.hostname or ''],
            base_url=base_url,
        )
