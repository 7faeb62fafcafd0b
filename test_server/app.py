#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
本地测试服务器 - 模拟 NovelBin 网站
覆盖三种章节列表来源：内嵌章节、AJAX 章节归档、静态链接
"""

from flask import Flask, abort, render_template_string, request

app = Flask(__name__)

CHAPTER_COUNT = 12

# 模拟小说数据，mode 决定主页使用哪种章节列表
NOVELS = {
    'embedded-novel': {
        'title': 'The Embedded Saga',
        'author': 'Ada Quill',
        'status': 'Completed',
        'genre': 'Fantasy, Adventure',
        'summary': 'Every chapter lives on the landing page.',
        'mode': 'embedded',
    },
    'archive-novel': {
        'title': 'Archive of Echoes',
        'author': 'Bram Holt',
        'status': 'Ongoing',
        'genre': 'Mystery',
        'summary': 'Chapters are listed by the archive endpoint.',
        'mode': 'archive',
    },
    'static-novel': {
        'title': 'Static Roads',
        'author': 'Cleo Vance',
        'status': 'Ongoing',
        'genre': 'Drama',
        'summary': 'Chapter links are printed straight into the page.',
        'mode': 'static',
    },
    'broken-archive': {
        'title': 'Broken Archive',
        'author': 'Dax Mire',
        'status': 'Hiatus',
        'genre': 'Sci-fi',
        'summary': 'The archive endpoint fails; static links remain.',
        'mode': 'broken',
    },
    'empty-novel': {
        'title': 'Nothing Here',
        'author': 'Nobody',
        'status': 'Unknown',
        'genre': 'None',
        'summary': 'No chapters at all.',
        'mode': 'empty',
    },
}


def chapter_title(number: int) -> str:
    # 站点自身会重复章节前缀
    return f'Chapter {number}: Chapter {number}: The Road Part {number}'


def chapter_paragraphs(slug: str, number: int):
    return [
        f'This is paragraph one of chapter {number} in {slug}. The travellers left at dawn.',
        f'Paragraph two of chapter {number} follows them over the hills and into the valley.',
        f'In paragraph three of chapter {number} they reach the old gate and read the '
        f'<a href="/glossary#gate">inscription</a>.',
    ]


NOVEL_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta property="og:title" content="{{ novel.title }}">
    <title>{{ novel.title }} - NovelBin Mock</title>
</head>
<body>
    <div class="navbar">Home | Genres | Search</div>
    <div class="col-info-desc">
        <div class="book"><img data-src="/media/{{ slug }}.jpg" src="/media/placeholder.jpg" alt="{{ novel.title }}"></div>
        <ul class="info info-meta">
            <li><h3>Author:</h3><a href="/a/{{ novel.author }}">{{ novel.author }}</a></li>
            <li><h3>Genre:</h3>{{ novel.genre }}</li>
            <li><h3>Status:</h3>{{ novel.status }}</li>
        </ul>
        <div class="desc-text">{{ novel.summary }}</div>
        {% if novel.mode in ('archive', 'broken') %}
        <div id="rating" data-novel-id="{{ slug }}"></div>
        {% endif %}
    </div>

    {% if novel.mode == 'embedded' %}
    {% for ch in chapters %}
    <div class="chapter-block" id="chapter-{{ ch.number }}">
        <h2>{{ ch.title }}</h2>
        <div class="chr-nav"><a href="#chapter-{{ ch.number + 1 }}">Next Chapter</a></div>
        <a class="novel-link" href="/b/{{ slug }}">{{ novel.title }}</a>
        <div class="chr-c">
            {% for p in ch.paragraphs %}<p>{{ p | safe }}</p>{% endfor %}
            <script>window.ads = true;</script>
        </div>
    </div>
    {% endfor %}
    {% endif %}

    {% if novel.mode in ('static', 'broken') %}
    <div class="list-chapter-wrap">
        <div class="list-chapter">
            {% for ch in chapters %}
            <a href="/b/{{ slug }}/chapter-{{ ch.number }}" title="{{ ch.title }}">{{ ch.title }}</a>
            {% endfor %}
            <a href="/b/{{ slug }}/chapter-1">{{ chapters[0].title }}</a>
        </div>
    </div>
    {% endif %}

    <footer>Mock NovelBin</footer>
</body>
</html>
'''

ARCHIVE_TEMPLATE = '''
<div class="panel-body">
    <ul class="list-chapter">
        {% for ch in chapters %}
        <li><a href="/b/{{ slug }}/chapter-{{ ch.number }}" title="{{ ch.title }}"><span class="nchr-text">{{ ch.title }}</span></a></li>
        {% endfor %}
    </ul>
</div>
'''

CHAPTER_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ ch.title }} - {{ novel.title }}</title>
    <style>.chr-c p { margin: 1em 0; }</style>
</head>
<body>
    <div id="chapter" class="chapter container">
        <a class="novel-title" href="/b/{{ slug }}">{{ novel.title }}</a>
        <h2><a class="chr-title" href="/b/{{ slug }}/chapter-{{ ch.number }}"><span class="chr-text">{{ ch.title }}</span></a></h2>
        <div class="chr-nav" id="chr-nav-top">
            <a class="btn btn-prev" href="/b/{{ slug }}/chapter-{{ ch.number - 1 }}">Prev Chapter</a>
            <a class="btn btn-next" href="/b/{{ slug }}/chapter-{{ ch.number + 1 }}">Next Chapter</a>
        </div>
        <div id="chr-content" class="chr-c" style="font-size: 18px">
            {% for p in ch.paragraphs %}<p class="para" onclick="track()">{{ p | safe }}</p>{% endfor %}
            <!-- ad slot -->
            <script>window.ads = true;</script>
            <div class="social-share">Share this chapter</div>
        </div>
    </div>
    <div id="comments" class="comment-list">Great chapter! Great chapter! Great chapter! Great chapter!</div>
</body>
</html>
'''


def get_novel(slug: str):
    novel = NOVELS.get(slug)
    if novel is None:
        abort(404)
    return novel


def build_chapters(slug: str, novel: dict):
    if novel['mode'] == 'empty':
        return []
    return [
        {
            'number': n,
            'title': chapter_title(n),
            'paragraphs': chapter_paragraphs(slug, n),
        }
        for n in range(1, CHAPTER_COUNT + 1)
    ]


@app.route('/b/<slug>')
def novel_page(slug):
    """小说主页"""
    novel = get_novel(slug)
    return render_template_string(NOVEL_TEMPLATE, slug=slug, novel=novel, chapters=build_chapters(slug, novel))


@app.route('/ajax/chapter-archive')
def chapter_archive():
    """章节归档接口"""
    slug = request.args.get('novelId', '')
    novel = get_novel(slug)
    if novel['mode'] == 'broken':
        return "Internal Server Error", 500
    return render_template_string(ARCHIVE_TEMPLATE, slug=slug, chapters=build_chapters(slug, novel))


@app.route('/b/<slug>/chapter-<int:number>')
def chapter_page(slug, number):
    """章节页面"""
    novel = get_novel(slug)
    if number < 1 or number > CHAPTER_COUNT:
        return "Chapter not found", 404
    ch = build_chapters(slug, novel)[number - 1]
    return render_template_string(CHAPTER_TEMPLATE, slug=slug, novel=novel, ch=ch)


if __name__ == '__main__':
    print("🚀 Starting mock NovelBin server...")
    print("📍 http://localhost:8080/b/archive-novel")
    print("🧪 Novels:", ", ".join(NOVELS))
    print("-" * 50)
    app.run(host='127.0.0.1', port=8080, debug=False)
