from __future__ import annotations

import datetime as dt
import html
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from .config import SiteConfig
from .content import Post, collect_categories, parse_front_matter
from .render import PageFields, render_markdown, render_template, write_text
from .utils import join_url

EXTERNAL_ICON = (
    '<svg class="external-icon" fill="none" stroke="currentColor" viewBox="0 0 24 24" aria-hidden="true">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" '
    'd="M10 6H6a2 2 0 00-2 2v10a2 2 0 002 2h10a2 2 0 002-2v-4M14 4h6m0 0v6m0-6L10 14"></path></svg>'
)

ROOT_ROUTE = ("", "monthly", 1.0)
STATIC_ROUTES = [
    ("about", "monthly", 0.8),
    ("blog", "weekly", 0.9),
]
POST_CHANGEFREQ = "monthly"
POST_PRIORITY = 0.7


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    changefreq: str
    priority: float
    lastmod: Optional[dt.date] = None


def absolute_url(config: SiteConfig, value: str) -> str:
    if value.startswith(("http://", "https://")):
        return value
    return join_url(config.site_url, value)


def page_fields(
    config: SiteConfig,
    *,
    title: str,
    content: str,
    path: str,
    now: dt.datetime,
    description: str = "",
    og_type: str = "website",
    og_image: str = "",
) -> PageFields:
    canonical = join_url(config.site_url, path)
    if not path:
        canonical += "/"
    return PageFields(
        title=html.escape(title),
        description=html.escape(description or config.site_description),
        content=content,
        canonical_url=html.escape(canonical),
        og_type=og_type,
        og_image=html.escape(absolute_url(config, og_image or config.default_og_image)),
        year=str(now.year),
    )


def build_category_filters(categories: list[str]) -> str:
    buttons = ['<button class="category-filter is-active" type="button" data-category="all">All</button>']
    for category in categories:
        name = html.escape(category)
        buttons.append(f'<button class="category-filter" type="button" data-category="{name}">{name}</button>')
    return "\n".join(buttons)


def build_post_cards(posts: list[Post]) -> str:
    cards = []
    for post in posts:
        external_link = post.external_link
        if external_link:
            url = html.escape(external_link)
            link_attrs = ' target="_blank" rel="noopener noreferrer"'
            icon = f" {EXTERNAL_ICON}"
            badge = '<span class="badge badge-external">External</span>'
        else:
            url = f"/blog/{quote(post.slug)}"
            link_attrs = icon = badge = ""
        chips = "".join(f'<span class="chip">{html.escape(cat)}</span>' for cat in post.categories)
        data_categories = html.escape(",".join(post.categories))
        cards.append(
            f'<article class="post-item" data-categories="{data_categories}">'
            f'<h2 class="post-title"><a href="{url}"{link_attrs}>{html.escape(post.title)}{icon}</a></h2>'
            '<div class="post-meta">'
            f'<time datetime="{post.date.isoformat()}">{post.display_date}</time>'
            f"{badge}"
            "</div>"
            f'<div class="post-tags">{chips}</div>'
            f'<p class="post-summary">{html.escape(post.description)}</p>'
            "</article>"
        )
    return "\n".join(cards)


def build_blog_index(
    template: str, output_dir: Path, posts: list[Post], config: SiteConfig, now: dt.datetime
) -> None:
    content = (
        '<div class="container">'
        '<div class="prose"><h1>Blog</h1></div>'
        '<div class="search-bar">'
        '<input id="search-input" class="search-input" type="text" placeholder="Search posts..." />'
        "</div>"
        f'<div class="category-filters">{build_category_filters(collect_categories(posts))}</div>'
        f'<div id="posts-container">{build_post_cards(posts)}</div>'
        '<div id="no-results" class="no-results" hidden>No posts found matching your search.</div>'
        "</div>"
    )
    fields = page_fields(
        config,
        title=f"Blog - {config.site_name}",
        description=config.site_description,
        content=content,
        path="blog",
        now=now,
    )
    write_text(output_dir / "blog" / "index.html", render_template(template, fields))


def build_post_page(template: str, output_dir: Path, post: Post, config: SiteConfig, now: dt.datetime) -> None:
    category_links = "".join(
        f'<a class="chip" href="/blog?category={quote(cat)}">{html.escape(cat)}</a>' for cat in post.categories
    )
    content = (
        '<article class="post container">'
        '<header class="post-header">'
        f'<h1 class="post-title">{html.escape(post.title)}</h1>'
        f'<time datetime="{post.date.isoformat()}">{post.display_date}</time>'
        f'<div class="post-tags">{category_links}</div>'
        "</header>"
        f'<div class="prose">{post.html}</div>'
        "</article>"
    )
    fields = page_fields(
        config,
        title=f"{post.title} - {config.site_name}",
        description=post.description,
        content=content,
        path=f"blog/{quote(post.slug)}",
        now=now,
        og_type="article",
        og_image=post.og_image,
    )
    write_text(output_dir / "blog" / post.slug / "index.html", render_template(template, fields))


def build_posts(template: str, output_dir: Path, posts: list[Post], config: SiteConfig, now: dt.datetime) -> None:
    for post in posts:
        build_post_page(template, output_dir, post, config, now)


def load_page(path: Path) -> tuple[Optional[str], dict]:
    """Render an optional Markdown page; ``(None, {})`` when it does not exist."""
    if not path.exists():
        return None, {}
    meta, body = parse_front_matter(path.read_text(encoding="utf-8"))
    return render_markdown(body), meta


def build_static_page(
    template: str,
    output_path: Path,
    source: Path,
    fallback_html: str,
    *,
    title: str,
    path: str,
    config: SiteConfig,
    now: dt.datetime,
) -> None:
    body_html, meta = load_page(source)
    if body_html is None:
        body_html = fallback_html
    content = f'<div class="container"><div class="prose">{body_html}</div></div>'
    fields = page_fields(
        config,
        title=str(meta.get("title") or title),
        description=str(meta.get("description") or ""),
        content=content,
        path=path,
        now=now,
        og_image=str(meta.get("og_image") or meta.get("image") or ""),
    )
    write_text(output_path, render_template(template, fields))


def build_home(template: str, output_dir: Path, config: SiteConfig, now: dt.datetime) -> None:
    build_static_page(
        template,
        output_dir / "index.html",
        config.pages_dir / "home.md",
        config.home_fallback_html,
        title=config.site_name,
        path="",
        config=config,
        now=now,
    )


def build_about(template: str, output_dir: Path, config: SiteConfig, now: dt.datetime) -> None:
    build_static_page(
        template,
        output_dir / "about" / "index.html",
        config.pages_dir / "about.md",
        config.about_fallback_html,
        title=f"About - {config.site_name}",
        path="about",
        config=config,
        now=now,
    )


def sitemap_entries(posts: list[Post], site_url: str) -> list[SitemapEntry]:
    path, changefreq, priority = ROOT_ROUTE
    entries = [SitemapEntry(join_url(site_url, path) + "/", changefreq, priority)]
    for path, changefreq, priority in STATIC_ROUTES:
        entries.append(SitemapEntry(join_url(site_url, path), changefreq, priority))
    for post in posts:
        entries.append(
            SitemapEntry(join_url(site_url, f"blog/{quote(post.slug)}"), POST_CHANGEFREQ, POST_PRIORITY, post.date)
        )
    return entries


def render_sitemap(entries: list[SitemapEntry]) -> str:
    items = []
    for entry in entries:
        lines = ["  <url>", f"    <loc>{html.escape(entry.loc, quote=False)}</loc>"]
        if entry.lastmod:
            lines.append(f"    <lastmod>{entry.lastmod.isoformat()}</lastmod>")
        lines.append(f"    <changefreq>{entry.changefreq}</changefreq>")
        lines.append(f"    <priority>{entry.priority:.1f}</priority>")
        lines.append("  </url>")
        items.append("\n".join(lines))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            *items,
            "</urlset>",
            "",
        ]
    )


def build_sitemap(output_dir: Path, posts: list[Post], config: SiteConfig) -> None:
    write_text(output_dir / "sitemap.xml", render_sitemap(sitemap_entries(posts, config.site_url)))
