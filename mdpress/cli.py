from __future__ import annotations

import argparse
import datetime as dt
import sys
import time
from pathlib import Path
from typing import Optional

from .config import DEFAULT_ABOUT_HTML, DEFAULT_HOME_HTML, SiteConfig, load_config
from .content import Post, load_posts
from .pages import build_about, build_blog_index, build_home, build_posts, build_sitemap
from .render import copy_static, read_template
from .utils import clean_output_dir, parse_int


def build_site(config: SiteConfig, now: Optional[dt.datetime] = None) -> list[Post]:
    """Regenerate the whole output tree and return the published posts.

    ``now`` only feeds the footer year; pass a fixed value for reproducible output.
    """
    if now is None:
        now = dt.datetime.now()
    posts_dir = config.posts_dir
    static_dir = config.static_dir
    template_path = config.template_path
    output_dir = config.output_dir

    if not posts_dir.is_dir():
        print(f"Posts directory not found: {posts_dir}", file=sys.stderr)
        sys.exit(1)
    if not template_path.is_file():
        print(f"Template not found: {template_path}", file=sys.stderr)
        sys.exit(1)
    if not static_dir.is_dir():
        print(f"Static directory not found: {static_dir}", file=sys.stderr)
        sys.exit(1)

    clean_output_dir(output_dir, config.root)
    template = read_template(template_path)

    posts = load_posts(posts_dir, config.build_workers)
    print(f"Found {len(posts)} published posts")

    build_blog_index(template, output_dir, posts, config, now)
    build_posts(template, output_dir, posts, config, now)
    build_home(template, output_dir, config, now)
    build_about(template, output_dir, config, now)

    copy_static(static_dir, output_dir)
    build_sitemap(output_dir, posts, config)
    return posts


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    def cfg_int(key: str, default: int) -> int:
        return parse_int(config.get(key), default)

    defaults = SiteConfig()
    parser = argparse.ArgumentParser(description="Build the static blog.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default=cfg_str("posts", "posts"), help="Directory containing Markdown posts.")
    parser.add_argument(
        "--pages",
        default=cfg_str("pages", "pages"),
        help="Directory holding optional home.md and about.md.",
    )
    parser.add_argument("--static", default=cfg_str("static", "public"), help="Directory of static assets.")
    parser.add_argument(
        "--template",
        default=cfg_str("template", "templates/base.html"),
        help="HTML shell template with {{PLACEHOLDER}} fields.",
    )
    parser.add_argument("--output", default=cfg_str("output", "dist"), help="Output directory for the site.")
    parser.add_argument(
        "--site-url",
        default=cfg_str("site_url", defaults.site_url),
        help="Public site URL used for canonical links and the sitemap.",
    )
    parser.add_argument("--site-name", default=cfg_str("site_name", defaults.site_name), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=cfg_str("site_description", defaults.site_description),
        help="Description used when a page has none.",
    )
    parser.add_argument(
        "--default-og-image",
        default=cfg_str("default_og_image", defaults.default_og_image),
        help="Social preview image for pages without their own.",
    )
    parser.add_argument(
        "--home-fallback-html",
        default=cfg_str("home_fallback_html", DEFAULT_HOME_HTML),
        help="Home page body used when pages/home.md is missing.",
    )
    parser.add_argument(
        "--about-fallback-html",
        default=cfg_str("about_fallback_html", DEFAULT_ABOUT_HTML),
        help="About page body used when pages/about.md is missing.",
    )
    parser.add_argument(
        "--build-workers",
        default=cfg_int("build_workers", 0),
        type=int,
        help="Number of worker threads for reading posts (0 = auto).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    args = build_parser(config, pre_args.config).parse_args(argv)
    site_config = SiteConfig.from_args(args)
    print("Building site...")
    start = time.perf_counter()
    build_site(site_config)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")
