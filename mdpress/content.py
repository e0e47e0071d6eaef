from __future__ import annotations

import datetime as dt
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .render import render_markdown
from .utils import parse_bool

CONTENT_SUFFIXES = {".md", ".markdown"}
MAX_WORKERS = 32


@dataclass(frozen=True)
class Post:
    slug: str
    title: str
    date: dt.date
    html: str
    description: str = ""
    categories: tuple[str, ...] = ()
    published: bool = False
    link: str = ""
    external: bool = False
    og_image: str = ""
    source: Optional[Path] = field(default=None, compare=False)

    @property
    def external_link(self) -> Optional[str]:
        if self.external and self.link:
            return self.link
        return None

    @property
    def display_date(self) -> str:
        return format_date(self.date)


def parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    items = [item.strip().strip("'\"") for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    meta = yaml.safe_load("\n".join(lines[1:end]))
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ValueError("front matter must be a mapping")
    meta = {str(key).strip().lower(): value for key, value in meta.items()}
    body = "\n".join(lines[end + 1 :])
    return meta, body


def extract_title(meta: dict, body: str, fallback: str) -> tuple[str, str]:
    if meta.get("title"):
        return str(meta["title"]), body
    lines = body.splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("# "):
            title = stripped[2:].strip() or fallback
            new_body = "\n".join(lines[i + 1 :]).lstrip()
            return title, new_body
        if stripped:
            break
    return fallback, body


def parse_post_date(value: object) -> dt.date:
    """Read a front-matter date as a plain calendar date.

    YAML already turns unquoted ``2024-03-01`` into a ``date``; quoted values
    arrive as strings. Time and zone information is discarded, never applied.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            if len(text) == 10:
                return dt.date.fromisoformat(text)
            return dt.datetime.fromisoformat(text).date()
        except ValueError:
            raise ValueError(f"invalid date {text!r}, expected YYYY-MM-DD") from None
    raise ValueError("missing date")


def format_date(value: dt.date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def get_categories(meta: dict) -> list[str]:
    value = meta.get("categories")
    if value is None:
        return []
    if isinstance(value, str):
        return parse_list(value)
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value)]


def load_post(path: Path) -> Post:
    raw_text = path.read_text(encoding="utf-8")
    try:
        meta, body = parse_front_matter(raw_text)
        date = parse_post_date(meta.get("date"))
    except (ValueError, yaml.YAMLError) as exc:
        raise ValueError(f"{path}: {exc}") from exc
    title, body = extract_title(meta, body, path.stem)
    return Post(
        slug=path.stem,
        title=title,
        date=date,
        html=render_markdown(body),
        description=str(meta.get("description") or ""),
        categories=tuple(get_categories(meta)),
        published=parse_bool(meta.get("published")),
        link=str(meta.get("link") or ""),
        external=parse_bool(meta.get("external")),
        og_image=str(meta.get("og_image") or meta.get("image") or ""),
        source=path,
    )


def list_post_files(posts_dir: Path) -> list[Path]:
    return sorted(
        (path for path in posts_dir.iterdir() if path.is_file() and path.suffix.lower() in CONTENT_SUFFIXES),
        key=lambda p: p.name,
    )


def load_posts(posts_dir: Path, workers: int = 0) -> list[Post]:
    """Read every post, keep the published ones, newest first.

    Files are parsed in a thread pool; ``executor.map`` hands results back in
    file order, so posts sharing a date keep that order after the stable sort.
    """
    post_files = list_post_files(posts_dir)
    if workers <= 0:
        workers = os.cpu_count() or 1
    workers = max(1, min(workers, MAX_WORKERS, len(post_files) or 1))
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            parsed = list(executor.map(load_post, post_files))
    else:
        parsed = [load_post(path) for path in post_files]
    posts = [post for post in parsed if post.published]
    posts.sort(key=lambda p: p.date, reverse=True)
    return posts


def collect_categories(posts: list[Post]) -> list[str]:
    return sorted({category for post in posts for category in post.categories})
