from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest
import yaml

from mdpress.config import SiteConfig

TEMPLATE = (
    "<html><head><title>{{TITLE}}</title>"
    '<meta name="description" content="{{DESCRIPTION}}">'
    '<link rel="canonical" href="{{CANONICAL_URL}}">'
    '<meta property="og:title" content="{{TITLE}}">'
    '<meta property="og:type" content="{{OG_TYPE}}">'
    '<meta property="og:image" content="{{OG_IMAGE}}">'
    "</head><body>{{CONTENT}}<footer>{{YEAR}}</footer></body></html>\n"
)

FIXED_NOW = dt.datetime(2025, 6, 1, 12, 0, 0)


def write_post(posts_dir: Path, name: str, body: str = "Body text.", **meta) -> Path:
    header = yaml.safe_dump(meta, sort_keys=False) if meta else ""
    path = posts_dir / name
    path.write_text(f"---\n{header}---\n{body}\n", encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path: Path) -> SiteConfig:
    (tmp_path / "posts").mkdir()
    (tmp_path / "pages").mkdir()
    (tmp_path / "public").mkdir()
    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "base.html").write_text(TEMPLATE, encoding="utf-8")
    return SiteConfig(
        site_url="https://example.com",
        site_name="Test Blog",
        site_description="A test blog.",
        default_og_image="/og-default.png",
        root=tmp_path,
        build_workers=2,
    )


@pytest.fixture
def make_post(site: SiteConfig):
    def _make_post(name: str, body: str = "Body text.", **meta) -> Path:
        return write_post(site.posts_dir, name, body, **meta)

    return _make_post
