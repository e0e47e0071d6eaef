from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

DEFAULT_HOME_HTML = "<p>Welcome to my site.</p>"
DEFAULT_ABOUT_HTML = "<h1>About</h1>\n<p>A little about me.</p>"


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be an object: {path}", file=sys.stderr)
        sys.exit(1)
    return data


@dataclass(frozen=True)
class SiteConfig:
    """Resolved settings for one build.

    Relative directories are taken relative to ``root``, which is also the
    boundary ``clean_output_dir`` refuses to step outside of.
    """

    site_url: str = "https://example.com"
    site_name: str = "My Blog"
    site_description: str = "Notes and essays."
    default_og_image: str = "/og-image.png"
    home_fallback_html: str = DEFAULT_HOME_HTML
    about_fallback_html: str = DEFAULT_ABOUT_HTML
    root: Path = Path(".")
    posts: Path = Path("posts")
    pages: Path = Path("pages")
    static: Path = Path("public")
    template: Path = Path("templates/base.html")
    output: Path = Path("dist")
    build_workers: int = 0

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @property
    def posts_dir(self) -> Path:
        return self.resolve(self.posts)

    @property
    def pages_dir(self) -> Path:
        return self.resolve(self.pages)

    @property
    def static_dir(self) -> Path:
        return self.resolve(self.static)

    @property
    def template_path(self) -> Path:
        return self.resolve(self.template)

    @property
    def output_dir(self) -> Path:
        return self.resolve(self.output)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> SiteConfig:
        return cls(
            site_url=args.site_url.strip().rstrip("/"),
            site_name=args.site_name,
            site_description=args.site_description,
            default_og_image=args.default_og_image,
            home_fallback_html=args.home_fallback_html,
            about_fallback_html=args.about_fallback_html,
            root=Path.cwd(),
            posts=Path(args.posts),
            pages=Path(args.pages),
            static=Path(args.static),
            template=Path(args.template),
            output=Path(args.output),
            build_workers=args.build_workers,
        )
