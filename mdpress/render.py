from __future__ import annotations

import re
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import markdown

PLACEHOLDER_RE = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")

MARKDOWN_EXTENSIONS = [
    "fenced_code",
    "codehilite",
    "footnotes",
    "tables",
    "toc",
    "pymdownx.arithmatex",
]
MARKDOWN_EXTENSION_CONFIGS = {
    "codehilite": {"guess_lang": False, "css_class": "codehilite"},
    "pymdownx.arithmatex": {"generic": True},
}


def render_markdown(text: str) -> str:
    # Markdown instances keep per-document state, so each call gets its own.
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
        output_format="html",
    )
    return md.convert(text)


@dataclass(frozen=True)
class PageFields:
    """Values substituted into the HTML shell for one page."""

    title: str
    description: str
    content: str
    canonical_url: str
    og_type: str
    og_image: str
    year: str

    def as_mapping(self) -> dict[str, str]:
        return {
            "TITLE": self.title,
            "DESCRIPTION": self.description,
            "CONTENT": self.content,
            "CANONICAL_URL": self.canonical_url,
            "OG_TYPE": self.og_type,
            "OG_IMAGE": self.og_image,
            "YEAR": self.year,
        }


def render_template(template: str, fields: PageFields | Mapping[str, str]) -> str:
    """Replace every ``{{NAME}}`` in ``template`` in a single pass.

    Names missing from ``fields`` are left as they are. Substituted values
    are not scanned again.
    """
    values = fields.as_mapping() if isinstance(fields, PageFields) else dict(fields)

    def repl(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(repl, template)


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_static(static_dir: Path, output_dir: Path) -> None:
    shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
