"""Builds the static manual site from a directory of Markdown chapters."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markdown.extensions.toc import slugify, unique

from ..config import ConfigError, SiteConfig
from ..logging import get_logger
from .renderer import MarkdownRenderer

_HEADING = re.compile(r"^(#{1,6})\s+(.*?\S)(?:\s+#+)?\s*$")
_DEFAULT_TEMPLATES = Path(__file__).with_name("templates")


class SiteError(RuntimeError):
    """Raised when the manual site cannot be built."""


@dataclass
class Heading:
    """Second-level heading linked from the chapter index."""

    title: str
    url: str


@dataclass
class Chapter:
    """One Markdown source file and the navigation data derived from it."""

    source: Path
    url: str
    title: str
    headings: List[Heading] = field(default_factory=list)


class SiteBuilder:
    """Renders every chapter and the index page through the theme templates."""

    def __init__(self, config: SiteConfig, renderer: MarkdownRenderer | None = None) -> None:
        if config.sources_dir is None:
            raise ConfigError("site.sources_dir is not set in .apidoc.yml")
        if config.output_dir is None:
            raise ConfigError("site.output_dir is not set in .apidoc.yml")
        self.config = config
        self.sources_dir: Path = config.sources_dir
        self.output_dir: Path = config.output_dir
        self.renderer = renderer or MarkdownRenderer()
        self.logger = get_logger("site")
        self._env = self._create_env(config.theme_dir)

    def chapters(self) -> List[Chapter]:
        if not self.sources_dir.is_dir():
            raise SiteError(f"Sources directory does not exist: {self.sources_dir}")
        return [self._chapter(path) for path in sorted(self.sources_dir.glob("*.md"))]

    def build(self) -> List[Path]:
        """Recreate the output directory and return the written HTML files."""
        chapters = self.chapters()
        index_template = self._template("index.html")
        chapter_template = self._template("chapter.html")

        if self.output_dir.is_dir():
            shutil.rmtree(self.output_dir)
        self.output_dir.mkdir(parents=True)

        if self.config.theme_dir is not None:
            _copy_tree(self.config.theme_dir / "resources", self.output_dir)
        _copy_tree(self.sources_dir / "images", self.output_dir / "images")

        written: List[Path] = []
        index_file = self.output_dir / "index.html"
        index_file.write_text(
            index_template.render(
                chapters=chapters,
                title=self.config.index_title,
                root_path=self.config.root_path,
            ),
            encoding="utf-8",
        )
        written.append(index_file)

        for chapter in chapters:
            content = self.renderer.render(chapter.source.read_text(encoding="utf-8"))
            html_file = self.output_dir / f"{chapter.source.stem}.html"
            html_file.write_text(
                chapter_template.render(
                    chapters=chapters,
                    content=content,
                    title=self.config.chapter_title.replace("{title}", chapter.title),
                    root_path=self.config.root_path,
                    current_chapter=chapter.source,
                ),
                encoding="utf-8",
            )
            written.append(html_file)
            self.logger.debug("Rendered chapter %s", html_file.name)

        self.logger.info("Built %d pages into %s", len(written), self.output_dir)
        return written

    def _chapter(self, path: Path) -> Chapter:
        url = f"/{path.stem}.html"
        title: str | None = None
        headings: List[Heading] = []
        ids: set[str] = set()
        in_code = False

        for line in path.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("```"):
                in_code = not in_code
                continue
            if in_code:
                continue
            match = _HEADING.match(line)
            if not match:
                continue
            level, text = len(match.group(1)), match.group(2)
            # every heading claims an id on the rendered page
            anchor = unique(slugify(text, "-"), ids)
            if level == 1 and title is None:
                title = text
            elif level == 2:
                headings.append(Heading(title=text, url=f"{url}#{anchor}"))

        if title is None:
            raise SiteError(f"Markdown file has no h1 title: {path}")
        return Chapter(source=path, url=url, title=title, headings=headings)

    def _template(self, name: str):
        try:
            return self._env.get_template(name)
        except TemplateNotFound as exc:
            raise SiteError(f"Template does not exist: {name}") from exc

    @staticmethod
    def _create_env(theme_dir: Path | None) -> Environment:
        directories: List[str] = []
        if theme_dir is not None:
            if not theme_dir.is_dir():
                raise SiteError(f"Theme directory does not exist: {theme_dir}")
            directories.append(str(theme_dir / "templates"))
        directories.append(str(_DEFAULT_TEMPLATES))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )


def _ignore_dot_entries(_directory: str, names: Sequence[str]) -> List[str]:
    return [name for name in names if name.startswith(".")]


def _copy_tree(source: Path, destination: Path) -> None:
    if source.is_dir():
        shutil.copytree(source, destination, dirs_exist_ok=True, ignore=_ignore_dot_entries)


__all__ = ["Chapter", "Heading", "SiteBuilder", "SiteError"]
