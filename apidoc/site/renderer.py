"""Markdown to HTML conversion for manual chapters."""

from __future__ import annotations

from typing import Sequence

import markdown

DEFAULT_EXTENSIONS = ("tables", "fenced_code", "toc", "attr_list")


class MarkdownRenderer:
    """Thin wrapper around ``markdown.Markdown`` reused across chapters."""

    def __init__(self, extensions: Sequence[str] | None = None) -> None:
        self._markdown = markdown.Markdown(extensions=list(extensions or DEFAULT_EXTENSIONS))

    def render(self, text: str) -> str:
        self._markdown.reset()
        return self._markdown.convert(text)


__all__ = ["DEFAULT_EXTENSIONS", "MarkdownRenderer"]
