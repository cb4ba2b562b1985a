"""Static manual site: Markdown chapters rendered through a Jinja2 theme."""

from .builder import Chapter, Heading, SiteBuilder, SiteError
from .renderer import MarkdownRenderer

__all__ = ["Chapter", "Heading", "MarkdownRenderer", "SiteBuilder", "SiteError"]
