"""Renderers turning class metadata into reStructuredText."""

from .descriptor import DEFAULT_SOURCE_URL, ClassDescriptor
from .signature import SignatureFormatter, render_literal

__all__ = [
    "ClassDescriptor",
    "DEFAULT_SOURCE_URL",
    "SignatureFormatter",
    "render_literal",
]
