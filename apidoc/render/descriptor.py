"""Renders one introspected class as a reStructuredText document."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..docblock import DocCommentParser
from ..logging import get_logger
from ..models import ClassMetadata, MethodMetadata
from ..naming import doc_name, in_namespace, source_path
from .signature import SignatureFormatter

DEFAULT_SOURCE_URL = "https://github.com/{namespace}/{namespace}/blob/master/{path}"

_RAW_HTML_ROLE = ".. role:: raw-html(raw)\n   :format: html"
_SOURCE_ANCHOR = (
    ':raw-html:`<a href="{url}" class="btn btn-default btn-sm">Source on GitHub</a>`'
)


class ClassDescriptor:
    """Composes title, inheritance, source link, docs and methods of a class."""

    def __init__(
        self,
        namespace: str,
        *,
        source_url: str = DEFAULT_SOURCE_URL,
        code_preamble: Optional[str] = None,
        parser: DocCommentParser | None = None,
        formatter: SignatureFormatter | None = None,
    ) -> None:
        self.namespace = namespace
        self.source_url = source_url
        self.code_preamble = code_preamble if code_preamble is not None else f"import {namespace}"
        self.parser = parser or DocCommentParser()
        self.formatter = formatter or SignatureFormatter(namespace)
        self.logger = get_logger("render")

    def render(self, metadata: ClassMetadata) -> str:
        blocks: List[str] = [
            self.title(metadata),
            self.extends(metadata),
            self.implements(metadata),
            self.source_link(metadata),
        ]
        if metadata.doc is not None:
            blocks.extend(self.documentation(metadata.doc, metadata.identifier))
        blocks.append(self.methods(metadata.methods))
        return "\n\n".join(block for block in blocks if block) + "\n"

    def title(self, metadata: ClassMetadata) -> str:
        heading = f"{metadata.kind.value} **{metadata.identifier}**"
        return f"{heading}\n{'=' * len(heading)}"

    def extends(self, metadata: ClassMetadata) -> str:
        if metadata.parent is None:
            return ""
        if in_namespace(metadata.parent, self.namespace):
            role = "abstract class" if metadata.parent_is_abstract else "class"
            return f"*extends* {role} {self._reference(metadata.parent)}"
        return f"*extends* {metadata.parent}"

    def implements(self, metadata: ClassMetadata) -> str:
        if not metadata.interfaces:
            return ""
        rendered = []
        for interface in sorted(metadata.interfaces):
            if in_namespace(interface, self.namespace):
                rendered.append(self._reference(interface))
            else:
                rendered.append(interface)
        return "*implements* " + ", ".join(rendered)

    def source_link(self, metadata: ClassMetadata) -> str:
        url = self.source_url.format(
            namespace=self.namespace,
            path=source_path(metadata.identifier),
        )
        return f"{_RAW_HTML_ROLE}\n\n{_SOURCE_ANCHOR.format(url=url)}"

    def documentation(self, doc: str, target: str) -> List[str]:
        """Return the description paragraphs and code block of a docstring."""
        block = self.parser.parse(doc, strip_annotation_lines=True, target=target)
        rendered = list(block.description)
        if block.code:
            rendered.append(self.code_block(block.code))
        return rendered

    def code_block(self, lines: Sequence[str]) -> str:
        body = [self.code_preamble, "", *lines]
        indented = [f"    {line}" if line.strip() else "" for line in body]
        return ".. code-block:: python\n\n" + "\n".join(indented)

    def methods(self, methods: Sequence[MethodMetadata]) -> str:
        if not methods:
            return ""

        rendered: List[str] = []
        for method in methods:
            self.logger.debug("Rendering %s", method.target)
            parts = [self.formatter.render_method(method)]
            if method.doc is not None:
                parts.extend(self.documentation(method.doc, method.target))
            rendered.append("\n\n".join(part for part in parts if part))

        heading = "Methods"
        return f"{heading}\n{'-' * len(heading)}\n\n" + "\n\n".join(rendered)

    @staticmethod
    def _reference(identifier: str) -> str:
        return f":doc:`{identifier} <{doc_name(identifier)}>`"


__all__ = ["ClassDescriptor", "DEFAULT_SOURCE_URL"]
