"""Docstring parsing into description paragraphs and code samples."""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

_FENCE_OPEN = re.compile(r"^```[\w+-]*$")
_FENCE_CLOSE = "```"
_TYPE_TOKEN = re.compile(r"^\w+(?:\.\w+)*$")
_ESCAPED_QUOTES = (('\\"\\"\\"', '"""'), ("\\'\\'\\'", "'''"))


class DocBlockFormatError(RuntimeError):
    """Raised when a docstring opens a code sample that is never closed."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Unterminated code sample in docstring of {target}")


@dataclass(frozen=True)
class DocBlock:
    """Structured form of a docstring."""

    description: Tuple[str, ...] = ()
    code: Tuple[str, ...] = ()

    def serialize(self) -> str:
        """Return a docstring body that parses back to this block."""
        parts = list(self.description)
        if self.code:
            parts.append("\n".join([_FENCE_CLOSE, *self.code, _FENCE_CLOSE]))
        return "\n\n".join(parts)


class DocCommentParser:
    """Splits raw docstrings into prose paragraphs and a fenced code sample.

    Fields such as ``@param``, ``@type`` or ``@rtype`` carry structured data
    read elsewhere; ``strip_annotation_lines`` removes them from the prose.
    """

    def parse(
        self,
        raw: str | None,
        strip_annotation_lines: bool = False,
        target: Optional[str] = None,
    ) -> DocBlock:
        if not raw:
            return DocBlock()

        lines = self._strip_decoration(raw)
        prose, code = self._split_code(lines, target or "<unknown>")
        if strip_annotation_lines:
            prose = [line for line in prose if not line.strip().startswith("@")]

        return DocBlock(description=tuple(self._paragraphs(prose)), code=tuple(code))

    @staticmethod
    def _strip_decoration(raw: str) -> List[str]:
        text = inspect.cleandoc(raw)
        for escaped, literal in _ESCAPED_QUOTES:
            text = text.replace(escaped, literal)
        return text.splitlines()

    @staticmethod
    def _split_code(lines: Sequence[str], target: str) -> tuple[List[str], List[str]]:
        prose: List[str] = []
        code: List[str] = []
        region: List[str] | None = None
        indent = 0

        for line in lines:
            stripped = line.strip()
            if region is None:
                if _FENCE_OPEN.match(stripped):
                    region = []
                    indent = len(line) - len(line.lstrip())
                    continue
                prose.append(line)
                continue

            if stripped == _FENCE_CLOSE:
                if code:
                    code.append("")
                code.extend(region)
                region = None
                # the sample separates the prose around it
                prose.append("")
                continue

            if line[:indent].strip():
                region.append(line.strip())
            else:
                region.append(line[indent:].rstrip())

        if region is not None:
            raise DocBlockFormatError(target)

        return prose, code

    @staticmethod
    def _paragraphs(lines: Sequence[str]) -> List[str]:
        paragraphs: List[str] = []
        current: List[str] = []
        for line in lines:
            text = line.strip()
            if not text:
                if current:
                    paragraphs.append(" ".join(current))
                    current = []
                continue
            current.append(text)
        if current:
            paragraphs.append(" ".join(current))

        # Drop leading bare type names left over from return fields.
        start = 0
        while start < len(paragraphs) and _TYPE_TOKEN.match(paragraphs[start]):
            start += 1
        return paragraphs[start:]


__all__ = ["DocBlock", "DocBlockFormatError", "DocCommentParser"]
