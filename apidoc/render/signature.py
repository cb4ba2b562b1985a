"""Method signature rendering, including default-value literals."""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping
from typing import Any, Optional

from ..models import MethodMetadata, ParameterMetadata
from ..naming import in_namespace

_RTYPE_PATTERN = re.compile(r"@rtype\b[ \t]*:?[ \t]*([^\s:].*)")
_RETURN_PATTERN = re.compile(r"@returns?\b[ \t]*:?[ \t]*([^\s:].*)")


def docstring_return_type(doc: str | None) -> str:
    """Return the text following the first ``@rtype``/``@return`` field."""
    if not doc:
        return ""
    match = _RTYPE_PATTERN.search(doc) or _RETURN_PATTERN.search(doc)
    return match.group(1).strip() if match else ""


def docstring_parameter_type(doc: str | None, name: str) -> str:
    """Return the ``@type <name>:`` text of a docstring, or an empty string."""
    if not doc:
        return ""
    pattern = re.compile(rf"@type[ \t]+{re.escape(name.lstrip('*'))}[ \t]*:[ \t]*([^\s:].*)")
    match = pattern.search(doc)
    return match.group(1).strip() if match else ""


def render_literal(value: Any, source: Optional[str] = None) -> str:
    """Reconstruct a copy-pasteable literal for a default value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, enum.Enum):
        return f"{type(value).__qualname__}.{value.name}"
    if isinstance(value, int):
        return source or str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return f"float('{value}')"
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_literal(item) for item in value) + "]"
    if isinstance(value, (set, frozenset)):
        items = sorted((render_literal(item) for item in value))
        return "[" + ", ".join(items) + "]"
    if isinstance(value, Mapping):
        pairs = (f"{render_literal(key)}: {render_literal(item)}" for key, item in value.items())
        return "{" + ", ".join(pairs) + "}"
    return source or repr(value)


class SignatureFormatter:
    """Renders method declarations as reStructuredText lines."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    def render_parameter(self, parameter: ParameterMetadata, *, owner_in_namespace: bool) -> str:
        name = parameter.name.replace("*", "\\*")
        rendered = f"*{parameter.type_annotation or 'unknown'}* ${name}"
        # Defaults of classes outside the library are not reproduced.
        if parameter.is_optional and parameter.has_default and owner_in_namespace:
            rendered += f" = {render_literal(parameter.default, parameter.default_source)}"
        return rendered

    def render_method(self, method: MethodMetadata) -> str:
        owner_in_namespace = in_namespace(method.declaring_class, self.namespace)
        parameters = ", ".join(
            self.render_parameter(parameter, owner_in_namespace=owner_in_namespace)
            for parameter in method.parameters
        )
        parts = [
            " ".join(method.modifiers),
            self.return_type(method),
            f"**{method.name}**",
        ]
        return " ".join(part for part in parts if part) + f" ({parameters})"

    @staticmethod
    def return_type(method: MethodMetadata) -> str:
        return docstring_return_type(method.doc) or (method.return_annotation or "")


__all__ = [
    "SignatureFormatter",
    "docstring_parameter_type",
    "docstring_return_type",
    "render_literal",
]
