"""Runtime introspection of live classes into ClassMetadata."""

from __future__ import annotations

import abc
import ast
import inspect
import typing
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .logging import get_logger
from .models import ClassMetadata, MethodMetadata, ParameterMetadata
from .naming import class_identifier
from .render.signature import docstring_parameter_type

_SKIPPED_BASES: Tuple[type, ...] = (object, abc.ABC, typing.Generic, typing.Protocol)  # type: ignore[assignment]
_BOUND_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def is_interface(cls: type) -> bool:
    """Return True for ``typing.Protocol`` classes."""
    return cls not in _SKIPPED_BASES and bool(getattr(cls, "_is_protocol", False))


class Introspector:
    """Builds metadata for classes through ``inspect`` and ``typing``."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        self.logger = get_logger("introspection")

    def describe(self, cls: type) -> ClassMetadata:
        identifier = self.identify(cls)
        self.logger.debug("Introspecting %s", identifier)
        parent = self._parent(cls)
        return ClassMetadata(
            identifier=identifier,
            is_interface=is_interface(cls),
            is_abstract=inspect.isabstract(cls),
            is_final=bool(cls.__dict__.get("__final__", False)),
            parent=self.identify(parent) if parent is not None else None,
            parent_is_abstract=inspect.isabstract(parent) if parent is not None else False,
            interfaces=frozenset(self.identify(base) for base in self._interfaces(cls)),
            doc=cls.__dict__.get("__doc__"),
            methods=tuple(self._methods(cls)),
        )

    def identify(self, cls: type) -> str:
        return class_identifier(cls, self.namespace)

    @staticmethod
    def _parent(cls: type) -> Optional[type]:
        for base in cls.__bases__:
            if base in _SKIPPED_BASES or is_interface(base):
                continue
            return base
        return None

    @staticmethod
    def _interfaces(cls: type) -> List[type]:
        return [base for base in cls.__mro__[1:] if is_interface(base)]

    def _methods(self, cls: type) -> Iterator[MethodMetadata]:
        seen: set[str] = set()
        for klass in cls.__mro__:
            if klass in _SKIPPED_BASES:
                continue
            declaring = self.identify(klass)
            for name, attribute in vars(klass).items():
                if name in seen:
                    continue
                func, binding = _unwrap(attribute)
                if func is None or func.__module__ == "typing":
                    continue
                seen.add(name)
                yield self._method(klass, declaring, name, attribute, func, binding)

    def _method(
        self,
        klass: type,
        declaring: str,
        name: str,
        attribute: Any,
        func: Callable[..., Any],
        binding: Optional[str],
    ) -> MethodMetadata:
        if name == "__new__":
            # implicit staticmethod that receives the class
            binding = None
        modifiers: List[str] = []
        if getattr(attribute, "__isabstractmethod__", False):
            modifiers.append("abstract")
        if getattr(func, "__final__", False):
            modifiers.append("final")
        modifiers.append(_visibility(klass, name))
        if binding:
            modifiers.append(binding)

        doc = func.__doc__
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            return MethodMetadata(declaring, name, tuple(modifiers), (), doc)

        parameters = list(signature.parameters.values())
        if binding != "static" and parameters and parameters[0].kind in _BOUND_KINDS:
            parameters = parameters[1:]

        sources = _default_sources(func)
        rendered = tuple(self._parameter(parameter, doc, sources) for parameter in parameters)
        return MethodMetadata(
            declaring_class=declaring,
            name=name,
            modifiers=tuple(modifiers),
            parameters=rendered,
            doc=doc,
            return_annotation=_annotation_text(signature.return_annotation) or None,
        )

    @staticmethod
    def _parameter(
        parameter: inspect.Parameter, doc: Optional[str], sources: Dict[str, str]
    ) -> ParameterMetadata:
        name = parameter.name
        variadic = False
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            name, variadic = f"*{name}", True
        elif parameter.kind is inspect.Parameter.VAR_KEYWORD:
            name, variadic = f"**{name}", True

        type_text = (
            docstring_parameter_type(doc, parameter.name)
            or _annotation_text(parameter.annotation)
            or "unknown"
        )
        return ParameterMetadata(
            name=name,
            type_annotation=type_text,
            is_optional=variadic or parameter.default is not inspect.Parameter.empty,
            default=parameter.default,
            default_source=sources.get(parameter.name),
        )


def _unwrap(attribute: Any) -> Tuple[Optional[Callable[..., Any]], Optional[str]]:
    if isinstance(attribute, staticmethod):
        return attribute.__func__, "static"
    if isinstance(attribute, classmethod):
        return attribute.__func__, "class"
    if inspect.isfunction(attribute):
        return attribute, None
    return None, None


def _visibility(klass: type, name: str) -> str:
    if name.startswith("__") and name.endswith("__"):
        return "public"
    if name.startswith(f"_{klass.__name__.lstrip('_')}__"):
        return "private"
    if name.startswith("_"):
        return "protected"
    return "public"


def _annotation_text(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return ""
    if isinstance(annotation, str):
        return annotation
    return inspect.formatannotation(annotation)


def _default_sources(func: Callable[..., Any]) -> Dict[str, str]:
    """Map parameter names to the dotted names their defaults are written as."""
    try:
        source = inspect.getsource(func)
    except (OSError, TypeError):
        return {}
    if source[:1].isspace():
        source = "if True:\n" + source
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return {}

    node = next(
        (item for item in ast.walk(tree) if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef))),
        None,
    )
    if node is None:
        return {}

    arguments = node.args
    positional = [*arguments.posonlyargs, *arguments.args]
    pairs = list(zip(positional[len(positional) - len(arguments.defaults):], arguments.defaults))
    pairs.extend(
        (arg, default)
        for arg, default in zip(arguments.kwonlyargs, arguments.kw_defaults)
        if default is not None
    )

    sources: Dict[str, str] = {}
    for arg, default in pairs:
        if isinstance(default, (ast.Name, ast.Attribute)):
            sources[arg.arg] = ast.unparse(default)
    return sources


__all__ = ["Introspector", "is_interface"]
