"""Identifier helpers shared by the registry, introspector and renderers."""

from __future__ import annotations

import sys


def in_namespace(identifier: str, namespace: str) -> bool:
    """Return True when ``identifier`` lives under the target ``namespace``."""
    return identifier == namespace or identifier.startswith(f"{namespace}.")


def package_of(module_name: str) -> str:
    """Return the package a module belongs to (the module itself for packages)."""
    module = sys.modules.get(module_name)
    if module is not None and hasattr(module, "__path__"):
        return module_name
    return module_name.rpartition(".")[0]


def class_identifier(cls: type, namespace: str) -> str:
    """Return the dotted identifier documentation uses for ``cls``.

    Classes of the documented library are named after their package, so a
    class ``Client`` declared in ``acme/http/Client.py`` becomes
    ``acme.http.Client``. Other classes keep their module-qualified name.
    """
    module_name = cls.__module__
    if module_name == "builtins":
        return cls.__qualname__
    if in_namespace(module_name, namespace):
        package = package_of(module_name)
        return f"{package}.{cls.__qualname__}" if package else cls.__qualname__
    return f"{module_name}.{cls.__qualname__}"


def source_path(identifier: str, extension: str = ".py") -> str:
    """Return the relative source path the identifier maps to."""
    return identifier.replace(".", "/") + extension


def doc_name(identifier: str) -> str:
    """Return the document name used for cross references and output files."""
    return identifier.replace(".", "_")


__all__ = ["class_identifier", "doc_name", "in_namespace", "package_of", "source_path"]
