"""Discovery, loading and validation of the documented class library."""

from __future__ import annotations

import importlib.machinery
import importlib.util
import os
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, Iterable, List, Mapping, Sequence, Set

from .config import ConfigError
from .logging import get_logger
from .naming import class_identifier, in_namespace, source_path

_EXCLUDED_DIRS = {"__pycache__"}


class RegistryError(RuntimeError):
    """Raised when source files fail to register with the interpreter."""

    def __init__(self, failures: Mapping[Path, str]) -> None:
        self.failures = dict(failures)
        listing = ",\n".join(f"{path} ({reason})" for path, reason in sorted(self.failures.items()))
        super().__init__(f"some source files failed to load: [\n{listing}]")


class DuplicateClassError(RegistryError):
    """Raised when two classes resolve to the same identifier."""

    def __init__(self, identifier: str, files: Iterable[Path]) -> None:
        self.identifier = identifier
        super().__init__({path: f"duplicate declaration of {identifier}" for path in files})


class ConventionError(RuntimeError):
    """Raised when classes do not live in a file named after them."""

    def __init__(self, identifiers: Sequence[str]) -> None:
        self.identifiers = list(identifiers)
        listing = ",\n".join(self.identifiers)
        super().__init__(f"some classes violate the one-class-per-file convention: [\n{listing}]")


class SourceRegistry:
    """Owns the modules loaded for one generation run.

    The interpreter's module table is process-global, so a registry is
    populated once, validated, and only then used for rendering.
    """

    def __init__(self, root: Path, namespace: str, *, extension: str = ".py") -> None:
        self.root = Path(root).expanduser().resolve()
        self.namespace = namespace
        package_parts = tuple(namespace.split("."))
        if not namespace or self.root.parts[-len(package_parts):] != package_parts:
            raise ConfigError(
                f"source directory {self.root} must end with the namespace path "
                f"{'/'.join(package_parts)} (namespace {namespace!r})"
            )
        self.extension = extension
        self.logger = get_logger("registry")
        self._classes: Dict[str, type] = {}

    def discover(self, directory: Path | None = None) -> Set[Path]:
        """Return every source file below ``directory`` (defaults to the root)."""
        base = Path(directory).expanduser().resolve() if directory is not None else self.root
        if not base.is_dir():
            raise NotADirectoryError(f"Source directory not found: {base}")
        if not base.is_relative_to(self.root):
            raise RegistryError({base: f"outside source root {self.root}"})

        files: Set[Path] = set()
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames[:] = [
                name for name in dirnames if not name.startswith(".") and name not in _EXCLUDED_DIRS
            ]
            for filename in filenames:
                if filename.startswith(".") or not filename.endswith(self.extension):
                    continue
                files.add((Path(dirpath) / filename).resolve())

        self.logger.info("Discovered %d source files under %s", len(files), base)
        return files

    def load(self, files: Iterable[Path]) -> None:
        """Load each file once and verify the interpreter registered it."""
        failures: Dict[Path, str] = {}
        inside: Set[Path] = set()
        for path in {Path(path).resolve() for path in files}:
            if path.is_relative_to(self.root):
                inside.add(path)
            else:
                failures[path] = f"outside source root {self.root}"
        requested = sorted(inside, key=self._load_order)

        for path in requested:
            name = self.module_name(path)
            existing = sys.modules.get(name)
            if existing is not None:
                existing_file = _module_file(existing)
                if existing_file != path:
                    failures[path] = f"module {name} already bound to {existing_file}"
                continue

            self._ensure_parents(name)
            is_package = path.stem == "__init__"
            spec = importlib.util.spec_from_file_location(
                name,
                path,
                submodule_search_locations=[str(path.parent)] if is_package else None,
            )
            if spec is None or spec.loader is None:
                failures[path] = "no loader available"
                continue

            module = importlib.util.module_from_spec(spec)
            sys.modules[name] = module
            try:
                spec.loader.exec_module(module)
            except Exception as exc:
                sys.modules.pop(name, None)
                failures[path] = f"{type(exc).__name__}: {exc}"
                self.logger.debug("Loading %s failed: %s", path, exc)

        loaded = self.loaded_files()
        for path in requested:
            if path not in loaded and path not in failures:
                failures[path] = "not registered after loading"

        if failures:
            raise RegistryError(failures)
        self.logger.debug("Loaded %d modules", len(requested))

    def loaded_files(self) -> Set[Path]:
        """Return the files of every module the interpreter currently knows."""
        files: Set[Path] = set()
        for module in list(sys.modules.values()):
            path = _module_file(module)
            if path is not None:
                files.add(path)
        return files

    def enumerate_target_classes(self) -> List[str]:
        """Return the sorted identifiers of every class in the target namespace."""
        classes: Dict[str, type] = {}
        for module_name, module in list(sys.modules.items()):
            if module is None or not in_namespace(module_name, self.namespace):
                continue
            for value in list(vars(module).values()):
                if not isinstance(value, type) or value.__module__ != module_name:
                    continue
                identifier = class_identifier(value, self.namespace)
                if not in_namespace(identifier, self.namespace):
                    continue
                known = classes.get(identifier)
                if known is not None and known is not value:
                    files = {
                        _module_file(sys.modules.get(cls.__module__)) or Path(cls.__module__)
                        for cls in (known, value)
                    }
                    raise DuplicateClassError(identifier, files)
                classes[identifier] = value

        self._classes = classes
        self.logger.info("Found %d classes in namespace %s", len(classes), self.namespace)
        return sorted(classes)

    def find_convention_violations(self, classes: Iterable[str]) -> List[str]:
        """Return classes without a loaded file named after their identifier."""
        loaded = [path.as_posix() for path in self.loaded_files()]
        violations: List[str] = []
        for identifier in classes:
            expected = "/" + source_path(identifier, self.extension)
            if not any(path.endswith(expected) for path in loaded):
                violations.append(identifier)
        return violations

    def resolve(self, identifier: str) -> type:
        if not self._classes:
            self.enumerate_target_classes()
        try:
            return self._classes[identifier]
        except KeyError:
            raise KeyError(f"Unknown class: {identifier}") from None

    def module_name(self, path: Path) -> str:
        relative = Path(path).resolve().relative_to(self.root).with_suffix("")
        parts = list(relative.parts)
        if parts and parts[-1] == "__init__":
            parts.pop()
        return ".".join([self.namespace, *parts])

    def _load_order(self, path: Path) -> tuple:
        relative = path.relative_to(self.root)
        return (relative.parent.parts, path.name != "__init__.py", path.name)

    def _ensure_parents(self, name: str) -> None:
        parts = name.split(".")
        namespace_depth = len(self.namespace.split("."))
        for depth in range(1, len(parts)):
            package_name = ".".join(parts[:depth])
            if package_name in sys.modules:
                continue
            if depth >= namespace_depth:
                directory = self.root.joinpath(*parts[namespace_depth:depth])
                init = directory / "__init__.py"
                if init.exists():
                    # Regular packages are loaded through load() in order.
                    continue
                locations = [str(directory)]
            else:
                locations = []
            spec = importlib.machinery.ModuleSpec(package_name, None, is_package=True)
            spec.submodule_search_locations = locations
            sys.modules[package_name] = importlib.util.module_from_spec(spec)


def _module_file(module: ModuleType | None) -> Path | None:
    filename = getattr(module, "__file__", None)
    if not filename:
        return None
    try:
        return Path(filename).resolve()
    except (OSError, ValueError):
        return None


__all__ = [
    "ConventionError",
    "DuplicateClassError",
    "RegistryError",
    "SourceRegistry",
]
