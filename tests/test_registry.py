"""Tests for apidoc.registry."""

from __future__ import annotations

import sys

import pytest

from apidoc.config import ConfigError
from apidoc.registry import DuplicateClassError, RegistryError, SourceRegistry
from tests._fixtures.library_builder import SAMPLE_LIBRARY, LibraryBuilder


def test_discover_skips_dot_entries_and_other_extensions(library_builder: LibraryBuilder) -> None:
    library_builder.write(
        {
            "Client.py": "class Client:\n    pass\n",
            "http/Request.py": "class Request:\n    pass\n",
            ".hidden/Secret.py": "class Secret:\n    pass\n",
            ".Dot.py": "class Dot:\n    pass\n",
            "notes.txt": "not python\n",
            "__pycache__/Client.py": "class Cached:\n    pass\n",
        }
    )

    files = library_builder.registry().discover()

    relative = {path.relative_to(library_builder.root.resolve()).as_posix() for path in files}
    assert relative == {"Client.py", "http/Request.py"}


def test_discover_rejects_missing_directory(tmp_path) -> None:
    registry = SourceRegistry(tmp_path / "missing" / "acme", "acme")

    with pytest.raises(NotADirectoryError):
        registry.discover()


def test_load_registers_modules_once(library_builder: LibraryBuilder) -> None:
    library_builder.write(SAMPLE_LIBRARY)
    registry = library_builder.registry()
    files = registry.discover()

    registry.load(files)
    module = sys.modules["acme.http.Client"]
    registry.load(files)

    assert sys.modules["acme.http.Client"] is module
    assert files <= registry.loaded_files()


def test_load_reports_every_failed_file(library_builder: LibraryBuilder) -> None:
    library_builder.write(
        {
            "Good.py": "class Good:\n    pass\n",
            "Broken.py": "raise RuntimeError('boom')\n",
            "Invalid.py": "class Invalid(:\n",
        }
    )
    registry = library_builder.registry()

    with pytest.raises(RegistryError) as excinfo:
        registry.load(registry.discover())

    failed = {path.name for path in excinfo.value.failures}
    assert failed == {"Broken.py", "Invalid.py"}
    assert "boom" in str(excinfo.value)
    assert "acme.Broken" not in sys.modules


def test_load_detects_module_bound_to_other_file(library_builder: LibraryBuilder, tmp_path) -> None:
    library_builder.write({"Client.py": "class Client:\n    pass\n"})
    other = SourceRegistry(library_builder.root, "acme")
    other.load(other.discover())

    elsewhere = tmp_path / "elsewhere" / "acme"
    elsewhere.mkdir(parents=True)
    (elsewhere / "Client.py").write_text("class Client:\n    pass\n", encoding="utf-8")
    registry = SourceRegistry(elsewhere, "acme")

    with pytest.raises(RegistryError) as excinfo:
        registry.load(registry.discover())

    assert "already bound" in str(excinfo.value)


def test_package_init_is_loaded_before_siblings(library_builder: LibraryBuilder) -> None:
    library_builder.write(
        {
            "__init__.py": "VERSION = '1.0'\n",
            "Client.py": "from acme import VERSION\n\n\nclass Client:\n    version = VERSION\n",
        }
    )

    registry = library_builder.load()

    assert registry.resolve("acme.Client").version == "1.0"


def test_enumerate_target_classes_is_sorted_and_merges_interfaces(
    library_builder: LibraryBuilder,
) -> None:
    library_builder.write(SAMPLE_LIBRARY)
    registry = library_builder.load()

    assert registry.enumerate_target_classes() == ["acme.Base", "acme.Countable", "acme.http.Client"]


def test_convention_violation_is_reported(library_builder: LibraryBuilder) -> None:
    library_builder.write(
        {
            "http/Client.py": "class Client:\n    pass\n\n\nclass Helper:\n    pass\n",
        }
    )
    registry = library_builder.load()

    classes = registry.enumerate_target_classes()

    assert classes == ["acme.http.Client", "acme.http.Helper"]
    assert registry.find_convention_violations(classes) == ["acme.http.Helper"]


def test_duplicate_identifier_is_fatal(library_builder: LibraryBuilder) -> None:
    library_builder.write(
        {
            "Client.py": "class Client:\n    pass\n",
            "Other.py": "class Client:\n    pass\n",
        }
    )
    registry = library_builder.load()

    with pytest.raises(DuplicateClassError) as excinfo:
        registry.enumerate_target_classes()

    assert excinfo.value.identifier == "acme.Client"
    assert {path.name for path in excinfo.value.failures} == {"Client.py", "Other.py"}


def test_module_name_maps_paths_into_namespace(library_builder: LibraryBuilder) -> None:
    registry = library_builder.registry()

    assert registry.module_name(library_builder.root / "http" / "Client.py") == "acme.http.Client"
    assert registry.module_name(library_builder.root / "http" / "__init__.py") == "acme.http"
    assert registry.module_name(library_builder.root / "__init__.py") == "acme"


def test_root_must_end_with_namespace_path(tmp_path) -> None:
    (tmp_path / "lib").mkdir()

    with pytest.raises(ConfigError, match="must end with the namespace path acme"):
        SourceRegistry(tmp_path / "lib", "acme")


def test_dotted_namespace_matches_nested_root(tmp_path) -> None:
    registry = SourceRegistry(tmp_path / "src" / "acme" / "http", "acme.http")

    assert registry.module_name(registry.root / "Client.py") == "acme.http.Client"
    with pytest.raises(ConfigError):
        SourceRegistry(tmp_path / "src" / "http", "acme.http")


def test_files_outside_root_are_reported(library_builder: LibraryBuilder, tmp_path) -> None:
    library_builder.write({"Client.py": "class Client:\n    pass\n"})
    stray = tmp_path / "Stray.py"
    stray.write_text("class Stray:\n    pass\n", encoding="utf-8")
    registry = library_builder.registry()

    with pytest.raises(RegistryError) as excinfo:
        registry.load({*registry.discover(), stray})

    assert excinfo.value.failures == {stray.resolve(): f"outside source root {registry.root}"}
    assert "acme.Client" in sys.modules

    with pytest.raises(RegistryError, match="outside source root"):
        registry.discover(tmp_path)
