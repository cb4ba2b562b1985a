"""Tests for apidoc.naming."""

from __future__ import annotations

from collections import OrderedDict

from apidoc.naming import class_identifier, doc_name, in_namespace, source_path


def test_in_namespace_matches_whole_segments() -> None:
    assert in_namespace("acme", "acme")
    assert in_namespace("acme.http.Client", "acme")
    assert not in_namespace("acmeplus.Client", "acme")
    assert not in_namespace("Exception", "acme")


def test_identifier_helpers_map_dots() -> None:
    assert source_path("acme.http.Client") == "acme/http/Client.py"
    assert source_path("acme.Base", ".pyi") == "acme/Base.pyi"
    assert doc_name("acme.http.Client") == "acme_http_Client"


def test_class_identifier_outside_namespace() -> None:
    assert class_identifier(ValueError, "acme") == "ValueError"
    assert class_identifier(OrderedDict, "acme") == "collections.OrderedDict"


def test_class_identifier_uses_package_for_library_classes(library_builder) -> None:
    library_builder.write(
        {
            "http/__init__.py": "class Session:\n    pass\n",
            "http/Client.py": "class Client:\n    pass\n",
        }
    )
    registry = library_builder.load()

    assert class_identifier(registry.resolve("acme.http.Client"), "acme") == "acme.http.Client"
    assert class_identifier(registry.resolve("acme.http.Session"), "acme") == "acme.http.Session"
