"""CLI parser and entrypoint tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from apidoc.cli import _build_parser, main
from tests._fixtures.library_builder import SAMPLE_LIBRARY, LibraryBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["site", "--verbose"])
    assert args.verbose is True
    assert args.command == "site"


def test_cli_config_defaults_to_current_directory() -> None:
    args = _build_parser().parse_args(["generate"])
    assert args.config == "."
    assert args.verbose is False


def test_cli_requires_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_generate_command_writes_documents(
    library_builder: LibraryBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    library_builder.write(SAMPLE_LIBRARY)
    (tmp_path / ".apidoc.yml").write_text(
        'source_dir: "src/acme"\nnamespace: "acme"\noutput_dir: "docs/api"\n'
    )

    main(["generate", "--config", str(tmp_path)])

    assert (tmp_path / "docs" / "api" / "en" / "acme_http_Client.rst").is_file()
    assert "Wrote 3 documents" in capsys.readouterr().out


def test_generate_command_exits_on_convention_error(
    library_builder: LibraryBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    library_builder.write({"Client.py": "class Client:\n    pass\n\n\nclass Extra:\n    pass\n"})
    (tmp_path / ".apidoc.yml").write_text('source_dir: "src/acme"\nnamespace: "acme"\n')

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "acme.Extra" in capsys.readouterr().err
    assert not (tmp_path / "docs").exists()


def test_generate_command_reports_missing_namespace(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".apidoc.yml").write_text('source_dir: "src"\n')

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "namespace is not set" in capsys.readouterr().err


def test_site_command_builds_manual(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    manual = tmp_path / "manual"
    manual.mkdir()
    (manual / "intro.md").write_text("# Introduction\n\nHello.\n")
    (tmp_path / ".apidoc.yml").write_text(
        'site:\n  sources_dir: "manual"\n  output_dir: "build/site"\n'
    )

    main(["site", "--config", str(tmp_path)])

    assert (tmp_path / "build" / "site" / "intro.html").is_file()
    assert "Built 2 pages" in capsys.readouterr().out


def test_log_file_receives_debug_records(library_builder: LibraryBuilder, tmp_path: Path) -> None:
    library_builder.write(SAMPLE_LIBRARY)
    (tmp_path / ".apidoc.yml").write_text('source_dir: "src/acme"\nnamespace: "acme"\n')
    log_file = tmp_path / "logs" / "apidoc.log"

    main(["--log-file", str(log_file), "generate", "--config", str(tmp_path)])

    content = log_file.read_text(encoding="utf-8")
    assert "apidoc.generator: Wrote 3 documents" in content
    assert "DEBUG apidoc.render: Rendering acme.http.Client:run" in content
