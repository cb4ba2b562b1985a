"""CLI entrypoints for apidoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .docblock import DocBlockFormatError
from .generator import DocumentGenerator
from .logging import configure_logging
from .registry import ConventionError, RegistryError
from .site import SiteBuilder, SiteError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .apidoc.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidoc",
        description="Generate API reference documents and the manual site for a class library.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write one reStructuredText document per class and language.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)

    site_parser = subparsers.add_parser(
        "site",
        help="Render the Markdown manual into a static HTML site.",
    )
    _add_verbose_option(site_parser, suppress_default=True)
    _add_config_option(site_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for apidoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        try:
            documents = DocumentGenerator(config).generate()
        except (ConfigError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (RegistryError, ConventionError, DocBlockFormatError) as exc:
            parser.exit(1, f"apidoc generate failed: {exc}\n")
        print(f"Wrote {len(documents)} documents to {_relativize(Path(config.output_dir or '.'))}")
    elif args.command == "site":
        try:
            pages = SiteBuilder(config.site).build()
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        except SiteError as exc:
            parser.exit(1, f"apidoc site failed: {exc}\n")
        print(f"Built {len(pages)} pages in {_relativize(Path(config.site.output_dir or '.'))}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
