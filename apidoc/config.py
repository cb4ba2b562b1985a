"""Configuration loading for apidoc (.apidoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .render.descriptor import DEFAULT_SOURCE_URL

CONFIG_FILENAME = ".apidoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SiteConfig:
    """Manual site settings from the ``site`` section."""

    sources_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    theme_dir: Optional[Path] = None
    index_title: str = "index"
    chapter_title: str = "{title}"
    root_path: str = "/"


@dataclass
class ApiDocConfig:
    """Represents the settings defined in .apidoc.yml."""

    root: Path
    source_dir: Optional[Path] = None
    namespace: Optional[str] = None
    languages: List[str] = field(default_factory=lambda: ["en"])
    output_dir: Optional[Path] = None
    doc_extension: str = "rst"
    source_url: str = DEFAULT_SOURCE_URL
    code_preamble: Optional[str] = None
    substitutions: Dict[str, str] = field(default_factory=dict)
    site: SiteConfig = field(default_factory=SiteConfig)

    def require(self, *names: str) -> None:
        """Raise ConfigError when any of the named settings is unset."""
        for name in names:
            if getattr(self, name) in (None, "", []):
                raise ConfigError(f"{name} is not set in {CONFIG_FILENAME}")


def load_config(config_path: Path) -> ApiDocConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ApiDocConfig(root=root, output_dir=root / "docs" / "api")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    languages = _as_str_list(data.get("languages")) or ["en"]
    output_dir_str = _as_str(data.get("output_dir")) or "docs/api"
    source_dir_str = _as_str(data.get("source_dir"))

    substitutions_data = data.get("substitutions")
    if substitutions_data is None:
        substitutions: Dict[str, str] = {}
    elif isinstance(substitutions_data, dict):
        substitutions = {str(key): str(value) for key, value in substitutions_data.items()}
    else:
        raise ConfigError("substitutions must be a mapping of search text to replacement")

    return ApiDocConfig(
        root=root,
        source_dir=root / source_dir_str if source_dir_str else None,
        namespace=_as_str(data.get("namespace")),
        languages=languages,
        output_dir=root / output_dir_str,
        doc_extension=(_as_str(data.get("doc_extension")) or "rst").lstrip("."),
        source_url=_as_str(data.get("source_url")) or DEFAULT_SOURCE_URL,
        code_preamble=_as_str(data.get("code_preamble")),
        substitutions=substitutions,
        site=_load_site(root, data.get("site")),
    )


def _load_site(root: Path, value: Any) -> SiteConfig:
    if value is None:
        return SiteConfig()
    if not isinstance(value, dict):
        raise ConfigError("site must be a mapping")

    site = SiteConfig()
    for key in ("sources_dir", "output_dir", "theme_dir"):
        text = _as_str(value.get(key))
        if text:
            setattr(site, key, root / text)
    site.index_title = _as_str(value.get("index_title")) or site.index_title
    site.chapter_title = _as_str(value.get("chapter_title")) or site.chapter_title
    site.root_path = _as_str(value.get("root_path")) or site.root_path
    return site


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME and config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["ApiDocConfig", "ConfigError", "SiteConfig", "load_config"]
