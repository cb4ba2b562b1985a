"""Pipeline orchestration: load, validate, render and write API documents."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping

from .config import ApiDocConfig
from .introspection import Introspector
from .logging import get_logger
from .models import OutputDocument
from .naming import doc_name
from .registry import ConventionError, SourceRegistry
from .render.descriptor import ClassDescriptor


def apply_substitutions(text: str, substitutions: Mapping[str, str]) -> str:
    """Apply the literal find/replace table in declaration order."""
    for search, replacement in substitutions.items():
        text = text.replace(search, replacement)
    return text


class DocumentGenerator:
    """Generates one document per class for every configured language."""

    def __init__(
        self,
        config: ApiDocConfig,
        registry: SourceRegistry | None = None,
        introspector: Introspector | None = None,
        descriptor: ClassDescriptor | None = None,
    ) -> None:
        config.require("source_dir", "namespace", "output_dir")
        self.config = config
        namespace = config.namespace or ""
        self.registry = registry or SourceRegistry(Path(config.source_dir or "."), namespace)
        self.introspector = introspector or Introspector(namespace)
        self.descriptor = descriptor or ClassDescriptor(
            namespace,
            source_url=config.source_url,
            code_preamble=config.code_preamble,
        )
        self.logger = get_logger("generator")

    def generate(self) -> List[OutputDocument]:
        """Run the load-and-validate phase, then render and write every language."""
        classes = self.prepare()

        written: List[OutputDocument] = []
        for language in self.config.languages:
            self.logger.info("Rendering %d classes for language %s", len(classes), language)
            documents = [self.render(language, identifier) for identifier in classes]
            self.write(documents)
            written.extend(documents)

        self.logger.info("Wrote %d documents", len(written))
        return written

    def prepare(self) -> List[str]:
        """Load the library and return the class identifiers safe to render."""
        files = self.registry.discover()
        self.registry.load(files)
        classes = self.registry.enumerate_target_classes()
        violations = self.registry.find_convention_violations(classes)
        if violations:
            raise ConventionError(violations)
        return classes

    def render(self, language: str, identifier: str) -> OutputDocument:
        metadata = self.introspector.describe(self.registry.resolve(identifier))
        text = self.descriptor.render(metadata)
        return OutputDocument(
            language=language,
            identifier=identifier,
            path=self.output_path(language, identifier),
            text=apply_substitutions(text, self.config.substitutions),
        )

    def output_path(self, language: str, identifier: str) -> Path:
        relative = f"{language}/{doc_name(identifier)}.{self.config.doc_extension}"
        return Path(self.config.output_dir or ".") / apply_substitutions(
            relative, self.config.substitutions
        )

    def write(self, documents: Iterable[OutputDocument]) -> None:
        for document in documents:
            document.path.parent.mkdir(parents=True, exist_ok=True)
            document.path.write_text(document.text, encoding="utf-8")
            self.logger.debug("Wrote %s", document.path)


__all__ = ["DocumentGenerator", "apply_substitutions"]
