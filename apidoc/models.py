"""Core data models shared across apidoc components."""

from dataclasses import dataclass, field
from enum import Enum
from inspect import Parameter
from pathlib import Path
from typing import Any, FrozenSet, Optional, Tuple


class ClassKind(str, Enum):
    """Kind of a documented class, in title precedence order."""

    INTERFACE = "Interface"
    FINAL = "Final class"
    ABSTRACT = "Abstract class"
    CONCRETE = "Class"


@dataclass(frozen=True)
class ParameterMetadata:
    """One parameter of a documented method."""

    name: str
    type_annotation: str = "unknown"
    is_optional: bool = False
    default: Any = Parameter.empty
    default_source: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not Parameter.empty


@dataclass(frozen=True)
class MethodMetadata:
    """Introspected view of a method and where it was declared."""

    declaring_class: str
    name: str
    modifiers: Tuple[str, ...] = ()
    parameters: Tuple[ParameterMetadata, ...] = ()
    doc: Optional[str] = None
    return_annotation: Optional[str] = None

    @property
    def target(self) -> str:
        return f"{self.declaring_class}:{self.name}"


@dataclass(frozen=True)
class ClassMetadata:
    """Read-only view of one class, built on demand per render pass."""

    identifier: str
    is_interface: bool = False
    is_abstract: bool = False
    is_final: bool = False
    parent: Optional[str] = None
    parent_is_abstract: bool = False
    interfaces: FrozenSet[str] = field(default_factory=frozenset)
    doc: Optional[str] = None
    methods: Tuple[MethodMetadata, ...] = ()

    @property
    def kind(self) -> ClassKind:
        if self.is_interface:
            return ClassKind.INTERFACE
        if self.is_final:
            return ClassKind.FINAL
        if self.is_abstract:
            return ClassKind.ABSTRACT
        return ClassKind.CONCRETE


@dataclass
class OutputDocument:
    """Rendered text for one class in one output language."""

    language: str
    identifier: str
    path: Path
    text: str
