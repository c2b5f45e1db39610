"""Module records.

A module's content is a tagged union of component types::

    InstructionComponent | KnowledgeComponent | DataComponent | MultiComponent

Each component only accepts the directives listed in its ``DIRECTIVES``
class attribute and checks its own invariants on construction, so a module
that exists in memory always has a well-formed body.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Tuple, Union


class ComponentType(str, Enum):
    INSTRUCTION = "instruction"
    KNOWLEDGE = "knowledge"
    DATA = "data"


def _require_text(value: Any, what: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} must be a non-empty string")


def _require_text_items(items: Iterable[Any], what: str) -> None:
    for item in items:
        if not isinstance(item, str):
            raise ValueError(f"{what} entries must be strings, got {type(item).__name__}")


@dataclass(frozen=True, slots=True)
class Example:
    title: str
    rationale: str
    snippet: str
    language: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.title, "example title")
        if not isinstance(self.rationale, str):
            raise ValueError("example rationale must be a string")
        if not isinstance(self.snippet, str):
            raise ValueError("example snippet must be a string")

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "title": self.title,
            "rationale": self.rationale,
            "snippet": self.snippet,
        }
        if self.language:
            result["language"] = self.language
        return result


@dataclass(frozen=True, slots=True)
class DataDirective:
    """Structured data rendered as a fenced block; ``media_type`` is an IANA type."""

    media_type: str
    value: str

    def __post_init__(self) -> None:
        _require_text(self.media_type, "data mediaType")
        if not isinstance(self.value, str):
            raise ValueError("data value must be a string")

    def to_dict(self) -> Dict[str, Any]:
        return {"mediaType": self.media_type, "value": self.value}


class _Component:
    """Shared behaviour for single components."""

    type: ClassVar[ComponentType]
    DIRECTIVES: ClassVar[Tuple[str, ...]]

    def directives(self) -> Dict[str, Any]:
        """Return the directives that carry content, keyed by directive name."""
        present: Dict[str, Any] = {}
        for name in self.DIRECTIVES:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, (tuple, str)) and not value:
                continue
            present[name] = value
        return present

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type.value}
        for name, value in self.directives().items():
            if name == "data":
                result.update(value.to_dict())
            elif name == "examples":
                result[name] = [example.to_dict() for example in value]
            elif isinstance(value, tuple):
                result[name] = list(value)
            else:
                result[name] = value
        return result


@dataclass(frozen=True, slots=True)
class InstructionComponent(_Component):
    goal: str
    principles: Tuple[str, ...] = ()
    constraints: Tuple[str, ...] = ()
    process: Tuple[str, ...] = ()
    criteria: Tuple[str, ...] = ()
    examples: Tuple[Example, ...] = ()

    type: ClassVar[ComponentType] = ComponentType.INSTRUCTION
    DIRECTIVES: ClassVar[Tuple[str, ...]] = (
        "goal",
        "principles",
        "constraints",
        "process",
        "criteria",
        "examples",
    )

    def __post_init__(self) -> None:
        _require_text(self.goal, "instruction goal")
        for name in ("principles", "constraints", "process", "criteria"):
            _require_text_items(getattr(self, name), f"instruction {name}")


@dataclass(frozen=True, slots=True)
class KnowledgeComponent(_Component):
    goal: str
    principles: Tuple[str, ...] = ()
    examples: Tuple[Example, ...] = ()

    type: ClassVar[ComponentType] = ComponentType.KNOWLEDGE
    DIRECTIVES: ClassVar[Tuple[str, ...]] = ("goal", "principles", "examples")

    def __post_init__(self) -> None:
        _require_text(self.goal, "knowledge goal")
        _require_text_items(self.principles, "knowledge principles")


@dataclass(frozen=True, slots=True)
class DataComponent(_Component):
    data: DataDirective
    goal: Optional[str] = None

    type: ClassVar[ComponentType] = ComponentType.DATA
    DIRECTIVES: ClassVar[Tuple[str, ...]] = ("goal", "data")

    def __post_init__(self) -> None:
        if not isinstance(self.data, DataDirective):
            raise ValueError("data component requires a data directive")
        if self.goal is not None:
            _require_text(self.goal, "data goal")


Component = Union[InstructionComponent, KnowledgeComponent, DataComponent]


@dataclass(frozen=True, slots=True)
class MultiComponent:
    """An ordered list of components rendered one after another."""

    components: Tuple[Component, ...]

    def __post_init__(self) -> None:
        if not self.components:
            raise ValueError("components list must not be empty")
        for component in self.components:
            if not isinstance(component, (InstructionComponent, KnowledgeComponent, DataComponent)):
                raise ValueError(
                    f"components entries must be instruction, knowledge or data components, "
                    f"got {type(component).__name__}"
                )

    def to_dict(self) -> Dict[str, Any]:
        return {"components": [c.to_dict() for c in self.components]}


ModuleContent = Union[InstructionComponent, KnowledgeComponent, DataComponent, MultiComponent]

SHORTHAND_KEYS: Tuple[str, ...] = tuple(t.value for t in ComponentType)
COMPONENTS_KEY = "components"


def iter_components(content: Optional[ModuleContent]) -> Tuple[Component, ...]:
    """Flatten module content to its components in declared order."""
    if content is None:
        return ()
    if isinstance(content, MultiComponent):
        return content.components
    return (content,)


@dataclass(frozen=True)
class ModuleMetadata:
    name: str
    description: str
    semantic: str
    tags: Tuple[str, ...] = ()
    deprecated: bool = False
    replaced_by: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extra)
        result.update(
            {
                "name": self.name,
                "description": self.description,
                "semantic": self.semantic,
            }
        )
        if self.tags:
            result["tags"] = list(self.tags)
        if self.deprecated:
            result["deprecated"] = True
        if self.replaced_by:
            result["replacedBy"] = self.replaced_by
        return result


@dataclass(frozen=True)
class Module:
    """A reusable, identified unit of instructional content.

    Attributes:
        id: Tier-qualified identity, e.g. ``foundation/logic/deductive-reasoning``
        version: SemVer of the content; informational only
        schema_version: Module format version
        capabilities: What the module provides
        metadata: Descriptive and lifecycle metadata
        content: Tagged-union body (``None`` only for invalid input kept for validation)
        cognitive_level: Optional abstraction level (0-6)
        declared_content_keys: Body keys the author used (``instruction``, ``components``...)
        file_path: Origin file, attached by the loader
    """

    id: str
    version: str
    schema_version: str
    capabilities: Tuple[str, ...]
    metadata: ModuleMetadata
    content: Optional[ModuleContent] = None
    cognitive_level: Optional[int] = None
    declared_content_keys: Tuple[str, ...] = ()
    file_path: Optional[Path] = field(default=None, compare=False)

    @property
    def tier(self) -> str:
        return self.id.split("/", 1)[0]

    @property
    def components(self) -> Tuple[Component, ...]:
        return iter_components(self.content)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "version": self.version,
            "schemaVersion": self.schema_version,
            "capabilities": list(self.capabilities),
            "metadata": self.metadata.to_dict(),
        }
        if self.cognitive_level is not None:
            result["cognitiveLevel"] = self.cognitive_level
        if isinstance(self.content, MultiComponent):
            result.update(self.content.to_dict())
        elif self.content is not None:
            body = self.content.to_dict()
            body.pop("type", None)
            result[self.content.type.value] = body
        if self.file_path is not None:
            result["filePath"] = str(self.file_path)
        return result


__all__ = [
    "ComponentType",
    "Example",
    "DataDirective",
    "InstructionComponent",
    "KnowledgeComponent",
    "DataComponent",
    "MultiComponent",
    "Component",
    "ModuleContent",
    "ModuleMetadata",
    "Module",
    "SHORTHAND_KEYS",
    "COMPONENTS_KEY",
    "iter_components",
]
