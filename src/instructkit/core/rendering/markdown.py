"""Deterministic Markdown rendering.

Pure functions: the same persona and modules always yield byte-identical
output. Directives render in :data:`RENDER_ORDER` regardless of the order in
which they were authored.
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence

from instructkit.core.constants import MEDIA_TYPE_LANGUAGES, RENDER_ORDER
from instructkit.core.model import Component, DataDirective, Example, Module, Persona


def infer_language_from_media_type(media_type: str) -> str:
    """Return the fence language for an IANA media type, or ``""`` if unknown."""
    return MEDIA_TYPE_LANGUAGES.get((media_type or "").strip().lower(), "")


def _fence(body: str, language: str = "") -> str:
    return f"```{language}\n{body}\n```"


def render_goal(content: str) -> str:
    return f"## Goal\n\n{content}\n"


def _bullets(heading: str, items: Sequence[str], marker: str = "- ") -> str:
    lines = "\n".join(f"{marker}{item}" for item in items)
    return f"## {heading}\n\n{lines}\n"


def render_principles(content: Sequence[str]) -> str:
    return _bullets("Principles", content)


def render_constraints(content: Sequence[str]) -> str:
    return _bullets("Constraints", content)


def render_process(content: Sequence[str]) -> str:
    lines = "\n".join(f"{i}. {item}" for i, item in enumerate(content, start=1))
    return f"## Process\n\n{lines}\n"


def render_criteria(content: Sequence[str]) -> str:
    return _bullets("Criteria", content, marker="- [ ] ")


def render_data(content: DataDirective) -> str:
    language = infer_language_from_media_type(content.media_type)
    return f"## Data\n\n{_fence(content.value, language)}\n"


def render_examples(content: Sequence[Example]) -> str:
    sections = ["## Examples\n"]
    for example in content:
        sections.append(f"### {example.title}\n")
        sections.append(f"{example.rationale}\n")
        sections.append(f"{_fence(example.snippet, example.language or '')}\n")
    return "\n".join(sections)


_DIRECTIVE_RENDERERS: Dict[str, Callable[..., str]] = {
    "goal": render_goal,
    "principles": render_principles,
    "constraints": render_constraints,
    "process": render_process,
    "criteria": render_criteria,
    "data": render_data,
    "examples": render_examples,
}


def render_directive(directive: str, content: object) -> str:
    renderer = _DIRECTIVE_RENDERERS.get(directive)
    if renderer is None:
        raise ValueError(f"Unknown directive: {directive}")
    return renderer(content)


def render_component(component: Component) -> str:
    present = component.directives()
    sections = [render_directive(name, present[name]) for name in RENDER_ORDER if name in present]
    return "\n".join(sections)


def render_module(module: Module) -> str:
    """Render one module body: each component in declared order."""
    return "\n".join(render_component(component) for component in module.components)


def render_markdown(persona: Persona, modules: Iterable[Module]) -> str:
    """Render the persona document.

    Modules are matched to the persona's references by id; references with
    no matching module are skipped. A ``---`` separator goes between rendered
    modules, never after the last one.
    """
    by_id: Dict[str, Module] = {}
    for module in modules:
        by_id.setdefault(module.id, module)

    sections: List[str] = []
    if persona.identity.strip():
        sections.append("## Identity\n")
        sections.append(f"{persona.identity}\n")

    total = sum(1 for module_id in persona.module_ids() if module_id in by_id)
    rendered = 0
    for group in persona.groups():
        if group.group_name:
            sections.append(f"# {group.group_name}\n")
        for module_id in group.ids:
            module = by_id.get(module_id)
            if module is None:
                continue
            sections.append(render_module(module))
            if persona.attribution:
                sections.append(f"[Attribution: {module.id}]\n")
            rendered += 1
            if rendered < total:
                sections.append("---\n")

    return "\n".join(sections).strip() + "\n"


__all__ = [
    "infer_language_from_media_type",
    "render_component",
    "render_constraints",
    "render_criteria",
    "render_data",
    "render_directive",
    "render_examples",
    "render_goal",
    "render_markdown",
    "render_module",
    "render_principles",
    "render_process",
]
