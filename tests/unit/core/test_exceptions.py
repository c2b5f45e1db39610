"""InstructKit error hierarchy and JSON payloads."""
from __future__ import annotations

import pytest


@pytest.mark.parametrize(
    "name,kwargs,kind",
    [
        ("BuildError", {}, "build"),
        ("ModuleLoadError", {"file_path": "/x.module.yml"}, "module_load"),
        ("PersonaLoadError", {"file_path": "/x.persona.yml"}, "persona_load"),
        ("ConfigError", {"config_path": "/modules.config.yml"}, "config"),
        ("ValidationError", {"path": "id"}, "validation"),
    ],
)
def test_kinds_are_stable(name, kwargs, kind):
    from instructkit.core import exceptions
    from instructkit.core.exceptions import InstructKitError, is_instructkit_error

    error = getattr(exceptions, name)("message", **kwargs)

    assert isinstance(error, InstructKitError)
    assert is_instructkit_error(error)
    assert error.kind == kind
    assert error.to_json_error()["kind"] == kind


def test_conflict_error_payload():
    from instructkit.core.exceptions import ConflictError

    error = ConflictError("conflict", module_id="foundation/x/a", conflict_count=3, context={"sources": ["a"]})

    assert error.to_json_error() == {
        "message": "conflict",
        "kind": "conflict",
        "code": "ConflictError",
        "context": {"sources": ["a"], "module_id": "foundation/x/a", "conflict_count": 3},
    }


def test_context_is_copied():
    from instructkit.core.exceptions import BuildError

    context = {"a": 1}
    error = BuildError("x", context=context)
    context["a"] = 2

    assert error.context == {"a": 1}


def test_file_paths_are_strings():
    from pathlib import Path

    from instructkit.core.exceptions import PersonaLoadError

    error = PersonaLoadError("p", file_path=Path("/p.persona.yml"))

    assert error.file_path == "/p.persona.yml"
    assert error.context["file_path"] == "/p.persona.yml"


def test_plain_exceptions_are_not_instructkit_errors():
    from instructkit.core.exceptions import is_instructkit_error

    assert not is_instructkit_error(ValueError("x"))
