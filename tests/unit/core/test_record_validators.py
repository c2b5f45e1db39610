"""Structural validation rules for modules and personas."""
from __future__ import annotations

from dataclasses import replace

import pytest

from helpers.factories import make_module, make_persona


def _messages(result):
    return [issue.message for issue in result.errors]


class TestModuleIdentity:
    def test_valid_module_passes(self):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("foundation/logic/deductive-reasoning"))

        assert result.valid
        assert result.errors == []

    @pytest.mark.parametrize(
        "module_id",
        ["foundation", "Foundation/logic/a", "foundation//a", "foundation/logic/A", "foundation/-a"],
    )
    def test_malformed_ids_rejected(self, module_id):
        from instructkit.core.validation import is_valid_module_id

        assert not is_valid_module_id(module_id)

    def test_unknown_tier_message(self):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("frontend/react/hooks"))

        assert _messages(result) == [
            "Invalid tier 'frontend' in module ID frontend/react/hooks, "
            "expected one of: foundation, principle, technology, execution"
        ]
        assert result.errors[0].path == "id"

    def test_bad_id_format_message(self):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("foundation/Bad_ID"))

        assert "Invalid module ID format: foundation/Bad_ID" in _messages(result)

    def test_schema_version_must_be_current(self):
        from instructkit.core.validation import validate_module

        result = validate_module(replace(make_module("foundation/x/a"), schema_version="1.0"))

        assert _messages(result) == ["Invalid schema version: 1.0, expected '2.0'"]

    @pytest.mark.parametrize("version", ["1.0", "v1.0.0", "01.0.0", ""])
    def test_version_must_be_semver(self, version):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("foundation/x/a", version=version))

        assert any(m.startswith("Invalid version format") for m in _messages(result))

    def test_semver_prerelease_accepted(self):
        from instructkit.core.validation import validate_module

        assert validate_module(make_module("foundation/x/a", version="1.0.0-rc.1+build.5")).valid

    def test_capabilities_required(self):
        from instructkit.core.validation import validate_module

        result = validate_module(replace(make_module("foundation/x/a"), capabilities=()))

        assert "Module must have at least one capability" in _messages(result)

    def test_blank_capability_rejected(self):
        from instructkit.core.validation import validate_module

        result = validate_module(replace(make_module("foundation/x/a"), capabilities=("ok", " ")))

        assert [issue.path for issue in result.errors] == ["capabilities[1]"]

    @pytest.mark.parametrize("level,valid", [(0, True), (6, True), (7, False), (-1, False)])
    def test_cognitive_level_range(self, level, valid):
        from instructkit.core.validation import validate_module

        result = validate_module(replace(make_module("foundation/x/a"), cognitive_level=level))

        assert result.valid is valid


class TestModuleMetadata:
    def test_required_metadata_fields(self):
        from instructkit.core.validation import validate_module

        module = make_module("foundation/x/a")
        module = replace(module, metadata=replace(module.metadata, name="", semantic=" "))

        result = validate_module(module)

        assert _messages(result) == [
            "Missing required field: metadata.name",
            "Missing required field: metadata.semantic",
        ]

    def test_tags_must_be_lowercase(self):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("foundation/x/a", tags=["ok", "NotOk"]))

        assert _messages(result) == ["Tag must be lowercase: NotOk"]
        assert result.errors[0].path == "metadata.tags[1]"

    def test_replaced_by_requires_deprecated(self):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("foundation/x/a", replaced_by="foundation/x/b"))

        assert _messages(result) == ["replacedBy requires deprecated: true"]

    def test_replaced_by_must_be_valid_id(self):
        from instructkit.core.validation import validate_module

        result = validate_module(make_module("foundation/x/a", deprecated=True, replaced_by="not an id"))

        assert _messages(result) == ["replacedBy must be a valid module ID: not an id"]


class TestModuleContent:
    def test_module_without_content(self):
        from instructkit.core.validation import validate_module

        module = replace(make_module("foundation/x/a"), content=None, declared_content_keys=())

        assert _messages(validate_module(module)) == ["Module must have at least one component"]

    def test_components_and_shorthand_are_exclusive(self):
        from instructkit.core.validation import validate_module

        module = replace(
            make_module("foundation/x/a"),
            content=None,
            declared_content_keys=("instruction", "components"),
        )

        messages = _messages(validate_module(module))

        assert len(messages) == 1
        assert messages[0].startswith("Module cannot declare both a components list and shorthand")

    def test_only_one_shorthand_allowed(self):
        from instructkit.core.validation import validate_module

        module = replace(
            make_module("foundation/x/a"),
            content=None,
            declared_content_keys=("instruction", "knowledge"),
        )

        result = validate_module(module)

        assert _messages(result) == ["Module declares more than one shorthand component: instruction, knowledge"]
        assert result.errors[0].path == "knowledge"

    def test_data_warnings(self):
        from instructkit.core.model import DataComponent, DataDirective
        from instructkit.core.validation import validate_module

        module = make_module(
            "technology/x/data",
            content=DataComponent(data=DataDirective("application/x-custom", "  ")),
        )

        result = validate_module(module)

        assert result.valid
        assert [issue.path for issue in result.warnings] == ["data.mediaType", "data.value"]


class TestPersonaValidation:
    def test_valid_persona(self):
        from instructkit.core.validation import validate_persona

        assert validate_persona(make_persona(["foundation/x/a", ("G", ["foundation/x/b"])])).valid

    def test_legacy_schema_version_accepted(self):
        from instructkit.core.validation import validate_persona

        assert validate_persona(make_persona(["foundation/x/a"], schema_version="1.0")).valid

    def test_unknown_schema_version_rejected(self):
        from instructkit.core.validation import validate_persona

        result = validate_persona(make_persona(["foundation/x/a"], schema_version="3.0"))

        assert _messages(result) == ["Invalid schema version: 3.0, expected '1.0' or '2.0'"]

    def test_persona_must_reference_modules(self):
        from instructkit.core.validation import validate_persona

        assert _messages(validate_persona(make_persona([]))) == ["Persona must reference at least one module"]

    def test_empty_group_rejected(self):
        from instructkit.core.validation import validate_persona

        result = validate_persona(make_persona(["foundation/x/a", ("Empty", [])]))

        assert _messages(result) == ["Module group 1 'Empty' must have a non-empty 'ids' list"]

    def test_duplicate_ids_rejected(self):
        from instructkit.core.validation import validate_persona

        result = validate_persona(make_persona(["foundation/x/a", "foundation/x/a"]))

        assert _messages(result) == ["Duplicate module ID found: foundation/x/a"]

    def test_duplicate_ids_across_groups_rejected(self):
        from instructkit.core.validation import validate_persona

        result = validate_persona(make_persona(["foundation/x/a", ("G", ["foundation/x/a"])]))

        assert _messages(result) == ["Duplicate module ID found across groups: foundation/x/a"]

    def test_malformed_reference_is_a_warning(self):
        from instructkit.core.validation import validate_persona

        result = validate_persona(make_persona(["not-a-tier"]))

        assert result.valid
        assert len(result.warnings) == 1


class TestValidationResult:
    def test_raise_for_errors_carries_all_issues(self):
        from instructkit.core.exceptions import ValidationError
        from instructkit.core.validation import ValidationIssue, ValidationResult

        result = ValidationResult(
            errors=[ValidationIssue("id", "bad id", "module identity"), ValidationIssue("version", "bad version")]
        )

        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors("Module foundation/x/a")

        err = exc_info.value
        assert err.path == "id"
        assert err.section == "module identity"
        assert len(err.issues) == 2
        assert "2 error(s)" in str(err)
        assert err.to_json_error()["kind"] == "validation"

    def test_raise_for_errors_noop_when_valid(self):
        from instructkit.core.validation import ValidationResult

        ValidationResult().raise_for_errors("anything")

    def test_merge_and_to_dict(self):
        from instructkit.core.validation import ValidationIssue, ValidationResult

        merged = ValidationResult(warnings=[ValidationIssue("a", "w")]).merge(
            ValidationResult(errors=[ValidationIssue("b", "e", "s")])
        )

        assert merged.to_dict() == {
            "valid": False,
            "errors": [{"path": "b", "message": "e", "section": "s"}],
            "warnings": [{"path": "a", "message": "w"}],
        }
