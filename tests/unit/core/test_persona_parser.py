"""Parsing persona YAML, including legacy ``moduleGroups`` files."""
from __future__ import annotations

import pytest
import yaml

from helpers.factories import persona_dict
from helpers.io_utils import write_persona_file, write_yaml


def _dump(data) -> str:
    return yaml.safe_dump(data, sort_keys=False)


class TestParsePersona:
    def test_bare_ids_and_groups(self):
        from instructkit.core.model import ModuleGroup
        from instructkit.core.parsing import parse_persona

        persona = parse_persona(
            _dump(
                persona_dict(
                    ["foundation/x/a", {"group": "Practice", "ids": ["foundation/x/b"]}, {"ids": ["foundation/x/c"]}],
                    identity="You are careful.",
                    attribution=True,
                )
            )
        )

        assert persona.modules[0] == "foundation/x/a"
        assert persona.modules[1] == ModuleGroup(ids=("foundation/x/b",), group_name="Practice")
        assert persona.modules[2] == ModuleGroup(ids=("foundation/x/c",))
        assert persona.identity == "You are careful."
        assert persona.attribution is True

    def test_null_identity_becomes_empty(self):
        from instructkit.core.parsing import parse_persona

        persona = parse_persona(_dump(persona_dict(["foundation/x/a"], identity=None)))

        assert persona.identity == ""
        assert persona.attribution is False

    def test_legacy_module_groups(self):
        from instructkit.core.parsing import parse_persona

        data = persona_dict([], schemaVersion="1.0")
        del data["modules"]
        data["moduleGroups"] = [
            {"groupName": "Core", "modules": ["foundation/x/a", "foundation/x/b"]},
            {"modules": ["foundation/x/c"]},
        ]

        persona = parse_persona(_dump(data))

        assert persona.schema_version == "1.0"
        assert [(g.group_name, g.ids) for g in persona.groups()] == [
            ("Core", ("foundation/x/a", "foundation/x/b")),
            (None, ("foundation/x/c",)),
        ]

    def test_modules_and_module_groups_are_exclusive(self):
        from instructkit.core.exceptions import PersonaLoadError
        from instructkit.core.parsing import parse_persona

        data = persona_dict(["foundation/x/a"], moduleGroups=[{"modules": ["foundation/x/b"]}])

        with pytest.raises(PersonaLoadError):
            parse_persona(_dump(data))

    def test_schema_violation(self):
        from instructkit.core.exceptions import PersonaLoadError
        from instructkit.core.parsing import parse_persona

        data = persona_dict(["foundation/x/a"])
        del data["semantic"]

        with pytest.raises(PersonaLoadError) as exc_info:
            parse_persona(_dump(data))

        assert exc_info.value.kind == "persona_load"
        assert exc_info.value.context["schema_errors"]

    def test_duplicate_reference_fails_validation(self):
        from instructkit.core.exceptions import PersonaLoadError
        from instructkit.core.parsing import parse_persona

        data = persona_dict(["foundation/x/a", {"group": "G", "ids": ["foundation/x/a"]}])

        with pytest.raises(PersonaLoadError, match="Duplicate module ID found across groups"):
            parse_persona(_dump(data))

    def test_validate_false_skips_structural_rules(self):
        from instructkit.core.parsing import parse_persona

        persona = parse_persona(_dump(persona_dict(["foundation/x/a", "foundation/x/a"])), validate=False)

        assert persona.module_ids() == ["foundation/x/a", "foundation/x/a"]


class TestLoadPersona:
    def test_load_from_file(self, tmp_path):
        from instructkit.core.parsing import load_persona

        path = write_persona_file(tmp_path / "reviewer.persona.yml", ["foundation/x/a"], name="Reviewer")

        persona = load_persona(path)

        assert persona.name == "Reviewer"
        assert persona.file_path == path

    def test_missing_file(self, tmp_path):
        from instructkit.core.exceptions import PersonaLoadError
        from instructkit.core.parsing import load_persona

        with pytest.raises(PersonaLoadError, match="Failed to read persona file"):
            load_persona(tmp_path / "missing.persona.yml")

    def test_non_utf8_file(self, tmp_path):
        from instructkit.core.exceptions import PersonaLoadError
        from instructkit.core.parsing import load_persona

        path = tmp_path / "latin.persona.yml"
        path.write_bytes(b"name: \xff\xfe\n")

        with pytest.raises(PersonaLoadError, match="Failed to read persona file") as exc_info:
            load_persona(path)
        assert exc_info.value.kind == "persona_load"
        assert exc_info.value.file_path == str(path)

    def test_non_mapping_file(self, tmp_path):
        from instructkit.core.exceptions import PersonaLoadError
        from instructkit.core.parsing import load_persona

        path = write_yaml(tmp_path / "list.persona.yml", ["foundation/x/a"])

        with pytest.raises(PersonaLoadError, match="expected a mapping"):
            load_persona(path)
