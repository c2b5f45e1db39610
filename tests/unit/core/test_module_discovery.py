"""Discovery of module files into a registry."""
from __future__ import annotations

from pathlib import Path

from helpers.factories import module_dict
from helpers.io_utils import write_module_file, write_yaml


def _source(kind: str, root: Path):
    from instructkit.core.model import ModuleSource, SourceType

    return ModuleSource(SourceType(kind), str(root))


class TestFindModuleFiles:
    def test_sorted_by_relative_path(self, tmp_path):
        from instructkit.core.discovery import find_module_files

        write_module_file(tmp_path, "principle/testing/tdd")
        write_module_file(tmp_path, "foundation/logic/b")
        write_module_file(tmp_path, "foundation/logic/a")
        (tmp_path / "notes.yml").write_text("x: 1\n", encoding="utf-8")
        write_yaml(tmp_path / "foundation" / "extra.module.yaml", module_dict("foundation/extra"))

        files = find_module_files(tmp_path)

        assert [f.relative_to(tmp_path).as_posix() for f in files] == [
            "foundation/extra.module.yaml",
            "foundation/logic/a.module.yml",
            "foundation/logic/b.module.yml",
            "principle/testing/tdd.module.yml",
        ]

    def test_missing_root_is_empty(self, tmp_path):
        from instructkit.core.discovery import find_module_files

        assert find_module_files(tmp_path / "nope") == []


class TestModuleDiscovery:
    def test_roots_registered_in_order(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery

        std = tmp_path / "std"
        local = tmp_path / "local"
        write_module_file(std, "foundation/logic/a")
        write_module_file(local, "foundation/logic/a", version="2.0.0")
        write_module_file(local, "foundation/logic/b")

        result = ModuleDiscovery(max_workers=4).discover(
            [(std, _source("standard", std)), (local, _source("local", local))]
        )

        registry = result.registry
        assert registry.size() == 2
        assert [e.source.type.value for e in registry.get_conflicts("foundation/logic/a")] == ["standard", "local"]
        assert registry.resolve("foundation/logic/a", "replace").version == "2.0.0"
        assert result.warnings == []

    def test_order_is_stable_across_runs(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery

        root = tmp_path / "mods"
        for name in ("e", "d", "c", "b", "a"):
            write_module_file(root, f"foundation/logic/{name}")

        runs = [
            ModuleDiscovery(max_workers=8).discover([(root, _source("local", root))]).registry.ids()
            for _ in range(3)
        ]

        assert runs[0] == [f"foundation/logic/{n}" for n in "abcde"]
        assert runs[0] == runs[1] == runs[2]

    def test_raw_contents_recorded(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery

        path = write_module_file(tmp_path, "foundation/logic/a")

        result = ModuleDiscovery().discover([(tmp_path, _source("local", tmp_path))])

        module = result.registry.resolve("foundation/logic/a")
        assert result.raw_for(module.file_path) == path.read_text(encoding="utf-8")
        assert result.raw_for(None) is None

    def test_unparseable_files_become_warnings(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery

        write_module_file(tmp_path, "foundation/logic/a")
        broken = tmp_path / "foundation" / "logic" / "broken.module.yml"
        broken.write_text("id: [unclosed", encoding="utf-8")

        result = ModuleDiscovery().discover([(tmp_path, _source("local", tmp_path))])

        assert result.registry.ids() == ["foundation/logic/a"]
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith(f"Failed to load {broken}")

    def test_non_utf8_file_becomes_warning(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery

        write_module_file(tmp_path, "foundation/logic/a")
        bad = tmp_path / "foundation" / "logic" / "bad.module.yml"
        bad.write_bytes(b"id: \xff\xfe bad\n")

        result = ModuleDiscovery().discover([(tmp_path, _source("local", tmp_path))])

        assert result.registry.ids() == ["foundation/logic/a"]
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith(f"Failed to load {bad}")

    def test_id_file_name_mismatch_warns(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery

        write_yaml(tmp_path / "renamed.module.yml", module_dict("foundation/logic/original"))

        result = ModuleDiscovery().discover([(tmp_path, _source("local", tmp_path))])

        assert result.registry.has("foundation/logic/original")
        assert "does not match its file name 'renamed'" in result.warnings[0]

    def test_existing_registry_is_extended(self, tmp_path):
        from instructkit.core.discovery import ModuleDiscovery
        from instructkit.core.registry import ConflictAwareRegistry

        write_module_file(tmp_path, "foundation/logic/a")
        registry = ConflictAwareRegistry("warn")

        result = ModuleDiscovery().discover([(tmp_path, _source("local", tmp_path))], registry=registry)

        assert result.registry is registry
        assert registry.has("foundation/logic/a")


class TestStandardLibrary:
    def test_bundled_library_by_default(self):
        from instructkit.core.discovery import StandardLibrary

        library = StandardLibrary()

        assert library.exists()
        assert library.path.name == "modules"
        assert library.source().type.value == "standard"

    def test_environment_override(self, tmp_path, monkeypatch):
        from instructkit.core.constants import STANDARD_LIBRARY_ENV
        from instructkit.core.discovery import StandardLibrary

        monkeypatch.setenv(STANDARD_LIBRARY_ENV, str(tmp_path))

        assert StandardLibrary().path == tmp_path.resolve()

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        from instructkit.core.constants import STANDARD_LIBRARY_ENV
        from instructkit.core.discovery import StandardLibrary

        monkeypatch.setenv(STANDARD_LIBRARY_ENV, str(tmp_path / "env"))

        library = StandardLibrary(tmp_path / "explicit")

        assert library.path == (tmp_path / "explicit").resolve()
        assert not library.exists()
