"""ConflictAwareRegistry keeps every arrival and resolves at lookup time."""
from __future__ import annotations

import threading

import pytest

from helpers.factories import make_module


def _sources():
    from instructkit.core.model import ModuleSource, SourceType

    return (
        ModuleSource(SourceType.STANDARD, "/lib"),
        ModuleSource(SourceType.LOCAL, "/project/modules"),
        ModuleSource(SourceType.LOCAL, "/project/overrides"),
    )


def _registry_with_conflict(strategy="error"):
    from instructkit.core.registry import ConflictAwareRegistry

    std, local, override = _sources()
    registry = ConflictAwareRegistry(strategy)
    registry.add(make_module("foundation/logic/a", version="1.0.0"), std)
    registry.add(make_module("foundation/logic/a", version="2.0.0"), local)
    registry.add(make_module("principle/testing/b"), local)
    return registry


class TestRegistryPopulation:
    def test_duplicate_ids_are_kept_not_rejected(self):
        registry = _registry_with_conflict()

        assert registry.size() == 2
        assert len(registry) == 2
        assert registry.has("foundation/logic/a")
        assert "principle/testing/b" in registry
        assert "foundation/logic/missing" not in registry
        assert len(registry.get_all_entries()["foundation/logic/a"]) == 2

    def test_arrival_sequence_is_monotonic(self):
        registry = _registry_with_conflict()

        sequence = [
            entry.added_at
            for entries in registry.get_all_entries().values()
            for entry in entries
        ]
        assert sorted(sequence) == [0, 1, 2]
        first, second = registry.get_all_entries()["foundation/logic/a"]
        assert first.added_at < second.added_at

    def test_add_all_registers_every_module(self):
        from instructkit.core.registry import ConflictAwareRegistry

        std, _, _ = _sources()
        registry = ConflictAwareRegistry()
        registry.add_all([make_module("foundation/x/one"), make_module("foundation/x/two")], std)

        assert registry.ids() == ["foundation/x/one", "foundation/x/two"]

    def test_concurrent_adds_lose_nothing(self):
        from instructkit.core.model import ModuleSource, SourceType
        from instructkit.core.registry import ConflictAwareRegistry

        registry = ConflictAwareRegistry("warn")
        module_ids = [f"foundation/x/m{i}" for i in range(5)]
        modules = {module_id: make_module(module_id) for module_id in module_ids}
        start = threading.Barrier(8)

        def writer(n: int) -> None:
            source = ModuleSource(SourceType.LOCAL, f"/worker/{n}")
            start.wait()
            for i in range(50):
                registry.add(modules[module_ids[i % len(module_ids)]], source)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = registry.get_all_entries()
        stamps = [e.added_at for id_entries in entries.values() for e in id_entries]
        assert sorted(entries) == module_ids
        assert len(stamps) == 400
        assert sorted(stamps) == list(range(400))
        for id_entries in entries.values():
            assert len(id_entries) == 80
            assert [e.added_at for e in id_entries] == sorted(e.added_at for e in id_entries)

    def test_invalid_default_strategy_rejected(self):
        from instructkit.core.registry import ConflictAwareRegistry

        with pytest.raises(ValueError, match="Invalid conflict strategy"):
            ConflictAwareRegistry("overwrite")


class TestRegistryInspection:
    def test_get_conflicts_none_for_single_entry(self):
        registry = _registry_with_conflict()

        assert registry.get_conflicts("principle/testing/b") is None
        assert registry.get_conflicts("foundation/logic/missing") is None

    def test_get_conflicts_lists_entries_in_arrival_order(self):
        registry = _registry_with_conflict()

        conflicts = registry.get_conflicts("foundation/logic/a")
        assert conflicts is not None
        assert [e.module.version for e in conflicts] == ["1.0.0", "2.0.0"]
        assert registry.get_conflicting_ids() == ["foundation/logic/a"]

    def test_source_summary_counts_entries_per_source(self):
        registry = _registry_with_conflict()

        assert registry.get_source_summary() == {
            "standard:/lib": 1,
            "local:/project/modules": 2,
        }


class TestRegistryResolution:
    def test_unknown_id_resolves_to_none(self):
        registry = _registry_with_conflict()

        assert registry.resolve("foundation/logic/missing") is None
        assert registry.resolve_entry("foundation/logic/missing", "error") is None

    def test_single_entry_resolves_under_any_strategy(self):
        registry = _registry_with_conflict()

        for strategy in ("error", "warn", "replace"):
            assert registry.resolve("principle/testing/b", strategy).id == "principle/testing/b"

    def test_error_strategy_raises_conflict_error(self):
        from instructkit.core.exceptions import ConflictError

        registry = _registry_with_conflict()

        with pytest.raises(ConflictError) as exc_info:
            registry.resolve("foundation/logic/a", "error")

        err = exc_info.value
        assert err.module_id == "foundation/logic/a"
        assert err.conflict_count == 2
        assert "2 candidates" in str(err)
        assert err.kind == "conflict"
        assert err.context["sources"] == ["standard:/lib", "local:/project/modules"]

    def test_warn_strategy_returns_first_entry(self, caplog):
        registry = _registry_with_conflict()

        with caplog.at_level("WARNING"):
            module = registry.resolve("foundation/logic/a", "warn")

        assert module.version == "1.0.0"
        assert "Module conflict for 'foundation/logic/a'" in caplog.text

    def test_replace_strategy_returns_last_entry(self):
        registry = _registry_with_conflict()

        assert registry.resolve("foundation/logic/a", "replace").version == "2.0.0"

    def test_default_strategy_used_when_none_given(self):
        registry = _registry_with_conflict("replace")

        assert registry.resolve("foundation/logic/a").version == "2.0.0"
        assert registry.resolve("foundation/logic/a", "warn").version == "1.0.0"

    def test_resolution_does_not_mutate_registry(self):
        registry = _registry_with_conflict()

        registry.resolve("foundation/logic/a", "replace")
        registry.resolve("foundation/logic/a", "warn")

        assert len(registry.get_conflicts("foundation/logic/a")) == 2

    def test_resolve_all_fails_fast_under_error(self):
        from instructkit.core.exceptions import ConflictError

        registry = _registry_with_conflict()

        with pytest.raises(ConflictError):
            registry.resolve_all("error")

    def test_resolve_all_under_replace(self):
        registry = _registry_with_conflict()

        resolved = registry.resolve_all("replace")

        assert set(resolved) == {"foundation/logic/a", "principle/testing/b"}
        assert resolved["foundation/logic/a"].version == "2.0.0"
