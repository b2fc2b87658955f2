"""Soul persistence tests.

Covers:
1. Fresh defaults and append-only records
2. recent_memories ordering and copying
3. Save/reload round trip (including collaborator sections)
4. Lenient loading of broken documents, strict saving
"""

import json

import pytest
from structlog.testing import capture_logs

from genesis_framework.domain.soul import DEFAULT_SURVIVAL_LEVEL
from genesis_framework.runtime.soul import Soul


@pytest.fixture
def soul_path(tmp_path):
    return tmp_path / "souls" / "test-soul.json"


class TestFreshSoul:
    def test_defaults(self, soul_path):
        soul = Soul(soul_path)

        assert soul.cycle == 0
        assert soul.survival_level == DEFAULT_SURVIVAL_LEVEL == "CRITICAL"
        assert soul.memory == []
        assert soul.lessons == []
        assert soul.data.evolution_log == []
        assert soul.data.goals.to_dict() == {"short": [], "mid": [], "long": []}
        assert not soul_path.exists()

    def test_records_are_stamped_with_current_cycle(self, soul_path):
        soul = Soul(soul_path)
        soul.cycle = 4

        soul.remember("Test event")
        soul.learn_lesson("Test lesson")
        soul.log_evolution("Test action", "Test result")

        assert soul.memory[0]["event"] == "Test event"
        assert soul.memory[0]["cycle"] == 4
        assert "timestamp" in soul.memory[0]
        assert soul.lessons[0]["lesson"] == "Test lesson"
        assert soul.data.evolution_log[0] == {
            "action": "Test action",
            "result": "Test result",
            "cycle": 4,
            "timestamp": soul.data.evolution_log[0]["timestamp"],
        }

    def test_records_only_grow(self, soul_path):
        soul = Soul(soul_path)
        lengths = []
        for i in range(5):
            soul.remember(f"event {i}")
            soul.remember(f"event {i}")
            soul.learn_lesson(f"lesson {i}")
            lengths.append((len(soul.memory), len(soul.lessons)))

        assert lengths == sorted(lengths)
        assert len(soul.memory) == 10


class TestRecentMemories:
    def test_returns_suffix_in_original_order(self, soul_path):
        soul = Soul(soul_path)
        for i in range(6):
            soul.remember(f"m{i}")

        assert [m["event"] for m in soul.recent_memories(3)] == ["m3", "m4", "m5"]

    def test_large_n_returns_everything(self, soul_path):
        soul = Soul(soul_path)
        for i in range(3):
            soul.remember(f"m{i}")

        assert [m["event"] for m in soul.recent_memories(10)] == ["m0", "m1", "m2"]
        assert [m["event"] for m in soul.recent_memories(3)] == ["m0", "m1", "m2"]

    def test_non_positive_n_returns_nothing(self, soul_path):
        soul = Soul(soul_path)
        soul.remember("m0")

        assert soul.recent_memories(0) == []

    def test_returned_entries_are_copies(self, soul_path):
        soul = Soul(soul_path)
        soul.remember("original")

        recent = soul.recent_memories(1)
        recent[0]["event"] = "tampered"
        recent.clear()

        assert soul.memory[0]["event"] == "original"


class TestPersistence:
    def test_round_trip(self, soul_path):
        soul = Soul(soul_path)
        soul.cycle = 5
        soul.survival_level = "STABLE"
        soul.identity["name"] = "Persisted"
        soul.remember("Test event")
        soul.learn_lesson("Test lesson")
        soul.data.goals.short.append("write first article")
        soul.save()

        reloaded = Soul(soul_path)

        assert reloaded.cycle == 5
        assert reloaded.survival_level == "STABLE"
        assert reloaded.identity == {"name": "Persisted"}
        assert reloaded.memory == soul.memory
        assert reloaded.lessons == soul.lessons
        assert reloaded.data.goals.short == ["write first article"]

    def test_save_creates_missing_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "c" / "soul.json"
        Soul(path).save()

        assert path.exists()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["state"] == {"cycle": 0, "survival_level": "CRITICAL"}
        assert set(data) >= {"identity", "state", "memory", "lessons", "goals", "evolution_log"}

    def test_collaborator_sections_survive_reload(self, soul_path):
        soul = Soul(soul_path)
        soul.section("finances")["daily_limit"] = 15
        soul.save()

        reloaded = Soul(soul_path)

        assert reloaded.section("finances") == {"daily_limit": 15}
        assert "finances" in json.loads(soul_path.read_text(encoding="utf-8"))

    def test_state_and_goal_extras_survive_reload(self, soul_path):
        soul_path.parent.mkdir(parents=True)
        soul_path.write_text(json.dumps({
            "state": {"cycle": 4, "survival_level": "STABLE", "mode": "CONSERVATIVE"},
            "goals": {"short": ["ship"], "mid": [], "long": [], "north_star": "autonomy"},
        }), encoding="utf-8")

        soul = Soul(soul_path)
        soul.cycle += 1
        soul.save()

        on_disk = json.loads(soul_path.read_text(encoding="utf-8"))
        assert on_disk["state"] == {"cycle": 5, "survival_level": "STABLE", "mode": "CONSERVATIVE"}
        assert on_disk["goals"]["north_star"] == "autonomy"
        reloaded = Soul(soul_path)
        assert reloaded.data.state.extras == {"mode": "CONSERVATIVE"}
        assert reloaded.data.goals.extras == {"north_star": "autonomy"}

    def test_save_overwrites_whole_document(self, soul_path):
        soul = Soul(soul_path)
        soul.remember("one")
        soul.save()
        soul.data.memory.clear()
        soul.save()

        assert Soul(soul_path).memory == []

    def test_save_propagates_io_errors(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        soul = Soul(blocker / "soul.json")

        with pytest.raises(OSError):
            soul.save()


class TestLenientLoad:
    def test_undecodable_document_starts_fresh(self, soul_path):
        soul_path.parent.mkdir(parents=True)
        soul_path.write_text("{ this is not json", encoding="utf-8")

        with capture_logs() as logs:
            soul = Soul(soul_path)

        assert soul.cycle == 0
        assert soul.memory == []
        warnings = [entry for entry in logs if entry["event"] == "soul_load_failed"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["path"] == str(soul_path)
        assert warnings[0]["action"] == "starting_fresh"

    def test_wrong_shape_starts_fresh(self, soul_path):
        soul_path.parent.mkdir(parents=True)
        soul_path.write_text(json.dumps({"memory": "not a list"}), encoding="utf-8")

        with capture_logs() as logs:
            soul = Soul(soul_path)

        assert soul.memory == []
        assert soul.cycle == 0
        assert [entry["event"] for entry in logs] == ["soul_load_failed"]

    def test_non_object_document_starts_fresh(self, soul_path):
        soul_path.parent.mkdir(parents=True)
        soul_path.write_text("[1, 2, 3]", encoding="utf-8")

        assert Soul(soul_path).cycle == 0


class TestSections:
    @pytest.mark.parametrize("name", ["identity", "state", "memory", "lessons", "goals", "evolution_log"])
    def test_runtime_owned_names_rejected(self, soul_path, name):
        soul = Soul(soul_path)

        with pytest.raises(ValueError):
            soul.section(name)

    def test_non_object_section_is_not_replaced(self, soul_path):
        soul_path.parent.mkdir(parents=True)
        soul_path.write_text(json.dumps({"topics": ["not", "an", "object"]}), encoding="utf-8")
        soul = Soul(soul_path)

        with pytest.raises(ValueError):
            soul.section("topics")
        assert soul.data.extras["topics"] == ["not", "an", "object"]

    def test_section_is_created_once(self, soul_path):
        soul = Soul(soul_path)

        assert soul.section("finances") is soul.section("finances")


class TestContext:
    def test_summary_projection(self, soul_path):
        soul = Soul(soul_path)
        soul.cycle = 7
        for i in range(8):
            soul.remember(f"m{i}")
        soul.learn_lesson("be patient")

        ctx = soul.to_context()

        assert ctx["cycle"] == 7
        assert ctx["survival_level"] == "CRITICAL"
        assert [m["event"] for m in ctx["recent_memories"]] == ["m3", "m4", "m5", "m6", "m7"]
        assert len(ctx["lessons"]) == 1
        assert ctx["goals"] == {"short": [], "mid": [], "long": []}

    def test_summary_cannot_mutate_soul(self, soul_path):
        soul = Soul(soul_path)
        soul.identity["name"] = "Guarded"
        soul.learn_lesson("keep me")

        ctx = soul.summary()
        ctx["identity"]["name"] = "Changed"
        ctx["lessons"].append({"lesson": "injected"})
        ctx["goals"]["long"].append("injected")

        assert soul.identity["name"] == "Guarded"
        assert len(soul.lessons) == 1
        assert soul.data.goals.long == []
