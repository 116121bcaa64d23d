"""Unit tests for Scene and SceneStore"""

import json
import random

import pytest

from core.defaults import DEFAULT_TOPIC, GRADIENT_PALETTE
from core.models.scene import Scene, validate_gradient
from core.scene_store import (
    NEW_SCENE_EMPHASIS,
    NEW_SCENE_NARRATION,
    NEW_SCENE_TITLE,
    SCENE_BLUEPRINTS,
    SceneStore,
    resolve_topic,
)
from tests.mocks.fixtures import make_scene, make_scene_list


class TestScene:
    """Tests for the Scene record"""

    def test_defaults(self):
        scene = Scene(title="Hook", narration="Hello")
        assert scene.duration == 6
        assert scene.emphasis is None
        assert scene.gradient == GRADIENT_PALETTE["Sky Surge"]
        assert len(scene.id) == 32

    def test_ids_are_unique(self):
        ids = {Scene(title="", narration="").id for _ in range(50)}
        assert len(ids) == 50

    def test_empty_title_allowed(self):
        scene = make_scene(title="")
        assert scene.title == ""

    def test_gradient_list_normalized_to_tuple(self):
        scene = make_scene(gradient=["#fff", "#000000"])
        assert scene.gradient == ("#fff", "#000000")

    @pytest.mark.parametrize("gradient", [
        ("#2563eb",),
        ("#2563eb", "#9333ea", "#000000"),
        ("blue", "#9333ea"),
        ("#12345", "#9333ea"),
        "#2563eb",
    ])
    def test_invalid_gradient_rejected(self, gradient):
        with pytest.raises(ValueError):
            validate_gradient(gradient)

    @pytest.mark.parametrize("duration", [float("nan"), float("inf"), "6", None, True])
    def test_invalid_duration_rejected(self, duration):
        with pytest.raises(ValueError):
            make_scene(duration=duration)

    def test_fractional_duration_allowed(self):
        assert make_scene(duration=7.5).duration == 7.5

    def test_round_trip_dict(self):
        scene = make_scene(emphasis="Note", duration=9)
        restored = Scene.from_dict(json.loads(json.dumps(scene.to_dict())))
        assert restored == scene

    def test_from_dict_fills_missing_id(self):
        scene = Scene.from_dict({"title": "T", "narration": "N"})
        assert scene.id
        assert scene.duration == 6


class TestResolveTopic:

    def test_blank_topic_uses_default(self):
        assert resolve_topic("") == DEFAULT_TOPIC
        assert resolve_topic("   ") == DEFAULT_TOPIC
        assert resolve_topic(None) == DEFAULT_TOPIC

    def test_topic_is_trimmed(self):
        assert resolve_topic("  Home automation  ") == "Home automation"


class TestSeed:
    """Tests for auto-composing scenes from a topic"""

    def test_six_scenes_in_order(self, seeded_store):
        titles = [scene.title for scene in seeded_store]
        assert titles == [title for title, _, _ in SCENE_BLUEPRINTS]
        assert titles[0] == "Hook"
        assert titles[-1] == "Call To Action"

    def test_default_durations_and_runtime(self, seeded_store):
        assert all(scene.duration == 6 for scene in seeded_store)
        assert seeded_store.total_runtime == 36

    def test_topic_interpolated(self, seeded_store):
        hook = seeded_store.scenes[0]
        cta = seeded_store.scenes[-1]
        assert "Test Topic lets you storyboard" in hook.narration
        assert "Start automating your test topic today" in cta.narration

    def test_gradients_from_palette(self, seeded_store):
        palette = set(GRADIENT_PALETTE.values())
        assert all(scene.gradient in palette for scene in seeded_store)

    def test_emphasis_present(self, seeded_store):
        assert all(scene.emphasis for scene in seeded_store)

    def test_blank_topic_uses_default(self):
        store = SceneStore()
        store.seed("")
        assert DEFAULT_TOPIC in store.scenes[0].narration

    def test_seed_replaces_contents(self, seeded_store):
        seeded_store.add()
        seeded_store.seed("Other")
        assert len(seeded_store) == 6
        assert "Other" in seeded_store.scenes[0].narration

    def test_seeded_rng_is_reproducible(self):
        a = SceneStore(rng=random.Random(3))
        b = SceneStore(rng=random.Random(3))
        a.seed("x")
        b.seed("x")
        assert [s.gradient for s in a] == [s.gradient for s in b]


class TestMutations:
    """Tests for add/update/remove/duplicate/move"""

    def test_add_default_scene(self):
        store = SceneStore()
        scene = store.add()
        assert scene.title == NEW_SCENE_TITLE
        assert scene.narration == NEW_SCENE_NARRATION
        assert scene.emphasis == NEW_SCENE_EMPHASIS
        assert scene.duration == 6
        assert store.scenes == [scene]

    def test_add_appends_at_end(self, sample_scenes):
        store = SceneStore(sample_scenes)
        scene = store.add()
        assert store.scenes[-1].id == scene.id

    def test_add_duplicate_id_rejected(self, sample_scenes):
        store = SceneStore(sample_scenes)
        with pytest.raises(ValueError):
            store.add(make_scene(id="scene_1"))

    def test_update_merges_fields(self, sample_scenes):
        store = SceneStore(sample_scenes)
        assert store.update("scene_2", duration=12, title="Updated")
        scene = store.get("scene_2")
        assert scene.duration == 12
        assert scene.title == "Updated"
        assert scene.narration == "Narration 2"

    def test_update_keeps_other_scenes(self, sample_scenes):
        store = SceneStore(sample_scenes)
        before = [store.get("scene_1"), store.get("scene_3")]
        store.update("scene_2", narration="Changed")
        assert [store.get("scene_1"), store.get("scene_3")] == before

    def test_update_does_not_mutate_previous_snapshot(self, sample_scenes):
        store = SceneStore(sample_scenes)
        snapshot = store.scenes
        store.update("scene_1", title="Changed")
        assert snapshot[0].title == "Scene 1"

    def test_update_unknown_id_is_noop(self, sample_scenes):
        store = SceneStore(sample_scenes)
        generation = store.generation
        assert store.update("missing", title="x") is False
        assert store.generation == generation

    def test_update_rejects_unknown_field(self, sample_scenes):
        store = SceneStore(sample_scenes)
        with pytest.raises(ValueError):
            store.update("scene_1", id="other")

    def test_update_validates_gradient(self, sample_scenes):
        store = SceneStore(sample_scenes)
        with pytest.raises(ValueError):
            store.update("scene_1", gradient=("red", "blue"))

    @pytest.mark.parametrize("duration", [float("nan"), float("-inf"), "12"])
    def test_update_rejects_bad_duration(self, sample_scenes, duration):
        store = SceneStore(sample_scenes)
        generation = store.generation
        with pytest.raises(ValueError):
            store.update("scene_1", duration=duration)
        assert store.get("scene_1").duration == 6
        assert store.generation == generation

    def test_remove(self, sample_scenes):
        store = SceneStore(sample_scenes)
        assert store.remove("scene_2")
        assert [s.id for s in store] == ["scene_1", "scene_3"]

    def test_remove_unknown_id(self, sample_scenes):
        store = SceneStore(sample_scenes)
        assert store.remove("missing") is False
        assert len(store) == 3

    def test_remove_last_scene_leaves_empty_store(self):
        store = SceneStore([make_scene(id="only")])
        store.remove("only")
        assert len(store) == 0
        assert store.total_runtime == 0

    def test_duplicate(self, sample_scenes):
        store = SceneStore(sample_scenes)
        clone = store.duplicate("scene_1")
        source = store.get("scene_1")
        assert clone.id != source.id
        assert clone.title == "Scene 1 (extended)"
        assert clone.narration == source.narration
        assert clone.duration == source.duration
        assert clone.gradient == source.gradient
        assert store.scenes[-1].id == clone.id
        assert len(store) == 4

    def test_duplicate_unknown_id(self, sample_scenes):
        store = SceneStore(sample_scenes)
        assert store.duplicate("missing") is None
        assert len(store) == 3

    def test_move(self, sample_scenes):
        store = SceneStore(sample_scenes)
        assert store.move("scene_3", 0)
        assert [s.id for s in store] == ["scene_3", "scene_1", "scene_2"]

    def test_move_index_clamped(self, sample_scenes):
        store = SceneStore(sample_scenes)
        store.move("scene_1", 99)
        assert [s.id for s in store] == ["scene_2", "scene_3", "scene_1"]

    def test_generation_bumped_on_mutation(self, sample_scenes):
        store = SceneStore(sample_scenes)
        generation = store.generation
        store.update("scene_1", title="x")
        store.duplicate("scene_1")
        store.remove("scene_2")
        assert store.generation == generation + 3

    def test_ids_unique_after_many_operations(self, seeded_store):
        for scene in seeded_store.scenes:
            seeded_store.duplicate(scene.id)
        seeded_store.add()
        ids = [s.id for s in seeded_store]
        assert len(ids) == len(set(ids)) == 13


class TestRuntime:

    def test_runtime_floors_short_scenes(self):
        store = SceneStore([make_scene(duration=2), make_scene(duration=10)])
        assert store.total_runtime == 14

    def test_runtime_after_update(self, seeded_store):
        first = seeded_store.scenes[0]
        seeded_store.update(first.id, duration=12)
        assert seeded_store.total_runtime == 42


class TestPersistence:

    def test_save_and_load(self, seeded_store, tmp_path):
        path = seeded_store.save(tmp_path / "boards" / "storyboard.json")
        loaded = SceneStore.load(path)
        assert loaded.scenes == seeded_store.scenes

    def test_saved_file_is_json(self, sample_scenes, tmp_path):
        path = SceneStore(sample_scenes).save(tmp_path / "s.json")
        data = json.loads(path.read_text())
        assert [item["id"] for item in data["scenes"]] == ["scene_1", "scene_2", "scene_3"]

    def test_load_rejects_string_duration(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps({"scenes": [{"title": "T", "narration": "N", "duration": "6"}]}))
        with pytest.raises(ValueError):
            SceneStore.load(path)
