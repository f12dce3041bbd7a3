"""Tests for the animation store."""

import math

import pytest
from pydantic import ValidationError

from poseforge.engine import AnimationStore, PoseInterpolator, ShapeMismatchError
from poseforge.models import Keyframe, MismatchPolicy, PoseAnimation, Vector3


def _selection_valid(store: AnimationStore) -> bool:
    sel = store.selection
    return sel is None or 0 <= sel < len(store.animation.keyframes)


class TestPlayhead:
    def test_starts_at_zero_with_first_keyframe_selected(self, store):
        assert store.current_time == 0.0
        assert store.selection == 0

    def test_default_document(self):
        store = AnimationStore()
        assert store.length == 15
        assert len(store.animation.keyframes) == 1

    def test_empty_document_has_no_selection(self):
        store = AnimationStore(PoseAnimation(length=2, keyframes=[]))
        assert store.selection is None
        assert store.selected_keyframe is None

    @pytest.mark.parametrize(
        ("requested", "expected"),
        [(3.0, 3.0), (-1.0, 0.0), (8.0, 8.0), (100.0, 8.0)],
    )
    def test_set_time_clamps(self, store, requested, expected):
        assert store.set_time(requested) == expected
        assert store.current_time == expected

    def test_current_pose_follows_playhead(self, store):
        store.set_time(6.0)
        assert store.current_pose()["MouthSmile"] == pytest.approx(1.0)

    def test_raise_policy_surfaces_through_store(self):
        anim = PoseAnimation(
            length=2,
            keyframes=[
                Keyframe(time=0, pose={"Jaw": 0.0}),
                Keyframe(time=2, pose={"Jaw": Vector3()}),
            ],
        )
        store = AnimationStore(anim, interpolator=PoseInterpolator(MismatchPolicy.RAISE))
        store.set_time(1.0)
        with pytest.raises(ShapeMismatchError):
            store.current_pose()


class TestKeyframes:
    def test_add_keyframe_at_playhead(self, store):
        store.set_time(3.5)
        index = store.add_keyframe()
        assert index == 4
        assert store.selection == 4
        assert store.animation.keyframes[4] == Keyframe(time=3.5, pose={})

    def test_add_keyframe_explicit_time(self, store):
        index = store.add_keyframe(1.25)
        assert store.animation.keyframes[index].time == 1.25

    def test_add_keyframe_leaves_old_document_untouched(self, store):
        before = store.animation
        store.add_keyframe()
        assert len(before.keyframes) == 4
        assert store.animation is not before

    def test_duplicate_copies_selected_pose(self, store):
        store.select_keyframe(1)
        store.set_time(5.0)
        index = store.add_keyframe(duplicate=True)
        copied = store.animation.keyframes[index]
        assert copied.time == 5.0
        assert copied.pose == store.animation.keyframes[1].pose

    def test_duplicate_without_selection_adds_empty(self, store):
        store.select_keyframe(None)
        index = store.add_keyframe(duplicate=True)
        assert store.animation.keyframes[index].pose == {}

    def test_delete_selected_clears_selection(self, store):
        store.select_keyframe(2)
        assert store.delete_keyframe() is True
        assert len(store.animation.keyframes) == 3
        assert store.selection is None
        assert _selection_valid(store)

    def test_delete_other_index_clears_selection(self, store):
        store.select_keyframe(3)
        assert store.delete_keyframe(0) is True
        assert store.selection is None

    def test_delete_last_keyframe(self):
        store = AnimationStore()
        assert store.delete_keyframe() is True
        assert store.animation.keyframes == []
        assert store.current_pose() == {}

    @pytest.mark.parametrize("index", [-1, 4, 99])
    def test_delete_out_of_range_is_noop(self, store, index):
        before = store.animation
        assert store.delete_keyframe(index) is False
        assert store.animation is before
        assert store.selection == 0

    def test_delete_without_selection_is_noop(self, store):
        store.select_keyframe(None)
        assert store.delete_keyframe() is False
        assert len(store.animation.keyframes) == 4

    @pytest.mark.parametrize("index", [-1, 4])
    def test_select_out_of_range_is_noop(self, store, index):
        assert store.select_keyframe(index) is False
        assert store.selection == 0

    def test_selection_invariant_over_edit_sequence(self, store):
        store.add_keyframe()
        store.delete_keyframe(0)
        store.select_keyframe(2)
        store.add_keyframe(duplicate=True)
        store.delete_keyframe()
        store.delete_keyframe(10)
        assert _selection_valid(store)


class TestChannels:
    def test_set_channel_value(self, store):
        assert store.set_channel_value(0, "MouthOpen", 0.4) is True
        assert store.animation.keyframes[0].pose["MouthOpen"] == 0.4

    def test_set_channel_value_parses_mapping(self, store):
        store.set_channel_value(0, "Head", {"x": 1, "y": 2, "z": 3})
        assert store.animation.keyframes[0].pose["Head"] == Vector3(x=1, y=2, z=3)

    def test_set_channel_value_bad_index(self, store):
        assert store.set_channel_value(9, "Head", 0.0) is False

    def test_edits_are_visible_in_next_evaluation(self, store):
        store.set_time(2.0)
        store.set_channel_value(0, "Neck", Vector3(x=1, y=1, z=1))
        assert store.current_pose()["Neck"].x == pytest.approx(0.7)

    def test_remove_channel_only_touches_one_keyframe(self, store):
        assert store.remove_channel(0, "Neck") is True
        assert "Neck" not in store.animation.keyframes[0].pose
        assert "Neck" in store.animation.keyframes[2].pose

    def test_remove_missing_channel(self, store):
        assert store.remove_channel(0, "MouthSmile") is False
        assert store.remove_channel(7, "Neck") is False

    def test_add_bone_uses_default_shape(self, store):
        assert store.add_bone(3, "MouthOpen") is True
        assert store.add_bone(3, "Head") is True
        pose = store.animation.keyframes[3].pose
        assert pose["MouthOpen"] == 0.0
        assert pose["Head"] == Vector3(x=0, y=0, z=0)

    def test_remaining_bones_excludes_present(self, store):
        remaining = store.remaining_bones(1)
        assert "MouthSmile" not in remaining
        assert "LeftArm" not in remaining
        assert "Neck" in remaining

    def test_remaining_bones_bad_index(self, store):
        assert store.remaining_bones(42) == []


class TestSubscribers:
    def test_listener_called_on_change(self, store):
        calls: list[float] = []
        store.subscribe(lambda s: calls.append(s.current_time))
        store.set_time(1.0)
        store.set_time(1.0)
        store.set_time(2.0)
        assert calls == [1.0, 2.0]

    def test_unsubscribe(self, store):
        calls: list[int] = []
        unsubscribe = store.subscribe(lambda _s: calls.append(1))
        store.add_keyframe()
        unsubscribe()
        unsubscribe()
        store.add_keyframe()
        assert calls == [1]

    def test_noop_mutations_do_not_notify(self, store):
        calls: list[int] = []
        store.subscribe(lambda _s: calls.append(1))
        store.delete_keyframe(50)
        store.select_keyframe(50)
        store.select_keyframe(0)
        assert calls == []


def test_replace_resets_selection_and_clamps_time(store, neck_animation):
    store.set_time(8.0)
    store.select_keyframe(3)
    short = neck_animation.model_copy(update={"length": 5.0})
    store.replace(short)
    assert store.animation is short
    assert store.current_time == 5.0
    assert store.selection == 0


def test_replace_with_empty_document(store):
    store.replace(PoseAnimation(length=3, keyframes=[]))
    assert store.selection is None


@pytest.mark.parametrize("bad", [math.inf, math.nan, {"x": 0, "y": math.inf, "z": 0}])
def test_non_finite_channel_value_rejected(store, bad):
    before = store.animation
    with pytest.raises(ValidationError):
        store.set_channel_value(0, "MouthOpen", bad)
    assert store.animation is before
