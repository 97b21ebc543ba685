import pytest

from overlay_animator.keyframes import (
    add_keyframe,
    apply_overrides,
    delete_keyframe,
    effective_element,
    interpolate_element,
    move_keyframe,
    previous_keyframe_time,
    set_keyframe_easing,
    snapshot_scene,
    update_keyframe_state,
)
from overlay_animator.scene import new_element, new_group
from overlay_animator.types import GlobalKeyframe, Timeline


def _element(**extra):
    return new_element("shape", id="e1", **extra)


def _kf(time, state, easing="linear", element_id="e1"):
    return GlobalKeyframe(time=time, easing=easing, element_states={element_id: state})


def test_no_keyframes_no_overrides():
    assert interpolate_element([], "e1", _element(), 1.0) == {}


def test_element_missing_from_every_snapshot():
    kfs = [_kf(0, {"x": 0}), _kf(2, {"x": 100})]
    assert interpolate_element(kfs, "other", _element(), 1.0) == {}


def test_linear_midpoint():
    kfs = [_kf(0, {"x": 0}), _kf(2, {"x": 100})]
    assert interpolate_element(kfs, "e1", _element(), 1.0) == {"x": pytest.approx(50.0)}


def test_easing_comes_from_the_earlier_keyframe():
    kfs = [_kf(2, {"x": 100}, easing="ease-out"), _kf(0, {"x": 0}, easing="ease-in")]
    assert interpolate_element(kfs, "e1", _element(), 1.0)["x"] == pytest.approx(25.0)


def test_clamped_outside_range():
    kfs = [_kf(3, {"opacity": 0.5})]
    assert interpolate_element(kfs, "e1", _element(), 0.0) == {"opacity": 0.5}
    assert interpolate_element(kfs, "e1", _element(), 10.0) == {"opacity": 0.5}


def test_exact_boundary_returns_snapshot_verbatim():
    kfs = [_kf(1, {"x": 10, "fill": "#ff0000"}, easing="bounce"), _kf(4, {"x": 90})]
    result = interpolate_element(kfs, "e1", _element(), 1.0)
    assert result == kfs[0].element_states["e1"]
    result["x"] = -1
    assert kfs[0].element_states["e1"]["x"] == 10


def test_missing_side_falls_back_to_base_value():
    el = _element(x=20, y=40)
    kfs = [_kf(0, {"x": 0}), _kf(2, {"y": 100})]
    result = interpolate_element(kfs, "e1", el, 1.0)
    assert result["x"] == pytest.approx(10.0)
    assert result["y"] == pytest.approx(70.0)


def test_missing_base_value_falls_back_to_zero():
    el = _element()
    assert el.blur is None
    kfs = [_kf(0, {"blur": 8}), _kf(2, {})]
    assert interpolate_element(kfs, "e1", el, 1.0)["blur"] == pytest.approx(4.0)


def test_colors_blend():
    el = _element(fill="#000000")
    kfs = [_kf(0, {"fill": "#000000"}), _kf(2, {"fill": "#ffffff"})]
    assert interpolate_element(kfs, "e1", el, 1.0) == {"fill": "#808080"}
    kfs = [_kf(0, {}), _kf(2, {"stroke_color": "#ffffff"})]
    assert interpolate_element(kfs, "e1", el, 1.0) == {"stroke_color": "#808080"}


def test_unknown_properties_are_not_interpolated():
    kfs = [_kf(0, {"x": 0, "content": "a"}), _kf(2, {"x": 10, "content": "b"})]
    assert set(interpolate_element(kfs, "e1", _element(), 1.0)) == {"x"}


def test_linear_values_are_monotonic():
    kfs = [_kf(0, {"x": 10, "opacity": 1.0}), _kf(5, {"x": 250, "opacity": 0.0})]
    xs = [interpolate_element(kfs, "e1", _element(), i / 10)["x"] for i in range(51)]
    ops = [interpolate_element(kfs, "e1", _element(), i / 10)["opacity"] for i in range(51)]
    assert xs == sorted(xs)
    assert ops == sorted(ops, reverse=True)
    assert xs[0] == 10 and xs[-1] == 250


def test_picks_the_bracketing_pair():
    kfs = [_kf(0, {"x": 0}), _kf(1, {"x": 10}), _kf(3, {"x": 30}), _kf(4, {"x": 0})]
    assert interpolate_element(kfs, "e1", _element(), 2.0)["x"] == pytest.approx(20.0)
    assert interpolate_element(kfs, "e1", _element(), 3.5)["x"] == pytest.approx(15.0)


def test_camel_case_snapshot_keys_are_normalized():
    kf = GlobalKeyframe.model_validate(
        {"time": 0, "elementStates": {"e1": {"strokeColor": "#000", "hueRotate": 90, "scaleX": 2}}}
    )
    assert kf.element_states["e1"] == {"stroke_color": "#000", "hue_rotate": 90.0, "scale_x": 2.0}


def test_apply_overrides_merges_shallowly():
    el = _element(x=1, y=2, fill="#000000")
    merged = apply_overrides(el, {"x": 50.0, "fill": "#ffffff", "bogus": 1})
    assert (merged.x, merged.y, merged.fill) == (50.0, 2, "#ffffff")
    assert el.x == 1
    assert apply_overrides(el, {}) is el


def test_effective_element_recurses_into_children():
    child = new_element("text", id="c1", x=0)
    group = new_group(id="g1", children=[child])
    kfs = [
        GlobalKeyframe(time=0, element_states={"c1": {"x": 0}, "g1": {"opacity": 1}}),
        GlobalKeyframe(time=2, element_states={"c1": {"x": 40}, "g1": {"opacity": 0}}),
    ]
    result = effective_element(kfs, group, 1.0)
    assert result.opacity == pytest.approx(0.5)
    assert result.children[0].x == pytest.approx(20.0)
    assert group.children[0].x == 0


def test_snapshot_captures_whole_tree():
    child = new_element("text", id="c1")
    group = new_group(id="g1", children=[child])
    shape = new_element("shape", id="s1", stroke_width=3)
    states = snapshot_scene([group, shape])
    assert set(states) == {"g1", "c1", "s1"}
    assert states["s1"]["scale_x"] == 1.0 and states["s1"]["scale_y"] == 1.0
    assert states["s1"]["stroke_width"] == 3
    assert states["s1"]["fill"] == "#3b82f6"
    assert "blur" not in states["s1"]
    assert "fill" not in states["g1"]


def test_add_keyframe_mid_interpolation_keeps_the_scene_still():
    el = _element(x=999)
    timeline = Timeline(keyframes=[_kf(0, {"x": 0}), _kf(2, {"x": 100})])
    kf = add_keyframe(timeline, [el], 1.0)
    assert kf.element_states["e1"]["x"] == pytest.approx(50.0)
    assert kf.easing == "linear"
    assert len(timeline.keyframes) == 3


def test_add_keyframe_replaces_a_neighbour_within_epsilon():
    timeline = Timeline()
    first = add_keyframe(timeline, [_element()], 1.0)
    second = add_keyframe(timeline, [_element()], 1.005)
    assert [k.id for k in timeline.keyframes] == [second.id]
    assert first.id != second.id
    assert second.time == pytest.approx(1.0, abs=0.01)


def test_add_keyframe_rounds_and_clamps_time():
    timeline = Timeline(duration=2)
    assert add_keyframe(timeline, [], 1.234).time == pytest.approx(1.23)
    assert add_keyframe(timeline, [], 7.0).time == 2.0


def test_keyframe_management():
    timeline = Timeline(duration=5)
    a = add_keyframe(timeline, [], 0.0)
    b = add_keyframe(timeline, [], 2.0)
    set_keyframe_easing(timeline, a.id, "elastic")
    assert a.easing == "elastic"

    move_keyframe(timeline, b.id, 9.0)
    assert b.time == 5.0
    move_keyframe(timeline, b.id, 0.004)
    assert [k.id for k in timeline.keyframes] == [b.id]
    assert b.time == 0.0

    delete_keyframe(timeline, b.id)
    assert timeline.keyframes == []
    delete_keyframe(timeline, "missing")


def test_update_keyframe_state_merges():
    kf = _kf(0, {"x": 1, "y": 2})
    update_keyframe_state(kf, "e1", {"x": 5})
    update_keyframe_state(kf, "e2", {"rotation": 45})
    assert kf.element_states == {"e1": {"x": 5, "y": 2}, "e2": {"rotation": 45}}


def test_previous_keyframe_time():
    timeline = Timeline(keyframes=[_kf(3, {}), _kf(1, {}), _kf(2, {})])
    by_time = {k.time: k.id for k in timeline.keyframes}
    assert previous_keyframe_time(timeline, by_time[3]) == 2
    assert previous_keyframe_time(timeline, by_time[1]) is None
    assert previous_keyframe_time(timeline, None) is None
    assert previous_keyframe_time(timeline, "missing") is None


def test_invalid_keyframes_are_skipped_on_load():
    timeline = Timeline.model_validate(
        {"duration": 3, "keyframes": [{"time": "soon"}, {"time": 1, "elementStates": {}}]}
    )
    assert len(timeline.keyframes) == 1
    assert timeline.keyframes[0].time == 1
