"""Unit tests for the capacity-bounded marker builder."""

import pytest
import numpy as np

from quadruped_vis.helpers.crawl_trajectory import generate_crawl_trajectory
from quadruped_vis.visualization.motion_markers.data_types import (
    Foothold,
    LegID,
    MarkerAction,
    MarkerArray,
    MarkerType,
    RobotStateSample,
    StateLin3d,
)
from quadruped_vis.visualization.motion_markers.leg_colors import GRAY, get_leg_color
from quadruped_vis.visualization.motion_markers.marker_array_builder import MarkerArrayBuilder
from quadruped_vis.visualization.motion_markers.marker_config import MarkerConfig, NamespaceConfig
from quadruped_vis.visualization.motion_markers.trajectory_extractors import BodyPositionExtractor

STANCE = [
    Foothold(np.array([0.37, 0.21, 0.0]), LegID.LF),
    Foothold(np.array([0.37, -0.21, 0.0]), LegID.RF),
    Foothold(np.array([-0.37, 0.21, 0.0]), LegID.LH),
    Foothold(np.array([-0.37, -0.21, 0.0]), LegID.RH),
]


def make_state(t, phase_id, swing_legs=(), base_xy=(0.0, 0.0)):
    contact_state = {leg: leg not in swing_legs for leg in LegID}
    return RobotStateSample(
        time=t,
        base=StateLin3d(p=np.array([base_xy[0], base_xy[1], 0.58])),
        contact_state=contact_state,
        phase_id=phase_id,
        footholds=list(STANCE),
    )


def make_straight_trajectory(duration, dt=0.01, swing_legs=()):
    """Base moving along x at 0.1 m/s, single phase."""
    n = int(round(duration / dt)) + 1
    return [make_state(k * dt, 0, swing_legs, base_xy=(0.1 * k * dt, 0.0)) for k in range(n)]


def apply_to_sink(sink, msg):
    """Last-write-wins store that keeps markers until deleted."""
    for marker in msg.markers:
        if marker.is_delete:
            sink.pop(marker.key, None)
        else:
            sink[marker.key] = marker


@pytest.fixture
def three_phase_trajectory():
    """Phases with 3, 2 and 3 feet in contact."""
    trajectory = []
    trajectory += [make_state(0.01 * k, 0, swing_legs=(LegID.RH,)) for k in range(10)]
    trajectory += [make_state(0.1 + 0.01 * k, 1, swing_legs=(LegID.LH, LegID.RH)) for k in range(10)]
    trajectory += [make_state(0.2 + 0.01 * k, 2, swing_legs=(LegID.RF,)) for k in range(10)]
    return trajectory


@pytest.fixture
def crawl_trajectory():
    return generate_crawl_trajectory(num_steps=4)


class TestSupportPolygons:
    """Tests for the per-phase support polygon channel."""

    def test_triangle_line_triangle(self, three_phase_trajectory):
        builder = MarkerArrayBuilder(three_phase_trajectory)
        msg = MarkerArray()
        builder.add_support_polygons(msg)

        capacity = builder.marker_config.namespace('support_polygons').capacity
        assert len(msg.markers) == capacity
        assert [m.type for m in msg.markers[:3]] == [
            MarkerType.TRIANGLE_LIST, MarkerType.LINE_STRIP, MarkerType.TRIANGLE_LIST,
        ]
        assert all(m.action == MarkerAction.MODIFY for m in msg.markers[:3])
        assert [m.id for m in msg.markers] == list(range(capacity))
        assert all(m.action == MarkerAction.DELETE for m in msg.markers[3:])
        assert all(m.ns == 'support_polygons' for m in msg.markers)

    def test_polygon_geometry(self, three_phase_trajectory):
        msg = MarkerArray()
        MarkerArrayBuilder(three_phase_trajectory).add_support_polygons(msg)

        triangle, line = msg.markers[0], msg.markers[1]
        assert len(triangle.points) == 3
        assert np.allclose(triangle.points[0], STANCE[0].p)
        assert len(line.points) == 2
        assert np.isclose(line.scale[0], 0.02), "Line width should be set for LINE_STRIP"

    def test_polygon_colored_by_swing_leg(self, three_phase_trajectory):
        msg = MarkerArray()
        MarkerArrayBuilder(three_phase_trajectory).add_support_polygons(msg)

        expected = [LegID.RH, LegID.LH, LegID.RF]
        for marker, leg in zip(msg.markers[:3], expected):
            assert marker.color == get_leg_color(leg).with_alpha(0.15)

    def test_four_contacts_draw_nothing(self):
        trajectory = [make_state(0.0, 0), make_state(0.1, 1)]
        msg = MarkerArray()
        MarkerArrayBuilder(trajectory).add_support_polygons(msg)
        assert all(m.is_delete for m in msg.markers)
        assert len(msg.markers) == 30

    def test_capacity_overflow_truncates(self, three_phase_trajectory):
        config = MarkerConfig(namespaces={
            'support_polygons': NamespaceConfig('support_polygons', capacity=2, marker_size=1.0),
        })
        msg = MarkerArray()
        with pytest.warns(UserWarning, match='capacity'):
            MarkerArrayBuilder(three_phase_trajectory, config).add_support_polygons(msg)
        assert len(msg.markers) == 2
        assert not any(m.is_delete for m in msg.markers)

    def test_crawl_fills_capacity_exactly(self, crawl_trajectory):
        msg = MarkerArray()
        MarkerArrayBuilder(crawl_trajectory).add_support_polygons(msg)
        real = [m for m in msg.markers if not m.is_delete]
        assert len(real) == 4, "One triangle per swing phase"
        assert len(msg.markers) == 30


class TestFootholds:
    """Tests for the foothold channel."""

    def test_stance_feet_not_duplicated(self, crawl_trajectory):
        msg = MarkerArray()
        MarkerArrayBuilder(crawl_trajectory).add_footholds(msg)

        real = [m for m in msg.markers if not m.is_delete]
        assert len(real) == 4 + 4, "Initial stance plus one foothold per step"
        assert len(msg.markers) == 80
        assert [m.id for m in msg.markers] == list(range(80))

    def test_foothold_marker_color_and_shape(self, crawl_trajectory):
        msg = MarkerArray()
        MarkerArrayBuilder(crawl_trajectory).add_footholds(msg)

        first = msg.markers[0]
        assert first.type == MarkerType.SPHERE
        assert first.color == get_leg_color(LegID.LF)
        assert np.allclose(first.scale, 0.04)
        assert np.allclose(first.position, crawl_trajectory[0].footholds[0].p)

    def test_start_stance_cubes(self, crawl_trajectory):
        msg = MarkerArray()
        MarkerArrayBuilder(crawl_trajectory).add_start_stance(msg)
        real = [m for m in msg.markers if not m.is_delete]
        assert len(real) == 4
        assert all(m.type == MarkerType.CUBE for m in real)
        assert len(msg.markers) == 80


class TestContinuousChannel:
    """Tests for dt-sampled trajectory channels."""

    def test_body_path_example(self):
        """T=1.0, dt=0.1, horizon 10: ids 0-9 drawn, 10-99 deleted."""
        trajectory = make_straight_trajectory(1.0)
        msg = MarkerArray()
        MarkerArrayBuilder(trajectory).add_trajectory(msg, 'body', 0.1, 0.011, BodyPositionExtractor())

        assert len(msg.markers) == 100
        assert [m.id for m in msg.markers] == list(range(100))
        assert not any(m.is_delete for m in msg.markers[:10])
        assert all(m.is_delete for m in msg.markers[10:])

    def test_total_independent_of_duration(self):
        counts = []
        for duration in [0.5, 1.0, 2.37, 4.0]:
            msg = MarkerArray()
            builder = MarkerArrayBuilder(make_straight_trajectory(duration))
            builder.add_trajectory(msg, 'body', 0.1, 0.011, BodyPositionExtractor())
            counts.append(len(msg.markers))
        assert counts == [100] * 4

    def test_sampled_positions_follow_base(self):
        trajectory = make_straight_trajectory(1.0)
        msg = MarkerArray()
        MarkerArrayBuilder(trajectory).add_trajectory(msg, 'body', 0.1, 0.011, BodyPositionExtractor())

        xs = [m.position[0] for m in msg.markers[:10]]
        assert np.all(np.diff(xs) > 0), "Base moves forward"
        assert all(m.position[2] == 0.0 for m in msg.markers[:10])

    def test_gray_without_swing_leg(self):
        msg = MarkerArray()
        builder = MarkerArrayBuilder(make_straight_trajectory(1.0))
        builder.add_trajectory(msg, 'body', 0.1, 0.011, BodyPositionExtractor())
        assert all(m.color == GRAY for m in msg.markers[:10])

    def test_swing_leg_color(self):
        msg = MarkerArray()
        builder = MarkerArrayBuilder(make_straight_trajectory(1.0, swing_legs=(LegID.RF, LegID.LH)))
        builder.add_trajectory(msg, 'body', 0.1, 0.011, BodyPositionExtractor())
        assert all(m.color == get_leg_color(LegID.RF) for m in msg.markers[:10])

    def test_default_body_and_zmp_namespaces(self, crawl_trajectory):
        msg = MarkerArray()
        builder = MarkerArrayBuilder(crawl_trajectory)
        builder.add_body_trajectory(msg)
        builder.add_zmp_trajectory(msg)
        assert len(msg.namespace('body')) == 1000
        assert len(msg.namespace('zmp')) == 100

    def test_empty_trajectory_fails_without_output(self):
        msg = MarkerArray()
        builder = MarkerArrayBuilder([])
        with pytest.raises(ValueError):
            builder.add_body_trajectory(msg)
        assert len(msg) == 0

    def test_duration_beyond_horizon_warns(self):
        config = MarkerConfig.from_params({
            'deletion_horizon': 0.5,
            'namespaces': {'body': {'dt': 0.1, 'marker_size': 0.011}},
        })
        msg = MarkerArray()
        builder = MarkerArrayBuilder(make_straight_trajectory(1.0), config)
        with pytest.warns(UserWarning, match='horizon'):
            builder.add_body_trajectory(msg)
        assert [m.id for m in msg.markers] == list(range(5)), "Ids stay below the horizon"
        assert not any(m.is_delete for m in msg.markers)

    def test_invalid_dt(self):
        builder = MarkerArrayBuilder(make_straight_trajectory(1.0))
        with pytest.raises(ValueError):
            builder.add_trajectory(MarkerArray(), 'body', 0.0, 0.011, BodyPositionExtractor())


class TestSinglePrimitives:
    """Tests for start, ellipse and line strip markers."""

    def test_start_marker(self):
        trajectory = [make_state(0.0, 0, base_xy=(1.5, -0.5))]
        msg = MarkerArray()
        MarkerArrayBuilder(trajectory).add_start(msg)

        assert len(msg.markers) == 1
        start = msg.markers[0]
        assert start.key == ('start', 0)
        assert start.type == MarkerType.CYLINDER
        assert np.allclose(start.position, [1.5, -0.5, 0.0])

    def test_start_marker_padded_to_capacity(self):
        config = MarkerConfig.from_params({
            'namespaces': {'start': {'capacity': 3, 'marker_size': 0.02}},
        })
        msg = MarkerArray()
        MarkerArrayBuilder([make_state(0.0, 0)], config).add_start(msg)

        assert [m.id for m in msg.markers] == [0, 1, 2]
        assert not msg.markers[0].is_delete
        assert all(m.is_delete for m in msg.markers[1:])

    def test_start_marker_empty_trajectory(self):
        with pytest.raises(ValueError):
            MarkerArrayBuilder().add_start(MarkerArray())

    def test_ellipse_and_line_strip(self):
        msg = MarkerArray()
        builder = MarkerArrayBuilder()
        builder.add_ellipse(msg, 1.0, 0.5, 0.4, 0.2, 'goal')
        builder.add_line_strip(msg, 2.0, 0.3, 'gap')

        ellipse, line = msg.markers
        assert ellipse.key == ('goal', 0)
        assert np.allclose(ellipse.scale, [0.4, 0.2, 0.01])
        assert line.type == MarkerType.LINE_STRIP
        assert np.allclose(line.points[0], [2.0, -0.5, 0.0])
        assert np.allclose(line.points[1], [2.0, 0.5, 0.0])


class TestSinkSynchronization:
    """Replays of different lengths must not leave stale markers in the sink."""

    def test_shorter_replay_clears_longer(self):
        sink = {}
        long_builder = MarkerArrayBuilder(generate_crawl_trajectory(num_steps=8))
        apply_to_sink(sink, long_builder.build_marker_array())
        long_count = len(sink)

        short_builder = MarkerArrayBuilder(generate_crawl_trajectory(num_steps=2))
        short_msg = short_builder.build_marker_array()
        apply_to_sink(sink, short_msg)

        expected = {m.key for m in short_msg.markers if not m.is_delete}
        assert set(sink) == expected
        assert len(sink) < long_count

    def test_longer_than_horizon_replay_leaves_no_stale_markers(self):
        config = MarkerConfig.from_params({
            'deletion_horizon': 1.0,
            'namespaces': {'body': {'dt': 0.1, 'marker_size': 0.011}},
        })
        sink = {}
        msg = MarkerArray()
        with pytest.warns(UserWarning, match='horizon'):
            MarkerArrayBuilder(make_straight_trajectory(2.0), config).add_body_trajectory(msg)
        apply_to_sink(sink, msg)
        assert max(key[1] for key in sink) < config.horizon_steps(0.1)

        short_builder = MarkerArrayBuilder(make_straight_trajectory(0.5), config)
        msg = MarkerArray()
        short_builder.add_body_trajectory(msg)
        apply_to_sink(sink, msg)

        fresh_sink = {}
        fresh_msg = MarkerArray()
        short_builder.add_body_trajectory(fresh_msg)
        apply_to_sink(fresh_sink, fresh_msg)
        assert set(sink) == set(fresh_sink), "Sink must match a fresh replay of the short run"
        assert len(sink) == 5

    def test_build_is_deterministic(self, crawl_trajectory):
        builder = MarkerArrayBuilder(crawl_trajectory)
        first = builder.build_marker_array()
        second = builder.build_marker_array()

        assert [(m.key, m.action, m.type) for m in first.markers] == \
               [(m.key, m.action, m.type) for m in second.markers]
        assert all(np.allclose(a.position, b.position) for a, b in zip(first.markers, second.markers))

    def test_non_monotonic_trajectory_rejected(self):
        with pytest.raises(ValueError):
            MarkerArrayBuilder([make_state(0.1, 0), make_state(0.0, 0)])
        with pytest.raises(ValueError):
            MarkerArrayBuilder([make_state(0.0, 1), make_state(0.1, 0)])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
