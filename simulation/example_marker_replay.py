#!/usr/bin/env python3
"""
Example script replaying crawl trajectories of different lengths into a marker sink.

This script shows:
1. How to build all visualization channels of a planned trajectory
2. How the fixed namespace budgets clear markers of a longer previous plan
3. How to compute joint angles for the planned footholds

Usage:
    python example_marker_replay.py
"""

import numpy as np

from quadruped_vis.helpers.crawl_trajectory import generate_crawl_trajectory
from quadruped_vis.helpers.inverse_kinematics import QuadrupedInverseKinematics
from quadruped_vis.visualization.motion_markers import (
    LegID,
    MarkerArrayBuilder,
    get_last_foothold,
)


class DictMarkerSink:
    """Stand-in for a renderer: keeps the last marker per (ns, id) until deleted."""

    def __init__(self):
        self.markers = {}

    def publish(self, msg):
        for marker in msg.markers:
            if marker.is_delete:
                self.markers.pop(marker.key, None)
            else:
                self.markers[marker.key] = marker

    def count_by_namespace(self):
        counts = {}
        for ns, _ in self.markers:
            counts[ns] = counts.get(ns, 0) + 1
        return counts


def replay_trajectories(step_counts=(8, 3, 5)):
    """Publish one marker array per trajectory and print what the sink shows."""
    print("Replaying crawl trajectories...")
    print("=" * 70)

    sink = DictMarkerSink()
    for num_steps in step_counts:
        trajectory = generate_crawl_trajectory(num_steps=num_steps)
        builder = MarkerArrayBuilder(trajectory)
        msg = builder.build_marker_array()
        sink.publish(msg)

        duration = trajectory[-1].time - trajectory[0].time
        print(f"\nTrajectory with {num_steps} steps ({duration:.2f}s, {len(trajectory)} samples)")
        print("-" * 70)
        print(f"  Markers sent:    {len(msg.markers)}")
        print(f"  Markers visible: {len(sink.markers)}")
        for ns, count in sorted(sink.count_by_namespace().items()):
            print(f"    {ns:<18} {count}")

    print("\n✓ Sink shows only the markers of the last trajectory")


def print_joint_angles(num_steps=4):
    """Joint angles of the stance legs at the start of every phase."""
    print("\n" + "=" * 70)
    print("Joint angles along the plan")
    print("=" * 70)

    ik = QuadrupedInverseKinematics()
    trajectory = generate_crawl_trajectory(num_steps=num_steps)

    prev_phase = None
    for state in trajectory:
        if state.phase_id == prev_phase:
            continue
        prev_phase = state.phase_id

        pos_b = {leg: get_last_foothold(leg, state.footholds).p - state.base.p for leg in LegID}
        q = ik.solve_joints(pos_b)
        swing = [leg.name for leg in state.get_swing_legs()] or ['-']
        print(f"  phase {state.phase_id:2d}  t={state.time:5.2f}s  swing={swing[0]:<3} "
              f"q_LF={np.round(q.at_leg(LegID.LF), 3)}")


if __name__ == "__main__":
    print("=" * 70)
    print("Motion Marker Replay")
    print("=" * 70)

    replay_trajectories()
    print_joint_angles()
