"""Synthetic crawl gait trajectories.

Generates a planned trajectory without an optimizer, for demos and tests:
one leg swings at a time following the crawl sequence LF -> RH -> RF -> LH,
with a four-leg support phase between two steps.
"""

from typing import Dict, List, Optional, Sequence
import numpy as np

from quadruped_vis import config as cfg
from quadruped_vis.visualization.motion_markers.data_types import (
    Foothold,
    LegID,
    RobotStateSample,
    StateLin3d,
)
from quadruped_vis.visualization.motion_markers.foothold_utils import get_last_foothold, update_foothold

CRAWL_SEQUENCE = ('LF', 'RH', 'RF', 'LH')


def nominal_footholds(base_xy: Optional[np.ndarray] = None) -> List[Foothold]:
    """Footholds under the hips, on flat ground."""
    base_xy = np.zeros(2) if base_xy is None else np.asarray(base_xy, dtype=float)[:2]
    footholds = []
    for leg_id in LegID:
        # hip offsets point from the hip to the base
        hip_xy = base_xy - cfg.robot_params['hip_offsets'][leg_id.name][:2]
        footholds.append(Foothold(np.array([hip_xy[0], hip_xy[1], 0.0]), leg_id))
    return footholds


def generate_crawl_trajectory(
    num_steps: int = 4,
    step_length: float = 0.15,
    step_duration: float = 0.5,
    stance_duration: float = 0.2,
    dt: float = 0.01,
    base_height: float = 0.58,
    sequence: Sequence[str] = CRAWL_SEQUENCE,
    initial_footholds: Optional[List[Foothold]] = None,
) -> List[RobotStateSample]:
    """Build a crawl trajectory with constant forward base velocity.

    Args:
        num_steps: Number of swing phases.
        step_length: Forward displacement of a foot per step (meters).
        step_duration: Duration of each swing phase (seconds).
        stance_duration: Duration of the four-leg support phases (seconds).
        dt: Sample interval (seconds).
        base_height: Constant base height above ground (meters).
        sequence: Leg names in swing order, repeated cyclically.
        initial_footholds: Footholds at the start, nominal stance if None.

    Returns:
        samples: Trajectory ordered by time. Phase ids alternate between
                 support (even) and swing (odd) phases, starting and ending
                 with a support phase.
    """
    if num_steps < 0:
        raise ValueError(f"num_steps must be non-negative, got {num_steps}")
    if dt <= 0.0 or step_duration <= 0.0 or stance_duration <= 0.0:
        raise ValueError("dt, step_duration and stance_duration must be positive")

    legs = [LegID[name] for name in sequence]
    footholds = [Foothold(f.p.copy(), f.leg, f.id) for f in (initial_footholds or nominal_footholds())]

    # every leg moves once per gait cycle
    cycle_duration = len(legs) * (step_duration + stance_duration)
    base_velocity = np.array([step_length / cycle_duration, 0.0, 0.0])
    base_start = np.array([0.0, 0.0, base_height])

    # (phase duration, swing leg or None)
    phases = [(stance_duration, None)]
    for step in range(num_steps):
        phases.append((step_duration, legs[step % len(legs)]))
        phases.append((stance_duration, None))

    samples = []
    t = 0.0
    for phase_id, (duration, swing_leg) in enumerate(phases):
        n_samples = max(int(round(duration / dt)), 1)
        contact_state: Dict[int, bool] = {leg_id: leg_id != swing_leg for leg_id in LegID}
        for _ in range(n_samples):
            base = StateLin3d(p=base_start + base_velocity * t, v=base_velocity.copy())
            samples.append(RobotStateSample(
                time=t,
                base=base,
                contact_state=dict(contact_state),
                phase_id=phase_id,
                footholds=[Foothold(f.p.copy(), f.leg, f.id) for f in footholds],
            ))
            t += dt

        # the swing leg lands at the end of its phase
        if swing_leg is not None:
            last = get_last_foothold(swing_leg, footholds)
            p_new = last.p + np.array([step_length, 0.0, 0.0])
            update_foothold(Foothold(p_new, swing_leg, id=phase_id // 2), footholds)

    return samples
