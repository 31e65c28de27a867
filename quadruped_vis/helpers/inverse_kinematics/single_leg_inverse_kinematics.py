"""Inverse kinematics of single-leg and four-leg HyQ robots."""

from typing import Dict, Mapping, Optional
import numpy as np

from quadruped_vis import config as cfg
from quadruped_vis.visualization.motion_markers.data_types import LegID

from .hyq_leg_inverse_kinematics import HyqLegInverseKinematics
from .ik_interface import Joints


class SingleLegInverseKinematics:
    """One HyQ leg mounted below the base, endeffector id 0."""

    def __init__(
        self,
        offset_base_to_hip: Optional[np.ndarray] = None,
        leg: Optional[HyqLegInverseKinematics] = None,
    ):
        if offset_base_to_hip is None:
            offset_base_to_hip = cfg.robot_params['single_leg_hip_offset']
        self.offset_base_to_hip = np.asarray(offset_base_to_hip, dtype=float).reshape(3)
        self.leg = leg or HyqLegInverseKinematics()

    def solve_joints(self, pos_b: Mapping[int, np.ndarray]) -> Joints:
        q0 = self.leg.get_joint_angles(np.asarray(pos_b[0], dtype=float) + self.offset_base_to_hip)
        return Joints([q0])


class QuadrupedInverseKinematics:
    """Four HyQ legs, joints ordered LF, RF, LH, RH."""

    def __init__(
        self,
        hip_offsets: Optional[Dict[str, np.ndarray]] = None,
        leg: Optional[HyqLegInverseKinematics] = None,
    ):
        hip_offsets = hip_offsets if hip_offsets is not None else cfg.robot_params['hip_offsets']
        self.hip_offsets = {
            LegID[name]: np.asarray(offset, dtype=float).reshape(3)
            for name, offset in hip_offsets.items()
        }
        missing = [leg_id.name for leg_id in LegID if leg_id not in self.hip_offsets]
        if missing:
            raise ValueError(f"Missing hip offsets for legs {missing}")
        self.leg = leg or HyqLegInverseKinematics()

    def solve_joints(self, pos_b: Mapping[int, np.ndarray]) -> Joints:
        legs = []
        for leg_id in LegID:
            ee_pos_h = np.asarray(pos_b[leg_id], dtype=float) + self.hip_offsets[leg_id]
            # right legs are mirrored about the sagittal plane
            if leg_id in (LegID.RF, LegID.RH):
                ee_pos_h = ee_pos_h * np.array([1.0, -1.0, 1.0])
            q = self.leg.get_joint_angles(ee_pos_h)
            if leg_id in (LegID.RF, LegID.RH):
                q[0] = -q[0]
            legs.append(q)
        return Joints(legs)
