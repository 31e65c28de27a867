"""Inverse kinematics capability for legged robots."""

from .ik_interface import InverseKinematics, Joints, UnreachableTargetError
from .hyq_leg_inverse_kinematics import HyqLegInverseKinematics
from .single_leg_inverse_kinematics import QuadrupedInverseKinematics, SingleLegInverseKinematics

__all__ = [
    'InverseKinematics',
    'Joints',
    'UnreachableTargetError',
    'HyqLegInverseKinematics',
    'QuadrupedInverseKinematics',
    'SingleLegInverseKinematics',
]
