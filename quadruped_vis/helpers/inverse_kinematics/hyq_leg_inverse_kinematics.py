"""Closed-form inverse kinematics of one HyQ leg (HAA, HFE, KFE joints)."""

import numpy as np

from quadruped_vis import config as cfg

from .ik_interface import UnreachableTargetError

X, Y, Z = 0, 1, 2


class HyqLegInverseKinematics:
    """Joint angles of a 3-DOF HyQ leg from the foot position in the hip frame.

    The hip abduction/adduction (HAA) joint rotates around x, hip and knee
    flexion/extension (HFE, KFE) around the rotated y axis.
    """

    def __init__(
        self,
        thigh_length: float = cfg.robot_params['thigh_length'],
        shank_length: float = cfg.robot_params['shank_length'],
        hfe_to_haa_z: float = cfg.robot_params['hfe_to_haa_z'],
    ):
        if thigh_length <= 0.0 or shank_length <= 0.0:
            raise ValueError("Leg segment lengths must be positive")
        self.thigh_length = thigh_length
        self.shank_length = shank_length
        self.hfe_to_haa = np.array([0.0, 0.0, hfe_to_haa_z])

    def get_joint_angles(self, ee_pos_h: np.ndarray) -> np.ndarray:
        """Solve the leg.

        Args:
            ee_pos_h: (3,) foot position in the hip (HAA) frame.

        Returns:
            (3,) joint angles [q_HAA, q_HFE, q_KFE] in radians.

        Raises:
            UnreachableTargetError: If the foot is outside the leg's workspace.
        """
        xr = np.asarray(ee_pos_h, dtype=float).reshape(3).copy()

        q_haa = -np.arctan2(xr[Y], -xr[Z])

        # rotate into the HFE frame, then translate along z
        c, s = np.cos(q_haa), np.sin(q_haa)
        rot = np.array([
            [1.0, 0.0, 0.0],
            [0.0, c, -s],
            [0.0, s, c],
        ])
        xr = rot @ xr + self.hfe_to_haa

        lu = self.thigh_length
        ll = self.shank_length
        dist_sq = xr[X] ** 2 + xr[Z] ** 2
        dist = np.sqrt(dist_sq)
        if dist > lu + ll or dist < abs(lu - ll):
            raise UnreachableTargetError(
                f"Foot position {np.round(ee_pos_h, 4).tolist()} is {dist:.4f}m from the HFE joint, "
                f"reachable range is [{abs(lu - ll):.4f}, {lu + ll:.4f}]m"
            )

        alpha = np.arctan2(-xr[Z], xr[X]) - 0.5 * np.pi
        cos_beta = np.clip((lu ** 2 + dist_sq - ll ** 2) / (2.0 * lu * dist), -1.0, 1.0)
        q_hfe = alpha + np.arccos(cos_beta)

        cos_gamma = np.clip((ll ** 2 + lu ** 2 - dist_sq) / (2.0 * ll * lu), -1.0, 1.0)
        q_kfe = np.arccos(cos_gamma) - np.pi

        return np.array([q_haa, q_hfe, q_kfe])
