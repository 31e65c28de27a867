"""Interface protocol for inverse kinematics of legged robots."""

from typing import List, Mapping, Protocol, Sequence
import numpy as np


class UnreachableTargetError(ValueError):
    """Raised when no joint configuration reaches the requested endeffector position."""


class Joints:
    """Joint angles of a robot, one vector per leg in a fixed leg order."""

    def __init__(self, legs: Sequence[np.ndarray]):
        self.legs: List[np.ndarray] = [np.asarray(q, dtype=float).copy() for q in legs]

    @property
    def num_legs(self) -> int:
        return len(self.legs)

    @property
    def num_joints(self) -> int:
        return sum(q.size for q in self.legs)

    def at_leg(self, leg: int) -> np.ndarray:
        return self.legs[leg].copy()

    def to_vec(self) -> np.ndarray:
        """All joint angles concatenated in leg order."""
        if len(self.legs) == 0:
            return np.zeros(0)
        return np.concatenate(self.legs)

    def __repr__(self):
        return f"Joints({[q.tolist() for q in self.legs]})"


class InverseKinematics(Protocol):
    """Protocol every robot-specific inverse kinematics class must conform with.

    Computes the joint angles that place the endeffectors at given positions.
    Implementations are pure: the same input always gives the same output.
    """

    def solve_joints(self, pos_b: Mapping[int, np.ndarray]) -> Joints:
        """Calculate the joint angles for the given endeffector positions.

        Args:
            pos_b: Dict mapping endeffector id to its (3,) position expressed in
                   the base frame.

        Returns:
            Joints of the robot, legs in the implementation's fixed order.

        Raises:
            UnreachableTargetError: If a position cannot be reached.
        """
        ...
