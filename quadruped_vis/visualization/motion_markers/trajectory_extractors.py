"""Strategies that map a trajectory sample to the 2D point drawn by a continuous channel."""

from typing import Protocol
import numpy as np

from quadruped_vis import config as cfg

from .data_types import RobotStateSample


class TrajectoryExtractor(Protocol):
    """Protocol for continuous-channel point extraction."""

    def extract(self, state: RobotStateSample) -> np.ndarray:
        """Return the (2,) ground-plane point to draw for `state`."""
        ...


class BodyPositionExtractor:
    """Ground projection of the base position."""

    def extract(self, state: RobotStateSample) -> np.ndarray:
        return state.base.get_2d()


class ZmpExtractor:
    """Zero moment point of the base, using the base height as pendulum height."""

    def __init__(self, gravity: float = cfg.gravity_constant):
        if gravity <= 0.0:
            raise ValueError(f"gravity must be positive, got {gravity}")
        self.gravity = gravity

    def extract(self, state: RobotStateSample) -> np.ndarray:
        return state.base.get_zmp(state.base.p[2], self.gravity)
