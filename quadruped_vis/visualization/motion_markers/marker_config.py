"""Per-namespace marker capacities and sampling intervals."""

from dataclasses import dataclass
from typing import Dict, Optional
import math

from quadruped_vis import config as cfg


@dataclass(frozen=True)
class NamespaceConfig:
    """Identity budget of one marker namespace.

    Attributes:
        name: Namespace string sent with every marker.
        capacity: Number of ids addressed per call (discrete channels). None for continuous channels.
        dt: Sampling interval in seconds (continuous channels). None for discrete channels.
        marker_size: Edge length / diameter of the drawn primitive (meters).
    """
    name: str
    capacity: Optional[int] = None
    dt: Optional[float] = None
    marker_size: float = 0.04

    def __post_init__(self):
        if (self.capacity is None) == (self.dt is None):
            raise ValueError(f"Namespace '{self.name}' needs exactly one of capacity or dt")
        if self.capacity is not None and self.capacity <= 0:
            raise ValueError(f"Namespace '{self.name}' capacity must be positive, got {self.capacity}")
        if self.dt is not None and self.dt <= 0.0:
            raise ValueError(f"Namespace '{self.name}' dt must be positive, got {self.dt}")
        if self.marker_size <= 0.0:
            raise ValueError(f"Namespace '{self.name}' marker_size must be positive")


# Tolerance for counting sample steps, 1.0 / 0.1 must give 10 steps, not 11
_STEP_EPS = 1e-9


def num_steps(duration: float, dt: float) -> int:
    """Number of samples t = 0, dt, 2*dt, ... strictly below `duration`."""
    if duration <= 0.0:
        return 0
    return int(math.ceil(duration / dt - _STEP_EPS))


@dataclass(frozen=True)
class MarkerConfig:
    """Namespaces and deletion horizon used by the MarkerArrayBuilder."""
    namespaces: Dict[str, NamespaceConfig]
    deletion_horizon: float = 10.0
    frame_id: str = 'world'
    support_polygon_alpha: float = 0.15
    support_line_width: float = 0.02

    def __post_init__(self):
        if self.deletion_horizon <= 0.0:
            raise ValueError(f"deletion_horizon must be positive, got {self.deletion_horizon}")

    @classmethod
    def from_params(cls, params: Optional[Dict] = None) -> 'MarkerConfig':
        """Build from a dict shaped like config.visualization_params."""
        params = params if params is not None else cfg.visualization_params
        namespaces = {
            name: NamespaceConfig(
                name=name,
                capacity=ns_params.get('capacity'),
                dt=ns_params.get('dt'),
                marker_size=ns_params.get('marker_size', 0.04),
            )
            for name, ns_params in params.get('namespaces', {}).items()
        }
        return cls(
            namespaces=namespaces,
            deletion_horizon=params.get('deletion_horizon', 10.0),
            frame_id=params.get('frame_id', 'world'),
            support_polygon_alpha=params.get('support_polygon_alpha', 0.15),
            support_line_width=params.get('support_line_width', 0.02),
        )

    def namespace(self, name: str) -> NamespaceConfig:
        try:
            return self.namespaces[name]
        except KeyError:
            raise KeyError(f"No marker namespace '{name}' configured") from None

    def horizon_steps(self, dt: float) -> int:
        """Ids addressed by a continuous channel sampled at `dt`."""
        return num_steps(self.deletion_horizon, dt)
