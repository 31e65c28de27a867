"""Data types for motion trajectories and visualization markers."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple
import numpy as np


class LegID(IntEnum):
    """Quadruped limb ids. Plain integers are accepted wherever a limb id is expected."""
    LF = 0
    RF = 1
    LH = 2
    RH = 3


FIXED_BY_START = -1  # Foothold.id of footholds that are given, not optimized


@dataclass(eq=False)
class Foothold:
    """A ground contact position of one limb.

    Attributes:
        p: (3,) contact position [x, y, z] in world frame.
        leg: Id of the limb that owns this foothold.
        id: Optimization variable index, FIXED_BY_START if fixed at sequence start.
    """
    p: np.ndarray
    leg: int
    id: int = FIXED_BY_START

    def __post_init__(self):
        self.p = np.array(self.p, dtype=float).reshape(3)

    def get_xy(self) -> np.ndarray:
        """Horizontal components of the position."""
        return self.p[:2].copy()

    def set_xy(self, xy: np.ndarray) -> None:
        """Overwrite the horizontal components, z is left untouched."""
        self.p[:2] = np.asarray(xy, dtype=float)[:2]

    def __eq__(self, other):
        if not isinstance(other, Foothold):
            return NotImplemented
        return self.leg == other.leg and np.array_equal(self.p, other.p)

    def __repr__(self):
        return f"Foothold(p={self.p.tolist()}, leg={self.leg!r}, id={self.id})"


@dataclass(eq=False)
class StateLin3d:
    """Linear position, velocity and acceleration of the base."""
    p: np.ndarray = field(default_factory=lambda: np.zeros(3))
    v: np.ndarray = field(default_factory=lambda: np.zeros(3))
    a: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.p = np.array(self.p, dtype=float).reshape(3)
        self.v = np.array(self.v, dtype=float).reshape(3)
        self.a = np.array(self.a, dtype=float).reshape(3)

    def get_2d(self) -> np.ndarray:
        return self.p[:2].copy()

    def get_zmp(self, height: float, gravity: float) -> np.ndarray:
        """Zero moment point of a point mass at `height` above the ground (cart-table model)."""
        return self.p[:2] - height / gravity * self.a[:2]


@dataclass(eq=False)
class RobotStateSample:
    """One sample of a planned trajectory.

    Attributes:
        time: Sample time (seconds).
        base: Linear state of the base.
        contact_state: Dict mapping limb id to True if the limb is in contact.
        phase_id: Discrete phase index, non-decreasing along the trajectory.
        footholds: Current foothold sequence (latest entry per limb is authoritative).
    """
    time: float
    base: StateLin3d
    contact_state: Dict[int, bool]
    phase_id: int
    footholds: List[Foothold] = field(default_factory=list)

    def get_endeffectors(self) -> List[int]:
        return sorted(self.contact_state)

    def get_swing_legs(self) -> List[int]:
        """Limbs not in contact, lowest id first."""
        return [leg for leg in self.get_endeffectors() if not self.contact_state[leg]]


@dataclass(frozen=True)
class ColorRGBA:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    def with_alpha(self, a: float) -> 'ColorRGBA':
        return ColorRGBA(self.r, self.g, self.b, a)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)


class MarkerType(IntEnum):
    """Primitive types, numbered like the sink's marker message."""
    CUBE = 1
    SPHERE = 2
    CYLINDER = 3
    LINE_STRIP = 4
    POINTS = 8
    TRIANGLE_LIST = 11


class MarkerAction(IntEnum):
    MODIFY = 0
    DELETE = 2


@dataclass(eq=False)
class Marker:
    """A renderable primitive addressed by (ns, id).

    The sink keeps the last marker received for an identity until a DELETE
    marker for the same identity arrives.

    Attributes:
        ns: Namespace of the marker.
        id: Identity within the namespace.
        type: Primitive type.
        action: MODIFY to create/overwrite, DELETE to remove.
        position: (3,) pose position, used by single-shape primitives.
        scale: (3,) size; for LINE_STRIP only x (line width) is used.
        points: Vertices of LINE_STRIP / TRIANGLE_LIST primitives.
        color: Marker color.
        frame_id: Frame the geometry is expressed in.
    """
    ns: str
    id: int
    type: MarkerType = MarkerType.SPHERE
    action: MarkerAction = MarkerAction.MODIFY
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    points: List[np.ndarray] = field(default_factory=list)
    color: ColorRGBA = field(default_factory=ColorRGBA)
    frame_id: str = 'world'

    @property
    def key(self) -> Tuple[str, int]:
        return (self.ns, self.id)

    @property
    def is_delete(self) -> bool:
        return self.action == MarkerAction.DELETE


@dataclass
class MarkerArray:
    """Caller-owned collection of markers sent to the sink once per refresh."""
    markers: List[Marker] = field(default_factory=list)

    def namespace(self, ns: str) -> List[Marker]:
        return [m for m in self.markers if m.ns == ns]

    def __len__(self):
        return len(self.markers)


@dataclass
class PhaseRecord:
    """Start-of-phase representative produced by the phase segmenter.

    Attributes:
        phase_id: Phase index of the representative sample.
        time: Time of the representative sample.
        contacts: Footholds of the limbs in contact at the start of the phase.
        swing_leg: Active swing limb, None if no limb has swung yet.
    """
    phase_id: int
    time: float
    contacts: List[Foothold]
    swing_leg: Optional[int] = None
