"""Build visualization markers from a planned robot trajectory.

The sink keeps every marker it has received until it gets a DELETE for the
same (namespace, id). A new trajectory can be shorter than the previous one,
so every channel addresses a fixed number of ids per call: real markers
first, then DELETE markers for the remaining ids of the namespace. No
knowledge of the sink's state is needed.

Channels:
1. Discrete per-phase: support polygons and footholds, padded to a capacity.
2. Continuous: points sampled every dt along the trajectory (body, ZMP),
   padded with deletions up to a fixed time horizon.
3. Single primitives: start point, goal ellipse / line, always id 0.
"""

import warnings
from typing import List, Optional, Sequence
import numpy as np

from .data_types import (
    ColorRGBA,
    Foothold,
    Marker,
    MarkerAction,
    MarkerArray,
    MarkerType,
    RobotStateSample,
)
from .foothold_utils import get_contacts, get_last_foothold, is_in_footholds
from .leg_colors import BLACK, GRAY, get_leg_color
from .marker_config import MarkerConfig, num_steps
from .phase_segmenter import get_swing_leg, segment_phases
from .trajectory_extractors import BodyPositionExtractor, TrajectoryExtractor, ZmpExtractor

SUPPORT_POLYGONS_NS = 'support_polygons'
FOOTHOLDS_NS = 'footholds'
START_STANCE_NS = 'start_stance'
START_NS = 'start'
BODY_NS = 'body'
ZMP_NS = 'zmp'

POINTS_PER_TRIANGLE = 3
POINTS_PER_LINE = 2


class MarkerArrayBuilder:
    """Turns a trajectory into capacity-bounded marker lists, one namespace per call.

    Every add_* method appends into the caller's MarkerArray, and only once the
    whole channel was built, so a failing call leaves `msg` untouched.
    """

    def __init__(
        self,
        trajectory: Optional[Sequence[RobotStateSample]] = None,
        marker_config: Optional[MarkerConfig] = None,
    ):
        """Initialize the builder.

        Args:
            trajectory: Planned trajectory, read only. Can be set later with set_trajectory().
            marker_config: Namespace capacities and intervals. Defaults to config.visualization_params.
        """
        self.marker_config = marker_config or MarkerConfig.from_params()
        self.robot_traj: List[RobotStateSample] = []
        if trajectory is not None:
            self.set_trajectory(trajectory)

    def set_trajectory(self, trajectory: Sequence[RobotStateSample]) -> None:
        """Replace the trajectory. Time and phase id must be non-decreasing."""
        trajectory = list(trajectory)
        for prev, curr in zip(trajectory, trajectory[1:]):
            if curr.time < prev.time:
                raise ValueError(f"Trajectory time decreases from {prev.time} to {curr.time}")
            if curr.phase_id < prev.phase_id:
                raise ValueError(f"Trajectory phase id decreases from {prev.phase_id} to {curr.phase_id}")
        self.robot_traj = trajectory

    # ------------------------------------------------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------------------------------------------------
    def build_marker_array(self) -> MarkerArray:
        """All trajectory channels in one fresh MarkerArray."""
        msg = MarkerArray()
        self.add_start(msg)
        self.add_start_stance(msg)
        self.add_support_polygons(msg)
        self.add_footholds(msg)
        self.add_body_trajectory(msg)
        self.add_zmp_trajectory(msg)
        return msg

    def add_start(self, msg: MarkerArray) -> None:
        """Cylinder at the ground projection of the first base position."""
        self._check_not_empty(START_NS)
        ns_cfg = self.marker_config.namespace(START_NS)
        start = self.robot_traj[0].base.get_2d()
        marker = self._generate_marker(start, MarkerType.CYLINDER, ns_cfg.marker_size, START_NS, 0)
        marker.scale[2] = 2 * ns_cfg.marker_size
        marker.color = BLACK
        msg.markers.extend(self._pad_to_capacity([marker], START_NS, ns_cfg.capacity))

    def add_start_stance(self, msg: MarkerArray) -> None:
        """Cubes at the footholds of the first sample."""
        self._check_not_empty(START_STANCE_NS)
        contacts = get_contacts(self.robot_traj[0])
        self._add_footholds(msg, contacts, START_STANCE_NS, MarkerType.CUBE, 1.0)

    def add_support_polygons(self, msg: MarkerArray) -> None:
        """Triangle (3 contacts) or line (2 contacts) per phase, colored by the swing leg."""
        ns_cfg = self.marker_config.namespace(SUPPORT_POLYGONS_NS)
        markers = []
        for phase in segment_phases(self.robot_traj):
            marker = self._build_support_polygon(phase.contacts, phase.swing_leg, len(markers))
            if marker is not None:
                markers.append(marker)

        msg.markers.extend(self._pad_to_capacity(markers, SUPPORT_POLYGONS_NS, ns_cfg.capacity))

    def add_footholds(self, msg: MarkerArray) -> None:
        """Spheres at every foothold touched during the trajectory.

        Each phase lists all of its stance feet, but a foot is drawn once until
        it moves: one marker per landing, not one per phase and limb.
        """
        contacts: List[Foothold] = []
        for phase in segment_phases(self.robot_traj):
            for contact in phase.contacts:
                # Stance feet reappear in every phase, keep one entry until they move
                if is_in_footholds(contact.leg, contacts) and get_last_foothold(contact.leg, contacts) == contact:
                    continue
                contacts.append(contact)

        self._add_footholds(msg, contacts, FOOTHOLDS_NS, MarkerType.SPHERE, 1.0)

    def add_body_trajectory(self, msg: MarkerArray) -> None:
        ns_cfg = self.marker_config.namespace(BODY_NS)
        self.add_trajectory(msg, BODY_NS, ns_cfg.dt, ns_cfg.marker_size, BodyPositionExtractor())

    def add_zmp_trajectory(self, msg: MarkerArray) -> None:
        ns_cfg = self.marker_config.namespace(ZMP_NS)
        self.add_trajectory(msg, ZMP_NS, ns_cfg.dt, ns_cfg.marker_size, ZmpExtractor())

    def add_trajectory(
        self,
        msg: MarkerArray,
        rviz_namespace: str,
        dt: float,
        marker_size: float,
        extractor: TrajectoryExtractor,
    ) -> None:
        """Sample the trajectory every `dt` and draw the extracted point.

        Samples are looked up by nearest index, assuming evenly spaced
        samples. Ids beyond the trajectory duration are deleted up to the
        deletion horizon, so every call addresses the same ids. A trajectory
        longer than the horizon is cut at the horizon.

        Args:
            msg: Marker array to append to.
            rviz_namespace: Namespace of the markers.
            dt: Sampling interval (seconds).
            marker_size: Sphere diameter (meters).
            extractor: Maps a sample to the (2,) point to draw.
        """
        self._check_not_empty(rviz_namespace)
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")

        T = self.robot_traj[-1].time - self.robot_traj[0].time
        traj_dt = T / len(self.robot_traj)
        n_real = num_steps(T, dt)
        n_total = self.marker_config.horizon_steps(dt)

        if n_real > n_total:
            warnings.warn(
                f"Trajectory duration {T:.3f}s exceeds the deletion horizon "
                f"{self.marker_config.deletion_horizon:.3f}s of namespace '{rviz_namespace}', "
                f"dropping the last {n_real - n_total} markers",
                UserWarning,
            )
            n_real = n_total

        markers = []
        for k in range(n_real):
            idx = min(int(np.floor(k * dt / traj_dt)), len(self.robot_traj) - 1)
            state = self.robot_traj[idx]

            marker = self._generate_marker(
                extractor.extract(state), MarkerType.SPHERE, marker_size, rviz_namespace, k
            )
            swing_leg = get_swing_leg(state)
            marker.color = GRAY if swing_leg is None else get_leg_color(swing_leg)
            markers.append(marker)

        for marker_id in range(n_real, n_total):
            markers.append(self._delete_marker(rviz_namespace, marker_id))

        msg.markers.extend(markers)

    def add_ellipse(
        self,
        msg: MarkerArray,
        center_x: float,
        center_y: float,
        width_x: float,
        width_y: float,
        rviz_namespace: str,
    ) -> None:
        """Flat cylinder, e.g. a goal region."""
        marker = Marker(
            ns=rviz_namespace,
            id=0,
            type=MarkerType.CYLINDER,
            position=np.array([center_x, center_y, 0.0]),
            scale=np.array([width_x, width_y, 0.01]),
            color=ColorRGBA(0.0, 0.0, 1.0, 0.2),
            frame_id=self.marker_config.frame_id,
        )
        msg.markers.append(marker)

    def add_line_strip(
        self,
        msg: MarkerArray,
        center_x: float,
        depth_x: float,
        rviz_namespace: str,
    ) -> None:
        """Line across y in [-0.5, 0.5] at `center_x`, `depth_x` wide, e.g. a gap in the terrain."""
        p1 = np.array([center_x, -0.5, 0.0])
        p2 = np.array([center_x, 0.5, 0.0])
        marker = Marker(
            ns=rviz_namespace,
            id=0,
            type=MarkerType.LINE_STRIP,
            scale=np.array([depth_x, 0.0, 0.0]),
            points=[p1, p2],
            color=ColorRGBA(0.0, 0.0, 1.0, 0.2),
            frame_id=self.marker_config.frame_id,
        )
        msg.markers.append(marker)

    # ------------------------------------------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------------------------------------------
    def _check_not_empty(self, rviz_namespace: str) -> None:
        if len(self.robot_traj) == 0:
            raise ValueError(f"Cannot build '{rviz_namespace}' markers from an empty trajectory")

    def _build_support_polygon(
        self,
        stance: Sequence[Foothold],
        leg_id: Optional[int],
        marker_id: int,
    ) -> Optional[Marker]:
        """Polygon spanned by the stance feet, None unless there are 2 or 3 of them."""
        if len(stance) == POINTS_PER_TRIANGLE:
            marker_type = MarkerType.TRIANGLE_LIST
            scale = np.ones(3)
        elif len(stance) == POINTS_PER_LINE:
            marker_type = MarkerType.LINE_STRIP
            scale = np.array([self.marker_config.support_line_width, 1.0, 1.0])
        else:
            return None

        return Marker(
            ns=SUPPORT_POLYGONS_NS,
            id=marker_id,
            type=marker_type,
            scale=scale,
            points=[f.p.copy() for f in stance],
            color=get_leg_color(leg_id).with_alpha(self.marker_config.support_polygon_alpha),
            frame_id=self.marker_config.frame_id,
        )

    def _add_footholds(
        self,
        msg: MarkerArray,
        contacts: Sequence[Foothold],
        rviz_namespace: str,
        marker_type: MarkerType,
        alpha: float,
    ) -> None:
        ns_cfg = self.marker_config.namespace(rviz_namespace)
        markers = []
        for contact in contacts:
            markers.append(Marker(
                ns=rviz_namespace,
                id=len(markers),
                type=marker_type,
                position=contact.p.copy(),
                scale=np.full(3, ns_cfg.marker_size),
                color=get_leg_color(contact.leg).with_alpha(alpha),
                frame_id=self.marker_config.frame_id,
            ))

        msg.markers.extend(self._pad_to_capacity(markers, rviz_namespace, ns_cfg.capacity))

    def _pad_to_capacity(self, markers: List[Marker], rviz_namespace: str, capacity: int) -> List[Marker]:
        """Append DELETE markers until exactly `capacity` ids are addressed."""
        if len(markers) > capacity:
            warnings.warn(
                f"{len(markers)} markers exceed the capacity {capacity} of namespace "
                f"'{rviz_namespace}', dropping the last {len(markers) - capacity}",
                UserWarning,
            )
            markers = markers[:capacity]

        for marker_id in range(len(markers), capacity):
            markers.append(self._delete_marker(rviz_namespace, marker_id))
        return markers

    def _generate_marker(
        self,
        pos: np.ndarray,
        marker_type: MarkerType,
        size: float,
        rviz_namespace: str,
        marker_id: int,
    ) -> Marker:
        """Marker at a ground-plane position."""
        return Marker(
            ns=rviz_namespace,
            id=marker_id,
            type=marker_type,
            position=np.array([pos[0], pos[1], 0.0]),
            scale=np.full(3, size),
            frame_id=self.marker_config.frame_id,
        )

    def _delete_marker(self, rviz_namespace: str, marker_id: int) -> Marker:
        return Marker(
            ns=rviz_namespace,
            id=marker_id,
            action=MarkerAction.DELETE,
            frame_id=self.marker_config.frame_id,
        )
