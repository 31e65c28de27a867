"""Trajectory-to-marker synchronization for persistent visualization sinks."""

from .data_types import (
    ColorRGBA,
    Foothold,
    LegID,
    Marker,
    MarkerAction,
    MarkerArray,
    MarkerType,
    PhaseRecord,
    RobotStateSample,
    StateLin3d,
)
from .foothold_utils import (
    FootholdNotFoundError,
    get_contacts,
    get_last_foothold,
    get_last_index,
    is_in_footholds,
    set_xy_all,
    update_foothold,
)
from .leg_colors import get_leg_color
from .marker_array_builder import MarkerArrayBuilder
from .marker_config import MarkerConfig, NamespaceConfig
from .phase_segmenter import segment_phases
from .trajectory_extractors import BodyPositionExtractor, TrajectoryExtractor, ZmpExtractor

__all__ = [
    'ColorRGBA',
    'Foothold',
    'LegID',
    'Marker',
    'MarkerAction',
    'MarkerArray',
    'MarkerType',
    'PhaseRecord',
    'RobotStateSample',
    'StateLin3d',
    'FootholdNotFoundError',
    'get_contacts',
    'get_last_foothold',
    'get_last_index',
    'is_in_footholds',
    'set_xy_all',
    'update_foothold',
    'get_leg_color',
    'MarkerArrayBuilder',
    'MarkerConfig',
    'NamespaceConfig',
    'segment_phases',
    'BodyPositionExtractor',
    'TrajectoryExtractor',
    'ZmpExtractor',
]
