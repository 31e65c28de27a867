"""Collapse a trajectory into one representative record per phase."""

from typing import Iterator, Optional, Sequence

from .data_types import PhaseRecord, RobotStateSample
from .foothold_utils import get_contacts

_NO_PHASE = object()  # compares unequal to every phase id


def get_swing_leg(state: RobotStateSample, previous: Optional[int] = None) -> Optional[int]:
    """Active swing limb of a sample.

    The lowest-id limb out of contact. If every limb is in contact the
    `previous` swing limb is kept.
    """
    swing_legs = state.get_swing_legs()
    if len(swing_legs) > 0:
        return swing_legs[0]
    return previous


def segment_phases(trajectory: Sequence[RobotStateSample]) -> Iterator[PhaseRecord]:
    """Yield one PhaseRecord per phase, in phase order.

    The first sample of each phase is its representative. This is a one-pass
    generator; call again to re-scan the trajectory.
    """
    prev_phase = _NO_PHASE
    swing_leg = None
    for state in trajectory:
        if state.phase_id != prev_phase:
            swing_leg = get_swing_leg(state, swing_leg)
            yield PhaseRecord(
                phase_id=state.phase_id,
                time=state.time,
                contacts=get_contacts(state),
                swing_leg=swing_leg,
            )
            prev_phase = state.phase_id
