"""Operations on foothold sequences.

A foothold sequence is a plain list of Foothold ordered by first contact.
It may hold several entries of the same limb; the most recent one is the
authoritative foothold of that limb.
"""

from typing import List, Sequence
import numpy as np

from .data_types import Foothold, RobotStateSample


class FootholdNotFoundError(LookupError):
    """Raised when a limb is expected in a foothold sequence but has no entry."""


def is_in_footholds(leg: int, footholds: Sequence[Foothold]) -> bool:
    """Check if a limb has at least one entry in the sequence."""
    return any(f.leg == leg for f in footholds)


def get_last_index(leg: int, footholds: Sequence[Foothold]) -> int:
    """Index of the most recent foothold of `leg`.

    Args:
        leg: Limb id.
        footholds: Foothold sequence.

    Returns:
        Index into `footholds`.

    Raises:
        FootholdNotFoundError: If `leg` has no entry. Check with
            is_in_footholds() first.
    """
    for idx in range(len(footholds) - 1, -1, -1):
        if footholds[idx].leg == leg:
            return idx
    raise FootholdNotFoundError(f"Leg {leg!r} does not exist in footholds")


def get_last_foothold(leg: int, footholds: Sequence[Foothold]) -> Foothold:
    return footholds[get_last_index(leg, footholds)]


def update_foothold(f_new: Foothold, footholds: List[Foothold]) -> None:
    """Replace the most recent foothold of the same limb, or append if the limb is new."""
    if is_in_footholds(f_new.leg, footholds):
        footholds[get_last_index(f_new.leg, footholds)] = f_new
    else:
        footholds.append(f_new)


def set_xy_all(xy: Sequence[np.ndarray], footholds: List[Foothold]) -> None:
    """Set the horizontal position of every foothold, e.g. after a footstep optimization.

    Args:
        xy: One (2,) position per foothold.
        footholds: Sequence modified in place, z coordinates are kept.
    """
    if len(xy) != len(footholds):
        raise ValueError(
            f"Got {len(xy)} xy positions for {len(footholds)} footholds"
        )
    for foothold, xy_new in zip(footholds, xy):
        foothold.set_xy(xy_new)


def get_contacts(state: RobotStateSample) -> List[Foothold]:
    """Latest foothold of every limb in contact at `state`, in limb id order.

    Limbs in contact without an entry in `state.footholds` are skipped.
    """
    contacts = []
    for leg in state.get_endeffectors():
        if state.contact_state[leg] and is_in_footholds(leg, state.footholds):
            contacts.append(get_last_foothold(leg, state.footholds))
    return contacts
