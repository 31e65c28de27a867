"""Fixed limb color palette."""

from types import MappingProxyType
from typing import Optional

from .data_types import ColorRGBA, LegID

BLUE = ColorRGBA(0.0, 102. / 255, 204. / 255, 1.0)
PURPLE = ColorRGBA(72. / 255, 61. / 255, 139. / 255, 1.0)
BROWN = ColorRGBA(122. / 255, 61. / 255, 0.0, 1.0)
GREEN = ColorRGBA(0.0, 150. / 255, 76. / 255, 1.0)
GRAY = ColorRGBA(0.5, 0.5, 0.5, 1.0)
BLACK = ColorRGBA(0.0, 0.0, 0.0, 1.0)

LEG_COLORS = MappingProxyType({
    LegID.LF: BLUE,
    LegID.RF: PURPLE,
    LegID.LH: BROWN,
    LegID.RH: GREEN,
})


def get_leg_color(leg: Optional[int]) -> ColorRGBA:
    """Color of a limb; gray for None or limbs outside the palette."""
    if leg is None:
        return GRAY
    return LEG_COLORS.get(leg, GRAY)
