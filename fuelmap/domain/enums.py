"""Domain enumerations."""

import enum
from typing import Literal, Union


class FuelKind(str, enum.Enum):
    DIESEL = "diesel"  # Gazole
    SP95 = "sp95"
    SP98 = "sp98"
    E10 = "e10"
    E85 = "e85"
    LPG = "lpg"  # GPLc


ALL_FUELS = "all"

# Either a specific fuel or every fuel
FuelFilter = Union[FuelKind, Literal["all"]]


def parse_fuel_filter(value: str) -> FuelFilter:
    """``"all"`` or a fuel kind value; ValueError otherwise."""
    if value == ALL_FUELS:
        return ALL_FUELS
    return FuelKind(value)


class SortBy(str, enum.Enum):
    PRICE = "price"
    DISTANCE = "distance"
    NAME = "name"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class PriceTier(str, enum.Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    UNKNOWN = "unknown"


class FetchStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ZOOM_TOO_LOW = "zoom_too_low"
    ERROR = "error"


class PanelMode(str, enum.Enum):
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"
    FULLSCREEN = "fullscreen"


# Panel toggle cycle: collapsed -> expanded -> fullscreen -> collapsed
PANEL_TOGGLE: dict[PanelMode, PanelMode] = {
    PanelMode.COLLAPSED: PanelMode.EXPANDED,
    PanelMode.EXPANDED: PanelMode.FULLSCREEN,
    PanelMode.FULLSCREEN: PanelMode.COLLAPSED,
}

# Overlay dismissal steps one level down instead of closing outright
PANEL_DISMISS: dict[PanelMode, PanelMode] = {
    PanelMode.COLLAPSED: PanelMode.COLLAPSED,
    PanelMode.EXPANDED: PanelMode.COLLAPSED,
    PanelMode.FULLSCREEN: PanelMode.EXPANDED,
}
