"""
SMAW Electrode Knowledge Base.

Provides covered-electrode classifications, their operating characteristics,
and the amperage windows for each electrode diameter.

Reference:
- AWS A5.1 - Carbon Steel Electrodes for Shielded Metal Arc Welding
- Lincoln Electric Procedure Handbook, stick electrode tables
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

E = TypeVar("E", bound=Enum)


class ElectrodeClass(str, Enum):
    """AWS A5.1 electrode classifications."""

    E6010 = "E6010"  # cellulose sodium, DC+ only
    E6011 = "E6011"  # cellulose potassium, AC capable
    E6013 = "E6013"  # rutile, general purpose
    E7018 = "E7018"  # low hydrogen, iron powder
    E7024 = "E7024"  # iron powder, high deposition


class ElectrodeSize(str, Enum):
    """Electrode core wire diameters (inch)."""

    SIZE_3_32 = '3/32"'
    SIZE_1_8 = '1/8"'
    SIZE_5_32 = '5/32"'


class MachineType(str, Enum):
    """Welding power source output."""

    AC = "AC"
    DC_POSITIVE = "DC+"  # electrode positive (DCEP)
    DC_NEGATIVE = "DC-"  # electrode negative (DCEN)


class Penetration(str, Enum):
    SHALLOW = "Shallow"
    MODERATE = "Moderate"
    DEEP = "Deep"


@dataclass(frozen=True)
class ElectrodeSpec:
    """Operating characteristics of one electrode classification."""

    classification: ElectrodeClass
    current: str  # e.g. "AC or DC+"
    penetration: Penetration
    slag: str
    positions: Tuple[str, ...]
    best_use: str
    tensile_strength: str
    arc_force: str
    puddle_visibility: str
    technique_options: Tuple[str, ...]

    @property
    def current_types(self) -> Tuple[MachineType, ...]:
        """Machine outputs named in the current rating, e.g. "AC or DC+"."""
        tokens = re.findall(r"AC|DC[+-]", self.current)
        return tuple(MachineType(t) for t in tokens)


@dataclass(frozen=True)
class ElectrodeSizeSpec:
    """Amperage windows and handling character for one electrode diameter."""

    size: ElectrodeSize
    amperage: Mapping[ElectrodeClass, str]  # "min-maxA"
    control: str
    deposition: str
    best_for: str


def coerce_enum(enum_cls: Type[E], raw: Union[str, E, None]) -> Optional[E]:
    """
    Resolve a raw key to an enum member without raising.

    Exact value matches win; otherwise values and member names are compared
    case-insensitively with spaces, dashes and underscores treated alike.

    Example:
        >>> coerce_enum(ElectrodeClass, "e7018")
        <ElectrodeClass.E7018: 'E7018'>
    """
    if raw is None:
        return None
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        pass

    token = _normalize_token(raw)
    if not token:
        return None
    for member in enum_cls:
        if token in (_normalize_token(member.value), _normalize_token(member.name)):
            return member
    return None


def exact_enum(enum_cls: Type[E], raw: Union[str, E, None]) -> Optional[E]:
    """Resolve a raw key by exact enum value only; anything else is None."""
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def _normalize_token(value: str) -> str:
    return re.sub(r"[\s_\-]+", "_", value.replace('"', "").strip()).lower()


_ELECTRODES: Dict[ElectrodeClass, ElectrodeSpec] = {
    ElectrodeClass.E6010: ElectrodeSpec(
        classification=ElectrodeClass.E6010,
        current="DC+",
        penetration=Penetration.DEEP,
        slag="Light, fast-freeze",
        positions=("Flat", "Horizontal", "Vertical Up", "Vertical Down", "Overhead"),
        best_use="Root passes, dirty metal, repair work",
        tensile_strength="60,000 psi",
        arc_force="Strong",
        puddle_visibility="Excellent",
        technique_options=("Circular", "Zigzag", "Whip/Step"),
    ),
    ElectrodeClass.E6011: ElectrodeSpec(
        classification=ElectrodeClass.E6011,
        current="AC or DC+",
        penetration=Penetration.DEEP,
        slag="Light, fast-freeze",
        positions=("Flat", "Horizontal", "Vertical Up", "Vertical Down", "Overhead"),
        best_use="Similar to 6010 but works on AC",
        tensile_strength="60,000 psi",
        arc_force="Strong",
        puddle_visibility="Excellent",
        technique_options=("Circular", "Zigzag", "Whip/Step"),
    ),
    ElectrodeClass.E6013: ElectrodeSpec(
        classification=ElectrodeClass.E6013,
        current="AC, DC+ or DC-",
        penetration=Penetration.MODERATE,
        slag="Medium",
        positions=("Flat", "Horizontal", "Vertical Up", "Vertical Down", "Overhead"),
        best_use="General purpose, sheet metal, easier to use",
        tensile_strength="60,000 psi",
        arc_force="Mild",
        puddle_visibility="Partial (top edge covered)",
        technique_options=("Straight", "Slight side-to-side"),
    ),
    ElectrodeClass.E7018: ElectrodeSpec(
        classification=ElectrodeClass.E7018,
        current="AC or DC+",
        penetration=Penetration.MODERATE,
        slag="Heavy with iron powder",
        positions=("Flat", "Horizontal", "Vertical Up", "Overhead"),
        best_use="High quality, low hydrogen, stress applications",
        tensile_strength="70,000 psi",
        arc_force="Mild",
        puddle_visibility="Limited (mostly covered by slag)",
        technique_options=("Straight", "Side-to-side"),
    ),
    ElectrodeClass.E7024: ElectrodeSpec(
        classification=ElectrodeClass.E7024,
        current="AC or DC+",
        penetration=Penetration.SHALLOW,
        slag="Very heavy",
        positions=("Flat", "Horizontal fillet"),
        best_use="High deposition rate, flat work",
        tensile_strength="70,000 psi",
        arc_force="Mild",
        puddle_visibility="Limited",
        technique_options=("Straight",),
    ),
}

_ELECTRODE_SIZES: Dict[ElectrodeSize, ElectrodeSizeSpec] = {
    ElectrodeSize.SIZE_3_32: ElectrodeSizeSpec(
        size=ElectrodeSize.SIZE_3_32,
        amperage=MappingProxyType(
            {
                ElectrodeClass.E6010: "40-80A",
                ElectrodeClass.E6011: "40-80A",
                ElectrodeClass.E6013: "40-80A",
                ElectrodeClass.E7018: "65-110A",
                ElectrodeClass.E7024: "100-145A",
            }
        ),
        control="Excellent",
        deposition="Low",
        best_for="Thin metal, out-of-position, root passes",
    ),
    ElectrodeSize.SIZE_1_8: ElectrodeSizeSpec(
        size=ElectrodeSize.SIZE_1_8,
        amperage=MappingProxyType(
            {
                ElectrodeClass.E6010: "75-130A",
                ElectrodeClass.E6011: "75-130A",
                ElectrodeClass.E6013: "70-110A",
                ElectrodeClass.E7018: "100-150A",
                ElectrodeClass.E7024: "140-190A",
            }
        ),
        control="Good",
        deposition="Medium",
        best_for="General purpose, most common size",
    ),
    ElectrodeSize.SIZE_5_32: ElectrodeSizeSpec(
        size=ElectrodeSize.SIZE_5_32,
        amperage=MappingProxyType(
            {
                ElectrodeClass.E6010: "110-170A",
                ElectrodeClass.E6011: "100-160A",
                ElectrodeClass.E6013: "110-160A",
                ElectrodeClass.E7018: "140-215A",
                ElectrodeClass.E7024: "180-250A",
            }
        ),
        control="Fair",
        deposition="High",
        best_for="Thicker metal, flat position, filling passes",
    ),
}

ELECTRODE_DATABASE: Mapping[ElectrodeClass, ElectrodeSpec] = MappingProxyType(_ELECTRODES)
ELECTRODE_SIZE_DATABASE: Mapping[ElectrodeSize, ElectrodeSizeSpec] = MappingProxyType(
    _ELECTRODE_SIZES
)


def get_electrode(electrode: Union[str, ElectrodeClass, None]) -> Optional[ElectrodeSpec]:
    """
    Get the characteristics of an electrode classification.

    Args:
        electrode: Classification, e.g. "E7018"

    Returns:
        ElectrodeSpec or None for an unknown classification
    """
    key = coerce_enum(ElectrodeClass, electrode)
    if key is None:
        return None
    return ELECTRODE_DATABASE.get(key)


def get_electrode_size(size: Union[str, ElectrodeSize, None]) -> Optional[ElectrodeSizeSpec]:
    """Get the amperage table and handling notes for an electrode diameter."""
    key = coerce_enum(ElectrodeSize, size)
    if key is None:
        return None
    return ELECTRODE_SIZE_DATABASE.get(key)


def parse_amperage_range(raw: str) -> Tuple[int, int]:
    """
    Parse a "min-maxA" table entry into two integers.

    Example:
        >>> parse_amperage_range("75-130A")
        (75, 130)
    """
    nums = re.findall(r"\d+", raw)
    return int(nums[0]), int(nums[1])


def get_amperage_range(
    electrode: Union[str, ElectrodeClass, None],
    size: Union[str, ElectrodeSize, None],
) -> Optional[Tuple[int, int]]:
    """
    Get the base amperage window for an electrode/diameter pair.

    Args:
        electrode: Electrode classification
        size: Electrode diameter, e.g. '1/8"'

    Returns:
        (min, max) amperes, or None when either key is unknown

    Example:
        >>> get_amperage_range("E6010", '1/8"')
        (75, 130)
    """
    size_spec = get_electrode_size(size)
    key = coerce_enum(ElectrodeClass, electrode)
    if size_spec is None or key is None:
        return None
    raw = size_spec.amperage.get(key)
    if not raw:
        return None
    return parse_amperage_range(raw)


def supports_position(
    electrode: Union[str, ElectrodeClass, None],
    position: Optional[str],
) -> Optional[bool]:
    """Whether the electrode is rated for a welding position (None if unknown)."""
    spec = get_electrode(electrode)
    position = getattr(position, "value", position)
    if spec is None or not isinstance(position, str) or not position:
        return None
    token = _normalize_token(position)
    return any(_normalize_token(p) == token for p in spec.positions)


def is_current_compatible(
    electrode: Union[str, ElectrodeClass, None],
    machine_type: Union[str, MachineType, None],
) -> Optional[bool]:
    """
    Check whether a machine's output suits an electrode.

    Args:
        electrode: Electrode classification
        machine_type: "AC", "DC+" or "DC-"

    Returns:
        True/False, or None when either key is unknown

    Example:
        >>> is_current_compatible("E6010", "AC")
        False
    """
    spec = get_electrode(electrode)
    machine = coerce_enum(MachineType, machine_type)
    if spec is None or machine is None:
        return None
    return machine in spec.current_types
