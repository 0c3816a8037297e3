"""
Welding Conditions Knowledge Base.

Describes how welding position, base metal thickness and joint geometry
shape SMAW technique choices.

Reference:
- AWS D1.1 - Structural Welding Code, position designations (1F-4F / 1G-4G)
- Lincoln Electric "New Lessons in Arc Welding", out-of-position technique
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from .electrodes import coerce_enum


class WeldingPosition(str, Enum):
    """Welding positions (AWS 1-4, vertical split by travel direction)."""

    FLAT = "Flat"  # 1F/1G
    HORIZONTAL = "Horizontal"  # 2F/2G
    VERTICAL_DOWN = "Vertical Down"  # 3F/3G downhill
    VERTICAL_UP = "Vertical Up"  # 3F/3G uphill
    OVERHEAD = "Overhead"  # 4F/4G


class MetalThickness(str, Enum):
    """Base metal thickness bands."""

    THIN = 'Thin (<1/8")'
    MEDIUM = 'Medium (1/8"-3/16")'
    THICK = 'Thick (>3/16")'


class JointType(str, Enum):
    """Basic joint types."""

    BUTT = "Butt"
    LAP = "Lap"
    TEE = "T"
    CORNER = "Corner"


@dataclass(frozen=True)
class PositionSpec:
    position: WeldingPosition
    gravity: str
    amperage: str
    techniques: str
    challenges: str
    rod_angle: str


@dataclass(frozen=True)
class MetalThicknessSpec:
    thickness: MetalThickness
    amperage: str
    penetration: str
    heat_dissipation: str
    rod_selection: str
    technique: str


@dataclass(frozen=True)
class JointTypeSpec:
    joint_type: JointType
    preparation: str
    penetration: str
    technique: str
    common_issues: str
    rod_angle: str


_POSITIONS: Dict[WeldingPosition, PositionSpec] = {
    WeldingPosition.FLAT: PositionSpec(
        position=WeldingPosition.FLAT,
        gravity="Helps control puddle",
        amperage="Standard/high range",
        techniques="All techniques viable",
        challenges="Minimal",
        rod_angle="45-90° from horizontal",
    ),
    WeldingPosition.HORIZONTAL: PositionSpec(
        position=WeldingPosition.HORIZONTAL,
        gravity="Causes puddle to sag downward",
        amperage="Standard range",
        techniques="Control puddle with angle and speed",
        challenges="Preventing excessive buildup on bottom",
        rod_angle="Point up slightly, nearly perpendicular to weld",
    ),
    WeldingPosition.VERTICAL_DOWN: PositionSpec(
        position=WeldingPosition.VERTICAL_DOWN,
        gravity="Pulls puddle in direction of travel",
        amperage="Standard/slightly higher",
        techniques="Fast travel, control with angle",
        challenges="Ensuring adequate penetration",
        rod_angle="Angle up slightly",
    ),
    WeldingPosition.VERTICAL_UP: PositionSpec(
        position=WeldingPosition.VERTICAL_UP,
        gravity="Pulls puddle against direction of travel",
        amperage="Slightly lower",
        techniques="Side-to-side, step, or weave",
        challenges="Preventing puddle fallout",
        rod_angle="Angle up to prevent blowout",
    ),
    WeldingPosition.OVERHEAD: PositionSpec(
        position=WeldingPosition.OVERHEAD,
        gravity="Pulls puddle away from workpiece",
        amperage="Standard range",
        techniques="Short arc, consistent motion",
        challenges="Keeping puddle in place, spatter",
        rod_angle="Nearly perpendicular, slight angle into travel",
    ),
}

_METAL_THICKNESS: Dict[MetalThickness, MetalThicknessSpec] = {
    MetalThickness.THIN: MetalThicknessSpec(
        thickness=MetalThickness.THIN,
        amperage="Lower end of range",
        penetration="Watch for burn-through",
        heat_dissipation="Quick to overheat",
        rod_selection="Smaller diameter",
        technique="Fast travel, possibly vertical down",
    ),
    MetalThickness.MEDIUM: MetalThicknessSpec(
        thickness=MetalThickness.MEDIUM,
        amperage="Mid-range",
        penetration="Good balance available",
        heat_dissipation="Moderate",
        rod_selection='Standard 1/8" works well',
        technique="Standard approach for position",
    ),
    MetalThickness.THICK: MetalThicknessSpec(
        thickness=MetalThickness.THICK,
        amperage="Upper range",
        penetration="May require beveling/multiple passes",
        heat_dissipation="Slow, acts as heat sink",
        rod_selection="Larger diameter advantageous",
        technique="Slower travel, possible weave",
    ),
}

_JOINT_TYPES: Dict[JointType, JointTypeSpec] = {
    JointType.BUTT: JointTypeSpec(
        joint_type=JointType.BUTT,
        preparation="Square edges or beveled for thick metal",
        penetration="Critical for strength",
        technique="Focus on root fusion",
        common_issues="Burn-through, lack of penetration",
        rod_angle="Nearly perpendicular",
    ),
    JointType.LAP: JointTypeSpec(
        joint_type=JointType.LAP,
        preparation="Clean mating surfaces",
        penetration="Focus on fusing to bottom piece",
        technique="Balance heat between pieces",
        common_issues="Insufficient fusion to bottom piece",
        rod_angle="45° pointing into corner",
    ),
    JointType.TEE: JointTypeSpec(
        joint_type=JointType.TEE,
        preparation="Clean mating surfaces",
        penetration="Focus on root fusion",
        technique="Angle to balance heat",
        common_issues="Lack of fusion at root",
        rod_angle="45° pointing into corner",
    ),
    JointType.CORNER: JointTypeSpec(
        joint_type=JointType.CORNER,
        preparation="Can be open or closed corner",
        penetration="Must reach inner corner",
        technique="Balance heat between pieces",
        common_issues="Inside corner penetration",
        rod_angle="Bisect the angle",
    ),
}

POSITION_DATABASE: Mapping[WeldingPosition, PositionSpec] = MappingProxyType(_POSITIONS)
METAL_THICKNESS_DATABASE: Mapping[MetalThickness, MetalThicknessSpec] = MappingProxyType(
    _METAL_THICKNESS
)
JOINT_TYPE_DATABASE: Mapping[JointType, JointTypeSpec] = MappingProxyType(_JOINT_TYPES)


def get_position(position: Union[str, WeldingPosition, None]) -> Optional[PositionSpec]:
    """
    Get gravity effect and technique guidance for a welding position.

    Args:
        position: Position name, e.g. "Vertical Up"

    Returns:
        PositionSpec or None for an unknown position
    """
    key = coerce_enum(WeldingPosition, position)
    if key is None:
        return None
    return POSITION_DATABASE.get(key)


def get_metal_thickness(
    thickness: Union[str, MetalThickness, None],
) -> Optional[MetalThicknessSpec]:
    """Get amperage and technique guidance for a thickness band ("thin" also works)."""
    key = coerce_enum(MetalThickness, thickness)
    if key is None:
        return None
    return METAL_THICKNESS_DATABASE.get(key)


def get_joint_type(joint_type: Union[str, JointType, None]) -> Optional[JointTypeSpec]:
    key = coerce_enum(JointType, joint_type)
    if key is None:
        return None
    return JOINT_TYPE_DATABASE.get(key)
