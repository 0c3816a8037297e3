"""
SMAW Technique and Puddle Observation Knowledge Base.

Two families of adjustable/observable quantities:

- Technique dimensions the welder controls while running a bead
  (arc gap, travel speed, rod angle, motion pattern), each with a few
  named levels and their effect on the puddle.
- Observable puddle/arc states, each mapped to a diagnosis, likely causes
  and corrective adjustments.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from .electrodes import coerce_enum


class TechniqueDimension(str, Enum):
    """Technique parameters adjustable during welding."""

    ARC_GAP = "arcGap"
    TRAVEL_SPEED = "travelSpeed"
    ROD_ANGLE = "rodAngle"
    MOTION_PATTERN = "motionPattern"


class ObservableDimension(str, Enum):
    """Feedback observable while welding."""

    PUDDLE_FLUID = "puddleFluid"
    PUDDLE_SPREAD = "puddleSpread"
    EDGE_TIE = "edgeTie"
    ARC_STABILITY = "arcStability"


class PuddleFluidity(str, Enum):
    STIFF = "Stiff"
    MODERATE = "Moderate"
    VERY_FLUID = "VeryFluid"


class PuddleSpread(str, Enum):
    NARROW = "Narrow"
    MODERATE = "Moderate"
    WIDE = "Wide"


class EdgeTieIn(str, Enum):
    POOR = "Poor"
    ADEQUATE = "Adequate"
    EXCELLENT = "Excellent"


class ArcStability(str, Enum):
    UNSTABLE = "Unstable"
    STABLE = "Stable"


# State enum per observable dimension, in display order
OBSERVABLE_STATE_ENUMS = MappingProxyType(
    {
        ObservableDimension.PUDDLE_FLUID: PuddleFluidity,
        ObservableDimension.PUDDLE_SPREAD: PuddleSpread,
        ObservableDimension.EDGE_TIE: EdgeTieIn,
        ObservableDimension.ARC_STABILITY: ArcStability,
    }
)


@dataclass(frozen=True)
class TechniqueLevel:
    """One named level of a technique dimension."""

    dimension: TechniqueDimension
    name: str
    effect: str
    puddle: str
    suitable: str
    appearance: Optional[str] = None
    issues: Optional[str] = None  # travel speed levels describe issues, not appearance


@dataclass(frozen=True)
class ObservableState:
    """Diagnosis attached to one observed puddle/arc state."""

    dimension: ObservableDimension
    state: str
    diagnosis: str
    causes: Tuple[str, ...]
    adjustments: Tuple[str, ...]
    nominal: bool = False  # parameters balanced, nothing to correct

    def to_dict(self) -> Dict[str, object]:
        return {
            "dimension": self.dimension.value,
            "state": self.state,
            "diagnosis": self.diagnosis,
            "causes": list(self.causes),
            "adjustments": list(self.adjustments),
            "nominal": self.nominal,
        }


def _levels(dimension: TechniqueDimension, *levels: Dict[str, str]) -> Mapping[str, TechniqueLevel]:
    return MappingProxyType(
        {lvl["name"]: TechniqueLevel(dimension=dimension, **lvl) for lvl in levels}
    )


def _states(*states: ObservableState) -> Mapping[str, ObservableState]:
    return MappingProxyType({s.state: s for s in states})


_MAINTAIN = ("Maintain settings",)

TECHNIQUE_DATABASE: Mapping[TechniqueDimension, Mapping[str, TechniqueLevel]] = MappingProxyType(
    {
        TechniqueDimension.ARC_GAP: _levels(
            TechniqueDimension.ARC_GAP,
            {
                "name": "Short",
                "effect": "More direct heat, deeper penetration",
                "puddle": "Less fluid, more directed",
                "suitable": "Root passes, harder to reach spots",
                "appearance": "Narrower bead, higher crown",
            },
            {
                "name": "Medium",
                "effect": "Balanced heat distribution",
                "puddle": "Moderate fluidity and spread",
                "suitable": "General purpose",
                "appearance": "Even bead formation",
            },
            {
                "name": "Long",
                "effect": "More distributed heat, less penetration",
                "puddle": "More fluid, wider spread",
                "suitable": "Thin metals, wider coverage",
                "appearance": "Flatter, wider bead",
            },
        ),
        TechniqueDimension.TRAVEL_SPEED: _levels(
            TechniqueDimension.TRAVEL_SPEED,
            {
                "name": "Slow",
                "effect": "More heat input to base metal",
                "puddle": "Wider, more fluid",
                "suitable": "Thick metal, needs preheat",
                "issues": "Excessive build-up, potential burn-through",
            },
            {
                "name": "Medium",
                "effect": "Balanced heat input",
                "puddle": "Controlled spread and fluidity",
                "suitable": "Most general welding",
                "issues": "Minimal if other parameters balanced",
            },
            {
                "name": "Fast",
                "effect": "Less heat input, quicker cooling",
                "puddle": "Narrower, less fluid",
                "suitable": "Thin metals, vertical down",
                "issues": "Potential lack of fusion, undercut",
            },
        ),
        TechniqueDimension.ROD_ANGLE: _levels(
            TechniqueDimension.ROD_ANGLE,
            {
                "name": "Perpendicular",
                "effect": "Maximum penetration, less build-up",
                "puddle": "Penetrates deeper, spreads wider",
                "suitable": "Root passes, butt joints, flat position",
                "appearance": "Flatter bead profile",
            },
            {
                "name": "45°",
                "effect": "Balanced penetration and build-up",
                "puddle": "Moderate penetration and stacking",
                "suitable": "General purpose, fillet welds",
                "appearance": "Moderate crown",
            },
            {
                "name": "Shallow",
                "effect": "Less penetration, more build-up",
                "puddle": "Stacks more, penetrates less",
                "suitable": "Fill passes, building up metal",
                "appearance": "Higher crown, potentially less fusion",
            },
        ),
        TechniqueDimension.MOTION_PATTERN: _levels(
            TechniqueDimension.MOTION_PATTERN,
            {
                "name": "Straight",
                "effect": "Consistent heat input, uniform bead",
                "puddle": "Even, predictable formation",
                "suitable": "Simple joints, production work, E7018/E7024",
                "appearance": "Even, uniform bead",
            },
            {
                "name": "Circular",
                "effect": "Controls puddle width, moderate heat",
                "puddle": "Contained spread, good edge tie-in",
                "suitable": "General purpose, all positions",
                "appearance": "Slightly scalloped edges",
            },
            {
                "name": "Zigzag",
                "effect": "Wider heat distribution, good control",
                "puddle": "Wider bead, controlled fluidity",
                "suitable": "Wider joints, good edge tie-in",
                "appearance": "Wide bead with even edges",
            },
            {
                "name": "Whip/Step",
                "effect": "Controls heat input, cools between steps",
                "puddle": "Solidifies between movements",
                "suitable": "E6010/E6011, vertical, poor fit-up",
                "appearance": "Distinct ripple pattern",
            },
        ),
    }
)

OBSERVABLE_DATABASE: Mapping[ObservableDimension, Mapping[str, ObservableState]] = MappingProxyType(
    {
        ObservableDimension.PUDDLE_FLUID: _states(
            ObservableState(
                dimension=ObservableDimension.PUDDLE_FLUID,
                state=PuddleFluidity.STIFF.value,
                diagnosis="Insufficient heat",
                causes=("Amperage too low", "Travel too fast", "Arc too short"),
                adjustments=("Increase amperage", "Slow travel speed", "Lengthen arc slightly"),
            ),
            ObservableState(
                dimension=ObservableDimension.PUDDLE_FLUID,
                state=PuddleFluidity.MODERATE.value,
                diagnosis="Proper heat input",
                causes=("Parameters balanced",),
                adjustments=_MAINTAIN,
                nominal=True,
            ),
            ObservableState(
                dimension=ObservableDimension.PUDDLE_FLUID,
                state=PuddleFluidity.VERY_FLUID.value,
                diagnosis="Excessive heat",
                causes=("Amperage too high", "Travel too slow", "Arc too long"),
                adjustments=("Decrease amperage", "Increase travel speed", "Shorten arc"),
            ),
        ),
        ObservableDimension.PUDDLE_SPREAD: _states(
            ObservableState(
                dimension=ObservableDimension.PUDDLE_SPREAD,
                state=PuddleSpread.NARROW.value,
                diagnosis="Insufficient heat or distribution",
                causes=("Amperage too low", "Travel too fast", "Angle too shallow"),
                adjustments=(
                    "Increase amperage",
                    "Slow travel",
                    "Adjust to more perpendicular angle",
                ),
            ),
            ObservableState(
                dimension=ObservableDimension.PUDDLE_SPREAD,
                state=PuddleSpread.MODERATE.value,
                diagnosis="Good heat distribution",
                causes=("Parameters balanced",),
                adjustments=_MAINTAIN,
                nominal=True,
            ),
            ObservableState(
                dimension=ObservableDimension.PUDDLE_SPREAD,
                state=PuddleSpread.WIDE.value,
                diagnosis="Excessive heat input",
                causes=(
                    "Amperage too high",
                    "Travel too slow",
                    "Angle too perpendicular for application",
                ),
                adjustments=("Decrease amperage", "Speed up travel", "Adjust angle"),
            ),
        ),
        ObservableDimension.EDGE_TIE: _states(
            ObservableState(
                dimension=ObservableDimension.EDGE_TIE,
                state=EdgeTieIn.POOR.value,
                diagnosis="Inadequate fusion at edges",
                causes=("Insufficient heat at edges", "Travel too fast", "Poor angle"),
                adjustments=(
                    "Adjust angle to direct more heat to edges",
                    "Slow travel",
                    "Weave slightly",
                ),
            ),
            ObservableState(
                dimension=ObservableDimension.EDGE_TIE,
                state=EdgeTieIn.ADEQUATE.value,
                diagnosis="Sufficient edge fusion",
                causes=("Heat distribution adequate",),
                adjustments=_MAINTAIN,
                nominal=True,
            ),
            ObservableState(
                dimension=ObservableDimension.EDGE_TIE,
                state=EdgeTieIn.EXCELLENT.value,
                diagnosis="Perfect edge fusion",
                causes=("Ideal parameter balance",),
                adjustments=_MAINTAIN,
                nominal=True,
            ),
        ),
        ObservableDimension.ARC_STABILITY: _states(
            ObservableState(
                dimension=ObservableDimension.ARC_STABILITY,
                state=ArcStability.UNSTABLE.value,
                diagnosis="Poor arc control",
                causes=(
                    "Wrong current type for electrode",
                    "Inconsistent arc gap",
                    "Damaged coating",
                ),
                adjustments=("Check polarity", "Maintain steady hand", "Check electrode condition"),
            ),
            ObservableState(
                dimension=ObservableDimension.ARC_STABILITY,
                state=ArcStability.STABLE.value,
                diagnosis="Good arc control",
                causes=("Correct parameters",),
                adjustments=_MAINTAIN,
                nominal=True,
            ),
        ),
    }
)


def get_technique_levels(
    dimension: Union[str, TechniqueDimension, None],
) -> Optional[Mapping[str, TechniqueLevel]]:
    """All levels of a technique dimension, keyed by level name, in table order."""
    key = coerce_enum(TechniqueDimension, dimension)
    if key is None:
        return None
    return TECHNIQUE_DATABASE.get(key)


def get_technique_level(
    dimension: Union[str, TechniqueDimension, None],
    level: Optional[str],
) -> Optional[TechniqueLevel]:
    """
    Get one technique level.

    Args:
        dimension: "arcGap", "travelSpeed", "rodAngle" or "motionPattern"
        level: Level name, e.g. "Short" (case-insensitive)

    Returns:
        TechniqueLevel or None
    """
    levels = get_technique_levels(dimension)
    if levels is None or not level:
        return None
    return _lookup_casefold(levels, level)


def get_observable_states(
    dimension: Union[str, ObservableDimension, None],
) -> Optional[Mapping[str, ObservableState]]:
    key = coerce_enum(ObservableDimension, dimension)
    if key is None:
        return None
    return OBSERVABLE_DATABASE.get(key)


def get_observable_state(
    dimension: Union[str, ObservableDimension, None],
    state: Optional[str],
) -> Optional[ObservableState]:
    """
    Get the diagnosis for an observed state.

    Example:
        >>> get_observable_state("puddleFluid", "Stiff").diagnosis
        'Insufficient heat'
    """
    states = get_observable_states(dimension)
    if states is None or not state:
        return None
    return _lookup_casefold(states, getattr(state, "value", state))


def _lookup_casefold(table: Mapping[str, object], name: str):
    if name in table:
        return table[name]
    folded = name.strip().casefold()
    for key, value in table.items():
        if key.casefold() == folded:
            return value
    return None
