"""
SMAW Technique Recommendation Engine.

Derives machine settings and technique guidance from a snapshot of welding
parameters plus what the welder currently observes in the puddle.

The engine is a pure function over the static tables in this package: every
call recomputes from scratch. Keys must equal the table values exactly
("Vertical Up", not "vertical_up"); any other key is unknown and leaves the
matching result field unset instead of raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .conditions import (
    JointType,
    MetalThickness,
    WeldingPosition,
    JOINT_TYPE_DATABASE,
    METAL_THICKNESS_DATABASE,
    POSITION_DATABASE,
)
from .electrodes import (
    ElectrodeClass,
    ElectrodeSize,
    MachineType,
    ELECTRODE_DATABASE,
    ELECTRODE_SIZE_DATABASE,
    exact_enum,
    get_amperage_range,
)
from .techniques import (
    ArcStability,
    EdgeTieIn,
    ObservableDimension,
    ObservableState,
    PuddleFluidity,
    PuddleSpread,
    TechniqueDimension,
    OBSERVABLE_STATE_ENUMS,
    TECHNIQUE_DATABASE,
    get_observable_state,
)

logger = logging.getLogger(__name__)

# Share of the base amperage window kept for thin / skipped for thick metal
THIN_RANGE_FRACTION = 0.4
THICK_RANGE_FRACTION = 0.6

# Amperes taken off the top of the window for out-of-position work
POSITION_MAX_TRIM: Dict[WeldingPosition, int] = {
    WeldingPosition.VERTICAL_UP: 5,
    WeldingPosition.OVERHEAD: 3,
}

BUTT_ROD_ANGLE: Dict[WeldingPosition, str] = {
    WeldingPosition.FLAT: "Perpendicular",
    WeldingPosition.VERTICAL_UP: "45° angled up slightly",
    WeldingPosition.OVERHEAD: "Nearly perpendicular",
}
BUTT_ROD_ANGLE_DEFAULT = "45°"

JOINT_ROD_ANGLE: Dict[JointType, str] = {
    JointType.LAP: "45° into corner",
    JointType.TEE: "45° into corner",
    JointType.CORNER: "Bisect the corner angle",
}

# Position overrides win over joint geometry
POSITION_ROD_ANGLE: Dict[WeldingPosition, str] = {
    WeldingPosition.VERTICAL_DOWN: "Angle up slightly to hold puddle",
    WeldingPosition.HORIZONTAL: "Angle up slightly to control puddle",
}

POSITION_TRAVEL_SPEED: Dict[WeldingPosition, str] = {
    WeldingPosition.VERTICAL_DOWN: "Fast",
    WeldingPosition.VERTICAL_UP: "Medium-slow, steady",
    WeldingPosition.HORIZONTAL: "Medium-fast to prevent sagging",
}

VERTICAL_UP_MOTION: Dict[ElectrodeClass, Tuple[str, ...]] = {
    ElectrodeClass.E7018: ("Side-to-side",),
    ElectrodeClass.E6010: ("Step/Whip", "Circular"),
    ElectrodeClass.E6011: ("Step/Whip", "Circular"),
}

ADJUST_INCREASE_HEAT = "Increase heat: try higher amperage or slower travel"
ADJUST_REDUCE_HEAT = "Reduce heat: try lower amperage or faster travel"
ADJUST_WIDEN_PUDDLE = "Widen puddle: slow down slightly or increase amperage"
ADJUST_NARROW_PUDDLE = "Narrow puddle: speed up slightly or decrease amperage"
ADJUST_EDGE_TIE_IN = "Improve edge tie-in: direct more heat to edges, adjust angle"
ADJUST_E6010_ON_AC = "E6010 requires DC+, switch to E6011 for AC"
ADJUST_ARC_LENGTH = "Maintain consistent arc length, check machine settings"
ADJUST_E7018_SLAG = "Keep arc in puddle, don't let slag get ahead"

MACHINE_TYPE_OPTIONS: Tuple[str, ...] = tuple(m.value for m in MachineType)

# camelCase names used by the browser front end
_SNAPSHOT_ALIASES: Dict[str, str] = {
    "electrodeSize": "electrode_size",
    "metalThickness": "metal_thickness",
    "jointType": "joint_type",
    "machineType": "machine_type",
    "observedPuddle": "observed_puddle",
    "observedSpread": "observed_spread",
    "observedTieIn": "observed_tie_in",
    "observedStability": "observed_stability",
}


@dataclass(frozen=True)
class ParameterSnapshot:
    """Welding parameters and puddle observations for one recommendation."""

    electrode: Optional[str] = None
    electrode_size: Optional[str] = None
    position: Optional[str] = None
    metal_thickness: Optional[str] = None
    joint_type: Optional[str] = None
    machine_type: Optional[str] = None
    observed_puddle: str = PuddleFluidity.MODERATE.value
    observed_spread: str = PuddleSpread.MODERATE.value
    observed_tie_in: str = EdgeTieIn.ADEQUATE.value
    observed_stability: str = ArcStability.STABLE.value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParameterSnapshot":
        """
        Build a snapshot from snake_case or camelCase keys.

        Unknown keys are ignored; a missing or null observation keeps its
        nominal default.
        """
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _SNAPSHOT_ALIASES.get(raw_key, raw_key)
            if key not in cls.__dataclass_fields__ or value is None:
                continue
            values[key] = getattr(value, "value", value)
        return cls(**values)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


@dataclass(frozen=True)
class RecommendationResult:
    """Recommended settings; None marks a field no rule could resolve."""

    amperage: Optional[str] = None  # "min-maxA"
    amperage_min: Optional[int] = None
    amperage_max: Optional[int] = None
    arc_gap: Optional[str] = None
    rod_angle: Optional[str] = None
    travel_speed: Optional[str] = None
    motion_pattern: Tuple[str, ...] = field(default_factory=tuple)
    adjustments: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amperage": self.amperage,
            "amperage_min": self.amperage_min,
            "amperage_max": self.amperage_max,
            "arc_gap": self.arc_gap,
            "rod_angle": self.rod_angle,
            "travel_speed": self.travel_speed,
            "motion_pattern": list(self.motion_pattern),
            "adjustments": list(self.adjustments),
        }


SnapshotLike = Union[ParameterSnapshot, Mapping[str, Any]]


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; amperage bounds round .5 upward
    return int(math.floor(value + 0.5))


def narrow_amperage_range(
    base: Tuple[int, int],
    thickness: Optional[MetalThickness],
    position: Optional[WeldingPosition],
) -> Tuple[int, int]:
    """
    Narrow a base amperage window for metal thickness, then trim for position.

    Thin metal keeps the bottom 40% of the window, thick metal the top 40%.
    Vertical-up and overhead trims come off the already narrowed maximum.

    Example:
        >>> narrow_amperage_range((75, 130), MetalThickness.THIN, WeldingPosition.VERTICAL_UP)
        (75, 92)
    """
    low, high = float(base[0]), float(base[1])
    span = high - low

    if thickness is MetalThickness.THIN:
        high = low + span * THIN_RANGE_FRACTION
    elif thickness is MetalThickness.THICK:
        low = low + span * THICK_RANGE_FRACTION

    high -= POSITION_MAX_TRIM.get(position, 0)

    return _round_half_up(low), _round_half_up(high)


def resolve_rod_angle(
    joint_type: Optional[JointType],
    position: Optional[WeldingPosition],
) -> Optional[str]:
    """Rod angle from joint geometry, replaced by vertical-down/horizontal guidance."""
    rod_angle: Optional[str] = None
    if joint_type is JointType.BUTT:
        rod_angle = BUTT_ROD_ANGLE.get(position, BUTT_ROD_ANGLE_DEFAULT)
    elif joint_type is not None:
        rod_angle = JOINT_ROD_ANGLE.get(joint_type)

    return POSITION_ROD_ANGLE.get(position, rod_angle)


def get_recommendations(snapshot: SnapshotLike) -> RecommendationResult:
    """
    Derive recommended settings and corrective adjustments.

    Args:
        snapshot: ParameterSnapshot or a mapping accepted by
            ParameterSnapshot.from_dict

    Returns:
        RecommendationResult; fields stay None when their inputs are not
        exact table values

    Example:
        >>> rec = get_recommendations({"electrode": "E6010", "electrodeSize": '1/8"',
        ...                            "position": "Flat", "jointType": "Butt"})
        >>> rec.amperage, rec.rod_angle
        ('75-130A', 'Perpendicular')
    """
    if not isinstance(snapshot, ParameterSnapshot):
        snapshot = ParameterSnapshot.from_dict(snapshot)

    electrode = exact_enum(ElectrodeClass, snapshot.electrode)
    position = exact_enum(WeldingPosition, snapshot.position)
    thickness = exact_enum(MetalThickness, snapshot.metal_thickness)
    joint_type = exact_enum(JointType, snapshot.joint_type)
    machine = exact_enum(MachineType, snapshot.machine_type)

    for table, raw, resolved in (
        ("electrodes", snapshot.electrode, electrode),
        ("positions", snapshot.position, position),
        ("metal_thickness", snapshot.metal_thickness, thickness),
        ("joint_types", snapshot.joint_type, joint_type),
    ):
        if raw is not None and resolved is None:
            logger.debug("Unknown welding key", extra={"table": table, "key": raw})

    amperage = amperage_min = amperage_max = None
    size = exact_enum(ElectrodeSize, snapshot.electrode_size)
    base = get_amperage_range(electrode, size)
    if base is not None:
        amperage_min, amperage_max = narrow_amperage_range(base, thickness, position)
        amperage = f"{amperage_min}-{amperage_max}A"
    else:
        logger.debug(
            "No amperage entry",
            extra={"table": "electrode_sizes", "key": f"{snapshot.electrode}@{snapshot.electrode_size}"},
        )

    rod_angle = resolve_rod_angle(joint_type, position)
    travel_speed = POSITION_TRAVEL_SPEED.get(position)

    motion_pattern: List[str] = []
    if position is WeldingPosition.VERTICAL_UP:
        motion_pattern.extend(VERTICAL_UP_MOTION.get(electrode, ()))

    adjustments: List[str] = []
    arc_gap: Optional[str] = None
    if electrode in (ElectrodeClass.E6010, ElectrodeClass.E6011):
        arc_gap = "Medium"
        if not motion_pattern:
            motion_pattern.extend(["Circular", "Zigzag", "Whip/Step"])
    elif electrode is ElectrodeClass.E6013:
        arc_gap = "Short to medium"
        if not motion_pattern:
            motion_pattern.extend(["Straight", "Slight side-to-side"])
    elif electrode is ElectrodeClass.E7018:
        arc_gap = "Short"
        adjustments.append(ADJUST_E7018_SLAG)
        if not motion_pattern:
            motion_pattern.extend(["Straight", "Side-to-side"])
    elif electrode is ElectrodeClass.E7024:
        arc_gap = "Short"
        # appended without the empty check the other electrodes use
        motion_pattern.append("Straight")

    adjustments.extend(observation_adjustments(snapshot, electrode, machine))

    return RecommendationResult(
        amperage=amperage,
        amperage_min=amperage_min,
        amperage_max=amperage_max,
        arc_gap=arc_gap,
        rod_angle=rod_angle,
        travel_speed=travel_speed,
        motion_pattern=tuple(motion_pattern),
        adjustments=tuple(adjustments),
    )


def observation_adjustments(
    snapshot: ParameterSnapshot,
    electrode: Optional[ElectrodeClass] = None,
    machine: Optional[MachineType] = None,
) -> List[str]:
    """Corrections for the observed puddle: heat, spread, tie-in, then arc stability."""
    adjustments: List[str] = []

    fluidity = exact_enum(PuddleFluidity, snapshot.observed_puddle)
    if fluidity is PuddleFluidity.STIFF:
        adjustments.append(ADJUST_INCREASE_HEAT)
    elif fluidity is PuddleFluidity.VERY_FLUID:
        adjustments.append(ADJUST_REDUCE_HEAT)

    spread = exact_enum(PuddleSpread, snapshot.observed_spread)
    if spread is PuddleSpread.NARROW:
        adjustments.append(ADJUST_WIDEN_PUDDLE)
    elif spread is PuddleSpread.WIDE:
        adjustments.append(ADJUST_NARROW_PUDDLE)

    if exact_enum(EdgeTieIn, snapshot.observed_tie_in) is EdgeTieIn.POOR:
        adjustments.append(ADJUST_EDGE_TIE_IN)

    if exact_enum(ArcStability, snapshot.observed_stability) is ArcStability.UNSTABLE:
        if electrode is ElectrodeClass.E6010 and machine is MachineType.AC:
            adjustments.append(ADJUST_E6010_ON_AC)
        else:
            adjustments.append(ADJUST_ARC_LENGTH)

    return adjustments


def diagnose_observations(
    snapshot: SnapshotLike,
    include_nominal: bool = True,
) -> List[ObservableState]:
    """
    Look up the diagnosis for each observed state.

    Args:
        snapshot: Parameter snapshot carrying the four observations
        include_nominal: Keep states that need no correction

    Returns:
        Diagnoses ordered fluidity, spread, tie-in, stability; unknown
        states are skipped
    """
    if not isinstance(snapshot, ParameterSnapshot):
        snapshot = ParameterSnapshot.from_dict(snapshot)

    observed = (
        (ObservableDimension.PUDDLE_FLUID, snapshot.observed_puddle),
        (ObservableDimension.PUDDLE_SPREAD, snapshot.observed_spread),
        (ObservableDimension.EDGE_TIE, snapshot.observed_tie_in),
        (ObservableDimension.ARC_STABILITY, snapshot.observed_stability),
    )
    diagnoses: List[ObservableState] = []
    for dimension, raw_state in observed:
        state_enum = exact_enum(OBSERVABLE_STATE_ENUMS[dimension], raw_state)
        if state_enum is None:
            continue
        state = get_observable_state(dimension, state_enum.value)
        if state is None or (state.nominal and not include_nominal):
            continue
        diagnoses.append(state)
    return diagnoses


def match_technique_levels(result: RecommendationResult) -> Dict[str, List[str]]:
    """
    Technique levels referenced by a recommendation.

    A level matches when its name appears in the recommended value, e.g. a
    travel speed of "Medium-slow, steady" matches both "Slow" and "Medium".
    Only the first motion pattern is considered.

    Returns:
        {dimension: [level names]} for dimensions with a recommended value
    """
    values = {
        TechniqueDimension.ARC_GAP: result.arc_gap,
        TechniqueDimension.ROD_ANGLE: result.rod_angle,
        TechniqueDimension.TRAVEL_SPEED: result.travel_speed,
        TechniqueDimension.MOTION_PATTERN: result.motion_pattern[0] if result.motion_pattern else None,
    }
    matches: Dict[str, List[str]] = {}
    for dimension, value in values.items():
        if not value:
            continue
        folded = value.casefold()
        matches[dimension.value] = [
            name for name in TECHNIQUE_DATABASE[dimension] if name.casefold() in folded
        ]
    return matches


def list_input_options() -> Dict[str, List[str]]:
    """Selectable values for every ParameterSnapshot field, in table order."""
    return {
        "electrode": [e.value for e in ELECTRODE_DATABASE],
        "electrode_size": [s.value for s in ELECTRODE_SIZE_DATABASE],
        "position": [p.value for p in POSITION_DATABASE],
        "metal_thickness": [t.value for t in METAL_THICKNESS_DATABASE],
        "joint_type": [j.value for j in JOINT_TYPE_DATABASE],
        "machine_type": list(MACHINE_TYPE_OPTIONS),
        "observed_puddle": [s.value for s in PuddleFluidity],
        "observed_spread": [s.value for s in PuddleSpread],
        "observed_tie_in": [s.value for s in EdgeTieIn],
        "observed_stability": [s.value for s in ArcStability],
    }
