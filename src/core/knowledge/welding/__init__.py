"""
SMAW (Stick Welding) Technique Knowledge Module.

Provides electrode characteristics, amperage windows, position/thickness/joint
guidance, technique effects and puddle diagnostics, plus the recommendation
engine that turns a parameter snapshot into machine settings and corrective
adjustments.

Reference Standards:
- AWS A5.1 - Carbon Steel Electrodes for Shielded Metal Arc Welding
- AWS D1.1 - Structural Welding Code - Steel
"""

from .electrodes import (
    ElectrodeClass,
    ElectrodeSize,
    MachineType,
    Penetration,
    ElectrodeSpec,
    ElectrodeSizeSpec,
    coerce_enum,
    exact_enum,
    get_electrode,
    get_electrode_size,
    get_amperage_range,
    parse_amperage_range,
    supports_position,
    is_current_compatible,
    ELECTRODE_DATABASE,
    ELECTRODE_SIZE_DATABASE,
)
from .conditions import (
    WeldingPosition,
    MetalThickness,
    JointType,
    PositionSpec,
    MetalThicknessSpec,
    JointTypeSpec,
    get_position,
    get_metal_thickness,
    get_joint_type,
    POSITION_DATABASE,
    METAL_THICKNESS_DATABASE,
    JOINT_TYPE_DATABASE,
)
from .techniques import (
    TechniqueDimension,
    ObservableDimension,
    PuddleFluidity,
    PuddleSpread,
    EdgeTieIn,
    ArcStability,
    TechniqueLevel,
    ObservableState,
    get_technique_levels,
    get_technique_level,
    get_observable_states,
    get_observable_state,
    TECHNIQUE_DATABASE,
    OBSERVABLE_DATABASE,
)
from .recommendations import (
    ParameterSnapshot,
    RecommendationResult,
    get_recommendations,
    narrow_amperage_range,
    resolve_rod_angle,
    observation_adjustments,
    diagnose_observations,
    match_technique_levels,
    list_input_options,
)

__all__ = [
    # Electrodes
    "ElectrodeClass",
    "ElectrodeSize",
    "MachineType",
    "Penetration",
    "ElectrodeSpec",
    "ElectrodeSizeSpec",
    "coerce_enum",
    "exact_enum",
    "get_electrode",
    "get_electrode_size",
    "get_amperage_range",
    "parse_amperage_range",
    "supports_position",
    "is_current_compatible",
    "ELECTRODE_DATABASE",
    "ELECTRODE_SIZE_DATABASE",
    # Position / thickness / joint
    "WeldingPosition",
    "MetalThickness",
    "JointType",
    "PositionSpec",
    "MetalThicknessSpec",
    "JointTypeSpec",
    "get_position",
    "get_metal_thickness",
    "get_joint_type",
    "POSITION_DATABASE",
    "METAL_THICKNESS_DATABASE",
    "JOINT_TYPE_DATABASE",
    # Techniques and observations
    "TechniqueDimension",
    "ObservableDimension",
    "PuddleFluidity",
    "PuddleSpread",
    "EdgeTieIn",
    "ArcStability",
    "TechniqueLevel",
    "ObservableState",
    "get_technique_levels",
    "get_technique_level",
    "get_observable_states",
    "get_observable_state",
    "TECHNIQUE_DATABASE",
    "OBSERVABLE_DATABASE",
    # Recommendation engine
    "ParameterSnapshot",
    "RecommendationResult",
    "get_recommendations",
    "narrow_amperage_range",
    "resolve_rod_angle",
    "observation_adjustments",
    "diagnose_observations",
    "match_technique_levels",
    "list_input_options",
]
