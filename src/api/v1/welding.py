"""SMAW welding knowledge API endpoints.

Exposes the deterministic stick-welding knowledge embedded in
`src/core/knowledge/welding` and the technique recommendation engine.

Scopes:
- Electrode characteristics and amperage windows per diameter
- Position, metal thickness and joint guidance
- Technique levels and puddle/arc observation diagnostics
- Recommendation from a parameter snapshot (fail-soft on unknown keys)
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_api_key
from src.core.errors import ErrorCode, build_error
from src.core.knowledge.welding import (
    ElectrodeClass,
    ElectrodeSpec,
    JointType,
    MetalThickness,
    ParameterSnapshot,
    WeldingPosition,
    coerce_enum,
    exact_enum,
    diagnose_observations,
    get_amperage_range,
    get_electrode,
    get_electrode_size,
    get_joint_type,
    get_metal_thickness,
    get_observable_states,
    get_position,
    get_recommendations,
    get_technique_levels,
    is_current_compatible,
    list_input_options,
    match_technique_levels,
    supports_position,
    ELECTRODE_DATABASE,
    ELECTRODE_SIZE_DATABASE,
    JOINT_TYPE_DATABASE,
    METAL_THICKNESS_DATABASE,
    OBSERVABLE_DATABASE,
    POSITION_DATABASE,
    TECHNIQUE_DATABASE,
)
from src.utils.metrics import (
    metric_label,
    welding_lookup_misses_total,
    welding_recommendation_duration_seconds,
    welding_recommendations_total,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_token(raw: Optional[str], what: str) -> str:
    token = (raw or "").strip()
    if not token:
        raise HTTPException(
            status_code=400,
            detail=build_error(ErrorCode.INPUT_ERROR, "welding_lookup", f"Missing {what}"),
        )
    return token


def _not_found(table: str, key: str) -> HTTPException:
    welding_lookup_misses_total.labels(table=table).inc()
    return HTTPException(
        status_code=404,
        detail=build_error(
            ErrorCode.DATA_NOT_FOUND,
            "welding_lookup",
            f"Unknown {table} key",
            key=key,
        ),
    )


class WeldingStatusResponse(BaseModel):
    status: str
    counts: Dict[str, int]
    examples: Dict[str, str]


@router.get("/status", response_model=WeldingStatusResponse)
async def welding_status(
    api_key: str = Depends(get_api_key),
) -> WeldingStatusResponse:
    _ = api_key
    return WeldingStatusResponse(
        status="ok",
        counts={
            "electrodes": len(ELECTRODE_DATABASE),
            "electrode_sizes": len(ELECTRODE_SIZE_DATABASE),
            "positions": len(POSITION_DATABASE),
            "metal_thickness_bands": len(METAL_THICKNESS_DATABASE),
            "joint_types": len(JOINT_TYPE_DATABASE),
            "technique_dimensions": len(TECHNIQUE_DATABASE),
            "observable_dimensions": len(OBSERVABLE_DATABASE),
        },
        examples={
            "electrode": "/electrodes/E7018",
            "amperage": "/electrodes/E6010/amperage?size=1/8",
            "position": "/positions/vertical_up",
            "metal_thickness": "/metal-thickness?band=thin",
            "technique": "/techniques/arcGap",
            "observable": "/observables/puddleFluid",
        },
    )


@router.get("/options", response_model=Dict[str, List[str]])
async def welding_options(api_key: str = Depends(get_api_key)) -> Dict[str, List[str]]:
    _ = api_key
    return list_input_options()


class ElectrodeResponse(BaseModel):
    classification: str
    current: str
    current_types: List[str]
    penetration: str
    slag: str
    positions: List[str]
    best_use: str
    tensile_strength: str
    arc_force: str
    puddle_visibility: str
    technique_options: List[str]
    source: str = Field(default="AWS A5.1 (built-in)")


def _electrode_response(spec: ElectrodeSpec) -> ElectrodeResponse:
    return ElectrodeResponse(
        classification=spec.classification.value,
        current=spec.current,
        current_types=[c.value for c in spec.current_types],
        penetration=spec.penetration.value,
        slag=spec.slag,
        positions=list(spec.positions),
        best_use=spec.best_use,
        tensile_strength=spec.tensile_strength,
        arc_force=spec.arc_force,
        puddle_visibility=spec.puddle_visibility,
        technique_options=list(spec.technique_options),
    )


class ElectrodeListResponse(BaseModel):
    electrodes: List[ElectrodeResponse]
    total: int


@router.get("/electrodes", response_model=ElectrodeListResponse)
async def list_electrodes(api_key: str = Depends(get_api_key)) -> ElectrodeListResponse:
    _ = api_key
    items = [_electrode_response(spec) for spec in ELECTRODE_DATABASE.values()]
    return ElectrodeListResponse(electrodes=items, total=len(items))


@router.get("/electrodes/{classification}", response_model=ElectrodeResponse)
async def electrode_detail(
    classification: str,
    api_key: str = Depends(get_api_key),
) -> ElectrodeResponse:
    _ = api_key
    token = _require_token(classification, "electrode classification")
    spec = get_electrode(token)
    if spec is None:
        raise _not_found("electrodes", token)
    return _electrode_response(spec)


class AmperageResponse(BaseModel):
    electrode: str
    size: str
    amperage_min: int
    amperage_max: int
    amperage: str
    control: str
    deposition: str
    best_for: str


@router.get("/electrodes/{classification}/amperage", response_model=AmperageResponse)
async def electrode_amperage(
    classification: str,
    size: str = Query(..., min_length=1, description='Electrode diameter, e.g. 1/8"'),
    api_key: str = Depends(get_api_key),
) -> AmperageResponse:
    _ = api_key
    electrode = coerce_enum(ElectrodeClass, _require_token(classification, "electrode"))
    if electrode is None:
        raise _not_found("electrodes", classification)
    size_spec = get_electrode_size(size)
    if size_spec is None:
        raise _not_found("electrode_sizes", size)
    window = get_amperage_range(electrode, size_spec.size)
    if window is None:
        raise _not_found("electrode_sizes", f"{electrode.value}@{size_spec.size.value}")
    return AmperageResponse(
        electrode=electrode.value,
        size=size_spec.size.value,
        amperage_min=window[0],
        amperage_max=window[1],
        amperage=f"{window[0]}-{window[1]}A",
        control=size_spec.control,
        deposition=size_spec.deposition,
        best_for=size_spec.best_for,
    )


class PositionResponse(BaseModel):
    position: str
    gravity: str
    amperage: str
    techniques: str
    challenges: str
    rod_angle: str


@router.get("/positions/{position}", response_model=PositionResponse)
async def position_detail(
    position: str,
    api_key: str = Depends(get_api_key),
) -> PositionResponse:
    _ = api_key
    token = _require_token(position, "position")
    spec = get_position(token)
    if spec is None:
        raise _not_found("positions", token)
    return PositionResponse(
        position=spec.position.value,
        gravity=spec.gravity,
        amperage=spec.amperage,
        techniques=spec.techniques,
        challenges=spec.challenges,
        rod_angle=spec.rod_angle,
    )


class MetalThicknessResponse(BaseModel):
    band: str
    amperage: str
    penetration: str
    heat_dissipation: str
    rod_selection: str
    technique: str


@router.get("/metal-thickness", response_model=MetalThicknessResponse)
async def metal_thickness_detail(
    band: str = Query(..., description='Thickness band, e.g. thin or Thin (<1/8")'),
    api_key: str = Depends(get_api_key),
) -> MetalThicknessResponse:
    _ = api_key
    token = _require_token(band, "thickness band")
    spec = get_metal_thickness(token)
    if spec is None:
        raise _not_found("metal_thickness", token)
    return MetalThicknessResponse(
        band=spec.thickness.value,
        amperage=spec.amperage,
        penetration=spec.penetration,
        heat_dissipation=spec.heat_dissipation,
        rod_selection=spec.rod_selection,
        technique=spec.technique,
    )


class JointTypeResponse(BaseModel):
    joint_type: str
    preparation: str
    penetration: str
    technique: str
    common_issues: str
    rod_angle: str


@router.get("/joints/{joint_type}", response_model=JointTypeResponse)
async def joint_detail(
    joint_type: str,
    api_key: str = Depends(get_api_key),
) -> JointTypeResponse:
    _ = api_key
    token = _require_token(joint_type, "joint type")
    spec = get_joint_type(token)
    if spec is None:
        raise _not_found("joint_types", token)
    return JointTypeResponse(
        joint_type=spec.joint_type.value,
        preparation=spec.preparation,
        penetration=spec.penetration,
        technique=spec.technique,
        common_issues=spec.common_issues,
        rod_angle=spec.rod_angle,
    )


class TechniqueLevelResponse(BaseModel):
    name: str
    effect: str
    puddle: str
    suitable: str
    appearance: Optional[str] = None
    issues: Optional[str] = None


class TechniqueDimensionResponse(BaseModel):
    dimension: str
    levels: List[TechniqueLevelResponse]


@router.get("/techniques/{dimension}", response_model=TechniqueDimensionResponse)
async def technique_levels(
    dimension: str,
    api_key: str = Depends(get_api_key),
) -> TechniqueDimensionResponse:
    _ = api_key
    token = _require_token(dimension, "technique dimension")
    levels = get_technique_levels(token)
    if levels is None:
        raise _not_found("techniques", token)
    items = [
        TechniqueLevelResponse(
            name=lvl.name,
            effect=lvl.effect,
            puddle=lvl.puddle,
            suitable=lvl.suitable,
            appearance=lvl.appearance,
            issues=lvl.issues,
        )
        for lvl in levels.values()
    ]
    first = next(iter(levels.values()))
    return TechniqueDimensionResponse(dimension=first.dimension.value, levels=items)


class ObservableStateResponse(BaseModel):
    dimension: str
    state: str
    diagnosis: str
    causes: List[str]
    adjustments: List[str]
    nominal: bool


class ObservableDimensionResponse(BaseModel):
    dimension: str
    states: List[ObservableStateResponse]


@router.get("/observables/{dimension}", response_model=ObservableDimensionResponse)
async def observable_states(
    dimension: str,
    api_key: str = Depends(get_api_key),
) -> ObservableDimensionResponse:
    _ = api_key
    token = _require_token(dimension, "observable dimension")
    states = get_observable_states(token)
    if states is None:
        raise _not_found("observables", token)
    items = [ObservableStateResponse(**s.to_dict()) for s in states.values()]
    return ObservableDimensionResponse(dimension=items[0].dimension, states=items)


class RecommendRequest(BaseModel):
    """Parameter snapshot; accepts snake_case or the front end's camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    electrode: Optional[str] = None
    electrode_size: Optional[str] = Field(None, alias="electrodeSize")
    position: Optional[str] = None
    metal_thickness: Optional[str] = Field(None, alias="metalThickness")
    joint_type: Optional[str] = Field(None, alias="jointType")
    machine_type: Optional[str] = Field(None, alias="machineType")
    observed_puddle: Optional[str] = Field(None, alias="observedPuddle")
    observed_spread: Optional[str] = Field(None, alias="observedSpread")
    observed_tie_in: Optional[str] = Field(None, alias="observedTieIn")
    observed_stability: Optional[str] = Field(None, alias="observedStability")


class RecommendationModel(BaseModel):
    amperage: Optional[str] = None
    amperage_min: Optional[int] = None
    amperage_max: Optional[int] = None
    arc_gap: Optional[str] = None
    rod_angle: Optional[str] = None
    travel_speed: Optional[str] = None
    motion_pattern: List[str] = Field(default_factory=list)
    adjustments: List[str] = Field(default_factory=list)


class CompatibilityModel(BaseModel):
    current_compatible: Optional[bool] = None
    position_supported: Optional[bool] = None


class RecommendResponse(BaseModel):
    snapshot: Dict[str, Optional[str]]
    recommendation: RecommendationModel
    diagnoses: List[ObservableStateResponse]
    technique_matches: Dict[str, List[str]]
    compatibility: CompatibilityModel


@router.post("/recommend", response_model=RecommendResponse)
async def recommend(
    payload: RecommendRequest,
    include_nominal: bool = Query(False, description="Include diagnoses for nominal observations"),
    api_key: str = Depends(get_api_key),
) -> RecommendResponse:
    _ = api_key
    snapshot = ParameterSnapshot.from_dict(payload.model_dump())

    started = time.perf_counter()
    result = get_recommendations(snapshot)
    elapsed = time.perf_counter() - started
    welding_recommendation_duration_seconds.observe(elapsed)

    electrode = exact_enum(ElectrodeClass, snapshot.electrode)
    position = exact_enum(WeldingPosition, snapshot.position)
    for table, raw, known in (
        ("electrodes", snapshot.electrode, electrode is not None),
        ("positions", snapshot.position, position is not None),
        ("metal_thickness", snapshot.metal_thickness, exact_enum(MetalThickness, snapshot.metal_thickness) is not None),
        ("joint_types", snapshot.joint_type, exact_enum(JointType, snapshot.joint_type) is not None),
    ):
        if raw and not known:
            welding_lookup_misses_total.labels(table=table).inc()
    welding_recommendations_total.labels(
        electrode=metric_label(electrode, electrode is not None),
        position=metric_label(position, position is not None),
    ).inc()

    logger.info(
        "welding recommendation",
        extra={
            "electrode": snapshot.electrode,
            "electrode_size": snapshot.electrode_size,
            "position": snapshot.position,
            "adjustments_count": len(result.adjustments),
            "latency_ms": round(elapsed * 1000, 3),
        },
    )

    return RecommendResponse(
        snapshot=snapshot.to_dict(),
        recommendation=RecommendationModel(**result.to_dict()),
        diagnoses=[
            ObservableStateResponse(**s.to_dict())
            for s in diagnose_observations(snapshot, include_nominal=include_nominal)
        ],
        technique_matches=match_technique_levels(result),
        compatibility=CompatibilityModel(
            current_compatible=is_current_compatible(snapshot.electrode, snapshot.machine_type),
            position_supported=supports_position(snapshot.electrode, snapshot.position),
        ),
    )
