"""Tests for the SMAW technique recommendation engine."""

import dataclasses
import logging
from itertools import product

import pytest

from src.core.knowledge.welding import (
    ELECTRODE_DATABASE,
    ELECTRODE_SIZE_DATABASE,
    MetalThickness,
    ParameterSnapshot,
    WeldingPosition,
    diagnose_observations,
    get_amperage_range,
    get_recommendations,
    list_input_options,
    match_technique_levels,
    narrow_amperage_range,
)
from src.core.knowledge.welding.recommendations import _round_half_up


def _snapshot(base: ParameterSnapshot, **changes) -> ParameterSnapshot:
    return dataclasses.replace(base, **changes)


class TestBaselineScenario:
    """E6010 1/8" flat butt joint on DC+ with nominal observations."""

    def test_full_recommendation(self, default_snapshot):
        result = get_recommendations(default_snapshot)

        assert result.amperage == "75-130A"
        assert (result.amperage_min, result.amperage_max) == (75, 130)
        assert result.rod_angle == "Perpendicular"
        assert result.arc_gap == "Medium"
        assert result.travel_speed is None
        assert result.motion_pattern == ("Circular", "Zigzag", "Whip/Step")
        assert result.adjustments == ()

    def test_accepts_camel_case_mapping(self):
        """Test the front end's input object is accepted as-is."""
        result = get_recommendations(
            {
                "electrode": "E6010",
                "electrodeSize": '1/8"',
                "position": "Flat",
                "metalThickness": 'Medium (1/8"-3/16")',
                "jointType": "Butt",
                "machineType": "DC+",
            }
        )

        assert result.amperage == "75-130A"
        assert result.rod_angle == "Perpendicular"

    def test_result_is_immutable(self, default_snapshot):
        result = get_recommendations(default_snapshot)

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.amperage = "1-2A"  # type: ignore[misc]

    def test_to_dict(self, default_snapshot):
        data = get_recommendations(default_snapshot).to_dict()

        assert data["motion_pattern"] == ["Circular", "Zigzag", "Whip/Step"]
        assert data["adjustments"] == []
        assert data["travel_speed"] is None


class TestAmperage:
    """Thickness narrowing and position trims."""

    def test_thin_keeps_low_end(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, metal_thickness='Thin (<1/8")'))
        assert result.amperage == "75-97A"

    def test_thick_keeps_high_end(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, metal_thickness='Thick (>3/16")'))
        assert result.amperage == "108-130A"

    def test_thickness_band_must_match_exactly(self, default_snapshot):
        """Test "thin" / "Thick" short names leave the window unnarrowed."""
        for band in ("thin", "Thick", "THIN (<1/8\")"):
            result = get_recommendations(_snapshot(default_snapshot, metal_thickness=band))
            assert result.amperage == "75-130A"

    def test_vertical_up_trim(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, position="Vertical Up"))
        assert result.amperage == "75-125A"

    def test_overhead_trim(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, position="Overhead"))
        assert result.amperage == "75-127A"

    def test_trim_applies_after_thickness_narrowing(self):
        """Thick 140-215 narrows to 185-215, then vertical up trims to 210."""
        result = get_recommendations(
            ParameterSnapshot(
                electrode="E7018",
                electrode_size='5/32"',
                position="Vertical Up",
                metal_thickness='Thick (>3/16")',
            )
        )
        assert result.amperage == "185-210A"

    def test_thin_overhead(self):
        """Thin 65-110 narrows to 65-83, overhead trims to 80."""
        result = get_recommendations(
            ParameterSnapshot(
                electrode="E7018",
                electrode_size='3/32"',
                position="Overhead",
                metal_thickness='Thin (<1/8")',
            )
        )
        assert result.amperage == "65-80A"

    def test_unknown_thickness_leaves_range(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, metal_thickness="Foil"))
        assert result.amperage == "75-130A"

    def test_half_up_rounding(self):
        assert _round_half_up(2.5) == 3
        assert _round_half_up(3.5) == 4
        assert _round_half_up(96.49) == 96

    def test_narrow_amperage_range_direct(self):
        assert narrow_amperage_range((75, 130), MetalThickness.THIN, WeldingPosition.VERTICAL_UP) == (75, 92)
        assert narrow_amperage_range((75, 130), None, None) == (75, 130)

    @pytest.mark.parametrize(
        "electrode,size",
        list(product(list(ELECTRODE_DATABASE), list(ELECTRODE_SIZE_DATABASE))),
    )
    def test_range_properties(self, electrode, size):
        """min <= max everywhere; thin lowers max, thick raises min; trims are 5 / 3."""
        base_min, base_max = get_amperage_range(electrode, size)

        for thickness in MetalThickness:
            flat = narrow_amperage_range((base_min, base_max), thickness, WeldingPosition.FLAT)
            up = narrow_amperage_range((base_min, base_max), thickness, WeldingPosition.VERTICAL_UP)
            overhead = narrow_amperage_range((base_min, base_max), thickness, WeldingPosition.OVERHEAD)

            for low, high in (flat, up, overhead):
                assert low <= high
            assert up == (flat[0], flat[1] - 5)
            assert overhead == (flat[0], flat[1] - 3)

            if thickness is MetalThickness.THIN:
                assert flat[0] == base_min
                assert flat[1] < base_max
            elif thickness is MetalThickness.THICK:
                assert flat[0] > base_min
                assert flat[1] == base_max
            else:
                assert flat == (base_min, base_max)

    def test_unknown_electrode_leaves_amperage_unset(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode="E9999"))

        assert result.amperage is None
        assert result.amperage_min is None
        assert result.arc_gap is None
        assert result.motion_pattern == ()
        # joint-derived guidance still resolves
        assert result.rod_angle == "Perpendicular"

    def test_unknown_size_keeps_electrode_guidance(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode_size='1/4"'))

        assert result.amperage is None
        assert result.arc_gap == "Medium"


class TestRodAngle:
    """Joint-derived rod angle and position overrides."""

    @pytest.mark.parametrize(
        "position,expected",
        [
            ("Flat", "Perpendicular"),
            ("Vertical Up", "45° angled up slightly"),
            ("Overhead", "Nearly perpendicular"),
            ("Sideways", "45°"),
        ],
    )
    def test_butt_joint_by_position(self, default_snapshot, position, expected):
        result = get_recommendations(_snapshot(default_snapshot, position=position))
        assert result.rod_angle == expected

    @pytest.mark.parametrize("joint", ["Lap", "T"])
    @pytest.mark.parametrize("position", ["Flat", "Vertical Up", "Overhead"])
    def test_lap_and_tee_ignore_position(self, default_snapshot, joint, position):
        result = get_recommendations(_snapshot(default_snapshot, joint_type=joint, position=position))
        assert result.rod_angle == "45° into corner"

    def test_corner(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, joint_type="Corner"))
        assert result.rod_angle == "Bisect the corner angle"

    def test_unknown_joint(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, joint_type="Edge"))
        assert result.rod_angle is None

    @pytest.mark.parametrize("joint", ["Butt", "Lap", "T", "Corner", "Edge"])
    def test_vertical_down_overrides_joint(self, default_snapshot, joint):
        result = get_recommendations(
            _snapshot(default_snapshot, joint_type=joint, position="Vertical Down")
        )
        assert result.rod_angle == "Angle up slightly to hold puddle"

    @pytest.mark.parametrize("joint", ["Butt", "Lap", "Corner"])
    def test_horizontal_overrides_joint(self, default_snapshot, joint):
        result = get_recommendations(
            _snapshot(default_snapshot, joint_type=joint, position="Horizontal")
        )
        assert result.rod_angle == "Angle up slightly to control puddle"


class TestTravelSpeed:
    @pytest.mark.parametrize(
        "position,expected",
        [
            ("Vertical Down", "Fast"),
            ("Vertical Up", "Medium-slow, steady"),
            ("Horizontal", "Medium-fast to prevent sagging"),
            ("Flat", None),
            ("Overhead", None),
            ("Unknown", None),
        ],
    )
    def test_travel_speed_by_position(self, default_snapshot, position, expected):
        result = get_recommendations(_snapshot(default_snapshot, position=position))
        assert result.travel_speed == expected


class TestMotionPatternAndArcGap:
    """Position seeding and electrode augmentation."""

    def test_vertical_up_e7018_is_not_extended(self, default_snapshot):
        result = get_recommendations(
            _snapshot(default_snapshot, electrode="E7018", position="Vertical Up")
        )

        assert result.motion_pattern == ("Side-to-side",)
        assert result.arc_gap == "Short"

    @pytest.mark.parametrize("electrode", ["E6010", "E6011"])
    def test_vertical_up_cellulose(self, default_snapshot, electrode):
        result = get_recommendations(
            _snapshot(default_snapshot, electrode=electrode, position="Vertical Up")
        )

        assert result.motion_pattern == ("Step/Whip", "Circular")
        assert result.arc_gap == "Medium"

    def test_e6013(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode="E6013"))

        assert result.arc_gap == "Short to medium"
        assert result.motion_pattern == ("Straight", "Slight side-to-side")

    def test_e6013_vertical_up_falls_back_to_electrode_patterns(self, default_snapshot):
        result = get_recommendations(
            _snapshot(default_snapshot, electrode="E6013", position="Vertical Up")
        )
        assert result.motion_pattern == ("Straight", "Slight side-to-side")

    def test_e7018_flat(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode="E7018"))

        assert result.motion_pattern == ("Straight", "Side-to-side")
        assert result.adjustments == ("Keep arc in puddle, don't let slag get ahead",)

    def test_e7024_flat_appends_straight(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode="E7024"))

        assert result.arc_gap == "Short"
        assert "Straight" in result.motion_pattern
        assert result.motion_pattern == ("Straight",)

    def test_e7024_appends_without_empty_check(self, default_snapshot):
        """E7024 appends unconditionally; no position seeds it today so it stays single."""
        for position in WeldingPosition:
            result = get_recommendations(
                _snapshot(default_snapshot, electrode="E7024", position=position.value)
            )
            assert result.motion_pattern[-1] == "Straight"
            assert result.motion_pattern.count("Straight") == 1


class TestObservationAdjustments:
    """Adjustment messages and their fixed ordering."""

    def test_all_four_in_order(self, default_snapshot):
        result = get_recommendations(
            _snapshot(
                default_snapshot,
                machine_type="AC",
                observed_puddle="Stiff",
                observed_spread="Narrow",
                observed_tie_in="Poor",
                observed_stability="Unstable",
            )
        )

        assert result.adjustments == (
            "Increase heat: try higher amperage or slower travel",
            "Widen puddle: slow down slightly or increase amperage",
            "Improve edge tie-in: direct more heat to edges, adjust angle",
            "E6010 requires DC+, switch to E6011 for AC",
        )

    def test_e6010_on_ac_unstable(self):
        result = get_recommendations(
            {"electrode": "E6010", "machineType": "AC", "observedStability": "Unstable"}
        )
        assert "E6010 requires DC+, switch to E6011 for AC" in result.adjustments

    @pytest.mark.parametrize(
        "electrode,machine",
        [("E6011", "AC"), ("E6010", "DC+"), ("E6013", "AC")],
    )
    def test_generic_unstable_message(self, default_snapshot, electrode, machine):
        result = get_recommendations(
            _snapshot(
                default_snapshot,
                electrode=electrode,
                machine_type=machine,
                observed_stability="Unstable",
            )
        )
        assert result.adjustments[-1] == "Maintain consistent arc length, check machine settings"

    def test_too_much_heat(self, default_snapshot):
        result = get_recommendations(
            _snapshot(default_snapshot, observed_puddle="VeryFluid", observed_spread="Wide")
        )

        assert result.adjustments == (
            "Reduce heat: try lower amperage or faster travel",
            "Narrow puddle: speed up slightly or decrease amperage",
        )

    def test_electrode_note_precedes_observations(self, default_snapshot):
        result = get_recommendations(
            _snapshot(default_snapshot, electrode="E7018", observed_puddle="Stiff")
        )

        assert result.adjustments[0] == "Keep arc in puddle, don't let slag get ahead"
        assert result.adjustments[1].startswith("Increase heat")

    def test_nominal_and_excellent_produce_nothing(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, observed_tie_in="Excellent"))
        assert result.adjustments == ()


class TestFailSoft:
    def test_empty_snapshot(self):
        result = get_recommendations(ParameterSnapshot())

        assert result.amperage is None
        assert result.arc_gap is None
        assert result.rod_angle is None
        assert result.travel_speed is None
        assert result.motion_pattern == ()
        assert result.adjustments == ()

    def test_garbage_values(self):
        result = get_recommendations(
            {"electrode": 42, "position": None, "observedPuddle": "Boiling", "bogus": "x"}
        )

        assert result.amperage is None
        assert result.adjustments == ()

    def test_from_dict_keeps_observation_defaults(self):
        snapshot = ParameterSnapshot.from_dict({"electrode": "E7018", "observedPuddle": None})

        assert snapshot.observed_puddle == "Moderate"
        assert snapshot.observed_tie_in == "Adequate"
        assert snapshot.observed_stability == "Stable"


class TestExactKeys:
    """Rule keys must equal the table values; near-misses count as unknown."""

    def test_lowercase_flat_is_any_other_position(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, position="flat"))

        assert result.rod_angle == "45°"
        assert result.travel_speed is None

    def test_lowercase_electrode_is_unknown(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode="e6010"))

        assert result.amperage is None
        assert result.arc_gap is None
        assert result.motion_pattern == ()

    def test_member_style_names_do_not_narrow_or_trim(self):
        result = get_recommendations(
            ParameterSnapshot(
                electrode="E7018",
                electrode_size='1/8"',
                position="vertical_up",
                metal_thickness="thin",
            )
        )

        assert result.amperage == "100-150A"
        assert result.travel_speed is None
        assert result.motion_pattern == ("Straight", "Side-to-side")

    def test_size_without_inch_mark_is_unknown(self, default_snapshot):
        result = get_recommendations(_snapshot(default_snapshot, electrode_size="1/8"))
        assert result.amperage is None

    def test_lowercase_observations_are_ignored(self, default_snapshot):
        result = get_recommendations(
            _snapshot(
                default_snapshot,
                machine_type="ac",
                observed_puddle="stiff",
                observed_stability="unstable",
            )
        )

        assert result.adjustments == ()
        assert diagnose_observations(
            _snapshot(default_snapshot, observed_puddle="very fluid"), include_nominal=False
        ) == []

    def test_e6010_lowercase_ac_gets_generic_message(self, default_snapshot):
        result = get_recommendations(
            _snapshot(default_snapshot, machine_type="ac", observed_stability="Unstable")
        )
        assert result.adjustments == ("Maintain consistent arc length, check machine settings",)


class TestLookupMissLogging:
    def test_unset_fields_are_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="src.core.knowledge.welding.recommendations"):
            get_recommendations(ParameterSnapshot(electrode="E7018"))

        assert not [r for r in caplog.records if r.getMessage() == "Unknown welding key"]

    def test_unknown_values_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="src.core.knowledge.welding.recommendations"):
            get_recommendations(ParameterSnapshot(electrode="E9999", position="Flat"))

        misses = [r for r in caplog.records if r.getMessage() == "Unknown welding key"]
        assert [(r.table, r.key) for r in misses] == [("electrodes", "E9999")]


class TestDiagnoses:
    def test_default_observations_are_nominal(self, default_snapshot):
        diagnoses = diagnose_observations(default_snapshot)

        assert [d.diagnosis for d in diagnoses] == [
            "Proper heat input",
            "Good heat distribution",
            "Sufficient edge fusion",
            "Good arc control",
        ]
        assert diagnose_observations(default_snapshot, include_nominal=False) == []

    def test_off_nominal_order(self, default_snapshot):
        snapshot = _snapshot(
            default_snapshot,
            observed_stability="Unstable",
            observed_puddle="VeryFluid",
        )

        diagnoses = diagnose_observations(snapshot, include_nominal=False)

        assert [d.state for d in diagnoses] == ["VeryFluid", "Unstable"]
        assert "Wrong current type for electrode" in diagnoses[1].causes

    def test_unknown_state_skipped(self, default_snapshot):
        diagnoses = diagnose_observations(_snapshot(default_snapshot, observed_spread="Huge"))
        assert len(diagnoses) == 3


class TestTechniqueMatches:
    def test_baseline(self, default_snapshot):
        matches = match_technique_levels(get_recommendations(default_snapshot))

        assert matches == {
            "arcGap": ["Medium"],
            "rodAngle": ["Perpendicular"],
            "motionPattern": ["Circular"],
        }

    def test_compound_values(self, default_snapshot):
        result = get_recommendations(
            _snapshot(default_snapshot, electrode="E6013", position="Vertical Up")
        )
        matches = match_technique_levels(result)

        assert matches["arcGap"] == ["Short", "Medium"]
        assert matches["travelSpeed"] == ["Slow", "Medium"]
        assert matches["rodAngle"] == ["45°"]
        assert matches["motionPattern"] == ["Straight"]

    def test_empty_result(self):
        assert match_technique_levels(get_recommendations(ParameterSnapshot())) == {}


class TestInputOptions:
    def test_options(self):
        options = list_input_options()

        assert options["electrode"] == ["E6010", "E6011", "E6013", "E7018", "E7024"]
        assert options["electrode_size"] == ['3/32"', '1/8"', '5/32"']
        assert options["machine_type"] == ["AC", "DC+", "DC-"]
        assert options["observed_puddle"] == ["Stiff", "Moderate", "VeryFluid"]
        assert options["joint_type"] == ["Butt", "Lap", "T", "Corner"]
