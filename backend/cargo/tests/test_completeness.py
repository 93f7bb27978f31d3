"""
Tests for the intake completeness score.
"""

from dataclasses import replace

import pytest

from ..dataclasses import CargoLine, IntakeData
from ..services import completeness
from ..services.completeness import score_completeness
from ..types import Modality, RoadTruckType, SeaLoadType
from .factories import make_intake, make_line, make_road_intake, make_sea_intake


class TestScoreCompleteness:
    def test_missing_intake_scores_zero(self):
        assert score_completeness(None) == 0

    def test_empty_intake_scores_zero(self):
        assert score_completeness(IntakeData()) == 0

    def test_complete_intake_scores_full(self):
        assert score_completeness(make_intake()) == 100

    def test_parties_only(self):
        intake = IntakeData(shipper_id="C-100", consignee_id="C-200", incoterms="EXW", currency="EUR")

        assert score_completeness(intake) == 25

    def test_parties_need_currency(self):
        assert score_completeness(make_intake(currency="")) == 75

    def test_routing_needs_ready_date(self):
        assert score_completeness(make_intake(ready_date="  ")) == 75

    def test_commodity_without_hs_code_is_partial(self):
        assert score_completeness(make_intake(hs_code="")) == 90

    def test_dangerous_goods_flag_stands_in_for_hs_code(self):
        assert score_completeness(make_intake(hs_code="", is_dg=True)) == 100

    def test_hs_code_without_commodity_scores_nothing(self):
        assert score_completeness(make_intake(commodity="")) == 75

    def test_cargo_needs_weight_on_every_line(self):
        lines = [make_line(), make_line(id="L2", weight=None)]

        assert score_completeness(make_intake(cargo_lines=lines)) == 75

    def test_air_cargo_needs_dimensions(self):
        lines = [make_line(), make_line(id="L2", height=0)]

        assert score_completeness(make_intake(cargo_lines=lines)) == 75

    def test_courier_cargo_needs_dimensions(self):
        intake = make_intake(modality=Modality.COURIER, cargo_lines=[make_line(length=None)])

        assert score_completeness(intake) == 75

    @pytest.mark.parametrize("load_type", [SeaLoadType.FCL, None])
    def test_sea_without_dimensions_outside_lcl(self, load_type):
        assert score_completeness(make_sea_intake(load_type=load_type)) == 100

    def test_sea_lcl_needs_dimensions(self):
        assert score_completeness(make_sea_intake(load_type=SeaLoadType.LCL)) == 75

    def test_road_ftl_without_dimensions(self):
        assert score_completeness(make_road_intake(truck_type=RoadTruckType.FTL)) == 100

    def test_road_ltl_needs_dimensions(self):
        assert score_completeness(make_road_intake(truck_type=RoadTruckType.LTL)) == 75

    def test_filling_fields_never_lowers_the_score(self):
        steps = [
            IntakeData(modality=Modality.AIR),
            IntakeData(modality=Modality.AIR, commodity="Textiles"),
            IntakeData(modality=Modality.AIR, commodity="Textiles", hs_code="6109"),
            IntakeData(modality=Modality.AIR, commodity="Textiles", hs_code="6109", origin="HKG",
                       destination="AMS", ready_date="2025-05-02"),
            IntakeData(modality=Modality.AIR, commodity="Textiles", hs_code="6109", origin="HKG",
                       destination="AMS", ready_date="2025-05-02",
                       cargo_lines=[CargoLine(qty=4, weight_kg=make_line().weight_kg)]),
        ]
        steps.append(replace(steps[-1], cargo_lines=[make_line(qty=4)]))
        steps.append(replace(steps[-1], shipper_id="S1", consignee_id="C1", incoterms="DAP", currency="USD"))

        scores = [score_completeness(s) for s in steps]

        assert scores == sorted(scores)
        assert scores[-1] == 100

    def test_score_is_clamped(self, monkeypatch):
        monkeypatch.setattr(completeness, "PARTIES_POINTS", 60)

        assert score_completeness(make_intake()) == 100


class TestLegacyPayloadFlags:
    def _payload(self, **overrides):
        payload = make_intake(hs_code="").to_dict()
        payload.pop("is_dg")
        payload.update(overrides)
        return payload

    @pytest.mark.parametrize("flag", ["false", "False", "0", "no", "", False, 0])
    def test_false_dangerous_goods_flag_does_not_earn_points(self, flag):
        intake = IntakeData.from_dict(self._payload(isDG=flag))

        assert intake.is_dg is False
        assert score_completeness(intake) == 90

    @pytest.mark.parametrize("flag", ["true", "TRUE", "1", "yes", True])
    def test_true_dangerous_goods_flag(self, flag):
        intake = IntakeData.from_dict(self._payload(isDG=flag))

        assert intake.is_dg is True
        assert score_completeness(intake) == 100

    def test_other_string_flags(self):
        intake = IntakeData.from_dict(self._payload(
            tempControl="false",
            insuranceRequested="true",
            cargo_lines=[{"qty": 1, "weight": 5, "isStackable": "false"}],
            courierDetails={"isDoorToDoor": "no"},
        ))

        assert intake.temp_control is False
        assert intake.insurance_requested is True
        assert intake.cargo_lines[0].is_stackable is False
        assert intake.courier_details.is_door_to_door is False
