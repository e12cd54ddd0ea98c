from __future__ import annotations

import pytest

from cabin.scenario import ScheduledCall, build_timing, run_scenario
from scheduler import Direction


class TestScheduledCall:
    def test_from_config(self):
        call = ScheduledCall.from_config({"at": 2, "type": "outside", "floor": 4, "direction": "Down"})
        assert call == ScheduledCall(at=2.0, kind="outside", floor=4, direction=Direction.DOWN)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            ScheduledCall.from_config({"type": "sideways", "floor": 4})


class TestRunScenario:
    def test_single_down_call_round_trip(self):
        result = run_scenario(
            {
                "name": "single_call",
                "top_floor": 5,
                "time_unit": 0.01,
                "duration": 120,
                "requests": [{"at": 0, "type": "outside", "floor": 4, "direction": "down"}],
            }
        )
        assert result.floors_visited == [1, 2, 3, 4, 3, 2, 1]
        assert result.final.current_floor == 1
        assert "Arrived at floor 4" in result.log
        assert result.rejected == []
        assert result.as_dict()["scenario"] == "single_call"

    def test_rejected_calls_are_reported(self):
        result = run_scenario(
            {
                "top_floor": 5,
                "time_unit": 0.001,
                "duration": 5,
                "requests": [
                    {"at": 0, "type": "outside", "floor": 0, "direction": "up"},
                    {"at": 1, "type": "outside", "floor": 1, "direction": "down"},
                    {"at": 2, "type": "inside", "floor": 1},
                    {"at": 3, "type": "outside", "floor": 3},
                ],
            }
        )
        reasons = [rejection["reason"] for rejection in result.rejected]
        assert reasons == [
            "Invalid floor. Please select a floor between 1 and 5.",
            "Invalid request. Floor 1 can only go up, and the top floor can only go down.",
            "You are already on floor 1.",
            "Invalid direction. Please enter 'up' or 'down'.",
        ]

    def test_timing_overrides(self):
        timing = build_timing({"time_unit": 0.5, "timing": {"door_dwell_units": 4}})
        assert timing.time_unit == 0.5
        assert timing.door_dwell_units == 4
        assert timing.floor_travel_units == 3
