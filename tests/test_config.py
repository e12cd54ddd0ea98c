from __future__ import annotations

import pytest

from cabin import CabinSettings, CabinTiming


class TestCabinSettings:
    def test_defaults(self):
        settings = CabinSettings.from_env({})
        assert settings.top_floor == 10
        assert settings.timing == CabinTiming()
        assert settings.log_level == "INFO"

    def test_reads_environment(self):
        settings = CabinSettings.from_env(
            {"CABIN_TOP_FLOOR": "25", "CABIN_TIME_UNIT": "0.5", "CABIN_LOG_LEVEL": "debug"}
        )
        assert settings.top_floor == 25
        assert settings.timing.time_unit == 0.5
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("environ", [{"CABIN_TOP_FLOOR": "0"}, {"CABIN_TOP_FLOOR": "ten"}, {"CABIN_TIME_UNIT": "-1"}])
    def test_rejects_bad_values(self, environ):
        with pytest.raises(ValueError):
            CabinSettings.from_env(environ)
