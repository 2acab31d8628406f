import dataclasses

import pytest

from fit_power.models import EnvironmentSnapshot, EstimatorConfig, RiderParams, Sample


class TestRiderParams:
    def test_defaults(self):
        params = RiderParams(total_mass=80.0, cda=0.32, crr=0.005)
        assert params.drivetrain_penalty == 0.02

    def test_value_equality(self):
        assert RiderParams(80.0, 0.32, 0.005) == RiderParams(80.0, 0.32, 0.005)
        assert RiderParams(80.0, 0.32, 0.005) != RiderParams(80.0, 0.32, 0.005, 0.0)

    def test_immutable(self):
        params = RiderParams(80.0, 0.32, 0.005)
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.total_mass = 70.0


class TestEnvironmentSnapshot:
    def test_defaults(self):
        env = EnvironmentSnapshot(gradient_percent=2.0)
        assert env.headwind_kph == 0.0
        assert env.altitude_m == 0.0
        assert env.humidity_percent == 50.0
        assert env.temperature_c == 25.0

    def test_immutable(self):
        env = EnvironmentSnapshot(gradient_percent=2.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            env.gradient_percent = 3.0


class TestSample:
    def test_construction(self):
        s = Sample(
            timestamp=100,
            distance_m=12.5,
            altitude_m=50.0,
            gradient_percent=1.5,
            temperature_c=18.0,
            speed_mps=6.2,
        )
        assert s.power_w is None
        assert s.cadence is None
        assert s.heartrate is None
        assert s.estimated_power_w == 0.0


class TestEstimatorConfig:
    def test_defaults(self):
        config = EstimatorConfig()
        assert config.max_power_w == 2000.0
        assert config.headwind_kph == 0.0
        assert config.humidity_percent == 50.0
