import pytest

from fit_power.models import EnvironmentSnapshot, RiderParams, Sample


@pytest.fixture
def rider():
    return RiderParams(total_mass=80.0, cda=0.32, crr=0.005)


@pytest.fixture
def flat_env():
    return EnvironmentSnapshot(gradient_percent=0.0, altitude_m=0.0, temperature_c=25.0)


def _make_sample(i: int, speed_mps: float = 8.0, gradient: float = 0.0, **kwargs) -> Sample:
    fields = dict(
        timestamp=1000 + i,
        distance_m=i * speed_mps,
        altitude_m=100.0,
        gradient_percent=gradient,
        temperature_c=20.0,
        speed_mps=speed_mps,
    )
    fields.update(kwargs)
    return Sample(**fields)


@pytest.fixture
def make_sample():
    """Factory for samples riding at a steady speed, 1 s apart."""
    return _make_sample


@pytest.fixture
def flat_samples():
    """Ten samples riding steadily at 8 m/s on the flat."""
    return [_make_sample(i) for i in range(10)]
