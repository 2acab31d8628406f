from dataclasses import dataclass

from fit_power.constants import (
    DEFAULT_DRIVETRAIN_PENALTY,
    DEFAULT_HUMIDITY_PERCENT,
    DEFAULT_TEMPERATURE_C,
    MAX_PLAUSIBLE_POWER_W,
)


@dataclass(frozen=True)
class RiderParams:
    total_mass: float  # kg (rider + bike)
    cda: float  # m² (drag coefficient * frontal area)
    crr: float  # rolling resistance coefficient
    drivetrain_penalty: float = DEFAULT_DRIVETRAIN_PENALTY  # fraction of power lost in the drivetrain


@dataclass(frozen=True)
class EnvironmentSnapshot:
    gradient_percent: float
    headwind_kph: float = 0.0  # positive = into the wind, negative = tailwind
    altitude_m: float = 0.0
    humidity_percent: float = DEFAULT_HUMIDITY_PERCENT
    temperature_c: float = DEFAULT_TEMPERATURE_C


@dataclass
class Sample:
    """One record of a recorded activity."""
    timestamp: int  # seconds
    distance_m: float  # cumulative; negative marks a placeholder record
    altitude_m: float
    gradient_percent: float
    temperature_c: float
    speed_mps: float
    power_w: float | None = None  # measured
    cadence: int | None = None
    heartrate: int | None = None
    estimated_power_w: float = 0.0


@dataclass(frozen=True)
class EstimatorConfig:
    max_power_w: float = MAX_PLAUSIBLE_POWER_W  # estimates above this are held at the previous value
    headwind_kph: float = 0.0
    humidity_percent: float = DEFAULT_HUMIDITY_PERCENT
