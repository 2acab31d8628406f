import numpy as np

from fit_power.constants import (
    GRAVITY,
    MAGNUS_BASE_PRESSURE,
    MAGNUS_COEFFICIENT,
    MOLAR_MASS_DRY_AIR,
    SEA_LEVEL_PRESSURE,
    SPECIFIC_GAS_CONSTANT_DRY_AIR,
    UNIVERSAL_GAS_CONSTANT,
    ZERO_CELSIUS_K,
)
from fit_power.models import EnvironmentSnapshot


def air_density(altitude_m: float, temperature_c: float, humidity_percent: float) -> float:
    """Compute air density in kg/m³.

    Pressure comes from the isothermal barometric formula at the given
    altitude. The water vapor share (Magnus approximation of saturation
    pressure scaled by relative humidity) is subtracted, and the remaining
    dry-air pressure is converted with the ideal gas law.

    Inputs are not range-checked: at or near absolute zero the result is
    inf or NaN rather than an exception.
    """
    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        temperature_k = np.float64(temperature_c) + ZERO_CELSIUS_K
        pressure = SEA_LEVEL_PRESSURE * np.exp(
            -GRAVITY * MOLAR_MASS_DRY_AIR * altitude_m / (UNIVERSAL_GAS_CONSTANT * temperature_k)
        )
        p_sat = MAGNUS_BASE_PRESSURE * np.exp(MAGNUS_COEFFICIENT * temperature_c / temperature_k)
        p_water = humidity_percent / 100.0 * p_sat
        p_dry = pressure - p_water
        return float(p_dry / (SPECIFIC_GAS_CONSTANT_DRY_AIR * temperature_k))


def get_air_density(env: EnvironmentSnapshot) -> float:
    """Air density for the conditions described by an environment snapshot."""
    return air_density(env.altitude_m, env.temperature_c, env.humidity_percent)
