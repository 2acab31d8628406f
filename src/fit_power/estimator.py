"""Power estimation over a recorded activity."""

import logging

from fit_power.constants import KPH_PER_MPS
from fit_power.models import EnvironmentSnapshot, EstimatorConfig, RiderParams, Sample
from fit_power.physics import power_from_speed

logger = logging.getLogger(__name__)


def estimate_power(
    samples: list[Sample], rider: RiderParams, config: EstimatorConfig | None = None
) -> list[float]:
    """Estimate pedaling power for every sample of an activity.

    Samples are processed in order:
    - Negative distance marks a placeholder record: power is 0 and the
      physics model is not evaluated.
    - Otherwise power is evaluated at the recorded speed using the sample's
      gradient, altitude and temperature.
    - An estimate above config.max_power_w (except on the first sample) is
      replaced by the previous sample's accepted estimate.

    Each value is also written to the sample's estimated_power_w field.

    Returns:
        Estimated power in watts, one value per sample.
    """
    if config is None:
        config = EstimatorConfig()

    estimates: list[float] = []
    invalid = 0
    held = 0

    for i, sample in enumerate(samples):
        if sample.distance_m < 0:
            power_w = 0.0
            invalid += 1
        else:
            env = EnvironmentSnapshot(
                gradient_percent=sample.gradient_percent,
                headwind_kph=config.headwind_kph,
                altitude_m=sample.altitude_m,
                humidity_percent=config.humidity_percent,
                temperature_c=sample.temperature_c,
            )
            power_w = power_from_speed(rider, env, sample.speed_mps * KPH_PER_MPS)

            if power_w > config.max_power_w and i > 0:
                power_w = estimates[i - 1]
                held += 1

        sample.estimated_power_w = power_w
        estimates.append(power_w)

    logger.debug(
        "Estimated power for %d samples (%d placeholders, %d spikes held)",
        len(samples), invalid, held,
    )
    return estimates


def recalc_gradient(samples: list[Sample], window: int = 5) -> list[float]:
    """Recompute gradients from altitude and distance over a trailing window.

    The gradient at index i is the rise over run between samples i - window
    and i, in percent. It is 0 for the first `window` samples, when either
    altitude is exactly 0 (missing) or when the distance did not change.

    Returns a new list; samples are not modified.
    """
    gradients = [0.0] * len(samples)
    for i in range(window, len(samples)):
        start, end = samples[i - window], samples[i]
        if start.altitude_m == 0 or end.altitude_m == 0:
            continue
        run = end.distance_m - start.distance_m
        if run == 0:
            continue
        gradients[i] = (end.altitude_m - start.altitude_m) / run * 100
    return gradients
