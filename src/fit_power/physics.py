import logging

from fit_power.atmosphere import get_air_density
from fit_power.constants import GRAVITY, KPH_PER_MPS, ROOT_TOLERANCE
from fit_power.cubic import get_unique_positive_root, solve_cubic
from fit_power.models import EnvironmentSnapshot, RiderParams

logger = logging.getLogger(__name__)


def _resistive_force(rider: RiderParams, env: EnvironmentSnapshot) -> float:
    """Rolling plus gradient force in newtons, independent of speed."""
    rolling_drag = rider.crr * rider.total_mass * GRAVITY
    gradient_drag = env.gradient_percent / 100.0 * rider.total_mass * GRAVITY
    return rolling_drag + gradient_drag


def _power_at(rider: RiderParams, env: EnvironmentSnapshot, speed_mps: float) -> float:
    airspeed_mps = speed_mps + env.headwind_kph / KPH_PER_MPS
    aero_drag = 0.5 * get_air_density(env) * rider.cda * airspeed_mps**2

    power_w = (_resistive_force(rider, env) + aero_drag) * speed_mps * (1 + rider.drivetrain_penalty)
    # Pedaling power only: braking on descents is not negative output
    return 0.0 if power_w < 0 else power_w


def power_from_speed(rider: RiderParams, env: EnvironmentSnapshot, speed_kph: float) -> float:
    """Power in watts a rider must produce to hold a steady ground speed.

    Sums rolling, gradient and aerodynamic drag (the latter on airspeed,
    i.e. ground speed plus headwind), multiplies by ground speed and adds
    the drivetrain penalty. Negative results are reported as 0.
    """
    return _power_at(rider, env, speed_kph / KPH_PER_MPS)


def power_from_speed_by_dynamics(
    rider: RiderParams,
    env: EnvironmentSnapshot,
    env_before: EnvironmentSnapshot,
    speed_kph: float,
    speed_before_kph: float,
    dt: float,
) -> float:
    """Power in watts between two consecutive samples.

    Uses the mean of the two speeds and the conditions of the current
    sample. The acceleration between the samples is computed but no
    inertial term (mass * acceleration * speed) is added to the result, so
    this equals power_from_speed at the mean speed.

    Args:
        rider: Rider parameters
        env: Conditions at the current sample
        env_before: Conditions at the previous sample (not used by the model)
        speed_kph: Current speed in km/h
        speed_before_kph: Previous speed in km/h
        dt: Seconds between the samples
    """
    acceleration_mps2 = (speed_kph - speed_before_kph) / KPH_PER_MPS / dt if dt > 0 else 0.0
    logger.debug("Acceleration %.3f m/s² over %.1f s (not applied)", acceleration_mps2, dt)

    speed_mps = (speed_kph + speed_before_kph) / (2 * KPH_PER_MPS)
    return _power_at(rider, env, speed_mps)


def speed_from_power(
    rider: RiderParams, env: EnvironmentSnapshot, power_w: float, tolerance: float = ROOT_TOLERANCE
) -> float:
    """Steady ground speed in km/h produced by a given pedaling power.

    Inverts power_from_speed. With k = 0.5 * rho * CdA, h the headwind in
    m/s and m the rolling plus gradient force, the power balance

        k * (x + h)^2 * x + m * x = P / (1 + penalty)

    expands to the cubic

        k*x^3 + 2*k*h*x^2 + (k*h^2 + m)*x - P / (1 + penalty) = 0

    whose single positive root is the speed in m/s.

    Raises:
        NoPositiveRootError: no positive speed delivers this power
        AmbiguousRootError: several distinct speeds deliver this power
    """
    k = 0.5 * get_air_density(env) * rider.cda
    h = env.headwind_kph / KPH_PER_MPS
    m = _resistive_force(rider, env)

    roots = solve_cubic(k, 2 * k * h, k * h * h + m, -power_w / (1 + rider.drivetrain_penalty))
    speed_mps = get_unique_positive_root(roots, tolerance)
    return speed_mps * KPH_PER_MPS
