"""Compare estimated power with power meter data."""

from dataclasses import dataclass
import logging

import numpy as np

from fit_power.constants import KPH_PER_MPS
from fit_power.cubic import RootError
from fit_power.models import EnvironmentSnapshot, RiderParams, Sample
from fit_power.physics import speed_from_power

logger = logging.getLogger(__name__)

MIN_MOVING_SPEED_MPS = 0.5
MIN_BUCKET_SAMPLES = 10


@dataclass
class GradeBucket:
    """Statistics for a gradient bucket."""

    grade_pct: int  # Bucket center (e.g., -4 means -5% to -3%)
    measured_powers: list[float]  # watts
    estimated_powers: list[float]  # watts
    actual_speeds: list[float]  # m/s
    implied_speeds: list[float]  # m/s, speed the measured power would sustain

    @property
    def sample_count(self) -> int:
        return len(self.measured_powers)

    @property
    def avg_measured_power(self) -> float:
        return float(np.mean(self.measured_powers)) if self.measured_powers else 0.0

    @property
    def avg_estimated_power(self) -> float:
        return float(np.mean(self.estimated_powers)) if self.estimated_powers else 0.0

    @property
    def avg_actual_speed(self) -> float:
        return float(np.mean(self.actual_speeds)) if self.actual_speeds else 0.0

    @property
    def avg_implied_speed(self) -> float:
        return float(np.mean(self.implied_speeds)) if self.implied_speeds else 0.0

    @property
    def power_error_pct(self) -> float:
        """Percentage error: positive means estimate too high."""
        if self.avg_measured_power == 0:
            return 0.0
        return (self.avg_estimated_power - self.avg_measured_power) / self.avg_measured_power * 100


@dataclass
class PowerComparison:
    """Result of comparing estimated and measured power over an activity."""

    sample_count: int
    has_power_data: bool
    avg_measured_power: float | None  # watts
    avg_estimated_power: float | None  # watts
    mean_abs_error: float | None  # watts
    bias: float | None  # watts, estimated - measured
    correlation: float | None
    grade_buckets: list[GradeBucket]


def compare_power(samples: list[Sample], rider: RiderParams | None = None) -> PowerComparison:
    """Compare estimated_power_w against measured power_w.

    Only samples with measured power and a non-negative distance are used,
    so estimate_power must have been run first. When rider is given, each
    bucket also records the speed the measured power would sustain on that
    sample's terrain; samples where no unique speed exists are skipped for
    that statistic.
    """
    paired = [s for s in samples if s.power_w is not None and s.distance_m >= 0]
    if not paired:
        return PowerComparison(
            sample_count=0,
            has_power_data=False,
            avg_measured_power=None,
            avg_estimated_power=None,
            mean_abs_error=None,
            bias=None,
            correlation=None,
            grade_buckets=[],
        )

    measured = np.array([s.power_w for s in paired], dtype=float)
    estimated = np.array([s.estimated_power_w for s in paired], dtype=float)
    diff = estimated - measured

    return PowerComparison(
        sample_count=len(paired),
        has_power_data=True,
        avg_measured_power=float(measured.mean()),
        avg_estimated_power=float(estimated.mean()),
        mean_abs_error=float(np.abs(diff).mean()),
        bias=float(diff.mean()),
        correlation=_correlation(measured, estimated),
        grade_buckets=_build_grade_buckets(paired, rider),
    )


def _correlation(measured: np.ndarray, estimated: np.ndarray) -> float | None:
    """Pearson correlation, or None when it is undefined."""
    if len(measured) < 2 or measured.std() == 0 or estimated.std() == 0:
        return None
    return float(np.corrcoef(measured, estimated)[0, 1])


def _build_grade_buckets(samples: list[Sample], rider: RiderParams | None) -> list[GradeBucket]:
    buckets: dict[int, GradeBucket] = {}

    for s in samples:
        # Only include moving samples
        if s.speed_mps < MIN_MOVING_SPEED_MPS:
            continue

        # Bucket by 2% increments, clamped to reasonable range
        bucket_key = round(s.gradient_percent / 2) * 2
        bucket_key = max(-12, min(12, bucket_key))

        if bucket_key not in buckets:
            buckets[bucket_key] = GradeBucket(
                grade_pct=bucket_key,
                measured_powers=[],
                estimated_powers=[],
                actual_speeds=[],
                implied_speeds=[],
            )
        bucket = buckets[bucket_key]
        bucket.measured_powers.append(s.power_w)
        bucket.estimated_powers.append(s.estimated_power_w)
        bucket.actual_speeds.append(s.speed_mps)

        if rider is not None and s.power_w > 0:
            env = EnvironmentSnapshot(
                gradient_percent=s.gradient_percent,
                altitude_m=s.altitude_m,
                temperature_c=s.temperature_c,
            )
            try:
                bucket.implied_speeds.append(speed_from_power(rider, env, s.power_w) / KPH_PER_MPS)
            except RootError as e:
                logger.debug("No implied speed at t=%s: %s", s.timestamp, e)

    return [buckets[k] for k in sorted(buckets.keys())]


def format_comparison_report(result: PowerComparison) -> str:
    """Format a comparison result as a human-readable report."""
    lines = []

    lines.append("=== Estimated vs Measured Power ===")
    if not result.has_power_data:
        lines.append("No power meter data in this activity.")
        return "\n".join(lines)

    lines.append(f"Samples:        {result.sample_count}")
    lines.append(f"Measured avg:   {result.avg_measured_power:.0f} W")
    lines.append(f"Estimated avg:  {result.avg_estimated_power:.0f} W")
    lines.append(f"Mean abs error: {result.mean_abs_error:.0f} W")
    lines.append(f"Bias:           {result.bias:+.0f} W")
    corr_str = f"{result.correlation:.2f}" if result.correlation is not None else "n/a"
    lines.append(f"Correlation:    {corr_str}")
    lines.append("")

    lines.append("Power by gradient (measured vs estimated):")
    lines.append(f"{'Grade':>6} | {'Meas':>6} | {'Est':>6} | {'Error':>7} | {'Speed':>6} | {'Implied':>7}")
    lines.append("-" * 55)

    for bucket in result.grade_buckets:
        if bucket.sample_count < MIN_BUCKET_SAMPLES:  # Skip sparse buckets
            continue

        implied_str = f"{bucket.avg_implied_speed * KPH_PER_MPS:.1f}" if bucket.implied_speeds else "n/a"
        lines.append(
            f"{bucket.grade_pct:>+5}% | {bucket.avg_measured_power:>5.0f}W | "
            f"{bucket.avg_estimated_power:>5.0f}W | {bucket.power_error_pct:>+6.0f}% | "
            f"{bucket.avg_actual_speed * KPH_PER_MPS:>6.1f} | {implied_str:>7}"
        )

    return "\n".join(lines)
