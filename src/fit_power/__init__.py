"""fit-power - Physics-based cycling power estimation from recorded activities."""

import subprocess

from fit_power.atmosphere import air_density, get_air_density
from fit_power.cubic import (
    AmbiguousRootError,
    NoPositiveRootError,
    RootError,
    get_unique_positive_root,
    solve_cubic,
)
from fit_power.estimator import estimate_power, recalc_gradient
from fit_power.models import EnvironmentSnapshot, EstimatorConfig, RiderParams, Sample
from fit_power.physics import power_from_speed, power_from_speed_by_dynamics, speed_from_power

__version_date__ = "2026-10-19"


def get_git_hash() -> str:
    """Get the short git commit hash, or 'unknown' if not in a git repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass
    return "unknown"
