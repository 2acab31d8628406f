"""Power chart generation."""

import io

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

from fit_power.models import Sample

ESTIMATED_COLOR = '#ff6600'
MEASURED_COLOR = '#4a90d9'


def rolling_mean(values: list[float], window: int) -> list[float]:
    """Centered moving average; the ends are averaged over the samples available.

    NaN entries (gaps) are left out of each window. A window holding only
    gaps stays NaN.
    """
    if window <= 1 or not values:
        return list(values)

    arr = np.asarray(values, dtype=float)
    valid = ~np.isnan(arr)
    kernel = np.ones(window)
    sums = np.convolve(np.where(valid, arr, 0.0), kernel, mode='same')
    counts = np.convolve(valid.astype(float), kernel, mode='same')
    with np.errstate(invalid='ignore', divide='ignore'):
        return np.where(counts > 0, sums / counts, np.nan).tolist()


def generate_power_chart(samples: list[Sample], smoothing: int = 0) -> bytes:
    """Plot estimated power, and measured power where present, over time.

    Args:
        samples: Samples after estimate_power has been run
        smoothing: Moving average window in samples (0 or 1 disables)

    Returns:
        PNG image bytes.
    """
    start = samples[0].timestamp if samples else 0
    times_min = [(s.timestamp - start) / 60 for s in samples]

    fig, ax = plt.subplots(figsize=(12, 4), facecolor='white')

    if any(s.power_w is not None for s in samples):
        measured = [s.power_w if s.power_w is not None else np.nan for s in samples]
        ax.plot(times_min, rolling_mean(measured, smoothing), color=MEASURED_COLOR,
                linewidth=0.8, alpha=0.7, label='Measured')

    estimated = [s.estimated_power_w for s in samples]
    ax.plot(times_min, rolling_mean(estimated, smoothing), color=ESTIMATED_COLOR,
            linewidth=0.8, label='Estimated')

    ax.set_xlabel('Time (min)', fontsize=10)
    ax.set_ylabel('Power (W)', fontsize=10)
    ax.set_ylim(bottom=0)
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.grid(axis='y', alpha=0.3, linestyle='-', linewidth=0.5)
    ax.legend(loc='upper right', fontsize=9, frameon=False)

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=100, facecolor='white', edgecolor='none')
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()
