"""Activity file support: decoded FIT JSON in, CSV out."""

import csv
import json
import logging
from pathlib import Path

import requests

from fit_power.config import get_decode_url
from fit_power.constants import KPH_PER_MPS
from fit_power.models import Sample

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "timestamp",
    "distance_m",
    "altitude_m",
    "gradient_percent",
    "speed_kph",
    "power_w",
    "estimated_power_w",
]


def _field(record: dict, index: int, key: str, convert, default=None):
    """Convert one record field; a missing or null value gives the default."""
    value = record.get(key)
    if value is None:
        return default
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Record {index}: invalid {key} value {value!r}") from e


def parse_activity_json(data: dict) -> list[Sample]:
    """Parse decoded FIT JSON into Samples.

    Records are read from data["result"]["records"]. Each record may carry
    timestamp, altitude, distance, grade, temperature, speed (m/s), power,
    cad and heartrate. Missing or null kinematic fields default to 0;
    missing or null power, cadence and heart rate are None.

    Raises:
        ValueError: If records is present but not a list, a record is not an
            object, or a field is not numeric.
    """
    records = (data.get("result") or {}).get("records")
    if records is None:
        return []
    if not isinstance(records, list):
        raise ValueError(f"Expected a list of records, got {type(records).__name__}")

    samples: list[Sample] = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Record {i}: expected an object, got {type(record).__name__}")
        samples.append(
            Sample(
                timestamp=_field(record, i, "timestamp", int, 0),
                distance_m=_field(record, i, "distance", float, 0.0),
                altitude_m=_field(record, i, "altitude", float, 0.0),
                gradient_percent=_field(record, i, "grade", float, 0.0),
                temperature_c=_field(record, i, "temperature", float, 0.0),
                speed_mps=_field(record, i, "speed", float, 0.0),
                power_w=_field(record, i, "power", float),
                cadence=_field(record, i, "cad", int),
                heartrate=_field(record, i, "heartrate", int),
            )
        )
    return samples


def load_activity(path: str | Path) -> list[Sample]:
    """Load a decoded FIT JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid activity JSON.
    """
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Activity JSON must be an object")
    return parse_activity_json(data)


def decode_fit(
    fit_path: str | Path,
    json_path: str | Path | None = None,
    url: str | None = None,
    timeout: float = 60,
) -> Path:
    """Convert a FIT file to JSON using the remote decoding service.

    The FIT bytes are posted as application/octet-stream and the response
    body is written to json_path (default: the FIT path with a .json suffix).

    Raises:
        FileNotFoundError: If the FIT file does not exist.
        requests.RequestException: If the request fails.
    """
    fit_path = Path(fit_path)
    json_path = Path(json_path) if json_path is not None else fit_path.with_suffix(".json")
    if url is None:
        url = get_decode_url()

    response = requests.post(
        url,
        data=fit_path.read_bytes(),
        headers={"Content-Type": "application/octet-stream"},
        timeout=timeout,
    )
    response.raise_for_status()

    json_path.write_bytes(response.content)
    logger.info("Converted %s to %s", fit_path, json_path)
    return json_path


def write_csv(samples: list[Sample], path: str | Path) -> None:
    """Write samples with their estimated power as CSV."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for s in samples:
            writer.writerow([
                s.timestamp,
                s.distance_m,
                s.altitude_m,
                s.gradient_percent,
                round(s.speed_mps * KPH_PER_MPS, 3),
                "" if s.power_w is None else s.power_w,
                round(s.estimated_power_w, 1),
            ])
