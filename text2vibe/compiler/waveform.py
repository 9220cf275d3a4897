"""Waveform exporter producing HE 1.0 shaped documents."""

from __future__ import annotations

import datetime as _dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from text2vibe.model import Envelope, VibrationConfig, clamp_level, round_half_up

JsonDict = Dict[str, Any]

FORMAT_VERSION = 1
DESCRIPTION_PREFIX = "Text2Vibe"

_RATIO_QUANTUM = Decimal("0.01")


class MissingEnvelopeError(ValueError):
    """Raised when a continuous effect is exported without its envelope."""


def compile_waveform(config: VibrationConfig, *, created: Optional[_dt.date] = None) -> JsonDict:
    """Return the Waveform Document for *config*.

    Every repetition is placed at a cumulative cursor that advances by the
    logical duration plus the pause, for transient and continuous effects
    alike. ``Parameters.Intensity`` stays on the 0-100 scale while curve
    intensities are 0-1 ratios.
    """

    if not config.is_transient and config.envelope is None:
        raise MissingEnvelopeError(
            f"continuous effect '{config.effect}' has no envelope to sample"
        )

    duration_ms = round_half_up(config.duration_seconds * 1000)
    pause_ms = round_half_up(config.interval_seconds * 1000)

    pattern: List[JsonDict] = []
    cursor = 0
    for _ in range(config.count):
        if config.is_transient:
            event = _transient_event(config, cursor)
        else:
            event = _continuous_event(config, cursor, duration_ms)
        pattern.append({"Event": event})
        cursor += duration_ms + pause_ms

    created_on = created or _dt.date.today()
    return {
        "Metadata": {
            "Version": FORMAT_VERSION,
            "Created": created_on.isoformat(),
            "Description": f"{DESCRIPTION_PREFIX}: {config.effect}",
        },
        "Pattern": pattern,
    }


def sample_curve(envelope: Envelope, duration_ms: int) -> List[JsonDict]:
    """Sample *envelope* into four absolute curve points over *duration_ms*."""

    curve: List[JsonDict] = []
    points = list(envelope.control_points())
    for index, (time_ratio, intensity_ratio, frequency_offset) in enumerate(points):
        if index == len(points) - 1:
            time_ms = duration_ms
        else:
            time_ms = round_half_up(duration_ms * max(0.0, min(1.0, time_ratio)))
        curve.append(
            {
                "Time": time_ms,
                "Intensity": round_ratio(intensity_ratio),
                "Frequency": round_half_up(frequency_offset),
            }
        )
    return curve


def round_ratio(value: float) -> float:
    """Clamp *value* to [0, 1] and round its exact binary value half-up to two decimals."""
    bounded = max(0.0, min(1.0, float(value)))
    return float(Decimal(bounded).quantize(_RATIO_QUANTUM, rounding=ROUND_HALF_UP))


def _parameters(config: VibrationConfig) -> JsonDict:
    return {
        "Intensity": clamp_level(config.intensity),
        "Frequency": clamp_level(config.base_frequency),
    }


def _transient_event(config: VibrationConfig, relative_time: int) -> JsonDict:
    return {
        "Type": "transient",
        "RelativeTime": relative_time,
        "Parameters": _parameters(config),
    }


def _continuous_event(config: VibrationConfig, relative_time: int, duration_ms: int) -> JsonDict:
    parameters = _parameters(config)
    parameters["Curve"] = sample_curve(config.envelope, duration_ms)
    return {
        "Type": "continuous",
        "RelativeTime": relative_time,
        "Duration": duration_ms,
        "Parameters": parameters,
    }


__all__ = [
    "DESCRIPTION_PREFIX",
    "FORMAT_VERSION",
    "MissingEnvelopeError",
    "compile_waveform",
    "round_ratio",
    "sample_curve",
]
