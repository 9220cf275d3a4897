"""Parametric vibration model shared by the preview and export compilers."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

JsonDict = Dict[str, Any]

DEFAULT_DURATION_SECONDS = 0.05
DEFAULT_INTERVAL_SECONDS = 0.1
DEFAULT_COUNT = 1
DEFAULT_EFFECT = "Unknown"
DEFAULT_FILENAME = "vibration_effect"
DEFAULT_REASONING = "No design notes"

LEVEL_MIN = 0
LEVEL_MAX = 100


class ConfigError(ValueError):
    """Raised when a payload cannot be turned into a :class:`VibrationConfig`."""


class VibrationType(str, enum.Enum):
    """Effect families understood by the compilers."""

    CONTINUOUS = "continuous"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class EnvelopeEndpoint:
    """Start or end of an envelope; intensity is pinned to zero."""

    frequency_offset: float


@dataclass(frozen=True)
class EnvelopePoint:
    """Interior envelope control point."""

    time_ratio: float
    intensity_ratio: float
    frequency_offset: float


@dataclass(frozen=True)
class Envelope:
    """Four-point intensity/frequency curve over one continuous effect cycle.

    The curve is sampled at relative positions ``0``, ``p2.time_ratio``,
    ``p3.time_ratio`` and ``1``. Ordering of the interior points is not
    enforced, so a curve may come back non-monotonic in time.
    """

    p1: EnvelopeEndpoint
    p2: EnvelopePoint
    p3: EnvelopePoint
    p4: EnvelopeEndpoint

    def control_points(self) -> Iterator[Tuple[float, float, float]]:
        """Yield ``(time_ratio, intensity_ratio, frequency_offset)`` for each point."""
        yield 0.0, 0.0, self.p1.frequency_offset
        yield self.p2.time_ratio, self.p2.intensity_ratio, self.p2.frequency_offset
        yield self.p3.time_ratio, self.p3.intensity_ratio, self.p3.frequency_offset
        yield 1.0, 0.0, self.p4.frequency_offset

    @classmethod
    def from_payload(cls, payload: Any) -> "Envelope":
        if not isinstance(payload, Mapping):
            raise ConfigError("envelope must be an object")
        return cls(
            p1=EnvelopeEndpoint(_required_number(payload, "p1", "frequencyOffset")),
            p2=_interior_point(payload, "p2"),
            p3=_interior_point(payload, "p3"),
            p4=EnvelopeEndpoint(_required_number(payload, "p4", "frequencyOffset")),
        )

    def to_payload(self) -> JsonDict:
        return {
            "p1": {"frequencyOffset": self.p1.frequency_offset},
            "p2": _interior_payload(self.p2),
            "p3": _interior_payload(self.p3),
            "p4": {"frequencyOffset": self.p4.frequency_offset},
        }


@dataclass(frozen=True)
class VibrationConfig:
    """Immutable description of one haptic effect.

    ``duration_seconds`` is the rendered width of a continuous effect but only
    a logical spacing width for transient effects. ``intensity`` and
    ``base_frequency`` live on a 0-100 scale where a base frequency of 50 is
    the actuator's resonant centre.
    """

    vibration_type: VibrationType
    duration_seconds: float
    interval_seconds: float
    count: int
    intensity: int
    base_frequency: int
    effect: str = DEFAULT_EFFECT
    filename: str = DEFAULT_FILENAME
    reasoning: str = DEFAULT_REASONING
    envelope: Optional[Envelope] = None

    @property
    def is_transient(self) -> bool:
        return self.vibration_type is VibrationType.TRANSIENT

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "VibrationConfig":
        """Build a config from the analyzer's camelCase wire payload.

        Missing timing fields fall back to the analyzer defaults, the 0-100
        levels are clamped, and an absent envelope is kept as ``None`` so the
        exporter can reject it for continuous effects.
        """

        if not isinstance(payload, Mapping):
            raise ConfigError("config payload must be an object")

        vibration_type = (
            VibrationType.TRANSIENT
            if payload.get("vibrationType") == VibrationType.TRANSIENT.value
            else VibrationType.CONTINUOUS
        )

        duration = _number_or_default(payload.get("durationSeconds"), DEFAULT_DURATION_SECONDS)
        interval = _number_or_default(payload.get("intervalSeconds"), DEFAULT_INTERVAL_SECONDS)
        count = _number_or_default(payload.get("count"), DEFAULT_COUNT)
        if duration <= 0:
            raise ConfigError(f"durationSeconds must be positive, got {duration}")
        if interval < 0:
            raise ConfigError(f"intervalSeconds must be non-negative, got {interval}")
        if count < 1 or not float(count).is_integer():
            raise ConfigError(f"count must be a positive integer, got {count}")

        envelope_payload = payload.get("envelope")
        envelope = None if envelope_payload is None else Envelope.from_payload(envelope_payload)

        return cls(
            vibration_type=vibration_type,
            duration_seconds=float(duration),
            interval_seconds=float(interval),
            count=int(count),
            intensity=clamp_level(_required_level(payload, "intensity")),
            base_frequency=clamp_level(_required_level(payload, "baseFrequency")),
            effect=str(payload.get("effect") or DEFAULT_EFFECT),
            filename=str(payload.get("filename") or DEFAULT_FILENAME),
            reasoning=str(payload.get("reasoning") or DEFAULT_REASONING),
            envelope=envelope,
        )

    def to_payload(self) -> JsonDict:
        payload: JsonDict = {
            "vibrationType": self.vibration_type.value,
            "durationSeconds": self.duration_seconds,
            "intervalSeconds": self.interval_seconds,
            "count": self.count,
            "effect": self.effect,
            "filename": self.filename,
            "intensity": self.intensity,
            "baseFrequency": self.base_frequency,
            "reasoning": self.reasoning,
        }
        if self.envelope is not None:
            payload["envelope"] = self.envelope.to_payload()
        return payload


def clamp_level(value: float) -> int:
    """Round *value* half-up and clamp it to the 0-100 level scale."""
    return max(LEVEL_MIN, min(LEVEL_MAX, round_half_up(value)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up."""
    return int(math.floor(value + 0.5))


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _number_or_default(value: Any, default: float) -> float:
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return default
    return value if _is_number(value) else default


def _required_level(payload: Mapping[str, Any], key: str) -> float:
    value = payload.get(key)
    if not _is_number(value):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    return value


def _required_number(payload: Mapping[str, Any], point: str, key: str) -> float:
    section = payload.get(point)
    if not isinstance(section, Mapping):
        raise ConfigError(f"envelope.{point} must be an object")
    value = section.get(key)
    if not _is_number(value):
        raise ConfigError(f"envelope.{point}.{key} must be a number, got {value!r}")
    return float(value)


def _interior_point(payload: Mapping[str, Any], point: str) -> EnvelopePoint:
    time_ratio = _required_number(payload, point, "timeRatio")
    if not 0.0 <= time_ratio <= 1.0:
        raise ConfigError(f"envelope.{point}.timeRatio must be within [0, 1], got {time_ratio}")
    return EnvelopePoint(
        time_ratio=time_ratio,
        intensity_ratio=_required_number(payload, point, "intensityRatio"),
        frequency_offset=_required_number(payload, point, "frequencyOffset"),
    )


def _interior_payload(point: EnvelopePoint) -> JsonDict:
    return {
        "timeRatio": point.time_ratio,
        "intensityRatio": point.intensity_ratio,
        "frequencyOffset": point.frequency_offset,
    }


__all__ = [
    "ConfigError",
    "Envelope",
    "EnvelopeEndpoint",
    "EnvelopePoint",
    "VibrationConfig",
    "VibrationType",
    "clamp_level",
    "round_half_up",
]
