"""Pulse train compiler for real-time actuator preview."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from text2vibe.model import VibrationConfig, round_half_up

TRANSIENT_PULSE_MS = 20


@dataclass(frozen=True)
class PulseTrain:
    """Alternating on/off millisecond durations, starting and ending with *on*."""

    pattern: Tuple[int, ...]
    total_ms: int


def compile_pulse_train(config: VibrationConfig) -> PulseTrain:
    """Return the coarse on/off pattern used to preview *config*.

    Transient effects render as a fixed short click whatever their logical
    width; continuous effects render for their full duration. The envelope is
    not consulted, so the result only approximates the exported waveform.
    """

    if config.is_transient:
        on_ms = TRANSIENT_PULSE_MS
    else:
        on_ms = round_half_up(config.duration_seconds * 1000)
    pause_ms = round_half_up(config.interval_seconds * 1000)

    pattern = []
    for index in range(config.count):
        pattern.append(on_ms)
        if index < config.count - 1:
            pattern.append(pause_ms)

    return PulseTrain(pattern=tuple(pattern), total_ms=sum(pattern))


__all__ = ["PulseTrain", "TRANSIENT_PULSE_MS", "compile_pulse_train"]
