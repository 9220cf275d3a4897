"""Compilers turning a :class:`~text2vibe.model.VibrationConfig` into artefacts."""

from __future__ import annotations

from .pulse import TRANSIENT_PULSE_MS, PulseTrain, compile_pulse_train
from .schema import validate_document
from .waveform import MissingEnvelopeError, compile_waveform

__all__ = [
    "MissingEnvelopeError",
    "PulseTrain",
    "TRANSIENT_PULSE_MS",
    "compile_pulse_train",
    "compile_waveform",
    "validate_document",
]
