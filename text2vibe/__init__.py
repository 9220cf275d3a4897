"""text2vibe: compile parametric haptic effects into pulse trains and HE 1.0 documents."""

from .compiler import MissingEnvelopeError, compile_pulse_train, compile_waveform
from .model import Envelope, VibrationConfig, VibrationType
from .studio import AnalysisState, HapticStudio

__all__ = [
    "AnalysisState",
    "Envelope",
    "HapticStudio",
    "MissingEnvelopeError",
    "VibrationConfig",
    "VibrationType",
    "compile_pulse_train",
    "compile_waveform",
]
