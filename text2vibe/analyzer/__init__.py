"""Text analyzer client producing vibration configs."""

from __future__ import annotations

from .external import (
    AnalyzerFailure,
    AnalyzerRequestError,
    GeminiAnalyzer,
    USER_FAILURE_MESSAGE,
)
from .presets import PRESETS, match_preset

__all__ = [
    "AnalyzerFailure",
    "AnalyzerRequestError",
    "GeminiAnalyzer",
    "PRESETS",
    "USER_FAILURE_MESSAGE",
    "match_preset",
]
