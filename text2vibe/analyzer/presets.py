"""Keyword presets backing the offline (mock) analyzer."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

JsonDict = Dict[str, Any]

_SWELL_ENVELOPE: JsonDict = {
    "p1": {"frequencyOffset": 0},
    "p2": {"timeRatio": 0.2, "intensityRatio": 0.8, "frequencyOffset": 10},
    "p3": {"timeRatio": 0.8, "intensityRatio": 0.6, "frequencyOffset": -10},
    "p4": {"frequencyOffset": 0},
}

_PUNCH_ENVELOPE: JsonDict = {
    "p1": {"frequencyOffset": 10},
    "p2": {"timeRatio": 0.05, "intensityRatio": 1.0, "frequencyOffset": 5},
    "p3": {"timeRatio": 0.3, "intensityRatio": 0.4, "frequencyOffset": -5},
    "p4": {"frequencyOffset": -10},
}

_RUMBLE_ENVELOPE: JsonDict = {
    "p1": {"frequencyOffset": -20},
    "p2": {"timeRatio": 0.3, "intensityRatio": 0.9, "frequencyOffset": -10},
    "p3": {"timeRatio": 0.7, "intensityRatio": 0.85, "frequencyOffset": -10},
    "p4": {"frequencyOffset": -20},
}


@dataclass(frozen=True)
class Preset:
    """Parameter set chosen for a family of prompt keywords."""

    name: str
    effect: str
    vibration_type: str
    duration_seconds: float
    interval_seconds: float
    count: int
    intensity: int
    base_frequency: int
    envelope: Mapping[str, Any]

    def to_payload(self, keyword: Optional[str]) -> JsonDict:
        reason = (
            f"Offline preset '{self.name}' matched keyword '{keyword}'."
            if keyword
            else f"No keyword matched; using the '{self.name}' preset."
        )
        return {
            "vibrationType": self.vibration_type,
            "durationSeconds": self.duration_seconds,
            "intervalSeconds": self.interval_seconds,
            "count": self.count,
            "effect": self.effect,
            "filename": self.name,
            "intensity": self.intensity,
            "baseFrequency": self.base_frequency,
            "reasoning": reason,
            "envelope": deepcopy(dict(self.envelope)),
        }


PRESETS: Mapping[str, Preset] = {
    "machine_gun": Preset("machine_gun", "Machine gun burst", "transient", 0.05, 0.1, 10, 95, 70, _PUNCH_ENVELOPE),
    "heartbeat": Preset("heartbeat", "Heartbeat", "transient", 0.08, 0.15, 2, 80, 30, _PUNCH_ENVELOPE),
    "click": Preset("click", "Crisp click", "transient", 0.03, 0.1, 1, 70, 80, _PUNCH_ENVELOPE),
    "typing": Preset("typing", "Typing", "transient", 0.03, 0.12, 6, 60, 75, _PUNCH_ENVELOPE),
    "explosion": Preset("explosion", "Explosion", "transient", 0.1, 0.0, 1, 100, 20, _PUNCH_ENVELOPE),
    "engine": Preset("engine", "Engine rumble", "continuous", 2.0, 0.0, 1, 75, 30, _RUMBLE_ENVELOPE),
    "wind": Preset("wind", "Wind", "continuous", 3.0, 0.0, 1, 40, 45, _SWELL_ENVELOPE),
    "friction": Preset("friction", "Friction", "continuous", 1.2, 0.2, 2, 55, 60, _SWELL_ENVELOPE),
    "hum": Preset("hum", "Sustained hum", "continuous", 1.5, 0.0, 1, 50, 50, _SWELL_ENVELOPE),
}

DEFAULT_PRESET = "hum"

_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("machine gun", "machine_gun"),
    ("gunfire", "machine_gun"),
    ("rapid fire", "machine_gun"),
    ("机关枪", "machine_gun"),
    ("扫射", "machine_gun"),
    ("heartbeat", "heartbeat"),
    ("heart beat", "heartbeat"),
    ("心跳", "heartbeat"),
    ("typing", "typing"),
    ("keyboard", "typing"),
    ("打字", "typing"),
    ("click", "click"),
    ("tap", "click"),
    ("点击", "click"),
    ("脉冲", "click"),
    ("explosion", "explosion"),
    ("blast", "explosion"),
    ("爆炸", "explosion"),
    ("engine", "engine"),
    ("motor", "engine"),
    ("rumble", "engine"),
    ("引擎", "engine"),
    ("轰鸣", "engine"),
    ("wind", "wind"),
    ("breeze", "wind"),
    ("风", "wind"),
    ("friction", "friction"),
    ("scrape", "friction"),
    ("摩擦", "friction"),
    ("hum", "hum"),
    ("长鸣", "hum"),
)


def match_preset(text: str) -> Tuple[Preset, Optional[str]]:
    """Return the first preset whose keyword appears in *text*."""
    lowered = text.lower()
    for keyword, preset_name in _KEYWORDS:
        if keyword in lowered:
            return PRESETS[preset_name], keyword
    return PRESETS[DEFAULT_PRESET], None


__all__ = ["DEFAULT_PRESET", "PRESETS", "Preset", "match_preset"]
