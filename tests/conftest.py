"""Shared pytest fixtures for the text2vibe suite."""

from __future__ import annotations

import pathlib
import sys
from typing import Any, Callable, List

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from text2vibe.model import VibrationConfig


class FakeTimer:
    """Stand-in for ``threading.Timer`` that fires only when told to."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function()


@pytest.fixture
def timers() -> List[FakeTimer]:
    return []


@pytest.fixture
def timer_factory(timers: List[FakeTimer]) -> Callable[[float, Callable[[], None]], FakeTimer]:
    def _factory(interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        timers.append(timer)
        return timer

    return _factory


@pytest.fixture
def transient_payload() -> dict[str, Any]:
    return {
        "vibrationType": "transient",
        "durationSeconds": 0.05,
        "intervalSeconds": 0.1,
        "count": 3,
        "effect": "Machine gun",
        "filename": "machine_gun",
        "intensity": 95,
        "baseFrequency": 70,
        "reasoning": "Rapid sharp hits.",
        "envelope": {
            "p1": {"frequencyOffset": 0},
            "p2": {"timeRatio": 0.1, "intensityRatio": 1.0, "frequencyOffset": 0},
            "p3": {"timeRatio": 0.5, "intensityRatio": 0.5, "frequencyOffset": 0},
            "p4": {"frequencyOffset": 0},
        },
    }


@pytest.fixture
def continuous_payload() -> dict[str, Any]:
    return {
        "vibrationType": "continuous",
        "durationSeconds": 2,
        "intervalSeconds": 0,
        "count": 1,
        "effect": "Engine swell",
        "filename": "engine_swell",
        "intensity": 60,
        "baseFrequency": 50,
        "reasoning": "Slow rise and fall.",
        "envelope": {
            "p1": {"frequencyOffset": 0},
            "p2": {"timeRatio": 0.2, "intensityRatio": 0.8, "frequencyOffset": 10},
            "p3": {"timeRatio": 0.8, "intensityRatio": 0.6, "frequencyOffset": -10},
            "p4": {"frequencyOffset": 0},
        },
    }


@pytest.fixture
def transient_config(transient_payload) -> VibrationConfig:
    return VibrationConfig.from_payload(transient_payload)


@pytest.fixture
def continuous_config(continuous_payload) -> VibrationConfig:
    return VibrationConfig.from_payload(continuous_payload)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path) -> None:
    """Keep analyzer mode and log sinks away from the developer's environment."""

    monkeypatch.delenv("TEXT2VIBE_ANALYZER_LIVE", raising=False)
    monkeypatch.delenv("GEMINI_ENDPOINT", raising=False)
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    monkeypatch.setenv("TEXT2VIBE_LOG_PATH", str(tmp_path / "analyzer.jsonl"))
