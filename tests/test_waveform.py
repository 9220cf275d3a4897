"""Waveform exporter tests."""

from __future__ import annotations

import dataclasses
import datetime as _dt

import pytest

from text2vibe.compiler import MissingEnvelopeError, compile_waveform
from text2vibe.compiler.waveform import round_ratio

_CREATED = _dt.date(2024, 5, 17)


def test_transient_scenario_events(transient_config) -> None:
    document = compile_waveform(transient_config, created=_CREATED)

    events = [entry["Event"] for entry in document["Pattern"]]
    assert [event["RelativeTime"] for event in events] == [0, 150, 300]
    for event in events:
        assert event == {
            "Type": "transient",
            "RelativeTime": event["RelativeTime"],
            "Parameters": {"Intensity": 95, "Frequency": 70},
        }
        assert "Duration" not in event
        assert "Curve" not in event["Parameters"]


def test_continuous_scenario_curve(continuous_config) -> None:
    document = compile_waveform(continuous_config, created=_CREATED)

    assert len(document["Pattern"]) == 1
    event = document["Pattern"][0]["Event"]
    assert event["Type"] == "continuous"
    assert event["RelativeTime"] == 0
    assert event["Duration"] == 2000
    assert event["Parameters"]["Intensity"] == 60
    assert event["Parameters"]["Frequency"] == 50
    assert event["Parameters"]["Curve"] == [
        {"Time": 0, "Intensity": 0, "Frequency": 0},
        {"Time": 400, "Intensity": 0.8, "Frequency": 10},
        {"Time": 1600, "Intensity": 0.6, "Frequency": -10},
        {"Time": 2000, "Intensity": 0, "Frequency": 0},
    ]


def test_metadata_block(continuous_config) -> None:
    document = compile_waveform(continuous_config, created=_CREATED)

    assert document["Metadata"] == {
        "Version": 1,
        "Created": "2024-05-17",
        "Description": "Text2Vibe: Engine swell",
    }


def test_created_defaults_to_today(continuous_config) -> None:
    document = compile_waveform(continuous_config)

    assert document["Metadata"]["Created"] == _dt.date.today().isoformat()


def test_missing_envelope_fails_fast(continuous_config) -> None:
    config = dataclasses.replace(continuous_config, envelope=None)

    with pytest.raises(MissingEnvelopeError):
        compile_waveform(config)


def test_transient_without_envelope_is_fine(transient_config) -> None:
    config = dataclasses.replace(transient_config, envelope=None)

    document = compile_waveform(config)

    assert len(document["Pattern"]) == transient_config.count


@pytest.mark.parametrize("duration", [0.02, 0.05, 0.4])
def test_transient_spacing_grows_with_duration(transient_config, duration: float) -> None:
    config = dataclasses.replace(transient_config, duration_seconds=duration)

    times = [entry["Event"]["RelativeTime"] for entry in compile_waveform(config)["Pattern"]]

    step = round(duration * 1000) + 100
    assert times == [index * step for index in range(config.count)]


def test_continuous_spacing_includes_pause(continuous_config) -> None:
    config = dataclasses.replace(continuous_config, count=4, interval_seconds=0.5)

    pattern = compile_waveform(config)["Pattern"]

    assert len(pattern) == 4
    assert [entry["Event"]["RelativeTime"] for entry in pattern] == [0, 2500, 5000, 7500]


def test_levels_are_clamped(transient_config, continuous_config) -> None:
    loud = dataclasses.replace(transient_config, intensity=140, base_frequency=-12)
    event = compile_waveform(loud)["Pattern"][0]["Event"]
    assert event["Parameters"] == {"Intensity": 100, "Frequency": 0}

    quiet = dataclasses.replace(continuous_config, intensity=-3, base_frequency=101)
    parameters = compile_waveform(quiet)["Pattern"][0]["Event"]["Parameters"]
    assert parameters["Intensity"] == 0
    assert parameters["Frequency"] == 100
    assert isinstance(parameters["Intensity"], int)


def test_curve_intensity_is_two_decimal_ratio(continuous_config) -> None:
    envelope = continuous_config.envelope
    shaped = dataclasses.replace(
        envelope,
        p2=dataclasses.replace(envelope.p2, intensity_ratio=0.8349),
        p3=dataclasses.replace(envelope.p3, intensity_ratio=1.7),
    )
    config = dataclasses.replace(continuous_config, envelope=shaped)

    curve = compile_waveform(config)["Pattern"][0]["Event"]["Parameters"]["Curve"]

    assert curve[1]["Intensity"] == 0.83
    assert curve[2]["Intensity"] == 1.0
    assert curve[0]["Intensity"] == 0
    assert curve[3]["Intensity"] == 0


def test_curve_accepts_unordered_time_ratios(continuous_config) -> None:
    envelope = continuous_config.envelope
    swapped = dataclasses.replace(envelope, p2=envelope.p3, p3=envelope.p2)
    config = dataclasses.replace(continuous_config, envelope=swapped)

    curve = compile_waveform(config)["Pattern"][0]["Event"]["Parameters"]["Curve"]

    assert [point["Time"] for point in curve] == [0, 1600, 400, 2000]


def test_curve_frequency_offsets_round_half_up(continuous_config) -> None:
    envelope = continuous_config.envelope
    shaped = dataclasses.replace(
        envelope,
        p1=dataclasses.replace(envelope.p1, frequency_offset=2.5),
        p4=dataclasses.replace(envelope.p4, frequency_offset=-7.4),
    )
    config = dataclasses.replace(continuous_config, envelope=shaped)

    curve = compile_waveform(config)["Pattern"][0]["Event"]["Parameters"]["Curve"]

    assert curve[0]["Frequency"] == 3
    assert curve[3]["Frequency"] == -7


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.005, 0.01),
        (0.125, 0.13),
        (0.999, 1.0),
        (-0.2, 0.0),
        (0.6, 0.6),
        (0.285, 0.28),
        (0.145, 0.14),
        (0.575, 0.57),
    ],
)
def test_round_ratio(value: float, expected: float) -> None:
    assert round_ratio(value) == expected
