"""Pulse train compiler tests."""

from __future__ import annotations

import dataclasses

import pytest

from text2vibe.compiler import TRANSIENT_PULSE_MS, compile_pulse_train


def test_transient_scenario_pattern(transient_config) -> None:
    train = compile_pulse_train(transient_config)

    assert train.pattern == (20, 100, 20, 100, 20)
    assert train.total_ms == 260


def test_continuous_uses_full_duration(continuous_config) -> None:
    config = dataclasses.replace(continuous_config, count=2, interval_seconds=0.25)

    train = compile_pulse_train(config)

    assert train.pattern == (2000, 250, 2000)
    assert train.total_ms == 4250


def test_single_repetition_has_no_trailing_pause(continuous_config) -> None:
    train = compile_pulse_train(continuous_config)

    assert train.pattern == (2000,)


@pytest.mark.parametrize("duration", [0.01, 0.05, 0.5, 3.0])
def test_transient_width_ignores_duration(transient_config, duration: float) -> None:
    config = dataclasses.replace(transient_config, duration_seconds=duration)

    train = compile_pulse_train(config)

    assert train.pattern[0::2] == (TRANSIENT_PULSE_MS,) * config.count


@pytest.mark.parametrize("count", [1, 2, 7])
def test_total_matches_sum(transient_config, continuous_config, count: int) -> None:
    for config in (transient_config, continuous_config):
        train = compile_pulse_train(dataclasses.replace(config, count=count, interval_seconds=0.033))
        assert sum(train.pattern) == train.total_ms
        assert len(train.pattern) == 2 * count - 1


def test_envelope_is_not_required(continuous_config) -> None:
    config = dataclasses.replace(continuous_config, envelope=None)

    assert compile_pulse_train(config).pattern == (2000,)
