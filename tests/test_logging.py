"""Logging helper tests."""

from __future__ import annotations

import json

from text2vibe.logging import log_analysis, log_jsonl


def test_log_analysis_writes_timestamp(tmp_path) -> None:
    path = tmp_path / "analyzer.jsonl"
    record = {"engine": "gemini", "status": "ok"}

    log_analysis(record, path=str(path))

    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert len(lines) == 1
    assert lines[0]["engine"] == "gemini"
    assert lines[0]["status"] == "ok"
    assert "timestamp" in lines[0]
    assert "timestamp" not in record


def test_log_analysis_honours_env_path(tmp_path, monkeypatch) -> None:
    path = tmp_path / "env.jsonl"
    monkeypatch.setenv("TEXT2VIBE_LOG_PATH", str(path))

    log_analysis({"status": "api_failed"})

    assert json.loads(path.read_text(encoding="utf-8"))["status"] == "api_failed"


def test_log_jsonl_creates_directories(tmp_path) -> None:
    path = tmp_path / "nested" / "dir" / "events.jsonl"

    log_jsonl(str(path), {"effect": "心跳"})
    log_jsonl(str(path), {"effect": "wind"})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["effect"] for line in lines] == ["心跳", "wind"]
