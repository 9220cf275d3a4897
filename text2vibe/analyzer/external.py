"""Gemini-backed analyzer turning free text into a :class:`VibrationConfig`."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import uuid
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from text2vibe.logging import log_analysis
from text2vibe.model import ConfigError, VibrationConfig

from .presets import match_preset

JsonDict = Dict[str, Any]

MAX_RESPONSE_BYTES = 1024 * 1024
SENSITIVE_HEADERS = {"authorization", "x-goog-api-key", "api-key"}

USER_FAILURE_MESSAGE = "Analysis failed, please check the network connection."

_PROMPT_TEMPLATE = """You are a senior haptic designer creating vibration effects for \
high-end Android linear resonant actuators, following the IEEE 2861.3 (HE 1.0) standard.

Analyse the following description and convert it into vibration parameters: "{text}".

Design rules:
1. vibrationType:
   - transient: machine guns, heartbeats, clicks, typing, pulses, explosions, any single \
sharp hit. In HE 1.0 a transient has no duration; it is one very short impulse.
   - continuous: engine roar, wind, sustained tones, friction.
2. Physical fidelity:
   - Machine gun / bursts: transient, count 8-12, intervalSeconds 0.08-0.12, intensity 90+.
   - Heartbeat: transient, double-beat groups with a short intervalSeconds.
3. Limits:
   - baseFrequency: 0-100 (50 is the actuator's resonant point).
   - intensity: 0-100.
4. Write the reasoning field in Chinese, explaining why these parameters were chosen.

Respond with JSON."""

_ENDPOINT_POINT = {
    "type": "OBJECT",
    "properties": {"frequencyOffset": {"type": "INTEGER"}},
    "required": ["frequencyOffset"],
}
_INTERIOR_POINT = {
    "type": "OBJECT",
    "properties": {
        "timeRatio": {"type": "NUMBER"},
        "intensityRatio": {"type": "NUMBER"},
        "frequencyOffset": {"type": "INTEGER"},
    },
    "required": ["timeRatio", "intensityRatio", "frequencyOffset"],
}

RESPONSE_SCHEMA: JsonDict = {
    "type": "OBJECT",
    "properties": {
        "vibrationType": {"type": "STRING", "enum": ["continuous", "transient"]},
        "durationSeconds": {
            "type": "NUMBER",
            "description": "For transient effects the logical width of one hit, usually small such as 0.05",
        },
        "intervalSeconds": {"type": "NUMBER", "description": "Gap between two events in seconds"},
        "count": {"type": "INTEGER", "description": "Number of repetitions"},
        "effect": {"type": "STRING"},
        "filename": {"type": "STRING"},
        "intensity": {"type": "INTEGER"},
        "baseFrequency": {"type": "INTEGER"},
        "reasoning": {"type": "STRING"},
        "envelope": {
            "type": "OBJECT",
            "properties": {
                "p1": _ENDPOINT_POINT,
                "p2": _INTERIOR_POINT,
                "p3": _INTERIOR_POINT,
                "p4": _ENDPOINT_POINT,
            },
            "required": ["p1", "p2", "p3", "p4"],
        },
    },
    "required": [
        "vibrationType",
        "durationSeconds",
        "intervalSeconds",
        "count",
        "effect",
        "filename",
        "intensity",
        "baseFrequency",
        "reasoning",
        "envelope",
    ],
}


def _live_mode_enabled() -> bool:
    raw = os.getenv("TEXT2VIBE_ANALYZER_LIVE", "0")
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class AnalyzerRequestError(RuntimeError):
    """Raised when an analyzer invocation fails with a classified reason."""

    def __init__(self, reason: str, detail: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.reason = reason
        self.detail = detail
        self.status_code = status_code


class AnalyzerFailure(RuntimeError):
    """Raised when the analyzer did not return usable data."""

    def __init__(
        self,
        message: str,
        *,
        reason: str,
        detail: str,
        trace: Optional[JsonDict] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.detail = detail
        self.trace = trace or {}


class GeminiAnalyzer:
    """Google Gemini analyzer (v1beta generateContent, structured JSON output).

    Parameters
    ----------
    log_path:
        JSONL sink for analyzer records. Defaults to ``TEXT2VIBE_LOG_PATH`` or
        the shared ``meta/output`` location.
    transport:
        Optional callable receiving the request payload and returning the
        decoded response; replaces HTTP entirely.
    mock_mode:
        Answer from the offline keyword presets instead of calling Gemini.
        Defaults to mock unless ``TEXT2VIBE_ANALYZER_LIVE`` is truthy.
    """

    engine = "gemini"
    api_version = "v1beta"

    api_key_env = "GEMINI_API_KEY"
    endpoint_env = "GEMINI_ENDPOINT"
    model_env = "GEMINI_MODEL"
    default_model = "gemini-2.0-flash"

    def __init__(
        self,
        *,
        log_path: Optional[str] = None,
        transport: Optional[Callable[[JsonDict], JsonDict]] = None,
        mock_mode: Optional[bool] = None,
        timeout_seconds: float = 35.0,
        temperature: Optional[float] = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if mock_mode is None:
            mock_mode = not _live_mode_enabled()

        self.log_path = log_path
        self._transport = transport
        self.mock_mode = mock_mode
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def model(self) -> str:
        return os.getenv(self.model_env, self.default_model)

    @property
    def default_endpoint(self) -> str:
        return f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"

    @property
    def mode(self) -> str:
        if self.mock_mode:
            return "mock"
        return "transport" if self._transport is not None else "live"

    # Public API -----------------------------------------------------------------
    def analyze(self, text: str) -> VibrationConfig:
        """Return the vibration config Gemini proposes for *text*.

        The call is made exactly once; any failure is surfaced as
        :class:`AnalyzerFailure` and nothing is retried.
        """

        if not isinstance(text, str) or not text.strip():
            raise ValueError("text must be a non-empty string")

        trace_id = str(uuid.uuid4())
        request_payload = self.build_request(text)
        record: JsonDict = {
            "trace_id": trace_id,
            "engine": self.engine,
            "api_version": self.api_version,
            "model": self.model,
            "mode": self.mode,
            "prompt": text,
        }

        try:
            response, raw_bytes = self._dispatch(text, request_payload)
            if len(raw_bytes) > MAX_RESPONSE_BYTES:
                raise AnalyzerRequestError("bad_response", "response_body_exceeds_1MiB")
            payload = self.parse_response(response)
            config = VibrationConfig.from_payload(payload)
        except ConfigError as exc:
            error = AnalyzerRequestError("bad_response", f"invalid_config: {exc}")
            raise self._failure(record, error) from exc
        except AnalyzerRequestError as exc:
            raise self._failure(record, exc) from exc

        record.update(
            {
                "status": "ok",
                "response_hash": hashlib.sha256(raw_bytes).hexdigest()[:16],
                "response_size": len(raw_bytes),
                "config": config.to_payload(),
            }
        )
        log_analysis(record, path=self.log_path)
        self._logger.info("Analyzed prompt into %s effect '%s'", config.vibration_type.value, config.effect)
        return config

    def build_request(self, text: str) -> JsonDict:
        """Return the generateContent payload for *text*."""

        generation_config: JsonDict = {
            "response_mime_type": "application/json",
            "response_schema": RESPONSE_SCHEMA,
        }
        if self.temperature is not None:
            generation_config["temperature"] = float(self.temperature)
        return {
            "contents": [{"role": "user", "parts": [{"text": _PROMPT_TEMPLATE.format(text=text)}]}],
            "generation_config": generation_config,
        }

    def parse_response(self, response: JsonDict) -> JsonDict:
        """Extract the JSON config payload from a generateContent *response*."""

        candidates = response.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise AnalyzerRequestError("bad_response", "missing_candidates")

        try:
            parts = candidates[0]["content"]["parts"]
        except (KeyError, TypeError) as exc:
            raise AnalyzerRequestError("bad_response", "missing_content_parts") from exc

        text_payload: Optional[str] = None
        for part in parts if isinstance(parts, list) else ():
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                text_payload = part["text"]
                break
        if not text_payload:
            raise AnalyzerRequestError("bad_response", "missing_text_part")

        try:
            data = json.loads(text_payload)
        except json.JSONDecodeError as exc:
            raise AnalyzerRequestError("bad_response", f"invalid_json: {exc}") from exc
        if isinstance(data, list) and data:
            data = data[0]
        if not isinstance(data, dict):
            raise AnalyzerRequestError("bad_response", "payload_not_object")
        return data

    # Helpers --------------------------------------------------------------------
    def _dispatch(self, text: str, payload: JsonDict) -> Tuple[JsonDict, bytes]:
        if self.mock_mode:
            response = self._mock_response(text)
            return response, self._encode_payload(response)

        if self._transport is not None:
            response = self._transport(payload)
            if not isinstance(response, dict):
                raise AnalyzerRequestError("bad_response", "transport_returned_non_object")
            return response, self._encode_payload(response)

        return self._post_json(payload)

    def _mock_response(self, text: str) -> JsonDict:
        preset, keyword = match_preset(text)
        self._logger.debug("Mock analyzer matched preset %s (keyword=%s)", preset.name, keyword)
        body = json.dumps(preset.to_payload(keyword), ensure_ascii=False)
        return {"candidates": [{"content": {"role": "model", "parts": [{"text": body}]}}]}

    def _resolve_live_settings(self) -> Tuple[str, Dict[str, str]]:
        api_key = (os.getenv(self.api_key_env) or "").strip()
        if not api_key:
            raise AnalyzerRequestError("auth_error", "missing_api_key")

        endpoint = (os.getenv(self.endpoint_env) or self.default_endpoint).strip()
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": api_key,
        }
        return endpoint, headers

    def _post_json(self, payload: JsonDict) -> Tuple[JsonDict, bytes]:
        endpoint, headers = self._resolve_live_settings()
        self._logger.debug("Gemini request headers: %s", self._sanitize_headers_for_log(headers))
        try:
            response = requests.post(endpoint, json=payload, headers=headers, timeout=self.timeout_seconds)
        except requests.Timeout as exc:
            raise AnalyzerRequestError("timeout", "request_timeout") from exc
        except requests.RequestException as exc:
            raise AnalyzerRequestError("network_error", str(exc) or "network_unavailable") from exc

        if response.status_code >= 400:
            reason = self._classify_status(response.status_code)
            raise AnalyzerRequestError(reason, f"http_{response.status_code}", status_code=response.status_code)

        body = response.content
        if len(body) > MAX_RESPONSE_BYTES:
            raise AnalyzerRequestError("bad_response", "response_body_exceeds_1MiB")
        try:
            parsed = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise AnalyzerRequestError("bad_response", f"invalid_json: {exc}") from exc
        if not isinstance(parsed, dict):
            raise AnalyzerRequestError("bad_response", "response_not_object")
        return parsed, body

    @staticmethod
    def _classify_status(status: int) -> str:
        if status in {401, 403}:
            return "auth_error"
        if status == 429:
            return "rate_limited"
        if 500 <= status < 600:
            return "server_error"
        return "bad_response"

    def _sanitize_headers_for_log(self, headers: Dict[str, str]) -> Dict[str, str]:
        sanitized: Dict[str, str] = {}
        for key, value in headers.items():
            if key.lower() in SENSITIVE_HEADERS:
                sanitized[key] = "***redacted***"
            else:
                sanitized[key] = value
        return sanitized

    def _encode_payload(self, payload: JsonDict) -> bytes:
        return json.dumps(payload, sort_keys=True).encode("utf-8")

    def _failure(self, record: JsonDict, error: AnalyzerRequestError) -> AnalyzerFailure:
        record.update(
            {
                "status": "api_failed",
                "failure": {"reason": error.reason, "detail": error.detail},
            }
        )
        log_analysis(record, path=self.log_path)
        self._logger.warning("Gemini analysis failed: %s (%s)", error.reason, error.detail)
        return AnalyzerFailure(
            f"{self.engine} analysis failed: {error.reason}",
            reason=error.reason,
            detail=error.detail,
            trace=dict(record),
        )


__all__ = [
    "AnalyzerFailure",
    "AnalyzerRequestError",
    "GeminiAnalyzer",
    "RESPONSE_SCHEMA",
    "USER_FAILURE_MESSAGE",
]
