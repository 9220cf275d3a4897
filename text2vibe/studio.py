"""Studio orchestration: analyze text, preview on the actuator, export documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from text2vibe.actuation import ActuationController
from text2vibe.analyzer import USER_FAILURE_MESSAGE, AnalyzerFailure
from text2vibe.compiler import MissingEnvelopeError, compile_waveform
from text2vibe.export import export_filename, write_document
from text2vibe.logging import log_jsonl
from text2vibe.model import VibrationConfig

_DEFAULT_LOG_PATH = "meta/output/text2vibe/studio.jsonl"
DEBUG_HEADER = "[IEEE 2861.3 HE 1.0 JSON]"


class Analyzer(Protocol):
    def analyze(self, text: str) -> VibrationConfig:
        ...


@dataclass(frozen=True)
class AnalysisState:
    """Outcome of the most recent analysis request."""

    status: str = "idle"
    data: Optional[VibrationConfig] = None
    error_message: Optional[str] = None


class HapticStudio:
    """Hold the current vibration config and fan it out to preview and export.

    Parameters
    ----------
    analyzer:
        Collaborator turning free text into a :class:`VibrationConfig`.
    controller:
        Actuation controller used for previews.
    log_path:
        JSONL sink recording analyze and export events.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        controller: ActuationController,
        *,
        log_path: str = _DEFAULT_LOG_PATH,
        auto_preview: bool = True,
    ) -> None:
        self._analyzer = analyzer
        self._controller = controller
        self.log_path = log_path
        self.auto_preview = auto_preview
        self._config: Optional[VibrationConfig] = None
        self.state = AnalysisState()
        self.debug_log: Optional[str] = None
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def config(self) -> Optional[VibrationConfig]:
        return self._config

    @property
    def preview_available(self) -> bool:
        return self._config is not None

    @property
    def export_available(self) -> bool:
        return self._config is not None

    def analyze(self, text: str) -> AnalysisState:
        """Analyze *text* and make the result the current config.

        On failure the previous config stays current and the returned state
        carries a user-visible message.
        """

        if not isinstance(text, str) or not text.strip():
            return self.state

        self.state = AnalysisState(status="analyzing")
        try:
            config = self._analyzer.analyze(text)
        except AnalyzerFailure as exc:
            self._logger.warning("Analysis failed (%s): %s", exc.reason, exc.detail)
            self.state = AnalysisState(
                status="error",
                data=self._config,
                error_message=USER_FAILURE_MESSAGE,
            )
            self._record({"event": "studio.analyze", "status": "error", "reason": exc.reason})
            return self.state

        self._config = config
        self.state = AnalysisState(status="success", data=config)
        self.debug_log = self._render_debug(config)
        self._record({"event": "studio.analyze", "status": "success", "config": config.to_payload()})

        if self.auto_preview:
            self.preview()
        return self.state

    def preview(self) -> bool:
        """Play the current config; False when there is nothing to play."""

        if self._config is None:
            return False
        return self._controller.play(self._config)

    def export(self, directory: str = ".") -> Optional[Path]:
        """Write the current config as ``<filename>.he`` under *directory*."""

        if self._config is None:
            return None

        document = compile_waveform(self._config)
        filename = export_filename(self._config)
        path = write_document(document, filename, directory)
        note = f"[System] HE file exported ({filename})."
        self.debug_log = f"{self.debug_log}\n\n{note}" if self.debug_log else note
        self._record({"event": "studio.export", "path": str(path), "filename": filename})
        return path

    def _render_debug(self, config: VibrationConfig) -> str:
        try:
            document = compile_waveform(config)
        except MissingEnvelopeError as exc:
            self._logger.warning("Cannot render waveform preview: %s", exc)
            return f"{DEBUG_HEADER}\n<unavailable: {exc}>"
        return f"{DEBUG_HEADER}\n{json.dumps(document, indent=2, ensure_ascii=False)}"

    def _record(self, record: Dict[str, Any]) -> None:
        log_jsonl(self.log_path, record)


__all__ = ["AnalysisState", "Analyzer", "HapticStudio"]
