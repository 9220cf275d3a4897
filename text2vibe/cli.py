"""Command line entry point for text2vibe."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from text2vibe.actuation import ActuationController, RecordingActuator
from text2vibe.analyzer import AnalyzerFailure, GeminiAnalyzer
from text2vibe.compiler import MissingEnvelopeError, compile_pulse_train, compile_waveform
from text2vibe.export import DocumentError, export_filename, write_document
from text2vibe.model import ConfigError, VibrationConfig
from text2vibe.studio import HapticStudio

_LOGGER = logging.getLogger("text2vibe.cli")


def _load_env_file(path: str | None = None) -> None:
    """Load environment variables using python-dotenv and report missing keys."""

    env_path = path or os.path.join(os.path.dirname(__file__), "..", ".env")
    load_dotenv(dotenv_path=env_path)

    raw_live = os.getenv("TEXT2VIBE_ANALYZER_LIVE")
    os.environ.setdefault("TEXT2VIBE_ANALYZER_LIVE", raw_live or "0")
    os.environ.setdefault("GEMINI_MODEL", GeminiAnalyzer.default_model)

    if not raw_live:
        _LOGGER.warning("TEXT2VIBE_ANALYZER_LIVE not set; defaulting to mock mode (0)")
    elif raw_live.strip().lower() in {"1", "true", "yes", "on"} and not os.getenv("GEMINI_API_KEY"):
        _LOGGER.warning("Missing required env var for live analysis: GEMINI_API_KEY")


def _configure_logging() -> None:
    log_level = os.getenv("TEXT2VIBE_LOG_LEVEL", "INFO")
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load_config(value: str) -> VibrationConfig:
    try:
        payload = json.loads(value)
    except json.JSONDecodeError:
        try:
            with open(value, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except OSError as exc:
            raise ConfigError(f"config is neither JSON nor a readable file: {value}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"config file {value} is not valid JSON: {exc}") from exc
    return VibrationConfig.from_payload(payload)


def _dump(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _default_export_dir() -> str:
    return os.getenv("TEXT2VIBE_EXPORT_DIR", ".")


def _pulse_payload(config: VibrationConfig) -> Dict[str, Any]:
    train = compile_pulse_train(config)
    return {"pattern": list(train.pattern), "total_ms": train.total_ms}


def _run_analyze(args: argparse.Namespace) -> int:
    actuator = RecordingActuator()
    studio = HapticStudio(
        GeminiAnalyzer(),
        ActuationController(actuator),
        auto_preview=not args.no_preview,
    )
    state = studio.analyze(args.text)
    if state.status != "success":
        print(state.error_message or "Analysis failed.", file=sys.stderr)
        return 1

    _dump(state.data.to_payload())
    if studio.debug_log:
        print(studio.debug_log)
    if not args.no_preview:
        _dump({"preview": _pulse_payload(state.data)})
    if args.export_dir:
        path = studio.export(args.export_dir)
        print(f"Saved to {path}", file=sys.stderr)
    return 0


def _run_compile(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    if args.pulse:
        _dump(_pulse_payload(config))
    else:
        _dump(compile_waveform(config))
    return 0


def _run_export(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    document = compile_waveform(config)
    path = write_document(document, export_filename(config), args.output_dir or _default_export_dir())
    print(str(path))
    return 0


def _run_preview(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    actuator = RecordingActuator()
    controller = ActuationController(actuator)
    controller.play(config)
    controller.cancel()
    _dump(_pulse_payload(config))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the text2vibe CLI."""

    _configure_logging()
    _load_env_file()

    parser = argparse.ArgumentParser(description="Compile text-described haptics into HE 1.0 documents")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a text description into a vibration config")
    analyze_parser.add_argument("text", help="Description of the sound or sensation")
    analyze_parser.add_argument("--export-dir", dest="export_dir", help="Write <filename>.he into this directory")
    analyze_parser.add_argument("--no-preview", dest="no_preview", action="store_true", help="Skip the actuator preview")

    compile_parser = subparsers.add_parser("compile", help="Compile a config into a Waveform Document")
    compile_parser.add_argument("config", help="JSON string or file path pointing to the config")
    compile_parser.add_argument("--pulse", action="store_true", help="Print the preview pulse train instead")

    export_parser = subparsers.add_parser("export", help="Export a config as <filename>.he")
    export_parser.add_argument("config", help="JSON string or file path pointing to the config")
    export_parser.add_argument("--output-dir", dest="output_dir", help="Target directory (default: TEXT2VIBE_EXPORT_DIR or .)")

    preview_parser = subparsers.add_parser("preview", help="Drive a simulated actuator with the pulse train")
    preview_parser.add_argument("config", help="JSON string or file path pointing to the config")

    args = parser.parse_args(argv)
    handlers = {
        "analyze": _run_analyze,
        "compile": _run_compile,
        "export": _run_export,
        "preview": _run_preview,
    }

    try:
        return handlers[args.command](args)
    except (AnalyzerFailure, ConfigError, DocumentError, MissingEnvelopeError) as exc:
        _LOGGER.error("%s: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover - unexpected failure
        _LOGGER.exception("Unexpected failure in %s", args.command)
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover - module execution
    sys.exit(main())
