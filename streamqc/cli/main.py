"""StreamQC CLI - loudness, peak and stereo compliance metering."""
from __future__ import annotations
import argparse
import json
import logging
import sys
import platform
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import numpy as np

from streamqc.version import __version__
from streamqc.config import EngineConfig, load_engine_config
from streamqc.engine.engine import MeteringEngine
from streamqc.engine.replay import replay
from streamqc.io.audio import load_audio
from streamqc.io.frames import BufferFrameSource
from streamqc.profiles.targets import (
    CUSTOM_PROFILE_ID,
    DEFAULT_PROFILE_ID,
    DEFAULT_TARGET_LUFS,
    TARGET_PROFILES,
    find_profile,
    load_target_profile,
    resolve_target_profile,
)
from streamqc.reporting.report import build_session_report
from streamqc.types import Status, TargetProfile
from streamqc.utils.hashing import sha256_hex_file

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_WARN = 10
EXIT_FAIL = 20
EXIT_BAD_ARGS = 2
EXIT_DECODE_ERROR = 3
EXIT_PROFILE_ERROR = 4
EXIT_INTERNAL_ERROR = 5
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _exit_code_for_status(status: Status) -> int:
    """Map Status enum to exit code."""
    if status == Status.OK:
        return EXIT_PASS
    if status == Status.WARN:
        return EXIT_WARN
    return EXIT_FAIL


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT, stream=sys.stderr)


def _resolve_profile_arg(value: str | None, custom_lufs: float | None) -> TargetProfile:
    """
    Turn the ``--profile`` argument into a TargetProfile.

    Accepts a preset id, ``custom`` (with ``--custom-lufs``) or a path to a
    profile JSON file. Unknown ids raise KeyError.
    """
    value = value or DEFAULT_PROFILE_ID
    if value == CUSTOM_PROFILE_ID:
        lufs = DEFAULT_TARGET_LUFS if custom_lufs is None else float(custom_lufs)
        return resolve_target_profile(CUSTOM_PROFILE_ID, lufs)
    if find_profile(value) is not None:
        return resolve_target_profile(value)
    if value.lower().endswith(".json") or Path(value).is_file():
        return load_target_profile(value)
    raise KeyError(f"unknown target profile '{value}'")


def _build_engine_meta(config: EngineConfig) -> dict:
    """Build engine metadata for the session report."""
    return {
        "name": "streamqc",
        "version": __version__,
        "config": config.to_dict(),
        "build": {
            "platform": platform.platform(),
            "python": platform.python_version(),
            "deps": [
                {"name": "numpy", "version": np.__version__},
            ],
        },
    }


def _build_input_meta(audio_path: str, audio) -> dict:
    """Build input metadata for the session report."""
    return {
        "path": str(Path(audio_path).resolve()),
        "file_hash_sha256": sha256_hex_file(audio_path),
        "fs_hz": audio.fs,
        "channels": int(audio.channels),
        "duration_s": audio.duration,
        "decode_backend": audio.backend,
        "decode_warnings": list(audio.warnings),
    }


def _analyze_audio(audio_path: str, profile: TargetProfile, config: EngineConfig):
    """Replay a file through a fresh engine and build the session report."""
    audio = load_audio(audio_path)
    config = replace(config, sample_rate_hz=audio.fs)
    engine = MeteringEngine(config, profile)
    source = BufferFrameSource(audio.samples, config.frame_size)
    frames = replay(engine, source, audio.fs)
    logger.info("Analyzed %s: %d frames at %.0f Hz", audio_path, frames, audio.fs)

    verdict = engine.verdict()
    if verdict is None:
        raise ValueError("audio contains no frames.")

    report = build_session_report(
        engine=_build_engine_meta(config),
        input_meta=_build_input_meta(audio_path, audio),
        profile=profile,
        meters=engine.published(),
        average_lufs=engine.cumulative_average_loudness(),
        verdict=verdict,
        timeline=engine.timeline_snapshot(),
        segments=engine.problem_segments(),
        analysis={
            "report_id": f"session_{uuid4().hex}",
            "created_utc": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "frames": frames,
            "mono_compatibility": (
                engine.mono_compatibility().value
                if engine.mono_compatibility() is not None else None
            ),
        },
    )
    return report, verdict


def _load_inputs(args) -> tuple[TargetProfile, EngineConfig]:
    profile = _resolve_profile_arg(args.profile, args.custom_lufs)
    config = load_engine_config(args.config) if args.config else EngineConfig()
    return profile, config


def cmd_analyze(args) -> int:
    """Handle analyze command."""
    try:
        profile, config = _load_inputs(args)
    except FileNotFoundError as e:
        print(f"Error: Profile/config not found - {e}", file=sys.stderr)
        return EXIT_PROFILE_ERROR
    except json.JSONDecodeError as e:
        print(f"Error: Invalid profile/config JSON - {e}", file=sys.stderr)
        return EXIT_PROFILE_ERROR
    except (KeyError, ValueError) as e:
        print(f"Error: Invalid profile/config - {e}", file=sys.stderr)
        return EXIT_PROFILE_ERROR

    try:
        report, verdict = _analyze_audio(args.audio_path, profile, config)
        output_json = json.dumps(report, indent=2)
        if args.out:
            Path(args.out).write_text(output_json, encoding="utf-8")
            print(f"Report written to: {args.out}", file=sys.stderr)
        else:
            print(output_json)
        return _exit_code_for_status(verdict.snapshot.verdict)
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except Exception as e:
        logger.exception("analyze failed")
        print(f"Internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR


def cmd_validate(args) -> int:
    """Handle validate command."""
    try:
        profile, config = _load_inputs(args)
    except (OSError, KeyError, ValueError) as e:
        print(f"Error: Invalid profile/config - {e}", file=sys.stderr)
        return EXIT_PROFILE_ERROR

    try:
        _, verdict = _analyze_audio(args.audio_path, profile, config)
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR

    snap = verdict.snapshot
    print(f"Profile: {profile.label} ({profile.target_lufs:.1f} LUFS +/- {profile.tolerance_lu:.1f} LU)")
    print(f"Verdict: {verdict.label} ({snap.verdict.value.upper()})")
    for d in verdict.decisions:
        print(f"  {d.metric}: {d.status.value} ({d.notes})")

    code = _exit_code_for_status(snap.verdict)
    if args.fail_on == "fail" and code == EXIT_WARN:
        return EXIT_PASS
    return code


def cmd_profiles(args) -> int:
    """Handle profiles command."""
    for p in TARGET_PROFILES:
        print(f"  {p.id}: {p.label} ({p.target_lufs:.1f} LUFS +/- {p.tolerance_lu:.1f} LU)")
    print(f"  {CUSTOM_PROFILE_ID}: Custom (--custom-lufs, default {DEFAULT_TARGET_LUFS:.1f} LUFS)")
    return EXIT_PASS


def _add_target_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "audio_path",
        help="Path to audio file (WAV, FLAC, AIFF)"
    )
    p.add_argument(
        "--profile", "-p",
        default=DEFAULT_PROFILE_ID,
        help="Target profile id or path to profile JSON (default: spotify)"
    )
    p.add_argument(
        "--custom-lufs",
        type=float,
        help="Target loudness for --profile custom"
    )
    p.add_argument(
        "--config", "-c",
        help="Path to engine config JSON"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamqc",
        description="StreamQC - streaming loudness/peak/stereo compliance meter"
    )
    parser.add_argument(
        "--version", action="version",
        version=f"streamqc {__version__}"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Meter an audio file and emit a session report"
    )
    _add_target_args(analyze_parser)
    analyze_parser.add_argument(
        "--out", "-o",
        help="Output path for report JSON"
    )
    analyze_parser.set_defaults(func=cmd_analyze)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Meter an audio file (simple verdict output)"
    )
    _add_target_args(validate_parser)
    validate_parser.add_argument(
        "--fail-on",
        choices=["fail", "warn"],
        default="fail",
        help="When to return non-zero exit code (default: fail)"
    )
    validate_parser.set_defaults(func=cmd_validate)

    profiles_parser = subparsers.add_parser(
        "profiles",
        help="List built-in target profiles"
    )
    profiles_parser.set_defaults(func=cmd_profiles)
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if hasattr(args, "func"):
        sys.exit(args.func(args))
    else:
        parser.print_help()
        sys.exit(EXIT_BAD_ARGS)


if __name__ == "__main__":
    main()
