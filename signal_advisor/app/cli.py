"""Command-line entry point for analysing frames and browsing history."""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional

import cv2

from signal_advisor.adapters.frames import annotate_frame, capture_frame, encode_frame, load_file_as_data_url
from signal_advisor.adapters.remote_client import RemoteAnalysisError, RemoteAnalyzer
from signal_advisor.app.bootstrap import build_service, setup_logging
from signal_advisor.app.settings import AppSettings, get_settings
from signal_advisor.core.models import AnalysisRecord, InputType

LOGGER = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulated traffic signal advisor")
    parser.add_argument("--log-format", choices=["text", "json"], default=None, help="Logging format")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyse an image, a video file, or a webcam frame")
    analyze.add_argument("path", nargs="?", type=Path, help="Image or video file to analyse")
    analyze.add_argument("--webcam", type=int, default=None, help="Capture one frame from this webcam index")
    analyze.add_argument(
        "--type",
        choices=[InputType.IMAGE.value, InputType.VIDEO.value],
        default=None,
        help="Override the input type guessed from the file extension",
    )
    analyze.add_argument("--remote", type=str, default=None, help="Remote /analyze endpoint URL")
    analyze.add_argument("--seed", type=int, default=None, help="Seed for the simulated detector")
    analyze.add_argument(
        "--annotate-output",
        type=Path,
        default=None,
        help="Write the frame with detection boxes to this file (local image or webcam runs)",
    )

    history = subparsers.add_parser("history", help="Show the most recent analyses")
    history.add_argument("--limit", type=_positive_int, default=None, help="Number of entries to show")

    delete = subparsers.add_parser("delete", help="Delete an analysis from history")
    delete.add_argument("analysis_id", type=str)
    return parser


def _dump(record: AnalysisRecord) -> str:
    return json.dumps(record.model_dump(mode="json", exclude={"detections"}), indent=2)


def _guess_input_type(path: Path) -> InputType:
    media_type = mimetypes.guess_type(str(path))[0] or ""
    return InputType.VIDEO if media_type.startswith("video/") else InputType.IMAGE


def _run_analyze(args: argparse.Namespace, settings: AppSettings) -> int:
    if (args.path is None) == (args.webcam is None):
        print("Provide either a file path or --webcam INDEX.")
        return 2

    frame = None
    if args.webcam is not None:
        frame = capture_frame(args.webcam)
        image_data = encode_frame(frame)
        input_type = InputType.WEBCAM
    else:
        if not args.path.exists():
            print(f"File not found: {args.path}")
            return 2
        image_data = load_file_as_data_url(args.path)
        input_type = InputType(args.type) if args.type else _guess_input_type(args.path)
        if input_type is InputType.IMAGE and args.annotate_output:
            frame = cv2.imread(str(args.path))

    endpoint = args.remote or settings.remote_endpoint
    if endpoint:
        client = RemoteAnalyzer(
            endpoint,
            timeout=settings.remote_timeout_seconds,
            max_retries=settings.remote_max_retries,
        )
        LOGGER.info("Sending %s payload to %s", input_type.value, endpoint)
        try:
            record = client.analyze(image_data, input_type)
        except RemoteAnalysisError as exc:
            print(f"Remote analysis failed: {exc}")
            return 1
        finally:
            client.close()
    else:
        record = build_service(settings).analyze(image_data, input_type)

    print(f"Recommendation: {record.signal_recommendation}")
    print(f"Optimization score: {record.result.optimization_score:.1f}")
    print(_dump(record))

    if args.annotate_output:
        if frame is None:
            print("Annotated output is only available for image and webcam inputs.")
        else:
            args.annotate_output.parent.mkdir(parents=True, exist_ok=True)
            cv2.imwrite(str(args.annotate_output), annotate_frame(frame, record.detections))
            print(f"Annotated frame written to {args.annotate_output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    overrides = {}
    if args.log_format:
        overrides["log_format"] = args.log_format
    if getattr(args, "seed", None) is not None:
        overrides["random_seed"] = args.seed
    settings = get_settings(**overrides)
    setup_logging(settings)

    if args.command == "analyze":
        return _run_analyze(args, settings)

    service = build_service(settings)
    if args.command == "history":
        limit = args.limit if args.limit is not None else settings.history_limit
        records = service.history(limit)
        print(f"History entries: {len(records)} (showing up to {limit})")
        for record in records:
            print(
                f"{record.id} | {record.created_at.isoformat()} | {record.input_type.value} | "
                f"{record.signal_recommendation} | score {record.result.optimization_score:.1f}"
            )
        return 0

    if service.delete(args.analysis_id):
        print(f"Deleted {args.analysis_id}")
        return 0
    print(f"No analysis with id {args.analysis_id}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
