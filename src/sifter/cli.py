"""Command line entry points for scoring and verification."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
import sys
from typing import Any

from pydantic import ValidationError

from sifter.core.errors import SifterError
from sifter.domain.verification import MODES, Submission
from sifter.service import SifterService


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=True, default=str)


def run_score(service: SifterService, metrics_json: str, text: str = "") -> str:
    metrics = json.loads(metrics_json)
    if not isinstance(metrics, dict):
        raise SifterError("--metrics must be a JSON object of metric scores.")
    return _dump(service.analyze(text or "unnamed", metrics))


def run_batch(service: SifterService, path: str | Path) -> str:
    text = Path(path).read_text(encoding="utf-8")
    return _dump(service.batch(service.parse_batch(text)).model_dump())


def run_verify(service: SifterService, path: str | Path, mode: str | None = None) -> str:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    submission = Submission.model_validate(raw)
    run = asyncio.run(service.verify(submission, mode))
    return _dump(run.model_dump(mode="json"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sifter")
    commands = parser.add_subparsers(dest="command", required=True)

    score = commands.add_parser("score", help="Score one project from metric values.")
    score.add_argument("--metrics", required=True, help='JSON object, e.g. \'{"team_identity": 80}\'.')
    score.add_argument("--input", default="", help="Project identifier (handle, URL or name).")

    batch = commands.add_parser("batch", help="Score every row of a CSV file.")
    batch.add_argument("path", help="CSV with an 'input' column plus metric columns.")

    verify = commands.add_parser("verify", help="Run automated checks on a submission JSON file.")
    verify.add_argument("path", help="Submission JSON file.")
    verify.add_argument("--mode", choices=MODES, help="Override the submission mode.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        service = SifterService.from_settings()
        if args.command == "score":
            output = run_score(service, args.metrics, args.input)
        elif args.command == "batch":
            output = run_batch(service, args.path)
        else:
            output = run_verify(service, args.path, args.mode)
    except (SifterError, ValidationError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(output)
    return 0
