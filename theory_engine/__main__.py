"""CLI entry point: python -m theory_engine generate/check-answer/validate."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from .chords import GeneratedTask, GeneratorConfig, generate_chord
from .errors import ConfigurationError
from .loaders import load_exercise, load_generator_config
from .matcher import validate_answer
from .report import format_json, format_match_text, format_task_text, format_text, to_json

logger = logging.getLogger("theory_engine")


def _seeded_task(config: GeneratorConfig, seed: Optional[int]) -> GeneratedTask:
    rng = random.Random(seed) if seed is not None else None
    return generate_chord(config, rng)


def _emit(output: str, path: Optional[str] = None) -> None:
    if path:
        Path(path).write_text(output + "\n")
    else:
        print(output)


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate one chord-construction task."""
    config = load_generator_config(args.config)
    task = _seeded_task(config, args.seed)
    _emit(to_json(task) if args.json else format_task_text(task))
    return 0


def cmd_check_answer(args: argparse.Namespace) -> int:
    """Regenerate a seeded task and match an answer against it."""
    config = load_generator_config(args.config)
    task = _seeded_task(config, args.seed)
    result = validate_answer(args.answer, task, config)
    if args.json:
        data = {"task": task.to_dict(), "result": result.to_dict()}
        _emit(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        _emit(format_match_text(result))
    return 0 if result.matched else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a counterpoint exercise file."""
    exercise = load_exercise(args.input)
    report = exercise.validate()
    output = format_json(report) if args.json else format_text(report)
    _emit(output, args.output)
    return 0 if report.passed else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="theory_engine",
        description="Chord exercises, answer matching and species counterpoint validation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # generate
    p_gen = subparsers.add_parser("generate", help="Generate a chord-construction task")
    p_gen.add_argument("--config", required=True, help="Path to generator config JSON")
    p_gen.add_argument("--seed", type=int, help="Random seed")
    p_gen.add_argument("--json", action="store_true", help="JSON output")

    # check-answer
    p_chk = subparsers.add_parser("check-answer", help="Match an answer against a seeded task")
    p_chk.add_argument("--config", required=True, help="Path to generator config JSON")
    p_chk.add_argument("--seed", type=int, required=True, help="Seed the task was generated with")
    p_chk.add_argument("answer", help="Answer text, e.g. 'Dm/1'")
    p_chk.add_argument("--json", action="store_true", help="JSON output")

    # validate
    p_val = subparsers.add_parser("validate", help="Validate a counterpoint exercise")
    p_val.add_argument("input", help="Path to exercise JSON")
    p_val.add_argument("--json", action="store_true", help="JSON output")
    p_val.add_argument("-o", "--output", help="Output file path")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "generate": cmd_generate,
        "check-answer": cmd_check_answer,
        "validate": cmd_validate,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 0
    try:
        return handler(args)
    except ConfigurationError as e:
        logger.debug("configuration error", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
