"""Report generation: text and JSON output."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .chords import GeneratedTask
from .matcher import MatchResult
from .model import pitch_to_name
from .rules.base import Category, RuleViolation, Severity
from .score import severity_counts
from .validator import ValidationReport


def _severity_prefix(severity: Severity) -> str:
    return {
        Severity.CRITICAL: "[CRITICAL]",
        Severity.WARNING: "[WARNING] ",
        Severity.INFO: "[INFO]    ",
    }[severity]


def format_text(report: ValidationReport) -> str:
    """Format a validation report as human-readable text."""
    lines = []
    stats = report.stats
    lines.append(
        f"=== Validation: species {report.species}, {stats.get('pairs', 0)} pairs ==="
    )
    lines.append("")

    for v in report.violations:
        lines.append(f"{_severity_prefix(v.severity)} {v.category.value}/{v.rule_name}: {v.location} {v.message}")
    if not report.violations:
        lines.append("[PASS]     no rule violations")
    lines.append("")

    # Category summary
    lines.append("Category Summary:")
    by_category: Dict[Category, List[RuleViolation]] = {cat: [] for cat in Category}
    for v in report.violations:
        by_category[v.category].append(v)
    for cat in Category:
        counts = severity_counts(by_category[cat])
        parts = [f"{n} {sev.value.lower()}" for sev, n in counts.items() if n]
        status = "FAIL" if counts[Severity.CRITICAL] else "PASS"
        summary = f"  {cat.value:<18} {status}"
        if parts:
            summary += f" ({', '.join(parts)})"
        lines.append(summary)

    if report.feedback:
        lines.append("")
        lines.append("Feedback:")
        for item in report.feedback:
            lines.append(f"  - [{item.kind}] {item.message}")

    lines.append("")
    lines.append(
        f"  contrary motion {stats.get('contrary_motion_pct', 0.0)}%, "
        f"stepwise {stats.get('stepwise_pct', 0.0)}%"
    )
    lines.append(f"  SCORE: {report.score}/100")
    lines.append(f"  OVERALL: {'PASS' if report.passed else 'FAIL'}")
    lines.append("")
    return "\n".join(lines)


def format_json(report: ValidationReport) -> str:
    """Format a validation report as JSON."""
    return json.dumps(report.to_dict(), indent=2)


def format_task_text(task: GeneratedTask) -> str:
    """One-screen description of a chord-construction task."""
    notes = " ".join(pitch_to_name(p) for p in task.pitches)
    return "\n".join([
        f"Build: {task.display_name}",
        f"  answer: {task.primary_answer}",
        f"  notes:  {notes} (bass {pitch_to_name(task.bass_pitch)})",
    ])


def format_match_text(result: MatchResult) -> str:
    if result.matched:
        return f"[MATCH]    {result.matched_form} (expected {result.canonical_form})"
    reason = f" ({result.reason})" if result.reason else ""
    return f"[NO MATCH] {result.normalized_input or '<empty>'}{reason}; expected {result.canonical_form}"


def to_json(data: Any) -> str:
    """JSON view of any value exposing ``to_dict()``."""
    return json.dumps(data.to_dict(), indent=2, ensure_ascii=False)
