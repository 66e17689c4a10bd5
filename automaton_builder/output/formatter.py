"""Output formatting for validation results, runs and layouts."""

import json
from typing import Literal

from ..automaton.projector import RunnableAutomaton
from ..automaton.runner import DFARunner
from ..layout.geometry import ArrowGeometry
from ..validators.base import Severity, ValidationIssue, ValidationResult

OutputFormat = Literal["text", "json"]


def format_validation_result(
    result: ValidationResult,
    format: OutputFormat = "text",
) -> str:
    """Format a validation result for output.

    Args:
        result: The validation result to format.
        format: Output format ("text" or "json").

    Returns:
        Formatted string representation.
    """
    if format == "json":
        return _format_json(result)
    return _format_text(result)


def _format_text(result: ValidationResult) -> str:
    """Format result as human-readable text."""
    lines: list[str] = []

    errors = result.errors
    warnings = result.warnings

    lines.append("ERRORS:")
    if errors:
        for issue in errors:
            lines.append(f"  {_format_issue_text(issue)}")
    else:
        lines.append("  (none)")

    lines.append("")

    lines.append("WARNINGS:")
    if warnings:
        for issue in warnings:
            lines.append(f"  {_format_issue_text(issue)}")
    else:
        lines.append("  (none)")

    lines.append("")
    if result.is_valid:
        if warnings:
            lines.append(f"Valid DFA with {len(warnings)} warning(s)")
        else:
            lines.append("Valid DFA")
    else:
        lines.append(f"Invalid DFA: {len(errors)} error(s), {len(warnings)} warning(s)")

    return "\n".join(lines)


def _format_issue_text(issue: ValidationIssue) -> str:
    """Format a single issue as text."""
    location = f"{issue.location} " if issue.location else ""
    symbol = "✘" if issue.severity == Severity.ERROR else "⚠"

    return f"{symbol} {issue.code}: {location}{issue.message}"


def _format_json(result: ValidationResult) -> str:
    data = {
        "valid": result.is_valid,
        "error_count": len(result.errors),
        "warning_count": len(result.warnings),
        "issues": [
            {
                "code": issue.code,
                "message": issue.message,
                "severity": issue.severity.value,
                "state": issue.state,
                "symbol": issue.symbol,
                "details": issue.details,
            }
            for issue in result.issues
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_run_result(runner: DFARunner, format: OutputFormat = "text") -> str:
    """Format a finished run: its status and the states it passed through."""
    if format == "json":
        return json.dumps(
            {
                "status": runner.status.value,
                "input": runner.input,
                "path": runner.path,
                "consumed": runner.position,
            },
            indent=2,
            ensure_ascii=False,
        )

    lines = [f"Status: {runner.status.value}"]
    if runner.path:
        lines.append(f"Path: {' -> '.join(runner.path)}")
    if runner.remaining and runner.path:
        lines.append(f"Stopped with {len(runner.remaining)} symbol(s) unread")
    return "\n".join(lines)


def format_layout(geometries: dict[str, ArrowGeometry]) -> str:
    """Format arrow geometry as JSON, keyed by transition id."""
    return json.dumps(
        {tid: geometry.to_dict() for tid, geometry in geometries.items()},
        indent=2,
        ensure_ascii=False,
    )


def format_automaton_summary(automaton: RunnableAutomaton) -> str:
    """Summarize a projected automaton as text."""
    accept = ", ".join(str(a) for a in automaton.accept) or "(none)"
    lines = [
        f"States: {len(automaton.states)}",
        f"Alphabet: {', '.join(repr(s) for s in automaton.alphabet) or '(empty)'}",
        f"Start state: {automaton.start or '(none)'}",
        f"Accept states: {accept}",
        f"Transitions: {len(automaton.transitions)}",
    ]
    if automaton.epsilon_transitions:
        lines.append(f"ε-transitions: {len(automaton.epsilon_transitions)}")
    for t in automaton.transitions:
        lines.append(f"  {t.source} --{t.symbol}--> {t.dest}")
    return "\n".join(lines)
