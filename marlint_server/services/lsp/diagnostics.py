"""
Translation of linter reports into LSP diagnostics.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from lsprotocol import types

from marlint_server.config.settings import config
from marlint_server.utils.file_utils import offset_to_position


@dataclass
class QuickFix:
    """A replacement offered by the linter for one diagnostic."""

    diagnostic: types.Diagnostic
    rule_id: Optional[str]
    range: types.Range
    text: str


def problem_to_diagnostic(
    problem: Dict[str, Any], source: Optional[str] = None
) -> types.Diagnostic:
    """
    Convert one report message into a diagnostic.

    The range is a single point at the reported line and column; the linter's
    1-based coordinates become 0-based LSP positions.
    """
    rule_id = problem.get("ruleId")
    message = problem.get("message", "")
    if rule_id is not None:
        message = f"{message} ({rule_id})"

    severity = (
        types.DiagnosticSeverity.Error
        if problem.get("severity") == 2
        else types.DiagnosticSeverity.Warning
    )

    line = max(int(problem.get("line") or 1) - 1, 0)
    character = max(int(problem.get("column") or 1) - 1, 0)
    position = types.Position(line=line, character=character)

    return types.Diagnostic(
        range=types.Range(start=position, end=position),
        message=message,
        severity=severity,
        code=rule_id,
        source=source or config.linter.source_name,
    )


def _quick_fix(
    problem: Dict[str, Any], diagnostic: types.Diagnostic, text: str
) -> Optional[QuickFix]:
    fix = problem.get("fix")
    if not isinstance(fix, dict):
        return None

    offsets = fix.get("range")
    if (
        not isinstance(offsets, (list, tuple))
        or len(offsets) != 2
        or not all(isinstance(o, int) for o in offsets)
    ):
        logger.debug(f"Ignoring malformed fix for rule {problem.get('ruleId')}: {fix}")
        return None

    start_offset, end_offset = offsets
    start_line, start_char = offset_to_position(text, start_offset)
    end_line, end_char = offset_to_position(text, end_offset)
    return QuickFix(
        diagnostic=diagnostic,
        rule_id=problem.get("ruleId"),
        range=types.Range(
            start=types.Position(line=start_line, character=start_char),
            end=types.Position(line=end_line, character=end_char),
        ),
        text=fix.get("text", ""),
    )


def translate_report(
    report: Dict[str, Any],
    text: str = "",
    show_warnings: bool = True,
    source: Optional[str] = None,
) -> Tuple[List[types.Diagnostic], List[QuickFix]]:
    """
    Translate a lint report for a single file.

    Only ``results[0]`` is consumed; the report was produced for one text.

    Args:
        report: Report returned by the linting module
        text: The linted source, needed to place fix offsets
        show_warnings: When False, severity 1 messages are dropped
        source: Diagnostic source name

    Returns:
        The diagnostics and the quick fixes attached to them
    """
    results = report.get("results") or []
    if not results:
        return [], []

    diagnostics = []
    fixes = []
    for problem in results[0].get("messages") or []:
        if not show_warnings and problem.get("severity") != 2:
            continue

        diagnostic = problem_to_diagnostic(problem, source)
        diagnostics.append(diagnostic)

        quick_fix = _quick_fix(problem, diagnostic, text)
        if quick_fix is not None:
            fixes.append(quick_fix)

    return diagnostics, fixes


def same_problem(a: types.Diagnostic, b: types.Diagnostic) -> bool:
    """Match a diagnostic echoed back by the editor with one we published."""
    return (
        a.range.start == b.range.start
        and a.code == b.code
        and a.message == b.message
    )
