"""
scrub.report

Console summary and CSV export of a drained ledger.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from common.shared.report import export_report

from .ledger import ResultKind, ScrubResult, TallyLedger
from .options import ScrubOptions, format_clear_byte
from .targets import TargetSet

REPORT_FIELDS = ["path", "result", "count", "error", "detail"]


def result_line(path: str, result: ScrubResult) -> Optional[str]:
    """One summary line per file; None for files that were unchanged or skipped."""
    if result.is_error:
        return f"{path}: error ({result.error}) {result.detail}"
    if not result.changed:
        return None
    if result.kind is ResultKind.CLEARED:
        return f"{path}: cleared {result.count} instances"
    return f"{path}: replaced {result.count} instances"


def summary_lines(
    ledger: TallyLedger,
    original_target: str,
    targets: TargetSet,
    options: ScrubOptions,
    *,
    path_mode: bool = False,
) -> List[str]:
    per_file = [line for line in (result_line(p, r) for p, r in ledger.items()) if line]
    if not per_file:
        return ["No matches found"]

    lines = ["Summary:", f"    Original target string: {original_target}"]
    if path_mode:
        lines.append("    Expanded path targets: ")
        lines.extend(f"                  : {t}" for t in targets if t != original_target)
    if options.clear_byte != 0:
        lines.append(f"            Clear char: {format_clear_byte(options.clear_byte)}")
    if options.replacement:
        lines.append(f"    Replacement string: {options.replacement}")
    lines.append("----------Processed Paths-------")
    lines.extend(per_file)
    return lines


def ledger_rows(ledger: TallyLedger) -> List[Dict[str, object]]:
    return [
        {
            "path": path,
            "result": result.kind.value,
            "count": result.count,
            "error": result.error or "",
            "detail": result.detail,
        }
        for path, result in ledger.items()
    ]


def export_ledger(ledger: TallyLedger, output_dir: Path, base_name: str = "strclear") -> Optional[Path]:
    return export_report(ledger_rows(ledger), base_name, output_dir=output_dir, fieldnames=REPORT_FIELDS)
