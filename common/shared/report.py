"""
common.shared.report

Centralized reporting utilities for the build-support tools.

 - Timestamped CSV exports
 - Human-readable count summaries for console output
"""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from common.base.file_io import open_file
from common.base.fs import ensure_dir
from common.base.logging import get_logger

log = get_logger(__name__)


# ----------------------------------------------------------------------
# TIMESTAMPED FILENAMES
# ----------------------------------------------------------------------

def timestamped_filename(base_name: str, ext: str = "csv", output_dir: Optional[Path] = None) -> Path:
    """
    Generate a timestamped output filename (e.g., strclear_2025-10-06_103000.csv)
    """
    ts = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    name = f"{base_name}_{ts}.{ext}"
    output_dir = ensure_dir(output_dir or Path.cwd())
    return output_dir / name


# ----------------------------------------------------------------------
# CSV WRITERS
# ----------------------------------------------------------------------

def write_csv(
    data: List[Dict[str, Any]],
    output_path: Path,
    fieldnames: Optional[Sequence[str]] = None,
) -> Path:
    """
    Write structured data to a CSV file.
    """
    if not data:
        log.warning("No data provided for CSV export.")
        return output_path

    ensure_dir(output_path.parent)
    try:
        with open_file(output_path, "w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(fieldnames or data[0].keys()))
            writer.writeheader()
            writer.writerows(data)
    except OSError as e:
        log.error(f"Failed to write CSV report: {e}")
        raise
    log.debug(f"📊 CSV report saved → {output_path}")
    return output_path


def export_report(
    data: List[Dict[str, Any]],
    base_name: str,
    output_dir: Optional[Path] = None,
    fieldnames: Optional[Sequence[str]] = None,
) -> Optional[Path]:
    """
    Export report rows to one timestamped CSV file.

    Returns:
        Path of the written CSV, or None when there was nothing to export.
    """
    if not data:
        log.warning(f"No report data to export for '{base_name}'.")
        return None

    output_path = timestamped_filename(base_name, "csv", output_dir)
    write_csv(data, output_path, fieldnames=fieldnames)
    log.info(f"Report export completed for '{base_name}'")
    return output_path


# ----------------------------------------------------------------------
# HUMAN-READABLE SUMMARY
# ----------------------------------------------------------------------

def summarize_counts(title: str, summary: Mapping[str, int]) -> str:
    """
    Return a formatted, human-readable summary string.
    Example:
        summarize_counts("Scrub Summary", {"Cleared": 12, "Failed": 3})
    """
    lines = [f"===== {title.upper()} ====="]
    for key, val in summary.items():
        lines.append(f"{key}: {val}")
    lines.append("=" * (len(title) + 12))
    return "\n".join(lines)
