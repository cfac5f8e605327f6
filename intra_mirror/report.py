"""
Report Generator
================
Renders the end-of-run report and writes it next to the mirrored tree.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .monitor import RunStats

logger = logging.getLogger(__name__)

REPORT_FILENAME = "report.txt"


def format_duration(elapsed_sec: float) -> str:
    """``"3m 7s"`` when at least a minute elapsed, else ``"42s"``."""
    total = int(elapsed_sec)
    minutes, seconds = divmod(total, 60)
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extension_lines(stats: RunStats) -> List[str]:
    # sorted() is stable: ties keep first-seen order
    ordered = sorted(stats.extension_histogram.items(), key=lambda kv: kv[1], reverse=True)
    return [f"  {ext}: {count}" for ext, count in ordered]


def render_report(stats: RunStats, elapsed_sec: float,
                  generated_at: Optional[datetime] = None) -> str:
    """Render the fixed-format scraping report."""
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        "=== Scraping Report ===",
        f"Date: {format_timestamp(generated_at)}",
        f"Duration: {format_duration(elapsed_sec)}",
        "",
        f"Tenants: {stats.tenant_count}",
        f"Activities: {stats.activity_count}",
        f"Files: {stats.file_count}",
        "",
        "By extension:",
        *extension_lines(stats),
    ]
    return "\n".join(lines)


def write_report(output_dir: Path, report: str) -> Path:
    path = Path(output_dir) / REPORT_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report, encoding="utf-8")
    logger.info(f"[REPORT] Written to {path}")
    return path
