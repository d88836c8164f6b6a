"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable

import pandas as pd

from .installer import InstallContext
from .models import InstallEvent


logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["name", "requested", "resolved", "outcome", "previous", "detail"]


def print_summary(context: InstallContext) -> None:
    counts = Counter(event.outcome.value for event in context.events)
    logger.info("=" * 60)
    logger.info("INSTALL SUMMARY")
    logger.info("=" * 60)
    for entry in sorted(context.installed, key=lambda e: e.name):
        logger.info("  %s@%s (requested %s)", entry.name, entry.version, entry.requested)
    logger.info("-" * 60)
    logger.info("Packages on disk: %s", len(context.installed))
    for outcome, count in sorted(counts.items()):
        logger.info("%s: %s", outcome, count)
    logger.info("=" * 60)


def events_frame(events: Iterable[InstallEvent]) -> pd.DataFrame:
    rows = [
        {
            "name": e.name,
            "requested": e.requested,
            "resolved": e.resolved,
            "outcome": e.outcome.value,
            "previous": e.previous,
            "detail": e.detail,
        }
        for e in events
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def export_install_report(context: InstallContext, report_file: Path) -> Path:
    report_file = Path(report_file)
    report_file.parent.mkdir(parents=True, exist_ok=True)
    events_frame(context.events).to_csv(report_file, index=False)
    return report_file


def save_installed_json(context: InstallContext, output_file: Path) -> Path:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w') as f:
        json.dump(context.installed.as_dict(), f, indent=2)
    return output_file
