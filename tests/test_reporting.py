from pathlib import Path

import pandas as pd

from minipm.installer import InstallContext
from minipm.models import InstallEvent, InstallOutcome
from minipm.reporting import (
    events_frame,
    export_install_report,
    print_summary,
    save_installed_json,
)


def make_context() -> InstallContext:
    context = InstallContext()
    context.installed.record("a", "^1.0.0", "1.2.0")
    context.log_event(InstallEvent("a", "^1.0.0", "1.2.0", InstallOutcome.INSTALLED))
    context.log_event(InstallEvent(
        "a", "~1.0.0", "1.0.3", InstallOutcome.NEWER_INSTALLED, previous="1.2.0",
    ))
    return context


def test_events_frame_columns():
    df = events_frame(make_context().events)

    assert list(df.columns) == ["name", "requested", "resolved", "outcome", "previous", "detail"]
    assert df["outcome"].tolist() == ["installed", "newer_installed"]


def test_events_frame_empty():
    df = events_frame([])
    assert df.empty


def test_reporting_exports(tmp_path: Path):
    context = make_context()
    output_dir = tmp_path / "out"

    report_file = export_install_report(context, output_dir / "report.csv")
    json_file = save_installed_json(context, output_dir / "installed.json")

    assert report_file.exists()
    assert json_file.read_text().strip().startswith("{")
    assert len(pd.read_csv(report_file)) == 2


def test_print_summary_logs_packages(caplog):
    with caplog.at_level("INFO"):
        print_summary(make_context())

    assert "a@1.2.0 (requested ^1.0.0)" in caplog.text
    assert "newer_installed: 1" in caplog.text
