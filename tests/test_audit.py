from __future__ import annotations

import json
from pathlib import Path

from lexicon_oracle.audit import (
    AuditReport,
    AuditSummary,
    CaseRecord,
    build_markdown,
    run_audit,
    write_reports,
)
from lexicon_oracle.oracle import GenerationMode, PredictOptions


def test_run_audit_covers_every_seed_and_length(make_oracle) -> None:
    report = run_audit(
        make_oracle(),
        seeds=["tell of doom", ""],
        lengths=[2, 4],
        options=PredictOptions(mode=GenerationMode.RANKED),
    )
    assert [case.label for case in report.cases] == [
        "tell of doom @ 2",
        "tell of doom @ 4",
        "<empty> @ 2",
        "<empty> @ 4",
    ]
    assert report.summary == AuditSummary(total=4, passed=4, failed=0, pass_rate=100.0, fallbacks=0)
    assert report.cases[1].notes["text"] == "Tell of doom fate."


def test_run_audit_counts_fallbacks(make_oracle, scripted) -> None:
    report = run_audit(make_oracle(scripted("off script")), seeds=["doom"], lengths=[3])
    assert report.summary.passed == 1
    assert report.summary.fallbacks == 1
    assert report.cases[0].notes["mode"] == "sampled"


def test_reports_render_and_persist(tmp_path: Path) -> None:
    cases = (
        CaseRecord(label="doom @ 3", passed=True, notes={"text": "Doom fate glory."}),
        CaseRecord(label="spear @ 3", passed=False, notes={"outside": ["spear"]}),
    )
    report = AuditReport(summary=AuditSummary.from_cases(cases), cases=cases)
    markdown = build_markdown(report)
    assert markdown.splitlines() == [
        "# Lexicon Oracle Audit",
        "",
        "## Summary",
        "- **total**: 2",
        "- **passed**: 1",
        "- **failed**: 1",
        "- **pass_rate**: 50.0",
        "- **fallbacks**: 0",
        "",
        "## Cases",
        '- **doom @ 3** | PASS | {"text": "Doom fate glory."}',
        '- **spear @ 3** | FAIL | {"outside": ["spear"]}',
    ]
    json_path = tmp_path / "audit.json"
    md_path = tmp_path / "reports" / "audit.md"
    write_reports(report, json_path=json_path, markdown_path=md_path)
    data = json.loads(json_path.read_text(encoding="utf8"))
    assert data["summary"]["failed"] == 1
    assert data["cases"][1] == {"label": "spear @ 3", "passed": False, "notes": {"outside": ["spear"]}}
    assert md_path.read_text(encoding="utf8").rstrip("\n") == markdown
