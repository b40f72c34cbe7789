# SPDX-License-Identifier: Apache-2.0
"""Batch checks that oracle output stays inside its vocabulary.

An audit runs a grid of seed phrases and lengths through
:meth:`Oracle.predict` and records, per case, whether every produced token is
a dictionary word or a word of the seed. The Markdown and JSON rendering lives
here so the CLI only needs to feed Python data structures.
"""

from __future__ import annotations

import json
from collections import abc
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from .logging import get_logger
from .oracle import Oracle, PredictOptions
from .utils import save_text, tokenize

LOGGER = get_logger(__name__)

DEFAULT_SEEDS = ("prophecy", "tell of doom")
DEFAULT_LENGTHS = (3, 6, 12)


@dataclass(frozen=True)
class CaseRecord:
    """Individual audit result."""

    label: str
    passed: bool
    notes: abc.Mapping[str, Any] = field(default_factory=dict)

    def status_text(self) -> str:
        """Return the Markdown-friendly status string."""

        return "PASS" if self.passed else "FAIL"


@dataclass(frozen=True)
class AuditSummary:
    """Aggregate metrics for an audit."""

    total: int
    passed: int
    failed: int
    pass_rate: float
    fallbacks: int = 0

    @classmethod
    def from_cases(cls, cases: abc.Sequence[CaseRecord]) -> AuditSummary:
        total = len(cases)
        passed = sum(1 for case in cases if case.passed)
        fallbacks = sum(1 for case in cases if case.notes.get("warning"))
        pass_rate = round(100.0 * passed / total, 1) if total else 0.0
        return cls(total=total, passed=passed, failed=total - passed, pass_rate=pass_rate, fallbacks=fallbacks)


@dataclass(frozen=True)
class AuditReport:
    summary: AuditSummary
    cases: tuple[CaseRecord, ...]


def audit_case(oracle: Oracle, seed: str, options: PredictOptions) -> CaseRecord:
    """Run one prediction and check its tokens against the vocabulary and seed."""

    label = f"{seed or '<empty>'} @ {options.resolved_length()}"
    result = oracle.predict(seed, options)
    seed_words = set(tokenize(seed))
    outside = [token for token in result.tokens if token not in oracle.vocabulary and token not in seed_words]
    notes: dict[str, Any] = {
        "text": result.text,
        "mode": result.mode.value,
        "count": len(result.tokens),
    }
    if outside:
        notes["outside"] = outside
    if result.warning:
        notes["warning"] = result.warning
    return CaseRecord(label=label, passed=bool(result.tokens) and not outside, notes=notes)


def run_audit(
    oracle: Oracle,
    seeds: abc.Iterable[str] = DEFAULT_SEEDS,
    lengths: abc.Iterable[int] = DEFAULT_LENGTHS,
    options: Optional[PredictOptions] = None,
) -> AuditReport:
    """Predict every ``seed`` at every ``length`` and summarise the results."""

    base = options or oracle.default_options()
    lengths = list(lengths)
    cases: list[CaseRecord] = []
    for seed in seeds:
        for length in lengths:
            case = audit_case(oracle, seed, replace(base, length=length))
            LOGGER.info("%s %s", case.status_text(), case.label)
            cases.append(case)
    return AuditReport(summary=AuditSummary.from_cases(cases), cases=tuple(cases))


def _summary_lines(summary: AuditSummary) -> list[str]:
    """Create Markdown bullet points for the summary section."""

    return [f"- **{name}**: {value}" for name, value in asdict(summary).items()]


def _case_lines(cases: abc.Sequence[CaseRecord]) -> list[str]:
    """Create Markdown bullet points for each audit case."""

    lines: list[str] = []
    for case in cases:
        if not isinstance(case, CaseRecord):
            raise TypeError("each case must be a CaseRecord instance")
        lines.append(f"- **{case.label}** | {case.status_text()} | {json.dumps(dict(case.notes), ensure_ascii=False)}")
    return lines


def build_markdown(report: AuditReport) -> str:
    """Compose the Markdown document for an audit."""

    lines = ["# Lexicon Oracle Audit", "", "## Summary"]
    lines.extend(_summary_lines(report.summary))
    lines.append("")
    lines.append("## Cases")
    lines.extend(_case_lines(report.cases))
    return "\n".join(lines)


def build_json(report: AuditReport) -> str:
    """Compose the JSON document for an audit."""

    payload = {
        "summary": asdict(report.summary),
        "cases": [
            {"label": case.label, "passed": case.passed, "notes": dict(case.notes)} for case in report.cases
        ],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_reports(
    report: AuditReport,
    *,
    json_path: Optional[Path] = None,
    markdown_path: Optional[Path] = None,
) -> None:
    """Persist the audit reports to disk."""

    if json_path is not None:
        save_text(Path(json_path), build_json(report) + "\n")
        LOGGER.info("Wrote audit JSON to %s", json_path)
    if markdown_path is not None:
        save_text(Path(markdown_path), build_markdown(report) + "\n")
        LOGGER.info("Wrote audit Markdown to %s", markdown_path)


__all__ = [
    "AuditReport",
    "AuditSummary",
    "CaseRecord",
    "audit_case",
    "build_json",
    "build_markdown",
    "run_audit",
    "write_reports",
]
