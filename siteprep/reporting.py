"""Report objects and their JSON, Markdown and console renderings.

Every output is produced from ``ScanReport.to_dict()`` so the JSON file, the
Markdown file and the console summary can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from .io_utils import ensure_dir, report_stamp, write_json_stable
from .rendering import render
from .scoring import VALIDATION_LEVELS, VALIDATION_WEIGHTS, LevelTable, penalty_score

FINDING_KINDS = ("errors", "vulnerabilities", "warnings", "recommendations")

SECTION_HEADINGS = (
    ("errors", "Errors"),
    ("vulnerabilities", "Vulnerabilities"),
    ("warnings", "Warnings"),
    ("recommendations", "Recommendations"),
    ("passed", "Passed Checks"),
)


@dataclass(frozen=True)
class FileOutcome:
    """Result of running one rule set against one file."""

    filename: str
    modified: bool
    issues_found: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "modified": self.modified,
            "issuesFound": list(self.issues_found),
            "errors": list(self.errors),
        }


@dataclass
class ScanReport:
    report_type: str
    title: str
    weights: Mapping[str, int] = field(default_factory=lambda: dict(VALIDATION_WEIGHTS))
    levels: LevelTable = VALIDATION_LEVELS
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    passed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    vulnerabilities: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    outcomes: List[FileOutcome] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    def ok(self, message: str) -> None:
        self.passed.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def vulnerability(self, message: str) -> None:
        self.vulnerabilities.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def recommend(self, message: str) -> None:
        self.recommendations.append(message)

    @property
    def counts(self) -> Dict[str, int]:
        return {kind: len(getattr(self, kind)) for kind in FINDING_KINDS}

    @property
    def score(self) -> int:
        return penalty_score(self.counts, self.weights)

    @property
    def level(self) -> str:
        return self.levels.classify(self.score)

    def to_dict(self) -> Dict[str, Any]:
        summary = dict(self.counts)
        summary["passed"] = len(self.passed)
        if self.outcomes:
            summary["files"] = len(self.outcomes)
            summary["modified"] = sum(1 for outcome in self.outcomes if outcome.modified)
        return {
            "reportType": self.report_type,
            "title": self.title,
            "timestamp": self.timestamp.isoformat(),
            "score": self.score,
            "level": self.level,
            "summary": summary,
            "passed": list(self.passed),
            "errors": list(self.errors),
            "vulnerabilities": list(self.vulnerabilities),
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
            "files": [outcome.to_dict() for outcome in self.outcomes],
            "details": self.details,
        }


def render_markdown(payload: Mapping[str, Any], template: str = "report.md") -> str:
    return render(template, report=payload, sections=SECTION_HEADINGS)


def write_reports(
    payload: Mapping[str, Any],
    output_dir: Path,
    *,
    template: str = "report.md",
) -> Tuple[Path, Path]:
    """Write ``{reportType}-{stamp}.json`` and the matching ``.md`` file.

    The stamp is derived from the payload timestamp so both names match it.
    """

    ensure_dir(output_dir)
    stamp = report_stamp(datetime.fromisoformat(payload["timestamp"]))
    stem = f"{payload['reportType']}-{stamp}"
    json_path = write_json_stable(output_dir / f"{stem}.json", payload)
    md_path = output_dir / f"{stem}.md"
    md_path.write_text(render_markdown(payload, template), encoding="utf-8")
    return json_path, md_path


def print_summary(payload: Mapping[str, Any], *, limit: int = 10) -> None:
    print(f"{payload['title']}: score {payload['score']}/100 ({payload['level']})")
    summary = payload["summary"]
    print("  " + ", ".join(f"{kind}={summary[kind]}" for kind in sorted(summary)))
    for kind in ("errors", "vulnerabilities"):
        items = payload[kind]
        if not items:
            continue
        print(f"Top {kind}:")
        for item in items[:limit]:
            print(f"- {item}")
        if len(items) > limit:
            print(f"  ... {len(items) - limit} more")


__all__ = [
    "FINDING_KINDS",
    "FileOutcome",
    "ScanReport",
    "print_summary",
    "render_markdown",
    "write_reports",
]
