"""Deployment checklist: pre-deployment, security, optional live checks, report."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import requests

from . import postdeploy, predeploy, security_scan
from .io_utils import warn
from .models import SiteConfig
from .reporting import ScanReport, write_reports
from .scoring import CHECKLIST_LEVELS, weighted_average

READY_MIN_SCORE = 70


class PhaseStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


PHASE_WEIGHTS: Dict[str, float] = {
    "PRE_DEPLOYMENT": 0.4,
    "SECURITY": 0.4,
    "POST_DEPLOYMENT": 0.2,
}

CHECKLIST_ITEMS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "PRE_DEPLOYMENT": (
        ("structure", "File structure"),
        ("security_headers", "Security headers configured"),
        ("https_enforcement", "HTTPS enforcement"),
        ("seo_optimization", "SEO optimization"),
        ("accessibility", "Accessibility"),
        ("performance", "Performance optimization"),
        ("configuration", "Server configuration files"),
    ),
    "SECURITY": (
        ("file_permissions", "No sensitive or development files"),
        ("server_config", "Server configuration hardened"),
        ("content_security", "Content security"),
        ("form_security", "Form security"),
        ("external_resources", "Trusted external resources"),
        ("vulnerability_scan", "Vulnerability scan"),
    ),
    "POST_DEPLOYMENT": (
        ("connectivity", "Site connectivity"),
        ("security_headers_live", "Live security headers"),
        ("https_redirect", "HTTP to HTTPS redirect"),
        ("page_loading", "Page loading"),
        ("seo_elements_live", "Live SEO elements"),
        ("forms_functionality", "Contact form"),
        ("assets_loading", "Asset loading"),
    ),
}


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    name: str
    required: bool
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "required": self.required, "status": self.status}


def _item_status(status: PhaseStatus) -> str:
    if status is PhaseStatus.PASS:
        return "passed"
    if status is PhaseStatus.FAIL:
        return "failed"
    return "pending"


def checklist_items(phase: str, status: PhaseStatus) -> List[ChecklistItem]:
    return [
        ChecklistItem(id=item_id, name=name, required=True, status=_item_status(status))
        for item_id, name in CHECKLIST_ITEMS.get(phase, ())
    ]


@dataclass
class PhaseResult:
    phase: str
    status: PhaseStatus
    score: int = 0
    report: Optional[ScanReport] = None
    error: Optional[str] = None

    @property
    def items(self) -> List[ChecklistItem]:
        return checklist_items(self.phase, self.status)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "phase": self.phase,
            "status": self.status.value,
            "score": self.score,
            "items": [item.to_dict() for item in self.items],
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.report is not None:
            payload["report"] = self.report.to_dict()
        return payload


def _unique(items: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


@dataclass
class ChecklistResult:
    environment: str
    url: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    phases: List[PhaseResult] = field(default_factory=list)

    def phase(self, name: str) -> Optional[PhaseResult]:
        for result in self.phases:
            if result.phase == name:
                return result
        return None

    @property
    def scored_phases(self) -> List[PhaseResult]:
        return [
            result
            for result in self.phases
            if result.phase in PHASE_WEIGHTS
            and result.status in (PhaseStatus.PASS, PhaseStatus.FAIL)
        ]

    @property
    def score(self) -> int:
        return weighted_average(
            [(result.score, PHASE_WEIGHTS[result.phase]) for result in self.scored_phases]
        )

    @property
    def has_failures(self) -> bool:
        return any(result.status is PhaseStatus.FAIL for result in self.phases)

    @property
    def status(self) -> str:
        if self.has_failures:
            return "CRITICAL_ISSUES"
        return CHECKLIST_LEVELS.classify(self.score)

    @property
    def ready_for_deployment(self) -> bool:
        return not self.has_failures and self.score >= READY_MIN_SCORE

    def _collect(self, *kinds: str) -> List[str]:
        return _unique(
            item
            for result in self.phases
            if result.report is not None
            for kind in kinds
            for item in getattr(result.report, kind)
        )

    @property
    def critical_issues(self) -> List[str]:
        errors = [f"{result.phase}: {result.error}" for result in self.phases if result.error]
        return _unique(errors + self._collect("errors", "vulnerabilities"))

    @property
    def warnings(self) -> List[str]:
        return self._collect("warnings")

    @property
    def recommendations(self) -> List[str]:
        return self._collect("recommendations")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reportType": "deployment-validation-checklist",
            "title": "Deployment Validation Checklist",
            "timestamp": self.timestamp.isoformat(),
            "environment": self.environment,
            "url": self.url,
            "score": self.score,
            "status": self.status,
            "readyForDeployment": self.ready_for_deployment,
            "phases": [result.to_dict() for result in self.phases],
            "criticalIssues": self.critical_issues,
            "warnings": self.warnings,
            "recommendations": self.recommendations,
        }


def run_phase(
    name: str,
    check: Callable[[], ScanReport],
    passes: Callable[[ScanReport], bool],
) -> PhaseResult:
    """Run one phase; any exception turns into an ERROR phase with score 0."""

    print(f"[checklist] {name}")
    try:
        report = check()
    except Exception as exc:
        message = f"{type(exc).__name__}: {exc}"
        warn(f"  {name} failed: {message}")
        return PhaseResult(phase=name, status=PhaseStatus.ERROR, error=message)
    status = PhaseStatus.PASS if passes(report) else PhaseStatus.FAIL
    print(f"  {status.value} (score {report.score})")
    return PhaseResult(phase=name, status=status, score=report.score, report=report)


def run_checklist(
    public_dir: Path,
    config_dir: Path,
    site: SiteConfig,
    *,
    url: Optional[str] = None,
    environment: str = "production",
    skip_post: bool = False,
    output_dir: Optional[Path] = None,
    session: Optional[requests.Session] = None,
) -> ChecklistResult:
    result = ChecklistResult(environment=environment, url=url)

    result.phases.append(
        run_phase(
            "PRE_DEPLOYMENT",
            lambda: predeploy.validate(public_dir, config_dir, site),
            predeploy.is_ready,
        )
    )
    result.phases.append(
        run_phase(
            "SECURITY",
            lambda: security_scan.scan(public_dir, config_dir, site),
            security_scan.is_secure,
        )
    )
    if url and not skip_post:
        result.phases.append(
            run_phase(
                "POST_DEPLOYMENT",
                lambda: postdeploy.verify(url, site, session=session),
                postdeploy.is_healthy,
            )
        )
    else:
        result.phases.append(PhaseResult(phase="POST_DEPLOYMENT", status=PhaseStatus.SKIPPED))

    if output_dir is None:
        result.phases.append(PhaseResult(phase="REPORT", status=PhaseStatus.SKIPPED))
        return result

    print("[checklist] REPORT")
    try:
        json_path, md_path = write_reports(
            result.to_dict(), Path(output_dir), template="checklist.md"
        )
    except OSError as exc:
        message = f"{type(exc).__name__}: {exc}"
        warn(f"  REPORT failed: {message}")
        result.phases.append(PhaseResult(phase="REPORT", status=PhaseStatus.ERROR, error=message))
        return result
    print(f"  wrote {json_path}")
    print(f"  wrote {md_path}")
    result.phases.append(PhaseResult(phase="REPORT", status=PhaseStatus.PASS, score=100))
    return result


def print_checklist(payload: Dict[str, Any]) -> None:
    print(f"{payload['title']} ({payload['environment']})")
    for phase in payload["phases"]:
        print(f"  {phase['phase']}: {phase['status']} (score {phase['score']})")
    print(f"Overall score: {payload['score']}/100 ({payload['status']})")
    print(f"Ready for deployment: {'yes' if payload['readyForDeployment'] else 'no'}")
    for issue in payload["criticalIssues"][:10]:
        print(f"- {issue}")


__all__ = [
    "CHECKLIST_ITEMS",
    "ChecklistItem",
    "ChecklistResult",
    "PHASE_WEIGHTS",
    "PhaseResult",
    "PhaseStatus",
    "print_checklist",
    "run_checklist",
    "run_phase",
]
