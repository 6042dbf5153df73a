import json
from datetime import datetime, timezone
from pathlib import Path

from siteprep.reporting import FileOutcome, ScanReport, print_summary, write_reports
from siteprep.scoring import SECURITY_LEVELS, SECURITY_WEIGHTS


def _sample_report() -> ScanReport:
    report = ScanReport(
        report_type="security-scan",
        title="Security Scan Report",
        weights=SECURITY_WEIGHTS,
        levels=SECURITY_LEVELS,
        timestamp=datetime(2024, 5, 1, 12, 30, 15, 250000, tzinfo=timezone.utc),
    )
    report.vulnerability("Sensitive file exposed in public directory: .env")
    report.warning("Backup file found in public directory: old.bak")
    report.recommend("Custom error page missing: 404.html")
    report.ok("Security headers configured in .htaccess")
    report.outcomes.append(
        FileOutcome(filename="index.html", modified=True, issues_found=("title",))
    )
    return report


def test_score_and_summary():
    payload = _sample_report().to_dict()

    assert payload["score"] == 78
    assert payload["level"] == "FAIR"
    assert payload["summary"] == {
        "errors": 0,
        "vulnerabilities": 1,
        "warnings": 1,
        "recommendations": 1,
        "passed": 1,
        "files": 1,
        "modified": 1,
    }
    assert payload["files"] == [
        {"filename": "index.html", "modified": True, "issuesFound": ["title"], "errors": []}
    ]


def test_json_and_markdown_agree(tmp_path: Path):
    payload = _sample_report().to_dict()

    json_path, md_path = write_reports(payload, tmp_path / "reports")

    assert json_path.name == "security-scan-2024-05-01T12-30-15-250000+00-00.json"
    assert md_path.name == "security-scan-2024-05-01T12-30-15-250000+00-00.md"
    assert json.loads(json_path.read_text(encoding="utf-8")) == payload
    markdown = md_path.read_text(encoding="utf-8")
    assert markdown.startswith("# Security Scan Report\n")
    assert f"- Score: {payload['score']}/100 ({payload['level']})" in markdown
    assert "| vulnerabilities | 1 |" in markdown
    for item in payload["vulnerabilities"] + payload["warnings"] + payload["recommendations"]:
        assert f"- {item}" in markdown
    assert "| index.html | yes | title |  |" in markdown
    assert "## Errors" not in markdown


def test_print_summary(capsys):
    print_summary(_sample_report().to_dict())

    out = capsys.readouterr().out
    assert out.splitlines()[0] == "Security Scan Report: score 78/100 (FAIR)"
    assert "- Sensitive file exposed in public directory: .env" in out
