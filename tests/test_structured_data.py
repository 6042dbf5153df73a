import json
from pathlib import Path

from bs4 import BeautifulSoup

from siteprep.config import load_site_config
from siteprep.pipeline import FileIdentity, run_rule_set
from siteprep.structured_data import LD_JSON, RULE_SET, schemas_for

SITE_YAML = Path(__file__).resolve().parents[1] / "config" / "site.yaml"


def _types(schemas):
    return [schema["@type"] for schema in schemas]


def _identity(tmp_path: Path, filename: str) -> FileIdentity:
    return FileIdentity(
        filename=filename,
        path=tmp_path / filename,
        root=tmp_path,
        site=load_site_config(SITE_YAML),
    )


def test_schema_selection_by_filename(tmp_path: Path):
    assert _types(schemas_for(_identity(tmp_path, "index.html"))) == ["Organization", "WebSite"]
    assert _types(schemas_for(_identity(tmp_path, "contact.html"))) == [
        "Organization",
        "ContactPage",
    ]
    assert _types(schemas_for(_identity(tmp_path, "company-profile.html"))) == [
        "Organization",
        "AboutPage",
    ]
    assert _types(schemas_for(_identity(tmp_path, "hr-services-in-mumbai.html"))) == [
        "LocalBusiness"
    ]
    assert _types(schemas_for(_identity(tmp_path, "payroll-outsourcing.html"))) == ["Service"]
    assert schemas_for(_identity(tmp_path, "blog.html")) == []


def test_local_business_uses_matched_location(tmp_path: Path):
    (schema,) = schemas_for(_identity(tmp_path, "noida-office.html"))

    assert schema["name"].endswith("Noida Office")
    assert schema["address"]["postalCode"] == "201309"
    assert schema["geo"]["latitude"] == "28.6139"


def test_json_ld_replaced_once(tmp_path: Path):
    page = tmp_path / "index.html"
    page.write_text(
        "<html><head><title>Home</title>"
        f"<script type=\"{LD_JSON}\">{{\"@type\": \"Thing\"}}</script>"
        "</head><body></body></html>",
        encoding="utf-8",
    )
    site = load_site_config(SITE_YAML)

    first = run_rule_set(RULE_SET, tmp_path, site)
    second = run_rule_set(RULE_SET, tmp_path, site)

    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    payloads = [json.loads(script.string) for script in soup.find_all("script", type=LD_JSON)]
    assert _types(payloads) == ["Organization", "WebSite"]
    assert payloads[0]["name"] == "Stone OnePoint Solutions Pvt. Ltd."
    assert len(payloads[0]["address"]) == 5
    assert first.outcomes[0].modified is True
    assert second.outcomes[0].modified is False
