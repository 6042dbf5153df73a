from pathlib import Path

import pytest

from siteprep.config import (
    SiteConfigError,
    default_site_config,
    load_site_config,
    resolve_site_config,
)

SITE_YAML = Path(__file__).resolve().parents[1] / "config" / "site.yaml"


def test_shipped_site_config_loads():
    site = load_site_config(SITE_YAML)

    assert site.organization.name == "Stone OnePoint Solutions Pvt. Ltd."
    assert site.organization.base_url == "https://www.stoneonepointsolutions.in"
    assert site.page("contact.html").h1 == "Contact Stone OnePoint Solutions"
    assert site.sitemap_rule("index.html").priority == "1.0"
    assert site.sitemap_rule("unknown.html").priority == "0.6"
    assert len(site.company.locations) == 5
    assert site.social.twitter_handle == "@stoneonepointsolutions"
    assert site.site_name == "Stone OnePoint Solutions Pvt. Ltd."


def test_camel_case_and_trailing_slash(tmp_path: Path):
    path = tmp_path / "site.yaml"
    path.write_text(
        "organization:\n  name: Acme\n  baseUrl: https://acme.test/\n"
        "excludePatterns: ['^draft-']\n"
        "recursive: true\n",
        encoding="utf-8",
    )

    site = load_site_config(path)

    assert site.organization.base_url == "https://acme.test"
    assert site.exclude_patterns == ["^draft-"]
    assert site.recursive is True


@pytest.mark.parametrize(
    "content",
    [
        "organization: [unclosed",
        "- just\n- a list\n",
        "organization:\n  name: Missing base url\n",
        "organization:\n  name: Acme\n  baseUrl: https://acme.test\nrecursive: maybe\n",
    ],
)
def test_invalid_configs_raise(tmp_path: Path, content: str):
    path = tmp_path / "site.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(SiteConfigError):
        load_site_config(path)


def test_missing_explicit_config_raises(tmp_path: Path):
    with pytest.raises(SiteConfigError):
        resolve_site_config(str(tmp_path / "nope.yaml"))


def test_defaults_when_no_config(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert resolve_site_config(None) == default_site_config()
