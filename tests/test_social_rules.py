from pathlib import Path

from bs4 import BeautifulSoup

from siteprep.config import default_site_config
from siteprep.models import SocialConfig
from siteprep.pipeline import run_rule_set
from siteprep.social_rules import RULE_SET


def _meta(soup: BeautifulSoup, attr: str, key: str) -> str:
    tag = soup.find("meta", attrs={attr: key})
    return tag["content"] if tag is not None else None


def test_open_graph_and_twitter_tags(tmp_path: Path):
    site = default_site_config().model_copy(
        update={
            "social": SocialConfig(
                twitter_handle="@example",
                default_image="https://www.example.com/og.png",
                facebook_page="https://facebook.com/example",
            )
        }
    )
    page = tmp_path / "careers.html"
    page.write_text(
        "<html><head><title>Careers at Example</title>"
        "<meta name=\"description\" content=\"Join our team.\">"
        "</head><body></body></html>",
        encoding="utf-8",
    )

    run_rule_set(RULE_SET, tmp_path, site)

    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    assert _meta(soup, "property", "og:title") == "Careers at Example"
    assert _meta(soup, "property", "og:description") == "Join our team."
    assert _meta(soup, "property", "og:url") == "https://www.example.com/careers.html"
    assert _meta(soup, "property", "og:type") == "article"
    assert _meta(soup, "property", "og:image") == "https://www.example.com/og.png"
    assert _meta(soup, "property", "og:site_name") == "Example Organization"
    assert _meta(soup, "property", "article:publisher") == "https://facebook.com/example"
    assert _meta(soup, "name", "twitter:card") == "summary_large_image"
    assert _meta(soup, "name", "twitter:site") == "@example"
    assert _meta(soup, "name", "author") == "Example Organization"


def test_home_page_is_a_website_and_stale_tags_are_updated(tmp_path: Path):
    page = tmp_path / "index.html"
    page.write_text(
        "<html><head><title>Home of Example</title>"
        "<meta property=\"og:title\" content=\"Old title\">"
        "</head><body></body></html>",
        encoding="utf-8",
    )

    run_rule_set(RULE_SET, tmp_path, default_site_config())

    soup = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    assert _meta(soup, "property", "og:type") == "website"
    assert _meta(soup, "property", "og:title") == "Home of Example"
    assert len(soup.find_all("meta", attrs={"property": "og:title"})) == 1
    assert _meta(soup, "property", "og:image") is None
