from pathlib import Path

from bs4 import BeautifulSoup

from siteprep.a11y_rules import DECORATIVE_ALT, RULE_SET
from siteprep.config import default_site_config
from siteprep.models import AccessibilityConfig
from siteprep.pipeline import run_rule_set
from siteprep.shared_assets import ACCESSIBILITY_STYLESHEET


def _run(tmp_path: Path, body: str, site=None) -> BeautifulSoup:
    page = tmp_path / "services.html"
    page.write_text(
        f"<!DOCTYPE html><html><head><title>Services page</title></head><body>{body}</body></html>",
        encoding="utf-8",
    )
    report = run_rule_set(RULE_SET, tmp_path, site or default_site_config())
    assert not report.errors
    return BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")


def test_skip_navigation_and_landmarks(tmp_path: Path):
    soup = _run(tmp_path, "<header></header><nav></nav><main><p>x</p></main><footer></footer>")

    skip = soup.body.contents[0]
    assert "skip-navigation" in skip["class"]
    assert [a["href"] for a in skip.find_all("a")] == ["#main-content", "#navigation", "#footer"]
    assert soup.main["id"] == "main-content"
    assert soup.main["role"] == "main"
    assert soup.header["role"] == "banner"
    assert soup.footer["role"] == "contentinfo"
    assert soup.nav["aria-label"] == "Main navigation"


def test_existing_main_id_is_kept(tmp_path: Path):
    soup = _run(tmp_path, "<main id=\"content\"></main>")

    assert soup.main["id"] == "content"


def test_alt_text_fallback_order(tmp_path: Path):
    body = (
        "<div class=\"single-opportunity\"><h3>Drivers</h3><img id=\"card\" src=\"a.jpg\"></div>"
        "<section><h2>Our team</h2><img id=\"parent\" src=\"b.jpg\"></section>"
        "<div><img id=\"logo\" src=\"assets/img/main-logo.png\"></div>"
        "<div><img id=\"named\" src=\"assets/img/office-building.jpg\"></div>"
        "<div class=\"shape\"><img id=\"shape\" src=\"assets/img/s1.png\"></div>"
        "<div><img id=\"kept\" src=\"c.jpg\" alt=\"Already described\"></div>"
    )
    soup = _run(tmp_path, body)

    alts = {img["id"]: img["alt"] for img in soup.find_all("img")}
    assert alts == {
        "card": "Image for Drivers",
        "parent": "Image related to Our team",
        "logo": "Example Organization Logo",
        "named": "Office Building",
        "shape": DECORATIVE_ALT,
        "kept": "Already described",
    }
    shape = soup.find(id="shape")
    assert shape["role"] == "presentation"
    assert shape["aria-hidden"] == "true"
    assert not soup.find(id="named").has_attr("role")


def test_alt_text_override_from_config(tmp_path: Path):
    site = default_site_config().model_copy(
        update={"accessibility": AccessibilityConfig(image_alt={"hero.jpg": "Team at work"})}
    )
    soup = _run(tmp_path, "<div><img src=\"assets/hero.jpg\" alt=\"image\"></div>", site)

    assert soup.img["alt"] == "Team at work"


def test_buttons_fields_and_links_are_labelled(tmp_path: Path):
    body = (
        "<button class=\"navbar-toggler\"></button>"
        "<button class=\"btn-close\"></button>"
        "<button>Send</button>"
        "<form><input name=\"email_address\" required>"
        "<label for=\"phone\">Phone</label><input id=\"phone\" name=\"phone\">"
        "<input type=\"submit\"></form>"
        "<a href=\"mailto:hr@example.com?subject=Hi\">Mail</a>"
        "<a href=\"tel:+911234\">Call</a>"
        "<a href=\"https://partner.example\" target=\"_blank\">Partner</a>"
    )
    soup = _run(tmp_path, body)

    buttons = soup.find_all("button")
    assert buttons[0]["aria-label"] == "Open menu"
    assert buttons[1]["aria-label"] == "Close"
    assert not buttons[2].has_attr("aria-label")

    email = soup.find("input", attrs={"name": "email_address"})
    assert email["aria-label"] == "Email Address"
    assert email["aria-required"] == "true"
    assert not soup.find(id="phone").has_attr("aria-label")
    assert not soup.find("input", attrs={"type": "submit"}).has_attr("aria-label")

    links = soup.find_all("a", href=True)
    by_href = {link["href"]: link for link in links}
    assert by_href["mailto:hr@example.com?subject=Hi"]["aria-label"] == "Send email to hr@example.com"
    assert by_href["tel:+911234"]["aria-label"] == "Call +911234"
    assert by_href["https://partner.example"]["rel"] == ["noopener", "noreferrer"]


def test_stylesheet_written_and_linked(tmp_path: Path):
    soup = _run(tmp_path, "<p>x</p>")

    css = tmp_path / ACCESSIBILITY_STYLESHEET.path
    assert css.read_text(encoding="utf-8") == ACCESSIBILITY_STYLESHEET.content
    hrefs = [link["href"] for link in soup.find_all("link", rel="stylesheet")]
    assert hrefs == [ACCESSIBILITY_STYLESHEET.path]


def test_generic_file_names_fall_back_and_rerun_is_clean(tmp_path: Path):
    body = "<div><img src=\"assets/img/placeholder.png\"></div><div><img src=\"photo.jpg\"></div>"
    soup = _run(tmp_path, body)

    assert [img["alt"] for img in soup.find_all("img")] == [DECORATIVE_ALT, DECORATIVE_ALT]

    report = run_rule_set(RULE_SET, tmp_path, default_site_config())
    assert [outcome.modified for outcome in report.outcomes] == [False]
