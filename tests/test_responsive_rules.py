from pathlib import Path

from bs4 import BeautifulSoup

from siteprep.config import default_site_config
from siteprep.pipeline import run_rule_set
from siteprep.responsive_rules import RULE_SET, TOUCH_TARGET_CLASS, VIEWPORT_CONTENT
from siteprep.shared_assets import RESPONSIVE_STYLESHEET


def _run(tmp_path: Path, head: str, body: str) -> BeautifulSoup:
    page = tmp_path / "clients.html"
    page.write_text(f"<html><head>{head}</head><body>{body}</body></html>", encoding="utf-8")
    run_rule_set(RULE_SET, tmp_path, default_site_config())
    return BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")


def test_missing_viewport_is_added_first(tmp_path: Path):
    soup = _run(tmp_path, "<title>Clients</title>", "")

    viewport = soup.head.contents[0]
    assert viewport.name == "meta"
    assert viewport["content"] == VIEWPORT_CONTENT


def test_broken_viewport_is_replaced_and_good_one_kept(tmp_path: Path):
    soup = _run(tmp_path, "<meta name=\"viewport\" content=\"width=1024\">", "")
    assert soup.find("meta", attrs={"name": "viewport"})["content"] == VIEWPORT_CONTENT

    good = "width=device-width, initial-scale=1"
    soup = _run(tmp_path, f"<meta name=\"viewport\" content=\"{good}\">", "")
    assert soup.find("meta", attrs={"name": "viewport"})["content"] == good


def test_images_tables_and_touch_targets(tmp_path: Path):
    body = (
        "<img src=\"a.png\" loading=\"eager\">"
        "<table><tr><td>1</td></tr></table>"
        "<a href=\"#\">Link</a><button>Go</button>"
        "<input type=\"hidden\" name=\"csrf\">"
    )
    soup = _run(tmp_path, "", body)

    img = soup.img
    assert "img-fluid" in img["class"]
    assert img["loading"] == "eager"
    wrapper = soup.table.parent
    assert wrapper.name == "div" and wrapper["class"] == ["table-responsive"]
    assert "table" in soup.table["class"]
    assert TOUCH_TARGET_CLASS in soup.a["class"]
    assert TOUCH_TARGET_CLASS in soup.button["class"]
    assert not soup.find("input", attrs={"type": "hidden"}).has_attr("class")


def test_responsive_stylesheet(tmp_path: Path):
    soup = _run(tmp_path, "", "")

    assert (tmp_path / RESPONSIVE_STYLESHEET.path).is_file()
    assert "min-height: 44px" in RESPONSIVE_STYLESHEET.content
    assert soup.find("link", href=RESPONSIVE_STYLESHEET.path) is not None


def test_table_nested_inside_responsive_wrapper_is_not_rewrapped(tmp_path: Path):
    body = "<div class=\"table-responsive\"><div class=\"inner\"><table><tr><td>1</td></tr></table></div></div>"
    soup = _run(tmp_path, "", body)

    assert len(soup.select(".table-responsive")) == 1
    assert soup.table.parent["class"] == ["inner"]
