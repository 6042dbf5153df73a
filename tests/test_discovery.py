from pathlib import Path

import pytest

from siteprep.discovery import DirectoryNotFound, is_excluded, list_files, relative_name
from siteprep.models import DEFAULT_EXCLUDE_PATTERNS


def _touch(path: Path, text: str = "<html></html>") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "filename",
    ["1.html", "42.html", "bg.html", "popular-posts-3.html", "owl.video.play.html", "fade.html"],
)
def test_default_patterns_exclude_asset_stubs(filename: str):
    assert is_excluded(filename, DEFAULT_EXCLUDE_PATTERNS)


@pytest.mark.parametrize("filename", ["index.html", "contact.html", "page-2.html"])
def test_default_patterns_keep_content_pages(filename: str):
    assert not is_excluded(filename, DEFAULT_EXCLUDE_PATTERNS)


def test_list_files_filters_and_sorts(tmp_path: Path):
    _touch(tmp_path / "zeta.html")
    _touch(tmp_path / "alpha.html")
    _touch(tmp_path / "3.html")
    _touch(tmp_path / "notes.txt")
    _touch(tmp_path / "nested" / "deep.html")

    files = list_files(tmp_path)

    assert [relative_name(path, tmp_path.resolve()) for path in files] == ["alpha.html", "zeta.html"]


def test_list_files_recursive_skips_excluded_dirs(tmp_path: Path):
    _touch(tmp_path / "index.html")
    _touch(tmp_path / "blog" / "post.html")
    _touch(tmp_path / "assets" / "widget.html")

    files = list_files(tmp_path, recursive=True, excluded_dirs=["assets"])

    names = [relative_name(path, tmp_path.resolve()) for path in files]
    assert names == ["blog/post.html", "index.html"]


def test_list_files_without_extension_filter(tmp_path: Path):
    _touch(tmp_path / "a.css", "body {}")
    _touch(tmp_path / "b.js", "var x;")

    files = list_files(tmp_path, None, exclude_patterns=())

    assert [path.name for path in files] == ["a.css", "b.js"]


def test_missing_root_raises(tmp_path: Path):
    with pytest.raises(DirectoryNotFound):
        list_files(tmp_path / "missing")
