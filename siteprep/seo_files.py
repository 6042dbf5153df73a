"""sitemap.xml and robots.txt generation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional

from .discovery import list_files, relative_name
from .io_utils import write_text_if_changed
from .models import SiteConfig
from .rendering import render
from .reporting import ScanReport


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: str
    changefreq: str
    priority: str


def sitemap_entries(public_dir: Path, site: SiteConfig, lastmod: date) -> List[SitemapEntry]:
    """One entry per non-excluded HTML file, in enumeration order."""

    root = Path(public_dir).resolve()
    files = list_files(
        root,
        (".html",),
        exclude_patterns=site.exclude_patterns,
        excluded_dirs=site.excluded_dirs,
        recursive=site.recursive,
    )
    entries: List[SitemapEntry] = []
    seen = set()
    for path in files:
        name = relative_name(path, root)
        if name in seen:
            continue
        seen.add(name)
        rule = site.sitemap_rule(name)
        entries.append(
            SitemapEntry(
                loc=f"{site.organization.base_url}/{name}",
                lastmod=lastmod.isoformat(),
                changefreq=rule.changefreq,
                priority=rule.priority,
            )
        )
    return entries


def build_sitemap(entries: List[SitemapEntry]) -> str:
    return render("sitemap.xml", entries=entries)


def build_robots(site: SiteConfig) -> str:
    return render(
        "robots.txt",
        site_name=site.site_name,
        robots=site.robots,
        sitemap_url=f"{site.organization.base_url}/sitemap.xml",
    )


def generate_seo_files(
    public_dir: Path, site: SiteConfig, *, lastmod: Optional[date] = None
) -> ScanReport:
    """Write sitemap.xml and robots.txt into the public root when they changed."""

    root = Path(public_dir).resolve()
    entries = sitemap_entries(root, site, lastmod or date.today())
    report = ScanReport(report_type="seo-supporting-files", title="SEO Supporting Files Report")

    for filename, content in (
        ("sitemap.xml", build_sitemap(entries)),
        ("robots.txt", build_robots(site)),
    ):
        if write_text_if_changed(root / filename, content):
            print(f"[seo-files] wrote {filename}")
        report.ok(filename)

    report.details["sitemapUrls"] = [entry.loc for entry in entries]
    if not entries:
        report.warning("No HTML files found for sitemap.xml")
    report.recommend("Submit sitemap.xml to search engine webmaster tools.")
    return report


__all__ = [
    "SitemapEntry",
    "build_robots",
    "build_sitemap",
    "generate_seo_files",
    "sitemap_entries",
]
