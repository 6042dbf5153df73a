"""Pre-deployment validation of the built public directory."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List

from bs4 import BeautifulSoup

from .discovery import list_files, relative_name
from .models import SiteConfig
from .reporting import ScanReport
from .seo_rules import MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH, MIN_DESCRIPTION_LENGTH

REQUIRED_PATHS = (
    "index.html",
    "assets/css",
    "assets/js",
    "assets/images",
    "sitemap.xml",
    "robots.txt",
)
CONFIG_FILES = ("apache/.htaccess", "nginx/nginx.conf")
REQUIRED_HEADERS = (
    "Content-Security-Policy",
    "X-Frame-Options",
    "X-Content-Type-Options",
    "Referrer-Policy",
    "Permissions-Policy",
)
INSECURE_URL = re.compile(r"http://(?!localhost|127\.0\.0\.1|www\.w3\.org)[^\s\"'<>]+")
CATEGORIES = ("structure", "security", "https", "seo", "accessibility", "performance", "configuration")


def is_ready(report: ScanReport) -> bool:
    return not report.errors


class PreDeploymentValidator:
    def __init__(self, public_dir: Path, config_dir: Path, site: SiteConfig) -> None:
        self.public_dir = Path(public_dir)
        self.config_dir = Path(config_dir)
        self.site = site
        self.root = self.public_dir
        self.report = ScanReport(
            report_type="pre-deployment-validation", title="Pre-Deployment Validation Report"
        )
        self.categories: Dict[str, List[str]] = {name: [] for name in CATEGORIES}

    def _pass(self, category: str, message: str) -> None:
        self.categories[category].append(message)
        self.report.ok(message)

    def run(self) -> ScanReport:
        html_files = list_files(
            self.public_dir,
            (".html",),
            exclude_patterns=self.site.exclude_patterns,
            excluded_dirs=self.site.excluded_dirs,
            recursive=self.site.recursive,
        )
        self.root = self.public_dir.resolve()
        print(f"[predeploy] validating {len(html_files)} HTML file(s) under {self.root}")
        pages = {
            relative_name(path, self.root): path.read_text(encoding="utf-8", errors="replace")
            for path in html_files
        }

        self.validate_structure()
        self.validate_security_headers()
        self.validate_https(pages)
        self.validate_seo(pages)
        self.validate_accessibility(pages)
        self.validate_performance()
        self.validate_configuration()

        self.report.details["categories"] = self.categories
        self.report.details["ready"] = is_ready(self.report)
        return self.report

    def validate_structure(self) -> None:
        for required in REQUIRED_PATHS:
            if (self.root / required).exists():
                self._pass("structure", f"Found: {required}")
            else:
                self.report.error(f"Missing required file/directory: {required}")

    def validate_security_headers(self) -> None:
        htaccess = self.config_dir / "apache" / ".htaccess"
        if htaccess.is_file():
            content = htaccess.read_text(encoding="utf-8", errors="replace")
            for header in REQUIRED_HEADERS:
                if header in content:
                    self._pass("security", f".htaccess contains {header}")
                else:
                    self.report.error(f"Missing security header in .htaccess: {header}")

        nginx = self.config_dir / "nginx" / "nginx.conf"
        if nginx.is_file():
            content = nginx.read_text(encoding="utf-8", errors="replace")
            for header in REQUIRED_HEADERS:
                if header in content:
                    self._pass("security", f"nginx.conf contains {header}")
                else:
                    self.report.warning(f"Consider adding {header} to nginx.conf")

    def validate_https(self, pages: Dict[str, str]) -> None:
        for name, content in pages.items():
            urls = INSECURE_URL.findall(content)
            if urls:
                self.report.error(f"HTTP URLs found in {name}: {', '.join(sorted(set(urls)))}")
            else:
                self._pass("https", f"No HTTP URLs in {name}")

    def validate_seo(self, pages: Dict[str, str]) -> None:
        for name, content in pages.items():
            soup = BeautifulSoup(content, "html.parser")

            title_tag = soup.find("title")
            if title_tag is None:
                self.report.error(f"{name}: Missing title tag")
            else:
                title = title_tag.get_text().strip()
                if not title:
                    self.report.error(f"{name}: Empty title tag")
                elif len(title) > MAX_TITLE_LENGTH:
                    self.report.warning(f"{name}: Title too long ({len(title)} chars)")
                else:
                    self._pass("seo", f"{name}: Good title length ({len(title)} chars)")

            meta = soup.find("meta", attrs={"name": "description"})
            description = (meta.get("content") or "").strip() if meta is not None else ""
            if not description:
                self.report.error(f"{name}: Missing meta description")
            elif MIN_DESCRIPTION_LENGTH <= len(description) <= MAX_DESCRIPTION_LENGTH:
                self._pass("seo", f"{name}: Good meta description length ({len(description)} chars)")
            else:
                self.report.warning(
                    f"{name}: Meta description length not optimal ({len(description)} chars)"
                )

            if soup.find("h1") is not None:
                self._pass("seo", f"{name}: Has H1 tag")
            else:
                self.report.error(f"{name}: Missing H1 tag")

        for generated in ("sitemap.xml", "robots.txt"):
            if (self.root / generated).is_file():
                self._pass("seo", f"{generated} exists")
            else:
                self.report.error(f"Missing {generated}")

    def validate_accessibility(self, pages: Dict[str, str]) -> None:
        for name, content in pages.items():
            soup = BeautifulSoup(content, "html.parser")

            missing_alt = [img for img in soup.find_all("img") if not img.has_attr("alt")]
            if missing_alt:
                self.report.error(f"{name}: {len(missing_alt)} images missing alt attributes")
            else:
                self._pass("accessibility", f"{name}: All images have alt attributes")

            if soup.select_one(".skip-navigation, .skip-link") is not None:
                self._pass("accessibility", f"{name}: Has skip navigation")
            else:
                self.report.warning(f"{name}: Consider adding skip navigation")

            unlabeled = [
                element
                for element in soup.find_all(["button", "input", "select", "textarea"])
                if not element.get("aria-label")
                and not element.get("aria-labelledby")
                and (element.get("type") or "").lower() != "hidden"
                and not (element.name == "button" and element.get_text().strip())
            ]
            if unlabeled:
                self.report.warning(
                    f"{name}: {len(unlabeled)} interactive elements could use ARIA labels"
                )
            else:
                self._pass("accessibility", f"{name}: Interactive elements have ARIA labels")

    def validate_performance(self) -> None:
        assets = list_files(self.root, None, exclude_patterns=(), recursive=True)
        names = [path.name.lower() for path in assets]
        for suffix, label in ((".min.css", "CSS"), (".min.js", "JS")):
            minified = [name for name in names if name.endswith(suffix)]
            if minified:
                self._pass("performance", f"Found {len(minified)} minified {label} files")
            else:
                self.report.warning(f"No minified {label} files found")
        webp = [name for name in names if name.endswith(".webp")]
        if webp:
            self._pass("performance", f"Found {len(webp)} WebP images")
        else:
            self.report.warning("No WebP images found - consider converting for better performance")

    def validate_configuration(self) -> None:
        for config_file in CONFIG_FILES:
            if (self.config_dir / config_file).is_file():
                self._pass("configuration", f"Config found: {config_file}")
            else:
                self.report.warning(f"Missing config file: {config_file}")


def validate(public_dir: Path, config_dir: Path, site: SiteConfig) -> ScanReport:
    return PreDeploymentValidator(public_dir, config_dir, site).run()


__all__ = ["PreDeploymentValidator", "REQUIRED_HEADERS", "REQUIRED_PATHS", "is_ready", "validate"]
