"""Read-only security scan of the public tree and server configuration."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .discovery import list_files, relative_name
from .models import SiteConfig
from .reporting import ScanReport
from .scoring import SECURITY_LEVELS, SECURITY_WEIGHTS

SECURE_MIN_SCORE = 80
BACKUP_SUFFIXES = (".bak", ".backup", "~")
DEV_MARKERS = ("test", "debug", "dev")
SUSPICIOUS_PATTERNS = {
    "javascript:": re.compile(r"javascript:", re.I),
    "vbscript:": re.compile(r"vbscript:", re.I),
    "data:text/html": re.compile(r"data:text/html", re.I),
    "eval(": re.compile(r"eval\s*\(", re.I),
    "innerHTML=": re.compile(r"innerHTML\s*=", re.I),
}
DANGEROUS_JS = ("eval(", "Function(", "document.write(", "innerHTML =", "outerHTML =")
STRING_TIMERS = re.compile(r"set(?:Timeout|Interval)\(\s*[\"']")
CONSOLE_CALL = re.compile(r"console\.(log|debug|info|warn|error)")
CREDENTIAL_PATTERNS = (
    re.compile(r"password\s*[:=]\s*[\"'][^\"']+[\"']", re.I),
    re.compile(r"api[_-]?key\s*[:=]\s*[\"'][^\"']+[\"']", re.I),
    re.compile(r"secret\s*[:=]\s*[\"'][^\"']+[\"']", re.I),
    re.compile(r"token\s*[:=]\s*[\"'][^\"']+[\"']", re.I),
)
AJAX_PATTERNS = (
    re.compile(r"\$\.ajax\("),
    re.compile(r"\$\.post\("),
    re.compile(r"\bfetch\("),
    re.compile(r"XMLHttpRequest"),
)
CSS_EXTERNAL_IMPORT = re.compile(r"@import\s+(?:url\()?[\"']?https?://", re.I)
CSS_DATA_URI = re.compile(r"url\(\s*[\"']?data:", re.I)
ROBOTS_SENSITIVE_PATHS = ("/admin", "/wp-admin", "/config", "/database", "/backup")
ERROR_PAGES = ("404.html", "403.html", "500.html")
MAX_INLINE_STYLES = 5
MAX_DATA_URIS = 10


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def is_secure(report: ScanReport) -> bool:
    return report.score >= SECURE_MIN_SCORE and not report.vulnerabilities


class SecurityScanner:
    """Collects vulnerabilities, warnings and recommendations; never edits files."""

    def __init__(self, public_dir: Path, config_dir: Path, site: SiteConfig) -> None:
        self.public_dir = Path(public_dir)
        self.config_dir = Path(config_dir)
        self.site = site
        self.report = ScanReport(
            report_type="security-scan",
            title="Security Scan Report",
            weights=SECURITY_WEIGHTS,
            levels=SECURITY_LEVELS,
        )
        self.root = self.public_dir

    def run(self) -> ScanReport:
        files = list_files(self.public_dir, None, exclude_patterns=(), recursive=True)
        self.root = self.public_dir.resolve()
        print(f"[security] scanning {len(files)} file(s) under {self.root}")

        self.check_files(files)
        self.check_apache_config(self.config_dir / "apache" / ".htaccess")
        self.check_nginx_config(self.config_dir / "nginx" / "nginx.conf")
        html_files = [path for path in files if path.suffix.lower() == ".html"]
        self.check_html(html_files)
        self.check_javascript([path for path in files if path.suffix.lower() == ".js"])
        self.check_css([path for path in files if path.suffix.lower() == ".css"])
        self.check_form_handler(self.root / "contact-form-handler.php")
        self.check_external_resources(html_files)
        self.check_published_files()

        self.report.details["filesScanned"] = len(files)
        self.report.details["secure"] = is_secure(self.report)
        return self.report

    def _name(self, path: Path) -> str:
        return relative_name(path, self.root)

    def check_files(self, files: Iterable[Path]) -> None:
        sensitive = set(self.site.security.sensitive_files)
        for path in files:
            name = path.name
            rel = self._name(path)
            if name in sensitive:
                self.report.vulnerability(f"Sensitive file exposed in public directory: {rel}")
            if name.endswith(BACKUP_SUFFIXES):
                self.report.warning(f"Backup file found in public directory: {rel}")
            if any(marker in name for marker in DEV_MARKERS):
                self.report.warning(f"Development file found in public directory: {rel}")

    def check_apache_config(self, htaccess: Path) -> None:
        if not htaccess.is_file():
            self.report.warning(".htaccess file not found")
            return
        content = _read(htaccess)
        missing = [h for h in self.site.security.security_headers if h not in content]
        if missing:
            self.report.warning(f"Missing security headers in .htaccess: {', '.join(missing)}")
        else:
            self.report.ok("Security headers configured in .htaccess")
        if "Options -Indexes" not in content:
            self.report.vulnerability("Directory browsing not disabled in .htaccess")
        if "ServerTokens" not in content and "ServerSignature" not in content:
            self.report.recommend("Consider hiding server signature in .htaccess")

    def check_nginx_config(self, nginx_conf: Path) -> None:
        if not nginx_conf.is_file():
            return
        content = _read(nginx_conf)
        if "add_header X-Frame-Options" not in content:
            self.report.warning("X-Frame-Options header not configured in nginx")
        if "server_tokens off" not in content:
            self.report.recommend("Consider disabling server tokens in nginx")

    def check_html(self, html_files: Iterable[Path]) -> None:
        for path in html_files:
            name = self._name(path)
            content = _read(path)
            soup = BeautifulSoup(content, "html.parser")

            inline_scripts = [
                script
                for script in soup.find_all("script")
                if not script.get("src")
                and (script.get("type") or "").lower() != "application/ld+json"
                and (script.string or "").strip()
            ]
            if inline_scripts:
                self.report.warning(
                    f"{name}: {len(inline_scripts)} inline script(s) found - consider using CSP"
                )

            inline_styles = soup.find_all(style=True)
            if len(inline_styles) > MAX_INLINE_STYLES:
                self.report.recommend(
                    f"{name}: Many inline styles found ({len(inline_styles)}) - consider external CSS"
                )

            for script in soup.find_all("script", src=re.compile(r"^https?://", re.I)):
                if not script.get("integrity"):
                    self.report.warning(
                        f"{name}: External script without integrity check: {script['src']}"
                    )

            insecure = [
                tag
                for tag in soup.find_all(True)
                for attr in ("src", "href", "action")
                if isinstance(tag.get(attr), str) and tag[attr].lower().startswith("http://")
            ]
            if insecure:
                self.report.vulnerability(
                    f"{name}: Mixed content detected - HTTP resources on HTTPS page"
                )

            for label, pattern in SUSPICIOUS_PATTERNS.items():
                if pattern.search(content):
                    self.report.warning(f"{name}: Potentially unsafe pattern detected: {label}")

            for form in soup.find_all("form"):
                method = (form.get("method") or "").strip().lower()
                if method in ("", "get"):
                    self.report.warning(
                        f"{name}: Form without POST method or using GET for sensitive data"
                    )

    def check_javascript(self, js_files: Iterable[Path]) -> None:
        for path in js_files:
            name = self._name(path)
            content = _read(path)
            for func in DANGEROUS_JS:
                if func in content:
                    self.report.warning(f"{name}: Potentially dangerous function used: {func}")
            if STRING_TIMERS.search(content):
                self.report.warning(f"{name}: Timer called with a string argument")

            console_calls = len(CONSOLE_CALL.findall(content))
            if console_calls:
                self.report.recommend(
                    f"{name}: {console_calls} console statement(s) found - consider removing for production"
                )

            if any(pattern.search(content) for pattern in CREDENTIAL_PATTERNS):
                self.report.vulnerability(f"{name}: Potential hardcoded credentials detected")

            uses_ajax = any(pattern.search(content) for pattern in AJAX_PATTERNS)
            if uses_ajax and "csrf" not in content.lower() and "token" not in content.lower():
                self.report.warning(f"{name}: AJAX request without apparent CSRF protection")

    def check_css(self, css_files: Iterable[Path]) -> None:
        for path in css_files:
            name = self._name(path)
            content = _read(path)
            if CSS_EXTERNAL_IMPORT.search(content):
                self.report.recommend(
                    f"{name}: External CSS imports found - consider hosting locally"
                )
            data_uris = len(CSS_DATA_URI.findall(content))
            if data_uris > MAX_DATA_URIS:
                self.report.recommend(
                    f"{name}: Many data URIs found ({data_uris}) - monitor for data exfiltration"
                )

    def check_form_handler(self, handler: Path) -> None:
        if not handler.is_file():
            self.report.recommend(
                "Contact form handler not found - ensure forms are properly secured"
            )
            return
        content = _read(handler)
        if "filter_var" not in content and "htmlspecialchars" not in content:
            self.report.vulnerability("Contact form lacks proper input validation")
        if "csrf" not in content and "token" not in content:
            self.report.vulnerability("Contact form lacks CSRF protection")
        if "rate" not in content and "limit" not in content:
            self.report.warning("Contact form lacks rate limiting")
        if "strip" not in content and "filter" not in content:
            self.report.warning("Contact form may be vulnerable to email header injection")

    def check_external_resources(self, html_files: Iterable[Path]) -> None:
        trusted = set(self.site.security.trusted_domains)
        own_host = urlsplit(self.site.organization.base_url).hostname
        domains: List[str] = []
        for path in html_files:
            soup = BeautifulSoup(_read(path), "html.parser")
            for tag in soup.find_all(True):
                for attr in ("src", "href"):
                    value = tag.get(attr)
                    if not isinstance(value, str) or not re.match(r"https?://", value, re.I):
                        continue
                    host = urlsplit(value).hostname
                    if host and host not in domains:
                        domains.append(host)

        for host in domains:
            if host not in trusted and host != own_host:
                self.report.warning(f"External resource from untrusted domain: {host}")
        self.report.details["externalDomains"] = domains

    def check_published_files(self) -> None:
        robots = self.root / "robots.txt"
        if robots.is_file():
            content = _read(robots)
            for sensitive in ROBOTS_SENSITIVE_PATHS:
                if sensitive in content:
                    self.report.warning(f"robots.txt reveals sensitive path: {sensitive}")

        sitemap = self.root / "sitemap.xml"
        if sitemap.is_file():
            content = _read(sitemap)
            if "/admin" in content or "/private" in content:
                self.report.warning("Sitemap may contain sensitive URLs")

        for page in ERROR_PAGES:
            if not (self.root / page).is_file():
                self.report.recommend(f"Custom error page missing: {page}")


def scan(public_dir: Path, config_dir: Path, site: SiteConfig) -> ScanReport:
    return SecurityScanner(public_dir, config_dir, site).run()


__all__ = ["SECURE_MIN_SCORE", "SecurityScanner", "is_secure", "scan"]
