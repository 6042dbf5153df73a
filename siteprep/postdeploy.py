"""Live checks against the deployed site, one sequential request at a time."""

from __future__ import annotations

import time
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .models import SiteConfig
from .reporting import ScanReport

REQUIRED_HEADERS = ("x-frame-options", "x-content-type-options", "referrer-policy")
RECOMMENDED_HEADERS = (
    "content-security-policy",
    "strict-transport-security",
    "permissions-policy",
)
REDIRECT_STATUSES = (301, 302, 307, 308)
CONTACT_FIELDS = ("name", "email", "message")


def is_healthy(report: ScanReport) -> bool:
    return not report.errors


class PostDeploymentVerifier:
    """Issues GET/HEAD requests with a timeout and no retries.

    Network failures become report errors; the remaining checks still run.
    """

    def __init__(
        self,
        base_url: str,
        site: SiteConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.settings = site.postdeploy
        self.session = session or requests.Session()
        self.report = ScanReport(
            report_type="post-deployment-verification",
            title="Post-Deployment Verification Report",
        )
        self.report.details["baseUrl"] = self.base_url

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, url: str, **kwargs) -> Optional[requests.Response]:
        try:
            return self.session.request(method, url, timeout=self.settings.timeout, **kwargs)
        except requests.RequestException as exc:
            self.report.error(f"{method} {url} failed: {exc}")
            return None

    def run(self) -> ScanReport:
        print(f"[postdeploy] verifying {self.base_url}")
        home = self.check_connectivity()
        if home is None:
            self.report.details["healthy"] = False
            return self.report
        self.check_security_headers(home)
        self.check_https_redirect()
        self.check_pages()
        self.check_seo(home)
        self.check_seo_files()
        self.check_contact_form()
        self.check_assets()
        self.report.details["healthy"] = is_healthy(self.report)
        return self.report

    def check_connectivity(self) -> Optional[requests.Response]:
        started = time.perf_counter()
        response = self._request("GET", self.url("/"))
        elapsed_ms = round((time.perf_counter() - started) * 1000)
        if response is None:
            return None
        self.report.details["responseTimeMs"] = elapsed_ms
        if response.status_code != 200:
            self.report.error(f"Site returned HTTP {response.status_code}")
            return None
        self.report.ok(f"Site reachable (HTTP 200 in {elapsed_ms} ms)")
        if elapsed_ms > self.settings.max_response_ms:
            self.report.warning(f"Slow response time: {elapsed_ms} ms")
        return response

    def check_security_headers(self, response: requests.Response) -> None:
        headers = {name.lower() for name in response.headers}
        for header in REQUIRED_HEADERS:
            if header in headers:
                self.report.ok(f"Security header present: {header}")
            else:
                self.report.error(f"Missing security header: {header}")
        for header in RECOMMENDED_HEADERS:
            if header in headers:
                self.report.ok(f"Security header present: {header}")
            else:
                self.report.warning(f"Missing recommended security header: {header}")

    def check_https_redirect(self) -> None:
        if not self.base_url.startswith("https://"):
            self.report.warning("Site is not served over HTTPS")
            return
        http_url = "http://" + self.base_url[len("https://"):] + "/"
        response = self._request("GET", http_url, allow_redirects=False)
        if response is None:
            return
        location = response.headers.get("location", "")
        if response.status_code in REDIRECT_STATUSES and location.startswith("https://"):
            self.report.ok("HTTP redirects to HTTPS")
        else:
            self.report.warning("HTTP does not redirect to HTTPS")

    def check_pages(self) -> None:
        for page in self.settings.pages:
            response = self._request("GET", self.url(page))
            if response is None:
                continue
            if response.status_code == 200:
                self.report.ok(f"Page loads: {page}")
            elif response.status_code == 404:
                self.report.warning(f"Page not found: {page}")
            else:
                self.report.error(f"Page {page} returned HTTP {response.status_code}")

    def check_seo(self, home: requests.Response) -> None:
        soup = BeautifulSoup(home.text, "html.parser")
        title = soup.find("title")
        checks = (
            ("title", title is not None and bool(title.get_text().strip())),
            ("meta description", soup.find("meta", attrs={"name": "description"}) is not None),
            ("h1", soup.find("h1") is not None),
            ("viewport", soup.find("meta", attrs={"name": "viewport"}) is not None),
        )
        for label, present in checks:
            if present:
                self.report.ok(f"Home page has {label}")
            else:
                self.report.warning(f"Home page missing {label}")

    def check_seo_files(self) -> None:
        for name in ("sitemap.xml", "robots.txt"):
            response = self._request("GET", self.url(name))
            if response is None:
                continue
            if response.status_code == 200:
                self.report.ok(f"{name} reachable")
            else:
                self.report.warning(f"{name} not reachable (HTTP {response.status_code})")

    def check_contact_form(self) -> None:
        response = self._request("GET", self.url(self.settings.contact_page))
        if response is None:
            return
        if response.status_code != 200:
            self.report.warning(f"Contact page not reachable (HTTP {response.status_code})")
            return
        form = BeautifulSoup(response.text, "html.parser").find("form")
        if form is None:
            self.report.warning("Contact page has no form")
            return
        names = {field.get("name") for field in form.find_all(["input", "textarea", "select"])}
        missing = [field for field in CONTACT_FIELDS if field not in names]
        if missing:
            self.report.warning(f"Contact form missing field(s): {', '.join(missing)}")
        else:
            self.report.ok("Contact form has name, email and message fields")

    def check_assets(self) -> None:
        for asset in self.settings.assets:
            response = self._request("HEAD", self.url(asset), allow_redirects=True)
            if response is None:
                continue
            if response.status_code == 200:
                self.report.ok(f"Asset loads: {asset}")
            else:
                self.report.warning(f"Asset not reachable: {asset} (HTTP {response.status_code})")


def verify(
    base_url: str, site: SiteConfig, session: Optional[requests.Session] = None
) -> ScanReport:
    return PostDeploymentVerifier(base_url, site, session=session).run()


__all__ = ["PostDeploymentVerifier", "is_healthy", "verify"]
