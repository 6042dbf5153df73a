from typing import Dict, Optional, Tuple, Union

import requests

from siteprep.config import default_site_config
from siteprep.postdeploy import PostDeploymentVerifier, is_healthy, verify

BASE = "https://www.example.com"

HOME = """<html><head><title>Home</title>
<meta name="description" content="Example home page">
<meta name="viewport" content="width=device-width, initial-scale=1">
</head><body><h1>Welcome</h1></body></html>"""

CONTACT = """<html><body><form method="post">
<input name="name"><input name="email"><textarea name="message"></textarea>
</form></body></html>"""

SECURE_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin",
    "Content-Security-Policy": "default-src 'self'",
    "Strict-Transport-Security": "max-age=31536000",
    "Permissions-Policy": "geolocation=()",
}


def _response(status: int = 200, text: str = "", headers: Optional[Dict[str, str]] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


Route = Union[requests.Response, Exception]


class FakeSession:
    """Answers requests from a ``(method, url)`` table; unknown routes are 404."""

    def __init__(self, routes: Dict[Tuple[str, str], Route]) -> None:
        self.routes = routes
        self.calls = []

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        self.calls.append((method, url, kwargs))
        route = self.routes.get((method, url))
        if isinstance(route, Exception):
            raise route
        return route if route is not None else _response(404)


def _healthy_routes() -> Dict[Tuple[str, str], Route]:
    routes: Dict[Tuple[str, str], Route] = {
        ("GET", f"{BASE}/"): _response(200, HOME, SECURE_HEADERS),
        ("GET", "http://www.example.com/"): _response(301, headers={"Location": f"{BASE}/"}),
        ("GET", f"{BASE}/sitemap.xml"): _response(200, "<urlset/>"),
        ("GET", f"{BASE}/robots.txt"): _response(200, "User-agent: *"),
        ("GET", f"{BASE}/contact.html"): _response(200, CONTACT),
    }
    for page in ("about.html", "services.html", "careers.html"):
        routes[("GET", f"{BASE}/{page}")] = _response(200, HOME)
    for asset in ("assets/css/style.css", "assets/js/main.js", "assets/img/logo.png"):
        routes[("HEAD", f"{BASE}/{asset}")] = _response(200)
    return routes


def test_healthy_site():
    session = FakeSession(_healthy_routes())

    report = verify(BASE + "/", default_site_config(), session=session)

    assert report.errors == []
    assert report.warnings == []
    assert is_healthy(report)
    assert report.details["healthy"] is True
    assert all(kwargs["timeout"] == 10.0 for _, _, kwargs in session.calls)
    redirect_call = [call for call in session.calls if call[1].startswith("http://")][0]
    assert redirect_call[2]["allow_redirects"] is False


def test_missing_headers_and_broken_pages():
    routes = _healthy_routes()
    routes[("GET", f"{BASE}/")] = _response(200, HOME, {"X-Frame-Options": "DENY"})
    routes[("GET", "http://www.example.com/")] = _response(200)
    routes[("GET", f"{BASE}/careers.html")] = _response(500)
    del routes[("GET", f"{BASE}/services.html")]
    routes[("GET", f"{BASE}/contact.html")] = _response(200, "<form><input name=\"email\"></form>")

    report = PostDeploymentVerifier(BASE, default_site_config(), session=FakeSession(routes)).run()

    assert "Missing security header: x-content-type-options" in report.errors
    assert "Missing security header: referrer-policy" in report.errors
    assert "Missing recommended security header: strict-transport-security" in report.warnings
    assert "HTTP does not redirect to HTTPS" in report.warnings
    assert "Page /careers.html returned HTTP 500" in report.errors
    assert "Page not found: /services.html" in report.warnings
    assert "Contact form missing field(s): name, message" in report.warnings
    assert not is_healthy(report)


def test_network_errors_become_report_errors():
    routes = _healthy_routes()
    routes[("HEAD", f"{BASE}/assets/js/main.js")] = requests.ConnectionError("connection reset")

    report = verify(BASE, default_site_config(), session=FakeSession(routes))

    assert report.errors == [f"HEAD {BASE}/assets/js/main.js failed: connection reset"]
    assert "Asset loads: /assets/css/style.css" in report.passed
    assert "Asset loads: /assets/img/logo.png" in report.passed


def test_unreachable_site_stops_early():
    routes = {("GET", f"{BASE}/"): requests.Timeout("timed out")}
    session = FakeSession(routes)

    report = verify(BASE, default_site_config(), session=session)

    assert report.errors == [f"GET {BASE}/ failed: timed out"]
    assert len(session.calls) == 1
    assert not is_healthy(report)
    assert report.details["healthy"] is False
