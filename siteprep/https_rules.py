"""Upgrade ``http://`` references to ``https://``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from .discovery import list_files, relative_name
from .dom import Document
from .io_utils import warn
from .models import SiteConfig
from .pipeline import FileIdentity, Rule, RuleSet
from .reporting import FileOutcome

HTTP_URL = re.compile(r"http://([^\s\"'<>)]+)")
# Hosts that must keep plain http: local development and XML namespaces.
KEEP_HTTP_HOSTS = ("localhost", "127.0.0.1", "www.w3.org")
URL_ATTRIBUTES = ("src", "href", "action", "srcset", "poster", "data-src", "style")
ASSET_EXTENSIONS = (".css", ".js")

REDIRECT_MARKER = "RewriteRule ^(.*)$ https://"
APACHE_REDIRECT_BLOCK = """
# Force HTTPS
<IfModule mod_rewrite.c>
    RewriteEngine On
    RewriteCond %{HTTPS} off
    RewriteRule ^(.*)$ https://%{HTTP_HOST}%{REQUEST_URI} [L,R=301]
</IfModule>
"""


def _keeps_http(target: str, exceptions: Iterable[str]) -> bool:
    host = target.split("/")[0].split(":")[0].lower()
    if host in KEEP_HTTP_HOSTS:
        return True
    return any(exception in target for exception in exceptions)


def upgrade_text(text: str, exceptions: Sequence[str] = ()) -> Tuple[str, int]:
    """Rewrite upgradable ``http://`` URLs in ``text``; return text and count."""

    count = 0

    def _replace(match: re.Match) -> str:
        nonlocal count
        if _keeps_http(match.group(1), exceptions):
            return match.group(0)
        count += 1
        return f"https://{match.group(1)}"

    return HTTP_URL.sub(_replace, text), count


def upgrade_urls(doc: Document, identity: FileIdentity) -> bool:
    exceptions = identity.site.security.https_exceptions
    upgraded = 0
    for tag in doc.soup.find_all(True):
        attributes = URL_ATTRIBUTES + (("content",) if tag.name == "meta" else ())
        for attr in attributes:
            value = tag.get(attr)
            if not isinstance(value, str) or "http://" not in value:
                continue
            new_value, count = upgrade_text(value, exceptions)
            if count:
                tag[attr] = new_value
                upgraded += count
    for style in doc.find_all("style"):
        css = style.string
        if css and "http://" in css:
            new_css, count = upgrade_text(str(css), exceptions)
            if count:
                style.string = new_css
                upgraded += count
    if upgraded:
        doc.note(f"Upgraded {upgraded} URL(s) to HTTPS")
    return upgraded > 0


def upgrade_asset_files(public_dir: Path, site: SiteConfig) -> List[FileOutcome]:
    """Apply the same rewrite to CSS and JavaScript files, anywhere under the root."""

    root = Path(public_dir).resolve()
    outcomes: List[FileOutcome] = []
    for path in list_files(root, ASSET_EXTENSIONS, exclude_patterns=(), recursive=True):
        filename = relative_name(path, root)
        try:
            text = path.read_text(encoding="utf-8")
            new_text, count = upgrade_text(text, site.security.https_exceptions)
            if count:
                path.write_text(new_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            message = f"{type(exc).__name__}: {exc}"
            warn(f"  {filename}: {message}")
            outcomes.append(FileOutcome(filename=filename, modified=False, errors=(message,)))
            continue
        if count:
            outcomes.append(
                FileOutcome(
                    filename=filename,
                    modified=True,
                    issues_found=(f"Upgraded {count} URL(s) to HTTPS",),
                )
            )
    return outcomes


def ensure_apache_redirect(htaccess: Path) -> bool:
    """Append the HTTP to HTTPS rewrite block unless one is present."""

    text = htaccess.read_text(encoding="utf-8") if htaccess.is_file() else ""
    if REDIRECT_MARKER in text:
        return False
    htaccess.parent.mkdir(parents=True, exist_ok=True)
    prefix = text.rstrip("\n") + "\n" if text else ""
    htaccess.write_text(prefix + APACHE_REDIRECT_BLOCK, encoding="utf-8")
    return True


RULE_SET = RuleSet(
    name="https",
    report_type="https-enforcement",
    title="HTTPS Enforcement Report",
    rules=(
        Rule(
            "upgrade-urls",
            upgrade_urls,
            "Confirm upgraded third-party URLs are actually served over HTTPS.",
        ),
    ),
)


__all__ = [
    "APACHE_REDIRECT_BLOCK",
    "HTTP_URL",
    "RULE_SET",
    "ensure_apache_redirect",
    "upgrade_asset_files",
    "upgrade_text",
    "upgrade_urls",
]
