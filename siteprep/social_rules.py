"""Open Graph, Twitter card and publisher meta tags."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .dom import Document, ensure_meta, text_of
from .pipeline import FileIdentity, Rule, RuleSet
from .seo_rules import desired_description, desired_title


@dataclass(frozen=True)
class ShareInfo:
    title: str
    description: str
    url: str
    image: Optional[str]
    kind: str


def share_info(doc: Document, identity: FileIdentity) -> ShareInfo:
    """Read what the page already says about itself, falling back to defaults."""

    title_tag = doc.find("title")
    title = text_of(title_tag) if title_tag is not None else ""
    if not title:
        title = desired_title(None, identity)

    meta = doc.find("meta", {"name": "description"})
    description = (meta.get("content") or "").strip() if meta is not None else ""
    if not description:
        description = identity.site.social.default_description or desired_description(
            None, identity
        )

    canonical = doc.find("link", {"rel": "canonical"})
    url = (canonical.get("href") if canonical is not None else None) or identity.canonical_url

    page = identity.page
    image = (page.image if page else None) or identity.site.social.default_image
    kind = "website" if identity.filename == "index.html" else "article"
    return ShareInfo(title=title, description=description, url=url, image=image, kind=kind)


def _apply(doc: Document, attr: str, tags: List[Tuple[str, str]]) -> bool:
    changed = False
    for key, value in tags:
        changed = ensure_meta(doc, attr, key, value) or changed
    return changed


def add_open_graph(doc: Document, identity: FileIdentity) -> bool:
    info = share_info(doc, identity)
    social = identity.site.social
    tags = [
        ("og:title", info.title),
        ("og:description", info.description),
        ("og:url", info.url),
        ("og:type", info.kind),
    ]
    if info.image:
        tags += [
            ("og:image", info.image),
            ("og:image:width", "1200"),
            ("og:image:height", "630"),
        ]
    tags += [("og:site_name", identity.site.site_name), ("og:locale", social.locale)]
    return _apply(doc, "property", tags)


def add_twitter_card(doc: Document, identity: FileIdentity) -> bool:
    info = share_info(doc, identity)
    handle = identity.site.social.twitter_handle
    tags = [
        ("twitter:card", "summary_large_image"),
        ("twitter:title", info.title),
        ("twitter:description", info.description),
        ("twitter:url", info.url),
    ]
    if info.image:
        tags.append(("twitter:image", info.image))
    if handle:
        tags += [("twitter:site", handle), ("twitter:creator", handle)]
    return _apply(doc, "name", tags)


def add_publisher_meta(doc: Document, identity: FileIdentity) -> bool:
    social = identity.site.social
    changed = _apply(
        doc,
        "name",
        [
            ("author", identity.site.site_name),
            ("publisher", identity.site.site_name),
            ("theme-color", social.theme_color),
        ],
    )
    if social.facebook_page:
        changed = ensure_meta(doc, "property", "article:publisher", social.facebook_page) or changed
    return changed


RULE_SET = RuleSet(
    name="social",
    report_type="social-meta-tags",
    title="Social Meta Tags Report",
    rules=(
        Rule(
            "open-graph",
            add_open_graph,
            "Provide a 1200x630 share image for pages without a dedicated image.",
        ),
        Rule(
            "twitter-card",
            add_twitter_card,
            "Validate cards with the Twitter card validator after deployment.",
        ),
        Rule("publisher-meta", add_publisher_meta),
    ),
)


__all__ = [
    "RULE_SET",
    "ShareInfo",
    "add_open_graph",
    "add_publisher_meta",
    "add_twitter_card",
    "share_info",
]
