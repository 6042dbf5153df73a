"""Title, description, canonical and heading rules."""

from __future__ import annotations

from typing import Optional, Sequence

from bs4 import Tag

from .dom import Document, ensure_meta, set_attr, set_text, text_of
from .pipeline import FileIdentity, Rule, RuleSet, truncate

MAX_TITLE_LENGTH = 60
MIN_TITLE_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 160
MIN_DESCRIPTION_LENGTH = 120


def desired_title(current: Optional[str], identity: FileIdentity) -> str:
    page = identity.page
    if page and page.title:
        return page.title
    if current and len(current) > MAX_TITLE_LENGTH:
        return truncate(current, MAX_TITLE_LENGTH)
    if not current or len(current) < MIN_TITLE_LENGTH:
        synthesized = f"{identity.label} - {identity.site.organization.name}"
        return truncate(synthesized, MAX_TITLE_LENGTH)
    return current


def synthesized_description(identity: FileIdentity) -> str:
    organization = identity.site.organization
    topic = identity.stem.replace("-", " ").replace("_", " ")
    sentence = f"Professional {topic} services by {organization.name}."
    if organization.description_suffix:
        sentence = f"{sentence} {organization.description_suffix}"
    return truncate(sentence, MAX_DESCRIPTION_LENGTH)


def desired_description(current: Optional[str], identity: FileIdentity) -> str:
    page = identity.page
    if page and page.description:
        return page.description
    if current and len(current) > MAX_DESCRIPTION_LENGTH:
        return truncate(current, MAX_DESCRIPTION_LENGTH)
    if not current or len(current) < MIN_DESCRIPTION_LENGTH:
        return synthesized_description(identity)
    return current


def fix_title(doc: Document, identity: FileIdentity) -> bool:
    title = doc.find("title")
    current = text_of(title) if title is not None else None
    wanted = desired_title(current, identity)
    if title is None:
        doc.head().insert(0, doc.new_element("title", text=wanted))
        return True
    return set_text(title, wanted)


def fix_description(doc: Document, identity: FileIdentity) -> bool:
    meta = doc.find("meta", {"name": "description"})
    current = (meta.get("content") or "").strip() if meta is not None else None
    return ensure_meta(doc, "name", "description", desired_description(current, identity))


def fix_canonical(doc: Document, identity: FileIdentity) -> bool:
    link = doc.find("link", {"rel": "canonical"})
    if link is None:
        doc.head().append(
            doc.new_element("link", {"rel": "canonical", "href": identity.canonical_url})
        )
        return True
    return set_attr(link, "href", identity.canonical_url)


def _first_container(doc: Document, selectors: Sequence[str]) -> Optional[Tag]:
    for selector in selectors:
        found = doc.select_one(selector)
        if found is not None:
            return found
    return None


def fix_headings(doc: Document, identity: FileIdentity) -> bool:
    page = identity.page
    override = page.h1 if page else None
    headings = doc.find_all("h1")

    if not headings:
        heading = doc.new_element("h1", text=override or identity.label)
        container = _first_container(doc, identity.site.accessibility.content_selectors)
        (container or doc.body()).insert(0, heading)
        return True

    changed = False
    for extra in headings[1:]:
        extra.name = "h2"
        doc.note(f"Converted extra H1 to H2: {text_of(extra)}")
        changed = True
    if override:
        changed = set_text(headings[0], override) or changed
    return changed


def fix_keywords(doc: Document, identity: FileIdentity) -> bool:
    page = identity.page
    if not page or not page.keywords:
        return False
    return ensure_meta(doc, "name", "keywords", page.keywords)


RULE_SET = RuleSet(
    name="seo",
    report_type="seo-optimization",
    title="SEO Optimization Report",
    rules=(
        Rule(
            "title",
            fix_title,
            "Review synthesized or truncated titles and add explicit titles for key pages.",
        ),
        Rule(
            "meta-description",
            fix_description,
            "Write unique meta descriptions of 120-160 characters for every page.",
        ),
        Rule(
            "canonical",
            fix_canonical,
            "Keep canonical URLs aligned with the published base URL.",
        ),
        Rule(
            "h1",
            fix_headings,
            "Keep exactly one H1 per page; demoted headings may need restyling.",
        ),
        Rule("meta-keywords", fix_keywords),
    ),
)


__all__ = [
    "MAX_DESCRIPTION_LENGTH",
    "MAX_TITLE_LENGTH",
    "MIN_DESCRIPTION_LENGTH",
    "MIN_TITLE_LENGTH",
    "RULE_SET",
    "desired_description",
    "desired_title",
    "fix_canonical",
    "fix_description",
    "fix_headings",
    "fix_keywords",
    "fix_title",
]
