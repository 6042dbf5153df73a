"""Accessibility rules: landmarks, alt text, labels and skip navigation."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable, Optional, Set

from bs4 import Tag

from .dom import Document, add_tokens, classes_of, ensure_stylesheet, set_attr, text_of
from .pipeline import FileIdentity, Rule, RuleSet, humanize
from .shared_assets import ACCESSIBILITY_STYLESHEET

PLACEHOLDER_ALTS = {"image", "img", "photo", "picture", "placeholder"}
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
DECORATIVE_ALT = "Decorative image"
SKIP_LINKS = (
    ("#main-content", "Skip to main content"),
    ("#navigation", "Skip to navigation"),
    ("#footer", "Skip to footer"),
)
UNLABELED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}


def link_stylesheet(doc: Document, identity: FileIdentity) -> bool:
    return ensure_stylesheet(doc, identity.href_to(ACCESSIBILITY_STYLESHEET.path))


def add_skip_navigation(doc: Document, identity: FileIdentity) -> bool:
    if doc.select_one(".skip-navigation") is not None:
        return False
    wrapper = doc.new_element("div", {"class": "skip-navigation"})
    for href, label in SKIP_LINKS:
        wrapper.append(doc.new_element("a", {"href": href, "class": "skip-link"}, label))
    doc.body().insert(0, wrapper)
    return True


def add_landmarks(doc: Document, identity: FileIdentity) -> bool:
    changed = False

    main = doc.find("main")
    if main is not None:
        if not main.get("id"):
            changed = set_attr(main, "id", "main-content") or changed
        changed = set_attr(main, "role", "main") or changed

    header = doc.find("header")
    if header is not None:
        changed = set_attr(header, "role", "banner") or changed

    footer = doc.find("footer")
    if footer is not None:
        changed = set_attr(footer, "role", "contentinfo") or changed
        if not footer.get("id"):
            changed = set_attr(footer, "id", "footer") or changed

    for index, nav in enumerate(doc.find_all("nav")):
        changed = set_attr(nav, "role", "navigation") or changed
        if not nav.get("aria-label") and not nav.get("aria-labelledby"):
            changed = set_attr(nav, "aria-label", "Main navigation") or changed
        if index == 0 and not nav.get("id"):
            changed = set_attr(nav, "id", "navigation") or changed
    return changed


def _needs_alt(img: Tag) -> bool:
    alt = img.get("alt")
    if alt is None:
        return True
    value = alt.strip()
    return not value or value.lower() in PLACEHOLDER_ALTS


def _marked(doc: Document, selectors: Iterable[str]) -> Set[int]:
    return {id(element) for selector in selectors for element in doc.select(selector)}


def _closest(img: Tag, marked: Set[int]) -> Optional[Tag]:
    for parent in img.parents:
        if id(parent) in marked:
            return parent
    return None


def _heading_text(container: Optional[Tag]) -> str:
    if container is None:
        return ""
    heading = container.find(HEADING_TAGS)
    return text_of(heading) if heading is not None else ""


def _filename_guess(img: Tag, identity: FileIdentity) -> str:
    src = (img.get("src") or img.get("data-src") or "").split("?")[0]
    stem = PurePosixPath(src).stem
    if "logo" in stem.lower():
        return f"{identity.site.organization.name} Logo"
    if len(re.findall(r"[A-Za-z]", stem)) < 3:
        return ""
    guess = humanize(stem)
    if guess.lower() in PLACEHOLDER_ALTS:
        return ""
    return guess


def alt_text_for(img: Tag, identity: FileIdentity, cards: Set[int]) -> str:
    """Pick alt text: override, card heading, parent heading, filename, fallback."""

    src = (img.get("src") or img.get("data-src") or "").split("?")[0]
    override = identity.site.accessibility.image_alt.get(PurePosixPath(src).name)
    if override:
        return override

    card_heading = _heading_text(_closest(img, cards))
    if card_heading:
        return f"Image for {card_heading}"

    parent_heading = _heading_text(img.parent)
    if parent_heading:
        return f"Image related to {parent_heading}"

    return _filename_guess(img, identity) or DECORATIVE_ALT


def fix_alt_text(doc: Document, identity: FileIdentity) -> bool:
    images = [img for img in doc.find_all("img") if _needs_alt(img)]
    if not images:
        return False

    settings = identity.site.accessibility
    cards = _marked(doc, settings.card_selectors)
    decorative = _marked(doc, settings.decorative_selectors)
    changed = False
    for img in images:
        alt = alt_text_for(img, identity, cards)
        changed = set_attr(img, "alt", alt) or changed
        if alt == DECORATIVE_ALT and _closest(img, decorative) is not None:
            changed = set_attr(img, "role", "presentation") or changed
            changed = set_attr(img, "aria-hidden", "true") or changed
    return changed


def _button_label(button: Tag) -> str:
    classes = " ".join(classes_of(button)).lower()
    toggle = (button.get("data-toggle") or button.get("data-bs-toggle") or "").lower()
    if "close" in classes or button.get("data-dismiss") or button.get("data-bs-dismiss"):
        return "Close"
    if "toggler" in classes or "menu" in classes or toggle == "collapse":
        return "Open menu"
    return "Interactive button"


def label_buttons(doc: Document, identity: FileIdentity) -> bool:
    changed = False
    for button in doc.find_all("button"):
        if text_of(button) or button.get("aria-label") or button.get("aria-labelledby"):
            continue
        changed = set_attr(button, "aria-label", _button_label(button)) or changed
    return changed


def _has_label(doc: Document, field: Tag) -> bool:
    if field.get("aria-label") or field.get("aria-labelledby"):
        return True
    if field.find_parent("label") is not None:
        return True
    field_id = field.get("id")
    return bool(field_id) and doc.find("label", {"for": field_id}) is not None


def label_form_fields(doc: Document, identity: FileIdentity) -> bool:
    changed = False
    for field in doc.find_all(["input", "select", "textarea"]):
        if field.name == "input" and (field.get("type") or "").lower() in UNLABELED_INPUT_TYPES:
            continue
        if not _has_label(doc, field):
            label = (field.get("placeholder") or "").strip() or humanize(field.get("name") or "")
            if label:
                changed = set_attr(field, "aria-label", label) or changed
        if field.has_attr("required"):
            changed = set_attr(field, "aria-required", "true") or changed
    return changed


def describe_links(doc: Document, identity: FileIdentity) -> bool:
    changed = False
    for link in doc.find_all("a", {"href": True}):
        href = link["href"].strip()
        if not link.get("aria-label"):
            if href.startswith("mailto:"):
                address = href[len("mailto:"):].split("?")[0]
                changed = set_attr(link, "aria-label", f"Send email to {address}") or changed
            elif href.startswith("tel:"):
                changed = set_attr(link, "aria-label", f"Call {href[len('tel:'):]}") or changed
        if link.get("target") == "_blank":
            changed = add_tokens(link, "rel", ["noopener", "noreferrer"]) or changed
    return changed


RULE_SET = RuleSet(
    name="accessibility",
    report_type="accessibility-enhancement",
    title="Accessibility Enhancement Report",
    stylesheet=ACCESSIBILITY_STYLESHEET,
    rules=(
        Rule("accessibility-stylesheet", link_stylesheet),
        Rule(
            "skip-navigation",
            add_skip_navigation,
            "Make sure skip links target existing #main-content, #navigation and #footer ids.",
        ),
        Rule(
            "landmarks",
            add_landmarks,
            "Wrap primary content in a <main> element on pages that lack one.",
        ),
        Rule(
            "alt-text",
            fix_alt_text,
            "Review generated alt text and replace heuristics with real descriptions.",
        ),
        Rule("button-labels", label_buttons, "Give icon-only buttons visible or ARIA labels."),
        Rule(
            "form-labels",
            label_form_fields,
            "Prefer visible <label> elements over aria-label for form fields.",
        ),
        Rule("link-descriptions", describe_links),
    ),
)


__all__ = [
    "DECORATIVE_ALT",
    "RULE_SET",
    "add_landmarks",
    "add_skip_navigation",
    "alt_text_for",
    "describe_links",
    "fix_alt_text",
    "label_buttons",
    "label_form_fields",
    "link_stylesheet",
]
