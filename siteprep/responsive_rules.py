"""Viewport, fluid images, touch targets and scrollable tables."""

from __future__ import annotations

from .dom import Document, add_class, ensure_stylesheet, set_attr
from .pipeline import FileIdentity, Rule, RuleSet
from .shared_assets import RESPONSIVE_STYLESHEET

VIEWPORT_CONTENT = "width=device-width, initial-scale=1, shrink-to-fit=no"
TOUCH_TARGET_CLASS = "touch-target"
TOUCH_TARGET_SELECTOR = "a, button, .btn, input, select, textarea"


def fix_viewport(doc: Document, identity: FileIdentity) -> bool:
    meta = doc.find("meta", {"name": "viewport"})
    if meta is None:
        doc.head().insert(
            0, doc.new_element("meta", {"name": "viewport", "content": VIEWPORT_CONTENT})
        )
        return True
    content = (meta.get("content") or "").replace(" ", "")
    if "width=device-width" in content and "initial-scale=1" in content:
        return False
    return set_attr(meta, "content", VIEWPORT_CONTENT)


def fluid_images(doc: Document, identity: FileIdentity) -> bool:
    changed = False
    for img in doc.find_all("img"):
        changed = add_class(img, "img-fluid") or changed
        if not img.get("loading"):
            changed = set_attr(img, "loading", "lazy") or changed
    return changed


def mark_touch_targets(doc: Document, identity: FileIdentity) -> bool:
    changed = False
    for element in doc.select(TOUCH_TARGET_SELECTOR):
        if element.name == "input" and (element.get("type") or "").lower() == "hidden":
            continue
        changed = add_class(element, TOUCH_TARGET_CLASS) or changed
    return changed


def wrap_tables(doc: Document, identity: FileIdentity) -> bool:
    changed = False
    for table in doc.find_all("table"):
        changed = add_class(table, "table") or changed
        if table.find_parent(class_="table-responsive") is not None:
            continue
        table.wrap(doc.new_element("div", {"class": "table-responsive"}))
        changed = True
    return changed


def link_stylesheet(doc: Document, identity: FileIdentity) -> bool:
    return ensure_stylesheet(doc, identity.href_to(RESPONSIVE_STYLESHEET.path))


RULE_SET = RuleSet(
    name="responsive",
    report_type="responsive-design-enhancement",
    title="Responsive Design Enhancement Report",
    stylesheet=RESPONSIVE_STYLESHEET,
    rules=(
        Rule(
            "viewport",
            fix_viewport,
            "Test pages on real devices after fixing viewport declarations.",
        ),
        Rule(
            "responsive-images",
            fluid_images,
            "Serve appropriately sized images with srcset for large hero images.",
        ),
        Rule(
            "touch-targets",
            mark_touch_targets,
            "Check that interactive elements keep a 44px minimum touch target.",
        ),
        Rule("responsive-tables", wrap_tables, "Review wide tables on narrow screens."),
        Rule("responsive-stylesheet", link_stylesheet),
    ),
)


__all__ = [
    "RULE_SET",
    "TOUCH_TARGET_CLASS",
    "VIEWPORT_CONTENT",
    "fix_viewport",
    "fluid_images",
    "link_stylesheet",
    "mark_touch_targets",
    "wrap_tables",
]
