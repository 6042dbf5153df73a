"""Document wrapper and typed mutators over BeautifulSoup trees.

Rules never poke at the soup with ad hoc ``None`` checks: ``Document.head``
and ``Document.body`` always return an element, and every mutator reports
whether it actually changed the tree so rules can stay idempotent.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, Comment, Tag
from bs4.element import PageElement, PreformattedString


class NodeKind(Enum):
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    DECLARATION = "declaration"


def node_kind(node: PageElement) -> NodeKind:
    if isinstance(node, Tag):
        return NodeKind.ELEMENT
    if isinstance(node, Comment):
        return NodeKind.COMMENT
    # Doctype, CData and processing instructions.
    if isinstance(node, PreformattedString):
        return NodeKind.DECLARATION
    return NodeKind.TEXT


def element_children(tag: Tag) -> List[Tag]:
    return [child for child in tag.children if node_kind(child) is NodeKind.ELEMENT]


def text_of(tag: Tag) -> str:
    """Visible text with whitespace collapsed."""

    return " ".join(tag.get_text(" ").split())


def set_attr(tag: Tag, name: str, value: str) -> bool:
    if tag.get(name) == value:
        return False
    tag[name] = value
    return True


def classes_of(tag: Tag) -> List[str]:
    value = tag.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def has_class(tag: Tag, name: str) -> bool:
    return name in classes_of(tag)


def add_class(tag: Tag, name: str) -> bool:
    classes = classes_of(tag)
    if name in classes:
        return False
    tag["class"] = classes + [name]
    return True


def add_tokens(tag: Tag, attr: str, tokens: Iterable[str]) -> bool:
    """Add space separated tokens (``rel`` style) that are not present yet."""

    current = tag.get(attr) or []
    if isinstance(current, str):
        current = current.split()
    missing = [token for token in tokens if token not in current]
    if not missing:
        return False
    tag[attr] = list(current) + missing
    return True


def set_text(tag: Tag, text: str) -> bool:
    text = " ".join(text.split())
    if text_of(tag) == text:
        return False
    tag.string = text
    return True


class Document:
    """One parsed HTML file plus the notes rules recorded while editing it."""

    def __init__(self, source: str) -> None:
        self.soup = BeautifulSoup(source, "html.parser")
        self.notes: List[str] = []

    def serialize(self) -> str:
        return str(self.soup)

    def note(self, message: str) -> None:
        self.notes.append(message)

    def _root(self) -> Tag:
        return self.soup.html or self.soup

    def head(self) -> Tag:
        head = self.soup.head
        if head is None:
            head = self.soup.new_tag("head")
            self._root().insert(0, head)
        return head

    def body(self) -> Tag:
        body = self.soup.body
        if body is None:
            body = self.soup.new_tag("body")
            self._root().append(body)
        return body

    def new_element(
        self, name: str, attrs: Optional[Dict[str, str]] = None, text: Optional[str] = None
    ) -> Tag:
        element = self.soup.new_tag(name, attrs=attrs or {})
        if text is not None:
            element.string = text
        return element

    def find(self, name: str, attrs: Optional[Dict[str, object]] = None) -> Optional[Tag]:
        return self.soup.find(name, attrs=attrs or {})

    def find_all(self, name, attrs: Optional[Dict[str, object]] = None) -> List[Tag]:
        return list(self.soup.find_all(name, attrs=attrs or {}))

    def select(self, selector: str) -> List[Tag]:
        return list(self.soup.select(selector))

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)


def ensure_meta(doc: Document, attr: str, key: str, content: str) -> bool:
    """Add ``<meta {attr}={key} content=...>`` or update its content."""

    meta = doc.find("meta", {attr: key})
    if meta is None:
        doc.head().append(doc.new_element("meta", {attr: key, "content": content}))
        return True
    return set_attr(meta, "content", content)


def ensure_stylesheet(doc: Document, href: str) -> bool:
    """Link a stylesheet unless a link to a file of the same name exists."""

    filename = PurePosixPath(href).name

    def _same_file(value: Optional[str]) -> bool:
        return bool(value) and PurePosixPath(value.split("?")[0]).name == filename

    if doc.soup.find("link", href=_same_file):
        return False
    doc.head().append(
        doc.new_element("link", {"rel": "stylesheet", "href": href, "type": "text/css"})
    )
    return True


__all__ = [
    "Document",
    "NodeKind",
    "add_class",
    "add_tokens",
    "classes_of",
    "element_children",
    "ensure_meta",
    "ensure_stylesheet",
    "has_class",
    "node_kind",
    "set_attr",
    "set_text",
    "text_of",
]
