"""Per-file rule pipeline shared by every enhancement pass.

A pass enumerates the HTML files under the public directory, parses each
one into a :class:`~siteprep.dom.Document`, applies an ordered list of
rules and writes the file back only when some rule changed it.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .discovery import list_files, relative_name
from .dom import Document
from .io_utils import warn, write_text_if_changed
from .models import PageConfig, SiteConfig
from .reporting import FileOutcome, ScanReport


def humanize(value: str) -> str:
    """``company-profile`` -> ``Company Profile``."""

    words = [word for word in re.split(r"[-_\s]+", value) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


@dataclass(frozen=True)
class FileIdentity:
    """What a rule knows about the file it is editing."""

    filename: str
    path: Path
    root: Path
    site: SiteConfig

    @property
    def page(self) -> Optional[PageConfig]:
        return self.site.page(self.filename)

    @property
    def stem(self) -> str:
        return Path(self.filename).stem

    @property
    def label(self) -> str:
        return humanize(self.stem)

    @property
    def canonical_url(self) -> str:
        return f"{self.site.organization.base_url}/{self.filename}"

    def href_to(self, target: str) -> str:
        """Relative href from this file to ``target`` (relative to the root)."""

        return Path(os.path.relpath(self.root / target, self.path.parent)).as_posix()


RuleFn = Callable[[Document, FileIdentity], bool]


@dataclass(frozen=True)
class Rule:
    name: str
    apply: RuleFn
    recommendation: str = ""


@dataclass(frozen=True)
class SharedStylesheet:
    """Stylesheet written once per run and linked from every page."""

    path: str
    content: str


@dataclass(frozen=True)
class RuleSet:
    name: str
    report_type: str
    title: str
    rules: Tuple[Rule, ...]
    stylesheet: Optional[SharedStylesheet] = None


def transform(text: str, identity: FileIdentity, rules: Sequence[Rule]) -> Tuple[Document, List[str]]:
    """Apply ``rules`` in order; return the document and the rules that changed it."""

    document = Document(text)
    changed: List[str] = []
    for rule in rules:
        if rule.apply(document, identity):
            changed.append(rule.name)
    return document, changed


def write_document(path: Path, document: Document) -> None:
    path.write_text(document.serialize(), encoding="utf-8")


def process_file(path: Path, root: Path, site: SiteConfig, rules: Sequence[Rule]) -> FileOutcome:
    filename = relative_name(path, root)
    identity = FileIdentity(filename=filename, path=path, root=root, site=site)
    try:
        document, changed = transform(path.read_text(encoding="utf-8"), identity, rules)
        if changed:
            write_document(path, document)
    except Exception as exc:
        message = f"{type(exc).__name__}: {exc}"
        warn(f"  {filename}: {message}")
        return FileOutcome(filename=filename, modified=False, errors=(message,))

    for note in document.notes:
        print(f"  {filename}: {note}")
    return FileOutcome(
        filename=filename,
        modified=bool(changed),
        issues_found=tuple(changed) + tuple(document.notes),
    )


def run_rule_set(rule_set: RuleSet, public_dir: Path, site: SiteConfig) -> ScanReport:
    """Run one rule set over every candidate HTML file under ``public_dir``."""

    files = list_files(
        public_dir,
        (".html",),
        exclude_patterns=site.exclude_patterns,
        excluded_dirs=site.excluded_dirs,
        recursive=site.recursive,
    )
    root = Path(public_dir).resolve()
    print(f"[{rule_set.name}] {len(files)} HTML file(s) under {root}")

    report = ScanReport(report_type=rule_set.report_type, title=rule_set.title)
    if rule_set.stylesheet is not None:
        css_path = root / rule_set.stylesheet.path
        if write_text_if_changed(css_path, rule_set.stylesheet.content):
            print(f"[{rule_set.name}] wrote {rule_set.stylesheet.path}")
        report.details["stylesheet"] = rule_set.stylesheet.path

    for path in files:
        outcome = process_file(path, root, site, rule_set.rules)
        report.outcomes.append(outcome)
        if outcome.errors:
            report.errors.extend(f"{outcome.filename}: {error}" for error in outcome.errors)
        else:
            report.ok(outcome.filename)

    for rule in rule_set.rules:
        if rule.recommendation and any(rule.name in o.issues_found for o in report.outcomes):
            report.recommend(rule.recommendation)

    modified = sum(1 for outcome in report.outcomes if outcome.modified)
    print(f"[{rule_set.name}] modified {modified} of {len(files)} file(s)")
    return report


__all__ = [
    "FileIdentity",
    "Rule",
    "RuleSet",
    "SharedStylesheet",
    "humanize",
    "process_file",
    "run_rule_set",
    "transform",
    "truncate",
    "write_document",
]
