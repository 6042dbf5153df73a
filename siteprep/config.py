"""Loading of site.yaml into a validated SiteConfig."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .models import Organization, SiteConfig

DEFAULT_SITE_CONFIG = Path("config/site.yaml")


class SiteConfigError(ValueError):
    """Raised when site.yaml is missing, malformed, or fails validation."""


def default_site_config() -> SiteConfig:
    """Built-in configuration used when no site.yaml is available."""

    return SiteConfig(
        organization=Organization(name="Example Organization", base_url="https://www.example.com")
    )


def load_site_config(path: Path) -> SiteConfig:
    if not path.is_file():
        raise SiteConfigError(f"Site config not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise SiteConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SiteConfigError(f"{path} must contain a mapping at the top level.")
    try:
        return SiteConfig.model_validate(data)
    except ValidationError as exc:
        raise SiteConfigError(f"Invalid site config in {path}: {exc}") from exc


def resolve_site_config(path: Optional[str]) -> SiteConfig:
    """Load an explicit path, else the conventional location, else defaults."""

    if path:
        return load_site_config(Path(path))
    if DEFAULT_SITE_CONFIG.is_file():
        return load_site_config(DEFAULT_SITE_CONFIG)
    return default_site_config()


__all__ = [
    "DEFAULT_SITE_CONFIG",
    "SiteConfigError",
    "default_site_config",
    "load_site_config",
    "resolve_site_config",
]
