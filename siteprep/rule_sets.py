"""Registry of the enhancement passes available from the command line."""

from __future__ import annotations

from typing import Dict

from . import a11y_rules, https_rules, responsive_rules, seo_rules, social_rules, structured_data
from .pipeline import RuleSet

RULE_SETS: Dict[str, RuleSet] = {
    rule_set.name: rule_set
    for rule_set in (
        seo_rules.RULE_SET,
        social_rules.RULE_SET,
        a11y_rules.RULE_SET,
        responsive_rules.RULE_SET,
        structured_data.RULE_SET,
        https_rules.RULE_SET,
    )
}


__all__ = ["RULE_SETS"]
