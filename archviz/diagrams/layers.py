"""
Keyword table used to label C4 containers with an architectural layer.

A module's short name is matched against each rule in order; the first
rule with a keyword contained in the name wins.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import yaml


DEFAULT_TECHNOLOGY = "Rust Module"


@dataclass(frozen=True)
class LayerRule:
    """Maps name keywords to a layer label."""
    keywords: Tuple[str, ...]
    label: str

    def matches(self, module_name: str) -> bool:
        return any(keyword in module_name for keyword in self.keywords)


DEFAULT_LAYER_RULES: Tuple[LayerRule, ...] = (
    LayerRule(("service",), "Service Layer"),
    LayerRule(("repository", "repo"), "Repository Layer"),
    LayerRule(("domain", "entity", "model"), "Domain Layer"),
    LayerRule(("api", "handler"), "API Layer"),
)


def infer_technology(module_name: str,
                     rules: Sequence[LayerRule] = DEFAULT_LAYER_RULES,
                     default: str = DEFAULT_TECHNOLOGY) -> str:
    """Label for a module short name, or `default` when no rule matches."""
    for rule in rules:
        if rule.matches(module_name):
            return rule.label
    return default


def parse_layer_rules(text: str) -> List[LayerRule]:
    """
    Parse a rule table from text.

    Format: `kw1,kw2=Label;kw3=Other Label`. Raises ValueError on an
    entry without `=`, without keywords or without a label.
    """
    rules = []
    for entry in text.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ValueError(f"Layer rule '{entry}' is missing '='")
        keywords_part, label = entry.split("=", 1)
        keywords = tuple(k.strip() for k in keywords_part.split(",") if k.strip())
        label = label.strip()
        if not keywords or not label:
            raise ValueError(f"Layer rule '{entry}' needs keywords and a label")
        rules.append(LayerRule(keywords, label))
    return rules


def merge_layer_rules(overrides: Iterable[LayerRule],
                      base: Sequence[LayerRule] = DEFAULT_LAYER_RULES) -> List[LayerRule]:
    """Put override rules ahead of the base table."""
    return list(overrides) + list(base)


def load_layer_rules(config_path) -> List[LayerRule]:
    """
    Load a rule table from a YAML file.

    Expected layout:

        layers:
          - label: Infrastructure
            keywords: [infra, db]

    Raises:
        ValueError: if an entry has no label or no keywords
    """
    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    rules = []
    for position, layer_data in enumerate(raw_config.get("layers", [])):
        label = str(layer_data.get("label", "")).strip()
        keywords = tuple(str(k).strip() for k in layer_data.get("keywords", []) if str(k).strip())
        if not label or not keywords:
            raise ValueError(f"{config_path}: layer #{position} needs keywords and a label")
        rules.append(LayerRule(keywords, label))
    return rules
