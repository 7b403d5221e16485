"""
Diagram module - Mermaid renderings of an analyzed crate.
"""

from .sanitize import (
    sanitize_id,
    sanitize_type,
    parent_module,
    short_name
)

from .layers import (
    LayerRule,
    DEFAULT_LAYER_RULES,
    DEFAULT_TECHNOLOGY,
    infer_technology,
    parse_layer_rules,
    load_layer_rules,
    merge_layer_rules
)

from .mermaid import (
    DiagramType,
    MermaidGenerator,
    fence
)

__all__ = [
    "sanitize_id",
    "sanitize_type",
    "parent_module",
    "short_name",
    "LayerRule",
    "DEFAULT_LAYER_RULES",
    "DEFAULT_TECHNOLOGY",
    "infer_technology",
    "parse_layer_rules",
    "load_layer_rules",
    "merge_layer_rules",
    "DiagramType",
    "MermaidGenerator",
    "fence",
]
