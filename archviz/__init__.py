"""
archviz - architecture diagrams from structural crate models.

Pipeline: per-unit CrateAnalysis -> merge -> RelationshipAnalyzer ->
MermaidGenerator.
"""

from .core import (
    CrateAnalysis,
    merge_all,
    RelationType,
    Relationship,
    NameIndex,
)
from .graph import (
    RelationshipAnalyzer,
    analyze_relationships,
    ArchitectureGraph,
)
from .diagrams import (
    DiagramType,
    MermaidGenerator,
    sanitize_id,
)

__version__ = "0.1.0"

__all__ = [
    "CrateAnalysis",
    "merge_all",
    "RelationType",
    "Relationship",
    "NameIndex",
    "RelationshipAnalyzer",
    "analyze_relationships",
    "ArchitectureGraph",
    "DiagramType",
    "MermaidGenerator",
    "sanitize_id",
]
