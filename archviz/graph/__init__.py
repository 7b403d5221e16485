"""
Graph module - Relationship extraction and architecture graph analysis.

This module handles populating the relationship graph of a crate model
and projecting it onto NetworkX for structural queries.
"""

from .extractor import (
    RelationshipAnalyzer,
    analyze_relationships
)

from .code_graph import (
    ArchitectureGraph,
    EXTERNAL_KIND
)

__all__ = [
    # Extractor
    "RelationshipAnalyzer",
    "analyze_relationships",
    # Graph
    "ArchitectureGraph",
    "EXTERNAL_KIND",
]
