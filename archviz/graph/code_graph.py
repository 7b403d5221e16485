"""
NetworkX projection of an analyzed crate.

Builds a multi-digraph from the entity maps and relationship list of a
CrateAnalysis and provides structural queries over it:
- Dependencies and dependents of an item
- Module dependency cycles
- Dangling (unresolved or external) edge targets
- Graph statistics
"""

import networkx as nx
from typing import Dict, List, Optional, Set

from archviz.core.analysis import CrateAnalysis
from archviz.core.relationships import Relationship, RelationType


EXTERNAL_KIND = "external"


class ArchitectureGraph:
    """
    Architecture graph for one crate.

    Wraps a NetworkX MultiDiGraph: parallel edges of different kinds
    between the same two items are all kept.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.graph = nx.MultiDiGraph()
        self.relationships: List[Relationship] = []

    @classmethod
    def from_analysis(cls, analysis: CrateAnalysis) -> "ArchitectureGraph":
        graph = cls(analysis.name)

        for full_name in analysis.modules:
            graph.add_item(full_name, "module")
        for full_name in analysis.structs:
            graph.add_item(full_name, "struct")
        for full_name in analysis.enums:
            graph.add_item(full_name, "enum")
        for full_name in analysis.traits:
            graph.add_item(full_name, "trait")
        for full_name in analysis.functions:
            graph.add_item(full_name, "function")

        graph.add_relationships(analysis.relationships)
        return graph

    def add_item(self, item_id: str, kind: str):
        """Add an item node to the graph."""
        self.graph.add_node(item_id, kind=kind)

    def add_relationship(self, rel: Relationship):
        """Add a relationship edge; unknown endpoints become external nodes."""
        self.relationships.append(rel)
        for endpoint in (rel.source, rel.target):
            if endpoint not in self.graph:
                self.graph.add_node(endpoint, kind=EXTERNAL_KIND)

        self.graph.add_edge(
            rel.source,
            rel.target,
            type=rel.rel_type.value,
            label=rel.label
        )

    def add_relationships(self, rels: List[Relationship]):
        for rel in rels:
            self.add_relationship(rel)

    def kind_of(self, item_id: str) -> Optional[str]:
        if item_id not in self.graph:
            return None
        return self.graph.nodes[item_id].get("kind")

    def _edge_types(self, source: str, target: str) -> Set[str]:
        data = self.graph.get_edge_data(source, target) or {}
        return {attrs.get("type") for attrs in data.values()}

    def get_dependencies(self, item_id: str,
                         rel_types: Optional[Set[RelationType]] = None) -> List[str]:
        """Get all items this item points to, optionally filtered by edge type."""
        if item_id not in self.graph:
            return []
        wanted = {rt.value for rt in rel_types} if rel_types else None

        deps = []
        for succ in self.graph.successors(item_id):
            if wanted is None or self._edge_types(item_id, succ) & wanted:
                deps.append(succ)
        return deps

    def get_dependents(self, item_id: str,
                       rel_types: Optional[Set[RelationType]] = None) -> List[str]:
        """Get all items pointing at this item, optionally filtered by edge type."""
        if item_id not in self.graph:
            return []
        wanted = {rt.value for rt in rel_types} if rel_types else None

        deps = []
        for pred in self.graph.predecessors(item_id):
            if wanted is None or self._edge_types(pred, item_id) & wanted:
                deps.append(pred)
        return deps

    def dangling_targets(self) -> List[str]:
        """Edge endpoints that match no known entity, in first-seen order."""
        return [node for node, kind in self.graph.nodes(data="kind")
                if kind == EXTERNAL_KIND]

    def module_dependency_graph(self) -> nx.DiGraph:
        """Collapse DependsOn edges into a simple module digraph."""
        modules = nx.DiGraph()
        for source, target, edge_type in self.graph.edges(data="type"):
            if edge_type == RelationType.DEPENDS_ON.value:
                modules.add_edge(source, target)
        return modules

    def find_module_cycles(self) -> List[List[str]]:
        """Find all cycles among module dependencies."""
        return [cycle for cycle in nx.simple_cycles(self.module_dependency_graph())]

    def get_statistics(self) -> Dict:
        """Get graph statistics."""
        stats = {
            "nodes": self.graph.number_of_nodes(),
            "edges": self.graph.number_of_edges(),
            "density": nx.density(self.graph) if self.graph.number_of_nodes() > 0 else 0,
        }

        node_kinds: Dict[str, int] = {}
        for _, kind in self.graph.nodes(data="kind"):
            node_kinds[kind] = node_kinds.get(kind, 0) + 1
        stats["node_kinds"] = node_kinds

        edge_types: Dict[str, int] = {}
        for _, _, edge_type in self.graph.edges(data="type"):
            edge_types[edge_type] = edge_types.get(edge_type, 0) + 1
        stats["edge_types"] = edge_types

        return stats
