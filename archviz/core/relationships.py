"""
Relationship types and models for the architecture graph.

Edges are plain (source, target, kind, label) records. Endpoints are
opaque names and are not required to match a known entity: an edge to
an external or unresolved symbol is kept as-is.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from enum import Enum


class RelationType(Enum):
    """
    Types of relationships between architecture items.

    These represent the edges in the architecture graph.
    """

    IMPLEMENTS = "Implements"   # Struct/Enum implements Trait
    CONTAINS = "Contains"       # Field holds another type, module holds submodule
    CALLS = "Calls"             # Function calls another function
    DEPENDS_ON = "DependsOn"    # Module depends on another (via use)
    EXTENDS = "Extends"         # Trait extends another trait
    REFERENCES = "References"   # Type references another type


@dataclass
class Relationship:
    """
    A directed edge between two items.

    Attributes:
        source: Fully-qualified name of the source item
        target: Fully-qualified (or unresolved) name of the target item
        rel_type: Type of relationship
        label: Optional edge label (field name for containment)
    """
    source: str
    target: str
    rel_type: RelationType
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize relationship to dictionary."""
        return {
            "from": self.source,
            "to": self.target,
            "relation_type": self.rel_type.value,
            "label": self.label
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        """Deserialize relationship from dictionary."""
        return cls(
            source=data["from"],
            target=data["to"],
            rel_type=RelationType(data["relation_type"]),
            label=data.get("label")
        )


@dataclass
class RelationshipGraph:
    """
    Read-only query helpers over a relationship list.

    Wraps the list held by a CrateAnalysis without copying it.
    """
    relationships: List[Relationship] = field(default_factory=list)

    def get_by_source(self, source: str) -> List[Relationship]:
        """Get all relationships from a source item."""
        return [r for r in self.relationships if r.source == source]

    def get_by_target(self, target: str) -> List[Relationship]:
        """Get all relationships pointing to a target item."""
        return [r for r in self.relationships if r.target == target]

    def get_by_type(self, rel_type: RelationType) -> List[Relationship]:
        """Get all relationships of a specific type."""
        return [r for r in self.relationships if r.rel_type == rel_type]

    def get_callers(self, function_name: str) -> List[str]:
        return [r.source for r in self.relationships
                if r.target == function_name and r.rel_type == RelationType.CALLS]

    def get_callees(self, function_name: str) -> List[str]:
        return [r.target for r in self.relationships
                if r.source == function_name and r.rel_type == RelationType.CALLS]

    def get_implementors(self, trait_name: str) -> List[str]:
        """Get all types that implement a trait."""
        return [r.source for r in self.relationships
                if r.target == trait_name and r.rel_type == RelationType.IMPLEMENTS]

    def get_super_traits(self, trait_name: str) -> List[str]:
        """Get the transitive super-traits of a trait, nearest first."""
        chain = []
        pending = [trait_name]
        visited = set()

        while pending:
            current = pending.pop(0)
            if current in visited:
                continue
            visited.add(current)
            parents = [r.target for r in self.relationships
                       if r.source == current and r.rel_type == RelationType.EXTENDS]
            for parent in parents:
                if parent not in chain:
                    chain.append(parent)
            pending.extend(parents)

        return chain

    def to_dict_list(self) -> List[Dict[str, Any]]:
        """Serialize all relationships to list of dictionaries."""
        return [r.to_dict() for r in self.relationships]

    def statistics(self) -> Dict[str, int]:
        """Get statistics about relationship types."""
        stats = {}
        for rel_type in RelationType:
            count = len([r for r in self.relationships if r.rel_type == rel_type])
            if count > 0:
                stats[rel_type.value] = count
        stats["total"] = len(self.relationships)
        return stats
