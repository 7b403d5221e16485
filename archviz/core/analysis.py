"""
The aggregate model for one analyzed crate.

A CrateAnalysis is built per translation unit by the parser front-end
and merged into a single crate-wide model. The relationship analyzer
then replaces its relationship list in one pass.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Any

from .entities import (
    StructEntity,
    EnumEntity,
    TraitEntity,
    ImplBlock,
    FunctionEntity,
    ModuleEntity,
)
from .relationships import Relationship, RelationshipGraph


@dataclass
class CrateAnalysis:
    """
    All entities discovered in a crate plus the relationship graph.

    Entity maps are keyed by fully-qualified name and keep insertion
    order, which is also the order diagrams are rendered in.
    """
    name: str
    structs: Dict[str, StructEntity] = field(default_factory=dict)
    enums: Dict[str, EnumEntity] = field(default_factory=dict)
    traits: Dict[str, TraitEntity] = field(default_factory=dict)
    impls: List[ImplBlock] = field(default_factory=list)
    functions: Dict[str, FunctionEntity] = field(default_factory=dict)
    modules: Dict[str, ModuleEntity] = field(default_factory=dict)
    relationships: List[Relationship] = field(default_factory=list)

    # --- Registration ---

    def add_struct(self, struct: StructEntity) -> str:
        key = struct.full_name
        self.structs[key] = struct
        return key

    def add_enum(self, enum: EnumEntity) -> str:
        key = enum.full_name
        self.enums[key] = enum
        return key

    def add_trait(self, trait: TraitEntity) -> str:
        key = trait.full_name
        self.traits[key] = trait
        return key

    def add_function(self, function: FunctionEntity) -> str:
        key = function.full_name
        self.functions[key] = function
        return key

    def add_module(self, module: ModuleEntity) -> str:
        self.modules[module.path] = module
        return module.path

    def add_impl(self, impl_block: ImplBlock):
        self.impls.append(impl_block)

    # --- Merging ---

    def merge(self, other: "CrateAnalysis"):
        """
        Merge another analysis into this one.

        Entity maps are unioned with the other side winning on key
        collisions. Impl blocks and relationships are appended as-is,
        never deduplicated.
        """
        self.structs.update(other.structs)
        self.enums.update(other.enums)
        self.traits.update(other.traits)
        self.impls.extend(other.impls)
        self.functions.update(other.functions)
        self.modules.update(other.modules)
        self.relationships.extend(other.relationships)

    def all_type_names(self) -> List[str]:
        """
        Get every struct and enum key.

        Returned as an ordered, duplicate-free list (structs first) so
        that name resolution picks the first inserted candidate.
        """
        names = dict.fromkeys(self.structs)
        names.update(dict.fromkeys(self.enums))
        return list(names)

    @property
    def graph(self) -> RelationshipGraph:
        return RelationshipGraph(self.relationships)

    def is_empty(self) -> bool:
        return not (self.structs or self.enums or self.traits or self.impls
                    or self.functions or self.modules)

    def statistics(self) -> Dict[str, Any]:
        """Count entities per kind and relationships per type."""
        return {
            "structs": len(self.structs),
            "enums": len(self.enums),
            "traits": len(self.traits),
            "impls": len(self.impls),
            "functions": len(self.functions),
            "modules": len(self.modules),
            "relationships": self.graph.statistics()
        }

    # --- Serialization ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "structs": {k: v.to_dict() for k, v in self.structs.items()},
            "enums": {k: v.to_dict() for k, v in self.enums.items()},
            "traits": {k: v.to_dict() for k, v in self.traits.items()},
            "impls": [i.to_dict() for i in self.impls],
            "functions": {k: v.to_dict() for k, v in self.functions.items()},
            "modules": {k: v.to_dict() for k, v in self.modules.items()},
            "relationships": self.graph.to_dict_list()
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrateAnalysis":
        """
        Rebuild an analysis from its dictionary form.

        Map keys are kept exactly as serialized. Raises KeyError or
        ValueError on malformed input.
        """
        return cls(
            name=data["name"],
            structs={k: StructEntity.from_dict(v) for k, v in data.get("structs", {}).items()},
            enums={k: EnumEntity.from_dict(v) for k, v in data.get("enums", {}).items()},
            traits={k: TraitEntity.from_dict(v) for k, v in data.get("traits", {}).items()},
            impls=[ImplBlock.from_dict(i) for i in data.get("impls", [])],
            functions={k: FunctionEntity.from_dict(v) for k, v in data.get("functions", {}).items()},
            modules={k: ModuleEntity.from_dict(v) for k, v in data.get("modules", {}).items()},
            relationships=[Relationship.from_dict(r) for r in data.get("relationships", [])]
        )


def merge_all(name: str, analyses: Iterable[CrateAnalysis]) -> CrateAnalysis:
    """Fold per-unit analyses into one crate-level analysis, in order."""
    crate = CrateAnalysis(name)
    for analysis in analyses:
        crate.merge(analysis)
    return crate
