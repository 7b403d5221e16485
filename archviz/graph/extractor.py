"""
Relationship extraction from an aggregate crate model.

This module derives every edge of the architecture graph from the
entities in a CrateAnalysis, using best-effort name resolution.
"""

import logging
from typing import List

from archviz.core.analysis import CrateAnalysis
from archviz.core.relationships import Relationship, RelationType
from archviz.core.resolver import (
    NameIndex,
    extract_type_references,
    strip_generic_args,
)

logger = logging.getLogger(__name__)


class RelationshipAnalyzer:
    """
    Extracts relationships from a crate model.

    Runs five independent passes over the model:
    - Implementation (type implements trait)
    - Containment (struct and enum variant fields)
    - Calls (free function call targets)
    - Module dependencies (use statements, declared submodules)
    - Trait inheritance (super-traits)

    Analysis is not incremental: every call recomputes all passes and
    replaces the model's relationship list.
    """

    def analyze(self, analysis: CrateAnalysis) -> List[Relationship]:
        """
        Replace `analysis.relationships` with freshly extracted edges.

        Args:
            analysis: The merged crate model; mutated in place

        Returns:
            The new relationship list
        """
        type_index = NameIndex.of(analysis.all_type_names())
        trait_index = NameIndex.of(analysis.traits)

        passes = [
            ("implements", self.analyze_impl_relationships(analysis, type_index, trait_index)),
            ("contains", self.analyze_field_relationships(analysis, type_index)),
            ("calls", self.analyze_call_relationships(analysis)),
            ("modules", self.analyze_module_dependencies(analysis)),
            ("extends", self.analyze_trait_inheritance(analysis, trait_index)),
        ]

        relationships: List[Relationship] = []
        for pass_name, edges in passes:
            logger.debug("%s pass produced %d relationships", pass_name, len(edges))
            relationships.extend(edges)

        analysis.relationships = relationships
        logger.info("Extracted %d relationships for %s", len(relationships), analysis.name)
        return relationships

    def analyze_impl_relationships(self, analysis: CrateAnalysis, type_index: NameIndex,
                                   trait_index: NameIndex) -> List[Relationship]:
        """Extract IMPLEMENTS edges from trait impl blocks."""
        relationships = []

        for impl_block in analysis.impls:
            if impl_block.trait_name is None:
                continue

            self_type = type_index.resolve(strip_generic_args(impl_block.self_type))
            trait_full = trait_index.resolve(strip_generic_args(impl_block.trait_name))

            relationships.append(Relationship(
                source=self_type,
                target=trait_full,
                rel_type=RelationType.IMPLEMENTS
            ))

        return relationships

    def analyze_field_relationships(self, analysis: CrateAnalysis,
                                    type_index: NameIndex) -> List[Relationship]:
        """Extract CONTAINS edges from struct fields and enum variant fields."""
        relationships = []

        for full_name, struct in analysis.structs.items():
            for position, struct_field in enumerate(struct.fields):
                label = struct_field.name or str(position)
                for ref_type in extract_type_references(struct_field.ty, type_index,
                                                        struct.generics):
                    relationships.append(Relationship(
                        source=full_name,
                        target=ref_type,
                        rel_type=RelationType.CONTAINS,
                        label=label
                    ))

        for full_name, enum in analysis.enums.items():
            for variant in enum.variants:
                for position, variant_field in enumerate(variant.fields):
                    field_name = variant_field.name or str(position)
                    for ref_type in extract_type_references(variant_field.ty, type_index,
                                                            enum.generics):
                        relationships.append(Relationship(
                            source=full_name,
                            target=ref_type,
                            rel_type=RelationType.CONTAINS,
                            label=f"{variant.name}::{field_name}"
                        ))

        return relationships

    def analyze_call_relationships(self, analysis: CrateAnalysis) -> List[Relationship]:
        """
        Extract CALLS edges between free functions.

        Calls that do not resolve to a known function produce no edge.
        Method calls inside impl blocks are not tracked.
        """
        relationships = []
        function_index = NameIndex.of(analysis.functions)

        for full_name, function in analysis.functions.items():
            for call in function.calls:
                called = function_index.resolve_function(call, function.module_path)
                if not called:
                    continue
                relationships.append(Relationship(
                    source=full_name,
                    target=called,
                    rel_type=RelationType.CALLS
                ))

        return relationships

    def analyze_module_dependencies(self, analysis: CrateAnalysis) -> List[Relationship]:
        """Extract DEPENDS_ON edges from use statements and CONTAINS edges to submodules."""
        relationships = []

        for module_path, module in analysis.modules.items():
            for use in module.uses:
                dep_module = use.imported_module
                if dep_module and dep_module != module_path:
                    relationships.append(Relationship(
                        source=module_path,
                        target=dep_module,
                        rel_type=RelationType.DEPENDS_ON
                    ))

            for submodule in module.submodules:
                relationships.append(Relationship(
                    source=module_path,
                    target=f"{module_path}::{submodule}",
                    rel_type=RelationType.CONTAINS
                ))

        return relationships

    def analyze_trait_inheritance(self, analysis: CrateAnalysis,
                                  trait_index: NameIndex) -> List[Relationship]:
        """Extract EXTENDS edges from trait super-trait lists."""
        relationships = []

        for full_name, trait in analysis.traits.items():
            for super_trait in trait.super_traits:
                relationships.append(Relationship(
                    source=full_name,
                    target=trait_index.resolve(strip_generic_args(super_trait)),
                    rel_type=RelationType.EXTENDS
                ))

        return relationships


def analyze_relationships(analysis: CrateAnalysis) -> CrateAnalysis:
    """
    Convenience function to run every extraction pass on a model.

    Args:
        analysis: Merged crate model

    Returns:
        The same model, with its relationship list replaced
    """
    RelationshipAnalyzer().analyze(analysis)
    return analysis
