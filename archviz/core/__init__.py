"""
Core module for archviz architecture analysis.
"""

from .entities import (
    Visibility,
    MethodReceiver,
    StructField,
    EnumVariant,
    Method,
    StructEntity,
    EnumEntity,
    TraitEntity,
    ImplBlock,
    FunctionEntity,
    UseEntity,
    ModuleEntity,
    join_path
)

from .relationships import (
    RelationType,
    Relationship,
    RelationshipGraph
)

from .analysis import (
    CrateAnalysis,
    merge_all
)

from .resolver import (
    PRIMITIVE_TYPES,
    NameIndex,
    simple_name,
    is_primitive_type,
    strip_generic_args,
    resolve_type_name,
    resolve_trait_name,
    resolve_function_name,
    extract_type_references
)

__all__ = [
    # Entities
    "Visibility",
    "MethodReceiver",
    "StructField",
    "EnumVariant",
    "Method",
    "StructEntity",
    "EnumEntity",
    "TraitEntity",
    "ImplBlock",
    "FunctionEntity",
    "UseEntity",
    "ModuleEntity",
    "join_path",
    # Relationships
    "RelationType",
    "Relationship",
    "RelationshipGraph",
    # Aggregate
    "CrateAnalysis",
    "merge_all",
    # Resolver
    "PRIMITIVE_TYPES",
    "NameIndex",
    "simple_name",
    "is_primitive_type",
    "strip_generic_args",
    "resolve_type_name",
    "resolve_trait_name",
    "resolve_function_name",
    "extract_type_references",
]
