"""
Tests for the five relationship extraction passes.
"""

from archviz.core.analysis import CrateAnalysis
from archviz.core.entities import (
    EnumEntity,
    EnumVariant,
    FunctionEntity,
    ImplBlock,
    StructEntity,
    StructField,
    TraitEntity,
)
from archviz.core.relationships import Relationship, RelationType
from archviz.graph.extractor import RelationshipAnalyzer, analyze_relationships


def _edges(analysis, rel_type):
    return [(r.source, r.target, r.label) for r in analysis.relationships
            if r.rel_type == rel_type]


def test_implements_edges(crate):
    assert _edges(crate, RelationType.IMPLEMENTS) == [
        ("shop::domain::User", "Display", None),
        ("shop::repository::InMemoryUserRepository", "shop::repository::UserRepository", None),
    ]


def test_inherent_impls_produce_no_edges():
    analysis = CrateAnalysis("c")
    analysis.add_struct(StructEntity("Foo", "c"))
    analysis.add_impl(ImplBlock(self_type="Foo", module_path="c"))

    assert analyze_relationships(analysis).relationships == []


def test_impl_self_type_generic_arguments_are_stripped():
    analysis = CrateAnalysis("c")
    analysis.add_struct(StructEntity("Repo", "c::store", generics=["T"]))
    analysis.add_trait(TraitEntity("Store", "c::store"))
    analysis.add_impl(ImplBlock(self_type="Repo<T>", module_path="c::store", trait_name="Store"))

    assert _edges(analyze_relationships(analysis), RelationType.IMPLEMENTS) == [
        ("c::store::Repo", "c::store::Store", None)
    ]


def test_containment_edges_with_labels(crate):
    edges = _edges(crate, RelationType.CONTAINS)

    assert ("shop::domain::User", "shop::domain::UserId", "id") in edges
    assert ("shop::domain::User", "shop::domain::Email", "email") in edges
    assert ("shop::domain::User", "shop::domain::UserRole", "role") in edges
    assert ("shop::repository::InMemoryUserRepository", "shop::domain::UserId", "users") in edges
    assert ("shop::repository::InMemoryUserRepository", "shop::domain::User", "users") in edges
    assert ("shop::repository::RepositoryError", "shop::domain::UserId", "NotFound::0") in edges


def test_containment_of_simple_field():
    analysis = CrateAnalysis("c")
    analysis.add_struct(StructEntity("Foo", "c", fields=[StructField("Baz", "bar")]))
    analysis.add_struct(StructEntity("Baz", "c"))
    analysis.add_enum(EnumEntity("E", "c", variants=[EnumVariant("V", [StructField("Baz")])]))

    edges = _edges(analyze_relationships(analysis), RelationType.CONTAINS)

    assert edges == [("c::Foo", "c::Baz", "bar"), ("c::E", "c::Baz", "V::0")]


def test_primitive_fields_and_generic_params_produce_no_edges(crate):
    sources = {source for source, _, _ in _edges(crate, RelationType.CONTAINS)}

    assert "shop::domain::UserId" not in sources
    assert "shop::domain::Email" not in sources
    assert ("shop::service::UserService", "R", "repository") not in \
        _edges(crate, RelationType.CONTAINS)


def test_dangling_containment_is_preserved(crate):
    assert ("shop::service::UserService", "Clock", "clock") in _edges(crate, RelationType.CONTAINS)


def test_call_edges(crate):
    assert _edges(crate, RelationType.CALLS) == [
        ("shop::service::bootstrap", "shop::service::build_repository", None),
        ("shop::service::bootstrap", "shop::util::log", None),
    ]


def test_module_dependencies(crate):
    assert _edges(crate, RelationType.DEPENDS_ON) == [
        ("shop::repository", "shop::domain", None),
        ("shop::repository", "shop::domain", None),
        ("shop::service", "shop::domain", None),
        ("shop::service", "shop::repository", None),
    ]


def test_module_dependency_skips_self_and_single_segment_imports():
    analysis = CrateAnalysis.from_dict({
        "name": "c",
        "modules": {
            "c::a": {"name": "a", "path": "c::a", "uses": [
                {"path": "c::a::Local"}, {"path": "serde"}, {"path": "c::b::*"}
            ]}
        }
    })

    assert _edges(analyze_relationships(analysis), RelationType.DEPENDS_ON) == [
        ("c::a", "c::b", None)
    ]


def test_submodule_containment(crate):
    edges = _edges(crate, RelationType.CONTAINS)
    for sub in ("domain", "repository", "service"):
        assert ("shop", f"shop::{sub}", None) in edges


def test_trait_inheritance(crate):
    assert _edges(crate, RelationType.EXTENDS) == [
        ("shop::repository::UserRepository", "shop::repository::Repository", None),
        ("shop::repository::UserRepository", "Send", None),
    ]


def test_analyze_replaces_relationships(crate):
    before = list(crate.relationships)
    crate.relationships.append(Relationship("stale", "edge", RelationType.REFERENCES))

    result = RelationshipAnalyzer().analyze(crate)

    assert result is crate.relationships
    assert [r.to_dict() for r in result] == [r.to_dict() for r in before]


def test_analyze_empty_model():
    assert analyze_relationships(CrateAnalysis("empty")).relationships == []


def test_unresolved_call_produces_no_edge():
    analysis = CrateAnalysis("c")
    analysis.add_function(FunctionEntity("main", "c", calls=["println", "Vec::new"]))

    assert _edges(analyze_relationships(analysis), RelationType.CALLS) == []
