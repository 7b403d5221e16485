"""
Tests for best-effort name resolution and type-reference extraction.
"""

from archviz.core.resolver import (
    NameIndex,
    extract_type_references,
    is_primitive_type,
    resolve_function_name,
    resolve_trait_name,
    resolve_type_name,
    simple_name,
    type_tokens,
)

KNOWN_TYPES = ["crate::domain::User", "crate::domain::UserId", "crate::sales::Order"]


def test_exact_match_is_returned_unchanged():
    for name in KNOWN_TYPES:
        assert resolve_type_name(name, KNOWN_TYPES) == name


def test_simple_name_suffix_match():
    assert resolve_type_name("User", {"crate::domain::User"}) == "crate::domain::User"
    assert resolve_type_name("domain::User", KNOWN_TYPES) == "crate::domain::User"


def test_suffix_match_does_not_match_partial_segment():
    # "Id" must not match "UserId"
    assert resolve_type_name("Id", KNOWN_TYPES) == "Id"


def test_unqualified_known_name_matches():
    assert resolve_type_name("other::Config", ["Config"]) == "Config"


def test_unresolved_type_and_trait_are_returned_unchanged():
    assert resolve_type_name("Uuid", KNOWN_TYPES) == "Uuid"
    assert resolve_trait_name("Display", ["crate::repo::Repository"]) == "Display"


def test_ambiguity_resolves_to_first_inserted():
    known = ["crate::b::Error", "crate::a::Error"]
    assert resolve_type_name("Error", known) == "crate::b::Error"
    assert resolve_type_name("Error", list(reversed(known))) == "crate::a::Error"


def test_function_resolution_order():
    known = ["crate::util::log", "crate::service::log", "crate::service::run"]

    assert resolve_function_name("crate::util::log", known, "crate::service") == "crate::util::log"
    # the caller's own module wins over the first inserted candidate
    assert resolve_function_name("log", known, "crate::service") == "crate::service::log"
    assert resolve_function_name("util::log", known, "crate::other") == "crate::util::log"
    assert resolve_function_name("log", known, "crate::other") == "crate::util::log"


def test_unresolved_function_gives_none():
    assert resolve_function_name("println", ["crate::util::log"], "crate") is None


def test_name_index_deduplicates():
    index = NameIndex.of(["a::X", "a::X", "b::X"])
    assert len(index) == 2
    assert index.candidates("X") == ["a::X", "b::X"]
    assert "a::X" in index


def test_primitive_filtering():
    refs = extract_type_references("Vec<User>", KNOWN_TYPES)
    assert refs == ["crate::domain::User"]


def test_nested_generics_and_references():
    refs = extract_type_references(
        "&'a mut HashMap<UserId, Option<Box<dyn Order>>>", KNOWN_TYPES
    )
    assert refs == ["crate::domain::UserId", "crate::sales::Order"]


def test_qualified_std_paths_are_filtered():
    assert is_primitive_type("std::collections::HashMap")
    assert extract_type_references("std::sync::Arc<User>", KNOWN_TYPES) == ["crate::domain::User"]


def test_unresolved_references_are_kept_as_dangling():
    assert extract_type_references("Option<Uuid>", KNOWN_TYPES) == ["Uuid"]


def test_generic_parameters_are_skipped():
    assert extract_type_references("Vec<T>", KNOWN_TYPES, generics=["T: Clone"]) == []
    assert extract_type_references("[u8; N]", KNOWN_TYPES, generics=["const N"]) == []


def test_type_tokens_strip_keywords_but_not_identifiers():
    assert type_tokens("&mut dyn Commuter") == ["Commuter"]
    assert type_tokens("(A, [B; 4])") == ["A", "B", "4"]


def test_simple_name():
    assert simple_name("crate::domain::User") == "User"
    assert simple_name("User") == "User"
