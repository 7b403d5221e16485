"""
Best-effort name resolution against a pool of known names.

There is no type checker behind this: a possibly partial name such as
`User`, `domain::User` or `crate::domain::User` is matched against the
fully-qualified names the model knows about. Resolution never fails:
- Exact matches win
- Otherwise the simple name (last `::` segment) is matched
- Ambiguous simple names resolve to the first inserted candidate
- Unmatched types and traits come back unchanged (dangling edges)
- Unmatched function calls resolve to None (no edge)
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set


# Primitive and standard-library names never treated as references
PRIMITIVE_TYPES = frozenset({
    "bool", "char", "str",
    "u8", "u16", "u32", "u64", "u128", "usize",
    "i8", "i16", "i32", "i64", "i128", "isize",
    "f32", "f64",
    "String", "Vec", "Option", "Result",
    "Box", "Rc", "Arc", "RefCell", "Cell", "Mutex", "RwLock",
    "HashMap", "HashSet", "BTreeMap", "BTreeSet", "VecDeque",
    "LinkedList", "BinaryHeap", "Cow", "Pin", "PhantomData",
    "Self",
})

_TYPE_PUNCTUATION = re.compile(r"[<>()\[\],&*;]")
_TYPE_KEYWORDS = re.compile(r"\b(?:mut|dyn)\b")
_IDENTIFIER_START = re.compile(r"^[A-Za-z_]")


def simple_name(name: str) -> str:
    """Last `::` segment of a name."""
    return name.rsplit("::", 1)[-1]


def is_primitive_type(name: str) -> bool:
    return simple_name(name) in PRIMITIVE_TYPES


def strip_generic_args(type_name: str) -> str:
    """`Repo<T, U>` -> `Repo`."""
    return type_name.split("<", 1)[0].strip()


@dataclass
class NameIndex:
    """
    Ordered pool of known fully-qualified names.

    Keeps an exact-match set and simple-name buckets so lookups do not
    rescan the pool. Buckets preserve insertion order, which makes the
    tie-break between same-named entries reproducible.
    """
    names: Dict[str, None] = field(default_factory=dict)
    by_simple_name: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def of(cls, names: Iterable[str]) -> "NameIndex":
        index = cls()
        for name in names:
            index.add(name)
        return index

    def add(self, name: str):
        if name in self.names:
            return
        self.names[name] = None
        self.by_simple_name.setdefault(simple_name(name), []).append(name)

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def candidates(self, name: str) -> List[str]:
        """All known names whose simple name equals that of `name`."""
        return list(self.by_simple_name.get(simple_name(name), []))

    def find_suffix(self, suffix: str) -> Optional[str]:
        """First known name ending with `::suffix` (or equal to it)."""
        for known in self.by_simple_name.get(simple_name(suffix), []):
            if known == suffix or known.endswith(f"::{suffix}"):
                return known
        return None

    def resolve(self, name: str) -> str:
        """
        Resolve a possibly partial name.

        Returns the exact match, else the first entry sharing the simple
        name, else `name` unchanged.
        """
        if name in self.names:
            return name
        bucket = self.by_simple_name.get(simple_name(name))
        if bucket:
            return bucket[0]
        return name

    def resolve_function(self, call_name: str, current_module: str) -> Optional[str]:
        """
        Resolve a raw call target.

        Tries, in order: exact match, the caller's module prefix, a
        suffix match on the whole call path, then the simple name.
        Returns None when nothing matches.
        """
        if call_name in self.names:
            return call_name

        if current_module:
            local = f"{current_module}::{call_name}"
            if local in self.names:
                return local

        match = self.find_suffix(call_name)
        if match:
            return match

        bucket = self.by_simple_name.get(simple_name(call_name))
        if bucket:
            return bucket[0]
        return None


def _as_index(known: Iterable[str]) -> NameIndex:
    return known if isinstance(known, NameIndex) else NameIndex.of(known)


def resolve_type_name(type_name: str, known_types: Iterable[str]) -> str:
    """Resolve a type name; unknown names are returned unchanged."""
    return _as_index(known_types).resolve(type_name)


def resolve_trait_name(trait_name: str, known_traits: Iterable[str]) -> str:
    """Resolve a trait name; unknown (external) traits are returned unchanged."""
    return _as_index(known_traits).resolve(trait_name)


def resolve_function_name(call_name: str, known_functions: Iterable[str],
                          current_module: str) -> Optional[str]:
    """Resolve a call target; None when the callee is unknown."""
    return _as_index(known_functions).resolve_function(call_name, current_module)


def type_tokens(type_str: str) -> List[str]:
    """
    Split a textual type into candidate type-name tokens.

    Generic, reference and pointer punctuation plus the `mut`/`dyn`
    keywords are blanked out before splitting on whitespace.
    """
    cleaned = _TYPE_PUNCTUATION.sub(" ", type_str)
    cleaned = _TYPE_KEYWORDS.sub(" ", cleaned)
    return [part.strip() for part in cleaned.split() if part.strip()]


def extract_type_references(type_str: str, known_types: Iterable[str],
                            generics: Iterable[str] = ()) -> List[str]:
    """
    Extract the types referenced by a textual type.

    `Vec<User>` yields just the resolved name of `User`. Primitive and
    standard-library names, lifetimes and the owner's own generic
    parameters are skipped. Tokens that do not resolve are kept
    unchanged so callers can record a dangling edge.

    Args:
        type_str: Raw type text, e.g. "Option<Box<dyn Repository>>"
        known_types: Pool of fully-qualified type names
        generics: Generic parameters of the owning item ("T", "'a")

    Returns:
        Referenced names in the order they appear
    """
    index = _as_index(known_types)
    generic_names: Set[str] = {
        g.split(":", 1)[0].replace("const ", "").strip() for g in generics
    }

    references = []
    for token in type_tokens(type_str):
        # lifetimes and array lengths
        if not _IDENTIFIER_START.match(token) or token in generic_names:
            continue
        if is_primitive_type(token):
            continue
        references.append(index.resolve(token))

    return references
