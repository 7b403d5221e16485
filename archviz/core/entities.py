"""
Structural entity models for architecture analysis.

These dataclasses describe what the parser front-end discovered in a
crate: types, traits, impl blocks, free functions and modules. Types
and signatures are carried as plain text, never as resolved type trees.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum


class Visibility(Enum):
    """Visibility of an item."""
    PUBLIC = "Public"
    CRATE = "Crate"      # pub(crate)
    SUPER = "Super"      # pub(super)
    PRIVATE = "Private"


class MethodReceiver(Enum):
    """How a method takes `self`."""
    SELF_VALUE = "SelfValue"     # self
    SELF_REF = "SelfRef"         # &self
    SELF_MUT_REF = "SelfMutRef"  # &mut self


def join_path(module_path: str, name: str) -> str:
    """Join a module path and a local identifier with `::`."""
    if not module_path:
        return name
    return f"{module_path}::{name}"


def _visibility(value: Optional[str]) -> Visibility:
    return Visibility(value) if value else Visibility.PRIVATE


@dataclass
class StructField:
    """A field of a struct or of an enum variant."""
    ty: str
    name: Optional[str] = None   # None when the parser gave no name
    visibility: Visibility = Visibility.PRIVATE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ty": self.ty,
            "visibility": self.visibility.value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StructField":
        return cls(
            ty=data["ty"],
            name=data.get("name"),
            visibility=_visibility(data.get("visibility"))
        )


@dataclass
class EnumVariant:
    """A variant of an enum, with its (possibly empty) field list."""
    name: str
    fields: List[StructField] = field(default_factory=list)
    discriminant: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "discriminant": self.discriminant
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumVariant":
        return cls(
            name=data["name"],
            fields=[StructField.from_dict(f) for f in data.get("fields", [])],
            discriminant=data.get("discriminant")
        )


@dataclass
class Method:
    """A method signature inside a trait or impl block."""
    name: str
    visibility: Visibility = Visibility.PRIVATE
    is_async: bool = False
    receiver: Optional[MethodReceiver] = None
    params: List[str] = field(default_factory=list)   # "name: Type"
    return_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "is_async": self.is_async,
            "receiver": self.receiver.value if self.receiver else None,
            "params": self.params,
            "return_type": self.return_type
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Method":
        receiver = data.get("receiver")
        return cls(
            name=data["name"],
            visibility=_visibility(data.get("visibility")),
            is_async=data.get("is_async", False),
            receiver=MethodReceiver(receiver) if receiver else None,
            params=list(data.get("params", [])),
            return_type=data.get("return_type")
        )


@dataclass
class StructEntity:
    """
    A struct definition.

    Fields keep their raw textual types; relationship extraction
    resolves them later against the known type names.
    """
    name: str
    module_path: str
    visibility: Visibility = Visibility.PRIVATE
    fields: List[StructField] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)
    is_tuple: bool = False

    @property
    def full_name(self) -> str:
        return join_path(self.module_path, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "fields": [f.to_dict() for f in self.fields],
            "generics": self.generics,
            "is_tuple": self.is_tuple,
            "module_path": self.module_path
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StructEntity":
        return cls(
            name=data["name"],
            module_path=data.get("module_path", ""),
            visibility=_visibility(data.get("visibility")),
            fields=[StructField.from_dict(f) for f in data.get("fields", [])],
            generics=list(data.get("generics", [])),
            is_tuple=data.get("is_tuple", False)
        )


@dataclass
class EnumEntity:
    """An enum definition."""
    name: str
    module_path: str
    visibility: Visibility = Visibility.PRIVATE
    variants: List[EnumVariant] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return join_path(self.module_path, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "variants": [v.to_dict() for v in self.variants],
            "generics": self.generics,
            "module_path": self.module_path
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumEntity":
        return cls(
            name=data["name"],
            module_path=data.get("module_path", ""),
            visibility=_visibility(data.get("visibility")),
            variants=[EnumVariant.from_dict(v) for v in data.get("variants", [])],
            generics=list(data.get("generics", []))
        )


@dataclass
class TraitEntity:
    """A trait definition with its method signatures and super-traits."""
    name: str
    module_path: str
    visibility: Visibility = Visibility.PRIVATE
    methods: List[Method] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)
    super_traits: List[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return join_path(self.module_path, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "methods": [m.to_dict() for m in self.methods],
            "generics": self.generics,
            "super_traits": self.super_traits,
            "module_path": self.module_path
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TraitEntity":
        return cls(
            name=data["name"],
            module_path=data.get("module_path", ""),
            visibility=_visibility(data.get("visibility")),
            methods=[Method.from_dict(m) for m in data.get("methods", [])],
            generics=list(data.get("generics", [])),
            super_traits=list(data.get("super_traits", []))
        )


@dataclass
class ImplBlock:
    """
    An `impl` block, inherent or for a trait.

    Impl blocks have no key of their own: `self_type` and `trait_name`
    are the names as written in source.
    """
    self_type: str
    module_path: str
    trait_name: Optional[str] = None
    methods: List[Method] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)

    @property
    def is_inherent(self) -> bool:
        return self.trait_name is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "self_type": self.self_type,
            "trait_name": self.trait_name,
            "methods": [m.to_dict() for m in self.methods],
            "generics": self.generics,
            "module_path": self.module_path
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImplBlock":
        return cls(
            self_type=data["self_type"],
            module_path=data.get("module_path", ""),
            trait_name=data.get("trait_name"),
            methods=[Method.from_dict(m) for m in data.get("methods", [])],
            generics=list(data.get("generics", []))
        )


@dataclass
class FunctionEntity:
    """A free function and the raw names of everything it calls."""
    name: str
    module_path: str
    visibility: Visibility = Visibility.PRIVATE
    is_async: bool = False
    params: List[str] = field(default_factory=list)
    return_type: Optional[str] = None
    calls: List[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return join_path(self.module_path, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "is_async": self.is_async,
            "params": self.params,
            "return_type": self.return_type,
            "calls": self.calls,
            "module_path": self.module_path
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FunctionEntity":
        return cls(
            name=data["name"],
            module_path=data.get("module_path", ""),
            visibility=_visibility(data.get("visibility")),
            is_async=data.get("is_async", False),
            params=list(data.get("params", [])),
            return_type=data.get("return_type"),
            calls=list(data.get("calls", []))
        )


@dataclass
class UseEntity:
    """A single `use` import: `crate::domain::User as Account`."""
    path: str
    alias: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE

    @property
    def imported_module(self) -> str:
        """The module part of the path, or "" for single-segment paths."""
        parts = self.path.split("::")
        if len(parts) < 2:
            return ""
        return "::".join(parts[:-1])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "alias": self.alias,
            "visibility": self.visibility.value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UseEntity":
        return cls(
            path=data["path"],
            alias=data.get("alias"),
            visibility=_visibility(data.get("visibility"))
        )


@dataclass
class ModuleEntity:
    """
    A module: its full path, declared submodules and imports.

    `path` is the full `::`-joined path rooted at the crate name.
    """
    name: str
    path: str
    visibility: Visibility = Visibility.PRIVATE
    submodules: List[str] = field(default_factory=list)
    uses: List[UseEntity] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return self.path

    @property
    def segments(self) -> List[str]:
        return self.path.split("::") if self.path else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility.value,
            "path": self.path,
            "submodules": self.submodules,
            "uses": [u.to_dict() for u in self.uses]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleEntity":
        return cls(
            name=data["name"],
            path=data["path"],
            visibility=_visibility(data.get("visibility")),
            submodules=list(data.get("submodules", [])),
            uses=[UseEntity.from_dict(u) for u in data.get("uses", [])]
        )
