import pytest

from archviz.core.analysis import CrateAnalysis, merge_all
from archviz.core.entities import (
    EnumEntity,
    EnumVariant,
    FunctionEntity,
    ImplBlock,
    Method,
    MethodReceiver,
    ModuleEntity,
    StructEntity,
    StructField,
    TraitEntity,
    UseEntity,
    Visibility,
)
from archviz.graph.extractor import analyze_relationships

PUB = Visibility.PUBLIC


def build_units():
    """A small layered crate split into one analysis per source file."""
    root = CrateAnalysis("shop")
    root.add_module(ModuleEntity(
        name="shop", path="shop", visibility=PUB,
        submodules=["domain", "repository", "service"]
    ))

    domain = CrateAnalysis("shop::domain")
    domain.add_module(ModuleEntity(name="domain", path="shop::domain", visibility=PUB))
    domain.add_struct(StructEntity(
        name="UserId", module_path="shop::domain", visibility=PUB,
        fields=[StructField(ty="u64", name="0", visibility=PUB)], is_tuple=True
    ))
    domain.add_struct(StructEntity(
        name="User", module_path="shop::domain", visibility=PUB,
        fields=[
            StructField(ty="UserId", name="id", visibility=PUB),
            StructField(ty="String", name="name", visibility=Visibility.CRATE),
            StructField(ty="Option<Email>", name="email"),
            StructField(ty="UserRole", name="role"),
        ]
    ))
    domain.add_struct(StructEntity(
        name="Email", module_path="shop::domain", visibility=PUB,
        fields=[StructField(ty="String", name="0")], is_tuple=True
    ))
    domain.add_enum(EnumEntity(
        name="UserRole", module_path="shop::domain", visibility=PUB,
        variants=[EnumVariant("Admin"), EnumVariant("Member")]
    ))
    domain.add_impl(ImplBlock(
        self_type="User", module_path="shop::domain",
        methods=[
            Method("new", visibility=PUB, params=["id: UserId", "name: String"],
                   return_type="Self"),
            Method("change_role", visibility=PUB, receiver=MethodReceiver.SELF_MUT_REF,
                   params=["role: UserRole"]),
        ]
    ))
    domain.add_impl(ImplBlock(
        self_type="User", module_path="shop::domain", trait_name="Display",
        methods=[Method("fmt", receiver=MethodReceiver.SELF_REF,
                        params=["f: &mut Formatter"], return_type="fmt::Result")]
    ))

    repository = CrateAnalysis("shop::repository")
    repository.add_module(ModuleEntity(
        name="repository", path="shop::repository", visibility=PUB,
        uses=[UseEntity("shop::domain::User"), UseEntity("shop::domain::UserId")]
    ))
    repository.add_trait(TraitEntity(
        name="Repository", module_path="shop::repository", visibility=PUB
    ))
    repository.add_trait(TraitEntity(
        name="UserRepository", module_path="shop::repository", visibility=PUB,
        methods=[
            Method("save", receiver=MethodReceiver.SELF_MUT_REF, params=["user: User"],
                   return_type="Result<(), RepositoryError>"),
            Method("find_by_id", receiver=MethodReceiver.SELF_REF, params=["id: &UserId"],
                   return_type="Option<User>"),
        ],
        super_traits=["Repository", "Send"]
    ))
    repository.add_struct(StructEntity(
        name="InMemoryUserRepository", module_path="shop::repository", visibility=PUB,
        fields=[StructField(ty="HashMap<UserId, User>", name="users")]
    ))
    repository.add_enum(EnumEntity(
        name="RepositoryError", module_path="shop::repository", visibility=PUB,
        variants=[
            EnumVariant("NotFound", fields=[StructField(ty="UserId")]),
            EnumVariant("Storage", fields=[StructField(ty="String", name="message")]),
        ]
    ))
    repository.add_impl(ImplBlock(
        self_type="InMemoryUserRepository", module_path="shop::repository",
        trait_name="UserRepository"
    ))

    service = CrateAnalysis("shop::service")
    service.add_module(ModuleEntity(
        name="service", path="shop::service", visibility=PUB,
        uses=[UseEntity("shop::domain::User"),
              UseEntity("shop::repository::UserRepository", alias="Repo")]
    ))
    service.add_struct(StructEntity(
        name="UserService", module_path="shop::service", visibility=PUB,
        fields=[
            StructField(ty="R", name="repository"),
            StructField(ty="Arc<dyn Clock>", name="clock"),
        ],
        generics=["R"]
    ))
    service.add_function(FunctionEntity(
        name="bootstrap", module_path="shop::service", visibility=PUB,
        calls=["build_repository", "util::log", "println"]
    ))
    service.add_function(FunctionEntity(
        name="build_repository", module_path="shop::service",
        return_type="InMemoryUserRepository"
    ))

    util = CrateAnalysis("shop::util")
    util.add_function(FunctionEntity(name="log", module_path="shop::util", params=["msg: &str"]))

    return [root, domain, repository, service, util]


@pytest.fixture
def units():
    return build_units()


@pytest.fixture
def crate():
    """The merged and analyzed sample crate."""
    return analyze_relationships(merge_all("shop", build_units()))


@pytest.fixture
def model_files(tmp_path):
    """One JSON model file per unit of the sample crate."""
    paths = []
    for position, unit in enumerate(build_units()):
        path = tmp_path / f"unit{position}.json"
        path.write_text(unit.to_json(), encoding="utf-8")
        paths.append(str(path))
    return paths
