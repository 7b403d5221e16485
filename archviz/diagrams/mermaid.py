"""
Mermaid diagram generation for an analyzed crate.

Every view is a pure function of a CrateAnalysis whose relationship
list has already been populated. Five views are available:
- Class diagram (structs, enums, traits and their relationships)
- Module dependency graph
- Function call graph
- C4 component view (types grouped by module)
- C4 container view (modules labeled by architectural layer)
plus a combined Markdown document embedding all of them.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from archviz.core.analysis import CrateAnalysis
from archviz.core.entities import (
    EnumEntity,
    ImplBlock,
    Method,
    MethodReceiver,
    StructEntity,
    TraitEntity,
    Visibility,
)
from archviz.core.relationships import RelationType
from archviz.core.resolver import strip_generic_args
from .layers import DEFAULT_LAYER_RULES, DEFAULT_TECHNOLOGY, LayerRule, infer_technology
from .sanitize import parent_module, sanitize_id, sanitize_type, short_name


class DiagramType(Enum):
    """Diagram views that can be rendered."""
    CLASS = "class"
    MODULE = "module"
    CALL_GRAPH = "call-graph"
    C4_COMPONENT = "c4-component"
    C4_CONTAINER = "c4-container"
    FULL = "full"


# Relationship kinds each view draws; anything else is left out.
CLASS_ARROWS: Dict[RelationType, str] = {
    RelationType.IMPLEMENTS: "..|>",
    RelationType.CONTAINS: "-->",
    RelationType.EXTENDS: "--|>",
}

COMPONENT_LABELS: Dict[RelationType, str] = {
    RelationType.IMPLEMENTS: "implements",
    RelationType.CONTAINS: "contains",
    RelationType.EXTENDS: "extends",
}

CONTAINER_PROJECTED_TYPES: Set[RelationType] = {
    RelationType.CONTAINS,
    RelationType.IMPLEMENTS,
}

VISIBILITY_MARKERS: Dict[Visibility, str] = {
    Visibility.PUBLIC: "+",
    Visibility.CRATE: "~",
    Visibility.SUPER: "~",
    Visibility.PRIVATE: "-",
}

RECEIVERS: Dict[MethodReceiver, str] = {
    MethodReceiver.SELF_VALUE: "self",
    MethodReceiver.SELF_REF: "&self",
    MethodReceiver.SELF_MUT_REF: "&mut self",
}


def fence(content: str) -> str:
    """Wrap diagram text in a Markdown mermaid block."""
    return f"```mermaid\n{content}```\n"


class MermaidGenerator:
    """
    Renders a CrateAnalysis as Mermaid text.

    Args:
        indent: Number of spaces per indentation level
        layer_rules: Keyword table for C4 container technology labels
        default_technology: Label used when no layer rule matches
    """

    def __init__(self, indent: int = 4,
                 layer_rules: Sequence[LayerRule] = DEFAULT_LAYER_RULES,
                 default_technology: str = DEFAULT_TECHNOLOGY):
        self.indent = " " * indent
        self.layer_rules = tuple(layer_rules)
        self.default_technology = default_technology

    # --- Dispatch ---

    def render(self, analysis: CrateAnalysis, diagram_type: DiagramType = DiagramType.FULL,
               raw: bool = False) -> str:
        """
        Render one view.

        Single views are fenced as Markdown unless `raw`; the full
        document always embeds its own fences.
        """
        if diagram_type == DiagramType.FULL:
            return self.generate_full_diagram(analysis)

        renderers = {
            DiagramType.CLASS: self.generate_class_diagram,
            DiagramType.MODULE: self.generate_module_diagram,
            DiagramType.CALL_GRAPH: self.generate_call_graph,
            DiagramType.C4_COMPONENT: self.generate_c4_component,
            DiagramType.C4_CONTAINER: self.generate_c4_container,
        }
        content = renderers[diagram_type](analysis)
        return content if raw else fence(content)

    # --- Class diagram ---

    def generate_class_diagram(self, analysis: CrateAnalysis) -> str:
        """Class diagram showing structs, enums, traits and their relationships."""
        lines = ["classDiagram"]

        for full_name, struct in analysis.structs.items():
            lines.extend(self._struct_class(full_name, struct))
        for full_name, enum in analysis.enums.items():
            lines.extend(self._enum_class(full_name, enum))
        for full_name, trait in analysis.traits.items():
            lines.extend(self._trait_class(full_name, trait))

        for impl_block in analysis.impls:
            if impl_block.is_inherent:
                lines.extend(self._impl_methods(impl_block, analysis))

        lines.extend(self._class_relationships(analysis))
        return "\n".join(lines) + "\n"

    def _class_block(self, full_name: str, stereotype: str, members: List[str]) -> List[str]:
        inner = self.indent * 2
        lines = [f"{self.indent}class {sanitize_id(full_name)} {{",
                 f"{inner}<<{stereotype}>>"]
        lines.extend(f"{inner}{member}" for member in members)
        lines.append(f"{self.indent}}}")
        return lines

    def _struct_class(self, full_name: str, struct: StructEntity) -> List[str]:
        members = []
        for position, struct_field in enumerate(struct.fields):
            marker = VISIBILITY_MARKERS[struct_field.visibility]
            name = struct_field.name or str(position)
            members.append(f"{marker}{name}: {sanitize_type(struct_field.ty)}")
        return self._class_block(full_name, "struct", members)

    def _enum_class(self, full_name: str, enum: EnumEntity) -> List[str]:
        members = []
        for variant in enum.variants:
            if not variant.fields:
                members.append(variant.name)
                continue
            parts = []
            for variant_field in variant.fields:
                ty = sanitize_type(variant_field.ty)
                parts.append(f"{variant_field.name}: {ty}" if variant_field.name else ty)
            members.append(f"{variant.name}({', '.join(parts)})")
        return self._class_block(full_name, "enum", members)

    def _trait_class(self, full_name: str, trait: TraitEntity) -> List[str]:
        members = [f"{self.format_method(method)}*" for method in trait.methods]
        return self._class_block(full_name, "trait", members)

    def _impl_methods(self, impl_block: ImplBlock, analysis: CrateAnalysis) -> List[str]:
        full_name = self.find_type_full_name(impl_block.self_type, analysis)
        if not full_name:
            return []

        safe_id = sanitize_id(full_name)
        return [
            f"{self.indent}{safe_id} : {VISIBILITY_MARKERS[method.visibility]}"
            f"{self.format_method(method)}"
            for method in impl_block.methods
        ]

    def _class_relationships(self, analysis: CrateAnalysis) -> List[str]:
        lines = []
        seen: Set[Tuple[RelationType, str, str]] = set()

        for rel in analysis.relationships:
            arrow = CLASS_ARROWS.get(rel.rel_type)
            # Module-to-submodule containment is not a class relationship
            if arrow is None or rel.source in analysis.modules:
                continue

            from_id = sanitize_id(rel.source)
            to_id = sanitize_id(rel.target)
            key = (rel.rel_type, from_id, to_id)
            if key in seen:
                continue
            if rel.rel_type == RelationType.CONTAINS and from_id == to_id:
                continue
            seen.add(key)

            if rel.rel_type == RelationType.CONTAINS and rel.label:
                lines.append(f"{self.indent}{from_id} {arrow} {to_id} : {rel.label}")
            else:
                lines.append(f"{self.indent}{from_id} {arrow} {to_id}")

        return lines

    def find_type_full_name(self, type_name: str, analysis: CrateAnalysis) -> str:
        """Full name of the struct or enum an impl block targets, or ""."""
        type_name = strip_generic_args(type_name)
        for known in list(analysis.structs) + list(analysis.enums):
            if known == type_name or known.endswith(f"::{type_name}"):
                return known
        return ""

    def format_method(self, method: Method) -> str:
        async_prefix = "async " if method.is_async else ""
        params = [sanitize_type(p) for p in method.params]
        if method.receiver is not None:
            params.insert(0, RECEIVERS[method.receiver])
        return_type = f" -> {sanitize_type(method.return_type)}" if method.return_type else ""
        return f"{async_prefix}{method.name}({', '.join(params)}){return_type}"

    # --- Module dependency graph ---

    def collect_modules(self, analysis: CrateAnalysis) -> List[str]:
        """Declared modules plus every module an entity lives in, first-seen order."""
        modules = dict.fromkeys(analysis.modules)
        for names in (analysis.structs, analysis.enums, analysis.traits, analysis.functions):
            for full_name in names:
                module = parent_module(full_name)
                if module:
                    modules.setdefault(module)
        return list(modules)

    def generate_module_diagram(self, analysis: CrateAnalysis) -> str:
        """Module dependency graph: solid edges for uses, dashed for submodules."""
        lines = ["flowchart TD"]
        modules = self.collect_modules(analysis)
        known = set(modules)

        for module in modules:
            lines.append(f'{self.indent}{sanitize_id(module)}["{short_name(module)}"]')

        arrows = {RelationType.DEPENDS_ON: "-->", RelationType.CONTAINS: "-.->"}
        seen: Set[Tuple[RelationType, str, str]] = set()
        for rel in analysis.relationships:
            arrow = arrows.get(rel.rel_type)
            if arrow is None or rel.source not in known or rel.target not in known:
                continue
            from_id = sanitize_id(rel.source)
            to_id = sanitize_id(rel.target)
            key = (rel.rel_type, from_id, to_id)
            if key in seen:
                continue
            seen.add(key)
            lines.append(f"{self.indent}{from_id} {arrow} {to_id}")

        return "\n".join(lines) + "\n"

    # --- Call graph ---

    def generate_call_graph(self, analysis: CrateAnalysis) -> str:
        """Function call graph."""
        lines = ["flowchart LR"]

        for full_name, function in analysis.functions.items():
            lines.append(f'{self.indent}{sanitize_id(full_name)}["{function.name}()"]')

        seen: Set[Tuple[str, str]] = set()
        for rel in analysis.relationships:
            if rel.rel_type != RelationType.CALLS:
                continue
            edge = (sanitize_id(rel.source), sanitize_id(rel.target))
            if edge in seen:
                continue
            seen.add(edge)
            lines.append(f"{self.indent}{edge[0]} --> {edge[1]}")

        return "\n".join(lines) + "\n"

    # --- C4 views ---

    def generate_c4_component(self, analysis: CrateAnalysis) -> str:
        """C4 component diagram: one boundary per module holding its types."""
        lines = ["C4Component", f"title Component Diagram for {analysis.name}", ""]

        module_components: Dict[str, List[str]] = {}

        def add(full_name: str, name: str, technology: str, description: str):
            module = parent_module(full_name) or analysis.name
            module_components.setdefault(module, []).append(
                f'Component({sanitize_id(full_name)}, "{name}", "{technology}", "{description}")'
            )

        for full_name, struct in analysis.structs.items():
            add(full_name, struct.name, "Struct", f"Struct with {len(struct.fields)} fields")
        for full_name, trait in analysis.traits.items():
            add(full_name, trait.name, "Trait", f"Trait with {len(trait.methods)} methods")
        for full_name, enum in analysis.enums.items():
            add(full_name, enum.name, "Enum", f"Enum with {len(enum.variants)} variants")

        for module, components in module_components.items():
            lines.append(f'Container_Boundary({sanitize_id(module)}, "{short_name(module)}") {{')
            lines.extend(f"  {component}" for component in components)
            lines.append("}")
            lines.append("")

        seen: Set[Tuple[str, str]] = set()
        for rel in analysis.relationships:
            label = COMPONENT_LABELS.get(rel.rel_type)
            if label is None or rel.source in analysis.modules:
                continue
            if parent_module(rel.source) == parent_module(rel.target):
                continue

            from_id = sanitize_id(rel.source)
            to_id = sanitize_id(rel.target)
            if from_id == to_id or (from_id, to_id) in seen:
                continue
            seen.add((from_id, to_id))
            lines.append(f'Rel({from_id}, {to_id}, "{label}")')

        return "\n".join(lines) + "\n"

    def module_stats(self, analysis: CrateAnalysis) -> Dict[str, Tuple[int, int, int]]:
        """(structs, enums, traits) per module, in first-seen order."""
        counts: Dict[str, List[int]] = {}
        for slot, names in enumerate((analysis.structs, analysis.enums, analysis.traits)):
            for full_name in names:
                module = parent_module(full_name)
                if module:
                    counts.setdefault(module, [0, 0, 0])[slot] += 1
        return {module: tuple(c) for module, c in counts.items()}

    def technology_for(self, module: str) -> str:
        return infer_technology(short_name(module), self.layer_rules, self.default_technology)

    def generate_c4_container(self, analysis: CrateAnalysis) -> str:
        """C4 container diagram: modules as containers, module dependencies as relations."""
        lines = ["C4Container", f"title Container Diagram for {analysis.name}", ""]

        stats = self.module_stats(analysis)
        for module, (structs, enums, traits) in stats.items():
            description = f"{structs} structs, {enums} enums, {traits} traits"
            lines.append(
                f'Container({sanitize_id(module)}, "{short_name(module)}", '
                f'"{self.technology_for(module)}", "{description}")'
            )
        lines.append("")

        seen: Set[Tuple[str, str]] = set()

        def relate(from_module: str, to_module: str):
            if from_module not in stats or to_module not in stats:
                return
            from_id = sanitize_id(from_module)
            to_id = sanitize_id(to_module)
            if from_id == to_id or (from_id, to_id) in seen:
                return
            seen.add((from_id, to_id))
            lines.append(f'Rel({from_id}, {to_id}, "uses")')

        for rel in analysis.relationships:
            if rel.rel_type == RelationType.DEPENDS_ON:
                relate(rel.source, rel.target)

        for rel in analysis.relationships:
            if rel.rel_type in CONTAINER_PROJECTED_TYPES and rel.source not in analysis.modules:
                relate(parent_module(rel.source), parent_module(rel.target))

        return "\n".join(lines) + "\n"

    # --- Combined document ---

    def generate_full_diagram(self, analysis: CrateAnalysis) -> str:
        """Markdown document embedding every available view."""
        sections: List[Tuple[str, Optional[str]]] = [
            ("C4 Container Diagram", self.generate_c4_container(analysis)),
            ("C4 Component Diagram", self.generate_c4_component(analysis)),
            ("Class Diagram", self.generate_class_diagram(analysis)),
        ]
        if analysis.modules:
            sections.append(("Module Dependencies", self.generate_module_diagram(analysis)))
        if analysis.functions:
            sections.append(("Function Call Graph", self.generate_call_graph(analysis)))

        output = ["# Rust Architecture Diagram\n\n"]
        for title, content in sections:
            output.append(f"## {title}\n\n")
            output.append(fence(content))
            output.append("\n")
        return "".join(output)
