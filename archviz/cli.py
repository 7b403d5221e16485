"""
Command line entry point.

    archviz analyze units/*.json -d class -o classes.md
    archviz analyze crate.json --json
    archviz stats crate.json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from archviz.config import Settings, load_settings
from archviz.core.analysis import CrateAnalysis
from archviz.diagrams.mermaid import DiagramType
from archviz.graph.code_graph import ArchitectureGraph
from archviz.graph.extractor import analyze_relationships
from archviz.loader import ModelFormatError, load_and_merge, write_output


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the CLI argument parser; defaults come from settings."""
    p = argparse.ArgumentParser(
        prog="archviz",
        description="Visualize crate architecture as Mermaid diagrams"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    analyze = sub.add_parser("analyze", help="merge model files and render diagrams")
    analyze.add_argument("models", nargs="+", help="JSON model file(s), one per unit")
    analyze.add_argument("--name", help="crate name (defaults to the first model's name)")
    analyze.add_argument(
        "-d", "--diagram",
        choices=[d.value for d in DiagramType],
        default=settings.diagram.value,
        help="type of diagram to generate"
    )
    analyze.add_argument("--raw", action="store_true", default=settings.raw,
                         help="output raw mermaid without the markdown wrapper")
    analyze.add_argument("--json", action="store_true",
                         help="output the analyzed model as JSON instead of mermaid")
    analyze.add_argument("-o", "--output", help="output file (defaults to stdout)")
    analyze.set_defaults(func=cmd_analyze)

    stats = sub.add_parser("stats", help="print graph statistics, dangling targets and cycles")
    stats.add_argument("models", nargs="+", help="JSON model file(s), one per unit")
    stats.add_argument("--name", help="crate name (defaults to the first model's name)")
    stats.set_defaults(func=cmd_stats)

    return p


def _load(args) -> CrateAnalysis:
    analysis = load_and_merge(args.models, args.name)
    analyze_relationships(analysis)
    print(
        f"Found: {len(analysis.structs)} structs, {len(analysis.enums)} enums, "
        f"{len(analysis.traits)} traits, {len(analysis.functions)} functions",
        file=sys.stderr
    )
    return analysis


def cmd_analyze(args, settings: Settings) -> int:
    analysis = _load(args)

    if args.json:
        content = analysis.to_json()
    else:
        generator = settings.create_generator()
        content = generator.render(analysis, DiagramType(args.diagram), raw=args.raw)

    write_output(content, args.output)
    if args.output:
        print(f"Output written to: {args.output}", file=sys.stderr)
    return 0


def cmd_stats(args, settings: Settings) -> int:
    analysis = _load(args)
    graph = ArchitectureGraph.from_analysis(analysis)

    report = {
        "crate": analysis.statistics(),
        "graph": graph.get_statistics(),
        "dangling_targets": graph.dangling_targets(),
        "module_cycles": graph.find_module_cycles(),
    }
    print(json.dumps(report, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s"
    )

    args = build_parser(settings).parse_args(argv)
    try:
        return args.func(args, settings)
    except ModelFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
