#!/usr/bin/env python3
"""
catlim: limits and colimits of finite sets

Command-line front end.

Usage:
    # Limit (join) of a bipartite diagram read from JSON
    python main.py limit --input diagram.json --join hash

    # Colimit (gluing) of the same diagram
    python main.py colimit --input diagram.json --output result.json

    # Run demos
    python main.py demo --example join

Diagram format:
    {
        "V1": [3, 2],                  layer-1 objects (sizes or element lists)
        "V2": [2],                     layer-2 objects
        "edges": [[0, 0, [0, 0, 1]],   [src, tgt, values of the function]
                  [1, 0, [0, 1]]]
    }
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List

import numpy as np

from catlim import (
    CatlimError,
    ColimitAlgorithm,
    FinSetInt,
    JoinAlgorithm,
    Multicospan,
    ParallelMorphisms,
    SolverConfig,
    __version__,
    colimit,
    fin_function,
    limit,
    universal,
)
from catlim.diagrams import BipartiteFreeDiagram, Multispan
from catlim.sets import as_finset, fin_dom_function, is_skeletal

logger = logging.getLogger(__name__)


def load_diagram_from_json(filepath: str) -> BipartiteFreeDiagram:
    """
    Load a bipartite diagram from a JSON file.

    Objects are either sizes n (giving {0..n-1}) or lists of element names.
    Edge values are given in the enumeration order of the source object.
    """
    with open(filepath, "r") as f:
        data = json.load(f)
    return diagram_from_dict(data)


def diagram_from_dict(data: Dict[str, Any]) -> BipartiteFreeDiagram:
    d = BipartiteFreeDiagram()
    d.add_vertices1([as_finset(ob) for ob in data.get("V1", [])])
    d.add_vertices2([as_finset(ob) for ob in data.get("V2", [])])
    for src, tgt, values in data.get("edges", []):
        X, Y = d.ob1[src], d.ob2[tgt]
        if is_skeletal(X):
            hom = fin_function(values, X, Y)
        else:
            hom = fin_dom_function(dict(zip(X, values)), Y)
        d.add_edge(src, tgt, hom)
    return d


def result_to_dict(result: Any) -> Dict[str, Any]:
    """JSON view of a limit or colimit: apex elements and leg values."""
    apex = [_jsonable(x) for x in result.apex]
    legs = [[_jsonable(y) for y in leg.collect()] for leg in result.legs]
    return {"size": len(result.apex), "apex": apex, "legs": legs}


def _jsonable(x: Any) -> Any:
    if isinstance(x, np.integer):
        return int(x)
    if isinstance(x, tuple):
        return [_jsonable(y) for y in x]
    return x


def save_result_to_json(filepath: str, result: Any) -> None:
    with open(filepath, "w") as f:
        json.dump(result_to_dict(result), f, indent=2)


def _print_result(title: str, result: Any) -> None:
    print(f"\n{title}:")
    print(f"  apex size = {len(result.apex)}")
    for i, leg in enumerate(result.legs):
        print(f"  leg {i}: {[_jsonable(y) for y in leg.collect()]}")


def _config_from_args(args) -> SolverConfig:
    return SolverConfig(join_algorithm=JoinAlgorithm(args.join), tag_separator=args.tag_separator)


def cmd_limit(args):
    """Execute the limit command."""
    d = load_diagram_from_json(args.input)
    print(f"Loaded diagram: {d.nv1} layer-1 objects, {d.nv2} layer-2 objects, {d.ne} edges")
    config = _config_from_args(args)
    try:
        lim = limit(d, config=config)
    except CatlimError as e:
        print(f"Error: {e}")
        return 1
    _print_result(f"Limit ({config.join_algorithm.value} join)", lim)
    if args.output:
        save_result_to_json(args.output, lim)
        print(f"\nResult saved to: {args.output}")
    return 0


def cmd_colimit(args):
    """Execute the colimit command."""
    d = load_diagram_from_json(args.input)
    print(f"Loaded diagram: {d.nv1} layer-1 objects, {d.nv2} layer-2 objects, {d.ne} edges")
    alg = ColimitAlgorithm.NAMED if args.named else None
    try:
        colim = colimit(d, alg, config=_config_from_args(args))
    except CatlimError as e:
        print(f"Error: {e}")
        return 1
    _print_result("Colimit", colim)
    if args.output:
        save_result_to_json(args.output, colim)
        print(f"\nResult saved to: {args.output}")
    return 0


def demo_join():
    """Demo: pullback of f = [0, 0, 1] and g = [0, 1] with every join algorithm"""
    print("=" * 60)
    print("Demo: Pullback of two functions into {0, 1}")
    print("=" * 60)

    f = fin_function([0, 0, 1], 2)
    g = fin_function([0, 1], 2)
    cospan = Multicospan([f, g])
    print(f"\n  f = {f.collect()}, g = {g.collect()}")

    pairs = None
    match = True
    for alg in JoinAlgorithm:
        lim = limit(cospan, alg)
        found = sorted(zip(lim.legs[0].collect(), lim.legs[1].collect()))
        print(f"  {alg.value:12s} apex size {len(lim.apex)}, pairs {found}")
        if pairs is None:
            pairs = found
        match = match and found == pairs
    match = match and pairs == [(0, 0), (1, 0), (2, 1)]
    print(f"\nAll algorithms agree: {match}")
    return match


def demo_coequalizer():
    """Demo: coequalizer of f = [0, 1, 2] and g = [0, 0, 0]"""
    print("=" * 60)
    print("Demo: Coequalizer")
    print("=" * 60)

    f = fin_function([0, 1, 2], 3)
    g = fin_function([0, 0, 0], 3)
    colim = colimit(ParallelMorphisms((f, g)))
    print(f"\n  f = {f.collect()}, g = {g.collect()}")
    print(f"  apex size = {len(colim.apex)}, projection = {colim.legs[0].collect()}")
    match = len(colim.apex) == 1
    print(f"\nEverything identified: {match}")
    return match


def demo_pushout():
    """Demo: named pushout gluing two paths at a shared vertex"""
    print("=" * 60)
    print("Demo: Named pushout")
    print("=" * 60)

    shared = fin_dom_function({"x": "b"}, ["a", "b"])
    other = fin_dom_function({"x": "b"}, ["b", "c"])
    colim = colimit(Multispan([shared, other]))
    print(f"\n  apex = {list(colim.apex)}")
    for i, leg in enumerate(colim.legs):
        print(f"  leg {i}: {leg.func}")

    point = FinSetInt(1)
    h = universal(colim, [
        fin_dom_function({"a": 0, "b": 0}, point),
        fin_dom_function({"b": 0, "c": 0}, point),
    ])
    print(f"  map to the one-point set: {h.collect()}")
    match = len(colim.apex) == 3 and "x" in colim.apex
    print(f"\nShared vertex glued, names kept: {match}")
    return match


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "join": demo_join,
        "coequalizer": demo_coequalizer,
        "pushout": demo_pushout,
    }

    if args.example == "all":
        results = []
        for name, func in demos.items():
            try:
                passed = func()
            except CatlimError as e:
                logger.exception("demo %s failed", name)
                print(f"Error in {name}: {e}")
                passed = False
            results.append((name, passed))
            print()

        print("=" * 60)
        print("Summary")
        print("=" * 60)
        for name, passed in results:
            print(f"  {name}: {'PASS' if passed else 'FAIL'}")
        return 0 if all(passed for _, passed in results) else 1

    return 0 if demos[args.example]() else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catlim",
        description="catlim: limits and colimits of finite sets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  catlim limit --input diagram.json --join sort_merge
  catlim colimit --input diagram.json --named
  catlim demo --example all
""",
    )
    parser.add_argument("--version", "-V", action="version", version=f"catlim {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (("limit", "Compute the limit of a diagram"),
                            ("colimit", "Compute the colimit of a diagram")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--input", "-i", type=str, required=True, help="Input JSON file")
        sub.add_argument("--output", "-o", type=str, help="Output JSON file")
        sub.add_argument(
            "--join", "-j",
            choices=[alg.value for alg in JoinAlgorithm],
            default=JoinAlgorithm.SMART.value,
            help="Join algorithm (default: smart)",
        )
        sub.add_argument("--tag-separator", type=str, default="#",
                         help="Separator for renamed duplicate names (default: #)")
        if name == "colimit":
            sub.add_argument("--named", action="store_true", help="Keep element names in the apex")

    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["join", "coequalizer", "pushout", "all"],
        default="all",
        help="Which example to run (default: all)",
    )
    return parser


def main(argv: List[str] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "limit":
        return cmd_limit(args)
    elif args.command == "colimit":
        return cmd_colimit(args)
    elif args.command == "demo":
        return cmd_demo(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
