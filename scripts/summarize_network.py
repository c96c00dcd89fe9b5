#!/usr/bin/env python3
"""Build a similarity network from CSV files and print a cluster report."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from simnet.config import ConfigError, load_config
from simnet.errors import SimNetError
from simnet.pipeline import RenderableGraph, build_network_from_text, build_resolver
from simnet.resolution.resolver import EntityResolver


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments for the network summary utility.

    Returns:
        argparse.Namespace: Parsed command line arguments.
    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("edges", type=Path, help="Edge list CSV with Source1, Source2, Weight columns")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml (default: repository root)")
    parser.add_argument(
        "--no-clustering",
        action="store_true",
        help="Skip community detection and report the plain graph",
    )
    parser.add_argument("--thumbnails", type=Path, default=None, help="Thumbnail table CSV")
    parser.add_argument("--tags", type=Path, default=None, help="Tag table CSV")
    parser.add_argument("--emotions", type=Path, default=None, help="Emotion table CSV")
    parser.add_argument("--json", action="store_true", help="Print the renderable payload as JSON instead")
    return parser.parse_args(argv)


def _read_optional(path: Optional[Path]) -> Optional[str]:
    if path is None:
        return None
    return path.read_text(encoding="utf-8")


def format_report(network: RenderableGraph, resolver: Optional[EntityResolver] = None) -> str:
    """Render headline statistics and the cluster list as plain text."""

    summary = network.summary()
    lines: List[str] = [
        f"Nodes: {summary.node_count}",
        f"Edges: {summary.edge_count}",
    ]
    if summary.min_weight is not None and summary.max_weight is not None:
        lines.append(f"Weight range: {summary.min_weight:.3f} .. {summary.max_weight:.3f}")
    lines.append(f"Degree range: {summary.min_degree} .. {summary.max_degree}")

    if not network.communities.enabled:
        lines.append("Clustering disabled.")
        return "\n".join(lines)

    clusters = network.clusters()
    lines.append(f"Clusters: {len(clusters)}")
    if summary.modularity is not None:
        lines.append(f"Modularity: {summary.modularity:.4f}")
    for cluster in clusters:
        lines.append(f"  - Cluster {cluster.index + 1} ({cluster.color}, {len(cluster.members)} members)")
        for node_id, label in zip(cluster.members, cluster.labels):
            suffix = ""
            if resolver is not None:
                enrichment = resolver.enrich(label)
                if enrichment.tags:
                    suffix = " " + " ".join(f"#{tag}" for tag in enrichment.tags)
            lines.append(f"      * {label}{suffix}")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the network summary CLI.

    Returns:
        int: Exit status code where ``0`` indicates success.
    """
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    args = parse_args(argv)

    try:
        config = load_config(args.config)
        edges_text = args.edges.read_text(encoding="utf-8")
        network = build_network_from_text(
            edges_text,
            config,
            clustering=not args.no_clustering,
            with_layout=args.json,
        )
        resolver = None
        if args.thumbnails or args.tags or args.emotions:
            resolver = build_resolver(
                config,
                thumbnails_text=_read_optional(args.thumbnails),
                tags_text=_read_optional(args.tags),
                emotions_text=_read_optional(args.emotions),
            )
    except (ConfigError, SimNetError, OSError) as exc:
        print(f"Network summary failed: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(network.to_payload(), ensure_ascii=False, indent=2))
    else:
        print(format_report(network, resolver))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
