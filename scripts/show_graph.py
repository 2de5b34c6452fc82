#!/usr/bin/env python
"""Fetch the graph of some documents and print its buckets and legend.

Usage:
    uv run python scripts/show_graph.py invoices.pdf contracts.pdf
    uv run python scripts/show_graph.py invoices.pdf --single --bucket Entities
    uv run python scripts/show_graph.py invoices.pdf --query acme
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from graphlens.config import settings
from graphlens.graph.models import FetchScope, GraphType, ViewStatus
from graphlens.graph.session import GraphViewSession
from graphlens.storage.neo4j_client import close_client, get_client


async def main(args: argparse.Namespace) -> None:
    db = await get_client()

    if args.single:
        scope = FetchScope.single_item(args.names[0])
    else:
        scope = FetchScope.selected_items(args.names)

    session = GraphViewSession(fetcher=db.fetch_graph)
    await session.open(scope)

    print(f"\nScope: {scope.viewpoint.value} -> {scope.label}")
    print("-" * 60)

    if session.status != ViewStatus.READY:
        print(f"{session.status.value.upper()}: {session.message}")
        session.close()
        await close_client()
        return

    canonical = session.canonical
    print(f"Canonical graph: {len(canonical.nodes)} nodes, {len(canonical.relationships)} relationships")
    print(f"Buckets: {[b.value for b in session.available_buckets]}")

    if args.bucket:
        session.select_bucket(GraphType(args.bucket))
    if args.query:
        session.apply_search(args.query)

    print(f"Active: {[b.value for b in session.active_buckets]}")

    chips = session.chips()
    print(f"\nNodes ({chips.total_nodes}):")
    for chip in chips.node_chips:
        print(f"  {chip.color}  {chip.label:<30} {chip.count:>5}")

    print(f"\nRelationships ({chips.total_relationships}):")
    for chip in chips.relationship_chips:
        print(f"  {chip.color}  {chip.caption:<30} {chip.count:>5}")

    if args.query:
        matches = [n for n in session.displayed.nodes if n.selected]
        print(f"\nMatches for '{args.query}': {len(matches)}")
        for node in matches[:args.limit]:
            print(f"  {node.id[:24]:<24} {node.caption[:60]}")

    session.close()
    await close_client()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show the graph of documents")
    parser.add_argument("names", nargs="+", help="Document file names")
    parser.add_argument("--single", action="store_true", help="Use the single-item scope")
    parser.add_argument(
        "--bucket",
        choices=[b.value for b in GraphType],
        help="Bucket to project onto (default: first present)",
    )
    parser.add_argument("--query", help="Highlight nodes matching this text")
    parser.add_argument("--limit", type=int, default=20, help="Matches to print")

    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(main(args))
