"""Classification of nodes into graph-type buckets."""

from collections.abc import Iterable

from graphlens.graph.config import BucketConfig
from graphlens.graph.models import GraphType
from graphlens.models.graph import Node

_DEFAULT_BUCKETS = BucketConfig()


def bucket_of(node: Node, config: BucketConfig = _DEFAULT_BUCKETS) -> GraphType | None:
    """Return the first bucket (in priority order) whose rule matches the node."""
    for rule in config.rules:
        if rule.matches(node.labels):
            return rule.bucket
    return None


def classify(nodes: Iterable[Node], config: BucketConfig = _DEFAULT_BUCKETS) -> list[GraphType]:
    """Return the buckets present in the node set, in priority order.

    Drives which bucket tabs are offered.
    """
    present = {bucket_of(node, config) for node in nodes}
    return [bucket for bucket in config.priority if bucket in present]


def default_bucket(
    nodes: Iterable[Node], config: BucketConfig = _DEFAULT_BUCKETS
) -> GraphType | None:
    """First non-empty bucket in priority order, or None for an empty node set."""
    present = classify(nodes, config)
    return present[0] if present else None


def group_by_bucket(
    nodes: Iterable[Node], config: BucketConfig = _DEFAULT_BUCKETS
) -> dict[GraphType, list[Node]]:
    """Partition nodes by bucket; every configured bucket gets a (possibly empty) list."""
    groups: dict[GraphType, list[Node]] = {bucket: [] for bucket in config.priority}
    for node in nodes:
        bucket = bucket_of(node, config)
        if bucket is not None:
            groups[bucket].append(node)
    return groups
