"""
Road graph validation checks.

- Self-loop segments (GRAPH-001)
- Duplicate canonical segments (GRAPH-002)
- Node spacing after consolidation (GRAPH-003)
- Dangling segment endpoints (GRAPH-004)
"""

from collections import Counter
from typing import Iterable, List, Optional, Tuple

from cityforge.generators.geometry import Vec2, distance
from cityforge.generators.road_graph import RoadGraph

from ..core import ValidationIssue, ValidationResult, ValidationStage
from ..rules import GRAPH_001, GRAPH_002, GRAPH_003, GRAPH_004


def check_segments(pairs: Iterable[Tuple[int, int]], node_count: int) -> List[ValidationIssue]:
    """Check raw segment pairs for loops, duplicates and dangling ends.

    Pairs are canonicalized before the duplicate count, so (3, 1) and
    (1, 3) are the same road.

    Args:
        pairs: (a, b) node index pairs
        node_count: Number of registered nodes

    Returns:
        List of ValidationIssue
    """
    issues = []
    canonical = Counter()
    for a, b in pairs:
        if a == b:
            issues.append(GRAPH_001.issue(location=f"segment {a}-{b}", node=a))
            continue
        if not (0 <= a < node_count and 0 <= b < node_count):
            issues.append(GRAPH_004.issue(location=f"segment {a}-{b}", a=a, b=b, count=node_count))
        canonical[(min(a, b), max(a, b))] += 1

    for (a, b), count in sorted(canonical.items()):
        if count > 1:
            issues.append(GRAPH_002.issue(location=f"segment {a}-{b}", a=a, b=b, count=count))
    return issues


def check_node_spacing(nodes: List[Vec2], threshold: float) -> List[ValidationIssue]:
    """Report node pairs closer than ``threshold``.

    Args:
        nodes: Node positions
        threshold: Minimum allowed distance between distinct nodes

    Returns:
        List of ValidationIssue, one per offending pair
    """
    issues = []
    for i in range(len(nodes)):
        for j in range(i + 1, len(nodes)):
            d = distance(nodes[i], nodes[j])
            if d < threshold:
                issues.append(GRAPH_003.issue(
                    location=f"nodes {i},{j}", a=i, b=j, distance=d, threshold=threshold,
                ))
    return issues


def validate_road_graph(graph: RoadGraph, spacing_threshold: Optional[float] = None,
                        consolidation_converged: bool = True) -> ValidationResult:
    """Validate the structure of a road graph.

    Args:
        graph: Graph to check
        spacing_threshold: When given, also check node spacing
        consolidation_converged: Spacing is only enforced when the
            consolidator converged before its pass limit

    Returns:
        ValidationResult for the GRAPH stage
    """
    result = ValidationResult(stage=ValidationStage.GRAPH)
    for issue in check_segments(((s.a, s.b) for s in graph.segments), graph.node_count):
        result.add_issue(issue)
    if spacing_threshold is not None and consolidation_converged:
        for issue in check_node_spacing(graph.nodes, spacing_threshold):
            result.add_issue(issue)
    return result
