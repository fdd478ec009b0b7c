"""
Validation rule definitions.

Each rule has:
- Code: Unique identifier (e.g., "GRAPH-001")
- Severity: FAIL or WARN
- Message template: Human-readable description
- Remediation: Suggested fix

Rules are organized by category:
- GRAPH: Road graph structure
- BLOCK: Block perimeters and buildable polygons
- LOT: Lot subdivision
"""

from dataclasses import dataclass
from typing import Optional

from .core import Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    """Definition of a validation rule.

    Attributes:
        code: Unique rule code (e.g., "GRAPH-001")
        severity: Default severity for this rule
        message_template: Template for error message (use {placeholders})
        remediation_template: Template for suggested fix
        description: Full description of the rule
    """
    code: str
    severity: Severity
    message_template: str
    remediation_template: Optional[str] = None
    description: Optional[str] = None

    def format_message(self, **kwargs) -> str:
        """Format the message template with provided values."""
        return self.message_template.format(**kwargs)

    def format_remediation(self, **kwargs) -> Optional[str]:
        """Format the remediation template with provided values."""
        if self.remediation_template:
            return self.remediation_template.format(**kwargs)
        return None

    def issue(self, location: Optional[str] = None, **kwargs) -> ValidationIssue:
        """Build a ValidationIssue for this rule."""
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=self.format_message(**kwargs),
            remediation=self.format_remediation(**kwargs),
            location=location,
        )


# =============================================================================
# GRAPH RULES (GRAPH)
# =============================================================================

GRAPH_001 = ValidationRule(
    code="GRAPH-001",
    severity=Severity.FAIL,
    message_template="Segment connects node {node} to itself",
    remediation_template="Drop segments whose endpoints collapse to one node",
    description="Road segments must join two distinct nodes"
)

GRAPH_002 = ValidationRule(
    code="GRAPH-002",
    severity=Severity.FAIL,
    message_template="Duplicate segment {a}-{b} ({count} copies)",
    remediation_template="Store segments canonically in a set",
    description="No two segments may share the same canonical node pair"
)

GRAPH_003 = ValidationRule(
    code="GRAPH-003",
    severity=Severity.WARN,
    message_template="Nodes {a} and {b} are {distance:.3f} apart (threshold {threshold:.3f})",
    remediation_template="Raise the consolidation pass limit or road width",
    description="After consolidation no two nodes should sit closer than 1.5 road widths"
)

GRAPH_004 = ValidationRule(
    code="GRAPH-004",
    severity=Severity.FAIL,
    message_template="Segment {a}-{b} references a node outside 0..{count}",
    remediation_template="Remap segments whenever the node list is compacted",
    description="Segments must reference registered nodes"
)

# =============================================================================
# BLOCK RULES (BLOCK)
# =============================================================================

BLOCK_001 = ValidationRule(
    code="BLOCK-001",
    severity=Severity.FAIL,
    message_template="Block {block} perimeter is not a closed road loop: {reason}",
    remediation_template="Re-trace the perimeter over the final adjacency",
    description="A traced perimeter must be a loop of graph-adjacent nodes without repeats"
)

BLOCK_002 = ValidationRule(
    code="BLOCK-002",
    severity=Severity.WARN,
    message_template="Block {block} buildable area {inner:.2f} is not smaller than its outline {outer:.2f}",
    remediation_template="Check junction corner selection for this block",
    description="With a positive road width the buildable polygon must be inset"
)

BLOCK_003 = ValidationRule(
    code="BLOCK-003",
    severity=Severity.WARN,
    message_template="Block {block} has stale corners {corners}",
    remediation_template="Remap block corners during node consolidation",
    description="Block corners must address existing nodes"
)

# =============================================================================
# LOT RULES (LOT)
# =============================================================================

LOT_001 = ValidationRule(
    code="LOT-001",
    severity=Severity.WARN,
    message_template="Block {block} lots cover {lots:.4f} of {inner:.4f}",
    remediation_template="Lots must partition the buildable polygon exactly",
    description="The sum of lot areas must equal the buildable polygon area"
)
