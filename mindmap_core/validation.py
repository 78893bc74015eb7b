"""
Document validation - Check mindmaps for structural issues.

Two levels are provided:
- `check_document` enforces the commit contract and raises on violations
- `validate_document` reports advisory issues without raising
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .models import DocumentSnapshot, Edge, Node


class ContractViolation(ValueError):
    """A document breaks an invariant the core relies on."""


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Invalid state, must be fixed
    WARNING = "warning"  # Potential problem, should review
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found in a document."""
    severity: IssueSeverity
    message: str
    node_id: str | None = None
    edge_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.node_id:
            result["node_id"] = self.node_id
        if self.edge_id:
            result["edge_id"] = self.edge_id
        return result


def _duplicates(ids: Iterable[str]) -> list[str]:
    return [item for item, count in Counter(ids).items() if count > 1]


def check_document(
    nodes: Iterable["Node"],
    edges: Iterable["Edge"],
    enforce_references: bool = True
) -> None:
    """
    Raise ContractViolation if the document can't be committed.

    Checks for:
    - Duplicate node ids
    - Duplicate edge ids
    - Edges whose source/target is not a node in the document
      (skipped when enforce_references is False)
    """
    nodes = list(nodes)
    edges = list(edges)

    dup_nodes = _duplicates(n.id for n in nodes)
    if dup_nodes:
        raise ContractViolation(f"Duplicate node ids: {', '.join(sorted(dup_nodes))}")

    dup_edges = _duplicates(e.id for e in edges)
    if dup_edges:
        raise ContractViolation(f"Duplicate edge ids: {', '.join(sorted(dup_edges))}")

    if not enforce_references:
        return

    node_ids = {n.id for n in nodes}
    for edge in edges:
        for end in (edge.source, edge.target):
            if end not in node_ids:
                raise ContractViolation(
                    f"Edge {edge.id} references non-existent node: {end}"
                )


def validate_document(snapshot: "DocumentSnapshot") -> list[ValidationIssue]:
    """
    Validate a document and return a list of issues.

    Checks for:
    - Empty document - INFO
    - Orphan nodes (no connections) - WARNING
    - Blank labels - WARNING
    - Invalid edge references (source/target doesn't exist) - ERROR
    - Self-referencing edges - WARNING
    - Duplicate edges (same source->target) - WARNING
    """
    issues: list[ValidationIssue] = []

    nodes = snapshot.nodes
    edges = snapshot.edges

    if not nodes:
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Document has no nodes"
        ))
        return issues

    node_ids = {n.id for n in nodes}

    connected: set[str] = set()
    for edge in edges:
        connected.add(edge.source)
        connected.add(edge.target)

    orphans = [n for n in nodes if n.id not in connected]
    if orphans and len(nodes) > 1:
        issues.append(ValidationIssue(
            severity=IssueSeverity.WARNING,
            message="Orphan nodes (no connections): "
                    + ", ".join(f"{n.label or n.kind.value} ({n.id})" for n in orphans)
        ))

    for node in nodes:
        if not node.label.strip():
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message="Node has an empty label",
                node_id=node.id
            ))

    for edge in edges:
        for side, end in (("source", edge.source), ("target", edge.target)):
            if end not in node_ids:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=f"Edge references non-existent {side} node: {end}",
                    edge_id=edge.id
                ))

    for edge in edges:
        if edge.source == edge.target:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message="Self-referencing edge (node points to itself)",
                edge_id=edge.id,
                node_id=edge.source
            ))

    seen_pairs: set[tuple[str, str]] = set()
    for edge in edges:
        pair = (edge.source, edge.target)
        if pair in seen_pairs:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Duplicate edge from {edge.source} to {edge.target}",
                edge_id=edge.id
            ))
        else:
            seen_pairs.add(pair)

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """Counts by severity; `valid` is False when any error is present."""
    errors = len([i for i in issues if i.severity == IssueSeverity.ERROR])
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": len([i for i in issues if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in issues if i.severity == IssueSeverity.INFO]),
        "valid": errors == 0
    }
