"""Unit tests for document validation."""

import pytest

from mindmap_core import (
    ContractViolation,
    DocumentSnapshot,
    IssueSeverity,
    NodeKind,
    check_document,
    validate_document,
    validation_summary,
)

from conftest import make_edge, make_node


class TestCheckDocument:
    """Tests for the raising commit contract."""

    def test_valid_document(self):
        check_document([make_node("a"), make_node("b")], [make_edge("a", "b")])

    def test_empty_document(self):
        check_document([], [])

    def test_contract_violation_is_value_error(self):
        with pytest.raises(ValueError):
            check_document([make_node("a"), make_node("a")], [])

    def test_dangling_source(self):
        with pytest.raises(ContractViolation, match="ghost"):
            check_document([make_node("a")], [make_edge("ghost", "a")])

    def test_references_not_enforced(self):
        check_document([make_node("a")], [make_edge("ghost", "a")], enforce_references=False)

    def test_duplicates_checked_even_without_references(self):
        with pytest.raises(ContractViolation):
            check_document(
                [make_node("a")],
                [make_edge("a", "x", "e"), make_edge("a", "y", "e")],
                enforce_references=False,
            )


class TestValidateDocument:
    """Tests for the advisory report."""

    def test_empty_document(self):
        issues = validate_document(DocumentSnapshot())
        assert len(issues) == 1
        assert issues[0].severity == IssueSeverity.INFO

    def test_clean_document(self):
        snapshot = DocumentSnapshot(
            nodes=(make_node("a", NodeKind.CHAPTER), make_node("b")),
            edges=(make_edge("a", "b"),),
        )
        assert validate_document(snapshot) == []

    def test_single_unconnected_node_is_fine(self):
        snapshot = DocumentSnapshot(nodes=(make_node("a"),))
        assert validate_document(snapshot) == []

    def test_reports_problems(self):
        snapshot = DocumentSnapshot(
            nodes=(make_node("a"), make_node("b", label=""), make_node("lonely")),
            edges=(
                make_edge("a", "b", "e1"),
                make_edge("a", "b", "e2"),
                make_edge("a", "a", "e3"),
                make_edge("a", "ghost", "e4"),
            ),
        )
        issues = validate_document(snapshot)
        messages = [i.message for i in issues]

        assert any("Orphan" in m and "lonely" in m for m in messages)
        assert any(i.node_id == "b" and "empty label" in i.message for i in issues)
        assert any(i.edge_id == "e2" and "Duplicate" in i.message for i in issues)
        assert any(i.edge_id == "e3" and "Self-referencing" in i.message for i in issues)
        errors = [i for i in issues if i.severity == IssueSeverity.ERROR]
        assert [e.edge_id for e in errors] == ["e4"]

    def test_issue_to_dict(self):
        issues = validate_document(DocumentSnapshot(
            nodes=(make_node("a"),),
            edges=(make_edge("a", "ghost", "e1"),),
        ))
        assert issues[0].to_dict() == {
            "type": "error",
            "message": "Edge references non-existent target node: ghost",
            "edge_id": "e1",
        }

    def test_summary(self):
        snapshot = DocumentSnapshot(
            nodes=(make_node("a"), make_node("b", label="")),
            edges=(make_edge("a", "ghost"),),
        )
        summary = validation_summary(validate_document(snapshot))
        assert summary["errors"] == 1
        assert summary["warnings"] == 2
        assert summary["valid"] is False
