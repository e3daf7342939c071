"""Tests for execution graph validation and summaries."""
import copy
import logging

from workflow_compiler.engine.summary import log_summary, summarize_workflow
from workflow_compiler.engine.validator import validate_workflow


class TestStructure:
    def test_valid_graph(self, execution_graph):
        result = validate_workflow(execution_graph)
        assert result.valid
        assert result.errors == []

    def test_missing_class_type(self):
        result = validate_workflow({"1": {"class_type": None}})
        assert not result.valid
        assert result.errors == ["Node 1 is missing class_type property"]

    def test_invalid_inputs(self):
        result = validate_workflow({"1": {"class_type": "A", "inputs": [1, 2]}})
        assert result.errors == ["Node 1 has invalid inputs (must be an object)"]

    def test_absent_inputs_allowed(self):
        assert validate_workflow({"1": {"class_type": "A"}}).valid

    def test_not_an_object(self):
        result = validate_workflow(["1"])
        assert result.errors == ["Workflow must be an object"]

    def test_node_not_an_object(self):
        assert validate_workflow({"1": "A"}).errors == ["Node 1 is not an object"]

    def test_does_not_mutate(self, execution_graph):
        before = copy.deepcopy(execution_graph)
        validate_workflow(execution_graph)
        assert execution_graph == before


class TestReferences:
    def test_dangling_reference(self):
        result = validate_workflow({"2": {"class_type": "B", "inputs": {"x": ["9", 0]}}})
        assert result.errors == ["Node 2 references non-existent node 9 in input x"]

    def test_literal_lists_are_not_references(self):
        assert validate_workflow({"1": {"class_type": "A", "inputs": {"size": [512, 512]}}}).valid


class TestCycleDetection:
    def test_self_loop(self):
        result = validate_workflow({"a": {"class_type": "A", "inputs": {"x": ["a", 0]}}})
        assert any("cycle" in e.lower() for e in result.errors)

    def test_two_node_cycle(self):
        result = validate_workflow({
            "a": {"class_type": "A", "inputs": {"x": ["b", 0]}},
            "b": {"class_type": "B", "inputs": {"x": ["a", 0]}},
        })
        assert any("cycle" in e.lower() for e in result.errors)

    def test_no_cycle_in_dag(self):
        """A -> B, A -> C, B -> D, C -> D (diamond, no cycle)."""
        result = validate_workflow({
            "a": {"class_type": "A", "inputs": {}},
            "b": {"class_type": "B", "inputs": {"x": ["a", 0]}},
            "c": {"class_type": "C", "inputs": {"x": ["a", 0]}},
            "d": {"class_type": "D", "inputs": {"x": ["b", 0], "y": ["c", 0]}},
        })
        assert result.valid


class TestSummary:
    def test_groups_by_type(self):
        summary = summarize_workflow({
            "6": {"class_type": "CLIPTextEncode", "inputs": {}},
            "7": {"class_type": "CLIPTextEncode", "inputs": {}},
            "3": {"class_type": "KSampler", "inputs": {}},
        })
        assert summary.node_count == 3
        assert summary.nodes_by_type == {"CLIPTextEncode": ["6", "7"], "KSampler": ["3"]}
        assert summary.issues == []

    def test_reports_dual_clip_type(self):
        summary = summarize_workflow({
            "2": {"class_type": "DualCLIPLoader", "inputs": {"type": "dual"}},
        })
        assert len(summary.issues) == 1
        assert "DualCLIPLoader (node 2)" in summary.issues[0]

    def test_includes_validation_errors(self):
        summary = summarize_workflow({"1": {"inputs": {}}})
        assert summary.nodes_by_type == {"<unknown>": ["1"]}
        assert "Node 1 is missing class_type property" in summary.issues

    def test_log_summary(self, caplog):
        with caplog.at_level(logging.INFO):
            log_summary(summarize_workflow({"1": {"class_type": "A", "inputs": {}}}), "Check")
        assert "Check: 1 nodes" in caplog.text
