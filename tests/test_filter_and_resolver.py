"""Tests for UI-node filtering and input resolution."""
import logging

from workflow_compiler.engine.filter import filter_ui_nodes
from workflow_compiler.engine.graph import EditorGraph, EditorNode, InputSlot, LinkRecord
from workflow_compiler.engine.resolver import (
    resolve_input, resolve_node_inputs, widget_fallback,
)


class TestFilterUINodes:
    def test_removes_ui_nodes_and_their_links(self, graph_with_note):
        filtered = filter_ui_nodes(graph_with_note, {"Note"})
        assert filtered.node_ids() == {1, 3}
        assert [link.id for link in filtered.links] == [22]

    def test_does_not_mutate_input(self, graph_with_note):
        filter_ui_nodes(graph_with_note, {"Note"})
        assert len(graph_with_note.nodes) == 3
        assert len(graph_with_note.links) == 3

    def test_idempotent(self, graph_with_note):
        once = filter_ui_nodes(graph_with_note, {"Note"})
        assert filter_ui_nodes(once, {"Note"}) == once

    def test_no_ui_types_keeps_everything(self, graph_with_note):
        assert filter_ui_nodes(graph_with_note, set()) == graph_with_note

    def test_links_to_unknown_nodes_dropped(self):
        graph = EditorGraph(
            nodes=(EditorNode(id=1, type="A"),),
            links=(LinkRecord(5, 99, 0, 1, 0),),
        )
        assert filter_ui_nodes(graph, set()).links == ()


class TestResolveInput:
    links = (LinkRecord(10, 1, 2, 2, 0),)

    def test_resolves_to_source_and_output(self):
        assert resolve_input(InputSlot("x", 10), self.links, {1, 2}) == ["1", 2]

    def test_zero_index_option(self):
        value = resolve_input(InputSlot("x", 10), self.links, {1, 2}, zero_index_outputs=True)
        assert value == ["1", 0]

    def test_accepts_indexed_links(self):
        indexed = {link.id: link for link in self.links}
        assert resolve_input(InputSlot("x", 10), indexed, {1, 2}) == ["1", 2]

    def test_unconnected_slot(self):
        assert resolve_input(InputSlot("x", None), self.links, {1, 2}) is None

    def test_unknown_link(self):
        assert resolve_input(InputSlot("x", 77), self.links, {1, 2}) is None

    def test_filtered_source(self):
        assert resolve_input(InputSlot("x", 10), self.links, {2}) is None


class TestWidgetFallback:
    def test_literal_at_position(self):
        node = EditorNode(id=1, type="A", widgets_values=["a", 5])
        assert widget_fallback(node, 1) == 5

    def test_out_of_range(self):
        node = EditorNode(id=1, type="A", widgets_values=["a"])
        assert widget_fallback(node, 3) is None

    def test_reference_is_not_literal(self):
        node = EditorNode(id=1, type="A", widgets_values=[["4", 0]])
        assert widget_fallback(node, 0) is None

    def test_non_list_widgets(self):
        node = EditorNode(id=1, type="A", widgets_values={"videopreview": {}})
        assert widget_fallback(node, 0) is None


class TestResolveNodeInputs:
    def test_link_then_widget_then_omitted(self):
        node = EditorNode(
            id=2, type="Sampler",
            inputs=(InputSlot("model", 10), InputSlot("steps", None), InputSlot("cfg", None)),
            widgets_values=[None, 30],
        )
        warnings: list[str] = []
        inputs = resolve_node_inputs(node, (LinkRecord(10, 1, 0, 2, 0),), {1, 2}, warnings=warnings)
        assert inputs == {"model": ["1", 0], "steps": 30}
        assert len(warnings) == 1
        assert "'cfg'" in warnings[0]

    def test_widget_change_changes_compiled_value(self):
        def build(value):
            return EditorNode(id=1, type="A", inputs=(InputSlot("seed", None),),
                              widgets_values=[value])
        assert resolve_node_inputs(build(1), (), {1}) == {"seed": 1}
        assert resolve_node_inputs(build(2), (), {1}) == {"seed": 2}

    def test_filtered_source_falls_back_to_widget(self):
        node = EditorNode(id=2, type="A", inputs=(InputSlot("text", 10),), widgets_values=["lit"])
        inputs = resolve_node_inputs(node, (LinkRecord(10, 1, 0, 2, 0),), {2})
        assert inputs == {"text": "lit"}

    def test_converted_widget_fallback_is_logged(self, caplog):
        node = EditorNode(id=3, type="KSampler", inputs=(InputSlot("seed", None, widget="seed"),),
                          widgets_values=[42])
        with caplog.at_level(logging.DEBUG, logger="workflow_compiler.engine.resolver"):
            assert resolve_node_inputs(node, (), {3}) == {"seed": 42}
        assert "converted widget 'seed'" in caplog.text
