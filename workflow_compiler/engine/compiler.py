"""Compile editor workflows into execution graphs."""
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import InvalidInputsError, MissingClassTypeError, StructuralError
from .filter import filter_ui_nodes
from .graph import (
    EditorGraph, ExecutionGraph, ExecutionNode, WorkflowFormat, detect_format,
)
from .normalizers import COMFY_NORMALIZERS, TypeNormalizer
from .resolver import resolve_node_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileOptions:
    ui_types: frozenset[str] = frozenset()
    type_normalizers: Mapping[str, TypeNormalizer] = field(default_factory=dict)
    zero_index_outputs: bool = False


def default_compile_options(settings=None) -> CompileOptions:
    """Options for ComfyUI editor exports, taken from application settings."""
    if settings is None:
        from ..config import settings
    return CompileOptions(
        ui_types=frozenset(settings.ui_node_types),
        type_normalizers=COMFY_NORMALIZERS,
        zero_index_outputs=settings.zero_index_outputs,
    )


def compile_editor_graph(
    graph: EditorGraph,
    options: CompileOptions | None = None,
    warnings: list[str] | None = None,
) -> ExecutionGraph:
    """Filter, resolve and normalize an editor graph.

    Unresolved inputs are omitted and reported through ``warnings``; a node
    without a type raises ``MissingClassTypeError``.
    """
    options = options or CompileOptions()
    filtered = filter_ui_nodes(graph, options.ui_types)
    surviving = filtered.node_ids()
    links = filtered.links_by_id()

    result: ExecutionGraph = {}
    for node in filtered.nodes:
        node_id = str(node.id)
        if not node.type:
            raise MissingClassTypeError(node_id)

        exec_node: ExecutionNode = {
            "class_type": node.type,
            "inputs": resolve_node_inputs(
                node, links, surviving, options.zero_index_outputs, warnings,
            ),
        }
        if node.widgets_values is not None:
            exec_node["widgets_values"] = copy.deepcopy(node.widgets_values)
        if node.title:
            exec_node["_meta"] = {"title": node.title}

        normalizer = options.type_normalizers.get(node.type)
        if normalizer is not None:
            exec_node["inputs"].update(normalizer(exec_node))

        result[node_id] = exec_node

    logger.debug(
        "Compiled editor workflow: %d nodes in, %d execution nodes out",
        len(graph.nodes), len(result),
    )
    return result


def normalize_execution_graph(data: Mapping[str, Any]) -> ExecutionGraph:
    """Pass-through for workflows that are already execution-shaped.

    Returns a validated deep copy; a missing ``inputs`` becomes ``{}``.
    """
    result: ExecutionGraph = {}
    for node_id, node in data.items():
        node_id = str(node_id)
        if not isinstance(node, Mapping):
            raise StructuralError(f"Node {node_id} is not an object", node_id=node_id)
        node = copy.deepcopy(dict(node))

        if not node.get("class_type") and node.get("type"):
            node["class_type"] = node.pop("type")
        if not node.get("class_type"):
            logger.error("Node %s is missing class_type property: %r", node_id, node)
            raise MissingClassTypeError(node_id)

        if node.get("inputs") is None:
            node["inputs"] = {}
        elif not isinstance(node["inputs"], Mapping):
            raise InvalidInputsError(node_id)
        result[node_id] = node
    return result


def compile_workflow(
    data: Any,
    options: CompileOptions | None = None,
    warnings: list[str] | None = None,
) -> ExecutionGraph:
    """Compile whatever the caller holds: an editor export or an execution graph."""
    fmt = detect_format(data)
    if fmt is WorkflowFormat.EDITOR:
        return compile_editor_graph(EditorGraph.from_dict(data), options, warnings)
    return normalize_execution_graph(data)
