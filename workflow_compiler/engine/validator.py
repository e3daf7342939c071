"""Pre-submission checks for execution graphs: structure, references, cycles."""
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Mapping

from .graph import is_reference


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_workflow(workflow: Any) -> ValidationResult:
    """Check a complete execution graph without modifying it."""
    if not isinstance(workflow, Mapping):
        return ValidationResult(valid=False, errors=["Workflow must be an object"])

    errors: list[str] = []
    errors.extend(_check_nodes(workflow))
    errors.extend(_check_references(workflow))
    errors.extend(_check_cycles(workflow))
    return ValidationResult(valid=not errors, errors=errors)


def _node_inputs(node: Any) -> Mapping[str, Any]:
    if isinstance(node, Mapping) and isinstance(node.get("inputs"), Mapping):
        return node["inputs"]
    return {}


def _check_nodes(workflow: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    for node_id, node in workflow.items():
        if not isinstance(node, Mapping):
            errors.append(f"Node {node_id} is not an object")
            continue
        if not node.get("class_type"):
            errors.append(f"Node {node_id} is missing class_type property")
        if node.get("inputs") is not None and not isinstance(node["inputs"], Mapping):
            errors.append(f"Node {node_id} has invalid inputs (must be an object)")
    return errors


def _check_references(workflow: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    node_ids = {str(nid) for nid in workflow}
    for node_id, node in workflow.items():
        for input_name, value in _node_inputs(node).items():
            if is_reference(value) and value[0] not in node_ids:
                errors.append(
                    f"Node {node_id} references non-existent node {value[0]} "
                    f"in input {input_name}"
                )
    return errors


def _check_cycles(workflow: Mapping[str, Any]) -> list[str]:
    """Detect cycles using Kahn's algorithm."""
    ids = [str(nid) for nid in workflow]
    in_degree: dict[str, int] = {nid: 0 for nid in ids}
    adj: dict[str, list[str]] = {nid: [] for nid in ids}
    for node_id, node in workflow.items():
        for value in _node_inputs(node).values():
            if is_reference(value) and value[0] in adj:
                adj[value[0]].append(str(node_id))
                in_degree[str(node_id)] += 1

    queue = deque(nid for nid, deg in in_degree.items() if deg == 0)
    visited = 0
    while queue:
        node_id = queue.popleft()
        visited += 1
        for succ in adj[node_id]:
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                queue.append(succ)

    if visited != len(ids):
        return ["Workflow contains a cycle"]
    return []
