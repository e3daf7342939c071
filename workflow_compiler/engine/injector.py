"""Write named parameters into an execution graph without knowing node ids.

A parameter registry maps a logical name (``prompt``, ``steps``, ...) to a
``ParameterSpec``: which ``class_type`` to look for, an optional predicate that
tells same-typed nodes apart, and the primary/fallback paths to write. Write
predicates against node shape (input keys, title), never against node ids;
ids change between template revisions.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .graph import ExecutionGraph, ExecutionNode
from .paths import set_by_path

logger = logging.getLogger(__name__)

NodePredicate = Callable[[ExecutionNode], bool]

PARAMETER_TYPES = ("string", "number")


def has_input(key: str) -> NodePredicate:
    def predicate(node: ExecutionNode) -> bool:
        inputs = node.get("inputs")
        return isinstance(inputs, Mapping) and key in inputs
    return predicate


def lacks_input(key: str) -> NodePredicate:
    positive = has_input(key)
    return lambda node: not positive(node)


def title_is(title: str) -> NodePredicate:
    def predicate(node: ExecutionNode) -> bool:
        meta = node.get("_meta")
        return isinstance(meta, Mapping) and meta.get("title") == title
    return predicate


_PREDICATE_BUILDERS: dict[str, Callable[[str], NodePredicate]] = {
    "has_input": has_input,
    "lacks_input": lacks_input,
    "title": title_is,
}


def build_predicate(conditions: Mapping[str, str]) -> NodePredicate:
    """Compile a data-form predicate such as ``{"has_input": "negative"}``.

    All conditions must hold.
    """
    checks = []
    for kind, arg in conditions.items():
        if kind not in _PREDICATE_BUILDERS:
            raise ValueError(f"Unknown predicate condition: {kind}")
        checks.append(_PREDICATE_BUILDERS[kind](arg))
    return lambda node: all(check(node) for check in checks)


@dataclass(frozen=True)
class ParameterSpec:
    node_type: str
    primary_path: str | None
    fallback_path: str | None = None
    type: str = "string"
    predicate: NodePredicate | None = None
    description: str = ""

    def matches(self, node: ExecutionNode) -> bool:
        if node.get("class_type") != self.node_type:
            return False
        return self.predicate is None or bool(self.predicate(node))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParameterSpec":
        param_type = data.get("type", "string")
        if param_type not in PARAMETER_TYPES:
            raise ValueError(f"Unsupported parameter type: {param_type}")
        when = data.get("when")
        return cls(
            node_type=data["node_type"],
            primary_path=data.get("primary_path"),
            fallback_path=data.get("fallback_path"),
            type=param_type,
            predicate=build_predicate(when) if when else None,
            description=data.get("description", ""),
        )


def load_registry(data: Mapping[str, Mapping[str, Any]]) -> dict[str, ParameterSpec]:
    return {name: ParameterSpec.from_dict(entry) for name, entry in data.items()}


def coerce_value(spec: ParameterSpec, value: Any) -> Any:
    """Convert ``value`` to the parameter's declared type, raising ValueError if it can't."""
    if spec.type == "number":
        if isinstance(value, bool):
            raise ValueError(f"Expected a number, got {value!r}")
        if isinstance(value, str):
            text = value.strip()
            try:
                number = int(text)
            except ValueError:
                number = float(text)
        elif isinstance(value, (int, float)):
            number = value
        else:
            raise ValueError(f"Expected a number, got {value!r}")
        # NaN and infinities have no JSON encoding
        if isinstance(number, float) and not math.isfinite(number):
            raise ValueError(f"Expected a finite number, got {value!r}")
        return number
    return value if isinstance(value, str) else str(value)


def find_nodes(
    graph: ExecutionGraph,
    class_type: str,
    predicate: NodePredicate | None = None,
) -> list[tuple[str, ExecutionNode]]:
    return [
        (node_id, node) for node_id, node in graph.items()
        if isinstance(node, Mapping) and node.get("class_type") == class_type
        and (predicate is None or predicate(node))
    ]


def _miss(message: str, warnings: list[str] | None) -> None:
    logger.warning(message)
    if warnings is not None:
        warnings.append(message)


def inject_parameters(
    graph: ExecutionGraph,
    values: Mapping[str, Any],
    registry: Mapping[str, ParameterSpec],
    warnings: list[str] | None = None,
) -> ExecutionGraph:
    """Write ``values`` into ``graph`` in place and return it.

    Misses (unknown names, no matching node, unwritable paths) are logged and
    collected in ``warnings``; they never abort the injection. Deep-copy the
    graph first when it is reused across submissions.
    """
    for name, value in values.items():
        if value is None:
            continue
        spec = registry.get(name)
        if spec is None:
            _miss(f'No registry entry for parameter "{name}"', warnings)
            continue

        try:
            value = coerce_value(spec, value)
        except ValueError as e:
            _miss(f'Parameter "{name}" rejected: {e}', warnings)
            continue

        targets = find_nodes(graph, spec.node_type, spec.predicate)
        if not targets:
            _miss(f'No nodes found for parameter "{name}" with type "{spec.node_type}"', warnings)
            continue

        for node_id, node in targets:
            applied = False
            if spec.primary_path:
                applied = set_by_path(node, spec.primary_path, value)
            if not applied and spec.fallback_path:
                applied = set_by_path(node, spec.fallback_path, value)
            if applied:
                logger.debug("Applied parameter %r to node %s", name, node_id)
            else:
                _miss(f'Could not apply parameter "{name}" to node {node_id}', warnings)
    return graph
