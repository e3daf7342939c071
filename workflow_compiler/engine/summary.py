"""Human-readable overview of an execution graph, for debugging templates."""
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .validator import validate_workflow

logger = logging.getLogger(__name__)


@dataclass
class WorkflowSummary:
    node_count: int
    nodes_by_type: dict[str, list[str]] = field(default_factory=dict)
    issues: list[str] = field(default_factory=list)


def _advisories(workflow: Mapping[str, Any]) -> list[str]:
    issues = []
    for node_id, node in workflow.items():
        if not isinstance(node, Mapping):
            continue
        inputs = node.get("inputs")
        if node.get("class_type") == "DualCLIPLoader" and isinstance(inputs, Mapping):
            if inputs.get("type") == "dual":
                issues.append(
                    f'DualCLIPLoader (node {node_id}) has type="dual" which may not '
                    f'be supported - should be "flux"'
                )
    return issues


def summarize_workflow(workflow: Mapping[str, Any]) -> WorkflowSummary:
    result = validate_workflow(workflow)
    if not isinstance(workflow, Mapping):
        return WorkflowSummary(node_count=0, issues=result.errors)

    nodes_by_type: dict[str, list[str]] = {}
    for node_id, node in workflow.items():
        class_type = node.get("class_type") if isinstance(node, Mapping) else None
        nodes_by_type.setdefault(class_type or "<unknown>", []).append(str(node_id))

    return WorkflowSummary(
        node_count=len(workflow),
        nodes_by_type=nodes_by_type,
        issues=result.errors + _advisories(workflow),
    )


def log_summary(summary: WorkflowSummary, label: str = "Workflow summary") -> None:
    logger.info("%s: %d nodes", label, summary.node_count)
    for class_type, node_ids in summary.nodes_by_type.items():
        logger.info("  %s: %d nodes (IDs: %s)", class_type, len(node_ids), ", ".join(node_ids))
    if summary.issues:
        for issue in summary.issues:
            logger.warning("  %s", issue)
    else:
        logger.info("  No common issues detected")
