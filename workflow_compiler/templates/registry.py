"""Named workflow templates and job payload construction.

A template file is JSON of the form::

    {
      "name": "txt2img-basic",
      "description": "...",
      "workflow": {... editor export or execution graph ...},
      "parameters": {"prompt": {"node_type": "CLIPTextEncode", ...}, ...}
    }

Adding a parameter to a template means adding a registry entry to its file;
neither the compiler nor the injector changes.
"""
import copy
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..engine.compiler import CompileOptions, compile_workflow
from ..engine.errors import TemplateNotFoundError
from ..engine.graph import ExecutionGraph
from ..engine.injector import ParameterSpec, inject_parameters, load_registry

logger = logging.getLogger(__name__)


@dataclass
class WorkflowTemplate:
    name: str
    workflow: dict[str, Any]
    description: str = ""
    parameters: dict[str, ParameterSpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowTemplate":
        return cls(
            name=data["name"],
            workflow=data["workflow"],
            description=data.get("description", ""),
            parameters=load_registry(data.get("parameters", {})),
        )

    @classmethod
    def from_file(cls, path: Path) -> "WorkflowTemplate":
        return cls.from_dict(json.loads(path.read_text()))


@dataclass
class SubmissionPayload:
    workflow: ExecutionGraph
    timestamp: int
    payload: dict[str, Any]
    warnings: list[str] = field(default_factory=list)


class TemplateRegistry:
    """Catalogue of workflow templates, keyed by name."""

    def __init__(self):
        self._templates: dict[str, WorkflowTemplate] = {}

    def register(self, template: WorkflowTemplate) -> None:
        self._templates[template.name] = template

    def get(self, name: str) -> WorkflowTemplate:
        if name not in self._templates:
            raise TemplateNotFoundError(name)
        return self._templates[name]

    def names(self) -> list[str]:
        return sorted(self._templates)

    def all(self) -> list[WorkflowTemplate]:
        return [self._templates[name] for name in self.names()]

    def load_directory(self, directory: Path) -> int:
        """Register every ``*.json`` template in ``directory``; returns how many loaded."""
        if not directory.is_dir():
            logger.warning("Template directory %s does not exist", directory)
            return 0
        loaded = 0
        for path in sorted(directory.glob("*.json")):
            try:
                template = WorkflowTemplate.from_file(path)
            except (json.JSONDecodeError, KeyError, ValueError) as e:
                logger.error("Skipping template %s: %s", path.name, e)
                continue
            self.register(template)
            loaded += 1
        logger.info("Loaded %d workflow templates from %s", loaded, directory)
        return loaded

    def load_workflow(
        self,
        name: str,
        options: CompileOptions | None = None,
        warnings: list[str] | None = None,
    ) -> ExecutionGraph:
        return compile_workflow(self.get(name).workflow, options, warnings)

    def clear(self) -> None:
        self._templates.clear()


def apply_parameters(
    workflow: ExecutionGraph,
    parameters: Mapping[str, Any],
    registry: Mapping[str, ParameterSpec],
    warnings: list[str] | None = None,
) -> ExecutionGraph:
    """Inject into a deep copy so ``workflow`` can be reused for later jobs."""
    return inject_parameters(copy.deepcopy(workflow), parameters, registry, warnings)


def generate_timestamp() -> int:
    return int(time.time())


def build_payload(
    template: WorkflowTemplate,
    parameters: Mapping[str, Any],
    options: CompileOptions | None = None,
    timestamp: int | None = None,
) -> SubmissionPayload:
    """Compile a template, apply parameters, and wrap it as a job submission body."""
    if timestamp is None:
        timestamp = generate_timestamp()
    warnings: list[str] = []

    params = dict(parameters)
    prefix = params.get("filename_prefix")
    params["filename_prefix"] = f"{prefix}_{timestamp}" if prefix else f"output_{timestamp}"

    workflow = compile_workflow(template.workflow, options, warnings)
    workflow = inject_parameters(workflow, params, template.parameters, warnings)

    return SubmissionPayload(
        workflow=workflow,
        timestamp=timestamp,
        payload={
            "prompt": workflow,
            "client_id": f"workflow-{template.name}-{timestamp}",
        },
        warnings=warnings,
    )
