"""Graph data structures for editor workflows and execution workflows.

Editor graphs are what the node editor saves: a list of nodes plus a list of
link records. Execution graphs are what the execution engine accepts: a flat
mapping from node id (as a string) to ``{"class_type", "inputs", ...}``.
Execution graphs stay plain dicts so they can be serialized as-is and
addressed with path strings.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .errors import UnsupportedFormatError

ExecutionNode = dict[str, Any]
ExecutionGraph = dict[str, ExecutionNode]


class WorkflowFormat(str, Enum):
    EDITOR = "editor"
    EXECUTION = "execution"


@dataclass(frozen=True)
class InputSlot:
    name: str
    link: int | None = None
    widget: str | None = None  # name of the widget this slot was converted from

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InputSlot":
        if not isinstance(data, Mapping) or "name" not in data:
            raise UnsupportedFormatError(f"Invalid input slot: {data!r}")
        widget = data.get("widget")
        if isinstance(widget, Mapping):
            widget = widget.get("name")
        return cls(name=data["name"], link=data.get("link"), widget=widget)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "link": self.link}
        if self.widget is not None:
            data["widget"] = {"name": self.widget}
        return data


@dataclass(frozen=True)
class LinkRecord:
    id: int
    source_node: int
    source_output: int
    target_node: int
    target_input: int
    type: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "LinkRecord":
        """Parse either ``[id, src, src_slot, dst, dst_slot, type?]`` or the object form."""
        if isinstance(raw, Mapping):
            try:
                return cls(
                    id=raw["id"],
                    source_node=raw["origin_id"],
                    source_output=raw["origin_slot"],
                    target_node=raw["target_id"],
                    target_input=raw["target_slot"],
                    type=raw.get("type"),
                )
            except KeyError as e:
                raise UnsupportedFormatError(f"Link record missing field {e}: {raw!r}") from e
        if isinstance(raw, (list, tuple)) and len(raw) >= 5:
            link_type = raw[5] if len(raw) > 5 else None
            return cls(raw[0], raw[1], raw[2], raw[3], raw[4], link_type)
        raise UnsupportedFormatError(f"Invalid link record: {raw!r}")

    def to_list(self) -> list[Any]:
        return [self.id, self.source_node, self.source_output,
                self.target_node, self.target_input, self.type]


@dataclass(frozen=True)
class EditorNode:
    id: int
    type: str
    inputs: tuple[InputSlot, ...] = ()
    widgets_values: Any = None  # usually a list; copied verbatim
    title: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorNode":
        if not isinstance(data, Mapping) or "id" not in data:
            raise UnsupportedFormatError(f"Invalid editor node: {data!r}")
        inputs = data.get("inputs") or ()
        if not isinstance(inputs, (list, tuple)):
            raise UnsupportedFormatError(f"Node {data['id']} inputs must be a list")
        return cls(
            id=data["id"],
            type=data.get("type") or "",
            inputs=tuple(InputSlot.from_dict(slot) for slot in inputs),
            widgets_values=data.get("widgets_values"),
            title=data.get("title"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "inputs": [slot.to_dict() for slot in self.inputs],
        }
        if self.widgets_values is not None:
            data["widgets_values"] = self.widgets_values
        if self.title is not None:
            data["title"] = self.title
        return data


@dataclass(frozen=True)
class EditorGraph:
    nodes: tuple[EditorNode, ...] = ()
    links: tuple[LinkRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorGraph":
        nodes = data.get("nodes")
        if not isinstance(nodes, (list, tuple)):
            raise UnsupportedFormatError("Editor workflow must contain a list of nodes")
        links = data.get("links") or ()
        return cls(
            nodes=tuple(EditorNode.from_dict(n) for n in nodes),
            links=tuple(LinkRecord.from_raw(link) for link in links),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_list() for link in self.links],
        }

    def node_ids(self) -> set[int]:
        return {node.id for node in self.nodes}

    def get_node(self, node_id: int) -> EditorNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def links_by_id(self) -> dict[int, LinkRecord]:
        return {link.id: link for link in self.links}


def is_reference(value: Any) -> bool:
    """True for a resolved ``[source_node_id, output_index]`` pair."""
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and isinstance(value[0], str)
        and isinstance(value[1], int)
        and not isinstance(value[1], bool)
    )


def detect_format(data: Any) -> WorkflowFormat:
    """Decide once whether ``data`` is an editor graph or an execution graph."""
    if not isinstance(data, Mapping):
        raise UnsupportedFormatError()
    if "nodes" in data:
        if isinstance(data["nodes"], (list, tuple)):
            return WorkflowFormat.EDITOR
        raise UnsupportedFormatError()
    return WorkflowFormat.EXECUTION
