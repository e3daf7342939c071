"""Turn editor input slots into execution-graph input values."""
import logging
from typing import AbstractSet, Any, Mapping, Sequence

from .graph import EditorNode, InputSlot, LinkRecord, is_reference

logger = logging.getLogger(__name__)

Links = Sequence[LinkRecord] | Mapping[int, LinkRecord]


def _index_links(links: Links) -> Mapping[int, LinkRecord]:
    if isinstance(links, Mapping):
        return links
    return {link.id: link for link in links}


def resolve_input(
    slot: InputSlot,
    links: Links,
    surviving_node_ids: AbstractSet[int],
    zero_index_outputs: bool = False,
) -> list[Any] | None:
    """Resolve a slot through its link, or return None when it is unresolved.

    ``zero_index_outputs`` replaces the link's output index with 0 for engines
    that reject other indices. It corrupts multi-output sources, so it is off
    unless asked for.
    """
    if slot.link is None:
        return None
    record = _index_links(links).get(slot.link)
    if record is None or record.source_node not in surviving_node_ids:
        return None
    output = 0 if zero_index_outputs else record.source_output
    return [str(record.source_node), output]


def widget_fallback(node: EditorNode, position: int) -> Any | None:
    """Positional literal from ``widgets_values``, or None if there is no usable one."""
    widgets = node.widgets_values
    if not isinstance(widgets, list) or position >= len(widgets):
        return None
    value = widgets[position]
    if value is None or is_reference(value):
        return None
    return value


def resolve_node_inputs(
    node: EditorNode,
    links: Links,
    surviving_node_ids: AbstractSet[int],
    zero_index_outputs: bool = False,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    links = _index_links(links)
    inputs: dict[str, Any] = {}
    for position, slot in enumerate(node.inputs):
        value = resolve_input(slot, links, surviving_node_ids, zero_index_outputs)
        if value is None:
            value = widget_fallback(node, position)
            if value is not None and slot.widget is not None:
                logger.debug(
                    "Node %s: converted widget %r took positional value %r",
                    node.id, slot.widget, value,
                )
        if value is None:
            # The engine supplies its own default for an omitted input.
            message = f"Node {node.id} ({node.type}): input '{slot.name}' left unresolved"
            logger.info(message)
            if warnings is not None:
                warnings.append(message)
            continue
        inputs[slot.name] = value
    return inputs
