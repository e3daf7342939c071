"""Per-class_type rules that adjust compiled inputs after link resolution.

A normalizer receives the compiled execution node and returns the input
entries to merge over ``node["inputs"]``. It must not mutate the node.
"""
from typing import Any, Callable, Mapping

from .graph import ExecutionNode, is_reference

TypeNormalizer = Callable[[ExecutionNode], dict[str, Any]]


def from_widgets(*names: str | None, overwrite: bool = False) -> TypeNormalizer:
    """Build a normalizer that copies widget positions into named inputs.

    ``names[i]`` is the input fed by ``widgets_values[i]``; ``None`` skips a
    position (e.g. a "control after generate" widget). A literal input is
    replaced by its named widget, since the positional fallback may have filled
    it from the wrong position. Linked inputs are kept unless ``overwrite`` is
    set.
    """
    def normalize(node: ExecutionNode) -> dict[str, Any]:
        widgets = node.get("widgets_values")
        if not isinstance(widgets, list):
            return {}
        inputs = node.get("inputs") or {}
        updates: dict[str, Any] = {}
        for name, value in zip(names, widgets):
            if name is None or value is None or is_reference(value):
                continue
            if overwrite or not is_reference(inputs.get(name)):
                updates[name] = value
        return updates

    return normalize


_dual_clip_widgets = from_widgets("clip_name1", "clip_name2", "type")


def normalize_dual_clip_loader(node: ExecutionNode) -> dict[str, Any]:
    updates = _dual_clip_widgets(node)
    clip_type = updates.get("type", (node.get("inputs") or {}).get("type"))
    if clip_type == "dual":
        updates["type"] = "flux"
    return updates


COMFY_NORMALIZERS: Mapping[str, TypeNormalizer] = {
    "SaveImage": from_widgets("filename_prefix", overwrite=True),
    "CLIPTextEncode": from_widgets("text"),
    "EmptyLatentImage": from_widgets("width", "height", "batch_size"),
    "KSampler": from_widgets(
        "seed", None, "steps", "cfg", "sampler_name", "scheduler", "denoise",
    ),
    "DualCLIPLoader": normalize_dual_clip_loader,
}
