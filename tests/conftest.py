"""Shared test fixtures for workflow compiler tests."""
import json
import sys
from pathlib import Path

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from workflow_compiler.config import settings
from workflow_compiler.engine.graph import EditorGraph, EditorNode, InputSlot, LinkRecord


@pytest.fixture
def encode_sampler_graph():
    """TextEncode(1) -> Sampler(2) via link 10."""
    return EditorGraph(
        nodes=(
            EditorNode(id=1, type="TextEncode", widgets_values=["hello"]),
            EditorNode(id=2, type="Sampler", inputs=(InputSlot("text", 10),)),
        ),
        links=(LinkRecord(10, 1, 0, 2, 0),),
    )


@pytest.fixture
def graph_with_note():
    """Loader(1) -> Note(2) -> Decoder(3), plus Loader(1) -> Decoder(3) directly."""
    return EditorGraph(
        nodes=(
            EditorNode(id=1, type="Loader", widgets_values=["model.safetensors"]),
            EditorNode(id=2, type="Note", inputs=(InputSlot("anything", 20),),
                       widgets_values=["a comment"]),
            EditorNode(id=3, type="Decoder", inputs=(
                InputSlot("samples", 21),
                InputSlot("vae", 22),
            )),
        ),
        links=(
            LinkRecord(20, 1, 0, 2, 0),
            LinkRecord(21, 2, 0, 3, 0),
            LinkRecord(22, 1, 2, 3, 1),
        ),
    )


@pytest.fixture
def txt2img_template_data():
    path = settings.templates_dir / "txt2img-basic.json"
    return json.loads(path.read_text())


@pytest.fixture
def txt2img_editor_data(txt2img_template_data):
    return txt2img_template_data["workflow"]


@pytest.fixture
def execution_graph():
    return {
        "1": {"class_type": "TextEncode", "inputs": {}, "widgets_values": ["hello"]},
        "2": {"class_type": "Sampler", "inputs": {"text": ["1", 0]}},
    }
