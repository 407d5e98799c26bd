"""
Tests for export_onnx.py: the exported model must load as a classifier session.
"""
import pytest

torch = pytest.importorskip("torch")
pytest.importorskip("torchvision")
pytest.importorskip("onnx")

import export_onnx  # noqa: E402
from classifier.session import create_session  # noqa: E402


def test_build_model_without_weights():
    model = export_onnx.build_model("none")
    assert not model.training
    with torch.no_grad():
        out = model(torch.zeros(1, 3, 224, 224))
    assert tuple(out.shape) == (1, 1000)


def test_export_static_shape(tmp_path):
    path = str(tmp_path / "mobilenet_v2.onnx")
    export_onnx.export(export_onnx.build_model("none"), path)

    session = create_session(path)
    assert session.get_inputs()[0].shape == [1, 3, 224, 224]
    assert [o.name for o in session.get_outputs()] == ["output"]
