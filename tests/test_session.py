"""
Tests for classifier.session plus an end-to-end run on a real ONNX model.
"""
import numpy as np
import pytest

onnx = pytest.importorskip("onnx")
from onnx import TensorProto, helper, numpy_helper  # noqa: E402

from classifier.analyzer import ORTAnalyzer  # noqa: E402
from classifier.errors import ContractViolation  # noqa: E402
from classifier.session import create_session  # noqa: E402
from conftest import CountingFrame, RecordingSink  # noqa: E402


def write_model(path, bias, input_hw=(224, 224), extra_output=False):
    """
    input [1,3,H,W] -> mean over H,W -> x @ zeros(3,N) + bias -> output [1,N]
    so the logits equal bias for any image.
    """
    bias = np.asarray(bias, dtype=np.float32)
    n = bias.shape[0]
    h, w = input_hw

    nodes = [
        helper.make_node("ReduceMean", ["input"], ["pooled"], axes=[2, 3], keepdims=0),
        helper.make_node("MatMul", ["pooled", "weight"], ["proj"]),
        helper.make_node("Add", ["proj", "bias"], ["output"]),
    ]
    outputs = [helper.make_tensor_value_info("output", TensorProto.FLOAT, [1, n])]
    if extra_output:
        nodes.append(helper.make_node("Identity", ["pooled"], ["features"]))
        outputs.append(helper.make_tensor_value_info("features", TensorProto.FLOAT, [1, 3]))

    graph = helper.make_graph(
        nodes,
        "tiny_classifier",
        [helper.make_tensor_value_info("input", TensorProto.FLOAT, [1, 3, h, w])],
        outputs,
        initializer=[
            numpy_helper.from_array(np.zeros((3, n), dtype=np.float32), name="weight"),
            numpy_helper.from_array(bias, name="bias"),
        ],
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
    model.ir_version = 7
    onnx.save(model, str(path))
    return str(path)


class TestCreateSession:
    """Tests for create_session"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            create_session(str(tmp_path / "missing.onnx"))

    def test_loads_static_model(self, tmp_path, capsys):
        session = create_session(write_model(tmp_path / "m.onnx", [0.0, 1.0]))
        assert session.get_inputs()[0].name == "input"
        assert session.get_providers() == ["CPUExecutionProvider"]
        assert "Static model input detected: 224x224" in capsys.readouterr().out

    def test_rejects_wrong_input_size(self, tmp_path):
        with pytest.raises(ContractViolation):
            create_session(write_model(tmp_path / "m.onnx", [0.0, 1.0], input_hw=(128, 128)))

    def test_rejects_multiple_outputs(self, tmp_path):
        with pytest.raises(ContractViolation):
            create_session(write_model(tmp_path / "m.onnx", [0.0, 1.0], extra_output=True))


class TestEndToEnd:
    """Real session, real frame"""

    def test_top3_from_model(self, tmp_path, bgr_image):
        session = create_session(write_model(tmp_path / "m.onnx", [1.0, 2.0, 3.0, 0.0, 0.0]))
        sink = RecordingSink()
        frame = CountingFrame(bgr_image, rotation_degrees=270)

        with ORTAnalyzer(session, sink) as analyzer:
            result = analyzer.analyze(frame)

        assert sink.results == [result]
        assert result.detected_indices == [2, 1, 0]
        assert result.detected_score == pytest.approx([0.6239, 0.2295, 0.0844], abs=1e-3)
        assert result.process_time_ms >= 0
        assert frame.release_calls == 1
        assert analyzer.closed
