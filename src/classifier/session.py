import os

import onnxruntime as ort

from classifier.errors import ContractViolation
from classifier.inference import INPUT_SHAPE


def _check_input_shape(session):
    inputs = session.get_inputs()
    if not inputs:
        raise ContractViolation("Model declares no inputs")

    shape = inputs[0].shape
    if len(shape) != len(INPUT_SHAPE):
        raise ContractViolation(
            f"Model input '{inputs[0].name}' has rank {len(shape)}, expected {len(INPUT_SHAPE)}"
        )
    for dim, expected in zip(shape, INPUT_SHAPE):
        # Symbolic or -1 dims accept anything
        if isinstance(dim, int) and dim > 0 and dim != expected:
            raise ContractViolation(
                f"Model input '{inputs[0].name}' shape {shape} does not accept {list(INPUT_SHAPE)}"
            )

    h, w = shape[2], shape[3]
    if isinstance(h, int) and isinstance(w, int) and h > 0 and w > 0:
        print(f"Static model input detected: {w}x{h}")


def _check_outputs(session):
    outputs = session.get_outputs()
    if len(outputs) != 1:
        raise ContractViolation(
            f"Expected 1 output, found {len(outputs)}: {[x.name for x in outputs]}"
        )


def create_session(model_path):
    """
    Build a CPU InferenceSession for a [1,3,224,224] -> [1,classes] model.
    """
    if not os.path.isfile(model_path):
        raise FileNotFoundError(f"Model not found: {model_path}")

    so = ort.SessionOptions()
    so.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
    so.execution_mode = ort.ExecutionMode.ORT_SEQUENTIAL

    providers = ["CPUExecutionProvider"]
    print(f"ONNX providers: {providers}")

    session = ort.InferenceSession(str(model_path), sess_options=so, providers=providers)
    _check_input_shape(session)
    _check_outputs(session)
    return session
