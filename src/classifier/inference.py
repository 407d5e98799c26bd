import time

import numpy as np
import onnxruntime as ort

from classifier.errors import ContractViolation

INPUT_SHAPE = (1, 3, 224, 224)


def first_input_name(session):
    inputs = session.get_inputs()
    if not inputs:
        raise ContractViolation("Session declares no inputs")
    return inputs[0].name


class TensorBinding:
    """
    Scoped OrtValue over a single preprocessed image.

    with TensorBinding(image) as binding:
        session.run_with_ort_values(None, {name: binding.value})

    The value is only valid inside the block and is dropped on exit,
    whatever the exit path.
    """

    def __init__(self, image, shape=INPUT_SHAPE):
        image = np.asarray(image)
        expected = int(np.prod(shape[1:]))
        if image.size != expected:
            raise ContractViolation(
                f"Image of shape {image.shape} cannot be bound as {tuple(shape)}"
            )
        self.shape = tuple(shape)
        self._image = image
        self._batch = None
        self.value = None
        self.released = False

    def __enter__(self):
        # OrtValue borrows this buffer, keep it alive until release
        self._batch = np.ascontiguousarray(
            self._image.reshape(self.shape), dtype=np.float32
        )
        self.value = ort.OrtValue.ortvalue_from_numpy(self._batch)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def release(self):
        self.value = None
        self._batch = None
        self._image = None
        self.released = True


def _output_to_numpy(value):
    if isinstance(value, np.ndarray):
        return value
    if hasattr(value, "is_tensor") and not value.is_tensor():
        raise ContractViolation("Model output 0 is not a tensor")
    try:
        return value.numpy()
    except (AttributeError, RuntimeError, TypeError, ValueError) as exc:
        raise ContractViolation(f"Model output 0 cannot be read as a tensor: {exc}") from exc


def validate_output(value):
    """
    Check that model output 0 is a 2-D float matrix and return row 0.
    Raises ContractViolation otherwise.
    """
    matrix = _output_to_numpy(value)
    if not np.issubdtype(matrix.dtype, np.floating):
        raise ContractViolation(f"Expected float output, got {matrix.dtype}")
    if matrix.ndim != 2:
        raise ContractViolation(
            f"Expected 2-D output [batch, classes], got shape {matrix.shape}"
        )
    if matrix.shape[0] < 1 or matrix.shape[1] < 1:
        raise ContractViolation(f"Empty output of shape {matrix.shape}")
    return np.array(matrix[0], dtype=np.float32)


def run_inference(session, input_name, binding):
    """
    One synchronous forward pass.

    Returns (logits, process_time_ms) where process_time_ms covers only
    the session call.
    """
    t0 = time.perf_counter()
    outputs = session.run_with_ort_values(None, {input_name: binding.value})
    t1 = time.perf_counter()
    process_time_ms = max(0, int((t1 - t0) * 1000.0))

    try:
        if not outputs:
            raise ContractViolation("Session returned no outputs")
        logits = validate_output(outputs[0])
    finally:
        # Drop output OrtValues before anything propagates
        if isinstance(outputs, list):
            outputs.clear()
        outputs = None

    return logits, process_time_ms
