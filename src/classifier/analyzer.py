from classifier.base_analyzer import BaseAnalyzer
from classifier.inference import INPUT_SHAPE, TensorBinding, first_input_name, run_inference
from classifier.postprocess import TOP_K, softmax, top_k
from classifier.preprocessing import FramePreprocessor


class ORTAnalyzer(BaseAnalyzer):
    """
    Classifies camera frames with an externally built ONNX Runtime session
    and reports the top-k classes to a ResultSink.

    The session is borrowed for the analyzer's lifetime and closed once by
    close(). Nothing here relies on garbage collection to free it.
    """

    def __init__(self, session, sink, preprocessor=None, k=TOP_K):
        super().__init__(sink)
        self.session = session
        self.preprocessor = preprocessor or FramePreprocessor(size=INPUT_SHAPE[2])
        self.k = k
        self.input_name = first_input_name(session)

    def preprocess(self, frame):
        return self.preprocessor.preprocess(frame)

    def infer(self, image):
        with TensorBinding(image, INPUT_SHAPE) as binding:
            return run_inference(self.session, self.input_name, binding)

    def postprocess(self, logits):
        return top_k(softmax(logits), self.k)

    def close(self):
        if self._closed:
            return
        self._closed = True
        session, self.session = self.session, None
        close = getattr(session, "close", None)
        if callable(close):
            close()
