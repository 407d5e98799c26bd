from classifier.errors import AnalyzerClosedError
from classifier.result import assemble_result


class BaseAnalyzer:
    """
    Abstract per-frame analyzer interface.
    Subclasses bind a concrete inference backend.
    """

    def __init__(self, sink):
        self.sink = sink
        self.frames_processed = 0
        self.skipped_frames = 0
        self._closed = False

    @property
    def closed(self):
        return self._closed

    def preprocess(self, frame):
        """
        Convert a Frame into a model-ready image, or None to skip it.
        """
        raise NotImplementedError

    def infer(self, image):
        """
        Run model inference. Returns (logits, process_time_ms).
        """
        raise NotImplementedError

    def postprocess(self, logits):
        """
        Turn logits into ranked (index, score) pairs.
        """
        raise NotImplementedError

    def close(self):
        self._closed = True

    def analyze(self, frame):
        """
        Full pipeline: frame -> image -> logits -> ranked -> Result -> sink.

        Returns the delivered Result, or None if the frame was skipped.
        The frame is released before returning on every path.
        """
        try:
            if self._closed:
                raise AnalyzerClosedError("Analyzer is closed")

            image = self.preprocess(frame)
            if image is None:
                self.skipped_frames += 1
                return None

            logits, process_time_ms = self.infer(image)
            result = assemble_result(self.postprocess(logits), process_time_ms)
            self.sink.on_result(result)
            self.frames_processed += 1
            return result
        finally:
            frame.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
