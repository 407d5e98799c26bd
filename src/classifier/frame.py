import cv2
import numpy as np

from classifier.errors import PreprocessingError


class Frame:
    """
    One camera frame borrowed from the capture side.

    buffer is either a decoded BGR uint8 array (H, W, 3), a grayscale
    array (H, W), or encoded image bytes readable by cv2.imdecode.
    """

    def __init__(self, buffer, rotation_degrees=0, on_release=None):
        self.buffer = buffer
        self.rotation_degrees = int(rotation_degrees)
        self._on_release = on_release
        self._released = False

    @property
    def released(self):
        return self._released

    def to_bitmap(self):
        """
        Decode the buffer into a BGR uint8 image.
        Returns None when the buffer holds no usable image.
        """
        buf = self.buffer
        if buf is None:
            return None

        if isinstance(buf, (bytes, bytearray, memoryview)):
            if len(buf) == 0:
                return None
            data = np.frombuffer(buf, dtype=np.uint8)
            return cv2.imdecode(data, cv2.IMREAD_COLOR)

        if not isinstance(buf, np.ndarray):
            raise PreprocessingError(
                f"Unsupported frame buffer type: {type(buf).__name__}"
            )

        if buf.dtype != np.uint8:
            raise PreprocessingError(f"Unsupported frame dtype: {buf.dtype}")
        if buf.size == 0:
            return None
        if buf.ndim == 3 and buf.shape[2] == 1:
            buf = buf.reshape(buf.shape[:2])
        if buf.ndim == 2:
            return cv2.cvtColor(buf, cv2.COLOR_GRAY2BGR)
        if buf.ndim == 3 and buf.shape[2] == 3:
            return buf
        if buf.ndim == 3 and buf.shape[2] == 4:
            return cv2.cvtColor(buf, cv2.COLOR_BGRA2BGR)
        return None

    def release(self):
        """Hand the frame back to its owner. Only the first call has effect."""
        if self._released:
            return
        self._released = True
        self.buffer = None
        if self._on_release is not None:
            self._on_release(self)
