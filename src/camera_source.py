import cv2
import queue
import threading

from classifier.frame import Frame


class CameraSource:
    """
    Yields Frames from a camera index or video file.
    Every frame carries the same sensor rotation.
    """

    def __init__(self, source, rotation_degrees=0, prefetch=0):
        self.cap = cv2.VideoCapture(source)
        if not self.cap.isOpened():
            raise RuntimeError(f"Cannot open camera source {source!r}")
        # Reduce decoder queueing latency when backend supports it.
        self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        self.rotation_degrees = int(rotation_degrees)
        self.prefetch = max(0, int(prefetch))
        self.frames_read = 0
        self.frames_released = 0
        self._queue = None
        self._thread = None
        self._stopped = False
        self._sentinel = object()

        if self.prefetch > 0:
            self._queue = queue.Queue(maxsize=self.prefetch)
            self._thread = threading.Thread(target=self._reader_loop, daemon=True)
            self._thread.start()

    def _reader_loop(self):
        while not self._stopped:
            ret, image = self.cap.read()
            if not ret:
                self._queue.put(self._sentinel)
                break
            self._queue.put(image)

    def _on_release(self, frame):
        self.frames_released += 1

    def read(self):
        """Next Frame, or None at end of stream."""
        if self._queue is None:
            ret, image = self.cap.read()
            if not ret:
                return None
        else:
            image = self._queue.get()
            if image is self._sentinel:
                return None

        self.frames_read += 1
        return Frame(image, self.rotation_degrees, on_release=self._on_release)

    def release(self):
        self._stopped = True
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=0.5)
        self.cap.release()
