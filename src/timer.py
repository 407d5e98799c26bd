import time
from collections import deque


class FPSTimer:
    """Frame rate over one-second windows plus rolling inference latency."""

    def __init__(self, latency_window=30):
        self.last = time.perf_counter()
        self.frames = 0
        self.fps = 0.0
        self._latencies = deque(maxlen=latency_window)

    def update(self, process_time_ms=None):
        self.frames += 1
        if process_time_ms is not None:
            self._latencies.append(process_time_ms)
        now = time.perf_counter()
        if now - self.last >= 1.0:
            self.fps = self.frames / (now - self.last)
            self.frames = 0
            self.last = now
        return self.fps

    @property
    def mean_latency_ms(self):
        if not self._latencies:
            return 0.0
        return sum(self._latencies) / len(self._latencies)
