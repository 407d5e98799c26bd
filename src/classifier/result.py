from dataclasses import dataclass, field
from typing import Callable, List, Protocol, Sequence, Tuple


@dataclass
class Result:
    detected_indices: List[int] = field(default_factory=list)
    detected_score: List[float] = field(default_factory=list)
    process_time_ms: int = 0


class ResultSink(Protocol):
    """Receives one Result per successfully classified frame."""

    def on_result(self, result: Result) -> None:
        ...


class CallbackSink:
    """Adapts fn(indices, scores, process_time_ms) to the ResultSink interface."""

    def __init__(self, fn: Callable[[List[int], List[float], int], None]):
        self._fn = fn

    def on_result(self, result: Result) -> None:
        self._fn(result.detected_indices, result.detected_score, result.process_time_ms)


def assemble_result(ranked: Sequence[Tuple[int, float]], process_time_ms: int) -> Result:
    return Result(
        detected_indices=[int(i) for i, _ in ranked],
        detected_score=[float(s) for _, s in ranked],
        process_time_ms=max(0, int(process_time_ms)),
    )
