from classifier.analyzer import ORTAnalyzer
from classifier.errors import (
    AnalyzerClosedError,
    ClassifierError,
    ContractViolation,
    PreprocessingError,
    TypeMismatch,
)
from classifier.frame import Frame
from classifier.postprocess import softmax, top_k
from classifier.preprocessing import FramePreprocessor
from classifier.result import CallbackSink, Result, ResultSink

__all__ = [
    "AnalyzerClosedError",
    "CallbackSink",
    "ClassifierError",
    "ContractViolation",
    "Frame",
    "FramePreprocessor",
    "ORTAnalyzer",
    "PreprocessingError",
    "Result",
    "ResultSink",
    "TypeMismatch",
    "softmax",
    "top_k",
]
