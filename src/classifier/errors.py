class ClassifierError(Exception):
    """Base class for frame classifier errors."""


class PreprocessingError(ClassifierError, ValueError):
    """Frame buffer could not be turned into an image."""


class ContractViolation(ClassifierError, TypeError):
    """
    Model or normalizer produced data that does not match the fixed
    input/output contract (shape, rank or dtype).
    """


# Output shape/type mismatches are reported under this name as well.
TypeMismatch = ContractViolation


class AnalyzerClosedError(ClassifierError, RuntimeError):
    """analyze() was called after close()."""
