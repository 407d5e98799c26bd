import numpy as np

TOP_K = 3


def softmax(logits):
    """
    Numerically stable softmax: shift by the max before exponentiating.
    If every exponential underflows to zero the unnormalized vector is
    returned as-is.
    """
    values = np.asarray(logits, dtype=np.float32)
    if values.size == 0:
        return values.copy()

    shifted = np.exp(values - values.max())
    total = shifted.sum()
    if total != 0.0:
        shifted /= total
    return shifted


def top_k(probabilities, k=TOP_K):
    """
    Pick k indices by repeated linear scan.

    Each round starts from (max=0.0, idx=0) and only moves on a strictly
    greater, not yet selected value, so ties go to the lowest index.
    When no remaining value is above 0.0 the round falls back to index 0,
    even if 0 was already picked.

    Returns a list of (index, score) pairs in selection order.
    """
    values = np.asarray(probabilities, dtype=np.float32)
    rounds = min(k, len(values))
    indices = []
    for _ in range(rounds):
        best = 0.0
        idx = 0
        for i, value in enumerate(values):
            if value > best and i not in indices:
                best = value
                idx = i
        indices.append(idx)

    return [(i, float(values[i])) for i in indices]
