"""
Vector similarity.

Dependencies: numpy
System role: Scoring for the in-process retrieval tier
"""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors.

    Args:
        a: First vector
        b: Second vector, same dimension as `a`

    Returns:
        float: Similarity in [-1, 1]; 0.0 when either vector has zero norm

    Raises:
        ValueError: When dimensions differ
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Dimension mismatch: {va.shape} vs {vb.shape}")

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    value = float(np.dot(va, vb) / (norm_a * norm_b))
    # Rounding can push parallel vectors just past 1.
    return max(-1.0, min(1.0, value))
