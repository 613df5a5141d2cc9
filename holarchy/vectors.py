# holarchy/vectors.py
"""3-component vector helpers shared by the force, memory and coupling layers."""
from typing import Iterable, Sequence, Tuple, Union
import numpy as np

VectorLike = Union[np.ndarray, Sequence[float]]


def vec3(v: VectorLike = (0.0, 0.0, 0.0)) -> np.ndarray:
    """Copy any 3-sequence into a fresh float64 array."""
    arr = np.array(v, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {arr.shape}")
    return arr


def frozen_vec3(v: VectorLike) -> np.ndarray:
    """Like vec3, but the returned array is read-only."""
    arr = vec3(v)
    arr.flags.writeable = False
    return arr


def zeros() -> np.ndarray:
    return np.zeros(3, dtype=np.float64)


def add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a + b


def sub(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a - b


def scale(v: np.ndarray, s: float) -> np.ndarray:
    return v * s


def dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b))


def length(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along v; the zero vector maps to zero."""
    n = length(v)
    if n == 0:
        return zeros()
    return v / n


def separation(a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, float]:
    """Vector from a to b and its length."""
    diff = b - a
    return diff, length(diff)


def weighted_centroid(points: Iterable[np.ndarray], weights: Iterable[float]) -> np.ndarray:
    """Weighted average of points. Caller guarantees a positive total weight."""
    pts = np.stack(list(points), axis=0)
    w = np.asarray(list(weights), dtype=np.float64)
    return (pts * w[:, None]).sum(axis=0) / w.sum()
