
import math
from typing import Optional

from ..models.document import VectorHit


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def similarity_from_distance(distance: float) -> float:
    """Map cosine distance in [0, 2] to similarity in [0, 1]."""
    return _clamp(1.0 - distance / 2.0)


def normalize_score(distance: Optional[float], score: Optional[float]) -> float:
    """Similarity in [0, 1]: from distance, else backend score, else 0."""
    distance = _finite(distance)
    if distance is not None:
        return similarity_from_distance(distance)

    score = _finite(score)
    if score is not None:
        return _clamp(score)

    return 0.0


def hit_similarity(hit: VectorHit) -> float:
    return normalize_score(hit.distance, hit.score)
