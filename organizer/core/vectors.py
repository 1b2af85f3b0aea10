import json
import math
import numpy as np
from numbers import Real
from .errors import InvalidInputError


def coerce_embedding(value):
    """
    Converts a persisted embedding (list or JSON string) into a list of floats.

    Returns None for missing/empty embeddings so callers can skip the file.
    Raises InvalidInputError for any other shape.
    """
    if value is None:
        return None

    if isinstance(value, (str, bytes)):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except ValueError as e:
            raise InvalidInputError(f"Embedding is not valid JSON: {e}") from e

    if isinstance(value, np.ndarray):
        value = value.tolist()

    if not isinstance(value, (list, tuple)):
        raise InvalidInputError(f"Embedding must be a sequence of numbers, got {type(value).__name__}")

    if len(value) == 0:
        return None

    vector = []
    for item in value:
        # bool is a Real subclass but never a coordinate
        if isinstance(item, bool) or not isinstance(item, Real):
            raise InvalidInputError(f"Embedding contains non-numeric value: {item!r}")
        item = float(item)
        if not math.isfinite(item):
            raise InvalidInputError("Embedding contains a non-finite value")
        vector.append(item)
    return vector


def to_matrix(embeddings) -> np.ndarray:
    """Stacks embeddings into an (n, d) float matrix, enforcing equal dimensionality."""
    if embeddings is None or len(embeddings) == 0:
        raise InvalidInputError("Embedding set is empty")

    rows = []
    dimension = None
    for idx, embedding in enumerate(embeddings):
        vector = coerce_embedding(embedding)
        if vector is None:
            raise InvalidInputError(f"Embedding at index {idx} is empty")
        if dimension is None:
            dimension = len(vector)
        elif len(vector) != dimension:
            raise InvalidInputError(
                f"Embedding at index {idx} has dimension {len(vector)}, expected {dimension}"
            )
        rows.append(vector)

    return np.asarray(rows, dtype=float)
