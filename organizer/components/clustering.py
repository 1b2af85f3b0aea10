import logging
import numpy as np
from dataclasses import dataclass
from typing import List
from ..core.errors import InvalidInputError
from ..core.vectors import to_matrix
from ..config.settings import KMEANS_MAX_ITERATIONS


@dataclass
class KMeansResult:
    assignments: List[int]
    centroids: np.ndarray
    iterations: int
    converged: bool


def _make_rng(rng):
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def assign_points(points, centroids) -> np.ndarray:
    """Index of the nearest centroid for every point; ties go to the lowest index."""
    distances = np.empty((len(points), len(centroids)))
    for j, centroid in enumerate(centroids):
        distances[:, j] = np.linalg.norm(points - centroid, axis=1)
    return np.argmin(distances, axis=1)


def kmeans(embeddings, k, rng=None, max_iterations=KMEANS_MAX_ITERATIONS) -> KMeansResult:
    """
    Lloyd's k-means over a set of equal-length embeddings.

    Centroids start as uniform samples in [-1, 1]. Each iteration assigns
    every point to its nearest centroid (Euclidean, lowest index on ties)
    and moves every non-empty cluster's centroid to the mean of its
    members. Empty clusters keep their previous centroid.

    Args:
        embeddings: sequence of vectors (lists, tuples or numpy rows)
        k: number of clusters, 1 <= k <= len(embeddings)
        rng: None, an integer seed or a numpy Generator
        max_iterations: iteration cap, at least 1

    Returns:
        KMeansResult with one cluster index per input vector.
    """
    points = to_matrix(embeddings)
    num_points, dimensions = points.shape

    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidInputError(f"k must be an integer, got {k!r}")
    if k < 1 or k > num_points:
        raise InvalidInputError(f"k must be between 1 and {num_points}, got {k}")
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
        raise InvalidInputError(f"max_iterations must be an integer, got {max_iterations!r}")
    if max_iterations < 1:
        raise InvalidInputError(f"max_iterations must be at least 1, got {max_iterations}")

    generator = _make_rng(rng)
    centroids = generator.uniform(-1.0, 1.0, size=(k, dimensions))

    assignments = np.full(num_points, -1, dtype=int)
    iterations = 0
    converged = False

    while iterations < max_iterations:
        iterations += 1

        new_assignments = assign_points(points, centroids)

        if np.array_equal(new_assignments, assignments):
            converged = True
            break
        assignments = new_assignments

        # Update centroids
        for j in range(k):
            members = points[assignments == j]
            if len(members) > 0:
                centroids[j] = members.mean(axis=0)

    if converged:
        logging.info(f"🔄 K-means converged after {iterations} iterations")
    else:
        logging.warning(f"⚠️ K-means stopped at the iteration cap ({iterations}) without converging")

    return KMeansResult(
        assignments=[int(a) for a in assignments],
        centroids=centroids,
        iterations=iterations,
        converged=converged,
    )


def cluster(embeddings, k, rng=None) -> List[int]:
    """Returns one cluster index per embedding."""
    return kmeans(embeddings, k, rng=rng).assignments
