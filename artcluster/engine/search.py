"""
Resonance search.

Categories are ranked by activation, highest first, with ties going to the
lowest index. Candidates are then tested against vigilance in that order
until one resonates or the search budget is spent.
"""

from typing import Any, Callable, Optional, Sequence

import numpy as np

from ..core.parameters import ARTParameters
from ..core.results import MatchOutcome
from ..performance.parallel import ParallelExecutor
from ..utils.logging_setup import get_logger
from .geometry import Geometry, Stacked, slice_stacked

logger = get_logger(__name__)


def rank_categories(activations: np.ndarray) -> np.ndarray:
    """Indices ordered by descending activation, ties by ascending index."""
    return np.argsort(-activations, kind="stable")


def scan_activations(
    geometry: Geometry,
    x: Any,
    weights: Sequence[Any],
    params: ARTParameters,
    stacked: Optional[Callable[[], Stacked]] = None,
    executor: Optional[ParallelExecutor] = None,
) -> np.ndarray:
    """
    Compute the activation of every category.

    Args:
        geometry: Category geometry
        x: Prepared input
        weights: Category prototypes in index order
        params: Engine parameters
        stacked: Provider of the stacked prototype view; enables the
            vectorized path when given
        executor: Worker pool; used once the store reaches
            ``params.parallel_threshold`` categories

    Returns:
        Activation array aligned with ``weights``
    """
    count = len(weights)
    if count == 0:
        return np.empty(0)

    parallel = (
        executor is not None
        and params.parallelism_level > 1
        and count >= params.parallel_threshold
    )

    if stacked is not None:
        view = stacked()
        if not parallel:
            return np.asarray(geometry.batch_activations(x, view, params), dtype=np.float64)
        chunks = executor.map_chunks(
            lambda r: list(geometry.batch_activations(x, slice_stacked(view, r), params)),
            count,
        )
        return np.asarray(chunks, dtype=np.float64)

    if not parallel:
        return np.fromiter(
            (geometry.activation(x, w, params) for w in weights), dtype=np.float64, count=count
        )
    chunks = executor.map_chunks(
        lambda r: [geometry.activation(x, weights[i], params) for i in r],
        count,
    )
    return np.asarray(chunks, dtype=np.float64)


def resonance_search(
    geometry: Geometry,
    x: Any,
    weights: Sequence[Any],
    activations: np.ndarray,
    params: ARTParameters,
) -> MatchOutcome:
    """
    Find the best category that passes vigilance.

    Returns ``MatchOutcome.no_match`` for an empty store or when every
    candidate within ``params.max_search_attempts`` is rejected.
    """
    if len(weights) == 0:
        return MatchOutcome.no_match()

    budget = params.max_search_attempts or len(weights)
    threshold = params.vigilance - params.epsilon
    attempts = 0
    for index in rank_categories(activations)[:budget]:
        index = int(index)
        attempts += 1
        score = geometry.match_score(x, weights[index], params)
        if score >= threshold:
            return MatchOutcome(
                index=index,
                activation=float(activations[index]),
                match_score=float(score),
                attempts=attempts,
            )
    logger.debug(f"{geometry.name}: no resonance after {attempts} of {len(weights)} candidates")
    return MatchOutcome.no_match(attempts)
