"""Heuristic weight profiles for Quorum.

Named, versioned profiles describe how :func:`build_heuristic` combines the
evaluators in :mod:`quorum.ai.heuristics` into a single
:class:`~quorum.ai.heuristics.LinearCombinationHeuristic`. Profiles are
plain dicts so they stay JSON-serialisable for tuning tools.

Keys:

* ``WEIGHT_*``: integer weight of one evaluator. Zero drops the term.
* ``CENTROID_POWER``: exponent passed to
  :class:`~quorum.ai.heuristics.CentroidDistanceHeuristic`.
* ``NTH_GROUP``: ``n`` passed to
  :class:`~quorum.ai.heuristics.NthLargestGroupHeuristic`.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..errors import ConfigurationError
from .heuristics import (
    CentroidDistanceHeuristic,
    ConnectedComponentsHeuristic,
    Heuristic,
    LinearCombinationHeuristic,
    MaterialHeuristic,
    MobilityHeuristic,
    NthLargestGroupHeuristic,
)

HeuristicWeights = dict[str, float]


# --- v1 Balanced Base Profile ----------------------------------------------
#
# The benchmark combination: centroid compactness and material at weight 1,
# group count at weight 5. Mobility and the n-th group term are off by
# default because they enumerate moves / groups on every leaf.

BASE_V1_BALANCED_WEIGHTS: HeuristicWeights = {
    "WEIGHT_CENTROID": 1,
    "WEIGHT_MATERIAL": 1,
    "WEIGHT_COMPONENTS": 5,
    "WEIGHT_MOBILITY": 0,
    "WEIGHT_NTH_GROUP": 0,
    "CENTROID_POWER": 2.0,
    "NTH_GROUP": 1,
}


# Canonical order of the weighted terms. build_heuristic emits terms in this
# order, so profile edits never reorder evaluation.
HEURISTIC_WEIGHT_KEYS: list[str] = [
    "WEIGHT_CENTROID",
    "WEIGHT_MATERIAL",
    "WEIGHT_COMPONENTS",
    "WEIGHT_MOBILITY",
    "WEIGHT_NTH_GROUP",
]


def _with_deltas(
    base: Mapping[str, float],
    *,
    scale: Mapping[str, float] | None = None,
    offset: Mapping[str, float] | None = None,
) -> HeuristicWeights:
    """Create a new profile from *base* by applying per-key scale/offset.

    All keys in ``base`` are preserved so that profiles remain structurally
    compatible. Weighted keys are rounded back to ints.
    """

    scale = scale or {}
    offset = offset or {}
    out: HeuristicWeights = {}
    for key, value in base.items():
        s = scale.get(key, 1.0)
        o = offset.get(key, 0.0)
        adjusted = value * s + o
        out[key] = int(round(adjusted)) if key.startswith("WEIGHT_") else adjusted
    return out


# --- v1 Personas -----------------------------------------------------------

# Balanced: identical to the base profile.
QUORUM_V1_BALANCED: HeuristicWeights = dict(BASE_V1_BALANCED_WEIGHTS)

# Compact: leans on shape. Doubles the group-count term and adds the
# largest-group term so the search prefers fewer, bigger groups.
QUORUM_V1_COMPACT: HeuristicWeights = _with_deltas(
    BASE_V1_BALANCED_WEIGHTS,
    scale={"WEIGHT_COMPONENTS": 2.0},
    offset={"WEIGHT_NTH_GROUP": 3},
)

# Material: captures first, shape second.
QUORUM_V1_MATERIAL: HeuristicWeights = _with_deltas(
    BASE_V1_BALANCED_WEIGHTS,
    offset={"WEIGHT_MATERIAL": 9},
    scale={"WEIGHT_COMPONENTS": 0.4},
)

# Mobility: adds the move-count term. Slow; intended for shallow searches.
QUORUM_V1_MOBILITY: HeuristicWeights = _with_deltas(
    BASE_V1_BALANCED_WEIGHTS,
    offset={"WEIGHT_MOBILITY": 1},
)

# Material only. The search always orders children by material, so this
# profile is the cheapest one to evaluate.
QUORUM_MATERIAL_ONLY: HeuristicWeights = {
    **{key: 0 for key in HEURISTIC_WEIGHT_KEYS},
    "WEIGHT_MATERIAL": 1,
    "CENTROID_POWER": 2.0,
    "NTH_GROUP": 1,
}


HEURISTIC_WEIGHT_PROFILES: dict[str, HeuristicWeights] = {
    "quorum_v1_balanced": QUORUM_V1_BALANCED,
    "quorum_v1_compact": QUORUM_V1_COMPACT,
    "quorum_v1_material": QUORUM_V1_MATERIAL,
    "quorum_v1_mobility": QUORUM_V1_MOBILITY,
    "material_only": QUORUM_MATERIAL_ONLY,
}


def get_weights(profile_id: str) -> HeuristicWeights:
    """Return a copy of the weight profile for ``profile_id``.

    Raises:
        ConfigurationError: if the profile is unknown.
    """
    try:
        return dict(HEURISTIC_WEIGHT_PROFILES[profile_id])
    except KeyError:
        raise ConfigurationError(
            f"Unknown heuristic profile {profile_id!r}",
            key="QUORUM_HEURISTIC_PROFILE",
            context={"known": sorted(HEURISTIC_WEIGHT_PROFILES)},
        ) from None


def heuristic_from_weights(weights: Mapping[str, float]) -> LinearCombinationHeuristic:
    """Build the weighted combination described by ``weights``."""
    factories = {
        "WEIGHT_CENTROID": lambda: CentroidDistanceHeuristic(
            float(weights.get("CENTROID_POWER", 2.0))
        ),
        "WEIGHT_MATERIAL": MaterialHeuristic,
        "WEIGHT_COMPONENTS": ConnectedComponentsHeuristic,
        "WEIGHT_MOBILITY": MobilityHeuristic,
        "WEIGHT_NTH_GROUP": lambda: NthLargestGroupHeuristic(
            int(weights.get("NTH_GROUP", 1))
        ),
    }
    terms: list[tuple[int, Heuristic]] = []
    for key in HEURISTIC_WEIGHT_KEYS:
        weight = int(weights.get(key, 0))
        if weight:
            terms.append((weight, factories[key]()))
    return LinearCombinationHeuristic(terms)


def build_heuristic(profile_id: str) -> LinearCombinationHeuristic:
    """Build the heuristic for a named profile.

    Raises:
        ConfigurationError: if the profile is unknown.
    """
    return heuristic_from_weights(get_weights(profile_id))


__all__ = [
    "BASE_V1_BALANCED_WEIGHTS",
    "HEURISTIC_WEIGHT_KEYS",
    "HEURISTIC_WEIGHT_PROFILES",
    "HeuristicWeights",
    "build_heuristic",
    "get_weights",
    "heuristic_from_weights",
]
