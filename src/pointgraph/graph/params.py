"""Options for nearest-neighbour graph construction.

One frozen dataclass carries every option with an explicit default. It is
validated once on creation, so the search and graph builders never need to
check for missing fields.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from numbers import Integral, Real
from typing import Any, Literal, Optional

from ..errors import ConfigurationError


GraphType = Literal["knn", "radius"]
SymmetrizeType = Literal["average", "full"]

GRAPH_TYPES = ("knn", "radius")
SYMMETRIZE_TYPES = ("average", "full")


def _is_int(x: Any) -> bool:
    return isinstance(x, Integral) and not isinstance(x, bool)


def _is_real(x: Any) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool)


@dataclass(frozen=True)
class NNGraphParams:
    """Configuration for :func:`pointgraph.graph.nn_graph.nn_graph`.

    Attributes:
        type: 'knn' (k nearest neighbours) or 'radius' (epsilon ball).
        use_flann: use an approximate tree search.
        use_full: compute the dense distance matrix, then sparsify it.
        center: subtract the mean before searching.
        rescale: rescale the points into a ball whose size grows with N.
        sigma: kernel bandwidth. ``None`` derives it from the data.
        k: neighbours per point in knn mode.
        epsilon: search radius in radius mode.
        use_l1: L1 distance with a linear-exponential kernel instead of
            L2 distance with a Gaussian kernel.
        target_degree: radius mode only; if positive, the radius is estimated
            so that points have about this many neighbours.
        symmetrize_type: 'average' or 'full', used when the raw weight
            matrix is not symmetric.
        light: decorate the graph with the lightweight parameter set.
    """

    type: GraphType = "knn"
    use_flann: bool = False
    use_full: bool = False
    center: bool = False
    rescale: bool = False
    sigma: Optional[float] = None
    k: int = 10
    epsilon: float = 0.01
    use_l1: bool = False
    target_degree: int = 0
    symmetrize_type: SymmetrizeType = "average"
    light: bool = False

    def __post_init__(self) -> None:
        if self.type not in GRAPH_TYPES:
            raise ConfigurationError(
                f"Unknown graph type {self.type!r}. Expected one of {GRAPH_TYPES}."
            )
        if self.symmetrize_type not in SYMMETRIZE_TYPES:
            raise ConfigurationError(
                f"Unknown symmetrize_type {self.symmetrize_type!r}. "
                f"Expected one of {SYMMETRIZE_TYPES}."
            )
        if not _is_int(self.k) or self.k <= 0:
            raise ConfigurationError(f"k must be a positive integer, got {self.k!r}")
        if not _is_real(self.epsilon) or not self.epsilon > 0:
            raise ConfigurationError(f"epsilon must be positive, got {self.epsilon!r}")
        if not _is_int(self.target_degree) or self.target_degree < 0:
            raise ConfigurationError(
                f"target_degree must be a non-negative integer, got {self.target_degree!r}"
            )
        if self.sigma is not None and (not _is_real(self.sigma) or not self.sigma > 0):
            raise ConfigurationError(f"sigma must be positive, got {self.sigma!r}")

    def with_overrides(self, **overrides: Any) -> "NNGraphParams":
        """Return a copy with some options replaced (validated again)."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")
        return replace(self, **overrides)


def resolve_params(params: Optional[NNGraphParams] = None, **overrides: Any) -> NNGraphParams:
    """Combine an optional params object with keyword overrides."""
    base = NNGraphParams() if params is None else params
    if not isinstance(base, NNGraphParams):
        raise ConfigurationError(
            f"params must be an NNGraphParams instance, got {type(base).__name__}"
        )
    return base.with_overrides(**overrides) if overrides else base
