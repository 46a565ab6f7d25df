"""Graph-based semi-supervised learning.

- one-hot label encoding and decoding
- weighted kNN regression from labelled to unlabelled vertices
- kNN classification and the labelled-neighbour graph it runs on
"""

from __future__ import annotations

from .classification import (
    classification_knn,
    classification_matrix,
    knn_classify_graph,
    matrix_to_label,
    regression_knn,
)

__all__ = [
    "classification_knn",
    "classification_matrix",
    "knn_classify_graph",
    "matrix_to_label",
    "regression_knn",
]
