#!/usr/bin/env python
"""Build a nearest-neighbour graph from a random point cloud.

This example:
- draws N points uniformly in the unit cube (or loads them from a .npy file)
- builds a knn or radius graph with a Gaussian (or L1) kernel
- prints the bandwidth, degree statistics and a symmetry check

Run:
  python examples/01_build_graph.py --npoints 500 --type knn --k 10
  python examples/01_build_graph.py --type radius --epsilon 0.1 --full true
"""

from __future__ import annotations

import argparse
import logging

import numpy as np

from pointgraph.graph import NNGraphParams, nn_graph


def _str2bool(x: str) -> bool:
    x = x.strip().lower()
    if x in {"1", "true", "t", "yes", "y"}:
        return True
    if x in {"0", "false", "f", "no", "n"}:
        return False
    raise argparse.ArgumentTypeError(f"Expected boolean, got {x!r}")


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--points", type=str, default=None, help="Optional .npy file of shape (N, d)")
    p.add_argument("--npoints", type=int, default=500)
    p.add_argument("--dim", type=int, default=3)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--type", choices=["knn", "radius"], default="knn")
    p.add_argument("--k", type=int, default=10)
    p.add_argument("--epsilon", type=float, default=0.1)
    p.add_argument("--sigma", type=float, default=None)
    p.add_argument("--l1", type=_str2bool, default=False)
    p.add_argument("--full", type=_str2bool, default=False, help="Dense distance matrix search")
    p.add_argument("--approx", type=_str2bool, default=False, help="Approximate tree search")
    p.add_argument("--center", type=_str2bool, default=False)
    p.add_argument("--rescale", type=_str2bool, default=False)
    p.add_argument("--symmetrize", choices=["average", "full"], default="average")
    p.add_argument("--light", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.points is not None:
        X = np.load(args.points)
    else:
        X = np.random.default_rng(args.seed).uniform(size=(args.npoints, args.dim))
    print(f"points: shape={X.shape}")

    params = NNGraphParams(
        type=args.type,
        k=args.k,
        epsilon=args.epsilon,
        sigma=args.sigma,
        use_l1=args.l1,
        use_full=args.full,
        use_flann=args.approx,
        center=args.center,
        rescale=args.rescale,
        symmetrize_type=args.symmetrize,
        light=args.light,
    )
    G = nn_graph(X, params)

    print(f"G: N={G.N}, type={G.type!r}, sigma={G.sigma:.6g}")
    print(f"W: shape={G.W.shape}, nnz={G.W.nnz}, edges={G.Ne}")

    deg = np.diff(G.W.indptr)
    print(f"neighbours per vertex: min={deg.min()}, mean={deg.mean():.2f}, max={deg.max()}")
    print(f"weighted degree: min={G.d.min():.4g}, mean={G.d.mean():.4g}, max={G.d.max():.4g}")

    isolated = int((deg == 0).sum())
    if isolated:
        print(f"isolated vertices: {isolated}")

    # Some quick sanity checks.
    sym_err = (G.W - G.W.T).power(2).sum()
    print(f"symmetry check (sum squared diff): {float(sym_err):.3e}")
    print(f"weights in (0, 1]: {bool(np.all((G.W.data > 0) & (G.W.data <= 1)))}")


if __name__ == "__main__":
    main()
