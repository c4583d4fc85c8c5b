"""
Example comparing concave hulls of a point cluster at several concavities.
"""

import numpy as np
import matplotlib.pyplot as plt
from py_hull import HullOptions, compute_hull
from py_hull.utils import configure_logging


def crescent_cluster(n_points=400, seed=3):
    """Points scattered over a crescent, a shape a convex hull fits badly."""
    rng = np.random.default_rng(seed)
    points = []
    while len(points) < n_points:
        x, y = rng.uniform(-10, 10, 2)
        inside_outer = x ** 2 + y ** 2 <= 100
        inside_bite = (x - 4) ** 2 + y ** 2 <= 49
        if inside_outer and not inside_bite:
            points.append((x, y))
    return np.array(points)


def main():
    configure_logging(level="INFO", fmt="console")

    points = crescent_cluster()
    concavities = [1.0, 2.0, 4.0, 20.0]

    fig, axes = plt.subplots(1, len(concavities), figsize=(4 * len(concavities), 4))

    for ax, concavity in zip(axes, concavities):
        hull = compute_hull(points, options=HullOptions(concavity=concavity))

        ax.scatter(points[:, 0], points[:, 1], s=4, color="gray")
        ax.plot(hull[:, 0], hull[:, 1], "-", color="tab:red", linewidth=1.5)
        ax.fill(hull[:, 0], hull[:, 1], alpha=0.15, color="tab:red")
        ax.set_title(f"concavity={concavity:g} ({len(hull) - 1} vertices)")
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

        print(f"Concavity {concavity:>5g}: {len(hull) - 1} hull vertices")

    plt.tight_layout()
    plt.savefig("concave_hull_demo.png", dpi=150, bbox_inches="tight")
    print("Saved concave_hull_demo.png")


if __name__ == "__main__":
    main()
