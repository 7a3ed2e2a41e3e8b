"""
Visualization utilities for the warp pipeline.

All functions save figures to disk rather than displaying them interactively,
making the module suitable for headless execution.
"""

import os
import numpy as np
import matplotlib
matplotlib.use("Agg")          # non-interactive backend
import matplotlib.pyplot as plt

from homowarp.utils.image_io import to_rgb


def _plot_points(ax, points: np.ndarray, style: str) -> None:
    ax.plot(points[:, 0], points[:, 1], style, markersize=8, markeredgewidth=2)
    for idx, (x, y) in enumerate(points):
        kw = dict(color="yellow", fontsize=8, weight="bold",
                  bbox=dict(boxstyle="round,pad=0.3", facecolor="black", alpha=0.5))
        ax.text(x + 4, y - 4, str(idx + 1), **kw)


def save_warp_comparison(source, warped, source_points: np.ndarray,
                         destination_points: np.ndarray, name: str,
                         out_dir: str, transform: str) -> str:
    """Save a side-by-side figure of the source and the warped image.

    Source points are drawn in red on the source image, destination points
    in green on the result.  Returns the path of the written figure.
    """
    fig, axes = plt.subplots(1, 2, figsize=(14, 7))

    axes[0].imshow(to_rgb(source))
    _plot_points(axes[0], source_points, "ro")
    axes[0].set_title(f"{name} – source ({source.width}×{source.height})")
    axes[0].axis("off")

    axes[1].imshow(to_rgb(warped))
    _plot_points(axes[1], destination_points, "go")
    axes[1].set_title(f"{name} – {transform} warp")
    axes[1].axis("off")

    plt.tight_layout()
    path = os.path.join(out_dir, name, "comparison.jpg")
    plt.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return path
