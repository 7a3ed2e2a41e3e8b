#!/usr/bin/env python3
"""
run_warp.py – Triangle-to-triangle image warping pipeline

Loads configuration from configs/default.yaml (or a user-specified file),
warps the image of every job defined in the config from its source points
onto its destination points, and writes the results to the results
directory.

Usage
-----
    python run_warp.py
    python run_warp.py --config configs/default.yaml
    python run_warp.py --jobs shift rotate
    python run_warp.py --no-figures --strict
"""

import argparse
import os
import sys
import time

import numpy as np
import yaml

# Ensure the project root is on the Python path when invoked directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from homowarp.transforms import MODES, make_config, transform_matrix, warp
from homowarp.utils.image_io import ensure_output_dirs, load_image, save_image
from homowarp.utils.visualization import save_warp_comparison


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────

def load_config(path: str) -> dict:
    with open(path, "r") as fh:
        return yaml.safe_load(fh) or {}


def banner(text: str) -> None:
    width = 60
    print("\n" + "─" * width)
    print(f"  {text}")
    print("─" * width)


def format_matrix(matrix: np.ndarray) -> str:
    rows = np.asarray(matrix, dtype=float).reshape(3, 3)
    return "\n".join("    [" + "  ".join(f"{v:9.4f}" for v in row) + "]"
                     for row in rows)


# ──────────────────────────────────────────────────────────────────────────────
# Per-job pipeline
# ──────────────────────────────────────────────────────────────────────────────

def run_job(job_cfg: dict, cfg: dict, results_dir: str,
            make_figures: bool, strict: bool) -> dict:
    """Execute the warp for a single job and return summary metrics."""
    name = job_cfg["name"]
    banner(f"Job: {name}")

    warp_cfg = cfg.get("warp", {})
    mode = warp_cfg.get("interpolation", "forward")
    check = strict or warp_cfg.get("check_degenerate", False)

    metrics = {
        "job": name,
        "transform": job_cfg.get("transform", "auto"),
        "size": None,
        "coverage": None,
        "status": "failed",
    }

    try:
        # ── 1. Load image ─────────────────────────────────────────────────────
        image = load_image(job_cfg["image"],
                           color_space=job_cfg.get("color_space", "srgb"))
        metrics["size"] = f"{image.width}×{image.height}"
        print(f"  Loaded image  {image.width}×{image.height}  "
              f"(color space: {image.color_space})")

        # ── 2. Build transform ───────────────────────────────────────────────
        config = make_config(image, job_cfg["source_points"],
                             job_cfg["destination_points"],
                             transform=metrics["transform"])
        metrics["transform"] = config.transform
        print(f"  Stage 1 – {config.transform} transform from "
              f"{len(config.source_points)} point pairs")
        matrix = None
        if config.transform != "piecewiseaffine":
            matrix = transform_matrix(config, check=check)
            print(format_matrix(matrix))

        # ── 3. Warp ──────────────────────────────────────────────────────────
        print(f"  Stage 2 – warping ({mode})")
        warped = warp(config, mode=mode, check=check, matrix=matrix)
    except KeyError as exc:
        print(f"  [ERROR] Missing job setting: {exc}")
        return metrics
    except (ValueError, OSError) as exc:
        print(f"  [ERROR] {exc}")
        return metrics

    alpha = warped.as_array()[:, :, 3]
    metrics["coverage"] = float(np.count_nonzero(alpha)) / max(alpha.size, 1)
    metrics["status"] = "ok"

    out_path = os.path.join(results_dir, name, "warped.png")
    save_image(warped, out_path)
    print(f"  Saved warp → {out_path}")

    # ── 4. Figures ───────────────────────────────────────────────────────────
    if make_figures:
        fig_path = save_warp_comparison(image, warped, config.source_points,
                                        config.destination_points, name,
                                        results_dir, config.transform)
        print(f"  Saved figure → {fig_path}")

    return metrics


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Warp images from source to destination control points"
    )
    p.add_argument(
        "--config", default="configs/default.yaml",
        help="Path to YAML configuration file (default: configs/default.yaml)",
    )
    p.add_argument(
        "--jobs", nargs="*", default=None,
        help="Subset of job names to process (default: all jobs in config)",
    )
    p.add_argument(
        "--no-figures", action="store_true",
        help="Skip the side-by-side comparison figures",
    )
    p.add_argument(
        "--strict", action="store_true",
        help="Reject degenerate (collinear) source triangles",
    )
    return p.parse_args(argv)


def run(argv=None) -> list:
    """Run every selected job and return the per-job metrics."""
    args = parse_args(argv)

    # Load configuration
    if not os.path.exists(args.config):
        print(f"[ERROR] Config file not found: {args.config}")
        sys.exit(1)
    cfg = load_config(args.config)

    results_dir = cfg.get("results_dir", "results")
    jobs = cfg.get("jobs", [])

    mode = cfg.get("warp", {}).get("interpolation", "forward")
    if mode not in MODES:
        print(f"[ERROR] Unknown interpolation: {mode} (choose from {list(MODES)})")
        sys.exit(1)

    # Optionally restrict to a subset of jobs
    if args.jobs:
        jobs = [j for j in jobs if j["name"] in args.jobs]
        if not jobs:
            print(f"[ERROR] No matching jobs found for: {args.jobs}")
            sys.exit(1)

    # Validate that image files exist
    for job in jobs:
        image = job.get("image")
        if image is None or not os.path.exists(image):
            print(f"[ERROR] Image not found: {image}")
            sys.exit(1)

    # Create output directories
    ensure_output_dirs([j["name"] for j in jobs], base=results_dir)

    make_figures = not args.no_figures

    banner("Triangle Warp Pipeline")
    print(f"  Config  : {args.config}")
    print(f"  Jobs    : {[j['name'] for j in jobs]}")
    print(f"  Mode    : {mode}")
    print(f"  Figures : {'enabled' if make_figures else 'disabled'}")
    print(f"  Output  : {results_dir}/")

    t0 = time.time()
    all_metrics = []

    for job in jobs:
        metrics = run_job(job, cfg, results_dir, make_figures, args.strict)
        all_metrics.append(metrics)

    # ── Summary table ──────────────────────────────────────────────────────
    banner("Results Summary")
    header = f"{'Job':<12} {'Transform':>16} {'Size':>11} {'Coverage':>9} {'Status':>7}"
    print(header)
    print("─" * len(header))
    for m in all_metrics:
        cov = f"{100*m['coverage']:.1f}%" if m["coverage"] is not None else "–"
        print(f"{m['job']:<12} {m['transform']:>16} {m['size'] or '–':>11} "
              f"{cov:>9} {m['status']:>7}")

    elapsed = time.time() - t0
    print(f"\nPipeline complete in {elapsed:.1f}s")
    print(f"Results saved to: {os.path.abspath(results_dir)}/")

    return all_metrics


def main(argv=None):
    run(argv)


if __name__ == "__main__":
    main()
