#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from tttsolver.board import empty
from tttsolver.solver import best_moves_and_evaluation
from tttsolver.tracking import log_metrics, log_params, maybe_mlflow_run
from tttsolver.tree import build


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 5
    workers: int = 1
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def parse_args() -> Config:
    ap = argparse.ArgumentParser(description="Time full-tree build and root evaluation")
    ap.add_argument("--repeats", type=int, default=5)
    ap.add_argument("--workers", type=int, default=1)
    ap.add_argument("--tracking", choices=["none", "mlflow"], default="none")
    ap.add_argument("--log-dir", type=Path, default=Path("runs"))
    ns = ap.parse_args()
    return Config(repeats=ns.repeats, workers=ns.workers, tracking=ns.tracking, log_dir=ns.log_dir)


def main() -> int:
    cfg = parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"repeats": cfg.repeats, "workers": cfg.workers})
        build_times: List[float] = []
        eval_times: List[float] = []
        for _ in range(cfg.repeats):
            t0 = time.perf_counter()
            root = build(empty())
            t1 = time.perf_counter()
            best_moves_and_evaluation(root, workers=cfg.workers)
            t2 = time.perf_counter()
            build_times.append(t1 - t0)
            eval_times.append(t2 - t1)
        m_build, h_build = ci95(build_times)
        m_eval, h_eval = ci95(eval_times)
        log_metrics({
            "build_mean_s": m_build,
            "build_ci95_half_s": h_build,
            "evaluate_mean_s": m_eval,
            "evaluate_ci95_half_s": h_eval,
        })
        logging.info("build(empty): mean=%.4fs ± %.4fs (95%% CI, N=%d)", m_build, h_build, cfg.repeats)
        logging.info("best_moves_and_evaluation: mean=%.4fs ± %.4fs (95%% CI, workers=%d)",
                     m_eval, h_eval, cfg.workers)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
