#!/usr/bin/env python3
"""
Genetic search demo: fit a linear model to synthetic data.

Draws a hidden linear model, samples noisy data from it, then runs the
genetic search from a random starting model and prints the winner of every
generation. Defaults come from config/base.yaml; flags override them.

Usage:
    python scripts/run_search.py
    python scripts/run_search.py --generations 50 --generation-size 30 --refine-count 20
    python scripts/run_search.py --workers 4 --seed 7 --verbose

Exit Codes:
    0 = Search completed the requested generations
    1 = Search failed (configuration, generation or evaluation error)
    2 = Invalid command-line arguments
"""

from __future__ import annotations

import argparse
import logging
import sys
from itertools import islice
from pathlib import Path
from typing import List, Optional

import numpy as np

# Setup path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.settings_schema import load_validated_settings  # noqa: E402
from core.exceptions import SearchError  # noqa: E402
from core.structured_log import jlog  # noqa: E402
from evolution.genetic_search import GeneticSearch  # noqa: E402
from evolution.model import LinearModel, make_evaluator, synthetic_samples  # noqa: E402


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Genetic search demo on a linear regression task")
    parser.add_argument("--generations", type=_non_negative_int, default=20, help="Generations to run")
    parser.add_argument("--generation-size", type=int, default=None, help="Offspring per generation")
    parser.add_argument("--refine-count", type=int, default=None, help="Offspring produced by refinement")
    parser.add_argument("--workers", type=int, default=None, help="Evaluation threads")
    parser.add_argument("--seed", type=_non_negative_int, default=None, help="Random seed")
    parser.add_argument("--inputs", type=_positive_int, default=3, help="Model input dimension")
    parser.add_argument("--samples", type=int, default=100, help="Synthetic training samples")
    parser.add_argument("--noise", type=float, default=0.05, help="Label noise std-dev")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_validated_settings()
        overrides = {
            key: value
            for key, value in (
                ('generation_size', args.generation_size),
                ('refine_count', args.refine_count),
                ('max_workers', args.workers),
                ('seed', args.seed),
            )
            if value is not None
        }

        rng = np.random.default_rng(args.seed)
        target = LinearModel.random(args.inputs, rng, init_scale=settings.model.init_scale)
        samples = synthetic_samples(target, args.samples, rng, noise=args.noise)
        evaluate = make_evaluator(samples)

        start = LinearModel.random(
            args.inputs,
            rng,
            init_scale=settings.model.init_scale,
            refine_sigma=settings.model.refine_sigma,
        )
        search = GeneticSearch.from_settings(evaluate, settings, **overrides)

        jlog(
            "search_start",
            generation_size=search.generation_size,
            refine_count=search.refine_count,
            max_workers=search.max_workers,
            seed=search.seed,
            generations=args.generations,
        )

        stream = search.run((evaluate(start), start))
        best = None
        for i, record in enumerate(islice(stream, args.generations), start=1):
            best = record
            jlog("generation", echo=False, index=i, score=record.score)
            print(f"Gen {i:4d}: score={record.score:.6f}")
        stream.close()

    except SearchError as e:
        jlog("search_failed", level="ERROR", **e.to_dict())
        return 1

    if best is not None:
        jlog(
            "search_end",
            score=best.score,
            weights=best.candidate.weights.to_list(),
            bias=best.candidate.bias,
            target_weights=target.weights.to_list(),
            target_bias=target.bias,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
