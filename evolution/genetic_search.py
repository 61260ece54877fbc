"""
Genetic Search Loop
===================

Elitist generational search over an opaque candidate. Every generation forks
a batch of offspring from the current best candidate (the incumbent): some
by random mutation (exploration), some by refinement (exploitation). The
offspring are scored, the best of incumbent plus offspring survives, and the
survivor is emitted. The loop never terminates on its own; callers pull
records from the returned generator for as long as they like.

Scores are maximized. Ties keep the incumbent, and among offspring the one
produced first wins, regardless of which worker finished first.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from core.exceptions import ConfigurationError, EvaluationFailure, GenerationFailure

logger = logging.getLogger(__name__)


Evaluator = Callable[[Any], float]
Operator = Callable[[Any, np.random.Generator], Any]
Scored = Tuple[float, Any]

# Emitted with every record. Neither value is derived from the run; they are
# kept so consumers that expect the fields keep working.
PLACEHOLDER_GENERATION = 1
PLACEHOLDER_STEP_SIZE = 0.0


class Evolvable(Protocol):
    """Capability a candidate offers when no explicit operators are given."""

    def mutate(self, rng: np.random.Generator) -> "Evolvable": ...

    def refine(self, rng: np.random.Generator) -> "Evolvable": ...


class OffspringOrigin(Enum):
    """Which operator produced an offspring."""
    MUTATED = "mutated"
    REFINED = "refined"


@dataclass(frozen=True)
class GenerationRecord:
    """
    The winner of one generation.

    ``generation`` and ``step_size`` are fixed placeholders
    (PLACEHOLDER_GENERATION, PLACEHOLDER_STEP_SIZE) and carry no information
    about the run.
    """
    score: float
    candidate: Any
    generation: int = PLACEHOLDER_GENERATION
    step_size: float = PLACEHOLDER_STEP_SIZE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'score': self.score,
            'candidate': self.candidate,
            'generation': self.generation,
            'step_size': self.step_size,
        }


def _mutate_with_method(candidate: Any, rng: np.random.Generator) -> Any:
    return candidate.mutate(rng)


def _refine_with_method(candidate: Any, rng: np.random.Generator) -> Any:
    return candidate.refine(rng)


def select_best(pool: Sequence[Scored]) -> Scored:
    """
    Return the pair with the highest score; the first of equal scores wins.

    NaN scores never win against an earlier entry.
    """
    if not pool:
        raise ValueError("select_best() needs a non-empty pool")
    best = pool[0]
    for entry in pool[1:]:
        if entry[0] > best[0]:
            best = entry
    return best


class GeneticSearch:
    """
    Generational search that keeps only the best candidate between generations.

    Per generation, ``generation_size - refine_count`` offspring come from the
    mutator and ``refine_count`` from the refiner, all forked from the current
    incumbent. The incumbent's score is carried over rather than recomputed,
    so the evaluator runs exactly ``generation_size`` times per generation.
    """

    def __init__(
        self,
        evaluate: Evaluator,
        generation_size: int,
        refine_count: int,
        mutator: Optional[Operator] = None,
        refiner: Optional[Operator] = None,
        max_workers: int = 1,
        seed: Optional[int] = None,
    ):
        """
        Initialize the search.

        Args:
            evaluate: Scores a candidate; higher is better. May block.
            generation_size: Offspring evaluated per generation (>= 0)
            refine_count: How many of those come from the refiner (<= generation_size)
            mutator: ``(candidate, rng) -> candidate``; defaults to ``candidate.mutate(rng)``
            refiner: ``(candidate, rng) -> candidate``; defaults to ``candidate.refine(rng)``
            max_workers: Threads used to build and score offspring (1 = sequential)
            seed: Root seed for the per-offspring generators, None for OS entropy

        Raises:
            ConfigurationError: If any parameter is out of range
        """
        if not callable(evaluate):
            raise ConfigurationError("evaluate must be callable")
        for name, value in (('generation_size', generation_size), ('refine_count', refine_count)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(
                    f"{name} must be a non-negative integer",
                    context={name: value},
                )
        if refine_count > generation_size:
            raise ConfigurationError(
                "refine_count cannot exceed generation_size",
                context={'refine_count': refine_count, 'generation_size': generation_size},
            )
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise ConfigurationError(
                "max_workers must be a positive integer",
                context={'max_workers': max_workers},
            )
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
            raise ConfigurationError(
                "seed must be None or a non-negative integer",
                context={'seed': seed},
            )
        for name, op in (('mutator', mutator), ('refiner', refiner)):
            if op is not None and not callable(op):
                raise ConfigurationError(f"{name} must be callable")

        self.evaluate = evaluate
        self.generation_size = generation_size
        self.refine_count = refine_count
        self.mutator: Operator = mutator or _mutate_with_method
        self.refiner: Operator = refiner or _refine_with_method
        self._uses_methods = {
            'mutate': mutator is None and generation_size > refine_count,
            'refine': refiner is None and refine_count > 0,
        }
        self.max_workers = max_workers
        self.seed = seed

        logger.info(
            f"GeneticSearch initialized: generation_size={generation_size}, "
            f"refine_count={refine_count}, max_workers={max_workers}"
        )

    @property
    def mutate_count(self) -> int:
        """Offspring per generation produced by the mutator."""
        return self.generation_size - self.refine_count

    @classmethod
    def from_settings(
        cls,
        evaluate: Evaluator,
        settings: Any = None,
        **overrides: Any,
    ) -> "GeneticSearch":
        """
        Build a search from validated settings (config/base.yaml by default).

        Keyword overrides take precedence over the settings file.
        """
        if settings is None:
            from config.settings_schema import load_validated_settings
            settings = load_validated_settings()

        kwargs: Dict[str, Any] = {
            'generation_size': settings.search.generation_size,
            'refine_count': settings.search.refine_count,
            'max_workers': settings.search.max_workers,
            'seed': settings.search.seed,
        }
        kwargs.update(overrides)
        return cls(evaluate, **kwargs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, initial: Scored) -> Iterator[GenerationRecord]:
        """
        Start the search from a seed ``(score, candidate)`` pair.

        The seed score must be the evaluator's own score for the candidate; it
        is not recomputed. The seed is checked here, before the first record
        is requested.

        Returns:
            An endless generator of GenerationRecord, one per generation
        """
        incumbent = self._check_initial(initial)
        return self._generations(incumbent)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_initial(self, initial: Scored) -> Scored:
        try:
            score, candidate = initial
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                "initial must be a (score, candidate) pair", cause=e
            ) from e
        if isinstance(score, bool) or not isinstance(score, Real):
            raise ConfigurationError(
                "initial score must be a real number",
                context={'score': score},
            )
        for method, needed in self._uses_methods.items():
            if needed and not callable(getattr(candidate, method, None)):
                raise ConfigurationError(
                    f"candidate has no {method}() method and no operator was given",
                    context={'candidate_type': type(candidate).__name__},
                )
        return float(score), candidate

    def _generations(self, incumbent: Scored) -> Iterator[GenerationRecord]:
        seeds = np.random.SeedSequence(self.seed)
        executor = (
            ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="genetic-search")
            if self.max_workers > 1 and self.generation_size > 0
            else None
        )
        iteration = 0
        try:
            while True:
                iteration += 1
                offspring = self._spawn_offspring(incumbent[1], seeds, executor)
                scored = self._evaluate_offspring(offspring, executor)
                winner = select_best([incumbent] + scored)

                if winner is not incumbent:
                    logger.debug(
                        f"Gen {iteration}: improved {incumbent[0]:.6g} -> {winner[0]:.6g}"
                    )
                else:
                    logger.debug(f"Gen {iteration}: incumbent kept at {winner[0]:.6g}")

                incumbent = winner
                yield GenerationRecord(score=incumbent[0], candidate=incumbent[1])
        finally:
            if executor is not None:
                executor.shutdown(wait=True, cancel_futures=True)

    def _origins(self) -> List[OffspringOrigin]:
        return (
            [OffspringOrigin.MUTATED] * self.mutate_count
            + [OffspringOrigin.REFINED] * self.refine_count
        )

    def _make_offspring(
        self,
        index: int,
        origin: OffspringOrigin,
        parent: Any,
        rng: np.random.Generator,
    ) -> Any:
        op = self.mutator if origin is OffspringOrigin.MUTATED else self.refiner
        try:
            return op(parent, rng)
        except Exception as e:
            logger.error(f"Offspring {index} ({origin.value}) could not be generated: {e}")
            raise GenerationFailure(
                "Offspring generation failed",
                context={'index': index, 'origin': origin.value},
                cause=e,
            ) from e

    def _spawn_offspring(
        self,
        parent: Any,
        seeds: np.random.SeedSequence,
        executor: Optional[ThreadPoolExecutor],
    ) -> List[Tuple[OffspringOrigin, Any]]:
        """Fork every offspring from the same parent, each with its own generator."""
        origins = self._origins()
        if not origins:
            return []
        rngs = [np.random.default_rng(child) for child in seeds.spawn(len(origins))]
        args = (range(len(origins)), origins, [parent] * len(origins), rngs)

        if executor is not None:
            children = list(executor.map(self._make_offspring, *args))
        else:
            children = list(map(self._make_offspring, *args))
        return list(zip(origins, children))

    def _evaluate_one(self, index: int, origin: OffspringOrigin, candidate: Any) -> float:
        try:
            return float(self.evaluate(candidate))
        except Exception as e:
            logger.error(f"Evaluation of offspring {index} ({origin.value}) failed: {e}")
            raise EvaluationFailure(
                "Candidate evaluation failed",
                context={'index': index, 'origin': origin.value},
                cause=e,
            ) from e

    def _evaluate_offspring(
        self,
        offspring: List[Tuple[OffspringOrigin, Any]],
        executor: Optional[ThreadPoolExecutor],
    ) -> List[Scored]:
        """Score every offspring once; results stay in offspring order."""
        if not offspring:
            return []
        indices = range(len(offspring))
        origins = [origin for origin, _ in offspring]
        candidates = [candidate for _, candidate in offspring]

        if executor is not None:
            scores = list(executor.map(self._evaluate_one, indices, origins, candidates))
        else:
            scores = list(map(self._evaluate_one, indices, origins, candidates))
        return list(zip(scores, candidates))


# Convenience functions
_search: Optional[GeneticSearch] = None


def get_search() -> Optional[GeneticSearch]:
    """Get the search created by the last genetic_train() call."""
    return _search


def genetic_train(
    evaluate: Evaluator,
    generation_size: int,
    refine_count: int,
    initial: Scored,
    **kwargs: Any,
) -> Iterator[GenerationRecord]:
    """
    Convenience function to start a genetic search.

    Args:
        evaluate: Scores a candidate; higher is better
        generation_size: Offspring evaluated per generation
        refine_count: Offspring per generation produced by the refiner
        initial: Seed ``(score, candidate)`` pair
        **kwargs: Additional GeneticSearch arguments

    Returns:
        An endless generator of GenerationRecord

    Raises:
        ConfigurationError: Immediately, if the arguments are invalid
    """
    global _search

    _search = GeneticSearch(
        evaluate,
        generation_size=generation_size,
        refine_count=refine_count,
        **kwargs,
    )
    return _search.run(initial)
