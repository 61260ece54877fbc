"""
Reference linear model used as an evolvable candidate.

A LinearModel predicts ``w . x + b``. ``mutate`` draws entirely fresh random
weights, ``refine`` nudges the current ones with Gaussian noise. Models are
immutable; both operators return new instances.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Sequence, Tuple

import numpy as np

from core.exceptions import ConfigurationError
from evolution.vector import Vector

Sample = Tuple[Sequence[float], float]


@dataclass(frozen=True)
class LinearModel:
    """Single-output linear model over a fixed-length input vector."""
    weights: Vector
    bias: float = 0.0
    init_scale: float = 1.0
    refine_sigma: float = 0.1

    @classmethod
    def random(
        cls,
        n_inputs: int,
        rng: np.random.Generator,
        init_scale: float = 1.0,
        refine_sigma: float = 0.1,
    ) -> "LinearModel":
        """Create a model with weights and bias uniform in [-init_scale, init_scale]."""
        params = rng.uniform(-init_scale, init_scale, size=n_inputs + 1)
        return cls(
            weights=Vector(params[:-1]),
            bias=float(params[-1]),
            init_scale=init_scale,
            refine_sigma=refine_sigma,
        )

    @property
    def n_inputs(self) -> int:
        return len(self.weights)

    @property
    def parameters(self) -> Vector:
        """Weights followed by the bias."""
        return Vector(list(self.weights) + [self.bias])

    def predict(self, x: Sequence[float]) -> float:
        return self.weights.dot(Vector(x, length=self.n_inputs)) + self.bias

    def mutate(self, rng: np.random.Generator) -> "LinearModel":
        """Fresh random model of the same shape."""
        return LinearModel.random(self.n_inputs, rng, self.init_scale, self.refine_sigma)

    def refine(self, rng: np.random.Generator) -> "LinearModel":
        """Gaussian perturbation of every parameter by refine_sigma."""
        noise = rng.normal(0.0, self.refine_sigma, size=self.n_inputs + 1)
        return replace(
            self,
            weights=self.weights + Vector(noise[:-1]),
            bias=self.bias + float(noise[-1]),
        )


def mean_squared_error(model: LinearModel, samples: Sequence[Sample]) -> float:
    errors = [(model.predict(x) - y) ** 2 for x, y in samples]
    return float(np.mean(errors))


def make_evaluator(samples: Iterable[Sample]) -> Callable[[LinearModel], float]:
    """
    Build an evaluator scoring a model as its negative mean squared error,
    so better fits score higher.
    """
    data: List[Sample] = [(tuple(x), float(y)) for x, y in samples]
    if not data:
        raise ConfigurationError("make_evaluator() needs at least one sample")

    def evaluate(model: LinearModel) -> float:
        return -mean_squared_error(model, data)

    return evaluate


def synthetic_samples(
    true_model: LinearModel,
    n_samples: int,
    rng: np.random.Generator,
    noise: float = 0.0,
) -> List[Sample]:
    """Draw inputs uniform in [-1, 1] and label them with true_model (plus optional noise)."""
    samples: List[Sample] = []
    for _ in range(n_samples):
        x = tuple(float(v) for v in rng.uniform(-1.0, 1.0, size=true_model.n_inputs))
        y = true_model.predict(x)
        if noise:
            y += float(rng.normal(0.0, noise))
        samples.append((x, y))
    return samples
