"""
Pytest configuration and shared fixtures for genetic search tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


class Token:
    """Opaque stand-in candidate; identity matters, contents do not."""

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"Token({self.name!r})"


@pytest.fixture
def token():
    """Factory for opaque candidates."""
    return Token


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Send structured logs to a temp dir and reset the cached handler."""
    from core import structured_log

    monkeypatch.setenv("GENSEARCH_LOG_DIR", str(tmp_path / "logs"))
    structured_log.close_log()
    yield tmp_path / "logs"
    structured_log.close_log()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached YAML settings between tests."""
    from config import settings_loader

    settings_loader._settings_cache = None
    yield
    settings_loader._settings_cache = None


@pytest.fixture
def regression_problem():
    """A small linear regression task with a known optimum."""
    from evolution.model import LinearModel, make_evaluator, synthetic_samples

    rng = np.random.default_rng(1234)
    target = LinearModel.random(2, rng)
    samples = synthetic_samples(target, 40, rng)
    start = LinearModel.random(2, rng, refine_sigma=0.05)
    evaluate = make_evaluator(samples)
    return {
        'target': target,
        'evaluate': evaluate,
        'start': start,
        'seed_pair': (evaluate(start), start),
    }
