"""Shared fixtures for csscalc tests."""

from __future__ import annotations

import warnings

import pytest

from csscalc.cache import CalcCache, default_cache


@pytest.fixture(autouse=True)
def _clear_default_cache():
    """Keep the process-wide cache from leaking results between tests."""
    default_cache().clear()
    yield
    default_cache().clear()


@pytest.fixture
def cache() -> CalcCache:
    return CalcCache(16)


@pytest.fixture
def quiet():
    """Silence csscalc diagnostics for tests that are not about them."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        yield
