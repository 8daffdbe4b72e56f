from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from battlemapper.environment.generators import (
    GenerationRequest,
    GenerationResult,
    GenerationSession,
)


@pytest.fixture
def make_request() -> Callable[..., GenerationRequest]:
    """Factory for small seeded requests with overridable fields."""

    def _make(**overrides: Any) -> GenerationRequest:
        values: dict[str, Any] = {
            "width": 20,
            "height": 20,
            "road_count": 10,
            "building_count": 3,
            "seed": 7,
        }
        values.update(overrides)
        return GenerationRequest(**values)

    return _make


@pytest.fixture
def run_request() -> Callable[[GenerationRequest], GenerationResult]:
    def _run(request: GenerationRequest) -> GenerationResult:
        return GenerationSession(request).run()

    return _run
