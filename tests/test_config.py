from __future__ import annotations

import dataclasses

import pytest

from tilecollapse.config import (
    DEFAULT_EDGE_SAMPLES,
    DEFAULT_MAX_ITERATIONS,
    GeneratorConfig,
    PropagationMode,
    RetryPolicy,
)
from tilecollapse.errors import ArgumentRangeError, WFCError


class TestGeneratorConfig:
    """Tests for session configuration defaults and validation."""

    def test_defaults(self) -> None:
        config = GeneratorConfig(output_size=(8, 8))

        assert config.pattern_size == (1, 1)
        assert not config.overlapping
        assert not config.wrapping
        assert config.max_iterations == DEFAULT_MAX_ITERATIONS
        assert config.edge_samples == DEFAULT_EDGE_SAMPLES
        assert config.seed is None
        assert config.retry_policy is RetryPolicy.IN_PLACE
        assert config.propagation is PropagationMode.LOCAL
        assert config.wrap_edges

    def test_cell_grid_size(self) -> None:
        config = GeneratorConfig(output_size=(12, 8), pattern_size=(3, 2))
        assert config.cell_grid_size == (4, 4)

    def test_is_frozen(self) -> None:
        config = GeneratorConfig(output_size=(8, 8))
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.seed = 3  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"output_size": (8, 8), "pattern_size": (0, 1)},
            {"output_size": (0, 8)},
            {"output_size": (8, -2)},
            {"output_size": (9, 8), "pattern_size": (2, 2)},
            {"output_size": (8, 8), "max_iterations": 0},
            {"output_size": (8, 8), "edge_samples": 1},
        ],
    )
    def test_invalid_values_raise(self, kwargs: dict) -> None:
        with pytest.raises(ArgumentRangeError):
            GeneratorConfig(**kwargs)

    def test_range_errors_are_value_errors(self) -> None:
        assert issubclass(ArgumentRangeError, ValueError)
        assert issubclass(ArgumentRangeError, WFCError)
