"""
Tests for the ordered step runner.
"""

import pytest

from neon_assistant.step_runner import PipelineStep, StepRunner


def test_steps_run_in_order_and_honor_skip():
    """Test skip_if and always_run."""
    calls = []
    runner = StepRunner(
        [
            PipelineStep("first", lambda ctx: calls.append("first")),
            PipelineStep("skipped", lambda ctx: calls.append("skipped"), skip_if=lambda ctx: True),
            PipelineStep(
                "forced",
                lambda ctx: calls.append("forced"),
                skip_if=lambda ctx: True,
                always_run=True,
            ),
        ]
    )
    runner.run({})
    assert calls == ["first", "forced"]
    assert runner.step_names == ["first", "skipped", "forced"]


def test_duplicate_step_names():
    """Test name uniqueness."""
    with pytest.raises(ValueError):
        StepRunner([PipelineStep("a", lambda ctx: None), PipelineStep("a", lambda ctx: None)])
