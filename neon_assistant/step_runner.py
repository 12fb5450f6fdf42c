from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger("neon.steps")

ContextT = TypeVar("ContextT")


@dataclass
class PipelineStep(Generic[ContextT]):
    """Step descriptor for the chat pipeline runner."""
    name: str
    fn: Callable[[ContextT], None]
    skip_if: Optional[Callable[[ContextT], bool]] = None
    always_run: bool = False


class StepRunner(Generic[ContextT]):
    """Deterministic, ordered step runner for a mutable request context."""

    def __init__(self, steps: List[PipelineStep[ContextT]]) -> None:
        """Purpose: Initialize the runner with an ordered list of steps.
        Inputs/Outputs: Input is a list of PipelineStep; no return value.
        Side Effects / State: Stores the step list for later execution.
        Dependencies: None beyond PipelineStep definitions.
        Failure Modes: Raises ValueError on duplicate step names.
        If Removed: The engine has no way to sequence gate, cache and render steps.
        Testing Notes: Provide a minimal step list and ensure order is preserved.
        """
        # Step names double as log labels, so they must be unique.
        names = [step.name for step in steps]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate pipeline step names: {names}")
        self._steps = steps

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self._steps]

    def run(self, context: ContextT) -> None:
        """Purpose: Execute steps in order with optional skip/always-run rules.
        Inputs/Outputs: Input is a mutable context object; no return value.
        Side Effects / State: Invokes step functions that may mutate context.
        Dependencies: Depends on PipelineStep.fn and PipelineStep.skip_if semantics.
        Failure Modes: Exceptions in step functions propagate to the caller.
        If Removed: The chat engine cannot run, breaking request handling.
        Testing Notes: Verify skip_if and always_run logic with simple steps.
        """
        # Iterate steps and honor always_run/skip_if guards.
        for step in self._steps:
            if not step.always_run and step.skip_if and step.skip_if(context):
                logger.debug("step=%s status=skipped", step.name)
                continue
            step.fn(context)
            logger.debug("step=%s status=done", step.name)
